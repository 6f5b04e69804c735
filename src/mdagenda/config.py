"""Configuration management for mdagenda."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

AGENDA_HOME = Path(os.environ.get("AGENDA_HOME", Path.home() / "mdagenda"))
CONFIG_FILE = AGENDA_HOME / "config" / "agenda.conf"


@dataclass
class Config:
    """mdagenda configuration."""

    dir: str = "."
    glob: str = "*.md"
    format: str = "json"
    locale: str = "ru,en"
    timezone: str = "Europe/Moscow"
    deadline_warning_days: int = 14
    holidays_file: str = ""


def _unquote(value: str) -> str:
    """Strip quotes, or an inline ``# comment`` from unquoted values."""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from agenda.conf (KEY=value lines)."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "dir":
                config.dir = value
            case "glob":
                config.glob = value
            case "format":
                config.format = value
            case "locale":
                config.locale = value
            case "timezone":
                config.timezone = value
            case "deadline_warning_days":
                try:
                    config.deadline_warning_days = int(value)
                except ValueError:
                    logger.warning(f"Ignoring non-numeric DEADLINE_WARNING_DAYS: {value!r}")
            case "holidays_file":
                config.holidays_file = value

    return config
