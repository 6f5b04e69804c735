"""User-facing errors raised by the agenda workflow."""


class AgendaError(Exception):
    """Base class for recoverable input errors."""


class InvalidDateError(AgendaError):
    """A date argument is not in YYYY-MM-DD form."""


class InvalidModeError(AgendaError):
    """Unknown agenda mode."""


class InvalidTimezoneError(AgendaError):
    """Unknown IANA timezone name."""


class DateRangeError(AgendaError):
    """Start date after end date."""


class InvalidDirectoryError(AgendaError):
    """Directory to scan is missing or not a directory."""


class InvalidGlobError(AgendaError):
    """File glob cannot match anything useful."""
