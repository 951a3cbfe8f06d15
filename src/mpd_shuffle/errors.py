"""
Error hierarchy for mpd-shuffle.

Everything raised on purpose by the shuffler derives from ShuffleError so the
outer reconnect loop can tell expected failures from programming errors.
"""


class ShuffleError(Exception):
    """Base class for all shuffler errors."""


class DaemonConnectionError(ShuffleError):
    """The connection to MPD failed or was closed."""


class EmptyLibraryError(ShuffleError):
    """MPD reported a library with no tracks in it."""


class FiltersExhaustedError(ShuffleError):
    """The configured filters do not match any track in the library."""


class PersistenceError(ShuffleError):
    """The play history could not be loaded from or saved to disk."""


class FilterParseError(ShuffleError, ValueError):
    """A filter expression could not be parsed."""


class InvalidFieldError(FilterParseError):
    """The field name before ':' is not one of title, artist, album or any."""


class InvalidValueError(FilterParseError):
    """The filter expression has nothing to match against."""
