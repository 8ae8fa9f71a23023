class RankingError(Exception):
    """Base class for errors raised by the ranking engine."""


class ConfigurationError(RankingError):
    """Unknown fundamento or event type, or an invalid weight profile."""


class DateParseError(RankingError, ValueError):
    """A tally date matched neither ISO-8601 nor DD/MM/YYYY."""


class RemoteUnavailable(RankingError):
    """The remote event or tally store could not be reached."""
