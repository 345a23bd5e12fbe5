"""Exception types raised by TomatoStats."""


class TomatoStatsError(Exception):
    """Base class for all TomatoStats errors."""


class InvalidInputError(TomatoStatsError, ValueError):
    """A caller passed a value the engine cannot aggregate (negative duration, bad hour, ...)."""


class InvalidBucketError(InvalidInputError):
    """A bucket start is not truncated to its week/month/year boundary."""


class PersistError(TomatoStatsError):
    """Writing the record log to the preference store failed."""
