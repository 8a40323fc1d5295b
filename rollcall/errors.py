"""Exceptions raised by RollCall."""


class RollCallError(Exception):
    """Base class for RollCall errors."""


class DataFetchError(RollCallError):
    """The store could not be read.  The caller decides whether to retry."""


class DataWriteError(RollCallError):
    """A change could not be written, e.g. a duplicate student key."""


class NotFoundError(RollCallError, LookupError):
    """A referenced student, group or record does not exist."""
