"""RollCall: attendance statistics for student groups."""

__version__ = "0.1.0"
