"""Exception types for diskscope."""


class DiskscopeError(Exception):
    """Base class for all diskscope errors."""


class ScanError(DiskscopeError):
    """The scan backend could not produce a result."""


class MutationError(DiskscopeError):
    """A file system side effect (delete, open, copy) failed."""
