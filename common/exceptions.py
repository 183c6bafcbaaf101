"""Custom exception classes shared by the client and the calculator servers."""


class VectorClockError(Exception):
    """
    Base exception class for all vector-clock related errors.
    """
    pass


class ConfigurationError(VectorClockError):
    """
    Raised when a clock or a process is constructed from invalid settings
    (empty or duplicate roster entries, owner missing from the roster,
    negative initial counters, unparsable environment values).
    """
    pass


class InvalidSnapshotError(VectorClockError):
    """
    Raised when a clock snapshot received over the wire is malformed.
    """
    pass
