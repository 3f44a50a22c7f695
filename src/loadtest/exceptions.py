"""Custom exceptions for the benchmarking system."""


class BenchmarkError(Exception):
    """Base exception for benchmark failures."""
    pass


class ConfigError(BenchmarkError):
    """Exception raised when run arguments are missing or invalid."""
    pass


class TransportError(BenchmarkError):
    """Exception raised when the connection or a prediction call fails."""
    pass


class BenchmarkAbortedError(BenchmarkError):
    """Exception raised by a virtual user stopped because another user failed."""
    pass
