# uniform_worldgen/errors.py

"""Exceptions raised when a caller breaks the contract of the noise core."""


class UniformWorldgenError(Exception):
    """Base exception for uniform world generation errors."""


class GridIndexError(UniformWorldgenError, IndexError):
    """Raised when a flat index or grid coordinate lies outside the grid."""


class NaNSampleError(UniformWorldgenError, ValueError):
    """Raised when a sampling function returns NaN for a present value."""

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"Sampling function returned NaN at flat index {index}")


class IrwinHallDomainError(UniformWorldgenError, ValueError):
    """Raised when weights or samples are outside the CDF evaluator's domain."""


class ConfigurationError(UniformWorldgenError, ValueError):
    """Raised when world generation settings are invalid."""
