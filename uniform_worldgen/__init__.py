# uniform_worldgen/__init__.py

# Public API of the uniform world generation package.

from .channels import UniformWorld
from .errors import (
    ConfigurationError,
    GridIndexError,
    IrwinHallDomainError,
    NaNSampleError,
    UniformWorldgenError,
)
from .grid import GridIndex
from .irwin_hall import cdf_irwin_hall, cdf_irwin_hall_at, uniformize_weighted_sum
from .uniform import fractions, uniform_noise, uniformize_field, values

__all__ = [
    "UniformWorld",
    "GridIndex",
    "uniform_noise",
    "uniformize_field",
    "fractions",
    "values",
    "cdf_irwin_hall",
    "cdf_irwin_hall_at",
    "uniformize_weighted_sum",
    "UniformWorldgenError",
    "GridIndexError",
    "NaNSampleError",
    "IrwinHallDomainError",
    "ConfigurationError",
]
