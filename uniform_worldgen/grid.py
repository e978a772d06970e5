# uniform_worldgen/grid.py

"""
================================================================================
GRID INDEXING
================================================================================
Bidirectional mapping between a flat array offset and a 2D chunk coordinate
for a world of fixed width and height.

Data Contract:
---------------
- Inputs: grid dimensions (width, height), flat indices or (x, y) coordinates.
- Outputs: integer coordinates / indices, or world-space float positions.
  Non-integer indices or coordinates are rejected, never truncated.
- Side Effects: None.
- Invariants: index = y * width + x. coordinate_of and index_of are exact
  inverses over the valid domain (integer arithmetic only).
================================================================================
"""

import numpy as np

from . import config as DEFAULTS
from .errors import GridIndexError


def _is_integer(value) -> bool:
    return not isinstance(value, bool) and isinstance(value, (int, np.integer))


def uniform_idx_as_vec2(index: int, width: int) -> tuple[int, int]:
    """Raw index -> (x, y) arithmetic. No bounds checks."""
    return index % width, index // width


def vec2_as_uniform_idx(x: int, y: int, width: int) -> int:
    """Raw (x, y) -> index arithmetic. No bounds checks."""
    return y * width + x


class GridIndex:
    """
    The fixed rectangular grid that every uniformized channel is laid out on.
    Instances are immutable; pass one explicitly to every operation instead of
    relying on a process-wide world size.
    """
    def __init__(self, width: int, height: int):
        for name, value in (("width", width), ("height", height)):
            if not _is_integer(value) or value <= 0:
                raise GridIndexError(f"Grid {name} must be a positive integer, got {value!r}")
        self._width = int(width)
        self._height = int(height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> int:
        """Total number of cells (width * height)."""
        return self._width * self._height

    @property
    def shape(self) -> tuple[int, int]:
        """NumPy (rows, cols) shape of the grid."""
        return self._height, self._width

    def __len__(self) -> int:
        return self.size

    def __eq__(self, other):
        if not isinstance(other, GridIndex):
            return NotImplemented
        return (self._width, self._height) == (other._width, other._height)

    def __hash__(self):
        return hash((self._width, self._height))

    def __repr__(self):
        return f"GridIndex(width={self._width}, height={self._height})"

    def coordinate_of(self, index: int) -> tuple[int, int]:
        """Returns the (x, y) chunk coordinate of a flat index."""
        if not _is_integer(index):
            raise GridIndexError(f"Flat index must be an integer, got {index!r}")
        if not 0 <= index < self.size:
            raise GridIndexError(f"Flat index {index} outside grid of {self.size} cells")
        return uniform_idx_as_vec2(int(index), self._width)

    def index_of(self, x: int, y: int) -> int:
        """Returns the flat index of an in-bounds (x, y) chunk coordinate."""
        if not (_is_integer(x) and _is_integer(y)):
            raise GridIndexError(f"Coordinate must be a pair of integers, got ({x!r}, {y!r})")
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise GridIndexError(
                f"Coordinate ({x}, {y}) outside {self._width}x{self._height} grid"
            )
        return vec2_as_uniform_idx(int(x), int(y), self._width)

    def position_of(self, index: int, cell_size: tuple = DEFAULTS.CHUNK_SIZE_BLOCKS) -> tuple[float, float]:
        """
        World-space position of a cell: its chunk coordinate scaled by the
        size of one chunk.
        """
        x, y = self.coordinate_of(index)
        return float(x * cell_size[0]), float(y * cell_size[1])
