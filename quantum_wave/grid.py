"""
Dense 2D grids backed by a flat, row-major numpy array.

One container serves every cell type used by the simulator; the dtype of the
backing array is the cell type:

- ``Grid.bools``     walls and sinks (bool)
- ``Grid.floats``    sink multiplier, level potential, potential cache (float64)
- ``Grid.complexes`` the wavefunction (complex128)

Access through `get`/`set`/`add` is bounds checked. The simulation loops use
`view()` instead, a (height, width) numpy view of the same memory, whose
bounds are guaranteed by the iteration ranges of the callers.
"""

from __future__ import annotations
from typing import Any, List, Optional
import numpy as np

from quantum_wave.coord import Coord


class InvalidCoordinate(IndexError):
    """Raised when a grid is mutated at a coordinate outside its bounds."""

    def __init__(self, coord, width, height):
        self.coord = coord
        self.width = width
        self.height = height
        super().__init__(
            f'invalid coordinate ({coord[0]}, {coord[1]}) for a {width}x{height} grid '
            f'(valid x in [0, {width - 1}], y in [0, {height - 1}])'
        )


class Grid:
    def __init__(self, width: int, data: np.ndarray):
        """Wrap a flat row-major array; its length must be a multiple of width."""
        data = np.asarray(data)
        if width <= 0:
            raise ValueError(f'grid width must be positive, got {width}')
        if data.ndim != 1 or data.size % width != 0:
            raise ValueError(f'data of shape {data.shape} is not a flat multiple of width {width}')
        self.width = int(width)
        self.data = data

    # ---- constructors -----------------------------------------------------

    @classmethod
    def zeros(cls, width: int, height: int, dtype) -> Grid:
        if width <= 0 or height <= 0:
            raise ValueError(f'grid size must be positive, got {width}x{height}')
        return cls(width, np.zeros(width * height, dtype=dtype))

    @classmethod
    def bools(cls, width: int, height: int) -> Grid:
        return cls.zeros(width, height, bool)

    @classmethod
    def floats(cls, width: int, height: int) -> Grid:
        return cls.zeros(width, height, np.float64)

    @classmethod
    def complexes(cls, width: int, height: int) -> Grid:
        return cls.zeros(width, height, np.complex128)

    @classmethod
    def from_array(cls, array, dtype=None) -> Grid:
        """Build a grid from a (height, width) array. The data is copied."""
        arr = np.array(array, dtype=dtype)
        if arr.ndim != 2:
            raise ValueError(f'expected a 2D (height, width) array, got shape {arr.shape}')
        height, width = arr.shape
        return cls(width, arr.reshape(width * height))

    # ---- geometry ---------------------------------------------------------

    @property
    def height(self) -> int:
        return self.data.size // self.width

    @property
    def shape(self):
        """(height, width), the numpy shape of `view()`."""
        return (self.height, self.width)

    @property
    def dtype(self):
        return self.data.dtype

    def is_valid_coord(self, coord) -> bool:
        x, y = coord
        return 0 <= x < self.width and 0 <= y < self.height

    def valid_neighbors(self, coord) -> List[Coord]:
        return [c for c in Coord(*coord).neighbors() if self.is_valid_coord(c)]

    # ---- checked access ---------------------------------------------------

    def get(self, coord) -> Optional[Any]:
        """Value at coord, or None when coord is out of range."""
        if not self.is_valid_coord(coord):
            return None
        return self.data[coord[0] + self.width * coord[1]].item()

    def set(self, coord, value) -> None:
        if not self.is_valid_coord(coord):
            raise InvalidCoordinate(coord, self.width, self.height)
        self.data[coord[0] + self.width * coord[1]] = value

    def add(self, coord, value) -> None:
        if not self.is_valid_coord(coord):
            raise InvalidCoordinate(coord, self.width, self.height)
        self.data[coord[0] + self.width * coord[1]] += value

    # ---- whole-grid helpers -----------------------------------------------

    def view(self) -> np.ndarray:
        """(height, width) view sharing memory with the grid. Unchecked."""
        return self.data.reshape(self.height, self.width)

    def max(self):
        return self.data.max().item()

    def min(self):
        return self.data.min().item()

    def fill(self, value) -> None:
        self.data.fill(value)

    def copy(self) -> Grid:
        return Grid(self.width, self.data.copy())

    def same_shape(self, other: Grid) -> bool:
        return self.width == other.width and self.data.size == other.data.size

    def __len__(self):
        return self.data.size

    def __repr__(self):
        return f'Grid(width={self.width}, height={self.height}, dtype={self.data.dtype})'

    def __str__(self):
        rows = []
        for row in self.view():
            if self.data.dtype == bool:
                rows.append(''.join('◻' if cell else '◼' for cell in row))
            elif np.iscomplexobj(row):
                rows.append(' '.join(f'{c.real:+.3f}{c.imag:+.3f}i' for c in row))
            else:
                rows.append(' '.join(f'{v:+.3f}' for v in row))
        return '\n'.join(rows)
