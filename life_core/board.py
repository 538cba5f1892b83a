from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

Coord = Tuple[int, int]  # (x, y)


@dataclass(frozen=True)
class Board:
    """A fixed-size rectangular grid of cells. Alive cells are True."""
    width: int
    height: int
    cells: Tuple[bool, ...]  # row-major, length == width * height

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f'Board dimensions must be positive, got {self.width}x{self.height}')
        if len(self.cells) != self.width * self.height:
            raise ValueError(
                f'Board of {self.width}x{self.height} needs {self.width * self.height} cells, got {len(self.cells)}'
            )

    @classmethod
    def empty(cls, width: int, height: int) -> 'Board':
        return cls(width=width, height=height, cells=(False,) * (width * height))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[bool]]) -> 'Board':
        """Builds a board from nested rows; every row must have the same length."""
        height = len(rows)
        width = len(rows[0]) if rows else 0
        flat: List[bool] = []
        for row in rows:
            if len(row) != width:
                raise ValueError('All rows must have the same length')
            flat.extend(bool(cell) for cell in row)
        return cls(width=width, height=height, cells=tuple(flat))

    def index(self, x: int, y: int) -> int:
        """Calculates the 1D index for a given column and row."""
        return y * self.width + x

    def alive(self, x: int, y: int) -> bool:
        """Cell state at (x, y). Anything outside the board is dead."""
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return False
        return self.cells[self.index(x, y)]

    def coords(self) -> Iterable[Coord]:
        """Iterates over all coordinates in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield (x, y)

    def rows(self) -> List[Tuple[bool, ...]]:
        w = self.width
        return [self.cells[y * w:(y + 1) * w] for y in range(self.height)]

    def population(self) -> int:
        return sum(1 for cell in self.cells if cell)
