from __future__ import annotations

from typing import List, Tuple

from .board import Board, Coord

# (dx, dy) of the eight surrounding cells
NEIGHBORS: Tuple[Coord, ...] = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0), (1, 0),
    (-1, 1), (0, 1), (1, 1),
)


def neighbour_count(board: Board, x: int, y: int) -> int:
    """Counts alive neighbours of (x, y). Cells past the edge count as dead."""
    return sum(1 for dx, dy in NEIGHBORS if board.alive(x + dx, y + dy))


def next_state(alive: bool, neighbours: int) -> bool:
    """Conway's rule: survive on 2 or 3, be born on exactly 3."""
    if alive:
        return neighbours in (2, 3)
    return neighbours == 3


def step(board: Board) -> Tuple[Board, int]:
    """
    Advances the board by one generation.
    Returns the new board and the number of cells that changed state.
    The input board is never modified.
    """
    cells = board.cells
    nxt: List[bool] = []
    delta = 0
    for (x, y) in board.coords():
        current = cells[board.index(x, y)]
        state = next_state(current, neighbour_count(board, x, y))
        if state != current:
            delta += 1
        nxt.append(state)
    return Board(width=board.width, height=board.height, cells=tuple(nxt)), delta


def changed_cells(before: Board, after: Board) -> List[Coord]:
    """Coordinates whose state differs between two boards of the same size, row-major."""
    if (before.width, before.height) != (after.width, after.height):
        raise ValueError(
            f'Cannot diff a {before.width}x{before.height} board against {after.width}x{after.height}'
        )
    return [
        (i % before.width, i // before.width)
        for i, (a, b) in enumerate(zip(before.cells, after.cells))
        if a != b
    ]


def count_delta(before: Board, after: Board) -> int:
    return len(changed_cells(before, after))


def is_terminal(generation: int, delta: int) -> bool:
    """A stepped board that did not change will never change again."""
    return generation != 0 and delta == 0
