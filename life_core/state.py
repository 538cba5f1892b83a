from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .board import Board
from .engine import step


@dataclass(frozen=True)
class StoredGame:
    """The persisted unit: a board and how many generations it has been stepped."""
    board: Board
    generation: int = 0

    def next_generation(self, board: Board) -> 'StoredGame':
        return StoredGame(board, self.generation + 1)


def new_game(board: Board) -> StoredGame:
    return StoredGame(board=board, generation=0)


def advance(game: StoredGame) -> Tuple[StoredGame, int]:
    """Steps the game once. Returns the next game and the delta of that step."""
    board, delta = step(game.board)
    return game.next_generation(board), delta
