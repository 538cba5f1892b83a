from __future__ import annotations


class LifeError(Exception):
    """Base class for every error raised by life_core."""


class DecodeError(LifeError, ValueError):
    """Input could not be turned into a Board."""


class EmptyBoard(DecodeError):
    def __init__(self) -> None:
        super().__init__('board is empty')


class IrregularShape(DecodeError):
    def __init__(self, line: int, expected: int, actual: int) -> None:
        self.line = line
        self.expected = expected
        self.actual = actual
        super().__init__(f'line {line} has {actual} cells, expected {expected}')


class InvalidCell(DecodeError):
    def __init__(self, line: int, column: int, char: str, alive: str, dead: str) -> None:
        self.line = line
        self.column = column
        self.char = char
        self.alive = alive
        self.dead = dead
        super().__init__(
            f"invalid seed character {char!r} at line {line}, column {column}: expected {alive!r} or {dead!r}"
        )


class InvalidSeparator(DecodeError):
    def __init__(self, separator: str, reason: str) -> None:
        self.separator = separator
        self.reason = reason
        super().__init__(f'invalid seed separator {separator!r}: {reason}')


class InvalidGlyphs(DecodeError):
    def __init__(self, alive: str, dead: str) -> None:
        self.alive = alive
        self.dead = dead
        super().__init__(f'alive and dead glyphs must differ, both are {alive!r}')


class CorruptBlob(DecodeError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f'corrupt board blob: {reason}')


class StoreError(LifeError):
    """The game store failed to read or write."""


class GameExists(StoreError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"game '{name}' already exists")
