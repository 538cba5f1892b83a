from __future__ import annotations

import struct
from typing import List, Union

import zstandard

from .board import Board
from .errors import CorruptBlob, EmptyBoard, InvalidCell, InvalidGlyphs, InvalidSeparator, IrregularShape

DEFAULT_ALIVE = '#'
DEFAULT_DEAD = '.'
DEFAULT_SEPARATOR = '\n'

ZSTD_LEVEL = 3
_HEADER = struct.Struct('>II')  # width, height


def _check_glyphs(alive: str, dead: str, separator: str) -> None:
    if alive == dead:
        raise InvalidGlyphs(alive, dead)
    if separator in (alive, dead):
        raise InvalidSeparator(separator, 'separator must differ from the alive and dead glyphs')


def decode_text(
    raw: Union[bytes, str],
    alive: str = DEFAULT_ALIVE,
    dead: str = DEFAULT_DEAD,
    separator: str = DEFAULT_SEPARATOR,
) -> Board:
    """
    Parses a seed such as "#.#\\n.#." into a Board.
    Empty lines are skipped, so a trailing separator is accepted. Bytes that are
    not valid UTF-8 are reported as InvalidCell at their position.
    """
    _check_glyphs(alive, dead, separator)
    text = raw.decode('utf-8', 'surrogateescape') if isinstance(raw, bytes) else raw
    # Request bodies usually end with a newline; strip line breaks unless they are glyphs.
    strippable = ''.join(ch for ch in '\r\n' if ch not in (alive, dead))
    text = text.strip(strippable)
    crlf = separator == '\n' and '\r' not in (alive, dead)

    lines: List[str] = []
    for line in text.split(separator):
        if crlf:
            line = line.rstrip('\r')
        if line:
            lines.append(line)
    if not lines:
        raise EmptyBoard()

    width = len(lines[0])
    cells: List[bool] = []
    for row_idx, line in enumerate(lines):
        if len(line) != width:
            raise IrregularShape(row_idx, width, len(line))
        for col_idx, ch in enumerate(line):
            if ch == alive:
                cells.append(True)
            elif ch == dead:
                cells.append(False)
            else:
                raise InvalidCell(row_idx, col_idx, ch, alive, dead)

    return Board(width=width, height=len(lines), cells=tuple(cells))


def _packed_size(width: int, height: int) -> int:
    return (width * height + 7) // 8


def _pack_cells(board: Board) -> bytes:
    out = bytearray(_packed_size(board.width, board.height))
    for i, cell in enumerate(board.cells):
        if cell:
            out[i >> 3] |= 0x80 >> (i & 7)
    return bytes(out)


def encode_storage(board: Board) -> bytes:
    """Header (>II width, height) + MSB-first packed cells, zstd-compressed."""
    payload = _HEADER.pack(board.width, board.height) + _pack_cells(board)
    return zstandard.ZstdCompressor(level=ZSTD_LEVEL).compress(payload)


def decode_storage(blob: bytes) -> Board:
    try:
        payload = zstandard.ZstdDecompressor().decompress(blob)
    except zstandard.ZstdError as e:
        raise CorruptBlob(f'unable to decompress: {e}') from e

    if len(payload) < _HEADER.size:
        raise CorruptBlob(f'header needs {_HEADER.size} bytes, got {len(payload)}')
    width, height = _HEADER.unpack_from(payload, 0)
    if width == 0 or height == 0:
        raise CorruptBlob(f'invalid dimensions {width}x{height}')

    packed = payload[_HEADER.size:]
    expected = _packed_size(width, height)
    if len(packed) != expected:
        raise CorruptBlob(f'{width}x{height} board needs {expected} cell bytes, got {len(packed)}')

    total = width * height
    cells = tuple(bool(packed[i >> 3] & (0x80 >> (i & 7))) for i in range(total))
    # Padding bits in the last byte must be clear.
    for i in range(total, expected * 8):
        if packed[i >> 3] & (0x80 >> (i & 7)):
            raise CorruptBlob('non-zero padding bits after the last cell')

    return Board(width=width, height=height, cells=cells)
