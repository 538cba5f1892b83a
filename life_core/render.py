from __future__ import annotations

from dataclasses import dataclass
from typing import List
from xml.sax.saxutils import escape, quoteattr

from .board import Board
from .codec import DEFAULT_ALIVE, DEFAULT_DEAD, DEFAULT_SEPARATOR

CAPTION_HEIGHT = 20
SVG_NS = 'http://www.w3.org/2000/svg'


@dataclass(frozen=True)
class RenderConfig:
    """Output options for both renderers. Text uses the glyphs, SVG the rest."""
    alive: str = DEFAULT_ALIVE
    dead: str = DEFAULT_DEAD
    separator: str = DEFAULT_SEPARATOR
    cell_size: int = 20
    stroke_width: int = 2
    stroke_color: str = 'white'
    fill_color: str = 'black'


def render_text(
    board: Board,
    alive: str = DEFAULT_ALIVE,
    dead: str = DEFAULT_DEAD,
    separator: str = DEFAULT_SEPARATOR,
) -> str:
    """One line per row, rows joined by the separator, no trailing separator."""
    return separator.join(
        ''.join(alive if cell else dead for cell in row)
        for row in board.rows()
    )


def caption(generation: int, delta: int) -> str:
    return f't = {generation}, Δ = {delta}'


def render_svg(board: Board, generation: int, delta: int, cfg: RenderConfig = RenderConfig()) -> str:
    """
    Renders alive cells as rectangles in row-major order, followed by a centered
    caption with the generation and delta. Dead cells emit nothing.
    """
    size = max(0, cfg.cell_size)
    stroke_width = max(0, cfg.stroke_width)
    width = board.width * size
    height = board.height * size + CAPTION_HEIGHT
    fill = quoteattr(cfg.fill_color)
    stroke = quoteattr(cfg.stroke_color)

    lines: List[str] = [f'<svg xmlns="{SVG_NS}" width="{width}" height="{height}">']
    for (x, y) in board.coords():
        if board.cells[board.index(x, y)]:
            lines.append(
                f'<rect x="{x * size}" y="{y * size}" width="{size}" height="{size}" '
                f'fill={fill} stroke={stroke} stroke-width="{stroke_width}"/>'
            )
    lines.append(
        f'<text x="50%" y="{height - 5}" font-family="monospace" font-size="12" fill={fill} '
        f'dominant-baseline="center" text-anchor="middle">{escape(caption(generation, delta))}</text>'
    )
    lines.append('</svg>')
    return '\n'.join(lines)
