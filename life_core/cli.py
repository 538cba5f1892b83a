from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .codec import decode_text
from .errors import DecodeError
from .render import RenderConfig, render_svg, render_text
from .state import advance, new_game


def _read_seed(path: str) -> bytes:
    if path == '-':
        return sys.stdin.buffer.read()
    with open(path, 'rb') as f:
        return f.read()


def build_parser() -> argparse.ArgumentParser:
    defaults = RenderConfig()
    parser = argparse.ArgumentParser(description='Run a Game of Life seed locally')
    parser.add_argument('seed', help="Seed file path, or '-' for stdin")
    parser.add_argument('--steps', type=int, default=0, help='Generations to advance')
    parser.add_argument('--format', choices=['text', 'svg'], default='text', help='Output format')
    parser.add_argument('--alive', default=defaults.alive, help='Alive glyph')
    parser.add_argument('--dead', default=defaults.dead, help='Dead glyph')
    parser.add_argument('--separator', default=defaults.separator, help='Row separator')
    parser.add_argument('--cell-size', type=int, default=defaults.cell_size, help='SVG cell size in pixels')
    parser.add_argument('--stroke-width', type=int, default=defaults.stroke_width, help='SVG stroke width')
    parser.add_argument('--stroke-color', default=defaults.stroke_color, help='SVG stroke color')
    parser.add_argument('--fill-color', default=defaults.fill_color, help='SVG fill color')
    parser.add_argument('--output', default=None, help='Write the rendering here instead of stdout')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    for name in ('alive', 'dead', 'separator'):
        if len(getattr(args, name)) != 1:
            parser.error(f'--{name} must be a single character')
    if args.steps < 0:
        parser.error('--steps must be non-negative')

    try:
        board = decode_text(_read_seed(args.seed), args.alive, args.dead, args.separator)
    except DecodeError as e:
        print(f'error: {e}', file=sys.stderr)
        return 2

    game = new_game(board)
    delta = 0
    for _ in range(args.steps):
        game, delta = advance(game)

    cfg = RenderConfig(
        alive=args.alive,
        dead=args.dead,
        separator=args.separator,
        cell_size=args.cell_size,
        stroke_width=args.stroke_width,
        stroke_color=args.stroke_color,
        fill_color=args.fill_color,
    )
    if args.format == 'svg':
        out = render_svg(game.board, game.generation, delta, cfg)
    else:
        out = render_text(game.board, cfg.alive, cfg.dead, cfg.separator)
        print(f'generation={game.generation} delta={delta}', file=sys.stderr)

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(out + '\n')
    else:
        print(out)
    return 0


if __name__ == '__main__':
    sys.exit(main())
