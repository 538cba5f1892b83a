"""
Game of Life core Python package.

Pure data structures and transforms used by the Flask app and the CLI.
Modules:
- board.py: Board, Coord
- codec.py: text and storage encodings
- engine.py: generation step and change delta
- render.py: text and SVG renderers
- state.py: StoredGame and generation bookkeeping
- db.py: SQLite-backed GameStore
- cli.py: life-cli command line entry point
"""
