#!/usr/bin/env python3
"""
Lists every game in a store: name, generation, size and live population.
Usage: python tools/list_games.py [DB_PATH]   (defaults to $DB_PATH, then data/life.db)
"""
import os
import sys

from life_core.db import GameStore
from life_core.errors import CorruptBlob


def main() -> int:
    path = sys.argv[1] if len(sys.argv) > 1 else os.getenv("DB_PATH", os.path.join("data", "life.db"))
    if not os.path.isfile(path):
        print(f"no database at {path}", file=sys.stderr)
        return 1

    store = GameStore(path)
    names = store.names()
    print(f"File: {path} games={len(names)}")
    for name in names:
        try:
            game = store.load(name)
        except CorruptBlob as e:
            print(f"  {name}: {e}")
            continue
        if game is None:
            continue
        b = game.board
        print(f"  {name} generation={game.generation} size={b.width}x{b.height} population={b.population()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
