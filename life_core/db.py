from __future__ import annotations

import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from .codec import decode_storage, encode_storage
from .errors import GameExists, StoreError
from .state import StoredGame

LOGGER = logging.getLogger(__name__)

MEMORY = ':memory:'


def _ensure_db_dir(db_path: str) -> None:
    """Ensures the directory for the SQLite DB exists before connecting."""
    directory = os.path.dirname(db_path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)


def _resolve_db_path(db_path: str) -> str:
    """Resolves a potentially unwritable DB path to a writable one, creating the directory if needed."""
    if db_path == MEMORY:
        return db_path
    try:
        _ensure_db_dir(db_path)
        return db_path
    except PermissionError:
        LOGGER.warning("cannot create directory for %s, looking for a writable location", db_path)
    candidates = [
        os.getenv('LIFE_DB_DIR'),
        os.path.join(os.getcwd(), 'data'),
        '/tmp',
    ]
    base = os.path.basename(db_path) or 'life.db'
    for d in candidates:
        if not d:
            continue
        try:
            os.makedirs(d, exist_ok=True)
        except OSError:
            continue
        return os.path.join(d, base)
    # Last resort: current working directory
    return base


def _ensure_db(conn: sqlite3.Connection) -> None:
    """Ensures the games table exists."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS games (
            name TEXT PRIMARY KEY,
            board BLOB NOT NULL,
            generation INTEGER NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )
    conn.commit()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='seconds').replace('+00:00', 'Z')


class GameStore:
    """
    Maps game names to (compressed board, generation) rows in SQLite.

    The store does not serialize load/step/save sequences by itself; callers
    advancing a game must hold lock(name) around the whole read-modify-write.
    """

    def __init__(self, db_path: str = MEMORY) -> None:
        self.db_path = _resolve_db_path(db_path)
        self._shared: Optional[sqlite3.Connection] = None
        self._shared_lock = threading.Lock()
        self._locks: Dict[str, List[Any]] = {}  # name -> [lock, holders]
        self._locks_guard = threading.Lock()
        if self.db_path == MEMORY:
            # A private in-memory database lives only as long as its connection.
            self._shared = sqlite3.connect(MEMORY, check_same_thread=False)
        try:
            with self._connect() as conn:
                _ensure_db(conn)
        except sqlite3.Error as e:
            raise StoreError(f"sql: {e}") from e

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        if self._shared is not None:
            with self._shared_lock:
                yield self._shared
            return
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StoreError(f'cannot open {self.db_path}: {e}') from e
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def lock(self, name: str) -> Iterator[None]:
        """Serializes read-modify-write sequences for one game name."""
        with self._locks_guard:
            entry = self._locks.setdefault(name, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[name]

    def load(self, name: str) -> Optional[StoredGame]:
        """Returns the stored game, or None if the name is unknown."""
        try:
            with self._connect() as conn:
                row = conn.execute("SELECT board, generation FROM games WHERE name = ?", (name,)).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"sql: {e}") from e
        if not row:
            return None
        blob, generation = row
        return StoredGame(board=decode_storage(bytes(blob)), generation=int(generation))

    def save(self, name: str, game: StoredGame) -> None:
        """Writes the game, replacing any previous value for the name."""
        blob = encode_storage(game.board)
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT OR REPLACE INTO games (name, board, generation, updated_at) VALUES (?, ?, ?, ?)",
                    (name, blob, game.generation, _now()),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"sql: {e}") from e

    def create(self, name: str, game: StoredGame) -> None:
        """Inserts a new game. Raises GameExists if the name is taken."""
        blob = encode_storage(game.board)
        try:
            with self._connect() as conn:
                try:
                    conn.execute(
                        "INSERT INTO games (name, board, generation, updated_at) VALUES (?, ?, ?, ?)",
                        (name, blob, game.generation, _now()),
                    )
                except sqlite3.IntegrityError as e:
                    conn.rollback()
                    raise GameExists(name) from e
                conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"sql: {e}") from e

    def names(self) -> List[str]:
        try:
            with self._connect() as conn:
                rows = conn.execute("SELECT name FROM games ORDER BY name").fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"sql: {e}") from e
        return [str(r[0]) for r in rows]

    def close(self) -> None:
        if self._shared is not None:
            self._shared.close()
            self._shared = None
