from __future__ import annotations

import logging
import os
import threading
from typing import Any, Optional

from flask import Flask, Response, request

from life_core.codec import decode_text
from life_core.db import MEMORY, GameStore
from life_core.engine import is_terminal
from life_core.errors import DecodeError, GameExists, LifeError
from life_core.render import RenderConfig, render_svg, render_text
from life_core.state import StoredGame, advance, new_game

LOGGER = logging.getLogger(__name__)

TEXT_TYPE = "text/plain; charset=utf-8"
SVG_TYPE = "image/svg+xml"
FORMATS = ("txt", "svg")
TRUTHY = ("1", "true", "yes", "on")
FALSY = ("0", "false", "no", "off", "")

app = Flask(__name__)

# Created on first use from DB_PATH; tests assign their own store here.
STORE: Optional[GameStore] = None
_STORE_LOCK = threading.Lock()


class BadParam(ValueError):
    pass


def _store() -> GameStore:
    global STORE
    with _STORE_LOCK:
        if STORE is None:
            db_path = os.getenv("DB_PATH")
            if not db_path:
                LOGGER.warning("DB_PATH not set, using in-memory database")
                db_path = MEMORY
            STORE = GameStore(db_path)
            LOGGER.info("database: %s", STORE.db_path)
        return STORE


def _fail(status: int, message: Any) -> Response:
    return Response(str(message), status=status, content_type=TEXT_TYPE)


# ---------- Query parameters ----------

def _char_param(name: str, default: str) -> str:
    raw = request.args.get(name)
    if raw is None:
        return default
    if len(raw) != 1:
        raise BadParam(f"{name} must be a single character")
    return raw


def _int_param(name: str, default: int, minimum: int) -> int:
    raw = request.args.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise BadParam(f"{name} must be an integer") from None
    if value < minimum:
        raise BadParam(f"{name} must be at least {minimum}")
    return value


def _bool_param(name: str, default: bool = False) -> bool:
    raw = request.args.get(name)
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered in TRUTHY:
        return True
    if lowered in FALSY:
        return False
    raise BadParam(f"{name} must be a boolean")


def _render_config() -> RenderConfig:
    defaults = RenderConfig()
    return RenderConfig(
        alive=_char_param("alive", defaults.alive),
        dead=_char_param("dead", defaults.dead),
        separator=_char_param("separator", defaults.separator),
        cell_size=_int_param("cell_size", defaults.cell_size, 1),
        stroke_width=_int_param("stroke_width", defaults.stroke_width, 0),
        stroke_color=request.args.get("stroke_color", defaults.stroke_color),
        fill_color=request.args.get("fill_color", defaults.fill_color),
    )


def _valid_name(name: str) -> bool:
    return bool(name) and all(c.isalnum() or c == "-" for c in name)


# ---------- Routes ----------

@app.after_request
def _common_headers(resp: Response) -> Response:
    resp.headers["Access-Control-Allow-Origin"] = "*"
    resp.headers["Cache-Control"] = "no-cache, no-store"
    resp.headers["Expires"] = "Thu, 01 Jan 1970 00:00:00 GMT"
    return resp


@app.get("/")
def index() -> Any:
    usage = (
        "Conway's Game of Life\n"
        "\n"
        "POST /<name>            create a game from the request body (alive, dead, separator)\n"
        "GET  /<name>[.txt|.svg] render a game (next, alive, dead, separator,\n"
        "                        cell_size, stroke_width, stroke_color, fill_color)\n"
    )
    return Response(usage, content_type=TEXT_TYPE)


@app.get("/_ping")
def ping() -> Any:
    return Response("pong", content_type=TEXT_TYPE)


@app.get("/favicon.ico")
def favicon() -> Any:
    return _fail(404, "not found")


@app.post("/<name>")
def create(name: str) -> Any:
    if not _valid_name(name):
        return _fail(400, "game name must be alphanumeric or '-'")
    try:
        alive = _char_param("alive", "#")
        dead = _char_param("dead", ".")
        separator = _char_param("separator", "\n")
        board = decode_text(request.get_data(), alive, dead, separator)
    except (BadParam, DecodeError) as e:
        return _fail(400, e)

    game = new_game(board)
    try:
        _store().create(name, game)
    except GameExists as e:
        return _fail(409, e)
    except LifeError as e:
        LOGGER.exception("failed to create game %s", name)
        return _fail(500, e)

    LOGGER.info("created game %s (%dx%d)", name, board.width, board.height)
    return Response(render_text(game.board), status=201, content_type=TEXT_TYPE)


@app.get("/<name>")
def render(name: str) -> Any:
    game_name, dot, ext = name.rpartition(".")
    if not dot:
        game_name, ext = name, "txt"
    if ext not in FORMATS:
        return _fail(400, f"unsupported format '{ext}', expected one of {', '.join(FORMATS)}")

    try:
        cfg = _render_config()
        step_requested = _bool_param("next")
    except BadParam as e:
        return _fail(400, e)

    delta = 0
    try:
        store = _store()
        if step_requested:
            with store.lock(game_name):
                game = store.load(game_name)
                if game is not None:
                    game, delta = advance(game)
                    store.save(game_name, game)
                    LOGGER.info("advanced game %s to generation %d (delta %d)", game_name, game.generation, delta)
        else:
            game = store.load(game_name)
    except LifeError as e:
        LOGGER.exception("failed to read or advance game %s", game_name)
        return _fail(500, e)

    if game is None:
        return _fail(404, f"game '{game_name}' not found")

    if ext == "svg":
        resp = Response(render_svg(game.board, game.generation, delta, cfg), content_type=SVG_TYPE)
    else:
        resp = Response(render_text(game.board, cfg.alive, cfg.dead, cfg.separator), content_type=TEXT_TYPE)
    return _life_headers(resp, game, delta, step_requested)


def _life_headers(resp: Response, game: StoredGame, delta: int, stepped: bool) -> Response:
    resp.set_etag(str(game.generation))
    resp.headers["X-Life-Generation"] = str(game.generation)
    resp.headers["X-Life-Delta"] = str(delta)
    resp.headers["X-Life-Terminal"] = "true" if stepped and is_terminal(game.generation, delta) else "false"
    return resp


# Entrypoint for "python app.py"
if __name__ == "__main__":
    logging.basicConfig(
        level=os.getenv("LIFE_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in TRUTHY
    app.run(host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "8080")), debug=debug)
