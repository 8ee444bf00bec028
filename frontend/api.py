# frontend/api.py

import logging
import threading

from flask import Blueprint, current_app, jsonify, request

from backend.errors import GameParamsError, ScoreSubmissionError
from backend.game import GameSession
from backend.settings import (
    BoardSize,
    Difficulty,
    GameParams,
    Theme,
    Username,
    is_valid_username,
)
from backend.types import CellInteraction
from leaderboard.scores import score_rows

logger = logging.getLogger(__name__)

api_blueprint = Blueprint("api", __name__)

SETTING_NAMES = ("difficulty", "size", "username", "theme")
COOKIE_MAX_AGE = 999 * 7 * 24 * 60 * 60


class CellChangeLog:
    """Collects per-cell notifications until a client fetches them."""

    def __init__(self):
        self._changes = []
        self._lock = threading.Lock()

    def observer_for(self, row: int, col: int):
        def on_change(interaction: CellInteraction, kind: int):
            with self._lock:
                self._changes.append({
                    "row": row,
                    "col": col,
                    "interaction": interaction.value,
                    "kind": kind,
                })
        return on_change

    def drain(self) -> list:
        with self._lock:
            changes, self._changes = self._changes, []
        return changes


# Global session (one player per server process)
game = None
changes = None


def _defaults() -> dict:
    return current_app.config["GAME_DEFAULTS"]


def read_settings() -> dict:
    """
    Stored settings come from cookies. Anything missing or unreadable falls
    back to the configured defaults.
    """
    defaults = _defaults()
    cookies = request.cookies

    try:
        difficulty = Difficulty.parse(cookies.get("difficulty", defaults["difficulty"]))
    except ValueError:
        difficulty = Difficulty.parse(defaults["difficulty"])
    try:
        size = BoardSize.parse(cookies.get("size", defaults["size"]))
    except ValueError:
        size = BoardSize.parse(defaults["size"])

    theme = Theme.parse(cookies.get("theme", "")) or Theme(defaults["theme"])
    stored_name = cookies.get("username")
    if stored_name and not is_valid_username(stored_name):
        stored_name = None
    username = Username.from_stored(stored_name)

    return {"difficulty": difficulty, "size": size, "theme": theme, "username": username}


def _settings_json(settings: dict) -> dict:
    return {
        "difficulty": settings["difficulty"].value,
        "size": settings["size"].value,
        "theme": settings["theme"].value,
        "username": settings["username"].name,
        "username_stable": settings["username"].stable,
    }


def _state_response():
    state = game.get_state()
    state["changes"] = changes.drain()
    return jsonify(state)


def _coordinates():
    data = request.get_json(silent=True) or {}
    row, col = data.get("row"), data.get("col")
    if not isinstance(row, int) or not isinstance(col, int):
        return None
    return row, col


@api_blueprint.errorhandler(GameParamsError)
def handle_params_error(error):
    return jsonify({"error": f"Error reading new game settings: {error}"}), 400


@api_blueprint.route("/new_game", methods=["POST"])
def new_game():
    global game, changes
    if game is not None and not game.new_game_enabled:
        return jsonify({"error": "New game unavailable until the board has finished revealing"}), 409

    data = request.get_json(silent=True) or {}
    settings = read_settings()
    params = GameParams.parse(
        data.get("difficulty", settings["difficulty"].value),
        data.get("size", settings["size"].value),
    )
    username = data.get("username") or settings["username"].name
    if not isinstance(username, str) or not is_valid_username(username):
        return jsonify({"error": "Usernames are 3-10 letters or underscores"}), 400

    if game is not None:
        game.dispose()

    store = current_app.config["SCORE_STORE"]
    task_loop = current_app.config["TASK_LOOP"]
    game = GameSession(
        params=params,
        username=username,
        submit_score=store.submit_score,
        spawn=task_loop.spawn,
    )

    changes = CellChangeLog()
    rows, columns = game.dimensions()
    for row in range(rows):
        for col in range(columns):
            game.register_observer(row, col, changes.observer_for(row, col))

    logger.info("New %s/%s game for %s", params.difficulty, params.size, username)
    return _state_response()


@api_blueprint.route("/dig", methods=["POST"])
def dig():
    if game is None:
        return jsonify({"error": "No game in progress"}), 404
    position = _coordinates()
    if position is None:
        return jsonify({"error": "Invalid input"}), 400

    game.dig(*position)
    return _state_response()


@api_blueprint.route("/flag", methods=["POST"])
def flag():
    if game is None:
        return jsonify({"error": "No game in progress"}), 404
    position = _coordinates()
    if position is None:
        return jsonify({"error": "Invalid input"}), 400

    game.flag(*position)
    return _state_response()


@api_blueprint.route("/reset", methods=["POST"])
def reset():
    if game is None:
        return jsonify({"error": "No game in progress"}), 404
    if not game.new_game_enabled:
        return jsonify({"error": "New game unavailable until the board has finished revealing"}), 409

    game.reset()
    return _state_response()


@api_blueprint.route("/state", methods=["GET"])
def get_state():
    if game is None:
        return jsonify({"error": "No game in progress"}), 404
    return _state_response()


@api_blueprint.route("/scores", methods=["GET"])
def get_scores():
    difficulty = request.args.get("difficulty")
    size = request.args.get("size")
    if difficulty is None or size is None:
        return jsonify({"error": "Not Found"}), 404

    params = GameParams.parse(difficulty, size)
    store = current_app.config["SCORE_STORE"]
    limit = current_app.config["SCORE_LIMIT"]
    try:
        scores = store.list_scores(params.difficulty, params.size, limit=limit)
    except ScoreSubmissionError as exc:
        logger.error("Could not list scores: %s", exc)
        return jsonify({"error": "Could not read leaderboard"}), 500

    return jsonify({
        "difficulty": params.difficulty.value,
        "size": params.size.value,
        "scores": [
            {"rank": n, "username": username, "time": time}
            for n, username, time in score_rows(scores, limit)
        ],
    })


@api_blueprint.route("/settings", methods=["GET"])
def get_settings():
    return jsonify(_settings_json(read_settings()))


@api_blueprint.route("/settings", methods=["POST"])
def update_settings():
    data = request.get_json(silent=True) or {}
    settings = read_settings()

    if "difficulty" in data or "size" in data:
        params = GameParams.parse(
            data.get("difficulty", settings["difficulty"].value),
            data.get("size", settings["size"].value),
        )
        settings["difficulty"], settings["size"] = params.difficulty, params.size

    if "username" in data:
        name = str(data["username"])
        if not is_valid_username(name):
            return jsonify({"error": "Usernames are 3-10 letters or underscores"}), 400
        settings["username"] = Username(name)

    if "theme" in data:
        if data["theme"] == "toggle":
            settings["theme"] = settings["theme"].toggle()
        else:
            theme = Theme.parse(data["theme"])
            if theme is None:
                return jsonify({"error": "Unknown theme"}), 400
            settings["theme"] = theme

    response = jsonify(_settings_json(settings))
    for name in SETTING_NAMES:
        if name in data or (name == "username" and not settings["username"].stable):
            response.set_cookie(name, str(settings[name]), max_age=COOKIE_MAX_AGE)
    return response
