# frontend/app.py

import logging

from flask import Flask, jsonify

from backend.config import load_config
from frontend.api import api_blueprint
from frontend.loop import BackgroundLoop
from leaderboard.scores import ScoreStore

logger = logging.getLogger(__name__)


def create_app(config: dict = None, task_loop: BackgroundLoop = None) -> Flask:
    config = config or load_config()

    app = Flask(__name__)
    app.config["GAME_DEFAULTS"] = config["defaults"]
    app.config["SCORE_STORE"] = ScoreStore(config["leaderboard"]["path"])
    app.config["SCORE_LIMIT"] = config["leaderboard"]["limit"]

    if task_loop is None:
        task_loop = BackgroundLoop()
        task_loop.start()
    app.config["TASK_LOOP"] = task_loop

    app.register_blueprint(api_blueprint, url_prefix="/api")

    @app.route("/")
    def index():
        return jsonify({"name": "minesweeper", "api": "/api"})

    @app.errorhandler(404)
    def not_found(_error):
        return jsonify({"error": "Not Found"}), 404

    return app


def main():
    import argparse

    parser = argparse.ArgumentParser()
    parser.add_argument("--config", type=str, default=None, help="Path to the game config yaml")
    parser.add_argument("--port", type=int, default=None, help="Port to run the server on")
    parser.add_argument("--host", type=str, default=None, help="Host IP")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    args = parser.parse_args()

    config = load_config(args.config)
    logging.basicConfig(level=config["logging"]["level"])

    server = config["server"]
    host = args.host or server["host"]
    port = args.port or server["port"]
    debug = args.debug or server["debug"]

    app = create_app(config)
    logger.info("Running on http://%s:%s/", host, port)
    # the reloader would start a second task loop in a child process
    app.run(debug=debug, host=host, port=port, use_reloader=False)


if __name__ == "__main__":
    main()
