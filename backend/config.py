# backend/config.py

import copy
import os

import yaml

from .errors import ConfigError

DEFAULT_CONFIG_PATH = os.path.join("config", "game_config.yaml")

DEFAULTS = {
    "server": {"host": "0.0.0.0", "port": 5000, "debug": False},
    "leaderboard": {"path": os.path.join("data", "scores.csv"), "limit": 10},
    "logging": {"level": "INFO"},
    "defaults": {"difficulty": "easy", "size": "small", "theme": "light"},
}


def load_config(path: str = None) -> dict:
    """
    Load the YAML config and merge it over DEFAULTS, section by section.
    A missing file is not an error: the defaults are returned.
    """
    path = path or os.getenv("MINESWEEPER_CONFIG", DEFAULT_CONFIG_PATH)
    config = copy.deepcopy(DEFAULTS)

    if not os.path.exists(path):
        return config

    with open(path, "r") as f:
        try:
            loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Could not parse {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigError(f"{path} must contain a mapping of sections")

    for section, values in loaded.items():
        if not isinstance(values, dict):
            raise ConfigError(f"Section '{section}' in {path} must be a mapping")
        config.setdefault(section, {}).update(values)

    return config
