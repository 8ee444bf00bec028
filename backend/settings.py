# backend/settings.py

import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .errors import GameParamsError, ParseDifficultyError, ParseSizeError


class Difficulty(str, Enum):
    """Mine density of a board."""
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"

    @property
    def probability(self) -> float:
        return MINE_PROBABILITY[self]

    @classmethod
    def parse(cls, value: str) -> "Difficulty":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ParseDifficultyError(value) from None

    def __str__(self):
        return self.value


class BoardSize(str, Enum):
    """Board dimensions preset."""
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @property
    def dimensions(self) -> Tuple[int, int]:
        return BOARD_DIMENSIONS[self]

    @classmethod
    def parse(cls, value: str) -> "BoardSize":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ParseSizeError(value) from None

    def __str__(self):
        return self.value


MINE_PROBABILITY = {
    Difficulty.EASY: 0.15,
    Difficulty.NORMAL: 0.25,
    Difficulty.HARD: 0.35,
}

# (rows, columns)
BOARD_DIMENSIONS = {
    BoardSize.SMALL: (8, 12),
    BoardSize.MEDIUM: (10, 15),
    BoardSize.LARGE: (12, 18),
}


def compute_dimensions(size: BoardSize) -> Tuple[int, int]:
    return BOARD_DIMENSIONS[size]


def compute_mine_count(rows: int, columns: int, difficulty: Difficulty) -> int:
    # int() truncates, which is floor for the positive products here
    return int(rows * columns * MINE_PROBABILITY[difficulty])


@dataclass(frozen=True)
class GameParams:
    """Difficulty and size of one game; fixed for the life of a session."""
    difficulty: Difficulty = Difficulty.EASY
    size: BoardSize = BoardSize.SMALL

    @classmethod
    def parse(cls, difficulty: str, size: str) -> "GameParams":
        """
        Build params from untrusted strings (query args, cookies, JSON).
        Raises GameParamsError wrapping the underlying parse failure.
        """
        try:
            return cls(Difficulty.parse(difficulty), BoardSize.parse(size))
        except (ParseDifficultyError, ParseSizeError) as exc:
            raise GameParamsError(exc) from exc

    def dimensions(self) -> Tuple[int, int]:
        return compute_dimensions(self.size)

    def mine_count(self) -> int:
        rows, columns = self.dimensions()
        return compute_mine_count(rows, columns, self.difficulty)


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"

    def toggle(self) -> "Theme":
        return Theme.LIGHT if self is Theme.DARK else Theme.DARK

    @classmethod
    def parse(cls, value: str) -> Optional["Theme"]:
        try:
            return cls(value)
        except ValueError:
            return None

    def __str__(self):
        return self.value


USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 10

RANDOM_NAMES = [
    "Aardvark", "Badger", "Coati", "Dingo", "Echidna", "Ferret",
    "Gecko", "Hedgehog", "Ibis", "Jackal", "Kiwi", "Lemur", "Mongoose",
    "Narwhal", "Ocelot", "Pangolin", "Quokka", "Raccoon", "Stoat",
    "Tapir", "Urial", "Vole", "Wombat", "Yak", "Zebu",
]


def is_valid_username(name: str) -> bool:
    if not USERNAME_MIN_LENGTH <= len(name) <= USERNAME_MAX_LENGTH:
        return False
    return all(c.isascii() and (c.isalpha() or c == "_") for c in name)


@dataclass
class Username:
    """
    Player name. `stable` is False when the name was made up because no
    name had been stored yet.
    """
    name: str
    stable: bool = True

    @classmethod
    def random(cls, rng: "random.Random" = None) -> "Username":
        rng = rng or random
        return cls(name=rng.choice(RANDOM_NAMES), stable=True)

    @classmethod
    def from_stored(cls, value: Optional[str], rng: "random.Random" = None) -> "Username":
        if value:
            return cls(name=value, stable=True)
        rng = rng or random
        return cls(name=rng.choice(RANDOM_NAMES), stable=False)

    def __str__(self):
        return self.name
