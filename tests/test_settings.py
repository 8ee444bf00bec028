# tests/test_settings.py

import math
import random
import typing
import unittest

from backend.errors import GameParamsError, ParseDifficultyError, ParseSizeError
from backend.settings import (
    RANDOM_NAMES,
    BoardSize,
    Difficulty,
    GameParams,
    Theme,
    Username,
    compute_dimensions,
    compute_mine_count,
    is_valid_username,
)
from backend.types import GameInfo, GameStatus
from backend.utils import get_neighbors, to_time, to_title

EXPECTED_MINES = {
    (Difficulty.EASY, BoardSize.SMALL): 14,
    (Difficulty.NORMAL, BoardSize.SMALL): 24,
    (Difficulty.HARD, BoardSize.SMALL): 33,
    (Difficulty.EASY, BoardSize.MEDIUM): 22,
    (Difficulty.NORMAL, BoardSize.MEDIUM): 37,
    (Difficulty.HARD, BoardSize.MEDIUM): 52,
    (Difficulty.EASY, BoardSize.LARGE): 32,
    (Difficulty.NORMAL, BoardSize.LARGE): 54,
    (Difficulty.HARD, BoardSize.LARGE): 75,
}


class TestGameParams(unittest.TestCase):

    def test_dimensions(self):
        self.assertEqual(compute_dimensions(BoardSize.SMALL), (8, 12))
        self.assertEqual(compute_dimensions(BoardSize.MEDIUM), (10, 15))
        self.assertEqual(compute_dimensions(BoardSize.LARGE), (12, 18))

    def test_mine_counts_for_every_combination(self):
        for (difficulty, size), expected in EXPECTED_MINES.items():
            rows, columns = compute_dimensions(size)
            mines = compute_mine_count(rows, columns, difficulty)
            self.assertEqual(mines, expected)
            self.assertEqual(mines, math.floor(rows * columns * difficulty.probability))
            self.assertTrue(0 < mines < rows * columns - 9)

    def test_small_easy_scenario(self):
        params = GameParams(Difficulty.EASY, BoardSize.SMALL)
        self.assertEqual(params.mine_count(), 14)
        rows, columns = params.dimensions()
        self.assertEqual(rows * columns - params.mine_count(), 82)

    def test_parse(self):
        self.assertIs(Difficulty.parse("hard"), Difficulty.HARD)
        self.assertIs(BoardSize.parse(" Medium "), BoardSize.MEDIUM)
        self.assertEqual(
            GameParams.parse("normal", "large"),
            GameParams(Difficulty.NORMAL, BoardSize.LARGE),
        )

    def test_parse_errors(self):
        with self.assertRaises(ParseDifficultyError):
            Difficulty.parse("impossible")
        with self.assertRaises(ParseSizeError):
            BoardSize.parse("huge")
        with self.assertRaises(GameParamsError) as ctx:
            GameParams.parse("easy", "huge")
        self.assertIsInstance(ctx.exception.cause, ParseSizeError)

    def test_str(self):
        self.assertEqual(str(Difficulty.NORMAL), "normal")
        self.assertEqual(str(BoardSize.LARGE), "large")


class TestPlayerSettings(unittest.TestCase):

    def test_theme(self):
        self.assertIs(Theme.LIGHT.toggle(), Theme.DARK)
        self.assertIs(Theme.DARK.toggle(), Theme.LIGHT)
        self.assertIs(Theme.parse("dark"), Theme.DARK)
        self.assertIsNone(Theme.parse("sepia"))

    def test_username_from_stored(self):
        stored = Username.from_stored("bob_")
        self.assertEqual(stored.name, "bob_")
        self.assertTrue(stored.stable)

        made_up = Username.from_stored(None, rng=random.Random(0))
        self.assertIn(made_up.name, RANDOM_NAMES)
        self.assertFalse(made_up.stable)

        self.assertTrue(Username.random().stable)

    def test_username_rng_annotations_resolve(self):
        for method in (Username.random, Username.from_stored):
            hint = typing.get_type_hints(method)["rng"]
            self.assertIn(random.Random, (hint,) + typing.get_args(hint))
        self.assertIn(Username.random(rng=random.Random(1)).name, RANDOM_NAMES)

    def test_username_validation(self):
        self.assertTrue(is_valid_username("abc"))
        self.assertTrue(is_valid_username("mine_fan"))
        self.assertFalse(is_valid_username("ab"))
        self.assertFalse(is_valid_username("abcdefghijk"))
        self.assertFalse(is_valid_username("bob1"))
        self.assertFalse(is_valid_username("bób"))

    def test_random_names_are_valid(self):
        for name in RANDOM_NAMES:
            self.assertTrue(is_valid_username(name), name)


class TestHelpers(unittest.TestCase):

    def test_to_time(self):
        self.assertEqual(to_time(0), "00:00")
        self.assertEqual(to_time(65), "01:05")
        self.assertEqual(to_time(99 * 60 + 5), "00:05")

    def test_to_title(self):
        self.assertEqual(to_title(Difficulty.EASY), "Easy")
        self.assertEqual(to_title(""), "")

    def test_get_neighbors(self):
        self.assertEqual(sorted(get_neighbors(0, 0, 2, 2)), [(0, 1), (1, 0), (1, 1)])

    def test_info_describe(self):
        self.assertEqual(GameInfo().describe("bob"), "")
        started = GameInfo(elapsed_seconds=65, cleared=3, clear_total=82, status=GameStatus.STARTED)
        self.assertEqual(started.describe("bob"), "3 cleared out of 82\n01:05")
        self.assertTrue(GameInfo(status=GameStatus.GAME_OVER).describe("bob").startswith("Game over, bob"))
        self.assertTrue(GameInfo(status=GameStatus.VICTORY).describe("bob").startswith("You won, bob!"))


if __name__ == "__main__":
    unittest.main()
