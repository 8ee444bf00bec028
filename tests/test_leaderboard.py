# tests/test_leaderboard.py

import os
import tempfile
import unittest

from backend.errors import ScoreSubmissionError
from backend.settings import BoardSize, Difficulty
from leaderboard.scores import MAX_SCORES, Score, ScoreStore, export_leaderboard_markdown, score_rows


class TestScoreStore(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "data", "scores.csv")
        self.store = ScoreStore(self.path)

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_file_has_no_scores(self):
        self.assertEqual(self.store.list_scores(Difficulty.EASY, BoardSize.SMALL), [])

    def test_scores_sorted_by_time(self):
        self.store.submit_score("slow", 90, Difficulty.EASY, BoardSize.SMALL)
        self.store.submit_score("fast", 12, Difficulty.EASY, BoardSize.SMALL)
        self.store.submit_score("mid", 40, Difficulty.EASY, BoardSize.SMALL)
        self.store.submit_score("other", 1, Difficulty.HARD, BoardSize.SMALL)

        scores = self.store.list_scores(Difficulty.EASY, BoardSize.SMALL)

        self.assertEqual(
            scores,
            [Score("fast", 12), Score("mid", 40), Score("slow", 90)],
        )
        self.assertEqual(self.store.list_scores(Difficulty.HARD, BoardSize.SMALL), [Score("other", 1)])
        self.assertEqual(self.store.list_scores(Difficulty.EASY, BoardSize.LARGE), [])

    def test_limit(self):
        for seconds in range(15, 0, -1):
            self.store.submit_score(f"p{seconds}", seconds, Difficulty.NORMAL, BoardSize.MEDIUM)
        scores = self.store.list_scores(Difficulty.NORMAL, BoardSize.MEDIUM)
        self.assertEqual(len(scores), MAX_SCORES)
        self.assertEqual(scores[0], Score("p1", 1))
        self.assertEqual(len(self.store.list_scores(Difficulty.NORMAL, BoardSize.MEDIUM, limit=3)), 3)

    def test_submit_failure(self):
        os.makedirs(self.path)
        with self.assertRaises(ScoreSubmissionError):
            self.store.submit_score("bob", 10, Difficulty.EASY, BoardSize.SMALL)

    def test_score_rows_padded(self):
        rows = score_rows([Score("bob", 65)])
        self.assertEqual(len(rows), MAX_SCORES)
        self.assertEqual(rows[0], (1, "bob", "01:05"))
        self.assertEqual(rows[9], (10, "", ""))

    def test_export_markdown(self):
        out = os.path.join(self.tmp.name, "leaderboard.md")
        export_leaderboard_markdown([Score("bob", 65)], Difficulty.EASY, BoardSize.SMALL, out)
        with open(out, encoding="utf-8") as f:
            text = f.read()
        self.assertIn("Easy / Small", text)
        self.assertIn("| 1 | bob | 01:05 |", text)


if __name__ == "__main__":
    unittest.main()
