# leaderboard/scores.py

import argparse
import csv
import os
import threading
from dataclasses import dataclass
from typing import List, Tuple

from backend.config import load_config
from backend.errors import ScoreSubmissionError
from backend.settings import BoardSize, Difficulty
from backend.utils import to_time, to_title

# The scoreboard only shows the top ten
MAX_SCORES = 10

FIELDNAMES = ["username", "time_in_seconds", "difficulty", "size"]


@dataclass
class Score:
    username: str = ""
    time_in_seconds: int = 0


class ScoreStore:
    """Append-only CSV of finished games."""

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()

    def submit_score(self, username: str, time_in_seconds: int, difficulty: Difficulty, size: BoardSize):
        row = {
            "username": username,
            "time_in_seconds": int(time_in_seconds),
            "difficulty": str(difficulty),
            "size": str(size),
        }
        with self._lock:
            try:
                directory = os.path.dirname(self.path)
                if directory:
                    os.makedirs(directory, exist_ok=True)
                needs_header = not os.path.exists(self.path) or os.path.getsize(self.path) == 0
                with open(self.path, "a", newline="", encoding="utf-8") as f:
                    writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
                    if needs_header:
                        writer.writeheader()
                    writer.writerow(row)
            except OSError as exc:
                raise ScoreSubmissionError(f"Could not save score: {exc}") from exc

    def list_scores(self, difficulty: Difficulty, size: BoardSize, limit: int = MAX_SCORES) -> List[Score]:
        """Best (lowest) times first for one difficulty/size pair."""
        if not os.path.exists(self.path):
            return []

        scores = []
        with self._lock:
            try:
                with open(self.path, "r", newline="", encoding="utf-8") as f:
                    reader = csv.DictReader(f)
                    for row in reader:
                        if row["difficulty"] != str(difficulty) or row["size"] != str(size):
                            continue
                        try:
                            time_in_seconds = int(row["time_in_seconds"])
                        except (TypeError, ValueError):
                            continue
                        scores.append(Score(row["username"], time_in_seconds))
            except OSError as exc:
                raise ScoreSubmissionError(f"Could not read leaderboard: {exc}") from exc

        scores.sort(key=lambda score: score.time_in_seconds)
        return scores[:limit]


def score_rows(scores: List[Score], limit: int = MAX_SCORES) -> List[Tuple[int, str, str]]:
    """
    Rank, name and MM:SS time for each place, padded with empty rows up to
    `limit`. Places without a time show an empty time.
    """
    padded = list(scores[:limit]) + [Score() for _ in range(limit - len(scores))]
    return [
        (n, score.username, to_time(score.time_in_seconds) if score.time_in_seconds > 0 else "")
        for n, score in enumerate(padded, start=1)
    ]


def display_leaderboard(scores: List[Score], difficulty: Difficulty, size: BoardSize):
    print(f"\n🏆 Minesweeper Leaderboard - {to_title(difficulty)} / {to_title(size)}\n")
    header = f"{'#':<4} {'Name':<12} {'Time'}"
    print(header)
    print("-" * len(header))

    for n, username, time in score_rows(scores):
        print(f"{n:<4} {username:<12} {time}")


def export_leaderboard_markdown(scores: List[Score], difficulty: Difficulty, size: BoardSize, path="leaderboard.md"):
    with open(path, "w", encoding="utf-8") as f:
        f.write(f"## 🏆 Minesweeper Leaderboard - {to_title(difficulty)} / {to_title(size)}\n\n")
        f.write("| # | Name | Time |\n")
        f.write("|---|------|------|\n")
        for n, username, time in score_rows(scores):
            f.write(f"| {n} | {username} | {time} |\n")


def main():
    p = argparse.ArgumentParser(description="Show the fastest games for a difficulty and size")
    p.add_argument("--config", default=None, help="path to the game config yaml")
    p.add_argument("--difficulty", default="easy", help="easy, normal or hard")
    p.add_argument("--size", default="small", help="small, medium or large")
    p.add_argument("--markdown", default=None, help="also write the table to this markdown file")
    args = p.parse_args()

    try:
        difficulty = Difficulty.parse(args.difficulty)
        size = BoardSize.parse(args.size)
    except ValueError as exc:
        p.error(str(exc))

    config = load_config(args.config)
    store = ScoreStore(config["leaderboard"]["path"])
    scores = store.list_scores(difficulty, size, limit=config["leaderboard"]["limit"])

    display_leaderboard(scores, difficulty, size)
    if args.markdown:
        export_leaderboard_markdown(scores, difficulty, size, args.markdown)
        print(f"\nLeaderboard saved to {args.markdown}.")


if __name__ == "__main__":
    main()
