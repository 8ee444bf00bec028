# backend/utils.py

from typing import List, Tuple

NEIGHBOR_OFFSETS = [
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1)
]


def get_neighbors(row: int, col: int, rows: int, columns: int) -> List[Tuple[int, int]]:
    """
    Return a list of valid neighboring coordinates (8-way) for (row, col).
    """
    neighbors = []
    for dr, dc in NEIGHBOR_OFFSETS:
        nr, nc = row + dr, col + dc
        if 0 <= nr < rows and 0 <= nc < columns:
            neighbors.append((nr, nc))
    return neighbors


def to_time(seconds: int) -> str:
    """
    Format a second count as MM:SS, e.g. 65 -> "01:05".
    Minutes wrap at 99 so the display keeps two digits.
    """
    minutes, secs = divmod(max(int(seconds), 0), 60)
    return f"{minutes % 99:02}:{secs:02}"


def to_title(value) -> str:
    """Uppercase the first character: "easy" -> "Easy"."""
    s = str(value)
    return s[:1].upper() + s[1:]
