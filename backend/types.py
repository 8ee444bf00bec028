"""Type definitions shared by the board and the game session."""
from dataclasses import dataclass
from enum import Enum

from .utils import to_time

# Cell kind: -1 = mine, 0-8 = number of adjacent mines
MINE = -1


class CellInteraction(str, Enum):
    """What the player has done to a cell."""
    UNTOUCHED = "untouched"
    CLEARED = "cleared"
    FLAGGED = "flagged"


class GameStatus(str, Enum):
    """Possible game states."""
    IDLE = "idle"
    STARTED = "started"
    GAME_OVER = "game_over"
    VICTORY = "victory"

    @property
    def is_finished(self) -> bool:
        return self in (GameStatus.GAME_OVER, GameStatus.VICTORY)


@dataclass
class Cell:
    """A single grid position."""
    interaction: CellInteraction = CellInteraction.UNTOUCHED
    kind: int = 0

    @property
    def is_mine(self) -> bool:
        return self.kind == MINE

    @property
    def is_clear(self) -> bool:
        return self.kind != MINE

    @property
    def is_untouched(self) -> bool:
        return self.interaction is CellInteraction.UNTOUCHED

    @property
    def is_cleared(self) -> bool:
        return self.interaction is CellInteraction.CLEARED

    @property
    def is_flagged(self) -> bool:
        return self.interaction is CellInteraction.FLAGGED

    def reset(self):
        self.interaction = CellInteraction.UNTOUCHED
        self.kind = 0


@dataclass(frozen=True)
class GameInfo:
    """Read-only snapshot published to observers after every action."""
    elapsed_seconds: int = 0
    cleared: int = 0
    clear_total: int = 0
    status: GameStatus = GameStatus.IDLE

    def describe(self, username: str) -> str:
        time = to_time(self.elapsed_seconds)
        if self.status is GameStatus.STARTED:
            return f"{self.cleared} cleared out of {self.clear_total}\n{time}"
        if self.status is GameStatus.GAME_OVER:
            return f"Game over, {username} 😭\nTime - {time}"
        if self.status is GameStatus.VICTORY:
            return f"You won, {username}! 🥳\nTime - {time}"
        return ""

    def to_dict(self) -> dict:
        return {
            "elapsed_seconds": self.elapsed_seconds,
            "cleared": self.cleared,
            "clear_total": self.clear_total,
            "status": self.status.value,
        }
