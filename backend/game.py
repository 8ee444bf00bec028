# backend/game.py

import asyncio
import logging
import threading
from dataclasses import replace
from typing import Callable, List, Optional

import numpy as np

from .board import CellObserver, MinesweeperBoard
from .errors import ScoreSubmissionError
from .settings import BoardSize, Difficulty, GameParams
from .tasks import run_loss_reveal, run_timer
from .types import CellInteraction, GameInfo, GameStatus

logger = logging.getLogger(__name__)

ScoreSubmitter = Callable[[str, int, Difficulty, BoardSize], None]
InfoObserver = Callable[[GameInfo], None]

# Encoded board values
UNTOUCHED = -3
FLAGGED = -2
MINE = -1


def spawn_on_running_loop(coro):
    """
    Schedule a background job on the caller's event loop. Without a running
    loop the job is dropped: the game stays playable, but the clock stays at
    0 and a lost board is not revealed or re-enabled on its own.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.warning("No running event loop, %s not scheduled", coro.__name__)
        coro.close()
        return None
    return loop.create_task(coro)


class GameSession:
    """
    Owns one board and drives it through Idle -> Started -> GameOver | Victory.
    All mutation goes through dig(), flag() and reset().
    """

    def __init__(
        self,
        params: GameParams = None,
        username: str = "",
        submit_score: Optional[ScoreSubmitter] = None,
        spawn: Callable = None,
        seed: int = None,
        cascade: str = "recursive"
    ):
        self.params = params or GameParams()
        self.username = username
        self.submit_score = submit_score
        self.spawn = spawn or spawn_on_running_loop

        self.rows, self.columns = self.params.dimensions()
        self.mines = self.params.mine_count()
        self.board = MinesweeperBoard(self.rows, self.columns, self.mines, seed=seed, cascade=cascade)

        self.status = GameStatus.IDLE
        self.cleared = 0
        self.generation = 0
        self.disposed = False
        self.new_game_enabled = True
        self.submission_error: Optional[str] = None

        self.info_observers: List[InfoObserver] = []
        self._info = GameInfo(clear_total=self.clear_total)
        self._lock = threading.RLock()

    @property
    def clear_total(self) -> int:
        return self.rows * self.columns - self.mines

    @property
    def info(self) -> GameInfo:
        return self._info

    def dimensions(self):
        return self.rows, self.columns

    def register_observer(self, row: int, col: int, callback: CellObserver):
        self.board.register_observer(row, col, callback)

    def subscribe_info(self, callback: InfoObserver):
        self.info_observers.append(callback)

    def _publish(self, **changes):
        self._info = replace(self._info, **changes)
        for callback in self.info_observers:
            callback(self._info)

    # -- player actions -------------------------------------------------

    def dig(self, row: int, col: int):
        with self._lock:
            if self.status.is_finished:
                return

            if self.status is GameStatus.IDLE:
                if self.board.index(row, col) is None:
                    return
                self._start(row, col)

            result = self.board.dig(row, col)
            self.cleared += result.cleared
            if result.detonated:
                self.status = GameStatus.GAME_OVER

            self.update_score()

    def _start(self, row: int, col: int):
        # The timer first ticks once the lock is released, by which time the
        # status is Started. A failing spawner leaves the session Idle.
        self.spawn(run_timer(self, self.generation))
        self.board.place_mines(exclude=self.board.safe_zone(row, col))
        self.status = GameStatus.STARTED
        logger.info(
            "Game started: %s/%s, %d mines, first dig at (%d, %d)",
            self.params.difficulty, self.params.size, self.mines, row, col
        )

    def flag(self, row: int, col: int):
        with self._lock:
            if self.status.is_finished:
                return
            self.board.flag(row, col)

    def reset(self):
        with self._lock:
            self.generation += 1
            self.status = GameStatus.IDLE
            self.cleared = 0
            self.new_game_enabled = True
            self.submission_error = None
            self.board.reset()

            self._info = GameInfo(clear_total=self.clear_total)
            for callback in self.info_observers:
                callback(self._info)

    def dispose(self):
        """Discard the session; background jobs stop at their next wake-up."""
        with self._lock:
            self.generation += 1
            self.disposed = True

    def update_score(self):
        if self.status is GameStatus.STARTED and self.cleared == self.clear_total:
            self.status = GameStatus.VICTORY
            self.board.flag_untouched()
            logger.info("Victory for %s in %ds", self.username, self._info.elapsed_seconds)
            self._submit()

        elif self.status is GameStatus.GAME_OVER:
            self.new_game_enabled = False
            mines = self.board.untouched_mines()
            self.board.rng.shuffle(mines)
            logger.info("Game over for %s after %ds", self.username, self._info.elapsed_seconds)
            self.spawn(run_loss_reveal(self, self.generation, mines))

        self._publish(cleared=self.cleared, status=self.status)

    def _submit(self):
        if self.submit_score is None:
            return
        try:
            self.submit_score(
                self.username,
                self._info.elapsed_seconds,
                self.params.difficulty,
                self.params.size,
            )
        except ScoreSubmissionError as exc:
            logger.error("Score submission failed: %s", exc)
            self.submission_error = str(exc)

    # -- background job hooks -------------------------------------------

    def _is_current(self, generation: int) -> bool:
        return not self.disposed and generation == self.generation

    def tick(self, generation: int, second: int) -> bool:
        with self._lock:
            if not self._is_current(generation) or self.status is not GameStatus.STARTED:
                return False
            self._publish(elapsed_seconds=second)
            return True

    def reveal_mine(self, generation: int, index: int) -> bool:
        with self._lock:
            if not self._is_current(generation):
                return False
            self.board.reveal_mine(index)
            return True

    def enable_new_game(self, generation: int) -> bool:
        with self._lock:
            if not self._is_current(generation):
                return False
            self.new_game_enabled = True
            return True

    # -- views ----------------------------------------------------------

    def get_encoded_board(self) -> np.ndarray:
        """
        Encode the board for clients:
            -3 untouched, -2 flagged, -1 uncovered mine, 0-8 adjacent mines
        """
        encoded = np.full(len(self.board.cells), UNTOUCHED, dtype=np.int8)
        for index, cell in enumerate(self.board.cells):
            if cell.interaction is CellInteraction.FLAGGED:
                encoded[index] = FLAGGED
            elif cell.interaction is CellInteraction.CLEARED:
                encoded[index] = MINE if cell.is_mine else cell.kind
        return encoded.reshape(self.rows, self.columns)

    def get_state(self) -> dict:
        with self._lock:
            return {
                "info": self._info.to_dict(),
                "message": self._info.describe(self.username),
                "board": self.get_encoded_board().tolist(),
                "dimensions": (self.rows, self.columns),
                "num_mines": self.mines,
                "difficulty": self.params.difficulty.value,
                "size": self.params.size.value,
                "username": self.username,
                "new_game_enabled": self.new_game_enabled,
                "submission_error": self.submission_error,
            }
