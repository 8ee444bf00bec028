import random
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

import numpy as np

from .errors import InvariantViolation
from .types import MINE, Cell, CellInteraction
from .utils import NEIGHBOR_OFFSETS, get_neighbors

CellObserver = Callable[[CellInteraction, int], None]


@dataclass
class DigResult:
    """Outcome of one dig: non-mine cells newly cleared and whether a mine went off."""
    cleared: int = 0
    detonated: bool = False


class MinesweeperBoard:
    CASCADE_MODES = ("recursive", "iterative")

    def __init__(
        self,
        rows,
        columns,
        num_mines,
        seed=None,
        rng=None,
        cascade="recursive"
    ):
        """
        rows, columns:
            Grid dimensions. Cells are stored row-major.

        num_mines:
            Mines placed by place_mines(). Placement is lazy: the board starts
            as all (Untouched, 0) and the owner places mines on the first dig,
            excluding the safe zone around that click.

        cascade:
            "recursive" (default) or "iterative". Both reveal the same cells in
            the same order; the iterative form keeps its own stack so large
            boards never approach the interpreter's recursion limit.
        """
        if rows <= 0 or columns <= 0:
            raise ValueError("rows/columns must be positive")
        if cascade not in self.CASCADE_MODES:
            raise ValueError(f"Unknown cascade mode: {cascade!r}")

        self.rows = rows
        self.columns = columns
        self.num_mines = num_mines
        self.rng = rng if rng is not None else random.Random(seed)
        self.cascade = cascade

        self.cells: List[Cell] = [Cell() for _ in range(rows * columns)]
        self.observers: Dict[int, CellObserver] = {}
        self.mines_placed = False

    # -- geometry -------------------------------------------------------

    def index(self, row, col) -> Optional[int]:
        if 0 <= row < self.rows and 0 <= col < self.columns:
            return row * self.columns + col
        return None

    def position(self, index) -> Tuple[int, int]:
        return divmod(index, self.columns)

    def get_cell(self, row, col) -> Optional[Cell]:
        index = self.index(row, col)
        return None if index is None else self.cells[index]

    def cell(self, row, col) -> Cell:
        """Like get_cell(), for callers that already know the position is valid."""
        cell = self.get_cell(row, col)
        if cell is None:
            raise InvariantViolation(f"row and column within bounds: ({row}, {col})")
        return cell

    def neighbors(self, row, col) -> List[Tuple[int, int]]:
        return get_neighbors(row, col, self.rows, self.columns)

    def safe_zone(self, row, col) -> Set[int]:
        """
        Indices of the clicked cell and its neighbors, clipped to the board.
        These never receive a mine, so the first dig is always safe.
        """
        zone = set()
        for r, c in [(row, col)] + self.neighbors(row, col):
            index = self.index(r, c)
            if index is not None:
                zone.add(index)
        return zone

    # -- observers ------------------------------------------------------

    def register_observer(self, row, col, callback: CellObserver):
        index = self.index(row, col)
        if index is None:
            raise InvariantViolation(f"row and column within bounds: ({row}, {col})")
        self.observers[index] = callback

    def unregister_observer(self, row, col):
        index = self.index(row, col)
        if index is not None:
            self.observers.pop(index, None)

    def observers_complete(self) -> bool:
        return len(self.observers) == len(self.cells)

    def notify(self, index, interaction=None, kind=None):
        callback = self.observers.get(index)
        if callback is None:
            raise InvariantViolation(f"observer registered for cell {self.position(index)}")
        cell = self.cells[index]
        callback(
            cell.interaction if interaction is None else interaction,
            cell.kind if kind is None else kind,
        )

    # -- mine placement -------------------------------------------------

    def place_mines(self, exclude: Iterable[int] = ()):
        """
        Rejection sampling: draw uniformly random indices, skipping the
        excluded ones and cells that already hold a mine, until num_mines
        are placed. Then compute the adjacent-mine counts.
        """
        exclude = set(exclude)
        total = self.rows * self.columns
        if self.num_mines > total - len(exclude):
            raise ValueError(
                f"Cannot place {self.num_mines} mines: only {total - len(exclude)} "
                f"available cells after excluding reserved area."
            )

        for cell in self.cells:
            cell.kind = 0

        placed = 0
        while placed < self.num_mines:
            index = self.rng.randrange(total)
            if index in exclude or self.cells[index].is_mine:
                continue
            self.cells[index].kind = MINE
            placed += 1

        self._compute_adjacent_counts()
        self.mines_placed = True

    def place_mines_at(self, positions: Iterable[Tuple[int, int]]):
        """Lay out mines at fixed positions (replays and tests)."""
        for cell in self.cells:
            cell.kind = 0
        for row, col in positions:
            self.cell(row, col).kind = MINE
        self.num_mines = sum(1 for cell in self.cells if cell.is_mine)
        self._compute_adjacent_counts()
        self.mines_placed = True

    def _compute_adjacent_counts(self):
        mines = np.array([cell.is_mine for cell in self.cells], dtype=np.int8)
        mines = mines.reshape(self.rows, self.columns)
        padded = np.pad(mines, 1)

        counts = np.zeros((self.rows, self.columns), dtype=np.int8)
        for dr, dc in NEIGHBOR_OFFSETS:
            counts += padded[1 + dr:1 + dr + self.rows, 1 + dc:1 + dc + self.columns]

        for index, count in enumerate(counts.flat):
            if self.cells[index].is_clear:
                self.cells[index].kind = int(count)

    # -- reveal engine --------------------------------------------------

    def dig(self, row, col) -> DigResult:
        """
        Reveal behavior:
        - untouched cell: clear it; a mine detonates, a 0 cascades to every
          neighbor, a number stops.
        - cleared number: "chord". When the flagged neighbors equal the
          number, dig every untouched neighbor. Flags are not checked for
          correctness, so a wrong flag can detonate a mine.
        - flagged cell or out-of-bounds position: nothing happens.
        """
        result = DigResult()
        if self.cascade == "iterative":
            self._dig_iterative(row, col, result)
        else:
            self._dig_recursive(row, col, result)
        return result

    def _flagged_neighbors(self, row, col) -> int:
        return sum(1 for r, c in self.neighbors(row, col) if self.cells[self.index(r, c)].is_flagged)

    def _dig_recursive(self, row, col, result: DigResult):
        index = self.index(row, col)
        if index is None:
            return
        cell = self.cells[index]

        if cell.is_untouched:
            cell.interaction = CellInteraction.CLEARED
            self.notify(index)

            if cell.is_mine:
                result.detonated = True
                return

            result.cleared += 1
            if cell.kind == 0:
                for dr, dc in NEIGHBOR_OFFSETS:
                    self._dig_recursive(row + dr, col + dc, result)

        elif cell.is_cleared and cell.is_clear:
            if self._flagged_neighbors(row, col) != cell.kind:
                return
            for dr, dc in NEIGHBOR_OFFSETS:
                neighbor = self.get_cell(row + dr, col + dc)
                if neighbor is not None and neighbor.is_untouched:
                    self._dig_recursive(row + dr, col + dc, result)

    def _dig_iterative(self, row, col, result: DigResult):
        # Each frame yields (row, col, untouched_only) steps, mirroring the
        # loops of the recursive form so cells are visited in the same order.
        stack = [iter([(row, col, False)])]

        while stack:
            step = next(stack[-1], None)
            if step is None:
                stack.pop()
                continue

            r, c, untouched_only = step
            index = self.index(r, c)
            if index is None:
                continue
            cell = self.cells[index]

            if cell.is_untouched:
                cell.interaction = CellInteraction.CLEARED
                self.notify(index)

                if cell.is_mine:
                    result.detonated = True
                    continue

                result.cleared += 1
                if cell.kind == 0:
                    stack.append(iter([(r + dr, c + dc, False) for dr, dc in NEIGHBOR_OFFSETS]))

            elif cell.is_cleared and cell.is_clear and not untouched_only:
                if self._flagged_neighbors(r, c) == cell.kind:
                    stack.append(iter([(r + dr, c + dc, True) for dr, dc in NEIGHBOR_OFFSETS]))

    # -- flags and cosmetic reveals -------------------------------------

    def flag(self, row, col) -> bool:
        """Toggle Untouched <-> Flagged. Returns True when the cell changed."""
        index = self.index(row, col)
        if index is None:
            return False
        cell = self.cells[index]

        if cell.is_untouched:
            cell.interaction = CellInteraction.FLAGGED
        elif cell.is_flagged:
            cell.interaction = CellInteraction.UNTOUCHED
        else:
            return False

        self.notify(index)
        return True

    def flag_untouched(self):
        """Victory display: every cell still untouched is a mine, show it flagged."""
        for index, cell in enumerate(self.cells):
            if cell.is_untouched:
                cell.interaction = CellInteraction.FLAGGED
                self.notify(index, kind=MINE)

    def untouched_mines(self) -> List[int]:
        return [
            index for index, cell in enumerate(self.cells)
            if cell.is_untouched and cell.is_mine
        ]

    def reveal_mine(self, index) -> bool:
        """Loss display: uncover one mine. Does not count towards cleared cells."""
        cell = self.cells[index]
        if not cell.is_untouched:
            return False
        cell.interaction = CellInteraction.CLEARED
        self.notify(index)
        return True

    def reset(self):
        """Every cell back to (Untouched, 0); the mine layout is discarded."""
        for index, cell in enumerate(self.cells):
            cell.reset()
            if index in self.observers:
                self.notify(index)
        self.mines_placed = False

    # -- views ----------------------------------------------------------

    def count_cleared(self) -> int:
        return sum(1 for cell in self.cells if cell.is_cleared and cell.is_clear)

    def kinds(self) -> List[int]:
        return [cell.kind for cell in self.cells]

    def interactions(self) -> List[str]:
        return [cell.interaction.value for cell in self.cells]
