from .board import MinesweeperBoard
from .game import GameSession
from .settings import BoardSize, Difficulty, GameParams

__all__ = ['MinesweeperBoard', 'GameSession', 'GameParams', 'Difficulty', 'BoardSize']
