from .scores import MAX_SCORES, Score, ScoreStore

__all__ = ['ScoreStore', 'Score', 'MAX_SCORES']
