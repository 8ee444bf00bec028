# backend/errors.py


class ParseDifficultyError(ValueError):
    def __init__(self, value=None):
        super().__init__(f"Error parsing game difficulty: {value!r}")
        self.value = value


class ParseSizeError(ValueError):
    def __init__(self, value=None):
        super().__init__(f"Error parsing gameboard size: {value!r}")
        self.value = value


class GameParamsError(ValueError):
    """Wraps a difficulty or size parse failure."""

    def __init__(self, cause: ValueError):
        super().__init__(str(cause))
        self.cause = cause


class ConfigError(ValueError):
    pass


class InvariantViolation(AssertionError):
    """
    Raised when internal code breaks a construction-time guarantee, e.g. an
    out-of-bounds cell index or a cell with no registered observer.
    """


class ScoreSubmissionError(Exception):
    """The leaderboard could not store or read scores."""
