"""Time-based scoring."""
import math
from datetime import datetime
from minesweeper.types import GameState, GameStatus

BASE_SCORE = 1000
MAX_TIME_BONUS = 500


def elapsed_seconds(start_time: datetime, end_time: datetime) -> int:
    return math.floor((end_time - start_time).total_seconds())


def calculate_score(start_time: datetime, end_time: datetime) -> int:
    """Score for a win: the base score plus one bonus point per second under 500."""
    time_bonus = max(0, MAX_TIME_BONUS - elapsed_seconds(start_time, end_time))
    return BASE_SCORE + time_bonus


def preview_score(game_state: GameState, now: datetime) -> int:
    """Score the player would get by winning at ``now``.

    Zero before the first reveal; once the game is over this is the recorded
    score (0 for a loss).
    """
    if game_state.status != GameStatus.PLAYING:
        return game_state.current_score
    if game_state.start_time is None:
        return 0
    return calculate_score(game_state.start_time, now)
