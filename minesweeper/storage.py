"""High score persistence."""
import json
import logging
import pathlib
from typing import Protocol, Union

logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = 'minesweeper_high_score'


class HighScoreStore(Protocol):
    def load(self) -> int: ...

    def save(self, score: int) -> None: ...


class InMemoryHighScoreStore:
    """Keeps the high score for the lifetime of the process only."""

    def __init__(self, score: int = 0):
        self.score = score

    def load(self) -> int:
        return self.score

    def save(self, score: int) -> None:
        self.score = score


class JsonFileHighScoreStore:
    """Stores the high score in a small JSON document on disk.

    Read and write failures never reach the engine: they are logged and the
    store keeps serving the last known value from memory for the rest of the
    session.
    """

    def __init__(self, path: Union[str, pathlib.Path], key: str = HIGH_SCORE_KEY):
        self.path = pathlib.Path(path)
        self.key = key
        self._memory = 0
        self.degraded = False

    def load(self) -> int:
        if self.degraded:
            return self._memory
        if not self.path.is_file():
            return self._memory

        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
            score = int(data.get(self.key, 0))
        except (OSError, ValueError, TypeError, AttributeError) as error:
            logger.warning(f"Could not read high score from {self.path}, keeping it in memory: {error}")
            self.degraded = True
            return self._memory

        self._memory = max(score, 0)
        return self._memory

    def save(self, score: int) -> None:
        self._memory = score
        if self.degraded:
            return

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps({self.key: score}), encoding='utf-8')
        except OSError as error:
            logger.warning(f"Could not write high score to {self.path}, keeping it in memory: {error}")
            self.degraded = True
