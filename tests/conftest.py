"""
Pytest configuration and shared fixtures.
"""
from datetime import datetime, timedelta, timezone

import pytest
from temporalio.converter import DataConverter

from minesweeper.board import compute_neighbor_counts, create_empty_board
from minesweeper.engine import GameEngine
from minesweeper.storage import InMemoryHighScoreStore
from minesweeper.types import GameBoard, GameConfig


def through_temporal(value, type_hint=None):
    """Encode and decode a value the way Temporal does between workflow and activity."""
    converter = DataConverter.default.payload_converter
    payloads = converter.to_payloads([value])
    return converter.from_payloads(payloads, [type_hint or type(value)])[0]


class FakeClock:
    def __init__(self):
        self.current = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


class ReversingRandom:
    """Shuffle stand-in: mines land on the last candidate cells in row-major order."""

    def shuffle(self, items):
        items.reverse()


def board_from_layout(*layout: str) -> GameBoard:
    """Build a board from rows of text where '*' marks a mine."""
    mines = [(r, c) for r, line in enumerate(layout) for c, ch in enumerate(line) if ch == '*']
    board = create_empty_board(GameConfig(len(layout), len(layout[0]), max(len(mines), 1)))
    board.mine_count = len(mines)
    for r, c in mines:
        board.cells[r][c].is_mine = True
    compute_neighbor_counts(board)
    return board


def revealed_positions(board: GameBoard):
    return {(cell.row, cell.col) for row in board.cells for cell in row if cell.is_revealed}


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryHighScoreStore:
    return InMemoryHighScoreStore()


@pytest.fixture
def engine(clock, store) -> GameEngine:
    """Default 9x9 engine with 10 mines and a real random source."""
    return GameEngine(store=store, clock=clock.now)


@pytest.fixture
def rigged_engine(clock, store) -> GameEngine:
    """3x3 board, 2 mines; a first click at (0, 0) puts the mines on (2, 1) and (2, 2).

        0 0 0
        1 2 2
        1 * *
    """
    return GameEngine(GameConfig(3, 3, 2), store=store, clock=clock.now, rng=ReversingRandom())
