"""Type definitions for the Minesweeper engine."""
from dataclasses import dataclass
from typing import List, Optional
from datetime import datetime
from enum import StrEnum

ROWS = 9
COLS = 9
MINE_COUNT = 10


@dataclass
class Cell:
    """Represents a single cell on the minesweeper board."""
    is_mine: bool
    is_revealed: bool
    is_flagged: bool
    neighbor_mines: int
    row: int
    col: int


@dataclass
class GameBoard:
    """Represents the game board."""
    cells: List[List[Cell]]
    rows: int
    cols: int
    mine_count: int


@dataclass
class GameConfig:
    """Board dimensions and mine count for a game."""
    rows: int = ROWS
    cols: int = COLS
    mine_count: int = MINE_COUNT

    def __post_init__(self):
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f"Board must have at least one row and column, got {self.rows}x{self.cols}")
        if not 0 < self.mine_count < self.rows * self.cols:
            raise ValueError(
                f"Mine count must be between 1 and {self.rows * self.cols - 1}, got {self.mine_count}"
            )


class GameStatus(StrEnum):
    """Possible game states."""
    PLAYING = 'playing'
    WON = 'won'
    LOST = 'lost'


@dataclass
class GameState:
    """Current state of the game."""
    board: GameBoard
    mine_count: int
    status: GameStatus = GameStatus.PLAYING
    flag_count: int = 0
    first_click: bool = True
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    current_score: int = 0
    high_score: int = 0


@dataclass
class MoveRequest:
    """Request to make a move."""
    row: int
    col: int
    action: str  # 'reveal', 'flag'
