"""Game engine: applies player commands to immutable game state snapshots."""
import copy
import logging
import random
from datetime import datetime, timezone
from typing import Callable, Optional
from minesweeper.board import create_empty_board, in_bounds, place_mines
from minesweeper.reveal import check_win_condition, reveal_all_mines, reveal_cell
from minesweeper.scoring import calculate_score
from minesweeper.storage import HighScoreStore, InMemoryHighScoreStore
from minesweeper.types import GameConfig, GameState, GameStatus

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GameEngine:
    """Owns the rules of a game.

    Commands never modify the state they are given. An accepted command
    returns a new snapshot; a rejected one returns the original object.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        store: Optional[HighScoreStore] = None,
        clock: Callable[[], datetime] = utc_now,
        rng=None,
    ):
        self.config = config or GameConfig()
        self.store = store if store is not None else InMemoryHighScoreStore()
        self.clock = clock
        self.rng = rng if rng is not None else random.Random()

    def new_game(self) -> GameState:
        """Create a fresh game with no mines placed yet."""
        return GameState(
            board=create_empty_board(self.config),
            mine_count=self.config.mine_count,
            status=GameStatus.PLAYING,
            flag_count=0,
            first_click=True,
            high_score=self.store.load(),
        )

    def reset(self) -> GameState:
        return self.new_game()

    def reveal(self, game_state: GameState, row: int, col: int) -> GameState:
        """Reveal a cell and potentially cascade to neighbors."""
        if game_state.status != GameStatus.PLAYING or not in_bounds(game_state.board, row, col):
            return game_state

        cell = game_state.board.cells[row][col]
        if cell.is_revealed or cell.is_flagged:
            return game_state

        # Deep clone the game state
        new_game_state = copy.deepcopy(game_state)
        board = new_game_state.board

        if new_game_state.first_click:
            place_mines(board, row, col, self.rng)
            new_game_state.start_time = self.clock()
            new_game_state.first_click = False
            logger.info(f"Mines placed, first reveal at ({row}, {col})")

        reveal_cell(board, row, col)

        if board.cells[row][col].is_mine:
            new_game_state.status = GameStatus.LOST
            new_game_state.end_time = self.clock()
            new_game_state.current_score = 0
            new_game_state.flag_count -= reveal_all_mines(board)
            logger.info(f"Game lost: mine at ({row}, {col})")
        elif check_win_condition(board):
            new_game_state.status = GameStatus.WON
            new_game_state.end_time = self.clock()
            new_game_state.current_score = calculate_score(new_game_state.start_time, new_game_state.end_time)
            logger.info(f"Game won with score {new_game_state.current_score}")

            # Other games share the store and may have raised it since this one started
            best = max(game_state.high_score, self.store.load())
            if new_game_state.current_score > best:
                new_game_state.high_score = new_game_state.current_score
                self.store.save(new_game_state.high_score)
                logger.info(f"New high score: {new_game_state.high_score}")
            else:
                new_game_state.high_score = best

        return new_game_state

    def toggle_flag(self, game_state: GameState, row: int, col: int) -> GameState:
        """Toggle flag on a cell."""
        if game_state.status != GameStatus.PLAYING or not in_bounds(game_state.board, row, col):
            return game_state

        cell = game_state.board.cells[row][col]
        if cell.is_revealed:
            return game_state
        if not cell.is_flagged and game_state.flag_count >= game_state.mine_count:
            return game_state

        new_game_state = copy.deepcopy(game_state)
        new_cell = new_game_state.board.cells[row][col]

        if new_cell.is_flagged:
            new_cell.is_flagged = False
            new_game_state.flag_count -= 1
        else:
            new_cell.is_flagged = True
            new_game_state.flag_count += 1

        return new_game_state
