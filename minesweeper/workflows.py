"""Temporal workflows for Minesweeper game."""
import asyncio
from datetime import timedelta
from typing import Optional
from temporalio import workflow

with workflow.unsafe.imports_passed_through():
    from minesweeper.types import GameConfig, GameState, GameStatus, MoveRequest
    from minesweeper.activities import GameActivities

ACTIVITY_TIMEOUT = timedelta(seconds=60)
INACTIVITY_TIMEOUT = timedelta(hours=24)
CHECK_INTERVAL = timedelta(minutes=1)


@workflow.defn
class MinesweeperWorkflow:
    """Workflow that manages a single Minesweeper game.

    Every command holds ``command_lock`` from start to finish, so moves and
    resets apply one at a time even when updates arrive together.
    """

    def __init__(self):
        self.game_id: str = ""
        self.config: Optional[GameConfig] = None
        self.game_state: Optional[GameState] = None
        self.last_activity_time: float = 0
        self.should_close: bool = False
        self.command_lock = asyncio.Lock()

    @workflow.run
    async def run(self, game_id: str, config: GameConfig) -> None:
        """Main workflow entry point."""
        # Store game_id immediately so queries can access it during initialization
        self.game_id = game_id
        self.config = config
        self.last_activity_time = workflow.time()

        async with self.command_lock:
            self.game_state = await self._new_game()

        while not self.should_close:
            try:
                await workflow.wait_condition(lambda: self.should_close, timeout=CHECK_INTERVAL)
            except asyncio.TimeoutError:
                pass

            if self.should_close:
                break

            if self._idle_for() >= INACTIVITY_TIMEOUT.total_seconds():
                workflow.logger.info(f"Game {game_id} auto-closing due to 24 hours of inactivity")
                break

        await workflow.wait_condition(workflow.all_handlers_finished)
        workflow.logger.info(f"Minesweeper workflow {game_id} completed")

    @workflow.update
    async def make_move_update(self, move_request: MoveRequest) -> GameState:
        """Apply a reveal or flag move and return the updated state."""
        await workflow.wait_condition(lambda: self.game_state is not None)

        async with self.command_lock:
            if self.game_state.status != GameStatus.PLAYING:
                return self.game_state  # Game is over, moves are ignored

            self.last_activity_time = workflow.time()
            row, col, action = move_request.row, move_request.col, move_request.action

            if action == 'reveal':
                self.game_state = await workflow.execute_activity_method(
                    GameActivities.reveal_cell,
                    args=[self.game_state, row, col],
                    start_to_close_timeout=ACTIVITY_TIMEOUT,
                )
            elif action == 'flag':
                self.game_state = await workflow.execute_activity_method(
                    GameActivities.toggle_flag,
                    args=[self.game_state, row, col],
                    start_to_close_timeout=ACTIVITY_TIMEOUT,
                )
            else:
                workflow.logger.warning(f"Ignoring unknown action {action!r} for game {self.game_id}")

            return self.game_state

    @workflow.update
    async def reset_game_update(self) -> GameState:
        """Discard the current game and start a fresh one."""
        await workflow.wait_condition(lambda: self.game_state is not None)

        async with self.command_lock:
            self.last_activity_time = workflow.time()
            self.game_state = await self._new_game()
            return self.game_state

    @workflow.signal
    def close_game_signal(self) -> None:
        """Signal to close the game."""
        self.should_close = True

    @workflow.query
    def get_game_state_query(self) -> Optional[GameState]:
        """Current game state, or None while the first board is being created."""
        return self.game_state

    async def _new_game(self) -> GameState:
        return await workflow.execute_activity_method(
            GameActivities.new_game,
            self.config,
            start_to_close_timeout=ACTIVITY_TIMEOUT,
        )

    def _idle_for(self) -> float:
        return workflow.time() - self.last_activity_time
