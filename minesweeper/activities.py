"""Temporal activities for game logic.

The engine draws on a clock, a random source and the high score store, so it
runs here rather than inside the deterministic workflow.
"""
from temporalio import activity
from minesweeper.engine import GameEngine
from minesweeper.types import GameConfig, GameState


class GameActivities:
    """Activities bound to an engine; the engine's config is replaced per game."""

    def __init__(self, engine: GameEngine):
        self.engine = engine

    def _engine_for(self, config: GameConfig) -> GameEngine:
        return GameEngine(config, store=self.engine.store, clock=self.engine.clock, rng=self.engine.rng)

    @activity.defn
    async def new_game(self, config: GameConfig) -> GameState:
        """Create a fresh game, loading the current high score."""
        game_state = self._engine_for(config).new_game()
        activity.logger.info(f"New {config.rows}x{config.cols} game with {config.mine_count} mines")
        return game_state

    @activity.defn
    async def reveal_cell(self, game_state: GameState, row: int, col: int) -> GameState:
        return self.engine.reveal(game_state, row, col)

    @activity.defn
    async def toggle_flag(self, game_state: GameState, row: int, col: int) -> GameState:
        return self.engine.toggle_flag(game_state, row, col)
