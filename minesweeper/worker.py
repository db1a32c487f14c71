"""Temporal worker for Minesweeper game."""
import asyncio
import logging
from temporalio.worker import Worker
from minesweeper.activities import GameActivities
from minesweeper.config import get_temporal_client, load_settings
from minesweeper.engine import GameEngine
from minesweeper.storage import JsonFileHighScoreStore
from minesweeper.workflows import MinesweeperWorkflow

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main():
    """Start the Temporal worker."""
    settings = load_settings()
    client = await get_temporal_client(settings)

    engine = GameEngine(store=JsonFileHighScoreStore(settings.high_score_file))
    game_activities = GameActivities(engine)

    worker = Worker(
        client,
        task_queue=settings.task_queue,
        workflows=[MinesweeperWorkflow],
        activities=[
            game_activities.new_game,
            game_activities.reveal_cell,
            game_activities.toggle_flag,
        ],
    )

    logger.info("Worker started, connected to Temporal")
    logger.info(f"Listening on task queue: {settings.task_queue}")
    logger.info(f"High scores stored in {settings.high_score_file}")

    await worker.run()


if __name__ == "__main__":
    asyncio.run(main())
