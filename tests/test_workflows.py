import asyncio
import uuid

import pytest
from temporalio.testing import WorkflowEnvironment
from temporalio.worker import Worker

from minesweeper.activities import GameActivities
from minesweeper.engine import GameEngine
from minesweeper.storage import InMemoryHighScoreStore
from minesweeper.types import GameConfig, GameStatus, MoveRequest
from minesweeper.workflows import MinesweeperWorkflow

from conftest import ReversingRandom


async def start_environment(time_skipping):
    try:
        if time_skipping:
            return await WorkflowEnvironment.start_time_skipping()
        return await WorkflowEnvironment.start_local()
    except Exception as error:
        pytest.skip(f"Temporal test server unavailable: {error}")


def run_game(scenario, time_skipping=False):
    """Run ``scenario(client, task_queue, store)`` against a worker hosting the game workflow."""
    async def run():
        env = await start_environment(time_skipping)
        store = InMemoryHighScoreStore()
        game_activities = GameActivities(GameEngine(store=store, rng=ReversingRandom()))
        task_queue = f"minesweeper-test-{uuid.uuid4()}"
        async with env:
            async with Worker(
                env.client,
                task_queue=task_queue,
                workflows=[MinesweeperWorkflow],
                activities=[
                    game_activities.new_game,
                    game_activities.reveal_cell,
                    game_activities.toggle_flag,
                ],
            ):
                await scenario(env.client, task_queue, store)

    asyncio.run(run())


async def start_game(client, task_queue):
    game_id = str(uuid.uuid4())
    return await client.start_workflow(
        MinesweeperWorkflow.run,
        args=[game_id, GameConfig(3, 3, 2)],
        id=game_id,
        task_queue=task_queue,
    )


def move(row, col, action='reveal'):
    return MoveRequest(row=row, col=col, action=action)


def test_play_lose_and_reset():
    async def scenario(client, task_queue, store):
        handle = await start_game(client, task_queue)

        state = await handle.execute_update(MinesweeperWorkflow.make_move_update, move(2, 2, 'flag'))
        assert state.status is GameStatus.PLAYING
        assert state.flag_count == 1

        state = await handle.execute_update(MinesweeperWorkflow.make_move_update, move(0, 0))
        assert not state.first_click
        assert state.board.cells[1][1].is_revealed

        lost = await handle.execute_update(MinesweeperWorkflow.make_move_update, move(2, 1))
        assert lost.status is GameStatus.LOST
        assert lost.flag_count == 0

        # moves after the game ended leave it untouched
        after = await handle.execute_update(MinesweeperWorkflow.make_move_update, move(2, 0))
        assert after == lost
        assert await handle.query(MinesweeperWorkflow.get_game_state_query) == lost

        fresh = await handle.execute_update(MinesweeperWorkflow.reset_game_update)
        assert fresh.status is GameStatus.PLAYING
        assert fresh.first_click
        assert not any(cell.is_revealed for row in fresh.board.cells for cell in row)

        await handle.signal(MinesweeperWorkflow.close_game_signal)
        await handle.result()

    run_game(scenario)


def test_win_records_high_score():
    async def scenario(client, task_queue, store):
        handle = await start_game(client, task_queue)

        await handle.execute_update(MinesweeperWorkflow.make_move_update, move(0, 0))
        won = await handle.execute_update(MinesweeperWorkflow.make_move_update, move(2, 0))

        assert won.status is GameStatus.WON
        assert won.current_score >= 1000
        assert won.high_score == won.current_score
        assert store.load() == won.current_score

        reset = await handle.execute_update(MinesweeperWorkflow.reset_game_update)
        assert reset.high_score == won.current_score

        await handle.signal(MinesweeperWorkflow.close_game_signal)
        await handle.result()

    run_game(scenario)


def test_idle_game_closes_itself():
    async def scenario(client, task_queue, store):
        handle = await start_game(client, task_queue)
        # time skipping fast-forwards through the 24 hour idle window
        await handle.result()

    run_game(scenario, time_skipping=True)
