"""Flask server for Minesweeper game."""
import asyncio
import logging
import uuid
from datetime import datetime, timezone
from flask import Flask, request, jsonify
from flask_cors import CORS
from temporalio.client import Client

from minesweeper.config import Settings, get_temporal_client, load_settings
from minesweeper.scoring import elapsed_seconds, preview_score
from minesweeper.types import GameConfig, GameState, MoveRequest
from minesweeper.workflows import MinesweeperWorkflow

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

MOVE_ACTIONS = ('reveal', 'flag')

app = Flask(__name__)
CORS(app)

# Global client reference
temporal_client: Client | None = None
settings: Settings = load_settings()


class GameNotReadyError(Exception):
    """The game workflow has not produced its first state yet."""


def serialize_datetime(value):
    return value.isoformat() if isinstance(value, datetime) else value


def serialize_game_state(game_state: GameState, now: datetime | None = None) -> dict:
    """Convert game state to JSON-serializable format."""
    now = now or datetime.now(timezone.utc)
    board = game_state.board

    cells = [
        [
            {
                'isMine': cell.is_mine,
                'isRevealed': cell.is_revealed,
                'isFlagged': cell.is_flagged,
                'neighborMines': cell.neighbor_mines,
                'row': cell.row,
                'col': cell.col,
            }
            for cell in row
        ]
        for row in board.cells
    ]

    elapsed = 0
    if game_state.start_time:
        elapsed = elapsed_seconds(game_state.start_time, game_state.end_time or now)

    return {
        'board': {
            'cells': cells,
            'rows': board.rows,
            'cols': board.cols,
            'mineCount': board.mine_count,
        },
        'mineCount': game_state.mine_count,
        'flagCount': game_state.flag_count,
        'gameStatus': game_state.status.value,
        'firstClick': game_state.first_click,
        'startTime': serialize_datetime(game_state.start_time),
        'endTime': serialize_datetime(game_state.end_time),
        'currentScore': game_state.current_score,
        'highScore': game_state.high_score,
        'elapsedSeconds': elapsed,
        'liveScore': preview_score(game_state, now),
    }


async def query_with_retry(handle, max_retries=5) -> GameState:
    """Query with retry logic for workflow initialization."""
    for i in range(max_retries):
        try:
            game_state = await handle.query(MinesweeperWorkflow.get_game_state_query)
            if game_state is None:
                raise GameNotReadyError(f"Game {handle.id} is still initializing")
            return game_state
        except Exception as error:
            if i < max_retries - 1:
                logger.info(f"Query not ready yet, retrying in {(i + 1) * 100}ms...")
                await asyncio.sleep((i + 1) * 0.1)
                continue
            raise error


def parse_move_request(data) -> MoveRequest | None:
    if not isinstance(data, dict):
        return None
    row, col, action = data.get('row'), data.get('col'), data.get('action')
    # bool is a subclass of int
    if not isinstance(row, int) or isinstance(row, bool):
        return None
    if not isinstance(col, int) or isinstance(col, bool):
        return None
    if action not in MOVE_ACTIONS:
        return None
    return MoveRequest(row=row, col=col, action=action)


@app.route('/api/games', methods=['POST'])
def create_game():
    """Create a new game."""
    try:
        game_id = str(uuid.uuid4())

        async def start_workflow():
            await temporal_client.start_workflow(
                MinesweeperWorkflow.run,
                args=[game_id, GameConfig()],
                id=game_id,
                task_queue=settings.task_queue,
            )
            handle = temporal_client.get_workflow_handle(game_id)
            return await query_with_retry(handle)

        game_state = asyncio.run(start_workflow())
        return jsonify({'gameId': game_id, 'gameState': serialize_game_state(game_state)})

    except Exception as error:
        logger.error(f"Error creating game: {error}")
        return jsonify({'error': 'Failed to create game'}), 500


@app.route('/api/games/<game_id>', methods=['GET'])
def get_game_state(game_id):
    """Get game state."""
    try:
        handle = temporal_client.get_workflow_handle(game_id)
        game_state = asyncio.run(query_with_retry(handle))
        return jsonify({'gameId': game_id, 'gameState': serialize_game_state(game_state)})

    except Exception as error:
        logger.error(f"Error getting game state: {error}")
        return jsonify({'error': 'Game not found'}), 404


@app.route('/api/games/<game_id>/moves', methods=['POST'])
def make_move(game_id):
    """Make a move."""
    move_request = parse_move_request(request.get_json(silent=True))
    if move_request is None:
        return jsonify({'error': 'Invalid move request'}), 400

    try:
        handle = temporal_client.get_workflow_handle(game_id)
        game_state = asyncio.run(handle.execute_update(MinesweeperWorkflow.make_move_update, move_request))
        return jsonify({'gameId': game_id, 'gameState': serialize_game_state(game_state)})

    except Exception as error:
        logger.error(f"Error making move: {error}")
        return jsonify({'error': 'Failed to make move'}), 500


@app.route('/api/games/<game_id>/reset', methods=['POST'])
def reset_game(game_id):
    """Reset game."""
    try:
        handle = temporal_client.get_workflow_handle(game_id)
        game_state = asyncio.run(handle.execute_update(MinesweeperWorkflow.reset_game_update))
        return jsonify({'gameId': game_id, 'gameState': serialize_game_state(game_state)})

    except Exception as error:
        logger.error(f"Error resetting game: {error}")
        return jsonify({'error': 'Failed to reset game'}), 500


@app.route('/api/games/<game_id>/close', methods=['POST'])
def close_game(game_id):
    """Close the game workflow."""
    try:
        handle = temporal_client.get_workflow_handle(game_id)
        asyncio.run(handle.signal(MinesweeperWorkflow.close_game_signal))
        return jsonify({'gameId': game_id, 'closed': True})

    except Exception as error:
        logger.error(f"Error closing game: {error}")
        return jsonify({'error': 'Failed to close game'}), 500


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'OK',
        'timestamp': datetime.now(timezone.utc).isoformat()
    })


async def initialize_client():
    """Initialize Temporal client."""
    global temporal_client
    temporal_client = await get_temporal_client(settings)
    logger.info("Connected to Temporal server")


def main():
    """Start the Flask server."""
    try:
        asyncio.run(initialize_client())

        logger.info(f"Minesweeper server running on http://localhost:{settings.port}")
        logger.info("Make sure to start the Temporal worker in another terminal: python -m minesweeper.worker")

        app.run(host='0.0.0.0', port=settings.port, debug=False)

    except Exception as error:
        logger.error(f"Failed to start server: {error}")
        exit(1)


if __name__ == "__main__":
    main()
