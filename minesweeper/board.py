"""Board generation: empty grids, deferred mine placement and neighbor counts."""
import random
from typing import Iterator, List, Tuple
from minesweeper.types import Cell, GameBoard, GameConfig


def in_bounds(board: GameBoard, row: int, col: int) -> bool:
    return 0 <= row < board.rows and 0 <= col < board.cols


def neighbors(board: GameBoard, row: int, col: int) -> Iterator[Tuple[int, int]]:
    """Yield the positions of the up-to-8 cells surrounding (row, col)."""
    for dr in [-1, 0, 1]:
        for dc in [-1, 0, 1]:
            if dr == 0 and dc == 0:
                continue
            new_row = row + dr
            new_col = col + dc
            if in_bounds(board, new_row, new_col):
                yield new_row, new_col


def count_neighbor_mines(board: GameBoard, row: int, col: int) -> int:
    """Count the number of mines in neighboring cells."""
    return sum(1 for r, c in neighbors(board, row, col) if board.cells[r][c].is_mine)


def create_empty_board(config: GameConfig) -> GameBoard:
    """Create a board with no mines placed yet."""
    cells: List[List[Cell]] = []
    for row in range(config.rows):
        cells.append([])
        for col in range(config.cols):
            cells[row].append(Cell(
                is_mine=False,
                is_revealed=False,
                is_flagged=False,
                neighbor_mines=0,
                row=row,
                col=col
            ))

    return GameBoard(
        cells=cells,
        rows=config.rows,
        cols=config.cols,
        mine_count=config.mine_count
    )


def compute_neighbor_counts(board: GameBoard) -> None:
    for row in range(board.rows):
        for col in range(board.cols):
            cell = board.cells[row][col]
            cell.neighbor_mines = 0 if cell.is_mine else count_neighbor_mines(board, row, col)


def place_mines(board: GameBoard, exclude_row: int, exclude_col: int, rng=random) -> None:
    """Place ``board.mine_count`` mines anywhere except (exclude_row, exclude_col).

    Positions are drawn with a Fisher-Yates shuffle, so every subset of the
    candidate cells is equally likely. Mutates ``board`` in place.
    """
    positions = [
        (row, col)
        for row in range(board.rows)
        for col in range(board.cols)
        if (row, col) != (exclude_row, exclude_col)
    ]
    rng.shuffle(positions)

    for row, col in positions[:board.mine_count]:
        board.cells[row][col].is_mine = True

    compute_neighbor_counts(board)


def mine_positions(board: GameBoard) -> List[Tuple[int, int]]:
    return [
        (cell.row, cell.col)
        for row in board.cells
        for cell in row
        if cell.is_mine
    ]
