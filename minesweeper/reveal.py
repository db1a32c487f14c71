"""Reveal cascade and win detection."""
from minesweeper.board import in_bounds, neighbors
from minesweeper.types import GameBoard


def reveal_cell(board: GameBoard, row: int, col: int) -> None:
    """Reveal a cell and cascade through connected zero-count cells.

    Out-of-bounds, already revealed and flagged cells are left alone. The
    cascade uses an explicit stack so large boards cannot exhaust the
    recursion limit.
    """
    pending = [(row, col)]
    while pending:
        r, c = pending.pop()
        if not in_bounds(board, r, c):
            continue

        cell = board.cells[r][c]
        if cell.is_revealed or cell.is_flagged:
            continue

        cell.is_revealed = True

        # If this cell has no neighboring mines, reveal all neighbors
        if not cell.is_mine and cell.neighbor_mines == 0:
            pending.extend(neighbors(board, r, c))


def check_win_condition(board: GameBoard) -> bool:
    """Return True when every non-mine cell has been revealed."""
    return all(
        cell.is_revealed
        for row in board.cells
        for cell in row
        if not cell.is_mine
    )


def reveal_all_mines(board: GameBoard) -> int:
    """Reveal every mine for the end-of-game display, flagged or not.

    Returns how many flags were removed from mines in the process.
    """
    cleared = 0
    for row in board.cells:
        for cell in row:
            if cell.is_mine:
                if cell.is_flagged:
                    cleared += 1
                cell.is_revealed = True
                cell.is_flagged = False
    return cleared
