"""
Computer opponent: a fixed-priority heuristic (win, block, center, corner, side).
Not a full minimax; it does not look for forks.
"""

import logging
import random
from typing import Optional

from .core import Board, Mark, OutcomeStatus, evaluate

logger = logging.getLogger(__name__)

CENTER = 4
CORNERS = (0, 2, 6, 8)
SIDES = (1, 3, 5, 7)


def _completing_cell(board: Board, mark: Mark) -> Optional[int]:
    """First empty cell (ascending) where placing mark wins outright."""
    for i in board.empty_cells():
        outcome = evaluate(board.place(i, mark))
        if outcome.status is OutcomeStatus.WON and outcome.winner is mark:
            return i
    return None


# PUBLIC_INTERFACE
def select_move(
    board: Board,
    self_mark: Mark,
    opponent_mark: Mark,
    rng: Optional[random.Random] = None,
) -> Optional[int]:
    """Pick a cell for self_mark. Returns None only when the board has no empty cell.

    Args:
        board: Current board.
        self_mark: Mark the computer plays.
        opponent_mark: Mark of the human opponent.
        rng: Random source for corner/side tie-breaks (anything with ``choice``).
    Returns:
        Cell index 0-8, or None.
    """
    rng = rng or random
    cell = _completing_cell(board, self_mark)
    if cell is not None:
        logger.debug("Opponent %s wins at %d", self_mark.value, cell)
        return cell
    cell = _completing_cell(board, opponent_mark)
    if cell is not None:
        logger.debug("Opponent %s blocks at %d", self_mark.value, cell)
        return cell
    if board[CENTER] is Mark.EMPTY:
        return CENTER
    for group in (CORNERS, SIDES):
        free = [i for i in group if board[i] is Mark.EMPTY]
        if free:
            return rng.choice(free)
    return None
