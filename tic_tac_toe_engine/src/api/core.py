"""
Core board logic for Tic Tac Toe (board values, winning lines, outcome evaluation).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple


class Mark(str, Enum):
    X = "X"
    O = "O"
    EMPTY = ""


BOARD_CELLS = 9

# Scan order matters: rows, then columns, then diagonals.
LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


def _to_mark(value) -> Mark:
    if isinstance(value, Mark):
        return value
    if value is None or value == "" or value == " ":
        return Mark.EMPTY
    return Mark(value)


@dataclass(frozen=True)
class Board:
    """Immutable 3x3 board, cells indexed 0-8 row-major."""

    cells: Tuple[Mark, ...] = (Mark.EMPTY,) * BOARD_CELLS

    def __post_init__(self):
        if len(self.cells) != BOARD_CELLS:
            raise ValueError(f"A board has exactly {BOARD_CELLS} cells, got {len(self.cells)}")

    # PUBLIC_INTERFACE
    @classmethod
    def empty(cls) -> "Board":
        return cls()

    # PUBLIC_INTERFACE
    @classmethod
    def from_marks(cls, marks: Iterable) -> "Board":
        """Build a board from Marks or their string forms ('X', 'O', '' / ' ' / None for empty)."""
        return cls(tuple(_to_mark(m) for m in marks))

    def __getitem__(self, index: int) -> Mark:
        return self.cells[index]

    def __iter__(self):
        return iter(self.cells)

    def __len__(self) -> int:
        return BOARD_CELLS

    # PUBLIC_INTERFACE
    def place(self, index: int, mark: Mark) -> "Board":
        """Return a new board with mark placed at index. Raises ValueError if the cell is unavailable."""
        if not 0 <= index < BOARD_CELLS:
            raise ValueError(f"Cell index out of range: {index}")
        if self.cells[index] is not Mark.EMPTY:
            raise ValueError(f"Cell {index} is already taken by {self.cells[index].value}")
        cells = list(self.cells)
        cells[index] = mark
        return Board(tuple(cells))

    # PUBLIC_INTERFACE
    def empty_cells(self) -> List[int]:
        """Indices of unoccupied cells, ascending."""
        return [i for i, cell in enumerate(self.cells) if cell is Mark.EMPTY]

    # PUBLIC_INTERFACE
    def is_full(self) -> bool:
        return all(cell is not Mark.EMPTY for cell in self.cells)

    # PUBLIC_INTERFACE
    def count(self, mark: Mark) -> int:
        return sum(1 for cell in self.cells if cell is mark)

    # PUBLIC_INTERFACE
    def rows(self) -> List[List[Mark]]:
        return [list(self.cells[r * 3:r * 3 + 3]) for r in range(3)]

    # PUBLIC_INTERFACE
    def serialize(self) -> List[Optional[str]]:
        """Board as a flat list of 'X', 'O' or None."""
        return [cell.value if cell is not Mark.EMPTY else None for cell in self.cells]


class OutcomeStatus(str, Enum):
    ONGOING = "ongoing"
    WON = "won"
    DRAW = "draw"


@dataclass(frozen=True)
class GameOutcome:
    """Terminal status of a board. winner/line are only set when status is WON."""

    status: OutcomeStatus = OutcomeStatus.ONGOING
    winner: Optional[Mark] = None
    line: Tuple[int, ...] = ()

    @classmethod
    def ongoing(cls) -> "GameOutcome":
        return cls()

    @classmethod
    def won(cls, mark: Mark, line: Tuple[int, ...]) -> "GameOutcome":
        return cls(OutcomeStatus.WON, mark, tuple(line))

    @classmethod
    def draw(cls) -> "GameOutcome":
        return cls(OutcomeStatus.DRAW)

    @property
    def is_terminal(self) -> bool:
        return self.status is not OutcomeStatus.ONGOING


# PUBLIC_INTERFACE
def evaluate(board: Board) -> GameOutcome:
    """Checks the board. Returns the first winning line in scan order, a draw, or ongoing."""
    for a, b, c in LINES:
        mark = board[a]
        if mark is not Mark.EMPTY and mark is board[b] is board[c]:
            return GameOutcome.won(mark, (a, b, c))
    if board.is_full():
        return GameOutcome.draw()
    return GameOutcome.ongoing()


# PUBLIC_INTERFACE
def side_to_move(board: Board) -> Mark:
    """X starts; equal counts means X to move, otherwise O."""
    return Mark.X if board.count(Mark.X) == board.count(Mark.O) else Mark.O
