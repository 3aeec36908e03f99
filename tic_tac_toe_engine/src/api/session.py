"""
Game session: turn order, move application, computer turns and the scoreboard.

State transitions are explicit: every mutating call returns a TransitionResult
with the new snapshot and the score increments it applied. Invalid calls are
no-ops (accepted=False), never errors.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from .core import BOARD_CELLS, Board, GameOutcome, Mark, OutcomeStatus, evaluate, side_to_move
from .opponent import select_move

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    TWO_PLAYER = "pvp"
    VS_COMPUTER = "cpu"


@dataclass(frozen=True)
class Scoreboard:
    """Cumulative results. Also used as a delta for a single transition."""

    x: int = 0
    o: int = 0
    draws: int = 0

    # PUBLIC_INTERFACE
    @classmethod
    def for_outcome(cls, outcome: GameOutcome) -> "Scoreboard":
        """The increment a terminal outcome contributes (zero for ongoing)."""
        if outcome.status is OutcomeStatus.DRAW:
            return cls(draws=1)
        if outcome.status is OutcomeStatus.WON:
            return cls(x=1) if outcome.winner is Mark.X else cls(o=1)
        return cls()

    def __add__(self, other: "Scoreboard") -> "Scoreboard":
        return Scoreboard(self.x + other.x, self.o + other.o, self.draws + other.draws)


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view handed to the presentation layer."""

    board: Board
    turn: Mark
    outcome: GameOutcome
    highlight: Tuple[int, ...]
    scoreboard: Scoreboard
    mode: Mode
    moves: Tuple[int, ...] = ()
    version: int = 0


@dataclass(frozen=True)
class TransitionResult:
    accepted: bool
    snapshot: SessionSnapshot
    score_delta: Scoreboard = field(default_factory=Scoreboard)


Listener = Callable[[SessionSnapshot], None]


class GameSession:
    """Owns the board, turn, outcome, highlight, mode and scoreboard of one player session."""

    def __init__(self, mode: Mode = Mode.TWO_PLAYER, rng: Optional[random.Random] = None):
        self.mode = mode
        self.rng = rng
        self.scoreboard = Scoreboard()
        self.version = 0
        self._listeners: List[Listener] = []
        self._clear_board()

    def _clear_board(self):
        self.board = Board.empty()
        self.outcome = GameOutcome.ongoing()
        self.highlight: Tuple[int, ...] = ()
        self.moves: List[int] = []

    @property
    def turn(self) -> Mark:
        return side_to_move(self.board)

    @property
    def awaiting_opponent(self) -> bool:
        """True when the computer owes a move."""
        return (
            self.mode is Mode.VS_COMPUTER
            and not self.outcome.is_terminal
            and self.turn is Mark.O
        )

    # PUBLIC_INTERFACE
    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            board=self.board,
            turn=self.turn,
            outcome=self.outcome,
            highlight=self.highlight,
            scoreboard=self.scoreboard,
            mode=self.mode,
            moves=tuple(self.moves),
            version=self.version,
        )

    # PUBLIC_INTERFACE
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callable run with the new snapshot after every transition. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, snapshot: SessionSnapshot):
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Session listener %r raised", listener)

    def _commit(self, score_delta: Optional[Scoreboard] = None) -> TransitionResult:
        self.version += 1
        snapshot = self.snapshot()
        self._notify(snapshot)
        return TransitionResult(True, snapshot, score_delta or Scoreboard())

    def _reject(self) -> TransitionResult:
        return TransitionResult(False, self.snapshot())

    def _place(self, cell: int) -> TransitionResult:
        mark = self.turn
        self.board = self.board.place(cell, mark)
        self.moves.append(cell)
        self.outcome = evaluate(self.board)
        delta = Scoreboard.for_outcome(self.outcome)
        self.scoreboard = self.scoreboard + delta
        self.highlight = self.outcome.line if self.outcome.status is OutcomeStatus.WON else ()
        logger.debug("%s played cell %d", mark.value, cell)
        if self.outcome.status is OutcomeStatus.WON:
            logger.info("%s wins on line %s", mark.value, self.outcome.line)
        elif self.outcome.status is OutcomeStatus.DRAW:
            logger.info("Round ended in a draw")
        return self._commit(delta)

    def _is_open(self, cell) -> bool:
        return (
            isinstance(cell, int)
            and not isinstance(cell, bool)
            and 0 <= cell < BOARD_CELLS
            and not self.outcome.is_terminal
            and self.board[cell] is Mark.EMPTY
        )

    # PUBLIC_INTERFACE
    def apply_move(self, cell: int) -> TransitionResult:
        """Play the current turn's mark at cell. Ignored when the cell, turn or state does not allow it."""
        if not self._is_open(cell):
            return self._reject()
        if self.mode is Mode.VS_COMPUTER and self.turn is not Mark.X:
            return self._reject()
        return self._place(cell)

    submit_move = apply_move

    # PUBLIC_INTERFACE
    def opponent_trigger(self, expected_version: Optional[int] = None) -> TransitionResult:
        """Let the computer play O. Discarded if the session moved past expected_version."""
        if expected_version is not None and expected_version != self.version:
            logger.debug("Discarding stale opponent move for version %d (now %d)", expected_version, self.version)
            return self._reject()
        if not self.awaiting_opponent:
            return self._reject()
        cell = select_move(self.board, Mark.O, Mark.X, rng=self.rng)
        if cell is None or not self._is_open(cell):
            return self._reject()
        return self._place(cell)

    # PUBLIC_INTERFACE
    def reset_board(self) -> TransitionResult:
        """Fresh board, X to move. Scores are kept."""
        self._clear_board()
        logger.info("Board reset")
        return self._commit()

    # PUBLIC_INTERFACE
    def reset_scores(self) -> TransitionResult:
        self.scoreboard = Scoreboard()
        logger.info("Scores reset")
        return self._commit()

    # PUBLIC_INTERFACE
    def set_mode(self, mode: Mode) -> TransitionResult:
        """Switch mode and start a fresh board."""
        self.mode = Mode(mode)
        logger.info("Mode set to %s", self.mode.value)
        return self.reset_board()


# PUBLIC_INTERFACE
def status_text(snapshot: SessionSnapshot) -> str:
    """Status line shown above the board."""
    if snapshot.outcome.status is OutcomeStatus.WON:
        return f"{snapshot.outcome.winner.value} wins"
    if snapshot.outcome.status is OutcomeStatus.DRAW:
        return "Draw"
    return f"Turn: {snapshot.turn.value}"


# PUBLIC_INTERFACE
def player_labels(mode: Mode) -> Dict[str, str]:
    """Scoreboard labels; O is the computer in VsComputer mode."""
    return {
        "X": "Player X",
        "O": "Computer (O)" if mode is Mode.VS_COMPUTER else "Player O",
        "Draws": "Draws",
    }
