from pydantic import BaseModel, Field
from typing import Dict, List, Optional

from .core import OutcomeStatus
from .session import Mode, Scoreboard, SessionSnapshot, TransitionResult, player_labels, status_text


# PUBLIC_INTERFACE
class MoveRequest(BaseModel):
    """Request model for playing a cell. Out-of-range cells are ignored by the engine, not rejected."""
    cell: int = Field(..., description="Cell index 0-8, row-major.")


# PUBLIC_INTERFACE
class ModeRequest(BaseModel):
    """Request model for switching game mode. Switching always starts a fresh board."""
    mode: Mode = Field(..., description="'pvp' for two players, 'cpu' to play against the computer.")


# PUBLIC_INTERFACE
class ScoreboardModel(BaseModel):
    """Cumulative results for the session."""
    x: int = Field(0, description="Rounds won by X.")
    o: int = Field(0, description="Rounds won by O.")
    draws: int = Field(0, description="Drawn rounds.")

    @classmethod
    def from_scoreboard(cls, scoreboard: Scoreboard) -> "ScoreboardModel":
        return cls(x=scoreboard.x, o=scoreboard.o, draws=scoreboard.draws)


# PUBLIC_INTERFACE
class SnapshotResponse(BaseModel):
    """Everything the board view renders."""
    board: List[Optional[str]] = Field(..., description="9 cells, row-major; 'X', 'O' or None.")
    status: OutcomeStatus
    winner: Optional[str] = None
    next_turn: Optional[str] = Field(None, description="Mark to move, None once the round is over.")
    highlight: List[int] = Field(default_factory=list, description="Winning line to highlight.")
    scoreboard: ScoreboardModel
    labels: Dict[str, str]
    mode: Mode
    message: str
    moves: List[int] = Field(default_factory=list, description="Cells played this round, in order.")
    version: int

    @classmethod
    def from_snapshot(cls, snapshot: SessionSnapshot) -> "SnapshotResponse":
        outcome = snapshot.outcome
        return cls(
            board=snapshot.board.serialize(),
            status=outcome.status,
            winner=outcome.winner.value if outcome.winner else None,
            next_turn=None if outcome.is_terminal else snapshot.turn.value,
            highlight=list(snapshot.highlight),
            scoreboard=ScoreboardModel.from_scoreboard(snapshot.scoreboard),
            labels=player_labels(snapshot.mode),
            mode=snapshot.mode,
            message=status_text(snapshot),
            moves=list(snapshot.moves),
            version=snapshot.version,
        )


# PUBLIC_INTERFACE
class MoveResponse(BaseModel):
    """Response after a move; includes new state and the score change it caused."""
    accepted: bool
    state: SnapshotResponse
    score_delta: ScoreboardModel

    @classmethod
    def from_result(cls, result: TransitionResult) -> "MoveResponse":
        return cls(
            accepted=result.accepted,
            state=SnapshotResponse.from_snapshot(result.snapshot),
            score_delta=ScoreboardModel.from_scoreboard(result.score_delta),
        )


# PUBLIC_INTERFACE
class ConfigResponse(BaseModel):
    """Display-only environment information."""
    environment: str
    port: int
    show_port: bool
    feature_flags: List[str] = Field(default_factory=list)
