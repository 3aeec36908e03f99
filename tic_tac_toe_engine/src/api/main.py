import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings
from .models import ConfigResponse, ModeRequest, MoveRequest, MoveResponse, SnapshotResponse
from .scheduler import OpponentScheduler
from .session import GameSession, SessionSnapshot

logger = logging.getLogger(__name__)


def _snapshot_json(snapshot: SessionSnapshot) -> dict:
    return SnapshotResponse.from_snapshot(snapshot).model_dump(mode="json")


def get_session(request: Request) -> GameSession:
    return request.app.state.session


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None, session: Optional[GameSession] = None) -> FastAPI:
    """Build the API around one in-memory game session.

    Args:
        settings (Settings): Defaults to values read from the environment.
        session (GameSession): Defaults to a fresh two-player session.
    Returns:
        FastAPI: The configured application.
    """
    settings = settings or get_settings()
    session = session or GameSession()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(level=settings.log_level)
        # The computer plays on the server loop, so it can only be scheduled once that loop runs.
        app.state.scheduler = OpponentScheduler(session, delay=settings.opponent_delay)
        logger.info("Tic Tac Toe engine ready (%s)", settings.env_label)
        yield
        app.state.scheduler.close()

    app = FastAPI(
        title="Tic Tac Toe Engine API",
        description="Two-mode Tic Tac Toe: board state, win/draw detection, computer opponent and scores.",
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "game", "description": "Play moves and read the board"},
            {"name": "session", "description": "Reset the board or scores, switch mode"},
            {"name": "ws", "description": "Websockets for state updates"},
            {"name": "config", "description": "Display-only environment info"},
        ],
    )
    app.state.settings = settings
    app.state.session = session

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", tags=["health"])
    def health_check():
        """Health check route for backend"""
        return {"message": "Healthy"}

    # PUBLIC_INTERFACE
    @app.get("/state", response_model=SnapshotResponse, tags=["game"], summary="Get current game state")
    async def get_state(session: GameSession = Depends(get_session)):
        """Board, turn, outcome, highlight, scores and mode."""
        return SnapshotResponse.from_snapshot(session.snapshot())

    # PUBLIC_INTERFACE
    @app.post("/move", response_model=MoveResponse, tags=["game"], summary="Play a cell")
    async def make_move(request: MoveRequest, session: GameSession = Depends(get_session)):
        """Play the current turn at the given cell.

        Invalid moves (taken cell, wrong turn, finished round, bad index) are ignored
        and reported with accepted=false. In 'cpu' mode the computer answers after a short delay.
        """
        return MoveResponse.from_result(session.submit_move(request.cell))

    # PUBLIC_INTERFACE
    @app.post("/reset_board", response_model=SnapshotResponse, tags=["session"], summary="Start a new round")
    async def reset_board(session: GameSession = Depends(get_session)):
        """Clear the board; X moves first. Scores are kept."""
        return SnapshotResponse.from_snapshot(session.reset_board().snapshot)

    # PUBLIC_INTERFACE
    @app.post("/reset_scores", response_model=SnapshotResponse, tags=["session"], summary="Zero the scoreboard")
    async def reset_scores(session: GameSession = Depends(get_session)):
        return SnapshotResponse.from_snapshot(session.reset_scores().snapshot)

    # PUBLIC_INTERFACE
    @app.post("/mode", response_model=SnapshotResponse, tags=["session"], summary="Switch game mode")
    async def set_mode(request: ModeRequest, session: GameSession = Depends(get_session)):
        """Switch between 'pvp' and 'cpu'. The board is reset, scores are kept."""
        return SnapshotResponse.from_snapshot(session.set_mode(request.mode).snapshot)

    # PUBLIC_INTERFACE
    @app.get("/config", response_model=ConfigResponse, tags=["config"], summary="Environment label and port")
    def get_config():
        return ConfigResponse(
            environment=settings.env_label,
            port=settings.port,
            show_port=settings.show_port,
            feature_flags=settings.feature_flags,
        )

    # PUBLIC_INTERFACE
    @app.websocket("/ws")
    async def websocket_updates(websocket: WebSocket):
        """
        Push the game state on connect and after every transition. Send 'ping' for a pong.
        """
        await websocket.accept()
        queue: asyncio.Queue = asyncio.Queue()
        unsubscribe = session.subscribe(queue.put_nowait)
        receiver = asyncio.ensure_future(websocket.receive_text())
        update = asyncio.ensure_future(queue.get())
        try:
            await websocket.send_json(_snapshot_json(session.snapshot()))
            while True:
                done, _ = await asyncio.wait({receiver, update}, return_when=asyncio.FIRST_COMPLETED)
                if update in done:
                    await websocket.send_json(_snapshot_json(update.result()))
                    update = asyncio.ensure_future(queue.get())
                if receiver in done:
                    if receiver.result() == "ping":
                        await websocket.send_text("pong")
                    receiver = asyncio.ensure_future(websocket.receive_text())
        except WebSocketDisconnect:
            logger.debug("Websocket client disconnected")
        finally:
            unsubscribe()
            receiver.cancel()
            update.cancel()

    @app.get("/websocket_info", tags=["ws"], summary="Get websocket usage instructions")
    def websocket_info():
        """Instructions for real-time connection via websocket."""
        return {
            "usage":
                "Connect using WebSocket at ws://HOST/ws to receive the game state after every change. "
                "Send 'ping' for a pong."
        }

    return app


app = create_app()
