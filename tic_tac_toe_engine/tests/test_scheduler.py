import asyncio

import pytest

from src.api.core import Mark
from src.api.scheduler import OpponentScheduler
from src.api.session import Mode


@pytest.fixture
def loop():
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


def test_computer_moves_after_delay(cpu_session, loop):
    scheduler = OpponentScheduler(cpu_session, delay=0.01, loop=loop)
    cpu_session.apply_move(0)
    assert scheduler.pending
    assert cpu_session.board.count(Mark.O) == 0

    loop.run_until_complete(asyncio.sleep(0.05))
    assert not scheduler.pending
    assert cpu_session.board[4] is Mark.O
    assert cpu_session.turn is Mark.X


def test_reset_cancels_pending_move(cpu_session, loop):
    scheduler = OpponentScheduler(cpu_session, delay=0.01, loop=loop)
    cpu_session.apply_move(0)
    cpu_session.reset_board()
    assert not scheduler.pending

    loop.run_until_complete(asyncio.sleep(0.05))
    assert cpu_session.board.count(Mark.O) == 0
    assert cpu_session.turn is Mark.X


def test_mode_change_cancels_pending_move(cpu_session, loop):
    scheduler = OpponentScheduler(cpu_session, delay=0.01, loop=loop)
    cpu_session.apply_move(0)
    cpu_session.set_mode(Mode.TWO_PLAYER)
    loop.run_until_complete(asyncio.sleep(0.05))
    assert cpu_session.board.count(Mark.O) == 0
    assert not scheduler.pending


def test_stale_trigger_is_discarded(cpu_session, loop):
    # A trigger that fires after the board moved on must not apply.
    scheduler = OpponentScheduler(cpu_session, delay=0.01, loop=loop)
    cpu_session.apply_move(0)
    stale = cpu_session.version
    scheduler.close()
    cpu_session.reset_board()
    cpu_session.apply_move(8)
    scheduler._fire(stale)
    assert cpu_session.board.count(Mark.O) == 0


def test_two_player_mode_never_schedules(session, loop):
    scheduler = OpponentScheduler(session, delay=0.01, loop=loop)
    session.apply_move(0)
    assert not scheduler.pending


def test_close_stops_following_session(cpu_session, loop):
    scheduler = OpponentScheduler(cpu_session, delay=0.01, loop=loop)
    scheduler.close()
    cpu_session.apply_move(0)
    assert not scheduler.pending
    loop.run_until_complete(asyncio.sleep(0.05))
    assert cpu_session.board.count(Mark.O) == 0


def test_full_game_against_computer(cpu_session, loop):
    OpponentScheduler(cpu_session, delay=0, loop=loop)
    for cell in (0, 1, 3):
        cpu_session.apply_move(cell)
        loop.run_until_complete(asyncio.sleep(0.01))
    snap = cpu_session.snapshot()
    assert snap.outcome.winner is Mark.O
    assert snap.highlight == (2, 4, 6)
    assert snap.scoreboard.o == 1


def test_requires_event_loop(cpu_session):
    with pytest.raises(RuntimeError):
        OpponentScheduler(cpu_session, delay=0)
    assert cpu_session.apply_move(0).accepted
    assert cpu_session.awaiting_opponent


def test_picks_up_running_loop(cpu_session, loop):
    async def build():
        return OpponentScheduler(cpu_session, delay=0)

    scheduler = loop.run_until_complete(build())
    assert scheduler.loop is loop
    cpu_session.apply_move(0)
    loop.run_until_complete(asyncio.sleep(0.01))
    assert cpu_session.board[4] is Mark.O
