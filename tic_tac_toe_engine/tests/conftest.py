import pytest
from fastapi.testclient import TestClient

from src.api.config import Settings
from src.api.main import create_app
from src.api.session import GameSession, Mode


class SequenceRandom:
    """Stands in for random.Random: choice() picks by position from a fixed sequence."""

    def __init__(self, positions=(0,)):
        self.positions = list(positions)
        self.calls = []

    def choice(self, seq):
        self.calls.append(list(seq))
        position = self.positions.pop(0) if len(self.positions) > 1 else self.positions[0]
        return seq[position % len(seq)]


@pytest.fixture
def make_random():
    return SequenceRandom


@pytest.fixture
def first_choice():
    return SequenceRandom()


@pytest.fixture
def session():
    return GameSession()


@pytest.fixture
def cpu_session(first_choice):
    return GameSession(mode=Mode.VS_COMPUTER, rng=first_choice)


@pytest.fixture
def settings():
    return Settings(env_label="test", port=3000, opponent_delay_ms=0)


@pytest.fixture
def client(settings, first_choice):
    app = create_app(settings=settings, session=GameSession(rng=first_choice))
    with TestClient(app) as test_client:
        yield test_client
