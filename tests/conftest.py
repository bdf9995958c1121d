# tests/conftest.py
import random
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so "sudoku_game" can be imported in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sudoku_game import GameSession, JsonFileStore, LeaderboardManager  # noqa: E402


class FakeClock:
    """Wall clock that only moves when told to."""

    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path):
    return JsonFileStore(str(tmp_path / "records.json"))


@pytest.fixture
def leaderboard(store):
    return LeaderboardManager(store)


@pytest.fixture
def session(leaderboard, clock):
    s = GameSession(leaderboard=leaderboard, clock=clock, rng=random.Random(1234))
    s.new_game('beginner')
    return s
