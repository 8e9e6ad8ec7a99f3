"""
Pytest fixtures for Ainimo engine tests.

Provides a fixed local clock, seeded randomness and in-memory stores so
tests are deterministic.
"""

import random
from datetime import datetime
from pathlib import Path

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ainimo.clock import timestamp_for
from ainimo.state import MemorySaveStore, new_game_state, reset_event_bus
from ainimo.state.manager import CompanionManager


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: int):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FixedRandom(random.Random):
    """Random whose ``random()`` always returns the same value."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture(autouse=True)
def fresh_event_bus():
    """Each test gets its own global event bus."""
    reset_event_bus()
    yield
    reset_event_bus()


@pytest.fixture
def now():
    """Local noon, well away from day boundaries and secret hours."""
    return timestamp_for(datetime(2026, 10, 18, 12, 0))


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def state(now):
    """Fresh save created at ``now``."""
    return new_game_state(now)


@pytest.fixture
def memory_store():
    """In-memory save store for testing."""
    return MemorySaveStore()


@pytest.fixture
def clock(now):
    return FakeClock(now)


@pytest.fixture
def manager(memory_store, clock, rng):
    """Manager with a new save already started."""
    manager = CompanionManager(memory_store, clock=clock, rng=rng)
    manager.new_game()
    return manager


@pytest.fixture
def fixed_random():
    """Factory for a Random pinned to one ``random()`` value."""
    return FixedRandom
