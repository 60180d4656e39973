"""Pytest fixtures for reaction time tests."""

import os
from datetime import datetime, timedelta

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "hide")

from engine.app.scheduler import TickScheduler
from games.reaction_time.history import History
from games.reaction_time.trial import ReactionTrial, TrialListener


class ManualClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 100.0):
        self.t = start

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += seconds


class FixedRandom:
    """Stands in for random.Random; always picks the same delay."""

    def __init__(self, delay: float):
        self.delay = delay
        self.calls = []

    def uniform(self, a: float, b: float) -> float:
        self.calls.append((a, b))
        return self.delay


class RecordingListener(TrialListener):
    def __init__(self):
        self.events = []

    def on_state_changed(self, state):
        self.events.append(("state", state))

    def on_trial_recorded(self, trial):
        self.events.append(("recorded", trial))

    def on_too_soon(self):
        self.events.append(("too_soon",))

    def on_history_cleared(self):
        self.events.append(("cleared",))

    def on_trial_removed(self, trial):
        self.events.append(("removed", trial))

    def kinds(self):
        return [e[0] for e in self.events]


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def scheduler(clock: ManualClock) -> TickScheduler:
    return TickScheduler(clock=clock)


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def wall_clock():
    """Distinct datetimes, one second apart, for completed_at."""
    base = datetime(2024, 1, 1, 12, 0, 0)
    ticks = iter(range(10_000))
    return lambda: base + timedelta(seconds=next(ticks))


@pytest.fixture
def trial(scheduler, listener, wall_clock) -> ReactionTrial:
    return ReactionTrial(scheduler, history=History(), listener=listener,
                         rng=FixedRandom(1.0), wall_clock=wall_clock)
