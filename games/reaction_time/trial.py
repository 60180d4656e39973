from __future__ import annotations
import logging
import random
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from engine.app.scheduler import CancelHandle, Scheduler

from .const import CUE_DELAY_MAX_SEC, CUE_DELAY_MIN_SEC
from .history import History, Trial

logger = logging.getLogger(__name__)


class TrialState(Enum):
    IDLE = 1
    ARMED = 2             # holding, cue scheduled but not shown yet
    READY_TO_RELEASE = 3  # cue visible, reaction window open


class TrialListener:
    """
    Receives the outcome of every transition. Override what you render.
    """

    def on_state_changed(self, state: TrialState) -> None:
        ...

    def on_trial_recorded(self, trial: Trial) -> None:
        ...

    def on_too_soon(self) -> None:
        ...

    def on_history_cleared(self) -> None:
        ...

    def on_trial_removed(self, trial: Trial) -> None:
        ...


class ReactionTrial:
    """
    Press-hold-release timing.

    press() arms a cue at a random delay; release() before the cue is "too
    soon", release() after it records the reaction time. The cue callback is
    scheduled through the injected Scheduler and tagged with a generation
    number, so a callback from an earlier arming can never advance the
    current one.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        history: Optional[History] = None,
        listener: Optional[TrialListener] = None,
        rng: Optional[random.Random] = None,
        wall_clock: Callable[[], datetime] = datetime.now,
    ):
        self.scheduler = scheduler
        self.history = history if history is not None else History()
        self.listener = listener if listener is not None else TrialListener()
        self.rng = rng if rng is not None else random.Random()
        self.wall_clock = wall_clock

        self.state: TrialState = TrialState.IDLE
        self.cue_time: Optional[float] = None
        self._handle: Optional[CancelHandle] = None
        self._generation: int = 0

    # ---------- Inbound ----------
    def press(self) -> bool:
        """Arm a new trial. Ignored unless idle; returns True if armed."""
        if self.state != TrialState.IDLE:
            return False

        delay = self.rng.uniform(CUE_DELAY_MIN_SEC, CUE_DELAY_MAX_SEC)
        self._generation += 1
        generation = self._generation
        self.cue_time = self.scheduler.now() + delay
        self._handle = self.scheduler.schedule_at(
            self.cue_time, lambda: self._on_cue(generation))
        logger.debug("armed, cue in %.3fs", delay)
        self._set_state(TrialState.ARMED)
        return True

    def release(self) -> Optional[Trial]:
        """
        End the hold. Returns the recorded Trial, or None when the release
        was too soon or there was nothing to release.
        """
        if self.state == TrialState.ARMED:
            self._cancel_cue()
            self.cue_time = None
            logger.info("released too soon")
            self.listener.on_too_soon()
            self._set_state(TrialState.IDLE)
            return None

        if self.state == TrialState.READY_TO_RELEASE:
            now = self.scheduler.now()
            elapsed = max(0, int((now - self.cue_time) * 1000 + 0.5))
            trial = self.history.record(elapsed, self.wall_clock())
            self.cue_time = None
            self._handle = None
            logger.info("trial #%d: %dms", trial.id, trial.elapsed_ms)
            self.listener.on_trial_recorded(trial)
            self._set_state(TrialState.IDLE)
            return trial

        return None

    def reset(self) -> None:
        """Abandon an in-progress trial without judging it."""
        self._cancel_cue()
        self.cue_time = None
        if self.state != TrialState.IDLE:
            self._set_state(TrialState.IDLE)

    def clear_history(self) -> None:
        count = len(self.history)
        self.history.clear()
        logger.info("cleared %d trial(s)", count)
        self.listener.on_history_cleared()

    def remove_trial(self, trial_id: int) -> bool:
        trial = self.history.remove(trial_id)
        if trial is None:
            return False
        logger.debug("removed trial #%d", trial_id)
        self.listener.on_trial_removed(trial)
        return True

    # ---------- Helpers ----------
    @property
    def has_pending_cue(self) -> bool:
        return self._handle is not None and self._handle.pending

    def _on_cue(self, generation: int) -> None:
        if generation != self._generation or self.state != TrialState.ARMED:
            logger.debug("ignoring stale cue from arming %d", generation)
            return
        self._handle = None
        self._set_state(TrialState.READY_TO_RELEASE)

    def _cancel_cue(self) -> None:
        # bumping the generation invalidates a callback even if it is
        # already being dispatched
        self._generation += 1
        if self._handle is not None:
            self.scheduler.cancel(self._handle)
            self._handle = None

    def _set_state(self, state: TrialState) -> None:
        self.state = state
        self.listener.on_state_changed(state)
