from __future__ import annotations
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CancelHandle:
    """
    Token returned by Scheduler.schedule_at(). Holding one does not keep the
    callback alive; cancelling deregisters it so the body never runs.
    """
    seq: int
    when: float
    _scheduler: Optional["TickScheduler"] = field(
        default=None, repr=False, compare=False)

    def cancel(self) -> bool:
        if self._scheduler is None:
            return False
        return self._scheduler.cancel(self)

    @property
    def pending(self) -> bool:
        return self._scheduler is not None and self._scheduler.is_pending(self)


class Scheduler:
    """
    Interface the game core schedules its deferred callbacks through.
    """

    def now(self) -> float:
        """Current time in seconds on the scheduler's clock."""
        raise NotImplementedError

    def schedule_at(self, when: float, callback: Callable[[], None]) -> CancelHandle:
        """Run callback once, on the first tick at or after `when`."""
        raise NotImplementedError

    def cancel(self, handle: CancelHandle) -> bool:
        """Deregister handle; False if it already fired or was cancelled."""
        raise NotImplementedError


class TickScheduler(Scheduler):
    """
    One-shot timers serviced from the main loop.

    The engine calls run_due() once per frame, so callbacks run on the same
    thread as input handling and drawing.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._seq = itertools.count(1)
        self._pending: Dict[int, Tuple[float, Callable[[], None]]] = {}

    def now(self) -> float:
        return self._clock()

    def schedule_at(self, when: float, callback: Callable[[], None]) -> CancelHandle:
        if not callable(callback):
            raise TypeError("callback must be callable")
        seq = next(self._seq)
        self._pending[seq] = (float(when), callback)
        logger.debug("scheduled #%d at %.3f", seq, when)
        return CancelHandle(seq=seq, when=float(when), _scheduler=self)

    def cancel(self, handle: CancelHandle) -> bool:
        removed = self._pending.pop(handle.seq, None) is not None
        if removed:
            logger.debug("cancelled #%d", handle.seq)
        return removed

    def is_pending(self, handle: CancelHandle) -> bool:
        return handle.seq in self._pending

    def run_due(self) -> int:
        """
        Fire every callback whose time has come, earliest first.
        Returns how many ran.
        """
        now = self._clock()
        due = sorted(
            (when, seq) for seq, (when, _) in self._pending.items() if when <= now)
        fired = 0
        for _, seq in due:
            # an earlier callback in this batch may have cancelled this one
            entry = self._pending.pop(seq, None)
            if entry is None:
                continue
            entry[1]()
            fired += 1
        return fired

    def clear(self) -> None:
        self._pending.clear()

    def __len__(self) -> int:
        return len(self._pending)
