from __future__ import annotations
import itertools
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, List, Optional


@dataclass(frozen=True)
class Trial:
    id: int
    elapsed_ms: int
    completed_at: datetime

    def __str__(self) -> str:
        return f"{self.completed_at:%Y-%m-%d %H:%M:%S}: {self.elapsed_ms}ms"


class History:
    """
    Completed trials in the order they were recorded.
    Ids come from a counter that is never rewound, so they stay unique
    across clear() even when two trials share a timestamp.
    """

    def __init__(self):
        self._trials: List[Trial] = []
        self._ids = itertools.count(1)

    def record(self, elapsed_ms: int, completed_at: datetime) -> Trial:
        trial = Trial(id=next(self._ids), elapsed_ms=int(elapsed_ms),
                      completed_at=completed_at)
        self.append(trial)
        return trial

    def append(self, trial: Trial) -> None:
        if trial.elapsed_ms < 0:
            raise ValueError(f"elapsed_ms must be >= 0, got {trial.elapsed_ms}")
        self._trials.append(trial)

    def get(self, trial_id: int) -> Optional[Trial]:
        for t in self._trials:
            if t.id == trial_id:
                return t
        return None

    def remove(self, trial_id: int) -> Optional[Trial]:
        for i, t in enumerate(self._trials):
            if t.id == trial_id:
                return self._trials.pop(i)
        return None

    def clear(self) -> None:
        self._trials = []

    def average(self) -> int:
        # trials are never negative, so floor division truncates toward zero
        if not self._trials:
            return 0
        return sum(t.elapsed_ms for t in self._trials) // len(self._trials)

    @property
    def last(self) -> Optional[Trial]:
        return self._trials[-1] if self._trials else None

    def __iter__(self) -> Iterator[Trial]:
        return iter(list(self._trials))

    def __len__(self) -> int:
        return len(self._trials)

    def __getitem__(self, index):
        return self._trials[index]
