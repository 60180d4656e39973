from __future__ import annotations
from dataclasses import dataclass, field
import pygame
from typing import Any, Tuple
from engine.api.config import EngineConfig
from engine.app.scheduler import Scheduler


@dataclass
class Context:
    screen: pygame.Surface | None
    clock: pygame.time.Clock | None
    cfg: EngineConfig
    # one-shot timers, serviced by the loop before each on_update
    scheduler: Scheduler
    screen_size: Tuple[int, int]
    resources: dict[str, Any] = field(default_factory=dict)
