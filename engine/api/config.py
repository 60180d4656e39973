from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple


@dataclass
class EngineConfig:
    screen_size: Tuple[int, int]
    fps: int = 60
    use_camera: bool = False
    cam_index: int = 0
    profile: str = "default"
    show_preview: bool = False
    mirror: bool = False
