from .game_base import Game
from .frame_data import FrameData, Point
from .config import EngineConfig
from engine.app.scheduler import CancelHandle, Scheduler

__all__ = ["Game", "FrameData", "Point", "EngineConfig", "Scheduler", "CancelHandle"]
