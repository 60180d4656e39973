from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass
class Point:
    x: float
    y: float
    intensity: float


@dataclass
class FrameData:
    timestamp: float
    # e.g. {"red": [Point, ...], "pointer": [...]} (already mapped to screen coords)
    points_by_color: Dict[str, List[Point]] = field(default_factory=dict)

    def all_points(self) -> List[Point]:
        return [p for pts in self.points_by_color.values() for p in pts]

    def any_inside(self, rect: Tuple[int, int, int, int]) -> bool:
        x, y, w, h = rect
        return any(x <= p.x < x + w and y <= p.y < y + h for p in self.all_points())
