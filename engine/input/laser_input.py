from __future__ import annotations
from typing import Dict, List, Tuple
import numpy as np
import cv2
from engine.api.frame_data import Point


class LaserInput:
    """
    Maps camera-space detections to screen space and keeps the brightest N per color.
    `max_points` comes from the game's manifest, e.g.:

        max_points_per_color:
          red: 1
          green: 0   # 0 means ignore this color

    Colors not present in the dict default to 0 (ignored).
    """

    def __init__(self, max_points: Dict[str, int] | None, H: np.ndarray | None, mirror: bool = False):
        self.max_points_per_color: Dict[str, int] = {
            str(k).lower(): int(v) for k, v in (max_points or {}).items()}
        self.H = H
        self.mirror = mirror

    def set_homography(self, H: np.ndarray | None):
        self.H = H

    def map_point(self, cam_xy: Tuple[float, float], screen_size: Tuple[int, int]) -> Tuple[float, float] | None:
        """Camera pixel -> logical screen pixel, or None when it lands off screen."""
        if self.H is None:
            x, y = cam_xy
        else:
            pt = np.array([[[cam_xy[0], cam_xy[1]]]], dtype=np.float32)
            mapped = cv2.perspectiveTransform(pt, np.asarray(self.H, dtype=np.float64))[0][0]
            x, y = float(mapped[0]), float(mapped[1])

        w, h = screen_size
        if not (0 <= x < w and 0 <= y < h):
            return None
        # mirror after H so logical input matches the flipped presentation
        if self.mirror:
            x = (w - 1) - x
        return (float(x), float(y))

    def map_and_select(
        self, detections: Dict[str, List[Tuple[float, float, float]]], screen_size: Tuple[int, int]
    ) -> Dict[str, List[Point]]:
        out: Dict[str, List[Point]] = {}
        for color, pts in detections.items():
            cap = int(self.max_points_per_color.get(color.lower(), 0))
            if cap <= 0:
                continue

            # look at a few extra; some fall off screen after mapping
            mapped: List[Point] = []
            for (x, y, intensity) in pts[:cap * 3]:
                m = self.map_point((x, y), screen_size)
                if m is not None:
                    mapped.append(Point(m[0], m[1], intensity))

            mapped.sort(key=lambda p: p.intensity, reverse=True)
            out[color] = mapped[:cap]
        return out
