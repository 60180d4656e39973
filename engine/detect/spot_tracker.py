from __future__ import annotations
import logging
import time
from typing import Dict, List, Sequence, Tuple

import cv2
import numpy as np

logger = logging.getLogger(__name__)

# HSV bands per laser color; red wraps around the hue wheel so it needs two
HSV_RANGES = {
    "red": [
        ((0, 120, 180), (8, 255, 255)),
        ((170, 120, 180), (180, 255, 255)),
    ],
    "green": [
        ((35, 80, 120), (85, 255, 255)),
    ],
}

MIN_BLOB_AREA = 8
KERNEL = cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (3, 3))

Detection = Tuple[int, int, float]


def spot_mask(hsv: np.ndarray, color: str) -> np.ndarray:
    """Binary mask (uint8 {0,255}) of pixels inside the color's HSV bands."""
    mask = np.zeros(hsv.shape[:2], dtype=np.uint8)
    for lo, hi in HSV_RANGES.get(color, []):
        mask = cv2.bitwise_or(mask, cv2.inRange(hsv, lo, hi))
    mask = cv2.GaussianBlur(mask, (5, 5), 0)
    return cv2.morphologyEx(mask, cv2.MORPH_OPEN, KERNEL, iterations=1)


def blobs_in_mask(mask: np.ndarray) -> List[Detection]:
    """Centroids of blobs big enough to be a laser dot, largest first."""
    cnts, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
    found: List[Detection] = []
    for c in cnts:
        area = cv2.contourArea(c)
        if area < MIN_BLOB_AREA:
            continue
        m = cv2.moments(c)
        if m["m00"] <= 0:
            continue
        # blob area stands in for brightness
        found.append((int(m["m10"] / m["m00"]), int(m["m01"] / m["m00"]), float(area)))
    found.sort(key=lambda d: d[2], reverse=True)
    return found


class SpotTracker:
    """
    Finds laser dots in camera frames. Optionally mirrors what it sees into
    an OpenCV preview window, with the calibrated screen outline on top.
    """

    def __init__(self, colors: Sequence[str] = ("red",), show_preview: bool = False,
                 preview_name: str = "Camera Preview"):
        unknown = [c for c in colors if c not in HSV_RANGES]
        if unknown:
            raise ValueError(f"No HSV range for laser color(s): {', '.join(unknown)}")
        self.colors = list(colors)
        self.show_preview = show_preview
        self.preview_name = preview_name
        self.corners_cam: List[Tuple[int, int]] = []

        if self.show_preview:
            cv2.namedWindow(self.preview_name, cv2.WINDOW_NORMAL)
            cv2.resizeWindow(self.preview_name, 640, 360)

    def set_corners_cam(self, corners_cam: List[Tuple[int, int]] | None):
        self.corners_cam = [(int(x), int(y)) for (x, y) in (corners_cam or [])]

    def detect(self, frame_bgr: np.ndarray) -> Dict[str, List[Detection]]:
        """
        Returns camera-space detections: {color: [(x, y, intensity), ...]}
        """
        hsv = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2HSV)
        out: Dict[str, List[Detection]] = {}
        masks = {}
        for color in self.colors:
            masks[color] = spot_mask(hsv, color)
            out[color] = blobs_in_mask(masks[color])

        if self.show_preview:
            self._show_preview(frame_bgr, masks, out)
        return out

    def _show_preview(self, frame_bgr, masks, detections):
        overlay = frame_bgr.copy()
        for color, mask in masks.items():
            overlay[mask > 0] = (0, 0, 255) if color == "red" else (0, 255, 0)
            for (x, y, _) in detections[color][:3]:
                cv2.circle(overlay, (x, y), 4, (255, 255, 0), -1)

        if len(self.corners_cam) == 4:
            pts = np.array(self.corners_cam, dtype=np.int32).reshape(-1, 1, 2)
            cv2.polylines(overlay, [pts], True, (0, 200, 0), 2, cv2.LINE_AA)

        cv2.putText(overlay, time.strftime("%H:%M:%S"), (12, 24),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1, cv2.LINE_AA)
        cv2.imshow(self.preview_name, overlay)
        cv2.waitKey(1)

    def teardown(self):
        if self.show_preview:
            cv2.destroyAllWindows()
