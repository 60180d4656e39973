from __future__ import annotations
import logging
import time
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np
import pygame

logger = logging.getLogger(__name__)

CORNER_INSET = 20
STABLE_FRAMES = 6
STABLE_PIXELS = 4
TIMEOUT_SEC = 6.0


def screen_corners(screen_size: Tuple[int, int], inset: int = 0) -> List[Tuple[int, int]]:
    """TL, TR, BR, BL."""
    w, h = screen_size
    return [(inset, inset), (w - 1 - inset, inset),
            (w - 1 - inset, h - 1 - inset), (inset, h - 1 - inset)]


def solve_homography(corners_cam: Sequence[Tuple[float, float]],
                     corners_screen: Sequence[Tuple[float, float]]) -> np.ndarray:
    """3x3 camera->screen mapping; identity if the points are degenerate."""
    src = np.array(corners_cam, dtype=np.float32)
    dst = np.array(corners_screen, dtype=np.float32)
    # RANSAC tolerates a slightly shaky corner
    H, _ = cv2.findHomography(src, dst, method=cv2.RANSAC, ransacReprojThreshold=3.0)
    if H is None:
        logger.warning("homography solve failed, falling back to identity")
        return np.eye(3, dtype=np.float64)
    return H


class HomographyStore:
    def __init__(self, profile_name: str = "default", root: Path | None = None):
        if root is None:
            root = Path(__file__).resolve().parents[2] / "runtime" / "cache" / "homographies"
        self.root = root
        self.path = root / f"{profile_name}.npz"

    def load(self):
        """
        Returns (H or None, corners_cam or None)
        corners_cam is a list of 4 (x,y) in camera space (TL, TR, BR, BL) if stored.
        """
        if not self.path.exists():
            return None, None

        with np.load(self.path) as data:
            H = data["H"]
            corners_cam = data["corners_cam"] if "corners_cam" in data.files else None
        if corners_cam is not None:
            corners_cam = [tuple(map(int, pt)) for pt in corners_cam.tolist()]
        logger.info("loaded homography from %s", self.path)
        return H, corners_cam

    def save(self, H: np.ndarray, corners_cam: Optional[List[Tuple[int, int]]] = None):
        self.root.mkdir(parents=True, exist_ok=True)
        if corners_cam is None:
            np.savez_compressed(self.path, H=H)
        else:
            np.savez_compressed(self.path, H=H, corners_cam=np.array(corners_cam, dtype=np.int32))
        logger.info("saved homography to %s", self.path)


def calibrate(screen: pygame.Surface, screen_size: Tuple[int, int], camera, tracker):
    """
    Show 4 corner dots one at a time; the player holds the laser steady on each.
    Returns (H, corners_cam). Esc or a timeout aborts with (identity, None).
    """
    targets = screen_corners(screen_size, inset=CORNER_INSET)
    labels = ["TL", "TR", "BR", "BL"]
    font = pygame.font.SysFont(None, 28)
    found: List[Tuple[int, int]] = []

    for idx in range(len(targets)):
        stable = 0
        last = None
        t0 = time.monotonic()

        while True:
            screen.fill((0, 0, 0))
            msg = f"Calibrating {labels[idx]} ({idx + 1}/4): hold laser steady; Esc to cancel"
            screen.blit(font.render(msg, True, (240, 240, 240)), (16, 16))
            for j, (cx, cy) in enumerate(targets):
                pygame.draw.circle(screen, (255, 0, 0) if j == idx else (50, 50, 50), (cx, cy), 15)
            pygame.display.flip()

            for ev in pygame.event.get():
                if ev.type == pygame.KEYDOWN and ev.key == pygame.K_ESCAPE:
                    logger.info("calibration cancelled")
                    return np.eye(3, dtype=np.float64), None

            if time.monotonic() - t0 > TIMEOUT_SEC:
                logger.warning("calibration timed out at corner %s", labels[idx])
                return np.eye(3, dtype=np.float64), None

            ok, frame = camera.read()
            if not ok:
                continue
            spots = tracker.detect(frame).get(tracker.colors[0], [])
            if not spots:
                continue

            pt = (spots[0][0], spots[0][1])
            if last is not None and np.hypot(pt[0] - last[0], pt[1] - last[1]) <= STABLE_PIXELS:
                stable += 1
            else:
                stable = 1
            last = pt
            if stable >= STABLE_FRAMES:
                found.append(pt)
                break

    H = solve_homography(found, targets)
    logger.info("calibrated corners %s", found)
    return H, found
