from __future__ import annotations
import logging
import sys
import cv2
from typing import Tuple, Optional

logger = logging.getLogger(__name__)


class Camera:
    def __init__(self, index: int, target_size: Tuple[int, int] = (1280, 720), fps: int = 60):
        self.index = index
        self.target_size = target_size
        self.fps = fps
        self.cap: Optional[cv2.VideoCapture] = None

    def open(self) -> bool:
        backend = cv2.CAP_DSHOW if sys.platform.startswith("win") else cv2.CAP_ANY
        self.cap = cv2.VideoCapture(self.index, backend)
        if not self.cap.isOpened():
            logger.error("could not open camera %d", self.index)
            self.cap = None
            return False
        w, h = self.target_size
        # best effort; drivers may ignore these
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, w)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, h)
        self.cap.set(cv2.CAP_PROP_FPS, self.fps)
        logger.info("camera %d open at %dx%d", self.index,
                    int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
                    int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT)))
        return True

    def read(self):
        if self.cap is None:
            return False, None
        return self.cap.read()

    def close(self):
        if self.cap is not None:
            self.cap.release()
            self.cap = None
