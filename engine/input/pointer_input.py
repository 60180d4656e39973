from __future__ import annotations
import logging
import pygame
from typing import Dict, List, Tuple

from engine.api.frame_data import Point

logger = logging.getLogger(__name__)

_BTN_NAME = {1: "left", 2: "middle", 3: "right"}


class PointerInput:
    """
    Mouse buttons and touch fingers as held screen points:
    - While a mapped button (or a finger) is down, emit a point of its color every frame.
    - Position follows mouse motion / finger motion.
    - Respects --mirror by converting window coords -> logical coords.

    Manifest section (all optional):

        pointer:
          buttons: {left: pointer}
          touch: pointer
          intensity: 9999
    """

    def __init__(self, manifest_input: dict | None = None, mirror: bool = False):
        opts = manifest_input or {}
        self.mirror = mirror
        self.buttons: Dict[str, str] = opts.get("buttons", {"left": "pointer"})
        self.touch_color: str | None = opts.get("touch", "pointer")
        self.intensity: float = float(opts.get("intensity", 9999))

        # held positions keyed by "mouse:<button>" or "finger:<id>", logical coords
        self._points: Dict[str, Tuple[str, float, float]] = {}

    def _to_logical(self, x: float, y: float, w: int) -> Tuple[float, float]:
        if self.mirror:
            x = (w - 1) - x
        return float(x), float(y)

    def handle_pygame_event(self, event: pygame.event.Event, screen_size: Tuple[int, int]) -> None:
        w, h = screen_size

        # SDL also synthesizes mouse events from touches; fingers are handled below
        if getattr(event, "touch", False):
            return

        if event.type == pygame.MOUSEBUTTONDOWN:
            btn_name = _BTN_NAME.get(event.button)
            color = self.buttons.get(btn_name)
            if color:
                lx, ly = self._to_logical(*event.pos, w)
                self._points[f"mouse:{btn_name}"] = (color, lx, ly)

        elif event.type == pygame.MOUSEBUTTONUP:
            self._points.pop(f"mouse:{_BTN_NAME.get(event.button)}", None)

        elif event.type == pygame.MOUSEMOTION:
            lx, ly = self._to_logical(*event.pos, w)
            for key, (color, _, _) in list(self._points.items()):
                if key.startswith("mouse:"):
                    self._points[key] = (color, lx, ly)

        elif event.type in (pygame.FINGERDOWN, pygame.FINGERMOTION):
            if not self.touch_color:
                return
            # finger coordinates are normalized to 0..1
            lx, ly = self._to_logical(event.x * w, event.y * h, w)
            key = f"finger:{event.finger_id}"
            if event.type == pygame.FINGERDOWN or key in self._points:
                self._points[key] = (self.touch_color, lx, ly)

        elif event.type == pygame.FINGERUP:
            self._points.pop(f"finger:{event.finger_id}", None)

        elif event.type == pygame.WINDOWFOCUSLOST:
            if self._points:
                logger.debug("focus lost, dropping %d held pointer(s)", len(self._points))
            self._points.clear()

    @property
    def holding(self) -> bool:
        return bool(self._points)

    def emit_points(self) -> Dict[str, List[Point]]:
        """
        Return {color: [Point,...]} for the current frame.
        Only emits while held; no time-based persistence.
        """
        out: Dict[str, List[Point]] = {}
        for color, x, y in self._points.values():
            out.setdefault(color, []).append(Point(x, y, self.intensity))
        return out
