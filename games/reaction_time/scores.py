from __future__ import annotations
from typing import List, Optional, Tuple

import pygame

from engine.render.shapes import draw_button, draw_text, draw_text_centered

from .const import *
from .history import History, Trial


class ScoreBoard:
    """
    Scores tab: newest rows at the bottom, a delete box per row, the mean,
    and a "Clear all" button that asks before it empties the list.

    click() only reports what was hit; the caller applies it to the trial.
    """

    def __init__(self, area: pygame.Rect, visible_rows: int = DEFAULT_HISTORY_ROWS):
        self.area = area
        self.visible_rows = max(1, int(visible_rows))
        self.confirming = False

        self.list_top = area.top + 60
        btn_y = area.bottom - BUTTON_HEIGHT - EDGE_MARGIN
        self.clear_rect = pygame.Rect(area.right - BUTTON_WIDTH - EDGE_MARGIN, btn_y,
                                      BUTTON_WIDTH, BUTTON_HEIGHT)
        cx, cy = area.center
        self.prompt_rect = pygame.Rect(0, 0, 420, 170)
        self.prompt_rect.center = (cx, cy)
        self.yes_rect = pygame.Rect(0, 0, 140, BUTTON_HEIGHT)
        self.no_rect = pygame.Rect(0, 0, 140, BUTTON_HEIGHT)
        self.yes_rect.midbottom = (cx - 90, self.prompt_rect.bottom - 20)
        self.no_rect.midbottom = (cx + 90, self.prompt_rect.bottom - 20)

    # ---------- Layout ----------
    def rows(self, history: History) -> List[Tuple[Trial, pygame.Rect, pygame.Rect]]:
        """(trial, row rect, delete rect) for the rows currently on screen."""
        shown = list(history)[-self.visible_rows:]
        out = []
        x = self.area.left + EDGE_MARGIN
        w = self.area.width - 2 * EDGE_MARGIN
        for i, trial in enumerate(shown):
            row = pygame.Rect(x, self.list_top + i * ROW_HEIGHT, w, ROW_HEIGHT)
            delete = pygame.Rect(0, 0, DELETE_SIZE, DELETE_SIZE)
            delete.midright = (row.right - 8, row.centery)
            out.append((trial, row, delete))
        return out

    # ---------- Input ----------
    def click(self, pos: Tuple[int, int], history: History) -> Optional[Tuple]:
        """
        Returns one of ("delete", trial_id), ("ask_clear",), ("confirm_clear",),
        ("cancel_clear",) or None.
        """
        if self.confirming:
            if self.yes_rect.collidepoint(pos):
                return ("confirm_clear",)
            if self.no_rect.collidepoint(pos):
                return ("cancel_clear",)
            # modal: nothing behind the prompt is clickable
            return None

        if self.clear_rect.collidepoint(pos) and len(history):
            return ("ask_clear",)
        for trial, _, delete in self.rows(history):
            if delete.collidepoint(pos):
                return ("delete", trial.id)
        return None

    # ---------- Draw ----------
    def draw(self, surface: pygame.Surface, history: History) -> None:
        pygame.draw.rect(surface, SCORES_BG_COLOR, self.area)
        draw_text(surface, "List of reaction times (ms)",
                  (self.area.left + EDGE_MARGIN, self.area.top + 20), TAB_TEXT_COLOR, size=HUD_FONT_SIZE)

        rows = self.rows(history)
        if not rows:
            draw_text(surface, "No results yet", (self.area.left + EDGE_MARGIN, self.list_top + 8),
                      (150, 150, 150), size=ROW_FONT_SIZE)
        for i, (trial, row, delete) in enumerate(rows):
            pygame.draw.rect(surface, ROW_COLOR if i % 2 == 0 else ROW_ALT_COLOR, row)
            draw_text(surface, str(trial), (row.left + 10, row.top + 8), TAB_TEXT_COLOR, size=ROW_FONT_SIZE)
            pygame.draw.rect(surface, DELETE_COLOR, delete, width=2, border_radius=4)
            draw_text_centered(surface, "x", delete.center, DELETE_COLOR, size=ROW_FONT_SIZE)

        hidden = len(history) - len(rows)
        if hidden > 0:
            draw_text(surface, f"(+{hidden} older)",
                      (self.area.left + EDGE_MARGIN, self.list_top + len(rows) * ROW_HEIGHT + 6),
                      (150, 150, 150), size=ROW_FONT_SIZE)

        draw_text(surface, f"Average reaction time: {history.average()}ms",
                  (self.area.left + EDGE_MARGIN, self.clear_rect.top + 10), TAB_TEXT_COLOR, size=HUD_FONT_SIZE)
        draw_button(surface, self.clear_rect, "Clear all",
                    BUTTON_COLOR if len(history) else (90, 90, 90), size=HUD_FONT_SIZE)

        if self.confirming:
            self._draw_prompt(surface, len(history))

    def _draw_prompt(self, surface: pygame.Surface, count: int) -> None:
        pygame.draw.rect(surface, PROMPT_BG_COLOR, self.prompt_rect, border_radius=8)
        pygame.draw.rect(surface, BUTTON_COLOR, self.prompt_rect, width=2, border_radius=8)
        draw_text_centered(surface, f"Delete all {count} result(s)?",
                           (self.prompt_rect.centerx, self.prompt_rect.top + 45), TAB_TEXT_COLOR, size=HUD_FONT_SIZE)
        draw_button(surface, self.yes_rect, "Yes (Y)", DELETE_COLOR, size=ROW_FONT_SIZE)
        draw_button(surface, self.no_rect, "No (N)", BUTTON_COLOR, size=ROW_FONT_SIZE)
