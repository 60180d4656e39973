import logging
from enum import Enum
from typing import Set, Tuple

import pygame

from engine.api import Game, FrameData
from engine.app.context import Context
from engine.render.shapes import draw_text, draw_text_centered

from .const import *
from .history import Trial
from .scores import ScoreBoard
from .trial import ReactionTrial, TrialListener, TrialState

logger = logging.getLogger(__name__)

START_TEXT = "Click to start"


class Tab(Enum):
    Play = 1
    Scores = 2


class ReactionTime(Game, TrialListener):
    def on_load(self, ctx: Context, manifest):
        self.ctx = ctx
        self.manifest = manifest
        self.w, self.h = ctx.screen_size
        self.mirror = ctx.cfg.mirror
        options = manifest.get("options", {})

        self.trial = ReactionTrial(ctx.scheduler, listener=self)

        self.tab = Tab.Play
        half = self.w // 2
        self.tab_rects = {
            Tab.Play: pygame.Rect(0, 0, half, TAB_BAR_HEIGHT),
            Tab.Scores: pygame.Rect(half, 0, self.w - half, TAB_BAR_HEIGHT),
        }
        body = pygame.Rect(0, TAB_BAR_HEIGHT, self.w, self.h - TAB_BAR_HEIGHT)
        self.pad_rect = body
        self.scores = ScoreBoard(body, options.get("history_rows", DEFAULT_HISTORY_ROWS))

        # what is currently holding the pad: "point" (pointer/laser), "key" (space)
        self.holders: Set[str] = set()
        self.status_text = START_TEXT
        self.pad_color = HOLD_COLOR

    # ---------- Trial outcomes ----------
    def on_state_changed(self, state: TrialState) -> None:
        if state == TrialState.ARMED:
            self.status_text = "HOLD..."
            self.pad_color = HOLD_COLOR
        elif state == TrialState.READY_TO_RELEASE:
            self.status_text = "RELEASE!"
            self.pad_color = CUE_COLOR

    def on_trial_recorded(self, trial: Trial) -> None:
        self.status_text = f"Time: {trial.elapsed_ms}ms"
        self.pad_color = CUE_COLOR

    def on_too_soon(self) -> None:
        self.status_text = "Too Soon!"
        self.pad_color = TOO_SOON_COLOR

    def on_history_cleared(self) -> None:
        self.scores.confirming = False

    # ---------- Helpers ----------
    def _to_logical(self, pos: Tuple[int, int]) -> Tuple[int, int]:
        x, y = pos
        if self.mirror:
            x = (self.w - 1) - x
        return x, y

    def _set_holding(self, source: str, held: bool) -> None:
        was_holding = bool(self.holders)
        if held:
            self.holders.add(source)
        else:
            self.holders.discard(source)

        if self.tab != Tab.Play:
            return
        if self.holders and not was_holding:
            self.trial.press()
        elif was_holding and not self.holders:
            self.trial.release()

    def _switch_tab(self, tab: Tab) -> None:
        if tab == self.tab:
            return
        if self.trial.state != TrialState.IDLE:
            self.trial.reset()
            self.status_text = START_TEXT
            self.pad_color = HOLD_COLOR
        self.holders.clear()
        self.scores.confirming = False
        self.tab = tab
        logger.debug("tab -> %s", tab.name)

    def _apply_scores_action(self, action) -> None:
        kind = action[0]
        if kind == "delete":
            self.trial.remove_trial(action[1])
        elif kind == "ask_clear":
            self.scores.confirming = True
        elif kind == "confirm_clear":
            self.trial.clear_history()
        elif kind == "cancel_clear":
            self.scores.confirming = False

    # ---------- Update ----------
    def on_update(self, dt_ms: float, frame: FrameData) -> None:
        if self.tab == Tab.Play:
            self._set_holding("point", frame.any_inside(tuple(self.pad_rect)))

    # ---------- Events ----------
    def on_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_TAB:
                self._switch_tab(Tab.Scores if self.tab == Tab.Play else Tab.Play)
            elif event.key == pygame.K_SPACE:
                self._set_holding("key", True)
            elif self.scores.confirming and event.key in (pygame.K_y, pygame.K_RETURN):
                self._apply_scores_action(("confirm_clear",))
            elif self.scores.confirming and event.key == pygame.K_n:
                self._apply_scores_action(("cancel_clear",))

        elif event.type == pygame.KEYUP and event.key == pygame.K_SPACE:
            self._set_holding("key", False)

        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            pos = self._to_logical(event.pos)
            for tab, rect in self.tab_rects.items():
                if rect.collidepoint(pos):
                    self._switch_tab(tab)
                    return
            if self.tab == Tab.Scores:
                action = self.scores.click(pos, self.trial.history)
                if action:
                    self._apply_scores_action(action)

        elif event.type == pygame.WINDOWFOCUSLOST:
            # the matching release will never arrive
            self.holders.clear()
            if self.trial.state != TrialState.IDLE:
                self.trial.reset()
                self.status_text = START_TEXT
                self.pad_color = HOLD_COLOR

    # ---------- Draw ----------
    def on_draw(self, surface: pygame.Surface) -> None:
        if self.tab == Tab.Play:
            pygame.draw.rect(surface, self.pad_color, self.pad_rect)
            draw_text_centered(surface, self.status_text, self.pad_rect.center,
                               TEXT_COLOR, size=STATUS_FONT_SIZE)
            if len(self.trial.history):
                draw_text(surface, f"Average: {self.trial.history.average()}ms",
                          (EDGE_MARGIN, self.h - 40), TEXT_COLOR, size=HUD_FONT_SIZE)
        else:
            self.scores.draw(surface, self.trial.history)

        self._draw_tabs(surface)

    def _draw_tabs(self, surface: pygame.Surface) -> None:
        labels = {Tab.Play: "Play", Tab.Scores: f"Scores ({len(self.trial.history)})"}
        for tab, rect in self.tab_rects.items():
            pygame.draw.rect(surface, TAB_ACTIVE_COLOR if tab == self.tab else TAB_BG_COLOR, rect)
            draw_text_centered(surface, labels[tab], rect.center, TAB_TEXT_COLOR, size=HUD_FONT_SIZE)

    def on_unload(self) -> None:
        self.trial.reset()


def get_game():
    return ReactionTime()
