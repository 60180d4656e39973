"""Tests for the reaction time game's input wiring (no rendering)."""

import pygame
import pytest

from conftest import FixedRandom
from engine.api import EngineConfig, FrameData, Point
from engine.app.context import Context
from games.reaction_time.const import CUE_COLOR, HOLD_COLOR, TOO_SOON_COLOR
from games.reaction_time.main import ReactionTime, Tab
from games.reaction_time.trial import TrialState

SCREEN = (800, 600)


def _key(kind, key):
    return pygame.event.Event(kind, key=key, mod=0, unicode="", scancode=0)


def _click(pos):
    return pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=pos)


@pytest.fixture
def make_game(scheduler):
    def make(mirror: bool = False, manifest=None) -> ReactionTime:
        ctx = Context(
            screen=None,
            clock=None,
            cfg=EngineConfig(screen_size=SCREEN, mirror=mirror),
            scheduler=scheduler,
            screen_size=SCREEN,
        )
        game = ReactionTime()
        game.on_load(ctx, manifest or {"options": {"history_rows": 3}})
        game.trial.rng = FixedRandom(1.0)
        return game
    return make


@pytest.fixture
def game(make_game) -> ReactionTime:
    return make_game()


def _frame(clock, *points) -> FrameData:
    return FrameData(timestamp=clock(), points_by_color={"pointer": [Point(x, y, 1.0) for x, y in points]})


def _play_with_space(game, clock, scheduler, reaction: float):
    game.on_event(_key(pygame.KEYDOWN, pygame.K_SPACE))
    clock.t = game.trial.cue_time
    scheduler.run_due()
    clock.advance(reaction)
    game.on_event(_key(pygame.KEYUP, pygame.K_SPACE))


class TestPlayTab:
    """Tests for holding and releasing the pad."""

    def test_initial_status(self, game) -> None:
        assert game.tab == Tab.Play
        assert game.status_text == "Click to start"
        assert game.pad_color == HOLD_COLOR

    def test_space_early_release_is_too_soon(self, game, clock) -> None:
        game.on_event(_key(pygame.KEYDOWN, pygame.K_SPACE))
        assert game.status_text == "HOLD..."

        clock.advance(0.3)
        game.on_event(_key(pygame.KEYUP, pygame.K_SPACE))

        assert game.status_text == "Too Soon!"
        assert game.pad_color == TOO_SOON_COLOR
        assert len(game.trial.history) == 0

    def test_pointer_hold_and_release(self, game, clock, scheduler) -> None:
        game.on_update(16, _frame(clock, (400, 300)))
        assert game.trial.state == TrialState.ARMED

        clock.t = game.trial.cue_time
        scheduler.run_due()
        assert game.status_text == "RELEASE!"
        assert game.pad_color == CUE_COLOR

        clock.advance(0.25)
        game.on_update(16, _frame(clock))

        assert game.status_text == "Time: 250ms"
        assert [t.elapsed_ms for t in game.trial.history] == [250]

    def test_point_in_tab_bar_does_not_press(self, game, clock) -> None:
        game.on_update(16, _frame(clock, (10, 10)))
        assert game.trial.state == TrialState.IDLE

    def test_two_sources_release_on_last(self, game, clock, scheduler) -> None:
        """Press on the first source, release only when every source lets go."""
        game.on_event(_key(pygame.KEYDOWN, pygame.K_SPACE))
        game.on_update(16, _frame(clock, (400, 300)))
        clock.t = game.trial.cue_time
        scheduler.run_due()

        game.on_event(_key(pygame.KEYUP, pygame.K_SPACE))
        assert game.trial.state == TrialState.READY_TO_RELEASE

        game.on_update(16, _frame(clock))
        assert len(game.trial.history) == 1

    def test_focus_loss_abandons_trial(self, game, scheduler) -> None:
        game.on_event(_key(pygame.KEYDOWN, pygame.K_SPACE))
        game.on_event(pygame.event.Event(pygame.WINDOWFOCUSLOST))

        assert game.trial.state == TrialState.IDLE
        assert game.status_text == "Click to start"
        assert len(scheduler) == 0


class TestTabs:
    """Tests for switching between Play and Scores."""

    def test_tab_key_toggles(self, game) -> None:
        game.on_event(_key(pygame.KEYDOWN, pygame.K_TAB))
        assert game.tab == Tab.Scores
        game.on_event(_key(pygame.KEYDOWN, pygame.K_TAB))
        assert game.tab == Tab.Play

    def test_click_tab_bar(self, game) -> None:
        game.on_event(_click(game.tab_rects[Tab.Scores].center))
        assert game.tab == Tab.Scores

    def test_mirrored_click(self, make_game) -> None:
        game = make_game(mirror=True)
        x, y = game.tab_rects[Tab.Scores].center
        game.on_event(_click((SCREEN[0] - 1 - x, y)))
        assert game.tab == Tab.Scores

    def test_leaving_play_resets_trial(self, game, scheduler) -> None:
        game.on_event(_key(pygame.KEYDOWN, pygame.K_SPACE))
        game.on_event(_key(pygame.KEYDOWN, pygame.K_TAB))

        assert game.trial.state == TrialState.IDLE
        assert len(scheduler) == 0
        assert "too_soon" not in game.status_text.lower()


class TestScoresTab:
    """Tests for per-item delete and confirmed clear."""

    def _scores_with(self, game, clock, scheduler, *reactions):
        for r in reactions:
            _play_with_space(game, clock, scheduler, r)
        game.on_event(_key(pygame.KEYDOWN, pygame.K_TAB))

    def test_rows_show_latest_only(self, game, clock, scheduler) -> None:
        self._scores_with(game, clock, scheduler, 0.1, 0.2, 0.3, 0.4)
        rows = game.scores.rows(game.trial.history)
        assert [t.elapsed_ms for t, _, _ in rows] == [200, 300, 400]

    def test_delete_row(self, game, clock, scheduler) -> None:
        self._scores_with(game, clock, scheduler, 0.1, 0.2)
        first, _, delete_rect = game.scores.rows(game.trial.history)[0]

        game.on_event(_click(delete_rect.center))

        assert [t.elapsed_ms for t in game.trial.history] == [200]
        assert game.trial.history.get(first.id) is None

    def test_clear_needs_confirmation(self, game, clock, scheduler) -> None:
        self._scores_with(game, clock, scheduler, 0.1, 0.2)

        game.on_event(_click(game.scores.clear_rect.center))
        assert game.scores.confirming
        assert len(game.trial.history) == 2

        game.on_event(_click(game.scores.yes_rect.center))
        assert len(game.trial.history) == 0
        assert not game.scores.confirming

    def test_clear_cancelled(self, game, clock, scheduler) -> None:
        self._scores_with(game, clock, scheduler, 0.1)

        game.on_event(_click(game.scores.clear_rect.center))
        game.on_event(_key(pygame.KEYDOWN, pygame.K_n))

        assert not game.scores.confirming
        assert len(game.trial.history) == 1

    def test_confirm_with_key(self, game, clock, scheduler) -> None:
        self._scores_with(game, clock, scheduler, 0.1)

        game.on_event(_click(game.scores.clear_rect.center))
        game.on_event(_key(pygame.KEYDOWN, pygame.K_y))

        assert len(game.trial.history) == 0

    def test_prompt_is_modal(self, game, clock, scheduler) -> None:
        self._scores_with(game, clock, scheduler, 0.1)
        _, _, delete_rect = game.scores.rows(game.trial.history)[0]

        game.on_event(_click(game.scores.clear_rect.center))
        assert game.scores.click(delete_rect.center, game.trial.history) is None

    def test_clear_disabled_when_empty(self, game) -> None:
        game.on_event(_key(pygame.KEYDOWN, pygame.K_TAB))
        game.on_event(_click(game.scores.clear_rect.center))
        assert not game.scores.confirming
