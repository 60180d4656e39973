from __future__ import annotations
import logging
from typing import Dict, List
import pygame

from engine.api.config import EngineConfig
from engine.api.frame_data import FrameData, Point
from engine.app.context import Context
from engine.app.loader import GAMES_DIR, load_game_manifest, load_game_module
from engine.app.scheduler import TickScheduler
from engine.input.pointer_input import PointerInput

logger = logging.getLogger(__name__)


def _merge(*sources: Dict[str, List[Point]]) -> Dict[str, List[Point]]:
    out: Dict[str, List[Point]] = {}
    for src in sources:
        for color, pts in src.items():
            out.setdefault(color, []).extend(pts)
    return out


class _LaserRig:
    """Camera + tracker + homography, only built when --camera is given."""

    def __init__(self, cfg: EngineConfig, manifest: dict):
        from engine.calib.homography import HomographyStore
        from engine.detect.spot_tracker import SpotTracker
        from engine.input.laser_input import LaserInput
        from engine.video.camera import Camera

        caps = manifest.get("input", {}).get("max_points_per_color", {"red": 1})
        self.camera = Camera(index=cfg.cam_index, fps=cfg.fps)
        self.tracker = SpotTracker(
            colors=[c for c, n in caps.items() if int(n) > 0] or ["red"],
            show_preview=cfg.show_preview)
        self.store = HomographyStore(profile_name=cfg.profile)
        H, corners_cam = self.store.load()
        if H is None:
            logger.warning("no calibration for profile %r; press C to calibrate", cfg.profile)
        self.tracker.set_corners_cam(corners_cam)
        self.input = LaserInput(max_points=caps, H=H, mirror=cfg.mirror)

    def open(self) -> bool:
        return self.camera.open()

    def calibrate(self, screen: pygame.Surface, screen_size) -> None:
        from engine.calib.homography import calibrate

        H, corners = calibrate(screen, screen_size, self.camera, self.tracker)
        if corners is not None:
            self.store.save(H, corners_cam=corners)
        self.tracker.set_corners_cam(corners)
        self.input.set_homography(H)

    def poll(self, screen_size) -> Dict[str, List[Point]]:
        ok, frame_bgr = self.camera.read()
        if not ok:
            return {}
        return self.input.map_and_select(self.tracker.detect(frame_bgr), screen_size)

    def close(self) -> None:
        self.camera.close()
        self.tracker.teardown()


def run_game(
    game_id: str,
    screen_size: tuple[int, int],
    fps: int = 60,
    use_camera: bool = False,
    cam_index: int = 0,
    profile: str = "default",
    show_preview: bool = False,
    mirror: bool = False,
):
    cfg = EngineConfig(
        screen_size=screen_size,
        fps=fps,
        use_camera=use_camera,
        cam_index=cam_index,
        profile=profile,
        show_preview=show_preview,
        mirror=mirror,
    )

    # load game before opening any window so a bad id fails fast
    game_root = GAMES_DIR / game_id
    manifest = load_game_manifest(game_root)
    module = load_game_module(game_root)
    game = module.get_game()

    pygame.init()
    pygame.display.set_caption(manifest.get("name", game_id))
    screen = pygame.display.set_mode(screen_size)
    clock = pygame.time.Clock()
    scheduler = TickScheduler()

    laser = None
    if use_camera:
        laser = _LaserRig(cfg, manifest)
        if not laser.open():
            pygame.quit()
            return

    pointer = PointerInput(manifest.get("input", {}).get("pointer"), mirror=mirror)

    # Render target: draw to off-screen if mirroring, otherwise draw directly to screen
    render_surface = screen if not mirror else pygame.Surface(screen_size).convert()

    ctx = Context(
        screen=render_surface,
        clock=clock,
        cfg=cfg,
        scheduler=scheduler,
        screen_size=screen_size,
    )

    game.on_load(ctx, manifest)
    logger.info("running %s at %dx%d", game_id, *screen_size)

    running = True
    try:
        while running:
            dt = clock.tick(fps)

            # timers first, so a cue that is due is visible to this frame's input
            scheduler.run_due()

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_c and laser:
                    laser.calibrate(screen, screen_size)
                pointer.handle_pygame_event(event, screen_size)
                game.on_event(event)

            laser_points = laser.poll(screen_size) if laser else {}
            frame_data = FrameData(timestamp=scheduler.now(),
                                   points_by_color=_merge(pointer.emit_points(), laser_points))

            render_surface.fill((12, 14, 18))
            game.on_update(dt, frame_data)
            game.on_draw(render_surface)

            if mirror:
                screen.blit(pygame.transform.flip(render_surface, True, False), (0, 0))

            pygame.display.flip()

    finally:
        game.on_unload()
        scheduler.clear()
        if laser:
            laser.close()
        pygame.quit()
