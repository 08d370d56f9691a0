#!/usr/bin/env python3
"""
ModernGL Virtual Tour - Main Entry Point

Loads the tour scene in the background, then flies the camera between
points of interest.
"""

import asyncio
import logging
import threading

import moderngl
import moderngl_window as mglw

from tourlib import (
    # Configuration
    WINDOW_SIZE, ASPECT_RATIO, GL_VERSION, WINDOW_TITLE, RESIZABLE,
    # Tour
    VirtualTour, TourState, ResourceLoader, Transport, load_tour_config,
    # UI state
    LoadingIndicator, PoiOverlay,
)
from tourlib.rendering import TourRenderer


logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Per-request lines from the HTTP stack drown out load progress
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


class TourWindow(mglw.WindowConfig):
    """Main viewer window"""

    gl_version = GL_VERSION
    title = WINDOW_TITLE
    window_size = WINDOW_SIZE
    aspect_ratio = ASPECT_RATIO
    resizable = RESIZABLE

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

        self.ctx.enable(moderngl.DEPTH_TEST)

        self.config = load_tour_config()
        self.registry = self.config.registry()
        self.loader = ResourceLoader(Transport())

        self.tour = VirtualTour(
            self.loader,
            self.registry,
            self.config.model_resource,
            establishing_pose=self.config.establishing_pose,
        )
        self.tour.camera.set_aspect_ratio(self.wnd.aspect_ratio)

        # Overlay state
        self.loading = LoadingIndicator()
        self.loader.set_progress_callback(self.loading.on_progress)
        self.tour.register_state_change_callback(self.loading.on_tour_state_changed)
        self.overlay = PoiOverlay(self.registry, self.tour.navigation)

        self.renderer = TourRenderer(self.ctx)
        self._caption = ""

        # Resolution happens off the render thread; READY is observed by tick()
        self._load_thread = threading.Thread(
            target=self._run_loading, name="tour-loader", daemon=True
        )
        self._load_thread.start()

    def _run_loading(self) -> None:
        asyncio.run(self._load())

    async def _load(self) -> None:
        # The HTTP client is bound to this event loop; close it here
        try:
            await self.tour.start(self.config.resources)
        finally:
            await self.loader.aclose()

    def _update_caption(self) -> None:
        if self.loading.visible:
            caption = f"{WINDOW_TITLE} - {self.loading.message}"
        else:
            card = self.overlay.visible_card
            caption = f"{WINDOW_TITLE} - {card.label}: {card.text}" if card else WINDOW_TITLE

        if caption != self._caption:
            self._caption = caption
            self.wnd.title = caption

    def on_render(self, time, frametime):
        """Render one frame"""
        self.tour.tick(delta_time=frametime)

        model_node = self.tour.model_node if self.tour.state == TourState.READY else None
        self.renderer.render(
            self.tour.camera,
            model_node,
            self.tour.anchors,
            self.tour.navigation.active_poi_id,
        )
        self._update_caption()

    def on_resize(self, width: int, height: int):
        if height > 0:
            self.tour.camera.set_aspect_ratio(width / height)

    def on_mouse_drag_event(self, x: int, y: int, dx: int, dy: int):
        if self.tour.is_ready:
            self.tour.rig.apply_look_input(dx, dy)

    def on_mouse_scroll_event(self, x_offset: float, y_offset: float):
        if self.tour.is_ready:
            self.tour.rig.zoom(y_offset)

    def on_key_event(self, key, action, modifiers):
        keys = self.wnd.keys

        if action != keys.ACTION_PRESS or not self.tour.is_ready:
            return

        if key == keys.ESCAPE:
            self.tour.navigation.deactivate_all()
            return

        # Number keys stand in for the overlay buttons
        number_keys = [
            keys.NUMBER_1, keys.NUMBER_2, keys.NUMBER_3,
            keys.NUMBER_4, keys.NUMBER_5, keys.NUMBER_6,
            keys.NUMBER_7, keys.NUMBER_8, keys.NUMBER_9,
        ]
        if key in number_keys:
            index = number_keys.index(key)
            ids = self.registry.ids()
            if index < len(ids):
                self.tour.activate(ids[index])

    def on_close(self):
        self._load_thread.join(timeout=1.0)
        self.renderer.release()
        self.loader.dispose()


if __name__ == '__main__':
    configure_logging()
    TourWindow.run()
