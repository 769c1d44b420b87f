import numpy as np
from typing import List, Tuple, Optional, Callable, Union
from dataclasses import dataclass
import os

import bouncer as P
from bouncer.engine import CircleCollection, CollectionConfig

os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = '1'
import pygame


Color = Union[str, Tuple[int, int, int]]


def format_speed(multiplier: float) -> str:
    return f"{multiplier:.1f}×"


def format_canvas_size(width: float, height: float) -> str:
    return f"Canvas {int(round(width))}×{int(round(height))}"


@dataclass
class AppearanceConfig:
    """Pixels only — never touches circle state."""
    bg_color: Tuple[int, int, int] = P.BG_COLOR
    hud_color: Tuple[int, int, int] = P.HUD_COLOR
    line_width: int = P.LINE_WIDTH
    font_name: str = P.FONT_NAME
    font_size: int = P.FONT_SIZE
    show_hud: bool = True
    fps: int = P.FPS
    caption: str = 'Bouncing Circles'


def to_rgb(color: Color) -> Tuple[int, int, int]:
    if isinstance(color, str):
        if color in P.COLOR_RGB:
            return P.COLOR_RGB[color]
        c = pygame.Color(color)
        return c.r, c.g, c.b
    return tuple(color)


class PygameSurface:
    """RenderSurface backed by a pygame.Surface."""

    def __init__(self, surface: pygame.Surface,
                 config: Optional[AppearanceConfig] = None):
        self.surface = surface
        self.config = config or AppearanceConfig()
        self._font = None

    @property
    def font(self) -> pygame.font.Font:
        if self._font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font = pygame.font.SysFont(self.config.font_name, self.config.font_size)
        return self._font

    def clear(self, origin, width, height):
        rect = pygame.Rect(int(origin[0]), int(origin[1]), int(width), int(height))
        self.surface.fill(self.config.bg_color, rect)

    def draw_circle_outline(self, center, radius, color):
        px, py = int(round(center[0])), int(round(center[1]))
        pr = max(1, int(round(radius)))
        pygame.draw.circle(self.surface, to_rgb(color), (px, py), pr,
                           self.config.line_width)

    def draw_centered_text(self, text, center, color):
        image = self.font.render(str(text), True, to_rgb(color))
        rect = image.get_rect(center=(int(round(center[0])), int(round(center[1]))))
        self.surface.blit(image, rect)

    def to_array(self) -> np.ndarray:
        """Current pixels → (H, W, 3) uint8."""
        return pygame.surfarray.array3d(self.surface).transpose(1, 0, 2)


class FrameScheduler:
    """Calls a zero-argument callback once per frame at a fixed cadence."""

    def __init__(self, fps: int = P.FPS, max_frames: Optional[int] = None):
        self.fps = fps
        self.max_frames = max_frames
        self.frames = 0
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def stop(self):
        self._running = False

    def run(self, callback: Callable[[], None]) -> int:
        """
        Loop until stop() or max_frames. Returns frames run.

        Every call starts a fresh loop: stop() only ends a loop already in
        progress, so calling it before run() has no effect.
        """
        clock = pygame.time.Clock()
        self._running = True
        self.frames = 0
        while self._running:
            callback()
            self.frames += 1
            if self.max_frames is not None and self.frames >= self.max_frames:
                break
            clock.tick(self.fps)
        self._running = False
        return self.frames


class BouncerApp:
    """
    Interactive window around a CircleCollection.

    Keys:
      A / +            add a circle
      R / - / Bksp     remove the newest circle
      Space            reset to the default count
      Up / Down        speed multiplier ± SPEED_STEP
      [ / ]            shrink / grow the canvas by RESIZE_STEP (resets circles)
      Q / Esc          quit
    Dragging the window edge resizes the canvas the same way.
    """

    def __init__(self, collection: Optional[CircleCollection] = None,
                 config: Optional[AppearanceConfig] = None,
                 scheduler: Optional[FrameScheduler] = None):
        if collection is None:
            collection = CircleCollection(CollectionConfig(seed=P.SEED))
        self.collection = collection
        self.config = config or AppearanceConfig()
        self.scheduler = scheduler or FrameScheduler(self.config.fps)
        self.screen: Optional[pygame.Surface] = None
        self.surface: Optional[PygameSurface] = None
        self._display_initialized = False
        self.quit_requested = False

    @property
    def size(self) -> Tuple[int, int]:
        b = self.collection.boundary
        return int(round(b.width)), int(round(b.height))

    # User intents

    def add(self):
        return self.collection.add()

    def remove(self):
        return self.collection.remove()

    def reset(self):
        return self.collection.reset()

    def change_speed(self, delta: float) -> float:
        return self.collection.set_speed_multiplier(
            round(self.collection.speed_multiplier + delta, 2))

    def resize(self, width: float, height: float):
        boundary = self.collection.resize(width, height)
        if self._display_initialized:
            self._set_mode()
        return boundary

    def quit(self):
        self.quit_requested = True
        self.scheduler.stop()

    def handle_event(self, event: pygame.event.Event):
        if event.type == pygame.QUIT:
            self.quit()
        elif event.type == pygame.VIDEORESIZE:
            if (event.w, event.h) != self.size:
                self.resize(event.w, event.h)
        elif event.type == pygame.KEYDOWN:
            key = event.key
            if key in (pygame.K_q, pygame.K_ESCAPE):
                self.quit()
            elif key in (pygame.K_a, pygame.K_PLUS, pygame.K_KP_PLUS, pygame.K_EQUALS):
                self.add()
            elif key in (pygame.K_r, pygame.K_MINUS, pygame.K_KP_MINUS, pygame.K_BACKSPACE):
                self.remove()
            elif key == pygame.K_SPACE:
                self.reset()
            elif key == pygame.K_UP:
                self.change_speed(P.SPEED_STEP)
            elif key == pygame.K_DOWN:
                self.change_speed(-P.SPEED_STEP)
            elif key == pygame.K_LEFTBRACKET:
                w, h = self.size
                self.resize(w - P.RESIZE_STEP, h - P.RESIZE_STEP)
            elif key == pygame.K_RIGHTBRACKET:
                w, h = self.size
                self.resize(w + P.RESIZE_STEP, h + P.RESIZE_STEP)

    # Drawing

    def hud_lines(self) -> List[str]:
        b = self.collection.boundary
        return [
            f"Circles: {len(self.collection)}",
            f"Speed: {format_speed(self.collection.speed_multiplier)}",
            format_canvas_size(b.width, b.height),
        ]

    def draw_hud(self):
        font = self.surface.font
        y = 6
        for line in self.hud_lines():
            image = font.render(line, True, self.config.hud_color)
            self.screen.blit(image, (8, y))
            y += image.get_height() + 2

    def frame(self):
        """One scheduler callback: events → tick → HUD → flip."""
        for event in pygame.event.get():
            self.handle_event(event)
        if self.quit_requested:
            return
        self.collection.frame_tick(self.surface)
        if self.config.show_hud:
            self.draw_hud()
        pygame.display.flip()

    def capture(self) -> np.ndarray:
        """Current window pixels → (H, W, 3) uint8."""
        return self.surface.to_array()

    # Window lifecycle

    def _set_mode(self):
        self.screen = pygame.display.set_mode(self.size, pygame.RESIZABLE)
        self.surface = PygameSurface(self.screen, self.config)

    def open(self):
        if not self._display_initialized:
            pygame.init()
            self._display_initialized = True
        self._set_mode()
        pygame.display.set_caption(self.config.caption)

    def close(self):
        pygame.quit()
        self._display_initialized = False
        self.screen = None
        self.surface = None

    def run(self) -> int:
        """Open the window and run until quit. Returns frames shown."""
        self.quit_requested = False
        self.open()
        try:
            return self.scheduler.run(self.frame)
        finally:
            self.close()


def save_frames(frames: np.ndarray, path: str):
    """Save (T, H, W, 3) frames as individual PNGs."""
    os.makedirs(path, exist_ok=True)
    for t in range(len(frames)):
        surf = pygame.surfarray.make_surface(frames[t].transpose(1, 0, 2))
        pygame.image.save(surf, os.path.join(path, f'frame_{t:05d}.png'))
