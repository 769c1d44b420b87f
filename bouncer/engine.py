"""
2D bouncing-circles engine — labeled circles in a resizable rectangle.

- Circles move independently (they pass through each other)
- Elastic axis-aligned wall reflection only
- State per circle: (x, y, vx, vy, radius) + color and label
"""

import numpy as np
from dataclasses import dataclass, field, InitVar
from typing import List, Tuple, Optional, Dict, Iterator, Union, Protocol

import bouncer as P


Label = Union[str, int]
Point = Tuple[float, float]


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def random_sign(rng: np.random.RandomState) -> int:
    return -1 if rng.rand() < 0.5 else 1


class RenderSurface(Protocol):
    """What a circle needs from whatever it draws on."""

    def clear(self, origin: Point, width: float, height: float) -> None: ...

    def draw_circle_outline(self, center: Point, radius: float, color: str) -> None: ...

    def draw_centered_text(self, text: str, center: Point, color: str) -> None: ...


class NullSurface:
    """Draws nothing. Lets the engine run headless."""

    def clear(self, origin, width, height):
        pass

    def draw_circle_outline(self, center, radius, color):
        pass

    def draw_centered_text(self, text, center, color):
        pass


@dataclass
class Boundary:
    width: float = P.CANVAS_WIDTH
    height: float = P.CANVAS_HEIGHT


@dataclass
class Circle:
    """A moving circle. Velocity signs are drawn at construction."""
    x: float
    y: float
    radius: float
    color: str
    label: Label
    speed: float
    rng: InitVar[Optional[np.random.RandomState]] = None
    vx: float = field(init=False)
    vy: float = field(init=False)

    def __post_init__(self, rng: Optional[np.random.RandomState]):
        if rng is None:
            rng = np.random.RandomState()
        self.vx = random_sign(rng) * self.speed
        self.vy = random_sign(rng) * self.speed

    @property
    def state(self) -> np.ndarray:
        return np.array([self.x, self.y, self.vx, self.vy])

    @property
    def full_state(self) -> np.ndarray:
        return np.array([self.x, self.y, self.vx, self.vy, self.radius])

    def draw(self, surface: RenderSurface):
        center = (self.x, self.y)
        surface.draw_centered_text(str(self.label), center, self.color)
        surface.draw_circle_outline(center, self.radius, self.color)

    def update(self, surface: Optional[RenderSurface], boundary: Boundary,
               speed_multiplier: float):
        """
        One frame: draw → wall check (x, then y) → advance → confine.

        A circle that runs into a wall during the advance is reflected off it
        in the same frame, so it never ends a frame outside the rectangle.
        """
        if surface is not None:
            self.draw(surface)

        r = self.radius
        if self.x + r > boundary.width or self.x - r < 0:
            self.vx = -self.vx
            self.x = clamp(self.x, r, boundary.width - r)

        if self.y + r > boundary.height or self.y - r < 0:
            self.vy = -self.vy
            self.y = clamp(self.y, r, boundary.height - r)

        self.x += self.vx * speed_multiplier
        self.y += self.vy * speed_multiplier

        self._confine(boundary)

    def _confine(self, boundary: Boundary):
        """Mirror any overshoot back inside and point the velocity inward."""
        r = self.radius
        if self.x - r < 0:
            self.x = 2 * r - self.x
            self.vx = abs(self.vx)
        elif self.x + r > boundary.width:
            self.x = 2 * (boundary.width - r) - self.x
            self.vx = -abs(self.vx)
        if self.y - r < 0:
            self.y = 2 * r - self.y
            self.vy = abs(self.vy)
        elif self.y + r > boundary.height:
            self.y = 2 * (boundary.height - r) - self.y
            self.vy = -abs(self.vy)
        self.x = clamp(self.x, r, boundary.width - r)
        self.y = clamp(self.y, r, boundary.height - r)


@dataclass
class CollectionConfig:
    width: float = P.CANVAS_WIDTH
    height: float = P.CANVAS_HEIGHT
    n_circles: int = P.N_CIRCLES
    margin: float = P.MARGIN
    radius_range: Tuple[int, int] = P.RADIUS_RANGE
    speed_range: Tuple[float, float] = P.SPEED_RANGE
    palette: Tuple[str, ...] = P.PALETTE
    size_limits: Tuple[int, int] = (P.MIN_CANVAS_SIZE, P.MAX_CANVAS_SIZE)
    speed_multiplier: float = P.SPEED_MULTIPLIER
    speed_multiplier_range: Tuple[float, float] = P.SPEED_MULTIPLIER_RANGE
    seed: Optional[int] = None

    def __post_init__(self):
        if not self.palette:
            raise ValueError("palette must hold at least one color")
        if self.n_circles <= 0:
            raise ValueError(f"n_circles must be positive, got {self.n_circles}")


class CircleCollection:
    """
    Owns the circles, the boundary and the speed multiplier.

    Circles are kept in insertion order: it decides palette color, default
    labels and draw layering. Removal always pops the newest circle.
    """

    def __init__(self, config: Optional[CollectionConfig] = None,
                 rng: Optional[np.random.RandomState] = None):
        self.config = config or CollectionConfig()
        self.rng = rng if rng is not None else np.random.RandomState(self.config.seed)
        self.boundary = Boundary(self.config.width, self.config.height)
        self.speed_multiplier: float = 1.0
        self.set_speed_multiplier(self.config.speed_multiplier)
        self.circles: List[Circle] = []
        self.reset()

    def __len__(self) -> int:
        return len(self.circles)

    def __iter__(self) -> Iterator[Circle]:
        return iter(self.circles)

    def create_random(self, label: Optional[Label] = None) -> Circle:
        """
        Build (but do not insert) a randomized circle for the current boundary.

        Centers are drawn inside the margin inset, then pulled in far enough
        that circles wider than the margin still start fully inside.
        """
        cfg = self.config
        n = len(self.circles)
        radius = int(self.rng.randint(*cfg.radius_range))
        x = self.rng.uniform(cfg.margin, self.boundary.width - cfg.margin)
        y = self.rng.uniform(cfg.margin, self.boundary.height - cfg.margin)
        x = clamp(x, radius, self.boundary.width - radius)
        y = clamp(y, radius, self.boundary.height - radius)
        color = cfg.palette[n % len(cfg.palette)]
        if label is None:
            label = n + 1
        speed = self.rng.uniform(*cfg.speed_range)
        return Circle(x=x, y=y, radius=radius, color=color, label=label,
                      speed=speed, rng=self.rng)

    def reset(self) -> List[Circle]:
        self.circles = []
        for i in range(self.config.n_circles):
            self.circles.append(self.create_random(i + 1))
        return self.circles

    def add(self) -> Circle:
        circle = self.create_random()
        self.circles.append(circle)
        return circle

    def remove(self) -> Optional[Circle]:
        if not self.circles:
            return None
        return self.circles.pop()

    def frame_tick(self, surface: Optional[RenderSurface] = None):
        if surface is not None:
            surface.clear((0, 0), self.boundary.width, self.boundary.height)
        for circle in self.circles:
            circle.update(surface, self.boundary, self.speed_multiplier)

    def resize(self, width: float, height: float) -> Boundary:
        low, high = self.config.size_limits
        self.boundary.width = clamp(width, low, high)
        self.boundary.height = clamp(height, low, high)
        self.reset()
        return self.boundary

    def set_speed_multiplier(self, value: float) -> float:
        self.speed_multiplier = clamp(float(value), *self.config.speed_multiplier_range)
        return self.speed_multiplier

    # State access

    def colors(self) -> List[str]:
        return [c.color for c in self.circles]

    def labels(self) -> List[Label]:
        return [c.label for c in self.circles]

    def get_state(self) -> np.ndarray:
        """(n_circles, 4) → [x, y, vx, vy]"""
        return np.array([c.state for c in self.circles]).reshape(-1, 4)

    def get_full_state(self) -> np.ndarray:
        """(n_circles, 5) → [x, y, vx, vy, radius]"""
        return np.array([c.full_state for c in self.circles]).reshape(-1, 5)


def generate_trajectory(config: Optional[CollectionConfig] = None,
                        n_ticks: int = 100,
                        speed_multiplier: Optional[float] = None) -> Dict:
    """Headless run. Returns dict with states (T+1, n, 4), radii, width, height."""
    collection = CircleCollection(config)
    if speed_multiplier is not None:
        collection.set_speed_multiplier(speed_multiplier)
    surface = NullSurface()

    states = [collection.get_state()]
    for _ in range(n_ticks):
        collection.frame_tick(surface)
        states.append(collection.get_state())

    return {
        'states': np.array(states),
        'radii': collection.get_full_state()[:, 4],
        'width': collection.boundary.width,
        'height': collection.boundary.height,
        'config': collection.config,
    }
