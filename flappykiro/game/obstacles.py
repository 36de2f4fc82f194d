# flappykiro/game/obstacles.py
from __future__ import annotations
import random
from dataclasses import dataclass
from typing import List, Optional, Protocol, Tuple
from .config import HEIGHT, OBSTACLE_W, GAP_MARGIN, INITIAL_OBSTACLES


class RandomSource(Protocol):
    """Anything with uniform(a, b): random.Random or numpy.random.Generator."""

    def uniform(self, a: float, b: float) -> float: ...


def make_rng(seed: int | None) -> Tuple[random.Random, int]:
    """Resolve a seed the same way for every caller. None -> fresh random seed."""
    if seed is None:
        seed = random.randrange(0, 2**32 - 1)
    return random.Random(seed), seed


@dataclass
class Obstacle:
    """A tower pair: solid above gap_top and below gap_bottom."""
    x: float
    gap_top: float
    gap_bottom: float
    passed: bool = False

    def right(self, width: float) -> float:
        return self.x + width


@dataclass(frozen=True)
class ObstacleView:
    x: float
    gap_top: float
    gap_bottom: float
    passed: bool


class ObstacleStream:
    """
    Endless stream of towers scrolling left.
    Entries are kept in insertion order, which is also spatial order:
    the newest (rearmost, largest x) obstacle is always last.
    """
    def __init__(self,
                 field_height: float = HEIGHT,
                 rng: Optional[RandomSource] = None,
                 width: float = OBSTACLE_W,
                 gap_size: float = 200.0):
        self.field_height = field_height
        self.width = width
        self.gap_size = gap_size
        self.rng: RandomSource = rng if rng is not None else random.Random()
        self.obstacles: List[Obstacle] = []

    def __len__(self) -> int:
        return len(self.obstacles)

    @property
    def rearmost(self) -> Optional[Obstacle]:
        return self.obstacles[-1] if self.obstacles else None

    def reset(self):
        self.obstacles = []

    def seed(self, field_width: float, spacing: float, count: int = INITIAL_OBSTACLES):
        """Clear, then line up `count` towers starting at the right edge."""
        self.reset()
        for i in range(count):
            self._add(field_width + i * spacing)

    def advance(self, speed: float):
        for obstacle in self.obstacles:
            obstacle.x -= speed

    def retire_offscreen(self):
        # Retain-filter: survivors keep their order, no removal while iterating
        self.obstacles = [o for o in self.obstacles if not o.right(self.width) < 0]

    def maybe_spawn(self, field_width: float, spacing: float) -> bool:
        last = self.rearmost
        if last is not None and last.x < field_width - spacing:
            self._add(field_width)
            return True
        return False

    def generate_gap(self, field_height: float, gap_size: float) -> float:
        """Uniform gap top in [margin, field_height - gap_size - margin]."""
        lo = GAP_MARGIN
        hi = field_height - gap_size - GAP_MARGIN
        return float(self.rng.uniform(lo, hi))

    def _add(self, x: float) -> Obstacle:
        top = self.generate_gap(self.field_height, self.gap_size)
        obstacle = Obstacle(x=float(x), gap_top=top, gap_bottom=top + self.gap_size)
        self.obstacles.append(obstacle)
        return obstacle

    def snapshot(self) -> Tuple[ObstacleView, ...]:
        return tuple(
            ObstacleView(x=o.x, gap_top=o.gap_top, gap_bottom=o.gap_bottom, passed=o.passed)
            for o in self.obstacles
        )
