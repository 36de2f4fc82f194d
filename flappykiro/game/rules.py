# flappykiro/game/rules.py
"""Collision tests and scoring. Pure functions over actor/obstacle state."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional
from .actor import Actor
from .obstacles import Obstacle
from .config import DEFAULT_SPEED, SPEED_STEP_EVERY


@dataclass
class ScoreTally:
    """Score plus the speed it drives. Speed only ever goes up."""
    score: int = 0
    speed: float = DEFAULT_SPEED
    speed_increase: float = 0.0
    every: int = SPEED_STEP_EVERY

    def add_point(self) -> bool:
        """+1 point. Returns True when this point crossed a speed threshold."""
        self.score += 1
        if self.score % self.every == 0:
            self.speed += self.speed_increase
            return True
        return False


def check_bounds(actor: Actor, field_height: float) -> bool:
    """Floor and ceiling are both lethal."""
    return actor.y + actor.height > field_height or actor.y < 0


def overlaps_column(actor: Actor, obstacle: Obstacle, obstacle_width: float) -> bool:
    return actor.x < obstacle.x + obstacle_width and actor.x + actor.width > obstacle.x


def check_obstacle(actor: Actor, obstacle: Obstacle, obstacle_width: float) -> bool:
    if not overlaps_column(actor, obstacle, obstacle_width):
        return False
    return actor.y < obstacle.gap_top or actor.y + actor.height > obstacle.gap_bottom


def score_if_passed(actor: Actor, obstacle: Obstacle, obstacle_width: float,
                    tally: ScoreTally) -> bool:
    """Award one point the first time an obstacle's right edge is behind the actor."""
    if obstacle.passed or not (obstacle.x + obstacle_width < actor.x):
        return False
    obstacle.passed = True
    tally.add_point()
    return True


def first_collision(actor: Actor, obstacles: Iterable[Obstacle], obstacle_width: float,
                    field_height: float) -> Optional[str]:
    """Return the death cause ("bounds" | "obstacle") or None."""
    if check_bounds(actor, field_height):
        return "bounds"
    for obstacle in obstacles:
        if check_obstacle(actor, obstacle, obstacle_width):
            return "obstacle"
    return None
