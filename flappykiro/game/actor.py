# flappykiro/game/actor.py
from __future__ import annotations
import pygame
from dataclasses import dataclass
from .config import ACTOR_X, ACTOR_START_Y, ACTOR_W, ACTOR_H, MAX_TILT

@dataclass
class Actor:
    """
    The ghost. x never changes during play; the world scrolls under it.
    Motion is integrated once per tick with no dt:
    - gravity is added to velocity every tick
    - an impulse *sets* velocity, it never stacks
    """
    x: float = float(ACTOR_X)
    y: float = float(ACTOR_START_Y)
    velocity: float = 0.0
    width: float = float(ACTOR_W)
    height: float = float(ACTOR_H)

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), int(self.y), int(self.width), int(self.height))

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def tilt(self) -> float:
        """Draw rotation in radians, nose up while rising."""
        return max(-MAX_TILT, min(MAX_TILT, self.velocity * 0.05))

    def apply_gravity(self, gravity: float):
        self.velocity += gravity

    def integrate_position(self):
        self.y += self.velocity

    def impulse(self, jump_power: float):
        """Absolute set: rapid taps reset velocity instead of accumulating."""
        self.velocity = jump_power

    def reset(self):
        self.y = float(ACTOR_START_Y)
        self.velocity = 0.0
