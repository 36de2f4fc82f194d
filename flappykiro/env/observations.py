# flappykiro/env/observations.py
"""
Vector observation for agents.

Layout (float32, shape (6,)):
  [y_norm, vy_norm, dx_norm, gap_top_norm, gap_bottom_norm, speed_norm]
- y_norm:   actor top / (field_height - actor_height), clipped to [0, 1]
- vy_norm:  velocity / MAX_VY, clipped to [-1, 1]
- dx_norm:  distance from actor's left edge to the next obstacle's right edge / field_width
- gap_*:    next obstacle's gap edges / field_height (0 and 1 when nothing is ahead)
- speed:    active speed / MAX_SPEED
"""
from __future__ import annotations
from typing import Optional

import numpy as np

from flappykiro.game.obstacles import ObstacleView
from flappykiro.game.session import Snapshot

OBS_SIZE = 6
MAX_VY = 15.0
MAX_SPEED = 10.0

OBS_LOW = np.array([0.0, -1.0, 0.0, 0.0, 0.0, 0.0], dtype=np.float32)
OBS_HIGH = np.array([1.0, 1.0, 1.0, 1.0, 1.0, 1.0], dtype=np.float32)


def next_obstacle(snap: Snapshot) -> Optional[ObstacleView]:
    """First obstacle whose right edge is still ahead of the actor's left edge."""
    for ob in snap.obstacles:
        if ob.x + snap.obstacle_width >= snap.actor.x:
            return ob
    return None


def build_observation(snap: Snapshot) -> np.ndarray:
    a = snap.actor
    y_norm = a.y / max(1.0, snap.field_height - a.height)
    vy_norm = a.velocity / MAX_VY

    ob = next_obstacle(snap)
    if ob is None:
        dx_norm, top_norm, bot_norm = 1.0, 0.0, 1.0
    else:
        dx_norm = (ob.x + snap.obstacle_width - a.x) / max(1.0, snap.field_width)
        top_norm = ob.gap_top / snap.field_height
        bot_norm = ob.gap_bottom / snap.field_height

    obs = np.array([y_norm, vy_norm, dx_norm, top_norm, bot_norm, snap.speed / MAX_SPEED],
                   dtype=np.float32)
    return np.clip(obs, OBS_LOW, OBS_HIGH)
