# flappykiro/env/flappy_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from flappykiro.game.config import WIDTH, HEIGHT, FPS, LEVEL_ORDER
from flappykiro.game.driver import FrameDriver
from flappykiro.game.ports import MemoryHighScoreStore
from flappykiro.game.render import GameRenderer
from flappykiro.game.session import GameSession, Mode, Snapshot
from flappykiro.env.observations import build_observation, OBS_LOW, OBS_HIGH


class FlappyEnv(gym.Env):
    """
    Flappy Kiro Gymnasium environment (vector observations).
    - One decision = `frame_skip` simulation ticks (default 1).
    - Actions: 0 = NOOP, 1 = FLAP (applied at the start of the decision).
    - Observation: shape (6,), float32, see env/observations.py.
    - Reward: +1 per surviving decision, +1 per obstacle passed, -1 on death.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 level: str = "beginner",
                 frame_skip: int = 1,
                 time_limit_seconds: Optional[float] = 60.0):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert level in LEVEL_ORDER, f"unknown level {level!r}"
        assert render_mode is None or render_mode in self.metadata["render_modes"]
        self.render_mode = render_mode
        self.level = level
        self.frame_skip = int(frame_skip)

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(FPS * time_limit_seconds / self.frame_skip)

        self.action_space = gym.spaces.Discrete(2)
        self.observation_space = gym.spaces.Box(low=OBS_LOW, high=OBS_HIGH, dtype=np.float32)

        # --- Runtime state ---
        self.session: Optional[GameSession] = None
        self.driver: Optional[FrameDriver] = None
        self.snapshot: Optional[Snapshot] = None
        self.store = MemoryHighScoreStore()
        self.timestep = 0

        # Rendering
        self.screen = None
        self.clock = None
        self.renderer = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)  # initializes self.np_random

        # Gap placement draws from the env's generator, so a seed fixes the towers
        self.session = GameSession(WIDTH, HEIGHT, store=self.store, rng=self.np_random)
        self.driver = FrameDriver(self.session)
        self.driver.push_select(LEVEL_ORDER.index(self.level) + 1)
        self.driver.push_primary()
        self.driver.drain_input()
        assert self.session.mode is Mode.PLAYING

        self.timestep = 0
        self.snapshot = self.session.snapshot()
        obs = build_observation(self.snapshot)
        info = {"score": 0, "distance": 0.0, "level": self.level}

        if self.render_mode == "human":
            self.render()
        return obs, info

    def step(self, action):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.session is not None and self.driver is not None
        assert self.session.mode is Mode.PLAYING, "step() called after termination; call reset()"

        score_before = self.session.score
        if int(action) == 1:
            self.driver.push_primary()

        for _ in range(self.frame_skip):
            self.snapshot = self.driver.tick()
            if self.snapshot.mode is not Mode.PLAYING:
                break

        snap = self.snapshot
        terminated = snap.mode is Mode.GAME_OVER
        passed = snap.score - score_before
        reward = -1.0 if terminated else 1.0 + float(passed)

        self.timestep += 1
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = not terminated

        obs = build_observation(snap)
        info = {
            "score": snap.score,
            "distance": snap.distance,
            "timestep": self.timestep,
            "speed": snap.speed,
            "death_cause": snap.death_cause,
        }

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.snapshot is None:
            return None

        if self.screen is None:
            pygame.init()
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
                pygame.display.set_caption("Flappy Kiro — Gym Env")
                self.clock = pygame.time.Clock()
            else:
                self.screen = pygame.Surface((WIDTH, HEIGHT))
            self.renderer = GameRenderer(self.screen)

        if self.render_mode == "human":
            # Pump the event queue so the OS doesn't think we're hung
            pygame.event.pump()

        self.renderer.draw(self.snapshot)

        if self.render_mode == "human":
            pygame.display.flip()
            self.clock.tick(self.metadata["render_fps"])
            return None

        # (H, W, 3) uint8
        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
            self.renderer = None
