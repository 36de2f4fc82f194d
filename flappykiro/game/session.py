# flappykiro/game/session.py
"""Game state machine: level select -> waiting -> playing -> game over."""
from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Tuple

from .actor import Actor
from .config import (
    WIDTH, HEIGHT, OBSTACLE_W, INITIAL_OBSTACLES, DEFAULT_SPEED, DEFAULT_LEVEL,
    DifficultyProfile, get_profile,
)
from .obstacles import ObstacleStream, ObstacleView, RandomSource
from .rules import ScoreTally, first_collision, score_if_passed

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    LEVEL_SELECT = "levelSelect"
    WAITING = "waiting"
    PLAYING = "playing"
    GAME_OVER = "gameOver"


class AudioFeedback(Protocol):
    """Fire-and-forget sound cues."""

    def on_flap(self) -> None: ...

    def on_terminal(self) -> None: ...


class HighScoreStore(Protocol):
    """Single-scalar persistence for the best score."""

    def load_high_score(self) -> int: ...

    def save_high_score(self, value: int) -> None: ...


@dataclass(frozen=True)
class ActorView:
    x: float
    y: float
    velocity: float
    width: float
    height: float
    tilt: float


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of one tick, handed to renderers and observers."""
    mode: Mode
    score: int
    best: int
    speed: float
    level_id: str
    level_name: str
    actor: ActorView
    obstacles: Tuple[ObstacleView, ...]
    field_width: float
    field_height: float
    obstacle_width: float
    distance: float
    tick: int
    death_cause: Optional[str]


class GameSession:
    """
    Owns every piece of mutable game state for one player.
    Collaborators (audio, store, rng) are injected; all optional.
    """
    def __init__(self,
                 field_width: float = WIDTH,
                 field_height: float = HEIGHT,
                 audio: Optional[AudioFeedback] = None,
                 store: Optional[HighScoreStore] = None,
                 rng: Optional[RandomSource] = None):
        self.field_width = field_width
        self.field_height = field_height
        self.audio = audio
        self.store = store

        self.actor = Actor()
        self.stream = ObstacleStream(field_height=field_height, rng=rng, width=OBSTACLE_W)
        self.mode = Mode.LEVEL_SELECT
        self.level_id = DEFAULT_LEVEL
        self.profile: DifficultyProfile = get_profile(DEFAULT_LEVEL)
        self.tally = ScoreTally(speed=DEFAULT_SPEED)
        self.distance = 0.0
        self.tick_count = 0
        self.death_cause: Optional[str] = None
        self.best = self._load_best()

    # -------------------- Derived state --------------------

    @property
    def score(self) -> int:
        return self.tally.score

    @property
    def speed(self) -> float:
        return self.tally.speed

    # -------------------- Transitions --------------------

    def select_profile(self, level_id: str) -> bool:
        """LEVEL_SELECT -> WAITING. Ignored in any other mode."""
        profile = get_profile(level_id)  # fail fast on unknown ids, whatever the mode
        if self.mode is not Mode.LEVEL_SELECT:
            return False
        self.level_id = level_id
        self.profile = profile
        # copy, never reference: the table entry stays untouched by play
        self.tally.speed = profile.game_speed
        self.tally.speed_increase = profile.speed_increase
        self.stream.gap_size = profile.pipe_gap
        self.mode = Mode.WAITING
        logger.info("level selected: %s", profile.name)
        return True

    def primary_action(self):
        if self.mode is Mode.WAITING:
            self.start_game()
        elif self.mode is Mode.PLAYING:
            self.flap()
        elif self.mode is Mode.GAME_OVER:
            self.reset_game()
        # LEVEL_SELECT: selection comes from select_profile only

    def start_game(self):
        self.mode = Mode.PLAYING
        self.death_cause = None
        self.actor.reset()
        self.stream.seed(self.field_width, self.profile.pipe_spacing, INITIAL_OBSTACLES)

    def flap(self):
        self.actor.impulse(self.profile.jump_power)
        self._cue("on_flap")

    def game_over(self, cause: str):
        self.mode = Mode.GAME_OVER
        self.death_cause = cause
        self._cue("on_terminal")
        stored = self._load_best()
        if self.score > stored:
            self._save_best(self.score)
            stored = self.score
        self.best = max(self.best, stored)
        logger.info("game over (%s): score=%d best=%d", cause, self.score, self.best)

    def reset_game(self):
        """GAME_OVER -> LEVEL_SELECT with everything back to initial values."""
        self.mode = Mode.LEVEL_SELECT
        self.actor.reset()
        self.stream.reset()
        self.level_id = DEFAULT_LEVEL
        self.profile = get_profile(DEFAULT_LEVEL)
        self.tally = ScoreTally(speed=DEFAULT_SPEED)
        self.distance = 0.0
        self.death_cause = None

    # -------------------- Per-tick update --------------------

    def update(self):
        """One simulation tick. Only PLAYING moves anything."""
        self.tick_count += 1
        if self.mode is not Mode.PLAYING:
            return

        self.actor.apply_gravity(self.profile.gravity)
        self.actor.integrate_position()

        speed = self.tally.speed
        self.stream.advance(speed)
        self.stream.retire_offscreen()
        self.stream.maybe_spawn(self.field_width, self.profile.pipe_spacing)
        self.distance += speed

        for obstacle in self.stream.obstacles:
            score_if_passed(self.actor, obstacle, self.stream.width, self.tally)

        cause = first_collision(self.actor, self.stream.obstacles,
                                self.stream.width, self.field_height)
        if cause is not None:
            self.game_over(cause)

    def snapshot(self) -> Snapshot:
        a = self.actor
        return Snapshot(
            mode=self.mode,
            score=self.score,
            best=max(self.best, self.score),
            speed=self.speed,
            level_id=self.level_id,
            level_name=self.profile.name,
            actor=ActorView(x=a.x, y=a.y, velocity=a.velocity,
                            width=a.width, height=a.height, tilt=a.tilt),
            obstacles=self.stream.snapshot(),
            field_width=self.field_width,
            field_height=self.field_height,
            obstacle_width=self.stream.width,
            distance=self.distance,
            tick=self.tick_count,
            death_cause=self.death_cause,
        )

    # -------------------- Collaborators --------------------

    def _cue(self, name: str):
        if self.audio is None:
            return
        try:
            getattr(self.audio, name)()
        except Exception as e:  # cosmetic only, never blocks the sim
            logger.debug("audio cue %s failed: %s", name, e)

    def _load_best(self) -> int:
        if self.store is None:
            return 0
        try:
            return int(self.store.load_high_score())
        except (OSError, ValueError, TypeError) as e:
            logger.warning("could not load high score: %s", e)
            return 0

    def _save_best(self, value: int):
        if self.store is None:
            return
        try:
            self.store.save_high_score(value)
        except (OSError, ValueError, TypeError) as e:
            logger.warning("could not save high score %d: %s", value, e)
