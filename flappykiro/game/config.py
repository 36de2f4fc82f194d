# flappykiro/game/config.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Tuple

# --- Display ---
WIDTH = 800
HEIGHT = 500
FPS = 60

# --- Actor ---
ACTOR_X = 150               # actor's fixed x (world scrolls left)
ACTOR_START_Y = 300
ACTOR_W = 60
ACTOR_H = 60
MAX_TILT = 0.5              # draw rotation clamp (radians)

# --- Obstacles ---
OBSTACLE_W = 80
GAP_MARGIN = 100            # min distance between gap and field edge
INITIAL_OBSTACLES = 3

# --- Scoring / speed ---
DEFAULT_SPEED = 2.0         # active speed before a profile is applied
SPEED_STEP_EVERY = 5        # points between speed increases

# --- Persistence ---
HIGH_SCORE_KEY = "flappyKiroHighScore"
HIGH_SCORE_FILE = "flappy_kiro_highscore.json"

# --- Level select layout (shared by renderer and click hit-test) ---
BUTTON_W = 200
BUTTON_H = 60
BUTTON_START_Y = 150
BUTTON_SPACING = 80

# --- Colors (RGB) ---
COLOR_SKY_TOP = (42, 27, 61)
COLOR_SKY_MID = (74, 59, 93)
COLOR_SKY_LOW = (139, 122, 90)
COLOR_SKY_BOTTOM = (203, 178, 121)
COLOR_SAND_LIGHT = (244, 228, 188)
COLOR_SAND_DEEP = (193, 154, 107)
COLOR_DUNE_LINE = (222, 184, 135)
COLOR_TOWER = (139, 115, 85)
COLOR_TOWER_EDGE = (93, 78, 55)
COLOR_TOWER_CAP = (107, 91, 71)
COLOR_PATTERN = (74, 55, 40)
COLOR_COLUMN = (61, 47, 31)
COLOR_GHOST = (255, 255, 255)
COLOR_OUTLINE = (0, 0, 0)
COLOR_AGAL = (44, 44, 44)
COLOR_KEFFIYEH = (220, 20, 60)
COLOR_FG = (255, 255, 255)
COLOR_ACCENT = (203, 178, 121)
COLOR_DETAIL = (230, 211, 163)
COLOR_DANGER = (255, 86, 110)
BUTTON_COLORS = ((139, 115, 85), (107, 91, 71), (74, 55, 40))


@dataclass(frozen=True)
class DifficultyProfile:
    """One row of the difficulty table. Copied into the session on selection."""

    gravity: float
    jump_power: float
    game_speed: float
    pipe_gap: float
    pipe_spacing: float
    speed_increase: float
    name: str


LEVELS: Dict[str, DifficultyProfile] = {
    "beginner": DifficultyProfile(
        gravity=0.3, jump_power=-8.0, game_speed=1.5,
        pipe_gap=220.0, pipe_spacing=350.0, speed_increase=0.1, name="Beginner",
    ),
    "intermediate": DifficultyProfile(
        gravity=0.5, jump_power=-10.0, game_speed=2.0,
        pipe_gap=200.0, pipe_spacing=300.0, speed_increase=0.2, name="Intermediate",
    ),
    "expert": DifficultyProfile(
        gravity=0.7, jump_power=-12.0, game_speed=2.5,
        pipe_gap=180.0, pipe_spacing=250.0, speed_increase=0.3, name="Expert",
    ),
}

# Tier digits 1/2/3 map onto this order
LEVEL_ORDER: Tuple[str, ...] = ("beginner", "intermediate", "expert")
DEFAULT_LEVEL = "beginner"

LEVEL_BLURBS = (
    "Beginner: Large gaps, gentle physics",
    "Intermediate: Balanced gameplay",
    "Expert: Tight gaps, fast & challenging",
)


def get_profile(level_id: str) -> DifficultyProfile:
    """Plain lookup; an unknown id raises KeyError."""
    return LEVELS[level_id]


def profile_for_tier(tier: int) -> str:
    """Map a 1-based tier digit onto a level id."""
    if not 1 <= tier <= len(LEVEL_ORDER):
        raise ValueError(f"tier must be 1..{len(LEVEL_ORDER)}, got {tier}")
    return LEVEL_ORDER[tier - 1]
