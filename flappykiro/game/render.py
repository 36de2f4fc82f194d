# flappykiro/game/render.py
from __future__ import annotations
import math
from typing import Dict, List, Optional, Sequence, Tuple

import pygame

from .config import (
    LEVELS, LEVEL_ORDER, LEVEL_BLURBS,
    BUTTON_W, BUTTON_H, BUTTON_START_Y, BUTTON_SPACING, BUTTON_COLORS,
    COLOR_SKY_TOP, COLOR_SKY_MID, COLOR_SKY_LOW, COLOR_SKY_BOTTOM,
    COLOR_SAND_LIGHT, COLOR_SAND_DEEP, COLOR_DUNE_LINE,
    COLOR_TOWER, COLOR_TOWER_EDGE, COLOR_TOWER_CAP, COLOR_PATTERN, COLOR_COLUMN,
    COLOR_GHOST, COLOR_OUTLINE, COLOR_AGAL, COLOR_KEFFIYEH,
    COLOR_FG, COLOR_ACCENT, COLOR_DETAIL, COLOR_DANGER, FPS,
)
from .session import Mode, Snapshot, ActorView

Color = Tuple[int, int, int]

STAR_COUNT = 80
PATTERN_SIZE = 16
CAP_H = 25
CHECK = 4


def level_button_rects(field_width: float) -> List[pygame.Rect]:
    """Vertical stack of level buttons, top to bottom = tier 1..3."""
    x = int((field_width - BUTTON_W) / 2)
    return [
        pygame.Rect(x, BUTTON_START_Y + i * BUTTON_SPACING, BUTTON_W, BUTTON_H)
        for i in range(len(LEVEL_ORDER))
    ]


def hit_test_level(pos: Tuple[int, int], field_width: float) -> Optional[int]:
    """1-based tier under the pointer, or None."""
    px, py = pos
    for i, r in enumerate(level_button_rects(field_width)):
        # inclusive edges, like the click areas of the web version
        if r.left <= px <= r.right and r.top <= py <= r.bottom:
            return i + 1
    return None


def _lerp_color(a: Color, b: Color, t: float) -> Color:
    return tuple(int(round(a[k] + (b[k] - a[k]) * t)) for k in range(3))  # type: ignore[return-value]


def vertical_gradient(size: Tuple[int, int], stops: Sequence[Tuple[float, Color]]) -> pygame.Surface:
    w, h = size
    surf = pygame.Surface((w, h))
    for y in range(h):
        f = y / max(1, h - 1)
        for (p0, c0), (p1, c1) in zip(stops, stops[1:]):
            if p0 <= f <= p1:
                t = (f - p0) / max(1e-9, p1 - p0)
                pygame.draw.line(surf, _lerp_color(c0, c1, t), (0, y), (w, y))
                break
    return surf


class GameRenderer:
    """Draws a Snapshot onto a pygame Surface. Never touches simulation state."""

    def __init__(self, surface: pygame.Surface):
        self.surface = surface
        pygame.font.init()
        self.fonts: Dict[str, pygame.font.Font] = {
            "title": pygame.font.SysFont("couriernew", 36, bold=True),
            "hud": pygame.font.SysFont("couriernew", 24, bold=True),
            "button": pygame.font.SysFont("couriernew", 20, bold=True),
            "body": pygame.font.SysFont("couriernew", 18),
            "hint": pygame.font.SysFont("couriernew", 16),
            "small": pygame.font.SysFont("couriernew", 12),
        }
        self._sky: Optional[pygame.Surface] = None

    # -------------------- Entry point --------------------

    def draw(self, snap: Snapshot):
        self._draw_background(snap)
        self._draw_towers(snap)
        self._draw_ghost(snap.actor)

        if snap.mode is Mode.PLAYING:
            self._draw_hud(snap)
        elif snap.mode is Mode.LEVEL_SELECT:
            self._draw_level_select(snap)
        elif snap.mode is Mode.WAITING:
            self._draw_start_prompt(snap)
        elif snap.mode is Mode.GAME_OVER:
            self._draw_game_over(snap)

    # -------------------- Scenery --------------------

    def _draw_background(self, snap: Snapshot):
        size = self.surface.get_size()
        if self._sky is None or self._sky.get_size() != size:
            self._sky = vertical_gradient(size, [
                (0.0, COLOR_SKY_TOP), (0.4, COLOR_SKY_MID),
                (0.7, COLOR_SKY_LOW), (1.0, COLOR_SKY_BOTTOM),
            ])
        self.surface.blit(self._sky, (0, 0))
        self._draw_stars(snap)
        self._draw_dunes(snap)

    def _draw_stars(self, snap: Snapshot):
        w, h = self.surface.get_size()
        layer = pygame.Surface((w, h), pygame.SRCALPHA)
        t = snap.tick / FPS
        for i in range(STAR_COUNT):
            # fixed positions so the sky doesn't jump between frames
            x = (i * 123.456) % w
            y = (i * 78.901) % (h * 0.6)
            size = 0.5 + (i % 3) * 0.5
            twinkle = math.sin(t + i) * 0.3 + 0.7
            alpha = int(255 * 0.8 * twinkle * 0.6)
            pygame.draw.circle(layer, (255, 255, 255, alpha), (int(x), int(y)), max(1, round(size)))
        self.surface.blit(layer, (0, 0))

    def _draw_dunes(self, snap: Snapshot):
        w, h = self.surface.get_size()
        dunes_y = h - h * 0.15
        points = [(0, dunes_y + 20)]
        for x in range(0, w + 1, 50):
            wave = math.sin((x + snap.score * 2) * 0.01) * 15
            dune = math.sin(x * 0.005) * 12
            points.append((x, dunes_y + wave + dune))
        points += [(w, h), (0, h)]
        pygame.draw.polygon(self.surface, COLOR_SAND_LIGHT, points)
        pygame.draw.rect(self.surface, COLOR_SAND_DEEP, pygame.Rect(0, h - 8, w, 8))
        pygame.draw.lines(self.surface, COLOR_DUNE_LINE, True, points, 1)

    # -------------------- Towers --------------------

    def _draw_towers(self, snap: Snapshot):
        w = snap.obstacle_width
        for ob in snap.obstacles:
            top = pygame.Rect(int(ob.x), 0, int(w), int(ob.gap_top))
            bottom = pygame.Rect(int(ob.x), int(ob.gap_bottom), int(w),
                                 int(snap.field_height - ob.gap_bottom))
            for r in (top, bottom):
                pygame.draw.rect(self.surface, COLOR_TOWER, r)
                pygame.draw.rect(self.surface, COLOR_TOWER_EDGE, r, 3)

            pygame.draw.rect(self.surface, COLOR_TOWER_CAP,
                             pygame.Rect(int(ob.x) - 6, int(ob.gap_top) - CAP_H, int(w) + 12, CAP_H))
            pygame.draw.rect(self.surface, COLOR_TOWER_CAP,
                             pygame.Rect(int(ob.x) - 6, int(ob.gap_bottom), int(w) + 12, CAP_H))

            self._draw_pattern(top)
            self._draw_pattern(bottom)

    def _draw_pattern(self, r: pygame.Rect):
        """Eight-pointed stars on a 16 px grid plus three column lines."""
        px = r.left + 8
        while px + PATTERN_SIZE <= r.right - 8:
            py = r.top + 8
            while py + PATTERN_SIZE <= r.bottom - 8:
                cx, cy = px + PATTERN_SIZE / 2, py + PATTERN_SIZE / 2
                size = PATTERN_SIZE / 3
                star = []
                for i in range(8):
                    angle = i * math.pi / 4
                    radius = size if i % 2 == 0 else size * 0.6
                    star.append((cx + math.cos(angle) * radius, cy + math.sin(angle) * radius))
                pygame.draw.polygon(self.surface, COLOR_PATTERN, star, 1)
                pygame.draw.circle(self.surface, COLOR_PATTERN, (px + 2, py + 2), 1, 1)
                py += PATTERN_SIZE
            px += PATTERN_SIZE

        if r.height > 20:
            step = r.width / 4
            for i in range(1, 4):
                lx = int(r.left + step * i)
                pygame.draw.line(self.surface, COLOR_COLUMN, (lx, r.top + 10), (lx, r.bottom - 10), 1)

    # -------------------- Ghost --------------------

    def _draw_ghost(self, actor: ActorView):
        w, h = int(actor.width), int(actor.height)
        pad = 20
        sprite = pygame.Surface((w + 2 * pad, h + 2 * pad), pygame.SRCALPHA)
        cx, cy = sprite.get_width() / 2, sprite.get_height() / 2
        r = w / 2

        body = [(cx + r * math.cos(-math.pi * k / 16), cy + r * math.sin(-math.pi * k / 16))
                for k in range(17)]
        body.append((cx - w / 2, cy + h / 2 - 10))
        for i in range(5):
            body.append((cx - w / 2 + i * w / 4, cy + h / 2 + (-5 if i % 2 == 0 else 5)))
        pygame.draw.polygon(sprite, COLOR_GHOST, body)
        pygame.draw.polygon(sprite, COLOR_OUTLINE, body, 2)

        # eyes
        pygame.draw.ellipse(sprite, COLOR_OUTLINE, pygame.Rect(cx - 14, cy - 15, 12, 20))
        pygame.draw.ellipse(sprite, COLOR_OUTLINE, pygame.Rect(cx + 2, cy - 15, 12, 20))

        # keffiyeh: checkered cloth with two agal bands
        top = cy - h / 2
        for y in range(0, 25, CHECK):
            if 8 <= y < 14 or 18 <= y < 24:
                continue
            for x in range(0, w, CHECK):
                color = COLOR_KEFFIYEH if (x // CHECK + y // CHECK) % 2 == 0 else COLOR_GHOST
                sprite.fill(color, pygame.Rect(cx - w / 2 + x, top + y, CHECK, CHECK))
        for band_y in (8, 18):
            band = pygame.Rect(cx - w / 2 + 5, top + band_y, w - 10, 6)
            pygame.draw.rect(sprite, COLOR_AGAL, band)
            pygame.draw.rect(sprite, COLOR_OUTLINE, band, 1)

        for side in (-1, 1):
            edge = cx + side * w / 2
            drape = [(edge, top + 25), (edge + side * 15, cy + 5),
                     (edge + side * 10, cy + 20), (edge, cy + 15)]
            pygame.draw.polygon(sprite, COLOR_GHOST, drape)
            pygame.draw.polygon(sprite, COLOR_OUTLINE, drape, 1)

        rotated = pygame.transform.rotate(sprite, -math.degrees(actor.tilt))
        center = (actor.x + actor.width / 2, actor.y + actor.height / 2)
        self.surface.blit(rotated, rotated.get_rect(center=(int(center[0]), int(center[1]))))

    # -------------------- UI --------------------

    def _text(self, msg: str, font: str, color: Color, *, center=None, topleft=None, shadow=False):
        f = self.fonts[font]
        if shadow:
            s = f.render(msg, True, (0, 0, 0))
            rect = s.get_rect(center=center) if center else s.get_rect(topleft=topleft)
            self.surface.blit(s, rect.move(2, 2))
        surf = f.render(msg, True, color)
        rect = surf.get_rect(center=center) if center else surf.get_rect(topleft=topleft)
        self.surface.blit(surf, rect)

    def _overlay(self, alpha: int):
        veil = pygame.Surface(self.surface.get_size(), pygame.SRCALPHA)
        veil.fill((0, 0, 0, alpha))
        self.surface.blit(veil, (0, 0))

    def _draw_hud(self, snap: Snapshot):
        self._text(f"Score: {snap.score}", "hud", COLOR_FG, topleft=(20, 18), shadow=True)
        if snap.score > 0 or snap.best > 0:
            self._text(f"Best: {snap.best}", "small", COLOR_ACCENT, topleft=(20, 46))

    def _draw_level_select(self, snap: Snapshot):
        self._overlay(204)
        mid = snap.field_width / 2
        self._text("FLAPPY KIRO", "title", COLOR_FG, center=(mid, 70))
        self._text("Choose Your Difficulty Level", "body", COLOR_ACCENT, center=(mid, 110))

        for i, rect in enumerate(level_button_rects(snap.field_width)):
            profile = LEVELS[LEVEL_ORDER[i]]
            pygame.draw.rect(self.surface, BUTTON_COLORS[i], rect)
            pygame.draw.rect(self.surface, COLOR_ACCENT, rect, 2)
            self._text(profile.name, "button", COLOR_FG, center=(rect.centerx, rect.top + 22))
            detail = f"Gap: {profile.pipe_gap:g}px • Speed: {profile.game_speed:g}"
            self._text(detail, "small", COLOR_DETAIL, center=(rect.centerx, rect.top + 45))

        self._text("Press 1, 2, or 3 • Or click a level", "hint", COLOR_FG, center=(mid, 412))
        for k, blurb in enumerate(LEVEL_BLURBS):
            self._text(blurb, "small", COLOR_ACCENT, center=(mid, 445 + 20 * k))

    def _draw_start_prompt(self, snap: Snapshot):
        self._overlay(110)
        mid = (snap.field_width / 2, snap.field_height / 2)
        self._text(f"{snap.level_name} Level Selected!", "button", COLOR_FG,
                   center=(mid[0], mid[1] - 18), shadow=True)
        self._text("Press SPACE or click to start", "body", COLOR_ACCENT, center=(mid[0], mid[1] + 14))

    def _draw_game_over(self, snap: Snapshot):
        self._overlay(150)
        mx, my = snap.field_width / 2, snap.field_height / 2
        self._text("GAME OVER", "title", COLOR_DANGER, center=(mx, my - 40), shadow=True)
        self._text(f"Score: {snap.score}   Best: {snap.best}", "body", COLOR_FG, center=(mx, my + 5))
        self._text("Press SPACE or click to restart", "hint", COLOR_ACCENT, center=(mx, my + 35))
