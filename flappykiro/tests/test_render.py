# flappykiro/tests/test_render.py
import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame

from flappykiro.game.obstacles import Obstacle
from flappykiro.game.render import GameRenderer, hit_test_level, level_button_rects
from flappykiro.game.session import GameSession


class MidRng:
    def uniform(self, a, b):
        return (a + b) / 2


def test_button_layout_and_hit_test():
    rects = level_button_rects(800)
    assert [r.topleft for r in rects] == [(300, 150), (300, 230), (300, 310)]
    assert hit_test_level((400, 180), 800) == 1
    assert hit_test_level((300, 230), 800) == 2   # edges count
    assert hit_test_level((500, 370), 800) == 3
    assert hit_test_level((400, 220), 800) is None  # between buttons
    assert hit_test_level((100, 180), 800) is None


def test_every_mode_draws_without_a_window():
    surface = pygame.Surface((800, 500))
    renderer = GameRenderer(surface)
    s = GameSession(800, 500, rng=MidRng())
    renderer.draw(s.snapshot())                 # level select
    s.select_profile("expert")
    renderer.draw(s.snapshot())                 # waiting
    s.start_game()
    s.stream.obstacles.append(Obstacle(x=100, gap_top=150, gap_bottom=400))
    s.actor.velocity = -8
    s.update()
    renderer.draw(s.snapshot())                 # playing
    s.actor.y = 480
    s.update()
    renderer.draw(s.snapshot())                 # game over
    # veil darkens the sky but never to pure black
    assert surface.get_at((5, 5))[:3] != (0, 0, 0)


def test_renderer_does_not_mutate_state():
    s = GameSession(800, 500, rng=MidRng())
    s.select_profile("beginner")
    s.start_game()
    before = s.snapshot()
    GameRenderer(pygame.Surface((800, 500))).draw(before)
    assert s.snapshot() == before
