# flappykiro/tests/test_game.py
"""
Host input mapping: pygame events -> queued logical input.

Usage (from repo root):
  python -m flappykiro.tests.test_game
"""
import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame

from flappykiro.game.driver import FrameDriver, PointerPress, PrimaryAction, SelectProfile
from flappykiro.game.game import parse_args, translate_event
from flappykiro.game.session import GameSession, Mode


class MidRng:
    def uniform(self, a, b):
        return (a + b) / 2


def make_driver() -> FrameDriver:
    return FrameDriver(GameSession(800, 500, rng=MidRng()))


def key(k):
    return pygame.event.Event(pygame.KEYDOWN, key=k)


def click(pos, button=1):
    return pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=pos, button=button)


def crashed_driver() -> FrameDriver:
    d = make_driver()
    d.push_select(1)
    d.push_primary()
    d.tick()
    d.session.actor.y = 460.0   # next tick pushes the bottom past the floor
    d.tick()
    assert d.session.mode is Mode.GAME_OVER
    return d


def test_space_and_digits_queue_logical_input():
    d = make_driver()
    assert translate_event(key(pygame.K_SPACE), d)
    assert translate_event(key(pygame.K_1), d)
    assert translate_event(key(pygame.K_2), d)
    assert translate_event(key(pygame.K_3), d)
    assert list(d.pending) == [PrimaryAction(), SelectProfile(1), SelectProfile(2), SelectProfile(3)]


def test_left_click_is_queued_with_its_position():
    d = make_driver()
    assert translate_event(click((400, 260)), d)
    assert list(d.pending) == [PointerPress((400, 260))]
    assert translate_event(click((400, 260), button=3), d)
    assert len(d.pending) == 1, "only the left button counts"


def test_unmapped_keys_are_ignored():
    d = make_driver()
    assert translate_event(key(pygame.K_a), d)
    assert not d.pending


def test_escape_and_quit_stop_the_loop():
    d = make_driver()
    assert not translate_event(key(pygame.K_ESCAPE), d)
    assert not translate_event(pygame.event.Event(pygame.QUIT), d)
    assert not d.pending


def test_digit_picks_level_then_space_starts():
    d = make_driver()
    translate_event(key(pygame.K_2), d)
    d.tick()
    assert d.session.mode is Mode.WAITING and d.session.level_id == "intermediate"
    translate_event(key(pygame.K_SPACE), d)
    d.tick()
    assert d.session.mode is Mode.PLAYING


def test_click_on_level_button_selects_it():
    d = make_driver()
    translate_event(click((400, 100)), d)   # above the buttons
    d.tick()
    assert d.session.mode is Mode.LEVEL_SELECT
    translate_event(click((400, 340)), d)   # third button
    d.tick()
    assert d.session.mode is Mode.WAITING and d.session.level_id == "expert"


def test_click_while_playing_flaps():
    d = make_driver()
    d.push_select(1)
    d.push_primary()
    d.tick()
    translate_event(click((10, 10)), d)
    snap = d.tick()
    # -8 from the flap, then +0.3 gravity
    assert abs(snap.actor.velocity - (-7.7)) < 1e-9


def test_restart_and_digit_in_one_batch():
    d = crashed_driver()
    translate_event(key(pygame.K_SPACE), d)
    translate_event(key(pygame.K_2), d)
    d.tick()
    assert d.session.mode is Mode.WAITING
    assert d.session.level_id == "intermediate"


def test_restart_and_button_click_in_one_batch():
    d = crashed_driver()
    translate_event(click((400, 260)), d)   # restart, position is irrelevant here
    translate_event(click((400, 340)), d)   # expert button on the fresh menu
    d.tick()
    assert d.session.mode is Mode.WAITING
    assert d.session.level_id == "expert"


def test_digit_outside_level_select_is_ignored():
    d = make_driver()
    d.push_select(1)
    d.push_primary()
    d.tick()
    translate_event(key(pygame.K_3), d)
    d.tick()
    assert d.session.mode is Mode.PLAYING and d.session.level_id == "beginner"


def test_parse_args_defaults():
    args = parse_args([])
    assert args.seed is None and not args.mute and args.log_level == "WARNING"
    args = parse_args(["--seed", "7", "--mute", "--high-score-file", "x.json"])
    assert args.seed == 7 and args.mute and args.high_score_file == "x.json"


def main():
    tests = [v for k, v in sorted(globals().items()) if k.startswith("test_") and callable(v)]
    for t in tests:
        t()
        print(f"✓ {t.__name__}")
    print("🎉 All host input tests passed")


if __name__ == "__main__":
    main()
