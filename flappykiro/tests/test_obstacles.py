# flappykiro/tests/test_obstacles.py
import random

import numpy as np

from flappykiro.game.obstacles import Obstacle, ObstacleStream, make_rng


class FixedRng:
    """Always returns the low end of the requested range."""
    def __init__(self):
        self.calls = []

    def uniform(self, a, b):
        self.calls.append((a, b))
        return a


def make_stream(gap=220.0, rng=None):
    return ObstacleStream(field_height=500, rng=rng or FixedRng(), width=80, gap_size=gap)


def test_seed_lines_up_three_obstacles():
    s = make_stream()
    s.seed(800, 350)
    assert [o.x for o in s.obstacles] == [800, 1150, 1500]
    assert all(not o.passed for o in s.obstacles)
    s.seed(800, 300, count=5)
    assert len(s) == 5, "seed must clear previous obstacles"


def test_gap_range_and_derived_bottom():
    rng = FixedRng()
    s = make_stream(rng=rng)
    s.seed(800, 350, count=1)
    assert rng.calls == [(100, 500 - 220 - 100)]
    o = s.obstacles[0]
    assert o.gap_top == 100 and o.gap_bottom == 320

    s = make_stream(rng=random.Random(7))
    for _ in range(200):
        top = s.generate_gap(500, 220)
        assert 100 <= top <= 180


def test_numpy_generator_is_a_valid_source():
    s = make_stream(rng=np.random.default_rng(3))
    top = s.generate_gap(500, 200)
    assert isinstance(top, float) and 100 <= top <= 200


def test_advance_translates_uniformly():
    s = make_stream()
    s.seed(800, 350)
    s.advance(2.5)
    assert [o.x for o in s.obstacles] == [797.5, 1147.5, 1497.5]


def test_retire_offscreen_keeps_order():
    s = make_stream()
    s.obstacles = [Obstacle(-81, 100, 300), Obstacle(-80, 100, 300),
                   Obstacle(-79.5, 100, 300), Obstacle(400, 100, 300)]
    s.retire_offscreen()
    # right edge -1 is gone, right edge exactly 0 survives
    assert [o.x for o in s.obstacles] == [-80, -79.5, 400]
    s.advance(1.0)
    s.retire_offscreen()
    assert [o.x for o in s.obstacles] == [399]


def test_maybe_spawn_threshold():
    s = make_stream()
    s.obstacles = [Obstacle(450, 100, 320)]
    assert not s.maybe_spawn(800, 350), "450 is not < 800 - 350"
    s.obstacles[0].x = 449.9
    assert s.maybe_spawn(800, 350)
    assert [o.x for o in s.obstacles] == [449.9, 800]
    assert s.rearmost.x == 800


def test_empty_stream_does_not_spawn():
    s = make_stream()
    assert not s.maybe_spawn(800, 350)
    assert len(s) == 0


def test_make_rng_reproducible():
    r1, seed = make_rng(42)
    r2, _ = make_rng(42)
    assert seed == 42
    assert [r1.random() for _ in range(3)] == [r2.random() for _ in range(3)]
    _, fresh = make_rng(None)
    assert isinstance(fresh, int)
