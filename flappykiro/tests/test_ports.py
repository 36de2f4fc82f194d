# flappykiro/tests/test_ports.py
import json
import os
import tempfile
from pathlib import Path

os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np

from flappykiro.game.ports import (
    JsonHighScoreStore, MemoryHighScoreStore, NullAudio, SynthAudio,
    SAMPLE_RATE, flap_wave, terminal_wave, to_pcm,
)
from flappykiro.game.session import GameSession, Mode


def test_json_store_round_trip_and_missing_file():
    with tempfile.TemporaryDirectory() as d:
        path = Path(d) / "nested" / "best.json"
        store = JsonHighScoreStore(path)
        assert store.load_high_score() == 0
        store.save_high_score(12)
        assert json.loads(path.read_text()) == {"flappyKiroHighScore": 12}
        assert JsonHighScoreStore(path).load_high_score() == 12


def test_corrupt_file_degrades_to_zero_in_session():
    with tempfile.TemporaryDirectory() as d:
        path = Path(d) / "best.json"
        path.write_text("{not json")
        s = GameSession(store=JsonHighScoreStore(path))
        assert s.best == 0
        path.write_text("[1, 2]")
        assert GameSession(store=JsonHighScoreStore(path)).best == 0


def test_session_persists_through_json_store():
    with tempfile.TemporaryDirectory() as d:
        store = JsonHighScoreStore(Path(d) / "best.json")
        s = GameSession(store=store)
        s.select_profile("beginner")
        s.start_game()
        s.tally.score = 4
        s.actor.y = 470
        s.update()
        assert s.mode is Mode.GAME_OVER
        assert store.load_high_score() == 4


def test_memory_store():
    m = MemoryHighScoreStore()
    m.save_high_score(3)
    assert m.load_high_score() == 3 and m.saves == 1


def test_synth_waves():
    f = flap_wave()
    t = terminal_wave()
    assert f.shape == (int(SAMPLE_RATE * 0.3),)
    assert t.shape == (int(SAMPLE_RATE * 0.8),)
    assert np.max(np.abs(f)) <= 0.1 + 1e-6
    assert np.max(np.abs(t)) <= 0.3 + 1e-6
    assert abs(t[-1]) < 0.01, "terminal cue fades out"
    pcm = to_pcm(t)
    assert pcm.dtype == np.int16 and pcm.shape == (len(t), 2)
    assert to_pcm(f, channels=1).ndim == 1


def test_audio_cues_never_raise():
    for audio in (NullAudio(), SynthAudio()):
        audio.on_flap()
        audio.on_terminal()
