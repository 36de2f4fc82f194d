# flappykiro/game/ports.py
"""Concrete collaborators: synthesized audio and high-score storage."""
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Dict

import numpy as np
import pygame

from .config import HIGH_SCORE_KEY

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100


def _sweep_phase(f0: float, f1: float, duration: float, n: int) -> np.ndarray:
    """Phase (in cycles) of an exponential frequency ramp f0 -> f1."""
    t = np.linspace(0.0, duration, n, endpoint=False, dtype=np.float64)
    k = np.log(f1 / f0) / duration
    return f0 * (np.exp(k * t) - 1.0) / k


def _sawtooth(phase: np.ndarray) -> np.ndarray:
    return 2.0 * (phase % 1.0) - 1.0


def _triangle(phase: np.ndarray) -> np.ndarray:
    return 2.0 * np.abs(_sawtooth(phase)) - 1.0


def _envelope(n: int, peak: float, attack: float) -> np.ndarray:
    """Linear attack to `peak`, then exponential decay towards 0.001."""
    env = np.empty(n, dtype=np.float64)
    a = max(1, int(attack * SAMPLE_RATE))
    a = min(a, n)
    env[:a] = np.linspace(0.0, peak, a)
    if n > a:
        decay_t = np.linspace(0.0, 1.0, n - a)
        env[a:] = peak * (0.001 / peak) ** decay_t
    return env


def _lowpass(signal: np.ndarray, cutoff_start: float, cutoff_end: float) -> np.ndarray:
    """One-pole low-pass with a cutoff sliding from start to end."""
    cutoffs = np.geomspace(cutoff_start, cutoff_end, len(signal))
    alphas = 1.0 - np.exp(-2.0 * np.pi * cutoffs / SAMPLE_RATE)
    out = np.empty_like(signal)
    acc = 0.0
    for i, (x, alpha) in enumerate(zip(signal, alphas)):
        acc += alpha * (x - acc)
        out[i] = acc
    return out


def flap_wave(duration: float = 0.3) -> np.ndarray:
    """Muffled sand whoosh: sawtooth 80 -> 20 Hz through a closing low-pass."""
    n = int(SAMPLE_RATE * duration)
    wave = _sawtooth(_sweep_phase(80.0, 20.0, duration, n))
    wave = _lowpass(wave, 400.0, 100.0)
    return wave * _envelope(n, peak=0.1, attack=0.02)


def terminal_wave(duration: float = 0.8) -> np.ndarray:
    """Two descending tones: sawtooth 220 -> 110 Hz, triangle 165 -> 82.5 Hz."""
    n = int(SAMPLE_RATE * duration)
    wave = _sawtooth(_sweep_phase(220.0, 110.0, duration, n))
    wave += _triangle(_sweep_phase(165.0, 82.5, duration, n))
    return wave * _envelope(n, peak=0.15, attack=0.05)


def to_pcm(wave: np.ndarray, channels: int = 2) -> np.ndarray:
    pcm = (np.clip(wave, -1.0, 1.0) * 32767).astype(np.int16)
    if channels == 1:
        return np.ascontiguousarray(pcm)
    return np.ascontiguousarray(np.column_stack([pcm] * channels))


class SynthAudio:
    """Plays synthesized cues through pygame.mixer. Disabled if the mixer won't start."""

    def __init__(self):
        self.enabled = False
        self.sounds: Dict[str, pygame.mixer.Sound] = {}
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=2, buffer=512)
            channels = pygame.mixer.get_init()[2]
            self.sounds["flap"] = pygame.sndarray.make_sound(to_pcm(flap_wave(), channels))
            self.sounds["terminal"] = pygame.sndarray.make_sound(to_pcm(terminal_wave(), channels))
            self.enabled = True
        except pygame.error as e:
            logger.warning("mixer unavailable, sound disabled: %s", e)

    def _play(self, name: str):
        if self.enabled and name in self.sounds:
            self.sounds[name].play()

    def on_flap(self):
        self._play("flap")

    def on_terminal(self):
        self._play("terminal")


class NullAudio:
    def on_flap(self):
        pass

    def on_terminal(self):
        pass


class JsonHighScoreStore:
    """Best score under a single key in a small JSON file."""

    def __init__(self, path: str | Path, key: str = HIGH_SCORE_KEY):
        self.path = Path(path)
        self.key = key

    def load_high_score(self) -> int:
        if not self.path.exists():
            return 0
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"unexpected high score payload in {self.path}")
        return int(data.get(self.key, 0))

    def save_high_score(self, value: int):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({self.key: int(value)}), encoding="utf-8")


class MemoryHighScoreStore:
    def __init__(self, value: int = 0):
        self.value = value
        self.saves = 0

    def load_high_score(self) -> int:
        return self.value

    def save_high_score(self, value: int):
        self.value = int(value)
        self.saves += 1

