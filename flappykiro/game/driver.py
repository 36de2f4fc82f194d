# flappykiro/game/driver.py
from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional, Protocol, Tuple, Union

from .config import profile_for_tier
from .render import hit_test_level
from .session import GameSession, Mode, Snapshot


@dataclass(frozen=True)
class PrimaryAction:
    """Space / click equivalent."""


@dataclass(frozen=True)
class SelectProfile:
    tier: int   # 1-based digit


@dataclass(frozen=True)
class PointerPress:
    """Left click. Its meaning depends on the mode when it is applied."""
    pos: Tuple[int, int]


InputEvent = Union[PrimaryAction, SelectProfile, PointerPress]


class Renderer(Protocol):
    def draw(self, snapshot: Snapshot) -> None: ...


class FrameDriver:
    """
    Fixed-order frame: drain queued input (arrival order), one session tick,
    then at most one render pass. Input is never applied mid-tick.
    """
    def __init__(self, session: GameSession):
        self.session = session
        self.pending: Deque[InputEvent] = deque()
        self.frames = 0

    def push(self, event: InputEvent):
        self.pending.append(event)

    def push_primary(self):
        self.push(PrimaryAction())

    def push_select(self, tier: int):
        profile_for_tier(tier)  # reject bad tiers at the boundary, not inside a tick
        self.push(SelectProfile(tier))

    def push_pointer(self, pos: Tuple[int, int]):
        self.push(PointerPress(tuple(pos)))

    def drain_input(self) -> int:
        applied = 0
        while self.pending:
            event = self.pending.popleft()
            if isinstance(event, SelectProfile):
                self.session.select_profile(profile_for_tier(event.tier))
            elif isinstance(event, PointerPress):
                self._apply_pointer(event.pos)
            else:
                self.session.primary_action()
            applied += 1
        return applied

    def _apply_pointer(self, pos):
        if self.session.mode is Mode.LEVEL_SELECT:
            tier = hit_test_level(pos, self.session.field_width)
            if tier is not None:
                self.session.select_profile(profile_for_tier(tier))
        else:
            self.session.primary_action()

    def tick(self) -> Snapshot:
        self.drain_input()
        self.session.update()
        self.frames += 1
        return self.session.snapshot()

    def frame(self, renderer: Optional[Renderer] = None) -> Snapshot:
        snapshot = self.tick()
        if renderer is not None:
            renderer.draw(snapshot)
        return snapshot
