"""A running emulator and its uptime bookkeeping."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Callable

from ikiru.oshash import FunctionEntry, PointerEntry
from ikiru.title_id import TitleId

Clock = Callable[[], float]


@dataclass
class Instance:
    """The emulated console's OS tables."""

    os_func_table: list[FunctionEntry] = field(default_factory=list)
    os_data_table: list[PointerEntry] = field(default_factory=list)


@dataclass
class EmuParams:
    """What to emulate and where to find its files."""

    title: TitleId
    paths: list[Path] = field(default_factory=list)
    dlc: list[TitleId] = field(default_factory=list)
    update: TitleId | None = None

    def __post_init__(self) -> None:
        self.title = TitleId.coerce(self.title)
        self.paths = [Path(p) for p in self.paths]
        self.dlc = [TitleId.coerce(d) for d in self.dlc]
        if self.update is not None:
            self.update = TitleId.coerce(self.update)


@dataclass(frozen=True)
class _Running:
    since: float
    total: float


@dataclass(frozen=True)
class _Paused:
    total: float


class Emulator:
    """A running emulator instance; starts paused."""

    def __init__(self, title: TitleId, clock: Clock = time.monotonic) -> None:
        self.title = title
        self.instance = Instance()
        self._clock = clock
        self._lock = threading.Lock()
        self._state: _Running | _Paused = _Paused(0.0)

    @classmethod
    def start(cls, params: EmuParams, clock: Clock = time.monotonic) -> Emulator:
        """Begin emulating the title named by the parameters."""
        return cls(params.title, clock)

    @property
    def is_running(self) -> bool:
        with self._lock:
            return isinstance(self._state, _Running)

    def pause(self) -> None:
        """Stop the uptime clock; does nothing when already paused."""
        now = self._clock()
        with self._lock:
            state = self._state
            if isinstance(state, _Running):
                self._state = _Paused(state.total + max(0.0, now - state.since))

    def unpause(self) -> None:
        """Restart the uptime clock; does nothing when already running."""
        now = self._clock()
        with self._lock:
            state = self._state
            if isinstance(state, _Paused):
                self._state = _Running(now, state.total)

    def uptime(self) -> float:
        """Seconds spent running so far."""
        with self._lock:
            state = self._state
            if isinstance(state, _Running):
                return state.total + max(0.0, self._clock() - state.since)
            return state.total