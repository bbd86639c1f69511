# app/player/base_handle.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Protocol


class PlayerState(Enum):
    PLAYING = auto()
    ENDED = auto()
    OTHER = auto()


@dataclass(frozen=True)
class HandleConfig:
    suppress_related: bool = True
    minimal_branding: bool = True


ReadyCallback = Callable[[], None]
StateCallback = Callable[[PlayerState], None]


class PlayerHandle(Protocol):
    """One external player object bound to one video for its whole life."""

    video_id: str

    def play(self) -> None: ...
    def set_rate(self, value: float) -> None: ...
    def destroy(self) -> None: ...


class HandleFactory(Protocol):
    # signals are wired at construction: ready, state changed
    def __call__(
        self,
        video_id: str,
        config: HandleConfig,
        on_ready: ReadyCallback,
        on_state_changed: StateCallback,
    ) -> PlayerHandle: ...
