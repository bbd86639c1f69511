# app/player/settings.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from utils.config_manager import DEFAULT_SPEEDS
from app.player.base_handle import PlayerHandle


@dataclass
class PlaybackSettings:
    """
    Process-wide playback settings. Read when a handle is created and pushed
    to the live handle afterwards; changing them never rebuilds the handle.
    """
    speed: float = DEFAULT_SPEEDS[0]
    autoplay: bool = True

    def toggle_autoplay(self) -> bool:
        self.autoplay = not self.autoplay
        return self.autoplay


def format_speed(speed: float) -> str:
    return f"{speed:g}x"


class SpeedCycler:
    """1x -> 1.25x -> ... -> 2x -> 1x, applied straight to the live handle."""

    def __init__(
            self,
            settings: PlaybackSettings,
            live_handle: Callable[[], Optional[PlayerHandle]],
            speeds: Sequence[float] = DEFAULT_SPEEDS,
            logger: logging.Logger | None = None,
    ):
        if not speeds:
            raise ValueError("speeds must not be empty")
        self._settings = settings
        self._live_handle = live_handle
        self.speeds = tuple(float(s) for s in speeds)
        self.logger = logger or logging.getLogger(__name__)

    def next_speed(self, current: float) -> float:
        try:
            index = self.speeds.index(current)
        except ValueError:
            # не из списка (например --speed 0.8) -> начинаем сначала
            index = -1
        return self.speeds[(index + 1) % len(self.speeds)]

    def cycle(self) -> float:
        speed = self.next_speed(self._settings.speed)
        self._settings.speed = speed

        handle = self._live_handle()
        if handle is not None:
            try:
                handle.set_rate(speed)
            except Exception as e:
                self.logger.warning(f"Failed to push speed {format_speed(speed)} to player: {e}")

        self.logger.info(f"Playback speed: {format_speed(speed)}")
        return speed
