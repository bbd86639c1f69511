# app/player/player_events.py
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

from app.player.base_handle import PlayerState, ReadyCallback, StateCallback

# MpvEventEndFile.reason (libmpv) -> name
END_REASONS = {0: "eof", 1: "restarted", 2: "stop", 3: "quit", 4: "error", 5: "redirect"}

Dispatch = Callable[..., Any]


def end_file_reason(event: Any) -> Optional[str]:
    """python-mpv отдаёт reason то строкой, то числом, приводим к строке."""
    data = getattr(event, "data", None)
    reason = getattr(data, "reason", None)
    if reason is None:
        reason = getattr(event, "reason", None)
    if isinstance(reason, bytes):
        reason = reason.decode(errors="ignore")
    if isinstance(reason, int):
        return END_REASONS.get(reason)
    return reason


class PlayerEventBridge:
    """
    Turns raw player events (player thread) into ready / state callbacks.

    Every callback goes through ``dispatch``; in the app that is
    ``loop.call_soon_threadsafe``, so the controller only runs on the loop.
    ready is reported once, repeated states are collapsed, and nothing is
    reported after close().
    """

    def __init__(
            self,
            on_ready: ReadyCallback,
            on_state_changed: StateCallback,
            dispatch: Dispatch,
            logger: logging.Logger | None = None,
    ):
        if dispatch is None:
            raise ValueError("dispatch is required")
        self.logger = logger or logging.getLogger(__name__)
        self._on_ready = on_ready
        self._on_state_changed = on_state_changed
        self._dispatch = dispatch
        self._lock = threading.RLock()
        self._alive = True
        self._ready_sent = False
        self._last_state: PlayerState | None = None

    @property
    def alive(self) -> bool:
        return self._alive

    @property
    def ready_sent(self) -> bool:
        return self._ready_sent

    def close(self) -> bool:
        """False when already closed."""
        with self._lock:
            if not self._alive:
                return False
            self._alive = False
            return True

    def _emit(self, fn: Callable[..., Any], *args: Any) -> None:
        if not self._alive:
            return
        try:
            self._dispatch(fn, *args)
        except RuntimeError as e:
            # loop already closed
            self.logger.debug(f"Dropping player event: {e}")

    def ready(self) -> None:
        with self._lock:
            if self._ready_sent:
                return
            self._ready_sent = True
        self._emit(self._on_ready)

    def state(self, state: PlayerState) -> None:
        with self._lock:
            if state is self._last_state:
                return
            self._last_state = state
        self._emit(self._on_state_changed, state)

    def end_file(self, reason: Optional[str], video_id: str = "?") -> None:
        self.logger.info(f"end-file event: reason={reason}")
        if reason == "eof":
            self.state(PlayerState.ENDED)
        elif reason == "error":
            self.logger.error(f"player failed to play {video_id}")
            self.state(PlayerState.OTHER)

    def eof_reached(self, value: Any) -> None:
        if value:
            self.state(PlayerState.ENDED)

    def playback(self, paused: bool, buffering: bool) -> None:
        # до file-loaded pause=True ничего не значит
        if not self._alive or not self._ready_sent:
            return
        self.state(PlayerState.OTHER if paused or buffering else PlayerState.PLAYING)
