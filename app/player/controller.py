# app/player/controller.py
from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable, Optional, Sequence

from app.player.base_handle import HandleConfig, HandleFactory, PlayerHandle, PlayerState
from app.player.settings import PlaybackSettings
from providers.youtube.v3.models import PlaylistItem


class ControllerState(Enum):
    IDLE = auto()
    BOUND = auto()


def next_video_id(items: Sequence[PlaylistItem], current: Optional[str]) -> Optional[str]:
    """Следующее видео по кругу: после последнего идёт первое."""
    if not items:
        return None
    index = next((i for i, item in enumerate(items) if item.video_id == current), -1)
    return items[(index + 1) % len(items)].video_id


class PlaybackController:
    """
    Owns the one live player handle.

    IDLE  -> BOUND  sync(video_id): create a handle for video_id
    BOUND -> BOUND  sync(other_id): destroy the old handle, then create a new one
    BOUND -> IDLE   sync(None) / release() / close()

    Speed and autoplay live in PlaybackSettings: they are read in the ready
    handler and never take part in the rebuild decision.
    """

    def __init__(
            self,
            handle_factory: HandleFactory,
            settings: PlaybackSettings,
            *,
            handle_config: HandleConfig | None = None,
            on_advance: Callable[[str], None] | None = None,
            logger: logging.Logger | None = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self._factory = handle_factory
        self._settings = settings
        self._handle_config = handle_config or HandleConfig()
        self.on_advance = on_advance

        self._handle: Optional[PlayerHandle] = None
        self._video_id: Optional[str] = None
        self._playlist: tuple[PlaylistItem, ...] = ()
        self._closed = False

    # ----------------------------
    # state
    # ----------------------------

    @property
    def state(self) -> ControllerState:
        return ControllerState.BOUND if self._handle is not None else ControllerState.IDLE

    @property
    def video_id(self) -> Optional[str]:
        return self._video_id

    @property
    def live_handle(self) -> Optional[PlayerHandle]:
        return self._handle

    # ----------------------------
    # lifecycle
    # ----------------------------

    def sync(self, video_id: Optional[str], playlist: Sequence[PlaylistItem] = ()) -> None:
        """Bring the handle in line with the active selection."""
        self._playlist = tuple(playlist)

        if self._closed:
            self.logger.debug("sync() after close, ignoring")
            return

        if not video_id:
            self.release()
            return

        if self._handle is not None and video_id == self._video_id:
            return

        # полный teardown, перенацеливать живой плеер не пытаемся
        self.release()
        self._bind(video_id)

    def _bind(self, video_id: str) -> None:
        self._video_id = video_id
        handle: Optional[PlayerHandle] = None

        def on_ready() -> None:
            self._on_ready(handle)

        def on_state_changed(state: PlayerState) -> None:
            self._on_state_changed(handle, state)

        try:
            handle = self._factory(video_id, self._handle_config, on_ready, on_state_changed)
        except Exception as e:
            self.logger.warning(f"Player handle for {video_id} could not be created: {e}", exc_info=True)
            return

        self._handle = handle
        self.logger.info(f"Player bound to {video_id}")

    def release(self) -> None:
        handle = self._handle
        self._handle = None
        self._video_id = None
        if handle is None:
            return

        try:
            handle.destroy()
            self.logger.info(f"Player released from {getattr(handle, 'video_id', '?')}")
        except Exception as e:
            self.logger.warning(f"Player handle destroy failed, resource may leak: {e}", exc_info=True)

    def close(self) -> None:
        self.release()
        self._closed = True

    def __enter__(self) -> "PlaybackController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ----------------------------
    # player events
    # ----------------------------

    def _is_current(self, handle: Optional[PlayerHandle]) -> bool:
        # события от уже уничтоженного плеера игнорируем
        return handle is not None and handle is self._handle

    def _on_ready(self, handle: Optional[PlayerHandle]) -> None:
        if not self._is_current(handle):
            self.logger.debug("ready from a released handle, ignoring")
            return
        handle.set_rate(self._settings.speed)
        if self._settings.autoplay:
            handle.play()

    def _on_state_changed(self, handle: Optional[PlayerHandle], state: PlayerState) -> None:
        if not self._is_current(handle):
            self.logger.debug(f"{state.name} from a released handle, ignoring")
            return

        if state is PlayerState.PLAYING:
            # после буферизации скорость может сброситься
            handle.set_rate(self._settings.speed)
            return

        if state is PlayerState.ENDED and self._settings.autoplay:
            next_id = next_video_id(self._playlist, self._video_id)
            if next_id is None:
                return
            self.logger.info(f"Autoplay: {self._video_id} -> {next_id}")
            if self.on_advance is not None:
                self.on_advance(next_id)
            else:
                self.sync(next_id, self._playlist)
