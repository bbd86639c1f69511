# app/player/mpv_handle.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import mpv  # python-mpv

from app.player.base_handle import HandleConfig, ReadyCallback, StateCallback
from app.player.player_events import Dispatch, PlayerEventBridge, end_file_reason
from providers.youtube.v3.endpoints import watch_url


class MpvPlayerHandle:
    """
    One mpv instance playing one YouTube video (mpv resolves the watch URL
    through its ytdl hook).

    mpv delivers events on its own thread. They go through PlayerEventBridge,
    which hands them to ``dispatch`` (``loop.call_soon_threadsafe`` in the app).
    There is no direct default: running the controller on the mpv thread
    would terminate mpv from its own event thread.
    """

    def __init__(
            self,
            video_id: str,
            config: HandleConfig,
            on_ready: ReadyCallback,
            on_state_changed: StateCallback,
            *,
            dispatch: Dispatch,
            loglevel: str = "warn",
            log_file: str | None = None,
            logger: logging.Logger | None = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.video_id = video_id
        self.config = config
        self._log_file = log_file
        self._events = PlayerEventBridge(on_ready, on_state_changed, dispatch, logger=self.logger)

        init_options = self.build_options(config, loglevel)
        self.logger.info(f"Creating MPV for {video_id} with options: {init_options}")
        self._player = mpv.MPV(log_handler=self._on_mpv_log, **init_options)

        @self._player.event_callback("file-loaded")
        def _file_loaded(_event):
            self._events.ready()

        @self._player.event_callback("end-file")
        def _end_file(event):
            self._events.end_file(end_file_reason(event), self.video_id)

        self._player.observe_property("pause", self._on_playback_property)
        self._player.observe_property("paused-for-cache", self._on_playback_property)
        # keep_open=yes: end-file не приходит, конец видно по eof-reached
        self._player.observe_property("eof-reached", lambda _name, value: self._events.eof_reached(value))

        self._player.command("loadfile", watch_url(video_id), "replace")

    @staticmethod
    def build_options(config: HandleConfig, loglevel: str = "warn") -> dict[str, Any]:
        return {
            "loglevel": loglevel,
            "ytdl": True,
            # стартуем на паузе: play() решает контроллер по autoplay
            "pause": True,
            # no "up next" after the end: stop on the last frame
            "keep_open": "yes" if config.suppress_related else "no",
            "osc": not config.minimal_branding,
            "osd_level": 0 if config.minimal_branding else 1,
            "input_default_bindings": True,
            "input_vo_keyboard": True,
            "terminal": "no",
            "input_terminal": "no",
        }


    # ----------------------------
    # mpv thread
    # ----------------------------

    def _on_playback_property(self, _name: str, _value: Any) -> None:
        if not self._events.alive or not self._events.ready_sent:
            return
        try:
            paused = bool(self._player.pause)
            buffering = bool(self._player.paused_for_cache)
        except mpv.ShutdownError:
            return
        except Exception as e:
            self.logger.debug(f"playback property access failed: {e}")
            return
        self._events.playback(paused, buffering)

    def _on_mpv_log(self, level, prefix, text):
        text = (text or "").rstrip("\r\n")
        log_line = f"[MPV:{level}] {prefix}: {text}"

        if level in ("fatal", "error"):
            self.logger.error(log_line)
        elif level == "warn":
            self.logger.warning(log_line)
        elif level == "info":
            self.logger.info(log_line)
        else:
            self.logger.debug(log_line)

        if self._log_file:
            try:
                Path(self._log_file).parent.mkdir(parents=True, exist_ok=True)
                with open(self._log_file, "a", encoding="utf-8", errors="ignore") as f:
                    f.write(log_line + "\n")
            except OSError as e:
                self.logger.debug(f"Failed to write to log file: {e}")

    # ----------------------------
    # PlayerHandle
    # ----------------------------

    def play(self) -> None:
        if self._events.alive:
            self._player.pause = False

    def set_rate(self, value: float) -> None:
        if self._events.alive:
            self._player.speed = float(value)

    def destroy(self) -> None:
        if not self._events.close():
            return
        self.logger.info(f"Terminating MPV for {self.video_id}")
        self._player.terminate()


def make_mpv_factory(
        dispatch: Dispatch,
        *,
        loglevel: str = "warn",
        log_file: str | None = None,
        logger: logging.Logger | None = None,
):
    """HandleFactory for PlaybackController; dispatch marshals mpv events onto the loop."""
    if dispatch is None:
        raise ValueError("dispatch is required")

    def factory(video_id: str, config: HandleConfig,
                on_ready: ReadyCallback, on_state_changed: StateCallback) -> MpvPlayerHandle:
        return MpvPlayerHandle(
            video_id,
            config,
            on_ready,
            on_state_changed,
            dispatch=dispatch,
            loglevel=loglevel,
            log_file=log_file,
            logger=logger,
        )

    return factory
