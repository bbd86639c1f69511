# app/player/session.py
from __future__ import annotations

import logging
from typing import Any, Optional

from app.player.controller import PlaybackController, next_video_id
from app.player.progress import Progress, track_progress
from app.player.settings import PlaybackSettings, SpeedCycler
from providers.youtube.v3.models import IngestError, InvalidReference, PlaylistItem
from providers.youtube.v3.settings import DEFAULT_TITLE


class PlaylistSession:
    """
    Current playlist, active video and the last error.

    The item list is replaced wholesale on every load, never edited in place.
    Each load() gets a generation number; a load that finishes after a newer
    one has started is dropped without touching anything.
    """

    def __init__(
            self,
            service: Any,
            controller: PlaybackController,
            settings: PlaybackSettings,
            speed_cycler: SpeedCycler,
            logger: logging.Logger | None = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self._service = service
        self.controller = controller
        self.settings = settings
        self.speed_cycler = speed_cycler

        self.items: tuple[PlaylistItem, ...] = ()
        self.title: str = ""
        self.error: Optional[IngestError] = None
        self.active_video_id: Optional[str] = None
        self.loading = False
        self._generation = 0

        controller.on_advance = self.select

    # ----------------------------
    # ingestion
    # ----------------------------

    @property
    def generation(self) -> int:
        return self._generation

    async def load(self, link: str) -> bool:
        """True when this call's result was applied and playback started."""
        self._generation += 1
        generation = self._generation
        self.loading = True
        self.error = None

        try:
            result = await self._service.ingest(link)
        except IngestError as e:
            if generation != self._generation:
                self.logger.info(f"Discarding failed load #{generation}, #{self._generation} is newer")
                return False
            self.logger.warning(f"Playlist load failed ({e.kind.value}): {e}")
            # invalid link -> пустой заголовок, остальные ошибки -> "Playlist"
            self._reset(e, title="" if isinstance(e, InvalidReference) else DEFAULT_TITLE)
            return False
        finally:
            if generation == self._generation:
                self.loading = False

        if generation != self._generation:
            self.logger.info(f"Discarding stale load #{generation}, #{self._generation} is newer")
            return False

        self.items = result.items
        self.title = result.title
        self.error = None
        # новый список -> новый плеер, даже если первое видео то же самое
        self.controller.release()
        self._set_active(result.first_video_id)
        return True

    def _reset(self, error: Optional[IngestError], title: str) -> None:
        self.items = ()
        self.error = error
        self.title = title
        self._set_active(None)

    def _set_active(self, video_id: Optional[str]) -> None:
        self.active_video_id = video_id
        self.controller.sync(video_id, self.items)

    # ----------------------------
    # user actions
    # ----------------------------

    def select(self, video_id: str) -> bool:
        if not any(item.video_id == video_id for item in self.items):
            self.logger.warning(f"select({video_id!r}): not in the current playlist, ignoring")
            return False
        self._set_active(video_id)
        return True

    def select_index(self, index: int) -> bool:
        """1-based, as shown in the list."""
        if not 1 <= index <= len(self.items):
            self.logger.warning(f"select_index({index}): out of range 1..{len(self.items)}")
            return False
        return self.select(self.items[index - 1].video_id)

    def next(self) -> bool:
        video_id = next_video_id(self.items, self.active_video_id)
        if video_id is None:
            return False
        return self.select(video_id)

    def toggle_autoplay(self) -> bool:
        autoplay = self.settings.toggle_autoplay()
        self.logger.info(f"Autoplay: {'on' if autoplay else 'off'}")
        return autoplay

    def cycle_speed(self) -> float:
        return self.speed_cycler.cycle()

    # ----------------------------
    # derived
    # ----------------------------

    @property
    def progress(self) -> Progress:
        return track_progress(self.items, self.active_video_id)

    @property
    def display_title(self) -> str:
        return self.title or DEFAULT_TITLE

    @property
    def active_item(self) -> Optional[PlaylistItem]:
        return next((item for item in self.items if item.video_id == self.active_video_id), None)

    def close(self) -> None:
        self._generation += 1
        self.controller.close()
        self.active_video_id = None
