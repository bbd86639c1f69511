# api.py - YouTube Data API v3 client (endpoints only)
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from providers.youtube.v3.transport import HttpTransport
from providers.youtube.v3.settings import YouTubeV3Settings, default_settings
from providers.youtube.v3.endpoints import PLAYLIST_ITEMS, VIDEOS, PLAYLISTS, \
                                           PLAYLIST_ITEMS_PARTS, VIDEOS_PARTS, PLAYLISTS_PARTS


class APIClient:
    """Thin API client: only endpoints, no orchestration/business logic."""

    def __init__(
        self,
        *,
        api_key: str | None,
        net_client: Any,
        settings: YouTubeV3Settings | None = None,
        logger: logging.Logger | None = None,
        sleep_fn=None,
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.settings = settings or default_settings()
        self._api_key = api_key

        self.transport = HttpTransport(
            net_client=net_client,
            base_url=self.settings.base_url,
            logger=self.logger,
            sleep_fn=sleep_fn,
            timeout=self.settings.timeout,
        )

    async def close(self) -> None:
        await self.transport.close()

    async def _get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        params = dict(params or {})
        # без ключа запрос всё равно уходит: сервер сам вернёт ошибку
        if self._api_key:
            params["key"] = self._api_key
        return await self.transport.request_json(
            endpoint,
            params=params,
            attempts=self.settings.attempts,
            backoff=self.settings.backoff,
        )

    # ---- endpoints ----

    async def get_playlist_items(self, playlist_id: str, page_token: str | None = None) -> Any:
        """GET /playlistItems: одна страница плейлиста."""
        params: Dict[str, Any] = {
            "part": PLAYLIST_ITEMS_PARTS,
            "maxResults": self.settings.page_size,
            "playlistId": playlist_id,
        }
        if page_token:
            params["pageToken"] = page_token
        return await self._get(PLAYLIST_ITEMS, params=params)

    async def get_videos(self, video_ids: Sequence[str]) -> Any:
        """GET /videos: contentDetails (duration) for up to 50 ids."""
        return await self._get(VIDEOS, params={"part": VIDEOS_PARTS, "id": ",".join(video_ids)})

    async def get_playlist(self, playlist_id: str) -> Any:
        return await self._get(PLAYLISTS, params={"part": PLAYLISTS_PARTS, "id": playlist_id})
