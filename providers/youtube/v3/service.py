# providers/youtube/v3/service.py
import asyncio
import logging
from typing import Any, AsyncIterator, Sequence

from utils.playlist_ref import extract_playlist_id
from .mapper import api_error_message, durations_from_videos, merge_items, parse_playlist_page, \
    title_from_playlists
from .models import EmptyResult, FetchFailure, IngestError, IngestResult, InvalidReference, PlaylistPage, \
    VideoSnippet
from .settings import YouTubeV3Settings, default_settings


def batched(values: Sequence[str], size: int) -> list[list[str]]:
    """Consecutive chunks of at most ``size`` values, order kept."""
    size = max(1, int(size))
    return [list(values[i:i + size]) for i in range(0, len(values), size)]


class PlaylistIngestService:
    """
    Business logic layer: pagination, batching, merge.
    Talks to the API only through APIClient, never touches the player.
    """

    def __init__(
            self,
            api: Any,
            settings: YouTubeV3Settings | None = None,
            logger: logging.Logger | None = None,
    ):
        self._api = api
        self._settings = settings or default_settings()
        self._logger = logger or logging.getLogger(__name__)

    # ══════════════════════════════════════════════════════════
    # Listing (playlistItems)
    # ══════════════════════════════════════════════════════════

    async def iter_pages(self, playlist_id: str) -> AsyncIterator[PlaylistPage]:
        """
        Страницы плейлиста по очереди: каждый pageToken берётся из
        предыдущего ответа, поэтому параллелить тут нечего.
        Not restartable: a new call starts from the first page again.
        """
        page_token: str | None = None
        seen_tokens: set[str] = set()
        page_no = 0

        while True:
            data = await self._api.get_playlist_items(playlist_id, page_token)
            page_no += 1

            message = api_error_message(data)
            if message is not None:
                self._logger.error(f"playlistItems error on page {page_no}: {message}")
                raise FetchFailure(message)
            if not isinstance(data, dict):
                raise FetchFailure(f"Unexpected playlistItems response: {type(data).__name__}")
            if data.get("items") is None:
                # кривой ответ без items и без error: просто конец
                # (пустой items с nextPageToken листаем дальше)
                self._logger.info(f"playlistItems page {page_no} has no items, stopping")
                return

            page = parse_playlist_page(data, self._settings.placeholder_thumbnail)
            self._logger.debug(f"playlistItems page {page_no}: {len(page.snippets)} videos")
            yield page

            page_token = page.next_page_token
            if not page_token:
                return
            if page_token in seen_tokens:
                self._logger.warning(f"playlistItems repeated pageToken {page_token!r}, stopping")
                return
            seen_tokens.add(page_token)

    async def fetch_snippets(self, playlist_id: str) -> list[VideoSnippet]:
        snippets: list[VideoSnippet] = []
        async for page in self.iter_pages(playlist_id):
            snippets.extend(page.snippets)
        self._logger.info(f"Playlist {playlist_id}: {len(snippets)} videos listed")
        return snippets

    # ══════════════════════════════════════════════════════════
    # Durations (videos)
    # ══════════════════════════════════════════════════════════

    async def fetch_durations(self, video_ids: Sequence[str]) -> dict[str, str]:
        """
        video_id -> "M:SS". Batches are independent, so they run concurrently;
        a failed batch is only logged and its ids keep the default duration.
        """
        batches = batched(video_ids, self._settings.batch_size)
        if not batches:
            return {}

        semaphore = asyncio.Semaphore(self._settings.max_concurrent)

        async def fetch_limited(batch: list[str]) -> dict[str, str]:
            async with semaphore:
                data = await self._api.get_videos(batch)
            message = api_error_message(data)
            if message is not None:
                raise FetchFailure(message)
            return durations_from_videos(data)

        results = await asyncio.gather(
            *(fetch_limited(b) for b in batches),
            return_exceptions=True,
        )

        # merge только после того, как все батчи завершились
        durations: dict[str, str] = {}
        errors = []
        for batch, result in zip(batches, results):
            if isinstance(result, Exception):
                errors.append(result)
                self._logger.warning(f"Duration batch of {len(batch)} ids failed: {result}")
                continue
            durations.update(result)

        missing = len(set(video_ids) - durations.keys())
        if errors or missing:
            self._logger.warning(
                f"Durations: {len(errors)}/{len(batches)} batches failed, "
                f"{missing} videos left at default duration"
            )
        return durations

    # ══════════════════════════════════════════════════════════
    # Metadata (playlists)
    # ══════════════════════════════════════════════════════════

    async def fetch_title(self, playlist_id: str) -> str:
        """Название плейлиста; любая ошибка -> placeholder."""
        placeholder = self._settings.placeholder_title
        try:
            data = await self._api.get_playlist(playlist_id)
        except Exception as e:
            self._logger.warning(f"Playlist title lookup failed for {playlist_id}: {e}")
            return placeholder

        message = api_error_message(data)
        if message is not None:
            self._logger.warning(f"Playlist title lookup error for {playlist_id}: {message}")
            return placeholder
        return title_from_playlists(data, placeholder)

    # ══════════════════════════════════════════════════════════
    # Orchestration
    # ══════════════════════════════════════════════════════════

    async def ingest(self, link: str) -> IngestResult:
        """
        link -> IngestResult.
        Raises InvalidReference (no network call made), EmptyResult or FetchFailure.
        """
        playlist_id = extract_playlist_id(link)
        if not playlist_id:
            raise InvalidReference(f"No list= in {link!r}")

        try:
            snippets = await self.fetch_snippets(playlist_id)
        except IngestError:
            raise
        except Exception as e:
            self._logger.error(f"Listing {playlist_id} failed: {e}", exc_info=True)
            raise FetchFailure(str(e)) from e

        if not snippets:
            raise EmptyResult(f"Playlist {playlist_id} has no videos")

        durations = await self.fetch_durations([s.video_id for s in snippets])
        items = merge_items(snippets, durations)
        title = await self.fetch_title(playlist_id)

        self._logger.info(f"Ingested playlist {playlist_id} '{title}': {len(items)} videos")
        return IngestResult(playlist_id=playlist_id, title=title, items=items)

    async def close(self) -> None:
        await self._api.close()
