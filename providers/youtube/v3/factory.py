# providers/youtube/v3/factory.py
import logging
from typing import Any

from .api import APIClient
from .service import PlaylistIngestService
from .settings import YouTubeV3Settings, default_settings


def create_ingest_service(
        api_key: str | None,
        net_client: Any,
        settings: YouTubeV3Settings | None = None,
        logger: logging.Logger | None = None,
) -> PlaylistIngestService:
    """
    Factory function: собирает APIClient + PlaylistIngestService.

    Args:
        api_key: YouTube Data API key (None -> server answers with an error)
        net_client: NetClient with create_async_httpx_client
        settings: page/batch sizes, retries
        logger: Опциональный логгер
    """
    log = logger or logging.getLogger(__name__)
    settings = settings or default_settings()

    if not api_key:
        log.warning("YouTube API key is not set, requests will be rejected")

    api = APIClient(
        api_key=api_key,
        net_client=net_client,
        settings=settings,
        logger=log,
    )
    service = PlaylistIngestService(api, settings=settings, logger=log)

    log.info(f"YouTube ingest service created for {settings.base_url}")
    return service
