from dataclasses import dataclass

from utils.config_manager import YouTubeConfig, DEFAULT_BASE_URL, MAX_PAGE_SIZE

PLACEHOLDER_THUMBNAIL = "https://placehold.co/160x90/000000/FFFFFF?text=No+Img"
PLACEHOLDER_TITLE = "Unknown Playlist"
DEFAULT_TITLE = "Playlist"
MAX_CONCURRENT = 3


@dataclass(frozen=True)
class YouTubeV3Settings:
    base_url: str = DEFAULT_BASE_URL
    page_size: int = MAX_PAGE_SIZE
    batch_size: int = MAX_PAGE_SIZE
    attempts: int = 3
    backoff: float = 0.6
    timeout: float = 15.0
    max_concurrent: int = MAX_CONCURRENT
    placeholder_thumbnail: str = PLACEHOLDER_THUMBNAIL
    placeholder_title: str = PLACEHOLDER_TITLE


def default_settings() -> YouTubeV3Settings:
    return YouTubeV3Settings()


def settings_from_config(cfg: YouTubeConfig) -> YouTubeV3Settings:
    return YouTubeV3Settings(
        base_url=cfg.base_url,
        page_size=cfg.page_size,
        batch_size=cfg.batch_size,
        attempts=cfg.attempts,
        backoff=cfg.backoff,
        timeout=cfg.timeout,
    )
