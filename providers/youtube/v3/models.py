# providers/youtube/v3/models.py
from dataclasses import dataclass
from enum import Enum

from utils.duration import DEFAULT_DURATION


class IngestErrorKind(Enum):
    INVALID_REFERENCE = "invalid_reference"
    EMPTY_RESULT = "empty_result"
    FETCH_FAILURE = "fetch_failure"


class IngestError(RuntimeError):
    """Базовая ошибка загрузки плейлиста."""
    kind: IngestErrorKind = IngestErrorKind.FETCH_FAILURE
    user_message: str = "Failed to fetch playlist."

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.user_message)
        self.detail = detail


class InvalidReference(IngestError):
    kind = IngestErrorKind.INVALID_REFERENCE
    user_message = "Invalid playlist link. Make sure it includes '&list=...'"


class EmptyResult(IngestError):
    kind = IngestErrorKind.EMPTY_RESULT
    user_message = "No videos found in this playlist."


class FetchFailure(IngestError):
    kind = IngestErrorKind.FETCH_FAILURE
    user_message = "Failed to fetch. Check API key, privacy settings, or if playlist is empty."


@dataclass(frozen=True)
class VideoSnippet:
    """One playlistItems record after validation; no ordinal yet."""
    video_id: str
    title: str
    thumbnail: str


@dataclass(frozen=True)
class PlaylistItem:
    video_id: str
    title: str
    thumbnail: str
    duration: str = DEFAULT_DURATION
    index: int = 0  # 1-based


@dataclass(frozen=True)
class PlaylistPage:
    snippets: tuple[VideoSnippet, ...]
    next_page_token: str | None = None


@dataclass(frozen=True)
class IngestResult:
    playlist_id: str
    title: str
    items: tuple[PlaylistItem, ...]

    @property
    def first_video_id(self) -> str:
        return self.items[0].video_id
