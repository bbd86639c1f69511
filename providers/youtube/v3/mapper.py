# providers/youtube/v3/mapper.py
"""Raw YouTube API payloads -> playlist models. No network here."""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from utils.duration import DEFAULT_DURATION, parse_duration
from .models import PlaylistItem, PlaylistPage, VideoSnippet
from .settings import PLACEHOLDER_THUMBNAIL, PLACEHOLDER_TITLE

logger = logging.getLogger(__name__)

# medium -> default -> placeholder
THUMBNAIL_PREFERENCE = ("medium", "default")


def api_error_message(data: Any) -> Optional[str]:
    """Message of an ``{"error": ...}`` payload, None for a normal response."""
    if not isinstance(data, Mapping) or "error" not in data:
        return None
    error = data.get("error")
    if isinstance(error, Mapping):
        return str(error.get("message") or error.get("code") or "Unknown API error")
    return str(error or "Unknown API error")


def pick_thumbnail(thumbnails: Any, placeholder: str = PLACEHOLDER_THUMBNAIL) -> str:
    if isinstance(thumbnails, Mapping):
        for size in THUMBNAIL_PREFERENCE:
            entry = thumbnails.get(size)
            if isinstance(entry, Mapping) and entry.get("url"):
                return entry["url"]
    return placeholder


def snippet_from_item(item: Any, placeholder: str = PLACEHOLDER_THUMBNAIL) -> Optional[VideoSnippet]:
    """Returns None for records without snippet/contentDetails/thumbnails."""
    if not isinstance(item, Mapping):
        return None
    snippet = item.get("snippet")
    details = item.get("contentDetails")
    if not isinstance(snippet, Mapping) or not isinstance(details, Mapping):
        return None
    # Deleted/Private video: thumbnails == {}, keeps its place with the placeholder
    if not isinstance(snippet.get("thumbnails"), Mapping):
        return None
    video_id = details.get("videoId")
    if not video_id:
        return None

    return VideoSnippet(
        video_id=str(video_id),
        title=str(snippet.get("title") or ""),
        thumbnail=pick_thumbnail(snippet.get("thumbnails"), placeholder),
    )


def parse_playlist_page(data: Mapping[str, Any], placeholder: str = PLACEHOLDER_THUMBNAIL) -> PlaylistPage:
    items = data.get("items") or []
    snippets = []
    skipped = 0
    for raw in items:
        snippet = snippet_from_item(raw, placeholder)
        if snippet is None:
            skipped += 1
            continue
        snippets.append(snippet)

    if skipped:
        logger.debug(f"playlistItems: skipped {skipped} incomplete records")

    return PlaylistPage(snippets=tuple(snippets), next_page_token=data.get("nextPageToken") or None)


def durations_from_videos(data: Any) -> dict[str, str]:
    out: dict[str, str] = {}
    if not isinstance(data, Mapping):
        return out
    for item in data.get("items") or []:
        if not isinstance(item, Mapping) or not item.get("id"):
            continue
        details = item.get("contentDetails") or {}
        out[str(item["id"])] = parse_duration(details.get("duration"))
    return out


def title_from_playlists(data: Any, placeholder: str = PLACEHOLDER_TITLE) -> str:
    if not isinstance(data, Mapping):
        return placeholder
    items = data.get("items") or []
    if not items or not isinstance(items[0], Mapping):
        return placeholder
    snippet = items[0].get("snippet") or {}
    return str(snippet.get("title") or placeholder)


def merge_items(snippets: Iterable[VideoSnippet], durations: Mapping[str, str]) -> tuple[PlaylistItem, ...]:
    """Snippets + durations; index = 1-based position in the final list."""
    return tuple(
        PlaylistItem(
            video_id=s.video_id,
            title=s.title,
            thumbnail=s.thumbnail,
            duration=durations.get(s.video_id, DEFAULT_DURATION),
            index=i,
        )
        for i, s in enumerate(snippets, start=1)
    )
