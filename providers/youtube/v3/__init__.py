# providers/youtube/v3/__init__.py
"""
YouTube Data API v3 provider package.
"""

# Публичный API: полные пути
from providers.youtube.v3.service import PlaylistIngestService, batched
from providers.youtube.v3.api import APIClient
from providers.youtube.v3.factory import create_ingest_service
from providers.youtube.v3.models import (
    IngestError,
    IngestErrorKind,
    InvalidReference,
    EmptyResult,
    FetchFailure,
    IngestResult,
    PlaylistItem,
    PlaylistPage,
    VideoSnippet,
)

__all__ = [
    # Public API
    "PlaylistIngestService",
    "create_ingest_service",
    # Domain models
    "PlaylistItem",
    "IngestResult",
    "IngestError",
    "IngestErrorKind",
    "InvalidReference",
    "EmptyResult",
    "FetchFailure",
    # Internal (for testing/extension)
    "APIClient",
    "PlaylistPage",
    "VideoSnippet",
    "batched",
]
