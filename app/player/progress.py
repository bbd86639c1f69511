# app/player/progress.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from providers.youtube.v3.models import PlaylistItem


@dataclass(frozen=True)
class Progress:
    position: int
    total: int
    percentage: float

    @property
    def label(self) -> str:
        return f"{self.position} / {self.total} Videos"


def track_progress(items: Sequence[PlaylistItem], active_video_id: Optional[str]) -> Progress:
    """Position of the active video in the list; nothing is cached."""
    total = len(items)
    position = 0
    if active_video_id:
        position = next((item.index for item in items if item.video_id == active_video_id), 0)
    percentage = position * 100 / total if total > 0 else 0.0
    return Progress(position=position, total=total, percentage=percentage)
