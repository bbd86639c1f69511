# utils/playlist_ref.py
from __future__ import annotations

import re
from typing import Optional

# list=<id>, id ends on &, # or ?
_LIST_RE = re.compile(r"[?&]list=([^#&?]+)")


def extract_playlist_id(link: str | None) -> Optional[str]:
    """
    Достаёт id плейлиста из ссылки вида ``...?v=xxx&list=PLxxxx``.
    Returns None when there is no ``list=`` marker or the value is empty.
    """
    if not link:
        return None
    match = _LIST_RE.search(link.strip())
    return match.group(1) if match else None
