# endpoints.py

PLAYLIST_ITEMS = "playlistItems"
VIDEOS = "videos"
PLAYLISTS = "playlists"

# part=... for each endpoint
PLAYLIST_ITEMS_PARTS = "snippet,contentDetails"
VIDEOS_PARTS = "contentDetails"
PLAYLISTS_PARTS = "snippet"

WATCH_URL = "https://www.youtube.com/watch?v="


def watch_url(video_id: str) -> str:
    return f"{WATCH_URL}{video_id}"
