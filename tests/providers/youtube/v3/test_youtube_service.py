import asyncio

import pytest

from providers.youtube.v3.models import EmptyResult, FetchFailure, InvalidReference
from providers.youtube.v3.service import PlaylistIngestService, batched
from providers.youtube.v3.settings import PLACEHOLDER_THUMBNAIL, PLACEHOLDER_TITLE


def raw_item(video_id):
    return {
        "snippet": {"title": f"title {video_id}", "thumbnails": {"default": {"url": f"https://i/{video_id}.jpg"}}},
        "contentDetails": {"videoId": video_id},
    }


class FakeAPI:
    """pages: список id по страницам; durations: id -> ISO."""

    def __init__(self, pages, durations=None, title="My list"):
        self.pages = pages
        self.durations = durations or {}
        self.title = title
        self.item_calls = []
        self.video_calls = []
        self.playlist_calls = []

    async def get_playlist_items(self, playlist_id, page_token=None):
        self.item_calls.append((playlist_id, page_token))
        index = int(page_token) if page_token else 0
        data = {"items": [raw_item(v) for v in self.pages[index]]}
        if index + 1 < len(self.pages):
            data["nextPageToken"] = str(index + 1)
        return data

    async def get_videos(self, video_ids):
        self.video_calls.append(list(video_ids))
        return {"items": [
            {"id": v, "contentDetails": {"duration": self.durations[v]}}
            for v in video_ids if v in self.durations
        ]}

    async def get_playlist(self, playlist_id):
        self.playlist_calls.append(playlist_id)
        if self.title is None:
            return {"items": []}
        return {"items": [{"snippet": {"title": self.title}}]}


LINK = "https://www.youtube.com/watch?v=x&list=PL1"


def run(coro):
    return asyncio.run(coro)


def test_batched():
    assert batched(["a", "b", "c"], 2) == [["a", "b"], ["c"]]
    assert batched([], 50) == []


def test_ingest_happy_path():
    api = FakeAPI([["a", "b"], ["c"]], durations={"a": "PT1M", "b": "PT1H2M3S", "c": "PT9S"})
    result = run(PlaylistIngestService(api).ingest(LINK))

    assert result.playlist_id == "PL1"
    assert result.title == "My list"
    assert result.first_video_id == "a"
    assert [(i.index, i.video_id, i.duration) for i in result.items] == [
        (1, "a", "1:00"), (2, "b", "1:02:03"), (3, "c", "0:09"),
    ]
    assert api.item_calls == [("PL1", None), ("PL1", "1")]


def test_pagination_completeness():
    pages = [[f"p{p}v{i}" for i in range(50)] for p in range(49)]
    pages.append([f"last{i}" for i in range(7)])
    api = FakeAPI(pages)

    result = run(PlaylistIngestService(api).ingest(LINK))

    expected = [v for page in pages for v in page]
    assert len(result.items) == 49 * 50 + 7
    assert [i.video_id for i in result.items] == expected
    assert [i.index for i in result.items] == list(range(1, len(expected) + 1))
    assert len(api.item_calls) == 50


def test_batching_120_ids():
    ids = [f"v{i}" for i in range(120)]
    durations = {v: "PT30S" for v in ids[::2]}
    api = FakeAPI([ids[:50], ids[50:100], ids[100:]], durations=durations)

    result = run(PlaylistIngestService(api).ingest(LINK))

    assert sorted(len(call) for call in api.video_calls) == [20, 50, 50]
    assert [v for call in sorted(api.video_calls, key=lambda c: ids.index(c[0])) for v in call] == ids
    for item in result.items:
        assert item.duration == ("0:30" if item.video_id in durations else "0:00")


def test_failed_batch_is_soft():
    class API(FakeAPI):
        async def get_videos(self, video_ids):
            if video_ids[0] == "v0":
                self.video_calls.append(list(video_ids))
                return {"error": {"code": 500, "message": "backend"}}
            if video_ids[0] == "v50":
                self.video_calls.append(list(video_ids))
                raise RuntimeError("socket closed")
            return await super().get_videos(video_ids)

    ids = [f"v{i}" for i in range(120)]
    api = API([ids], durations={v: "PT1M" for v in ids})

    result = run(PlaylistIngestService(api).ingest(LINK))

    assert len(api.video_calls) == 3
    by_id = {i.video_id: i.duration for i in result.items}
    assert by_id["v0"] == "0:00"
    assert by_id["v50"] == "0:00"
    assert by_id["v100"] == "1:00"


def test_invalid_link_makes_no_request():
    api = FakeAPI([["a"]])

    with pytest.raises(InvalidReference):
        run(PlaylistIngestService(api).ingest("https://www.youtube.com/watch?v=1"))

    assert api.item_calls == []


def test_server_error_is_fetch_failure():
    class API(FakeAPI):
        async def get_playlist_items(self, playlist_id, page_token=None):
            return {"error": {"code": 404, "message": "The playlist identified with the request's playlistId parameter cannot be found."}}

    with pytest.raises(FetchFailure) as exc_info:
        run(PlaylistIngestService(API([])).ingest(LINK))

    assert "cannot be found" in exc_info.value.detail


def test_error_on_later_page_fails_whole_ingest():
    class API(FakeAPI):
        async def get_playlist_items(self, playlist_id, page_token=None):
            if page_token:
                return {"error": {"code": 403, "message": "quotaExceeded"}}
            return await super().get_playlist_items(playlist_id, page_token)

    with pytest.raises(FetchFailure):
        run(PlaylistIngestService(API([["a"], ["b"]])).ingest(LINK))


def test_unexpected_shape_is_fetch_failure():
    class API(FakeAPI):
        async def get_playlist_items(self, playlist_id, page_token=None):
            return ["not", "a", "dict"]

    with pytest.raises(FetchFailure):
        run(PlaylistIngestService(API([])).ingest(LINK))


def test_malformed_page_stops_without_error():
    class API(FakeAPI):
        async def get_playlist_items(self, playlist_id, page_token=None):
            self.item_calls.append(page_token)
            if page_token:
                return {"kind": "youtube#playlistItemListResponse"}
            return {"items": [raw_item("a")], "nextPageToken": "1"}

    api = API([])
    result = run(PlaylistIngestService(api).ingest(LINK))

    assert [i.video_id for i in result.items] == ["a"]
    assert api.item_calls == [None, "1"]


def test_empty_playlist():
    with pytest.raises(EmptyResult):
        run(PlaylistIngestService(FakeAPI([[]])).ingest(LINK))


def test_only_incomplete_records_is_empty():
    class API(FakeAPI):
        async def get_playlist_items(self, playlist_id, page_token=None):
            return {"items": [{"snippet": {"title": "Deleted video"}}]}

    with pytest.raises(EmptyResult):
        run(PlaylistIngestService(API([])).ingest(LINK))


def test_title_lookup_failure_uses_placeholder():
    class API(FakeAPI):
        async def get_playlist(self, playlist_id):
            raise RuntimeError("metadata down")

    result = run(PlaylistIngestService(API([["a"]])).ingest(LINK))
    assert result.title == PLACEHOLDER_TITLE

    result = run(PlaylistIngestService(FakeAPI([["a"]], title=None)).ingest(LINK))
    assert result.title == PLACEHOLDER_TITLE


def test_repeated_ingest_is_identical():
    api = FakeAPI([["a", "b"], ["c"]], durations={"a": "PT1M"})
    service = PlaylistIngestService(api)

    first = run(service.ingest(LINK))
    second = run(service.ingest(LINK))

    assert first == second
    assert first.first_video_id == second.first_video_id == "a"


def test_deleted_video_keeps_its_ordinal():
    class API(FakeAPI):
        async def get_playlist_items(self, playlist_id, page_token=None):
            gone = raw_item("gone")
            gone["snippet"] = {"title": "Deleted video", "thumbnails": {}}
            return {"items": [raw_item("a"), gone, raw_item("c")]}

    result = run(PlaylistIngestService(API([])).ingest(LINK))

    assert [(i.index, i.video_id) for i in result.items] == [(1, "a"), (2, "gone"), (3, "c")]
    assert result.items[1].thumbnail == PLACEHOLDER_THUMBNAIL
    assert result.items[2].thumbnail == "https://i/c.jpg"


def test_empty_page_with_token_keeps_paging():
    api = FakeAPI([[], ["b"]])

    result = run(PlaylistIngestService(api).ingest(LINK))

    assert [i.video_id for i in result.items] == ["b"]
    assert api.item_calls == [("PL1", None), ("PL1", "1")]
