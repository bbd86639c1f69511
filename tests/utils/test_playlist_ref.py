from utils.playlist_ref import extract_playlist_id


def test_extract_list_param():
    assert extract_playlist_id("https://x/?list=ABC123") == "ABC123"


def test_extract_list_after_video():
    link = "https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=PLabc-DEF_1&index=2"
    assert extract_playlist_id(link) == "PLabc-DEF_1"


def test_extract_stops_on_hash():
    assert extract_playlist_id("https://x/playlist?list=PL1#t=10") == "PL1"


def test_no_list_param():
    assert extract_playlist_id("https://x/?v=1") is None
    assert extract_playlist_id("") is None
    assert extract_playlist_id(None) is None


def test_empty_list_value():
    assert extract_playlist_id("https://x/?list=&v=1") is None
    assert extract_playlist_id("https://x/?list=") is None


def test_marker_must_be_a_query_param():
    assert extract_playlist_id("https://x/blacklist=abc") is None
