from utils.config_manager import ConfigManager, DEFAULT_SPEEDS, DEFAULT_BASE_URL


def write_ini(tmp_path, text):
    path = tmp_path / "config.ini"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_defaults_without_file(monkeypatch):
    monkeypatch.delenv("YOUTUBE_API_KEY", raising=False)
    cm = ConfigManager(None)

    assert cm.network.proxy_enabled is False
    assert cm.youtube.base_url == DEFAULT_BASE_URL
    assert cm.youtube.api_key is None
    assert cm.youtube.page_size == 50
    assert cm.playback.autoplay is True
    assert cm.playback.speeds == DEFAULT_SPEEDS


def test_reads_sections(tmp_path, monkeypatch):
    monkeypatch.setenv("YOUTUBE_API_KEY", "k-123")
    path = write_ini(tmp_path, """
[network]
proxy_enabled = true
proxy_url = http://127.0.0.1:8080

[youtube]
page_size = 500
batch_size = 20
attempts = 0

[playback]
autoplay = false
speeds = 0.5, 1, 2
""")
    cm = ConfigManager(path)

    assert cm.network.proxy_url == "http://127.0.0.1:8080"
    assert cm.youtube.api_key == "k-123"
    assert cm.youtube.page_size == 50  # clamped
    assert cm.youtube.batch_size == 20
    assert cm.youtube.attempts == 1
    assert cm.playback.autoplay is False
    assert cm.playback.speeds == (0.5, 1.0, 2.0)


def test_bad_speeds_fall_back(tmp_path):
    path = write_ini(tmp_path, "[playback]\nspeeds = fast, faster\n")
    assert ConfigManager(path).playback.speeds == DEFAULT_SPEEDS


def test_get_setting_missing_section():
    assert ConfigManager(None).get_setting("nope", "x", "fallback") == "fallback"
