from types import SimpleNamespace

import pytest

try:
    import mpv  # noqa: F401
except (ImportError, OSError) as e:  # libmpv не установлен; событийная логика в test_player_events
    pytest.skip(f"python-mpv unavailable: {e}", allow_module_level=True)


from app.player import mpv_handle
from app.player.base_handle import HandleConfig, PlayerState
from app.player.mpv_handle import MpvPlayerHandle, make_mpv_factory


class FakeMPV:
    instances = []

    def __init__(self, log_handler=None, **options):
        self.log_handler = log_handler
        self.options = options
        self.events = {}
        self.observers = {}
        self.commands = []
        self.pause = options.get("pause", False)
        self.paused_for_cache = False
        self.speed = 1.0
        self.terminated = 0
        FakeMPV.instances.append(self)

    def event_callback(self, name):
        def register(fn):
            self.events[name] = fn
            return fn
        return register

    def observe_property(self, name, handler):
        self.observers[name] = handler

    def command(self, *args):
        self.commands.append(args)

    def terminate(self):
        self.terminated += 1

    # helpers
    def fire(self, name, event=None):
        self.events[name](event)

    def set_prop(self, name, value):
        setattr(self, name.replace("-", "_"), value)
        self.observers[name](name, value)


@pytest.fixture(autouse=True)
def fake_mpv(monkeypatch):
    FakeMPV.instances = []
    monkeypatch.setattr(mpv_handle.mpv, "MPV", FakeMPV)
    return FakeMPV


def direct(fn, *args):
    fn(*args)


def make_handle(config=None):
    calls = []
    handle = MpvPlayerHandle(
        "abc",
        config or HandleConfig(),
        lambda: calls.append("ready"),
        lambda state: calls.append(state),
        dispatch=direct,
    )
    return handle, FakeMPV.instances[-1], calls


def test_build_options_follow_config():
    options = MpvPlayerHandle.build_options(HandleConfig())
    assert options["ytdl"] is True
    assert options["pause"] is True
    assert options["keep_open"] == "yes"
    assert options["osc"] is False

    options = MpvPlayerHandle.build_options(HandleConfig(suppress_related=False, minimal_branding=False))
    assert options["keep_open"] == "no"
    assert options["osc"] is True
    assert options["osd_level"] == 1


def test_loads_watch_url_paused():
    _, player, calls = make_handle()

    assert player.commands == [("loadfile", "https://www.youtube.com/watch?v=abc", "replace")]
    assert player.pause is True
    assert calls == []


def test_mpv_events_reach_callbacks():
    handle, player, calls = make_handle()

    player.fire("file-loaded")
    handle.play()
    player.set_prop("pause", False)
    player.fire("end-file", SimpleNamespace(data=SimpleNamespace(reason=0)))
    player.set_prop("eof-reached", True)

    assert calls == ["ready", PlayerState.PLAYING, PlayerState.ENDED]


def test_set_rate_and_destroy_idempotent():
    handle, player, calls = make_handle()

    handle.set_rate(1.5)
    assert player.speed == 1.5

    handle.destroy()
    handle.destroy()
    assert player.terminated == 1

    # после destroy ничего не уходит наружу
    handle.set_rate(2.0)
    player.fire("file-loaded")
    assert player.speed == 1.5
    assert calls == []


def test_factory_requires_dispatch():
    with pytest.raises(TypeError):
        make_mpv_factory()
    with pytest.raises(ValueError):
        make_mpv_factory(None)


def test_factory_events_go_through_dispatch():
    queued = []
    factory = make_mpv_factory(lambda fn, *args: queued.append((fn, args)))
    calls = []

    handle = factory("xyz", HandleConfig(), lambda: calls.append("ready"), calls.append)
    FakeMPV.instances[-1].fire("file-loaded")

    assert handle.video_id == "xyz"
    assert calls == []
    fn, args = queued.pop()
    fn(*args)
    assert calls == ["ready"]
