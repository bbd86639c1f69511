# config_manager.py
from dataclasses import dataclass
import configparser
import os

DEFAULT_BASE_URL = "https://www.googleapis.com/youtube/v3/"
DEFAULT_SPEEDS = (1.0, 1.25, 1.5, 1.75, 2.0)
MAX_PAGE_SIZE = 50
API_KEY_ENV = "YOUTUBE_API_KEY"


@dataclass
class NetworkConfig:
    proxy_enabled: bool
    proxy_url: str | None = None


@dataclass
class YouTubeConfig:
    base_url: str = DEFAULT_BASE_URL
    api_key: str | None = None
    page_size: int = MAX_PAGE_SIZE
    batch_size: int = MAX_PAGE_SIZE
    attempts: int = 3
    backoff: float = 0.6
    timeout: float = 15.0


@dataclass
class PlaybackConfig:
    autoplay: bool = True
    speeds: tuple[float, ...] = DEFAULT_SPEEDS
    suppress_related: bool = True
    minimal_branding: bool = True


def _clamp_page(value: int) -> int:
    return max(1, min(MAX_PAGE_SIZE, int(value)))


def _parse_speeds(raw: str | None) -> tuple[float, ...]:
    if not raw:
        return DEFAULT_SPEEDS
    try:
        speeds = tuple(float(x) for x in raw.split(",") if x.strip())
    except ValueError:
        return DEFAULT_SPEEDS
    if not speeds or any(s <= 0 for s in speeds):
        return DEFAULT_SPEEDS
    return speeds


class ConfigManager:
    def __init__(self, config_file=None):
        self.config = configparser.ConfigParser()
        if config_file:
            self.config.read(config_file)

        # Ленивая загрузка конфигов
        self._network_config = None
        self._youtube_config = None
        self._playback_config = None

    @property
    def network(self) -> NetworkConfig:
        """Конфигурация сети (ленивая загрузка)"""
        if self._network_config is None:
            self._network_config = self._load_network_config()
        return self._network_config

    @property
    def youtube(self) -> YouTubeConfig:
        if self._youtube_config is None:
            self._youtube_config = self._load_youtube_config()
        return self._youtube_config

    @property
    def playback(self) -> PlaybackConfig:
        if self._playback_config is None:
            self._playback_config = self._load_playback_config()
        return self._playback_config

    def _load_network_config(self) -> NetworkConfig:
        try:
            section = self.config["network"]
            enabled = section.getboolean("proxy_enabled", fallback=False)
            url = section.get("proxy_url", fallback=None) or None
            return NetworkConfig(proxy_enabled=enabled, proxy_url=url)
        except KeyError:
            return NetworkConfig(proxy_enabled=False, proxy_url=None)

    def _load_youtube_config(self) -> YouTubeConfig:
        # ключ только из окружения (.env подхватывает load_dotenv в main)
        api_key = os.environ.get(API_KEY_ENV) or None
        if not self.config.has_section("youtube"):
            return YouTubeConfig(api_key=api_key)

        section = self.config["youtube"]
        return YouTubeConfig(
            base_url=section.get("base_url", fallback=DEFAULT_BASE_URL),
            api_key=api_key,
            page_size=_clamp_page(section.getint("page_size", fallback=MAX_PAGE_SIZE)),
            batch_size=_clamp_page(section.getint("batch_size", fallback=MAX_PAGE_SIZE)),
            attempts=max(1, section.getint("attempts", fallback=3)),
            backoff=max(0.0, section.getfloat("backoff", fallback=0.6)),
            timeout=section.getfloat("timeout", fallback=15.0),
        )

    def _load_playback_config(self) -> PlaybackConfig:
        if not self.config.has_section("playback"):
            return PlaybackConfig()

        section = self.config["playback"]
        return PlaybackConfig(
            autoplay=section.getboolean("autoplay", fallback=True),
            speeds=_parse_speeds(section.get("speeds", fallback=None)),
            suppress_related=section.getboolean("suppress_related", fallback=True),
            minimal_branding=section.getboolean("minimal_branding", fallback=True),
        )

    def get_setting(self, section, setting, default=None):
        try:
            return self.config[section].get(setting, default)
        except KeyError:
            return default
