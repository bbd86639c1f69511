# app/player/main.py
import argparse
import asyncio
import logging
import logging.config
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from app.player.base_handle import HandleConfig
from app.player.console import ConsoleApp
from app.player.controller import PlaybackController
from app.player.mpv_handle import make_mpv_factory
from app.player.session import PlaylistSession
from app.player.settings import PlaybackSettings, SpeedCycler
from providers.youtube.v3.factory import create_ingest_service
from providers.youtube.v3.settings import settings_from_config
from utils.config_manager import ConfigManager
from utils.net_client import NetClient

BASE_DIR = Path(__file__).resolve().parents[2]
CONFIG_PATH = BASE_DIR / "config" / "config.ini"
LOGGING_CONFIG_PATH = BASE_DIR / "config" / "logging.conf"
LOG_DIR = BASE_DIR / "logs"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play a YouTube playlist through mpv")
    p.add_argument("--link", type=str, default=None, help="playlist link, must contain list=...")
    p.add_argument("--api-key", type=str, default=None, help="YouTube Data API key (default: $YOUTUBE_API_KEY)")
    p.add_argument("--config", type=str, default=str(CONFIG_PATH), help="path to config.ini")
    p.add_argument("--no-autoplay", action="store_true")
    p.add_argument("--speed", type=float, default=None, help="initial playback speed")
    p.add_argument("--verbose", action="store_true")
    p.add_argument("--log", type=str, default=None, help="write mpv log to this file (optional)")
    return p


def setup_logging(verbose: bool = False) -> None:
    os.makedirs(LOG_DIR, exist_ok=True)
    if LOGGING_CONFIG_PATH.exists():
        logging.config.fileConfig(
            LOGGING_CONFIG_PATH,
            defaults={"logdir": str(LOG_DIR)},
            disable_existing_loggers=False,
        )
    else:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def log_exception(exc_type, exc_value, exc_traceback):
    """Logging unexpected exceptions."""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logger.critical("Unexpected exception", exc_info=(exc_type, exc_value, exc_traceback))


async def run(args: argparse.Namespace, config_manager: ConfigManager) -> None:
    loop = asyncio.get_running_loop()

    yt_cfg = config_manager.youtube
    playback_cfg = config_manager.playback

    settings = PlaybackSettings(
        speed=args.speed if args.speed else playback_cfg.speeds[0],
        autoplay=playback_cfg.autoplay and not args.no_autoplay,
    )

    factory = make_mpv_factory(
        loop.call_soon_threadsafe,
        loglevel="info" if args.verbose else "warn",
        log_file=args.log,
    )
    controller = PlaybackController(
        factory,
        settings,
        handle_config=HandleConfig(
            suppress_related=playback_cfg.suppress_related,
            minimal_branding=playback_cfg.minimal_branding,
        ),
    )
    speed_cycler = SpeedCycler(settings, lambda: controller.live_handle, playback_cfg.speeds)

    service = create_ingest_service(
        api_key=args.api_key or yt_cfg.api_key,
        net_client=NetClient(config_manager.network),
        settings=settings_from_config(yt_cfg),
    )
    session = PlaylistSession(service, controller, settings, speed_cycler)

    try:
        await ConsoleApp(session).run(initial_link=args.link)
    finally:
        await service.close()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    load_dotenv(dotenv_path=BASE_DIR / ".env")
    setup_logging(args.verbose)
    sys.excepthook = log_exception

    config_manager = ConfigManager(args.config)
    logger.info("Playlist player started")
    try:
        asyncio.run(run(args, config_manager))
    except KeyboardInterrupt:
        pass
    logger.info("Playlist player closed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
