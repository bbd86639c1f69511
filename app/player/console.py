# app/player/console.py
from __future__ import annotations

import asyncio
import logging
import shlex
import sys
from typing import Callable, Optional, TextIO

from app.player.session import PlaylistSession
from app.player.settings import format_speed

HELP = """Commands:
  load <link>   load a playlist (needs &list=...)
  list          show the playlist
  play <n>      play video number n
  next          skip to the next video
  speed         cycle playback speed
  autoplay      toggle autoplay
  status        show progress
  quit          exit"""


class ConsoleApp:
    """Line-based frontend: mpv draws the video, this draws everything else."""

    def __init__(self, session: PlaylistSession, out: TextIO | None = None,
                 logger: logging.Logger | None = None):
        self.session = session
        self.out = out or sys.stdout
        self.logger = logger or logging.getLogger(__name__)
        self._load_task: Optional[asyncio.Task] = None
        self._commands: dict[str, Callable[[list[str]], None]] = {
            "load": self.cmd_load,
            "list": self.cmd_list,
            "play": self.cmd_play,
            "next": self.cmd_next,
            "speed": self.cmd_speed,
            "autoplay": self.cmd_autoplay,
            "status": self.cmd_status,
            "help": self.cmd_help,
        }

    def echo(self, text: str = "") -> None:
        print(text, file=self.out, flush=True)

    # ----------------------------
    # rendering
    # ----------------------------

    def render_status(self) -> str:
        s = self.session
        if s.loading:
            return "Loading..."
        if s.error is not None:
            return s.error.user_message
        if not s.items:
            return "No playlist loaded."
        progress = s.progress
        active = s.active_item
        now = f"{active.index}. {active.title} [{active.duration}]" if active else "-"
        return (
            f"{s.display_title} | Playlist Progress {progress.label} ({progress.percentage:.0f}%)\n"
            f"Now: {now}\n"
            f"Speed {format_speed(s.settings.speed)} | Autoplay {'on' if s.settings.autoplay else 'off'}"
        )

    def render_list(self) -> str:
        lines = []
        for item in self.session.items:
            marker = ">" if item.video_id == self.session.active_video_id else " "
            lines.append(f"{marker}{item.index:>4}. {item.title} [{item.duration}]")
        return "\n".join(lines) or "No playlist loaded."

    # ----------------------------
    # commands
    # ----------------------------

    def cmd_load(self, args: list[str]) -> None:
        if not args:
            self.echo("usage: load <link>")
            return
        self.start_load(args[0])

    def start_load(self, link: str) -> asyncio.Task:
        if self._load_task is not None and not self._load_task.done():
            self.echo("Previous load superseded.")
        self._load_task = asyncio.get_running_loop().create_task(self._load(link))
        return self._load_task

    async def _load(self, link: str) -> None:
        self.echo("Loading...")
        applied = await self.session.load(link)
        if applied or self.session.error is not None:
            self.echo(self.render_status())

    def cmd_list(self, _args: list[str]) -> None:
        self.echo(self.render_list())

    def cmd_play(self, args: list[str]) -> None:
        try:
            index = int(args[0])
        except (IndexError, ValueError):
            self.echo("usage: play <n>")
            return
        if not self.session.select_index(index):
            self.echo(f"No video number {index}.")
            return
        self.echo(self.render_status())

    def cmd_next(self, _args: list[str]) -> None:
        if self.session.next():
            self.echo(self.render_status())

    def cmd_speed(self, _args: list[str]) -> None:
        self.echo(f"Speed {format_speed(self.session.cycle_speed())}")

    def cmd_autoplay(self, _args: list[str]) -> None:
        self.echo(f"Autoplay {'on' if self.session.toggle_autoplay() else 'off'}")

    def cmd_status(self, _args: list[str]) -> None:
        self.echo(self.render_status())

    def cmd_help(self, _args: list[str]) -> None:
        self.echo(HELP)

    def handle_line(self, line: str) -> bool:
        """False means quit."""
        try:
            parts = shlex.split(line)
        except ValueError:
            # ссылки с кавычками и пр. берём как есть
            parts = line.split()
        if not parts:
            return True
        name, args = parts[0].lower(), parts[1:]
        if name in ("quit", "exit", "q"):
            return False
        command = self._commands.get(name)
        if command is None:
            self.echo(f"Unknown command: {name}. Type 'help'.")
            return True
        command(args)
        return True

    async def run(self, initial_link: str | None = None, stdin: TextIO | None = None) -> None:
        stdin = stdin or sys.stdin
        loop = asyncio.get_running_loop()
        self.echo(HELP)
        if initial_link:
            self.start_load(initial_link)

        try:
            while True:
                line = await loop.run_in_executor(None, stdin.readline)
                if not line:
                    break
                if not self.handle_line(line.strip()):
                    break
        finally:
            if self._load_task is not None and not self._load_task.done():
                self._load_task.cancel()
            self.session.close()
