# logging_handlers.py
import datetime
import os
import time

from logging.handlers import TimedRotatingFileHandler

DEFAULT_LOG_DIR = "logs"


class CustomTimedRotatingFileHandler(TimedRotatingFileHandler):
    """
    Rotates at midnight or when the file grows past max_bytes, whichever
    comes first. Rotated files get a full timestamp: player_2026-10-19_10-31-00.log
    """

    def __init__(self, filename, when='midnight', interval=1, max_bytes=10485760, backupCount=5,
                 encoding='utf-8', delay=False, utc=False, atTime=None, log_dir=DEFAULT_LOG_DIR):
        self.max_bytes = int(max_bytes)
        self.log_dir = log_dir
        os.makedirs(self.log_dir, exist_ok=True)
        full_log_file = os.path.join(self.log_dir, filename)
        super().__init__(full_log_file, when, interval, backupCount, encoding, delay, utc, atTime)

    def rotated_name(self, current_time: datetime.datetime) -> str:
        base_filename, file_extension = os.path.splitext(self.baseFilename)
        timestamp = current_time.strftime("%Y-%m-%d_%H-%M-%S")
        return f"{base_filename}_{timestamp}{file_extension}"

    def shouldRollover(self, record):
        if super().shouldRollover(record):
            return True
        if self.max_bytes <= 0 or not os.path.exists(self.baseFilename):
            return False
        return os.stat(self.baseFilename).st_size >= self.max_bytes

    def getFilesToDelete(self):
        # rotated_name() кладёт файлы рядом: <base>_<timestamp><ext>
        dir_name, base_name = os.path.split(self.baseFilename)
        stem, ext = os.path.splitext(base_name)
        prefix = f"{stem}_"
        rotated = sorted(
            os.path.join(dir_name, name)
            for name in os.listdir(dir_name)
            if name.startswith(prefix) and name.endswith(ext)
        )
        if len(rotated) <= self.backupCount:
            return []
        return rotated[:len(rotated) - self.backupCount]

    def doRollover(self):
        if self.stream:
            self.stream.close()
            self.stream = None

        target = self.rotated_name(datetime.datetime.now())
        if os.path.exists(target):
            os.remove(target)
        self.rotate(self.baseFilename, target)

        if self.backupCount > 0:
            for path in self.getFilesToDelete():
                os.remove(path)

        if not self.delay:
            self.stream = self._open()

        now = time.time()
        next_rollover = self.computeRollover(now)
        while next_rollover <= now:
            next_rollover += self.interval
        self.rolloverAt = next_rollover
