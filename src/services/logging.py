"""
Logging - Console logging setup and the on-disk activity log.

Activity lines (the ones shown in the main window) are kept in one file
per day, brad-wallet-YYYY-MM-DD.log, each line stamped with date and time:

    [2026-02-08 14:32:15] Opened wallet Alice

The window shows them with the time only.
"""

from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Optional
import logging

from utils import get_logs_dir

LOG_FILE_PREFIX = "brad-wallet-"
FILE_DATE_FORMAT = "%Y-%m-%d"
STORED_STAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DISPLAY_STAMP_FORMAT = "%H:%M:%S"

# Chatty third-party loggers
QUIET_LOGGERS = ("qasync", "asyncio")

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    """Send application logs to the console. Safe to call twice."""
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt=DISPLAY_STAMP_FORMAT
    ))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def to_display(stored_line: str) -> str:
    """[2026-02-08 14:32:15] text -> [14:32:15] text; other lines pass through."""
    if not stored_line.startswith('['):
        return stored_line
    stamp, sep, rest = stored_line[1:].partition(']')
    if not sep:
        return stored_line
    try:
        when = datetime.strptime(stamp, STORED_STAMP_FORMAT)
    except ValueError:
        return stored_line
    return f"[{when.strftime(DISPLAY_STAMP_FORMAT)}]{rest}"


class ActivityLog:
    """
    Daily activity files in logs_dir.

    Nothing is written while retention_days is 0.
    """

    def __init__(self, retention_days: int = 0, logs_dir: Optional[Path] = None):
        self.retention_days = retention_days
        self._logs_dir = logs_dir

    @property
    def logs_dir(self) -> Path:
        if self._logs_dir is None:
            self._logs_dir = get_logs_dir()
        return self._logs_dir

    @property
    def enabled(self) -> bool:
        return self.retention_days > 0

    def path_for(self, day: Optional[date] = None) -> Path:
        day = day or date.today()
        return self.logs_dir / f"{LOG_FILE_PREFIX}{day.strftime(FILE_DATE_FORMAT)}.log"

    def record(self, message: str, when: Optional[datetime] = None) -> str:
        """
        Persist one activity line (if enabled).

        Returns the line formatted for display.
        """
        when = when or datetime.now()
        if self.enabled:
            try:
                with open(self.path_for(when.date()), 'a', encoding='utf-8') as f:
                    f.write(f"[{when.strftime(STORED_STAMP_FORMAT)}] {message}\n")
            except OSError as e:
                logger.warning(f"Failed to write activity log: {e}")
        return f"[{when.strftime(DISPLAY_STAMP_FORMAT)}] {message}"

    def recent(self, max_lines: int) -> list[str]:
        """Up to max_lines stored lines from yesterday and today, oldest first."""
        if max_lines <= 0:
            return []
        today = date.today()
        lines: list[str] = []
        for day in (today, today - timedelta(days=1)):
            missing = max_lines - len(lines)
            if missing <= 0:
                break
            lines = self._tail(self.path_for(day), missing) + lines
        return lines

    def prune(self) -> int:
        """Delete day files older than the retention window. Returns the count."""
        if not self.enabled:
            return 0
        cutoff = date.today() - timedelta(days=self.retention_days)
        deleted = 0
        for path in self.logs_dir.glob(f"{LOG_FILE_PREFIX}*.log"):
            try:
                day = datetime.strptime(path.stem[len(LOG_FILE_PREFIX):], FILE_DATE_FORMAT).date()
            except ValueError:
                continue
            if day < cutoff:
                try:
                    path.unlink()
                except OSError as e:
                    logger.warning(f"Could not delete {path.name}: {e}")
                    continue
                deleted += 1
        if deleted:
            logger.info(f"Removed {deleted} expired activity log file(s)")
        return deleted

    @staticmethod
    def _tail(path: Path, n: int) -> list[str]:
        if not path.exists():
            return []
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return [line.rstrip('\n') for line in f.readlines()[-n:]]
        except OSError as e:
            logger.warning(f"Could not read {path.name}: {e}")
            return []
