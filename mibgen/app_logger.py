from __future__ import annotations

import logging
import logging.handlers
import os
import re
import shutil
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    log_dir: Path
    log_file: str = "mibgen.log"
    console: bool = True
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5
    rotate_on_startup: bool = False


if TYPE_CHECKING:
    from mibgen.app_config import AppConfig


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds color to log levels for console output."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        original_levelname = record.levelname
        if record.levelname in self.COLORS:
            record.levelname = (
                f"{self.COLORS[record.levelname]}{record.levelname}{self.RESET}"
            )
        result = super().format(record)
        record.levelname = original_levelname
        return result


class FlushingStreamHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Stream handler that flushes after every emit."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            super().emit(record)
            self.flush()
        except Exception:
            self.handleError(record)


class FlushingRotatingFileHandler(logging.handlers.RotatingFileHandler):
    """Rotating file handler that flushes after every emit."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            super().emit(record)
            self.flush()
        except Exception:
            self.handleError(record)


def _archive_log_file(log_path: Path) -> None:
    """
    Move an existing log file to ``<log_dir>/archive`` with a timestamp.

    The timestamp comes from the first log line, or from the file's
    modification time when the first line has none.
    """
    if not log_path.exists():
        return

    timestamp_str = None
    try:
        with open(log_path, "r", encoding="utf-8") as f:
            first_line = f.readline().strip()
        match = re.match(r"^(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})\.\d{3}", first_line)
        if match:
            timestamp_str = match.group(1)
    except OSError:
        pass

    if timestamp_str is None:
        dt = datetime.fromtimestamp(log_path.stat().st_mtime)
        timestamp_str = dt.strftime("%Y-%m-%d %H:%M:%S")

    filename_timestamp = timestamp_str.replace(" ", "_").replace(":", "-")

    archive_dir = log_path.parent / "archive"
    archive_dir.mkdir(parents=True, exist_ok=True)

    archived_path = archive_dir / f"{log_path.stem}_{filename_timestamp}{log_path.suffix}"
    counter = 1
    while archived_path.exists():
        archived_path = (
            archive_dir / f"{log_path.stem}_{filename_timestamp}_{counter}{log_path.suffix}"
        )
        counter += 1

    try:
        shutil.move(str(log_path), str(archived_path))
    except OSError:
        # Keep appending to the existing file
        pass


class AppLogger:
    _configured: bool = False

    @staticmethod
    def configure(app_config: "AppConfig") -> None:
        """
        Configure logging from an AppConfig instance.
        """
        logger_cfg = app_config.logger_settings()
        config = LoggingConfig(
            level=logger_cfg.get("level", "INFO"),
            log_dir=Path(os.path.abspath(logger_cfg.get("log_dir", "logs"))),
            log_file=logger_cfg.get("log_file", "mibgen.log"),
            console=logger_cfg.get("console", True),
            max_bytes=logger_cfg.get("max_bytes", 10 * 1024 * 1024),
            backup_count=logger_cfg.get("backup_count", 5),
            rotate_on_startup=logger_cfg.get("rotate_on_startup", False),
        )
        AppLogger(config)

    def __init__(self, config: LoggingConfig) -> None:
        if AppLogger._configured:
            return
        self._configure(config)
        AppLogger._configured = True

    @staticmethod
    def get(name: str | None = None) -> logging.Logger:
        return logging.getLogger(name)

    @staticmethod
    def _configure(config: LoggingConfig) -> None:
        level = logging.getLevelName(config.level.upper())
        if not isinstance(level, int):
            level = logging.INFO

        config.log_dir.mkdir(parents=True, exist_ok=True)
        log_path = config.log_dir / config.log_file

        if config.rotate_on_startup:
            _archive_log_file(log_path)

        root = logging.getLogger()
        root.setLevel(level)

        for handler in list(root.handlers):
            root.removeHandler(handler)

        fmt = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s %(message)s"
        datefmt = "%Y-%m-%d %H:%M:%S"

        file_handler = FlushingRotatingFileHandler(
            filename=log_path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
        root.addHandler(file_handler)

        if config.console:
            # Console output goes to stderr; stdout carries dump output
            console_handler = FlushingStreamHandler(sys.stderr)
            console_handler.setLevel(level)
            console_handler.setFormatter(ColoredFormatter(fmt=fmt, datefmt=datefmt))
            root.addHandler(console_handler)

        AppLogger._suppress_third_party_loggers(level)

    @staticmethod
    def _suppress_third_party_loggers(level: int) -> None:
        # pysnmp and pysmi are only useful when debugging MIB loading
        third_party_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
        for name in ("pysnmp", "pysmi"):
            logging.getLogger(name).setLevel(third_party_level)
