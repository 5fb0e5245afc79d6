"""
Logging setup: console on stdout plus a size-rotated file under LOG_DIR (default: logs/app.log).
"""
import logging
import os
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional, Union

DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent.parent / "logs"
LOG_FILE_NAME = "app.log"
MAX_BYTES = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 5

FORMAT_CONSOLE = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
FORMAT_FILE = "%(asctime)s | %(levelname)-7s | %(name)s | %(filename)s:%(lineno)d | %(message)s"
DATE_FMT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite", "aiomysql")


def _file_handler(log_dir: Path, level: int) -> Optional[logging.Handler]:
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError:
        return None
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FORMAT_FILE, datefmt=DATE_FMT))
    return handler


def setup_logging(level: str = "INFO", log_dir: Union[str, Path, None] = None) -> None:
    """Configure the root logger once; later calls only adjust the level."""
    level_value = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level_value)

    # Reloads (uvicorn --reload, test imports) must not stack handlers
    if root.handlers:
        return

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level_value)
    console.setFormatter(logging.Formatter(FORMAT_CONSOLE, datefmt=DATE_FMT))
    root.addHandler(console)

    directory = Path(log_dir or os.getenv("LOG_DIR") or DEFAULT_LOG_DIR)
    file_handler = _file_handler(directory, level_value)
    if file_handler is None:
        root.warning("Could not create log file in %s; file logging disabled", directory)
    else:
        root.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
