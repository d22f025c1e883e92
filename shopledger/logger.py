import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional, Union
from . import settings


def resolve_level(level: Union[int, str, None]) -> int:
    """
    Maps a level name such as "debug" or "WARNING" (or a numeric level) to the
    logging constant. Unset or unknown names fall back to INFO.
    """
    if level is None:
        level = settings.LOG_LEVEL
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(
    name: Optional[str] = None, log_level: Union[int, str, None] = None
) -> logging.Logger:
    """
    Sets up the named logger (root by default) with console and rotating file output.
    The level, log directory, file name and rotation come from settings (.env)
    unless `log_level` is given.
    """
    level = resolve_level(log_level)
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Only handlers attached to this logger count, not inherited ones
    if logger.handlers:
        return logger

    console_format = logging.Formatter("%(message)s")
    file_format = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    settings.LOG_DIR.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        settings.LOG_DIR / settings.LOG_FILENAME,
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)

    return logger
