# refer - https://loguru.readthedocs.io/en/stable/api/logger.html
import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} - {message}"

logger.remove() # remove default stuff
logger.configure(extra={"name": "imagemeta"})

logger.add(
    sys.stderr,
    format=LOG_FORMAT,
    level="INFO",
    colorize=True,
)


def get_logger(name: Optional[str] = None):
    if name:
        return logger.bind(name=name)
    return logger


def enable_error_log(log_dir: Union[str, Path] = "logs") -> int:
    """store error log files, one per day"""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    return logger.add(
        log_dir / "errors_{time:YYYY-MM-DD}.log",
        format=FILE_FORMAT,
        level="ERROR",
        rotation="5 MB",
        retention="90 days",
    )


def add_log_file(filepath: Union[str, Path], level: str = "INFO", **kwargs) -> int:
    kwargs.setdefault("format", FILE_FORMAT)
    return logger.add(filepath, level=level, **kwargs)


def set_log_level(level: str):
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=level, colorize=True)
