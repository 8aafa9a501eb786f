"""
logging_config.py

Global logger configuration - import 'logger' directly from this module.

Settings come from the environment or a .env file:
    ENGARDE_LOG_LEVEL   level name, INFO by default
    ENGARDE_LOG_DIR     directory for the timestamped log file, logs/ by default
    ENGARDE_LOG_FILE    set to 0 to log to the stream only
"""
import logging
import os
from datetime import datetime
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def parse_level(name: Optional[str]) -> int:
    """Level constant for a name like 'debug'; unknown names fall back to INFO"""
    level = getattr(logging, (name or "INFO").upper(), None)
    return level if isinstance(level, int) else logging.INFO


def file_logging_enabled(flag: Optional[str]) -> bool:
    return (flag or "1").strip().lower() not in ("0", "false", "no", "off")


def build_handlers(log_dir: Optional[str]) -> List[logging.Handler]:
    """Stream handler, plus a timestamped file handler when a directory is given"""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_filename = os.path.join(log_dir, f"engarde_{timestamp}.log")
        handlers.insert(0, logging.FileHandler(log_filename, encoding="utf-8"))
    return handlers


log_dir = os.getenv("ENGARDE_LOG_DIR", "logs") if file_logging_enabled(os.getenv("ENGARDE_LOG_FILE")) else None

logging.basicConfig(
    level=parse_level(os.getenv("ENGARDE_LOG_LEVEL")),
    format=LOG_FORMAT,
    handlers=build_handlers(log_dir),
)

# Create and export a global logger
logger = logging.getLogger("engarde")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
