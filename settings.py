"""Environment configuration for the settings store."""
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SETTINGS_PATH = Path.home() / ".config" / "settings-store" / "settings.json"

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def default_path() -> Path:
    """Settings file used when no path is given."""
    env_path = os.getenv("SETTINGS_STORE_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_SETTINGS_PATH


def setup_logging() -> None:
    """Configure root logging from LOG_LEVEL and LOG_FILE_PATH."""
    root = logging.getLogger()
    if root.handlers:
        return

    level = os.getenv("LOG_LEVEL", "WARNING").upper()
    if not isinstance(logging.getLevelName(level), int):
        level = "WARNING"
    root.setLevel(level)
    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    sh = logging.StreamHandler()
    sh.setFormatter(fmt)
    root.addHandler(sh)

    log_file = os.getenv("LOG_FILE_PATH")
    if log_file:
        fh = RotatingFileHandler(log_file, maxBytes=2_000_000, backupCount=2)
        fh.setFormatter(fmt)
        root.addHandler(fh)
