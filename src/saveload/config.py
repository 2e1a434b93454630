from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from platformdirs import PlatformDirs

logger = logging.getLogger(__name__)

APP_NAME = "SaveLoad"

# Environment variable overrides (useful for tests and portable installs)
ENV_SAVE_DIR = "SAVELOAD_SAVE_DIR"
ENV_LOG_LEVEL = "SAVELOAD_LOG_LEVEL"


def default_save_root(app_name: str = APP_NAME) -> Path:
    """Platform-specific directory holding the save files.

    Linux: ~/.local/share/SaveLoad/saves
    macOS: ~/Library/Application Support/SaveLoad/saves
    Windows: %LOCALAPPDATA%\\SaveLoad\\saves
    """
    dirs = PlatformDirs(appname=app_name, appauthor=False)
    return Path(dirs.user_data_dir) / "saves"


@dataclass
class SaveLoadConfig:
    """
    Runtime configuration.

    Environment overrides:
      - SAVELOAD_SAVE_DIR: directory holding the four save files
      - SAVELOAD_LOG_LEVEL: logging level name (DEBUG, INFO, ...)
    """

    save_root: Path
    log_level: Optional[int] = None


def load_config() -> SaveLoadConfig:
    override = os.getenv(ENV_SAVE_DIR)
    if override:
        save_root = Path(override).expanduser().resolve()
        logger.debug("Using save root from %s: %s", ENV_SAVE_DIR, save_root)
    else:
        save_root = default_save_root()

    level: Optional[int] = None
    level_name = os.getenv(ENV_LOG_LEVEL)
    if level_name:
        resolved = logging.getLevelName(level_name.upper())
        if isinstance(resolved, int):
            level = resolved
        else:
            logger.warning("Ignoring unknown %s=%r", ENV_LOG_LEVEL, level_name)
    return SaveLoadConfig(save_root=save_root, log_level=level)
