"""Configuration for pydotsync.

Resolves where the entry file lives and how many workers a sync pass uses.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .utils import DEFAULT_CONFIG_FILE_NAME

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PYDOTSYNC_CONFIG"
WORKERS_ENV_VAR = "PYDOTSYNC_WORKERS"


class Config:
    """Application settings derived from the environment."""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize configuration.

        Args:
            config_dir: Directory holding the entry file. Defaults to
                ~/.config/pydotsync/
        """
        if config_dir is None:
            config_dir = Path.home() / ".config" / "pydotsync"
        self.config_dir = config_dir

    def get_config_path(self, override: Optional[str] = None) -> Path:
        """Get the path of the entry file.

        Args:
            override: Path given on the command line

        Returns:
            Explicit override, else $PYDOTSYNC_CONFIG, else the default file
        """
        if override:
            return Path(os.path.expanduser(override))
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return Path(os.path.expanduser(env_path))
        return self.config_dir / DEFAULT_CONFIG_FILE_NAME

    def get_max_workers(self, override: Optional[int] = None) -> int:
        """Get the number of parallel workers for a sync pass.

        Args:
            override: Worker count given on the command line

        Returns:
            Explicit override, else $PYDOTSYNC_WORKERS, else the CPU count
        """
        if override is not None and override > 0:
            return override

        env_value = os.environ.get(WORKERS_ENV_VAR)
        if env_value:
            try:
                workers = int(env_value)
                if workers > 0:
                    return workers
            except ValueError:
                pass
            logger.warning(f"Ignoring invalid {WORKERS_ENV_VAR}={env_value!r}")

        return os.cpu_count() or 1


# Global config instance
config = Config()
