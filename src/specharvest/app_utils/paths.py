"""Filesystem locations used by Spec Harvest."""

import os
from pathlib import Path

HOME_ENV_VAR = "SPECHARVEST_HOME"


def get_user_data_dir() -> Path:
    """Return the user data directory.

    ``$SPECHARVEST_HOME`` if set, else ``~/.specharvest``. The directory is
    not created here.
    """
    override = os.getenv(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".specharvest"


def get_config_file() -> Path:
    return get_user_data_dir() / "config.yaml"
