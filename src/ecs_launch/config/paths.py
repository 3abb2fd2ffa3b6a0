"""Location of the user env file."""

import os
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "ecs-launch"
ENV_FILENAME = ".env"
ENV_FILE_VARIABLE = "ECS_LAUNCH_ENV_FILE"


def env_path() -> Path:
    """Return the env file settings are read from.

    `ECS_LAUNCH_ENV_FILE` points at another file; otherwise the file lives
    in the per-user config directory.
    """
    override = os.environ.get(ENV_FILE_VARIABLE, "").strip()
    if override:
        return Path(override).expanduser()
    return Path(user_config_dir(APP_NAME)) / ENV_FILENAME
