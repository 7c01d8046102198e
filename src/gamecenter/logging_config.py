from __future__ import annotations

import logging
from typing import Optional

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def level_from_verbosity(verbosity: int, default_level: int = logging.WARNING) -> int:
    if verbosity == 1:
        return logging.INFO
    if verbosity >= 2:
        return logging.DEBUG
    return default_level


def configure_logging(level_name: Optional[str] = None, verbosity: int = 0) -> int:
    """Configure the root logger and return the level that was applied.

    ``level_name`` (normally ``InputSettings.log_level``) wins over the ``-v``
    count passed by the CLI. Unknown names fall back to the verbosity level.
    """
    level = level_from_verbosity(verbosity)
    if level_name:
        level = getattr(logging, level_name.upper(), level)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    return level
