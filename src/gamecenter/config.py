from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "GameCenter"
USER_CATALOG_FILENAME = "input_catalog.yaml"

ENV_CATALOG = "GAMECENTER_INPUT_CATALOG"
ENV_FALLBACK = "GAMECENTER_FALLBACK_CONTEXT"
ENV_SUPPORTED = "GAMECENTER_REMAPPING_SUPPORTED"
ENV_LOG_LEVEL = "GAMECENTER_LOG_LEVEL"

_TRUTHY = {"1", "true", "yes", "on"}


def user_catalog_path() -> Path:
    return Path(user_config_dir(APP_NAME)) / USER_CATALOG_FILENAME


@dataclass(frozen=True)
class InputSettings:
    """Runtime configuration of the input layer.

    - catalog_path: YAML definitions to load instead of the embedded catalog.
    - fallback_context: overrides the catalog's fallback context name when set.
    - remapping_supported: answer given by the static capability probe on hosts
      that cannot detect remapping support themselves.
    - log_level: root log level name; None leaves the choice to the CLI -v flags.
    """

    catalog_path: Optional[Path] = None
    fallback_context: Optional[str] = None
    remapping_supported: bool = False
    log_level: Optional[str] = None

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        catalog_path: Optional[Path] = None,
    ) -> "InputSettings":
        """Build settings from environment variables.

        Catalog resolution order: explicit argument, GAMECENTER_INPUT_CATALOG,
        input_catalog.yaml in the user config dir when present, embedded default.
        """
        env = os.environ if environ is None else environ

        path = catalog_path
        if path is None and env.get(ENV_CATALOG):
            path = Path(env[ENV_CATALOG]).expanduser()
        if path is None:
            candidate = user_catalog_path()
            if candidate.exists():
                logger.info("Using user catalog override at %s", candidate)
                path = candidate

        fallback = (env.get(ENV_FALLBACK) or "").strip() or None
        supported = (env.get(ENV_SUPPORTED) or "").strip().lower() in _TRUTHY
        level = (env.get(ENV_LOG_LEVEL) or "").strip().upper() or None
        return cls(
            catalog_path=path,
            fallback_context=fallback,
            remapping_supported=supported,
            log_level=level,
        )


__all__ = ["InputSettings", "user_catalog_path"]
