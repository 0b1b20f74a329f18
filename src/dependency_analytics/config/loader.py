from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from ..core.errors import ConfigLoadError
from .settings import AppConfig
from .urls import get_api_url

logger = logging.getLogger(__name__)

RC_FILE_NAME = ".analysis_rc"


def read_rc_file(path: Path) -> dict[str, Any]:
    """Read a JSON override file; a missing file yields an empty mapping."""
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigLoadError(f"Cannot read {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigLoadError(f"{path} must contain a JSON object")
    return data


def load_config(base: Optional[AppConfig] = None, rc_file: Optional[Path] = None) -> AppConfig:
    """Build the effective configuration: environment first, then ~/.analysis_rc.

    A malformed override file is reported and ignored.
    """
    config = base or AppConfig()
    path = rc_file or config.home_dir / RC_FILE_NAME
    try:
        rc = read_rc_file(path)
    except ConfigLoadError as e:
        logger.warning(f"Ignoring local override file: {e}")
        return config

    if "server" in rc:
        server_url = get_api_url(str(rc["server"]))
        logger.info(f"Using server from {path}: {server_url}")
        config = config.model_copy(update={"server_url": server_url})
    return config
