"""Package settings read from assets/config/defaults.json."""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from meshforge.constants import CONFIG_DIR, DEFAULTS_FILE

logger = logging.getLogger(__name__)


def load_settings(path: Optional[Path] = None) -> dict[str, Any]:
    """Read a settings file holding one JSON object.

    Parameters
    ----------
    path : str or Path, optional
        Settings file; the packaged ``defaults.json`` when omitted.

    Raises
    ------
    ValueError
        If the file's top-level value is not an object.
    """
    path = Path(path) if path is not None else CONFIG_DIR / DEFAULTS_FILE
    with open(path) as f:
        settings = json.load(f)
    if not isinstance(settings, dict):
        raise ValueError(
            f"Settings file {path} must hold a JSON object, got {type(settings).__name__}"
        )
    logger.debug("Loaded %d settings from %s", len(settings), path)
    return settings


@lru_cache(maxsize=1)
def _defaults() -> dict[str, Any]:
    return load_settings()


def get_setting(key: str, default: Any = None) -> Any:
    """Packaged default for ``key``, or ``default`` when it is not set."""
    return _defaults().get(key, default)
