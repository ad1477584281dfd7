"""Environment-driven settings shared by the CLI and the HTTP API."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

DATA_DIR_ENV = "EXPENSE_TRACKER_DATA_DIR"
ENV_NAME_ENV = "EXPENSE_TRACKER_ENV"
ALLOWED_ORIGINS_ENV = "EXPENSE_TRACKER_ALLOWED_ORIGINS"
LOG_LEVEL_ENV = "EXPENSE_TRACKER_LOG_LEVEL"

DEFAULT_DATA_DIR = "data"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def data_dir(explicit: Optional[Path] = None) -> Path:
    """Directory holding the ledger snapshot; an explicit path wins over the environment."""
    if explicit is not None:
        return Path(explicit)
    return Path(os.getenv(DATA_DIR_ENV) or DEFAULT_DATA_DIR)


def is_development() -> bool:
    return os.getenv(ENV_NAME_ENV, "prod").lower() in {"dev", "development"}


def allowed_origins() -> List[str]:
    raw = os.getenv(ALLOWED_ORIGINS_ENV) or ""
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def log_level(verbose: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    name = (os.getenv(LOG_LEVEL_ENV) or "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(level=log_level(verbose), format=LOG_FORMAT)
