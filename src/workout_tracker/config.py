"""Environment-variable-based configuration for the tracker entry point."""

from __future__ import annotations

import os
from pathlib import Path

DATA_PATH: Path = Path(
    os.environ.get("STRONG5X5_DATA_PATH", "~/.strong5x5/state.json")
).expanduser()
LOG_LEVEL: str = os.environ.get("STRONG5X5_LOG_LEVEL", "INFO").upper()
