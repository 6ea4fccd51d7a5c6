"""Environment-driven settings for the portfolio console."""

import os
from pathlib import Path
from typing import Optional

STORAGE_PATH = Path(
    os.getenv("PORTFOLIO_STORAGE_PATH", "~/.portfolio-console/storage.json")
).expanduser()

# Page the console is attached to; `?view=hr` makes the session read-only
PAGE_URL = os.getenv("PORTFOLIO_PAGE_URL", "http://localhost:8000/")

# Exported artifact to use as Base Dataset instead of the bundled one
BASE_DATASET_PATH: Optional[Path] = (
    Path(os.environ["PORTFOLIO_BASE_DATASET"]).expanduser()
    if os.getenv("PORTFOLIO_BASE_DATASET")
    else None
)

EXPORT_DIR = Path(os.getenv("PORTFOLIO_EXPORT_DIR", ".")).expanduser()

# Browsers typically allow about 5 MiB per origin
STORAGE_QUOTA = int(os.getenv("PORTFOLIO_STORAGE_QUOTA", str(5 * 1024 * 1024)))

LOG_LEVEL = os.getenv("PORTFOLIO_LOG_LEVEL", "INFO").upper()

__all__ = [
    "STORAGE_PATH",
    "PAGE_URL",
    "BASE_DATASET_PATH",
    "EXPORT_DIR",
    "STORAGE_QUOTA",
    "LOG_LEVEL",
]
