"""Load the bundled, read-only Base Dataset."""

import logging
from pathlib import Path
from typing import Optional, Union

from export import decode
from portfolio_data import PORTFOLIO_DATA
from portfolio_schema import PortfolioData

logger = logging.getLogger(__name__)


def load_base_dataset(source: Optional[Union[Path, str]] = None) -> PortfolioData:
    """
    Return the Base Dataset.

    With no `source`, the dataset bundled in `portfolio_data.py` is used.
    Otherwise `source` is an exported `portfolio_data.py` artifact on disk.
    """
    if source is None:
        return PortfolioData.model_validate(PORTFOLIO_DATA)

    path = Path(source).expanduser()
    logger.info(f"Loading base dataset from {path}")
    return decode(path.read_text(encoding="utf-8"))
