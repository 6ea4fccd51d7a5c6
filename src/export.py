"""
Export serializer.

Renders the merged dataset as a Python module that can replace the bundled
`portfolio_data.py`: a short docstring, then

    PORTFOLIO_DATA = {
      "name": "...",
      ...
    }

The literal is plain JSON. Absent optionals are dropped and the schema has
no booleans, so the JSON never contains null/true/false and is also a valid
Python expression.
"""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from merge_engine import full_replacement
from portfolio_schema import OverrideState, PortfolioData

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "portfolio_data.py"
EXPORT_MEDIA_TYPE = "text/x-python"
EXPORT_NAME = "PORTFOLIO_DATA"

# Optional annotation, e.g. `PORTFOLIO_DATA: dict = {...}`
_ASSIGNMENT = re.compile(rf"^{EXPORT_NAME}\s*(?::[^=\n]*)?=\s*", re.MULTILINE)

PREAMBLE = '''"""
Portfolio dataset.

Generated by the portfolio console export. Replace src/portfolio_data.py
with this file to make the current edits permanent.
"""

'''


class ArtifactDecodeError(ValueError):
    """The text is not a portfolio export artifact."""


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    content: str
    media_type: str = EXPORT_MEDIA_TYPE

    def write(self, directory: Union[Path, str]) -> Path:
        """Save the artifact under its fixed filename in `directory`."""
        directory = Path(directory).expanduser()
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.filename
        # Encode before opening so a bad character cannot leave a truncated file
        payload = self.content.encode("utf-8")
        path.write_bytes(payload)
        logger.info(f"Exported portfolio data to {path} ({len(self.content)} chars)")
        return path


def render_module(data: PortfolioData) -> str:
    """Render `data` as the text of a loadable dataset module."""
    payload = json.dumps(data.model_dump(mode="json", exclude_none=True), indent=2, ensure_ascii=False)
    return f"{PREAMBLE}{EXPORT_NAME} = {payload}\n"


def serialize(base: PortfolioData, overrides: OverrideState) -> ExportArtifact:
    """Produce the export artifact for the merged dataset."""
    return ExportArtifact(EXPORT_FILENAME, render_module(full_replacement(base, overrides)))


def decode(artifact: Union[ExportArtifact, str]) -> PortfolioData:
    """Recover the dataset embedded in an export artifact."""
    text = artifact.content if isinstance(artifact, ExportArtifact) else artifact
    match = _ASSIGNMENT.search(text)
    if match is None:
        raise ArtifactDecodeError(f"No '{EXPORT_NAME} = ' assignment found")

    try:
        data, _ = json.JSONDecoder().raw_decode(text, match.end())
        return PortfolioData.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ArtifactDecodeError(f"Invalid {EXPORT_NAME} literal: {e}") from e
