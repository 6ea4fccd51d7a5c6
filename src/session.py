"""
PortfolioSession: one page view's worth of portfolio state.

Ties the read-only Base Dataset, the override store and the visibility
gate together. The renderer reads `get_merged_view()`, `is_restricted()`
and `get_share_link()`; the console drives the mutation methods.
"""

import logging
from typing import Callable, Optional

from export import ExportArtifact, serialize
from merge_engine import compute_view
from override_layer import OverrideStore
from persistence import OverridePersistence
from portfolio_schema import MergedView, PortfolioData
from storage import KeyValueStore
from visibility import VisibilityGate

logger = logging.getLogger(__name__)

CLEAR_SESSION_PROMPT = (
    "This will clear your local session. "
    "Ensure you have downloaded your updated 'portfolio_data.py' first!"
)


class PortfolioSession:
    def __init__(self, base: PortfolioData, store: KeyValueStore, page_url: str):
        self.base = base
        self.overrides = OverrideStore(OverridePersistence(store))
        self.gate = VisibilityGate.from_url(page_url)

    # Renderer contract

    def get_merged_view(self) -> MergedView:
        return compute_view(self.base, self.overrides.state)

    def is_restricted(self) -> bool:
        return self.gate.restricted

    def get_share_link(self, clipboard: Optional[Callable[[str], None]] = None) -> str:
        return self.gate.share(clipboard)

    # Console contract

    def add_experience(self, experience) -> str:
        return self.overrides.add_experience(experience)

    def add_project(self, project) -> str:
        return self.overrides.add_project(project)

    def add_skill_group(self, skill_group) -> str:
        return self.overrides.add_skill_group(skill_group)

    def delete_experience(self, index: int) -> bool:
        return self.overrides.delete_experience(index)

    def delete_project(self, index: int) -> bool:
        return self.overrides.delete_project(index)

    def delete_skill_group(self, index: int) -> bool:
        return self.overrides.delete_skill_group(index)

    def set_hero_image(self, data_uri: str) -> None:
        self.overrides.set_hero_image(data_uri)

    def reset_hero_image(self) -> None:
        self.overrides.reset_hero_image()

    def clear_session(self, confirm: Callable[[str], bool]) -> bool:
        """
        Clear every override once `confirm` accepts the warning prompt.

        Returns True if the session was cleared.
        """
        if not confirm(CLEAR_SESSION_PROMPT):
            logger.info("Clear session cancelled")
            return False
        self.overrides.clear_all()
        return True

    def export(self) -> ExportArtifact:
        """Render the current merged dataset as a downloadable artifact."""
        return serialize(self.base, self.overrides.state)
