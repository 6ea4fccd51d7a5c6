"""Compose override records ahead of the Base Dataset."""

from portfolio_schema import MergedView, OverrideState, PortfolioData

MERGED_CATEGORIES = ("experience", "projects", "skills")


def _merged_lists(base: PortfolioData, overrides: OverrideState) -> dict[str, list]:
    return {
        category: [
            record.model_copy(deep=True)
            for record in [*getattr(overrides, category), *getattr(base, category)]
        ]
        for category in MERGED_CATEGORIES
    }


def compute_view(base: PortfolioData, overrides: OverrideState) -> MergedView:
    """
    Build the display-ready view.

    For each category the override entries come first, in override order,
    followed by the base entries in bundled order. The hero image is the
    override when one is set, otherwise the base profile image. Inputs are
    never modified; the result shares no objects with them.
    """
    hero = overrides.heroImage if overrides.heroImage is not None else base.profileImage
    untouched = base.model_dump(
        include={"name", "headline", "summary", "contact", "education", "certifications"}
    )
    return MergedView(heroImage=hero, **untouched, **_merged_lists(base, overrides))


def full_replacement(base: PortfolioData, overrides: OverrideState) -> PortfolioData:
    """
    Fold the overrides into a new Base Dataset.

    Override entries become permanent members of each category. The base
    profile image is kept as is.
    """
    return base.model_copy(update=_merged_lists(base, overrides), deep=True)
