"""Tests for the merge engine."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from merge_engine import compute_view, full_replacement
from portfolio_schema import (
    Certification,
    ContactInfo,
    Education,
    Experience,
    OverrideState,
    PortfolioData,
    Project,
    SkillGroup,
)


@pytest.fixture
def base():
    return PortfolioData(
        name="Test Person",
        headline="Engineer",
        summary="Summary",
        profileImage="/assets/profile.jpg",
        contact=ContactInfo(email="t@example.com", phone="+1 555", linkedin="https://l", location="Earth"),
        education=[Education(institution="Uni", major="CS", period="2010 - 2014")],
        certifications=[Certification(title="Cert", issuer="Org", date="2020")],
        experience=[Experience(role="Engineer", company="Acme"), Experience(role="Intern", company="Beta")],
        projects=[Project(title="Base", year="2019")],
        skills=[SkillGroup(category="Data", items=["SQL"])],
    )


@pytest.fixture
def overrides():
    return OverrideState(
        experience=[Experience(role="Lead", company="Gamma")],
        projects=[Project(title="New A"), Project(title="New B")],
        skills=[SkillGroup(category="Cloud", items=["AWS"])],
    )


class TestComputeView:
    """Tests for compute_view."""

    def test_empty_overrides_equals_base(self, base):
        view = compute_view(base, OverrideState())
        assert view.experience == base.experience
        assert view.projects == base.projects
        assert view.skills == base.skills
        assert view.heroImage == base.profileImage

    def test_overrides_come_first(self, base, overrides):
        view = compute_view(base, overrides)
        assert [e.role for e in view.experience] == ["Lead", "Engineer", "Intern"]
        assert [p.title for p in view.projects] == ["New A", "New B", "Base"]
        assert [s.category for s in view.skills] == ["Cloud", "Data"]

    def test_hero_override_wins(self, base):
        view = compute_view(base, OverrideState(heroImage="data:image/png;base64,AA"))
        assert view.heroImage == "data:image/png;base64,AA"

    def test_untouched_sections_pass_through(self, base, overrides):
        view = compute_view(base, overrides)
        assert view.name == base.name
        assert view.contact == base.contact
        assert view.education == base.education
        assert view.certifications == base.certifications

    def test_deterministic(self, base, overrides):
        assert compute_view(base, overrides) == compute_view(base, overrides)

    def test_does_not_mutate_inputs(self, base, overrides):
        base_before = base.model_dump()
        overrides_before = overrides.model_dump()
        view = compute_view(base, overrides)
        view.experience[0].achievements.append("changed")
        view.projects.clear()
        assert base.model_dump() == base_before
        assert overrides.model_dump() == overrides_before


class TestFullReplacement:
    """Tests for the export dataset."""

    def test_categories_are_merged(self, base, overrides):
        data = full_replacement(base, overrides)
        assert [e.role for e in data.experience] == ["Lead", "Engineer", "Intern"]
        assert [p.title for p in data.projects] == ["New A", "New B", "Base"]
        assert [s.category for s in data.skills] == ["Cloud", "Data"]

    def test_profile_image_stays_base(self, base):
        data = full_replacement(base, OverrideState(heroImage="data:image/png;base64,AA"))
        assert data.profileImage == base.profileImage

    def test_other_sections_unchanged(self, base, overrides):
        data = full_replacement(base, overrides)
        assert data.certifications == base.certifications
        assert data.education == base.education
        assert data.contact == base.contact

    def test_base_untouched(self, base, overrides):
        before = base.model_dump()
        full_replacement(base, overrides)
        assert base.model_dump() == before
