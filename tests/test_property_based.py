#!/usr/bin/env python3
"""
Property-based tests using Hypothesis.

Generate random datasets and override layers and verify the merge,
export and persistence invariants hold.
"""

import ast
import json
import sys
from pathlib import Path

from hypothesis import given, settings, strategies as st

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from export import decode, serialize
from merge_engine import compute_view, full_replacement
from override_layer import OverrideStore
from persistence import EXPERIENCE_KEY, PROJECTS_KEY, SKILLS_KEY, OverridePersistence
from portfolio_schema import Experience, OverrideState, PortfolioData, Project, SkillGroup
from storage import MemoryStore

text = st.text(max_size=30)
tags = st.lists(text, max_size=4)
images = st.one_of(st.none(), st.just("data:image/png;base64,AAAA"))

experiences = st.builds(
    Experience,
    role=text,
    company=text,
    period=text,
    location=text,
    type=text,
    achievements=tags,
    image=images,
)
projects = st.builds(
    Project,
    title=text,
    description=text,
    year=text,
    stack=tags,
    impact=st.one_of(st.none(), text),
    image=images,
)
skill_groups = st.builds(SkillGroup, category=text, items=tags, image=images)

override_states = st.builds(
    OverrideState,
    heroImage=images,
    experience=st.lists(experiences, max_size=4),
    projects=st.lists(projects, max_size=4),
    skills=st.lists(skill_groups, max_size=4),
)
datasets = st.builds(
    PortfolioData,
    name=text,
    headline=text,
    summary=text,
    profileImage=st.just("/assets/profile.jpg"),
    experience=st.lists(experiences, max_size=4),
    projects=st.lists(projects, max_size=4),
    skills=st.lists(skill_groups, max_size=4),
)


class TestMergeProperties:
    """Merge ordering and purity."""

    @given(datasets, override_states)
    @settings(max_examples=100)
    def test_overrides_precede_base(self, base, overrides):
        view = compute_view(base, overrides)
        assert view.experience == overrides.experience + base.experience
        assert view.projects == overrides.projects + base.projects
        assert view.skills == overrides.skills + base.skills

    @given(datasets, override_states)
    @settings(max_examples=50)
    def test_pure(self, base, overrides):
        base_before = base.model_dump()
        overrides_before = overrides.model_dump()
        assert compute_view(base, overrides) == compute_view(base, overrides)
        assert base.model_dump() == base_before
        assert overrides.model_dump() == overrides_before

    @given(datasets, override_states)
    @settings(max_examples=50)
    def test_hero_image_resolution(self, base, overrides):
        expected = overrides.heroImage if overrides.heroImage is not None else base.profileImage
        assert compute_view(base, overrides).heroImage == expected


class TestExportProperties:
    """Export round-trip."""

    @given(datasets, override_states)
    @settings(max_examples=100)
    def test_decode_serialize_roundtrip(self, base, overrides):
        assert decode(serialize(base, overrides)) == full_replacement(base, overrides)

    @given(datasets, override_states)
    @settings(max_examples=30)
    def test_artifact_literal_is_valid_python(self, base, overrides):
        body = serialize(base, overrides).content.split("PORTFOLIO_DATA = ", 1)[1]
        assert ast.literal_eval(body) == json.loads(body)


class TestPersistenceProperties:
    """Save/load idempotence."""

    @given(st.lists(experiences, max_size=5))
    @settings(max_examples=50)
    def test_experience_roundtrip(self, records):
        persistence = OverridePersistence(MemoryStore())
        persistence.save(EXPERIENCE_KEY, records)
        assert persistence.load(EXPERIENCE_KEY).value == records

    @given(st.lists(projects, max_size=5), st.lists(skill_groups, max_size=5))
    @settings(max_examples=50)
    def test_collections_roundtrip(self, project_list, skill_list):
        persistence = OverridePersistence(MemoryStore())
        persistence.save(PROJECTS_KEY, project_list)
        persistence.save(SKILLS_KEY, skill_list)
        assert persistence.load(PROJECTS_KEY).value == project_list
        assert persistence.load(SKILLS_KEY).value == skill_list

    @given(st.lists(projects, min_size=1, max_size=5), st.integers(min_value=-3, max_value=8))
    @settings(max_examples=50)
    def test_delete_by_index(self, project_list, index):
        overrides = OverrideStore(OverridePersistence(MemoryStore()))
        for project in reversed(project_list):
            overrides.add_project(project)
        assert overrides.state.projects == project_list

        removed = overrides.delete_project(index)

        expected = [p for i, p in enumerate(project_list) if i != index]
        assert removed == (0 <= index < len(project_list))
        assert overrides.state.projects == expected
