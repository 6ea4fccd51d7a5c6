"""Tests for the export serializer and base dataset loading."""

import importlib.util
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from base_dataset import load_base_dataset
from export import (
    EXPORT_FILENAME,
    EXPORT_NAME,
    ArtifactDecodeError,
    ExportArtifact,
    decode,
    serialize,
)
from merge_engine import full_replacement
from portfolio_data import PORTFOLIO_DATA
from portfolio_schema import Experience, OverrideState, PortfolioData, Project, SkillGroup

SRC_DIR = Path(__file__).parent.parent / "src"


@pytest.fixture
def base():
    return load_base_dataset()


@pytest.fixture
def overrides():
    return OverrideState(
        heroImage="data:image/png;base64,AAAA",
        experience=[Experience(role="Lead", company="Gamma", achievements=["Grew team"])],
        projects=[Project(title="Console", stack=["Python"], image="data:image/png;base64,BBBB")],
        skills=[SkillGroup(category="Cloud", items=["GCP"])],
    )


class TestSerialize:
    """Tests for serialize."""

    def test_fixed_filename(self, base, overrides):
        artifact = serialize(base, overrides)
        assert artifact.filename == EXPORT_FILENAME == "portfolio_data.py"
        assert artifact.media_type == "text/x-python"

    def test_contains_assignment(self, base, overrides):
        content = serialize(base, overrides).content
        assert f"\n{EXPORT_NAME} = {{" in content
        assert content.endswith("}\n")

    def test_roundtrip(self, base, overrides):
        assert decode(serialize(base, overrides)) == full_replacement(base, overrides)

    def test_artifact_is_importable(self, base, overrides, tmp_path):
        path = serialize(base, overrides).write(tmp_path)
        spec = importlib.util.spec_from_file_location("exported_portfolio_data", path)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        data = PortfolioData.model_validate(getattr(module, EXPORT_NAME))
        assert data == full_replacement(base, overrides)

    def test_overrides_first_in_artifact(self, base, overrides):
        data = decode(serialize(base, overrides))
        assert data.experience[0].role == "Lead"
        assert data.projects[0].image == "data:image/png;base64,BBBB"
        assert data.skills[0].category == "Cloud"

    def test_empty_overrides_reproduce_base(self, base):
        assert decode(serialize(base, OverrideState())) == base


class TestDecode:
    """Tests for decode."""

    def test_plain_text(self):
        assert decode('PORTFOLIO_DATA = {"name": "N"}').name == "N"

    def test_annotated_assignment(self):
        text = '"""doc"""\n\nPORTFOLIO_DATA: dict = {"name": "Annotated"}\n'
        assert decode(text).name == "Annotated"

    def test_missing_assignment(self):
        with pytest.raises(ArtifactDecodeError):
            decode("export const portfolioData = {}")

    def test_invalid_literal(self):
        with pytest.raises(ArtifactDecodeError):
            decode("PORTFOLIO_DATA = {'name': 'single quotes'}")

    def test_schema_mismatch(self):
        with pytest.raises(ArtifactDecodeError):
            decode('PORTFOLIO_DATA = {"headline": "no name"}')


class TestWrite:
    """Tests for ExportArtifact.write."""

    def test_write_creates_directory(self, tmp_path):
        artifact = ExportArtifact(EXPORT_FILENAME, 'PORTFOLIO_DATA = {"name": "N"}\n')
        path = artifact.write(tmp_path / "out")
        assert path == tmp_path / "out" / EXPORT_FILENAME
        assert path.read_text(encoding="utf-8") == artifact.content


class TestBaseDataset:
    """The bundled dataset."""

    def test_bundled_dataset_validates(self, base):
        assert base.name
        assert base.experience and base.projects and base.skills

    def test_bundled_module_is_an_artifact(self):
        text = (SRC_DIR / "portfolio_data.py").read_text(encoding="utf-8")
        assert decode(text) == PortfolioData.model_validate(PORTFOLIO_DATA)

    def test_load_from_exported_file(self, base, overrides, tmp_path):
        path = serialize(base, overrides).write(tmp_path)
        assert load_base_dataset(path) == full_replacement(base, overrides)

    def test_each_load_is_independent(self):
        first = load_base_dataset()
        first.experience.clear()
        assert load_base_dataset().experience
