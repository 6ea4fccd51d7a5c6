"""
Persistence adapter for the override layer.

Maps the four override categories onto their storage keys:

    mozza_profile_img          raw string (data URI)
    mozza_custom_experience    JSON list of Experience
    mozza_custom_projects      JSON list of Project
    mozza_custom_skills        JSON list of SkillGroup

Loads never raise. A missing key is "absent"; text that is not valid JSON
or does not match the schema is "corrupt" and callers treat it as absent.
Writes that fail are logged and reported as False so the edit can live in
memory for the rest of the page view.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Literal, Optional

from pydantic import BaseModel, TypeAdapter, ValidationError

from portfolio_schema import Experience, OverrideState, Project, SkillGroup, dump_record
from storage import KeyValueStore, StorageWriteError

logger = logging.getLogger(__name__)

HERO_IMAGE_KEY = "mozza_profile_img"
EXPERIENCE_KEY = "mozza_custom_experience"
PROJECTS_KEY = "mozza_custom_projects"
SKILLS_KEY = "mozza_custom_skills"

ALL_KEYS = (HERO_IMAGE_KEY, EXPERIENCE_KEY, PROJECTS_KEY, SKILLS_KEY)

# Collection keys and the record model stored under each
COLLECTION_KEYS: dict[str, type[BaseModel]] = {
    EXPERIENCE_KEY: Experience,
    PROJECTS_KEY: Project,
    SKILLS_KEY: SkillGroup,
}

# OverrideState field for each collection key
STATE_FIELDS = {
    EXPERIENCE_KEY: "experience",
    PROJECTS_KEY: "projects",
    SKILLS_KEY: "skills",
}


@dataclass
class LoadResult:
    """Outcome of reading one key."""
    status: Literal["absent", "ok", "corrupt"]
    value: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def value_or(self, default: Any) -> Any:
        return self.value if self.ok else default


class OverridePersistence:
    """Reads and writes override records through a key-value store."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load(self, key: str) -> LoadResult:
        """Load and decode the value under `key`."""
        raw = self.store.get(key)
        if raw is None:
            return LoadResult("absent")

        if key == HERO_IMAGE_KEY:
            if not raw.strip():
                return LoadResult("absent")
            return LoadResult("ok", raw)

        model = COLLECTION_KEYS.get(key)
        if model is None:
            raise KeyError(f"Unknown override key: {key}")

        try:
            data = json.loads(raw)
            records = TypeAdapter(list[model]).validate_python(data)
        except (ValueError, ValidationError) as e:
            logger.warning(f"Ignoring corrupt override record '{key}': {e}")
            return LoadResult("corrupt", error=str(e))

        return LoadResult("ok", records)

    def save(self, key: str, value: Any) -> bool:
        """Encode and write `value`. Returns False if the store refused it."""
        if key == HERO_IMAGE_KEY:
            text = value
        elif key in COLLECTION_KEYS:
            text = json.dumps([dump_record(r) for r in value], ensure_ascii=False)
        else:
            raise KeyError(f"Unknown override key: {key}")

        try:
            self.store.set(key, text)
        except StorageWriteError as e:
            logger.warning(f"Could not persist '{key}', keeping edit in memory only: {e}")
            return False
        logger.debug(f"Persisted '{key}' ({len(text)} chars)")
        return True

    def clear(self, key: str) -> bool:
        """Remove `key` from the store."""
        try:
            self.store.remove(key)
        except StorageWriteError as e:
            logger.warning(f"Could not remove '{key}': {e}")
            return False
        return True

    def load_state(self) -> OverrideState:
        """Assemble the full override state; unusable keys count as empty."""
        hero = self.load(HERO_IMAGE_KEY).value_or(None)
        fields = {
            STATE_FIELDS[key]: self.load(key).value_or([])
            for key in COLLECTION_KEYS
        }
        try:
            return OverrideState(heroImage=hero, **fields)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid hero image override: {e}")
            return OverrideState(**fields)
