"""
Override layer: the single owned store of user-authored portfolio edits.

Every mutation updates memory and writes the affected key through the
persistence adapter before returning. Records are addressed either by
their position in the override sequence or by an opaque id assigned when
the record enters the store (ids live for the session only; the stored
layout is a plain ordered list per category).
"""

import logging
from typing import Any, Callable, Optional, Union
from uuid import uuid4

from pydantic import BaseModel

from persistence import (
    ALL_KEYS,
    EXPERIENCE_KEY,
    HERO_IMAGE_KEY,
    PROJECTS_KEY,
    SKILLS_KEY,
    OverridePersistence,
)
from portfolio_schema import CATEGORY_MODELS, Experience, OverrideState, Project, SkillGroup

logger = logging.getLogger(__name__)

CATEGORY_KEYS = {
    "experience": EXPERIENCE_KEY,
    "projects": PROJECTS_KEY,
    "skills": SKILLS_KEY,
}

Listener = Callable[[OverrideState], None]
RecordInput = Union[BaseModel, dict[str, Any]]


def _new_id() -> str:
    return uuid4().hex[:8]


class OverrideStore:
    """
    Owns the OverrideState for one session.

    Consumers read `state` (a deep copy) or subscribe to change
    notifications; only the methods below mutate it.
    """

    def __init__(self, persistence: OverridePersistence):
        self.persistence = persistence
        self._listeners: list[Listener] = []
        # Storage keys whose in-memory value has not reached the store
        self._unsaved: set[str] = set()

        loaded = persistence.load_state()
        self._hero_image: Optional[str] = loaded.heroImage
        self._records: dict[str, dict[str, BaseModel]] = {}
        self._order: dict[str, list[str]] = {}
        for category in CATEGORY_KEYS:
            self._records[category] = {}
            self._order[category] = []
            for record in getattr(loaded, category):
                entry_id = _new_id()
                self._records[category][entry_id] = record
                self._order[category].append(entry_id)

        logger.info(
            f"Override state loaded: {len(self._order['experience'])} experience, "
            f"{len(self._order['projects'])} projects, {len(self._order['skills'])} skills, "
            f"hero image {'set' if self._hero_image else 'unset'}"
        )

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    @property
    def in_sync(self) -> bool:
        """False while any edit lives in memory only."""
        return not self._unsaved

    @property
    def state(self) -> OverrideState:
        return OverrideState(
            heroImage=self._hero_image,
            **{c: self._sequence(c) for c in CATEGORY_KEYS},
        ).model_copy(deep=True)

    def _sequence(self, category: str) -> list[BaseModel]:
        return [self._records[category][i] for i in self._order[category]]

    def entries(self, category: str) -> list[tuple[str, BaseModel]]:
        """Return `(id, record)` pairs in override order."""
        self._check_category(category)
        return [
            (entry_id, self._records[category][entry_id].model_copy(deep=True))
            for entry_id in self._order[category]
        ]

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener`; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Override listener {listener!r} failed: {e}")

    # ------------------------------------------------------------------
    # Generic mutation helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_category(category: str) -> None:
        if category not in CATEGORY_KEYS:
            raise KeyError(f"Unknown override category: {category}")

    def _track(self, key: str, written: bool) -> None:
        if written:
            self._unsaved.discard(key)
        else:
            self._unsaved.add(key)

    def _persist(self, category: str) -> None:
        key = CATEGORY_KEYS[category]
        self._track(key, self.persistence.save(key, self._sequence(category)))

    def _coerce(self, category: str, record: RecordInput) -> BaseModel:
        model = CATEGORY_MODELS[category]
        if isinstance(record, model):
            return record.model_copy(deep=True)
        if isinstance(record, BaseModel):
            record = record.model_dump()
        return model.model_validate(record)

    def add(self, category: str, record: RecordInput) -> str:
        """Prepend `record` to `category`; returns its id."""
        self._check_category(category)
        item = self._coerce(category, record)
        entry_id = _new_id()
        self._records[category][entry_id] = item
        self._order[category].insert(0, entry_id)
        self._persist(category)
        logger.info(f"Added {category} override {entry_id}")
        self._notify()
        return entry_id

    def delete(self, category: str, index: int) -> bool:
        """Remove the override at `index`; out-of-range indices are a no-op."""
        self._check_category(category)
        order = self._order[category]
        if not 0 <= index < len(order):
            logger.debug(f"No {category} override at index {index}")
            return False
        return self.delete_by_id(category, order[index])

    def delete_by_id(self, category: str, entry_id: str) -> bool:
        """Remove the override with `entry_id`; unknown ids are a no-op."""
        self._check_category(category)
        if entry_id not in self._records[category]:
            return False
        del self._records[category][entry_id]
        self._order[category].remove(entry_id)
        self._persist(category)
        logger.info(f"Deleted {category} override {entry_id}")
        self._notify()
        return True

    # ------------------------------------------------------------------
    # Console API
    # ------------------------------------------------------------------

    def add_experience(self, experience: Union[Experience, dict]) -> str:
        return self.add("experience", experience)

    def add_project(self, project: Union[Project, dict]) -> str:
        return self.add("projects", project)

    def add_skill_group(self, skill_group: Union[SkillGroup, dict]) -> str:
        return self.add("skills", skill_group)

    def delete_experience(self, index: int) -> bool:
        return self.delete("experience", index)

    def delete_project(self, index: int) -> bool:
        return self.delete("projects", index)

    def delete_skill_group(self, index: int) -> bool:
        return self.delete("skills", index)

    def set_hero_image(self, data_uri: str) -> None:
        """Replace the hero image override."""
        value = OverrideState(heroImage=data_uri).heroImage
        if value is None:
            raise ValueError("Hero image cannot be empty; use reset_hero_image()")
        self._hero_image = value
        self._track(HERO_IMAGE_KEY, self.persistence.save(HERO_IMAGE_KEY, value))
        logger.info(f"Hero image override set ({len(value)} chars)")
        self._notify()

    def reset_hero_image(self) -> None:
        """Drop the hero image override so the base image shows again."""
        self._hero_image = None
        self._track(HERO_IMAGE_KEY, self.persistence.clear(HERO_IMAGE_KEY))
        logger.info("Hero image override reset")
        self._notify()

    def clear_all(self) -> None:
        """
        Empty every category and remove all persisted keys.

        Irreversible for this storage profile; callers must confirm first.
        """
        self._hero_image = None
        for category in CATEGORY_KEYS:
            self._records[category].clear()
            self._order[category].clear()
        for key in ALL_KEYS:
            self._track(key, self.persistence.clear(key))
        logger.info("All overrides cleared")
        self._notify()
