"""
CollectionController — Application layer facade.

Coordinates between:
  - Data layer (repositories, one session per call)
  - Validation engine
  - Entity descriptors

The GUI layer calls only CollectionController (through its view models),
never repositories directly. The controller owns no connection: it receives
a session factory, so tests hand it one bound to in-memory SQLite.

Every mutating call runs in a single transaction. A save writes the parent
row and rewrites its many-to-many sets before committing; if any step fails
the whole save is rolled back and PersistenceError is raised.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Generator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vgc_manager.core.entities import ENTITIES, LOOKUPS, EntityDescriptor, LookupSpec
from vgc_manager.core.exceptions import (
    EntityNotFoundError,
    PersistenceError,
    ValidationError,
)
from vgc_manager.core.validation_engine import ValidationEngine, ValidationResult
from vgc_manager.data.database import SessionFactory, session_scope
from vgc_manager.data.repositories import EntityRepository, LookupRepository

logger = logging.getLogger("vgc.controller")


class CollectionController:
    """
    Facade for all collection operations.
    Instantiate once and reuse; it is stateless between calls.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        validation_engine: Optional[ValidationEngine] = None,
    ) -> None:
        self._session_factory = session_factory
        self._validator = validation_engine or ValidationEngine()

    @property
    def validator(self) -> ValidationEngine:
        return self._validator

    # ------------------------------------------------------------------
    # Generic entity operations
    # ------------------------------------------------------------------

    def list_entities(self, kind: str) -> list:
        descriptor = _descriptor(kind)
        with self._session(f"load {descriptor.plural.lower()}") as session:
            return _entity_repo(session, descriptor).get_all()

    def get_entity(self, kind: str, entity_id: int) -> Any:
        descriptor = _descriptor(kind)
        with self._session(f"load {descriptor.label.lower()} {entity_id}") as session:
            entity = _entity_repo(session, descriptor).get_by_id(entity_id)
        if entity is None:
            raise EntityNotFoundError(descriptor.label, entity_id)
        return entity

    def validate_entity(self, kind: str, data: dict) -> ValidationResult:
        return self._validator.validate(_descriptor(kind), data)

    def save_entity(self, kind: str, data: dict, entity_id: Optional[int] = 0) -> int:
        """
        Validate ``data`` and INSERT (entity_id 0/None) or UPDATE the entity.

        Returns:
            The persisted id.
        Raises:
            ValidationError before any query when the form is invalid.
            EntityNotFoundError when updating an unknown id.
            PersistenceError for any database failure (nothing is committed).
        """
        descriptor = _descriptor(kind)
        parsed = self._validator.parse(descriptor, data)
        for warning in parsed.warnings:
            logger.warning("%s form: %s", descriptor.label, warning.message)

        action = "update" if entity_id else "create"
        with self._session(f"{action} {descriptor.label.lower()}") as session:
            repo = _entity_repo(session, descriptor)
            if entity_id:
                entity = repo.update(entity_id, parsed.values, parsed.relations)
                if entity is None:
                    raise EntityNotFoundError(descriptor.label, entity_id)
            else:
                entity = repo.create(parsed.values, parsed.relations)
            session.commit()
            saved_id = entity.id

        logger.info(
            "%s %s %d (%r)", "Updated" if entity_id else "Created",
            descriptor.label.lower(), saved_id, parsed.values.get(descriptor.title_attr),
        )
        return saved_id

    def delete_entity(self, kind: str, entity_id: int) -> None:
        descriptor = _descriptor(kind)
        with self._session(f"delete {descriptor.label.lower()} {entity_id}") as session:
            if not _entity_repo(session, descriptor).delete(entity_id):
                raise EntityNotFoundError(descriptor.label, entity_id)
            session.commit()
        logger.info("Deleted %s %d", descriptor.label.lower(), entity_id)

    def collection_summary(self) -> dict[str, tuple[int, int]]:
        """{entity key: (total rows, owned rows)} for the home dashboard."""
        summary = {}
        with self._session("load summary") as session:
            for key, descriptor in ENTITIES.items():
                repo = _entity_repo(session, descriptor)
                summary[key] = (repo.count(), repo.count(owned=True))
        return summary

    # ------------------------------------------------------------------
    # Lookup tables
    # ------------------------------------------------------------------

    def get_lookup(self, kind: str) -> list:
        spec = _lookup(kind)
        with self._session(f"load {spec.key}") as session:
            return LookupRepository(session, spec.model, spec.order_by).get_all()

    def add_lookup(self, kind: str, name: str) -> Any:
        """Insert a name-only reference row (genre, developer, ...) and return it."""
        spec = _lookup(kind)
        if not spec.creatable or spec.fields != ("name",):
            raise ValueError(f"{spec.label} rows cannot be created with a name only.")
        name = (name or "").strip()
        if not name:
            raise ValidationError(f"{spec.label} name is required.", field="name")

        with self._session(f"add {spec.label.lower()}") as session:
            repo = LookupRepository(session, spec.model, spec.order_by)
            if repo.get_by_name(name) is not None:
                raise ValidationError(f"{spec.label} '{name}' already exists.", field="name")
            row = repo.create(name=name)
            session.commit()
        logger.info("Added %s %r (id %d)", spec.label.lower(), name, row.id)
        return row

    def add_rating_system(self, region: str, code: str, description: str = "") -> Any:
        spec = LOOKUPS["rating_systems"]
        region = (region or "").strip().upper()
        code = (code or "").strip()
        if not region:
            raise ValidationError("Region is required.", field="region")
        if not code:
            raise ValidationError("Code is required.", field="code")

        with self._session("add rating") as session:
            row = LookupRepository(session, spec.model, spec.order_by).create(
                region=region, code=code, description=(description or "").strip() or None,
            )
            session.commit()
        logger.info("Added rating %s %s (id %d)", region, code, row.id)
        return row

    # ------------------------------------------------------------------
    # Per-entity shortcuts
    # ------------------------------------------------------------------

    def get_games(self) -> list:
        return self.list_entities("game")

    def get_game(self, game_id: int):
        return self.get_entity("game", game_id)

    def save_game(self, data: dict, game_id: Optional[int] = 0) -> int:
        return self.save_entity("game", data, game_id)

    def delete_game(self, game_id: int) -> None:
        self.delete_entity("game", game_id)

    def get_consoles(self) -> list:
        return self.list_entities("console")

    def get_console(self, console_id: int):
        return self.get_entity("console", console_id)

    def save_console(self, data: dict, console_id: Optional[int] = 0) -> int:
        return self.save_entity("console", data, console_id)

    def delete_console(self, console_id: int) -> None:
        self.delete_entity("console", console_id)

    def get_accessories(self) -> list:
        return self.list_entities("accessory")

    def get_accessory(self, accessory_id: int):
        return self.get_entity("accessory", accessory_id)

    def save_accessory(self, data: dict, accessory_id: Optional[int] = 0) -> int:
        return self.save_entity("accessory", data, accessory_id)

    def delete_accessory(self, accessory_id: int) -> None:
        self.delete_entity("accessory", accessory_id)

    def get_genres(self) -> list:
        return self.get_lookup("genres")

    def get_developers(self) -> list:
        return self.get_lookup("developers")

    def get_composers(self) -> list:
        return self.get_lookup("composers")

    def get_publishers(self) -> list:
        return self.get_lookup("publishers")

    def get_producers(self) -> list:
        return self.get_lookup("producers")

    def get_manufacturers(self) -> list:
        return self.get_lookup("manufacturers")

    def get_console_types(self) -> list:
        return self.get_lookup("console_types")

    def get_accessory_types(self) -> list:
        return self.get_lookup("accessory_types")

    def get_rating_systems(self) -> list:
        return self.get_lookup("rating_systems")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _session(self, operation: str) -> Generator[Session, None, None]:
        """session_scope() that re-raises SQLAlchemy errors as PersistenceError."""
        try:
            with session_scope(self._session_factory) as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error("Failed to %s: %s", operation, exc)
            raise PersistenceError(f"Failed to {operation}: {exc}") from exc


def _descriptor(kind: str) -> EntityDescriptor:
    try:
        return ENTITIES[kind]
    except KeyError:
        raise ValueError(f"Unknown entity kind: {kind!r}") from None


def _lookup(kind: str) -> LookupSpec:
    try:
        return LOOKUPS[kind]
    except KeyError:
        raise ValueError(f"Unknown lookup kind: {kind!r}") from None


def _entity_repo(session, descriptor: EntityDescriptor) -> EntityRepository:
    return EntityRepository(session, descriptor.model, descriptor.order_by)
