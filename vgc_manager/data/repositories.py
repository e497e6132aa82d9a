"""
Repository classes for data access.

Two generic repositories cover every table:
  - LookupRepository  — read + create for reference tables (genres, ...)
  - EntityRepository  — full CRUD for games, consoles and accessories

All methods accept an explicit Session argument — the caller (typically
CollectionController in core/) is responsible for session lifecycle and
for committing.

Example:
    with session_scope(factory) as session:
        repo = EntityRepository(session, Game, order_by="title")
        game = repo.get_by_id(1)
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from sqlalchemy import func, inspect, select
from sqlalchemy.orm import Session

from vgc_manager.core.exceptions import EntityNotFoundError


class LookupRepository:
    """Read and append access to a reference table. Rows are never updated or deleted."""

    def __init__(self, session: Session, model: type, order_by: Sequence[str] = ("name",)) -> None:
        self._session = session
        self._model = model
        self._order_by = [getattr(model, attr) for attr in order_by]

    def get_all(self) -> list:
        return list(self._session.scalars(select(self._model).order_by(*self._order_by)))

    def get_by_id(self, lookup_id: int) -> Optional[Any]:
        return self._session.get(self._model, lookup_id)

    def get_by_name(self, name: str) -> Optional[Any]:
        """Case-insensitive match on the name column."""
        return self._session.scalars(
            select(self._model).where(func.lower(self._model.name) == name.lower())
        ).first()

    def create(self, **values: Any) -> Any:
        row = self._model(**values)
        self._session.add(row)
        self._session.flush()  # populate id without committing
        return row


class EntityRepository:
    """CRUD operations for one collection entity model."""

    def __init__(self, session: Session, model: type, order_by: str) -> None:
        self._session = session
        self._model = model
        self._order_by = getattr(model, order_by)

    def get_by_id(self, entity_id: int) -> Optional[Any]:
        return self._session.get(self._model, entity_id)

    def get_all(self) -> list:
        return list(
            self._session.scalars(
                select(self._model).order_by(func.lower(self._order_by), self._model.id)
            )
        )

    def count(self, **filters: Any) -> int:
        stmt = select(func.count(self._model.id)).where(
            *(getattr(self._model, attr) == value for attr, value in filters.items())
        )
        return self._session.scalar(stmt) or 0

    def create(self, values: dict, relations: Optional[dict[str, list[int]]] = None) -> Any:
        entity = self._model(**values)
        self._session.add(entity)
        self._session.flush()  # INSERT ... RETURNING id
        if relations:
            self.replace_relations(entity, relations)
        return entity

    def update(
        self,
        entity_id: int,
        values: dict,
        relations: Optional[dict[str, list[int]]] = None,
    ) -> Optional[Any]:
        """Full-row update: every column in ``values`` is overwritten, None included."""
        entity = self.get_by_id(entity_id)
        if entity is None:
            return None
        for attr, value in values.items():
            setattr(entity, attr, value)
        self._session.flush()
        if relations is not None:
            self.replace_relations(entity, relations)
        return entity

    def replace_relations(self, entity: Any, relations: dict[str, list[int]]) -> None:
        """
        Rewrite many-to-many collections: delete every join row for the
        relationship, flush, then insert the new set.

        Args:
            relations: {relationship attribute: [target ids]}. Duplicate ids
                       are collapsed, order is preserved.
        """
        mapper = inspect(self._model)
        for attr, ids in relations.items():
            target = mapper.relationships[attr].mapper.class_
            unique_ids = list(dict.fromkeys(ids))
            targets = self._resolve(target, unique_ids)

            collection = getattr(entity, attr)
            collection.clear()
            self._session.flush()
            collection.extend(targets)
        self._session.flush()

    def delete(self, entity_id: int) -> bool:
        entity = self.get_by_id(entity_id)
        if entity:
            self._session.delete(entity)
            self._session.flush()
            return True
        return False

    def _resolve(self, target: type, ids: list[int]) -> list:
        if not ids:
            return []
        found = {
            row.id: row
            for row in self._session.scalars(select(target).where(target.id.in_(ids)))
        }
        for target_id in ids:
            if target_id not in found:
                raise EntityNotFoundError(target.__name__, target_id)
        return [found[target_id] for target_id in ids]
