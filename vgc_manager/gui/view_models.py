"""
View models — toolkit-independent state behind every tab and dialog.

Qt widgets render these objects and forward user input to them; none of the
classes here import PyQt6, so the selection / filter / pending-relation
logic is tested without a display.

  EntityListViewModel  — one per entity tab: full list, filtered rows,
                         search text, selected id, enabled commands.
  EntityFormViewModel  — one per add/edit dialog: raw field values,
                         dropdown options, staged many-to-many selections.
  HomeViewModel        — dashboard counts.

Observers register with subscribe(callback); callbacks take no arguments
and re-read whatever state they render.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from vgc_manager.core.collection_controller import CollectionController
from vgc_manager.core.entities import (
    ENTITIES,
    EntityDescriptor,
    FieldKind,
    FieldSpec,
)
from vgc_manager.core.exceptions import PersistenceError
from vgc_manager.core.filtering import filter_entities
from vgc_manager.core.formatting import (
    condition_to_stars,
    format_list,
    format_value,
    to_form_text,
)

logger = logging.getLogger("vgc.view_models")


class Observable:
    """Minimal subscriber list; notify() calls every callback in order."""

    def __init__(self) -> None:
        self._subscribers: list[Callable[[], None]] = []

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register callback; returns a function that unsubscribes it."""
        self._subscribers.append(callback)
        return lambda: self._subscribers.remove(callback)

    def notify(self) -> None:
        for callback in list(self._subscribers):
            callback()


# ---------------------------------------------------------------------------
# List / table state
# ---------------------------------------------------------------------------

class EntityListViewModel(Observable):
    """
    State behind one entity tab.

    Transitions:
        [no selection] --select(id)--> [row selected] --select(None)--> [no selection]
        any state --set_search_text()/refresh()--> selection kept only if still visible
    """

    def __init__(self, controller: CollectionController, kind: str) -> None:
        super().__init__()
        self._controller = controller
        self.descriptor: EntityDescriptor = ENTITIES[kind]
        self._all: list = []
        self._visible: list = []
        self._search_text = ""
        self._selected_id: Optional[int] = None
        self.load_error: Optional[str] = None

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def kind(self) -> str:
        return self.descriptor.key

    @property
    def all_items(self) -> list:
        return list(self._all)

    @property
    def items(self) -> list:
        """Entities currently shown, in table order."""
        return list(self._visible)

    @property
    def search_text(self) -> str:
        return self._search_text

    @property
    def headers(self) -> list[str]:
        return [col.header for col in self.descriptor.columns]

    @property
    def column_widths(self) -> list[int]:
        return [col.width for col in self.descriptor.columns]

    def rows(self) -> list[list[str]]:
        return [[col.value(item) for col in self.descriptor.columns] for item in self._visible]

    @property
    def selected_id(self) -> Optional[int]:
        return self._selected_id

    @property
    def selected_entity(self) -> Optional[Any]:
        if self._selected_id is None:
            return None
        return next((e for e in self._all if e.id == self._selected_id), None)

    # Commands are enabled exactly when a row is selected.
    @property
    def can_view_details(self) -> bool:
        return self._selected_id is not None

    @property
    def can_edit(self) -> bool:
        return self._selected_id is not None

    @property
    def can_delete(self) -> bool:
        return self._selected_id is not None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def refresh(self) -> bool:
        """
        Re-fetch the collection. On failure the previous list stays on
        screen, load_error is set and False is returned.
        """
        try:
            fetched = self._controller.list_entities(self.kind)
        except PersistenceError as exc:
            logger.exception("Could not load %s", self.descriptor.plural.lower())
            self.load_error = str(exc)
            self.notify()
            return False

        self.load_error = None
        self._all = fetched
        self._apply_filter()
        self.notify()
        return True

    def set_search_text(self, text: str) -> None:
        self._search_text = text or ""
        self._selected_id = None
        self._apply_filter()
        self.notify()

    def select(self, entity_id: Optional[int]) -> None:
        if entity_id is not None and not any(e.id == entity_id for e in self._visible):
            entity_id = None
        if entity_id == self._selected_id:
            return
        self._selected_id = entity_id
        logger.debug("%s selection: %s", self.descriptor.label, entity_id)
        self.notify()

    def select_row(self, row: Optional[int]) -> None:
        if row is None or not 0 <= row < len(self._visible):
            self.select(None)
        else:
            self.select(self._visible[row].id)

    def row_of(self, entity_id: int) -> Optional[int]:
        return next((i for i, e in enumerate(self._visible) if e.id == entity_id), None)

    def delete_selected(self) -> None:
        """Delete the selected entity and reload. Errors propagate to the caller."""
        if self._selected_id is None:
            return
        self._controller.delete_entity(self.kind, self._selected_id)
        self._selected_id = None
        self.refresh()

    def edit_target(self) -> Optional[Any]:
        """Fresh copy of the selected entity for the edit form; None without a selection."""
        if self._selected_id is None:
            return None
        return self._controller.get_entity(self.kind, self._selected_id)

    def title_of_selected(self) -> str:
        entity = self.selected_entity
        return self.descriptor.title_of(entity) if entity is not None else ""

    def _apply_filter(self) -> None:
        self._visible = filter_entities(
            self._all, self._search_text, self.descriptor.search_fields
        )
        if self._selected_id is not None and self.row_of(self._selected_id) is None:
            self._selected_id = None


# ---------------------------------------------------------------------------
# Form state
# ---------------------------------------------------------------------------

class EntityFormViewModel(Observable):
    """
    Raw values for an add / edit dialog.

    Many-to-many selections are staged in ``values[field]`` as id lists and
    only written when save() succeeds. A failed save leaves every value in
    place so the user can correct and retry.
    """

    def __init__(
        self,
        controller: CollectionController,
        kind: str,
        entity: Optional[Any] = None,
    ) -> None:
        super().__init__()
        self._controller = controller
        self.descriptor: EntityDescriptor = ENTITIES[kind]
        self.entity_id: int = entity.id if entity is not None else 0
        self.values: dict[str, Any] = {
            spec.name: _initial_value(spec, entity) for spec in self.descriptor.fields
        }
        self._options: dict[str, list] = {}

    @property
    def is_edit(self) -> bool:
        return bool(self.entity_id)

    @property
    def title(self) -> str:
        return f"{'Edit' if self.is_edit else 'Add'} {self.descriptor.label}"

    # ------------------------------------------------------------------
    # Dropdown options
    # ------------------------------------------------------------------

    def load_options(self) -> None:
        """Fetch every lookup the form needs. PersistenceError propagates."""
        for key in {spec.lookup for spec in self.descriptor.fields if spec.lookup}:
            self._options[key] = self._controller.get_lookup(key)

    def refresh_options(self, lookup_key: str) -> None:
        self._options[lookup_key] = self._controller.get_lookup(lookup_key)
        self.notify()

    def options_for(self, spec: FieldSpec) -> list[tuple[int, str]]:
        rows = self._options.get(spec.lookup, [])
        if spec.region:
            rows = [r for r in rows if r.region == spec.region]
        return [(r.id, r.name) for r in rows]

    def option_label(self, spec: FieldSpec, option_id: Optional[int]) -> str:
        for rid, label in self.options_for(spec):
            if rid == option_id:
                return label
        return ""

    # ------------------------------------------------------------------
    # Field editing
    # ------------------------------------------------------------------

    def set_value(self, name: str, value: Any) -> None:
        self.values[name] = value

    def add_related(self, name: str, related_id: Optional[int]) -> bool:
        """Stage one id; duplicates and empty picks are ignored."""
        if related_id is None:
            return False
        staged = self.values.setdefault(name, [])
        if related_id in staged:
            return False
        staged.append(related_id)
        self.notify()
        return True

    def clear_related(self, name: str) -> None:
        self.values[name] = []
        self.notify()

    def related_names(self, name: str) -> list[str]:
        spec = self.descriptor.get_field(name)
        labels = dict(self.options_for(spec))
        return [labels.get(rid, f"#{rid}") for rid in self.values.get(name, [])]

    def related_text(self, name: str) -> str:
        return format_list(self.related_names(name))

    def condition_text(self) -> str:
        grade = self.values.get("condition") or 0
        return f"Condition: {condition_to_stars(grade) if grade else '-'}"

    def create_lookup(self, lookup_key: str, name: str) -> Any:
        """'+ New' button: insert a reference row, then reload its options."""
        row = self._controller.add_lookup(lookup_key, name)
        self.refresh_options(lookup_key)
        return row

    def create_rating(self, region: str, code: str, description: str = "") -> Any:
        row = self._controller.add_rating_system(region, code, description)
        self.refresh_options("rating_systems")
        return row

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def save(self) -> int:
        """
        Validate and persist. Returns the saved id.
        ValidationError / PersistenceError propagate; values are untouched.
        """
        saved_id = self._controller.save_entity(
            self.descriptor.key, dict(self.values), self.entity_id
        )
        self.entity_id = saved_id
        return saved_id


def _initial_value(spec: FieldSpec, entity: Optional[Any]) -> Any:
    current = getattr(entity, spec.name, None) if entity is not None else None
    if spec.kind == FieldKind.MANY:
        return [row.id for row in current] if current else []
    if spec.kind == FieldKind.BOOL:
        return bool(current) if entity is not None else bool(spec.default)
    if spec.kind == FieldKind.CONDITION:
        return current or 0
    if spec.kind == FieldKind.LOOKUP:
        return current
    if entity is None and spec.default is not None:
        return to_form_text(spec.default)
    return to_form_text(current)


# ---------------------------------------------------------------------------
# Details and dashboard
# ---------------------------------------------------------------------------

def detail_rows(descriptor: EntityDescriptor, entity: Any) -> list[tuple[str, str, str]]:
    """(section, label, text) for every field of ``entity``, in form order."""
    rows = [("", "ID", str(entity.id))]
    for spec in descriptor.fields:
        if spec.kind == FieldKind.CONDITION:
            text = condition_to_stars(entity.condition)
        elif spec.display_attr:
            text = format_value(getattr(entity, spec.display_attr))
        else:
            text = format_value(getattr(entity, spec.name))
        rows.append((spec.section, spec.label, text))
    return rows


class HomeViewModel(Observable):

    def __init__(self, controller: CollectionController) -> None:
        super().__init__()
        self._controller = controller
        self.summary: dict[str, tuple[int, int]] = {}
        self.load_error: Optional[str] = None

    def refresh(self) -> bool:
        try:
            self.summary = self._controller.collection_summary()
        except PersistenceError as exc:
            logger.exception("Could not load collection summary")
            self.load_error = str(exc)
            self.notify()
            return False
        self.load_error = None
        self.notify()
        return True

    def lines(self) -> list[str]:
        out = []
        for key, descriptor in ENTITIES.items():
            total, owned = self.summary.get(key, (0, 0))
            out.append(f"{descriptor.plural}: {total}  ({owned} owned)")
        return out

