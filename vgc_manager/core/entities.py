"""
Entity descriptors — the metadata that drives the generic CRUD layer.

One EntityDescriptor per collection entity (game, console, accessory) lists
its form fields, table columns, search fields and sort order. Repositories,
the validation engine, the controller, view models and Qt widgets all read
these descriptors instead of repeating per-entity code.

Usage:
    from vgc_manager.core.entities import ENTITIES, LOOKUPS

    game = ENTITIES["game"]
    game.get_field("title").required      # True
    LOOKUPS["genres"].model               # Genre
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from vgc_manager.core.formatting import condition_to_stars, format_value
from vgc_manager.data.models import (
    Accessory,
    AccessoryType,
    Composer,
    Console,
    ConsoleType,
    Developer,
    Game,
    Genre,
    Manufacturer,
    Producer,
    Publisher,
    RatingSystem,
)


class FieldKind(str, Enum):
    TEXT = "text"
    MULTILINE = "multiline"
    INTEGER = "integer"
    DECIMAL = "decimal"
    DATE = "date"
    BOOL = "bool"
    CONDITION = "condition"
    LOOKUP = "lookup"           # single nullable foreign key
    MANY = "many"               # many-to-many via join table


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass
class LookupSpec:
    key: str
    label: str
    model: type
    order_by: tuple[str, ...] = ("name",)
    # Rating systems carry region/code/description instead of a single name.
    fields: tuple[str, ...] = ("name",)
    # False for option sources that are full entities (accessory → consoles).
    creatable: bool = True


@dataclass
class FieldSpec:
    name: str                           # model attribute or relationship name
    label: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False
    section: str = ""
    default: Any = None
    lookup: Optional[str] = None        # LookupSpec key for LOOKUP / MANY
    display_attr: Optional[str] = None  # model property with the human-readable value
    region: Optional[str] = None        # restricts rating dropdowns to one region

    @property
    def is_relation(self) -> bool:
        return self.kind == FieldKind.MANY


@dataclass
class ColumnSpec:
    header: str
    width: int
    value: Callable[[Any], str]


@dataclass
class EntityDescriptor:
    key: str
    label: str
    plural: str
    model: type
    title_attr: str
    fields: list[FieldSpec]
    columns: list[ColumnSpec]
    search_fields: tuple[str, ...]
    order_by: str

    def get_field(self, name: str) -> Optional[FieldSpec]:
        return next((f for f in self.fields if f.name == name), None)

    @property
    def scalar_fields(self) -> list[FieldSpec]:
        return [f for f in self.fields if not f.is_relation]

    @property
    def relation_fields(self) -> list[FieldSpec]:
        return [f for f in self.fields if f.is_relation]

    def title_of(self, entity: Any) -> str:
        return getattr(entity, self.title_attr) or ""


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

LOOKUPS: dict[str, LookupSpec] = {
    spec.key: spec
    for spec in (
        LookupSpec("genres", "Genre", Genre),
        LookupSpec("developers", "Developer", Developer),
        LookupSpec("composers", "Composer", Composer),
        LookupSpec("publishers", "Publisher", Publisher),
        LookupSpec("producers", "Producer", Producer),
        LookupSpec("manufacturers", "Manufacturer", Manufacturer),
        LookupSpec("console_types", "Console Type", ConsoleType),
        LookupSpec("accessory_types", "Accessory Type", AccessoryType),
        LookupSpec(
            "rating_systems", "Rating", RatingSystem,
            order_by=("region", "code"),
            fields=("region", "code", "description"),
        ),
        LookupSpec("consoles", "Console", Console, creatable=False),
    )
}

RATING_REGIONS: tuple[str, ...] = ("JP", "US", "EU")


# ---------------------------------------------------------------------------
# Shared field groups
# ---------------------------------------------------------------------------

def _id_column(entity: Any) -> str:
    return str(entity.id)


def _attr_column(attr: str) -> Callable[[Any], str]:
    return lambda entity: format_value(getattr(entity, attr))


def _condition_column(entity: Any) -> str:
    return condition_to_stars(entity.condition)


def _release_dates(section: str = "Release Dates") -> list[FieldSpec]:
    return [
        FieldSpec("jp_release_date", "Japan", FieldKind.DATE, section=section),
        FieldSpec("us_release_date", "United States", FieldKind.DATE, section=section),
        FieldSpec("eu_release_date", "Europe", FieldKind.DATE, section=section),
    ]


def _purchase_info() -> list[FieldSpec]:
    return [
        FieldSpec("purchase_date", "Purchase Date", FieldKind.DATE, section="Purchase Info"),
        FieldSpec("purchase_price", "Purchase Price", FieldKind.DECIMAL, section="Purchase Info"),
    ]


_CONDITION = FieldSpec("condition", "Condition", FieldKind.CONDITION, section="Collection Info")
_OWNED = FieldSpec("owned", "Owned", FieldKind.BOOL, section="Collection Info", default=False)
_NOTES = FieldSpec("notes", "Notes", FieldKind.MULTILINE, section="Notes")


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

GAME = EntityDescriptor(
    key="game",
    label="Game",
    plural="Games",
    model=Game,
    title_attr="title",
    order_by="title",
    fields=[
        FieldSpec("title", "Title", required=True),
        FieldSpec(
            "console_id", "Console", FieldKind.LOOKUP, required=True,
            lookup="consoles", display_attr="console_name",
        ),
        FieldSpec("genre_id", "Genre", FieldKind.LOOKUP, lookup="genres", display_attr="genre_name"),
        *_release_dates(),
        FieldSpec(
            "jp_rating_id", "Japan Rating", FieldKind.LOOKUP, section="Ratings",
            lookup="rating_systems", display_attr="jp_rating_name", region="JP",
        ),
        FieldSpec(
            "us_rating_id", "US Rating", FieldKind.LOOKUP, section="Ratings",
            lookup="rating_systems", display_attr="us_rating_name", region="US",
        ),
        FieldSpec(
            "eu_rating_id", "EU Rating", FieldKind.LOOKUP, section="Ratings",
            lookup="rating_systems", display_attr="eu_rating_name", region="EU",
        ),
        FieldSpec("units_sold", "Units Sold Worldwide", FieldKind.INTEGER),
        FieldSpec(
            "developers", "Developers", FieldKind.MANY, section="Credits",
            lookup="developers", display_attr="developer_names",
        ),
        FieldSpec(
            "composers", "Composers", FieldKind.MANY, section="Credits",
            lookup="composers", display_attr="composer_names",
        ),
        FieldSpec(
            "publishers", "Publishers", FieldKind.MANY, section="Credits",
            lookup="publishers", display_attr="publisher_names",
        ),
        FieldSpec(
            "producers", "Producers", FieldKind.MANY, section="Credits",
            lookup="producers", display_attr="producer_names",
        ),
        _OWNED,
        FieldSpec("box_owned", "Box Owned", FieldKind.BOOL, section="Collection Info", default=False),
        FieldSpec("collector", "Collector's Edition", FieldKind.BOOL, section="Collection Info",
                  default=False),
        _CONDITION,
        *_purchase_info(),
        _NOTES,
    ],
    columns=[
        ColumnSpec("ID", 50, _id_column),
        ColumnSpec("Title", 400, _attr_column("title")),
        ColumnSpec("Platform", 300, _attr_column("console_name")),
        ColumnSpec("Genre", 200, _attr_column("genre_name")),
        ColumnSpec("Condition", 100, _condition_column),
    ],
    search_fields=("title", "console_name", "genre_name"),
)

CONSOLE = EntityDescriptor(
    key="console",
    label="Console",
    plural="Consoles",
    model=Console,
    title_attr="name",
    order_by="name",
    fields=[
        FieldSpec("name", "Name", required=True),
        FieldSpec(
            "type_id", "Type", FieldKind.LOOKUP, required=True,
            lookup="console_types", display_attr="type_name",
        ),
        FieldSpec(
            "manufacturer_id", "Manufacturer", FieldKind.LOOKUP, required=True,
            lookup="manufacturers", display_attr="manufacturer_name",
        ),
        FieldSpec("generation", "Generation", FieldKind.INTEGER),
        *_release_dates(),
        FieldSpec("discontinued", "Discontinued", FieldKind.DATE, section="Release Dates"),
        FieldSpec("price_jpy", "Launch Price (JPY)", FieldKind.INTEGER, section="Launch Prices"),
        FieldSpec("price_usd", "Launch Price (USD)", FieldKind.INTEGER, section="Launch Prices"),
        FieldSpec("controllers", "Controller Ports", FieldKind.INTEGER, section="Hardware"),
        FieldSpec("cpu", "CPU", section="Hardware"),
        FieldSpec("gpu", "GPU", section="Hardware"),
        FieldSpec("memory", "Memory", section="Hardware"),
        FieldSpec("audio", "Audio", section="Hardware"),
        FieldSpec("units_sold", "Units Sold", FieldKind.INTEGER, section="Sales & History"),
        FieldSpec("top_game", "Best-Selling Game", section="Sales & History"),
        FieldSpec("predecessor", "Predecessor", section="Sales & History"),
        FieldSpec("successor", "Successor", section="Sales & History"),
        _OWNED,
        _CONDITION,
        _NOTES,
    ],
    columns=[
        ColumnSpec("ID", 50, _id_column),
        ColumnSpec("Name", 300, _attr_column("name")),
        ColumnSpec("Manufacturer", 300, _attr_column("manufacturer_name")),
        ColumnSpec("Gen", 50, _attr_column("generation")),
        ColumnSpec("Condition", 100, _condition_column),
    ],
    search_fields=("name", "manufacturer_name"),
)

ACCESSORY = EntityDescriptor(
    key="accessory",
    label="Accessory",
    plural="Accessories",
    model=Accessory,
    title_attr="name",
    order_by="name",
    fields=[
        FieldSpec("name", "Name", required=True),
        FieldSpec("color", "Color"),
        FieldSpec(
            "type_id", "Type", FieldKind.LOOKUP, required=True,
            lookup="accessory_types", display_attr="type_name",
        ),
        FieldSpec(
            "manufacturer_id", "Manufacturer", FieldKind.LOOKUP,
            lookup="manufacturers", display_attr="manufacturer_name",
        ),
        FieldSpec(
            "consoles", "Compatible Consoles", FieldKind.MANY,
            lookup="consoles", display_attr="console_names",
        ),
        FieldSpec("quantity", "Quantity", FieldKind.INTEGER, default=1),
        _OWNED,
        _CONDITION,
        *_purchase_info(),
        _NOTES,
    ],
    columns=[
        ColumnSpec("ID", 50, _id_column),
        ColumnSpec("Name", 300, _attr_column("name")),
        ColumnSpec("Color", 150, _attr_column("color")),
        ColumnSpec("Type", 150, _attr_column("type_name")),
        ColumnSpec("Manufacturer", 200, _attr_column("manufacturer_name")),
        ColumnSpec("Condition", 100, _condition_column),
    ],
    search_fields=("name", "type_name", "manufacturer_name", "color"),
)

ENTITIES: dict[str, EntityDescriptor] = {d.key: d for d in (GAME, CONSOLE, ACCESSORY)}
