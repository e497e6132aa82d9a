"""
SQLAlchemy ORM models for the video game collection.

Uses SQLAlchemy 2.0 declarative style with Mapped[] type annotations.
Every model exposes its primary key as ``id`` while the column keeps the
schema's name (game_id, console_id, ...).

Relationships:
    consoles (1) ──< games >── genres, rating_systems (jp / us / eu)
    games >──< developers, composers, publishers, producers
    accessories >──< consoles
    console_types, accessory_types, manufacturers ──< consoles / accessories

Relationships are loaded with lazy="selectin" so entities handed to the GUI
keep their display names after the session is closed.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""
    pass


def _join_table(name: str, left: str, right: str) -> Table:
    left_table, left_key = left.split(".")
    right_table, right_key = right.split(".")
    return Table(
        name,
        Base.metadata,
        Column(left_key, ForeignKey(left, ondelete="CASCADE"), primary_key=True),
        Column(right_key, ForeignKey(right, ondelete="CASCADE"), primary_key=True),
    )


game_developers = _join_table("game_developers", "games.game_id", "developers.developer_id")
game_composers = _join_table("game_composers", "games.game_id", "composers.composer_id")
game_publishers = _join_table("game_publishers", "games.game_id", "publishers.publisher_id")
game_producers = _join_table("game_producers", "games.game_id", "producers.producer_id")
accessory_consoles = _join_table(
    "accessory_consoles", "accessories.accessory_id", "consoles.console_id"
)


# ---------------------------------------------------------------------------
# Lookup tables
# ---------------------------------------------------------------------------

class _NamedLookup:
    """Columns shared by the name-only reference tables."""

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id} name={self.name!r}>"


class Genre(_NamedLookup, Base):
    __tablename__ = "genres"
    id: Mapped[int] = mapped_column("genre_id", Integer, primary_key=True, autoincrement=True)


class Developer(_NamedLookup, Base):
    __tablename__ = "developers"
    id: Mapped[int] = mapped_column("developer_id", Integer, primary_key=True, autoincrement=True)


class Composer(_NamedLookup, Base):
    __tablename__ = "composers"
    id: Mapped[int] = mapped_column("composer_id", Integer, primary_key=True, autoincrement=True)


class Publisher(_NamedLookup, Base):
    __tablename__ = "publishers"
    id: Mapped[int] = mapped_column("publisher_id", Integer, primary_key=True, autoincrement=True)


class Producer(_NamedLookup, Base):
    __tablename__ = "producers"
    id: Mapped[int] = mapped_column("producer_id", Integer, primary_key=True, autoincrement=True)


class Manufacturer(_NamedLookup, Base):
    __tablename__ = "manufacturers"
    id: Mapped[int] = mapped_column(
        "manufacturer_id", Integer, primary_key=True, autoincrement=True
    )


class ConsoleType(_NamedLookup, Base):
    __tablename__ = "console_types"
    id: Mapped[int] = mapped_column("type_id", Integer, primary_key=True, autoincrement=True)


class AccessoryType(_NamedLookup, Base):
    __tablename__ = "accessory_types"
    id: Mapped[int] = mapped_column("type_id", Integer, primary_key=True, autoincrement=True)


class RatingSystem(Base):
    """
    An age rating within a regional system (e.g. CERO A, ESRB E, PEGI 12).
    ``region`` is one of JP / US / EU and decides which game column may use it.
    """
    __tablename__ = "rating_systems"
    __table_args__ = (
        UniqueConstraint("region", "code", name="uq_rating_systems_region_code"),
    )

    id: Mapped[int] = mapped_column("rating_id", Integer, primary_key=True, autoincrement=True)
    region: Mapped[str] = mapped_column(String(8), nullable=False)
    code: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    @property
    def name(self) -> str:
        """Dropdown label, e.g. 'PEGI 12 - EU'."""
        return f"{self.code} - {self.region}"

    def __repr__(self) -> str:
        return f"<RatingSystem id={self.id} region={self.region!r} code={self.code!r}>"


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

_CONDITION_CHECK = "condition IS NULL OR (condition BETWEEN 1 AND 5)"


def _names(items) -> list[str]:
    return sorted(item.name for item in items)


class Console(Base):
    __tablename__ = "consoles"
    __table_args__ = (
        CheckConstraint(_CONDITION_CHECK, name="ck_consoles_condition"),
    )

    id: Mapped[int] = mapped_column("console_id", Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("console_types.type_id", ondelete="SET NULL"), nullable=True
    )
    manufacturer_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("manufacturers.manufacturer_id", ondelete="SET NULL"), nullable=True
    )
    generation: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    jp_release_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    us_release_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    eu_release_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    discontinued: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    price_jpy: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    price_usd: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    controllers: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    cpu: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    gpu: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    memory: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    audio: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    units_sold: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    top_game: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    predecessor: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    successor: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    owned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    condition: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    console_type: Mapped[Optional[ConsoleType]] = relationship(lazy="selectin")
    manufacturer: Mapped[Optional[Manufacturer]] = relationship(lazy="selectin")

    @property
    def type_name(self) -> str:
        return self.console_type.name if self.console_type else ""

    @property
    def manufacturer_name(self) -> str:
        return self.manufacturer.name if self.manufacturer else ""

    def __repr__(self) -> str:
        return f"<Console id={self.id} name={self.name!r}>"


class Game(Base):
    __tablename__ = "games"
    __table_args__ = (
        CheckConstraint(_CONDITION_CHECK, name="ck_games_condition"),
    )

    id: Mapped[int] = mapped_column("game_id", Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    console_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("consoles.console_id", ondelete="SET NULL"), nullable=True
    )
    genre_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("genres.genre_id", ondelete="SET NULL"), nullable=True
    )
    jp_release_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    us_release_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    eu_release_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    jp_rating_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("rating_systems.rating_id", ondelete="SET NULL"), nullable=True
    )
    us_rating_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("rating_systems.rating_id", ondelete="SET NULL"), nullable=True
    )
    eu_rating_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("rating_systems.rating_id", ondelete="SET NULL"), nullable=True
    )
    units_sold: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    owned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    box_owned: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    collector: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    condition: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    purchase_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    purchase_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    console: Mapped[Optional[Console]] = relationship(lazy="selectin")
    genre: Mapped[Optional[Genre]] = relationship(lazy="selectin")
    jp_rating: Mapped[Optional[RatingSystem]] = relationship(
        foreign_keys=[jp_rating_id], lazy="selectin"
    )
    us_rating: Mapped[Optional[RatingSystem]] = relationship(
        foreign_keys=[us_rating_id], lazy="selectin"
    )
    eu_rating: Mapped[Optional[RatingSystem]] = relationship(
        foreign_keys=[eu_rating_id], lazy="selectin"
    )
    developers: Mapped[list[Developer]] = relationship(secondary=game_developers, lazy="selectin")
    composers: Mapped[list[Composer]] = relationship(secondary=game_composers, lazy="selectin")
    publishers: Mapped[list[Publisher]] = relationship(secondary=game_publishers, lazy="selectin")
    producers: Mapped[list[Producer]] = relationship(secondary=game_producers, lazy="selectin")

    @property
    def console_name(self) -> str:
        return self.console.name if self.console else ""

    @property
    def genre_name(self) -> str:
        return self.genre.name if self.genre else ""

    @property
    def jp_rating_name(self) -> str:
        return self.jp_rating.code if self.jp_rating else ""

    @property
    def us_rating_name(self) -> str:
        return self.us_rating.code if self.us_rating else ""

    @property
    def eu_rating_name(self) -> str:
        return self.eu_rating.code if self.eu_rating else ""

    @property
    def developer_names(self) -> list[str]:
        return _names(self.developers)

    @property
    def composer_names(self) -> list[str]:
        return _names(self.composers)

    @property
    def publisher_names(self) -> list[str]:
        return _names(self.publishers)

    @property
    def producer_names(self) -> list[str]:
        return _names(self.producers)

    def __repr__(self) -> str:
        return f"<Game id={self.id} title={self.title!r}>"


class Accessory(Base):
    __tablename__ = "accessories"
    __table_args__ = (
        CheckConstraint(_CONDITION_CHECK, name="ck_accessories_condition"),
    )

    id: Mapped[int] = mapped_column(
        "accessory_id", Integer, primary_key=True, autoincrement=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    color: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    type_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("accessory_types.type_id", ondelete="SET NULL"), nullable=True
    )
    manufacturer_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("manufacturers.manufacturer_id", ondelete="SET NULL"), nullable=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    condition: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    owned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    purchase_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    purchase_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    accessory_type: Mapped[Optional[AccessoryType]] = relationship(lazy="selectin")
    manufacturer: Mapped[Optional[Manufacturer]] = relationship(lazy="selectin")
    consoles: Mapped[list[Console]] = relationship(secondary=accessory_consoles, lazy="selectin")

    @property
    def type_name(self) -> str:
        return self.accessory_type.name if self.accessory_type else ""

    @property
    def manufacturer_name(self) -> str:
        return self.manufacturer.name if self.manufacturer else ""

    @property
    def console_names(self) -> list[str]:
        return _names(self.consoles)

    def __repr__(self) -> str:
        return f"<Accessory id={self.id} name={self.name!r}>"


# Explicit index definitions (SQLAlchemy emits CREATE INDEX on create_all)
Index("idx_games_title", Game.title)
Index("idx_games_console_id", Game.console_id)
Index("idx_consoles_name", Console.name)
Index("idx_accessories_name", Accessory.name)
