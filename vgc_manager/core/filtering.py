"""
In-memory search over already-loaded entity lists.

Filtering is a linear, case-insensitive substring match over the descriptor's
search_fields. It always runs against the full unfiltered list, so every
keystroke recomputes from scratch; nothing is pushed to the database.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from vgc_manager.core.entities import ACCESSORY, CONSOLE, GAME


def matches(item: Any, needle: str, fields: Sequence[str]) -> bool:
    """True if any of ``fields`` on ``item`` contains ``needle`` (already lower-cased)."""
    for attr in fields:
        value = getattr(item, attr, None)
        if value and needle in str(value).lower():
            return True
    return False


def filter_entities(items: Iterable[Any], search_text: str, fields: Sequence[str]) -> list:
    items = list(items)
    needle = (search_text or "").lower()
    if not needle:
        return items
    return [item for item in items if matches(item, needle, fields)]


def filter_games(games: Iterable[Any], search_text: str) -> list:
    """Search title, console name and genre name."""
    return filter_entities(games, search_text, GAME.search_fields)


def filter_consoles(consoles: Iterable[Any], search_text: str) -> list:
    """Search name and manufacturer name."""
    return filter_entities(consoles, search_text, CONSOLE.search_fields)


def filter_accessories(accessories: Iterable[Any], search_text: str) -> list:
    """Search name, type, manufacturer and color."""
    return filter_entities(accessories, search_text, ACCESSORY.search_fields)
