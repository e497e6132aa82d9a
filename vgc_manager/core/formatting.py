"""
Display helpers shared by tables, detail dialogs and forms.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional

NONE_SELECTED = "None selected"

_FULL_STAR = "★"
_EMPTY_STAR = "☆"
MAX_CONDITION = 5


def condition_to_stars(condition: Optional[int]) -> str:
    """
    Render a 1-5 condition grade as a five-star scale.

    Examples:
        3    -> '★★★☆☆'
        None -> ''
    """
    if condition is None:
        return ""
    filled = max(0, min(int(condition), MAX_CONDITION))
    return _FULL_STAR * filled + _EMPTY_STAR * (MAX_CONDITION - filled)


def format_list(items: Iterable[str], empty: str = NONE_SELECTED) -> str:
    names = list(items)
    if not names:
        return empty
    return ", ".join(names)


def format_value(value: Any) -> str:
    """Human-readable text for a column value; None becomes ''."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    if isinstance(value, (list, tuple)):
        return format_list(value, empty="")
    return str(value)


def to_form_text(value: Any) -> str:
    """Inverse of form parsing: the text an input box shows for a stored value."""
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    return str(value)
