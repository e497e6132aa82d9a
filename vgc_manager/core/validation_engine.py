"""
ValidationEngine — turns raw form input into typed column values.

Input is a dict keyed by FieldSpec.name, as collected by EntityFormViewModel:
  TEXT / MULTILINE / INTEGER / DECIMAL / DATE → str (already-typed values pass through)
  BOOL       → bool
  CONDITION  → int 0..5 (0 means "not graded")
  LOOKUP     → Optional[int] id
  MANY       → list[int] ids

Each problem becomes a ValidationMessage. Missing required fields and
out-of-range conditions are always errors. Unparseable numbers and dates
are errors in strict mode (the default) and warnings in lenient mode, where
the field falls back to its default (usually None) instead.

No database access happens here; a form that fails validation never reaches
the repositories.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from vgc_manager.core.entities import EntityDescriptor, FieldKind, FieldSpec
from vgc_manager.core.exceptions import ValidationError
from vgc_manager.core.formatting import MAX_CONDITION


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class ValidationMessage:
    field: str
    severity: Severity
    message: str


@dataclass
class ValidationResult:
    is_valid: bool              # True only if there are no errors (warnings are allowed)
    values: dict = field(default_factory=dict)
    relations: dict = field(default_factory=dict)
    messages: list[ValidationMessage] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.WARNING]


class _Invalid(Exception):
    """Internal: a single field could not be parsed."""


class ValidationEngine:
    """
    Validates and coerces a raw form for one entity descriptor.
    Stateless; one instance can be shared.
    """

    def __init__(self, lenient: bool = False) -> None:
        self.lenient = lenient

    def validate(self, descriptor: EntityDescriptor, raw: dict) -> ValidationResult:
        messages: list[ValidationMessage] = []
        values: dict[str, Any] = {}
        relations: dict[str, list[int]] = {}

        for spec in descriptor.fields:
            value = raw.get(spec.name)

            if spec.kind == FieldKind.MANY:
                relations[spec.name] = [int(v) for v in (value or [])]
                continue

            if spec.required and _is_blank(value):
                messages.append(ValidationMessage(
                    spec.name, Severity.ERROR, f"{spec.label} is required.",
                ))
                continue

            try:
                values[spec.name] = self._coerce(spec, value)
            except _Invalid as exc:
                lenient_field = spec.kind in (FieldKind.INTEGER, FieldKind.DECIMAL, FieldKind.DATE)
                if self.lenient and lenient_field:
                    messages.append(ValidationMessage(
                        spec.name, Severity.WARNING, f"{exc} Value ignored.",
                    ))
                    values[spec.name] = spec.default
                else:
                    messages.append(ValidationMessage(spec.name, Severity.ERROR, str(exc)))

        has_errors = any(m.severity == Severity.ERROR for m in messages)
        return ValidationResult(
            is_valid=not has_errors, values=values, relations=relations, messages=messages,
        )

    def parse(self, descriptor: EntityDescriptor, raw: dict) -> ValidationResult:
        """validate(), raising ValidationError for the first error."""
        result = self.validate(descriptor, raw)
        if not result.is_valid:
            first = result.errors[0]
            raise ValidationError(first.message, field=first.field)
        return result

    # ------------------------------------------------------------------
    # Per-kind coercion
    # ------------------------------------------------------------------

    def _coerce(self, spec: FieldSpec, value: Any) -> Any:
        kind = spec.kind
        if kind in (FieldKind.TEXT, FieldKind.MULTILINE):
            text = "" if value is None else str(value).strip()
            return text or None
        if kind == FieldKind.BOOL:
            return bool(value) if value is not None else bool(spec.default)
        if kind == FieldKind.CONDITION:
            return _parse_condition(spec, value)
        if kind == FieldKind.LOOKUP:
            return None if _is_blank(value) else int(value)

        # Numeric and date inputs: blank falls back to the field default.
        if _is_blank(value):
            return spec.default
        if kind == FieldKind.INTEGER:
            return _parse_int(spec, value)
        if kind == FieldKind.DECIMAL:
            return _parse_decimal(spec, value)
        if kind == FieldKind.DATE:
            return _parse_date(spec, value)
        raise ValueError(f"Unsupported field kind: {kind!r}")


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------

def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_int(spec: FieldSpec, value: Any) -> int:
    if isinstance(value, bool):
        raise _Invalid(f"{spec.label} must be a whole number.")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip().replace(",", ""))
    except ValueError:
        raise _Invalid(f"{spec.label} must be a whole number.") from None


def _parse_decimal(spec: FieldSpec, value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        parsed = Decimal(str(value).strip().replace(",", "."))
    except InvalidOperation:
        raise _Invalid(f"{spec.label} must be a number.") from None
    if not parsed.is_finite():
        raise _Invalid(f"{spec.label} must be a number.")
    return parsed.quantize(Decimal("0.01"))


def _parse_date(spec: FieldSpec, value: Any) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise _Invalid(f"{spec.label} must be a date in YYYY-MM-DD format.") from None


def _parse_condition(spec: FieldSpec, value: Any) -> Optional[int]:
    if _is_blank(value):
        return None
    try:
        grade = int(value)
    except (TypeError, ValueError):
        raise _Invalid(f"{spec.label} must be between 1 and {MAX_CONDITION}.") from None
    if grade == 0:
        return None
    if not 1 <= grade <= MAX_CONDITION:
        raise _Invalid(f"{spec.label} must be between 1 and {MAX_CONDITION}.")
    return grade
