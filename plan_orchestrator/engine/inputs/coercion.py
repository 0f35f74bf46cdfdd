"""Coercion of raw user-input values to declared field types."""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Dict, Mapping, Tuple

from ..errors import RequiredFieldMissingError, UnsupportedFieldTypeError
from ..schemas.plan import FieldType, FormField, FormInputSchema

_TRUE_STRINGS = ("true", "1", "yes")


def _to_number(field: FormField, value: Any) -> float | int:
    if isinstance(value, bool):
        raise UnsupportedFieldTypeError(
            f'Invalid number value for field "{field.id}": {value!r}', field_id=field.id, field_type=field.type.value
        )
    if isinstance(value, (int, float)):
        number: float | int = value
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            raise UnsupportedFieldTypeError(
                f'Invalid number value for field "{field.id}": {value!r}',
                field_id=field.id,
                field_type=field.type.value,
            ) from None
    if isinstance(number, float) and math.isnan(number):
        raise UnsupportedFieldTypeError(
            f'Invalid number value for field "{field.id}": {value!r}', field_id=field.id, field_type=field.type.value
        )
    return number


def _to_boolean(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _to_date(field: FormField, value: Any) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text).isoformat()
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        raise UnsupportedFieldTypeError(
            f'Invalid date value for field "{field.id}": {value!r}', field_id=field.id, field_type=field.type.value
        ) from None


def coerce_field_value(field: FormField, value: Any) -> Any:
    """
    Convert a raw adapter value to the field's declared type.

    Args:
        field: The field definition.
        value: The raw value returned by the input adapter.

    Returns:
        The coerced value: a number, a bool, an ISO ``YYYY-MM-DD`` string, or
        the value unchanged for text and select fields.

    Raises:
        UnsupportedFieldTypeError: If the value cannot be represented as the declared type.
    """
    if field.type == FieldType.number:
        return _to_number(field, value)
    if field.type == FieldType.boolean:
        return _to_boolean(value)
    if field.type == FieldType.date:
        return _to_date(field, value)
    if field.type == FieldType.multi_select and not isinstance(value, (list, tuple)):
        return [value]
    return value


def is_blank(value: Any) -> bool:
    return value is None or value == ""


def collect_form_values(schema: FormInputSchema, raw_values: Mapping[str, Any]) -> Tuple[Dict[str, Any], bool]:
    """
    Turn raw answers for a form into the values stored on its step result.

    Empty answers take the field's default; an empty required field without
    a default is an error. A skippable form whose answers are all empty is
    skipped: only defaults are kept and required fields are not enforced.

    Returns:
        ``(values, skipped)``.

    Raises:
        RequiredFieldMissingError: If a required field is empty and has no default.
        UnsupportedFieldTypeError: If an answer cannot be coerced to its field type.
    """
    defaults = {f.id: f.default_value for f in schema.fields if f.default_value is not None}
    if schema.skippable and all(is_blank(raw_values.get(f.id)) for f in schema.fields):
        return defaults, True

    values: Dict[str, Any] = {}
    for field in schema.fields:
        raw = raw_values.get(field.id)
        if is_blank(raw):
            if field.id in defaults:
                values[field.id] = defaults[field.id]
            elif field.required:
                raise RequiredFieldMissingError(field.id, field.label)
            continue
        values[field.id] = coerce_field_value(field, raw)
    return values, False
