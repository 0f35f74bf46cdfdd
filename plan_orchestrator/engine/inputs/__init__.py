"""User input collection and value coercion."""

from .base import InputAdapter, surface_id_for
from .coercion import coerce_field_value, collect_form_values

__all__ = ["InputAdapter", "coerce_field_value", "collect_form_values", "surface_id_for"]
