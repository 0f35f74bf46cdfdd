from __future__ import annotations

"""Input adapter protocol.

An input adapter is the UI capability (CLI prompt, web form, ...) that
collects values for user-input steps. The engine asks for one field at a
time on a surface named ``user-input-{stepId}`` and coerces whatever the
adapter returns to the field's declared type.
"""

from typing import Any, Mapping, Protocol

from ..schemas.plan import FormField


def surface_id_for(step_id: int) -> str:
    return f"user-input-{step_id}"


class InputAdapter(Protocol):
    """Protocol for user input collection."""

    async def request_input(self, surface_id: str, field: FormField) -> Mapping[str, Any]:
        """
        Collect the value of one field.

        Args:
            surface_id: The surface the field belongs to (one per input step).
            field: The field definition to render.

        Returns:
            A mapping keyed by field id. A missing key means the field was left empty.

        Raises:
            Exception: Any error rejects the field and fails the input step.
        """
        ...
