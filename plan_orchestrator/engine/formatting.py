"""Plain-text rendering of execution results."""

from __future__ import annotations

import json
from typing import Any, List

from .schemas.results import ConditionalResult, ExecutionResult, FunctionCallResult, UserInputResult


def _fmt_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def format_result_for_display(result: ExecutionResult) -> str:
    """Render an execution trace, one line per step, followed by the outcome."""
    lines: List[str] = [f"Execution result - plan {result.plan_id}", ""]

    for step in result.steps:
        mark = "[ok]" if step.success else "[failed]"
        if isinstance(step, FunctionCallResult):
            args = ", ".join(f"{k}={_fmt_value(v)}" for k, v in step.parameters.items())
            line = f"{mark} Step {step.step_id}: {step.function_name}({args})"
            if step.success:
                line += f" = {_fmt_value(step.result)}"
        elif isinstance(step, UserInputResult):
            line = f"{mark} Step {step.step_id}: user input {_fmt_value(step.values)}"
            if step.skipped:
                line += " (skipped)"
        elif isinstance(step, ConditionalResult):
            line = f"{mark} Step {step.step_id}: condition '{step.condition}' -> {step.evaluated_result}"
            line += f" (branch: {step.executed_branch.value}"
            if step.skipped_steps:
                line += f", skipped: {', '.join(str(i) for i in step.skipped_steps)}"
            line += ")"
        else:
            line = f"{mark} Step {step.step_id}"
        if step.error:
            line += f" - error: {step.error}"
        lines.append(line)

    lines.append("")
    if result.waiting_for_input is not None:
        lines.append(f"Waiting for input at step {result.waiting_for_input.step_id}")
    elif result.success:
        lines.append(f"Final result: {_fmt_value(result.final_result)}")
    else:
        lines.append(f"Failed: {result.error}")
    return "\n".join(lines)
