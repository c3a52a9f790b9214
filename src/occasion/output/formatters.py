"""Human/JSON formatting of ServiceResult.

``resolve`` prints its bare line elsewhere; these helpers cover the
reports of ``validate``/``init``, JSON mode, and error/warning lines.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.text import Text

from occasion.output.console import create_console, get_output

if TYPE_CHECKING:
    from occasion.services.result import ServiceResult


def _format_data_human(data: dict[str, Any]) -> str:
    """Format result data as indented key-value pairs."""
    lines: list[str] = []
    for key, value in data.items():
        if isinstance(value, (dict, list)):
            lines.append(f"  {key}: {_json.dumps(value, separators=(',', ':'))}")
        else:
            lines.append(f"  {key}: {value}")
    return "\n".join(lines)


def format_result(result: ServiceResult, *, json_output: bool = False) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        json_output: If True, return JSON; otherwise return human-readable text.
    """
    if json_output:
        return result.model_dump_json(indent=2)
    if result.ok:
        parts = [f"OK: {result.op}"]
        if result.data:
            parts.append(_format_data_human(result.data))
        return "\n".join(parts)
    error_msg = result.error.message if result.error else "Unknown error"
    return f"ERROR: {result.op}: {error_msg}"


def render_error(result: ServiceResult, *, color: bool = False) -> str:
    """The failure line of *result*, styled red when *color* is set."""
    console = create_console(color=color)
    console.print(Text(format_result(result), style="occasion.error"))
    return get_output(console).rstrip("\n")


def render_warnings(result: ServiceResult, *, color: bool = False) -> str:
    """One ``WARNING:`` line per warning, styled yellow when *color* is set."""
    console = create_console(color=color)
    for warning in result.warnings:
        console.print(Text(f"WARNING: {warning}", style="occasion.warning"))
    return get_output(console).rstrip("\n")
