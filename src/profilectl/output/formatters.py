"""Rich/JSON formatting of ServiceResult.

Human output is dispatched by ``result.op``; unknown ops fall back to a
key-value listing. ``--json`` dumps the result model as-is.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from profilectl.output.console import create_console, get_output

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from profilectl.services.result import ServiceResult


def format_result(
    result: ServiceResult,
    *,
    json_output: bool = False,
    verbose: bool = False,
) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        json_output: Return indented JSON instead of human-readable text.
        verbose: Include ``meta`` (telemetry spans) in human output.
    """
    if json_output:
        return result.model_dump_json(indent=2)

    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
    else:
        _render_error(result, console)
    if verbose:
        _render_meta(result, console)
    return get_output(console).rstrip("\n")


def format_warnings(warnings: list[str]) -> str:
    """Render result warnings for stderr, one styled line each."""
    console = create_console()
    for warning in warnings:
        console.print(Text("WARNING", style="profile.warning"), Text(f"  {warning}"), sep="")
    return get_output(console).rstrip("\n")


# ── Renderers ────────────────────────────────────────────────────────


def _status_line(result: ServiceResult, console: Console) -> None:
    console.print(
        Text("OK", style="profile.ok"),
        Text(f"  {result.op}", style="profile.op"),
        sep="",
    )


def _field(console: Console, key: str, value: Any) -> None:
    style = "profile.id" if key == "id" else ""
    if isinstance(value, dict | list):
        value = json.dumps(value, separators=(",", ":"), sort_keys=True)
    console.print(
        Text(f"  {key}: ", style="profile.key"),
        Text(str(value), style=style),
        sep="",
    )


def _render_generic(result: ServiceResult, console: Console) -> None:
    _status_line(result, console)
    for key, value in result.data.items():
        _field(console, key, value)


def _render_profile(result: ServiceResult, console: Console) -> None:
    _status_line(result, console)
    data = result.data
    for key in ("id", "email", "created", "modified"):
        if key in data:
            _field(console, key, data[key])
    fields = data.get("additional_fields") or {}
    if fields:
        console.print(Text("  additional_fields:", style="profile.key"))
        for name in sorted(fields):
            console.print(
                Text(f"    {name}: ", style="profile.field"),
                Text(json.dumps(fields[name])),
                sep="",
            )
    changed = data.get("fields_changed")
    if changed is not None:
        _field(console, "fields_changed", ", ".join(changed) or "(none)")


def _render_fields(result: ServiceResult, console: Console) -> None:
    _status_line(result, console)
    items = result.data.get("items", [])
    if not items:
        console.print("  No additional fields registered.")
        return
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("name", style="profile.field")
    table.add_column("kind")
    table.add_column("required")
    table.add_column("rule")
    for item in items:
        rule_parts = [
            f"{key}={item[key]}"
            for key in ("rule", "pattern", "min_length", "max_length", "minimum", "maximum")
            if key in item
        ]
        if "choices" in item:
            rule_parts.append("choices=" + "|".join(item["choices"]))
        table.add_row(
            Text(item["name"]),
            Text(item["kind"]),
            Text("yes" if item.get("required") else "no"),
            Text(" ".join(rule_parts)),
        )
    console.print(table)


def _render_error(result: ServiceResult, console: Console) -> None:
    error = result.error
    message = error.message if error else "Unknown error"
    code = f" [{error.code}]" if error else ""
    console.print(
        Text("ERROR", style="profile.error"),
        Text(f"  {result.op}{code}", style="profile.op"),
        Text(f": {message}"),
        sep="",
    )
    errors = (error.detail.get("errors") if error else None) or {}
    for name, kind in sorted(errors.items()):
        console.print(
            Text(f"  {name}: ", style="profile.field"),
            Text(str(kind)),
            sep="",
        )


def _render_meta(result: ServiceResult, console: Console) -> None:
    telemetry = (result.meta or {}).get("telemetry")
    if not telemetry:
        return
    console.print(Text("  telemetry:", style="dim"))
    _render_span(console, telemetry, indent=4)


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    prefix = " " * indent
    line = f"{prefix}{span.get('name', '?')} {span.get('duration_ms', 0.0):.2f}ms"
    if "outcome" in span:
        line += f" [{span['outcome']}]"
    console.print(Text(line))
    for child in span.get("children", []):
        _render_span(console, child, indent + 2)


_OP_RENDERERS: dict[str, Callable[[ServiceResult, Console], None]] = {
    "create_user": _render_profile,
    "get_profile": _render_profile,
    "update_profile": _render_profile,
    "list_fields": _render_fields,
}
