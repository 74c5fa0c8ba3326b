"""Command group: inspect the additional-field registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from profilectl.commands._base import ProfileGroup

if TYPE_CHECKING:
    from profilectl.commands._context import AppContext


@click.group(cls=ProfileGroup)
def fields() -> None:
    """Inspect registered additional fields."""


@fields.command(name="list")
@click.pass_obj
def list_fields(app: AppContext) -> None:
    """List registered additional fields and their rules."""
    from profilectl.services.registry import list_fields as list_registered_fields

    app.emit(list_registered_fields(app.registry))
