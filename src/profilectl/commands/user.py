"""Command group: user account management."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from profilectl.commands._base import ProfileGroup, parse_field_assignments

if TYPE_CHECKING:
    from profilectl.commands._context import AppContext


@click.group(
    cls=ProfileGroup,
    examples="""\
  profilectl user create alice@mail.org
  profilectl user create bob@mail.org --field nickname=bob --field age=31""",
)
def user() -> None:
    """Create users."""


@user.command(
    examples="""\
  profilectl user create alice@mail.org
  profilectl --json user create bob@mail.org --field newsletter=true""",
)
@click.argument("email")
@click.option(
    "--field",
    "fields",
    multiple=True,
    callback=parse_field_assignments,
    help="Additional field as key=value (repeatable).",
)
@click.pass_obj
def create(app: AppContext, email: str, fields: dict[str, Any]) -> None:
    """Create a user with EMAIL and optional additional fields."""
    from profilectl.services.create import UserCreateService

    service = UserCreateService(app.store, app.registry, plugin_manager=app.plugins)
    app.emit(service.create(email, fields))
