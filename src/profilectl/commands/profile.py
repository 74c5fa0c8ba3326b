"""Command group: show and update user profiles."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from profilectl.commands._base import ProfileGroup, parse_field_assignments

if TYPE_CHECKING:
    from profilectl.commands._context import AppContext


@click.group(
    cls=ProfileGroup,
    examples="""\
  profilectl profile show usr_0a1b2c3d4e5f
  profilectl profile update usr_0a1b2c3d4e5f --email new@mail.org
  profilectl profile update usr_0a1b2c3d4e5f --field nickname=ally""",
)
def profile() -> None:
    """Show and update user profiles."""


@profile.command(
    examples="""\
  profilectl profile show usr_0a1b2c3d4e5f
  profilectl --json profile show usr_0a1b2c3d4e5f""",
)
@click.argument("user_id")
@click.pass_obj
def show(app: AppContext, user_id: str) -> None:
    """Show the profile of USER_ID."""
    from profilectl.services.query import ProfileQueryService

    app.emit(ProfileQueryService(app.store, app.registry).get(user_id))


@profile.command(
    examples="""\
  profilectl profile update usr_0a1b2c3d4e5f --email new@mail.org
  profilectl profile update usr_0a1b2c3d4e5f --field age=32 --field newsletter=false
  profilectl profile update usr_0a1b2c3d4e5f --field 'nickname="007"'""",
)
@click.argument("user_id")
@click.option("--email", default=None, help="New email address.")
@click.option(
    "--field",
    "fields",
    multiple=True,
    callback=parse_field_assignments,
    help="Additional field as key=value (repeatable). JSON values keep their type.",
)
@click.pass_obj
def update(
    app: AppContext,
    user_id: str,
    email: str | None,
    fields: dict[str, Any],
) -> None:
    """Partially update the profile of USER_ID.

    Only the email and fields given are changed; other fields are kept.
    """
    from profilectl.domain.user import ProfileUpdate
    from profilectl.services.update import ProfileUpdateService

    changes = ProfileUpdate(email=email, additional_fields=fields)
    if changes.is_empty:
        click.echo("No changes specified. Use --help for options.", err=True)
        raise SystemExit(1)

    service = ProfileUpdateService(app.store, app.registry, plugin_manager=app.plugins)
    app.emit(service.update(user_id, changes))
