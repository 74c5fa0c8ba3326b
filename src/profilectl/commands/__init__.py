"""Subcommand modules for profilectl.

Provides register_commands(), which imports command modules on demand to
keep ``profilectl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups on the root CLI group."""
    from profilectl.commands.fields import fields
    from profilectl.commands.profile import profile
    from profilectl.commands.user import user

    cli.add_command(user)
    cli.add_command(profile)
    cli.add_command(fields)
