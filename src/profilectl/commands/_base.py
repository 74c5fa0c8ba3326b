"""Custom Click base classes with --examples support, plus shared option parsing.

ProfileCommand and ProfileGroup accept an ``examples`` parameter. When
``--examples`` is passed, the command prints usage examples and exits,
which keeps ``--help`` concise.
"""

from __future__ import annotations

import json
from typing import Any

import click


def _add_examples_option(cmd: click.Command | click.Group, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class ProfileCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class ProfileGroup(click.Group):
    """Click Group subclass that supports an ``--examples`` flag.

    Sets ``command_class = ProfileCommand`` so subcommands accept the
    ``examples`` parameter without an explicit ``cls=``.
    """

    command_class = ProfileCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


def parse_field_assignments(
    _ctx: click.Context,
    _param: click.Parameter,
    values: tuple[str, ...],
) -> dict[str, Any]:
    """Click callback turning repeated ``--field key=value`` into a dict.

    Values that parse as JSON (numbers, booleans, null, quoted strings)
    keep their JSON type; anything else is passed through as a string.
    """
    fields: dict[str, Any] = {}
    for assignment in values:
        key, sep, raw = assignment.partition("=")
        key = key.strip()
        if not sep or not key:
            msg = f"Expected key=value, got {assignment!r}"
            raise click.BadParameter(msg)
        try:
            fields[key] = json.loads(raw)
        except json.JSONDecodeError:
            fields[key] = raw
    return fields
