"""Tests for the root profilectl CLI."""

from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from profilectl import __version__
from profilectl.cli import cli
from profilectl.services.telemetry import disable_telemetry


@pytest.fixture
def _reset_telemetry() -> Iterator[None]:
    yield
    disable_telemetry()


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "profilectl" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


@pytest.mark.usefixtures("_isolated_project")
def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


@pytest.mark.usefixtures("_isolated_project")
def test_help_does_not_create_database(cli_runner: CliRunner, tmp_path: Path) -> None:
    cli_runner.invoke(cli, ["profile", "--help"])
    assert not (tmp_path / ".profilectl" / "profiles.db").exists()


@pytest.mark.usefixtures("_isolated_project")
def test_database_created_on_first_use(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["user", "create", "ann@x.com"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / ".profilectl" / "profiles.db").is_file()


# --- Global flags ---


def test_json_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--json", "--version"])
    assert result.exit_code == 0


@pytest.mark.usefixtures("_isolated_project", "_reset_telemetry")
def test_verbose_shows_telemetry(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-v", "user", "create", "ann@x.com"])
    assert result.exit_code == 0, result.output
    assert "    create_user " in result.stdout
    assert "ms [ok]" in result.stdout


@pytest.mark.usefixtures("_isolated_project")
def test_config_flag(cli_runner: CliRunner, tmp_path: Path) -> None:
    custom = tmp_path / "other.toml"
    custom.write_text('[[fields]]\nname = "team"\n', encoding="utf-8")
    result = cli_runner.invoke(cli, ["--json", "-c", str(custom), "fields", "list"])
    assert result.exit_code == 0, result.output
    assert '"team"' in result.stdout
    assert '"display_name"' not in result.stdout


@pytest.mark.usefixtures("_isolated_project")
def test_invalid_field_config_is_a_clean_error(cli_runner: CliRunner, tmp_path: Path) -> None:
    (tmp_path / "profilectl.toml").write_text('[[fields]]\nname = "email"\n', encoding="utf-8")
    result = cli_runner.invoke(cli, ["fields", "list"])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output
    assert "reserved" in result.output
    assert "Traceback" not in result.output


@pytest.mark.usefixtures("_isolated_project")
def test_missing_config_flag_is_an_error(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["-c", str(tmp_path / "nope.toml"), "fields", "list"])
    assert result.exit_code == 1
    assert "Config file from --config not found" in result.output


@pytest.mark.usefixtures("_isolated_project")
def test_db_flag_overrides_store_path(cli_runner: CliRunner, tmp_path: Path) -> None:
    db = tmp_path / "elsewhere" / "users.db"
    result = cli_runner.invoke(cli, ["--db", str(db), "user", "create", "ann@x.com"])
    assert result.exit_code == 0, result.output
    assert db.is_file()
    assert not (tmp_path / ".profilectl" / "profiles.db").exists()


@pytest.mark.usefixtures("_isolated_project")
def test_no_plugins_flag(cli_runner: CliRunner, tmp_path: Path) -> None:
    plugin_dir = tmp_path / ".profilectl" / "plugins"
    plugin_dir.mkdir(parents=True)
    (plugin_dir / "team.py").write_text(
        "import pluggy\n\n"
        'hookimpl = pluggy.HookimplMarker("profilectl")\n\n\n'
        "class TeamFields:\n"
        "    @hookimpl\n"
        "    def register_profile_fields(self):\n"
        '        return [{"name": "team"}]\n',
        encoding="utf-8",
    )
    with_plugins = cli_runner.invoke(cli, ["--json", "fields", "list"])
    without = cli_runner.invoke(cli, ["--json", "--no-plugins", "fields", "list"])
    assert '"team"' in with_plugins.stdout
    assert '"team"' not in without.stdout
    assert '"display_name"' in without.stdout
