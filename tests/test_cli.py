from typer.testing import CliRunner

from gmusic_cli import __version__
from gmusic_cli.cli import app as cli_app

runner = CliRunner()


def test_version():
    result = runner.invoke(cli_app.app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_download_without_songs_fails():
    result = runner.invoke(cli_app.app, ["download"])

    assert result.exit_code == 1
    assert "No songs given" in result.output


def test_init_then_validate(tmp_path, monkeypatch):
    monkeypatch.setattr(cli_app, "CONFIG_FILE", tmp_path / "config.ini")

    init = runner.invoke(
        cli_app.app, ["init", "user@example.com", "secret", "--storage", "music"]
    )
    validate = runner.invoke(cli_app.app, ["validate"])

    assert init.exit_code == 0
    assert validate.exit_code == 0
    assert "user@example.com" in validate.output


def test_commands_report_missing_config(tmp_path, monkeypatch):
    monkeypatch.setattr(cli_app, "CONFIG_FILE", tmp_path / "config.ini")

    result = runner.invoke(cli_app.app, ["playlists"])

    assert result.exit_code == 1
    assert "ConfigurationError" in result.output
