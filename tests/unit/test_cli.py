"""Tests for the typedrest CLI."""

from typer.testing import CliRunner

from typedrest.cli import app

runner = CliRunner()


def test_servers_lists_base_urls() -> None:
    result = runner.invoke(app, ["servers", "tests.factories:music_api"])
    assert result.exit_code == 0
    assert "prod https://api.music.test" in result.stdout
    assert "test https://test-api.music.test/" in result.stdout


def test_target_must_name_an_attribute() -> None:
    result = runner.invoke(app, ["routes", "tests.factories"])
    assert result.exit_code == 2


def test_target_module_must_exist() -> None:
    result = runner.invoke(app, ["routes", "tests.no_such_module:api"])
    assert result.exit_code == 2


def test_target_must_be_an_api_definition() -> None:
    result = runner.invoke(app, ["servers", "tests.factories:Playlist"])
    assert result.exit_code == 2
