"""Tests for the hearbot command line."""

import json
import sys

import pytest
from loguru import logger
from typer.testing import CliRunner

from hearbot import __version__
from hearbot.cli.commands import _adapter_options, app
from hearbot.config.schema import Config

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    # commands replace loguru's sinks with the runner's captured stderr
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def script(tmp_path, monkeypatch):
    monkeypatch.syspath_prepend(str(tmp_path))
    (tmp_path / "hb_cli_script.py").write_text(
        "def setup(robot):\n"
        "    robot.hear(r'deploy', 'deploy.start', lambda res: None)\n"
        "    robot.catch_all(lambda res: None)\n"
        "    robot.receive_middleware(lambda ctx: None)\n"
    )
    (tmp_path / "hb_cli_broken.py").write_text(
        "def setup(robot):\n"
        "    raise RuntimeError('cannot load')\n"
    )
    return tmp_path


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_check_lists_listeners(script):
    result = runner.invoke(app, ["check", "-c", str(script / "none.json"), "-r", "hb_cli_script"])
    assert result.exit_code == 0
    assert "deploy.start" in result.stdout
    assert "receive=1" in result.stdout
    assert "2 listeners registered" in result.stdout


def test_check_fails_on_broken_script(script):
    result = runner.invoke(app, ["check", "-c", str(script / "none.json"), "-r", "hb_cli_broken"])
    assert result.exit_code == 1
    assert "cannot load" in result.stdout


def test_init_then_status(tmp_path):
    path = tmp_path / "config.json"
    result = runner.invoke(app, ["init", "-c", str(path)])
    assert result.exit_code == 0
    assert json.loads(path.read_text())["adapter"] == "shell"

    result = runner.invoke(app, ["status", "-c", str(path)])
    assert result.exit_code == 0
    assert "Adapter: shell" in result.stdout
    assert "Name: Hearbot" in result.stdout


def test_init_keeps_existing_config_when_declined(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"name": "Hal"}))
    result = runner.invoke(app, ["init", "-c", str(path)], input="n\n")
    assert result.exit_code == 0
    assert json.loads(path.read_text()) == {"name": "Hal"}


def test_shell_options_apply_regardless_of_case():
    config = Config(adapter="Shell")
    config.shell.user_name = "dave"
    assert _adapter_options(config)["user_name"] == "dave"


def test_other_adapters_get_no_shell_options():
    assert _adapter_options(Config(adapter="my_chat.adapter:ChatAdapter")) == {}
