"""Tests for hearbot.adapters: resolution and the shell adapter's output."""

from io import StringIO

import pytest
from rich.console import Console

from hearbot.adapters.loader import load_adapter, resolve_adapter
from hearbot.adapters.shell import ShellAdapter
from hearbot.bus.events import Envelope, TextMessage, User
from hearbot.robot.core import Robot


class TestResolve:
    def test_builtin_name(self):
        assert resolve_adapter("shell") is ShellAdapter
        assert resolve_adapter("Shell") is ShellAdapter

    def test_module_class_spec(self):
        assert resolve_adapter("hearbot.adapters.shell:ShellAdapter") is ShellAdapter

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            resolve_adapter("irc")

    def test_not_an_adapter(self):
        with pytest.raises(TypeError):
            resolve_adapter("hearbot.bus.events:User")

    def test_missing_module(self):
        with pytest.raises(ImportError):
            resolve_adapter("hearbot_missing_adapter:Adapter")

    def test_load_passes_options(self):
        robot = Robot(name="Hal")
        adapter = load_adapter("shell", robot, user_name="dave", room="#dev")
        assert adapter.robot is robot
        assert adapter.user.name == "dave"
        assert adapter.user.room == "#dev"

    def test_robot_load_adapter_by_name(self):
        robot = Robot(name="Hal", adapter="shell")
        adapter = robot.load_adapter(user_id="9")
        assert robot.adapter is adapter
        assert adapter.user.id == "9"


@pytest.fixture
def shell():
    output = StringIO()
    robot = Robot(name="Hal", adapter=ShellAdapter)
    adapter = robot.load_adapter(console=Console(file=output, width=120))
    return adapter, output


class TestShellOutput:
    @pytest.mark.asyncio
    async def test_send_prints_each_string(self, shell):
        adapter, output = shell
        await adapter.send(Envelope(room="Shell"), "one", "two")
        assert output.getvalue().splitlines() == ["one", "two"]

    @pytest.mark.asyncio
    async def test_markup_is_printed_literally(self, shell):
        adapter, output = shell
        await adapter.send(Envelope(), "[bold]not bold[/bold]")
        assert "[bold]not bold[/bold]" in output.getvalue()

    @pytest.mark.asyncio
    async def test_reply_prefixes_user_name(self, shell):
        adapter, output = shell
        await adapter.reply(Envelope(user=User("2", name="dave")), "hi")
        assert output.getvalue().strip() == "dave: hi"

    @pytest.mark.asyncio
    async def test_emote(self, shell):
        adapter, output = shell
        await adapter.emote(Envelope(), "waves")
        assert output.getvalue().strip() == "* waves"

    @pytest.mark.asyncio
    async def test_topic_is_unsupported(self, shell):
        adapter, output = shell
        assert await adapter.topic(Envelope(), "new topic") is None
        assert output.getvalue() == ""

    @pytest.mark.asyncio
    async def test_listener_reply_goes_to_console(self, shell):
        adapter, output = shell
        robot = adapter.robot
        robot.hear(r"ping", lambda res: res.reply("PONG"))

        await robot.receive(TextMessage(adapter.user, "ping"))
        assert output.getvalue().strip() == "Shell: PONG"

    @pytest.mark.asyncio
    async def test_handle_message_publishes_to_bus(self, shell):
        adapter, _ = shell
        message = TextMessage(adapter.user, "hello")
        await adapter._handle_message(message)
        assert await adapter.robot.bus.consume_inbound() is message
