"""Shared test fixtures for the hearbot test suite."""

import pytest

from hearbot.adapters.base import Adapter
from hearbot.bus.events import Envelope, TextMessage, User
from hearbot.robot.core import Robot


class RecordingAdapter(Adapter):
    """Adapter that records every outbound call instead of talking to a chat backend."""

    name = "recording"

    def __init__(self, robot):
        super().__init__(robot)
        self.sent: list[tuple[str, Envelope, tuple[str, ...]]] = []

    async def send(self, envelope, *strings):
        self.sent.append(("send", envelope, strings))
        return "sent"

    async def reply(self, envelope, *strings):
        self.sent.append(("reply", envelope, strings))
        return "replied"

    async def topic(self, envelope, *strings):
        self.sent.append(("topic", envelope, strings))
        return "topic"

    async def run(self):
        self._running = True

    def texts(self, method=None):
        return [s for m, _, strings in self.sent if method in (None, m) for s in strings]


@pytest.fixture
def robot():
    """Provide a Robot named Hal with a recording adapter loaded."""
    bot = Robot(name="Hal", adapter=RecordingAdapter)
    bot.load_adapter()
    return bot


@pytest.fixture
def user():
    return User(id="42", name="dave", room="#general")


@pytest.fixture
def text_message(user):
    """Factory for text messages from the default user."""

    def make(text):
        return TextMessage(user, text)

    return make
