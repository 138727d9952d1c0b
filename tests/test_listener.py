"""Tests for hearbot.listener.base: generic and pattern listeners."""

import re

import pytest

from hearbot.bus.events import CatchAllMessage, EnterMessage, TextMessage, TopicMessage, User
from hearbot.listener.base import Listener, normalize_options
from hearbot.middleware.chain import Middleware


def noop(response):
    return None


class TestOptions:
    def test_none_becomes_empty_with_id(self):
        assert normalize_options(None) == {"id": None}

    def test_string_becomes_id(self):
        assert normalize_options("ping.pong") == {"id": "ping.pong"}

    def test_dict_is_copied(self):
        original = {"id": "x", "rate": 5}
        normalized = normalize_options(original)
        normalized["rate"] = 1
        assert original["rate"] == 5

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            normalize_options(42)


class TestGenericListener:
    """Listeners built from an arbitrary predicate."""

    @pytest.mark.asyncio
    async def test_truthy_match_is_stored_on_message(self, robot):
        listener = Listener(robot, lambda msg: {"hit": True}, None, noop)
        message = EnterMessage(User("1"))
        outcome = await listener.try_match(message)
        assert outcome == {"hit": True}
        assert message.match_results == {"hit": True}
        assert listener.kind == "generic"

    @pytest.mark.asyncio
    async def test_falsy_match_leaves_message_untouched(self, robot):
        listener = Listener(robot, lambda msg: False, None, noop)
        message = EnterMessage(User("1"))
        assert not await listener.try_match(message)
        assert message.match_results is None

    @pytest.mark.asyncio
    async def test_async_matcher_is_awaited(self, robot):
        async def matcher(msg):
            return "yes"

        listener = Listener(robot, matcher, None, noop)
        assert await listener.try_match(EnterMessage(User("1"))) == "yes"

    def test_rejects_non_callables(self, robot):
        with pytest.raises(TypeError):
            Listener(robot, "nope", None, noop)
        with pytest.raises(TypeError):
            Listener(robot, lambda m: True, None, "nope")


class TestTextListener:
    """Listeners built from a regular expression."""

    @pytest.mark.asyncio
    async def test_matches_text_messages(self, robot):
        listener = Listener.text(robot, r"ping (\w+)", None, noop)
        message = TextMessage(User("1"), "please ping server")
        match = await listener.try_match(message)
        assert isinstance(match, re.Match)
        assert match.group(1) == "server"
        assert message.match_results is match
        assert listener.kind == "pattern"

    @pytest.mark.asyncio
    async def test_no_match_returns_none(self, robot):
        listener = Listener.text(robot, r"ping", None, noop)
        assert await listener.try_match(TextMessage(User("1"), "pong")) is None

    @pytest.mark.asyncio
    async def test_ignores_non_text_messages(self, robot):
        listener = Listener.text(robot, r".*", None, noop)
        assert await listener.try_match(EnterMessage(User("1"))) is None
        assert await listener.try_match(TopicMessage(User("1"), "new topic")) is None
        assert await listener.try_match(CatchAllMessage(TextMessage(User("1"), "x"))) is None

    def test_accepts_compiled_patterns(self, robot):
        pattern = re.compile("ping", re.I)
        listener = Listener.text(robot, pattern, "ping", noop)
        assert listener.regex is pattern
        assert listener.id == "ping"


class TestCall:
    """Listener middleware and callback invocation."""

    @pytest.mark.asyncio
    async def test_callback_receives_response_with_match(self, robot):
        seen = {}

        def callback(response):
            seen["match"] = response.match
            seen["message"] = response.message
            return "done"

        listener = Listener.text(robot, r"ping", None, callback)
        message = TextMessage(User("1"), "ping")
        match = await listener.try_match(message)
        assert await listener.call(message, match, Middleware("listener")) == "done"
        assert seen["match"] is match
        assert seen["message"] is message

    @pytest.mark.asyncio
    async def test_middleware_sees_listener_and_can_veto(self, robot):
        called = []
        chain = Middleware("listener")
        chain.register(lambda ctx: ctx.listener.options.get("id") != "blocked")

        listener = Listener(robot, lambda m: True, "blocked", lambda r: called.append(r))
        message = EnterMessage(User("1"))
        assert await listener.call(message, True, chain) is None
        assert called == []

    @pytest.mark.asyncio
    async def test_async_callback_result_is_returned(self, robot):
        async def callback(response):
            return 7

        listener = Listener(robot, lambda m: True, None, callback)
        assert await listener.call(EnterMessage(User("1")), True, Middleware("listener")) == 7
