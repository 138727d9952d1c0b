"""Tests for hearbot.robot.errors: the error channel."""

import pytest
from loguru import logger

from hearbot.robot.errors import ErrorChannel


@pytest.fixture
def errors_logged():
    records = []
    handler_id = logger.add(lambda m: records.append(m.record), level="ERROR")
    yield records
    logger.remove(handler_id)


@pytest.mark.asyncio
async def test_report_calls_handlers_in_order():
    channel = ErrorChannel()
    calls = []
    channel.add(lambda err, ctx: calls.append(("a", err, ctx)))
    channel.add(lambda err, ctx: calls.append(("b", err, ctx)))

    error = RuntimeError("boom")
    await channel.report(error, "ctx")
    assert calls == [("a", error, "ctx"), ("b", error, "ctx")]


@pytest.mark.asyncio
async def test_report_logs_with_traceback(errors_logged):
    channel = ErrorChannel()
    try:
        raise KeyError("missing")
    except KeyError as e:
        await channel.report(e)

    assert len(errors_logged) == 1
    assert "KeyError" in errors_logged[0]["message"]
    assert errors_logged[0]["exception"] is not None


@pytest.mark.asyncio
async def test_handler_failure_is_swallowed(errors_logged):
    channel = ErrorChannel()
    calls = []

    def broken(err, ctx):
        raise ValueError("handler bug")

    channel.add(broken)
    channel.add(lambda err, ctx: calls.append(err))

    await channel.report(RuntimeError("original"))
    assert len(calls) == 1
    assert any("while invoking error handler" in r["message"] for r in errors_logged)


@pytest.mark.asyncio
async def test_async_handlers_are_awaited():
    channel = ErrorChannel()
    seen = []

    async def handler(err, ctx):
        seen.append(err)

    channel.add(handler)
    await channel.report(RuntimeError("x"))
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_report_without_handlers_only_logs(errors_logged):
    await ErrorChannel().report(RuntimeError("lonely"))
    assert len(errors_logged) == 1


def test_add_rejects_non_callable():
    channel = ErrorChannel()
    with pytest.raises(TypeError):
        channel.add(None)
    assert len(channel) == 0
