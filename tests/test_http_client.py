"""Tests for hearbot.http.client: the scoped request builder."""

import json

import httpx
import pytest

from hearbot import __version__


@pytest.fixture
def captured():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"ok": True})

    return requests, httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_get_sends_headers_and_query(robot, captured):
    requests, transport = captured
    res = await (
        robot.http("https://api.example.com/items", transport=transport)
        .header("Authorization", "Bearer abc")
        .query(limit=10)
        .query({"page": 2})
        .get()
    )

    assert res.json() == {"ok": True}
    request = requests[0]
    assert request.method == "GET"
    assert request.headers["Authorization"] == "Bearer abc"
    assert request.url.params["limit"] == "10"
    assert request.url.params["page"] == "2"


@pytest.mark.asyncio
async def test_default_user_agent(robot, captured):
    requests, transport = captured
    await robot.http("https://example.com", transport=transport).get()
    assert requests[0].headers["User-Agent"] == f"Hearbot/{__version__}"


@pytest.mark.asyncio
async def test_user_agent_from_robot_options(robot, captured):
    requests, transport = captured
    robot.global_http_options = {"user_agent": "custom/1.0"}
    await robot.http("https://example.com", transport=transport).get()
    assert requests[0].headers["User-Agent"] == "custom/1.0"


@pytest.mark.asyncio
async def test_post_json_body(robot, captured):
    requests, transport = captured
    await robot.http("https://example.com/hook", transport=transport).post(json={"text": "hi"})
    request = requests[0]
    assert request.method == "POST"
    assert json.loads(request.content) == {"text": "hi"}
    assert request.headers["Content-Type"] == "application/json"


@pytest.mark.asyncio
async def test_put_raw_body(robot, captured):
    requests, transport = captured
    await robot.http("https://example.com/raw", transport=transport).put("plain text")
    assert requests[0].content == b"plain text"


@pytest.mark.asyncio
async def test_patch_form_body(robot, captured):
    requests, transport = captured
    await robot.http("https://example.com/form", transport=transport).patch({"a": "1"})
    assert requests[0].content == b"a=1"


def test_options_merge_and_timeout(robot):
    robot.global_http_options = {"timeout": 10, "max_redirects": 2}
    client = robot.http("https://example.com", timeout=3).timeout(7)
    assert client.options["timeout"] == 7
    assert client.options["max_redirects"] == 2
    assert client.options["follow_redirects"] is True
    assert "user_agent" not in client.options
