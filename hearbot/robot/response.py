"""
Response 外观 - 监听器回调拿到的唯一对象。

每次监听器命中都会创建一个新的 Response，它持有：
- message：命中的消息（可以通过 finish() 标记 done）
- match：matcher 返回的匹配结果（pattern 监听器是 re.Match）
- envelope：回复的寻址信息（房间 + 用户 + 原消息）

send / reply / emote / topic 会先经过 response 中间件链，
中间件可以改写 context.strings 或直接拦截，放行后交给 Robot 的同名方法，
最终由适配器发送；适配器的返回值原样返回给回调。
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from hearbot.bus.events import Envelope, Message
from hearbot.middleware.chain import MiddlewareContext

if TYPE_CHECKING:
    from hearbot.http.client import ScopedClient
    from hearbot.robot.core import Robot

T = TypeVar("T")

# 发送方式 → Robot 上的出站方法
ROBOT_METHODS = {
    "send": "send",
    "emote": "emote",
    "reply": "reply",
    "topic": "set_topic",
}


class Response:
    """单条消息的回复外观。"""

    def __init__(self, robot: Robot, message: Message, match: Any = None):
        self.robot = robot
        self.message = message
        self.match = match
        self.envelope = Envelope(room=message.room, user=message.user, message=message)

    async def send(self, *strings: str) -> Any:
        """向消息所在房间发送一条或多条文本。"""
        return await self._run_with_middleware("send", False, *strings)

    async def emote(self, *strings: str) -> Any:
        """以"动作"形式发送文本（适配器不支持时等同 send）。"""
        return await self._run_with_middleware("emote", False, *strings)

    async def reply(self, *strings: str) -> Any:
        """回复消息的发送者。"""
        return await self._run_with_middleware("reply", False, *strings)

    async def topic(self, *strings: str) -> Any:
        """设置房间话题。"""
        return await self._run_with_middleware("topic", True, *strings)

    def random(self, items: Sequence[T]) -> T:
        """从候选中随机挑一个，常用于随机回复语。"""
        return random.choice(items)

    def finish(self) -> None:
        """标记消息已处理完毕，后续监听器不再执行。"""
        self.message.finish()

    def http(self, url: str, **options: Any) -> ScopedClient:
        """创建一个带机器人默认配置的 HTTP 请求构造器。"""
        return self.robot.http(url, **options)

    async def _run_with_middleware(self, method: str, plaintext: bool, *strings: str) -> Any:
        context = MiddlewareContext(
            response=self,
            strings=list(strings),
            method=method,
            plaintext=plaintext,
        )
        if not await self.robot.middleware.response.execute(context):
            return None
        deliver = getattr(self.robot, ROBOT_METHODS[method])
        return await deliver(self.envelope, *context.strings)
