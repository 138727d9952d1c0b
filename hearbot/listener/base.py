"""
监听器模块 (listener/base.py)

模块职责：
    定义 Listener —— 注册表中的一项 (matcher, options, callback)。
    Robot 在每条入站消息上按注册顺序逐个调用 try_match()，
    命中后执行 listener 中间件，再执行回调。

监听器只有两种，由同一个类表示：
    - generic：任意谓词函数，Listener(robot, matcher, options, callback)
    - pattern：包装一个正则，只匹配 TextMessage，Listener.text(robot, regex, options, callback)

两种监听器对外只暴露统一的 try_match(message) 能力，
匹配结果（真值）会写入 message.match_results 并作为 Response.match 传给回调。

设计模式对比（Java 视角）：
    类似于 Spring 的 @EventListener(condition=...)：
    condition 对应 matcher，方法体对应 callback。
"""

from __future__ import annotations

import inspect
import re
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from loguru import logger

from hearbot.bus.events import Message, TextMessage
from hearbot.middleware.chain import Middleware, MiddlewareContext
from hearbot.utils.helpers import truncate_string

if TYPE_CHECKING:
    from hearbot.robot.core import Robot
    from hearbot.robot.response import Response

Matcher = Callable[[Message], Any]
ListenerCallback = Callable[["Response"], Any]


def normalize_options(options: dict[str, Any] | str | None) -> dict[str, Any]:
    """
    规范化监听器选项。

    - None → {}
    - 字符串 → {"id": 字符串}
    - 字典 → 浅拷贝

    结果中总有 "id" 键（默认 None）。
    """
    if options is None:
        normalized: dict[str, Any] = {}
    elif isinstance(options, str):
        normalized = {"id": options}
    elif isinstance(options, dict):
        normalized = dict(options)
    else:
        raise TypeError(f"Listener options must be a dict or str, got {type(options).__name__}")
    normalized.setdefault("id", None)
    return normalized


class Listener:
    """
    消息监听器。

    属性:
        robot: 所属 Robot，回调拿到的 Response 通过它发送消息
        matcher: 判断消息是否命中的函数，返回真值表示命中（可以是协程函数）
        options: 扩展选项，核心不解读，只透传给中间件
        callback: 命中后执行的函数，参数为 Response
        regex: pattern 监听器的正则，generic 监听器为 None
    """

    def __init__(
        self,
        robot: Robot,
        matcher: Matcher,
        options: dict[str, Any] | str | None,
        callback: ListenerCallback,
        regex: re.Pattern | None = None,
    ):
        if not callable(matcher):
            raise TypeError("Listener matcher must be callable")
        if not callable(callback):
            raise TypeError("Listener callback must be callable")
        self.robot = robot
        self.matcher = matcher
        self.options = normalize_options(options)
        self.callback = callback
        self.regex = regex

    @classmethod
    def text(
        cls,
        robot: Robot,
        regex: str | re.Pattern,
        options: dict[str, Any] | str | None,
        callback: ListenerCallback,
    ) -> Listener:
        """创建一个基于正则、只匹配 TextMessage 的监听器。"""
        compiled = re.compile(regex) if isinstance(regex, str) else regex

        def match_text(message: Message) -> re.Match | None:
            if isinstance(message, TextMessage):
                return message.match(compiled)
            return None

        return cls(robot, match_text, options, callback, regex=compiled)

    @property
    def kind(self) -> str:
        """监听器种类："pattern" 或 "generic"。"""
        return "pattern" if self.regex is not None else "generic"

    @property
    def id(self) -> str | None:
        return self.options.get("id")

    async def try_match(self, message: Message) -> Any:
        """
        判断消息是否命中。

        命中时把匹配结果写入 message.match_results。

        返回:
            匹配结果（真值表示命中）
        """
        outcome = self.matcher(message)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        if outcome:
            message.match_results = outcome
            if self.regex is not None:
                preview = truncate_string(str(message), 80)
                logger.debug(
                    f"Message '{preview}' matched regex /{self.regex.pattern}/; "
                    f"listener.options = {self.options}"
                )
        return outcome

    async def call(self, message: Message, match: Any, middleware: Middleware) -> Any:
        """
        执行 listener 中间件，放行后执行回调。

        参数:
            message: 命中的消息
            match: try_match() 的返回值
            middleware: Robot 的 listener 中间件链

        返回:
            回调的返回值；被中间件拦截时返回 None
        """
        from hearbot.robot.response import Response

        response = Response(self.robot, message, match)
        context = MiddlewareContext(response=response, listener=self)
        if not await middleware.execute(context):
            logger.debug(f"Listener {self.id or self.kind} vetoed by listener middleware")
            return None

        result = self.callback(response)
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        pattern = f" /{self.regex.pattern}/" if self.regex is not None else ""
        return f"<Listener {self.kind}{pattern} id={self.id!r}>"
