"""
中间件链 - 顺序执行、可短路的拦截器序列

Robot 持有三条链，分别在分发的不同阶段执行：
- receive：消息进入监听器扫描之前（可以整体丢弃一条消息）
- listener：某个监听器命中之后、回调执行之前（可以否决这一个监听器）
- response：回调调用 send/reply 等方法、真正交给适配器之前（可以改写或拦截回复）

每个中间件是一个普通函数（同步或异步），接收 MiddlewareContext：
- 返回 None 或真值 → 继续执行下一个
- 返回 None 以外的假值（通常是 False）→ 终止整条链，execute() 返回 False
- 抛出异常 → 原样抛给 execute() 的调用者，链内不捕获
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from hearbot.listener.base import Listener
    from hearbot.robot.response import Response


@dataclass
class MiddlewareContext:
    """
    中间件上下文 - 每次分发/每个监听器/每次发送各创建一个。

    属性:
        response: 当前消息的 Response 外观对象（持有消息和 Robot）
        listener: listener 阶段中命中的监听器
        strings: response 阶段中待发送的文本，中间件可以直接改写
        method: response 阶段中的发送方式（send / reply / emote / topic）
        plaintext: response 阶段中是否为纯文本发送
    """

    response: Response
    listener: Listener | None = None
    strings: list[str] = field(default_factory=list)
    method: str | None = None
    plaintext: bool = False


MiddlewareFn = Callable[[MiddlewareContext], Any]


class Middleware:
    """
    单条中间件链。

    只支持追加注册，不支持优先级和删除：执行顺序就是注册顺序。
    """

    def __init__(self, phase: str = "receive"):
        self.phase = phase
        self.stack: list[MiddlewareFn] = []

    def register(self, middleware: MiddlewareFn) -> None:
        """
        追加一个中间件到链尾。

        参数:
            middleware: 接收 MiddlewareContext 的函数或协程函数
        """
        if not callable(middleware):
            raise TypeError(f"{self.phase} middleware must be callable, got {type(middleware).__name__}")
        self.stack.append(middleware)

    async def execute(self, context: MiddlewareContext) -> bool:
        """
        按注册顺序执行整条链。

        返回:
            True 表示所有中间件都放行（或链为空），False 表示被某个中间件终止
        """
        for middleware in tuple(self.stack):
            result = middleware(context)
            if inspect.isawaitable(result):
                result = await result
            if result is not None and not result:
                name = getattr(middleware, "__name__", repr(middleware))
                logger.debug(f"{self.phase} middleware {name} halted the chain")
                return False
        return True

    def __len__(self) -> int:
        return len(self.stack)


@dataclass
class MiddlewareStack:
    """Robot 的三条中间件链。"""

    receive: Middleware = field(default_factory=lambda: Middleware("receive"))
    listener: Middleware = field(default_factory=lambda: Middleware("listener"))
    response: Middleware = field(default_factory=lambda: Middleware("response"))
