"""
错误通道 - 监听器级和进程级故障的唯一出口。

ErrorChannel 是一个纯观察者注册表，与分发控制流完全解耦：
report() 先记录带完整堆栈的错误日志，再按注册顺序调用每个错误处理器。
处理器自身抛出的异常只记日志，不会向外传播，也不会影响其他处理器。
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any

from loguru import logger

ErrorHandler = Callable[[BaseException, Any], Any]


class RegistrationError(RuntimeError):
    """在分发进行中注册监听器、中间件或错误处理器时抛出。"""


class ErrorChannel:
    """错误处理器注册表。"""

    def __init__(self):
        self._handlers: list[ErrorHandler] = []

    def add(self, handler: ErrorHandler) -> None:
        """追加一个错误处理器，调用签名为 handler(error, context)。"""
        if not callable(handler):
            raise TypeError("Error handler must be callable")
        self._handlers.append(handler)

    async def report(self, error: BaseException, context: Any = None) -> None:
        """
        记录错误并广播给所有处理器。

        参数:
            error: 捕获到的异常
            context: 出错时的 MiddlewareContext；进程级错误为 None
        """
        logger.opt(exception=error).error(f"{type(error).__name__}: {error}")

        for handler in tuple(self._handlers):
            try:
                result = handler(error, context)
                if inspect.isawaitable(result):
                    await result
            except Exception as handler_error:
                logger.opt(exception=handler_error).error(
                    f"while invoking error handler: {handler_error}"
                )

    def __len__(self) -> int:
        return len(self._handlers)
