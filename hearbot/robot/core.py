"""
Robot 分发核心 —— hearbot 的心脏。

本模块实现了完整的接收/分发流水线：
  适配器消息 → receive 中间件 → 按注册顺序扫描监听器
  → (命中) listener 中间件 → 回调 → (无人处理) 兜底 CatchAll 再分发一次

核心类 Robot 同时提供三组 API：
1. 注册：listen / hear / respond / enter / leave / topic / catch_all，
   receive_middleware / listener_middleware / response_middleware，error，on_ready
2. 分发：receive / process_listeners
3. 出站与生命周期：send / reply / emote / topic / message_room，
   load_adapter / run / shutdown，http

【Java 开发者类比】
- Robot 类似于 Spring MVC 的 DispatcherServlet：
  receive 中间件 ≈ Filter，监听器 ≈ HandlerMapping + Controller，
  listener 中间件 ≈ HandlerInterceptor，catch_all ≈ 默认的 404 处理器
- ErrorChannel 类似于 @ControllerAdvice 里的 @ExceptionHandler

【故障隔离】
监听器来自互不相识的脚本作者，任何一个监听器的 matcher、中间件、回调抛错，
都只会被记录并广播到错误通道，扫描继续进行。只有 receive 中间件的异常会
让本次 receive() 直接失败，因为它发生在任何监听器隔离边界建立之前。

【并发约定】
每次 receive() 内部严格串行；不同消息之间可以并发分发。
分发进行中禁止注册任何东西（抛出 RegistrationError）。
"""

from __future__ import annotations

import asyncio
import contextvars
import inspect
import re
from collections.abc import Callable
from typing import Any

from loguru import logger

from hearbot import __version__
from hearbot.adapters.base import Adapter
from hearbot.bus.events import (
    CatchAllMessage,
    EnterMessage,
    Envelope,
    LeaveMessage,
    Message,
    TopicMessage,
)
from hearbot.bus.queue import MessageBus
from hearbot.http.client import ScopedClient
from hearbot.listener.base import Listener, ListenerCallback, Matcher
from hearbot.listener.pattern import respond_pattern
from hearbot.middleware.chain import MiddlewareContext, MiddlewareFn, MiddlewareStack
from hearbot.robot.errors import ErrorChannel, ErrorHandler, RegistrationError
from hearbot.robot.response import Response

# 兜底分发的最大嵌套深度：CatchAll 分发（以及其中再次进入 receive 的分发）不再兜底
MAX_FALLBACK_DEPTH = 1

_fallback_depth: contextvars.ContextVar[int] = contextvars.ContextVar("hearbot_fallback_depth", default=0)

Options = dict[str, Any] | str | None


def _is_catch_all(message: Message) -> bool:
    return isinstance(message, CatchAllMessage)


class Robot:
    """
    聊天机器人分发核心。

    核心属性：
    - name / alias: 机器人名字和别名，用于 respond() 的地址匹配
    - listeners: 有序的监听器注册表
    - middleware: receive / listener / response 三条中间件链
    - errors: 错误通道
    - adapter: 已加载的适配器实例（load_adapter() 之后才有）
    - bus: 入站消息队列，适配器可以把消息发布到这里
    """

    def __init__(
        self,
        name: str = "Hearbot",
        alias: str | None = None,
        adapter: str | type[Adapter] = "shell",
        http_options: dict[str, Any] | None = None,
    ):
        """
        初始化 Robot。

        参数：
            name: 机器人名字
            alias: 机器人别名（可选）
            adapter: 适配器名称（内置名或 "module:Class"）或适配器类
            http_options: robot.http() 的默认客户端选项
        """
        self.name = name
        self.alias = alias or None
        self.adapter_spec = adapter
        self.adapter: Adapter | None = None
        self.version = __version__

        self.listeners: list[Listener] = []
        self.middleware = MiddlewareStack()
        self.errors = ErrorChannel()
        self.bus = MessageBus()
        self.global_http_options: dict[str, Any] = dict(http_options or {})

        self._ready_handlers: list[Callable[[Robot], Any]] = []
        self._active_dispatches = 0
        self._dispatch_tasks: set[asyncio.Task] = set()
        self._consumer_task: asyncio.Task | None = None
        self._running = False

    # ------------------------------------------------------------------
    # 监听器注册
    # ------------------------------------------------------------------

    def listen(self, matcher: Matcher, options: Options | ListenerCallback = None, callback: ListenerCallback | None = None):
        """
        注册一个任意谓词的监听器。

        参数:
            matcher: 接收 Message、返回真值表示命中的函数
            options: 扩展选项（可省略，直接把回调放在这个位置）
            callback: 命中后执行的函数，参数为 Response

        返回:
            传入回调时返回新建的 Listener；省略回调时返回装饰器
        """
        return self._add_listener(lambda opts, cb: Listener(self, matcher, opts, cb), options, callback)

    def hear(self, regex: str | re.Pattern, options: Options | ListenerCallback = None, callback: ListenerCallback | None = None):
        """注册一个在任意文本消息中搜索正则的监听器。"""
        return self._add_listener(lambda opts, cb: Listener.text(self, regex, opts, cb), options, callback)

    def respond(self, regex: str | re.Pattern, options: Options | ListenerCallback = None, callback: ListenerCallback | None = None):
        """注册一个只匹配"对机器人说的话"的监听器，正则总是从地址之后开始匹配。"""
        return self.hear(self.respond_pattern(regex), options, callback)

    def respond_pattern(self, regex: str | re.Pattern) -> re.Pattern:
        """用当前名字和别名编译 respond 正则。"""
        return respond_pattern(regex, self.name, self.alias)

    def enter(self, options: Options | ListenerCallback = None, callback: ListenerCallback | None = None):
        """注册一个在有人进入房间时触发的监听器。"""
        return self.listen(lambda msg: isinstance(msg, EnterMessage), options, callback)

    def leave(self, options: Options | ListenerCallback = None, callback: ListenerCallback | None = None):
        """注册一个在有人离开房间时触发的监听器。"""
        return self.listen(lambda msg: isinstance(msg, LeaveMessage), options, callback)

    def topic(self, options: Options | ListenerCallback = None, callback: ListenerCallback | None = None):
        """注册一个在房间话题变更时触发的监听器。"""
        return self.listen(lambda msg: isinstance(msg, TopicMessage), options, callback)

    def catch_all(self, options: Options | ListenerCallback = None, callback: ListenerCallback | None = None):
        """
        注册一个兜底监听器：只在没有任何其他监听器执行过时触发。

        回调拿到的 response.message 是 CatchAllMessage，原消息在 .message 上。
        """
        return self.listen(_is_catch_all, options, callback)

    def _add_listener(self, build: Callable[[Options, ListenerCallback], Listener], options, callback):
        # options 可省略：listen(matcher, callback)
        if callback is None and callable(options):
            callback, options = options, None

        if callback is None:
            def decorator(fn: ListenerCallback) -> ListenerCallback:
                self._add_listener(build, options, fn)
                return fn
            return decorator

        self._ensure_setup_phase("listener")
        listener = build(options, callback)
        self.listeners.append(listener)
        return listener

    # ------------------------------------------------------------------
    # 中间件 / 错误处理器 / 生命周期注册
    # ------------------------------------------------------------------

    def listener_middleware(self, middleware: MiddlewareFn) -> MiddlewareFn:
        """注册 listener 中间件：在监听器命中之后、回调之前执行。"""
        self._ensure_setup_phase("listener middleware")
        self.middleware.listener.register(middleware)
        return middleware

    def response_middleware(self, middleware: MiddlewareFn) -> MiddlewareFn:
        """注册 response 中间件：在回复交给适配器之前执行，可改写 context.strings。"""
        self._ensure_setup_phase("response middleware")
        self.middleware.response.register(middleware)
        return middleware

    def receive_middleware(self, middleware: MiddlewareFn) -> MiddlewareFn:
        """注册 receive 中间件：在扫描监听器之前执行，返回 False 丢弃整条消息。"""
        self._ensure_setup_phase("receive middleware")
        self.middleware.receive.register(middleware)
        return middleware

    def error(self, callback: ErrorHandler) -> ErrorHandler:
        """注册错误处理器，调用签名为 callback(error, context)。"""
        self._ensure_setup_phase("error handler")
        self.errors.add(callback)
        return callback

    def on_ready(self, callback: Callable[[Robot], Any]) -> Callable[[Robot], Any]:
        """注册就绪回调：run() 在启动入站消费者和适配器之前调用，回调中仍可注册监听器。"""
        self._ready_handlers.append(callback)
        return callback

    def _ensure_setup_phase(self, what: str) -> None:
        if self._active_dispatches:
            raise RegistrationError(f"Cannot register a {what} while messages are being dispatched")

    # ------------------------------------------------------------------
    # 分发
    # ------------------------------------------------------------------

    async def receive(self, message: Message) -> list[Any] | None:
        """
        把消息交给 receive 中间件，放行后交给所有感兴趣的监听器。

        参数:
            message: 入站消息，监听器可以把它标记为 done 以阻止后续监听器

        返回:
            各监听器回调的结果列表；被 receive 中间件拦截时返回 None
        """
        context = MiddlewareContext(response=Response(self, message))
        self._active_dispatches += 1
        try:
            if not await self.middleware.receive.execute(context):
                return None
            return await self.process_listeners(context)
        finally:
            self._active_dispatches -= 1

    async def process_listeners(self, context: MiddlewareContext) -> list[Any]:
        """
        按注册顺序尝试每一个监听器。

        参数:
            context: 本次分发的上下文

        返回:
            命中监听器的结果列表；触发兜底时，兜底分发的结果作为一个整体追加在末尾
        """
        message = context.response.message
        results: list[Any] = []
        any_listeners_executed = False

        for listener in tuple(self.listeners):
            try:
                match = await listener.try_match(message)
                if not match:
                    continue
                result = await listener.call(message, match, self.middleware.listener)
                results.append(result)
                any_listeners_executed = True
            except Exception as err:
                await self.errors.report(err, context)
            if message.done:
                break

        if not any_listeners_executed and not _is_catch_all(message):
            depth = _fallback_depth.get()
            if depth >= MAX_FALLBACK_DEPTH:
                logger.warning("No listeners executed; catch-all fallback depth exceeded, dropping message")
                return results

            logger.debug("No listeners executed; falling back to catch-all")
            token = _fallback_depth.set(depth + 1)
            try:
                results.append(await self.receive(CatchAllMessage(message)))
            except Exception as err:
                await self.errors.report(err, context)
            finally:
                _fallback_depth.reset(token)

        return results

    # ------------------------------------------------------------------
    # 出站
    # ------------------------------------------------------------------

    def _require_adapter(self) -> Adapter:
        if self.adapter is None:
            raise RuntimeError("No adapter loaded; call load_adapter() first")
        return self.adapter

    async def send(self, envelope: Envelope, *strings: str) -> Any:
        """委托适配器发送文本，返回适配器的返回值。"""
        return await self._require_adapter().send(envelope, *strings)

    async def reply(self, envelope: Envelope, *strings: str) -> Any:
        """委托适配器回复，返回适配器的返回值。"""
        return await self._require_adapter().reply(envelope, *strings)

    async def emote(self, envelope: Envelope, *strings: str) -> Any:
        return await self._require_adapter().emote(envelope, *strings)

    async def set_topic(self, envelope: Envelope, *strings: str) -> Any:
        """委托适配器设置房间话题（topic() 是话题变更监听器的注册方法）。"""
        return await self._require_adapter().topic(envelope, *strings)

    async def message_room(self, room: str, *strings: str) -> Any:
        """不依赖入站消息，直接向指定房间发送文本。"""
        return await self.send(Envelope(room=room), *strings)

    def http(self, url: str, **options: Any) -> ScopedClient:
        """
        创建一个作用域 HTTP 请求构造器（此时不发请求）。

        robot 级默认选项可以被 options 覆盖；默认带上 User-Agent。
        """
        client_options = {**self.global_http_options, **options}
        user_agent = client_options.pop("user_agent", None) or f"Hearbot/{self.version}"
        return ScopedClient(url, client_options).header("User-Agent", user_agent)

    # ------------------------------------------------------------------
    # 生命周期
    # ------------------------------------------------------------------

    def load_adapter(self, **options: Any) -> Adapter:
        """
        实例化配置中的适配器。

        参数:
            options: 透传给适配器构造函数的额外参数
        """
        from hearbot.adapters.loader import load_adapter

        spec = self.adapter_spec
        if isinstance(spec, type):
            self.adapter = spec(self, **options)
        else:
            self.adapter = load_adapter(spec, self, **options)
        logger.info(f"Adapter {self.adapter.name} loaded")
        return self.adapter

    async def run(self) -> None:
        """
        启动机器人：安装进程级错误处理、通知就绪、启动入站消费者，
        然后运行适配器直到它退出，最后优雅关闭并恢复原来的错误处理。

        就绪回调在任何消息开始分发之前执行，因此仍然可以注册监听器。
        """
        adapter = self._require_adapter()
        loop = asyncio.get_running_loop()
        previous_handler = loop.get_exception_handler()
        loop.set_exception_handler(self._handle_loop_exception)

        try:
            await self._notify_ready()

            self._running = True
            self._consumer_task = asyncio.create_task(self._consume_inbound())
            logger.info(f"{self.name} is running with adapter {adapter.name}")
            await adapter.run()
        finally:
            await self.shutdown()
            loop.set_exception_handler(previous_handler)

    async def shutdown(self) -> None:
        """停止消费入站消息，等待进行中的分发完成，然后关闭适配器。"""
        self._running = False
        if self._consumer_task is not None:
            self._consumer_task.cancel()
            try:
                await self._consumer_task
            except asyncio.CancelledError:
                pass
            self._consumer_task = None

        # 已开始的分发不取消，跑完为止
        if self._dispatch_tasks:
            await asyncio.gather(*self._dispatch_tasks, return_exceptions=True)

        if self.adapter is not None:
            await self.adapter.close()
        logger.info(f"{self.name} shut down")

    async def _notify_ready(self) -> None:
        for handler in tuple(self._ready_handlers):
            try:
                result = handler(self)
                if inspect.isawaitable(result):
                    await result
            except Exception as err:
                await self.errors.report(err, None)

    async def _consume_inbound(self) -> None:
        while self._running:
            message = await self.bus.consume_inbound()
            task = asyncio.create_task(self._dispatch(message))
            self._dispatch_tasks.add(task)
            task.add_done_callback(self._dispatch_tasks.discard)

    async def _dispatch(self, message: Message) -> None:
        # receive 中间件的异常会让 receive() 失败，在这里进入错误通道
        try:
            await self.receive(message)
        except Exception as err:
            await self.errors.report(err, None)

    def _handle_loop_exception(self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        error = context.get("exception") or RuntimeError(context.get("message", "Unhandled event loop error"))
        if loop.is_closed():
            logger.opt(exception=error).error(f"Unhandled error after loop closed: {error}")
            return
        task = loop.create_task(self.errors.report(error, None))
        self._dispatch_tasks.add(task)
        task.add_done_callback(self._dispatch_tasks.discard)
