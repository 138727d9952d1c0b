"""
适配器基类模块 - 定义所有聊天后端适配器的统一接口。

本模块提供了 Adapter 抽象基类，所有具体适配器（终端 Shell、各聊天平台等）
都必须继承此基类并实现其抽象方法。这是"策略模式"（Strategy Pattern）
在 hearbot 中的典型应用。

【核心抽象方法】
- run(): 连接聊天后端并持续监听事件（长期运行的异步任务）
- send(): 向房间发送文本
- reply(): 回复某个用户

【公共能力】
- emote(): 默认等同 send()
- topic(): 默认不支持，仅记录日志
- _handle_message(): 把标准化后的 Message 发布到 Robot 的入站队列

【Java 开发者类比】
- Adapter 相当于 Java 的 abstract class + interface
- _handle_message() 相当于 Template Method 模式中的模板方法
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from loguru import logger

from hearbot.bus.events import Envelope, Message

if TYPE_CHECKING:
    from hearbot.robot.core import Robot


class Adapter(ABC):
    """
    聊天后端适配器抽象基类。

    属性:
        name: 适配器标识名（如 "shell"），用于日志
        robot: 所属 Robot
        _running: 适配器运行状态标志
    """

    name: str = "base"  # 子类必须覆盖此属性

    def __init__(self, robot: Robot):
        self.robot = robot
        self._running = False

    @abstractmethod
    async def send(self, envelope: Envelope, *strings: str) -> Any:
        """
        向 envelope 指定的房间发送一条或多条文本。

        返回值对核心不透明，会原样返回给监听器回调。
        """
        pass

    @abstractmethod
    async def reply(self, envelope: Envelope, *strings: str) -> Any:
        """回复 envelope.user。"""
        pass

    @abstractmethod
    async def run(self) -> None:
        """
        连接聊天后端并持续监听事件，直到关闭。

        收到事件后构造 Message 并调用 _handle_message()。
        """
        pass

    async def emote(self, envelope: Envelope, *strings: str) -> Any:
        """以"动作"形式发送，默认退化为 send()。"""
        return await self.send(envelope, *strings)

    async def topic(self, envelope: Envelope, *strings: str) -> Any:
        """设置房间话题，默认不支持。"""
        logger.debug(f"Adapter {self.name} does not support setting the topic")
        return None

    async def close(self) -> None:
        """断开连接并释放资源。"""
        self._running = False

    async def _handle_message(self, message: Message) -> None:
        """把入站消息发布到 Robot 的消息总线。"""
        await self.robot.bus.publish_inbound(message)

    @property
    def is_running(self) -> bool:
        return self._running
