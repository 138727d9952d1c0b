"""
消息模块 - 入站消息模型与适配器到 Robot 的入站队列。

消息流向：
  聊天平台事件 → 适配器(Adapter) → Message → MessageBus → Robot.receive()
  监听器回调 → Response.send() → Robot.send() → 适配器 → 聊天平台
"""

from hearbot.bus.events import (
    CatchAllMessage,
    EnterMessage,
    Envelope,
    LeaveMessage,
    Message,
    TextMessage,
    TopicMessage,
    User,
)
from hearbot.bus.queue import MessageBus

__all__ = [
    "MessageBus",
    "Message",
    "TextMessage",
    "EnterMessage",
    "LeaveMessage",
    "TopicMessage",
    "CatchAllMessage",
    "User",
    "Envelope",
]
