"""
消息事件类型定义模块 - 定义适配器与 Robot 之间传递的数据结构。

本模块定义了入站消息的"标签联合"（tagged union）：
- TextMessage：普通文本消息
- EnterMessage / LeaveMessage：用户进入/离开房间
- TopicMessage：房间话题变更
- CatchAllMessage：兜底包装，把没有任何监听器处理的消息再投递一次

以及两个辅助数据结构：
- User：发送者身份
- Envelope：出站消息的寻址信息（房间 + 用户）

【Java 开发者类比】
- 使用 Python 的 @dataclass 装饰器，等价于 Java 的 record 类或 Lombok 的 @Data
- 各消息变体相当于 sealed interface 的不同实现类，用 isinstance 判断标签

【设计要点】
- 每条消息都带有可变的 done 标志和 match_results 状态，
  由分发核心和监听器回调原地修改；分发结束后消息即被丢弃
- CatchAllMessage 永远不会再包装另一个 CatchAllMessage
"""

import re
from dataclasses import dataclass, field
from typing import Any


@dataclass
class User:
    """
    聊天用户。

    属性:
        id: 用户在聊天平台内的唯一标识
        name: 显示名称，为空时使用 id
        room: 用户当前所在的房间/频道
        metadata: 平台特有的附加数据
    """

    id: str
    name: str | None = None
    room: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.id = str(self.id)
        if self.name is None:
            self.name = self.id


@dataclass(eq=False)
class Message:
    """
    所有入站消息的基类。

    属性:
        user: 发送者
        done: 为 True 时分发核心不再尝试后续监听器
        match_results: 最近一次命中该消息的监听器返回的匹配结果
    """

    user: User
    done: bool = field(default=False, init=False)
    match_results: Any = field(default=None, init=False, repr=False)

    @property
    def room(self) -> str | None:
        """消息所在房间，取自发送者。"""
        return self.user.room

    def finish(self) -> None:
        """标记消息已处理完毕，阻止同一轮扫描中的后续监听器。"""
        self.done = True


@dataclass(eq=False)
class TextMessage(Message):
    """普通文本消息。"""

    text: str
    id: str | None = None

    def match(self, regex: re.Pattern) -> re.Match | None:
        """用正则在消息文本中搜索，返回匹配对象或 None。"""
        return regex.search(self.text)

    def __str__(self) -> str:
        return self.text


@dataclass(eq=False)
class EnterMessage(Message):
    """用户进入房间。"""

    text: str | None = None
    id: str | None = None


@dataclass(eq=False)
class LeaveMessage(Message):
    """用户离开房间。"""

    text: str | None = None
    id: str | None = None


@dataclass(eq=False)
class TopicMessage(Message):
    """房间话题变更，text 为新话题。"""

    text: str
    id: str | None = None


@dataclass(eq=False, init=False)
class CatchAllMessage(Message):
    """
    兜底消息 - 包装一条没有任何监听器执行过的消息。

    只有 catch_all 注册的监听器会匹配此类型。
    """

    message: Message

    def __init__(self, message: Message):
        if isinstance(message, CatchAllMessage):
            raise ValueError("CatchAllMessage cannot wrap another CatchAllMessage")
        super().__init__(message.user)
        self.message = message

    @property
    def text(self) -> str | None:
        """被包装消息的文本（如果有）。"""
        return getattr(self.message, "text", None)


@dataclass
class Envelope:
    """
    出站寻址信息 - 告诉适配器回复发往哪里。

    属性:
        room: 目标房间
        user: 目标用户（reply 时用于 @ 对方）
        message: 触发本次回复的原始消息（可选）
    """

    room: str | None = None
    user: User | None = None
    message: Message | None = None
