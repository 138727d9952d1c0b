"""
异步入站队列模块 - 适配器与 Robot 之间的缓冲。

适配器收到聊天平台的事件后，构造 Message 并调用 publish_inbound()；
Robot.run() 持续调用 consume_inbound() 取出消息，每条消息作为一个
独立的 asyncio 任务进入分发流水线。

出站方向不经过队列：监听器回调通过 Response → Robot → Adapter 直接发送，
发送结果原样返回给调用方。

【Java 开发者类比】
- asyncio.Queue 类似于 Java 的 LinkedBlockingQueue
- publish/consume 模式类似于 Java 的 BlockingQueue.put()/take()
"""

import asyncio

from hearbot.bus.events import Message


class MessageBus:
    """
    入站消息总线。

    属性:
        inbound: 入站消息异步队列（适配器 → Robot）
    """

    def __init__(self):
        self.inbound: asyncio.Queue[Message] = asyncio.Queue()

    async def publish_inbound(self, msg: Message) -> None:
        """
        发布入站消息（适配器 → Robot）。

        参数:
            msg: 已标准化的消息对象
        """
        await self.inbound.put(msg)

    async def consume_inbound(self) -> Message:
        """
        消费下一条入站消息（阻塞等待）。

        返回:
            下一条入站消息
        """
        return await self.inbound.get()

    @property
    def inbound_size(self) -> int:
        """待分发的入站消息数量。"""
        return self.inbound.qsize()
