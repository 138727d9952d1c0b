"""
适配器模块 - 聊天后端接入。

适配器是 hearbot 的"感官系统"：负责把聊天平台的事件标准化为 Message
交给 Robot，并把 Robot 的回复发回平台。核心只依赖 Adapter 接口，
不规定任何传输协议。

要接入新的聊天平台：
1. 继承 Adapter，实现 run / send / reply
2. 在 run() 中收到事件后调用 _handle_message()
3. 配置 adapter = "your.module:YourAdapter"
"""

from hearbot.adapters.base import Adapter
from hearbot.adapters.loader import BUILTIN_ADAPTERS, load_adapter, resolve_adapter

__all__ = ["Adapter", "BUILTIN_ADAPTERS", "load_adapter", "resolve_adapter"]
