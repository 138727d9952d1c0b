"""
Robot 模块 - 分发核心、Response 外观与错误通道。

【架构定位】
Robot 位于适配器（感官）和脚本（大脑）之间：
- 适配器把聊天事件标准化为 Message 交给 Robot
- Robot 按注册顺序把消息交给脚本注册的监听器
- 监听器通过 Response 回复，Robot 再交回适配器发送
"""

from hearbot.robot.core import MAX_FALLBACK_DEPTH, Robot
from hearbot.robot.errors import ErrorChannel, RegistrationError
from hearbot.robot.response import Response

__all__ = ["Robot", "Response", "ErrorChannel", "RegistrationError", "MAX_FALLBACK_DEPTH"]
