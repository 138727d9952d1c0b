"""监听器模块 - 监听器定义与 respond 正则编译。"""

from hearbot.listener.base import Listener, ListenerCallback, Matcher, normalize_options
from hearbot.listener.pattern import respond_pattern

__all__ = ["Listener", "ListenerCallback", "Matcher", "normalize_options", "respond_pattern"]
