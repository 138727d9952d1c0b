"""HTTP 模块 - 供脚本调用外部 API 的作用域客户端。"""

from hearbot.http.client import ScopedClient

__all__ = ["ScopedClient"]
