"""工具函数模块 - 提供 hearbot 项目全局通用的辅助函数。"""

from hearbot.utils.helpers import ensure_dir, truncate_string

__all__ = ["ensure_dir", "truncate_string"]
