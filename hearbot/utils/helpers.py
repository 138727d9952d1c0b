"""
工具函数集合 - hearbot 项目全局通用的辅助函数。

- ensure_dir：配置文件、Shell 历史记录写入前确保目录存在
- truncate_string：日志里截断过长的消息文本
"""

from pathlib import Path


def ensure_dir(path: Path) -> Path:
    """确保目录存在，不存在则递归创建，返回原路径。"""
    path.mkdir(parents=True, exist_ok=True)
    return path


def truncate_string(s: str, max_len: int = 100, suffix: str = "...") -> str:
    """
    截断字符串到指定最大长度，超出时添加后缀。

    参数:
        s: 原始字符串
        max_len: 最大长度（包含后缀），默认 100
        suffix: 截断后缀，默认 "..."
    """
    if len(s) <= max_len:
        return s
    return s[: max_len - len(suffix)] + suffix
