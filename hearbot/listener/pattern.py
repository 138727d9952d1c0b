"""
"是否在叫我" 正则编译器。

respond() 注册的监听器只处理直接对机器人说的话，例如：
    "hal: open the pod bay doors"
    "@hal open the pod bay doors"
    "hal, open the pod bay doors"

respond_pattern() 在调用方的正则前面拼上一段地址前缀：
    ^\\s*[@]?<地址>[:,]?\\s*(?:<原正则>)

其中 <地址> 是机器人名字，配置了别名时是两者的二选一。
两个名字按转义后的长度排序，长的在前：正则引擎优先尝试左边的分支，
当别名是名字的子串时（如 "hal" 与 "hal9000"），短的在前会把
"9000: ..." 漏进正文里。
"""

from __future__ import annotations

import re

from loguru import logger

ADDRESS_SUFFIX = "[:,]?"

# 开头的全局内联 flags，如 "(?i)"、"(?im)"；拼接后不在开头，Python 会拒绝编译
_LEADING_INLINE_FLAGS = re.compile(r"^(?:\(\?[aiLmsux]+\))+")


def _decompose(regex: str | re.Pattern) -> tuple[str, int]:
    """
    拆出正则的源码和 flags。

    开头的内联 flags 从源码中去掉，并入返回的 flags。
    """
    compiled = re.compile(regex) if isinstance(regex, str) else regex
    pattern = _LEADING_INLINE_FLAGS.sub("", compiled.pattern, count=1)
    return pattern, compiled.flags


def respond_pattern(regex: str | re.Pattern, name: str, alias: str | None = None) -> re.Pattern:
    """
    编译一个只匹配"对机器人说的话"的正则。

    参数:
        regex: 地址之后那部分内容的正则（字符串或已编译正则）
        name: 机器人名字
        alias: 机器人别名（可选）

    返回:
        带地址前缀的新正则，保留原正则的 flags
    """
    pattern, flags = _decompose(regex)

    if pattern.startswith("^"):
        logger.warning("Anchors don't work well with respond, perhaps you want to use 'hear'")
        logger.warning(f"The regex in question was {pattern!r}")

    escaped_name = re.escape(name)

    if not alias:
        return re.compile(rf"^\s*[@]?{escaped_name}{ADDRESS_SUFFIX}\s*(?:{pattern})", flags)

    escaped_alias = re.escape(alias)
    if len(escaped_name) > len(escaped_alias):
        first, second = escaped_name, escaped_alias
    else:
        first, second = escaped_alias, escaped_name

    return re.compile(
        rf"^\s*[@]?(?:{first}{ADDRESS_SUFFIX}|{second}{ADDRESS_SUFFIX})\s*(?:{pattern})",
        flags,
    )
