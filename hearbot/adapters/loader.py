"""
适配器加载 - 按名称解析并实例化适配器。

支持两种写法：
- 内置名称：如 "shell"
- "module:Class"：任意可导入的适配器类

采用"延迟导入"：只有真正用到的适配器才会导入其模块，
未使用的适配器不需要安装其依赖包。
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, Any

from loguru import logger

from hearbot.adapters.base import Adapter

if TYPE_CHECKING:
    from hearbot.robot.core import Robot

BUILTIN_ADAPTERS = {
    "shell": "hearbot.adapters.shell:ShellAdapter",
}


def resolve_adapter(spec: str) -> type[Adapter]:
    """
    把适配器名称解析为适配器类。

    异常:
        ValueError: 名称既不是内置适配器也不是 "module:Class" 格式
        ImportError / AttributeError: 模块或类不存在
        TypeError: 目标不是 Adapter 子类
    """
    target = BUILTIN_ADAPTERS.get(spec.lower(), spec)
    if ":" not in target:
        raise ValueError(f"Unknown adapter '{spec}'; use a built-in name ({', '.join(BUILTIN_ADAPTERS)}) or 'module:Class'")

    module_name, class_name = target.split(":", 1)
    module = importlib.import_module(module_name)
    adapter_cls = getattr(module, class_name)
    if not (isinstance(adapter_cls, type) and issubclass(adapter_cls, Adapter)):
        raise TypeError(f"{target} is not an Adapter subclass")
    return adapter_cls


def load_adapter(spec: str, robot: Robot, **options: Any) -> Adapter:
    """解析并实例化适配器，失败时记录日志后重新抛出。"""
    try:
        adapter_cls = resolve_adapter(spec)
    except Exception as e:
        logger.error(f"Cannot load adapter {spec} - {e}")
        raise
    return adapter_cls(robot, **options)
