"""
外部脚本引导 (scripts/loader.py)

脚本就是一个接收 Robot 的函数，在分发开始之前调用注册 API：

    # my_scripts/ping.py
    def setup(robot):
        @robot.respond(r"ping$")
        async def pong(res):
            await res.reply("PONG")

load_external_scripts() 只负责按名字导入模块并调用其中的函数，
不扫描目录，也不关心脚本是如何被安装的。

规格写法：
    "package.module"           → 调用 package.module.setup(robot)
    "package.module:function"  → 调用 package.module.function(robot)
    {"package.module": {...}}  → 调用 setup(robot, options)
"""

from __future__ import annotations

import importlib
import inspect
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from hearbot.robot.core import Robot

DEFAULT_ENTRYPOINT = "setup"

_MISSING = object()


def resolve_script(spec: str) -> Callable[..., Any]:
    """把 "module[:function]" 解析为可调用对象。"""
    module_name, _, attr = spec.partition(":")
    module = importlib.import_module(module_name)
    entrypoint = getattr(module, attr or DEFAULT_ENTRYPOINT, None)
    if not callable(entrypoint):
        raise TypeError(f"Expected {spec} to provide a callable '{attr or DEFAULT_ENTRYPOINT}(robot)'")
    return entrypoint


async def load_script(robot: Robot, spec: str, options: Any = _MISSING) -> Any:
    """
    导入并执行单个脚本。

    参数:
        robot: 目标 Robot
        spec: 脚本规格
        options: 传给脚本的选项；省略时脚本只接收 robot

    返回:
        脚本函数的返回值
    """
    logger.debug(f"Loading script {spec}")
    try:
        entrypoint = resolve_script(spec)
        result = entrypoint(robot) if options is _MISSING else entrypoint(robot, options)
        if inspect.isawaitable(result):
            result = await result
    except Exception as e:
        logger.opt(exception=e).error(f"Error loading script {spec}: {e}")
        raise
    return result


async def load_external_scripts(robot: Robot, scripts: Iterable[str] | Mapping[str, Any]) -> list[Any]:
    """
    按顺序加载一组脚本。

    参数:
        robot: 目标 Robot
        scripts: 脚本规格列表，或 {规格: 选项} 字典

    返回:
        各脚本函数的返回值列表
    """
    results = []
    if isinstance(scripts, Mapping):
        for spec, options in scripts.items():
            results.append(await load_script(robot, spec, options))
    else:
        for spec in scripts:
            results.append(await load_script(robot, spec))
    return results
