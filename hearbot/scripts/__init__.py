"""脚本模块 - 在分发开始之前把外部脚本注册到 Robot。"""

from hearbot.scripts.loader import load_external_scripts, load_script, resolve_script

__all__ = ["load_external_scripts", "load_script", "resolve_script"]
