"""
CLI 命令模块 - hearbot 的所有命令行命令定义。

本模块使用 Typer 框架定义 hearbot 的命令体系：
- run：加载适配器和脚本，启动机器人
- check：只加载脚本，打印已注册的监听器和中间件（不启动适配器）
- init：生成默认配置文件
- status：查看当前配置

技术栈：
- Typer：CLI 框架（基于 Click，支持类型注解自动生成帮助文档）
- Rich：终端美化输出（表格等）
- loguru：运行日志，级别来自配置或 --log-level
"""

import asyncio
import signal
import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from hearbot import __logo__, __version__

app = typer.Typer(
    name="hearbot",
    help=f"{__logo__} hearbot - chat robot dispatch core",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    """当用户传入 --version/-v 参数时，打印版本号并退出。"""
    if value:
        console.print(f"{__logo__} hearbot v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """hearbot CLI 根命令回调。处理全局选项（如 --version）。"""
    pass


def _setup_logging(level: str) -> None:
    """把 loguru 的默认输出替换为指定级别的 stderr 输出。"""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def _load_settings(
    config_file: Path | None,
    name: str | None = None,
    alias: str | None = None,
    adapter: str | None = None,
    scripts: list[str] | None = None,
    log_level: str | None = None,
):
    """加载配置文件并应用命令行覆盖项。"""
    from hearbot.config.loader import load_config

    config = load_config(config_file)
    if name:
        config.name = name
    if alias:
        config.alias = alias
    if adapter:
        config.adapter = adapter
    if scripts:
        config.scripts = [*config.scripts, *scripts]
    if log_level:
        config.log_level = log_level
    return config


def _build_robot(config):
    """根据配置创建 Robot（不加载适配器）。"""
    from hearbot.robot.core import Robot

    return Robot(
        name=config.name,
        alias=config.alias,
        adapter=config.adapter,
        http_options=config.http.client_options(),
    )


def _adapter_options(config) -> dict:
    """内置 shell 适配器使用配置里的 shell 段，其他适配器不传额外参数。"""
    if config.adapter.lower() == "shell":
        return config.shell.model_dump()
    return {}


# ============================================================================
# Run
# ============================================================================


@app.command()
def run(
    config_file: Path = typer.Option(None, "--config", "-c", help="Path to config.json"),
    name: str = typer.Option(None, "--name", "-n", help="Robot name"),
    alias: str = typer.Option(None, "--alias", "-l", help="Robot alias"),
    adapter: str = typer.Option(None, "--adapter", "-a", help="Adapter name or module:Class"),
    require: list[str] = typer.Option(None, "--require", "-r", help="Script to load (module or module:function)"),
    log_level: str = typer.Option(None, "--log-level", help="Log level (DEBUG, INFO, ...)"),
):
    """
    启动机器人。

    执行流程：
    1. 加载配置并应用命令行覆盖项
    2. 创建 Robot 并加载适配器
    3. 按顺序加载脚本（注册监听器和中间件）
    4. 运行适配器直到退出，收到 SIGINT/SIGTERM 时优雅关闭
    """
    from hearbot.scripts.loader import load_external_scripts

    config = _load_settings(config_file, name, alias, adapter, require, log_level)
    _setup_logging(config.log_level)

    robot = _build_robot(config)
    robot.load_adapter(**_adapter_options(config))

    async def main_loop():
        await load_external_scripts(robot, config.scripts)

        loop = asyncio.get_running_loop()
        run_task = asyncio.create_task(robot.run())
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, run_task.cancel)
            except NotImplementedError:
                pass

        try:
            await run_task
        except asyncio.CancelledError:
            # robot.run() 的 finally 已完成关闭
            console.print("\nGoodbye!")

    try:
        asyncio.run(main_loop())
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


# ============================================================================
# Check
# ============================================================================


@app.command()
def check(
    config_file: Path = typer.Option(None, "--config", "-c", help="Path to config.json"),
    require: list[str] = typer.Option(None, "--require", "-r", help="Script to load (module or module:function)"),
):
    """加载脚本但不启动适配器，列出注册结果。脚本加载失败时退出码为 1。"""
    from hearbot.scripts.loader import load_external_scripts

    config = _load_settings(config_file, scripts=require)
    _setup_logging(config.log_level)
    robot = _build_robot(config)

    try:
        asyncio.run(load_external_scripts(robot, config.scripts))
    except Exception as e:
        console.print(f"[red]✗ Script loading failed: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"{robot.name} listeners")
    table.add_column("#", style="dim")
    table.add_column("Kind")
    table.add_column("ID", style="cyan")
    table.add_column("Pattern")

    for index, listener in enumerate(robot.listeners):
        pattern = listener.regex.pattern if listener.regex is not None else "-"
        table.add_row(str(index), listener.kind, listener.id or "-", pattern)

    console.print(table)
    console.print(
        f"Middleware: receive={len(robot.middleware.receive)} "
        f"listener={len(robot.middleware.listener)} "
        f"response={len(robot.middleware.response)}"
    )
    console.print(f"Error handlers: {len(robot.errors)}")
    console.print(f"[green]✓[/green] {len(robot.listeners)} listeners registered")


# ============================================================================
# Init / Status
# ============================================================================


@app.command()
def init(
    config_file: Path = typer.Option(None, "--config", "-c", help="Where to write config.json"),
):
    """生成默认配置文件（已存在时询问是否覆盖）。"""
    from hearbot.config.loader import get_config_path, save_config
    from hearbot.config.schema import Config

    path = config_file or get_config_path()
    if path.exists():
        console.print(f"[yellow]Config already exists at {path}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit()

    save_config(Config(), path)
    console.print(f"[green]✓[/green] Created config at {path}")


@app.command()
def status(
    config_file: Path = typer.Option(None, "--config", "-c", help="Path to config.json"),
):
    """显示当前配置：配置文件、名字、别名、适配器和脚本。"""
    from hearbot.config.loader import get_config_path, load_config

    path = config_file or get_config_path()
    config = load_config(path)

    console.print(f"{__logo__} hearbot Status\n")
    console.print(f"Config: {path} {'[green]✓[/green]' if path.exists() else '[dim]not found, using defaults[/dim]'}")
    console.print(f"Name: {config.name}")
    console.print(f"Alias: {config.alias or '[dim]not set[/dim]'}")
    console.print(f"Adapter: {config.adapter}")
    console.print(f"Log level: {config.log_level}")
    if config.scripts:
        console.print("Scripts:")
        for spec in config.scripts:
            console.print(f"  - {spec}")
    else:
        console.print("Scripts: [dim]none[/dim]")


if __name__ == "__main__":
    app()
