"""
Shell 适配器 - 在终端里直接和机器人对话。

输入使用 prompt_toolkit（历史记录、行编辑、与后台输出互不干扰），
输出使用 Rich 控制台。每一行输入都会以配置的 Shell 用户身份
变成一条 TextMessage 发布到 Robot 的入站队列。

输入 exit / quit 或按 Ctrl+D / Ctrl+C 退出。
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger
from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import FileHistory, InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console

from hearbot.adapters.base import Adapter
from hearbot.bus.events import Envelope, TextMessage, User
from hearbot.utils.helpers import ensure_dir

if TYPE_CHECKING:
    from hearbot.robot.core import Robot

EXIT_COMMANDS = {"exit", "quit", "/exit", "/quit", ":q"}


class ShellAdapter(Adapter):
    """
    终端适配器。

    属性:
        user: 终端另一端的用户
        console: Rich 控制台，测试时可以注入写入 StringIO 的实例
    """

    name = "shell"

    def __init__(
        self,
        robot: Robot,
        user_id: str = "1",
        user_name: str = "Shell",
        room: str = "Shell",
        history_file: str | None = None,
        console: Console | None = None,
    ):
        super().__init__(robot)
        self.user = User(id=user_id, name=user_name, room=room)
        self.console = console or Console()
        self.history_file = Path(history_file).expanduser() if history_file else None
        self._session: PromptSession | None = None

    async def send(self, envelope: Envelope, *strings: str) -> None:
        for text in strings:
            self.console.print(text, markup=False, highlight=False)

    async def emote(self, envelope: Envelope, *strings: str) -> None:
        await self.send(envelope, *(f"* {text}" for text in strings))

    async def reply(self, envelope: Envelope, *strings: str) -> None:
        name = envelope.user.name if envelope.user else self.user.name
        await self.send(envelope, *(f"{name}: {text}" for text in strings))

    def _build_session(self) -> PromptSession:
        if self.history_file is not None:
            ensure_dir(self.history_file.parent)
            history = FileHistory(str(self.history_file))
        else:
            history = InMemoryHistory()
        return PromptSession(history=history, enable_open_in_editor=False, multiline=False)

    async def run(self) -> None:
        self._session = self._build_session()
        self._running = True
        self.console.print(f"{self.robot.name} (type [bold]exit[/bold] or [bold]Ctrl+C[/bold] to quit)\n")

        while self._running:
            try:
                with patch_stdout():
                    line = await self._session.prompt_async(HTML(f"<b fg='ansiblue'>{self.robot.name}&gt;</b> "))
            except (EOFError, KeyboardInterrupt):
                break

            text = line.strip()
            if not text:
                continue
            if text.lower() in EXIT_COMMANDS:
                break

            await self._handle_message(TextMessage(self.user, text))

        logger.debug("Shell adapter input loop finished")
        self._running = False
