"""
配置数据模型定义 (config/schema.py)
=================================
本模块使用 Pydantic 定义 hearbot 的完整配置结构。
所有配置项都有默认值，用户只需在 config.json 中覆盖需要修改的部分。

整体配置结构（树形）：
Config (根配置)
├── name / alias  - 机器人名字与别名（respond 的地址匹配）
├── adapter       - 适配器名称（内置名或 "module:Class"）
├── log_level     - 日志级别
├── scripts       - 启动时加载的脚本规格
├── shell         - Shell 适配器配置
└── http          - robot.http() 的默认客户端选项

对于 Java 开发者：
- BaseSettings 类似于 Spring 的 @ConfigurationProperties，额外支持从环境变量读取配置
- Field(default_factory=...) 类似于 Java 中用工厂方法创建可变默认值，避免共享引用问题
"""

from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ShellConfig(BaseModel):
    """Shell 适配器配置：终端另一端的用户身份。"""
    user_id: str = "1"
    user_name: str = "Shell"
    room: str = "Shell"
    history_file: str | None = None  # 为空时历史记录只保存在内存中


class HttpConfig(BaseModel):
    """robot.http() 的默认客户端选项。"""
    timeout: float = 30.0
    follow_redirects: bool = True
    max_redirects: int = 5  # 最大重定向次数，防止重定向环
    user_agent: str | None = None  # 为空时使用 "Hearbot/<版本号>"

    def client_options(self) -> dict[str, Any]:
        """转换为 Robot(http_options=...) 需要的字典，丢弃未设置的项。"""
        return {k: v for k, v in self.model_dump().items() if v is not None}


class Config(BaseSettings):
    """
    hearbot 根配置。

    支持 HEARBOT_ 前缀的环境变量覆盖，嵌套用 __ 分隔，
    例如 HEARBOT_LOG_LEVEL=DEBUG、HEARBOT_SHELL__USER_NAME=alice。
    """
    name: str = "Hearbot"
    alias: str | None = None
    adapter: str = "shell"
    log_level: str = "INFO"
    scripts: list[str] = Field(default_factory=list)
    shell: ShellConfig = Field(default_factory=ShellConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)

    model_config = SettingsConfigDict(
        env_prefix="HEARBOT_",
        env_nested_delimiter="__",
    )
