"""
hearbot - 轻量级聊天机器人消息分发框架

模块概述：
    本文件是 hearbot 包的入口文件（__init__.py），定义了包的元信息。
    hearbot 的核心是"接收/分发流水线"：适配器把聊天事件标准化为 Message，
    Robot 按注册顺序把消息交给一串监听器（Listener），每个监听器可以产生回复。

    整个框架的核心功能包括：
    - 有序的监听器注册表（hear / respond / enter / leave / topic / catch_all）
    - 三段式中间件链（receive → listener → response）
    - 兜底（catch-all）分发协议
    - "是否在叫我" 正则的编译（机器人名字 + 别名）
    - 监听器之间的故障隔离与错误广播
"""

# 版本号，遵循语义化版本规范（主版本.次版本.修订号）
__version__ = "0.1.0"

# 项目 logo 表情符号，用于 CLI 输出等场景的品牌标识
__logo__ = "👂"
