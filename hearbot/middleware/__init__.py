"""中间件模块 - receive / listener / response 三段式中间件链。"""

from hearbot.middleware.chain import Middleware, MiddlewareContext, MiddlewareFn, MiddlewareStack

__all__ = ["Middleware", "MiddlewareContext", "MiddlewareFn", "MiddlewareStack"]
