"""
作用域 HTTP 客户端 (http/client.py)

脚本里经常需要调用外部 API，robot.http(url) 返回一个可链式设置的请求构造器，
最终由 get()/post() 等方法真正发出请求：

    res = await (
        robot.http("https://api.example.com/items")
        .header("Authorization", "Bearer abc")
        .query(limit=10)
        .get()
    )

技术栈：
    - HTTP 客户端：httpx（异步 HTTP 库，类似 Java 的 OkHttp）
    - 每次请求创建一个短生命周期的 httpx.AsyncClient，用完即关闭

客户端选项（timeout、follow_redirects、max_redirects、verify、transport 等）
原样传给 httpx.AsyncClient；robot 级默认值可以被单次调用覆盖。
"""

from __future__ import annotations

from typing import Any

import httpx

DEFAULT_TIMEOUT = 30.0
MAX_REDIRECTS = 5


class ScopedClient:
    """
    链式 HTTP 请求构造器。

    属性:
        url: 请求地址
        options: 传给 httpx.AsyncClient 的客户端选项
    """

    def __init__(self, url: str, options: dict[str, Any] | None = None):
        self.url = url
        self.options: dict[str, Any] = {
            "timeout": DEFAULT_TIMEOUT,
            "follow_redirects": True,
            "max_redirects": MAX_REDIRECTS,
        }
        self.options.update(options or {})
        self._headers: dict[str, str] = {}
        self._params: dict[str, Any] = {}

    def header(self, name: str, value: str) -> ScopedClient:
        """设置单个请求头。"""
        self._headers[name] = value
        return self

    def headers(self, headers: dict[str, str]) -> ScopedClient:
        """批量设置请求头。"""
        self._headers.update(headers)
        return self

    def query(self, params: dict[str, Any] | None = None, **kwargs: Any) -> ScopedClient:
        """追加 URL 查询参数。"""
        self._params.update(params or {})
        self._params.update(kwargs)
        return self

    def timeout(self, seconds: float) -> ScopedClient:
        """设置本次请求的超时时间（秒）。"""
        self.options["timeout"] = seconds
        return self

    async def get(self) -> httpx.Response:
        return await self.request("GET")

    async def delete(self) -> httpx.Response:
        return await self.request("DELETE")

    async def head(self) -> httpx.Response:
        return await self.request("HEAD")

    async def post(self, data: Any = None, json: Any = None) -> httpx.Response:
        return await self.request("POST", data=data, json=json)

    async def put(self, data: Any = None, json: Any = None) -> httpx.Response:
        return await self.request("PUT", data=data, json=json)

    async def patch(self, data: Any = None, json: Any = None) -> httpx.Response:
        return await self.request("PATCH", data=data, json=json)

    async def request(self, method: str, data: Any = None, json: Any = None) -> httpx.Response:
        """
        发送请求。

        data 为 str/bytes 时作为原始请求体，为 dict 时按表单编码；
        json 不为空时按 JSON 编码。
        """
        body: dict[str, Any] = {}
        if json is not None:
            body["json"] = json
        elif isinstance(data, (str, bytes)):
            body["content"] = data
        elif data is not None:
            body["data"] = data

        async with httpx.AsyncClient(**self.options) as client:
            return await client.request(
                method,
                self.url,
                params=self._params or None,
                headers=self._headers,
                **body,
            )
