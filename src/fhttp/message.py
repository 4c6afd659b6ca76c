"""请求消息模块

定义发送给传输层的可变请求对象 HttpRequest，以及请求构建器累积的延迟修改记录（option）。

构建器本身是不可变的：它只记录一系列 option，直到发送时才在一个全新的
HttpRequest 上按添加顺序依次应用。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from fhttp.constants import HEADER_CONNECTION, HEADER_CONTENT_LENGTH, HTTP_METHOD_GET


@dataclass
class HttpRequest:
    """
    传输层原生请求对象

    属性:
        method: HTTP 方法
        uri: 请求目标（仅 path+query）
        headers: 有序的 (name, value) 列表，允许同名请求头重复出现
        content: 请求体字节
        trace_name: 日志追踪标签，不影响请求行为
    """

    method: str = HTTP_METHOD_GET
    uri: str = "/"
    headers: list[tuple[str, str]] = field(default_factory=list)
    content: bytes = b""
    trace_name: str = ""

    def add_header(self, name: str, value: str) -> None:
        """追加请求头，不覆盖已有同名请求头"""
        self.headers.append((name, str(value)))

    def set_header(self, name: str, value: str) -> None:
        """设置请求头，移除所有已有同名请求头（名称大小写不敏感）"""
        self.remove_header(name)
        self.headers.append((name, str(value)))

    def remove_header(self, name: str) -> None:
        lowered = name.lower()
        self.headers = [(k, v) for k, v in self.headers if k.lower() != lowered]

    def get_header(self, name: str) -> str | None:
        """返回第一个同名请求头的值，不存在时返回 None"""
        values = self.get_headers(name)
        return values[0] if values else None

    def get_headers(self, name: str) -> list[str]:
        lowered = name.lower()
        return [v for k, v in self.headers if k.lower() == lowered]

    def set_content(self, data: bytes) -> None:
        """设置请求体并同步 Content-Length"""
        self.content = bytes(data)
        self.set_header(HEADER_CONTENT_LENGTH, str(len(self.content)))


class HttpOption(ABC):
    """延迟应用到 HttpRequest 上的修改记录"""

    @abstractmethod
    def apply(self, request: HttpRequest) -> None:
        """将修改应用到请求对象上"""


@dataclass(frozen=True)
class AddHeader(HttpOption):
    """追加一个请求头"""

    name: str
    value: str

    def apply(self, request: HttpRequest) -> None:
        request.add_header(self.name, self.value)


@dataclass(frozen=True)
class SetContent(HttpOption):
    """设置请求体（同时设置 Content-Length）"""

    data: bytes

    def apply(self, request: HttpRequest) -> None:
        request.set_content(self.data)


@dataclass(frozen=True)
class SetKeepAlive(HttpOption):
    """设置 Connection 头，HTTP/1.0 服务端需要显式声明长连接"""

    keep_alive: bool

    def apply(self, request: HttpRequest) -> None:
        request.set_header(HEADER_CONNECTION, "keep-alive" if self.keep_alive else "close")
