"""
HTTP 客户端异常模块

定义请求构建、传输和响应状态相关的异常类，提供统一的错误处理机制
"""

from __future__ import annotations

import requests


class FHttpError(Exception):
    """
    fhttp 异常基类

    所有自定义异常的基类，用于统一捕获和处理客户端相关错误
    """


class FHttpConstructionError(FHttpError):
    """
    请求构建异常

    当请求在构建阶段即可判定无效时抛出（URI 无法解析、OAuth 签名所需的
    host:port 无法解析等），不会延迟到发送阶段
    """


class FHttpNetworkError(FHttpError):
    """
    网络连接异常

    当网络连接失败、DNS 解析失败、协议错误等传输层问题时抛出此异常
    """


class FHttpTimeoutError(FHttpNetworkError):
    """
    请求超时异常

    当请求执行时间超过设定的超时时间时抛出此异常（传输层超时或超时过滤器触发）
    """


class HttpStatusException(FHttpError):
    """
    HTTP 错误状态异常

    当服务器返回非 2xx 状态码时由传输层抛出

    参数:
        code: HTTP 状态码
        reason: 状态描述
        response: 原始的 requests.Response 对象

    属性:
        status_code: HTTP 状态码
        reason: 状态描述
        response: 保存原始响应对象，便于获取详细错误信息
        client_id: 客户端标识（通过 add_name 设置），用于区分多个客户端
    """

    def __init__(self, code: int, reason: str, response: requests.Response | None = None):
        super().__init__(code, reason)
        self.status_code = code
        self.reason = reason
        self.response = response
        self.client_id = ""

    def add_name(self, name: str) -> HttpStatusException:
        """标记产生该异常的客户端名称，返回自身以便链式调用"""
        self.client_id = f" in {name}" if name else ""
        return self

    def as_string(self) -> str:
        """以 UTF-8 字符串形式返回响应体，无法解码的字节替换为 U+FFFD"""
        from fhttp.extractors import as_string

        return as_string(self.response) if self.response is not None else ""

    def __str__(self) -> str:
        return f"HttpStatusException{self.client_id}: Code: {self.status_code} Reason: {self.reason}"
