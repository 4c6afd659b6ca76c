"""过滤器（中间件）模块

过滤器是请求/响应拦截单元：接收请求和下游服务，返回响应的 Future。
多个过滤器通过 compose 组合成一个服务，组合顺序为：后安装的过滤器包在最外层。

例如依次安装 F1、F2 后，请求经过的顺序为:
    F2 前置处理 -> F1 前置处理 -> 传输层 -> F1 后置处理 -> F2 后置处理
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from concurrent.futures import Future
from typing import TypeAlias

import requests

from fhttp.constants import UTF_8
from fhttp.exceptions import FHttpConstructionError, FHttpTimeoutError
from fhttp.futures import failed_future, map_future, within
from fhttp.message import HttpRequest
from fhttp.utils import DEFAULT_SENSITIVE_HEADERS, sanitize_header_pairs, sanitize_headers

logger = logging.getLogger(__name__)

# 服务：接收请求并异步返回响应
Service: TypeAlias = Callable[[HttpRequest], Future]


class Filter(ABC):
    """过滤器基类"""

    @abstractmethod
    def __call__(self, request: HttpRequest, service: Service) -> Future:
        """处理请求，可以在调用下游服务前后做任意转换"""

    def and_then(self, service: Service) -> Service:
        """把当前过滤器绑定到下游服务上，返回新的服务"""

        def bound(request: HttpRequest) -> Future:
            try:
                return self(request, service)
            except Exception as e:
                logger.debug(f"[{request.trace_name}] {type(self).__name__} raised synchronously: {e}")
                return failed_future(e)

        return bound


class FunctionFilter(Filter):
    """把普通函数 (request, service) -> Future 包装为过滤器"""

    def __init__(self, func: Callable[[HttpRequest, Service], Future]):
        if not callable(func):
            raise FHttpConstructionError(f"Filter must be callable, got {func!r}")
        self.func = func

    def __call__(self, request: HttpRequest, service: Service) -> Future:
        return self.func(request, service)

    def __repr__(self) -> str:
        return f"FunctionFilter({self.func!r})"


def as_filter(f: Filter | Callable[[HttpRequest, Service], Future]) -> Filter:
    """把过滤器或普通函数统一转换为 Filter 实例"""
    return f if isinstance(f, Filter) else FunctionFilter(f)


def compose(filters: Iterable[Filter], service: Service) -> Service:
    """
    按安装顺序组合过滤器链

    参数:
        filters: 按安装顺序排列的过滤器，第一个最靠近传输层
        service: 最内层的传输服务

    返回:
        组合后的服务，最后安装的过滤器位于最外层
    """
    for f in filters:
        service = f.and_then(service)
    return service


class DebugFilter(Filter):
    """
    调试过滤器

    在请求发送前记录请求（方法、URI、请求头、非空请求体），在收到响应后记录响应。
    可以多次安装，用于观察各层过滤器对请求的改写。

    参数:
        level: 日志级别，默认 INFO
        sanitize: 是否脱敏敏感请求头
    """

    def __init__(self, level: int = logging.INFO, sanitize: bool = True):
        self.level = level
        self.sanitize = sanitize

    def _request_headers(self, headers: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
        headers = list(headers)
        return sanitize_header_pairs(headers, DEFAULT_SENSITIVE_HEADERS) if self.sanitize else headers

    def log_request(self, request: HttpRequest) -> None:
        logger.log(self.level, f"[{request.trace_name}] {request.method} {request.uri}")
        for name, value in self._request_headers(request.headers):
            logger.log(self.level, f"[{request.trace_name}] {name}: {value}")
        if request.content:
            logger.log(self.level, f"[{request.trace_name}] --CONTENT--")
            logger.log(self.level, f"[{request.trace_name}] {request.content.decode(UTF_8, errors='replace')}")

    def log_response(self, request: HttpRequest, response: requests.Response) -> requests.Response:
        logger.log(self.level, f"[{request.trace_name}] {response.status_code} {response.reason}")
        headers = dict(response.headers)
        if self.sanitize:
            headers = sanitize_headers(headers, DEFAULT_SENSITIVE_HEADERS)
        for name, value in headers.items():
            logger.log(self.level, f"[{request.trace_name}] {name}: {value}")
        if response.content:
            logger.log(self.level, f"[{request.trace_name}] --CONTENT--")
            logger.log(self.level, f"[{request.trace_name}] {response.content.decode(UTF_8, errors='replace')}")
        return response

    def __call__(self, request: HttpRequest, service: Service) -> Future:
        self.log_request(request)
        return map_future(service(request), lambda response: self.log_response(request, response))


class TimeoutFilter(Filter):
    """
    超时过滤器

    下游服务在 timeout 秒内未完成时，返回的 Future 以 FHttpTimeoutError 失败。
    同时对阻塞式获取和 Future 式获取生效。
    """

    def __init__(self, timeout: float):
        if timeout is None or timeout <= 0:
            raise FHttpConstructionError(f"Timeout must be positive, got {timeout!r}")
        self.timeout = timeout

    def __call__(self, request: HttpRequest, service: Service) -> Future:
        return within(
            service(request),
            self.timeout,
            lambda: FHttpTimeoutError(f"Request to {request.uri} timed out after {self.timeout}s"),
        )
