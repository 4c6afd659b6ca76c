"""传输层模块

RequestsTransport 是基于 requests.Session 和线程池的传输服务：
接收 HttpRequest，在线程池中发送，返回 concurrent.futures.Future。

职责:
    - 连接池与重试策略（urllib3 Retry + HTTPAdapter）
    - 多个 host 之间轮询
    - 把 requests 异常转换为 FHttpNetworkError / FHttpTimeoutError
    - 把非 2xx 响应转换为 HttpStatusException（附带客户端名称）
"""

from __future__ import annotations

import itertools
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from fhttp.constants import DEFAULT_MAX_WORKERS, DEFAULT_SCHEME, DEFAULT_TIMEOUT
from fhttp.exceptions import FHttpConstructionError, FHttpNetworkError, FHttpTimeoutError, HttpStatusException
from fhttp.message import HttpRequest
from fhttp.utils import (
    DEFAULT_SENSITIVE_HEADERS,
    DEFAULT_SENSITIVE_PARAMS,
    sanitize_dict,
    sanitize_header_pairs,
    sanitize_url,
)

logger = logging.getLogger(__name__)


def merge_headers(headers: list[tuple[str, str]]) -> dict[str, str]:
    """
    合并同名请求头

    requests 使用字典保存请求头，同名请求头按 HTTP 规范以 ", " 拼接为一个值
    """
    merged: dict[str, str] = {}
    names: dict[str, str] = {}
    for name, value in headers:
        key = name.lower()
        if key in names:
            merged[names[key]] = f"{merged[names[key]]}, {value}"
        else:
            names[key] = name
            merged[name] = value
    return merged


class RequestsTransport:
    """
    基于 requests 的异步传输服务

    参数:
        hosts: host:port 列表，请求在多个 host 之间轮询
        scheme: 请求协议（http / https）
        name: 客户端名称，附加到 HttpStatusException 上
        timeout: 单次请求的 socket 超时时间（秒）
        verify: SSL 证书验证开关
        max_workers: 线程池最大工作线程数
        retry_config: urllib3 Retry 配置，None 表示不重试
        pool_config: HTTPAdapter 连接池配置
        session: 自定义 requests.Session（可选）
        sanitize: 日志中是否脱敏敏感信息
        sensitive_headers: 需要脱敏的请求头名称集合
        sensitive_params: 需要脱敏的 URL 参数和请求参数名称集合
        **request_kwargs: 其他传递给 session.request 的参数（如 proxies、cert）

    调用:
        transport(request) -> Future[requests.Response]
    """

    def __init__(
        self,
        hosts: list[str],
        scheme: str = DEFAULT_SCHEME,
        name: str = "",
        timeout: float | None = DEFAULT_TIMEOUT,
        verify: bool = True,
        max_workers: int = DEFAULT_MAX_WORKERS,
        retry_config: dict[str, Any] | None = None,
        pool_config: dict[str, Any] | None = None,
        session: requests.Session | None = None,
        sanitize: bool = True,
        sensitive_headers: set[str] | None = None,
        sensitive_params: set[str] | None = None,
        **request_kwargs,
    ):
        if not hosts:
            raise FHttpConstructionError("At least one host:port must be provided")
        self.hosts = list(hosts)
        self.scheme = scheme
        self.name = name
        self.timeout = timeout
        self.verify = verify
        self.sanitize = sanitize
        self.sensitive_headers = sensitive_headers or DEFAULT_SENSITIVE_HEADERS
        self.sensitive_params = sensitive_params or DEFAULT_SENSITIVE_PARAMS
        self.request_kwargs = request_kwargs
        self.retry_config = retry_config
        self.pool_config = pool_config or {}
        self.session = session or self._create_session()
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=f"fhttp-{name or 'client'}")

        self._hosts_cycle = itertools.cycle(self.hosts)
        self._hosts_lock = threading.Lock()

    def _create_session(self) -> requests.Session:
        """
        创建并配置 requests.Session 对象

        执行步骤:
            1. 创建新的 Session 对象
            2. 配置重试策略和连接池（如果启用重试）
            3. 为 HTTP 和 HTTPS 协议挂载适配器
        """
        session = requests.Session()
        if self.retry_config:
            adapter = HTTPAdapter(max_retries=Retry(**self.retry_config), **self.pool_config)
        else:
            adapter = HTTPAdapter(**self.pool_config)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def next_host(self) -> str:
        with self._hosts_lock:
            return next(self._hosts_cycle)

    def build_url(self, request: HttpRequest) -> str:
        return f"{self.scheme}://{self.next_host()}{request.uri}"

    def __call__(self, request: HttpRequest) -> Future:
        return self.executor.submit(self.send, request)

    def send(self, request: HttpRequest) -> requests.Response:
        """
        同步发送单个请求，返回原始 Response 对象

        异常:
            FHttpTimeoutError: 请求超时
            HttpStatusException: 非 2xx 响应
            FHttpNetworkError: 网络连接错误
        """
        url = self.build_url(request)
        trace = request.trace_name
        safe_url = sanitize_url(url, self.sensitive_params) if self.sanitize else url
        logger.info(f"[{trace}] Starting {request.method} request to {safe_url}")

        if logger.isEnabledFor(logging.DEBUG):
            if self.sanitize:
                headers = sanitize_header_pairs(request.headers, self.sensitive_headers)
                extra = sanitize_dict(self.request_kwargs, self.sensitive_params)
            else:
                headers, extra = request.headers, self.request_kwargs
            logger.debug(f"[{trace}] Request headers: {headers}, body: {len(request.content)} bytes, extra: {extra}")

        try:
            response = self.session.request(
                **self.request_kwargs,
                method=request.method,
                url=url,
                headers=merge_headers(request.headers),
                data=request.content or None,
                timeout=self.timeout,
                verify=self.verify,
            )
        except requests.exceptions.Timeout as e:
            error = FHttpTimeoutError(f"Request to {safe_url} timed out after {self.timeout}s: {e}")
            logger.error(f"[{trace}] Request failed: {error}")
            raise error from e
        except requests.exceptions.RequestException as e:
            error = FHttpNetworkError(f"Request to {safe_url} failed: {e}")
            logger.error(f"[{trace}] Request failed: {error}")
            raise error from e

        logger.info(f"[{trace}] Received {response.status_code} response")
        logger.debug(f"[{trace}] Response headers: {response.headers}")
        if not 200 <= response.status_code < 300:
            error = HttpStatusException(response.status_code, response.reason, response).add_name(self.name)
            logger.error(f"[{trace}] Request failed: {error}")
            raise error
        return response

    def close(self) -> None:
        """关闭线程池和 Session，释放连接池资源"""
        self.executor.shutdown(wait=False)
        self.session.close()
        logger.info("Transport closed")
