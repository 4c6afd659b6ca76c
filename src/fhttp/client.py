"""HTTP 客户端模块

FHttpClient 把客户端名称、协议、host 列表和传输服务绑定在一起，
并作为 RequestBuilder 的工厂：client("/path") 返回一个预置了 Host 请求头的构建器。

配置方式与常见的客户端基类一致：
    - 类属性提供默认配置，子类可以覆盖
    - 构造函数参数覆盖类属性
    - 重试和连接池配置按 类级别 -> 实例级别 合并

使用示例:
    >>> class PhotoClient(FHttpClient):
    ...     name = "photos"
    ...     hosts = "photos.example.com:443"
    ...     scheme = "https"
    >>>
    >>> with PhotoClient() as client:
    ...     token = client("/oauth/request_token").with_oauth(consumer).post_or_raise(res_map=as_oauth1_token)
"""

from __future__ import annotations

import logging
from typing import Any

from fhttp.constants import (
    DEFAULT_MAX_WORKERS,
    DEFAULT_POOL_CONFIG,
    DEFAULT_RETRIES,
    DEFAULT_RETRY_CONFIG,
    DEFAULT_SCHEME,
    DEFAULT_TIMEOUT,
    HEADER_HOST,
)
from fhttp.exceptions import FHttpConstructionError
from fhttp.filters import Service
from fhttp.request import RequestBuilder
from fhttp.transport import RequestsTransport
from fhttp.utils import DEFAULT_SENSITIVE_HEADERS, DEFAULT_SENSITIVE_PARAMS

logger = logging.getLogger(__name__)


def parse_hosts(hosts: str | list[str]) -> list[str]:
    """
    解析 host 列表

    参数:
        hosts: "host1:80,host2:80" 形式的字符串或 host:port 列表

    返回:
        去除空白后的 host:port 列表
    """
    items = hosts.split(",") if isinstance(hosts, str) else list(hosts)
    return [h.strip() for h in items if h and h.strip()]


class FHttpClient:
    """
    HTTP 客户端

    类属性:
        name: 客户端名称，用于日志和 HttpStatusException 标注
        hosts: host:port 列表（逗号分隔的字符串或列表）
        scheme: 请求协议
        default_timeout: 默认 socket 超时时间（秒）
        verify: SSL 证书验证开关
        enable_retry: 是否启用传输层重试
        max_retries: 最大重试次数
        retry_config: 重试策略配置字典
        pool_config: 连接池配置字典
        max_workers: 传输线程池的最大工作线程数
        default_headers: 每个请求都会携带的请求头
        sensitive_headers / sensitive_params: 日志脱敏使用的键名集合
        enable_sanitization: 是否启用日志脱敏
    """

    # ========== 基础配置 ==========
    name: str = ""
    hosts: str | list[str] = ""
    scheme: str = DEFAULT_SCHEME

    # ========== 超时和重试配置 ==========
    default_timeout: float | None = DEFAULT_TIMEOUT
    verify: bool = True
    enable_retry: bool = False
    max_retries: int = DEFAULT_RETRIES
    retry_config: dict[str, Any] = DEFAULT_RETRY_CONFIG
    pool_config: dict[str, Any] = DEFAULT_POOL_CONFIG

    # ========== 请求头和并发配置 ==========
    default_headers: dict[str, str] = {}
    max_workers: int = DEFAULT_MAX_WORKERS

    # ========== 安全性配置 ==========
    sensitive_headers: set[str] = DEFAULT_SENSITIVE_HEADERS
    sensitive_params: set[str] = DEFAULT_SENSITIVE_PARAMS
    enable_sanitization: bool = True

    def __init__(
        self,
        hosts: str | list[str] | None = None,
        name: str | None = None,
        scheme: str | None = None,
        service: Service | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        verify: bool | None = None,
        enable_retry: bool | None = None,
        max_retries: int | None = None,
        max_workers: int | None = None,
        retry_config: dict[str, Any] | None = None,
        pool_config: dict[str, Any] | None = None,
        **kwargs,
    ):
        """
        初始化客户端

        参数:
            hosts: host:port 列表，覆盖类属性
            name: 客户端名称
            scheme: 请求协议
            service: 自定义传输服务，None 时创建 RequestsTransport
            headers: 额外的默认请求头
            timeout: socket 超时时间（秒）
            verify: SSL 证书验证开关
            enable_retry: 是否启用重试
            max_retries: 最大重试次数
            max_workers: 传输线程池大小
            retry_config: 重试策略配置（覆盖类级别配置）
            pool_config: 连接池配置（覆盖类级别配置）
            **kwargs: 其他传递给 session.request 的参数

        异常:
            FHttpConstructionError: 未提供任何 host 时抛出
        """
        self.hosts = parse_hosts(hosts if hosts is not None else self.hosts)
        if not self.hosts:
            raise FHttpConstructionError("hosts must be provided as a class attribute or argument")

        self.name = name if name is not None else self.name
        self.scheme = (scheme or self.scheme).lower()
        self.timeout = timeout if timeout is not None else self.default_timeout
        self.verify = verify if verify is not None else self.verify
        self.enable_retry = enable_retry if enable_retry is not None else self.enable_retry
        self.max_retries = max_retries if max_retries is not None else self.max_retries
        self.max_workers = max_workers if max_workers is not None else self.max_workers

        self.retry_config = self._merge_config(self.retry_config, retry_config, max_retries_override=max_retries)
        self.pool_config = self._merge_config(self.pool_config, pool_config)
        self.session_headers = {**self.default_headers, **(headers or {})}

        self.service = service if service is not None else self._create_transport(**kwargs)
        logger.debug(f"Created client {self.name or '<unnamed>'} for {self.scheme}://{','.join(self.hosts)}")

    def _merge_config(self, base_config: dict, override_config: dict | None, **extra_updates) -> dict:
        """
        合并配置字典

        参数:
            base_config: 基础配置（类级别）
            override_config: 覆盖配置（实例级别）
            **extra_updates: 额外的更新项（如 max_retries_override）
        """
        merged = {**base_config, **(override_config or {})}

        if max_retries_override := extra_updates.get("max_retries_override"):
            merged["total"] = max_retries_override

        return merged

    def _create_transport(self, **kwargs) -> RequestsTransport:
        retry_config = self.retry_config if self.enable_retry and self.max_retries > 0 else None
        return RequestsTransport(
            self.hosts,
            scheme=self.scheme,
            name=self.name,
            timeout=self.timeout,
            verify=self.verify,
            max_workers=self.max_workers,
            retry_config=retry_config,
            pool_config=self.pool_config,
            sanitize=self.enable_sanitization,
            sensitive_headers=self.sensitive_headers,
            sensitive_params=self.sensitive_params,
            **kwargs,
        )

    @property
    def first_host_port(self) -> str:
        """第一个 host:port，用作 Host 请求头和 OAuth 签名的 authority"""
        return self.hosts[0]

    def request(self, uri: str) -> RequestBuilder:
        """
        创建请求构建器

        参数:
            uri: 请求路径，可携带查询字符串

        返回:
            预置 Host 请求头和默认请求头的 RequestBuilder
        """
        builder = RequestBuilder(self, uri=uri).with_headers((HEADER_HOST, self.first_host_port))
        if self.session_headers:
            builder = builder.with_headers(self.session_headers)
        return builder

    __call__ = request

    def close(self):
        """关闭传输服务，释放线程池和连接池资源（自定义传输服务需自行提供 close 方法）"""
        close = getattr(self.service, "close", None)
        if callable(close):
            close()
            logger.info(f"Client {self.name or '<unnamed>'} closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
