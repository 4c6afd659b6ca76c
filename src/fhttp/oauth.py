"""OAuth 1.0 / 1.0a 请求签名模块

提供签名基串构造、HMAC-SHA1 签名计算以及 Authorization 请求头生成，
并通过 OAuth1Filter 接入过滤器链。只负责请求签名，不包含令牌交换流程。

签名步骤:
    1. 收集协议参数（consumer_key、nonce、签名方法、时间戳、版本、token、verifier）
    2. 合并查询参数和表单请求体参数，键值按 RFC 3986 编码
    3. 按编码后的键、值排序
    4. 构造基串: METHOD&enc(base_url)&enc(k=v&k=v...)
    5. 构造签名密钥: enc(consumer_secret)&enc(token_secret)
    6. 计算 HMAC-SHA1 并 base64 编码
    7. 生成 Authorization: OAuth k="v", ... 请求头
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import secrets
import time
from collections.abc import Callable, Iterable
from concurrent.futures import Future
from dataclasses import dataclass

from fhttp.constants import (
    DEFAULT_PORTS,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
    OAUTH_SIGNATURE_METHOD,
    OAUTH_VERSION,
    PARAM_TYPE,
    UTF_8,
)
from fhttp.exceptions import FHttpConstructionError
from fhttp.filters import Filter, Service
from fhttp.message import HttpRequest
from fhttp.params import decode_params, percent_encode, split_uri

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Token:
    """OAuth 凭证对，既用于 consumer 凭证，也用于 access token"""

    key: str
    secret: str


def parse_host_port(host_port: str) -> tuple[str, int]:
    """
    解析 "host:port" 形式的 authority

    异常:
        FHttpConstructionError: 缺少端口或端口不是整数时抛出
    """
    host, sep, port = (host_port or "").rpartition(":")
    if not sep or not host:
        raise FHttpConstructionError(f"OAuth signing requires host:port, got {host_port!r}")
    try:
        return host, int(port)
    except ValueError as e:
        raise FHttpConstructionError(f"Invalid port in {host_port!r}") from e


def normalize_base_url(scheme: str, host: str, port: int, path: str) -> str:
    """构造签名用的基础 URL，默认端口会被省略"""
    scheme = scheme.lower()
    authority = host.lower()
    if DEFAULT_PORTS.get(scheme) != port:
        authority = f"{authority}:{port}"
    return f"{scheme}://{authority}{path or '/'}"


def normalize_params(params: Iterable[tuple[str, str]]) -> str:
    """编码并排序参数，拼接为 k=v&k=v 形式"""
    encoded = sorted((percent_encode(k), percent_encode(v)) for k, v in params)
    return "&".join(f"{k}={v}" for k, v in encoded)


def signature_base_string(method: str, base_url: str, params: Iterable[tuple[str, str]]) -> str:
    return "&".join(
        [
            method.upper(),
            percent_encode(base_url),
            percent_encode(normalize_params(params)),
        ]
    )


def hmac_sha1_signature(base_string: str, consumer_secret: str, token_secret: str = "") -> str:
    key = f"{percent_encode(consumer_secret)}&{percent_encode(token_secret)}"
    digest = hmac.new(key.encode(UTF_8), base_string.encode(UTF_8), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


class OAuth1Signer:
    """
    OAuth1 签名器

    参数:
        consumer: consumer 凭证
        token: access token（可选）
        verifier: oauth_verifier（可选，1.0a）
    """

    def __init__(self, consumer: Token, token: Token | None = None, verifier: str | None = None):
        self.consumer = consumer
        self.token = token
        self.verifier = verifier

    def protocol_params(self, nonce: str, timestamp: int) -> list[tuple[str, str]]:
        params = [
            ("oauth_consumer_key", self.consumer.key),
            ("oauth_nonce", nonce),
            ("oauth_signature_method", OAUTH_SIGNATURE_METHOD),
            ("oauth_timestamp", str(timestamp)),
            ("oauth_version", OAUTH_VERSION),
        ]
        if self.token is not None:
            params.append(("oauth_token", self.token.key))
        if self.verifier is not None:
            params.append(("oauth_verifier", self.verifier))
        return params

    def sign(
        self,
        method: str,
        scheme: str,
        host: str,
        port: int,
        uri: str,
        params: Iterable[tuple[str, str]],
        nonce: str,
        timestamp: int,
    ) -> list[tuple[str, str]]:
        """
        计算签名

        参数:
            method: HTTP 方法
            scheme, host, port: 请求目标的协议、主机和端口
            uri: 请求的 path+query
            params: 查询参数之外需要参与签名的参数（表单请求体参数）
            nonce: 随机串
            timestamp: Unix 时间戳（秒）

        返回:
            包含 oauth_signature 的完整协议参数列表
        """
        path, query = split_uri(uri)
        protocol = self.protocol_params(nonce, timestamp)
        all_params = [*protocol, *decode_params(query), *params]

        base_string = signature_base_string(method, normalize_base_url(scheme, host, port, path), all_params)
        signature = hmac_sha1_signature(
            base_string, self.consumer.secret, self.token.secret if self.token is not None else ""
        )
        logger.debug(f"OAuth1 base string: {base_string}")
        return [*protocol, ("oauth_signature", signature)]

    def authorization_header(self, *args, **kwargs) -> str:
        """计算签名并生成 Authorization 请求头的值，参数同 sign"""
        oauth_params = self.sign(*args, **kwargs)
        return "OAuth " + ", ".join(f'{percent_encode(k)}="{percent_encode(v)}"' for k, v in oauth_params)


def generate_nonce() -> str:
    return secrets.token_hex(16)


class OAuth1Filter(Filter):
    """
    OAuth1 签名过滤器

    在请求进入下游服务前计算签名并设置 Authorization 请求头。
    表单请求体（application/x-www-form-urlencoded）中的参数同样参与签名。

    参数:
        scheme: 请求协议
        host: 主机名
        port: 端口
        consumer: consumer 凭证
        token: access token（可选）
        verifier: oauth_verifier（可选）
        nonce_factory: 生成 nonce 的函数，默认使用 secrets 生成随机串
        clock: 返回当前 Unix 时间（秒）的函数
    """

    def __init__(
        self,
        scheme: str,
        host: str,
        port: int,
        consumer: Token,
        token: Token | None = None,
        verifier: str | None = None,
        nonce_factory: Callable[[], str] = generate_nonce,
        clock: Callable[[], float] = time.time,
    ):
        self.scheme = scheme
        self.host = host
        self.port = port
        self.signer = OAuth1Signer(consumer, token, verifier)
        self.nonce_factory = nonce_factory
        self.clock = clock

    def body_params(self, request: HttpRequest) -> list[tuple[str, str]]:
        content_type = request.get_header(HEADER_CONTENT_TYPE) or ""
        if request.content and content_type.split(";", 1)[0].strip().lower() == PARAM_TYPE:
            return decode_params(request.content.decode(UTF_8))
        return []

    def __call__(self, request: HttpRequest, service: Service) -> Future:
        header = self.signer.authorization_header(
            request.method,
            self.scheme,
            self.host,
            self.port,
            request.uri,
            self.body_params(request),
            nonce=self.nonce_factory(),
            timestamp=int(self.clock()),
        )
        request.set_header(HEADER_AUTHORIZATION, header)
        return service(request)
