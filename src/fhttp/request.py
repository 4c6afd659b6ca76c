"""请求构建器模块

RequestBuilder 是不可变的请求描述值：每个链式方法都返回一个新实例，原实例不变。
构建器累积三类信息：
    - 方法与 URI（URI 可携带查询字符串）
    - option: 延迟到发送时才应用的请求修改记录，按调用顺序应用
    - filters: 过滤器链，后安装的过滤器位于最外层

调用获取方法时，构建器在一个全新的 HttpRequest 上依次应用 option，
再把请求送入组合后的过滤器链，最后用提取函数把响应转换为目标类型。

获取方式:
    - *_future: 返回 concurrent.futures.Future，不阻塞调用线程
    - *_option: 阻塞等待，成功返回结果，任何失败都返回 None
    - *_or_raise: 阻塞等待，成功返回结果，失败时原样抛出异常

使用示例:
    >>> client = FHttpClient("api.example.com:80")
    >>> client("/search").with_params(("q", "fhttp")).with_timeout(5).get_or_raise()
    >>> client("/upload").post_future([MultiPart("file", "a.txt", "text/plain", "hello")])
"""

from __future__ import annotations

import base64
import logging
from collections.abc import Callable
from concurrent.futures import Future
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, TypeVar

import requests

from fhttp.constants import (
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
    HEADER_MIME_VERSION,
    HTTP_METHOD_GET,
    HTTP_METHOD_POST,
    HTTP_METHODS,
    PARAM_TYPE,
    UTF_8,
)
from fhttp.exceptions import FHttpConstructionError
from fhttp.extractors import as_string
from fhttp.filters import DebugFilter, Filter, Service, TimeoutFilter, as_filter, compose
from fhttp.futures import failed_future, map_future
from fhttp.message import AddHeader, HttpOption, HttpRequest, SetContent, SetKeepAlive
from fhttp.multipart import MultiPart, encode_multipart, multipart_content_type
from fhttp.oauth import OAuth1Filter, Token, parse_host_port
from fhttp.params import (
    ParamList,
    encode_params,
    has_query,
    normalize_pairs,
    parse_uri,
    request_target,
    split_uri,
    uri_params,
    with_query,
)

if TYPE_CHECKING:
    from fhttp.client import FHttpClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

# 响应提取函数
ResponseMap = Callable[[requests.Response], Any]
# 请求体：字节、字符串或 multipart 分段列表
PostData = bytes | str | list[MultiPart]


@dataclass(frozen=True)
class ClientResponse:
    """阻塞获取成功时的结果"""

    response: Any


@dataclass(frozen=True)
class ClientException:
    """阻塞获取失败时的结果"""

    exception: BaseException


ClientResponseOrException = ClientResponse | ClientException


def block(future: Future) -> ClientResponseOrException:
    """阻塞等待 Future 完成，把成功和失败统一为一个值"""
    try:
        return ClientResponse(future.result())
    except Exception as e:
        return ClientException(e)


@dataclass(frozen=True)
class RequestBuilder:
    """
    不可变的 HTTP 请求构建器

    属性:
        client: 客户端绑定（提供传输服务、协议和 host:port），多个构建器共享
        method: HTTP 方法
        uri: 请求 URI，可携带查询字符串
        trace_name: 日志追踪标签
        filters: 按安装顺序排列的过滤器
        options: 按调用顺序排列的延迟修改记录
    """

    client: FHttpClient
    method: str = HTTP_METHOD_GET
    uri: str = "/"
    trace_name: str = ""
    filters: tuple[Filter, ...] = field(default_factory=tuple)
    options: tuple[HttpOption, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # URI 无法解析时在构建阶段直接失败
        parse_uri(self.uri)

    # ========== 参数 ==========

    @property
    def has_params(self) -> bool:
        """URI 是否携带查询字符串"""
        return has_query(self.uri)

    @property
    def param_list(self) -> ParamList:
        """URI 中已有的查询参数"""
        return uri_params(self.uri)

    def with_params(self, *pairs) -> RequestBuilder:
        """
        追加查询参数

        参数:
            *pairs: (key, value) 二元组，或单个列表/字典

        已有参数会先解码再与新参数一起重新编码，重复键保留为多个值，URI 中的片段（#...）会被丢弃
        """
        path, _ = split_uri(self.uri)
        return replace(self, uri=with_query(path, self.param_list + normalize_pairs(pairs)))

    # ========== 方法与请求头 ==========

    def with_method(self, method: str) -> RequestBuilder:
        """设置 HTTP 方法（get*/post* 系列方法会自动设置）"""
        if not method:
            raise FHttpConstructionError("HTTP method must not be empty")
        method = method.upper()
        if method not in HTTP_METHODS:
            logger.warning(f"Unknown HTTP method {method!r}, sending as is")
        return replace(self, method=method)

    def with_option(self, option: HttpOption) -> RequestBuilder:
        """追加一个发送前应用的修改记录"""
        return replace(self, options=self.options + (option,))

    def with_headers(self, *pairs) -> RequestBuilder:
        """追加请求头，不会替换已有的同名请求头"""
        options = tuple(AddHeader(name, value) for name, value in normalize_pairs(pairs))
        return replace(self, options=self.options + options)

    def with_content_type(self, content_type: str) -> RequestBuilder:
        return self.with_headers((HEADER_CONTENT_TYPE, content_type))

    def with_keep_alive(self, keep_alive: bool) -> RequestBuilder:
        """设置 Connection 请求头（HTTP/1.0 服务端需要）"""
        return self.with_option(SetKeepAlive(keep_alive))

    def with_basic_auth(self, user: str, password: str) -> RequestBuilder:
        """添加 HTTP Basic 认证请求头"""
        credentials = base64.b64encode(f"{user}:{password}".encode(UTF_8)).decode("ascii")
        return self.with_headers((HEADER_AUTHORIZATION, f"Basic {credentials}"))

    def with_trace_name(self, trace_name: str) -> RequestBuilder:
        return replace(self, trace_name=trace_name)

    # ========== 过滤器 ==========

    def with_filter(self, f: Filter | Callable[[HttpRequest, Service], Future]) -> RequestBuilder:
        """安装过滤器，新过滤器包在已有过滤器链的外层"""
        return replace(self, filters=self.filters + (as_filter(f),))

    def with_timeout(self, seconds: float) -> RequestBuilder:
        """安装超时过滤器，对阻塞式和 Future 式获取均生效"""
        return self.with_filter(TimeoutFilter(seconds))

    def with_debug_logging(self, level: int = logging.INFO) -> RequestBuilder:
        """安装调试过滤器，记录请求和响应；可多次安装以观察各层过滤器的改写"""
        return self.with_filter(DebugFilter(level=level))

    def with_oauth(self, consumer: Token, token: Token | None = None, verifier: str | None = None) -> RequestBuilder:
        """
        使用 OAuth1 对请求签名

        参数:
            consumer: consumer 凭证
            token: access token（可选）
            verifier: oauth_verifier（可选，1.0a）

        异常:
            FHttpConstructionError: 客户端的 host:port 无法解析时抛出
        """
        if verifier is not None and token is None:
            raise FHttpConstructionError("OAuth verifier requires an access token")
        host, port = parse_host_port(self.client.first_host_port)
        return self.with_filter(OAuth1Filter(self.client.scheme, host, port, consumer, token, verifier))

    # ========== Future 式获取 ==========

    def get_future(self, res_map: ResponseMap = as_string) -> Future:
        """
        发送非阻塞请求

        参数:
            res_map: 响应提取函数，默认 as_string

        返回:
            提取结果的 Future；传输失败或提取失败时 Future 失败
        """
        return self.process(lambda f: map_future(f, res_map))

    def post_future(self, data: PostData = b"", res_map: ResponseMap = as_string) -> Future:
        """发送非阻塞 POST 请求，data 可以是字节、字符串或 MultiPart 列表"""
        return self.prep_body(data).get_future(res_map)

    # ========== 阻塞获取，失败返回 None ==========

    def get_option(self, res_map: ResponseMap = as_string) -> Any | None:
        """
        发送阻塞请求

        返回:
            提取结果；任何失败（传输、状态码、提取）都返回 None，且无法区分失败原因
        """
        result = self.process(lambda f: block(map_future(f, res_map)))
        if isinstance(result, ClientResponse):
            return result.response
        logger.debug(f"[{self.trace_name}] {self.method} {self.uri} failed, returning None: {result.exception!r}")
        return None

    def post_option(self, data: PostData = b"", res_map: ResponseMap = as_string) -> Any | None:
        return self.prep_body(data).get_option(res_map)

    # ========== 阻塞获取，失败抛出异常 ==========

    def get_or_raise(self, res_map: ResponseMap = as_string) -> Any:
        """
        发送阻塞请求，失败时抛出原始异常

        异常:
            HttpStatusException: 非 2xx 响应
            FHttpNetworkError / FHttpTimeoutError: 传输层失败
            以及 res_map 抛出的任何异常
        """
        result = self.process(lambda f: block(map_future(f, res_map)))
        if isinstance(result, ClientException):
            raise result.exception
        return result.response

    def post_or_raise(self, data: PostData = b"", res_map: ResponseMap = as_string) -> Any:
        return self.prep_body(data).get_or_raise(res_map)

    # ========== 请求发送内部实现 ==========

    def build_request(self) -> HttpRequest:
        """在全新的 HttpRequest 上按调用顺序应用所有 option"""
        request = HttpRequest(method=self.method, uri=request_target(self.uri), trace_name=self.trace_name)
        for option in self.options:
            option.apply(request)
        return request

    def process(self, handler: Callable[[Future], T]) -> T:
        """
        构建请求并送入过滤器链，把响应 Future 交给 handler 处理

        过滤器或传输层同步抛出的异常会转换为失败的 Future
        """
        request = self.build_request()
        service = compose(self.filters, self.client.service)
        logger.debug(
            f"[{self.trace_name}] Dispatching {request.method} {request.uri} through {len(self.filters)} filters"
        )
        try:
            future = service(request)
        except Exception as e:
            future = failed_future(e)
        return handler(future)

    def content(self, data: bytes) -> RequestBuilder:
        return self.with_option(SetContent(bytes(data)))

    def prep_data(self, data: bytes) -> RequestBuilder:
        return self.with_method(HTTP_METHOD_POST).content(data)

    def prep_body(self, data: PostData) -> RequestBuilder:
        """按请求体类型选择 POST 的准备方式"""
        if isinstance(data, str):
            return self.prep_post(data.encode(UTF_8))
        if isinstance(data, (bytes, bytearray, memoryview)):
            return self.prep_post(bytes(data))
        if isinstance(data, (list, tuple)) and all(isinstance(p, MultiPart) for p in data):
            return self.prep_multipart(list(data))
        raise FHttpConstructionError(f"Unsupported POST data type: {type(data).__name__}")

    def prep_post(self, data: bytes) -> RequestBuilder:
        """
        准备 POST 请求体

        请求体为空而 URI 携带查询参数时，查询参数作为表单请求体发送，URI 只保留路径（片段一并丢弃）
        """
        if not data and self.has_params:
            path, _ = split_uri(self.uri)
            body = encode_params(self.param_list).encode(UTF_8)
            return replace(self, uri=path).with_content_type(PARAM_TYPE).prep_data(body)
        return self.prep_data(data)

    def prep_multipart(self, parts: list[MultiPart]) -> RequestBuilder:
        """
        准备 multipart 请求体

        URI 携带的查询参数会转换为文本分段，排在显式分段之前，URI 只保留路径（片段一并丢弃）
        """
        if self.has_params:
            path, _ = split_uri(self.uri)
            param_parts = [MultiPart(name, data=value) for name, value in self.param_list]
            return replace(self, uri=path).prep_multipart(param_parts + parts)

        return (
            self.prep_data(encode_multipart(parts))
            .with_content_type(multipart_content_type())
            .with_headers((HEADER_MIME_VERSION, "1.0"))
        )
