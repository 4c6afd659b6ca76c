"""
fhttp 流式 HTTP 请求构建模块

提供不可变的链式请求构建器、可插拔的过滤器链和 OAuth1 请求签名

主要组件:
    - FHttpClient: 客户端绑定，创建请求构建器
    - RequestBuilder: 不可变请求构建器，支持 Future / Option / 抛异常三种获取方式
    - 过滤器: Filter, DebugFilter, TimeoutFilter, OAuth1Filter
    - 提取器: as_string, as_bytes, as_json, as_xml, as_param_map, as_oauth1_token 等
    - 异常类: FHttpError 及其子类, HttpStatusException

使用示例:
    >>> from fhttp import FHttpClient, Token, as_oauth1_token
    >>>
    >>> client = FHttpClient("api.example.com:80", name="example")
    >>> body = client("/users").with_params(("page", "1")).with_timeout(5).get_or_raise()
    >>> token = client("/oauth/request_token").with_oauth(Token("key", "secret")).post_or_raise(
    ...     res_map=as_oauth1_token
    ... )
"""

# 核心客户端与构建器
from fhttp.client import FHttpClient
from fhttp.request import ClientException, ClientResponse, RequestBuilder

# 异常类
from fhttp.exceptions import (
    FHttpConstructionError,
    FHttpError,
    FHttpNetworkError,
    FHttpTimeoutError,
    HttpStatusException,
)

# 请求消息与过滤器
from fhttp.message import AddHeader, HttpOption, HttpRequest, SetContent, SetKeepAlive
from fhttp.filters import DebugFilter, Filter, FunctionFilter, TimeoutFilter, compose

# OAuth 与 multipart
from fhttp.oauth import OAuth1Filter, OAuth1Signer, Token
from fhttp.multipart import MultiPart, decode_multipart, encode_multipart

# 响应提取器
from fhttp.extractors import (
    as_bytes,
    as_contents_buffer,
    as_http_response,
    as_input_stream,
    as_json,
    as_oauth1_token,
    as_param_map,
    as_params,
    as_string,
    as_xml,
)

# 参数编解码
from fhttp.params import decode_params, encode_params

# 传输层
from fhttp.transport import RequestsTransport

# 常量配置
from fhttp.constants import (
    BOUNDARY,
    DEFAULT_MAX_WORKERS,
    DEFAULT_TIMEOUT,
    HTTP_METHOD_DELETE,
    HTTP_METHOD_GET,
    HTTP_METHOD_HEAD,
    HTTP_METHOD_OPTIONS,
    HTTP_METHOD_PATCH,
    HTTP_METHOD_POST,
    HTTP_METHOD_PUT,
    HTTP_METHOD_TRACE,
    PARAM_TYPE,
)

__all__ = [
    # 核心类
    "FHttpClient",
    "RequestBuilder",
    "ClientResponse",
    "ClientException",
    # 异常
    "FHttpError",
    "FHttpConstructionError",
    "FHttpNetworkError",
    "FHttpTimeoutError",
    "HttpStatusException",
    # 请求消息
    "HttpRequest",
    "HttpOption",
    "AddHeader",
    "SetContent",
    "SetKeepAlive",
    # 过滤器
    "Filter",
    "FunctionFilter",
    "DebugFilter",
    "TimeoutFilter",
    "compose",
    # OAuth
    "Token",
    "OAuth1Signer",
    "OAuth1Filter",
    # multipart
    "MultiPart",
    "encode_multipart",
    "decode_multipart",
    # 提取器
    "as_contents_buffer",
    "as_string",
    "as_bytes",
    "as_input_stream",
    "as_xml",
    "as_json",
    "as_params",
    "as_param_map",
    "as_oauth1_token",
    "as_http_response",
    # 参数编解码
    "encode_params",
    "decode_params",
    # 传输层
    "RequestsTransport",
    # 常量
    "BOUNDARY",
    "PARAM_TYPE",
    "DEFAULT_TIMEOUT",
    "DEFAULT_MAX_WORKERS",
    "HTTP_METHOD_GET",
    "HTTP_METHOD_POST",
    "HTTP_METHOD_PUT",
    "HTTP_METHOD_DELETE",
    "HTTP_METHOD_PATCH",
    "HTTP_METHOD_HEAD",
    "HTTP_METHOD_OPTIONS",
    "HTTP_METHOD_TRACE",
]

__version__ = "0.1.0"
__author__ = "HACK-WU"
