"""
响应提取器模块

提供把 requests.Response 转换为所需类型的纯函数，作为各获取方法的 res_map 参数使用。
所有提取器只读取响应内容，对非 2xx 响应同样可以调用。

使用示例:
    >>> client("/users").get_or_raise(as_json)
    >>> client("/oauth/request_token").with_oauth(consumer).post_or_raise(res_map=as_oauth1_token)
"""

from __future__ import annotations

import io
import json
import logging
from typing import Any
from xml.etree import ElementTree

import requests

from fhttp.constants import OAUTH_TOKEN_PARAM, OAUTH_TOKEN_SECRET_PARAM, UTF_8
from fhttp.oauth import Token
from fhttp.params import ParamList, decode_params

logger = logging.getLogger(__name__)


def as_contents_buffer(response: requests.Response) -> memoryview:
    """以只读缓冲区形式返回原始响应内容"""
    return memoryview(response.content or b"")


def as_string(response: requests.Response) -> str:
    """以 UTF-8 字符串形式返回响应内容（所有获取方法的默认提取器）

    无法按 UTF-8 解码的字节替换为 U+FFFD，错误页等非 UTF-8 响应体不会抛出 UnicodeDecodeError。
    """
    return (response.content or b"").decode(UTF_8, errors="replace")


def as_bytes(response: requests.Response) -> bytes:
    """以字节形式返回响应内容"""
    return response.content or b""


def as_input_stream(response: requests.Response) -> io.BytesIO:
    """以可读字节流形式返回响应内容"""
    return io.BytesIO(as_bytes(response))


def as_xml(response: requests.Response) -> ElementTree.Element:
    """
    把响应内容解析为 XML 根元素

    异常:
        xml.etree.ElementTree.ParseError: 响应内容不是合法 XML 时抛出
    """
    logger.debug("Parsing response as XML")
    return ElementTree.parse(as_input_stream(response)).getroot()


def as_json(response: requests.Response) -> Any:
    """把响应内容解析为 JSON"""
    logger.debug("Parsing response as JSON")
    return json.loads(as_string(response))


def as_params(response: requests.Response) -> ParamList:
    """把 key=value&... 形式的响应内容解码为参数对列表"""
    return decode_params(as_string(response).strip())


def as_param_map(response: requests.Response) -> dict[str, str]:
    """把 key=value&... 形式的响应内容解码为字典，重复键取最后一个值"""
    return dict(as_params(response))


def as_oauth1_token(response: requests.Response) -> Token:
    """
    从响应参数 oauth_token / oauth_token_secret 中解析 OAuth 凭证

    异常:
        KeyError: 响应中缺少任一参数时抛出
    """
    params = as_param_map(response)
    return Token(params[OAUTH_TOKEN_PARAM], params[OAUTH_TOKEN_SECRET_PARAM])


def as_http_response(response: requests.Response) -> requests.Response:
    """原样返回响应对象"""
    return response
