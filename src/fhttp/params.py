"""参数编解码模块

负责 URL 查询字符串与 application/x-www-form-urlencoded 请求体的编码和解码，
以及 OAuth 签名所需的 RFC 3986 百分号编码
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, TypeAlias
from urllib.parse import SplitResult, parse_qsl, quote, urlencode, urlsplit

from fhttp.constants import UTF_8
from fhttp.exceptions import FHttpConstructionError

# 参数对列表，保留重复键和插入顺序
ParamList: TypeAlias = list[tuple[str, str]]


def encode_params(params: Iterable[tuple[str, Any]]) -> str:
    """
    将参数对编码为查询字符串（或表单请求体）

    参数:
        params: 参数对序列，重复的键会保留为多个值

    返回:
        形如 "a=1&b=2" 的编码字符串

    示例:
        >>> encode_params([("q", "a b"), ("q", "c")])
        'q=a+b&q=c'
    """
    return urlencode([(str(k), str(v)) for k, v in params], encoding=UTF_8)


def decode_params(query: str) -> ParamList:
    """
    解码查询字符串为参数对列表

    空值参数会被保留（"a=&b=1" -> [("a", ""), ("b", "1")]）
    """
    if not query:
        return []
    return parse_qsl(query, keep_blank_values=True, encoding=UTF_8)


def split_uri(uri: str) -> tuple[str, str]:
    """
    拆分 URI 为 (路径部分, 查询字符串)

    路径部分为 "?" 之前的全部内容，若 URI 中包含片段标识则一并丢弃
    """
    uri = uri.split("#", 1)[0]
    path, _, query = uri.partition("?")
    return path, query


def has_query(uri: str) -> bool:
    """判断 URI 是否携带查询字符串"""
    return "?" in uri


def uri_params(uri: str) -> ParamList:
    """解析 URI 中已有的查询参数"""
    return decode_params(split_uri(uri)[1])


def with_query(path: str, params: Iterable[tuple[str, Any]]) -> str:
    """把参数编码后拼接到路径上，参数为空时只返回路径"""
    query = encode_params(params)
    return f"{path}?{query}" if query else path


def request_target(uri: str) -> str:
    """
    提取请求行使用的 path+query

    scheme 和 host 由传输层绑定，不在请求行中重复发送

    异常:
        FHttpConstructionError: URI 无法解析时抛出
    """
    parts = parse_uri(uri)
    path = parts.path or "/"
    return f"{path}?{parts.query}" if parts.query else path


def parse_uri(uri: str) -> SplitResult:
    """
    解析 URI，无法解析时转换为构建异常

    返回:
        urllib.parse.SplitResult
    """
    try:
        parts = urlsplit(uri)
        # 访问 port 会触发端口合法性校验
        parts.port
    except ValueError as e:
        raise FHttpConstructionError(f"Invalid URI {uri!r}: {e}") from e
    return parts


def normalize_pairs(args: tuple[Any, ...]) -> ParamList:
    """
    规范化可变参数为参数对列表

    支持三种调用形式:
        - 多个二元组: f(("a", "1"), ("b", "2"))
        - 单个列表: f([("a", "1"), ("b", "2")])
        - 单个字典: f({"a": "1", "b": "2"})
    """
    if len(args) == 1 and isinstance(args[0], Mapping):
        return [(str(k), str(v)) for k, v in args[0].items()]
    if len(args) == 1 and isinstance(args[0], list):
        args = tuple(args[0])

    pairs = []
    for item in args:
        if not isinstance(item, tuple) or len(item) != 2:
            raise FHttpConstructionError(f"Expected a (key, value) pair, got {item!r}")
        pairs.append((str(item[0]), str(item[1])))
    return pairs


def percent_encode(value: str) -> str:
    """
    按 RFC 3986 进行百分号编码

    仅字母、数字以及 "-", "_", ".", "~" 保持原样，其余字符均被编码（包括空格和 "/"）
    """
    return quote(value.encode(UTF_8), safe="~")
