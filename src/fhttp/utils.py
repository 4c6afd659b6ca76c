"""工具函数模块

提供日志输出时的敏感信息脱敏功能（请求头、URL 参数、字典字段）
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


# 默认敏感请求头名称集合
DEFAULT_SENSITIVE_HEADERS = {
    "Authorization",
    "Proxy-Authorization",
    "Cookie",
    "Set-Cookie",
    "X-API-Key",
    "X-Auth-Token",
    "X-Access-Token",
}

# 默认敏感URL参数名称集合
DEFAULT_SENSITIVE_PARAMS = {
    "token",
    "password",
    "secret",
    "key",
    "api_key",
    "access_token",
    "oauth_token",
    "oauth_token_secret",
    "oauth_verifier",
    "oauth_signature",
}


def sanitize_headers(
    headers: dict[str, str],
    sensitive_keys: set[str] | None = None,
    mask: str = "***",
) -> dict[str, str]:
    """
    脱敏请求头中的敏感信息

    参数:
        headers: 原始请求头字典
        sensitive_keys: 敏感键名集合，不区分大小写。None 时使用默认集合
        mask: 脱敏后的替换字符串

    返回:
        脱敏后的请求头字典（新字典，不修改原字典）

    示例:
        >>> sanitize_headers({"Authorization": "OAuth oauth_nonce=...", "Accept": "*/*"})
        {"Authorization": "***", "Accept": "*/*"}
    """
    return dict(sanitize_header_pairs(headers.items(), sensitive_keys, mask))


def sanitize_header_pairs(
    headers: Iterable[tuple[str, str]],
    sensitive_keys: set[str] | None = None,
    mask: str = "***",
) -> list[tuple[str, str]]:
    """
    脱敏 (name, value) 形式的请求头列表，保留顺序和重复项
    """
    if sensitive_keys is None:
        sensitive_keys = DEFAULT_SENSITIVE_HEADERS

    # 创建不区分大小写的查找集合
    sensitive_keys_lower = {k.lower() for k in sensitive_keys}

    return [(k, mask if k.lower() in sensitive_keys_lower else v) for k, v in headers]


def sanitize_url(
    url: str,
    sensitive_params: set[str] | None = None,
    mask: str = "***",
) -> str:
    """
    脱敏 URL 中的敏感参数

    参数:
        url: 原始 URL（完整 URL 或 path+query 均可）
        sensitive_params: 敏感参数名集合，不区分大小写。None 时使用默认集合
        mask: 脱敏后的替换字符串

    返回:
        脱敏后的 URL，参数顺序保持不变

    示例:
        >>> sanitize_url("/photos?oauth_token=abc&size=original")
        "/photos?oauth_token=%2A%2A%2A&size=original"
    """
    if sensitive_params is None:
        sensitive_params = DEFAULT_SENSITIVE_PARAMS

    sensitive_params_lower = {p.lower() for p in sensitive_params}

    parsed = urlsplit(url)

    # 如果没有查询参数，直接返回
    if not parsed.query:
        return url

    params = parse_qsl(parsed.query, keep_blank_values=True)
    sanitized = [(k, mask if k.lower() in sensitive_params_lower else v) for k, v in params]

    return urlunsplit(parsed._replace(query=urlencode(sanitized)))


def sanitize_dict(
    data: dict[str, Any],
    sensitive_keys: set[str] | None = None,
    mask: str = "***",
    recursive: bool = True,
) -> dict[str, Any]:
    """
    脱敏字典中的敏感字段

    参数:
        data: 原始数据字典
        sensitive_keys: 敏感键名集合，不区分大小写。None 时使用默认集合
        mask: 脱敏后的替换字符串
        recursive: 是否递归处理嵌套字典

    返回:
        脱敏后的字典（新字典，不修改原字典）
    """
    if sensitive_keys is None:
        sensitive_keys = DEFAULT_SENSITIVE_HEADERS | DEFAULT_SENSITIVE_PARAMS

    sensitive_keys_lower = {k.lower() for k in sensitive_keys}

    result = {}
    for key, value in data.items():
        if key.lower() in sensitive_keys_lower:
            result[key] = mask
        elif recursive and isinstance(value, dict):
            result[key] = sanitize_dict(value, sensitive_keys, mask, recursive)
        else:
            result[key] = value

    return result
