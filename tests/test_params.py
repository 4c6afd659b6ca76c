"""
测试 fhttp.params 模块

测试查询字符串编解码、URI 拆分和 RFC 3986 百分号编码
"""

import pytest

from fhttp.exceptions import FHttpConstructionError
from fhttp.params import (
    decode_params,
    encode_params,
    has_query,
    normalize_pairs,
    percent_encode,
    request_target,
    split_uri,
    uri_params,
    with_query,
)


class TestEncodeDecode:
    """测试参数编解码"""

    @pytest.mark.unit
    def test_encode_simple_pairs(self):
        """编码普通参数"""
        assert encode_params([("a", "1"), ("b", "2")]) == "a=1&b=2"

    @pytest.mark.unit
    def test_encode_escapes_special_characters(self):
        """空格和保留字符被编码"""
        assert encode_params([("q", "a b&c")]) == "q=a+b%26c"

    @pytest.mark.unit
    def test_decode_preserves_repeated_keys(self):
        """重复键保留为多个值，顺序不变"""
        assert decode_params("a=1&b=2&a=3") == [("a", "1"), ("b", "2"), ("a", "3")]

    @pytest.mark.unit
    def test_decode_keeps_blank_values(self):
        """空值参数被保留"""
        assert decode_params("a=&b=1") == [("a", ""), ("b", "1")]

    @pytest.mark.unit
    def test_decode_empty_string(self):
        assert decode_params("") == []

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "params",
        [
            [("a", "1")],
            [("a", "1"), ("a", "2"), ("b", "x y")],
            [("name", "张三"), ("emoji", "✓"), ("sym", "=&?/")],
            [],
        ],
    )
    def test_decode_inverts_encode(self, params):
        """decode(encode(p)) == p"""
        assert decode_params(encode_params(params)) == params


class TestUriHelpers:
    """测试 URI 相关工具函数"""

    @pytest.mark.unit
    def test_split_uri(self):
        assert split_uri("/path?a=1") == ("/path", "a=1")
        assert split_uri("/path") == ("/path", "")
        assert split_uri("/path?a=1#frag") == ("/path", "a=1")

    @pytest.mark.unit
    def test_has_query(self):
        assert has_query("/p?a=1") is True
        assert has_query("/p?") is True
        assert has_query("/p") is False

    @pytest.mark.unit
    def test_uri_params(self):
        assert uri_params("/p?x=1&y=2") == [("x", "1"), ("y", "2")]

    @pytest.mark.unit
    def test_with_query_without_params_returns_path(self):
        assert with_query("/p", []) == "/p"
        assert with_query("/p", [("a", "1")]) == "/p?a=1"

    @pytest.mark.unit
    def test_request_target_strips_scheme_and_host(self):
        """请求行只包含 path+query"""
        assert request_target("http://api.example.com:8080/v1/items?a=1") == "/v1/items?a=1"
        assert request_target("/v1/items") == "/v1/items"
        assert request_target("") == "/"

    @pytest.mark.unit
    def test_request_target_invalid_uri(self):
        """无法解析的 URI 抛出构建异常"""
        with pytest.raises(FHttpConstructionError):
            request_target("http://[::1/path")


class TestNormalizePairs:
    """测试参数规范化"""

    @pytest.mark.unit
    def test_tuples(self):
        assert normalize_pairs((("a", 1), ("b", "2"))) == [("a", "1"), ("b", "2")]

    @pytest.mark.unit
    def test_single_list(self):
        assert normalize_pairs(([("a", "1")],)) == [("a", "1")]

    @pytest.mark.unit
    def test_single_dict(self):
        assert normalize_pairs(({"a": "1", "b": 2},)) == [("a", "1"), ("b", "2")]

    @pytest.mark.unit
    def test_invalid_item(self):
        with pytest.raises(FHttpConstructionError):
            normalize_pairs(("a",))


class TestPercentEncode:
    """测试 RFC 3986 百分号编码"""

    @pytest.mark.unit
    def test_unreserved_characters_unchanged(self):
        assert percent_encode("AZaz09-_.~") == "AZaz09-_.~"

    @pytest.mark.unit
    def test_reserved_characters_encoded(self):
        assert percent_encode("a b/c=d&e+f*") == "a%20b%2Fc%3Dd%26e%2Bf%2A"

    @pytest.mark.unit
    def test_utf8_encoded(self):
        assert percent_encode("é") == "%C3%A9"
