"""
测试 fhttp.utils 模块

测试敏感信息脱敏功能：
- sanitize_headers / sanitize_header_pairs: 请求头脱敏
- sanitize_url: URL 参数脱敏
- sanitize_dict: 字典字段脱敏
"""

import pytest
from fhttp.utils import sanitize_dict, sanitize_header_pairs, sanitize_headers, sanitize_url


class TestSanitizeHeaders:
    """测试 sanitize_headers 函数"""

    @pytest.mark.unit
    def test_sanitize_default_sensitive_headers(self):
        """脱敏默认敏感头"""
        headers = {"Authorization": "Bearer token123", "Cookie": "session=abc"}
        result = sanitize_headers(headers)

        assert result["Authorization"] == "***"
        assert result["Cookie"] == "***"

    @pytest.mark.unit
    def test_preserve_non_sensitive_headers(self):
        """保留非敏感头"""
        headers = {"Content-Type": "application/json", "User-Agent": "Mozilla"}
        result = sanitize_headers(headers)

        assert result["Content-Type"] == "application/json"
        assert result["User-Agent"] == "Mozilla"

    @pytest.mark.unit
    def test_custom_sensitive_keys(self):
        """自定义敏感键集合"""
        headers = {"X-Custom-Token": "secret123", "Content-Type": "application/json"}
        result = sanitize_headers(headers, sensitive_keys={"X-Custom-Token"})

        assert result["X-Custom-Token"] == "***"
        assert result["Content-Type"] == "application/json"

    @pytest.mark.unit
    def test_case_insensitive_matching(self):
        """大小写不敏感"""
        headers = {"authorization": "Bearer token", "COOKIE": "session=abc"}
        result = sanitize_headers(headers)

        assert result["authorization"] == "***"
        assert result["COOKIE"] == "***"

    @pytest.mark.unit
    def test_empty_headers(self):
        """空字典输入"""
        headers = {}
        result = sanitize_headers(headers)

        assert result == {}

    @pytest.mark.unit
    def test_custom_mask_character(self):
        """自定义 mask 字符"""
        headers = {"Authorization": "Bearer token123"}
        result = sanitize_headers(headers, mask="[REDACTED]")

        assert result["Authorization"] == "[REDACTED]"

    @pytest.mark.unit
    def test_mixed_sensitive_and_non_sensitive(self):
        """边界测试：混合敏感和非敏感头"""
        headers = {
            "Authorization": "Bearer token",
            "Content-Type": "application/json",
            "X-API-Key": "key123",
            "Accept": "application/json",
        }
        result = sanitize_headers(headers)

        assert result["Authorization"] == "***"
        assert result["X-API-Key"] == "***"
        assert result["Content-Type"] == "application/json"
        assert result["Accept"] == "application/json"


class TestSanitizeHeaderPairs:
    """测试 sanitize_header_pairs 函数"""

    @pytest.mark.unit
    def test_preserves_order_and_duplicates(self):
        """保留顺序和重复的请求头"""
        headers = [("Accept", "a"), ("Authorization", "OAuth x"), ("Accept", "b")]

        assert sanitize_header_pairs(headers) == [("Accept", "a"), ("Authorization", "***"), ("Accept", "b")]

    @pytest.mark.unit
    def test_accepts_generator(self):
        result = sanitize_header_pairs((k, v) for k, v in {"proxy-authorization": "Basic x"}.items())

        assert result == [("proxy-authorization", "***")]


class TestSanitizeUrl:
    """测试 sanitize_url 函数"""

    @pytest.mark.unit
    def test_sanitize_default_sensitive_params(self):
        """脱敏默认敏感参数（*** 经 URL 编码后为 %2A%2A%2A）"""
        result = sanitize_url("https://api.example.com/users?token=abc123&key=secret")

        assert result == "https://api.example.com/users?token=%2A%2A%2A&key=%2A%2A%2A"

    @pytest.mark.unit
    def test_oauth_params_masked(self):
        """OAuth 凭证参数默认脱敏"""
        result = sanitize_url("/photos?oauth_token=abc&oauth_verifier=v&size=original")

        assert result == "/photos?oauth_token=%2A%2A%2A&oauth_verifier=%2A%2A%2A&size=original"

    @pytest.mark.unit
    def test_preserve_non_sensitive_params(self):
        url = "https://api.example.com/users?page=1&limit=20"

        assert sanitize_url(url) == url

    @pytest.mark.unit
    def test_url_without_query_params(self):
        url = "https://api.example.com/users"

        assert sanitize_url(url) == url

    @pytest.mark.unit
    def test_multiple_value_params(self):
        """多值参数逐个脱敏"""
        result = sanitize_url("https://api.example.com/api?token=a&token=b&page=1")

        assert result == "https://api.example.com/api?token=%2A%2A%2A&token=%2A%2A%2A&page=1"

    @pytest.mark.unit
    def test_case_insensitive_params(self):
        result = sanitize_url("https://api.example.com/api?TOKEN=abc&Password=123")

        assert result == "https://api.example.com/api?TOKEN=%2A%2A%2A&Password=%2A%2A%2A"

    @pytest.mark.unit
    def test_fragment_and_port_kept(self):
        result = sanitize_url("https://api.example.com:8080/users?token=abc#section")

        assert result == "https://api.example.com:8080/users?token=%2A%2A%2A#section"

    @pytest.mark.unit
    def test_custom_params_and_mask(self):
        result = sanitize_url("/p?session=1&page=2", sensitive_params={"session"}, mask="x")

        assert result == "/p?session=x&page=2"


class TestSanitizeDict:
    """测试 sanitize_dict 函数"""

    @pytest.mark.unit
    def test_first_level_dict_sanitization(self):
        """一级字典脱敏"""
        data = {"password": "123456", "username": "john"}
        result = sanitize_dict(data)

        assert result["password"] == "***"
        assert result["username"] == "john"

    @pytest.mark.unit
    def test_recursive_nested_dict_sanitization(self):
        """递归脱敏嵌套字典"""
        data = {"username": "john", "credentials": {"password": "secret", "api_key": "key123"}}
        result = sanitize_dict(data, recursive=True)

        assert result["username"] == "john"
        assert result["credentials"]["password"] == "***"
        assert result["credentials"]["api_key"] == "***"

    @pytest.mark.unit
    def test_non_recursive_mode(self):
        """关闭递归模式"""
        data = {"password": "secret", "nested": {"api_key": "key123"}}
        result = sanitize_dict(data, recursive=False)

        assert result["password"] == "***"
        # 嵌套字典不应该被处理
        assert result["nested"]["api_key"] == "key123"

    @pytest.mark.unit
    def test_mixed_data_types(self):
        """混合数据类型"""
        data = {
            "username": "john",
            "password": "secret",
            "age": 25,
            "tags": ["admin", "user"],
            "meta": {"api_key": "key123"},
        }
        result = sanitize_dict(data, recursive=True)

        assert result["username"] == "john"
        assert result["password"] == "***"
        assert result["age"] == 25
        assert result["tags"] == ["admin", "user"]
        assert result["meta"]["api_key"] == "***"

    @pytest.mark.unit
    def test_empty_dict(self):
        """边界测试：空字典"""
        data = {}
        result = sanitize_dict(data)

        assert result == {}

    @pytest.mark.unit
    def test_custom_sensitive_keys_in_dict(self):
        """测试自定义敏感键"""
        data = {"custom_field": "value", "normal_field": "data"}
        result = sanitize_dict(data, sensitive_keys={"custom_field"})

        assert result["custom_field"] == "***"
        assert result["normal_field"] == "data"


class TestBoundaryConditions:
    """边界条件测试"""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "headers",
        [
            {},  # 空字典
            {"Key": ""},  # 空值
            {"Key": "x" * 10000},  # 超长值
        ],
    )
    def test_sanitize_headers_boundary(self, headers):
        """测试 sanitize_headers 边界条件"""
        result = sanitize_headers(headers)
        assert isinstance(result, dict)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "url",
        [
            "https://api.com",
            "https://api.com?",
            "https://api.com?key=",
        ],
    )
    def test_sanitize_url_boundary(self, url):
        """测试 sanitize_url 边界条件"""
        result = sanitize_url(url)
        assert isinstance(result, str)

    @pytest.mark.unit
    def test_sanitize_dict_with_none_values(self):
        """测试字典包含 None 值"""
        data = {"password": None, "username": "john"}
        result = sanitize_dict(data)

        assert result["password"] == "***"
        assert result["username"] == "john"
