"""
通用测试 Fixture 定义

提供测试所需的 Response 构造函数、记录请求的假传输服务和客户端 Fixture
"""

from concurrent.futures import Future

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from fhttp.futures import completed_future, failed_future


def build_response(content=b"", status_code=200, reason="OK", headers=None, url="http://api.example.com/"):
    """构造一个 requests.Response 对象"""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response._content = content.encode("utf-8") if isinstance(content, str) else content
    response.headers = CaseInsensitiveDict(headers or {})
    response.encoding = "utf-8"
    response.url = url
    return response


class RecordingService:
    """
    假传输服务

    记录收到的每个请求，按配置返回成功或失败的 Future
    """

    def __init__(self, response=None, error=None):
        self.response = response if response is not None else build_response("ok")
        self.error = error
        self.requests = []
        self.pending = None

    @property
    def last_request(self):
        return self.requests[-1]

    def __call__(self, request):
        self.requests.append(request)
        if self.pending is not None:
            return self.pending
        if self.error is not None:
            return failed_future(self.error)
        return completed_future(self.response)

    def hang(self):
        """之后的请求返回永不完成的 Future"""
        self.pending = Future()
        return self.pending


@pytest.fixture
def make_response():
    """Response 构造函数"""
    return build_response


@pytest.fixture
def service():
    """默认返回 200 "ok" 的假传输服务"""
    return RecordingService()


@pytest.fixture
def client(service):
    """使用假传输服务的客户端"""
    from fhttp import FHttpClient

    return FHttpClient("api.example.com:8080", name="test-client", service=service)


@pytest.fixture
def service_factory():
    """假传输服务构造函数，用于需要自定义响应或异常的测试"""
    return RecordingService
