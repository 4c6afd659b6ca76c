"""
并发与 host 轮询测试
"""

from concurrent.futures import wait

import pytest
import responses

from fhttp.message import HttpRequest
from fhttp.transport import RequestsTransport


class TestHostRotation:
    """测试多个 host 之间轮询"""

    @pytest.mark.unit
    def test_round_robin(self):
        transport = RequestsTransport(["a.example.com:80", "b.example.com:81"])

        urls = [transport.build_url(HttpRequest(uri="/p")) for _ in range(3)]

        assert urls == [
            "http://a.example.com:80/p",
            "http://b.example.com:81/p",
            "http://a.example.com:80/p",
        ]
        transport.close()

    @pytest.mark.unit
    def test_scheme(self):
        transport = RequestsTransport(["secure.example.com:443"], scheme="https")

        assert transport.build_url(HttpRequest(uri="/x?y=1")) == "https://secure.example.com:443/x?y=1"
        transport.close()


class TestConcurrentRequests:
    """测试线程池并发发送"""

    @pytest.mark.unit
    @responses.activate
    def test_parallel_futures(self):
        """多个请求并发发送，全部完成"""
        # Arrange
        for i in range(10):
            responses.add(responses.GET, f"http://api.example.com:80/items/{i}", body=str(i))
        transport = RequestsTransport(["api.example.com:80"], max_workers=4)

        # Act
        futures = [transport(HttpRequest(uri=f"/items/{i}")) for i in range(10)]
        done, not_done = wait(futures, timeout=10)

        # Assert
        assert not not_done
        assert [f.result().text for f in futures] == [str(i) for i in range(10)]
        transport.close()

    @pytest.mark.unit
    @responses.activate
    def test_rotation_under_concurrency(self):
        """并发请求均匀分布到各个 host"""
        responses.add(responses.GET, "http://a.example.com:80/p", body="a")
        responses.add(responses.GET, "http://b.example.com:80/p", body="b")
        transport = RequestsTransport(["a.example.com:80", "b.example.com:80"], max_workers=8)

        futures = [transport(HttpRequest(uri="/p")) for _ in range(20)]
        bodies = sorted(f.result(timeout=10).text for f in futures)

        assert bodies == ["a"] * 10 + ["b"] * 10
        transport.close()
