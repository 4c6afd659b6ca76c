"""
multipart/form-data 编解码模块

使用 urllib3 的 RequestField / encode_multipart_formdata 按固定分隔符编码请求体，
使用标准库 email 解析器解码请求体。

编码格式:
    --BOUNDARY
    Content-Disposition: form-data; name="a"

    1
    --BOUNDARY
    Content-Disposition: form-data; name="b"; filename="f.txt"
    Content-Type: text/plain

    hi
    --BOUNDARY--
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from email import policy
from email.parser import BytesParser

from urllib3.fields import RequestField
from urllib3.filepost import encode_multipart_formdata

from fhttp.constants import BOUNDARY, DEFAULT_FILE_MIME_TYPE, MULTIPART_TYPE, UTF_8
from fhttp.exceptions import FHttpConstructionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MultiPart:
    """
    multipart 请求体中的一个分段

    参数:
        name: 字段名
        filename: 文件名，None 表示普通表单字段
        mime_type: 文件分段的内容类型，文件分段未指定时为 application/octet-stream
        data: 分段内容，str 会按 UTF-8 编码为 bytes
    """

    name: str
    filename: str | None = None
    mime_type: str | None = None
    data: bytes = b""

    def __post_init__(self):
        if isinstance(self.data, str):
            object.__setattr__(self, "data", self.data.encode(UTF_8))
        elif isinstance(self.data, (bytearray, memoryview)):
            object.__setattr__(self, "data", bytes(self.data))
        elif not isinstance(self.data, bytes):
            raise FHttpConstructionError(f"MultiPart data must be str or bytes, got {type(self.data).__name__}")
        if self.filename is not None and self.mime_type is None:
            object.__setattr__(self, "mime_type", DEFAULT_FILE_MIME_TYPE)

    @property
    def is_file(self) -> bool:
        return self.filename is not None

    def to_field(self) -> RequestField:
        """转换为 urllib3 的 RequestField"""
        field = RequestField(name=self.name, data=self.data, filename=self.filename)
        field.make_multipart(content_type=self.mime_type if self.is_file else None)
        return field


def multipart_content_type(boundary: str = BOUNDARY) -> str:
    return f"{MULTIPART_TYPE}; boundary={boundary}"


def encode_multipart(parts: Iterable[MultiPart], boundary: str = BOUNDARY) -> bytes:
    """
    编码 multipart/form-data 请求体

    参数:
        parts: 按顺序排列的分段
        boundary: 分隔符，默认为进程内固定的 BOUNDARY

    返回:
        编码后的请求体字节
    """
    fields = [part.to_field() for part in parts]
    body, _ = encode_multipart_formdata(fields, boundary=boundary)
    logger.debug(f"Encoded {len(fields)} multipart sections ({len(body)} bytes)")
    return body


def decode_multipart(body: bytes, content_type: str = multipart_content_type()) -> list[MultiPart]:
    """
    解码 multipart/form-data 请求体

    参数:
        body: 请求体字节
        content_type: 带 boundary 参数的 Content-Type 值

    返回:
        MultiPart 列表，顺序与请求体中一致

    异常:
        FHttpConstructionError: 请求体不是合法的 multipart 内容时抛出
    """
    header = f"Content-Type: {content_type}\r\n\r\n".encode(UTF_8)
    message = BytesParser(policy=policy.HTTP).parsebytes(header + body)
    if not message.is_multipart():
        raise FHttpConstructionError(f"Not a multipart body for content type {content_type!r}")

    parts = []
    for section in message.iter_parts():
        filename = section.get_filename()
        parts.append(
            MultiPart(
                name=section.get_param("name", header="content-disposition"),
                filename=filename,
                mime_type=section.get_content_type() if filename is not None else None,
                data=section.get_payload(decode=True) or b"",
            )
        )
    return parts
