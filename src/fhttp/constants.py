"""
HTTP 客户端常量配置模块

定义请求构建器、OAuth 签名、multipart 编码以及传输层使用的常量和默认配置
"""

# HTTP 方法常量
HTTP_METHOD_GET = "GET"
HTTP_METHOD_POST = "POST"
HTTP_METHOD_PUT = "PUT"
HTTP_METHOD_DELETE = "DELETE"
HTTP_METHOD_PATCH = "PATCH"
HTTP_METHOD_HEAD = "HEAD"
HTTP_METHOD_OPTIONS = "OPTIONS"
HTTP_METHOD_TRACE = "TRACE"

HTTP_METHODS = {
    HTTP_METHOD_GET,
    HTTP_METHOD_POST,
    HTTP_METHOD_PUT,
    HTTP_METHOD_DELETE,
    HTTP_METHOD_PATCH,
    HTTP_METHOD_HEAD,
    HTTP_METHOD_OPTIONS,
    HTTP_METHOD_TRACE,
}

# 编码与内容类型
UTF_8 = "utf-8"
PARAM_TYPE = "application/x-www-form-urlencoded"
MULTIPART_TYPE = "multipart/form-data"
DEFAULT_FILE_MIME_TYPE = "application/octet-stream"

# multipart 分隔符，进程内所有请求共用，不随机生成
BOUNDARY = "gc0pMUlT1B0uNdArYc0p"

# 常用请求头名称
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_CONTENT_LENGTH = "Content-Length"
HEADER_CONNECTION = "Connection"
HEADER_HOST = "Host"
HEADER_MIME_VERSION = "MIME-Version"

# OAuth 1.0 协议参数
OAUTH_VERSION = "1.0"
OAUTH_SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_TOKEN_PARAM = "oauth_token"
OAUTH_TOKEN_SECRET_PARAM = "oauth_token_secret"

# 默认端口（签名时省略默认端口）
DEFAULT_PORTS = {"http": 80, "https": 443}

# 默认配置
DEFAULT_SCHEME = "http"
DEFAULT_TIMEOUT = 30  # 默认超时时间（秒）
DEFAULT_RETRIES = 3  # 默认重试次数
DEFAULT_MAX_WORKERS = 10  # 默认传输层最大工作线程数

# 重试策略配置
RETRY_STATUS_FORCELIST = [429, 500, 502, 503, 504]  # 需要重试的 HTTP 状态码
RETRY_BACKOFF_FACTOR = 0.5  # 重试退避因子
RETRY_ALLOWED_METHODS = [
    HTTP_METHOD_HEAD,
    HTTP_METHOD_GET,
    HTTP_METHOD_PUT,
    HTTP_METHOD_DELETE,
    HTTP_METHOD_OPTIONS,
    HTTP_METHOD_TRACE,
]

# 连接池配置
POOL_CONNECTIONS = 100  # 连接池大小
POOL_MAXSIZE = 100  # 连接池最大连接数

# 默认重试策略和连接池配置字典
DEFAULT_RETRY_CONFIG = {
    "total": DEFAULT_RETRIES,  # 重试总次数
    "backoff_factor": RETRY_BACKOFF_FACTOR,  # 重试退避因子
    "status_forcelist": RETRY_STATUS_FORCELIST,  # 需要重试的状态码列表
    "allowed_methods": RETRY_ALLOWED_METHODS,  # 允许重试的HTTP方法
    "raise_on_status": False,  # 不在重试时抛出状态异常
}

DEFAULT_POOL_CONFIG = {
    "pool_connections": POOL_CONNECTIONS,  # 连接池大小
    "pool_maxsize": POOL_MAXSIZE,  # 连接池最大连接数
}
