"""目录服务的异常类型：每种异常自带 HTTP 状态码和响应体 code，由路由层统一转成 JSON。"""


class CatalogError(Exception):
    http_status = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None, *, error_code: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.error_code = error_code

    @property
    def code(self) -> int:
        return self.http_status


class ValidationError(CatalogError):
    """缺少或格式错误的必填参数。"""

    http_status = 400
    default_message = "Invalid parameters"


class ConflictError(CatalogError):
    """重复提交（例如规范化后相同的友链网址）。"""

    http_status = 400
    default_message = "Duplicate submission"


class NotFound(CatalogError):
    http_status = 404
    default_message = "Resource not found"


class Unauthorized(CatalogError):
    http_status = 401
    default_message = "Unauthorized"


class RepositoryError(CatalogError):
    """存储不可用或查询失败。"""

    http_status = 500
    default_message = "Repository error"
