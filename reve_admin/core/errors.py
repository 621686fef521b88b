# core/errors.py

from __future__ import annotations


class AdminError(Exception):
    """后台操作的基础异常"""


class ValidationError(AdminError):
    """
    表单校验失败（提交前就拦下，不会发请求）。
    field: 出问题的字段名，比如 "price" / "images"
    """

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class PayloadTooLargeError(ValidationError):
    def __init__(self, size: int, limit: int):
        super().__init__(
            "payload",
            f"Product data is too large ({size / 1_000_000:.1f} MB, limit {limit / 1_000_000:.1f} MB). "
            "Upload large SVG icons as files instead of pasting inline SVG markup.",
        )
        self.size = size
        self.limit = limit


class ApiError(AdminError):
    """后端返回非 2xx，或者网络请求本身失败"""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
