"""HTTP 错误响应 -- 统一 {"error": {"code", "message"}} 结构"""

from fastapi import Request
from starlette.responses import JSONResponse


class ApiError(Exception):
    """可直接映射为 HTTP 错误响应的异常"""

    def __init__(self, status_code: int, code: str, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    """构造错误响应"""
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """ApiError -> JSON 错误响应"""
    return error_response(exc.status_code, exc.code, exc.message)
