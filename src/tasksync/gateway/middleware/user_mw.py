"""UserContextMiddleware -- 将外部鉴权层传入的用户与设备绑定到日志上下文

身份由上游鉴权层以 X-User-Id / X-Device-Id 请求头传入，
此处只做日志绑定；缺失身份的拒绝由路由依赖处理。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response


class UserContextMiddleware(BaseHTTPMiddleware):
    """用户上下文中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        user_id = request.headers.get("X-User-Id")
        if user_id:
            structlog.contextvars.bind_contextvars(user_id=user_id)
        device_id = request.headers.get("X-Device-Id")
        if device_id:
            structlog.contextvars.bind_contextvars(device_id=device_id)

        return await call_next(request)
