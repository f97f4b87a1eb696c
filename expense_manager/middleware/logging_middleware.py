"""
Logging Middleware
Logs every HTTP request with the acting identity, status and duration
"""

import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from expense_manager.config.headers import DEV_ROLE_HEADER, DEV_USER_ID_HEADER
from expense_manager.utils.logger import setup_logger

logger = setup_logger()


def _identity(request: Request) -> str:
    if request.headers.get("Authorization"):
        return "bearer"
    dev_user_id = request.headers.get(DEV_USER_ID_HEADER)
    if dev_user_id:
        return f"dev-user:{dev_user_id}"
    dev_role = request.headers.get(DEV_ROLE_HEADER)
    if dev_role:
        return f"dev-role:{dev_role.upper()}"
    return "anonymous"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests and responses"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        identity = _identity(request)

        try:
            response = await call_next(request)
        except Exception:
            duration = time.time() - start_time
            logger.exception(
                f"Error: {request.method} {request.url.path} | "
                f"Identity: {identity} | Duration: {duration:.3f}s"
            )
            raise

        duration = time.time() - start_time
        response.headers["X-Process-Time"] = f"{duration:.3f}"

        log = logger.warning if response.status_code >= 400 else logger.info
        log(
            f"{request.method} {request.url.path} | "
            f"Identity: {identity} | "
            f"Status: {response.status_code} | "
            f"Duration: {duration:.3f}s"
        )
        return response
