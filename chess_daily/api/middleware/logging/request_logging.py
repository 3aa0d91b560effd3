import time
import traceback
from typing import Any, Dict
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from chess_daily.core.logger.logger import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Polled by load balancers; kept out of the INFO stream
_QUIET_PATHS = {"/api/v1/health"}


def get_request_id(request: Request) -> str:
    """Correlation id assigned by the middleware, or the client's header"""
    return getattr(request.state, "request_id", None) or request.headers.get(REQUEST_ID_HEADER, "unknown")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()

        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id

        log_context: Dict[str, Any] = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else None
        }
        wallet_address = request.query_params.get("walletAddress")
        if wallet_address:
            log_context["wallet_address"] = wallet_address

        try:
            response = await call_next(request)
        except Exception as e:
            log_context.update({
                "error": str(e),
                "error_type": e.__class__.__name__,
                "stack_trace": traceback.format_exc(),
                "duration_ms": round((time.perf_counter() - started) * 1000, 2)
            })
            logger.error("Request failed", extra=log_context)
            raise

        log_context.update({
            "status_code": response.status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2)
        })
        response.headers[REQUEST_ID_HEADER] = request_id

        if request.url.path in _QUIET_PATHS and response.status_code < 400:
            logger.debug("Request completed", extra=log_context)
        else:
            logger.info("Request completed", extra=log_context)

        return response
