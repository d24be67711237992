"""
请求观测中间件：一次 dispatch 同时完成 trace_id 绑定、请求日志和指标采集

- trace_id：沿用请求头 X-Trace-ID，没有则新建，绑定到 structlog contextvars
- 日志：只在请求结束时记一条，5xx 记 error，其余记 info
- 指标：endpoint 标签取路由模板（如 /api/tasks），未命中路由的请求统一记为 "unmatched"，
  避免随机路径撑爆标签基数；/metrics 与 /health 不计入
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from taskboard.observability.metrics import REQUEST_DURATION, REQUEST_TOTAL

log = structlog.get_logger()

_UNMETERED_PREFIXES = ("/metrics", "/health")


def _endpoint_label(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", "unmatched")


class RequestObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        trace_id = request.headers.get("X-Trace-ID") or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(trace_id=trace_id)

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000

        log_method = log.error if response.status_code >= 500 else log.info
        log_method(
            "请求完成",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 1),
        )

        if not request.url.path.startswith(_UNMETERED_PREFIXES):
            endpoint = _endpoint_label(request)
            REQUEST_TOTAL.labels(
                method=request.method, endpoint=endpoint, status_code=str(response.status_code)
            ).inc()
            REQUEST_DURATION.labels(method=request.method, endpoint=endpoint).observe(duration_ms)

        response.headers["X-Trace-ID"] = trace_id
        response.headers["X-Duration-Ms"] = str(int(duration_ms))
        return response
