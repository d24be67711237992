"""
Prometheus 指标定义

所有指标统一在此文件定义，中间件和业务代码按需引用。
"""

from prometheus_client import Counter, Histogram

# ── 请求级指标 ──

REQUEST_TOTAL = Counter(
    "taskboard_request_total",
    "HTTP 请求总数",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "taskboard_request_duration_ms",
    "HTTP 请求耗时（毫秒）",
    ["method", "endpoint"],
    buckets=[5, 10, 25, 50, 100, 250, 500, 1000],
)

# ── 存储层指标 ──

STORE_READ_FALLBACK_TOTAL = Counter(
    "taskboard_store_read_fallback_total",
    "读取任务文件降级为空列表的次数",
    ["reason"],  # missing/unreadable/invalid
)

STORE_WRITE_TOTAL = Counter(
    "taskboard_store_write_total",
    "任务文件覆盖写入次数",
    ["result"],  # ok/error
)

# ── 接口层指标 ──

REJECTED_PAYLOAD_TOTAL = Counter(
    "taskboard_rejected_payload_total",
    "PUT /api/tasks 请求体校验失败次数",
    ["reason"],  # invalid_json/invalid_body/invalid_tasks
)
