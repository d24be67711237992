"""
存储端点 HTTP 客户端：GET / PUT /api/tasks 的薄封装

- fetch_tasks()：非 2xx、响应体不是 {tasks: [...]}、Task 形状不对，都按空列表处理
- save_tasks()：整表 PUT，非 2xx 或网络错误抛 TaskStoreClientError，不重试
"""

import httpx
import structlog
from pydantic import ValidationError

from taskboard.config import get_settings
from taskboard.todo.schemas import Task, TaskList

log = structlog.get_logger()

TASKS_ENDPOINT = "/api/tasks"


class TaskStoreClientError(Exception):
    """保存请求失败（网络错误或非 2xx 响应）"""


class TaskStoreClient:
    """存储端点客户端，可注入自定义 httpx.AsyncClient（测试时挂 ASGITransport）"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        settings = get_settings()
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=base_url or settings.STORE_URL,
            timeout=timeout or settings.STORE_TIMEOUT,
        )

    async def fetch_tasks(self) -> list[Task]:
        """拉取完整任务列表（禁用缓存）"""
        try:
            resp = await self._http.get(TASKS_ENDPOINT, headers={"Cache-Control": "no-store"})
        except httpx.HTTPError as e:
            log.warning("拉取任务列表失败", error=str(e))
            return []

        if not resp.is_success:
            log.warning("拉取任务列表失败", status_code=resp.status_code)
            return []

        try:
            data = resp.json()
        except ValueError:
            log.warning("任务列表响应不是 JSON")
            return []

        if not isinstance(data, dict) or not isinstance(data.get("tasks"), list):
            return []

        try:
            return TaskList.validate_python(data["tasks"])
        except ValidationError as e:
            log.warning("任务列表响应形状不合法", errors=e.error_count())
            return []

    async def save_tasks(self, tasks: list[Task]) -> None:
        """整表覆盖保存"""
        payload = {"tasks": [task.model_dump() for task in tasks]}
        try:
            resp = await self._http.put(TASKS_ENDPOINT, json=payload)
        except httpx.HTTPError as e:
            raise TaskStoreClientError(f"请求失败: {e}") from e

        if not resp.is_success:
            try:
                message = resp.json().get("message", "")
            except (ValueError, AttributeError):
                message = resp.text
            raise TaskStoreClientError(f"HTTP {resp.status_code}: {message}")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "TaskStoreClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
