"""
/api/tasks 任务存储接口：单资源的读取 + 全量替换

端点：
- GET /api/tasks — 返回完整任务列表，读取失败一律返回空列表
- PUT /api/tasks — 校验并覆盖写入完整任务列表，原样回显

错误响应统一为 {"message": ...}：
- 400：请求体不是 JSON 对象 / 缺少 tasks 列表 / 任一 Task 形状不合法（不落盘）
- 500：写文件失败（原文件内容不保证完好）
"""

import json
from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from taskboard.config import get_settings
from taskboard.observability.metrics import REJECTED_PAYLOAD_TOTAL
from taskboard.todo.schemas import Task, TaskList, TasksPayload, dumps_utf8
from taskboard.todo.store import TaskFileStore, TaskStoreError

router = APIRouter(prefix="/api", tags=["任务"])
log = structlog.get_logger()


class TaskJSONResponse(JSONResponse):
    """与落盘同一套编码：含孤立代理项的字符串转义输出，而不是渲染时报错"""

    def render(self, content: Any) -> bytes:
        return dumps_utf8(content)


def get_task_store() -> TaskFileStore:
    """FastAPI 依赖注入：按配置路径获取任务文件存储"""
    return TaskFileStore(get_settings().tasks_path)


def _tasks_response(tasks: list[Task]) -> TaskJSONResponse:
    return TaskJSONResponse({"tasks": [task.model_dump() for task in tasks]})


def _reject(message: str, reason: str) -> TaskJSONResponse:
    REJECTED_PAYLOAD_TOTAL.labels(reason=reason).inc()
    log.warning("任务列表请求体校验失败", reason=reason)
    return TaskJSONResponse({"message": message}, status_code=400)


@router.get("/tasks", response_model=TasksPayload, response_class=TaskJSONResponse)
async def read_tasks(store: TaskFileStore = Depends(get_task_store)):
    """读取完整任务列表"""
    return _tasks_response(await store.read())


@router.put("/tasks", response_model=TasksPayload, response_class=TaskJSONResponse)
async def replace_tasks(request: Request, store: TaskFileStore = Depends(get_task_store)):
    """全量替换任务列表：先校验形状，全部通过后再覆盖写入"""
    try:
        body = json.loads(await request.body())
    except ValueError:
        return _reject("Invalid body", "invalid_json")

    if not isinstance(body, dict):
        return _reject("Invalid body", "invalid_body")

    raw_tasks = body.get("tasks")
    if not isinstance(raw_tasks, list):
        return _reject("Invalid tasks", "invalid_tasks")

    try:
        tasks = TaskList.validate_python(raw_tasks)
    except ValidationError as e:
        log.info("Task 形状不合法", errors=e.error_count())
        return _reject("Invalid tasks", "invalid_tasks")

    try:
        await store.replace(tasks)
    except TaskStoreError:
        return TaskJSONResponse({"message": "Failed to save tasks"}, status_code=500)

    return _tasks_response(tasks)
