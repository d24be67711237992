"""
健康检查接口：探活 + 存储目录状态
"""

import os

import structlog
from fastapi import APIRouter, Depends

from taskboard.api.tasks import get_task_store
from taskboard.todo.store import TaskFileStore

router = APIRouter(tags=["健康检查"])
log = structlog.get_logger()


@router.get("/health")
async def health_check(store: TaskFileStore = Depends(get_task_store)):
    """健康检查：任务文件所在目录是否可写（目录尚未创建时看最近的已存在上级目录）"""
    status = {"status": "ok", "store": "ok", "tasks_file": str(store.path)}

    directory = store.path.parent.resolve()
    while not directory.exists() and directory != directory.parent:
        directory = directory.parent

    if not os.access(directory, os.W_OK):
        status["store"] = f"error: {directory} 不可写"
        status["status"] = "degraded"
        log.error("存储目录健康检查失败", directory=str(directory))

    return status
