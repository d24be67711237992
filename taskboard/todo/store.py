"""
Task 文件存储层

整个任务列表存成一个 JSON 数组文件（2 空格缩进 + 末尾换行），
每次写入都是全量覆盖，不做事务、不加锁，最后一次写入生效。

容错策略：
- read() 失败时（文件不存在 / 读不了 / 不是 JSON / 形状不对）：记录日志并返回空列表
- replace() 失败时：抛出 TaskStoreError，由接口层转成 500；原文件内容不保证完好
"""

import asyncio
import json
from pathlib import Path

import structlog
from pydantic import ValidationError

from taskboard.observability.metrics import STORE_READ_FALLBACK_TOTAL, STORE_WRITE_TOTAL
from taskboard.todo.schemas import Task, TaskList, dumps_utf8

log = structlog.get_logger()


class TaskStoreError(Exception):
    """存储层写入失败"""


class TaskFileStore:
    """单文件 Task 列表的读 / 全量替换"""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    async def read(self) -> list[Task]:
        """读取任务列表，任何失败都降级为空列表"""
        return await asyncio.to_thread(self._read_sync)

    async def replace(self, tasks: list[Task]) -> None:
        """覆盖写入任务列表，I/O 失败时抛 TaskStoreError"""
        await asyncio.to_thread(self._replace_sync, tasks)

    def _read_sync(self) -> list[Task]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            STORE_READ_FALLBACK_TOTAL.labels(reason="missing").inc()
            return []
        except OSError as e:
            log.warning("任务文件读取失败，降级返回空列表", path=str(self.path), error=str(e))
            STORE_READ_FALLBACK_TOTAL.labels(reason="unreadable").inc()
            return []

        try:
            return TaskList.validate_python(json.loads(raw.decode("utf-8")))
        except (ValueError, ValidationError) as e:
            # UnicodeDecodeError / JSONDecodeError 都是 ValueError 的子类
            log.warning("任务文件内容无效，降级返回空列表", path=str(self.path), error=str(e))
            STORE_READ_FALLBACK_TOTAL.labels(reason="invalid").inc()
            return []

    def _replace_sync(self, tasks: list[Task]) -> None:
        # 先在内存里编码好再打开文件，编码失败不会截断旧文件
        document = dumps_utf8([task.model_dump() for task in tasks], indent=2) + b"\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_bytes(document)
        except OSError as e:
            log.error("任务文件写入失败", path=str(self.path), error=str(e))
            STORE_WRITE_TOTAL.labels(result="error").inc()
            raise TaskStoreError(str(e)) from e

        STORE_WRITE_TOTAL.labels(result="ok").inc()
        log.info("任务文件已覆盖写入", path=str(self.path), count=len(tasks))
