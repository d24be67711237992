"""
Todo 模块：看板任务的数据模型与 JSON 文件存储

提供 Task schema 和 TaskFileStore，
供 /api/tasks 接口与看板客户端共用。
"""

from taskboard.todo.schemas import STATUSES, Task, TaskStatus, TasksPayload
from taskboard.todo.store import TaskFileStore, TaskStoreError

__all__ = ["STATUSES", "Task", "TaskStatus", "TasksPayload", "TaskFileStore", "TaskStoreError"]
