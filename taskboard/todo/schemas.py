"""
Task 数据模型

Task 形状即全部校验规则：id / title / detail 为字符串，status 为三态枚举。
不做 id 唯一性、标题非空等语义校验。
"""

import json
from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, StrictStr, TypeAdapter

TaskStatus = Literal["todo", "doing", "done"]

# 看板列顺序，同时也是状态机的前进方向
STATUSES: tuple[TaskStatus, ...] = get_args(TaskStatus)


class Task(BaseModel):
    """单个看板事项（不可变，修改一律通过 model_copy 生成新对象）"""

    # 额外字段原样保留，随整表一起落盘和回显
    model_config = ConfigDict(frozen=True, extra="allow")

    # StrictStr：不接受 1 → "1" 这类类型转换
    id: StrictStr
    title: StrictStr
    detail: StrictStr
    status: TaskStatus


class TasksPayload(BaseModel):
    """GET / PUT /api/tasks 的请求与响应体"""

    tasks: list[Task]


# 持久化文档：Task 的 JSON 数组
TaskList = TypeAdapter(list[Task])


def dumps_utf8(obj: Any, indent: int | None = None) -> bytes:
    """
    序列化为 UTF-8 JSON 字节串，非 ASCII 字符原样保留。

    字符串里含有孤立代理项（如 "\\ud800"）时无法编码成 UTF-8，
    整个文档退回 ensure_ascii=True，用 \\uXXXX 转义输出。
    """
    try:
        return json.dumps(obj, ensure_ascii=False, indent=indent).encode("utf-8")
    except UnicodeEncodeError:
        return json.dumps(obj, ensure_ascii=True, indent=indent).encode("ascii")
