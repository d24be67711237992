"""
看板状态机：纯函数，输入旧列表，返回新列表

status 严格线性：todo → doing → done，后退对称 done → doing → todo。
不允许 todo 与 done 之间直接跳转；到达边界时前进 / 后退为空操作。
标题、详情的编辑与 status 无关，任何状态下都可以改。

所有函数都不修改入参，Task 本身不可变，变更一律生成新对象。
"""

import uuid

from taskboard.todo.schemas import STATUSES, Task, TaskStatus

# 列标题（展示用）
COLUMN_LABELS: dict[TaskStatus, str] = {
    "todo": "待办事项",
    "doing": "进行中",
    "done": "已完成",
}

# 前进按钮文案，done 没有下一步
NEXT_ACTION_LABELS: dict[TaskStatus, str] = {
    "todo": "开始开发",
    "doing": "标记完成",
}


def next_status(status: TaskStatus) -> TaskStatus | None:
    """前进一步后的状态，已在 done 时返回 None"""
    index = STATUSES.index(status)
    return STATUSES[index + 1] if index + 1 < len(STATUSES) else None


def prev_status(status: TaskStatus) -> TaskStatus | None:
    """后退一步后的状态，已在 todo 时返回 None"""
    index = STATUSES.index(status)
    return STATUSES[index - 1] if index > 0 else None


def can_advance(task: Task) -> bool:
    return next_status(task.status) is not None


def can_retreat(task: Task) -> bool:
    return prev_status(task.status) is not None


def new_task(title: str, detail: str = "") -> Task | None:
    """新建 todo 事项，title / detail 去掉首尾空白；标题为空时返回 None"""
    title = title.strip()
    if not title:
        return None
    return Task(id=str(uuid.uuid4()), title=title, detail=detail.strip(), status="todo")


def add_task(tasks: list[Task], task: Task) -> list[Task]:
    """新事项插到最前面"""
    return [task, *tasks]


def update_task(
    tasks: list[Task],
    task_id: str,
    *,
    title: str | None = None,
    detail: str | None = None,
) -> list[Task]:
    """原地编辑标题 / 详情（不 trim，保留用户输入原样）"""
    patch = {}
    if title is not None:
        patch["title"] = title
    if detail is not None:
        patch["detail"] = detail
    if not patch:
        return list(tasks)
    return [task.model_copy(update=patch) if task.id == task_id else task for task in tasks]


def _move(tasks: list[Task], task_id: str, step) -> list[Task]:
    moved = []
    for task in tasks:
        if task.id == task_id:
            target = step(task.status)
            if target is not None:
                task = task.model_copy(update={"status": target})
        moved.append(task)
    return moved


def advance_task(tasks: list[Task], task_id: str) -> list[Task]:
    """前进一步：todo → doing → done"""
    return _move(tasks, task_id, next_status)


def retreat_task(tasks: list[Task], task_id: str) -> list[Task]:
    """后退一步：done → doing → todo"""
    return _move(tasks, task_id, prev_status)


def remove_task(tasks: list[Task], task_id: str) -> list[Task]:
    """直接从列表中去掉，不留墓碑"""
    return [task for task in tasks if task.id != task_id]


def find_task(tasks: list[Task], task_id: str) -> Task | None:
    return next((task for task in tasks if task.id == task_id), None)


def columns(tasks: list[Task]) -> list[tuple[TaskStatus, str, list[Task]]]:
    """按 status 分成三列，列内保持列表原顺序"""
    return [
        (status, COLUMN_LABELS[status], [task for task in tasks if task.status == status])
        for status in STATUSES
    ]
