"""
看板会话：持有本地任务列表与详情视图，负责乐观更新 + 整表保存

每次变更的固定流程：
1. 用 state 模块的纯函数算出新列表
2. 立即替换本地列表（乐观更新）
3. 后台发起一次整表 PUT（发后即忘）

保存失败不重试、不回滚，本地列表在下次整页重载前始终是准绳。
多个保存请求可以同时在途，后完成的覆盖先完成的（最后写入生效）。
"""

import asyncio

import structlog

from taskboard.board import state
from taskboard.board.client import TaskStoreClient, TaskStoreClientError
from taskboard.todo.schemas import Task, TaskStatus

log = structlog.get_logger()


class BoardSession:
    """单个看板页面的生命周期状态"""

    def __init__(self, client: TaskStoreClient):
        self._client = client
        self.tasks: list[Task] = []
        self.loading = True
        self.active_task_id: str | None = None
        self.last_save_error: str | None = None
        self._pending: set[asyncio.Task] = set()
        # 保存请求按发起顺序编号，只有比已落定的更新的结果才改写 last_save_error
        self._issued_seq = 0
        self._settled_seq = 0

    # ── 加载 ──

    async def load(self) -> None:
        """页面加载时拉取一次完整列表，失败时保持空列表"""
        try:
            self.tasks = await self._client.fetch_tasks()
        finally:
            self.loading = False
        log.info("任务列表已加载", count=len(self.tasks))

    # ── 展示状态 ──

    @property
    def saving(self) -> bool:
        return bool(self._pending)

    @property
    def status_text(self) -> str:
        if self.loading:
            return "加载中..."
        if self.saving:
            return "正在保存..."
        if self.last_save_error:
            return "保存失败"
        return "已保存到 JSON"

    @property
    def active_task(self) -> Task | None:
        """当前详情视图里打开的事项"""
        if self.active_task_id is None:
            return None
        return state.find_task(self.tasks, self.active_task_id)

    def columns(self) -> list[tuple[TaskStatus, str, list[Task]]]:
        return state.columns(self.tasks)

    def get(self, task_id: str) -> Task | None:
        return state.find_task(self.tasks, task_id)

    # ── 详情视图 ──

    def open_detail(self, task_id: str) -> Task | None:
        task = state.find_task(self.tasks, task_id)
        self.active_task_id = task.id if task else None
        return task

    def close_detail(self) -> None:
        self.active_task_id = None

    # ── 变更操作 ──

    def add(self, title: str, detail: str = "") -> Task | None:
        """新增 todo 事项（插到最前），标题为空时什么都不做"""
        task = state.new_task(title, detail)
        if task is None:
            return None
        self._persist(state.add_task(self.tasks, task))
        return task

    def edit(self, task_id: str, *, title: str | None = None, detail: str | None = None) -> None:
        """编辑标题 / 详情，详情视图读的是同一份列表，随之刷新"""
        self._persist(state.update_task(self.tasks, task_id, title=title, detail=detail))

    def advance(self, task_id: str) -> None:
        self._persist(state.advance_task(self.tasks, task_id))

    def retreat(self, task_id: str) -> None:
        self._persist(state.retreat_task(self.tasks, task_id))

    def delete(self, task_id: str) -> None:
        """删除事项；若正在详情视图中打开，同时关闭详情视图"""
        self._persist(state.remove_task(self.tasks, task_id))
        if self.active_task_id == task_id:
            self.close_detail()

    # ── 持久化 ──

    def _persist(self, next_tasks: list[Task]) -> None:
        self.tasks = next_tasks
        self._issued_seq += 1
        save = asyncio.create_task(self._safe_save(self._issued_seq, next_tasks))
        self._pending.add(save)
        save.add_done_callback(self._pending.discard)

    async def _safe_save(self, seq: int, tasks: list[Task]) -> None:
        """保存失败只记日志，不回滚本地状态；晚到的旧请求结果不覆盖新请求的"""
        error: str | None = None
        try:
            await self._client.save_tasks(tasks)
        except TaskStoreClientError as e:
            error = str(e)
            log.warning("任务列表保存失败，本地状态保留", error=error, seq=seq, count=len(tasks))

        if seq > self._settled_seq:
            self._settled_seq = seq
            self.last_save_error = error

    async def flush(self) -> None:
        """等待所有在途的保存请求结束"""
        while self._pending:
            await asyncio.gather(*self._pending)
