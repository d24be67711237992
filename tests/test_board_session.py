# tests/test_board_session.py

from __future__ import annotations

import asyncio

from taskboard.board.client import TaskStoreClientError
from taskboard.board.session import BoardSession
from taskboard.todo.schemas import Task

from .fakes import FakeStoreClient


async def _loaded(client: FakeStoreClient) -> BoardSession:
    board = BoardSession(client)
    assert board.status_text == "加载中..."
    await board.load()
    return board


async def test_load_fetches_once() -> None:
    stored = [Task(id="1", title="A", detail="", status="doing")]
    board = await _loaded(FakeStoreClient(stored))
    assert board.tasks == stored
    assert board.loading is False
    assert board.status_text == "已保存到 JSON"


async def test_every_mutation_saves_the_whole_list() -> None:
    client = FakeStoreClient()
    board = await _loaded(client)

    first = board.add("A")
    second = board.add("B", "detail")
    board.advance(first.id)
    board.edit(second.id, title="B2")
    await board.flush()

    assert len(client.saves) == 4
    assert client.saves[-1] == board.tasks
    assert [t.title for t in client.stored] == ["B2", "A"]
    assert [t.status for t in client.stored] == ["todo", "doing"]


async def test_add_with_blank_title_does_nothing() -> None:
    client = FakeStoreClient()
    board = await _loaded(client)
    assert board.add("  ") is None
    await board.flush()
    assert board.tasks == []
    assert client.saves == []


async def test_optimistic_update_before_save_completes() -> None:
    client = FakeStoreClient()
    client.gate = asyncio.Event()
    board = await _loaded(client)

    task = board.add("A")
    await asyncio.sleep(0)

    assert board.tasks == [task]
    assert board.saving is True
    assert board.status_text == "正在保存..."

    client.gate.set()
    await board.flush()
    assert board.saving is False


async def test_failed_save_keeps_local_state() -> None:
    client = FakeStoreClient(fail_saves=True)
    board = await _loaded(client)

    task = board.add("A")
    board.advance(task.id)
    await board.flush()

    assert board.tasks[0].status == "doing"
    assert client.stored == []
    assert board.saving is False
    assert board.status_text == "保存失败"
    assert board.last_save_error is not None


async def test_successful_save_clears_previous_failure() -> None:
    client = FakeStoreClient(fail_saves=True)
    board = await _loaded(client)
    board.add("A")
    await board.flush()

    client.fail_saves = False
    board.add("B")
    await board.flush()
    assert board.last_save_error is None
    assert board.status_text == "已保存到 JSON"


async def test_retreat_moves_one_step() -> None:
    stored = [Task(id="1", title="A", detail="", status="done")]
    board = await _loaded(FakeStoreClient(stored))
    board.retreat("1")
    assert board.get("1").status == "doing"
    board.retreat("1")
    assert board.get("1").status == "todo"
    board.retreat("1")
    assert board.get("1").status == "todo"
    await board.flush()


async def test_detail_view_follows_edits() -> None:
    board = await _loaded(FakeStoreClient())
    task = board.add("A")
    board.open_detail(task.id)

    board.edit(task.id, detail="长一点的说明")
    assert board.active_task.detail == "长一点的说明"
    assert board.active_task.title == "A"
    await board.flush()


async def test_deleting_open_task_closes_detail_view() -> None:
    board = await _loaded(FakeStoreClient())
    task = board.add("A")
    board.open_detail(task.id)

    board.delete(task.id)
    await board.flush()

    assert board.active_task_id is None
    assert board.active_task is None
    assert board.tasks == []


async def test_deleting_other_task_keeps_detail_view() -> None:
    board = await _loaded(FakeStoreClient())
    keep = board.add("A")
    drop = board.add("B")
    board.open_detail(keep.id)

    board.delete(drop.id)
    await board.flush()

    assert board.active_task == keep


async def test_open_detail_unknown_id() -> None:
    board = await _loaded(FakeStoreClient())
    assert board.open_detail("missing") is None
    assert board.active_task is None


class _SlowFailingFirstSave(FakeStoreClient):
    """第一次保存卡在 gate 上并最终失败，之后的保存立即成功"""

    def __init__(self) -> None:
        super().__init__()
        self.first_gate = asyncio.Event()

    async def save_tasks(self, tasks: list[Task]) -> None:
        self.saves.append(list(tasks))
        if len(self.saves) == 1:
            await self.first_gate.wait()
            raise TaskStoreClientError("HTTP 500: Failed to save tasks")
        self.stored = list(tasks)


async def test_stale_save_result_does_not_override_newer_one() -> None:
    client = _SlowFailingFirstSave()
    board = await _loaded(client)

    board.add("A")
    board.add("B")
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    # 第二次保存已成功，第一次才迟迟失败
    client.first_gate.set()
    await board.flush()

    assert board.last_save_error is None
    assert board.status_text == "已保存到 JSON"
    assert [t.title for t in client.stored] == ["B", "A"]


async def test_latest_save_failure_is_reported_after_older_success() -> None:
    client = FakeStoreClient()
    board = await _loaded(client)
    board.add("A")
    await board.flush()

    client.fail_saves = True
    board.add("B")
    await board.flush()
    assert board.status_text == "保存失败"
