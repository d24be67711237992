# tests/test_board_client.py

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from taskboard.board.client import TaskStoreClient, TaskStoreClientError
from taskboard.board.session import BoardSession
from taskboard.todo.schemas import Task


async def test_fetch_from_empty_store(store_client: TaskStoreClient) -> None:
    assert await store_client.fetch_tasks() == []


async def test_save_then_fetch_round_trip(store_client: TaskStoreClient) -> None:
    tasks = [
        Task(id="2", title="B", detail="", status="doing"),
        Task(id="1", title="A", detail="x", status="todo"),
    ]
    await store_client.save_tasks(tasks)
    assert await store_client.fetch_tasks() == tasks


async def test_session_persists_through_real_endpoint(
    store_client: TaskStoreClient, tasks_file: Path
) -> None:
    board = BoardSession(store_client)
    await board.load()
    task = board.add("写测试", "覆盖接口")
    board.advance(task.id)
    board.advance(task.id)
    await board.flush()

    reloaded = BoardSession(store_client)
    await reloaded.load()
    assert reloaded.tasks == board.tasks
    assert reloaded.get(task.id).status == "done"
    assert tasks_file.exists()


def _client_for(handler) -> TaskStoreClient:
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://testserver"
    )
    return TaskStoreClient(http_client=http_client)


async def test_save_raises_on_server_error() -> None:
    client = _client_for(
        lambda request: httpx.Response(500, json={"message": "Failed to save tasks"})
    )
    with pytest.raises(TaskStoreClientError, match="Failed to save tasks"):
        await client.save_tasks([])


async def test_save_raises_on_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TaskStoreClientError):
        await _client_for(handler).save_tasks([])


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(503),
        httpx.Response(200, text="oops"),
        httpx.Response(200, json=[]),
        httpx.Response(200, json={"tasks": [{"id": "1"}]}),
    ],
)
async def test_fetch_degrades_to_empty(response: httpx.Response) -> None:
    client = _client_for(lambda request: response)
    assert await client.fetch_tasks() == []
