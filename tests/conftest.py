# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from taskboard.api.tasks import get_task_store
from taskboard.board.client import TaskStoreClient
from taskboard.main import app
from taskboard.todo.store import TaskFileStore


@pytest.fixture()
def tasks_file(tmp_path: Path) -> Path:
    """每个测试独立的任务文件（默认不存在）"""
    return tmp_path / "data" / "tasks.json"


@pytest.fixture()
def store(tasks_file: Path) -> TaskFileStore:
    return TaskFileStore(tasks_file)


@pytest.fixture()
def api(store: TaskFileStore):
    """
    挂上临时存储的 FastAPI 应用。

    不进入 lifespan，避免在工作目录下创建真实的 data/ 目录。
    """
    app.dependency_overrides[get_task_store] = lambda: store
    yield app
    app.dependency_overrides.clear()


@pytest.fixture()
def http(api) -> TestClient:
    return TestClient(api)


@pytest.fixture()
async def store_client(api):
    """直连 ASGI 应用的看板客户端，不走真实网络"""
    transport = httpx.ASGITransport(app=api)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield TaskStoreClient(http_client=http_client)
