"""
Board 模块：看板客户端

state 提供三态状态机的纯函数，client 封装存储端点 HTTP 调用，
BoardSession 把两者串起来：乐观更新本地列表 + 后台整表保存。
"""

from taskboard.board.client import TaskStoreClient, TaskStoreClientError
from taskboard.board.session import BoardSession

__all__ = ["BoardSession", "TaskStoreClient", "TaskStoreClientError"]
