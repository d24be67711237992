"""
控制台看板：在终端里操作开发追踪板，直连存储端点

运行方式（先启动服务 python -m taskboard.main）：
    python scripts/board_console.py

支持命令：
    /add 标题 | 详情   — 新增待办事项（详情可省略）
    /edit ID 新标题    — 修改标题
    /detail ID        — 打开详情视图
    /note 详细内容     — 修改详情视图中事项的详细内容
    /close            — 关闭详情视图
    /next ID          — 前进一步（待办 → 进行中 → 已完成）
    /back ID          — 退回一步
    /rm ID            — 删除事项
    /ls               — 重新显示看板
    /quit             — 退出

ID 只需输入前几位，能唯一定位即可。
"""

import asyncio
import sys
from pathlib import Path

from prompt_toolkit import PromptSession

# 确保项目根目录在 sys.path 中
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from taskboard.board import BoardSession, TaskStoreClient
from taskboard.board.state import NEXT_ACTION_LABELS, can_advance, can_retreat
from taskboard.config import get_settings
from taskboard.observability.logging_config import setup_logging
from taskboard.todo.schemas import Task

_GREY = "\033[90m"
_CYAN = "\033[36m"
_RED = "\033[31m"
_RESET = "\033[0m"


def _render(board: BoardSession) -> None:
    print(f"{_GREY}  {board.status_text}{_RESET}")
    for _, label, items in board.columns():
        print(f"\n{_CYAN}■ {label} ({len(items)}){_RESET}")
        if not items:
            print(f"{_GREY}  当前列暂无事项{_RESET}")
        for task in items:
            actions = []
            if can_retreat(task):
                actions.append("退回")
            if can_advance(task):
                actions.append(NEXT_ACTION_LABELS[task.status])
            print(f"  [{task.id[:8]}] {task.title}  {_GREY}{' / '.join(actions)}{_RESET}")
            if task.detail:
                first_line = task.detail.splitlines()[0]
                print(f"{_GREY}             {first_line}{_RESET}")
    print()


def _render_detail(task: Task) -> None:
    print(f"\n{_CYAN}── 事项详情 [{task.id[:8]}] ──{_RESET}")
    print(f"  标题: {task.title}")
    print(f"  详细内容:\n{task.detail or '暂无详细内容'}\n")


def _resolve(board: BoardSession, prefix: str) -> Task | None:
    """按 ID 前缀定位事项，零个或多个匹配时提示并返回 None"""
    prefix = prefix.strip()
    matches = [task for task in board.tasks if prefix and task.id.startswith(prefix)]
    if len(matches) != 1:
        print(f"{_RED}  找不到唯一匹配的事项: {prefix!r}（匹配 {len(matches)} 个）{_RESET}")
        return None
    return matches[0]


async def main():
    """交互式看板主循环"""
    settings = get_settings()
    setup_logging(env=settings.ENV)

    print("=" * 60)
    print("  开发追踪板 控制台")
    print(f"  存储端点: {settings.STORE_URL}")
    print("  命令: /add /edit /detail /note /close /next /back /rm /ls /quit")
    print("=" * 60)

    async with TaskStoreClient() as client:
        board = BoardSession(client)
        await board.load()
        _render(board)

        pt_session = PromptSession()
        while True:
            try:
                line = (await pt_session.prompt_async("看板> ")).strip()
            except (EOFError, KeyboardInterrupt):
                break

            if not line:
                continue

            command, _, arg = line.partition(" ")

            if command == "/quit":
                break
            elif command == "/add":
                title, _, detail = arg.partition("|")
                if board.add(title, detail) is None:
                    print(f"{_RED}  标题不能为空{_RESET}")
                    continue
            elif command == "/edit":
                target, _, title = arg.strip().partition(" ")
                task = _resolve(board, target)
                if task is None:
                    continue
                board.edit(task.id, title=title)
            elif command == "/detail":
                task = _resolve(board, arg)
                if task is None:
                    continue
                board.open_detail(task.id)
                _render_detail(task)
                continue
            elif command == "/note":
                active = board.active_task
                if active is None:
                    print(f"{_RED}  请先用 /detail 打开一个事项{_RESET}")
                    continue
                board.edit(active.id, detail=arg)
                _render_detail(board.active_task)
                continue
            elif command == "/close":
                board.close_detail()
                continue
            elif command in ("/next", "/back", "/rm"):
                task = _resolve(board, arg)
                if task is None:
                    continue
                if command == "/next":
                    board.advance(task.id)
                elif command == "/back":
                    board.retreat(task.id)
                else:
                    board.delete(task.id)
            elif command != "/ls":
                print(f"{_RED}  未知命令: {command}{_RESET}")
                continue

            # 让后台保存有机会跑完，再刷新保存状态
            await board.flush()
            _render(board)

        await board.flush()
    print("再见！")


if __name__ == "__main__":
    asyncio.run(main())
