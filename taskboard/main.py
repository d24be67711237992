"""
FastAPI 应用主入口
"""

import sys
from contextlib import asynccontextmanager
from pathlib import Path

# 将项目根目录添加到 python path，以便直接运行 main.py 时能找到 taskboard 模块
sys.path.append(str(Path(__file__).resolve().parent.parent))

import structlog
from fastapi import FastAPI
from prometheus_client import make_asgi_app

from taskboard.config import get_settings
from taskboard.observability.logging_config import setup_logging
from taskboard.observability.middleware import RequestObservabilityMiddleware

settings = get_settings()

# 初始化日志（在 import 时就生效）
setup_logging(env=settings.ENV)
log = structlog.get_logger()


@asynccontextmanager
async def lifespan(application: FastAPI):
    """应用生命周期：启动时确认任务文件目录可用"""
    log.info("应用启动", env=settings.ENV, app=settings.APP_NAME)

    # ── Warm-up：Fail Fast，存储目录建不出来就拒绝启动 ──
    tasks_path = settings.tasks_path
    tasks_path.parent.mkdir(parents=True, exist_ok=True)
    log.info("任务文件目录就绪", tasks_file=str(tasks_path.resolve()))

    yield

    log.info("应用关闭")


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

# ── 中间件 ──
app.add_middleware(RequestObservabilityMiddleware)

# ── Prometheus 指标端点 ──
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

# ── 路由注册 ──
from taskboard.api.health import router as health_router
from taskboard.api.tasks import router as tasks_router

app.include_router(health_router)
app.include_router(tasks_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("taskboard.main:app", host="0.0.0.0", port=settings.APP_PORT, reload=True)
