"""
全局配置模块：通过 pydantic-settings 读取 .env 环境变量
"""

from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用全局配置，从 .env 文件加载"""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── 存储 ──
    TASKS_FILE: str = "data/tasks.json"  # 相对服务进程工作目录

    # ── 看板客户端 ──
    STORE_URL: str = "http://127.0.0.1:8000"  # 存储端点地址
    STORE_TIMEOUT: int = 10  # 单次请求超时（秒）

    # ── 应用 ──
    ENV: str = "development"  # development | production
    APP_NAME: str = "taskboard"
    APP_PORT: int = 8000

    @model_validator(mode="after")
    def _check_tasks_file(self) -> "Settings":
        """TASKS_FILE 必须指向一个文件，而不是目录"""
        if not self.TASKS_FILE.strip() or self.TASKS_FILE.endswith(("/", "\\")):
            raise ValueError(f"TASKS_FILE 必须是文件路径，当前值：{self.TASKS_FILE!r}")
        return self

    @property
    def tasks_path(self) -> Path:
        return Path(self.TASKS_FILE)


@lru_cache
def get_settings() -> Settings:
    """单例获取配置（带缓存）"""
    return Settings()
