"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径与评分范围等常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("OFFERHUB_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "OFFERHUB_DB_PATH",
        str(_get_base_dir() / "sqlite" / "offerhub.db"),
    )


# 评分取值范围（闭区间）
RATING_MIN: int = 1
RATING_MAX: int = 5
