"""CLI 入口模块 -- python -m offerhub.core <command>

支持的命令：
  init-db  创建 projects / task_records 表与索引
"""

import asyncio
import sys

from .config import get_db_path


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m offerhub.core <command>")
        print("命令:")
        print("  init-db  创建 projects / task_records 表与索引")
        sys.exit(1)

    command = sys.argv[1]

    if command == "init-db":
        asyncio.run(init_database())
    else:
        print(f"未知命令: {command}")
        print("可用命令: init-db")
        sys.exit(1)


async def init_database() -> None:
    """初始化数据库 schema（幂等）"""
    from .store import create_store_group

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")

    store_group = await create_store_group(db_path)
    try:
        print("初始化完成")
    finally:
        await store_group.conn.close()


if __name__ == "__main__":
    main()
