"""CLI 入口模块 -- python -m tasksync.core <command>

支持的命令：
  rebuild-projections <user_id> [from_timestamp] [--reset]  按时间戳重放用户事件
  process-event <event_id>                                  投影单个事件

日志写到 stderr，格式由 TASKSYNC_LOG_FORMAT / TASKSYNC_LOG_LEVEL 控制。
"""

import asyncio
import sys

from .config import get_db_path
from .logging_config import setup_logging

_USAGE = [
    "用法: python -m tasksync.core <command>",
    "命令:",
    "  rebuild-projections <user_id> [from_timestamp] [--reset]  重放用户事件并重算列表计数",
    "  process-event <event_id>                                  投影单个事件",
]


def main(argv: list[str] | None = None) -> None:
    """CLI 主入口"""
    setup_logging()
    args = sys.argv[1:] if argv is None else argv
    if not args:
        for line in _USAGE:
            print(line)
        sys.exit(1)

    command, rest = args[0], args[1:]

    if command == "rebuild-projections":
        reset = "--reset" in rest
        positional = [a for a in rest if a != "--reset"]
        if not positional:
            print("缺少参数: user_id")
            sys.exit(1)
        user_id = positional[0]
        from_timestamp: int | None = None
        if len(positional) > 1:
            try:
                from_timestamp = int(positional[1])
            except ValueError:
                print(f"from_timestamp 必须是毫秒整数: {positional[1]}")
                sys.exit(1)
        if reset and from_timestamp is not None:
            print("--reset 只能用于全量重放（不能指定 from_timestamp）")
            sys.exit(1)
        asyncio.run(rebuild_projections(user_id, from_timestamp, reset))
    elif command == "process-event":
        if not rest:
            print("缺少参数: event_id")
            sys.exit(1)
        asyncio.run(process_event(rest[0]))
    else:
        print(f"未知命令: {command}")
        print("可用命令: rebuild-projections, process-event")
        sys.exit(1)


async def rebuild_projections(
    user_id: str,
    from_timestamp: int | None = None,
    reset: bool = False,
) -> None:
    """执行 Projection 重建"""
    from .projection import ProjectionEngine
    from .store import create_store_group

    db_path = get_db_path()

    print(f"数据库路径: {db_path}")
    print(f"开始重建用户 {user_id} 的 Projection...")

    store_group = await create_store_group(db_path)

    try:
        engine = ProjectionEngine(store_group)
        result = await engine.rebuild_projections(user_id, from_timestamp, reset)
        print(
            f"重建完成，共 {result.total} 条事件："
            f"成功 {result.processed}，失败 {result.errors}"
        )
    finally:
        await store_group.close()


async def process_event(event_id: str) -> None:
    """投影单个事件"""
    from .exceptions import EventNotFoundError
    from .projection import ProjectionEngine
    from .store import create_store_group

    store_group = await create_store_group(get_db_path())

    try:
        engine = ProjectionEngine(store_group)
        try:
            result = await engine.process_event(event_id)
        except EventNotFoundError as e:
            print(str(e))
            sys.exit(1)
        print(f"已投影事件 {event_id} ({result.event_type})")
    finally:
        await store_group.close()


if __name__ == "__main__":
    main()
