"""行 <-> 模型转换辅助

投影行以扁平列存储，嵌套结构（标签数组、子任务、重复规则等）存为 JSON 文本。
"""

import json
from typing import Any

import aiosqlite
from pydantic import BaseModel


def model_to_params(
    model: BaseModel,
    columns: tuple[str, ...],
    json_columns: frozenset[str] = frozenset(),
) -> tuple[Any, ...]:
    """按列顺序生成 SQL 参数元组"""
    data = model.model_dump(mode="json")
    params: list[Any] = []
    for col in columns:
        value = data[col]
        if col in json_columns and value is not None:
            value = json.dumps(value, ensure_ascii=False)
        elif isinstance(value, bool):
            value = int(value)
        params.append(value)
    return tuple(params)


def row_to_dict(
    row: aiosqlite.Row,
    json_columns: frozenset[str] = frozenset(),
) -> dict[str, Any]:
    """将数据库行转换为字典，解码 JSON 列"""
    data = dict(row)
    data.pop("id", None)
    for col in json_columns:
        if data.get(col) is not None:
            data[col] = json.loads(data[col])
    return data


def upsert_sql(table: str, key: str, columns: tuple[str, ...]) -> str:
    """生成以领域 ID 为冲突键的 INSERT ... ON CONFLICT DO UPDATE 语句"""
    placeholders = ", ".join("?" for _ in columns)
    assignments = ",\n    ".join(
        f"{col} = excluded.{col}" for col in columns if col != key
    )
    return (
        f"INSERT INTO {table} ({', '.join(columns)})\n"
        f"VALUES ({placeholders})\n"
        f"ON CONFLICT({key}) DO UPDATE SET\n    {assignments}"
    )
