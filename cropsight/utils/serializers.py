# cropsight/utils/serializers.py
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Optional

from ..extensions import db


def camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _json_value(value: Any) -> Any:
    # Decimals stay strings so precision survives the wire.
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def to_json(obj: Optional[db.Model]) -> Optional[dict]:
    """Row -> camelCase dict of its columns (None stays None)."""
    if obj is None:
        return None
    return {
        camel(column.key): _json_value(getattr(obj, column.key))
        for column in obj.__table__.columns
    }


def to_json_list(rows: Iterable[db.Model]) -> list[dict]:
    return [to_json(row) for row in rows]
