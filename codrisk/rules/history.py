# codrisk/rules/history.py
from __future__ import annotations
import math
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..schemas import HistoryOrder
from ..utils.formatting import percent

_DATETIME = TypeAdapter(datetime)

RAPID_WINDOW_MS = 60 * 60 * 1000
MIN_HISTORY = 2
CANCELLED_STATUSES = frozenset({"cancelled", "rejected"})
MAX_CANCEL_RATE = 0.5


class RapidResult(NamedTuple):
    is_rapid: bool
    reason: str = ""


class CancellationResult(NamedTuple):
    is_high: bool
    rate: float = 0.0
    reason: str = ""


def as_history(user_orders: Iterable[Any] | None) -> List[HistoryOrder]:
    """Rows as HistoryOrder. Dicts, models and ORM rows all work; an unreadable row still counts, with no fields."""
    rows: List[HistoryOrder] = []
    for row in user_orders or []:
        if isinstance(row, HistoryOrder):
            rows.append(row)
            continue
        if isinstance(row, BaseModel):
            row = row.model_dump()
        try:
            rows.append(HistoryOrder.model_validate(row))
        except ValidationError:
            rows.append(HistoryOrder())
    return rows


def to_millis(value: Any) -> Optional[float]:
    """Epoch milliseconds for an ISO string, datetime or epoch-ms number; None if unreadable. Naive times are UTC."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else float(value)
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        try:
            dt = _DATETIME.validate_python(value.strip())
        except ValidationError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp() * 1000


def _get(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def check_rapid_orders(user_orders: Iterable[Any], current_order: Any) -> RapidResult:
    """Other orders by the same user placed less than an hour either side of this one."""
    rows = as_history(user_orders)
    if len(rows) < MIN_HISTORY:
        return RapidResult(False)

    current_ms = to_millis(_get(current_order, "created_at"))
    if current_ms is None:
        return RapidResult(False)
    current_id = _get(current_order, "id")
    current_id = None if current_id is None else str(current_id)

    nearby = 0
    for o in rows:
        if o.id is not None and o.id == current_id:
            continue
        ts = to_millis(o.created_at)
        if ts is not None and abs(current_ms - ts) < RAPID_WINDOW_MS:
            nearby += 1

    if nearby > 0:
        return RapidResult(True, f"{nearby} other order(s) placed within 1 hour")
    return RapidResult(False)


def check_cancellation_rate(user_orders: Iterable[Any]) -> CancellationResult:
    rows = as_history(user_orders)
    if len(rows) < MIN_HISTORY:
        return CancellationResult(False)

    cancelled = sum(1 for o in rows if o.status in CANCELLED_STATUSES)
    rate = cancelled / len(rows)
    if rate > MAX_CANCEL_RATE:
        return CancellationResult(
            True, rate,
            f"{percent(rate)}% of orders cancelled/rejected ({cancelled}/{len(rows)})",
        )
    return CancellationResult(False, rate)
