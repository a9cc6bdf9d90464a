"""分页与“今日”窗口计数的公共工具。

- 页数一律向上取整：total_pages = ceil(total / page_size)
- “今日”窗口由调用方传入参考时间点（Unix 秒），统计 created_at >= 该时间点的记录数
"""

from __future__ import annotations

from datetime import datetime

from core.errors import ValidationError


def page_count(total: int, page_size: int) -> int:
    """向上取整的总页数；total=0 时为 0。"""
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    total = max(0, int(total))
    return (total + page_size - 1) // page_size


def page_offset(page: int, page_size: int) -> int:
    return (max(1, int(page)) - 1) * page_size


def last_page_size(total: int, page_size: int) -> int:
    """最后一页的条数（1..page_size）；没有数据时为 0。"""
    pages = page_count(total, page_size)
    if pages == 0:
        return 0
    return total - page_size * (pages - 1)


def positive_or_default(value, default: int) -> int:
    """解析正整数参数：缺失/非法/小于 1 时回退默认值。"""
    try:
        value = int(value)
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


def parse_window_start(value) -> datetime:
    """解析必填的“今日”参考时间点（Unix 秒）；缺失或为 0 时报参数错误。"""
    try:
        ts = int(str(value).strip())
    except (TypeError, ValueError):
        ts = 0
    if ts == 0:
        raise ValidationError("todayStart parameter is required")
    try:
        return datetime.fromtimestamp(ts)
    except (OverflowError, OSError, ValueError) as exc:
        raise ValidationError("todayStart parameter is out of range") from exc


def parse_optional_since(value) -> datetime | None:
    """可选的起始时间（Unix 秒）；解析不了就当没传。"""
    if value in (None, ""):
        return None
    try:
        return datetime.fromtimestamp(int(str(value).strip()))
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def count_since(query, column, since: datetime) -> int:
    """在任意过滤条件之上叠加 column >= since 后计数。"""
    return query.filter(column >= since).count()
