"""浏览量增长估算

每次打开资源详情都会给浏览量加一个随机增量，距离上次更新越久，增量越大、随机区间越宽：

    time_factor = min(1, 距上次更新小时数 / 24)
    min_inc = 10 + floor(70 * time_factor)    # 10 -> 80
    max_inc = 20 + floor(80 * time_factor)    # 20 -> 100
    increment ∈ [min_inc, max_inc]

更新后的 updated_at 会成为下一次计算的基准。
"""

from __future__ import annotations

import math
import random
from datetime import datetime
from typing import Optional

from sqlalchemy import update

from core.session import commit_or_rollback

SATURATION_HOURS = 24.0

MIN_BASE, MIN_SPAN = 10, 70
MAX_BASE, MAX_SPAN = 20, 80


def time_factor(last_update: Optional[datetime], now: datetime) -> float:
    if last_update is None:
        return 1.0
    hours = max(0.0, (now - last_update).total_seconds() / 3600.0)
    return min(1.0, hours / SATURATION_HOURS)


def increment_bounds(factor: float) -> tuple[int, int]:
    factor = min(1.0, max(0.0, factor))
    return MIN_BASE + math.floor(MIN_SPAN * factor), MAX_BASE + math.floor(MAX_SPAN * factor)


def compute_increment(
    last_update: Optional[datetime],
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> int:
    """根据上次更新时间计算本次浏览量增量，结果始终落在 [10, 100]。"""
    now = now or datetime.now()
    rng = rng or random
    lo, hi = increment_bounds(time_factor(last_update, now))
    if hi > lo:
        return lo + rng.randint(0, hi - lo)
    return lo


def last_touched(resource) -> Optional[datetime]:
    """updated_at 为空时退回 created_at。"""
    return getattr(resource, "updated_at", None) or getattr(resource, "created_at", None)


class ViewGrowthEstimator:
    """计算增量并用一条原子 UPDATE 写回 views/updated_at。"""

    def __init__(self, db, resource_model, rng: Optional[random.Random] = None):
        self.db = db
        self.Resource = resource_model
        self.rng = rng or random.Random()

    def bump(self, resource, now: Optional[datetime] = None) -> int:
        now = now or datetime.now()
        increment = compute_increment(last_touched(resource), now, self.rng)
        self.db.session.execute(
            update(self.Resource)
            .where(self.Resource.id == resource.id)
            .values(views=self.Resource.views + increment, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        commit_or_rollback(self.db.session)
        return increment
