"""热搜词统计：按搜索结果的分类多数票给关键词归类，并给 (分类, 关键词) 计分 +1。

这是尽力而为的统计，任何存储异常都只记日志，不能影响搜索请求本身。
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError

from core.session import commit_or_rollback

FALLBACK_ALIAS = "all"

logger = logging.getLogger(__name__)


def tally_categories(categories: Iterable[Optional[str]]) -> Counter:
    """统计分类出现次数；Counter 保留首次出现的顺序。空分类不计。"""
    counts: Counter = Counter()
    for alias in categories:
        if alias:
            counts[alias] += 1
    return counts


def pick_majority(counts: Counter, default: str = FALLBACK_ALIAS) -> str:
    """票数最多的分类；平票时取先出现的那个。"""
    target, best = default, 0
    for alias, count in counts.items():
        if count > best:
            target, best = alias, count
    return target


class HotTermTracker:
    """热搜词计分器"""

    def __init__(self, db, category_model, item_model):
        """
        Args:
            db: SQLAlchemy 实例
            category_model: Category ORM 模型类
            item_model: HotSearchItem ORM 模型类
        """
        self.db = db
        self.Category = category_model
        self.Item = item_model

    def record(self, keyword: str, result_categories: Iterable[Optional[str]]) -> None:
        """记录一次搜索；关键词为空或没有结果时什么都不做。异常吞掉只记日志。"""
        keyword = (keyword or "").strip()
        result_categories = list(result_categories or [])
        if not keyword or not result_categories:
            return
        try:
            self._record(keyword, result_categories)
        except SQLAlchemyError:
            self.db.session.rollback()
            logger.exception("Hot term tracking failed for keyword %r", keyword)

    def _record(self, keyword: str, result_categories: list) -> None:
        target_alias = pick_majority(tally_categories(result_categories))

        category = self._find_category(target_alias)
        if category is None and target_alias != FALLBACK_ALIAS:
            category = self._find_category(FALLBACK_ALIAS)
        if category is None:
            logger.warning("Category %r and fallback %r missing; skip hot term %r", target_alias, FALLBACK_ALIAS, keyword)
            return

        item = self.Item.query.filter_by(category_id=category.id, term=keyword).first()
        if item is None:
            self.db.session.add(self.Item(category_id=category.id, term=keyword, score=1))
        else:
            self.Item.query.filter_by(id=item.id).update(
                {self.Item.score: self.Item.score + 1}, synchronize_session=False
            )
        commit_or_rollback(self.db.session)

    def _find_category(self, alias: str):
        return self.Category.query.filter_by(alias=alias).first()
