"""Soula 目录插件：持有目录门面、热搜统计器和后台任务池，负责建表/种子数据和路由注册。"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from core.catalog import CatalogService
from core.hot_terms import HotTermTracker
from core.registry import CatalogPlugin
from core.schemas import SearchResult
from core.seed import seed_categories, seed_friend_links
from core.tasks import BackgroundTasks

logger = logging.getLogger(__name__)


class SoulaPlugin(CatalogPlugin):
    name = "soula"

    def __init__(self, app, db, models, *, tasks: BackgroundTasks, rng=None):
        super().__init__()
        self.app = app
        self.db = db
        self.models = models
        self.tasks = tasks
        self.catalog = CatalogService(db, models, rng=rng)
        self.tracker = HotTermTracker(db, models.Category, models.HotSearchItem)
        self.search_limit = int(app.config.get("SEARCH_RESULT_LIMIT", 50))
        self.friend_link_limit = int(app.config.get("FRIEND_LINK_DISPLAY_LIMIT", 8))

    def initialize(self) -> None:
        with self.app.app_context():
            self.db.create_all()
            # 种子数据失败不阻止启动，只告警
            try:
                created = seed_categories(self.db, self.models.Category)
                logger.info("Seeded categories (%s new)", created)
            except SQLAlchemyError as exc:
                self.db.session.rollback()
                logger.warning("Seeding categories failed: %s", exc)
            try:
                seed_friend_links(self.db, self.models.FriendLink)
            except SQLAlchemyError as exc:
                self.db.session.rollback()
                logger.warning("Seeding friend links failed: %s", exc)

    def search(self, keyword: str, ext: Optional[Dict[str, Any]] = None) -> List[SearchResult]:
        return self.catalog.search(keyword, limit=self.search_limit)

    def record_search(self, keyword: str, results: List[SearchResult]) -> None:
        """把热搜统计丢给后台线程池，不阻塞当前请求。"""
        if not keyword or not results:
            return
        categories = [r.category for r in results]
        self.tasks.submit(self.tracker.record, keyword, categories)

    def register_routes(self, app) -> None:
        from app_routes import catalog_bp

        app.register_blueprint(catalog_bp)
        logger.info("Catalog routes registered under %s with token gate", catalog_bp.url_prefix)


def get_plugin(app) -> SoulaPlugin:
    return app.extensions["soula"]
