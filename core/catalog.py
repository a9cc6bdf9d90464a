"""目录查询门面：把存储层的读写组合成各个接口需要的结果。

读路径的降级规则：
- 随机推荐 / 热门资源 / 资源列表：存储异常时返回空结果（记 warning），不让页面 500
- 分类列表 / 资源详情：结构上必须有结果，存储异常转成 RepositoryError（500）
- 友链读写：存储异常转成 RepositoryError
"""

from __future__ import annotations

import logging
import random
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError

from core import pagination
from core.errors import ConflictError, NotFound, RepositoryError
from core.friend_links import DISPLAY_LIMIT, is_duplicate_url, rank_friend_links
from core.schemas import (
    CategoryEntry,
    CategoryPage,
    FriendLinkList,
    FriendLinkOut,
    FriendLinkUpsert,
    HotResource,
    HotResourceList,
    HotTerm,
    LinkEntry,
    ResourceDetail,
    ResourceItem,
    ResourceItemList,
    ResourcePage,
    SearchResult,
)
from core.session import commit_or_rollback
from core.view_growth import ViewGrowthEstimator

ALL_ALIAS = "all"
SORT_HOT = "hot"

DEFAULT_CATEGORY_PAGE_SIZE = 100
DEFAULT_ITEM_LIMIT = 24
DEFAULT_PER_PAGE = 10
DEFAULT_RANDOM_SIZE = 6
DEFAULT_HOT_LIMIT = 10
SEARCH_LIMIT = 50

logger = logging.getLogger(__name__)


class CatalogService:
    """目录查询门面"""

    def __init__(self, db, models, *, rng: Optional[random.Random] = None):
        """初始化

        Args:
            db: SQLAlchemy 实例
            models: 提供 Category/HotSearchItem/Resource/ResourceLink/FriendLink 属性的对象（通常是 models 模块）
            rng: 浏览量增量使用的随机数发生器（测试可注入固定种子）
        """
        self.db = db
        self.Category = models.Category
        self.HotSearchItem = models.HotSearchItem
        self.Resource = models.Resource
        self.ResourceLink = models.ResourceLink
        self.FriendLink = models.FriendLink
        self.views = ViewGrowthEstimator(db, self.Resource, rng=rng)

    # ------------------------------------------------------------------
    # 过滤条件
    # ------------------------------------------------------------------

    def _keyword_filter(self, query, keyword: str):
        """标题/简介/原文三列子串匹配（LIKE 通配符按字面量处理）。"""
        keyword = (keyword or "").strip()
        if not keyword:
            return query
        return query.filter(
            or_(
                self.Resource.title.contains(keyword, autoescape=True),
                self.Resource.description.contains(keyword, autoescape=True),
                self.Resource.original_content.contains(keyword, autoescape=True),
            )
        )

    def _category_filter(self, query, category: Optional[str]):
        category = (category or "").strip()
        if not category or category == ALL_ALIAS:
            return query
        return query.filter(self.Resource.category == category)

    def _random_order(self):
        dialect = self.db.session.get_bind().dialect.name
        return func.rand() if dialect == "mysql" else func.random()

    # ------------------------------------------------------------------
    # 序列化
    # ------------------------------------------------------------------

    @staticmethod
    def _resource_item(res) -> ResourceItem:
        return ResourceItem(
            id=res.id,
            unique_id=res.unique_id,
            channel=res.channel or "",
            title=res.title or "",
            description=res.description or "",
            tags=res.tags_list,
            image_url=res.image_url or "",
            original_content=res.original_content or "",
            quality=res.quality or "",
            year=res.year or "",
            views=res.views or 0,
            status=res.status or 0,
            category=res.category or "",
            created_at=res.created_at,
        )

    @staticmethod
    def _friend_link(link) -> FriendLinkOut:
        return FriendLinkOut(
            id=link.id,
            name=link.name or "",
            url=link.url or "",
            icon=link.icon or "",
            description=link.description or "",
            sort=link.sort or 0,
            status=link.status or 0,
            category=link.category or "",
            created_at=link.created_at,
            updated_at=link.updated_at,
        )

    @staticmethod
    def group_links(links) -> Dict[str, List[LinkEntry]]:
        """按网盘类型分组，组内保持链接 id 顺序。"""
        merged: Dict[str, List[LinkEntry]] = {}
        for link in sorted(links, key=lambda l: l.id or 0):
            merged.setdefault(link.cloud_type or "", []).append(
                LinkEntry(
                    url=link.url or "",
                    password=link.password or "",
                    note=link.note or "",
                    source=link.source or "",
                )
            )
        return merged

    # ------------------------------------------------------------------
    # 分类 + 热搜词
    # ------------------------------------------------------------------

    def list_categories(
        self,
        *,
        page: int,
        page_size: int,
        item_limit: int,
        today_start,
        keyword: Optional[str] = None,
    ) -> CategoryPage:
        """分页列出分类；每个分类附带热搜词（按分数倒序）和今日/关键词计数。"""
        window_start = pagination.parse_window_start(today_start)
        keyword = (keyword or "").strip()
        page = max(1, page)

        try:
            total = self.Category.query.count()
            categories = (
                self.Category.query.order_by(self.Category.id.asc())
                .offset(pagination.page_offset(page, page_size))
                .limit(page_size)
                .all()
            )

            entries = []
            for cat in categories:
                items = (
                    self.HotSearchItem.query.filter_by(category_id=cat.id)
                    .order_by(self.HotSearchItem.score.desc(), self.HotSearchItem.id.asc())
                    .limit(item_limit)
                    .all()
                )
                scoped = self._category_filter(self.Resource.query, cat.alias)
                if keyword:
                    today_count = self._keyword_filter(scoped, keyword).count()
                else:
                    today_count = pagination.count_since(scoped, self.Resource.created_at, window_start)

                entries.append(
                    CategoryEntry(
                        id=cat.id,
                        name=cat.name,
                        alias=cat.alias,
                        icon=cat.icon or "",
                        items=[HotTerm(term=i.term, score=i.score) for i in items],
                        today_count=today_count,
                    )
                )
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            logger.exception("Failed to fetch categories")
            raise RepositoryError("Failed to fetch categories") from exc

        return CategoryPage(
            categories=entries,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=pagination.page_count(total, page_size),
        )

    # ------------------------------------------------------------------
    # 资源列表 / 详情 / 随机 / 热门
    # ------------------------------------------------------------------

    def list_resources(
        self,
        *,
        page: int,
        per_page: int,
        today_start,
        category: Optional[str] = None,
        keyword: Optional[str] = None,
        sort: str = "latest",
    ) -> ResourcePage:
        """资源分页列表：分类精确匹配 + 关键词子串匹配；hot 按浏览量，否则按创建时间倒序。"""
        window_start = pagination.parse_window_start(today_start)
        page = max(1, page)

        query = self._keyword_filter(self._category_filter(self.Resource.query, category), keyword)
        if sort == SORT_HOT:
            query = query.order_by(self.Resource.views.desc(), self.Resource.id.desc())
        else:
            query = query.order_by(self.Resource.created_at.desc(), self.Resource.id.desc())

        try:
            total = query.order_by(None).count()
            today_total = pagination.count_since(self.Resource.query, self.Resource.created_at, window_start)
            rows = query.offset(pagination.page_offset(page, per_page)).limit(per_page).all()
        except SQLAlchemyError:
            self.db.session.rollback()
            logger.warning("Resource listing degraded to empty result", exc_info=True)
            return ResourcePage(items=[], total=0, today_total=0, current_page=page, last_page=0, per_page=per_page)

        return ResourcePage(
            items=[self._resource_item(r) for r in rows],
            total=total,
            today_total=today_total,
            current_page=page,
            last_page=pagination.page_count(total, per_page),
            per_page=per_page,
        )

    def resource_detail(self, unique_id: str, *, now: Optional[datetime] = None) -> ResourceDetail:
        """单个资源详情；找不到抛 NotFound。命中后按距上次更新的时长给浏览量加随机增量。"""
        try:
            res = self.Resource.query.filter_by(unique_id=unique_id).first()
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            logger.exception("Failed to fetch resource %s", unique_id)
            raise RepositoryError("Failed to fetch resource") from exc
        if res is None:
            raise NotFound("Resource not found")

        links = list(res.links)
        detail = ResourceDetail(
            id=res.id,
            unique_id=res.unique_id,
            title=res.title or "",
            description=res.description or "",
            tags=res.tags_list,
            image_url=res.image_url or "",
            original_content=res.original_content or "",
            quality=res.quality or "",
            year=res.year or "",
            views=res.views or 0,
            category=res.category or "",
            created_at=res.created_at,
            total_links=len(links),
            merged_by_type=self.group_links(links),
        )

        try:
            self.views.bump(res, now=now)
        except SQLAlchemyError:
            self.db.session.rollback()
            logger.warning("View counter update failed for %s", unique_id, exc_info=True)

        return detail

    def random_sample(self, *, page_size: int, since=None) -> ResourceItemList:
        """随机取 page_size 条资源，可选只取某时间点之后创建的。"""
        query = self.Resource.query
        since_dt = pagination.parse_optional_since(since)
        if since_dt is not None:
            query = query.filter(self.Resource.created_at >= since_dt)
        try:
            rows = query.order_by(self._random_order()).limit(page_size).all()
        except SQLAlchemyError:
            self.db.session.rollback()
            logger.warning("Random sample degraded to empty result", exc_info=True)
            return ResourceItemList(items=[])
        return ResourceItemList(items=[self._resource_item(r) for r in rows])

    def hot_resources(self, *, limit: int) -> HotResourceList:
        """全站浏览量最高的资源。"""
        try:
            rows = self.Resource.query.order_by(self.Resource.views.desc(), self.Resource.id.asc()).limit(limit).all()
        except SQLAlchemyError:
            self.db.session.rollback()
            logger.warning("Hot resources degraded to empty result", exc_info=True)
            return HotResourceList(items=[])
        return HotResourceList(
            items=[
                HotResource(
                    id=r.id,
                    unique_id=r.unique_id,
                    title=r.title or "",
                    views=r.views or 0,
                    category=r.category or "",
                )
                for r in rows
            ]
        )

    # ------------------------------------------------------------------
    # 搜索
    # ------------------------------------------------------------------

    def search(self, keyword: str, *, limit: int = SEARCH_LIMIT) -> List[SearchResult]:
        keyword = (keyword or "").strip()
        if not keyword:
            return []
        try:
            rows = (
                self._keyword_filter(self.Resource.query, keyword)
                .order_by(self.Resource.views.desc(), self.Resource.id.asc())
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            logger.exception("Search failed for keyword %r", keyword)
            raise RepositoryError("Search failed") from exc
        return [
            SearchResult(
                unique_id=r.unique_id,
                channel=r.channel or "",
                title=r.title or "",
                content=r.description or "",
                category=r.category or "",
                datetime=r.created_at,
            )
            for r in rows
        ]

    # ------------------------------------------------------------------
    # 友情链接
    # ------------------------------------------------------------------

    def friend_links(self, *, referer: Optional[str], show_all: bool = False, limit: int = DISPLAY_LIMIT) -> FriendLinkList:
        """启用中的友链（sort, id 升序），Referer 命中的置顶，默认最多展示 limit 条。"""
        try:
            links = (
                self.FriendLink.query.filter_by(status=1)
                .order_by(self.FriendLink.sort.asc(), self.FriendLink.id.asc())
                .all()
            )
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            logger.exception("Failed to fetch friend links")
            raise RepositoryError("Failed to fetch friend links") from exc

        ranked = rank_friend_links(links, referer, show_all=show_all, limit=limit)
        return FriendLinkList(items=[self._friend_link(l) for l in ranked])

    def upsert_friend_link(self, payload: FriendLinkUpsert) -> FriendLinkOut:
        """id > 0 时原地更新（只写请求里出现的字段）；否则先按规范化网址查重（含停用的），再新增。"""
        fields = payload.model_dump(exclude={"id"})

        try:
            if payload.id > 0:
                link = self.db.session.get(self.FriendLink, payload.id)
                if link is None:
                    raise NotFound("Friend link not found")
                for key in payload.model_fields_set - {"id"}:
                    setattr(link, key, fields[key])
            else:
                existing = [row.url for row in self.db.session.query(self.FriendLink.url).all()]
                if is_duplicate_url(payload.url, existing):
                    raise ConflictError("该网址已存在或已在申请中，请勿重复提交")
                link = self.FriendLink(**fields)
                self.db.session.add(link)
            commit_or_rollback(self.db.session)
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            logger.exception("Failed to save friend link %s", payload.url)
            action = "update" if payload.id > 0 else "create"
            raise RepositoryError(f"Failed to {action} friend link") from exc

        return self._friend_link(link)
