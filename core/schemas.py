"""
目录接口的请求/响应模型

每个接口一个明确的响应结构，时间统一输出为 Unix 毫秒（未设置为 0）。
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


# 字段名叫 datetime 时类体里会遮住同名类型，注解统一用这个别名
Timestamp = Optional[datetime]


def to_millis(value: Optional[datetime]) -> int:
    if value is None:
        return 0
    try:
        ms = int(value.timestamp() * 1000)
    except (OverflowError, OSError, ValueError):
        return 0
    return max(ms, 0)


class TimestampedModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "updated_at", "datetime", check_fields=False)
    def _serialize_time(self, value: Optional[datetime]) -> int:
        return to_millis(value)


# ---------------------------------------------------------------------------
# 分类 + 热搜词
# ---------------------------------------------------------------------------


class HotTerm(BaseModel):
    term: str
    score: int


class CategoryEntry(BaseModel):
    id: int
    name: str
    alias: str
    icon: str = ""
    items: List[HotTerm] = Field(default_factory=list)
    today_count: int = 0


class CategoryPage(BaseModel):
    categories: List[CategoryEntry] = Field(default_factory=list)
    total: int
    page: int
    page_size: int
    total_pages: int


# ---------------------------------------------------------------------------
# 资源
# ---------------------------------------------------------------------------


class ResourceItem(TimestampedModel):
    id: int
    unique_id: str
    channel: str = ""
    title: str = ""
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    image_url: str = ""
    original_content: str = ""
    quality: str = ""
    year: str = ""
    views: int = 0
    status: int = 0
    category: str = ""
    created_at: Optional[datetime] = None


class ResourcePage(BaseModel):
    items: List[ResourceItem] = Field(default_factory=list)
    total: int
    today_total: int
    current_page: int
    last_page: int
    per_page: int


class ResourceItemList(BaseModel):
    items: List[ResourceItem] = Field(default_factory=list)


class HotResource(BaseModel):
    id: int
    unique_id: str
    title: str = ""
    views: int = 0
    category: str = ""


class HotResourceList(BaseModel):
    items: List[HotResource] = Field(default_factory=list)


class LinkEntry(BaseModel):
    url: str
    password: str = ""
    note: str = ""
    source: str = ""


class ResourceDetail(TimestampedModel):
    id: int
    unique_id: str
    title: str = ""
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    image_url: str = ""
    original_content: str = ""
    quality: str = ""
    year: str = ""
    views: int = 0
    category: str = ""
    created_at: Optional[datetime] = None
    total_links: int = 0
    merged_by_type: Dict[str, List[LinkEntry]] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# 搜索
# ---------------------------------------------------------------------------


class SearchResult(TimestampedModel):
    unique_id: str
    channel: str = ""
    title: str = ""
    content: str = ""
    category: str = ""
    datetime: Timestamp = None


class SearchRequest(BaseModel):
    kw: str = Field(..., min_length=1, description="搜索关键词")
    ext: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("kw")
    @classmethod
    def _strip_kw(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("kw must not be blank")
        return value


class SearchResponse(BaseModel):
    total: int
    results: List[SearchResult] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# 友情链接
# ---------------------------------------------------------------------------


class FriendLinkOut(TimestampedModel):
    id: int
    name: str
    url: str
    icon: str = ""
    description: str = ""
    sort: int = 0
    status: int = 0
    category: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FriendLinkList(BaseModel):
    items: List[FriendLinkOut] = Field(default_factory=list)


class FriendLinkUpsert(BaseModel):
    id: int = 0
    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    icon: str = ""
    description: str = ""
    sort: int = 0
    status: int = 0
