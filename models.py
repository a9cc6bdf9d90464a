"""数据模型定义：分类、热搜词、采集资源、资源链接与友情链接的 SQLAlchemy ORM 类。"""

import json
from datetime import datetime

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


class TimestampMixin:
    """所有表共用的 created_at / updated_at（应用侧本地时间）。"""

    created_at = db.Column(db.DateTime, default=datetime.now, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)


class Category(TimestampMixin, db.Model):
    """热搜分类：alias 是稳定的业务键（movie/series/...），启动时按 alias 幂等写入。"""

    __tablename__ = "categories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    alias = db.Column(db.String(64), unique=True, index=True, nullable=False)
    icon = db.Column(db.String(64), default="")

    items = db.relationship("HotSearchItem", backref="category", lazy="dynamic")


class HotSearchItem(TimestampMixin, db.Model):
    """热搜词：(category_id, term) 唯一，由“先查后写”保证，而非数据库约束。"""

    __tablename__ = "hot_search_items"

    id = db.Column(db.Integer, primary_key=True)
    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"), index=True, nullable=False)
    term = db.Column(db.String(255), nullable=False)
    score = db.Column(db.Integer, default=0, nullable=False)


class Resource(TimestampMixin, db.Model):
    """采集资源：一条目录记录，聚合一个或多个网盘链接。"""

    __tablename__ = "collected_resources"

    id = db.Column(db.Integer, primary_key=True)
    unique_id = db.Column(db.String(128), unique=True, index=True, nullable=False)
    channel = db.Column(db.String(128), default="")
    title = db.Column(db.String(512), default="")
    description = db.Column(db.Text)
    original_content = db.Column(db.Text)
    tags = db.Column(db.Text)  # JSON 数组文本，例如 ["4K","科幻"]
    image_url = db.Column(db.String(1024), default="")
    category = db.Column(db.String(64), index=True, default="")
    quality = db.Column(db.String(64), default="")
    year = db.Column(db.String(16), default="")
    views = db.Column(db.Integer, default=0, nullable=False)
    status = db.Column(db.Integer, default=0)

    links = db.relationship("ResourceLink", backref="resource", lazy="selectin")

    @property
    def tags_list(self) -> list[str]:
        return decode_tags(self.tags)


class ResourceLink(TimestampMixin, db.Model):
    """资源下的单条网盘链接，展示时按 cloud_type 分组。"""

    __tablename__ = "resource_links"

    id = db.Column(db.Integer, primary_key=True)
    resource_id = db.Column(db.Integer, db.ForeignKey("collected_resources.id"), index=True, nullable=False)
    cloud_type = db.Column(db.String(32), index=True)  # alipan/quark/baidu/uc/xunlei/115/tianyi/pikpak ...
    url = db.Column(db.String(1024), nullable=False)
    password = db.Column(db.String(64), default="")
    note = db.Column(db.String(512), default="")
    source_time = db.Column("datetime", db.String(64), default="")
    source = db.Column(db.String(128), default="")
    image = db.Column(db.Text)
    status = db.Column(db.Integer, default=1)


class FriendLink(TimestampMixin, db.Model):
    """友情链接：url 的唯一性在应用层按规范化后比较，不依赖数据库约束。"""

    __tablename__ = "friend_links"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    url = db.Column(db.String(512), nullable=False)
    icon = db.Column(db.String(512), default="")
    description = db.Column(db.String(512), default="")
    sort = db.Column(db.Integer, default=0)
    status = db.Column(db.Integer, default=1)  # 1 启用 / 0 停用
    category = db.Column(db.String(64), default="")


def decode_tags(raw) -> list[str]:
    """存储层 JSON 文本 -> 标签列表；解析失败一律返回空列表。"""
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        return []
    if not isinstance(value, list):
        return []
    return [str(t) for t in value if t is not None]


def encode_tags(tags) -> str:
    return json.dumps([str(t) for t in (tags or [])], ensure_ascii=False)
