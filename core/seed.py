"""启动时的种子数据：分类按 alias 幂等写入（名称/图标每次刷新），友链只在空表时写入。"""

from __future__ import annotations

from core.session import commit_or_rollback

# (name, alias, icon)
DEFAULT_CATEGORIES = [
    ("全部资源", "all", "all"),
    ("电影", "movie", "movie"),
    ("剧集", "series", "series"),
    ("动漫", "anime", "anime"),
    ("综艺", "play", "play"),
    ("电子书", "ebook", "ebook"),
    ("游戏", "game", "game"),
    ("软件", "software", "software"),
    ("教程", "course", "course"),
    ("文档", "document", "document"),
    ("音乐", "music", "music"),
    ("源码", "code", "code"),
    ("福利", "welfare", "welfare"),
    ("其他", "other", "other"),
]

DEFAULT_FRIEND_LINKS = [
    {"name": "盘搜", "url": "https://pansou.cn", "description": "极简单的网盘搜索", "sort": 1, "category": "搜索"},
    {"name": "苏拉搜索", "url": "https://soula.io", "description": "专业网盘搜索引擎", "sort": 2, "category": "搜索"},
]


def seed_categories(db, category_model, categories=DEFAULT_CATEGORIES) -> int:
    """按 alias upsert 分类；返回新建条数。"""
    created = 0
    for name, alias, icon in categories:
        row = category_model.query.filter_by(alias=alias).first()
        if row is None:
            db.session.add(category_model(name=name, alias=alias, icon=icon))
            created += 1
        else:
            row.name = name
            row.icon = icon
    commit_or_rollback(db.session)
    return created


def seed_friend_links(db, friend_link_model, links=DEFAULT_FRIEND_LINKS) -> int:
    if friend_link_model.query.count() > 0:
        return 0
    for link in links:
        db.session.add(friend_link_model(status=1, **link))
    commit_or_rollback(db.session)
    return len(links)
