import pathlib
import random
import sys
from datetime import datetime

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app import create_app
from config import TestConfig
from models import FriendLink, Resource, ResourceLink, db, encode_tags


@pytest.fixture
def app():
    app = create_app(TestConfig, rng=random.Random(20240101))
    yield app
    app.extensions["background_tasks"].shutdown()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    return {"X-Token": app.config["SOULA_TOKEN"]}


@pytest.fixture
def make_resource(app):
    """插入一条资源（可带链接），返回其 unique_id。"""
    counter = {"n": 0}

    def _make(*, title="资源", category="movie", views=0, created_at=None, updated_at=None, tags=None, links=(), **extra):
        counter["n"] += 1
        unique_id = extra.pop("unique_id", f"uid-{counter['n']}")
        now = datetime.now()
        with app.app_context():
            res = Resource(
                unique_id=unique_id,
                channel=extra.pop("channel", "tgsearchers"),
                title=title,
                description=extra.pop("description", ""),
                original_content=extra.pop("original_content", ""),
                tags=tags if isinstance(tags, str) or tags is None else encode_tags(tags),
                category=category,
                views=views,
                created_at=created_at or now,
                updated_at=updated_at or created_at or now,
                **extra,
            )
            db.session.add(res)
            db.session.flush()
            for link in links:
                db.session.add(ResourceLink(resource_id=res.id, **link))
            db.session.commit()
        return unique_id

    return _make


@pytest.fixture
def make_friend_link(app):
    def _make(name, url, *, sort=0, status=1, category="搜索", **extra):
        with app.app_context():
            link = FriendLink(name=name, url=url, sort=sort, status=status, category=category, **extra)
            db.session.add(link)
            db.session.commit()
            return link.id

    return _make
