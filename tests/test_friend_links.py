from types import SimpleNamespace

import pytest

from core.friend_links import is_duplicate_url, normalize_url, rank_friend_links
from models import FriendLink, db


def _links(*urls):
    return [SimpleNamespace(name=f"L{i}", url=u) for i, u in enumerate(urls)]


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("https://Pansou.cn/", "pansou.cn"),
        ("http://pansou.cn", "pansou.cn"),
        ("//pansou.cn/", "pansou.cn"),
        ("pansou.cn", "pansou.cn"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_url(raw, expected):
    assert normalize_url(raw) == expected


def test_matching_link_moves_to_front_others_keep_order():
    links = _links("b.com", "c.com", "pansou.cn", "d.com")
    ranked = rank_friend_links(links, "https://pansou.cn/page/x")
    assert [l.url for l in ranked] == ["pansou.cn", "b.com", "c.com", "d.com"]


def test_first_candidate_in_sort_order_wins():
    links = _links("b.com", "pansou.cn", "pansou.cn/page")
    ranked = rank_friend_links(links, "https://pansou.cn/page/x")
    assert ranked[0].url == "pansou.cn"


def test_no_referer_or_no_match_keeps_default_order():
    links = _links("a.com", "b.com")
    assert rank_friend_links(links, "") == links
    assert rank_friend_links(links, "https://other.org/") == links


def test_truncates_to_eight_unless_all_requested():
    links = _links(*[f"site{i}.com" for i in range(12)])
    assert len(rank_friend_links(links, None)) == 8
    assert len(rank_friend_links(links, None, show_all=True)) == 12


def test_match_beyond_limit_is_still_promoted():
    links = _links(*[f"site{i}.com" for i in range(10)] + ["pansou.cn"])
    ranked = rank_friend_links(links, "http://pansou.cn/abc")
    assert len(ranked) == 8
    assert ranked[0].url == "pansou.cn"


def test_empty_link_set():
    assert rank_friend_links([], "https://pansou.cn") == []


def test_duplicate_detection_ignores_scheme_host_case_and_trailing_slash():
    assert is_duplicate_url("https://Soula.io/", ["http://soula.io"])
    assert not is_duplicate_url("https://soula.io/x", ["http://soula.io"])



def test_upper_case_scheme_is_not_stripped():
    assert normalize_url("HTTPS://Soula.io/") == "https://soula.io"
    assert not is_duplicate_url("HTTPS://soula.io", ["https://soula.io"])


# ---------------------------------------------------------------------------
# 接口
# ---------------------------------------------------------------------------


@pytest.fixture
def empty_links(app):
    with app.app_context():
        FriendLink.query.delete()
        db.session.commit()


def test_referer_promotes_matching_link(client, auth_headers, make_friend_link, empty_links):
    make_friend_link("B", "https://b-site.com", sort=1)
    make_friend_link("A", "pansou.cn", sort=2)

    resp = client.get(
        "/api/friend-links",
        headers={**auth_headers, "Referer": "https://pansou.cn/page/x"},
    )
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["code"] == 0
    assert [i["name"] for i in body["data"]["items"]] == ["A", "B"]


def test_disabled_links_are_hidden(client, auth_headers, make_friend_link, empty_links):
    make_friend_link("on", "https://on.com", status=1)
    make_friend_link("off", "https://off.com", status=0)

    items = client.get("/api/friend-links", headers=auth_headers).get_json()["data"]["items"]
    assert [i["name"] for i in items] == ["on"]


def test_all_flag_returns_unabridged_list(client, auth_headers, make_friend_link, empty_links):
    for i in range(10):
        make_friend_link(f"S{i}", f"https://s{i}.com", sort=i)

    assert len(client.get("/api/friend-links", headers=auth_headers).get_json()["data"]["items"]) == 8
    assert len(client.get("/api/friend-links?all=true", headers=auth_headers).get_json()["data"]["items"]) == 10


def test_create_friend_link(app, client, auth_headers):
    resp = client.post(
        "/api/friend-links",
        json={"name": "新站", "url": "https://new-site.com", "category": "工具", "icon": "https://new-site.com/i.png"},
        headers=auth_headers,
    )
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["data"]["id"] > 0
    assert body["data"]["icon"] == "https://new-site.com/i.png"
    assert body["data"]["status"] == 0


def test_duplicate_submission_is_rejected(app, client, auth_headers, make_friend_link):
    make_friend_link("disabled", "https://dup.example.com", status=0)
    with app.app_context():
        before = FriendLink.query.count()

    resp = client.post(
        "/api/friend-links",
        json={"name": "again", "url": "http://dup.example.com/", "category": "搜索"},
        headers=auth_headers,
    )
    assert resp.status_code == 400
    assert resp.get_json()["code"] == 400
    with app.app_context():
        assert FriendLink.query.count() == before


def test_update_existing_link_in_place(app, client, auth_headers, make_friend_link):
    link_id = make_friend_link("old", "https://old.com")

    resp = client.post(
        "/api/friend-links",
        json={"id": link_id, "name": "renamed", "url": "https://old.com", "category": "搜索", "status": 1, "sort": 9},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    with app.app_context():
        link = db.session.get(FriendLink, link_id)
        assert link.name == "renamed"
        assert link.sort == 9


def test_missing_required_fields_is_validation_error(client, auth_headers):
    resp = client.post("/api/friend-links", json={"name": "x"}, headers=auth_headers)
    assert resp.status_code == 400
    assert "url" in resp.get_json()["message"]


def test_partial_update_keeps_fields_not_sent(app, client, auth_headers, make_friend_link):
    link_id = make_friend_link("old", "https://keep.com", sort=5, status=1, icon="i.png", description="desc")

    resp = client.post(
        "/api/friend-links",
        json={"id": link_id, "name": "renamed", "url": "https://keep.com", "category": "搜索"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    with app.app_context():
        link = db.session.get(FriendLink, link_id)
        assert link.name == "renamed"
        assert (link.sort, link.status, link.icon, link.description) == (5, 1, "i.png", "desc")


def test_update_writes_explicit_zero_values(app, client, auth_headers, make_friend_link):
    link_id = make_friend_link("on", "https://off-soon.com", sort=3, status=1)

    client.post(
        "/api/friend-links",
        json={"id": link_id, "name": "on", "url": "https://off-soon.com", "category": "搜索", "status": 0},
        headers=auth_headers,
    )
    with app.app_context():
        link = db.session.get(FriendLink, link_id)
        assert link.status == 0
        assert link.sort == 3


def test_update_unknown_id_is_not_found(client, auth_headers):
    resp = client.post(
        "/api/friend-links",
        json={"id": 99999, "name": "x", "url": "https://x.com", "category": "搜索"},
        headers=auth_headers,
    )
    assert resp.status_code == 404
