import random
from datetime import datetime, timedelta

import pytest

from core.view_growth import compute_increment, increment_bounds, last_touched, time_factor
from models import Resource

NOW = datetime(2026, 10, 18, 12, 0, 0)


@pytest.mark.parametrize("hours", [0, 0.5, 1, 6, 12, 23.9, 24, 48, 1000])
def test_increment_always_within_10_and_100(hours):
    rng = random.Random(hours)
    for _ in range(200):
        inc = compute_increment(NOW - timedelta(hours=hours), NOW, rng)
        assert 10 <= inc <= 100


def test_bounds_grow_with_idle_time_then_saturate():
    previous = (0, 0)
    for hours in range(0, 25):
        lo, hi = increment_bounds(time_factor(NOW - timedelta(hours=hours), NOW))
        assert lo >= previous[0] and hi >= previous[1]
        previous = (lo, hi)
    assert increment_bounds(time_factor(NOW - timedelta(hours=24), NOW)) == (80, 100)
    assert increment_bounds(time_factor(NOW - timedelta(hours=240), NOW)) == (80, 100)


def test_fresh_update_gives_small_increment():
    assert increment_bounds(time_factor(NOW, NOW)) == (10, 20)


def test_future_timestamp_is_treated_as_zero_hours():
    assert time_factor(NOW + timedelta(hours=5), NOW) == 0.0


def test_last_touched_falls_back_to_created_at():
    res = Resource(unique_id="x", created_at=NOW, updated_at=None)
    assert last_touched(res) == NOW


def test_detail_of_stale_resource_adds_80_to_100_views(app, client, auth_headers, make_resource):
    two_days_ago = datetime.now() - timedelta(hours=48)
    uid = make_resource(views=5, created_at=two_days_ago, updated_at=two_days_ago)

    resp = client.get(f"/api/resource/{uid}", headers=auth_headers)
    assert resp.status_code == 200

    with app.app_context():
        res = Resource.query.filter_by(unique_id=uid).one()
        assert 80 <= res.views - 5 <= 100
        assert datetime.now() - res.updated_at < timedelta(minutes=1)


def test_detail_of_fresh_resource_adds_10_to_20_views(app, client, auth_headers, make_resource):
    just_now = datetime.now() - timedelta(seconds=1)
    uid = make_resource(views=0, created_at=just_now, updated_at=just_now)

    client.get(f"/api/resource/{uid}", headers=auth_headers)

    with app.app_context():
        assert 10 <= Resource.query.filter_by(unique_id=uid).one().views <= 20


def test_repeated_fetches_use_refreshed_baseline(app, client, auth_headers, make_resource):
    long_ago = datetime.now() - timedelta(days=3)
    uid = make_resource(views=0, created_at=long_ago, updated_at=long_ago)

    client.get(f"/api/resource/{uid}", headers=auth_headers)
    with app.app_context():
        first = Resource.query.filter_by(unique_id=uid).one().views

    client.get(f"/api/resource/{uid}", headers=auth_headers)
    with app.app_context():
        second = Resource.query.filter_by(unique_id=uid).one().views

    assert 80 <= first <= 100
    assert 10 <= second - first <= 20
