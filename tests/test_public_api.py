from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from lunarcal.api.app import app
from lunarcal.api.public import _SharedConverter, get_shared_converter
from lunarcal.core.converter import LunarConverter

from conftest import CountingSource, LINES_2020, file_text


@pytest.fixture
def client(source):
    shared = _SharedConverter(LunarConverter(source))
    app.dependency_overrides[get_shared_converter] = lambda: shared
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_solar_to_lunar(client):
    res = client.get("/api/v1/solar-to-lunar", params={"date": "2020-05-24"})
    assert res.status_code == 200
    body = res.json()
    assert body["solar"] == {"year": 2020, "month": 5, "day": 24}
    assert body["lunar"] == {"year": 2020, "month": 4, "day": 2}
    assert body["is_leap_month"] is True
    assert body["label"] == "閏四月"
    assert body["weekday"] == 0
    assert body["weekday_raw"] == "星期日"
    assert body["solar_term"] is None


def test_lunar_to_solar_cross_year(client):
    res = client.get("/api/v1/lunar-to-solar", params={"year": 2020, "month": 12, "day": 8})
    assert res.status_code == 200
    body = res.json()
    assert body["solar"] == {"year": 2021, "month": 1, "day": 20}
    assert body["solar_term"] == "大寒"
    assert body["label"] == "十二月"


def test_solar_terms(client):
    res = client.get("/api/v1/solar-terms", params={"year": 2020})
    assert res.status_code == 200
    body = res.json()
    assert body["names"] == []
    assert [t["solar_term"] for t in body["terms"]] == ["立春", "冬至", "小寒", "大寒", "立春"]

    res = client.get("/api/v1/solar-terms", params=[("year", "2020"), ("name", "立春"), ("name", "冬至")])
    assert res.status_code == 200
    body = res.json()
    assert body["names"] == ["立春", "冬至"]
    assert [t["solar"]["month"] for t in body["terms"]] == [2, 12, 2]


def test_unknown_solar_term_name(client):
    res = client.get("/api/v1/solar-terms", params={"year": 2020, "name": "立夏節"})
    assert res.status_code == 422


def test_not_found(client):
    res = client.get("/api/v1/solar-to-lunar", params={"date": "2020-03-01"})
    assert res.status_code == 404


def test_missing_file(client):
    res = client.get("/api/v1/solar-to-lunar", params={"date": "2030-03-01"})
    assert res.status_code == 404


@pytest.mark.parametrize(
    "path, params",
    [
        ("/api/v1/solar-to-lunar", {"date": "2020/03/01"}),
        ("/api/v1/solar-to-lunar", {"date": "1850-01-01"}),
        ("/api/v1/lunar-to-solar", {"year": 2020, "month": 13, "day": 1}),
        ("/api/v1/solar-terms", {"year": 2100}),
    ],
)
def test_bad_input(client, path, params):
    assert client.get(path, params=params).status_code == 422


def test_broken_file_is_bad_gateway():
    src = CountingSource({2020: file_text(LINES_2020[:2] + ["2020/01/07 十三 星期二"])})
    shared = _SharedConverter(LunarConverter(src))
    app.dependency_overrides[get_shared_converter] = lambda: shared
    try:
        res = TestClient(app).get("/api/v1/solar-to-lunar", params={"date": "2020-01-01"})
    finally:
        app.dependency_overrides.clear()
    assert res.status_code == 502
