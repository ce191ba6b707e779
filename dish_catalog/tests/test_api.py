from __future__ import annotations

import json
from unittest.mock import patch

from fastapi.testclient import TestClient

from dish_catalog.app import create_app
from dish_catalog.catalog.data_store import DishStore
from dish_catalog.config import AppConfig

DISHES = "/api/v1/dishes"


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_root_banner(client):
    body = client.get("/").json()
    assert body["version"] == "v1"
    assert body["environment"] == "development"


# ── Listing ──────────────────────────────────────────────────────────────


def test_list_dishes_shape(client):
    resp = client.get(DISHES, params={"page": 1, "limit": 3})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["count"] == 3
    assert body["total"] == 7
    assert body["totalPages"] == 3
    assert body["currentPage"] == 1
    assert len(body["data"]) == 3


def test_list_dishes_filters_by_course(client):
    resp = client.get(DISHES, params={"course": json.dumps(["dessert"])})
    body = resp.json()
    assert resp.status_code == 200
    assert body["total"] == 2
    for dish in body["data"]:
        assert dish["course"] == "dessert"


def test_list_dishes_sort_desc(client):
    resp = client.get(DISHES, params={"sortBy": "name", "order": "desc"})
    names = [d["name"] for d in resp.json()["data"]]
    assert names == sorted(names, reverse=True)


def test_list_dishes_malformed_array_is_400(client):
    resp = client.get(DISHES, params={"course": "[dessert"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert "JSON" in body["message"]


def test_list_dishes_bad_sort_field_is_400(client):
    resp = client.get(DISHES, params={"sortBy": "price"})
    assert resp.status_code == 400


def test_list_dishes_bad_diet_is_400(client):
    resp = client.get(DISHES, params={"diet": "vegan"})
    assert resp.status_code == 400


# ── Search ───────────────────────────────────────────────────────────────


def test_search(client):
    resp = client.get(f"{DISHES}/search", params={"q": "rice"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["count"] == len(body["data"]) == 2


def test_search_requires_query(client):
    assert client.get(f"{DISHES}/search").status_code == 400
    resp = client.get(f"{DISHES}/search", params={"q": "   "})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Search query is required"


# ── Filter options / ingredients ─────────────────────────────────────────


def test_filter_options(client):
    body = client.get(f"{DISHES}/filter-options").json()
    assert body["success"] is True
    assert body["data"]["diets"] == ["vegetarian", "non-vegetarian"]
    assert "dessert" in body["data"]["courses"]
    assert None not in body["data"]["flavor_profiles"]


def test_ingredients(client):
    body = client.get(f"{DISHES}/ingredients").json()
    assert body["success"] is True
    assert body["count"] == len(body["data"])
    assert "Rice" in body["data"]


# ── Ingredient matching ──────────────────────────────────────────────────


def test_by_ingredients(client):
    resp = client.post(f"{DISHES}/by-ingredients", json={"ingredients": ["rice", "salt", "pepper"]})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["count"] == 4
    top = body["data"][0]
    assert top["name"] == "Jeera rice"
    assert top["matchedIngredientsCount"] == 2
    assert top["totalIngredientsCount"] == 3
    assert top["matchPercentage"] == 67
    assert top["missingIngredients"] == ["water"]
    assert top["ingredients"] == ["Rice", "Water", "Salt"]
    assert top["id"] == "0"


def test_by_ingredients_results_are_ordered(client):
    body = client.post(f"{DISHES}/by-ingredients", json={"ingredients": ["salt", "sugar"]}).json()
    pairs = [(-d["matchPercentage"], d["name"]) for d in body["data"]]
    assert pairs == sorted(pairs)
    assert len(body["data"]) <= 10


def test_by_ingredients_blank_pantry_is_400(client):
    resp = client.post(f"{DISHES}/by-ingredients", json={"ingredients": [" ", ""]})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_by_ingredients_empty_list_is_400(client):
    resp = client.post(f"{DISHES}/by-ingredients", json={"ingredients": []})
    assert resp.status_code == 400
    assert "non-empty" in resp.json()["message"]


def test_by_ingredients_missing_body_is_400(client):
    assert client.post(f"{DISHES}/by-ingredients", json={}).status_code == 400
    assert client.post(f"{DISHES}/by-ingredients", json={"ingredients": "rice"}).status_code == 400


def test_by_ingredients_store_failure_is_500(tmp_path):
    app = create_app(config=AppConfig(), store=DishStore(data_path=tmp_path / "missing.csv"))
    client = TestClient(app)

    resp = client.post(f"{DISHES}/by-ingredients", json={"ingredients": ["rice"]})

    assert resp.status_code == 500
    body = resp.json()
    assert body == {"success": False, "message": "Internal server error"}
    assert "missing.csv" not in resp.text


# ── Lookup by id ─────────────────────────────────────────────────────────


def test_get_dish_by_id(client):
    resp = client.get(f"{DISHES}/2")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Chicken tikka"


def test_get_dish_unknown_id_is_404(client):
    resp = client.get(f"{DISHES}/nope")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Dish not found"


# ── Unhandled errors ─────────────────────────────────────────────────────


def test_unhandled_error_is_generic_500(app):
    client = TestClient(app, raise_server_exceptions=False)
    with patch("dish_catalog.app.list_ingredients", side_effect=RuntimeError("secret detail")):
        resp = client.get(f"{DISHES}/ingredients", headers={"X-Request-ID": "req-500"})

    assert resp.status_code == 500
    assert resp.headers["X-Request-ID"] == "req-500"
    assert resp.json()["message"] == "Internal server error"
    assert "secret detail" not in resp.text


def test_request_id_header_is_echoed(client):
    resp = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert resp.headers["X-Request-ID"] == "abc-123"
