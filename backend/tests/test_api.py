"""
HTTP 接口测试
"""

import pytest

from tests.helpers import SAMPLE_LISTING, sample_tree_json

API = "/api/v1"


async def _seed_products(client, skus=("WATER", "SOIL", "SAND", "X", "Y")):
    for sku in skus:
        resp = await client.post(f"{API}/products", json={"sku": sku, "name": f"Product {sku}"})
        assert resp.status_code == 201


async def _publish_sample(client):
    resp = await client.put(f"{API}/catalog", json=sample_tree_json())
    assert resp.status_code == 200
    return resp.json()


def _flatten(node):
    out = [(node["path"], node["lft"], node["rgt"], node["depth"])]
    for child in node["nodes"]:
        out.extend(_flatten(child))
    return out


class TestHealth:
    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestCatalogApi:
    async def test_publish_returns_numbered_tree(self, client):
        body = await _publish_sample(client)
        assert _flatten(body) == SAMPLE_LISTING
        assert "products" not in body

    async def test_get_catalog(self, client):
        await _publish_sample(client)
        resp = await client.get(f"{API}/catalog")
        assert resp.status_code == 200
        assert _flatten(resp.json()) == SAMPLE_LISTING

    async def test_get_catalog_missing(self, client):
        resp = await client.get(f"{API}/catalog")
        assert resp.status_code == 404
        assert resp.json()["code"] == "NotFound"

    async def test_get_catalog_with_products(self, client):
        await _seed_products(client)
        await _publish_sample(client)
        await client.put(f"{API}/assocs", json={"a/b/e": ["SOIL", "WATER"]})
        resp = await client.get(f"{API}/catalog", params={"products": "true"})
        body = resp.json()
        b = body["nodes"][0]
        assert body["products"] == []
        assert b["nodes"][0]["products"] == ["SOIL", "WATER"]

    async def test_publish_duplicate_siblings(self, client):
        tree = {"segment": "a", "name": "A", "nodes": [
            {"segment": "b", "name": "B", "nodes": []},
            {"segment": "b", "name": "B again", "nodes": []},
        ]}
        resp = await client.put(f"{API}/catalog", json=tree)
        assert resp.status_code == 400
        assert resp.json()["code"] == "Malformed"

    async def test_publish_bad_segment(self, client):
        tree = {"segment": "a", "name": "A", "nodes": [{"segment": "b/c", "name": "BC"}]}
        resp = await client.put(f"{API}/catalog", json=tree)
        assert resp.status_code == 422

    async def test_get_node(self, client):
        await _publish_sample(client)
        resp = await client.get(f"{API}/catalog/nodes/a/c/f/j/n")
        assert resp.status_code == 200
        body = resp.json()
        assert (body["lft"], body["rgt"], body["depth"]) == (13, 14, 4)
        assert body["is_leaf"] is True

        resp = await client.get(f"{API}/catalog/nodes/a/q")
        assert resp.status_code == 404

    async def test_purge(self, client):
        await _publish_sample(client)
        resp = await client.delete(f"{API}/catalog")
        assert resp.status_code == 204
        assert (await client.get(f"{API}/catalog")).status_code == 404


class TestAssocApi:
    async def test_create_list_delete(self, client):
        await _seed_products(client)
        await _publish_sample(client)
        for sku in ["WATER", "SOIL", "SAND"]:
            resp = await client.post(f"{API}/assocs/items", json={"path": "a/c/f/j/m", "sku": sku})
            assert resp.status_code == 201
        assert resp.json()["pri"] == 30

        resp = await client.get(f"{API}/assocs")
        assert [(a["path"], a["sku"], a["pri"]) for a in resp.json()] == [
            ("a/c/f/j/m", "WATER", 10),
            ("a/c/f/j/m", "SOIL", 20),
            ("a/c/f/j/m", "SAND", 30),
        ]

        resp = await client.delete(f"{API}/assocs/items", params={"path": "a/c/f/j/m", "sku": "SOIL"})
        assert resp.status_code == 204
        resp = await client.delete(f"{API}/assocs/items", params={"path": "a/c/f/j/m", "sku": "SOIL"})
        assert resp.status_code == 204
        assert len((await client.get(f"{API}/assocs")).json()) == 2

    async def test_non_leaf(self, client):
        await _seed_products(client)
        await _publish_sample(client)
        resp = await client.post(f"{API}/assocs/items", json={"path": "a/c", "sku": "X"})
        assert resp.status_code == 409
        assert resp.json()["code"] == "NotLeaf"

    async def test_duplicate_create_conflict(self, client):
        await _seed_products(client)
        await _publish_sample(client)
        payload = {"path": "a/b/e", "sku": "X"}
        assert (await client.post(f"{API}/assocs/items", json=payload)).status_code == 201
        resp = await client.post(f"{API}/assocs/items", json=payload)
        assert resp.status_code == 409
        assert resp.json()["code"] == "Conflict"

    async def test_publish_and_missing_skus(self, client):
        await _seed_products(client)
        await _publish_sample(client)
        resp = await client.put(f"{API}/assocs", json={"a/c/f/j/n": ["X", "Y"]})
        assert resp.status_code == 200
        assert [(a["sku"], a["pri"]) for a in resp.json()] == [("X", 10), ("Y", 20)]

        resp = await client.put(f"{API}/assocs", json={"a/c/f/j/n": ["X", "GHOST"]})
        assert resp.status_code == 404
        assert resp.json()["data"]["missing_skus"] == ["GHOST"]
        assert len((await client.get(f"{API}/assocs")).json()) == 2

    async def test_batch_update(self, client):
        await _seed_products(client)
        await _publish_sample(client)
        resp = await client.patch(f"{API}/assocs", json=[
            {"path": "a/b/e", "sku": "Y", "pri": 3},
            {"path": "a/b/e", "sku": "X", "pri": 9},
        ])
        assert resp.status_code == 200
        assert [(a["sku"], a["pri"]) for a in resp.json()] == [("Y", 3), ("X", 9)]

    @pytest.mark.parametrize("pri", [0, -10])
    async def test_batch_update_rejects_bad_pri(self, client, pri):
        resp = await client.patch(f"{API}/assocs", json=[{"path": "a/b/e", "sku": "Y", "pri": pri}])
        assert resp.status_code == 422

    async def test_assocs_block_catalog_purge(self, client):
        await _seed_products(client)
        await _publish_sample(client)
        await client.put(f"{API}/assocs", json={"a/b/e": ["X"]})

        resp = await client.delete(f"{API}/catalog")
        assert resp.status_code == 409
        assert resp.json()["code"] == "CategoriesInUse"

        assert (await client.delete(f"{API}/assocs")).status_code == 204
        assert (await client.delete(f"{API}/catalog")).status_code == 204

    async def test_assocs_without_catalog(self, client):
        await _seed_products(client)
        resp = await client.post(f"{API}/assocs/items", json={"path": "a/b/e", "sku": "X"})
        assert resp.status_code == 404


class TestProductApi:
    async def test_crud(self, client):
        await _seed_products(client, ["WATER"])
        resp = await client.get(f"{API}/products/WATER")
        assert resp.status_code == 200
        assert resp.json()["name"] == "Product WATER"

        resp = await client.post(f"{API}/products", json={"sku": "WATER", "name": "again"})
        assert resp.status_code == 409

        resp = await client.get(f"{API}/products", params={"page": 1, "limit": 10})
        assert [p["sku"] for p in resp.json()["data"]] == ["WATER"]

        assert (await client.delete(f"{API}/products/WATER")).status_code == 204
        assert (await client.get(f"{API}/products/WATER")).status_code == 404
        assert (await client.delete(f"{API}/products/WATER")).status_code == 404
