import pytest


@pytest.fixture
async def indomie(client):
    response = await client.post(
        "/api/product",
        json={"name": "Indomie", "price": 3000, "stock": 50}
    )
    assert response.status_code == 201
    return response.json()


class TestProductAPI:
    """Integration tests for the catalog routes with a real database."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, client, indomie):
        response = await client.get(f"/api/product/{indomie['id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Indomie"
        assert data["price"] == 3000
        assert data["stock"] == 50

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {"name": "", "price": 3000, "stock": 1},
        {"name": "Indomie", "price": 0, "stock": 1},
        {"name": "Indomie", "price": 3000, "stock": -1},
    ])
    async def test_create_invalid(self, client, body):
        response = await client.post("/api/product", json=body)

        assert response.status_code == 400
        assert response.json()["kind"] == "validation_error"
        assert (await client.get("/api/product")).json() == []

    @pytest.mark.asyncio
    async def test_list_filters_by_name(self, client, indomie):
        await client.post("/api/product", json={"name": "Aqua", "price": 4000, "stock": 10})

        response = await client.get("/api/product", params={"name": "INDO"})

        assert [p["name"] for p in response.json()] == ["Indomie"]

    @pytest.mark.asyncio
    async def test_update(self, client, indomie):
        response = await client.put(
            f"/api/product/{indomie['id']}",
            json={"name": "Indomie Goreng", "price": 3500, "stock": 40}
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Indomie Goreng"
        assert response.json()["stock"] == 40

    @pytest.mark.asyncio
    async def test_update_missing(self, client):
        response = await client.put("/api/product/404", json={"name": "X", "price": 1, "stock": 1})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete(self, client, indomie):
        response = await client.delete(f"/api/product/{indomie['id']}")

        assert response.status_code == 204
        assert (await client.get(f"/api/product/{indomie['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_with_sales_refused(self, client, indomie):
        await client.post("/api/checkout", json={"items": [{"product_id": indomie["id"], "quantity": 1}]})

        response = await client.delete(f"/api/product/{indomie['id']}")

        assert response.status_code == 409
        assert response.json()["kind"] == "product_in_use"


class TestCheckoutAPI:
    """Integration tests for checkout and reports over HTTP."""

    @pytest.mark.asyncio
    async def test_checkout_then_report(self, client, indomie):
        response = await client.post(
            "/api/checkout",
            json={"items": [{"product_id": indomie["id"], "quantity": 2}]}
        )

        assert response.status_code == 201
        transaction = response.json()
        assert transaction["total_amount"] == 6000
        assert transaction["details"][0]["product_name"] == "Indomie"

        product = (await client.get(f"/api/product/{indomie['id']}")).json()
        assert product["stock"] == 48

        report = (await client.get("/api/report/today")).json()
        assert report["total_revenue"] == 6000
        assert report["total_transactions"] == 1
        assert report["best_selling_product"] == {"name": "Indomie", "quantity": 2}

    @pytest.mark.asyncio
    async def test_checkout_errors(self, client, indomie):
        too_many = await client.post(
            "/api/checkout",
            json={"items": [{"product_id": indomie["id"], "quantity": 100}]}
        )
        missing = await client.post(
            "/api/checkout",
            json={"items": [{"product_id": 999, "quantity": 1}]}
        )
        empty = await client.post("/api/checkout", json={"items": []})

        assert too_many.status_code == 409
        assert too_many.json()["kind"] == "insufficient_stock"
        assert missing.status_code == 404
        assert missing.json()["kind"] == "product_not_found"
        assert empty.status_code == 400
        assert empty.json()["kind"] == "validation_error"

        product = (await client.get(f"/api/product/{indomie['id']}")).json()
        assert product["stock"] == 50

    @pytest.mark.asyncio
    async def test_range_report_reversed(self, client):
        response = await client.get(
            "/api/report",
            params={"start_date": "2024-02-01", "end_date": "2024-01-01"}
        )
        assert response.status_code == 400
