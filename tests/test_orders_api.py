from decimal import Decimal

from bizhub.models import Account, Product

from conftest import ACCOUNTANT_A, SALESMAN_A


def payload(*items, **fields):
    fields.setdefault("customer_name", "Walk-in Customer")
    return {"items": [dict(product_id=p.id, quantity=q, **extra) for p, q, extra in items], **fields}


class TestIdentity:
    async def test_health_needs_no_identity(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    async def test_missing_actor_is_401(self, client):
        response = await client.get("/api/orders")
        assert response.status_code == 401
        assert response.json()["success"] is False

    async def test_actor_without_company_is_403(self, client, headers):
        response = await client.get("/api/orders", headers=headers(with_company=False))
        assert response.status_code == 403

    async def test_inactive_company_is_403(self, client, headers, seed):
        response = await client.get("/api/orders", headers=headers(company=seed.company_c))
        assert response.status_code == 403
        assert "inactive" in response.json()["message"]

    async def test_unknown_role_is_400(self, client, headers):
        response = await client.get("/api/orders", headers=headers(role="janitor"))
        assert response.status_code == 400


class TestCreate:
    async def test_mixed_vat_order_with_delivery(self, client, headers, seed, fetch):
        response = await client.post(
            "/api/orders",
            json=payload((seed.widget, 3, {}), (seed.gadget, 1, {})),
            headers=headers(),
        )
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        data = body["data"]
        assert data["subtotal"] == 35.0
        assert data["delivery_cost"] == 2.0
        assert data["total_vat"] == 3.0
        assert data["grand_total"] == 40.0
        assert data["status"] == "pending"
        assert data["review_status"] == "PENDING_REVIEW"
        assert len(data["items"]) == 2
        assert data["flows"][0]["flow_type"] == "created"

        assert (await fetch(Product, seed.widget.id)).stock_current == 97

    async def test_free_delivery_at_threshold(self, client, headers, seed):
        response = await client.post(
            "/api/orders", json=payload((seed.bulk, 2, {})), headers=headers()
        )
        assert response.status_code == 201
        assert response.json()["data"]["delivery_cost"] == 0.0
        assert response.json()["data"]["grand_total"] == 60.0

    async def test_shortfall_is_400_and_stock_unchanged(self, client, headers, seed, fetch):
        response = await client.post(
            "/api/orders", json=payload((seed.scarce, 5, {})), headers=headers()
        )
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "Insufficient stock" in body["message"]
        assert (await fetch(Product, seed.scarce.id)).stock_current == 3

    async def test_invalid_body_lists_errors(self, client, headers, seed):
        response = await client.post(
            "/api/orders", json=payload((seed.widget, 0, {})), headers=headers()
        )
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["errors"]

    async def test_empty_items_rejected(self, client, headers):
        response = await client.post(
            "/api/orders", json={"customer_name": "X", "items": []}, headers=headers()
        )
        assert response.status_code == 400


class TestCreditLifecycle:
    async def test_debit_then_credit_back_on_payment(self, client, headers, seed, fetch):
        response = await client.post(
            "/api/orders",
            json=payload(
                (seed.widget, 1, {"unit_price": "100", "vat_rate": "0"}),
                customer_name="Corner Cafe",
                payment_method="credit",
            ),
            headers=headers(),
        )
        assert response.status_code == 201
        order = response.json()["data"]
        assert order["grand_total"] == 100.0
        assert order["account_id"] == seed.cafe.id
        assert (await fetch(Account, seed.cafe.id)).current_balance == Decimal("100.00")

        response = await client.put(
            f"/api/orders/{order['id']}", json={"payment_status": "paid"}, headers=headers()
        )
        assert response.status_code == 200
        assert response.json()["data"]["payment_status"] == "paid"
        assert (await fetch(Account, seed.cafe.id)).current_balance == Decimal("0.00")

        response = await client.put(
            f"/api/orders/{order['id']}", json={"payment_status": "pending"}, headers=headers()
        )
        assert response.status_code == 400

    async def test_cancelled_credit_order_debit_is_cleared_by_payment(self, client, headers, seed, fetch):
        response = await client.post(
            "/api/orders",
            json=payload(
                (seed.widget, 1, {"unit_price": "100", "vat_rate": "0"}),
                customer_name="Corner Cafe",
                payment_method="credit",
            ),
            headers=headers(),
        )
        order = response.json()["data"]

        response = await client.patch(
            f"/api/orders/{order['id']}/status", json={"status": "cancelled"}, headers=headers()
        )
        assert response.status_code == 200
        assert (await fetch(Account, seed.cafe.id)).current_balance == Decimal("100.00")

        response = await client.put(
            f"/api/orders/{order['id']}", json={"payment_status": "paid"}, headers=headers()
        )
        assert response.status_code == 200
        assert (await fetch(Account, seed.cafe.id)).current_balance == Decimal("0.00")


class TestStatusAndRoles:
    async def create(self, client, headers, seed, **header_kwargs):
        response = await client.post(
            "/api/orders", json=payload((seed.widget, 2, {})), headers=headers(**header_kwargs)
        )
        assert response.status_code == 201
        return response.json()["data"]

    async def test_salesman_cancels_own_pending_order(self, client, headers, seed, fetch):
        salesman = dict(actor_id=SALESMAN_A, role="salesman")
        order = await self.create(client, headers, seed, **salesman)

        response = await client.patch(
            f"/api/orders/{order['id']}/status", json={"status": "cancelled"}, headers=headers(**salesman)
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "cancelled"
        assert (await fetch(Product, seed.widget.id)).stock_current == 100

    async def test_salesman_cannot_confirm(self, client, headers, seed):
        salesman = dict(actor_id=SALESMAN_A, role="salesman")
        order = await self.create(client, headers, seed, **salesman)
        response = await client.patch(
            f"/api/orders/{order['id']}/status", json={"status": "confirmed"}, headers=headers(**salesman)
        )
        assert response.status_code == 403

    async def test_accountant_moves_through_review(self, client, headers, seed):
        order = await self.create(client, headers, seed)
        accountant = headers(actor_id=ACCOUNTANT_A, role="accountant")

        response = await client.patch(f"/api/orders/{order['id']}/status", json={"status": "processing"}, headers=accountant)
        assert response.json()["data"]["review_status"] == "UNDER_REVIEW"
        response = await client.patch(f"/api/orders/{order['id']}/status", json={"status": "confirmed"}, headers=accountant)
        assert response.json()["data"]["status"] == "confirmed"

        response = await client.patch(f"/api/orders/{order['id']}/status", json={"status": "pending"}, headers=accountant)
        assert response.status_code == 400

    async def test_unknown_status_value_is_400(self, client, headers, seed):
        order = await self.create(client, headers, seed)
        response = await client.patch(
            f"/api/orders/{order['id']}/status", json={"status": "shipped"}, headers=headers()
        )
        assert response.status_code == 400

    async def test_delete_requires_owner_or_admin(self, client, headers, seed, fetch):
        order = await self.create(client, headers, seed)

        response = await client.delete(
            f"/api/orders/{order['id']}", headers=headers(actor_id=ACCOUNTANT_A, role="accountant")
        )
        assert response.status_code == 403

        response = await client.delete(f"/api/orders/{order['id']}", headers=headers(role="admin"))
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert (await fetch(Product, seed.widget.id)).stock_current == 100

        response = await client.get(f"/api/orders/{order['id']}", headers=headers())
        assert response.status_code == 404


class TestListing:
    async def test_list_envelope(self, client, headers, seed):
        for _ in range(3):
            await client.post("/api/orders", json=payload((seed.widget, 1, {})), headers=headers())

        response = await client.get("/api/orders", params={"limit": 2}, headers=headers())
        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert body["total"] == 3
        assert body["pagination"] == {"page": 1, "limit": 2, "pages": 2}

    async def test_salesman_sees_only_own_orders(self, client, headers, seed):
        await client.post("/api/orders", json=payload((seed.widget, 1, {})), headers=headers())
        salesman = headers(actor_id=SALESMAN_A, role="salesman")
        await client.post("/api/orders", json=payload((seed.widget, 1, {})), headers=salesman)

        body = (await client.get("/api/orders", headers=salesman)).json()
        assert body["total"] == 1
        assert body["data"][0]["created_by"] == SALESMAN_A

    async def test_sort_by_grand_total(self, client, headers, seed):
        await client.post("/api/orders", json=payload((seed.widget, 1, {})), headers=headers())
        await client.post("/api/orders", json=payload((seed.bulk, 3, {})), headers=headers())
        body = (await client.get(
            "/api/orders", params={"sort_by": "grand_total", "sort_order": "asc"}, headers=headers()
        )).json()
        totals = [order["grand_total"] for order in body["data"]]
        assert totals == sorted(totals)

    async def test_statistics_roles(self, client, headers, seed):
        await client.post("/api/orders", json=payload((seed.widget, 3, {}), (seed.gadget, 1, {})), headers=headers())

        response = await client.get(
            "/api/orders/statistics", headers=headers(actor_id=ACCOUNTANT_A, role="accountant")
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total_orders"] == 1
        assert data["total_revenue"] == 40.0

        response = await client.get(
            "/api/orders/statistics", headers=headers(actor_id=SALESMAN_A, role="salesman")
        )
        assert response.status_code == 403

    async def test_company_listing(self, client, headers, seed):
        await client.post("/api/orders", json=payload((seed.widget, 1, {})), headers=headers())
        response = await client.get(f"/api/orders/company/{seed.company_a.id}", headers=headers())
        assert response.status_code == 200
        assert response.json()["total"] == 1
