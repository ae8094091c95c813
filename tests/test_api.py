from decimal import Decimal

from inventory.config import settings
from inventory.models.product import Product

API = "/api/v1"


def _stock(db, product_id):
    db.expire_all()
    return db.query(Product).filter(Product.id == product_id).one().stock


class TestAuth:
    def test_signin_returns_bearer_token(self, client, admin):
        resp = client.post(f"{API}/auth/signin", json={"username": "admin", "password": "admin123"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["type"] == "Bearer"
        assert body["role"] == "ADMIN"

        me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
        assert me.json()["username"] == "admin"

    def test_signin_sets_cookie(self, client, staff):
        client.post(f"{API}/auth/signin", json={"username": "staff", "password": "staff123"})
        assert client.get(f"{API}/auth/me").json()["username"] == "staff"

    def test_cookie_expires_with_token(self, client, staff):
        resp = client.post(f"{API}/auth/signin", json={"username": "staff", "password": "staff123"})
        assert f"Max-Age={settings.ACCESS_TOKEN_EXPIRE_HOURS * 3600}" in resp.headers["set-cookie"]

    def test_bad_credentials(self, client, admin):
        resp = client.post(f"{API}/auth/signin", json={"username": "admin", "password": "nope"})
        assert resp.status_code == 401

    def test_requires_token(self, client):
        assert client.get(f"{API}/products").status_code == 401
        bad = client.get(f"{API}/products", headers={"Authorization": "Bearer not-a-jwt"})
        assert bad.status_code == 401

    def test_signup_never_grants_admin(self, client):
        resp = client.post(f"{API}/auth/signup", json={"username": "eve", "password": "secret1", "role": "ADMIN"})
        assert resp.status_code == 201
        assert resp.json()["role"] == "STAFF"


class TestTransactions:
    def test_staff_records_movement(self, client, db, staff_headers, staff, product):
        resp = client.post(
            f"{API}/transactions",
            json={"product_id": product.id, "type": "OUT", "quantity": 5},
            headers=staff_headers,
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["user_id"] == staff.id
        assert body["product_name"] == "Widget"
        assert Decimal(body["unit_price"]) == Decimal("6.50")
        assert _stock(db, product.id) == 5

    def test_insufficient_stock_is_400(self, client, db, staff_headers, product):
        resp = client.post(
            f"{API}/transactions",
            json={"product_id": product.id, "type": "OUT", "quantity": 11},
            headers=staff_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Insufficient stock. Available: 10"
        assert _stock(db, product.id) == 10

    def test_unknown_product_is_404(self, client, staff_headers):
        resp = client.post(
            f"{API}/transactions",
            json={"product_id": "missing", "type": "IN", "quantity": 1},
            headers=staff_headers,
        )
        assert resp.status_code == 404

    def test_quantity_must_be_positive(self, client, staff_headers, product):
        resp = client.post(
            f"{API}/transactions",
            json={"product_id": product.id, "type": "IN", "quantity": 0},
            headers=staff_headers,
        )
        assert resp.status_code == 422

    def test_only_admin_edits_and_deletes(self, client, db, staff_headers, admin_headers, product):
        txn = client.post(
            f"{API}/transactions",
            json={"product_id": product.id, "type": "IN", "quantity": 4},
            headers=staff_headers,
        ).json()

        assert client.put(f"{API}/transactions/{txn['id']}", json={"quantity": 1}, headers=staff_headers).status_code == 403
        assert client.delete(f"{API}/transactions/{txn['id']}", headers=staff_headers).status_code == 403

        resp = client.put(f"{API}/transactions/{txn['id']}", json={"quantity": 1}, headers=admin_headers)
        assert resp.status_code == 200
        assert _stock(db, product.id) == 11

        assert client.delete(f"{API}/transactions/{txn['id']}", headers=admin_headers).status_code == 204
        assert _stock(db, product.id) == 10
        assert client.get(f"{API}/transactions/{txn['id']}", headers=admin_headers).status_code == 404

    def test_failed_edit_leaves_everything_unchanged(self, client, db, admin_headers, product):
        txn = client.post(
            f"{API}/transactions",
            json={"product_id": product.id, "type": "OUT", "quantity": 5},
            headers=admin_headers,
        ).json()

        resp = client.put(f"{API}/transactions/{txn['id']}", json={"quantity": 12}, headers=admin_headers)
        assert resp.status_code == 400
        assert _stock(db, product.id) == 5
        assert client.get(f"{API}/transactions/{txn['id']}", headers=admin_headers).json()["quantity"] == 5

    def test_listing_routes(self, client, staff_headers, product):
        client.post(
            f"{API}/transactions",
            json={"product_id": product.id, "type": "IN", "quantity": 2},
            headers=staff_headers,
        )
        assert len(client.get(f"{API}/transactions", headers=staff_headers).json()) == 1
        assert len(client.get(f"{API}/transactions/product/{product.id}", headers=staff_headers).json()) == 1
        assert client.get(f"{API}/transactions/type/OUT", headers=staff_headers).json() == []
        assert client.get(f"{API}/transactions/type/SIDEWAYS", headers=staff_headers).status_code == 422


class TestCatalog:
    def test_staff_reads_but_cannot_write_products(self, client, staff_headers, product):
        assert client.get(f"{API}/products/{product.id}", headers=staff_headers).json()["sku"] == "WID-001"
        resp = client.post(
            f"{API}/products",
            json={"name": "Nope", "price_in": "1.00", "price_out": "2.00"},
            headers=staff_headers,
        )
        assert resp.status_code == 403

    def test_duplicate_sku_is_409(self, client, admin_headers, product):
        resp = client.post(
            f"{API}/products",
            json={"name": "Clone", "sku": "wid-001", "price_in": "1.00", "price_out": "2.00"},
            headers=admin_headers,
        )
        assert resp.status_code == 409

    def test_prices_must_be_positive(self, client, admin_headers):
        resp = client.post(
            f"{API}/products",
            json={"name": "Free", "price_in": "0", "price_out": "2.00"},
            headers=admin_headers,
        )
        assert resp.status_code == 422

    def test_low_stock_and_search(self, client, staff_headers, make_product):
        make_product(name="Nearly gone", stock=1, minimum_stock=5, category="Parts")
        make_product(name="Plenty", stock=100, minimum_stock=5, category="Parts")
        low = client.get(f"{API}/products/low-stock", headers=staff_headers).json()
        assert [p["name"] for p in low] == ["Nearly gone"]
        found = client.get(f"{API}/products/search", params={"keyword": "plen"}, headers=staff_headers).json()
        assert [p["name"] for p in found] == ["Plenty"]
        assert client.get(f"{API}/products/categories", headers=staff_headers).json() == ["Parts"]

    def test_supplier_crud(self, client, admin_headers, staff_headers):
        created = client.post(f"{API}/suppliers", json={"name": "Acme"}, headers=admin_headers)
        assert created.status_code == 201
        supplier_id = created.json()["id"]
        assert client.post(f"{API}/suppliers", json={"name": "acme"}, headers=admin_headers).status_code == 409
        assert client.put(f"{API}/suppliers/{supplier_id}", json={"phone": "1"}, headers=staff_headers).status_code == 403
        assert client.delete(f"{API}/suppliers/{supplier_id}", headers=admin_headers).status_code == 204
        assert client.get(f"{API}/suppliers/active", headers=staff_headers).json() == []

    def test_null_for_required_product_field_is_ignored(self, client, admin_headers, product):
        resp = client.put(
            f"{API}/products/{product.id}",
            json={"price_in": None, "name": None, "sku": None},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["name"] == "Widget"
        assert Decimal(body["price_in"]) == Decimal("4.00")
        # Nullable fields can still be cleared
        assert body["sku"] is None

    def test_null_supplier_name_is_ignored(self, client, admin_headers):
        supplier_id = client.post(
            f"{API}/suppliers", json={"name": "Acme", "phone": "555"}, headers=admin_headers,
        ).json()["id"]
        resp = client.put(
            f"{API}/suppliers/{supplier_id}", json={"name": None, "phone": None}, headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["name"] == "Acme"
        assert resp.json()["phone"] is None


class TestUsersAndReports:
    def test_users_are_admin_only(self, client, admin_headers, staff_headers, staff):
        assert client.get(f"{API}/users", headers=staff_headers).status_code == 403
        users = client.get(f"{API}/users", headers=admin_headers).json()
        assert {u["username"] for u in users} == {"admin", "staff"}
        assert "password_hash" not in users[0]
        staff_only = client.get(f"{API}/users/role/STAFF", headers=admin_headers).json()
        assert [u["id"] for u in staff_only] == [staff.id]

    def test_admin_cannot_disable_self(self, client, admin, admin_headers):
        assert client.delete(f"{API}/users/{admin.id}", headers=admin_headers).status_code == 400

    def test_null_user_role_is_ignored(self, client, admin_headers, staff):
        resp = client.put(
            f"{API}/users/{staff.id}", json={"role": None, "username": None}, headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["role"] == "STAFF"
        assert resp.json()["username"] == "staff"

    def test_stock_report(self, client, staff_headers, product):
        (row,) = client.get(f"{API}/reports/stock", headers=staff_headers).json()
        assert row["current_stock"] == 10
        assert Decimal(row["stock_value"]) == Decimal("40.00")

    def test_summary_validates_range(self, client, staff_headers):
        resp = client.get(
            f"{API}/reports/summary",
            params={"start_date": "2024-02-01", "end_date": "2024-01-01"},
            headers=staff_headers,
        )
        assert resp.status_code == 400

    def test_summary_for_today(self, client, staff_headers, product):
        from datetime import date

        client.post(
            f"{API}/transactions",
            json={"product_id": product.id, "type": "IN", "quantity": 3},
            headers=staff_headers,
        )
        today = date.today().isoformat()
        (row,) = client.get(
            f"{API}/reports/summary",
            params={"start_date": today, "end_date": today},
            headers=staff_headers,
        ).json()
        assert row["in_transactions"] == 1
        assert Decimal(row["net_value"]) == Decimal("12.00")
