"""HTTP tests for the storefront API."""

import pytest
from fastapi.testclient import TestClient

from storefront.core.errors import AssistantUnavailable
from storefront.database.carts import local_cart_store, remote_cart_store
from storefront.database.orders import order_db
from storefront.database.products import product_db
from storefront.main import app
from storefront.routes.chat import get_assistant
from storefront.services.assistant import AssistantOrchestrator
from storefront.services.product_tools import ProductCompareTool, ProductSearchTool

from tests.fakes import FakeChatModel, text_reply, tool_reply


DEVICE = {"X-Device-Id": "device-1"}
USER = {"X-Device-Id": "device-1", "X-User-Id": "user-1"}


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def use_model():
    """Install a scripted model behind the chat routes."""
    def install(*replies):
        model = FakeChatModel(*replies)
        agent = AssistantOrchestrator(model, ProductSearchTool(product_db), ProductCompareTool(product_db))
        app.dependency_overrides[get_assistant] = lambda: agent
        return model

    yield install
    app.dependency_overrides.pop(get_assistant, None)


class TestService:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_index(self, client):
        assert client.get("/").json()["endpoints"]["cart"] == "/api/cart"


class TestProducts:

    def test_search_with_filters(self, client):
        response = client.get("/api/products", params={"category": "sports", "in_stock_only": True})
        data = response.json()
        assert response.status_code == 200
        assert [p["id"] for p in data["products"]] == ["prod-008"]
        assert data["total"] == 1

    def test_sort_and_paginate(self, client):
        data = client.get("/api/products", params={"sort": "price_asc", "limit": 2}).json()
        assert [p["id"] for p in data["products"]] == ["prod-010", "prod-005"]
        assert data["total"] == 10

    def test_categories(self, client):
        assert client.get("/api/products/categories").json() == [
            "books", "clothing", "electronics", "home", "sports",
        ]

    def test_get_product(self, client):
        assert client.get("/api/products/prod-002").json()["brand"] == "Apple"
        assert client.get("/api/products/nope").status_code == 404


class TestCart:

    def test_add_is_additive(self, client):
        client.post("/api/cart/items", json={"product_id": "prod-002", "quantity": 1}, headers=DEVICE)
        response = client.post("/api/cart/items", json={"product_id": "prod-002", "quantity": 2}, headers=DEVICE)

        cart = response.json()["cart"]
        assert response.status_code == 200
        assert cart["lines"][0]["quantity"] == 3
        assert cart["total_item_count"] == 3
        assert cart["total_price"] == pytest.approx(747.0)

    def test_unknown_product(self, client):
        response = client.post("/api/cart/items", json={"product_id": "nope"}, headers=DEVICE)
        assert response.status_code == 404

    def test_bad_quantity(self, client):
        response = client.post("/api/cart/items", json={"product_id": "prod-002", "quantity": 0}, headers=DEVICE)
        assert response.status_code == 400

    def test_update_and_remove(self, client):
        client.post("/api/cart/items", json={"product_id": "prod-010"}, headers=DEVICE)

        updated = client.put("/api/cart/items/prod-010", json={"quantity": 4}, headers=DEVICE)
        assert updated.json()["cart"]["lines"][0]["quantity"] == 4

        removed = client.put("/api/cart/items/prod-010", json={"quantity": 0}, headers=DEVICE)
        assert removed.json()["cart"]["lines"] == []

    def test_update_missing_line(self, client):
        response = client.put("/api/cart/items/prod-010", json={"quantity": 2}, headers=DEVICE)
        assert response.status_code == 404

    def test_delete_item_and_clear(self, client):
        client.post("/api/cart/items", json={"product_id": "prod-010"}, headers=DEVICE)
        client.post("/api/cart/items", json={"product_id": "prod-002"}, headers=DEVICE)

        after_delete = client.delete("/api/cart/items/prod-010", headers=DEVICE).json()["cart"]
        assert [line["product_id"] for line in after_delete["lines"]] == ["prod-002"]

        assert client.delete("/api/cart", headers=DEVICE).json()["cart"]["lines"] == []

    def test_devices_are_isolated(self, client):
        client.post("/api/cart/items", json={"product_id": "prod-010"}, headers=DEVICE)
        other = client.get("/api/cart", headers={"X-Device-Id": "device-2"}).json()
        assert other["cart"]["lines"] == []

    def test_login_merges_device_cart(self, client):
        remote_cart_store.upsert("user-1", "prod-002", 1)
        client.post("/api/cart/items", json={"product_id": "prod-010", "quantity": 2}, headers=DEVICE)

        cart = client.get("/api/cart", headers=USER).json()["cart"]

        quantities = {line["product_id"]: line["quantity"] for line in cart["lines"]}
        assert quantities == {"prod-002": 1, "prod-010": 2}
        assert local_cart_store.list_lines("device-1") == []


class TestCheckout:

    def test_requires_login(self, client):
        client.post("/api/cart/items", json={"product_id": "prod-010"}, headers=DEVICE)
        response = client.post("/api/checkout", headers=DEVICE)
        assert response.status_code == 401
        assert response.json()["success"] is False
        assert order_db.orders == {}

    def test_empty_cart(self, client):
        response = client.post("/api/checkout", headers=USER)
        assert response.status_code == 400
        assert response.json()["error_message"] == "Cart is empty"

    def test_out_of_stock(self, client):
        client.post("/api/cart/items", json={"product_id": "prod-009"}, headers=USER)
        response = client.post("/api/checkout", headers=USER)
        assert response.status_code == 400
        assert response.json()["error_code"] == "insufficient_stock"

    def test_places_order_and_clears_cart(self, client):
        client.post("/api/cart/items", json={"product_id": "prod-010"}, headers=USER)

        response = client.post("/api/checkout", headers=USER)

        data = response.json()
        assert response.status_code == 200
        assert data["success"] is True
        order = order_db.get_order(data["order_id"])
        assert order.total_amount == pytest.approx(29.99)
        assert client.get("/api/cart", headers=USER).json()["cart"]["lines"] == []

    def test_order_history(self, client):
        client.post("/api/cart/items", json={"product_id": "prod-002"}, headers=USER)
        order_id = client.post("/api/checkout", headers=USER).json()["order_id"]

        orders = client.get("/api/checkout/orders", headers=USER).json()
        assert [o["id"] for o in orders] == [order_id]
        assert client.get(f"/api/checkout/orders/{order_id}", headers=USER).status_code == 200

        stranger = {"X-User-Id": "user-2"}
        assert client.get(f"/api/checkout/orders/{order_id}", headers=stranger).status_code == 404
        assert client.get("/api/checkout/orders", headers=DEVICE).status_code == 401


class TestChat:

    def test_stateless_chat(self, client, use_model):
        model = use_model(tool_reply("getData", query="kindle"), text_reply("Nothing like that, sorry."))

        response = client.post("/api/chat", json={"messages": [
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "Hello!"},
            {"role": "tool", "content": "Found 0", "toolName": "getData"},
            {"role": "user", "content": "any kindles?"},
        ]})

        assert response.status_code == 200
        assert response.json() == {"answer": "Nothing like that, sorry.", "products": []}
        assert model.calls[0]["messages"][2] == {"role": "user", "content": "[Tool result from getData]: Found 0"}

    def test_products_parsed_from_answer(self, client, use_model):
        use_model(tool_reply("getData", query="atomic"), text_reply(""))
        data = client.post("/api/chat", json={"messages": [{"role": "user", "content": "books?"}]}).json()
        assert data["products"][0]["id"] == "prod-010"

    def test_model_failure(self, client, use_model):
        use_model(AssistantUnavailable("Language model request failed: overloaded"))
        response = client.post("/api/chat", json={"messages": [{"role": "user", "content": "hi"}]})
        assert response.status_code == 502
        assert "overloaded" in response.json()["error"]

    def test_unexpected_failure(self, client, use_model):
        use_model(RuntimeError("boom"))
        response = client.post("/api/chat", json={"messages": [{"role": "user", "content": "hi"}]})
        assert response.status_code == 500
        assert response.json() == {"error": "boom"}

    def test_no_messages(self, client, use_model):
        use_model()
        assert client.post("/api/chat", json={"messages": []}).status_code == 400


class TestChatSessions:

    def test_session_lifecycle(self, client, use_model):
        use_model(tool_reply("getData", query="jacket"), text_reply("The Patagonia fleece is a good pick."))

        session_id = client.post("/api/chat/sessions").json()["session_id"]
        turn = client.post(f"/api/chat/sessions/{session_id}/messages", json={"message": "jackets?"}).json()

        assert turn["session_id"] == session_id
        assert turn["tool_name"] == "getData"
        assert turn["answer"] == "The Patagonia fleece is a good pick."

        details = client.get(f"/api/chat/sessions/{session_id}").json()
        assert details["state"] == "idle"
        assert details["message_count"] == 3

        history = client.get(f"/api/chat/sessions/{session_id}/history").json()["messages"]
        assert [m["role"] for m in history] == ["user", "tool", "assistant"]
        assert history[1]["toolName"] == "getData"

        assert client.delete(f"/api/chat/sessions/{session_id}").status_code == 200
        assert client.get(f"/api/chat/sessions/{session_id}").status_code == 404

    def test_unknown_session(self, client, use_model):
        use_model()
        response = client.post("/api/chat/sessions/missing/messages", json={"message": "hi"})
        assert response.status_code == 404

    def test_empty_message_rejected(self, client, use_model):
        use_model()
        session_id = client.post("/api/chat/sessions").json()["session_id"]
        response = client.post(f"/api/chat/sessions/{session_id}/messages", json={"message": ""})
        assert response.status_code == 422
        assert "message" in response.json()["error"]


class TestOrderSnapshot:

    def test_order_keeps_prices_after_catalog_change(self, client, monkeypatch):
        client.post("/api/cart/items", json={"product_id": "prod-001", "quantity": 2}, headers=USER)
        order_id = client.post("/api/checkout", headers=USER).json()["order_id"]

        repriced = product_db.get_product("prod-001").model_copy(update={"price": 1.0, "discount_percentage": 0.0})
        monkeypatch.setitem(product_db.products, "prod-001", repriced)

        order = client.get(f"/api/checkout/orders/{order_id}", headers=USER).json()
        item = order["items"][0]
        assert item["price"] == pytest.approx(349.99)
        assert item["discount_percentage"] == pytest.approx(10.0)
        assert item["quantity"] == 2
        assert order["total_amount"] == pytest.approx(349.99 * 0.9 * 2)


class TestChatErrors:

    def test_invalid_role(self, client, use_model):
        use_model()
        response = client.post("/api/chat", json={"messages": [{"role": "system", "content": "hi"}]})
        assert response.status_code == 422
        assert set(response.json()) == {"error"}
        assert "role" in response.json()["error"]

    def test_missing_content(self, client, use_model):
        use_model()
        response = client.post("/api/chat", json={"messages": [{"role": "user"}]})
        assert response.status_code == 422
        assert "content" in response.json()["error"]

    def test_other_routes_keep_default_validation_body(self, client):
        response = client.get("/api/products", params={"limit": 0})
        assert response.status_code == 422
        assert "detail" in response.json()

    def test_model_client_cannot_be_built(self, client, monkeypatch):
        from storefront.routes import chat as chat_routes

        def broken(*args, **kwargs):
            raise TypeError("Invalid http_client argument")

        monkeypatch.setattr(chat_routes, "chat_model", None)
        monkeypatch.setattr(chat_routes, "assistant", None)
        monkeypatch.setattr(chat_routes, "AnthropicChatModel", broken)

        response = client.post("/api/chat", json={"messages": [{"role": "user", "content": "hi"}]})

        assert response.status_code == 502
        assert "Invalid http_client argument" in response.json()["error"]
