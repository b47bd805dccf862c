"""
Tests for the /carts endpoints.
"""

PIZZA = {
    "company_id": "c-1",
    "category_id": "cat-pizzas",
    "size_id": "grande",
    "flavor_ids": ["p-calabresa", "p-portuguesa"],
    "options": [{"group_id": "pizza-dough", "option_id": "dough-tradicional"}],
}


def _add_pizza(client, cart_id="cart-1", quantity=1):
    resp = client.post(f"/carts/{cart_id}/half-half", json={**PIZZA, "quantity": quantity})
    assert resp.status_code == 201
    return resp.json()["items"][-1]


def test_unknown_cart(client):
    assert client.get("/carts/nope").status_code == 404


def test_read_cart(client):
    _add_pizza(client)
    resp = client.get("/api/v1/carts/cart-1")
    assert resp.status_code == 200
    data = resp.json()
    assert data["item_count"] == 1
    assert data["subtotal"] == 52.5


def test_update_quantity(client):
    item = _add_pizza(client)
    resp = client.patch(f"/carts/cart-1/items/{item['id']}", json={"quantity": 3})
    assert resp.status_code == 200
    assert resp.json()["subtotal"] == 157.5


def test_zero_quantity_removes_line(client):
    item = _add_pizza(client)
    resp = client.patch(f"/carts/cart-1/items/{item['id']}", json={"quantity": 0})
    assert resp.json()["items"] == []


def test_delete_item(client):
    item = _add_pizza(client)
    resp = client.delete(f"/carts/cart-1/items/{item['id']}")
    assert resp.status_code == 200
    assert resp.json()["item_count"] == 0


def test_delete_unknown_item(client):
    _add_pizza(client)
    assert client.delete("/carts/cart-1/items/nope").status_code == 404


def test_empty_cart(client):
    _add_pizza(client)
    _add_pizza(client)
    resp = client.delete("/carts/cart-1")
    assert resp.json()["items"] == []


class TestValidateInventory:

    def test_enough_stock(self, client):
        _add_pizza(client, quantity=2)
        resp = client.post("/carts/cart-1/validate-inventory")
        assert resp.status_code == 200
        assert resp.json() == {"ok": True, "message": None}

    def test_half_half_stock_shortage(self, client):
        # Portuguesa has 1 unit: three pizzas need 1.5
        _add_pizza(client, quantity=3)
        resp = client.post("/carts/cart-1/validate-inventory")
        data = resp.json()
        assert data["ok"] is False
        assert data["message"] == "Não há estoque suficiente de Portuguesa para este pedido."
