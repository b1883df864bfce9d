import pytest

from framecart.common.services.cart_service import calculate_frame_price, frame_cart_select, line_total
from tests.conftest import login


pytestmark = pytest.mark.usefixtures("catalog")


def add(client, **body):
    payload = {"animalId": 1, "frameSpecId": 1, "frameMaterialId": 1}
    payload.update(body)
    return client.post("/api/add-frame-to-cart", json=payload)


def items(cart):
    return [row for row in cart if row["itemType"] == "ITEM"]


@pytest.mark.parametrize(
    "base, multiplier, with_mat, expected",
    [
        (100, 1.5, True, 180.0),
        (100, 1.5, False, 150.0),
        (99.99, 1.0, True, 119.99),
        (10.005, 1, False, 10.01),
        (0.125, 1, False, 0.13),
    ],
)
def test_frame_price(base, multiplier, with_mat, expected):
    assert calculate_frame_price(base, multiplier, with_mat) == expected


def test_line_total_uses_unit_price_times_quantity():
    assert line_total(180.0, 2) == 360.0
    assert line_total(119.99, 3) == 359.97


def test_add_prices_the_configuration(client):
    res = add(client, withMat=True, quantity=2)
    assert res.status_code == 200
    cart = res.get_json()
    line, total = cart
    assert line["itemType"] == "ITEM"
    assert line["unitPrice"] == 180.0
    assert line["totalPrice"] == 360.0
    assert line["quantity"] == 2
    assert line["withMat"] == 1
    assert line["animalName"] == "Fox"
    assert line["materialName"] == "Oak"
    assert line["basePrice"] == 100.0
    assert line["priceMultiplier"] == 1.5
    assert total == {"orderId": line["orderId"], "quantity": 2, "totalPrice": 360.0, "itemType": "TOTAL"}


def test_defaults_are_with_mat_and_quantity_one(client):
    line = items(add(client).get_json())[0]
    assert line["withMat"] == 1
    assert line["quantity"] == 1
    assert line["unitPrice"] == 180.0


def test_same_configuration_is_merged(client):
    add(client, quantity=2)
    cart = add(client, quantity=3).get_json()
    lines = items(cart)
    assert len(lines) == 1
    assert lines[0]["quantity"] == 5
    assert lines[0]["totalPrice"] == 900.0
    assert cart[-1]["totalPrice"] == 900.0


def test_different_configurations_get_their_own_lines(client):
    add(client, withMat=True)
    add(client, withMat=False)
    cart = add(client, animalId=2, frameMaterialId=2).get_json()
    lines = items(cart)
    assert [l["orderLineId"] for l in lines] == sorted(l["orderLineId"] for l in lines)
    assert [(l["animalId"], l["frameMaterialId"], l["withMat"], l["unitPrice"]) for l in lines] == [
        (1, 1, 1, 180.0),
        (1, 1, 0, 150.0),
        (2, 2, 1, 120.0),
    ]
    assert cart[-1]["itemType"] == "TOTAL"
    assert cart[-1]["quantity"] == 3
    assert cart[-1]["totalPrice"] == 450.0


def test_cart_is_language_projected(client):
    cart = client.post("/api/no/add-frame-to-cart",
                       json={"animalId": 1, "frameSpecId": 1, "frameMaterialId": 1}).get_json()
    line = items(cart)[0]
    assert line["animalName"] == "Rev"
    assert line["category"] == "Pattedyr"
    assert line["frameSpecName"] == "Liten"
    assert line["material"] == "Tre"
    line = items(client.get("/api/sv/frame-cart").get_json())[0]
    assert line["animalName"] == "Fox"


def test_missing_configuration_fields_are_rejected(client):
    res = client.post("/api/add-frame-to-cart", json={"animalId": 1, "frameSpecId": 1})
    assert res.status_code == 400
    assert res.get_json() == {"error": "animalId, frameSpecId, and frameMaterialId are required!"}


def test_bad_quantity_is_rejected(client):
    res = add(client, quantity=-1)
    assert res.status_code == 400
    res = add(client, quantity="lots")
    assert res.status_code == 400


def test_unpriced_combination_is_rejected(client, executor):
    res = add(client, frameSpecId=2)
    assert res.status_code == 400
    assert res.get_json() == {"error": "Invalid frame specification or material combination!"}
    res = add(client, frameMaterialId=99)
    assert res.status_code == 400
    assert executor.execute("SELECT * FROM orderLines") == []


def test_view_without_order_is_empty(client):
    res = client.get("/api/frame-cart")
    assert res.status_code == 200
    assert res.get_json() == {"status": "The cart is empty."}


def test_view_returns_items_then_total(client):
    add(client)
    add(client, animalId=2)
    cart = client.get("/api/frame-cart").get_json()
    assert [row["itemType"] for row in cart] == ["ITEM", "ITEM", "TOTAL"]
    assert cart[0]["orderLineId"] < cart[1]["orderLineId"]
    assert "unitPrice" not in cart[-1]


def test_carts_are_per_session(client, other_client):
    add(client)
    assert other_client.get("/api/frame-cart").get_json() == {"status": "The cart is empty."}


def test_update_quantity_recomputes_total(client):
    line = items(add(client).get_json())[0]
    res = client.put("/api/update-frame-in-cart", json={"orderLineId": line["orderLineId"], "quantity": 4})
    assert res.status_code == 200
    updated = items(res.get_json())[0]
    assert updated["quantity"] == 4
    assert updated["totalPrice"] == 720.0
    assert res.get_json()[-1]["totalPrice"] == 720.0


@pytest.mark.parametrize("quantity", [0, -3])
def test_update_to_zero_or_less_removes_the_line(client, quantity):
    first = items(add(client).get_json())[0]
    add(client, animalId=2)
    cart = client.put("/api/update-frame-in-cart",
                      json={"orderLineId": first["orderLineId"], "quantity": quantity}).get_json()
    assert first["orderLineId"] not in [l["orderLineId"] for l in items(cart)]
    assert len(items(cart)) == 1


def test_emptied_order_views_as_empty_cart(client):
    line = items(add(client).get_json())[0]
    cart = client.put("/api/update-frame-in-cart", json={"orderLineId": line["orderLineId"], "quantity": 0}).get_json()
    assert cart == []
    assert client.get("/api/frame-cart").get_json() == {"status": "The cart is empty."}


def test_update_requires_numeric_quantity(client):
    line = items(add(client).get_json())[0]
    res = client.put("/api/update-frame-in-cart", json={"orderLineId": line["orderLineId"], "quantity": "many"})
    assert res.status_code == 400
    assert res.get_json() == {"error": "orderLineId and quantity are required!"}
    res = client.put("/api/update-frame-in-cart", json={"orderLineId": line["orderLineId"], "quantity": True})
    assert res.status_code == 400


def test_update_of_foreign_line_is_denied(client, other_client, executor):
    line = items(add(client).get_json())[0]
    res = other_client.put("/api/update-frame-in-cart", json={"orderLineId": line["orderLineId"], "quantity": 9})
    assert res.status_code == 400
    assert res.get_json() == {"error": "Order line not found or access denied!"}
    assert executor.execute("SELECT quantity FROM orderLines")[0]["quantity"] == 1


def test_remove_own_line(client):
    line = items(add(client).get_json())[0]
    res = client.delete(f"/api/remove-frame-from-cart/{line['orderLineId']}")
    assert res.status_code == 200
    assert res.get_json() == {"status": "Item removed from cart."}
    assert client.get("/api/frame-cart").get_json() == {"status": "The cart is empty."}


def test_remove_foreign_line_is_denied(client, other_client, executor):
    line = items(add(client).get_json())[0]
    res = other_client.delete(f"/api/remove-frame-from-cart/{line['orderLineId']}")
    assert res.status_code == 400
    assert res.get_json() == {"error": "Item not found or access denied!"}
    assert len(executor.execute("SELECT * FROM orderLines")) == 1


def test_remove_unknown_line(client):
    res = client.delete("/api/remove-frame-from-cart/12345")
    assert res.get_json() == {"error": "Item not found or access denied!"}


def test_clear_cart_keeps_the_order(client, executor):
    add(client)
    add(client, animalId=2)
    res = client.delete("/api/frame-cart")
    assert res.get_json() == {"status": "The cart is empty."}
    assert executor.execute("SELECT * FROM orderLines") == []
    assert len(executor.execute("SELECT * FROM orders")) == 1
    # the emptied order is reused
    add(client)
    assert len(executor.execute("SELECT * FROM orders")) == 1


def test_clear_without_cart(client):
    assert client.delete("/api/frame-cart").get_json() == {"status": "The cart is empty."}


def test_anonymous_cart_is_bound_to_user_on_login(client, other_client, executor):
    add(client)
    login(client, 7)
    cart = client.get("/api/frame-cart").get_json()
    assert len(items(cart)) == 1
    assert executor.execute("SELECT userId FROM orders") == [{"userId": 7}]

    # the same user on another device sees the cart
    login(other_client, 7)
    assert len(items(other_client.get("/api/frame-cart").get_json())) == 1


def test_paid_orders_are_not_the_cart(client, executor):
    add(client)
    executor.execute("UPDATE orders SET paid = CURRENT_TIMESTAMP")
    assert client.get("/api/frame-cart").get_json() == {"status": "The cart is empty."}
    add(client)
    assert len(executor.execute("SELECT * FROM orders")) == 2


def test_cart_select_orders_total_last():
    sql = frame_cart_select("no")
    assert "UNION" in sql
    assert "FROM orderTotals" in sql
    assert "CASE WHEN itemType = 'ITEM' THEN 0 ELSE 1 END" in sql
    assert "JSON_EXTRACT(a.name, '$.no')" in sql
