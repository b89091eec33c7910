from decimal import Decimal


async def test_add_item_creates_then_increments_line(client, seed, headers):
    buyer = await seed.user()
    _, shop = await seed.seller()
    product = await seed.product(shop, quantity=5)

    resp = await client.post("/cart/add", json={"product_id": product.id, "qty": 2}, headers=headers(buyer))
    assert resp.status_code == 201
    line_id = resp.json()["id"]

    resp = await client.post("/cart/add", json={"product_id": product.id, "qty": 1}, headers=headers(buyer))
    assert resp.status_code == 201
    assert resp.json() == {"id": line_id, "product_id": product.id, "qty": 3}
    assert await seed.cart_count(buyer) == 1


async def test_add_item_defaults_to_one_unit(client, seed, headers):
    buyer = await seed.user()
    _, shop = await seed.seller()
    product = await seed.product(shop)

    resp = await client.post("/cart/add", json={"product_id": product.id}, headers=headers(buyer))

    assert resp.status_code == 201
    assert resp.json()["qty"] == 1


async def test_add_item_unknown_product(client, seed, headers):
    buyer = await seed.user()

    resp = await client.post("/cart/add", json={"product_id": 999, "qty": 1}, headers=headers(buyer))

    assert resp.status_code == 404
    assert resp.json()["error"]["kind"] == "NotFound"


async def test_add_item_counts_existing_quantity_against_stock(client, seed, headers):
    buyer = await seed.user()
    _, shop = await seed.seller()
    product = await seed.product(shop, name="Mineral Lick", quantity=5)
    await seed.cart_line(buyer, product, 4)

    resp = await client.post("/cart/add", json={"product_id": product.id, "qty": 2}, headers=headers(buyer))

    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["kind"] == "InsufficientStock"
    assert error["product_id"] == product.id
    assert error["message"] == "Insufficient stock for Mineral Lick. Available: 5"


async def test_add_item_rejects_non_positive_quantity(client, seed, headers):
    buyer = await seed.user()
    _, shop = await seed.seller()
    product = await seed.product(shop)

    resp = await client.post("/cart/add", json={"product_id": product.id, "qty": 0}, headers=headers(buyer))

    assert resp.status_code == 400
    assert resp.json()["error"]["kind"] == "ValidationError"


async def test_update_item_overwrites_quantity(client, seed, headers):
    buyer = await seed.user()
    _, shop = await seed.seller()
    product = await seed.product(shop, quantity=5)
    line = await seed.cart_line(buyer, product, 2)

    resp = await client.put(f"/cart/{line.id}", json={"qty": 4}, headers=headers(buyer))

    assert resp.status_code == 200
    assert resp.json()["qty"] == 4


async def test_update_item_checks_current_stock(client, seed, headers):
    buyer = await seed.user()
    _, shop = await seed.seller()
    product = await seed.product(shop, quantity=5)
    line = await seed.cart_line(buyer, product, 2)

    resp = await client.put(f"/cart/{line.id}", json={"qty": 6}, headers=headers(buyer))

    assert resp.status_code == 400
    assert resp.json()["error"]["kind"] == "InsufficientStock"


async def test_update_item_of_another_buyer_is_not_found(client, seed, headers):
    buyer = await seed.user()
    other = await seed.user(name="Other Farmer")
    _, shop = await seed.seller()
    product = await seed.product(shop)
    line = await seed.cart_line(other, product, 1)

    resp = await client.put(f"/cart/{line.id}", json={"qty": 2}, headers=headers(buyer))

    assert resp.status_code == 404


async def test_remove_and_clear_leave_other_buyers_lines(client, seed, headers):
    buyer = await seed.user()
    other = await seed.user(name="Other Farmer")
    _, shop = await seed.seller()
    line = await seed.cart_line(other, await seed.product(shop), 1)

    removed = await client.delete(f"/cart/{line.id}", headers=headers(buyer))
    cleared = await client.delete("/cart", headers=headers(buyer))

    assert removed.status_code == 200
    assert cleared.status_code == 200
    assert await seed.cart_count(other) == 1
    listed = (await client.get("/cart", headers=headers(other))).json()
    assert [item["id"] for item in listed] == [line.id]


async def test_remove_and_clear_are_idempotent(client, seed, headers):
    buyer = await seed.user()
    _, shop = await seed.seller()
    p1 = await seed.product(shop, name="Dairy Meal")
    p2 = await seed.product(shop, name="Layers Mash")
    line = await seed.cart_line(buyer, p1, 1)
    await seed.cart_line(buyer, p2, 1)

    for _ in range(2):
        resp = await client.delete(f"/cart/{line.id}", headers=headers(buyer))
        assert resp.status_code == 200
        assert resp.json() == {"deleted": True}
    assert await seed.cart_count(buyer) == 1

    for _ in range(2):
        resp = await client.delete("/cart", headers=headers(buyer))
        assert resp.status_code == 200
    assert await seed.cart_count(buyer) == 0


async def test_list_cart_joins_product_and_seller(client, seed, headers):
    buyer = await seed.user()
    _, shop = await seed.seller(shop_name="Kiambu Agrovet")
    product = await seed.product(shop, name="Dairy Meal", price="150.50", quantity=7)
    await seed.cart_line(buyer, product, 2)

    resp = await client.get("/cart", headers=headers(buyer))

    assert resp.status_code == 200
    [row] = resp.json()
    assert row["product_id"] == product.id
    assert row["qty"] == 2
    assert row["name"] == "Dairy Meal"
    assert Decimal(row["price"]) == Decimal("150.50")
    assert row["stock"] == 7
    assert row["provider_id"] == shop.id
    assert row["shop_name"] == "Kiambu Agrovet"


async def test_list_cart_falls_back_to_owner_name(client, seed, headers):
    buyer = await seed.user()
    _, shop = await seed.seller(name="Mama Wanjiku", shop_name=None)
    product = await seed.product(shop)
    await seed.cart_line(buyer, product, 1)

    resp = await client.get("/cart", headers=headers(buyer))

    assert resp.json()[0]["shop_name"] == "Mama Wanjiku"


async def test_cart_requires_token(client):
    resp = await client.get("/cart")

    assert resp.status_code == 401
