async def _shared_order(client, seed, headers):
    """One buyer order spanning two sellers' products."""
    buyer = await seed.user(name="Farmer Jane", phone="0712345678")
    owner_a, shop_a = await seed.seller(name="Owner A", shop_name="Shop A", phone="0722000001")
    owner_b, shop_b = await seed.seller(name="Owner B", shop_name="Shop B", phone="0722000002")
    pa = await seed.product(shop_a, name="Dairy Meal", price="100", quantity=5)
    pb = await seed.product(shop_b, name="Dewormer", price="40", quantity=5)
    await seed.cart_line(buyer, pa, 1)
    await seed.cart_line(buyer, pb, 2)
    order = (await client.post("/orders/checkout", headers=headers(buyer))).json()
    return buyer, (owner_a, shop_a, pa), (owner_b, shop_b, pb), order


async def test_seller_sees_only_own_lines_and_buyer_contact(client, seed, headers):
    buyer, (owner_a, shop_a, pa), _, order = await _shared_order(client, seed, headers)

    resp = await client.get("/orders/seller", headers=headers(owner_a))

    assert resp.status_code == 200
    [view] = resp.json()
    assert view["id"] == order["id"]
    assert [i["product_id"] for i in view["items"]] == [pa.id]
    assert view["fulfillment_status"] == "pending"
    assert view["buyer"]["name"] == "Farmer Jane"
    assert view["buyer"]["phone"] == "0712345678"


async def test_seller_without_orders_or_provider_gets_empty_list(client, seed, headers):
    lonely_owner, _ = await seed.seller(name="New Shop Owner")
    no_shop = await seed.user(name="Agrovet Without Shop", role="agrovet")

    assert (await client.get("/orders/seller", headers=headers(lonely_owner))).json() == []
    assert (await client.get("/orders/seller", headers=headers(no_shop))).json() == []


async def test_farmer_cannot_use_seller_view(client, seed, headers):
    farmer = await seed.user()

    resp = await client.get("/orders/seller", headers=headers(farmer))

    assert resp.status_code == 403
    assert resp.json()["error"]["kind"] == "Forbidden"


async def test_seller_order_detail(client, seed, headers):
    _, (owner_a, _, pa), (owner_b, _, _), order = await _shared_order(client, seed, headers)
    outsider, _ = await seed.seller(name="Outsider")

    detail = await client.get(f"/orders/seller/{order['id']}", headers=headers(owner_a))
    assert detail.status_code == 200
    assert [i["product_id"] for i in detail.json()["items"]] == [pa.id]

    assert (await client.get(f"/orders/seller/{order['id']}", headers=headers(outsider))).status_code == 403
    assert (await client.get("/orders/seller/9999", headers=headers(owner_b))).status_code == 404


async def test_status_update_by_unrelated_seller_is_forbidden(client, seed, headers, sms):
    buyer = await seed.user()
    owner_a, _ = await seed.seller(name="Owner A")
    _, shop_b = await seed.seller(name="Owner B")
    await seed.cart_line(buyer, await seed.product(shop_b, quantity=5), 1)
    order = (await client.post("/orders/checkout", headers=headers(buyer))).json()

    resp = await client.patch(f"/orders/seller/{order['id']}/status", json={"status": "shipped"}, headers=headers(owner_a))

    assert resp.status_code == 403
    assert resp.json()["error"]["kind"] == "Forbidden"
    assert (await client.get(f"/orders/{order['id']}", headers=headers(buyer))).json()["status"] == "pending"
    assert sms.sent == []


async def test_status_update_rejects_unknown_status(client, seed, headers, sms):
    _, (owner_a, _, _), _, order = await _shared_order(client, seed, headers)

    resp = await client.patch(f"/orders/seller/{order['id']}/status", json={"status": "lost"}, headers=headers(owner_a))

    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["kind"] == "InvalidStatus"
    assert error["allowed"] == ["pending", "processing", "shipped", "delivered", "cancelled"]


async def test_status_update_missing_order(client, seed, headers, sms):
    owner, _ = await seed.seller()

    resp = await client.patch("/orders/seller/4242/status", json={"status": "shipped"}, headers=headers(owner))

    assert resp.status_code == 404


async def test_per_seller_status_rolls_up_to_order(client, seed, headers, sms):
    buyer, (owner_a, shop_a, _), (owner_b, shop_b, _), order = await _shared_order(client, seed, headers)
    url = f"/orders/seller/{order['id']}/status"

    resp = await client.patch(url, json={"status": "shipped"}, headers=headers(owner_a))
    assert resp.status_code == 200
    assert resp.json()["fulfillment_status"] == "shipped"
    # seller B has not moved yet, so the order as a whole is still pending
    assert resp.json()["status"] == "pending"

    await client.patch(url, json={"status": "delivered"}, headers=headers(owner_b))
    buyer_view = (await client.get(f"/orders/{order['id']}", headers=headers(buyer))).json()
    assert buyer_view["status"] == "shipped"
    assert {f["provider_id"]: f["status"] for f in buyer_view["fulfillments"]} == {
        shop_a.id: "shipped",
        shop_b.id: "delivered",
    }

    await client.patch(url, json={"status": "delivered"}, headers=headers(owner_a))
    assert (await client.get(f"/orders/{order['id']}", headers=headers(buyer))).json()["status"] == "delivered"


async def test_cancelled_portions_are_ignored_until_all_cancel(client, seed, headers, sms):
    buyer, (owner_a, _, _), (owner_b, _, _), order = await _shared_order(client, seed, headers)
    url = f"/orders/seller/{order['id']}/status"

    await client.patch(url, json={"status": "cancelled"}, headers=headers(owner_a))
    await client.patch(url, json={"status": "processing"}, headers=headers(owner_b))
    assert (await client.get(f"/orders/{order['id']}", headers=headers(buyer))).json()["status"] == "processing"

    await client.patch(url, json={"status": "cancelled"}, headers=headers(owner_b))
    assert (await client.get(f"/orders/{order['id']}", headers=headers(buyer))).json()["status"] == "cancelled"


async def test_status_update_notifies_buyer(client, seed, headers, sms):
    _, (owner_a, _, _), _, order = await _shared_order(client, seed, headers)

    resp = await client.patch(
        f"/orders/seller/{order['id']}/status", json={"status": "shipped"}, headers=headers(owner_a)
    )

    assert resp.status_code == 200
    assert sms.sent == [
        (
            "0712345678",
            f'SmartLivestock: Your order #{order["id"]} status is now "shipped". Thank you for your business.',
        )
    ]


async def test_notification_failure_does_not_fail_update(client, seed, headers, failing_sms):
    buyer, (owner_a, _, _), _, order = await _shared_order(client, seed, headers)

    resp = await client.patch(
        f"/orders/seller/{order['id']}/status", json={"status": "cancelled"}, headers=headers(owner_a)
    )

    assert resp.status_code == 200
    fulfillments = (await client.get(f"/orders/{order['id']}", headers=headers(buyer))).json()["fulfillments"]
    assert "cancelled" in {f["status"] for f in fulfillments}


async def test_buyer_without_phone_is_not_texted(client, seed, headers, sms):
    buyer = await seed.user(phone=None)
    owner, shop = await seed.seller()
    await seed.cart_line(buyer, await seed.product(shop, quantity=5), 1)
    order = (await client.post("/orders/checkout", headers=headers(buyer))).json()

    resp = await client.patch(f"/orders/seller/{order['id']}/status", json={"status": "shipped"}, headers=headers(owner))

    assert resp.status_code == 200
    assert sms.sent == []
