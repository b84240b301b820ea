from services.cart_service.schemas import MAX_LINE_QUANTITY

from conftest import INTERNAL_KEY

ADDRESS = {
    "street": "12 Park Street",
    "city": "Kolkata",
    "state": "WB",
    "landmark": "Opposite the museum",
    "zipCode": "700016",
    "country": "India",
}


async def test_register_login_and_save_addresses(client):
    resp = await client.post(
        "/auth/register",
        json={"email": "asha@example.com", "password": "correct-horse", "name": "Asha"},
    )
    assert resp.status_code == 201

    resp = await client.post("/auth/login", json={"email": "asha@example.com", "password": "correct-horse"})
    assert resp.status_code == 200
    headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}

    for street in ("12 Park Street", "9 Lake Road"):
        resp = await client.post("/auth/me/addresses", json={**ADDRESS, "street": street}, headers=headers)
        assert resp.status_code == 201
        assert resp.json()["zipCode"] == "700016"

    me = (await client.get("/auth/me", headers=headers)).json()
    assert me["email"] == "asha@example.com"
    assert [a["street"] for a in me["addresses"]] == ["12 Park Street", "9 Lake Road"]


async def test_duplicate_registration_and_bad_password(client):
    creds = {"email": "dup@example.com", "password": "long-enough-pw"}
    assert (await client.post("/auth/register", json=creds)).status_code == 201
    assert (await client.post("/auth/register", json=creds)).status_code == 409

    resp = await client.post("/auth/login", json={**creds, "password": "wrong-password"})
    assert resp.status_code == 401


async def test_product_writes_need_internal_key(client, merchant):
    product = {"name": "Desk", "price": 120.0, "merchant_id": merchant.id}

    assert (await client.post("/products/", json=product)).status_code == 403

    resp = await client.post("/products/", json=product, headers={"X-Internal-API-Key": INTERNAL_KEY})
    assert resp.status_code == 201
    product_id = resp.json()["id"]

    assert (await client.get(f"/products/{product_id}")).json()["name"] == "Desk"
    assert (await client.delete(f"/products/{product_id}")).status_code == 403
    resp = await client.delete(f"/products/{product_id}", headers={"X-Internal-API-Key": INTERNAL_KEY})
    assert resp.status_code == 204
    assert (await client.get(f"/products/{product_id}")).status_code == 404


async def test_cart_merges_quantities_and_totals(client, shop, merchant, auth_headers):
    buyer = await shop.user()
    pen = await shop.product(2.5, merchant, name="Pen")
    pad = await shop.product(4, merchant, name="Pad")
    headers = auth_headers(buyer)

    await client.post("/cart/items", json={"product_id": pen.id, "quantity": 2}, headers=headers)
    await client.post("/cart/items", json={"product_id": pen.id, "quantity": 1}, headers=headers)
    resp = await client.post("/cart/items", json={"product_id": pad.id}, headers=headers)

    cart = resp.json()
    assert [(i["product_id"], i["quantity"]) for i in cart["items"]] == [(pen.id, 3), (pad.id, 1)]
    assert cart["total"] == 11.5

    resp = await client.delete(f"/cart/items/{pen.id}", headers=headers)
    assert [i["product_id"] for i in resp.json()["items"]] == [pad.id]

    assert (await client.delete("/cart/items", headers=headers)).status_code == 204
    assert (await client.get("/cart/", headers=headers)).json()["items"] == []


async def test_cart_rejects_unknown_products(client, shop, auth_headers):
    buyer = await shop.user()

    resp = await client.post("/cart/items", json={"product_id": 31337}, headers=auth_headers(buyer))

    assert resp.status_code == 404


async def test_cart_quantities_are_capped(client, shop, merchant, auth_headers):
    buyer = await shop.user()
    product = await shop.product(1, merchant)
    headers = auth_headers(buyer)

    for body in ({"product_id": product.id, "quantity": 10**30}, {"product_id": 10**30, "quantity": 1}):
        resp = await client.post("/cart/items", json=body, headers=headers)
        assert resp.status_code == 422

    await client.post("/cart/items", json={"product_id": product.id, "quantity": MAX_LINE_QUANTITY}, headers=headers)
    resp = await client.post("/cart/items", json={"product_id": product.id, "quantity": 5}, headers=headers)

    assert [i["quantity"] for i in resp.json()["items"]] == [MAX_LINE_QUANTITY]


async def test_out_of_range_ids_in_paths_are_rejected(client, shop, auth_headers):
    buyer = await shop.user()

    assert (await client.get(f"/products/{10**30}")).status_code == 422
    resp = await client.delete(f"/cart/items/{10**30}", headers=auth_headers(buyer))
    assert resp.status_code == 422
