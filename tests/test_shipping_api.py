"""
HTTP tests: /api/shipping/rates and shipping configuration endpoints.
"""

from flat_rate_shipping import models


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


# ============================================================
# /shipping/rates
# ============================================================

def test_rates_for_seeded_shop(client, seeded_shop, sample_cart):
    response = client.post("/api/shipping/rates", json={"cart": sample_cart, "shopId": seeded_shop})
    assert response.status_code == 200
    data = response.json()
    assert [q["rate"] for q in data["quotes"]] == [7, 0]
    assert data["quotes"][0]["carrier"] == "Acme"
    assert data["quotes"][0]["shopId"] == "shop-1"
    assert data["quotes"][1]["method"]["carrier"] == "Acme"
    assert data["errors"] == []
    assert data["retrialTargets"] == []
    assert len(data["rates"]) == 2


def test_rates_default_to_cart_shop(client, seeded_shop, sample_cart):
    response = client.post("/api/shipping/rates", json={"cart": sample_cart})
    assert response.status_code == 200
    assert len(response.json()["quotes"]) == 2


def test_rates_report_invalid_cart_as_error_entry(client, seeded_shop, sample_cart):
    sample_cart["items"] = []
    response = client.post("/api/shipping/rates", json={"cart": sample_cart})
    assert response.status_code == 200
    data = response.json()
    assert data["quotes"] == []
    assert data["errors"] == [{
        "requestStatus": "error",
        "shippingProvider": "flat-rate-shipping",
        "message": "this cart has no items",
    }]


def test_rates_without_methods_return_retry_marker(client, db, sample_cart):
    db.add(models.Package(
        name="reaction-shipping-rates", shop_id="shop-1", enabled=True,
        settings={"flatRates": {"enabled": True}},
    ))
    db.commit()
    response = client.post("/api/shipping/rates", json={"cart": sample_cart})
    assert response.status_code == 200
    data = response.json()
    assert data["quotes"] == []
    assert len(data["errors"]) == 1
    assert data["retrialTargets"] == [{"packageName": "flat-rate-shipping", "fileName": "hooks"}]


def test_rates_with_flat_rates_disabled_are_empty(client, sample_cart):
    response = client.post("/api/shipping/rates", json={"cart": sample_cart})
    assert response.status_code == 200
    assert response.json()["rates"] == []


def test_merchant_shipping_rates_returns_501(client, db, seeded_shop, sample_cart):
    db.add(models.Package(
        name="reaction-marketplace", shop_id=seeded_shop, enabled=True,
        settings={"enabled": True, "public": {"merchantShippingRates": True}},
    ))
    db.commit()
    response = client.post("/api/shipping/rates", json={"cart": sample_cart})
    assert response.status_code == 501
    assert response.json()["detail"]["error"] == "not-implemented"


# ============================================================
# Configuration endpoints
# ============================================================

def test_seed_is_idempotent(client, sample_cart):
    first = client.get("/api/shipping/seed").json()
    second = client.get("/api/shipping/seed").json()
    assert first["seeded"] == 2
    assert second["seeded"] == 0

    response = client.post("/api/shipping/rates", json={"cart": sample_cart})
    quotes = response.json()["quotes"]
    # next_day is seeded disabled
    assert [q["rate"] for q in quotes] == [5, 12]
    assert all(q["carrier"] == "Flat Rate" for q in quotes)


def test_create_and_list_configs(client):
    response = client.post("/api/shipping/configs", json={
        "shopId": "shop-2",
        "name": "Regional",
        "provider": {"name": "flatRates", "label": "RegionalCo", "enabled": True},
        "methods": [{"name": "local", "rate": 3, "handling": 1, "enabled": True}],
    })
    assert response.status_code == 200
    created = response.json()
    assert created["shopId"] == "shop-2"
    assert created["methods"][0]["rate"] == 3

    listed = client.get("/api/shipping/configs", params={"shop_id": "shop-2"}).json()
    assert len(listed) == 1
    assert listed[0]["provider"]["label"] == "RegionalCo"
    assert client.get("/api/shipping/configs", params={"shop_id": "shop-3"}).json() == []


def test_disabling_provider_removes_its_quotes(client, seeded_shop, sample_cart):
    config_id = client.get("/api/shipping/configs").json()[0]["id"]
    response = client.patch(f"/api/shipping/configs/{config_id}", json={"providerEnabled": False})
    assert response.status_code == 200
    assert response.json()["provider"]["enabled"] is False

    data = client.post("/api/shipping/rates", json={"cart": sample_cart}).json()
    assert data["quotes"] == []
    assert data["errors"][0]["message"] == "Flat rate shipping did not return any shipping methods."


def test_update_missing_config_returns_404(client):
    response = client.patch("/api/shipping/configs/999", json={"providerEnabled": False})
    assert response.status_code == 404


def test_flat_rate_settings_toggle(client, seeded_shop, sample_cart):
    response = client.put(f"/api/shipping/settings/{seeded_shop}", json={"enabled": False})
    assert response.status_code == 200
    assert response.json()["settings"]["flatRates"]["enabled"] is False

    assert client.post("/api/shipping/rates", json={"cart": sample_cart}).json()["rates"] == []

    client.put(f"/api/shipping/settings/{seeded_shop}", json={"enabled": True})
    fetched = client.get(f"/api/shipping/settings/{seeded_shop}").json()
    assert fetched["settings"]["flatRates"]["enabled"] is True


def test_settings_for_unknown_shop_returns_404(client):
    assert client.get("/api/shipping/settings/nowhere").status_code == 404
