"""Integration tests for the Promos API via TestClient."""


def test_promo_lifecycle(client, admin_headers):
    response = client.post(
        "/api/promos",
        json={"image_url": "https://cdn.example.com/diwali.png", "title": "Diwali sale", "display_order": 1},
        headers=admin_headers,
    )
    assert response.status_code == 201
    promo = response.json()["data"]
    assert promo["is_active"] is True

    public = client.get(f"/api/promos/{promo['id']}")
    assert public.status_code == 200
    assert public.json()["data"]["title"] == "Diwali sale"

    response = client.put(f"/api/promos/{promo['id']}", json={"is_active": False}, headers=admin_headers)
    assert response.json()["data"]["is_active"] is False
    assert response.json()["data"]["title"] == "Diwali sale"

    assert client.delete(f"/api/promos/{promo['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/promos/{promo['id']}").status_code == 404


def test_image_is_required(client, admin_headers):
    response = client.post("/api/promos", json={"title": "No picture"}, headers=admin_headers)
    assert response.status_code == 400


def test_writes_require_admin(client):
    response = client.post("/api/promos", json={"image_url": "https://cdn.example.com/a.png"})
    assert response.status_code == 401
