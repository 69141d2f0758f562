"""Custom price and room pricing API tests."""


def create_custom_price(client, room_type_id, start, end, price, **extra):
    payload = {
        "room_type_id": room_type_id,
        "title": extra.pop("title", "Summer promo"),
        "start_date": start,
        "end_date": end,
        "price": price,
    }
    payload.update(extra)
    return client.post("/api/custom-prices", json=payload)


def test_create_custom_price(client, room_type):
    """Test creating a custom price."""
    response = create_custom_price(client, room_type.id, "2024-06-01", "2024-06-10", 80.0)
    assert response.status_code == 201
    data = response.json()
    assert data["price"] == 80.0
    assert data["condition"] == "None"
    assert data["is_active"] is True


def test_create_custom_price_unknown_room_type(client):
    """Unknown room type is rejected."""
    response = create_custom_price(client, "missing", "2024-06-01", "2024-06-10", 80.0)
    assert response.status_code == 404


def test_create_custom_price_inverted_window(client, room_type):
    """Start after end is a validation error."""
    response = create_custom_price(client, room_type.id, "2024-06-10", "2024-06-01", 80.0)
    assert response.status_code == 422


def test_list_custom_prices_expands_room_type(client, room_type):
    """Listed custom prices carry their room type."""
    create_custom_price(client, room_type.id, "2024-06-01", "2024-06-10", 80.0)
    create_custom_price(client, room_type.id, "2024-07-01", "2024-07-10", 90.0, is_active=False)

    response = client.get("/api/custom-prices")
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 2
    assert data[0]["room_type"]["name"] == "Standard"

    active = client.get("/api/custom-prices", params={"active": True}).json()
    assert [cp["price"] for cp in active] == [80.0]


def test_delete_custom_price(client, room_type):
    """Test deleting a custom price."""
    cp_id = create_custom_price(client, room_type.id, "2024-06-01", "2024-06-10", 80.0).json()["id"]

    response = client.delete(f"/api/custom-prices/{cp_id}")
    assert response.status_code == 200
    assert client.get("/api/custom-prices").json() == []

    response = client.delete(f"/api/custom-prices/{cp_id}")
    assert response.status_code == 404


def test_room_price_endpoint(client, room_type, room):
    """Price endpoint reports the winning source."""
    create_custom_price(client, room_type.id, "2024-06-01", "2024-06-10", 80.0)
    create_custom_price(client, room_type.id, "2024-06-05", "2024-06-07", 60.0)

    response = client.get(f"/api/rooms/{room.id}/price", params={"date": "2024-06-06"})
    assert response.status_code == 200
    data = response.json()
    assert data["price"] == 60.0
    assert data["source"] == "custom_price"
    assert data["date"] == "2024-06-06"

    data = client.get(f"/api/rooms/{room.id}/price", params={"date": "2024-06-20"}).json()
    assert data["price"] == 100.0
    assert data["source"] == "base"
    assert data["custom_price_id"] is None


def test_room_price_unknown_room(client):
    """Unknown room yields 404."""
    response = client.get("/api/rooms/missing/price", params={"date": "2024-06-06"})
    assert response.status_code == 404
    assert "not found" in response.json()["detail"]


def test_room_quote_endpoint(client, room):
    """Quote endpoint prices every night."""
    response = client.get(
        f"/api/rooms/{room.id}/quote",
        params={"check_in": "2024-06-01", "check_out": "2024-06-03"}
    )
    assert response.status_code == 200
    data = response.json()
    assert len(data["nights"]) == 2
    assert data["total"] == 200.0
