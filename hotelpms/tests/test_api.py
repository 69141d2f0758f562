"""API integration tests for rooms, room types and guests."""


def test_root_and_health(client):
    """Test service endpoints."""
    assert client.get("/").json()["message"] == "Hotel PMS API"
    assert client.get("/health").json() == {"status": "healthy"}


def test_create_room_type(client, sample_room_type_data):
    """Test creating a room type."""
    response = client.post("/api/room-types", json=sample_room_type_data)
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Deluxe"
    assert data["base_price"] == 150.0
    assert "id" in data


def test_duplicate_room_type_name(client, sample_room_type_data):
    """Room type names are unique."""
    client.post("/api/room-types", json=sample_room_type_data)
    response = client.post("/api/room-types", json=sample_room_type_data)
    assert response.status_code == 400


def test_delete_room_type_in_use(client, room_type, room):
    """Room types with rooms cannot be deleted."""
    response = client.delete(f"/api/room-types/{room_type.id}")
    assert response.status_code == 400


def test_create_and_list_rooms(client, room_type):
    """Test creating and listing rooms."""
    response = client.post("/api/rooms", json={
        "room_number": "201",
        "room_type_id": room_type.id,
        "floor": 2,
        "price_override": 130.0
    })
    assert response.status_code == 201
    assert response.json()["status"] == "available"

    response = client.get("/api/rooms", params={"floor": 2})
    assert response.status_code == 200
    rooms = response.json()
    assert len(rooms) == 1
    assert rooms[0]["price_override"] == 130.0


def test_create_room_unknown_type(client):
    """Rooms need an existing room type."""
    response = client.post("/api/rooms", json={"room_number": "301", "room_type_id": "missing", "floor": 3})
    assert response.status_code == 404


def test_duplicate_room_number(client, room):
    """Room numbers are unique."""
    response = client.post("/api/rooms", json={
        "room_number": room.room_number,
        "room_type_id": room.room_type_id,
        "floor": 1
    })
    assert response.status_code == 400


def test_room_status_patch_and_filter(client, room):
    """Test changing and filtering by room status."""
    response = client.patch(f"/api/rooms/{room.id}/status", json={"status": "cleaning"})
    assert response.status_code == 200
    assert response.json()["status"] == "cleaning"

    assert len(client.get("/api/rooms", params={"status": "cleaning"}).json()) == 1
    assert client.get("/api/rooms", params={"status": "occupied"}).json() == []


def test_available_rooms_excludes_booked(client, room, sample_booking_data):
    """Booked rooms are not offered for overlapping dates."""
    client.post("/api/bookings", json=sample_booking_data)

    overlapping = client.get("/api/rooms/available", params={"check_in": "2024-06-02", "check_out": "2024-06-05"})
    assert overlapping.status_code == 200
    assert overlapping.json() == []


def test_create_guest(client):
    """Test creating a guest."""
    response = client.post("/api/guests", json={
        "full_name": "Grace Hopper",
        "email": "Grace@Example.com",
        "phone": "555-123-4567"
    })
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "grace@example.com"
    assert data["total_stays"] == 0


def test_create_guest_invalid_email(client):
    """Malformed e-mail addresses are rejected."""
    response = client.post("/api/guests", json={"full_name": "X", "email": "not-an-email", "phone": "555"})
    assert response.status_code == 422


def test_list_guests_search(client, guest):
    """Test searching guests."""
    client.post("/api/guests", json={"full_name": "Grace Hopper", "phone": "555-123-4567", "vip": True})

    response = client.get("/api/guests", params={"search": "ada"})
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["guests"][0]["id"] == guest.id

    vips = client.get("/api/guests", params={"vip": True}).json()
    assert [g["full_name"] for g in vips["guests"]] == ["Grace Hopper"]


def test_get_missing_guest(client):
    """Unknown guest yields 404."""
    assert client.get("/api/guests/missing").status_code == 404


def test_guest_bookings(client, guest, sample_booking_data):
    """Test listing a guest's bookings."""
    client.post("/api/bookings", json=sample_booking_data)

    response = client.get(f"/api/guests/{guest.id}/bookings")
    assert response.status_code == 200
    assert len(response.json()) == 1


def test_update_room_number_clash(client, room, room_type):
    """Renumbering a room onto an existing number is rejected."""
    other = client.post("/api/rooms", json={
        "room_number": "102",
        "room_type_id": room_type.id,
        "floor": 1
    }).json()

    response = client.put(f"/api/rooms/{other['id']}", json={"room_number": "101"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Room 101 already exists"

    # keeping its own number is not a clash
    same = client.put(f"/api/rooms/{other['id']}", json={"room_number": "102", "floor": 2})
    assert same.status_code == 200
    assert same.json()["floor"] == 2


def test_update_room_rejects_null_columns(client, room):
    """Required room fields cannot be nulled."""
    for field in ("floor", "room_type_id", "is_active", "room_number"):
        response = client.put(f"/api/rooms/{room.id}", json={field: None})
        assert response.status_code == 422, field


def test_update_room_clears_price_override(client, db_session, room):
    """A null override falls back to the room type price."""
    room.price_override = 130.0
    db_session.commit()

    response = client.put(f"/api/rooms/{room.id}", json={"price_override": None})
    assert response.status_code == 200
    assert response.json()["price_override"] is None


def test_update_room_unknown_type(client, room):
    """Moving a room to an unknown type yields 404."""
    response = client.put(f"/api/rooms/{room.id}", json={"room_type_id": "missing"})
    assert response.status_code == 404


def test_update_room_type_rejects_null_columns(client, room_type):
    """Required room type fields cannot be nulled."""
    for field in ("base_price", "name", "currency", "max_occupancy"):
        response = client.put(f"/api/room-types/{room_type.id}", json={field: None})
        assert response.status_code == 422, field

    response = client.put(f"/api/room-types/{room_type.id}", json={"base_price": 110.0})
    assert response.status_code == 200
    assert response.json()["base_price"] == 110.0


def test_update_guest_email_clash(client, guest):
    """A guest cannot take another guest's email."""
    other = client.post("/api/guests", json={
        "full_name": "Charles Babbage",
        "email": "charles@example.com",
        "phone": "+44 20 7946 0000"
    }).json()

    response = client.put(f"/api/guests/{other['id']}", json={"email": "ADA@example.com"})
    assert response.status_code == 400
    assert response.json()["detail"] == "A guest with this email already exists"

    own = client.put(f"/api/guests/{guest.id}", json={"email": "Ada@Example.com"})
    assert own.status_code == 200
    assert own.json()["email"] == "ada@example.com"


def test_update_guest_rejects_null_name(client, guest):
    """Full name cannot be nulled."""
    assert client.put(f"/api/guests/{guest.id}", json={"full_name": None}).status_code == 422


def test_toggle_guest_vip(client, guest):
    """The VIP toggle flips the flag each call."""
    response = client.patch(f"/api/guests/{guest.id}/vip")
    assert response.status_code == 200
    assert response.json()["vip"] is True

    assert client.patch(f"/api/guests/{guest.id}/vip").json()["vip"] is False
    assert client.patch("/api/guests/missing/vip").status_code == 404


def test_guest_blacklist(client, guest):
    """Blacklisting needs a reason; lifting it clears the reason."""
    assert client.patch(f"/api/guests/{guest.id}/blacklist", json={"blacklisted": True}).status_code == 422

    response = client.patch(f"/api/guests/{guest.id}/blacklist", json={
        "blacklisted": True,
        "reason": "Damaged property"
    })
    assert response.status_code == 200
    data = response.json()
    assert data["blacklisted"] is True
    assert data["blacklist_reason"] == "Damaged property"

    lifted = client.patch(f"/api/guests/{guest.id}/blacklist", json={"blacklisted": False}).json()
    assert lifted["blacklisted"] is False
    assert lifted["blacklist_reason"] is None
