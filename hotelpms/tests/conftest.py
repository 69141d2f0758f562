"""Pytest configuration and fixtures."""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from hotelpms.db.models import Base, RoomType, Room, Guest
from hotelpms.db.session import get_db
from hotelpms.main import app
from fastapi.testclient import TestClient
import tempfile
import os


@pytest.fixture(scope="function")
def db_session():
    """Create a test database session."""
    # Create temporary SQLite database
    db_fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(db_fd)

    engine = create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()
        os.unlink(db_path)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def room_type(db_session):
    """Standard room type with a base price of 100."""
    rt = RoomType(name="Standard", base_price=100.0, max_occupancy=2, group_prices={"ACME": 70.0})
    db_session.add(rt)
    db_session.commit()
    db_session.refresh(rt)
    return rt


@pytest.fixture
def room(db_session, room_type):
    """Room 101 of the standard room type, no override."""
    r = Room(room_number="101", room_type_id=room_type.id, floor=1)
    db_session.add(r)
    db_session.commit()
    db_session.refresh(r)
    return r


@pytest.fixture
def guest(db_session):
    """Regular guest."""
    g = Guest(full_name="Ada Lovelace", email="ada@example.com", phone="+44 20 7946 0958")
    db_session.add(g)
    db_session.commit()
    db_session.refresh(g)
    return g


@pytest.fixture
def sample_room_type_data():
    """Sample room type payload."""
    return {
        "name": "Deluxe",
        "description": "Sea view",
        "base_price": 150.0,
        "capacity_adults": 2,
        "max_occupancy": 3,
        "amenities": ["wifi", "minibar"]
    }


@pytest.fixture
def sample_booking_data(guest, room):
    """Sample booking payload for room 101."""
    return {
        "guest_id": guest.id,
        "room_id": room.id,
        "check_in": "2024-06-01",
        "check_out": "2024-06-04",
        "number_of_guests": 2
    }
