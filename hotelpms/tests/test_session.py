"""Engine construction tests."""
import os
import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from hotelpms.db.models import Base, Room
from hotelpms.db.session import build_engine


def test_in_memory_engine_shares_one_connection():
    """In-memory databases keep their tables across sessions."""
    engine = build_engine("sqlite:///:memory:")
    assert isinstance(engine.pool, StaticPool)

    Base.metadata.create_all(bind=engine)
    with engine.connect() as conn:
        tables = conn.execute(text("SELECT name FROM sqlite_master WHERE type='table'")).scalars().all()
    assert "rooms" in tables
    engine.dispose()


def test_foreign_keys_enforced(tmp_path):
    """Rooms pointing at a missing room type are refused."""
    engine = build_engine(f"sqlite:///{tmp_path / 'pms.db'}")
    Base.metadata.create_all(bind=engine)

    with engine.connect() as conn:
        assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1

    session = sessionmaker(bind=engine)()
    session.add(Room(room_number="999", room_type_id="gone", floor=9))
    with pytest.raises(IntegrityError):
        session.commit()
    session.close()
    engine.dispose()


def test_file_database_directory_created(tmp_path):
    """Missing parent directories of the database file are created."""
    db_dir = tmp_path / "data" / "nested"
    engine = build_engine(f"sqlite:///{db_dir / 'pms.db'}")
    assert os.path.isdir(db_dir)
    engine.dispose()
