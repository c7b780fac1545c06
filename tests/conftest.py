import io
import os
import shutil
import tempfile
import uuid
from datetime import datetime, timedelta

import pytest

# Point uploads/logs somewhere disposable before the app reads its config
_TMP_ROOT = tempfile.mkdtemp(prefix="tourism-api-tests-")
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_ROOT, "uploads")
os.environ["LOG_DIR"] = os.path.join(_TMP_ROOT, "logs")
os.environ["DATABASE_URL"] = "sqlite://"

from fastapi.testclient import TestClient  # noqa: E402
from PIL import Image  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from tourism_api.core.dependencies import get_db, get_storage  # noqa: E402
from tourism_api.core.security import hash_password  # noqa: E402
from tourism_api.db.session import Base  # noqa: E402
from tourism_api.main import app  # noqa: E402
from tourism_api.models import (  # noqa: E402
    Booking,
    Event,
    EventImage,
    TouristGuide,
    TouristicSite,
    TouristicSiteAdmin,
    TouristicSiteImage,
    User,
)
from tourism_api.models.enums import BookingStatus, UserRole  # noqa: E402
from tourism_api.utils.image_storage import ImageStorage  # noqa: E402

UPLOAD_DIR = os.environ["UPLOAD_DIR"]
PASSWORD = "secret123"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def storage():
    shutil.rmtree(UPLOAD_DIR, ignore_errors=True)
    os.makedirs(UPLOAD_DIR, exist_ok=True)
    yield ImageStorage(UPLOAD_DIR)
    shutil.rmtree(UPLOAD_DIR, ignore_errors=True)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(storage):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def stored_files(storage):
    """Lists every file under the upload root, staging included."""

    def _list():
        found = []
        for dirpath, _, filenames in os.walk(storage.root):
            found.extend(os.path.join(dirpath, name) for name in filenames)
        return found

    return _list


# ---------------------------------------------------------------------
# Upload payloads
# ---------------------------------------------------------------------
@pytest.fixture
def png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


def _publish(storage, category, png):
    """Write an already-published image and return its URL."""
    name = f"seed_{uuid.uuid4().hex}.png"
    folder = os.path.join(storage.root, category)
    os.makedirs(folder, exist_ok=True)
    with open(os.path.join(folder, name), "wb") as fh:
        fh.write(png)
    return f"/uploads/{category}/{name}"


# ---------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------
@pytest.fixture
def make_user(db):
    def _make(role=UserRole.TOURIST, **overrides):
        data = {
            "name": "Test Tourist",
            "email": f"user-{uuid.uuid4().hex[:10]}@example.com",
            "password": hash_password(PASSWORD),
            "role": role,
        }
        data.update(overrides)
        user = User(**data)
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_site_admin(db, make_user, storage, png_bytes):
    def _make(images=0, **site_fields):
        user = make_user(role=UserRole.SITE_ADMIN, name="Site Admin")
        site = TouristicSite(
            name=site_fields.pop("name", "Old Fort"),
            description=site_fields.pop("description", "A very old fort"),
            location=site_fields.pop("location", "Hilltop"),
            **site_fields,
        )
        admin = TouristicSiteAdmin(user=user, site=site)
        db.add_all([site, admin])
        for _ in range(images):
            db.add(TouristicSiteImage(site=site, url=_publish(storage, "sites", png_bytes)))
        db.commit()
        return admin

    return _make


@pytest.fixture
def make_guide(db, make_user):
    def _make(**overrides):
        user = make_user(role=UserRole.GUIDE, name="Guide")
        data = {
            "bio": "Local expert",
            "languages": ["en", "fr"],
            "price_per_hour": 25,
            "availability": {"mon": ["09:00-17:00"]},
        }
        data.update(overrides)
        guide = TouristGuide(user=user, **data)
        db.add(guide)
        db.commit()
        return guide

    return _make


@pytest.fixture
def make_event(db, storage, png_bytes):
    def _make(site, admin=None, guide=None, images=0, **overrides):
        data = {
            "title": "Sunset walk",
            "description": "Walk along the walls at sunset",
            "price": 15,
            "duration": 2,
            "max_group_size": 10,
        }
        data.update(overrides)
        event = Event(touristic_site=site, site_admin=admin, guide=guide, **data)
        db.add(event)
        for _ in range(images):
            event.images.append(EventImage(url=_publish(storage, "events", png_bytes)))
        db.commit()
        return event

    return _make


@pytest.fixture
def make_booking(db, make_user):
    def _make(event, guide, status=BookingStatus.PENDING, tourist=None, people=2):
        tourist = tourist or make_user()
        booking = Booking(
            tourist_id=tourist.id,
            event_id=event.id,
            guide_id=guide.id,
            booking_date=datetime.now() + timedelta(days=7),
            number_of_people=people,
            status=status,
            total_price=people * 15,
        )
        db.add(booking)
        db.commit()
        return booking

    return _make
