from sqlalchemy import event as sa_event
from sqlalchemy.exc import IntegrityError

from tourism_api.models import (
    Booking,
    Event,
    EventImage,
    Favorite,
    TouristicSite,
    TouristicSiteAdmin,
    TouristicSiteImage,
    User,
)
from tourism_api.models.enums import BookingStatus, UserRole

SITE_ADMIN_FORM = {
    "name": "Amina Admin",
    "email": "amina@example.com",
    "password": "s3cret-pass",
    "phoneNumber": "+212600000000",
    "siteName": "Kasbah of the Udayas",
    "siteDescription": "Citadel overlooking the river mouth",
    "siteLocation": "Rabat",
    "siteLatitude": "34.0311",
    "siteLongitude": "-6.8369",
    "siteOpeningHours": "09:00-18:00",
    "siteEntryFee": "20.50",
    "siteCategory": "Historic",
}


def _images(png, count, field="siteImages"):
    return [(field, (f"photo{i}.png", png, "image/png")) for i in range(count)]


# =====================================================================
# CREATE
# =====================================================================
def test_create_site_admin_persists_user_site_and_images(client, db, storage, stored_files, png_bytes):
    res = client.post("/tour-site/create", data=SITE_ADMIN_FORM, files=_images(png_bytes, 2))

    assert res.status_code == 201
    body = res.json()
    assert body["isOk"] is True

    user = body["data"]["user"]
    site = body["data"]["site"]
    assert user["email"] == "amina@example.com"
    assert user["role"] == UserRole.SITE_ADMIN.value
    assert "password" not in user
    assert site["name"] == "Kasbah of the Udayas"
    assert site["entryFee"] == 20.5
    assert len(site["images"]) == 2

    for image in site["images"]:
        assert image["url"].startswith("/uploads/sites/siteImages_")
        assert storage.exists(image["url"])

    # Nothing left behind in staging
    assert len(stored_files()) == 2

    db_user = db.query(User).filter_by(email="amina@example.com").one()
    assert db_user.password != "s3cret-pass"
    admin = db.query(TouristicSiteAdmin).filter_by(user_id=db_user.id).one()
    assert admin.site.name == "Kasbah of the Udayas"
    assert db.query(TouristicSiteImage).filter_by(touristic_site_id=admin.site_id).count() == 2


def test_create_site_admin_missing_location_writes_nothing(client, db, stored_files, png_bytes):
    form = dict(SITE_ADMIN_FORM)
    del form["siteLocation"]

    res = client.post("/tour-site/create", data=form, files=_images(png_bytes, 1))

    assert res.status_code == 400
    body = res.json()
    assert body["isOk"] is False
    assert body["message"].startswith("Missing required fields")
    assert "siteLocation is required" in body["errors"]

    assert db.query(User).count() == 0
    assert db.query(TouristicSite).count() == 0
    assert stored_files() == []


def test_create_site_admin_duplicate_email_writes_nothing(client, db, make_user, stored_files, png_bytes):
    make_user(email="amina@example.com")

    res = client.post("/tour-site/create", data=SITE_ADMIN_FORM, files=_images(png_bytes, 1))

    assert res.status_code == 409
    assert res.json()["isOk"] is False
    assert db.query(User).count() == 1
    assert db.query(TouristicSite).count() == 0
    assert stored_files() == []


def test_create_site_admin_rejects_non_image_upload(client, db, stored_files, png_bytes):
    files = _images(png_bytes, 1) + [("siteImages", ("notes.txt", b"just text", "text/plain"))]

    res = client.post("/tour-site/create", data=SITE_ADMIN_FORM, files=files)

    assert res.status_code == 400
    assert db.query(User).count() == 0
    assert db.query(TouristicSite).count() == 0
    assert stored_files() == []


def test_create_site_admin_rejects_too_many_images(client, db, stored_files, png_bytes):
    res = client.post("/tour-site/create", data=SITE_ADMIN_FORM, files=_images(png_bytes, 21))

    assert res.status_code == 400
    assert db.query(User).count() == 0
    assert stored_files() == []


def test_create_site_admin_rejects_bad_coordinates(client, db):
    form = dict(SITE_ADMIN_FORM, siteLatitude="north-ish")

    res = client.post("/tour-site/create", data=form)

    assert res.status_code == 400
    assert "siteLatitude must be a number" in res.json()["errors"]
    assert db.query(User).count() == 0


def test_create_site_admin_rejects_oversized_entry_fee(client, db, stored_files, png_bytes):
    form = dict(SITE_ADMIN_FORM, siteEntryFee="1e30")

    res = client.post("/tour-site/create", data=form, files=_images(png_bytes, 1))

    assert res.status_code == 400
    assert "siteEntryFee must be a number" in res.json()["errors"]
    assert db.query(User).count() == 0
    assert db.query(TouristicSite).count() == 0
    assert stored_files() == []


def test_create_site_admin_rolls_back_when_an_insert_fails(client, db, stored_files, png_bytes):
    def _reject_image(mapper, connection, target):
        raise IntegrityError("INSERT INTO touristic_site_images", {}, Exception("constraint failed"))

    sa_event.listen(TouristicSiteImage, "before_insert", _reject_image)
    try:
        res = client.post("/tour-site/create", data=SITE_ADMIN_FORM, files=_images(png_bytes, 2))
    finally:
        sa_event.remove(TouristicSiteImage, "before_insert", _reject_image)

    assert res.status_code == 409
    assert res.json()["isOk"] is False

    # User, site and admin were flushed before the images; all of it is gone
    assert db.query(User).count() == 0
    assert db.query(TouristicSite).count() == 0
    assert db.query(TouristicSiteAdmin).count() == 0
    assert db.query(TouristicSiteImage).count() == 0
    assert stored_files() == []


# =====================================================================
# DELETE
# =====================================================================
def _populated_admin(db, make_site_admin, make_event, make_guide, make_booking, make_user, status):
    admin = make_site_admin(images=1)
    guide = make_guide()
    event = make_event(admin.site, admin=admin, guide=guide, images=1)
    fan = make_user()
    db.add(Favorite(user_id=fan.id, touristic_site_id=admin.site_id))
    db.commit()
    booking = make_booking(event, guide, status=status)

    return {
        "admin_id": admin.id,
        "site_id": admin.site_id,
        "user_id": admin.user_id,
        "event_id": event.id,
        "booking_id": booking.id,
        "urls": [img.url for img in admin.site.images] + [img.url for img in event.images],
    }


def test_delete_site_admin_blocked_by_active_booking(
    client, db, storage, make_site_admin, make_event, make_guide, make_booking, make_user
):
    ids = _populated_admin(db, make_site_admin, make_event, make_guide, make_booking, make_user, BookingStatus.CONFIRMED)

    res = client.delete(f"/tour-site/delete/{ids['admin_id']}")

    assert res.status_code == 400
    body = res.json()
    assert body["isOk"] is False
    assert body["message"] == "Cannot delete site admin with active bookings. Please handle the bookings first."

    # Every part of the aggregate survives
    assert db.query(Event).filter_by(id=ids["event_id"]).count() == 1
    assert db.query(EventImage).filter_by(event_id=ids["event_id"]).count() == 1
    assert db.query(TouristicSiteImage).filter_by(touristic_site_id=ids["site_id"]).count() == 1
    assert db.query(Favorite).filter_by(touristic_site_id=ids["site_id"]).count() == 1
    assert db.query(TouristicSiteAdmin).filter_by(id=ids["admin_id"]).count() == 1
    assert db.query(TouristicSite).filter_by(id=ids["site_id"]).count() == 1
    assert db.query(User).filter_by(id=ids["user_id"]).count() == 1
    assert all(storage.exists(url) for url in ids["urls"])


def test_delete_site_admin_with_only_finished_bookings(
    client, db, storage, make_site_admin, make_event, make_guide, make_booking, make_user
):
    ids = _populated_admin(db, make_site_admin, make_event, make_guide, make_booking, make_user, BookingStatus.COMPLETED)
    canceled_event = make_event(db.get(TouristicSite, ids["site_id"]), guide=make_guide(), title="Rained out")
    make_booking(canceled_event, canceled_event.guide, status=BookingStatus.CANCELED)

    res = client.delete(f"/tour-site/delete/{ids['admin_id']}")

    assert res.status_code == 200
    assert res.json()["isOk"] is True

    assert db.query(Event).filter_by(touristic_site_id=ids["site_id"]).count() == 0
    assert db.query(Event).filter_by(site_admin_id=ids["admin_id"]).count() == 0
    assert db.query(EventImage).filter_by(event_id=ids["event_id"]).count() == 0
    assert db.query(Booking).filter_by(id=ids["booking_id"]).count() == 0
    assert db.query(TouristicSiteImage).filter_by(touristic_site_id=ids["site_id"]).count() == 0
    assert db.query(Favorite).filter_by(touristic_site_id=ids["site_id"]).count() == 0
    assert db.query(TouristicSiteAdmin).filter_by(id=ids["admin_id"]).count() == 0
    assert db.query(TouristicSite).filter_by(id=ids["site_id"]).count() == 0
    assert db.query(User).filter_by(id=ids["user_id"]).count() == 0
    assert not any(storage.exists(url) for url in ids["urls"])


def test_delete_site_admin_rolls_back_when_user_row_is_referenced(
    client, db, storage, make_site_admin, make_event, make_guide, make_booking, make_user
):
    ids = _populated_admin(db, make_site_admin, make_event, make_guide, make_booking, make_user, BookingStatus.COMPLETED)

    # The admin also toured someone else's site; that booking pins the user row
    other = make_site_admin(name="Blue Lagoon")
    other_guide = make_guide()
    trip = make_event(other.site, admin=other, guide=other_guide)
    make_booking(trip, other_guide, status=BookingStatus.COMPLETED, tourist=db.get(User, ids["user_id"]))

    res = client.delete(f"/tour-site/delete/{ids['admin_id']}")

    assert res.status_code == 409
    assert res.json()["isOk"] is False

    # Events, images and favorites were deleted before the user; all restored
    assert db.query(Event).filter_by(id=ids["event_id"]).count() == 1
    assert db.query(EventImage).filter_by(event_id=ids["event_id"]).count() == 1
    assert db.query(Booking).filter_by(id=ids["booking_id"]).count() == 1
    assert db.query(TouristicSiteImage).filter_by(touristic_site_id=ids["site_id"]).count() == 1
    assert db.query(Favorite).filter_by(touristic_site_id=ids["site_id"]).count() == 1
    assert db.query(TouristicSiteAdmin).filter_by(id=ids["admin_id"]).count() == 1
    assert db.query(TouristicSite).filter_by(id=ids["site_id"]).count() == 1
    assert db.query(User).filter_by(id=ids["user_id"]).count() == 1
    assert all(storage.exists(url) for url in ids["urls"])


def test_delete_site_admin_twice_returns_not_found(client, make_site_admin):
    admin_id = make_site_admin().id

    assert client.delete(f"/tour-site/delete/{admin_id}").status_code == 200

    for _ in range(2):
        res = client.delete(f"/tour-site/delete/{admin_id}")
        assert res.status_code == 404
        assert res.json() == {"isOk": False, "message": "Site admin not found"}


def test_delete_unknown_site_admin_returns_not_found(client):
    assert client.delete("/tour-site/delete/does-not-exist").status_code == 404
    assert client.delete("/tour-site/delete/does-not-exist").status_code == 404


# =====================================================================
# UPDATE
# =====================================================================
def test_update_site_admin_changes_fields_and_appends_images(client, db, storage, make_site_admin, png_bytes):
    admin = make_site_admin(images=1)
    admin_id, user_id, site_id = admin.id, admin.user_id, admin.site_id

    res = client.put(
        f"/tour-site/update/{admin_id}",
        data={"siteName": "New Name", "siteEntryFee": "", "name": "Renamed"},
        files=_images(png_bytes, 1),
    )

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["site"]["name"] == "New Name"
    assert data["site"]["entryFee"] is None
    assert data["user"]["name"] == "Renamed"
    assert len(data["site"]["images"]) == 2
    assert all(storage.exists(img["url"]) for img in data["site"]["images"])

    db.expire_all()
    assert db.get(TouristicSite, site_id).location == "Hilltop"
    assert db.get(User, user_id).name == "Renamed"


def test_update_site_admin_email_taken(client, make_site_admin, make_user):
    admin = make_site_admin()
    make_user(email="taken@example.com")

    res = client.put(f"/tour-site/update/{admin.id}", data={"email": "taken@example.com"})

    assert res.status_code == 409


def test_update_site_admin_rejects_empty_site_name(client, make_site_admin):
    admin = make_site_admin()

    res = client.put(f"/tour-site/update/{admin.id}", data={"siteName": "  "})

    assert res.status_code == 400
    assert "siteName cannot be empty" in res.json()["errors"]


def test_update_unknown_site_admin(client):
    assert client.put("/tour-site/update/nope", data={"siteName": "X"}).status_code == 404


# =====================================================================
# LISTINGS
# =====================================================================
def test_list_site_admins_paginates_and_keeps_first_image(client, make_site_admin):
    for _ in range(3):
        make_site_admin(images=2)

    res = client.get("/tour-site/all", params={"page": 1, "limit": 2})

    assert res.status_code == 200
    body = res.json()
    assert len(body["data"]) == 2
    assert all(len(item["site"]["images"]) == 1 for item in body["data"])
    assert body["pagination"] == {
        "page": 1,
        "limit": 2,
        "total": 3,
        "pages": 2,
        "hasNextPage": True,
        "hasPreviousPage": False,
    }


def test_get_site_admin_includes_site_and_events(client, make_site_admin, make_event, make_guide, make_booking):
    admin = make_site_admin(images=1)
    guide = make_guide()
    event = make_event(admin.site, admin=admin)
    make_booking(event, guide, status=BookingStatus.CONFIRMED)

    res = client.get(f"/tour-site/{admin.id}")

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["site"]["name"] == "Old Fort"
    assert len(data["site"]["images"]) == 1
    assert data["siteEvents"][0]["title"] == "Sunset walk"
    assert data["siteEvents"][0]["touristicSite"]["name"] == "Old Fort"
    assert data["siteEvents"][0]["bookings"][0]["status"] == "CONFIRMED"


def test_get_unknown_site_admin(client):
    assert client.get("/tour-site/missing").status_code == 404


def test_sites_by_admin_user_id(client, make_site_admin):
    admin = make_site_admin()
    make_site_admin(name="Elsewhere")

    res = client.get(f"/tour-site/sites/{admin.user_id}")

    assert res.status_code == 200
    body = res.json()
    assert [s["name"] for s in body["data"]] == ["Old Fort"]
    assert body["pagination"]["total"] == 1


def test_all_sites_lists_relations(client, db, make_site_admin, make_user, make_event, make_guide):
    admin = make_site_admin(images=1)
    fan = make_user(name="Fan")
    db.add(Favorite(user_id=fan.id, touristic_site_id=admin.site_id))
    db.commit()
    make_event(admin.site, guide=make_guide())

    res = client.get("/tour-site/allsites")

    assert res.status_code == 200
    site = res.json()["data"][0]
    assert site["favorites"][0]["user"]["name"] == "Fan"
    assert site["events"][0]["title"] == "Sunset walk"
    assert len(site["images"]) == 1
