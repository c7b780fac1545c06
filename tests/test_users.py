from tourism_api.core.jwt import decode_access_token
from tourism_api.models import User
from tourism_api.models.enums import BookingStatus, UserRole


def test_create_user_hashes_password(client, db):
    res = client.post(
        "/users/create",
        json={"name": "Nora", "email": "nora@example.com", "password": "pw-123456", "phoneNumber": "555"},
    )

    assert res.status_code == 201
    data = res.json()["data"]
    assert data["role"] == "TOURIST"
    assert data["phoneNumber"] == "555"
    assert "password" not in data

    stored = db.query(User).filter_by(email="nora@example.com").one()
    assert stored.password != "pw-123456"


def test_create_user_rejects_site_admin_role(client, db):
    res = client.post(
        "/users/create",
        json={"name": "Sly", "email": "sly@example.com", "password": "pw", "role": "SITE_ADMIN"},
    )

    assert res.status_code == 400
    assert db.query(User).count() == 0


def test_create_user_duplicate_email(client, make_user):
    make_user(email="dup@example.com")

    res = client.post("/users/create", json={"name": "Dup", "email": "dup@example.com", "password": "pw"})

    assert res.status_code == 409


def test_create_user_schema_errors(client):
    res = client.post("/users/create", json={"name": "", "email": "not-an-email"})

    assert res.status_code == 400
    body = res.json()
    assert body["isOk"] is False
    assert body["message"] == "Validation failed"
    assert len(body["errors"]) >= 2


def test_list_and_get_users_with_profiles(client, make_user, make_site_admin, make_guide):
    tourist = make_user(name="Tina")
    admin = make_site_admin()
    guide = make_guide()

    res = client.get("/users/alluser")
    assert res.status_code == 200
    assert len(res.json()["data"]) == 3

    res = client.get(f"/users/{admin.user_id}")
    assert res.json()["data"]["siteAdminId"] == admin.id
    assert res.json()["data"]["siteId"] == admin.site_id

    res = client.get(f"/users/{guide.user_id}")
    assert res.json()["data"]["guideId"] == guide.id

    res = client.get(f"/users/{tourist.id}")
    assert res.json()["data"]["guideId"] is None

    assert client.get("/users/nobody").status_code == 404


def test_update_user(client, db, make_user):
    user = make_user(name="Before")
    other = make_user()

    res = client.put(f"/users/update/{user.id}", json={"name": "After", "password": "new-pass"})
    assert res.status_code == 200
    assert res.json()["data"]["name"] == "After"

    login = client.post("/users/login", json={"email": user.email, "password": "new-pass"})
    assert login.status_code == 200

    res = client.put(f"/users/update/{user.id}", json={"email": other.email})
    assert res.status_code == 409


def test_delete_user_rules(client, db, make_user, make_site_admin, make_guide, make_event, make_booking):
    plain = make_user()
    admin = make_site_admin()
    guide = make_guide()
    booker = make_user()
    event = make_event(admin.site, admin=admin, guide=guide)
    make_booking(event, guide, tourist=booker, status=BookingStatus.COMPLETED)

    assert client.delete(f"/users/delete/{admin.user_id}").status_code == 409
    assert client.delete(f"/users/delete/{guide.user_id}").status_code == 409
    assert client.delete(f"/users/delete/{booker.id}").status_code == 409

    plain_id = plain.id
    assert client.delete(f"/users/delete/{plain_id}").status_code == 200
    assert db.query(User).filter_by(id=plain_id).count() == 0
    assert client.delete(f"/users/delete/{plain_id}").status_code == 404


def test_login_returns_token_and_site_for_site_admin(client, make_site_admin):
    admin = make_site_admin()

    res = client.post("/users/login", json={"email": admin.user.email, "password": "secret123"})

    assert res.status_code == 200
    body = res.json()
    assert body["status"] is True
    assert body["user"]["role"] == UserRole.SITE_ADMIN.value
    assert "password" not in body["user"]
    assert body["site"]["id"] == admin.site_id

    payload = decode_access_token(body["accessToken"])
    assert payload["sub"] == admin.user_id
    assert payload["role"] == "SITE_ADMIN"


def test_login_failures(client, make_user):
    user = make_user()

    assert client.post("/users/login", json={"email": "ghost@example.com", "password": "x"}).status_code == 404

    res = client.post("/users/login", json={"email": user.email, "password": "wrong"})
    assert res.status_code == 401
    assert res.json()["isOk"] is False
