from app.models.walker_profile import WalkerProfile
from conftest import auth


class TestSignup:

    def test_client_signup_defaults_to_user_role(self, client):
        res = client.post("/api/v1/auth/signup", json={"name": "Carlos"}, headers=auth("u-1"))

        assert res.status_code == 201
        body = res.json()
        assert body["role"] == "user"
        assert body["is_walker"] is False
        assert body["home_route"] == "/dashboard"
        assert body["user"]["email"] == "u-1@example.com"

    def test_walker_signup_creates_unlisted_walker_profile(self, client, db):
        res = client.post(
            "/api/v1/auth/signup",
            json={"name": "Ana", "role": "admin"},
            headers=auth("w-1"),
        )

        assert res.status_code == 201
        assert res.json()["home_route"] == "/walker-dashboard"
        row = db.query(WalkerProfile).filter(WalkerProfile.user_id == "w-1").one()
        assert row.is_available is False

    def test_second_signup_is_rejected(self, client, make_user):
        make_user("u-1")

        res = client.post(
            "/api/v1/auth/signup",
            json={"name": "Otra vez", "role": "admin"},
            headers=auth("u-1"),
        )

        assert res.status_code == 409
        assert res.json()["code"] == "AUTH_SIGNUP_409_1"

    def test_short_name_fails_validation(self, client):
        res = client.post("/api/v1/auth/signup", json={"name": "A"}, headers=auth("u-1"))

        assert res.status_code == 400
        body = res.json()
        assert body["code"] == "VALIDATION_400_1"
        assert body["success"] is False


class TestSession:

    def test_me_returns_role_and_home_route(self, client, walker):
        res = client.get("/api/v1/auth/me", headers=auth(walker))

        assert res.status_code == 200
        body = res.json()
        assert body["role"] == "admin"
        assert body["is_walker"] is True
        assert body["user"]["name"] == "Ana Paseadora"

    def test_missing_header(self, client):
        res = client.get("/api/v1/auth/me")
        assert res.status_code == 401
        assert res.json()["code"] == "AUTH_401_1"

    def test_malformed_header(self, client):
        res = client.get("/api/v1/auth/me", headers={"Authorization": "Token abc"})
        assert res.status_code == 401
        assert res.json()["code"] == "AUTH_401_2"

    def test_invalid_token(self, client):
        res = client.get("/api/v1/auth/me", headers=auth("bad-token"))
        assert res.status_code == 401
        assert res.json()["code"] == "AUTH_401_3"

    def test_token_without_profile(self, client):
        res = client.get("/api/v1/auth/me", headers=auth("nobody"))
        assert res.status_code == 404
        assert res.json()["code"] == "AUTH_404_1"

    def test_walker_only_endpoint_rejects_clients(self, client, owner):
        res = client.get("/api/v1/tracking/status", headers=auth(owner))
        assert res.status_code == 403
        assert res.json()["code"] == "AUTH_403_1"

    def test_client_only_endpoint_rejects_walkers(self, client, walker):
        res = client.post("/api/v1/affiliations/scan", json={"code": "X"}, headers=auth(walker))
        assert res.status_code == 403
        assert res.json()["code"] == "AUTH_403_2"


class TestUsers:

    def test_update_profile(self, client, owner):
        res = client.patch("/api/v1/users/me", json={"phone": "4491234567"}, headers=auth(owner))

        assert res.status_code == 200
        assert res.json()["user"]["phone"] == "4491234567"

    def test_update_without_fields(self, client, owner):
        res = client.patch("/api/v1/users/me", json={}, headers=auth(owner))
        assert res.status_code == 400
        assert res.json()["code"] == "USER_EDIT_400_1"

    def test_store_fcm_token(self, client, owner, db):
        from app.models.profile import Profile

        res = client.put("/api/v1/users/me/fcm-token", json={"fcm_token": "tok-123"}, headers=auth(owner))

        assert res.status_code == 200
        assert db.get(Profile, owner).fcm_token == "tok-123"
