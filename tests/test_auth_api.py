"""
Sign-up, sign-in, profile and password reset.
"""
import pytest

from models.activity_logs import ActivityLog
from models.auth_accounts import AuthAccount
from models.users import User
from utils.security import create_password_reset_token, decode_token, get_password_hash, verify_password


def signup_payload(**overrides):
    payload = {
        "phone_number": "555-2000",
        "email": "maria@example.test",
        "password": "secret123",
        "confirm_password": "secret123",
        "first_name": "Maria",
        "last_name": "Lopez",
        "role": "parent",
    }
    payload.update(overrides)
    return payload


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = get_password_hash("secret123")
        assert hashed != "secret123"
        assert verify_password("secret123", hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_verify_against_garbage_hash(self):
        assert verify_password("secret123", "not-a-hash") is False


class TestSignUp:
    def test_creates_account_and_profile(self, client, db):
        response = client.post("/v1/auth/signup", json=signup_payload())

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["role"] == "parent"
        assert db.query(AuthAccount).filter_by(id=data["id"]).one()
        assert db.query(User).filter_by(id=data["id"]).one().first_name == "Maria"
        assert db.query(ActivityLog).filter_by(action="user.signed_up").count() == 1

    def test_password_mismatch(self, client):
        response = client.post("/v1/auth/signup", json=signup_payload(confirm_password="other123"))

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Passwords do not match"

    def test_short_password(self, client):
        response = client.post("/v1/auth/signup", json=signup_payload(password="abc", confirm_password="abc"))
        assert response.status_code == 400

    def test_duplicate_phone(self, client):
        assert client.post("/v1/auth/signup", json=signup_payload()).status_code == 201
        response = client.post("/v1/auth/signup", json=signup_payload(email="other@example.test"))

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Phone number already registered"

    def test_admin_role_cannot_self_register(self, client):
        response = client.post("/v1/auth/signup", json=signup_payload(role="admin"))
        assert response.status_code == 422


class TestLogin:
    def test_login_returns_usable_token(self, client):
        client.post("/v1/auth/signup", json=signup_payload())
        response = client.post("/v1/auth/login", json={"phone_number": "555-2000", "password": "secret123"})

        assert response.status_code == 200
        token = response.json()["data"]["token"]["access_token"]
        assert decode_token(token)["role"] == "parent"

        me = client.get("/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["data"]["phone_number"] == "555-2000"
        assert me.json()["data"]["last_login"] is not None

    @pytest.mark.parametrize("phone, password", [("555-2000", "wrong-pass"), ("555-0000", "secret123")])
    def test_bad_credentials(self, client, phone, password):
        client.post("/v1/auth/signup", json=signup_payload())
        response = client.post("/v1/auth/login", json={"phone_number": phone, "password": password})

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_deactivated_user(self, client, db, make_user, headers_for):
        user = make_user("parent")
        user.is_active = False
        db.commit()

        login = client.post("/v1/auth/login", json={"phone_number": user.phone_number, "password": "secret123"})
        assert login.status_code == 403
        assert client.get("/v1/auth/me", headers=headers_for(user)).status_code == 403


class TestProfile:
    def test_update_own_profile(self, client, make_user, headers_for):
        user = make_user("teacher")
        response = client.put("/v1/auth/me", json={"first_name": "Grace"}, headers=headers_for(user))

        assert response.status_code == 200
        assert response.json()["data"]["first_name"] == "Grace"
        assert response.json()["data"]["role"] == "teacher"


class TestPasswordReset:
    def test_request_always_succeeds(self, client, make_user):
        user = make_user("parent")
        known = client.post("/v1/auth/password-reset", json={"phone_number": user.phone_number})
        unknown = client.post("/v1/auth/password-reset", json={"phone_number": "000"})

        assert known.status_code == unknown.status_code == 200

    def test_reset_link_is_emailed(self, client, make_user, monkeypatch):
        sent = {}

        def capture(self, user_id, reset_link):
            sent[user_id] = reset_link
            return True

        monkeypatch.setattr("services.email_service.EmailService.send_password_reset_email", capture)
        user = make_user("parent")
        client.post("/v1/auth/password-reset", json={"phone_number": user.phone_number})

        assert sent[user.id].startswith("https://portal.example.test/reset-password?token=")

    def test_confirm_sets_new_password(self, client, make_user):
        user = make_user("parent")
        token = create_password_reset_token(user.id)

        response = client.post("/v1/auth/password-reset/confirm", json={"token": token, "new_password": "brand-new-1"})
        assert response.status_code == 200

        old = client.post("/v1/auth/login", json={"phone_number": user.phone_number, "password": "secret123"})
        new = client.post("/v1/auth/login", json={"phone_number": user.phone_number, "password": "brand-new-1"})
        assert old.status_code == 401
        assert new.status_code == 200

    def test_access_token_is_not_a_reset_token(self, client, make_user, headers_for):
        user = make_user("parent")
        access_token = headers_for(user)["Authorization"].split(" ", 1)[1]

        response = client.post(
            "/v1/auth/password-reset/confirm", json={"token": access_token, "new_password": "brand-new-1"}
        )
        assert response.status_code == 401
