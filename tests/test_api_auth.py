import unittest
from datetime import datetime, timedelta, timezone
from unittest import mock

import jwt

from campsite_api.config import get_settings
from campsite_api.models.profile import ProfileRole
from campsite_api.routers.auth import RESET_REQUESTED_MESSAGE
from campsite_api.services.auth import create_access_token
from tests.helpers import PASSWORD, ApiTestCase


class AuthApiTests(ApiTestCase):
    def _register(self, email="camper@example.com", **extra):
        body = {"email": email, "password": PASSWORD, "full_name": "Somchai Camper", **extra}
        return self.client.post("/api/auth/register", json=body)

    def test_health(self):
        self.assertEqual(self.client.get("/health").json(), {"status": "healthy"})

    def test_register_returns_session_and_profile(self):
        r = self._register(phone="081-234-5678")
        self.assertEqual(r.status_code, 201)
        body = r.json()
        self.assertTrue(body["success"])
        data = body["data"]
        self.assertEqual(data["user"]["role"], "user")
        self.assertEqual(data["profile"]["phone"], "0812345678")
        self.assertTrue(data["session"]["access_token"])
        self.assertIn("access_token", r.cookies)

    def test_register_duplicate_email(self):
        self._register()
        r = self._register()
        self.assertEqual(r.status_code, 400)
        self.assertFalse(r.json()["success"])

    def test_register_validation_details(self):
        r = self.client.post(
            "/api/auth/register",
            json={"email": "not-an-email", "password": "short", "full_name": "A", "phone": "12345"},
        )
        self.assertEqual(r.status_code, 400)
        body = r.json()
        self.assertEqual(body["error"], "Validation failed")
        fields = {d["field"] for d in body["details"]}
        self.assertTrue({"email", "password", "full_name", "phone"} <= fields)

    def test_login_and_me(self):
        self._register()
        self.client.cookies.clear()
        r = self.client.post("/api/auth/login", json={"email": "camper@example.com", "password": PASSWORD})
        self.assertEqual(r.status_code, 200)
        token = r.json()["data"]["session"]["access_token"]
        self.client.cookies.clear()
        me = self.client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["data"]["email"], "camper@example.com")

    def test_login_wrong_password(self):
        self._register()
        r = self.client.post("/api/auth/login", json={"email": "camper@example.com", "password": "wrong-password"})
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json()["error"], "Invalid email or password")

    def test_session_cookie_authenticates(self):
        self._register()
        r = self.client.get("/api/auth/me")
        self.assertEqual(r.status_code, 200)

    def test_me_requires_auth(self):
        r = self.client.get("/api/auth/me")
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json(), {"success": False, "error": "Not authenticated"})

    def test_refresh_with_body_token(self):
        refresh_token = self._register().json()["data"]["session"]["refresh_token"]
        self.client.cookies.clear()
        r = self.client.post("/api/auth/refresh", json={"refresh_token": refresh_token})
        self.assertEqual(r.status_code, 200)
        self.assertTrue(r.json()["data"]["session"]["access_token"])

    def test_refresh_rejects_access_token(self):
        access_token = self._register().json()["data"]["session"]["access_token"]
        self.client.cookies.clear()
        r = self.client.post("/api/auth/refresh", json={"refresh_token": access_token})
        self.assertEqual(r.status_code, 401)

    def test_update_profile(self):
        user = self.make_user()
        r = self.client.patch("/api/auth/me", json={"full_name": "New Name", "phone": "02-123-4567"}, headers=self.auth(user))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["data"]["full_name"], "New Name")
        self.assertEqual(r.json()["data"]["phone"], "021234567")

    def test_owner_request_flow(self):
        user = self.make_user()
        body = {"business_name": "Riverside Camping Co.", "contact_phone": "0812345678"}
        r = self.client.post("/api/auth/owner-request", json=body, headers=self.auth(user))
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.json()["data"]["status"], "pending")
        again = self.client.post("/api/auth/owner-request", json=body, headers=self.auth(user))
        self.assertEqual(again.status_code, 400)
        mine = self.client.get("/api/auth/owner-request", headers=self.auth(user))
        self.assertEqual(len(mine.json()["data"]), 1)

    def test_owner_cannot_request_owner_access(self):
        owner = self.make_user(ProfileRole.owner)
        r = self.client.post("/api/auth/owner-request", json={"business_name": "Camp"}, headers=self.auth(owner))
        self.assertEqual(r.status_code, 400)

    def test_register_rejects_padded_name(self):
        r = self._register(full_name="  A   ")
        self.assertEqual(r.status_code, 400)
        self.assertIn("full_name", {d["field"] for d in r.json()["details"]})
        r = self._register(full_name="  Somchai Camper  ")
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.json()["data"]["profile"]["full_name"], "Somchai Camper")

    def test_update_profile_cannot_clear_name(self):
        user = self.make_user(full_name="Kept Name")
        for body in ({"full_name": None}, {"full_name": "   "}, {"full_name": " B "}):
            with self.subTest(body=body):
                r = self.client.patch("/api/auth/me", json=body, headers=self.auth(user))
                self.assertEqual(r.status_code, 400)
        me = self.client.get("/api/auth/me", headers=self.auth(user))
        self.assertEqual(me.json()["data"]["full_name"], "Kept Name")

    def test_owner_request_rejects_padded_business_name(self):
        user = self.make_user()
        r = self.client.post("/api/auth/owner-request", json={"business_name": " X  "}, headers=self.auth(user))
        self.assertEqual(r.status_code, 400)


class PasswordResetApiTests(ApiTestCase):
    NEW_PASSWORD = "Fresh-Passw0rd"

    def setUp(self):
        super().setUp()
        self.user = self.make_user(email="reset@example.com", full_name="Reset Person")

    def _request_token(self, email="reset@example.com"):
        with mock.patch("campsite_api.routers.auth.send_password_reset_email") as send:
            r = self.client.post("/api/auth/reset-password/request", json={"email": email})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["message"], RESET_REQUESTED_MESSAGE)
        if not send.called:
            return None
        to_email, full_name, reset_url, expire_minutes = send.call_args.args
        self.assertEqual((to_email, full_name, expire_minutes), ("reset@example.com", "Reset Person", 60))
        self.assertIn("/auth/reset-password?token=", reset_url)
        return reset_url.split("token=", 1)[1]

    def _confirm(self, token, password=None):
        return self.client.post(
            "/api/auth/reset-password/confirm", json={"token": token, "password": password or self.NEW_PASSWORD}
        )

    def _login(self, password):
        return self.client.post("/api/auth/login", json={"email": "reset@example.com", "password": password})

    def test_unknown_email_gets_same_reply_and_no_email(self):
        self.assertIsNone(self._request_token("nobody@example.com"))

    def test_reset_flow_changes_password(self):
        token = self._request_token("Reset@Example.com")
        r = self._confirm(token)
        self.assertEqual(r.status_code, 200, r.text)
        self.assertEqual(r.json()["message"], "Password updated successfully")
        self.assertEqual(self._login(PASSWORD).status_code, 401)
        self.assertEqual(self._login(self.NEW_PASSWORD).status_code, 200)

    def test_token_works_once(self):
        token = self._request_token()
        self.assertEqual(self._confirm(token).status_code, 200)
        again = self._confirm(token, "Another-Passw0rd")
        self.assertEqual(again.status_code, 401)
        self.assertEqual(again.json()["error"], "Invalid or expired token")

    def test_invalid_expired_or_wrong_type_token(self):
        settings = get_settings()
        expired = jwt.encode(
            {"sub": str(self.user.id), "type": "password_reset", "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
        access = create_access_token(self.user.id, self.user.email, self.user.role)
        for token in ("not-a-token", expired, access):
            with self.subTest(token=token[:12]):
                self.assertEqual(self._confirm(token).status_code, 401)
        self.assertEqual(self._login(PASSWORD).status_code, 200)

    def test_new_password_strength(self):
        token = self._request_token()
        for password in ("Sh0rt", "alllowercase1", "NoDigitsHere"):
            with self.subTest(password=password):
                self.assertEqual(self._confirm(token, password).status_code, 400)
        self.assertEqual(self._confirm(token).status_code, 200)

    def test_requests_are_rate_limited(self):
        for _ in range(5):
            self.assertIsNotNone(self._request_token())
        with mock.patch("campsite_api.routers.auth.send_password_reset_email") as send:
            r = self.client.post("/api/auth/reset-password/request", json={"email": "reset@example.com"})
        self.assertEqual(r.status_code, 429)
        self.assertGreater(r.json()["retryAfter"], 0)
        self.assertIn("Retry-After", r.headers)
        send.assert_not_called()


if __name__ == "__main__":
    unittest.main()
