"""HTTP tests for cookie-session login/logout and the protected-route gate."""

import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

from crudkit.api.v1.auth import ANONYMOUS_USER, SESSION_IDENTITY_KEY, principal_from_session
from crudkit.core.security import create_access_token
from helpers import PASSWORD, login, make_app, make_repository, make_settings, seed_user


class AuthTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = make_settings()
        self.repository = make_repository(self.settings)
        self.user = seed_user(self.repository)
        self.app = make_app(self.settings, self.repository)
        self.client = TestClient(self.app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)


class TestLogin(AuthTestCase):
    def test_login_returns_user_and_sets_cookie(self) -> None:
        resp = login(self.client)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {
                "id": self.user.id,
                "first_name": "Satoshi",
                "last_name": "Nakamoto",
                "email": "satoshi@nakamotoinstitute.org",
            },
        )
        self.assertIn(self.settings.SESSION_NAME, resp.cookies)

    def test_login_records_last_login_in_app_state(self) -> None:
        login(self.client)
        self.assertIsNotNone(self.app.state.store.get(f"last_login:{self.user.id}"))

    def test_wrong_password_is_unauthorized(self) -> None:
        resp = login(self.client, password="wrong-password")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"errors": ["Invalid login"]})
        self.assertNotIn(self.settings.SESSION_NAME, resp.cookies)

    def test_email_match_ignores_case(self) -> None:
        resp = login(self.client, email="Satoshi@NakamotoInstitute.org")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["id"], self.user.id)

    def test_unknown_email_is_unauthorized(self) -> None:
        resp = login(self.client, email="nobody@nakamotoinstitute.org")
        self.assertEqual(resp.status_code, 401)

    def test_user_without_password_cannot_log_in(self) -> None:
        seed_user(self.repository, email="nopass@nakamotoinstitute.org", password=None)
        resp = login(self.client, email="nopass@nakamotoinstitute.org", password=PASSWORD)
        self.assertEqual(resp.status_code, 401)

    def test_invalid_login_body_lists_every_field(self) -> None:
        resp = self.client.post(
            "/api/v1/auth/login", json={"email": "nope", "password": "123"}
        )
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(
            resp.json(),
            {
                "errors": [
                    "email must be a valid email",
                    "password is required and must be at least 6 characters",
                ]
            },
        )


class TestProtectedRoutes(AuthTestCase):
    def test_anonymous_request_is_rejected(self) -> None:
        resp = self.client.get("/api/v1/user")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"errors": ["Unauthorized"]})

    def test_anonymous_create_has_no_side_effect(self) -> None:
        resp = self.client.post(
            "/api/v1/user",
            json={"first_name": "Linus", "last_name": "Torvalds", "email": "torvalds@transmeta.com"},
        )
        self.assertEqual(resp.status_code, 401)
        self.assertIsNone(self.repository.find_by_email("torvalds@transmeta.com"))

    def test_login_then_logout(self) -> None:
        login(self.client)
        self.assertEqual(self.client.get("/api/v1/user").status_code, 200)

        resp = self.client.get("/api/v1/auth/logout")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get("/api/v1/user").status_code, 401)

    def test_logout_without_session_succeeds(self) -> None:
        self.assertEqual(self.client.get("/api/v1/auth/logout").status_code, 200)

    def test_tampered_cookie_is_rejected(self) -> None:
        self.client.cookies.set(self.settings.SESSION_NAME, "forged.cookie.value")
        self.assertEqual(self.client.get("/api/v1/user").status_code, 401)

    def test_auth_disabled_uses_synthetic_principal(self) -> None:
        settings = make_settings(AUTH_ENABLED=False)
        with TestClient(make_app(settings, make_repository(settings))) as client:
            self.assertEqual(client.get("/api/v1/user").status_code, 200)


class TestPrincipalFromSession(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = make_settings()

    def test_valid_token(self) -> None:
        token = create_access_token("abc", "a@b.org", self.settings)
        user = principal_from_session({SESSION_IDENTITY_KEY: token}, self.settings)
        self.assertEqual((user.id, user.email), ("abc", "a@b.org"))

    def test_missing_or_garbage_token(self) -> None:
        self.assertIsNone(principal_from_session({}, self.settings))
        self.assertIsNone(
            principal_from_session({SESSION_IDENTITY_KEY: "garbage"}, self.settings)
        )

    def test_token_signed_with_other_secret(self) -> None:
        other = make_settings(JWT_SECRET="another-secret")
        token = create_access_token("abc", "a@b.org", other)
        self.assertIsNone(principal_from_session({SESSION_IDENTITY_KEY: token}, self.settings))

    def test_auth_disabled(self) -> None:
        settings = make_settings(AUTH_ENABLED=False)
        self.assertEqual(principal_from_session({}, settings), ANONYMOUS_USER)


class TestStaticFiles(unittest.TestCase):
    """Public files at /, auth-gated files at /secure, index.html for directory paths."""

    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        root = self.root = Path(tmp.name)
        (root / "root" / "guide").mkdir(parents=True)
        (root / "root" / "index.html").write_text("<h1>public</h1>")
        (root / "root" / "guide" / "index.html").write_text("<h1>guide</h1>")
        (root / "secure").mkdir()
        (root / "secure" / "index.html").write_text("<h1>secret</h1>")
        (root / "secure" / "report.txt").write_text("numbers")

        settings = make_settings(STATIC_ROOT=str(root))
        repository = make_repository(settings)
        seed_user(repository)
        self.client = TestClient(make_app(settings, repository))
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    def test_public_index(self) -> None:
        resp = self.client.get("/")
        self.assertEqual(resp.status_code, 200)
        self.assertIn("public", resp.text)
        self.assertIn("guide", self.client.get("/guide/").text)

    def test_routes_take_precedence_over_public_mount(self) -> None:
        self.assertEqual(self.client.get("/health").json()["status"], "ok")

    def test_missing_public_file(self) -> None:
        resp = self.client.get("/nope.txt")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"errors": ["Not Found"]})

    def test_secure_requires_session(self) -> None:
        resp = self.client.get("/secure/report.txt")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"errors": ["Unauthorized"]})

        login(self.client)
        self.assertEqual(self.client.get("/secure/report.txt").text, "numbers")
        self.assertIn("secret", self.client.get("/secure/").text)

    def test_directory_without_index_is_not_listed(self) -> None:
        login(self.client)
        (self.root / "secure" / "empty").mkdir()
        self.assertEqual(self.client.get("/secure/empty/").status_code, 404)


if __name__ == "__main__":
    unittest.main()
