"""API tests: FastAPI TestClient over an in-memory SQLite database with dependency overrides."""

import unittest
from collections.abc import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.v1.deps import get_notifier
from app.core.config import get_settings
from app.core.database import get_db
from app.main import app
from app.models import Base
from app.repositories.sql import SqlUnitOfWork
from app.services.bootstrap import seed_defaults
from tests.fakes import RecordingNotifier, make_settings

PREFIX = "/api/v1"


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.settings = make_settings()
        self.notifier = RecordingNotifier()

        db = self.Session()
        try:
            seed_defaults(SqlUnitOfWork(db), self.settings)
        finally:
            db.close()

        def override_get_db() -> Generator[Session, None, None]:
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_settings] = lambda: self.settings
        app.dependency_overrides[get_notifier] = lambda: self.notifier
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.engine.dispose()

    # helpers

    def register(self, email: str, role: str = "User", password: str = "Secret1", name: str = "Ann"):
        return self.client.post(
            f"{PREFIX}/auth/register",
            json={"email": email, "password": password, "name": name, "role": role},
        )

    def verified_token(self, email: str, role: str = "User") -> tuple[str, str]:
        """Register + verify; return (account id, session token)."""
        self.register(email, role=role)
        token = self.notifier.last_token_for(email)
        resp = self.client.post(f"{PREFIX}/auth/verify-email", json={"email": email, "token": token})
        data = resp.json()["data"]
        return data["user"]["id"], data["token"]

    def admin_token(self) -> str:
        resp = self.client.post(
            f"{PREFIX}/auth/login", json={"email": "admin@example.com", "password": "Admin123!"}
        )
        return resp.json()["data"]["token"]

    @staticmethod
    def bearer(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}


class TestAuthEndpoints(ApiTestCase):
    def test_scenario_register_login_verify_login(self) -> None:
        resp = self.register("a@x.com")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertFalse(body["data"]["user"]["email_verified"])
        self.assertIsNone(body["data"]["token"])
        self.assertNotIn("password_hash", body["data"]["user"])

        resp = self.client.post(f"{PREFIX}/auth/login", json={"email": "a@x.com", "password": "Secret1"})
        self.assertEqual(resp.status_code, 403)
        self.assertFalse(resp.json()["success"])

        token = self.notifier.last_token_for("a@x.com")
        resp = self.client.post(f"{PREFIX}/auth/verify-email", json={"email": "a@x.com", "token": token})
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["data"]["token"])

        resp = self.client.post(f"{PREFIX}/auth/login", json={"email": "a@x.com", "password": "Secret1"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["data"]["token_type"], "bearer")

    def test_duplicate_registration_conflicts(self) -> None:
        self.assertEqual(self.register("b@x.com").status_code, 200)
        resp = self.register("b@x.com", role="Manager")
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json(), {"success": False, "message": "Email already registered.", "data": None})

    def test_invalid_role_is_bad_request(self) -> None:
        resp = self.register("c@x.com", role="Root")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("Invalid role", resp.json()["message"])

    def test_malformed_body_is_bad_request_envelope(self) -> None:
        resp = self.client.post(f"{PREFIX}/auth/register", json={"email": "nope"})
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["success"])
        self.assertIn("password", resp.json()["message"])

    def test_bad_credentials_are_unauthorized(self) -> None:
        resp = self.client.post(f"{PREFIX}/auth/login", json={"email": "admin@example.com", "password": "nope"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Invalid email or password.")

    def test_verify_with_wrong_token(self) -> None:
        self.register("d@x.com")
        resp = self.client.post(f"{PREFIX}/auth/verify-email", json={"email": "d@x.com", "token": "bad"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Invalid or expired token.")


class TestUserEndpoints(ApiTestCase):
    def test_list_requires_token(self) -> None:
        resp = self.client.get(f"{PREFIX}/users")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.headers.get("www-authenticate"), "Bearer")

    def test_list_rejects_garbage_token(self) -> None:
        resp = self.client.get(f"{PREFIX}/users", headers=self.bearer("garbage"))
        self.assertEqual(resp.status_code, 401)

    def test_admin_lists_accounts(self) -> None:
        self.register("e@x.com")
        resp = self.client.get(f"{PREFIX}/users", headers=self.bearer(self.admin_token()))
        self.assertEqual(resp.status_code, 200)
        emails = {u["email"] for u in resp.json()["data"]}
        self.assertEqual(emails, {"admin@example.com", "e@x.com"})

    def test_non_admin_cannot_list(self) -> None:
        _, token = self.verified_token("f@x.com", role="Manager")
        resp = self.client.get(f"{PREFIX}/users", headers=self.bearer(token))
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["message"], "Forbidden.")

    def test_admin_without_matrix_grant_cannot_list(self) -> None:
        admin = self.admin_token()
        self.client.put(
            f"{PREFIX}/permissions",
            headers=self.bearer(admin),
            json={"role": "Admin", "module": "User Management", "can_create": True,
                  "can_read": False, "can_update": True, "can_delete": True},
        )
        resp = self.client.get(f"{PREFIX}/users", headers=self.bearer(admin))
        self.assertEqual(resp.status_code, 403)

    def test_self_or_admin_can_read_and_update(self) -> None:
        my_id, my_token = self.verified_token("g@x.com")
        other_id, _ = self.verified_token("h@x.com")

        self.assertEqual(self.client.get(f"{PREFIX}/users/{my_id}", headers=self.bearer(my_token)).status_code, 200)
        self.assertEqual(self.client.get(f"{PREFIX}/users/{other_id}", headers=self.bearer(my_token)).status_code, 403)
        self.assertEqual(
            self.client.get(f"{PREFIX}/users/{other_id}", headers=self.bearer(self.admin_token())).status_code,
            200,
        )

        resp = self.client.put(f"{PREFIX}/users/{my_id}", headers=self.bearer(my_token), json={"name": "Gina"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            self.client.get(f"{PREFIX}/users/{my_id}", headers=self.bearer(my_token)).json()["data"]["name"],
            "Gina",
        )
        resp = self.client.put(f"{PREFIX}/users/{other_id}", headers=self.bearer(my_token), json={"name": "X"})
        self.assertEqual(resp.status_code, 403)

    def test_admin_get_unknown_account_is_not_found(self) -> None:
        resp = self.client.get(f"{PREFIX}/users/missing", headers=self.bearer(self.admin_token()))
        self.assertEqual(resp.status_code, 404)

    def test_delete_and_delete_unknown(self) -> None:
        target_id, _ = self.verified_token("i@x.com")
        admin = self.admin_token()
        resp = self.client.delete(f"{PREFIX}/users/{target_id}", headers=self.bearer(admin))
        self.assertEqual(resp.status_code, 200)
        resp = self.client.delete(f"{PREFIX}/users/{target_id}", headers=self.bearer(admin))
        self.assertEqual(resp.status_code, 404)
        emails = {u["email"] for u in self.client.get(f"{PREFIX}/users", headers=self.bearer(admin)).json()["data"]}
        self.assertEqual(emails, {"admin@example.com"})

    def test_deleted_account_token_is_rejected(self) -> None:
        target_id, token = self.verified_token("j@x.com")
        self.client.delete(f"{PREFIX}/users/{target_id}", headers=self.bearer(self.admin_token()))
        resp = self.client.get(f"{PREFIX}/users/{target_id}", headers=self.bearer(token))
        self.assertEqual(resp.status_code, 401)


class TestPermissionEndpoints(ApiTestCase):
    def test_admin_only(self) -> None:
        _, token = self.verified_token("k@x.com", role="Manager")
        self.assertEqual(self.client.get(f"{PREFIX}/permissions", headers=self.bearer(token)).status_code, 403)

    def test_list_shows_seeded_matrix(self) -> None:
        resp = self.client.get(f"{PREFIX}/permissions", headers=self.bearer(self.admin_token()))
        self.assertEqual(resp.status_code, 200)
        cells = {(c["role"], c["module"]): c for c in resp.json()["data"]}
        self.assertEqual(len(cells), 9)
        self.assertFalse(cells[("Manager", "Reports")]["can_delete"])
        self.assertTrue(cells[("User", "Reports")]["can_read"])

    def test_set_permission_and_unknown_module(self) -> None:
        admin = self.admin_token()
        body = {"role": "Manager", "module": "Reports", "can_create": True,
                "can_read": True, "can_update": False, "can_delete": False}
        for _ in range(2):
            resp = self.client.put(f"{PREFIX}/permissions", headers=self.bearer(admin), json=body)
            self.assertEqual(resp.status_code, 200)
        cells = self.client.get(f"{PREFIX}/permissions", headers=self.bearer(admin)).json()["data"]
        self.assertEqual(len(cells), 9)
        manager = next(c for c in cells if c["role"] == "Manager" and c["module"] == "Reports")
        self.assertFalse(manager["can_update"])

        resp = self.client.put(
            f"{PREFIX}/permissions", headers=self.bearer(admin), json={**body, "module": "Payroll"}
        )
        self.assertEqual(resp.status_code, 404)
        resp = self.client.put(
            f"{PREFIX}/permissions", headers=self.bearer(admin), json={**body, "role": "Auditor"}
        )
        self.assertEqual(resp.status_code, 400)


class TestHealth(ApiTestCase):
    def test_health_reports_database(self) -> None:
        resp = self.client.get(f"{PREFIX}/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["database"], "connected")


if __name__ == "__main__":
    unittest.main()
