"""End-to-end tests for the HTTP surface using FastAPI's TestClient on in-memory SQLite."""

import unittest

from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.core.database import get_db
from app.main import app
from app.models import Role, User
from app.services.seed import seed_roles
from tests._support import PASSWORD, make_session_factory, make_settings


class ApiTestCase(unittest.TestCase):
    seed = True

    def setUp(self) -> None:
        self.settings = make_settings()
        self.session_factory = make_session_factory()
        if self.seed:
            with self.session_factory() as session:
                seed_roles(session, self.settings)

        def override_get_db():
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_settings] = lambda: self.settings
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    @staticmethod
    def auth(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    def register(self, username: str, token: str | None = None):
        body = {
            "name": username.title(),
            "username": username,
            "email": f"{username}@example.com",
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
        }
        headers = self.auth(token) if token else None
        return self.client.post("/auth/register", json=body, headers=headers)

    def login(self, identifier: str) -> dict:
        response = self.client.post(
            "/auth/login", json={"identifier": identifier, "password": PASSWORD}
        )
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()

    def bootstrap(self) -> str:
        """Register the first (bootstrap-role) user and return their access token."""
        self.assertEqual(self.register("root").status_code, 201)
        return self.login("root")["accessToken"]


class TestHealth(ApiTestCase):
    def test_health_reports_seeded(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["database"], "connected")
        self.assertTrue(body["seeded"])


class TestUnseeded(ApiTestCase):
    seed = False

    def test_health_reports_not_seeded(self) -> None:
        self.assertFalse(self.client.get("/health").json()["seeded"])

    def test_register_reports_configuration_error(self) -> None:
        response = self.register("root")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["code"], "CONFIGURATION_ERROR")


class TestAuthEndpoints(ApiTestCase):
    def test_register_returns_camel_case_safe_user(self) -> None:
        response = self.register("root")
        self.assertEqual(response.status_code, 201)
        user = response.json()["user"]
        self.assertEqual(user["role"]["name"], "MASTER")
        self.assertIn("createdAt", user)
        self.assertNotIn("passwordHash", user)
        self.assertNotIn("refreshTokenHash", user)

    def test_second_register_needs_bootstrap_token(self) -> None:
        token = self.bootstrap()
        anonymous = self.register("bob")
        self.assertEqual(anonymous.status_code, 403)
        self.assertEqual(anonymous.json()["code"], "FORBIDDEN")
        created = self.register("bob", token=token)
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["user"]["role"]["name"], "USER")

    def test_register_password_mismatch_is_400(self) -> None:
        response = self.client.post(
            "/auth/register",
            json={
                "name": "Root",
                "username": "root",
                "email": "root@example.com",
                "password": PASSWORD,
                "confirmPassword": "something-else",
            },
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "VALIDATION_ERROR")

    def test_login_failure_is_401_with_challenge(self) -> None:
        self.bootstrap()
        response = self.client.post(
            "/auth/login", json={"identifier": "root", "password": "wrong-password"}
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.headers["WWW-Authenticate"], "Bearer")
        self.assertEqual(response.json()["code"], "UNAUTHORIZED")

    def test_login_response_shape(self) -> None:
        self.bootstrap()
        body = self.login("root@example.com")
        self.assertEqual(body["role"], "MASTER")
        self.assertEqual(body["tokenType"], "bearer")
        self.assertIn("refreshToken", body)
        self.assertEqual(body["user"]["username"], "root")

    def test_refresh_from_body_or_bearer_header(self) -> None:
        self.bootstrap()
        refresh_token = self.login("root")["refreshToken"]
        from_body = self.client.post("/auth/refresh", json={"refreshToken": refresh_token})
        self.assertEqual(from_body.status_code, 200, from_body.text)
        self.assertIn("accessToken", from_body.json())
        self.assertNotIn("refreshToken", from_body.json())
        from_header = self.client.post("/auth/refresh", headers=self.auth(refresh_token))
        self.assertEqual(from_header.status_code, 200, from_header.text)

    def test_refresh_rejects_access_token_and_missing_token(self) -> None:
        access_token = self.bootstrap()
        self.assertEqual(
            self.client.post("/auth/refresh", headers=self.auth(access_token)).status_code, 401
        )
        self.assertEqual(self.client.post("/auth/refresh").status_code, 401)

    def test_logout_revokes_refresh_token(self) -> None:
        self.bootstrap()
        tokens = self.login("root")
        for _ in range(2):
            response = self.client.post("/auth/logout", headers=self.auth(tokens["accessToken"]))
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.json(), {"message": "ok"})
        response = self.client.post("/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
        self.assertEqual(response.status_code, 401)

    def test_master_check(self) -> None:
        token = self.bootstrap()
        self.register("bob", token=token)
        ok = self.client.get("/auth/me/master-check", headers=self.auth(token))
        self.assertEqual(ok.json(), {"ok": True})
        bob_token = self.login("bob")["accessToken"]
        denied = self.client.get("/auth/me/master-check", headers=self.auth(bob_token))
        self.assertEqual(denied.status_code, 403)

    def test_register_uses_current_role_not_token_claim(self) -> None:
        token = self.bootstrap()
        with self.session_factory() as session:
            root = session.query(User).filter(User.username == "root").one()
            root.role_id = session.query(Role).filter(Role.name == "USER").one().id
            session.commit()
        response = self.register("bob", token=token)
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["code"], "FORBIDDEN")

    def test_register_with_deleted_callers_token(self) -> None:
        token = self.bootstrap()
        with self.session_factory() as session:
            session.query(User).filter(User.username == "root").delete()
            session.commit()
        response = self.register("bob", token=token)
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["code"], "UNAUTHORIZED")


class TestResourceEndpoints(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.master_token = self.bootstrap()
        self.bob_id = self.register("bob", token=self.master_token).json()["user"]["id"]
        self.bob_token = self.login("bob")["accessToken"]

    def test_protected_routes_require_token(self) -> None:
        for path in ("/users", "/groups", "/roles"):
            response = self.client.get(path)
            self.assertEqual(response.status_code, 401, path)
        response = self.client.get("/users", headers=self.auth("not-a-token"))
        self.assertEqual(response.status_code, 401)

    def test_user_listing_is_row_scoped(self) -> None:
        everyone = self.client.get("/users", headers=self.auth(self.master_token)).json()
        self.assertEqual({u["username"] for u in everyone}, {"root", "bob"})
        for user in everyone:
            self.assertNotIn("passwordHash", user)
            self.assertNotIn("refreshTokenHash", user)
        own = self.client.get("/users", headers=self.auth(self.bob_token)).json()
        self.assertEqual([u["id"] for u in own], [self.bob_id])

    def test_regular_user_cannot_promote_themselves(self) -> None:
        roles = self.client.get("/roles", headers=self.auth(self.master_token)).json()
        admin_id = next(r["id"] for r in roles if r["name"] == "ADMIN")
        response = self.client.patch(
            f"/users/{self.bob_id}", json={"roleId": admin_id}, headers=self.auth(self.bob_token)
        )
        self.assertEqual(response.status_code, 403)

    def test_group_membership_flow(self) -> None:
        created = self.client.post(
            "/groups", json={"name": "ops"}, headers=self.auth(self.master_token)
        )
        self.assertEqual(created.status_code, 201)
        group_id = created.json()["id"]
        self.assertEqual(
            self.client.get(f"/groups/{group_id}", headers=self.auth(self.bob_token)).status_code,
            403,
        )
        added = self.client.post(
            f"/groups/{group_id}/users",
            json={"userId": self.bob_id},
            headers=self.auth(self.master_token),
        )
        self.assertEqual(added.status_code, 201)
        members = self.client.get(f"/groups/{group_id}/users", headers=self.auth(self.bob_token))
        self.assertEqual(members.status_code, 200)
        self.assertIn("joinedAt", members.json()[0])
        detail = self.client.get(f"/groups/{group_id}", headers=self.auth(self.bob_token)).json()
        self.assertEqual(detail["userCount"], 1)
        duplicate = self.client.post(
            f"/groups/{group_id}/users",
            json={"userId": self.bob_id},
            headers=self.auth(self.master_token),
        )
        self.assertEqual(duplicate.status_code, 409)
        removed = self.client.delete(
            f"/groups/{group_id}/users/{self.bob_id}", headers=self.auth(self.master_token)
        )
        self.assertEqual(removed.status_code, 200)

    def test_role_migrate_then_delete(self) -> None:
        headers = self.auth(self.master_token)
        auditor = self.client.post("/roles", json={"name": "AUDITOR"}, headers=headers).json()
        roles = {r["name"]: r for r in self.client.get("/roles", headers=headers).json()}
        user_role_id = roles["USER"]["id"]

        blocked = self.client.delete(f"/roles/{user_role_id}", headers=headers)
        self.assertEqual(blocked.status_code, 409)

        migrated = self.client.post(
            "/roles/migrate", json={"from": user_role_id, "to": auditor["id"]}, headers=headers
        )
        self.assertEqual(migrated.status_code, 200, migrated.text)
        self.assertEqual(migrated.json()["from"], "USER")
        self.assertEqual(migrated.json()["to"], "AUDITOR")
        self.assertEqual(migrated.json()["usersMigrated"], 1)

        deleted = self.client.delete(f"/roles/{user_role_id}", headers=headers)
        self.assertEqual(deleted.status_code, 200)

    def test_protected_role_cannot_be_deleted(self) -> None:
        headers = self.auth(self.master_token)
        roles = self.client.get("/roles", headers=headers).json()
        master_id = next(r["id"] for r in roles if r["name"] == "MASTER")
        response = self.client.delete(f"/roles/{master_id}", headers=headers)
        self.assertEqual(response.status_code, 400)

    def test_roles_are_bootstrap_only(self) -> None:
        self.assertEqual(
            self.client.get("/roles", headers=self.auth(self.bob_token)).status_code, 403
        )


if __name__ == "__main__":
    unittest.main()
