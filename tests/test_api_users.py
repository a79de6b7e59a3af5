"""HTTP tests for admin user management under /api/users."""

import unittest

from hacktrack.models import AuditEntry
from tests.support import ApiTestCase


class UsersApiTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.token_for("root", "admin")
        self.editor = self.token_for("ed", "editor")
        self.member = self.token_for("mel", "member")


class TestAccessControl(UsersApiTestCase):
    def test_non_admin_roles_are_forbidden(self) -> None:
        for token in (self.editor, self.member):
            headers = self.bearer(token)
            self.assertEqual(self.client.get("/api/users", headers=headers).status_code, 403)
            self.assertEqual(
                self.client.post(
                    "/api/users",
                    json={"username": "x", "password": "pw", "role": "member"},
                    headers=headers,
                ).status_code,
                403,
            )
            self.assertEqual(
                self.client.put("/api/users/mel", json={"role": "admin"}, headers=headers).status_code,
                403,
            )
            self.assertEqual(self.client.delete("/api/users/mel", headers=headers).status_code, 403)

    def test_anonymous_is_unauthorized(self) -> None:
        self.assertEqual(self.client.get("/api/users").status_code, 401)


class TestListAndCreate(UsersApiTestCase):
    def test_list_has_metadata_but_no_passwords(self) -> None:
        response = self.client.get("/api/users", headers=self.bearer(self.admin))
        self.assertEqual(response.status_code, 200)
        users = response.json()
        self.assertEqual([u["username"] for u in users], ["root", "ed", "mel"])
        for u in users:
            self.assertEqual(
                set(u),
                {"username", "role", "requestAdmin", "createdBy", "modifiedBy", "modifiedAt"},
            )

    def test_admin_creates_user_with_explicit_role(self) -> None:
        response = self.client.post(
            "/api/users",
            json={"username": "newbie", "password": "pw", "role": "editor"},
            headers=self.bearer(self.admin),
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json(), {"username": "newbie", "role": "editor"})
        self.assertEqual(self.user_store().find_by_username("newbie").created_by, "root")
        self.login("newbie", "pw")

    def test_create_duplicate_is_conflict(self) -> None:
        response = self.client.post(
            "/api/users",
            json={"username": "mel", "password": "pw", "role": "admin"},
            headers=self.bearer(self.admin),
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(self.user_store().find_by_username("mel").role, "member")

    def test_create_with_unknown_role_is_invalid_input(self) -> None:
        response = self.client.post(
            "/api/users",
            json={"username": "x", "password": "pw", "role": "owner"},
            headers=self.bearer(self.admin),
        )
        self.assertEqual(response.status_code, 400)


class TestUpdate(UsersApiTestCase):
    def test_promote_member_records_modifier(self) -> None:
        response = self.client.put(
            "/api/users/mel", json={"role": "editor"}, headers=self.bearer(self.admin)
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"username": "mel", "role": "editor"})
        user = self.user_store().find_by_username("mel")
        self.assertEqual(user.modified_by, "root")
        self.assertIsNotNone(user.modified_at)

    def test_existing_session_keeps_its_role_after_promotion(self) -> None:
        self.client.put("/api/users/mel", json={"role": "editor"}, headers=self.bearer(self.admin))
        response = self.client.post(
            "/api/hackathons", json={"name": "X"}, headers=self.bearer(self.member)
        )
        self.assertEqual(response.status_code, 403)
        fresh = self.login("mel", "secret-pw")
        response = self.client.post("/api/hackathons", json={"name": "X"}, headers=self.bearer(fresh))
        self.assertEqual(response.status_code, 201)

    def test_password_change(self) -> None:
        self.client.put(
            "/api/users/mel", json={"password": "new-pw"}, headers=self.bearer(self.admin)
        )
        self.login("mel", "new-pw")
        response = self.client.post("/api/login", json={"username": "mel", "password": "secret-pw"})
        self.assertEqual(response.status_code, 401)

    def test_update_unknown_user_is_not_found(self) -> None:
        response = self.client.put(
            "/api/users/ghost", json={"role": "editor"}, headers=self.bearer(self.admin)
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "not_found")


class TestDelete(UsersApiTestCase):
    def _audit_count(self) -> int:
        self.db.expire_all()
        return self.db.query(AuditEntry).count()

    def test_delete_removes_user_and_appends_one_audit_entry(self) -> None:
        response = self.client.delete("/api/users/mel", headers=self.bearer(self.admin))
        self.assertEqual(response.status_code, 200)
        self.assertIn("message", response.json())
        listed = self.client.get("/api/users", headers=self.bearer(self.admin)).json()
        self.assertNotIn("mel", [u["username"] for u in listed])
        self.assertEqual(self._audit_count(), 1)
        entry = self.db.query(AuditEntry).one()
        self.assertEqual((entry.target_username, entry.actor), ("mel", "root"))

    def test_delete_unknown_user_is_not_found_without_audit(self) -> None:
        response = self.client.delete("/api/users/ghost", headers=self.bearer(self.admin))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(self._audit_count(), 0)

    def test_admin_cannot_delete_self(self) -> None:
        response = self.client.delete("/api/users/root", headers=self.bearer(self.admin))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self._audit_count(), 0)


if __name__ == "__main__":
    unittest.main()
