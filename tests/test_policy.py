"""Unit tests for the access policy: actor resolution, predicates and guards."""

import unittest
from unittest.mock import MagicMock

from app.core.exceptions import AuthenticationError, AuthorizationError
from app.services.policy import (
    Actor,
    can_access_user,
    can_read_group,
    ensure_bootstrap_role,
    ensure_group_read,
    ensure_staff,
    ensure_user_access,
    resolve_actor,
)

STAFF = Actor(user_id=1, role_name="ADMIN", is_staff=True)
REGULAR = Actor(user_id=2, role_name="USER", is_staff=False)


class TestResolveActor(unittest.TestCase):
    """The caller's role comes from the stored user, not from the token."""

    def test_unknown_user_is_not_authenticated(self) -> None:
        store = MagicMock()
        store.get_user.return_value = None
        with self.assertRaises(AuthenticationError):
            resolve_actor(store, 42)

    def test_actor_reflects_current_role(self) -> None:
        user = MagicMock()
        user.id = 7
        user.role.name = "ADMIN"
        user.role.staff_status = True
        store = MagicMock()
        store.get_user.return_value = user
        self.assertEqual(resolve_actor(store, 7), Actor(user_id=7, role_name="ADMIN", is_staff=True))


class TestPredicates(unittest.TestCase):
    def test_user_access(self) -> None:
        self.assertTrue(can_access_user(STAFF, 99))
        self.assertTrue(can_access_user(REGULAR, 2))
        self.assertFalse(can_access_user(REGULAR, 3))

    def test_group_read(self) -> None:
        self.assertTrue(can_read_group(STAFF, is_member=False))
        self.assertTrue(can_read_group(REGULAR, is_member=True))
        self.assertFalse(can_read_group(REGULAR, is_member=False))


class TestGuards(unittest.TestCase):
    def test_ensure_staff(self) -> None:
        ensure_staff(STAFF, "create users")
        with self.assertRaises(AuthorizationError):
            ensure_staff(REGULAR, "create users")

    def test_ensure_user_access(self) -> None:
        ensure_user_access(REGULAR, 2)
        with self.assertRaises(AuthorizationError):
            ensure_user_access(REGULAR, 3, "edit")

    def test_group_read_skips_membership_lookup_for_staff(self) -> None:
        store = MagicMock()
        ensure_group_read(store, STAFF, group_id=5)
        store.is_member.assert_not_called()

    def test_group_read_for_non_member(self) -> None:
        store = MagicMock()
        store.is_member.return_value = False
        with self.assertRaises(AuthorizationError):
            ensure_group_read(store, REGULAR, group_id=5)
        store.is_member.assert_called_once_with(2, 5)

    def test_bootstrap_role_required(self) -> None:
        ensure_bootstrap_role(Actor(user_id=1, role_name="MASTER", is_staff=True), "MASTER")
        with self.assertRaises(AuthorizationError):
            ensure_bootstrap_role(STAFF, "MASTER")


if __name__ == "__main__":
    unittest.main()
