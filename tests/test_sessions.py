"""Unit tests for hacktrack.services.sessions: issue, lazy expiry, revoke and sweep."""

import threading
import unittest
from datetime import timedelta
from unittest.mock import MagicMock

from hacktrack.core.errors import SessionExpiredError, UnauthorizedError
from hacktrack.services.sessions import (
    InMemorySessionStore,
    SessionRegistry,
    UserSession,
)
from tests.support import T0, FakeClock


class TestIssue(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.registry = SessionRegistry(clock=self.clock)

    def test_default_lifetime_is_eight_hours(self) -> None:
        session = self.registry.issue("alice", "member")
        self.assertEqual(session.expires_at, T0 + timedelta(hours=8))
        self.assertFalse(session.persistent)

    def test_remember_me_lifetime_is_thirty_days(self) -> None:
        session = self.registry.issue("alice", "member", persistent=True)
        self.assertEqual(session.expires_at, T0 + timedelta(days=30))
        self.assertTrue(session.persistent)

    def test_tokens_are_long_and_unique(self) -> None:
        tokens = {self.registry.issue("alice", "member").token for _ in range(200)}
        self.assertEqual(len(tokens), 200)
        # 32 random bytes -> at least 43 url-safe base64 characters
        self.assertTrue(all(len(t) >= 43 for t in tokens))
        self.assertEqual(len(self.registry), 200)

    def test_retries_on_token_collision(self) -> None:
        store = MagicMock()
        store.add.side_effect = [False, True]
        registry = SessionRegistry(store=store, clock=self.clock)
        registry.issue("alice", "member")
        self.assertEqual(store.add.call_count, 2)

    def test_gives_up_after_repeated_collisions(self) -> None:
        store = MagicMock()
        store.add.return_value = False
        registry = SessionRegistry(store=store, clock=self.clock)
        with self.assertRaises(RuntimeError):
            registry.issue("alice", "member")

    def test_from_settings_uses_configured_lifetimes(self) -> None:
        settings = MagicMock()
        settings.SESSION_TTL_HOURS = 2
        settings.SESSION_REMEMBER_DAYS = 7
        registry = SessionRegistry.from_settings(settings, clock=self.clock)
        self.assertEqual(registry.issue("a", "member").expires_at, T0 + timedelta(hours=2))
        self.assertEqual(
            registry.issue("a", "member", persistent=True).expires_at, T0 + timedelta(days=7)
        )


class TestLookupAndExpiry(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.registry = SessionRegistry(clock=self.clock)
        self.session = self.registry.issue("alice", "editor")

    def test_lookup_returns_session_until_expiry(self) -> None:
        self.clock.advance(hours=8)
        found = self.registry.lookup(self.session.token)
        self.assertIsNotNone(found)
        self.assertEqual(found.username, "alice")
        self.assertEqual(found.role, "editor")

    def test_lookup_unknown_token_returns_none(self) -> None:
        self.assertIsNone(self.registry.lookup("no-such-token"))

    def test_expired_session_is_evicted(self) -> None:
        self.clock.advance(hours=8, seconds=1)
        self.assertIsNone(self.registry.lookup(self.session.token))

    def test_issue_sweeps_expired_sessions_periodically(self) -> None:
        self.clock.advance(hours=9)
        self.registry.issue("bob", "member")
        self.assertEqual(len(self.registry), 1)
        self.assertIsNone(self.registry.store.get(self.session.token))

    def test_active_count_excludes_expired(self) -> None:
        self.registry.issue("bob", "member", persistent=True)
        self.clock.advance(hours=9)
        self.assertEqual(self.registry.active_count(), 1)
        self.assertEqual(len(self.registry), 0)

    def test_resolve_reports_expiry_once_then_unknown(self) -> None:
        self.clock.advance(hours=9)
        with self.assertRaises(SessionExpiredError):
            self.registry.resolve(self.session.token)
        with self.assertRaises(UnauthorizedError) as ctx:
            self.registry.resolve(self.session.token)
        self.assertNotIsInstance(ctx.exception, SessionExpiredError)

    def test_revoke_is_idempotent(self) -> None:
        self.registry.revoke(self.session.token)
        self.registry.revoke(self.session.token)
        self.assertIsNone(self.registry.lookup(self.session.token))

    def test_sweep_removes_only_expired_sessions(self) -> None:
        remembered = self.registry.issue("bob", "member", persistent=True)
        self.clock.advance(days=1)
        self.assertEqual(self.registry.sweep(), 1)
        self.assertIsNotNone(self.registry.lookup(remembered.token))
        self.assertIsNone(self.registry.lookup(self.session.token))


class TestInMemorySessionStore(unittest.TestCase):
    def _session(self, token: str) -> UserSession:
        return UserSession(token=token, username="u", role="member", expires_at=T0)

    def test_add_refuses_existing_token(self) -> None:
        store = InMemorySessionStore()
        self.assertTrue(store.add(self._session("t1")))
        self.assertFalse(store.add(self._session("t1")))
        self.assertEqual(len(store), 1)

    def test_pop_missing_returns_none(self) -> None:
        self.assertIsNone(InMemorySessionStore().pop("missing"))

    def test_concurrent_issue_keeps_every_session(self) -> None:
        registry = SessionRegistry(clock=FakeClock())

        def worker() -> None:
            for _ in range(50):
                registry.issue("alice", "member")

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(len(registry), 400)


if __name__ == "__main__":
    unittest.main()
