from __future__ import annotations

import threading
import unittest
from datetime import timedelta

from tasty.api.session import SessionManager
from tasty.config import PRODUCTION, SANDBOX, Config
from tasty.errors import ApiError, AuthError, RenewalTokenExpired, SessionExpired
from tests.fakes import ISSUED, FakeTransport, make_credential, respond, session_payload


def _manager(transport: FakeTransport, now=ISSUED, config: Config | None = None) -> SessionManager:
    return SessionManager(config or Config(), transport_factory=transport.factory, clock=lambda: now)


class LoginTestCase(unittest.TestCase):
    def test_login_issues_both_tokens_with_remember_me(self) -> None:
        transport = FakeTransport(respond(201, session_payload("s-1", "r-1")))

        credential = _manager(transport).login("trader", "hunter2", remember_me=True)

        call = transport.calls[0]
        self.assertEqual((call.method, call.path), ("POST", "/sessions"))
        self.assertEqual(call.base_url, PRODUCTION.api_url)
        self.assertEqual(call.json_body, {"login": "trader", "password": "hunter2", "remember-me": True})
        self.assertEqual(credential.session_token, "s-1")
        self.assertEqual(credential.renewal_token, "r-1")
        self.assertEqual(credential.tokens.authenticated_on, ISSUED)
        self.assertEqual(credential.tokens.session_expires_on, ISSUED + timedelta(hours=24))
        self.assertEqual(credential.tokens.renewal_expires_on, ISSUED + timedelta(days=28))
        self.assertEqual(credential.identity.email, "trader@example.com")
        self.assertEqual(credential.identity.external_id, "U0001")
        self.assertEqual(credential.streamer_url, PRODUCTION.streamer_url)
        self.assertEqual(transport.closed, 1)

    def test_login_without_remember_me_has_no_renewal_token(self) -> None:
        transport = FakeTransport(respond(201, session_payload("s-1", "r-ignored")))

        credential = _manager(transport).login("trader", "hunter2")

        self.assertFalse(credential.tokens.has_renewal_token)
        self.assertIsNone(credential.tokens.renewal_expires_on)

    def test_login_targets_sandbox_endpoints(self) -> None:
        transport = FakeTransport(respond(201, session_payload("s-1")))

        credential = _manager(transport).login("trader", "hunter2", sandbox=True)

        self.assertEqual(transport.calls[0].base_url, SANDBOX.api_url)
        self.assertEqual(credential.api_url, SANDBOX.api_url)
        self.assertEqual(credential.streamer_url, SANDBOX.streamer_url)

    def test_login_rejected(self) -> None:
        transport = FakeTransport(respond(401, {"error": {"code": "invalid_credentials"}}))

        with self.assertRaises(AuthError) as ctx:
            _manager(transport).login("trader", "wrong")

        self.assertEqual(ctx.exception.status, 401)
        self.assertIn("invalid_credentials", ctx.exception.body)


class EnsureValidTestCase(unittest.TestCase):
    def test_fresh_session_makes_no_request(self) -> None:
        credential = make_credential()
        expires = credential.tokens.session_expires_on
        transport = FakeTransport()

        token = _manager(transport, now=expires - timedelta(minutes=5, seconds=1)).ensure_valid(credential)

        self.assertEqual(token, "session-1")
        self.assertEqual(transport.calls, [])

    def test_refreshes_inside_expiry_buffer(self) -> None:
        credential = make_credential()
        now = credential.tokens.session_expires_on - timedelta(minutes=5)
        transport = FakeTransport(respond(201, session_payload("session-2", "renew-2"), received_at=now))

        token = _manager(transport, now=now).ensure_valid(credential)

        call = transport.calls[0]
        self.assertEqual((call.method, call.path), ("POST", "/sessions"))
        self.assertEqual(call.json_body, {"login": "trader", "remember-token": "renew-1", "remember-me": True})
        self.assertEqual(token, "session-2")
        self.assertEqual(credential.session_token, "session-2")
        self.assertEqual(credential.renewal_token, "renew-2")
        self.assertEqual(credential.tokens.session_expires_on, now + timedelta(hours=24))
        self.assertEqual(credential.tokens.renewal_expires_on, now + timedelta(days=28))
        self.assertEqual(transport.closed, 1)

    def test_expired_session_without_renewal_token(self) -> None:
        credential = make_credential(renewal_token=None)
        transport = FakeTransport()

        with self.assertRaises(SessionExpired):
            _manager(transport, now=ISSUED + timedelta(days=2)).ensure_valid(credential)
        self.assertEqual(transport.calls, [])

    def test_expired_renewal_token(self) -> None:
        credential = make_credential()
        transport = FakeTransport()

        with self.assertRaises(RenewalTokenExpired):
            _manager(transport, now=ISSUED + timedelta(days=29)).ensure_valid(credential)
        self.assertEqual(transport.calls, [])

    def test_rejected_renewal_keeps_previous_tokens(self) -> None:
        credential = make_credential()
        before = credential.tokens
        transport = FakeTransport(respond(401, {"error": {"code": "invalid_remember_token"}}))

        with self.assertRaises(AuthError):
            _manager(transport, now=ISSUED + timedelta(days=2)).ensure_valid(credential)
        self.assertIs(credential.tokens, before)
        self.assertEqual(transport.closed, 1)

    def test_concurrent_callers_share_one_exchange(self) -> None:
        credential = make_credential()
        now = ISSUED + timedelta(hours=23, minutes=58)
        transport = FakeTransport(
            respond(201, session_payload("session-2", "renew-2"), received_at=now),
            delay=0.05,
        )
        manager = _manager(transport, now=now)
        results: list[str] = []
        errors: list[Exception] = []
        lock = threading.Lock()

        def worker() -> None:
            try:
                token = manager.ensure_valid(credential)
            except Exception as exc:
                with lock:
                    errors.append(exc)
                return
            with lock:
                results.append(token)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])
        self.assertEqual(len(transport.calls), 1)
        self.assertEqual(results, ["session-2"] * 8)
        self.assertEqual(credential.renewal_token, "renew-2")


class LogoutTestCase(unittest.TestCase):
    def test_logout_sends_session_token(self) -> None:
        credential = make_credential()
        transport = FakeTransport(respond(204))

        _manager(transport).logout(credential)

        call = transport.calls[0]
        self.assertEqual((call.method, call.path), ("DELETE", "/sessions"))
        self.assertEqual(call.headers, {"Authorization": "session-1"})
        self.assertEqual(transport.closed, 1)

    def test_logout_failure_raises(self) -> None:
        transport = FakeTransport(respond(500, {"error": "boom"}))

        with self.assertRaises(ApiError) as ctx:
            _manager(transport).logout(make_credential())
        self.assertEqual(ctx.exception.status, 500)
        self.assertEqual(ctx.exception.operation, "logout")
        self.assertEqual(transport.closed, 1)


if __name__ == "__main__":
    unittest.main()
