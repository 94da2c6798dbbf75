from __future__ import annotations

import unittest
from unittest.mock import MagicMock, patch

import requests

from tasty.api.transport import HttpTransport, auth_headers
from tasty.errors import TransportError


def _raw(status: int, content: bytes = b"{}") -> MagicMock:
    raw = MagicMock()
    raw.status_code = status
    raw.content = content
    raw.reason = "OK" if status < 400 else "Error"
    return raw


def _transport(session: MagicMock, **kwargs) -> HttpTransport:
    return HttpTransport("https://api.example.com/", user_agent="tasty-test", session=session, **kwargs)


class HttpTransportTestCase(unittest.TestCase):
    def test_request_builds_url_and_headers(self) -> None:
        session = MagicMock()
        session.headers = {}
        session.request.return_value = _raw(200, b'{"data": {}}')

        response = _transport(session, timeout=5.0).request(
            "GET",
            "/accounts/5WT00001/positions",
            params=[("symbol", "AAPL")],
            headers=auth_headers("tok"),
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"data": {}})
        self.assertEqual(session.headers["User-Agent"], "tasty-test")
        self.assertEqual(session.headers["Content-Type"], "application/json")
        session.request.assert_called_once_with(
            "GET",
            "https://api.example.com/accounts/5WT00001/positions",
            params=[("symbol", "AAPL")],
            json=None,
            headers={"Authorization": "tok"},
            timeout=5.0,
        )

    @patch("tasty.api.transport.time.sleep")
    def test_server_errors_are_retried(self, mock_sleep) -> None:
        session = MagicMock()
        session.headers = {}
        session.request.side_effect = [_raw(503), _raw(502), _raw(200)]

        response = _transport(session, max_retries=2, retry_backoff=0.25).request("GET", "/customers/me/accounts")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(session.request.call_count, 3)
        self.assertEqual([c.args[0] for c in mock_sleep.call_args_list], [0.25, 0.5])

    @patch("tasty.api.transport.time.sleep")
    def test_client_errors_are_not_retried(self, mock_sleep) -> None:
        session = MagicMock()
        session.headers = {}
        session.request.return_value = _raw(400)

        response = _transport(session, max_retries=3).request("POST", "/sessions", json_body={"login": "x"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(session.request.call_count, 1)
        mock_sleep.assert_not_called()

    @patch("tasty.api.transport.time.sleep")
    def test_post_is_never_retried(self, mock_sleep) -> None:
        session = MagicMock()
        session.headers = {}
        session.request.side_effect = [_raw(504), _raw(201)]

        response = _transport(session, max_retries=3).request(
            "POST",
            "/accounts/5WT00001/orders",
            json_body={"order-type": "Market"},
        )

        self.assertEqual(response.status_code, 504)
        self.assertEqual(session.request.call_count, 1)
        mock_sleep.assert_not_called()

    @patch("tasty.api.transport.time.sleep")
    def test_delete_is_retried(self, mock_sleep) -> None:
        session = MagicMock()
        session.headers = {}
        session.request.side_effect = [_raw(502), _raw(200)]

        response = _transport(session, max_retries=1, retry_backoff=0).request(
            "DELETE", "/accounts/5WT00001/orders/99"
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(session.request.call_count, 2)

    def test_close_closes_session(self) -> None:
        session = MagicMock()
        session.headers = {}

        _transport(session).close()

        session.close.assert_called_once_with()

    def test_retries_disabled_by_default(self) -> None:
        session = MagicMock()
        session.headers = {}
        session.request.return_value = _raw(500)

        response = _transport(session).request("GET", "/customers/me/accounts")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(session.request.call_count, 1)

    def test_connection_failure_raises_transport_error(self) -> None:
        session = MagicMock()
        session.headers = {}
        session.request.side_effect = requests.ConnectionError("refused")

        with self.assertRaises(TransportError):
            _transport(session).request("GET", "/customers/me/accounts")

    def test_auth_headers(self) -> None:
        self.assertEqual(auth_headers("abc"), {"Authorization": "abc"})
        self.assertEqual(auth_headers(None), {})


if __name__ == "__main__":
    unittest.main()
