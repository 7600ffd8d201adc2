# tests/test_api_client.py

"""Tests for ApiClient retry and error normalisation."""

import unittest
from typing import Any
from unittest.mock import MagicMock, patch

from catalog_browser.errors import ClientError, TransientNetworkError
from catalog_browser.transport.api_client import ApiClient, TransportResult

BASE = "https://api.example.com"


def _resp(status: int, body: Any = None, bad_json: bool = False) -> MagicMock:
    """Build a fake curl_cffi response."""
    resp = MagicMock()
    resp.status_code = status
    if bad_json:
        resp.json.side_effect = ValueError("Expecting value")
    else:
        resp.json.return_value = body
    return resp


class TestApiClient(unittest.TestCase):
    """ApiClient.call behaviour against a mocked session."""

    def setUp(self) -> None:
        self.session = MagicMock()
        self.client = ApiClient(base_url=BASE, session=self.session)

    # ── Success ──────────────────────────────────────────

    def test_success_returns_data(self) -> None:
        """A 200 JSON response becomes an ok result."""
        self.session.request.return_value = _resp(
            200, {"products": []}
        )
        result = self.client.call("/api/products")
        self.assertTrue(result.ok)
        self.assertEqual(result.status, 200)
        self.assertEqual(result.data, {"products": []})
        self.assertIsNone(result.error)

    def test_request_arguments(self) -> None:
        """URL, method, body and timeout are forwarded to the session."""
        self.session.request.return_value = _resp(200, {})
        self.client.call("/api/cart", method="POST", body={"id": "1"})
        self.session.request.assert_called_once_with(
            "POST",
            f"{BASE}/api/cart",
            json={"id": "1"},
            timeout=10,
        )

    def test_base_url_trailing_slash_stripped(self) -> None:
        """A trailing slash on the base URL does not double up."""
        client = ApiClient(base_url=BASE + "/", session=self.session)
        self.session.request.return_value = _resp(200, {})
        client.call("/api/products")
        self.assertEqual(
            self.session.request.call_args.args[1],
            f"{BASE}/api/products",
        )

    # ── Transient retry ──────────────────────────────────

    def test_503_then_success_is_retried(self) -> None:
        """One 503 followed by a 200 yields the successful result."""
        self.session.request.side_effect = [
            _resp(503),
            _resp(200, {"products": [{"_id": "1"}]}),
        ]
        result = self.client.call("/api/products")
        self.assertTrue(result.ok)
        self.assertEqual(result.data, {"products": [{"_id": "1"}]})
        self.assertEqual(self.session.request.call_count, 2)

    def test_503_twice_surfaces_transient_error(self) -> None:
        """A second 5xx is surfaced as TransientNetworkError."""
        self.session.request.side_effect = [_resp(503), _resp(503)]
        result = self.client.call("/api/products")
        self.assertFalse(result.ok)
        self.assertIsInstance(result.error, TransientNetworkError)
        self.assertEqual(result.status, 503)
        self.assertEqual(self.session.request.call_count, 2)

    def test_timeout_then_success(self) -> None:
        """A request exception is transient and retried once."""
        self.session.request.side_effect = [
            TimeoutError("Operation timed out"),
            _resp(200, {"categories": []}),
        ]
        result = self.client.call("/api/categories")
        self.assertTrue(result.ok)
        self.assertEqual(self.session.request.call_count, 2)

    def test_connection_error_twice_defaults_to_500(self) -> None:
        """Without any response the status defaults to 500."""
        self.session.request.side_effect = ConnectionError("refused")
        result = self.client.call("/api/categories")
        self.assertFalse(result.ok)
        self.assertIsInstance(result.error, TransientNetworkError)
        self.assertEqual(result.status, 500)
        assert result.error is not None
        self.assertIn("refused", result.error.message)
        self.assertEqual(self.session.request.call_count, 2)

    # ── Client errors ────────────────────────────────────

    def test_404_not_retried(self) -> None:
        """4xx responses surface immediately as ClientError."""
        self.session.request.return_value = _resp(404)
        result = self.client.call("/api/products/x")
        self.assertIsInstance(result.error, ClientError)
        self.assertEqual(result.status, 404)
        self.session.request.assert_called_once()

    def test_non_200_success_status_is_failure(self) -> None:
        """Only HTTP 200 counts as success."""
        self.session.request.return_value = _resp(204)
        result = self.client.call("/api/products")
        self.assertFalse(result.ok)
        self.assertIsInstance(result.error, ClientError)
        self.session.request.assert_called_once()

    def test_malformed_json_not_retried(self) -> None:
        """An unparsable 200 body is a ClientError."""
        self.session.request.return_value = _resp(200, bad_json=True)
        result = self.client.call("/api/products")
        self.assertIsInstance(result.error, ClientError)
        self.assertEqual(result.status, 200)
        self.session.request.assert_called_once()

    def test_error_message_from_body(self) -> None:
        """The API's own message field is preferred."""
        self.session.request.return_value = _resp(
            400, {"message": "Bad product id"}
        )
        result = self.client.call("/api/products/%")
        assert result.error is not None
        self.assertEqual(result.error.message, "Bad product id")

    def test_error_message_fallback(self) -> None:
        """Without a body message, the status is described."""
        self.session.request.return_value = _resp(404, bad_json=True)
        result = self.client.call("/api/products/x")
        assert result.error is not None
        self.assertIn("404", result.error.message)

    def test_failures_are_logged(self) -> None:
        """Every surfaced failure is logged at ERROR."""
        self.session.request.return_value = _resp(404)
        with self.assertLogs("catalog_browser.transport", "ERROR") as logs:
            self.client.call("/api/products/x")
        self.assertIn("/api/products/x", logs.output[0])

    # ── Endpoint helpers ─────────────────────────────────

    def test_endpoint_helpers(self) -> None:
        """Helpers hit the documented endpoints with GET."""
        self.session.request.return_value = _resp(200, {})
        self.client.get_all_categories()
        self.client.get_all_products()
        self.client.get_product_by_id("42")
        urls = [c.args[1] for c in self.session.request.call_args_list]
        self.assertEqual(
            urls,
            [
                f"{BASE}/api/categories",
                f"{BASE}/api/products",
                f"{BASE}/api/products/42",
            ],
        )
        methods = {c.args[0] for c in self.session.request.call_args_list}
        self.assertEqual(methods, {"GET"})

    def test_close_closes_session(self) -> None:
        """close() releases the HTTP session."""
        self.client.close()
        self.session.close.assert_called_once()


class TestDefaultSession(unittest.TestCase):
    """Construction without an injected session."""

    @patch("catalog_browser.transport.api_client.curl_requests.Session")
    def test_session_gets_json_headers(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """The default session is created with DEFAULT_HEADERS."""
        ApiClient()
        kwargs = mock_session_cls.call_args.kwargs
        self.assertEqual(
            kwargs["headers"]["Accept"], "application/json"
        )


class TestTransportResult(unittest.TestCase):
    """TransportResult helpers."""

    def test_failure_copies_status(self) -> None:
        """failure() carries the error's status."""
        err = ClientError("nope", status=418)
        result = TransportResult.failure(err)
        self.assertFalse(result.ok)
        self.assertEqual(result.status, 418)
        self.assertIs(result.error, err)

    def test_default_status_500(self) -> None:
        """Errors without a status default to 500."""
        self.assertEqual(TransientNetworkError("boom").status, 500)


if __name__ == "__main__":
    unittest.main()
