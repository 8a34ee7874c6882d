# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import unittest

import httpx

from ifast.auth.models import TokenPair
from ifast.auth.service import AuthService, RefreshingClient, split_token_string
from ifast.auth.token_store import MemoryTokenStore
from ifast.client.api_client import APIClient
from ifast.client.errors import DecodingError, HTTPStatusError, NetworkError, UnauthorizedError

from support import BASE_URL, mock_transport


class FakeBackend:
    """Accepts exactly one access token; refresh hands out the next one."""

    def __init__(
        self,
        *,
        valid_access: str = "fresh",
        issued_access: str | None = None,
        refresh_status: int = 200,
        retry_status: int = 200,
    ) -> None:
        self.valid_access = valid_access
        self.issued_access = issued_access or valid_access
        self.refresh_status = refresh_status
        self.retry_status = retry_status
        self.refreshes = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/api/auth/login":
            body = json.loads(request.content)
            if body == {"username": "alice", "password": "password123"}:
                return httpx.Response(200, text="access-1|refresh-1")
            return httpx.Response(401)
        if path == "/api/auth/refresh":
            self.refreshes += 1
            if self.refresh_status != 200:
                return httpx.Response(self.refresh_status)
            return httpx.Response(200, text=f"{self.issued_access}\n")
        if path == "/api/auth/logout":
            return httpx.Response(200, text="Logged out")
        auth = request.headers.get("authorization")
        if auth != f"Bearer {self.valid_access}":
            return httpx.Response(401)
        if self.retry_status != 200:
            return httpx.Response(self.retry_status)
        return httpx.Response(200, text="secret data")


def _wire(backend: FakeBackend, tokens: TokenPair | None = None):
    store = MemoryTokenStore(tokens)
    transport = mock_transport(backend)
    client = APIClient(BASE_URL, store, transport=transport)
    auth = AuthService(client, store)
    return RefreshingClient(client, auth), auth, store, transport


class TestSplitTokenString(unittest.TestCase):
    def test_splits_on_delimiter(self) -> None:
        pair = split_token_string("abc|def\n")
        self.assertEqual((pair.access_token, pair.refresh_token), ("abc", "def"))

    def test_rejects_malformed(self) -> None:
        for raw in ("", "abc", "a|b|c", "|def", "abc|"):
            with self.subTest(raw=raw):
                with self.assertRaises(DecodingError):
                    split_token_string(raw)


class TestAuthService(unittest.IsolatedAsyncioTestCase):
    async def test_login_persists_pair(self) -> None:
        _, auth, store, transport = _wire(FakeBackend())
        tokens = await auth.login("alice", "password123")
        self.assertEqual(store.load(), tokens)
        self.assertEqual(tokens.refresh_token, "refresh-1")
        self.assertNotIn("authorization", transport.requests[0].headers)

    async def test_login_with_bad_credentials_is_unauthorized(self) -> None:
        _, auth, store, _ = _wire(FakeBackend())
        with self.assertRaises(UnauthorizedError):
            await auth.login("alice", "wrong")
        self.assertIsNone(store.load())

    async def test_refresh_keeps_refresh_token(self) -> None:
        _, auth, store, transport = _wire(FakeBackend(valid_access="access-2"), TokenPair(access_token="old", refresh_token="r-1"))
        await auth.refresh_access_token_if_possible()
        self.assertEqual(store.load(), TokenPair(access_token="access-2", refresh_token="r-1"))
        self.assertEqual(transport.requests[0].url.params["refreshToken"], "r-1")

    async def test_refresh_without_tokens_is_noop(self) -> None:
        _, auth, _, transport = _wire(FakeBackend())
        self.assertIsNone(await auth.refresh_access_token_if_possible())
        self.assertEqual(transport.calls, [])

    async def test_logout_clears_tokens_even_when_remote_fails(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("down", request=request)

        store = MemoryTokenStore(TokenPair(access_token="a", refresh_token="r"))
        auth = AuthService(APIClient(BASE_URL, store, transport=mock_transport(handler)), store)
        with self.assertRaises(NetworkError):
            await auth.logout()
        self.assertIsNone(store.load())


class TestRefreshingClient(unittest.IsolatedAsyncioTestCase):
    async def test_expired_access_is_refreshed_and_retried_once(self) -> None:
        backend = FakeBackend()
        client, _, store, transport = _wire(backend, TokenPair(access_token="expired", refresh_token="r-1"))
        result = await client.request("/api/users/me")
        self.assertEqual(result, "secret data")
        self.assertEqual(transport.paths(), ["/api/users/me", "/api/auth/refresh", "/api/users/me"])
        self.assertEqual(store.load().access_token, "fresh")
        self.assertEqual(backend.refreshes, 1)

    async def test_second_unauthorized_propagates_without_more_retries(self) -> None:
        # The refreshed token is rejected too.
        backend = FakeBackend(valid_access="fresh", issued_access="also-rejected")
        client, _, _, transport = _wire(backend, TokenPair(access_token="expired", refresh_token="r-1"))
        with self.assertRaises(UnauthorizedError):
            await client.request("/api/users/me")
        self.assertEqual(backend.refreshes, 1)
        self.assertEqual(transport.paths().count("/api/users/me"), 2)

    async def test_refresh_failure_surfaces_as_is(self) -> None:
        backend = FakeBackend(refresh_status=401)
        client, _, store, transport = _wire(backend, TokenPair(access_token="expired", refresh_token="bad"))
        with self.assertRaises(UnauthorizedError):
            await client.request("/api/users/me")
        self.assertEqual(transport.paths(), ["/api/users/me", "/api/auth/refresh"])
        self.assertEqual(store.load().access_token, "expired")

    async def test_refresh_server_error_surfaces_as_http_status(self) -> None:
        client, _, _, _ = _wire(FakeBackend(refresh_status=500), TokenPair(access_token="expired", refresh_token="r"))
        with self.assertRaises(HTTPStatusError) as ctx:
            await client.request("/api/users/me")
        self.assertEqual(ctx.exception.status_code, 500)

    async def test_no_stored_tokens_retries_once_then_fails(self) -> None:
        client, _, _, transport = _wire(FakeBackend())
        with self.assertRaises(UnauthorizedError):
            await client.request("/api/users/me")
        self.assertEqual(transport.paths(), ["/api/users/me", "/api/users/me"])

    async def test_unauthenticated_requests_are_not_retried(self) -> None:
        client, _, _, transport = _wire(FakeBackend(), TokenPair(access_token="expired", refresh_token="r"))
        with self.assertRaises(UnauthorizedError):
            await client.request("/api/users/me", requires_auth=False)
        self.assertEqual(transport.paths(), ["/api/users/me"])

    async def test_non_401_errors_are_not_retried(self) -> None:
        client, _, _, transport = _wire(FakeBackend(retry_status=503), TokenPair(access_token="fresh", refresh_token="r"))
        with self.assertRaises(HTTPStatusError):
            await client.request("/api/users/me")
        self.assertEqual(transport.paths(), ["/api/users/me"])


if __name__ == "__main__":
    unittest.main()
