# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import unittest
from datetime import datetime, timezone
from typing import List

import httpx

from ifast.auth.models import TokenPair
from ifast.auth.token_store import MemoryTokenStore
from ifast.client.api_client import APIClient
from ifast.client.errors import (
    DecodingError,
    HTTPStatusError,
    InvalidURLError,
    NetworkError,
    UnauthorizedError,
)
from ifast.fasting.models import FastingStatistics, FastRecord

from support import BASE_URL, json_response, mock_transport


def _client(handler, tokens: TokenPair | None = None, base_url: str = BASE_URL):
    transport = mock_transport(handler)
    client = APIClient(base_url, MemoryTokenStore(tokens), transport=transport)
    return client, transport


TOKENS = TokenPair(access_token="access-123", refresh_token="refresh-456")


class TestAuthorizationHeader(unittest.IsolatedAsyncioTestCase):
    async def test_bearer_attached_when_required_and_stored(self) -> None:
        client, transport = _client(lambda request: httpx.Response(200, text="ok"), TOKENS)
        await client.request("/api/users/me")
        self.assertEqual(transport.requests[0].headers["authorization"], "Bearer access-123")

    async def test_no_header_when_auth_not_required(self) -> None:
        client, transport = _client(lambda request: httpx.Response(200, text="ok"), TOKENS)
        await client.request("/api/auth/login", method="POST", requires_auth=False)
        self.assertNotIn("authorization", transport.requests[0].headers)

    async def test_unauthenticated_when_nothing_stored(self) -> None:
        client, transport = _client(lambda request: httpx.Response(401))
        with self.assertRaises(UnauthorizedError):
            await client.request("/api/users/me")
        self.assertNotIn("authorization", transport.requests[0].headers)

    async def test_token_is_read_per_request(self) -> None:
        store = MemoryTokenStore(TOKENS)
        transport = mock_transport(lambda request: httpx.Response(200, text="ok"))
        client = APIClient(BASE_URL, store, transport=transport)
        await client.request("/a")
        store.save(TokenPair(access_token="access-new", refresh_token="refresh-456"))
        await client.request("/b")
        self.assertEqual(
            [r.headers["authorization"] for r in transport.requests],
            ["Bearer access-123", "Bearer access-new"],
        )


class TestRequestComposition(unittest.IsolatedAsyncioTestCase):
    async def test_json_body_and_headers(self) -> None:
        client, transport = _client(lambda request: httpx.Response(200, text="Roles updated"), TOKENS)
        result = await client.request("/api/users/7/roles", method="put", body=["ADMIN", "USER"])
        self.assertEqual(result, "Roles updated")
        sent = transport.requests[0]
        self.assertEqual(sent.method, "PUT")
        self.assertEqual(sent.headers["content-type"], "application/json")
        self.assertEqual(sent.headers["accept"], "application/json")
        self.assertEqual(json.loads(sent.content), ["ADMIN", "USER"])

    async def test_model_body_uses_camel_case(self) -> None:
        record = FastRecord.start(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc), notes="hello")
        client, transport = _client(lambda request: httpx.Response(200, text="ok"), TOKENS)
        await client.request("/api/fasting/records", method="POST", body=record)
        payload = json.loads(transport.requests[0].content)
        self.assertEqual(payload["startTime"], "2024-01-15T10:30:00Z")
        self.assertEqual(payload["type"], "16:8")
        self.assertIn("createdAt", payload)

    async def test_no_content_type_without_body(self) -> None:
        client, transport = _client(lambda request: httpx.Response(200, text="ok"))
        await client.request("/api/health", requires_auth=False)
        self.assertNotIn("content-type", transport.requests[0].headers)

    async def test_query_and_base_path(self) -> None:
        client, transport = _client(lambda request: httpx.Response(200, text="ok"), base_url="http://testserver/v1/")
        await client.request(
            "/api/auth/refresh",
            method="POST",
            query=[("refreshToken", "abc|def"), ("skipped", None)],
            requires_auth=False,
        )
        url = transport.requests[0].url
        self.assertEqual(url.path, "/v1/api/auth/refresh")
        self.assertEqual(url.params.get("refreshToken"), "abc|def")
        self.assertNotIn("skipped", url.params)

    async def test_invalid_base_url(self) -> None:
        for base in ("not a url", "ftp://example.com", "http://"):
            with self.subTest(base=base):
                client, transport = _client(lambda request: httpx.Response(200, text="ok"), base_url=base)
                with self.assertRaises(InvalidURLError):
                    await client.request("/api/users/me")
                self.assertEqual(transport.calls, [])


class TestResponseClassification(unittest.IsolatedAsyncioTestCase):
    async def test_401_is_always_unauthorized(self) -> None:
        for response in (
            httpx.Response(401),
            httpx.Response(401, text="not json"),
            json_response(401, {"detail": "Token expired"}),
        ):
            with self.subTest(body=response.content):
                client, _ = _client(lambda request, r=response: r, TOKENS)
                with self.assertRaises(UnauthorizedError):
                    await client.request("/api/users/me", response_model=FastingStatistics)

    async def test_other_statuses_carry_code(self) -> None:
        for status in (400, 403, 404, 409, 422, 500, 503):
            with self.subTest(status=status):
                client, _ = _client(lambda request, s=status: httpx.Response(s, text="nope"))
                with self.assertRaises(HTTPStatusError) as ctx:
                    await client.request("/api/fasting/statistics")
                self.assertEqual(ctx.exception.status_code, status)
                self.assertNotIsInstance(ctx.exception, UnauthorizedError)

    async def test_string_shape_returns_raw_text(self) -> None:
        client, _ = _client(lambda request: httpx.Response(200, text='"quoted"|{"x": 1}'))
        self.assertEqual(await client.request("/x"), '"quoted"|{"x": 1}')

    async def test_invalid_utf8_text_is_decoding_failure(self) -> None:
        client, _ = _client(lambda request: httpx.Response(200, content=b"\xff\xfe\xfa"))
        with self.assertRaises(DecodingError):
            await client.request("/x")

    async def test_model_decoding(self) -> None:
        payload = {
            "totalFastingHours": 32.5,
            "averageFastingDuration": 16.25,
            "longestFast": 17.0,
            "currentStreak": 2,
            "totalFasts": 2,
        }
        client, _ = _client(lambda request: json_response(200, payload), TOKENS)
        stats = await client.request("/api/fasting/statistics", response_model=FastingStatistics)
        self.assertEqual(stats.total_fasts, 2)
        self.assertEqual(stats.longest_fast, 17.0)

    async def test_list_decoding_with_mixed_date_formats(self) -> None:
        payload = [
            {"id": "5b1f7c3a-9f0e-4a51-9d8c-3f8f3a0c2b11", "startTime": "2024-01-15T10:30:00.000+0000",
             "duration": 0, "type": "18:6", "createdAt": "2024-01-15 10:30:00"},
            {"id": "0d6a1f0e-8a36-4c43-b5cb-93c1f4b4d8a2", "startTime": "1705315800",
             "endTime": "01/16/2024 02:30:00", "duration": 57600, "type": "16:8", "createdAt": "2024-01-15"},
        ]
        client, _ = _client(lambda request: json_response(200, payload), TOKENS)
        records = await client.request("/api/fasting/records", response_model=List[FastRecord])
        self.assertEqual(len(records), 2)
        self.assertEqual(records[0].start_time, records[1].start_time)
        self.assertTrue(records[0].is_active)
        self.assertTrue(records[1].target_reached)

    async def test_undecodable_body_is_decoding_failure(self) -> None:
        bodies = [
            httpx.Response(200, text=""),
            httpx.Response(200, text="<html>oops</html>"),
            json_response(200, {"totalFasts": 2}),
            json_response(200, [{"startTime": "someday"}]),
        ]
        for response in bodies:
            with self.subTest(body=response.content):
                client, _ = _client(lambda request, r=response: r, TOKENS)
                with self.assertRaises(DecodingError):
                    await client.request("/api/fasting/statistics", response_model=FastingStatistics)

    async def test_record_missing_required_keys_is_decoding_failure(self) -> None:
        bodies = [
            {"startTime": "2024-01-15T10:30:00Z"},
            {"startTime": "2024-01-15T10:30:00Z", "duration": 0, "type": "16:8", "createdAt": "2024-01-15"},
            {"id": "5b1f7c3a-9f0e-4a51-9d8c-3f8f3a0c2b11", "startTime": "2024-01-15T10:30:00Z", "type": "16:8",
             "createdAt": "2024-01-15"},
        ]
        for payload in bodies:
            with self.subTest(payload=payload):
                client, _ = _client(lambda request, p=payload: json_response(200, p), TOKENS)
                with self.assertRaises(DecodingError):
                    await client.request("/api/fasting/records/x", response_model=FastRecord)

    async def test_transport_failure_is_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = _client(handler, TOKENS)
        with self.assertRaises(NetworkError) as ctx:
            await client.request("/api/users/me")
        self.assertIsInstance(ctx.exception.__cause__, httpx.ConnectError)

    async def test_timeout_is_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client, _ = _client(handler)
        with self.assertRaises(NetworkError):
            await client.request("/api/users/me")


if __name__ == "__main__":
    unittest.main()
