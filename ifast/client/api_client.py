# -*- coding: utf-8 -*-
"""Client — authenticated JSON request against the iFast backend.

One call is one attempt. The refresh-and-retry-once rule for 401 responses is
applied by ``ifast.auth.service.RefreshingClient`` on top of this class.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import to_json

from ..auth.token_store import TokenStore
from ..config import settings
from .errors import DecodingError, HTTPStatusError, InvalidURLError, NetworkError, UnauthorizedError

logger = logging.getLogger(__name__)

QueryParams = Union[Mapping[str, Any], Sequence[Tuple[str, Any]]]


@lru_cache(maxsize=128)
def _adapter(response_model: Any) -> TypeAdapter:
    return TypeAdapter(response_model)


def _query_items(query: Optional[QueryParams]) -> list[tuple[str, str]]:
    if not query:
        return []
    items = query.items() if isinstance(query, Mapping) else query
    return [(str(name), str(value)) for name, value in items if value is not None]


def _encode_body(body: Any) -> bytes:
    if isinstance(body, BaseModel):
        return body.model_dump_json(by_alias=True).encode("utf-8")
    # Lists/dicts may carry models, datetimes or UUIDs.
    return to_json(body, by_alias=True)


class APIClient:
    """Issues JSON requests against ``base_url``, attaching the stored bearer token when asked."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token_store: Optional[TokenStore] = None,
        *,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url if base_url is not None else settings.base_url
        self.token_store = token_store
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.user_agent = user_agent or settings.user_agent
        self._transport = transport

    def build_url(self, path: str, query: Optional[QueryParams] = None) -> httpx.URL:
        raw = self.base_url.rstrip("/") + "/" + path.lstrip("/")
        try:
            url = httpx.URL(raw)
            items = _query_items(query)
            if items:
                url = url.copy_merge_params(items)
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise InvalidURLError(f"Cannot build URL from {raw!r}") from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidURLError(f"Cannot build URL from {raw!r}")
        return url

    def build_headers(self, *, requires_auth: bool, has_body: bool) -> dict[str, str]:
        headers = {"Accept": "application/json", "User-Agent": self.user_agent}
        if has_body:
            headers["Content-Type"] = "application/json"
        if requires_auth and self.token_store is not None:
            tokens = self.token_store.load()
            if tokens is not None:
                headers["Authorization"] = f"Bearer {tokens.access_token}"
        return headers

    async def request(
        self,
        path: str,
        *,
        method: str = "GET",
        query: Optional[QueryParams] = None,
        body: Any = None,
        requires_auth: bool = True,
        response_model: Any = str,
    ) -> Any:
        url = self.build_url(path, query)
        content = _encode_body(body) if body is not None else None
        headers = self.build_headers(requires_auth=requires_auth, has_body=content is not None)
        method = method.upper()

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                resp = await client.request(method, url, headers=headers, content=content)
        except httpx.RequestError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise NetworkError(f"Network error: {exc}") from exc

        logger.debug("%s %s -> %s", method, url, resp.status_code)
        if resp.status_code == 401:
            raise UnauthorizedError(f"{method} {url.path} returned 401")
        if not 200 <= resp.status_code < 300:
            raise HTTPStatusError(resp.status_code, f"{method} {url.path} returned {resp.status_code}: {resp.text[:200]}")
        return self._decode(resp, response_model)

    @staticmethod
    def _decode(resp: httpx.Response, response_model: Any) -> Any:
        if response_model is str:
            try:
                return resp.content.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise DecodingError("Response body is not valid UTF-8") from exc
        try:
            return _adapter(response_model).validate_json(resp.content)
        except ValidationError as exc:
            logger.debug("Failed to decode response as %r: %s", response_model, resp.text[:500])
            raise DecodingError(f"Cannot decode response as {response_model!r}: {exc}") from exc
