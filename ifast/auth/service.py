# -*- coding: utf-8 -*-
"""Auth — login, token refresh and logout against /api/auth, plus the refresh-once retry wrapper."""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..client.api_client import APIClient, QueryParams
from ..client.errors import DecodingError, UnauthorizedError
from .models import LoginRequest, TokenPair
from .token_store import TokenStore, TokenStoreError

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/auth/login"
REFRESH_PATH = "/api/auth/refresh"
LOGOUT_PATH = "/api/auth/logout"

TOKEN_DELIMITER = "|"


def split_token_string(raw: str) -> TokenPair:
    """Split the login response ``access|refresh`` into a :class:`TokenPair`."""
    parts = raw.strip().split(TOKEN_DELIMITER)
    if len(parts) != 2 or not all(part.strip() for part in parts):
        raise DecodingError("Login response is not an access|refresh token string")
    return TokenPair(access_token=parts[0].strip(), refresh_token=parts[1].strip())


class AuthService:
    def __init__(self, client: APIClient, token_store: TokenStore) -> None:
        self.client = client
        self.token_store = token_store

    async def login(self, username: str, password: str) -> TokenPair:
        raw = await self.client.request(
            LOGIN_PATH,
            method="POST",
            body=LoginRequest(username=username, password=password),
            requires_auth=False,
            response_model=str,
        )
        tokens = split_token_string(raw)
        self.token_store.save(tokens)
        logger.info("Logged in as %s", username)
        return tokens

    async def refresh_access_token_if_possible(self) -> Optional[TokenPair]:
        """Exchange the stored refresh token for a new access token.

        Returns ``None`` without touching the network when nothing is stored.
        Any failure of the refresh call propagates unchanged.
        """
        tokens = self.token_store.load()
        if tokens is None:
            logger.info("No stored refresh token; skipping refresh")
            return None
        raw = await self.client.request(
            REFRESH_PATH,
            method="POST",
            query=[("refreshToken", tokens.refresh_token)],
            requires_auth=False,
            response_model=str,
        )
        access = raw.strip()
        if not access:
            raise DecodingError("Refresh response is empty")
        refreshed = TokenPair(access_token=access, refresh_token=tokens.refresh_token)
        self.token_store.save(refreshed)
        logger.info("Access token refreshed")
        return refreshed

    async def logout(self) -> None:
        try:
            await self.client.request(LOGOUT_PATH, method="POST", requires_auth=True, response_model=str)
        finally:
            try:
                self.token_store.delete()
            except TokenStoreError as exc:
                logger.warning("Could not clear stored tokens on logout: %s", exc)


class RefreshingClient:
    """``APIClient.request`` with one refresh-and-retry on 401 for authenticated requests.

    Each logical request refreshes at most once. Concurrent requests that all hit
    401 refresh independently; the last saved token pair wins.
    """

    def __init__(self, client: APIClient, auth_service: AuthService) -> None:
        self.client = client
        self.auth_service = auth_service

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
        kwargs = dict(
            method=method,
            query=query,
            body=body,
            requires_auth=requires_auth,
            response_model=response_model,
        )
        try:
            return await self.client.request(path, **kwargs)
        except UnauthorizedError:
            if not requires_auth:
                raise
            logger.info("%s %s unauthorized; refreshing token and retrying once", method.upper(), path)
        await self.auth_service.refresh_access_token_if_possible()
        return await self.client.request(path, **kwargs)
