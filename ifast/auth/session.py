# -*- coding: utf-8 -*-
"""Auth — authenticated session orchestration.

State is an immutable :class:`SessionState` snapshot. Every transition replaces
the snapshot and notifies subscribers, so callers never share a mutable object.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional

from ..client.errors import (
    APIError,
    DecodingError,
    HTTPStatusError,
    InvalidURLError,
    NetworkError,
    UnauthorizedError,
)
from ..users.api import UserAPI
from ..users.models import UserRegistrationRequest, UserResponse
from . import validation
from .models import TokenPair
from .service import AuthService
from .token_store import TokenStore, TokenStoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionState:
    is_authenticated: bool = False
    current_user: Optional[UserResponse] = None
    is_loading: bool = False
    error_message: Optional[str] = None


Listener = Callable[[SessionState], None]


_LOGIN_STATUS_MESSAGES = {
    400: "Invalid login data. Please check your input.",
    401: "Invalid username or password. Please check your credentials.",
    422: "Validation failed. Please check your credentials.",
}

_SIGNUP_STATUS_MESSAGES = {
    400: "Invalid signup data. Please check your information.",
    409: "Username or email already exists. Please choose different credentials.",
    422: "Validation failed. Please check your input.",
}


def describe_error(action: str, error: Exception, status_messages: Optional[dict] = None) -> str:
    """User-facing message for a failed ``action`` ("Login", "Signup", ...)."""
    status_messages = status_messages or {}
    if isinstance(error, TokenStoreError):
        return f"{action} failed: Unable to save authentication tokens ({error})."
    if isinstance(error, HTTPStatusError):
        return status_messages.get(error.status_code, f"{action} failed with status code: {error.status_code}")
    if isinstance(error, UnauthorizedError):
        return status_messages.get(401, f"{action} failed: Unauthorized request")
    if isinstance(error, DecodingError):
        return f"{action} failed: Invalid response from server"
    if isinstance(error, NetworkError):
        return f"{action} failed: Network error - {error}"
    if isinstance(error, InvalidURLError):
        return f"{action} failed: Invalid server configuration"
    return f"{action} failed: {error}"


class AuthSession:
    def __init__(self, auth_service: AuthService, user_api: UserAPI, token_store: TokenStore) -> None:
        self.auth_service = auth_service
        self.user_api = user_api
        self.token_store = token_store
        self._state = SessionState()
        self._listeners: List[Listener] = []

    # ---- observable state ----

    @property
    def state(self) -> SessionState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _update(self, **changes) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("Session state listener %r failed", listener)

    def clear_error(self) -> None:
        self._update(error_message=None)

    # ---- flows ----

    async def login(self, username: str, password: str) -> bool:
        self._update(is_loading=True, error_message=None)
        try:
            await self.auth_service.login(username, password)
        except (APIError, TokenStoreError) as exc:
            logger.info("Login failed for %s: %s", username, exc)
            self._update(is_loading=False, error_message=describe_error("Login", exc, _LOGIN_STATUS_MESSAGES))
            return False
        user = await self.fetch_current_user()
        if user is None:
            self._update(is_loading=False, error_message="Login failed: Unable to load your profile")
            return False
        self._update(is_authenticated=True, is_loading=False)
        return True

    async def signup(self, first_name: str, last_name: str, email: str, username: str, password: str) -> bool:
        if len(password) < validation.MIN_PASSWORD_LENGTH:
            self._update(
                error_message=f"Password must be at least {validation.MIN_PASSWORD_LENGTH} characters long"
            )
            return False
        if len(username) < validation.MIN_USERNAME_LENGTH:
            self._update(
                error_message=f"Username must be at least {validation.MIN_USERNAME_LENGTH} characters long"
            )
            return False
        if not self.check_token_store_access():
            self._update(error_message="Unable to access secure storage. Please check your settings and try again.")
            return False

        self._update(is_loading=True, error_message=None)
        request = UserRegistrationRequest(
            username=username,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
        )
        try:
            user = await self.user_api.register(request)
        except APIError as exc:
            logger.info("Signup failed for %s: %s", username, exc)
            self._update(is_loading=False, error_message=describe_error("Signup", exc, _SIGNUP_STATUS_MESSAGES))
            return False
        logger.info("Registered user %s (id=%s)", username, user.id)
        self._update(current_user=user)

        if await self.login(username, password):
            return True
        # The account exists even though the automatic login did not go through.
        reason = self._state.error_message
        message = "Account created successfully! Please log in manually."
        if reason:
            message = f"{message} ({reason})"
        self._update(is_loading=False, error_message=message)
        return False

    async def logout(self) -> None:
        self._update(is_loading=True)
        try:
            await self.auth_service.logout()
        except (APIError, TokenStoreError) as exc:
            logger.warning("Logout request failed, clearing local session anyway: %s", exc)
        self._update(is_authenticated=False, current_user=None, is_loading=False)

    async def fetch_current_user(self) -> Optional[UserResponse]:
        try:
            user = await self.user_api.get_current_user()
        except APIError as exc:
            logger.info("Failed to fetch current user: %s", exc)
            self._update(current_user=None, is_authenticated=False)
            return None
        self._update(current_user=user)
        return user

    async def check_authentication_status(self) -> bool:
        try:
            tokens = self.token_store.load()
        except TokenStoreError as exc:
            logger.warning("Credential store unavailable: %s", exc)
            tokens = None
        if tokens is None:
            self._update(is_authenticated=False, current_user=None)
            return False
        user = await self.fetch_current_user()
        self._update(is_authenticated=user is not None)
        return user is not None

    async def refresh_token_if_needed(self) -> bool:
        try:
            await self.auth_service.refresh_access_token_if_possible()
        except (APIError, TokenStoreError) as exc:
            logger.info("Token refresh failed, re-authentication required: %s", exc)
            self._update(is_authenticated=False)
            return False
        return True

    def check_token_store_access(self) -> bool:
        """Round-trip a throwaway pair through the store, keeping any existing pair."""
        try:
            existing = self.token_store.load()
            self.token_store.save(TokenPair(access_token="probe", refresh_token="probe"))
            if existing is not None:
                self.token_store.save(existing)
            else:
                self.token_store.delete()
        except TokenStoreError as exc:
            logger.warning("Credential store access check failed: %s", exc)
            return False
        return True
