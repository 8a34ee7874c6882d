# -*- coding: utf-8 -*-
"""Users — typed wrappers for /api/users."""

from __future__ import annotations

from typing import Any, List

from .models import UserRegistrationRequest, UserResponse

USERS_PATH = "/api/users"


class UserAPI:
    def __init__(self, client: Any) -> None:
        # APIClient or RefreshingClient; both expose the same ``request`` coroutine.
        self.client = client

    async def get_current_user(self) -> UserResponse:
        return await self.client.request(f"{USERS_PATH}/me", response_model=UserResponse)

    async def get_user_by_id(self, user_id: int) -> UserResponse:
        return await self.client.request(f"{USERS_PATH}/{user_id}", response_model=UserResponse)

    async def register(self, request: UserRegistrationRequest) -> UserResponse:
        return await self.client.request(
            f"{USERS_PATH}/register",
            method="POST",
            body=request,
            requires_auth=False,
            response_model=UserResponse,
        )

    async def update_user_roles(self, user_id: int, roles: List[str]) -> str:
        return await self.client.request(f"{USERS_PATH}/{user_id}/roles", method="PUT", body=list(roles))

    async def update_user_profile(self, user_id: int, first_name: str, last_name: str) -> UserResponse:
        return await self.client.request(
            f"{USERS_PATH}/{user_id}/profile",
            method="PUT",
            query=[("firstName", first_name), ("lastName", last_name)],
            response_model=UserResponse,
        )

    async def lock_user(self, user_id: int) -> str:
        return await self.client.request(f"{USERS_PATH}/{user_id}/lock", method="POST")

    async def unlock_user(self, user_id: int) -> str:
        return await self.client.request(f"{USERS_PATH}/{user_id}/unlock", method="POST")

    async def enable_user(self, user_id: int) -> str:
        return await self.client.request(f"{USERS_PATH}/{user_id}/enable", method="POST")

    async def disable_user(self, user_id: int) -> str:
        return await self.client.request(f"{USERS_PATH}/{user_id}/disable", method="POST")

    async def delete_user(self, user_id: int) -> str:
        return await self.client.request(f"{USERS_PATH}/{user_id}", method="DELETE")
