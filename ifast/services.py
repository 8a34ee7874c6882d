# -*- coding: utf-8 -*-
"""Service wiring: one credential store shared by the client, auth flows and endpoint wrappers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from .auth.service import AuthService, RefreshingClient
from .auth.session import AuthSession
from .auth.token_store import SQLiteTokenStore, TokenStore
from .client.api_client import APIClient
from .config import Settings, settings as default_settings
from .fasting.api import FastingAPI
from .users.api import UserAPI

logger = logging.getLogger(__name__)


@dataclass
class IFastServices:
    client: APIClient
    token_store: TokenStore
    auth: AuthService
    users: UserAPI
    fasting: FastingAPI
    session: AuthSession


def build_services(
    config: Optional[Settings] = None,
    *,
    token_store: Optional[TokenStore] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    base_url: Optional[str] = None,
) -> IFastServices:
    config = config or default_settings
    store = token_store if token_store is not None else SQLiteTokenStore(
        config.db_path,
        service=config.credential_service,
        account=config.credential_account,
    )
    client = APIClient(
        base_url or config.base_url,
        store,
        timeout=config.request_timeout,
        user_agent=config.user_agent,
        transport=transport,
    )
    auth = AuthService(client, store)
    refreshing = RefreshingClient(client, auth)
    users = UserAPI(refreshing)
    fasting = FastingAPI(refreshing)
    logger.debug("iFast services initialized with base URL %s", client.base_url)
    return IFastServices(
        client=client,
        token_store=store,
        auth=auth,
        users=users,
        fasting=fasting,
        session=AuthSession(auth, users, store),
    )
