# -*- coding: utf-8 -*-
"""HTTP client for the iFast backend.

Usage example:
    from ifast.client import APIClient
    client = APIClient(token_store=store)
    text = await client.request("/api/auth/logout", method="POST")
"""

from .api_client import APIClient  # noqa: F401
from .errors import (  # noqa: F401
    APIError,
    DecodingError,
    HTTPStatusError,
    InvalidURLError,
    NetworkError,
    UnauthorizedError,
)
