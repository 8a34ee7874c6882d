# -*- coding: utf-8 -*-
"""iFast — fasting tracker client core.

Usage example:
    from ifast.services import build_services
    services = build_services()
    await services.session.login("alice", "password123")
    records = await services.fasting.list_records()
"""

__version__ = "0.1.0"
