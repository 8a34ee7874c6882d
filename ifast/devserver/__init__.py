# -*- coding: utf-8 -*-
"""Local FastAPI backend implementing the endpoints the iFast client consumes.

Usage example:
    python -m ifast.devserver
    IFAST_BASE_URL=http://127.0.0.1:8080 <client code>
"""
