# -*- coding: utf-8 -*-
"""Authentication: token pair storage, login/refresh/logout and session state."""
