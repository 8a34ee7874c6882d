# -*- coding: utf-8 -*-
"""User account endpoints."""
