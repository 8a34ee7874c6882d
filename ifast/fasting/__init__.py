# -*- coding: utf-8 -*-
"""Fasting domain (records, statistics, local store)."""
