# -*- coding: utf-8 -*-
"""HealthKit step-count access.

Usage example:
    from ifast.healthkit.provider import HealthExportStepProvider
    provider = HealthExportStepProvider()
    days = provider.daily_steps(date(2025, 1, 1), date(2025, 1, 7))
"""
