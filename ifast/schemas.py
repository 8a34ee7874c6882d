# -*- coding: utf-8 -*-
"""Shared pydantic base for wire models (camelCase on the wire, snake_case in Python)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
