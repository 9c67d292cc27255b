"""Pydantic request schemas for the plain-request endpoints.

Copyright (c) 2025 Patrick Morrison. Licensed under the MIT License.

Response shapes come from ``mcp.types``.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class GetPromptRequest(BaseModel):
    name: str = Field(min_length=1, description="Prompt identifier")


class CallToolRequest(BaseModel):
    name: str = Field(min_length=1, description="Tool identifier")
    # shape is checked by the catalog once the tool is known
    arguments: Any = None


__all__ = ['GetPromptRequest', 'CallToolRequest']
