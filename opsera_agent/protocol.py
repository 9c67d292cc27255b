"""MCP server exposing the catalog over the Model Context Protocol.

Copyright (c) 2025 Patrick Morrison. Licensed under the MIT License.

One ``Server`` is built per application and run once per SSE session against
that session's memory streams. The SDK owns the JSON-RPC framing, the
``initialize`` handshake and protocol version negotiation.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import mcp.types as types
from mcp.server.lowlevel import Server

from . import SERVER_NAME, __version__, catalog

logger = logging.getLogger('opsera_agent.protocol')


def text_content(text: str) -> types.TextContent:
    return types.TextContent(type='text', text=text)


def prompt_result(entry: catalog.CatalogEntry, description: Optional[str] = None) -> types.GetPromptResult:
    return types.GetPromptResult(
        description=description,
        messages=[types.PromptMessage(role='user', content=text_content(entry.body))],
    )


def build_server() -> Server:
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return [
            types.Tool(name=t.name.value, description=t.description, inputSchema=t.input_schema)
            for t in catalog.TOOLS.values()
        ]

    @server.list_prompts()
    async def list_prompts() -> List[types.Prompt]:
        return [types.Prompt(name=e.id, description=e.description) for e in catalog.PROMPTS.values()]

    @server.get_prompt()
    async def get_prompt(name: str, arguments: Optional[Dict[str, str]] = None) -> types.GetPromptResult:
        entry = catalog.get_prompt(name)
        return prompt_result(entry, entry.description)

    # argument defaults are applied by the catalog, not the published input schema
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
        logger.debug("Tool call: %s", name)
        return [text_content(catalog.call_tool(name, arguments))]

    return server


__all__ = ['SERVER_NAME', 'build_server', 'prompt_result', 'text_content']
