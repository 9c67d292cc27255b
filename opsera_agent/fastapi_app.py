"""FastAPI application exposing the catalog over SSE and plain HTTP.

Copyright (c) 2025 Patrick Morrison. Licensed under the MIT License.

Run with:
  uvicorn opsera_agent.fastapi_app:create_app --factory --port 3847
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
import uuid as _uuid
from typing import Any, AsyncIterator, Dict, Optional

import mcp.types as types
from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from mcp.server.lowlevel import Server
from pydantic import ValidationError
from sse_starlette.sse import EventSourceResponse
from starlette.background import BackgroundTask
from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from . import SERVER_NAME, __version__, catalog
from .auth import ApiKeyMiddleware
from .config import Settings, settings as default_settings
from .errors import BadRequest, InvalidSession, ServiceError, render_error
from .logging_config import request_id_ctx, session_id_ctx
from .protocol import build_server, prompt_result, text_content
from .schemas import CallToolRequest, GetPromptRequest
from .sessions import END_OF_STREAM, SessionRegistry, run_reaper

logger = logging.getLogger('opsera_agent.api')

MESSAGE_PATH = '/message'


async def event_stream(server: Server, registry: SessionRegistry, session_id: str) -> AsyncIterator[Dict[str, Any]]:
    """Run the MCP server for one session and yield its SSE events until the session ends."""
    channel = registry.lookup(session_id)
    if channel is None:
        return
    session_id_ctx.set(session_id)

    def on_server_exit(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None and session_id in registry:
            logger.error("MCP session %s failed: %r", session_id[:8], exc)
            registry.close(session_id)

    task = asyncio.create_task(
        server.run(channel.inbound, channel.outbound, server.create_initialization_options())
    )
    task.add_done_callback(on_server_exit)
    try:
        yield {'event': 'endpoint', 'data': f'{MESSAGE_PATH}?sessionId={session_id}'}
        while True:
            item = await channel.receive()
            if item is END_OF_STREAM:
                return
            yield {'event': 'message', 'data': item.message.model_dump_json(by_alias=True, exclude_none=True)}
    finally:
        registry.close(session_id)
        task.cancel()


def close_on_finish(registry: SessionRegistry, session_id: str) -> BackgroundTask:
    # a stream cancelled before its first event never reaches the generator's cleanup
    async def close_session() -> None:
        registry.close(session_id)

    return BackgroundTask(close_session)


def decode_message(raw: bytes) -> types.JSONRPCMessage:
    try:
        return types.JSONRPCMessage.model_validate_json(raw)
    except ValidationError as e:
        first = e.errors()[0]['msg'] if e.errors() else 'not a JSON-RPC 2.0 message'
        raise BadRequest(f'Invalid message: {first}') from e


class RequestContextMiddleware:
    """Tag each request with an id for logging and echo it as ``X-Request-ID``.

    Plain ASGI so long-lived SSE responses and client disconnects pass through untouched.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope['type'] != 'http':
            await self.app(scope, receive, send)
            return
        rid = Headers(scope=scope).get('x-request-id') or str(_uuid.uuid4())
        request_id_ctx.set(rid)

        async def send_with_id(message: Message) -> None:
            if message['type'] == 'http.response.start':
                MutableHeaders(scope=message).append('X-Request-ID', rid)
            await send(message)

        await self.app(scope, receive, send_with_id)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({'error': message}, status_code=status_code)


def create_app(settings: Optional[Settings] = None, registry: Optional[SessionRegistry] = None) -> FastAPI:
    settings = settings or default_settings
    registry = registry if registry is not None else SessionRegistry.from_settings(settings)
    server = build_server()

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI):
        reaper = None
        if registry.idle_timeout:
            reaper = asyncio.create_task(run_reaper(registry, settings.reaper_interval_sec))
        try:
            yield
        finally:
            if reaper is not None:
                reaper.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await reaper
            closed = registry.close_all()
            if closed:
                logger.info("Closed %d session(s) on shutdown", closed)

    app = FastAPI(title="Opsera DevOps Agent", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.registry = registry

    # last added runs first: request id, then CORS preflight, then the credential check
    app.add_middleware(ApiKeyMiddleware, secret=settings.valid_api_key, public_paths=('/health',))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=['*'],
        allow_headers=['*'],
    )
    app.add_middleware(RequestContextMiddleware)

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            logger.error("%s %s failed (%s): %s", request.method, request.url.path, exc.code, exc.message)
        return render_error(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        first = exc.errors()[0] if exc.errors() else {'loc': (), 'msg': 'invalid request'}
        field = '.'.join(str(p) for p in first.get('loc', ()))
        return _error_response(400, f"Invalid request: {field}: {first.get('msg')}" if field else 'Invalid request')

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_response(500, 'Internal server error')

    @app.get('/health')
    async def health():
        return {'status': 'ok', 'version': __version__, 'server': SERVER_NAME, 'active_sessions': len(registry)}

    @app.get('/sessions')
    async def sessions():
        return {'active_sessions': len(registry), 'sessions': registry.snapshot()}

    @app.get('/sse')
    async def open_stream():
        session_id = registry.open()
        return EventSourceResponse(
            event_stream(server, registry, session_id),
            ping=settings.sse_keepalive_sec,
            background=close_on_finish(registry, session_id),
        )

    @app.post(MESSAGE_PATH)
    async def post_message(request: Request, session_id: Optional[str] = Query(default=None, alias='sessionId')):
        if not session_id:
            raise BadRequest('Missing sessionId')
        if registry.lookup(session_id) is None:
            logger.warning("Message for unknown session: %s", session_id[:8])
            raise InvalidSession()
        session_id_ctx.set(session_id)
        registry.dispatch(session_id, decode_message(await request.body()))
        return PlainTextResponse('Accepted', status_code=202)

    @app.post('/tools')
    async def tools():
        return {'tools': catalog.list_tools()}

    @app.post('/prompts')
    async def prompts():
        return {'prompts': catalog.list_prompts()}

    @app.post('/prompts/get')
    async def get_prompt(req: GetPromptRequest):
        return prompt_result(catalog.get_prompt(req.name)).model_dump(by_alias=True, exclude_none=True)

    @app.post('/tools/call')
    async def call_tool(req: CallToolRequest):
        result = types.CallToolResult(content=[text_content(catalog.call_tool(req.name, req.arguments))])
        return result.model_dump(by_alias=True, exclude_none=True, exclude={'isError'})

    return app


__all__ = ['create_app', 'event_stream', 'close_on_finish', 'decode_message']
