"""Bearer credential guard.

Copyright (c) 2025 Patrick Morrison. Licensed under the MIT License.

The guard runs as ASGI middleware in front of routing, so a rejected request
is answered before its body is read or any session is allocated.
"""
from __future__ import annotations

import logging
import secrets
from typing import Iterable, Optional

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Receive, Scope, Send

from .errors import InvalidCredential, Unauthenticated, render_error

logger = logging.getLogger('opsera_agent.auth')

BEARER_PREFIX = 'Bearer '


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    return authorization[len(BEARER_PREFIX):]


def verify_credential(authorization: Optional[str], secret: str) -> str:
    """Check an ``Authorization`` header value against the configured secret.

    Returns the presented token on success, raises ``Unauthenticated`` when no
    bearer token is present and ``InvalidCredential`` when it does not match.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        raise Unauthenticated('Missing API key')
    if not secrets.compare_digest(token.encode('utf-8'), secret.encode('utf-8')):
        raise InvalidCredential('Invalid API key')
    return token


class ApiKeyMiddleware:
    """Reject HTTP requests without a valid bearer token, except on public paths."""

    def __init__(self, app: ASGIApp, secret: str, public_paths: Iterable[str] = ('/health',)):
        self.app = app
        self.secret = secret
        self.public_paths = frozenset(public_paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope['type'] != 'http' or scope['path'] in self.public_paths:
            await self.app(scope, receive, send)
            return
        try:
            verify_credential(Headers(scope=scope).get('authorization'), self.secret)
        except (Unauthenticated, InvalidCredential) as e:
            logger.warning("Rejected %s %s: %s", scope['method'], scope['path'], e.message)
            await render_error(e)(scope, receive, send)
            return
        await self.app(scope, receive, send)


__all__ = ['extract_bearer_token', 'verify_credential', 'ApiKeyMiddleware']
