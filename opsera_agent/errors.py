"""Error taxonomy shared by the HTTP surface and the session registry.

Copyright (c) 2025 Patrick Morrison. Licensed under the MIT License.

Every failure a caller can observe is a ``ServiceError`` subclass carrying the
HTTP status it maps to. The router renders them as ``{"error": message}``.
"""
from __future__ import annotations

from starlette.responses import JSONResponse

from . import SERVER_NAME


class ServiceError(Exception):
    status_code = 500
    code = 'internal_error'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthenticated(ServiceError):
    status_code = 401
    code = 'unauthenticated'


class InvalidCredential(ServiceError):
    status_code = 401
    code = 'invalid_credential'


class NotFound(ServiceError):
    status_code = 404
    code = 'not_found'


class PromptNotFound(NotFound):
    def __init__(self, name):
        super().__init__(f'Prompt not found: {name}')


class ToolNotFound(NotFound):
    def __init__(self, name):
        super().__init__(f'Unknown tool: {name}')


class BadRequest(ServiceError):
    status_code = 400
    code = 'bad_request'


class InvalidSession(BadRequest):
    code = 'invalid_session'

    def __init__(self, message: str = 'Invalid session'):
        super().__init__(message)


class InvalidArguments(BadRequest):
    code = 'invalid_arguments'


class InternalTransportFailure(ServiceError):
    status_code = 500
    code = 'transport_failure'


class SessionLimitExceeded(ServiceError):
    status_code = 503
    code = 'session_limit'


def render_error(exc: ServiceError) -> JSONResponse:
    """Render a ``ServiceError`` as ``{"error": message}`` with its machine code header."""
    headers = {'X-Error-Code': exc.code}
    if exc.status_code == 401:
        headers['WWW-Authenticate'] = f'Bearer realm="{SERVER_NAME}"'
    return JSONResponse({'error': exc.message}, status_code=exc.status_code, headers=headers)


__all__ = [
    'ServiceError', 'Unauthenticated', 'InvalidCredential', 'NotFound', 'PromptNotFound',
    'ToolNotFound', 'BadRequest', 'InvalidSession', 'InvalidArguments',
    'InternalTransportFailure', 'SessionLimitExceeded', 'render_error',
]
