"""Shared fixtures.

Copyright (c) 2025 Patrick Morrison. Licensed under the MIT License.
"""
import pytest
from fastapi.testclient import TestClient

from opsera_agent.config import Settings
from opsera_agent.fastapi_app import create_app
from opsera_agent.sessions import SessionRegistry

API_KEY = 'test-key'


@pytest.fixture
def settings():
    return Settings(valid_api_key=API_KEY, sse_keepalive_sec=0.05, session_queue_size=5)


@pytest.fixture
def registry(settings):
    return SessionRegistry.from_settings(settings)


@pytest.fixture
def app(settings, registry):
    return create_app(settings, registry)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers():
    return {'Authorization': f'Bearer {API_KEY}'}
