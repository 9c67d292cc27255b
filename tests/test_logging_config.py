"""Logging formatter tests.

Copyright (c) 2025 Patrick Morrison. Licensed under the MIT License.
"""
import json
import logging

from opsera_agent.config import Settings
from opsera_agent.logging_config import (
    ContextEnricher, JsonFormatter, KeyValueFormatter, configure_logging, request_id_ctx, session_id_ctx,
)


def _record(msg='session opened'):
    return logging.LogRecord('opsera_agent.sessions', logging.INFO, __file__, 1, msg, None, None)


def test_json_formatter_includes_context():
    token = request_id_ctx.set('req-1')
    try:
        data = json.loads(JsonFormatter().format(_record()))
    finally:
        request_id_ctx.reset(token)
    assert data['msg'] == 'session opened'
    assert data['request_id'] == 'req-1'


def test_kv_formatter_uses_enriched_attrs():
    token = session_id_ctx.set('abc123')
    try:
        record = _record()
        ContextEnricher().filter(record)
    finally:
        session_id_ctx.reset(token)
    line = KeyValueFormatter().format(record)
    assert 'msg=session_opened' in line
    assert 'session_id=abc123' in line


def test_configure_logging_returns_package_logger():
    logger = configure_logging(Settings(log_level='debug', log_format='json'))
    assert logger.name == 'opsera_agent'
    assert logging.getLogger().level == logging.DEBUG
    configure_logging(Settings())
