"""Logging configuration utilities.

Copyright (c) 2025 Patrick Morrison. Licensed under the MIT License.
"""
import logging
import json
from contextvars import ContextVar

from .config import Settings, settings as default_settings

# Context variables for structured enrichment
request_id_ctx: ContextVar[str | None] = ContextVar('request_id', default=None)
session_id_ctx: ContextVar[str | None] = ContextVar('session_id', default=None)

_CONTEXT = ((request_id_ctx, 'request_id'), (session_id_ctx, 'session_id'))

LOG_FORMAT = '%(asctime)s level=%(levelname)s logger=%(name)s msg=%(message)s'


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = {
            'ts': self.formatTime(record, '%Y-%m-%dT%H:%M:%S'),
            'level': record.levelname,
            'logger': record.name,
            'msg': record.getMessage(),
        }
        for ctx_var, key in _CONTEXT:
            val = ctx_var.get()
            if val:
                base[key] = val
        if record.exc_info:
            base['exc'] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False)


class ContextEnricher(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        for ctx_var, key in _CONTEXT:
            val = ctx_var.get()
            if val:
                setattr(record, key, val)
        return True


class KeyValueFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        parts = [
            f"ts={self.formatTime(record, '%Y-%m-%dT%H:%M:%S')}",
            f"level={record.levelname}",
            f"logger={record.name}",
            f"msg={record.getMessage().replace(' ', '_')}"
        ]
        for _, attr in _CONTEXT:
            val = getattr(record, attr, None)
            if val:
                parts.append(f"{attr}={val}")
        if record.exc_info:
            parts.append('exc=1')
        return ' '.join(parts)


def configure_logging(settings: Settings | None = None):
    settings = settings or default_settings
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    handler = logging.StreamHandler()
    if settings.log_format == 'json':
        handler.setFormatter(JsonFormatter())
    elif settings.log_format == 'kv':
        handler.setFormatter(KeyValueFormatter())
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(ContextEnricher())
    logging.basicConfig(level=level, handlers=[handler], force=True)
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    return logging.getLogger('opsera_agent')


__all__ = ['configure_logging', 'JsonFormatter', 'KeyValueFormatter', 'ContextEnricher']
