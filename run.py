# Copyright (c) 2025 Patrick Morrison
# Licensed under the MIT License. See LICENSE file for details.
import uvicorn

from opsera_agent.config import settings
from opsera_agent.fastapi_app import create_app
from opsera_agent.logging_config import configure_logging

BANNER = """
Opsera DevOps Agent - MCP Server
  Port:  {port}
  SSE:   GET  /sse
  Msg:   POST /message
  Tools: opsera_create_pipeline, opsera_security_scan, opsera_dora_metrics
"""


def main():
    logger = configure_logging(settings)
    if settings.uses_default_key:
        logger.warning("VALID_API_KEY not set; using the development default key")
    logger.info(BANNER.format(port=settings.port))
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == '__main__':
    main()
