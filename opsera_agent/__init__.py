"""Opsera DevOps Agent: prompt and tool catalog served over SSE and plain HTTP.

Copyright (c) 2025 Patrick Morrison. Licensed under the MIT License.
"""

__version__ = '1.0.0'
SERVER_NAME = 'opsera-devops-agent'
