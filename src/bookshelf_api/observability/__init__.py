"""
bookshelf_api.observability

Logging for the API process.

Responsibilities:
- structlog configuration with secret masking (`logging`).
- Request correlation and access logging (`middleware`).
"""

from bookshelf_api.observability.logging import configure_logging, get_logger
from bookshelf_api.observability.middleware import RequestContextMiddleware

__all__ = ["RequestContextMiddleware", "configure_logging", "get_logger"]
