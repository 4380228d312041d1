"""
Shared plumbing for the login service.

This module provides:
- Logging setup
- SQLAlchemy async engine and session factory
- Standard JSON response envelope
- BaseService with event/error logging helpers
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

Base = declarative_base()


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_engine(database_url: str) -> AsyncEngine:
    """
    Create the async engine for the users database.

    SQLite connections get a busy timeout so concurrent writers wait for
    the lock instead of failing with "database is locked".
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["timeout"] = 30
    return create_async_engine(database_url, echo=False, connect_args=connect_args)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    """Create any missing tables registered on Base."""
    # Import for the side effect of registering the models on Base.metadata
    from login_web.auth import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


class MCPResponse(JSONResponse):
    """
    Standard response envelope for all API endpoints.
    """
    def __init__(self, data: Any = None, message: str = "success", status: str = "ok", **kwargs):
        content = {
            "status": status,
            "message": message,
            "data": data,
        }
        super().__init__(content=content, **kwargs)


class BaseService:
    """
    Base class for services. Provides:
    - A named logger
    - Structured event/error logging
    - Standard response envelope
    """
    def __init__(self, service_name: str = "core"):
        self.service_name = service_name
        self.logger = logging.getLogger(f"login_web.{service_name}")

    def log_event(self, event_name: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Log an event."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": self.service_name,
            "event": event_name,
            "data": details or {},
        }
        self.logger.info(f"EVENT: {json.dumps(log_data, default=str)}")
        return log_data

    def log_error(self, error: Exception, context: Optional[str] = None) -> Dict[str, Any]:
        """Log an error with optional context."""
        error_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": self.service_name,
            "error": str(error),
            "error_type": error.__class__.__name__,
            "context": context or "unknown",
        }
        self.logger.error(f"ERROR: {json.dumps(error_data, default=str)}")
        return error_data

    def mcp_response(
        self,
        data: Any = None,
        message: str = "success",
        status: str = "ok",
        status_code: int = 200,
    ) -> MCPResponse:
        """Return a standard response envelope."""
        return MCPResponse(data=data, message=message, status=status, status_code=status_code)
