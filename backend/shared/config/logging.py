"""
Structured logging for the menu service.

Records carry two kinds of context:
- keyword data passed at the call site (logger.info("Menu created", menu_id=3))
- request context (request id, tenant) bound once per request by
  RequestContextMiddleware and stamped on every record by RequestContextFilter

Production emits one JSON object per line; development prints a colored
single-line format.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

from shared.config.settings import settings


# Request context, empty outside of a request
request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
tenant_id_var: ContextVar[int | None] = ContextVar("tenant_id", default=None)


def bind_request_context(request_id: str | None, tenant_id: int | None) -> tuple:
    """Bind request context for logging. Returns tokens for reset_request_context."""
    return request_id_var.set(request_id), tenant_id_var.set(tenant_id)


def reset_request_context(tokens: tuple) -> None:
    request_token, tenant_token = tokens
    request_id_var.reset(request_token)
    tenant_id_var.reset(tenant_token)


class RequestContextFilter(logging.Filter):
    """Copies the bound request context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        record.tenant_id = tenant_id_var.get()
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = getattr(record, "request_id", None)
        if request_id:
            entry["request_id"] = request_id
        tenant_id = getattr(record, "tenant_id", None)
        if tenant_id is not None:
            entry["tenant_id"] = tenant_id

        data = getattr(record, "extra_data", None)
        if data:
            entry["data"] = data

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        if settings.debug:
            entry["source"] = f"{record.pathname}:{record.lineno} in {record.funcName}"

        return json.dumps(entry, default=str, ensure_ascii=False)


class DevelopmentFormatter(logging.Formatter):
    """Colored single-line output for local runs."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, "")
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{color}{clock} {record.levelname:<8}{self.RESET} {record.name}: {record.getMessage()}"

        data = dict(getattr(record, "extra_data", None) or {})
        tenant_id = getattr(record, "tenant_id", None)
        if tenant_id is not None:
            data.setdefault("tenant", tenant_id)
        if data:
            line += f" {self.DIM}" + " ".join(f"{k}={v!r}" for k, v in data.items()) + self.RESET

        request_id = getattr(record, "request_id", None)
        if request_id:
            line += f" {self.DIM}[{request_id[:8]}]{self.RESET}"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger(logging.Logger):
    """
    Logger whose keyword arguments become structured record data:
        logger.info("Menu item moved", item_id=12, parent_id=3, position=0)
    exc_info and stack_info keep their stdlib meaning.
    """

    def _log_with_data(self, level: int, msg: str, args: tuple, kwargs: dict[str, Any]) -> None:
        if not self.isEnabledFor(level):
            return
        exc_info = kwargs.pop("exc_info", None)
        stack_info = kwargs.pop("stack_info", False)
        extra = kwargs.pop("extra", None) or {}
        extra["extra_data"] = kwargs or None
        self._log(level, msg, args, exc_info=exc_info, extra=extra, stack_info=stack_info)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_with_data(logging.DEBUG, msg, args, kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_with_data(logging.INFO, msg, args, kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_with_data(logging.WARNING, msg, args, kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_with_data(logging.ERROR, msg, args, kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self._log_with_data(logging.ERROR, msg, args, kwargs)

    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_with_data(logging.CRITICAL, msg, args, kwargs)


logging.setLoggerClass(StructuredLogger)


def setup_logging() -> None:
    """
    Install the stdout handler on the root logger.
    Safe to call more than once (handlers are replaced, not added).
    """
    level = logging.DEBUG if settings.debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(
        StructuredFormatter() if settings.environment == "production" else DevelopmentFormatter()
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    # Third-party noise
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """
    Logger for a module.

    Usage:
        logger = get_logger(__name__)
        logger.warning("Rejected reorder", menu_id=4, reason="cycle")
    """
    return logging.getLogger(name)  # type: ignore[return-value]


menu_api_logger = get_logger("menu_api")
