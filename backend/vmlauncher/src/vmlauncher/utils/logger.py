"""
Loguru logging configuration for the vmlauncher service.

Environment variables:
- LOG_LEVEL: default INFO
- LOG_JSON: when true → JSON sink only; when false → pretty stderr sink only (default: false)
- LOG_JSON_SINK: stdout | path | none (default: stdout)
- LOG_BACKTRACE, LOG_DIAGNOSE: default false
- LOG_ENQUEUE: default true when the JSON sink is a file, false otherwise
- LOG_ROTATION, LOG_RETENTION, LOG_COMPRESSION: options for a JSON file sink

Stdlib logging (uvicorn, google-auth, urllib3) is intercepted via InterceptHandler.
Records are enriched with app/env/service.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Dict, List, Optional

from loguru import logger


YES = {"1", "true", "yes", "y", "on", "t"}

PRETTY_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level> <dim>{extra[request_id]}</dim>"
)

# Chatty third-party loggers
QUIET_LOGGERS = ("uvicorn.access", "google.auth", "google.auth.transport", "urllib3.connectionpool")


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in YES


def _str(name: str, default: Optional[str] = None) -> Optional[str]:
    val = os.getenv(name, "").strip()
    return val if val else default


class InterceptHandler(logging.Handler):
    """Forward stdlib log records to loguru, keeping the caller location."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _json_handler(level: str) -> Optional[Dict[str, Any]]:
    sink_cfg = os.getenv("LOG_JSON_SINK", "stdout").strip().lower()
    if sink_cfg in {"none", "off", "false"}:
        return None

    to_file = sink_cfg not in {"", "stdout"}
    handler: Dict[str, Any] = {
        "sink": sink_cfg if to_file else sys.stdout,
        "serialize": True,
        "level": level,
        "backtrace": _flag("LOG_BACKTRACE"),
        "diagnose": _flag("LOG_DIAGNOSE"),
        "enqueue": _flag("LOG_ENQUEUE", "true" if to_file else "false"),
    }
    if to_file:
        for key, env_name, default in (
            ("rotation", "LOG_ROTATION", "500 MB"),
            ("retention", "LOG_RETENTION", "14 days"),
            ("compression", "LOG_COMPRESSION", "zip"),
        ):
            value = _str(env_name, default)
            if value:
                handler[key] = value
    return handler


def configure_logging(app_name: str, *, service: Optional[str] = None, env: Optional[str] = None) -> None:
    env = env or os.getenv("APP_ENV", "prod")
    level = os.getenv("LOG_LEVEL", "INFO").strip().upper()

    handlers: List[Dict[str, Any]] = []
    json_handler = _json_handler(level) if _flag("LOG_JSON") else None
    if json_handler is not None:
        handlers.append(json_handler)
    else:
        handlers.append(
            {
                "sink": sys.stderr,
                "level": level,
                "colorize": True,
                "format": PRETTY_FORMAT,
                "backtrace": _flag("LOG_BACKTRACE"),
                "diagnose": _flag("LOG_DIAGNOSE"),
            }
        )

    # Intercept stdlib logging
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logging.getLogger().setLevel(logging.INFO)

    def _patch(record: dict) -> None:
        extra = record["extra"]
        extra.setdefault("request_id", "-")
        extra["level_name"] = record["level"].name
        extra["severity"] = record["level"].no

    base_extra = {"app": app_name, "env": env, "request_id": "-"}
    if service:
        base_extra["service"] = service

    logger.remove()
    logger.configure(handlers=handlers, extra=base_extra, patcher=_patch)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.bind(level=level, json=json_handler is not None).info("Logging configured")
