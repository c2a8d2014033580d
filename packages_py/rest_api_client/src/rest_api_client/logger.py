"""
Rest API Client Logger
Level control for the package logger and safe formatting of logged bodies.
"""
import json
import logging
import os
from typing import Any, Union

PACKAGE_LOGGER_NAME = "rest_api_client"
LOG_LEVEL_ENV = "REST_API_CLIENT_LOG_LEVEL"
MAX_LOGGED_BODY = 5000

LOG_LEVELS = {
    'silent': logging.CRITICAL + 10,
    'error': logging.ERROR,
    'warn': logging.WARNING,
    'warning': logging.WARNING,
    'info': logging.INFO,
    'debug': logging.DEBUG,
}


def get_logger() -> logging.Logger:
    return logging.getLogger(PACKAGE_LOGGER_NAME)


def get_log_level() -> int:
    return get_logger().getEffectiveLevel()


def set_log_level(level: Union[str, int]) -> None:
    """Set the level of every ``rest_api_client.*`` logger."""
    if isinstance(level, str):
        key = level.strip().lower()
        if key not in LOG_LEVELS:
            raise ValueError(f"Unknown log level '{level}'. Expected one of: {', '.join(LOG_LEVELS)}")
        level = LOG_LEVELS[key]
    get_logger().setLevel(level)


# Detect initial log level from env
_env_level = os.getenv(LOG_LEVEL_ENV, '').strip().lower()
if _env_level in LOG_LEVELS:
    set_log_level(_env_level)
elif _env_level:
    get_logger().warning(f"Ignoring {LOG_LEVEL_ENV}={_env_level!r}: expected one of {', '.join(LOG_LEVELS)}")


def format_body(body: Any) -> str:
    """
    Format a body for logging, guarding against binary data and huge payloads.
    """
    if body is None or body == "":
        return "<empty>"
    if isinstance(body, (bytes, bytearray)):
        return f"<binary data: {len(body)} bytes>"
    if isinstance(body, str):
        try:
            if body.strip().startswith(("{", "[")):
                body = json.dumps(json.loads(body), indent=2)
        except json.JSONDecodeError:
            pass
        if len(body) > MAX_LOGGED_BODY:
            return body[:MAX_LOGGED_BODY] + "... (truncated)"
        return body
    return str(body)
