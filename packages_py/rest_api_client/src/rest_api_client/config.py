"""
Configuration models and environment resolution for rest-api-client.
"""
import logging
import os
from typing import Any, Callable, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from .encoding import DEFAULT_CHARSET, normalize_charset
from .logger import LOG_LEVEL_ENV, LOG_LEVELS

logger = logging.getLogger(__name__)

# Constants
LOG_PREFIX = "[ClientConfig]"
DEFAULT_MAX_QUEUE_SIZE = 1000
DEFAULT_WORKER_NAME = "rest-api-client-worker"
ENV_PREFIX = "REST_API_CLIENT_"


def _resolve(arg: Any, env_keys: Union[str, List[str]], default: Any) -> Any:
    """
    Resolve a value in priority order:
    1. Direct argument (if not None)
    2. Environment variables
    3. Default value
    """
    if arg is not None:
        return arg

    if isinstance(env_keys, str):
        env_keys = [env_keys]

    for key in env_keys:
        val = os.getenv(key)
        if val is not None and val.strip() != "":
            return val

    return default


def _resolve_bool(arg: Any, env_keys: Union[str, List[str]], default: bool) -> bool:
    val = _resolve(arg, env_keys, default)
    if isinstance(val, str):
        return val.strip().lower() in ("true", "1", "yes", "on")
    return bool(val)


def _resolve_checked(
    arg: Any, env_key: str, default: Any, parse: Callable[[str], Any]
) -> Any:
    """
    Like _resolve, but an environment value rejected by ``parse`` is ignored
    with a warning and ``default`` is used. Arguments are returned unchanged
    and validated by the model.
    """
    if arg is not None:
        return arg

    val = _resolve(None, env_key, None)
    if val is None:
        return default

    try:
        return parse(val)
    except (ValueError, TypeError) as e:
        logger.warning(f"{LOG_PREFIX} Ignoring {env_key}={val!r}: {e}")
        return default


def _parse_queue_size(value: str) -> int:
    size = int(value)
    if size < 0:
        raise ValueError("must be >= 0")
    return size


def _parse_log_level(value: str) -> str:
    level = value.strip().lower()
    if level not in LOG_LEVELS:
        raise ValueError(f"expected one of: {', '.join(LOG_LEVELS)}")
    return level


class ClientConfig(BaseModel):
    """Client configuration."""
    model_config = {"frozen": True}

    charset: str = DEFAULT_CHARSET
    max_queue_size: int = Field(default=DEFAULT_MAX_QUEUE_SIZE, ge=0)  # 0 = unbounded
    send_content_type: bool = True
    follow_redirects: bool = True
    worker_name: str = DEFAULT_WORKER_NAME
    log_level: Optional[str] = None

    @field_validator("charset")
    @classmethod
    def validate_charset(cls, v: str) -> str:
        return normalize_charset(v)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _parse_log_level(v)

    @classmethod
    def from_env(
        cls,
        charset: Optional[str] = None,
        max_queue_size: Optional[int] = None,
        send_content_type: Optional[bool] = None,
        follow_redirects: Optional[bool] = None,
        worker_name: Optional[str] = None,
        log_level: Optional[str] = None,
    ) -> "ClientConfig":
        """
        Build a config from arguments, falling back to REST_API_CLIENT_* env vars.

        Invalid arguments raise ValidationError. Invalid environment values are
        logged and replaced by the default.
        """
        return cls(
            charset=_resolve_checked(
                charset, f"{ENV_PREFIX}CHARSET", DEFAULT_CHARSET, normalize_charset
            ),
            max_queue_size=_resolve_checked(
                max_queue_size,
                f"{ENV_PREFIX}MAX_QUEUE_SIZE",
                DEFAULT_MAX_QUEUE_SIZE,
                _parse_queue_size,
            ),
            send_content_type=_resolve_bool(
                send_content_type, f"{ENV_PREFIX}SEND_CONTENT_TYPE", True
            ),
            follow_redirects=_resolve_bool(
                follow_redirects, f"{ENV_PREFIX}FOLLOW_REDIRECTS", True
            ),
            worker_name=_resolve(worker_name, f"{ENV_PREFIX}WORKER_NAME", DEFAULT_WORKER_NAME),
            log_level=_resolve_checked(log_level, LOG_LEVEL_ENV, None, _parse_log_level),
        )
