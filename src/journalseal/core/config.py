"""Runtime settings read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from journalseal.core.exceptions import ValidationError

DEFAULT_ENDPOINT = "https://wertnerve.pythonanywhere.com/api/journal_app_backend"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT
    log_level: int = logging.INFO


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build :class:`Settings` from ``JOURNALSEAL_*`` environment variables.

    - ``JOURNALSEAL_ENDPOINT``: URL the encrypted container is posted to
    - ``JOURNALSEAL_TIMEOUT``: request timeout in seconds
    - ``JOURNALSEAL_LOG_LEVEL``: logging level name (``DEBUG``, ``INFO``...)

    Unset variables fall back to the defaults; malformed ones raise
    :class:`ValidationError`.
    """
    env = os.environ if environ is None else environ

    endpoint = env.get("JOURNALSEAL_ENDPOINT", "").strip() or DEFAULT_ENDPOINT
    if not endpoint.startswith(("http://", "https://")):
        raise ValidationError(f"JOURNALSEAL_ENDPOINT must be an http(s) URL, got {endpoint!r}")

    raw_timeout = env.get("JOURNALSEAL_TIMEOUT", "").strip()
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValidationError(f"JOURNALSEAL_TIMEOUT must be a number, got {raw_timeout!r}")
        if timeout <= 0:
            raise ValidationError("JOURNALSEAL_TIMEOUT must be positive")
    else:
        timeout = DEFAULT_TIMEOUT

    level_name = env.get("JOURNALSEAL_LOG_LEVEL", "").strip().upper() or "INFO"
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValidationError(f"JOURNALSEAL_LOG_LEVEL is not a logging level: {level_name!r}")

    return Settings(endpoint=endpoint, timeout=timeout, log_level=level)
