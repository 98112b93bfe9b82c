"""Environment variable parsing."""

import logging
import os

logger = logging.getLogger(__name__)


def env_int(name: str, default: int, minimum: int = 0) -> int:
    """Read an integer setting from the environment.

    Unset, non-numeric or below-minimum values fall back to ``default``
    with a warning instead of failing at import.
    """
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default

    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}, using default {default}")
        return default

    if value < minimum:
        logger.warning(f"{name}={value} is below {minimum}, using default {default}")
        return default

    return value
