"""
Runtime settings.

Values come from the environment, with command-line options taking
precedence when the CLI passes them in.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from rescuedogs_mcp.core.exceptions import ValidationError

DEFAULT_API_URL = "https://api.rescuedogs.me"
DEFAULT_IMAGE_URL = "https://images.rescuedogs.me"


@dataclass(frozen=True)
class Settings:
    """Connection and logging settings for one process."""

    api_url: str = DEFAULT_API_URL
    image_url: str = DEFAULT_IMAGE_URL
    log_level: str = "INFO"
    retry_delay: float = 0.5

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Read settings from ``RESCUEDOGS_*`` environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Raises:
            ValidationError: If ``RESCUEDOGS_RETRY_DELAY`` is not a
                non-negative number.
        """
        env = os.environ if environ is None else environ

        raw_delay = env.get("RESCUEDOGS_RETRY_DELAY", "0.5")
        try:
            retry_delay = float(raw_delay)
        except ValueError:
            raise ValidationError(
                "RESCUEDOGS_RETRY_DELAY", raw_delay, "Expected a number of seconds"
            ) from None
        if retry_delay < 0:
            raise ValidationError("RESCUEDOGS_RETRY_DELAY", raw_delay, "Must not be negative")

        return cls(
            api_url=env.get("RESCUEDOGS_API_URL") or DEFAULT_API_URL,
            image_url=env.get("RESCUEDOGS_IMAGE_URL") or DEFAULT_IMAGE_URL,
            log_level=(env.get("RESCUEDOGS_LOG_LEVEL") or "INFO").upper(),
            retry_delay=retry_delay,
        )
