"""Configuration for a relay instance."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError

DEFAULT_CACHE_DIR = Path("cache_data")
DEFAULT_MAX_TRACE_BYTES = 40 * 1024

_REQUIRED_ENV = {
    "public_key": ("LANGFUSE_PUBLIC_KEY",),
    "secret_key": ("LANGFUSE_SECRET_KEY",),
    "host": ("LANGFUSE_HOST", "LANGFUSE_BASEURL"),
}


class RelayConfig(BaseModel):
    """Validated settings for the remote account and local cache. Passed via DI."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    public_key: str = Field(min_length=1)
    secret_key: str = Field(min_length=1, repr=False)
    host: str = Field(min_length=1)
    cache_dir: Path = DEFAULT_CACHE_DIR
    page_size: int = Field(default=100, gt=0)
    prompt_label: str = "production"
    max_trace_bytes: int = Field(default=DEFAULT_MAX_TRACE_BYTES, gt=0)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RelayConfig:
        """Build a config from environment variables.

        Raises ``ConfigurationError`` naming every missing required variable,
        so the server fails before it accepts any request.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        missing: list[str] = []
        for field_name, names in _REQUIRED_ENV.items():
            value = next((env[name] for name in names if env.get(name)), None)
            if value is None:
                missing.append(names[0])
            else:
                values[field_name] = value
        if missing:
            raise ConfigurationError(
                "Missing required environment variables: " + ", ".join(missing)
            )

        cache_dir = env.get("PROMPTRELAY_CACHE_DIR")
        if cache_dir:
            values["cache_dir"] = Path(cache_dir)
        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}") from exc
