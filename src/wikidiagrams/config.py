# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Runtime configuration read from ``DIAGRAMS_*`` environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_SERVICE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 10.0
DEFAULT_ARTICLE_PATH = "/wiki/$1"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, slots=True)
class DiagramsConfig:
    """Immutable settings shared by the dispatcher, title resolver and logging."""

    service_url: str = DEFAULT_SERVICE_URL
    timeout: float = DEFAULT_TIMEOUT
    article_path: str = DEFAULT_ARTICLE_PATH
    log_level: str = "INFO"
    log_json: bool = False

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if "$1" not in self.article_path:
            raise ValueError(f"article path must contain '$1': {self.article_path!r}")

    @property
    def render_url(self) -> str:
        """Endpoint the render request is POSTed to."""
        return self.service_url.strip("/") + "/render"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> DiagramsConfig:
        """Build a config from *environ* (``os.environ`` by default).

        Raises:
            ValueError: If a value is present but invalid.
        """
        env = os.environ if environ is None else environ
        kwargs: dict = {}

        env_url = env.get("DIAGRAMS_SERVICE_URL", "").strip()
        if env_url:
            kwargs["service_url"] = env_url

        env_timeout = env.get("DIAGRAMS_TIMEOUT", "").strip()
        if env_timeout:
            try:
                kwargs["timeout"] = float(env_timeout)
            except ValueError:
                raise ValueError(f"DIAGRAMS_TIMEOUT must be a number, got {env_timeout!r}") from None

        env_path = env.get("DIAGRAMS_ARTICLE_PATH", "").strip()
        if env_path:
            kwargs["article_path"] = env_path

        env_level = env.get("DIAGRAMS_LOG_LEVEL", "").strip()
        if env_level:
            kwargs["log_level"] = env_level.upper()

        env_json = env.get("DIAGRAMS_LOG_JSON", "").strip().lower()
        if env_json:
            kwargs["log_json"] = env_json in _TRUTHY

        return cls(**kwargs)
