# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Client for the diagram rendering service.

The service takes ``generator``, ``types[]`` and ``source`` as a form POST to
``<service_url>/render`` and answers with JSON::

    {"diagrams": {"png": {"url": "..."}, "cmapx": {"url": "...", "contents": "<map ...>"}}}
    {"error": "syntax", "message": "line 3: unexpected token"}

Transport errors, undecodable bodies and service-reported errors map onto
the DispatchError hierarchy. There are no retries.
"""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from urllib.parse import urlencode

from pydantic import BaseModel, Field, ValidationError

from .config import DiagramsConfig
from .errors import InvalidResponseError, NoResponseError, ServiceError

try:
    from importlib.metadata import version as _pkg_version

    _VERSION = _pkg_version("wiki-diagrams")
except Exception:
    _VERSION = "unknown"

logger = logging.getLogger(__name__)

USER_AGENT = f"wiki-diagrams/{_VERSION}"
MAP_TYPES = ("cmapx", "ismap")
_ASYNC_GRACE = 5.0


# ---------------------------------------------------------------------------
# Response schema
# ---------------------------------------------------------------------------


class DiagramFile(BaseModel):
    """One rendered output format."""

    url: str | None = Field(None, description="Public URL of the rendered file")
    contents: str | None = Field(None, description="Inline file contents (image maps only)")


class RenderResponse(BaseModel):
    """Decoded body of a ``/render`` response."""

    error: str | None = Field(None, description="Error code, e.g. 'syntax' or 'generator'")
    message: str | None = Field(None, description="Free-text detail accompanying the error code")
    diagrams: dict[str, DiagramFile] = Field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RenderResult:
    """Successful render: the image plus at most one image map."""

    png_url: str
    cmapx: str | None = None
    ismap_url: str | None = None


# ---------------------------------------------------------------------------
# Request / response helpers
# ---------------------------------------------------------------------------


def build_form(generator: str, source: str, map_type: str | None = None) -> bytes:
    """Form body with PHP-style indexed ``types[n]`` keys."""
    types = [t for t in ("png", map_type) if t]
    fields = [("generator", generator)]
    fields.extend((f"types[{i}]", t) for i, t in enumerate(types))
    fields.append(("source", source))
    return urlencode(fields).encode("utf-8")


def parse_response(body: str) -> RenderResult:
    """Turn a response body into a RenderResult.

    Raises:
        InvalidResponseError: Body is not JSON or does not match RenderResponse.
        ServiceError: Body carries an ``error`` field.
    """
    try:
        response = RenderResponse.model_validate(json.loads(body))
    except (json.JSONDecodeError, ValidationError) as e:
        raise InvalidResponseError(f"undecodable render response: {e}") from e

    if response.error is not None:
        raise ServiceError(response.error, response.message)

    png = response.diagrams.get("png")
    if png is None or not png.url:
        raise InvalidResponseError("render response has no PNG URL")

    cmapx = response.diagrams.get("cmapx")
    if cmapx is not None and cmapx.contents is not None:
        return RenderResult(png_url=png.url, cmapx=cmapx.contents)
    ismap = response.diagrams.get("ismap")
    if ismap is not None and ismap.contents is not None:
        return RenderResult(png_url=png.url, ismap_url=ismap.url)
    return RenderResult(png_url=png.url)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class DiagramsClient:
    """Blocking client with an asyncio wrapper for event-loop hosts."""

    def __init__(self, config: DiagramsConfig | None = None) -> None:
        self.config = config if config is not None else DiagramsConfig()

    def render(self, generator: str, source: str, map_type: str | None = None) -> RenderResult:
        """POST *source* to the service and decode the result.

        Raises:
            ValueError: Unknown *map_type*.
            DispatchError: Any transport, decoding or service-side failure.
        """
        if map_type is not None and map_type not in MAP_TYPES:
            raise ValueError(f"unknown image map type: {map_type!r}")
        url = self.config.render_url
        req = urllib.request.Request(
            url,
            data=build_form(generator, source, map_type),
            headers={
                "User-Agent": USER_AGENT,
                "Content-Type": "application/x-www-form-urlencoded",
                "Accept": "application/json",
            },
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self.config.timeout) as resp:  # noqa: S310  # nosec B310
                if not 200 <= resp.status < 300:
                    raise NoResponseError(f"render service answered HTTP {resp.status}")
                body = resp.read().decode("utf-8", errors="replace")
        except urllib.error.HTTPError as e:
            logger.warning("Render request failed: url=%s status=%d", url, e.code)
            raise NoResponseError(f"render service answered HTTP {e.code}") from e
        except (urllib.error.URLError, TimeoutError, OSError) as e:
            logger.warning("Render service unreachable: url=%s error=%s", url, e)
            raise NoResponseError(f"render service unreachable: {e}") from e

        if not body.strip():
            raise NoResponseError("render service returned an empty body")
        result = parse_response(body)
        logger.debug("Rendered %s diagram: png=%s", generator, result.png_url)
        return result

    async def arender(self, generator: str, source: str, map_type: str | None = None) -> RenderResult:
        """Async :meth:`render`, run in a worker thread under an overall timeout."""
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.render, generator, source, map_type),
                timeout=self.config.timeout + _ASYNC_GRACE,
            )
        except TimeoutError as e:
            raise NoResponseError("render service timed out") from e
