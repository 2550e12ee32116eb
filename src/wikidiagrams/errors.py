# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""wiki-diagrams exception hierarchy.

All errors inherit from DiagramsError, allowing callers to catch the base
class for any rendering failure or specific subclasses for targeted handling.
"""

from __future__ import annotations


class DiagramsError(Exception):
    """Base exception for all wiki-diagrams errors."""


class MalformedMarkupError(DiagramsError):
    """Image map markup is not well-formed XML."""


class UnresolvableTitleError(DiagramsError):
    """Internal link target does not name a valid wiki page."""

    def __init__(self, target: str) -> None:
        super().__init__(f"cannot resolve page title: {target!r}")
        self.target = target


class DispatchError(DiagramsError):
    """Rendering service request failed (transport, decoding, or service-side)."""


class NoResponseError(DispatchError):
    """Rendering service unreachable, timed out, or answered with a non-2xx status."""


class InvalidResponseError(DispatchError):
    """Rendering service answered with a body that is not the expected JSON."""


class ServiceError(DispatchError):
    """Rendering service reported an error in its JSON response."""

    def __init__(self, code: str, message: str | None = None) -> None:
        super().__init__(f"{code}: {message}" if message else code)
        self.code = code
        self.message = message
