# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""wiki-diagrams: GraphViz, Mscgen and PlantUML diagrams for wiki pages.

Diagram sources are rendered by an external service; this package turns the
result into embeddable HTML:

- ImageMap: rewrites the service's cmapx image map (unique name, link tokens
  like ``[[Page]]`` / ``[https://...]`` resolved to URLs)
- render_tag: full source → HTML path with inline error reporting
"""

from __future__ import annotations

from .errors import DiagramsError, MalformedMarkupError, UnresolvableTitleError
from .image_map import ImageMap
from .render import render_tag
from .titles import Title, WikiTitleResolver

__all__ = [
    "DiagramsError",
    "ImageMap",
    "MalformedMarkupError",
    "Title",
    "UnresolvableTitleError",
    "WikiTitleResolver",
    "render_tag",
]
