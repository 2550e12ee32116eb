# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Diagram tag rendering: source text in, embeddable HTML out.

Tag table:

======== ========= =========
tag      generator image map
======== ========= =========
graphviz graphviz  cmapx
mscgen   mscgen    ismap
uml      plantuml  (none)
======== ========= =========

Every failure is reported as an inline ``<span class="ext-diagrams error">``
so that a broken diagram never breaks the surrounding page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import structlog

from .errors import DispatchError, InvalidResponseError, MalformedMarkupError, ServiceError
from .html_builder import element, escape_text, format_error, raw_element
from .image_map import ImageMap
from .service import DiagramsClient, RenderResult
from .titles import TitleResolver, WikiTitleResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DiagramTag:
    generator: str
    map_type: str | None = None


TAGS: dict[str, DiagramTag] = {
    "graphviz": DiagramTag("graphviz", "cmapx"),
    "mscgen": DiagramTag("mscgen", "ismap"),
    "uml": DiagramTag("plantuml"),
}

MSG_NO_RESPONSE = "No response from the diagrams service."
MSG_INVALID_RESPONSE = "The diagrams service returned a response that could not be read."
MSG_INVALID_MAP = "The diagrams service returned an invalid image map."


def error_message(exc: DispatchError | MalformedMarkupError) -> str:
    """HTML-safe message for a render failure."""
    if isinstance(exc, ServiceError):
        msg = escape_text(f"The diagrams service returned an error: {exc.code}.")
        if exc.message:
            msg += element("br") + escape_text(exc.message)
        return msg
    if isinstance(exc, MalformedMarkupError):
        return escape_text(MSG_INVALID_MAP)
    if isinstance(exc, InvalidResponseError):
        return escape_text(MSG_INVALID_RESPONSE)
    return escape_text(MSG_NO_RESPONSE)


def build_html(result: RenderResult, resolver: TitleResolver) -> str:
    """Assemble ``<img>`` plus its image map (if any) for a successful render.

    Raises:
        MalformedMarkupError: If the cmapx document is not well-formed.
    """
    img_attrs: dict[str, str | bool] = {"src": result.png_url}
    if result.cmapx is not None:
        image_map = ImageMap(result.cmapx, resolver)
        if image_map.has_areas():
            img_attrs["usemap"] = "#" + image_map.get_name()
            out = element("img", img_attrs) + image_map.get_map()
        else:
            out = element("img", img_attrs)
    elif result.ismap_url is not None:
        img_attrs["ismap"] = True
        out = raw_element("a", {"href": result.ismap_url}, element("img", img_attrs))
    else:
        out = element("img", img_attrs)
    return raw_element("div", {"class": "ext-diagrams"}, out)


def render_tag(
    tag: str,
    source: str,
    *,
    client: DiagramsClient | None = None,
    resolver: TitleResolver | None = None,
) -> str:
    """Render the body of a ``<graphviz>``, ``<mscgen>`` or ``<uml>`` tag.

    Blank sources render to the empty string.

    Raises:
        ValueError: If *tag* is not one of :data:`TAGS`.
    """
    try:
        diagram = TAGS[tag]
    except KeyError:
        raise ValueError(f"unknown diagram tag: {tag!r}") from None

    source = source.strip()
    if not source:
        return ""

    client = client if client is not None else DiagramsClient()
    if resolver is None:
        resolver = WikiTitleResolver(article_path=client.config.article_path)

    with structlog.contextvars.bound_contextvars(tag=tag, generator=diagram.generator):
        try:
            result = client.render(diagram.generator, source, diagram.map_type)
            return build_html(result, resolver)
        except (DispatchError, MalformedMarkupError) as e:
            logger.warning("Diagram render failed: %s", e)
            return format_error(error_message(e))
