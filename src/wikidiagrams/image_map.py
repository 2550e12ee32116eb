# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Client-side image map rewriting (cmapx format).

The rendering service returns ``<map id="..."><area href="[[Page]]" .../></map>``.
Before it can be embedded next to the diagram's ``<img>``:

1. the map gets a page-unique id/name (``ext-diagrams-<id>``) that the image
   references through ``usemap="#..."``;
2. every ``href`` written in link-token syntax is replaced with a real URL.

Parsing and rewriting happen once, on first access to any accessor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property

from lxml import etree

from .dom import elements_by_tag_name, elements_with_attribute, parse_xml, serialize
from .errors import UnresolvableTitleError
from .link_tokens import resolve_links
from .titles import TitleResolver, WikiTitleResolver

logger = logging.getLogger(__name__)

ID_PREFIX = "ext-diagrams-"


@dataclass(frozen=True, slots=True)
class _RewrittenMap:
    root: etree._Element
    name: str
    area_count: int
    markup: str


class ImageMap:
    """One cmapx document, rewritten for embedding in a wiki page."""

    def __init__(self, map_markup: str, resolver: TitleResolver | None = None) -> None:
        self._raw = map_markup
        self._resolver = resolver if resolver is not None else WikiTitleResolver()

    @property
    def raw_markup(self) -> str:
        """The map document exactly as received."""
        return self._raw

    def has_areas(self) -> bool:
        """Whether the map has any ``<area>`` (i.e. whether it is worth emitting)."""
        return self._rewritten.area_count > 0

    def get_name(self) -> str:
        """Map name for the image's ``usemap`` attribute (without the ``#``)."""
        return self._rewritten.name

    def get_map(self) -> str:
        """Rewritten map markup, serialized from the root element."""
        return self._rewritten.markup

    @cached_property
    def _rewritten(self) -> _RewrittenMap:
        root = parse_xml(self._raw)
        name = self._rewrite_identifier(root)
        self._rewrite_links(root)
        area_count = len(elements_by_tag_name(root, "area"))
        logger.debug("Image map %s rewritten: %d areas", name, area_count)
        return _RewrittenMap(root=root, name=name, area_count=area_count, markup=serialize(root))

    @staticmethod
    def _rewrite_identifier(root: etree._Element) -> str:
        identifier = ID_PREFIX + root.get("id", "")
        root.set("id", identifier)
        root.set("name", identifier)
        return identifier

    def _rewrite_links(self, root: etree._Element) -> None:
        for el in elements_with_attribute(root, "href"):
            try:
                el.set("href", resolve_links(el.get("href"), self._resolver))
            except UnresolvableTitleError as e:
                # area stays in the map, just not clickable
                logger.warning("Dropping href of <%s>: %s", etree.QName(el).localname, e)
                del el.attrib["href"]
