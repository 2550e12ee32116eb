# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""lxml parse/serialize adapter for image map documents.

Map markup comes from a remote rendering service and is untrusted, so the
parser never resolves entities, never loads a DTD and never touches the
network. These are constructor options of a dedicated parser instance, not
process-wide libxml2 state.
"""

from __future__ import annotations

import re

from lxml import etree

from .errors import MalformedMarkupError

# markup arrives already decoded, so a declared encoding no longer applies
_XML_DECLARATION_RE = re.compile(r"^\ufeff?\s*<\?xml\b[^>]*\?>")


def _safe_parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        load_dtd=False,
        huge_tree=False,
        remove_blank_text=False,
    )


def parse_xml(markup: str) -> etree._Element:
    """Parse *markup* into an element tree and return its root element.

    Raises:
        MalformedMarkupError: If *markup* is empty or not well-formed XML.
    """
    if not markup or not markup.strip():
        raise MalformedMarkupError("empty image map markup")
    try:
        body = _XML_DECLARATION_RE.sub("", markup, count=1)
        return etree.fromstring(body.encode("utf-8"), parser=_safe_parser())
    except etree.XMLSyntaxError as e:
        raise MalformedMarkupError(f"image map is not well-formed XML: {e}") from e


def serialize(node: etree._Element) -> str:
    """Serialize *node* and its subtree without pretty-printing or tail text."""
    return etree.tostring(node, encoding="unicode", pretty_print=False, with_tail=False)


def elements_by_tag_name(root: etree._Element, tag: str) -> list[etree._Element]:
    """All elements named *tag* in any (or no) namespace, root included."""
    return list(root.iter(f"{{*}}{tag}"))


def elements_with_attribute(root: etree._Element, name: str) -> list[etree._Element]:
    """All elements carrying attribute *name*, in document order."""
    return [el for el in root.iter(etree.Element) if el.get(name) is not None]
