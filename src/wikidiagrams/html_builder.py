# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Minimal HTML element builders for rendered diagram output."""

from __future__ import annotations

from collections.abc import Mapping

_VOID_ELEMENTS = frozenset({"area", "br", "hr", "img", "input", "link", "meta"})

AttrValue = str | bool | None


def escape_text(value: str) -> str:
    return value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def escape_attr(value: str) -> str:
    """Escape a string for use in a double-quoted attribute."""
    return escape_text(value).replace('"', "&quot;")


def _attrs(attrs: Mapping[str, AttrValue]) -> str:
    parts = []
    for name, value in attrs.items():
        if value is None or value is False:
            continue
        if value is True:
            value = name
        parts.append(f' {name}="{escape_attr(value)}"')
    return "".join(parts)


def element(tag: str, attrs: Mapping[str, AttrValue] | None = None, text: str = "") -> str:
    """Element with escaped *text* content; void elements ignore *text*."""
    if tag in _VOID_ELEMENTS:
        return f"<{tag}{_attrs(attrs or {})}>"
    return raw_element(tag, attrs, escape_text(text))


def raw_element(tag: str, attrs: Mapping[str, AttrValue] | None = None, inner_html: str = "") -> str:
    """Element wrapping *inner_html* as-is; the caller vouches it is safe."""
    return f"<{tag}{_attrs(attrs or {})}>{inner_html}</{tag}>"


def format_error(message_html: str) -> str:
    """Inline error box shown in place of a diagram."""
    return raw_element("span", {"class": "ext-diagrams error"}, message_html)
