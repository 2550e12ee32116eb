# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Wiki page-title normalization and canonical link URLs.

Internal links inside image maps name pages the way editors type them
(``Main page``, ``:help:Contents#Editing``). A Title is the normalized form:
spaces become underscores, the first letter is capitalized, an optional
fragment is split off. Names a wiki would reject resolve to ``None``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote

from .config import DEFAULT_ARTICLE_PATH

MAX_TITLE_BYTES = 255

# Characters a page name may never contain, plus C0/DEL controls
_ILLEGAL_CHARS_RE = re.compile(r"[<>\[\]{}|\x00-\x1f\x7f]")
_PERCENT_ESCAPE_RE = re.compile(r"%[0-9A-Fa-f]{2}")
_UNDERSCORE_RUN_RE = re.compile(r"_+")
_RELATIVE_RE = re.compile(r"(?:^\.\.?(?:/|$))|(?:/\.\.?(?:/|$))")

# Built-in namespace names, keyed by lowercase form
NAMESPACES: dict[str, str] = {
    name.lower(): name
    for name in (
        "Media",
        "Special",
        "Talk",
        "User",
        "User_talk",
        "Project",
        "Project_talk",
        "File",
        "File_talk",
        "MediaWiki",
        "MediaWiki_talk",
        "Template",
        "Template_talk",
        "Help",
        "Help_talk",
        "Category",
        "Category_talk",
    )
}

# wfUrlencode-compatible: these stay literal in article URLs
_URL_SAFE = ";:@$!*(),/~"


@dataclass(frozen=True, slots=True)
class Title:
    """A normalized page reference."""

    db_key: str  # underscores, first letter capitalized; empty for same-page fragments
    fragment: str = ""

    @property
    def text(self) -> str:
        """Human-readable form with spaces instead of underscores."""
        return self.db_key.replace("_", " ")

    def link_url(self, article_path: str = DEFAULT_ARTICLE_PATH) -> str:
        """Relative URL of the page, e.g. ``/wiki/Main_Page#History``."""
        anchor = "#" + quote(self.fragment.replace(" ", "_"), safe=_URL_SAFE + ".") if self.fragment else ""
        if not self.db_key:
            return anchor
        return article_path.replace("$1", quote(self.db_key, safe=_URL_SAFE)) + anchor


class TitleResolver(Protocol):
    def resolve(self, text: str) -> Title | None: ...

    def link_url(self, title: Title) -> str: ...


class WikiTitleResolver:
    """Title rules of a stock wiki installation.

    ``capital_links`` mirrors the wiki setting of the same name: when on,
    ``main Page`` and ``Main Page`` are the same page.
    """

    def __init__(self, *, article_path: str = DEFAULT_ARTICLE_PATH, capital_links: bool = True) -> None:
        if "$1" not in article_path:
            raise ValueError(f"article path must contain '$1': {article_path!r}")
        self.article_path = article_path
        self.capital_links = capital_links

    def resolve(self, text: str) -> Title | None:
        """Normalize *text* into a Title, or ``None`` if it is not a valid page name."""
        text = text.strip()
        if text.startswith(":"):
            text = text[1:]

        page, sep, fragment = text.partition("#")
        fragment = fragment.strip() if sep else ""

        key = _UNDERSCORE_RUN_RE.sub("_", page.replace(" ", "_")).strip("_")
        if not key:
            # [[#Section]] links to a section of the current page
            return Title(db_key="", fragment=fragment) if fragment else None
        if _ILLEGAL_CHARS_RE.search(key) or _PERCENT_ESCAPE_RE.search(key):
            return None
        if len(key.encode("utf-8")) > MAX_TITLE_BYTES:
            return None
        if _RELATIVE_RE.search(key) or "~~~" in key:
            return None

        prefix, colon, rest = key.partition(":")
        namespace = NAMESPACES.get(prefix.strip("_").lower()) if colon else None
        if namespace is not None:
            rest = rest.strip("_")
            if not rest:
                return None
            key = f"{namespace}:{self._capitalize(rest)}"
        else:
            key = self._capitalize(key)
        return Title(db_key=key, fragment=fragment)

    def _capitalize(self, name: str) -> str:
        return name[0].upper() + name[1:] if self.capital_links else name

    def link_url(self, title: Title) -> str:
        return title.link_url(self.article_path)
