# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Link token scanner for ``href`` values in diagram image maps.

Diagram sources write link targets in wiki syntax and the rendering service
copies them verbatim into ``<area href="...">``:

- ``[[Page]]`` / ``[[Page|label]]`` — internal link, resolved to a page URL
- ``[URL]`` / ``[URL|label]`` — external link, brackets stripped

Labels are never used for the href. Bracket counts are matched loosely:
the opener decides the kind and one or two closing brackets are accepted,
so ``[[Page]`` is internal and ``[URL]]`` is external.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from .errors import UnresolvableTitleError
from .titles import TitleResolver

# opener, target (no ] or |), optional |label, one or two closers
_TOKEN_RE = re.compile(r"(\[\[?)([^\]|]+)(?:\|([^\]]*))?\]\]?")

INTERNAL: Literal["internal"] = "internal"
EXTERNAL: Literal["external"] = "external"


@dataclass(frozen=True, slots=True)
class LinkToken:
    kind: Literal["internal", "external"]
    target: str
    label: str | None = None
    start: int = 0
    end: int = 0


def _token_from_match(m: re.Match[str]) -> LinkToken:
    return LinkToken(
        kind=INTERNAL if m.group(1) == "[[" else EXTERNAL,
        target=m.group(2),
        label=m.group(3),
        start=m.start(),
        end=m.end(),
    )


def find_tokens(value: str) -> list[LinkToken]:
    """Every link token in *value*, left to right."""
    return [_token_from_match(m) for m in _TOKEN_RE.finditer(value)]


def parse_link_token(value: str) -> LinkToken | None:
    """Parse *value* as exactly one link token, or ``None`` if it is anything else."""
    m = _TOKEN_RE.fullmatch(value)
    return _token_from_match(m) if m else None


def resolve_token(token: LinkToken, resolver: TitleResolver) -> str:
    """Literal URL for a single token.

    Raises:
        UnresolvableTitleError: If an internal target is not a valid page name.
    """
    if token.kind == EXTERNAL:
        return token.target
    title = resolver.resolve(token.target)
    if title is None:
        raise UnresolvableTitleError(token.target)
    return resolver.link_url(title)


def resolve_links(value: str, resolver: TitleResolver) -> str:
    """Replace every link token in *value* with its URL.

    Text outside tokens is kept, so values without tokens (already resolved
    URLs, fragments) come back unchanged.

    Raises:
        UnresolvableTitleError: On the first internal target that does not resolve.
    """
    return _TOKEN_RE.sub(lambda m: resolve_token(_token_from_match(m), resolver), value)
