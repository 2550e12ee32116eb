# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared test configuration and fixtures."""

try:
    import wikidiagrams  # noqa: F401
except ImportError:
    raise ImportError("wikidiagrams is not installed. Run: pip install -e '.[dev]'") from None

from unittest.mock import MagicMock

import pytest
import structlog

from wikidiagrams.config import DiagramsConfig
from wikidiagrams.service import DiagramsClient
from wikidiagrams.titles import WikiTitleResolver

_GRAPHVIZ_CMAPX = (
    '<map id="G" name="G">\n'
    '<area shape="poly" id="node1" href="[[Main Page]]" title="A" alt="" coords="27,-36 0,-18 27,0 54,-18"/>\n'
    '<area shape="poly" id="node2" href="[https://example.org/x|Example]" title="B" alt="" coords="1,2,3,4"/>\n'
    "</map>\n"
)


@pytest.fixture
def graphviz_cmapx() -> str:
    """cmapx output as produced by GraphViz for a two-node graph."""
    return _GRAPHVIZ_CMAPX


@pytest.fixture
def resolver() -> WikiTitleResolver:
    return WikiTitleResolver()


@pytest.fixture
def fake_client():
    """DiagramsClient stand-in; set ``fake_client.render.return_value`` / ``side_effect``."""
    client = MagicMock(spec=DiagramsClient)
    client.config = DiagramsConfig()
    return client


@pytest.fixture(autouse=True)
def _clear_contextvars():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
