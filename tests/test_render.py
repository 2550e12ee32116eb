# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for wikidiagrams.render — tag table, HTML assembly, inline errors."""

from __future__ import annotations

import pytest

from wikidiagrams.config import DiagramsConfig
from wikidiagrams.errors import InvalidResponseError, MalformedMarkupError, NoResponseError, ServiceError
from wikidiagrams.render import TAGS, build_html, error_message, render_tag
from wikidiagrams.service import RenderResult

PNG = "https://render.example/a.png"
MAP = '<map id="G"><area shape="rect" coords="1,2,3,4" href="[[Main Page]]"/></map>'


class TestTagTable:
    @pytest.mark.parametrize(
        ("tag", "generator", "map_type"),
        [("graphviz", "graphviz", "cmapx"), ("mscgen", "mscgen", "ismap"), ("uml", "plantuml", None)],
    )
    def test_dispatch(self, fake_client, tag, generator, map_type):
        fake_client.render.return_value = RenderResult(png_url=PNG)
        render_tag(tag, "source", client=fake_client)
        fake_client.render.assert_called_once_with(generator, "source", map_type)

    def test_known_tags(self):
        assert set(TAGS) == {"graphviz", "mscgen", "uml"}

    def test_unknown_tag(self, fake_client):
        with pytest.raises(ValueError, match="unknown diagram tag"):
            render_tag("mermaid", "graph TD; A-->B", client=fake_client)


class TestSource:
    @pytest.mark.parametrize("source", ["", "   ", "\n\t\n"])
    def test_blank_renders_nothing(self, fake_client, source):
        assert render_tag("graphviz", source, client=fake_client) == ""
        fake_client.render.assert_not_called()

    def test_source_trimmed(self, fake_client):
        fake_client.render.return_value = RenderResult(png_url=PNG)
        render_tag("graphviz", "\n  digraph { a -> b }  \n", client=fake_client)
        assert fake_client.render.call_args.args[1] == "digraph { a -> b }"


class TestHtml:
    def test_cmapx_with_areas(self, fake_client):
        fake_client.render.return_value = RenderResult(png_url=PNG, cmapx=MAP)
        assert render_tag("graphviz", "digraph {}", client=fake_client) == (
            '<div class="ext-diagrams">'
            '<img src="https://render.example/a.png" usemap="#ext-diagrams-G">'
            '<map id="ext-diagrams-G" name="ext-diagrams-G">'
            '<area shape="rect" coords="1,2,3,4" href="/wiki/Main_Page"/>'
            "</map></div>"
        )

    def test_cmapx_without_areas(self, fake_client):
        fake_client.render.return_value = RenderResult(png_url=PNG, cmapx='<map id="G" name="G">\n</map>')
        assert render_tag("graphviz", "digraph {}", client=fake_client) == (
            '<div class="ext-diagrams"><img src="https://render.example/a.png"></div>'
        )

    def test_ismap(self, fake_client):
        fake_client.render.return_value = RenderResult(png_url=PNG, ismap_url="https://render.example/a.ismap")
        assert render_tag("mscgen", "msc { a, b; }", client=fake_client) == (
            '<div class="ext-diagrams"><a href="https://render.example/a.ismap">'
            '<img src="https://render.example/a.png" ismap="ismap"></a></div>'
        )

    def test_plain_image(self, fake_client):
        fake_client.render.return_value = RenderResult(png_url=PNG)
        assert render_tag("uml", "A -> B", client=fake_client) == (
            '<div class="ext-diagrams"><img src="https://render.example/a.png"></div>'
        )

    def test_image_url_escaped(self, resolver):
        html = build_html(RenderResult(png_url='https://r.example/a.png?x=1&y="2"'), resolver)
        assert 'src="https://r.example/a.png?x=1&amp;y=&quot;2&quot;"' in html

    def test_article_path_taken_from_client_config(self, fake_client):
        fake_client.config = DiagramsConfig(article_path="/index.php?title=$1")
        fake_client.render.return_value = RenderResult(png_url=PNG, cmapx=MAP)
        assert 'href="/index.php?title=Main_Page"' in render_tag("graphviz", "digraph {}", client=fake_client)

    def test_explicit_resolver_wins(self, fake_client):
        from wikidiagrams.titles import WikiTitleResolver

        fake_client.render.return_value = RenderResult(png_url=PNG, cmapx=MAP)
        resolver = WikiTitleResolver(article_path="/w/$1")
        html = render_tag("graphviz", "digraph {}", client=fake_client, resolver=resolver)
        assert 'href="/w/Main_Page"' in html


class TestErrors:
    def test_no_response(self, fake_client):
        fake_client.render.side_effect = NoResponseError("down")
        assert render_tag("graphviz", "digraph {}", client=fake_client) == (
            '<span class="ext-diagrams error">No response from the diagrams service.</span>'
        )

    def test_service_error_with_message_escaped(self, fake_client):
        fake_client.render.side_effect = ServiceError("syntax", "line 1 near <b>")
        assert render_tag("graphviz", "digraph {", client=fake_client) == (
            '<span class="ext-diagrams error">The diagrams service returned an error: syntax.'
            "<br>line 1 near &lt;b&gt;</span>"
        )

    def test_service_error_without_message(self, fake_client):
        fake_client.render.side_effect = ServiceError("generator")
        html = render_tag("graphviz", "digraph {", client=fake_client)
        assert "<br>" not in html
        assert "error: generator." in html

    def test_invalid_response(self, fake_client):
        fake_client.render.side_effect = InvalidResponseError("bad json")
        assert "could not be read" in render_tag("uml", "A -> B", client=fake_client)

    def test_malformed_map(self, fake_client):
        fake_client.render.return_value = RenderResult(png_url=PNG, cmapx="<map><area></map")
        html = render_tag("graphviz", "digraph {}", client=fake_client)
        assert html == '<span class="ext-diagrams error">The diagrams service returned an invalid image map.</span>'
        assert "<img" not in html

    def test_build_html_propagates_malformed(self, resolver):
        with pytest.raises(MalformedMarkupError):
            build_html(RenderResult(png_url=PNG, cmapx="<map"), resolver)

    def test_error_message_generic_dispatch(self):
        assert error_message(NoResponseError("x")) == "No response from the diagrams service."
