# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""wiki-diagrams CLI: render diagram sources and rewrite image maps.

Usage:
    python -m wikidiagrams.cli render --tag graphviz [FILE]
    python -m wikidiagrams.cli rewrite-map [--article-path PATH] [--json] [FILE]

FILE defaults to stdin. Settings come from DIAGRAMS_* environment variables.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from . import logging_config
from .config import DiagramsConfig
from .errors import DiagramsError
from .image_map import ImageMap
from .render import TAGS, render_tag
from .service import DiagramsClient
from .titles import WikiTitleResolver


def _read_input(path_str: str | None) -> str:
    if not path_str or path_str == "-":
        return sys.stdin.read()
    return Path(path_str).read_text(encoding="utf-8")


def cmd_render(args: argparse.Namespace, config: DiagramsConfig) -> int:
    """Render a diagram source through the service and print the HTML."""
    html = render_tag(args.tag, _read_input(args.file), client=DiagramsClient(config))
    print(html)
    return 0


def cmd_rewrite_map(args: argparse.Namespace, config: DiagramsConfig) -> int:
    """Rewrite a cmapx document offline and print the result."""
    resolver = WikiTitleResolver(article_path=args.article_path or config.article_path)
    image_map = ImageMap(_read_input(args.file), resolver)
    if args.json:
        payload = {"name": image_map.get_name(), "has_areas": image_map.has_areas(), "map": image_map.get_map()}
        print(json.dumps(payload, ensure_ascii=False))
    else:
        print(image_map.get_name())
        print(image_map.get_map())
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="wiki-diagrams CLI",
        prog="python -m wikidiagrams.cli",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_render = subparsers.add_parser(
        "render",
        help="Render a diagram source to HTML",
        epilog="Example: echo 'digraph { a -> b }' | python -m wikidiagrams.cli render --tag graphviz",
    )
    p_render.add_argument("--tag", required=True, choices=sorted(TAGS), help="Diagram tag name")
    p_render.add_argument("file", nargs="?", help="Source file (default: stdin)")

    p_map = subparsers.add_parser("rewrite-map", help="Rewrite a cmapx image map")
    p_map.add_argument("--article-path", type=str, help="Page URL pattern with $1 (default: DIAGRAMS_ARTICLE_PATH)")
    p_map.add_argument("--json", action="store_true", help="Print name, has_areas and map as JSON")
    p_map.add_argument("file", nargs="?", help="cmapx file (default: stdin)")

    commands = {"render": cmd_render, "rewrite-map": cmd_rewrite_map}
    args = parser.parse_args(argv)

    try:
        config = DiagramsConfig.from_env()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)

    logging_config.configure(
        json_output=args.json_logs or config.log_json,
        level="DEBUG" if args.verbose else config.log_level,
    )

    try:
        sys.exit(commands[args.command](args, config))
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)
    except (DiagramsError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
