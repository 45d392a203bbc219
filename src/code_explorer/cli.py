"""
Command line access to stored stacks.

    code-explorer --workspace . list
    code-explorer --workspace . export "Login flow" --reversed

Stacks are read from the JSON store in the configured data directory; the
CLI never modifies them.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from code_explorer import __version__
from code_explorer.config import ExplorerConfig, load_config
from code_explorer.core.errors import CodeExplorerError, NotFoundError
from code_explorer.core.models import Stack
from code_explorer.outline.codec import OutlineOrder, format_outline
from code_explorer.store import JsonFileBackend, MarkerStore, ScopeContext
from code_explorer.utils.dates import get_date_str

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="code-explorer", description="Inspect code marker stacks")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--workspace", type=Path, default=Path.cwd(), help="Workspace folder (default: cwd)")
    parser.add_argument("--data-dir", type=Path, help="Directory holding stored stacks")
    parser.add_argument("--config", type=Path, help="Path to config JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("list", help="List stacks with marker counts")

    export = sub.add_parser("export", help="Print a stack as outline text")
    export.add_argument("stack", nargs="?", help="Stack id or title (default: active stack)")
    export.add_argument("--reversed", action="store_true", help="Export in reversed order")
    return parser


def _find_stack(store: MarkerStore, key: Optional[str]) -> Stack:
    if key is None:
        stack = store.get_active_stack()
        if stack is None:
            raise NotFoundError("stack", "<active>")
        return stack
    for stack in store.list_stacks():
        if stack.id == key or stack.title == key:
            return stack
    raise NotFoundError("stack", key)


def run(args: argparse.Namespace, config: ExplorerConfig) -> int:
    workspace = args.workspace.resolve()
    data_dir = args.data_dir or config.data_dir
    store = MarkerStore(JsonFileBackend(data_dir), ScopeContext([workspace]))
    logger.debug(f"Reading stacks for {workspace} from {data_dir}")

    if args.command == "list":
        for stack in store.list_stacks():
            marker = "*" if stack.is_active else " "
            title = stack.title or config.untitled_stack_title
            print(f"{marker} {stack.id}  {title}  ({len(stack.markers)} markers, {get_date_str(stack.created_at)})")
        return 0

    if args.command == "export":
        stack = _find_stack(store, args.stack)
        order = OutlineOrder.REVERSED if args.reversed else OutlineOrder.FORWARD
        text = format_outline(stack, order, workspace, config.export_indent_width)
        if text:
            print(text)
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
    )
    config = load_config(args.config)
    try:
        return run(args, config)
    except CodeExplorerError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
