# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
"""
Command-line editor for a nodes.json graph file.

    nodegraph show data/nodes.json
    nodegraph add data/nodes.json
    nodegraph connect data/nodes.json new-node center
    nodegraph set data/nodes.json new-node x 30
    nodegraph publish data/nodes.json --env-file .env
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import load_settings
from .errors import ConfigurationError
from .kinds import CONTENT_FIELDS, SCALAR_FIELDS
from .publish import REASON_NOT_CONFIGURED, PublishPipeline
from .store import GraphStore

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_NOT_CONFIGURED = 2

SETTABLE_FIELDS = SCALAR_FIELDS + tuple(f for f in CONTENT_FIELDS if f != "links")


def _load(path: str) -> GraphStore:
    store = GraphStore()
    store.load_file(path)
    return store


def _save(store: GraphStore, path: str) -> None:
    Path(path).write_text(store.dumps_snapshot(), encoding="utf-8")


def _require_node(store: GraphStore, node_id: str) -> bool:
    if node_id in store:
        return True
    print(f"❌ Unknown node: {node_id}", file=sys.stderr)
    return False


def cmd_show(args) -> int:
    store = _load(args.file)
    print(f"{len(store)} nodes")
    for node in store:
        print(f"  {node.id:<24} {node.hemisphere:<8} ({node.x}, {node.y})  {node.label}")
    edges = store.edges()
    print(f"{len(edges)} edges")
    for a, b in edges:
        print(f"  {a} <-> {b}")
    for problem in store.integrity_problems():
        print(f"⚠️  {problem}")
    return EXIT_OK


def cmd_add(args) -> int:
    store = _load(args.file)
    node_id = store.add_node()
    _save(store, args.file)
    print(node_id)
    return EXIT_OK


def cmd_delete(args) -> int:
    store = _load(args.file)
    if not _require_node(store, args.id):
        return EXIT_FAILED
    store.delete_node(args.id)
    _save(store, args.file)
    print(f"✅ Deleted {args.id}")
    return EXIT_OK


def cmd_set(args) -> int:
    store = _load(args.file)
    if not _require_node(store, args.id):
        return EXIT_FAILED
    if args.field in SCALAR_FIELDS:
        store.set_field(args.id, args.field, args.value)
    elif args.field == "image":
        # empty string clears the image
        store.set_content_field(args.id, "image", args.value or None)
    else:
        store.set_content_field(args.id, args.field, args.value)
    _save(store, args.file)
    return EXIT_OK


def _toggle(args, connected: bool) -> int:
    store = _load(args.file)
    if not (_require_node(store, args.a) and _require_node(store, args.b)):
        return EXIT_FAILED
    store.toggle_connection(args.a, args.b, connected)
    _save(store, args.file)
    return EXIT_OK


def cmd_connect(args) -> int:
    return _toggle(args, True)


def cmd_disconnect(args) -> int:
    return _toggle(args, False)


def cmd_export(args) -> int:
    store = _load(args.file)
    text = store.dumps_snapshot()
    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
        print(f"✅ Wrote {args.output}")
    else:
        print(text)
    return EXIT_OK


def cmd_publish(args) -> int:
    try:
        settings = load_settings(args.env_file)
    except ConfigurationError as e:
        print(f"❌ {e}", file=sys.stderr)
        return EXIT_NOT_CONFIGURED

    store = _load(args.file)
    result = PublishPipeline(settings).publish(store.export_snapshot())
    if result.ok:
        print(f"✅ Published to {settings.repo}/{settings.file_path}")
        return EXIT_OK
    if result.reason == REASON_NOT_CONFIGURED:
        print(f"❌ {result.message}", file=sys.stderr)
        return EXIT_NOT_CONFIGURED
    print(f"❌ Publish failed: {result.message}", file=sys.stderr)
    return EXIT_FAILED


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nodegraph", description="Edit and publish a node graph file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("show", help="List nodes and edges")
    p.add_argument("file")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("add", help="Add a node with default values")
    p.add_argument("file")
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("delete", help="Delete a node and its connections")
    p.add_argument("file")
    p.add_argument("id")
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("set", help="Set a node field")
    p.add_argument("file")
    p.add_argument("id")
    p.add_argument("field", choices=SETTABLE_FIELDS)
    p.add_argument("value")
    p.set_defaults(func=cmd_set)

    for name, func, help_text in (
        ("connect", cmd_connect, "Connect two nodes"),
        ("disconnect", cmd_disconnect, "Disconnect two nodes"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("file")
        p.add_argument("a")
        p.add_argument("b")
        p.set_defaults(func=func)

    p = sub.add_parser("export", help="Write the canonical snapshot")
    p.add_argument("file")
    p.add_argument("-o", "--output", help="Output path (default: stdout)")
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("publish", help="Publish the graph to GitHub")
    p.add_argument("file")
    p.add_argument("--env-file", help="Path to a .env file with NODEGRAPH_* settings")
    p.set_defaults(func=cmd_publish)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
