# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
"""
nodegraph Publish Walkthrough

This script edits a local nodes.json and publishes it to GitHub.
It demonstrates:
1. Loading the graph (an unreadable file falls back to an empty graph).
2. Adding and connecting a node.
3. Publishing with sha compare-and-swap retries.

Usage:
1. Put your settings in a .env file:
   NODEGRAPH_GITHUB_TOKEN=ghp_...
   NODEGRAPH_GITHUB_REPO=owner/site

2. Run:
   $ python examples/demo_publish.py data/nodes.json
"""
import logging
import sys

from nodegraph import GraphStore, PublishPipeline, ViewBox, load_settings
from nodegraph.publish import REASON_NOT_CONFIGURED


def main():
    logging.basicConfig(level=logging.INFO)
    path = sys.argv[1] if len(sys.argv) > 1 else "data/nodes.json"
    print("--- nodegraph publish demo ---")
    print(f"File: {path}")

    # 1. Load
    store = GraphStore()
    store.load_file(path)
    print(f"✅ Loaded {len(store)} nodes, {len(store.edges())} edges.")

    # 2. Edit
    node_id = store.add_node()
    store.set_field(node_id, "label", "Demo Node")
    store.set_field(node_id, "x", "20")
    if "center" in store:
        store.toggle_connection(node_id, "center", True)
    px, py = ViewBox().to_canvas(store.get(node_id).x, store.get(node_id).y)
    print(f"✅ Added {node_id} at ({px:.0f}px, {py:.0f}px)")

    # 3. Publish
    settings = load_settings()
    result = PublishPipeline(settings).publish(store.export_snapshot())
    if result.ok:
        print(f"🎉 Published after {result.attempts} attempt(s).")
    elif result.reason == REASON_NOT_CONFIGURED:
        print(f"⚠️ {result.message}")
        sys.exit(2)
    else:
        print(f"❌ Publish failed: {result.message} (status={result.status})")
        sys.exit(1)

    print("\n--- Demo Complete ---")


if __name__ == "__main__":
    main()
