# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .kinds import CONTENT_FIELDS, NEW_NODE_ID, NEW_NODE_LABEL, SCALAR_FIELDS
from .models import Node, NodeContent, parse_coord

logger = logging.getLogger(__name__)

Document = Union[str, bytes, Dict[str, Any]]

# Shown by the viewer when nodes.json cannot be loaded
VIEWER_FALLBACK: Dict[str, Any] = {
    "nodes": [
        {
            "id": "center",
            "label": "GUS",
            "hemisphere": "center",
            "x": 50,
            "y": 50,
            "connections": [],
            "content": {
                "title": "Gus Halwani",
                "body": "At the intersection of neuroscience, technology, and the things that demand your full attention.",
                "image": None,
            },
        }
    ]
}


def _parse_nodes(document: Document) -> List[Node]:
    if isinstance(document, (str, bytes)):
        document = json.loads(document)
    if not isinstance(document, dict):
        raise ValueError("graph document must be a JSON object")
    raw_nodes = document.get("nodes")
    if not isinstance(raw_nodes, list):
        raise ValueError("graph document must contain a 'nodes' list")

    nodes = []
    for i, raw in enumerate(raw_nodes):
        if not isinstance(raw, dict):
            raise ValueError(f"node at index {i} is not an object")
        nodes.append(Node.from_dict(raw))
    return nodes


class GraphStore:
    """
    In-memory owner of the node graph.

    Keeps the ordered node list plus an id -> Node index. Connections are kept
    symmetric: every mutation touches both endpoints or neither.
    """

    def __init__(self, nodes: Optional[List[Node]] = None):
        self._nodes: List[Node] = list(nodes or [])
        self._index: Dict[str, Node] = {}
        self._rebuild_index()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, document: Document, fallback: Optional[Dict[str, Any]] = None) -> None:
        """
        Replace the graph with `document` ({"nodes": [...]}).

        Malformed input never raises: it is logged and the store falls back to
        `fallback` (an empty graph by default).
        """
        try:
            nodes = _parse_nodes(document)
        except (ValueError, TypeError) as e:
            # json.JSONDecodeError is a ValueError
            logger.error("Failed to load nodes: %s", e)
            nodes = _parse_nodes(fallback) if fallback is not None else []

        self._nodes = nodes
        self._rebuild_index()

        if len(self._index) != len(self._nodes):
            logger.warning("Graph contains duplicate node ids; the last occurrence wins")
            self._nodes = [node for node in self._nodes if self._index[node.id] is node]
        for problem in self.integrity_problems():
            logger.warning("Graph integrity: %s", problem)

    def load_file(self, path: Union[str, Path], fallback: Optional[Dict[str, Any]] = None) -> None:
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            logger.error("Failed to read %s: %s", path, e)
            self._nodes = _parse_nodes(fallback) if fallback is not None else []
            self._rebuild_index()
            return
        # undecodable bytes are reported by load() like any other malformed input
        self.load(data, fallback=fallback)

    def _rebuild_index(self) -> None:
        self._index = {node.id: node for node in self._nodes}

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def __iter__(self) -> Iterator[Node]:
        return iter(list(self._nodes))

    def ids(self) -> List[str]:
        return [node.id for node in self._nodes]

    def get(self, node_id: str) -> Optional[Node]:
        return self._index.get(node_id)

    def connected_nodes(self, node_id: str) -> List[Node]:
        node = self._index.get(node_id)
        if node is None:
            return []
        return [self._index[c] for c in node.connections if c in self._index]

    def edges(self) -> List[Tuple[str, str]]:
        """Undirected edges, each pair once, in first-seen order."""
        seen = set()
        out = []
        for node in self._nodes:
            for conn_id in node.connections:
                if conn_id not in self._index:
                    continue
                key = tuple(sorted((node.id, conn_id)))
                if key in seen:
                    continue
                seen.add(key)
                out.append((node.id, conn_id))
        return out

    def integrity_problems(self) -> List[str]:
        problems = []
        for node in self._nodes:
            for conn_id in node.connections:
                other = self._index.get(conn_id)
                if other is None:
                    problems.append(f"{node.id!r} connects to unknown node {conn_id!r}")
                elif node.id not in other.connections:
                    problems.append(f"{node.id!r} -> {conn_id!r} has no reverse connection")
        return problems

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_node(self) -> str:
        node_id = NEW_NODE_ID
        counter = 1
        while node_id in self._index:
            node_id = f"{NEW_NODE_ID}-{counter}"
            counter += 1

        node = Node(
            id=node_id,
            content=NodeContent(title=NEW_NODE_LABEL, body="", image=None),
        )
        self._nodes.append(node)
        self._index[node_id] = node
        logger.debug("Added node %s", node_id)
        return node_id

    def delete_node(self, node_id: str) -> None:
        if node_id not in self._index:
            return
        for node in self._nodes:
            node.connections = [c for c in node.connections if c != node_id]
        self._nodes = [node for node in self._nodes if node.id != node_id]
        self._rebuild_index()
        logger.debug("Deleted node %s", node_id)

    def set_field(self, node_id: str, field: str, value: Any) -> None:
        if field not in SCALAR_FIELDS:
            raise ValueError(f"'{field}' is not an editable node field; expected one of {SCALAR_FIELDS}")
        node = self._index.get(node_id)
        if node is None:
            return
        if field in ("x", "y"):
            value = parse_coord(value)
        setattr(node, field, value)

    def set_content_field(self, node_id: str, field: str, value: Any) -> None:
        if field not in CONTENT_FIELDS:
            raise ValueError(f"'{field}' is not a content field; expected one of {CONTENT_FIELDS}")
        node = self._index.get(node_id)
        if node is None:
            return
        if field == "links" and value is not None:
            if not isinstance(value, list) or not all(isinstance(link, Mapping) for link in value):
                raise ValueError("links must be a list of {label, url} mappings")
            value = [dict(link) for link in value]
        if node.content is None:
            node.content = NodeContent(title="", body="", image=None)
        setattr(node.content, field, value)

    def toggle_connection(self, a_id: str, b_id: str, connected: bool) -> None:
        a = self._index.get(a_id)
        b = self._index.get(b_id)
        if a is None or b is None or a is b:
            return

        if connected:
            if b_id not in a.connections:
                a.connections.append(b_id)
            if a_id not in b.connections:
                b.connections.append(a_id)
        else:
            a.connections = [c for c in a.connections if c != b_id]
            b.connections = [c for c in b.connections if c != a_id]

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_snapshot(self) -> Dict[str, Any]:
        return {"nodes": [node.to_dict() for node in self._nodes]}

    def dumps_snapshot(self) -> str:
        return dumps_snapshot(self.export_snapshot())


def dumps_snapshot(snapshot: Dict[str, Any]) -> str:
    """Canonical text of a snapshot: 2-space indent, UTF-8 kept, stable keys."""
    return json.dumps(snapshot, indent=2, ensure_ascii=False)
