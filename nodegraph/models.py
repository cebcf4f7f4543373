# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .kinds import (
    COORD_MAX,
    COORD_MIN,
    HEMISPHERE_CENTER,
    NEW_NODE_LABEL,
    NEW_NODE_X,
    NEW_NODE_Y,
)

Number = Union[int, float]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def clamp_coord(value: Number) -> Number:
    return max(COORD_MIN, min(COORD_MAX, value))


def parse_coord(value: Any) -> int:
    """
    Coerce editor input to an integer coordinate.

    Text is read up to the first non-digit ("42.9" -> 42, "12px" -> 12),
    anything unparseable becomes 0, and the result is clamped to [0, 100].
    """
    if isinstance(value, bool) or value is None:
        return COORD_MIN
    if isinstance(value, (int, float)):
        if value != value:  # NaN
            return COORD_MIN
        return int(clamp_coord(value))
    match = _LEADING_INT.match(str(value))
    if not match:
        return COORD_MIN
    return int(clamp_coord(int(match.group(1))))


def _coord_from_json(value: Any, default: int) -> Number:
    if value is None:
        return default
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return clamp_coord(value)
    return parse_coord(value)


@dataclass
class NodeContent:
    title: str = ""
    body: str = ""
    image: Optional[str] = None
    links: Optional[List[Dict[str, str]]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NodeContent":
        links = data.get("links")
        return cls(
            title=data.get("title") or "",
            body=data.get("body") or "",
            image=data.get("image") or None,
            links=[dict(link) for link in links] if isinstance(links, list) else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "title": self.title or "",
            "body": self.body or "",
            "image": self.image or None,
        }
        if self.links:
            out["links"] = [
                {"label": link.get("label", ""), "url": link.get("url", "")}
                for link in self.links
            ]
        return out


@dataclass
class Node:
    id: str
    label: str = NEW_NODE_LABEL
    hemisphere: str = HEMISPHERE_CENTER
    x: Number = NEW_NODE_X
    y: Number = NEW_NODE_Y
    connections: List[str] = field(default_factory=list)
    content: Optional[NodeContent] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Node":
        """Build a node from a loaded JSON object. Raises ValueError without an id."""
        node_id = data.get("id")
        if not isinstance(node_id, str) or not node_id:
            raise ValueError(f"node is missing a string id: {data!r}")

        connections = data.get("connections") or []
        if not isinstance(connections, list):
            raise ValueError(f"connections of node {node_id!r} must be a list")

        content = data.get("content")
        return cls(
            id=node_id,
            label=data.get("label", NEW_NODE_LABEL),
            hemisphere=data.get("hemisphere", HEMISPHERE_CENTER),
            x=_coord_from_json(data.get("x"), NEW_NODE_X),
            y=_coord_from_json(data.get("y"), NEW_NODE_Y),
            connections=[str(c) for c in connections],
            content=NodeContent.from_dict(content) if isinstance(content, dict) else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Canonical, field-complete form used for export and publish."""
        content = self.content if self.content is not None else NodeContent()
        return {
            "id": self.id,
            "label": self.label,
            "hemisphere": self.hemisphere,
            "x": self.x,
            "y": self.y,
            "connections": list(self.connections),
            "content": content.to_dict(),
        }
