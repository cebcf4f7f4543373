# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
import json
import logging
import random

import pytest

from nodegraph.store import GraphStore, VIEWER_FALLBACK


def assert_symmetric(store):
    for node in store:
        for conn_id in node.connections:
            other = store.get(conn_id)
            assert other is not None, f"{node.id} -> {conn_id} dangles"
            assert node.id in other.connections, f"{node.id} -> {conn_id} is one-sided"


# --- load ---

def test_load_builds_index(store):
    assert len(store) == 3
    assert store.ids() == ["center", "ai-education", "flow-state"]
    assert store.get("flow-state").label == "Flow State"
    assert "center" in store
    assert "nope" not in store


def test_load_accepts_json_text(sample_document):
    store = GraphStore()
    store.load(json.dumps(sample_document))
    assert len(store) == 3


@pytest.mark.parametrize("bad", [
    "{not json",
    b"\xff\xfe",
    "[]",
    '{"nodes": 5}',
    '{"nodes": [1, 2]}',
    '{"nodes": [{"label": "no id"}]}',
    {"items": []},
])
def test_load_malformed_degrades_to_empty(bad, caplog):
    store = GraphStore()
    store.load({"nodes": [{"id": "keep-me"}]})
    with caplog.at_level(logging.ERROR, logger="nodegraph.store"):
        store.load(bad)
    assert len(store) == 0
    assert "Failed to load nodes" in caplog.text


def test_load_malformed_uses_fallback():
    store = GraphStore()
    store.load("garbage", fallback=VIEWER_FALLBACK)
    assert store.ids() == ["center"]
    assert store.get("center").label == "GUS"


def test_load_file_missing(tmp_path):
    store = GraphStore()
    store.load_file(tmp_path / "missing.json")
    assert len(store) == 0


def test_load_file_not_utf8(tmp_path, caplog):
    path = tmp_path / "nodes.json"
    path.write_bytes(b'{"nodes": [{"id": "\xff"}]}')
    store = GraphStore()
    with caplog.at_level(logging.ERROR, logger="nodegraph.store"):
        store.load_file(path, fallback=VIEWER_FALLBACK)
    assert store.ids() == ["center"]
    assert "Failed to load nodes" in caplog.text


def test_load_file_reads_utf8(tmp_path, sample_document):
    sample_document["nodes"][0]["label"] = "Café"
    path = tmp_path / "nodes.json"
    path.write_bytes(json.dumps(sample_document, ensure_ascii=False).encode("utf-8"))
    store = GraphStore()
    store.load_file(path)
    assert store.get("center").label == "Café"


def test_load_duplicate_ids_keep_last(caplog):
    store = GraphStore()
    with caplog.at_level(logging.WARNING, logger="nodegraph.store"):
        store.load({"nodes": [
            {"id": "a", "label": "first"},
            {"id": "a", "label": "second"},
            {"id": "b"},
        ]})
    assert "duplicate node ids" in caplog.text
    nodes = store.export_snapshot()["nodes"]
    assert [n["id"] for n in nodes] == ["a", "b"]
    assert nodes[0]["label"] == "second"
    assert len(store) == 2

    store.set_field("a", "label", "edited")
    assert [n["label"] for n in store.export_snapshot()["nodes"] if n["id"] == "a"] == ["edited"]


def test_load_clamps_coordinates():
    store = GraphStore()
    store.load({"nodes": [{"id": "a", "x": 140, "y": -3}]})
    node = store.get("a")
    assert (node.x, node.y) == (100, 0)


def test_load_warns_on_one_sided_connection(caplog):
    store = GraphStore()
    with caplog.at_level(logging.WARNING, logger="nodegraph.store"):
        store.load({"nodes": [{"id": "a", "connections": ["b"]}, {"id": "b"}]})
    assert "no reverse connection" in caplog.text
    # kept as loaded
    assert store.get("a").connections == ["b"]


# --- add ---

def test_add_node_defaults():
    store = GraphStore()
    node_id = store.add_node()
    assert node_id == "new-node"
    assert store.export_snapshot()["nodes"][0] == {
        "id": "new-node",
        "label": "New Node",
        "hemisphere": "center",
        "x": 50,
        "y": 50,
        "connections": [],
        "content": {"title": "New Node", "body": "", "image": None},
    }


def test_add_node_ids_are_unique():
    store = GraphStore()
    ids = [store.add_node() for _ in range(4)]
    assert ids == ["new-node", "new-node-1", "new-node-2", "new-node-3"]
    assert len(set(ids)) == 4


def test_add_node_reuses_freed_ids():
    store = GraphStore()
    for _ in range(3):
        store.add_node()
    store.delete_node("new-node-1")
    assert store.add_node() == "new-node-1"
    assert store.add_node() == "new-node-3"
    assert len(set(store.ids())) == len(store)


# --- delete ---

def test_delete_cascades_connections(store):
    store.delete_node("center")
    assert "center" not in store
    for node in store:
        assert "center" not in node.connections
    assert_symmetric(store)


def test_delete_unknown_is_noop(store):
    before = store.dumps_snapshot()
    store.delete_node("ghost")
    assert store.dumps_snapshot() == before


def test_delete_then_export_scenario():
    store = GraphStore()
    store.load({"nodes": [
        {"id": "a", "label": "A", "hemisphere": "left", "x": 0, "y": 0, "connections": ["b"],
         "content": {"title": "A", "body": "", "image": None}},
        {"id": "b", "label": "B", "hemisphere": "right", "x": 100, "y": 100, "connections": ["a"],
         "content": {"title": "B", "body": "", "image": None}},
    ]})
    store.delete_node("a")
    snapshot = store.export_snapshot()
    assert [n["id"] for n in snapshot["nodes"]] == ["b"]
    assert snapshot["nodes"][0]["connections"] == []


# --- set_field ---

@pytest.mark.parametrize("raw, expected", [
    ("42", 42),
    ("42.9", 42),
    ("12px", 12),
    (" 7", 7),
    ("", 0),
    ("abc", 0),
    (None, 0),
    ("-5", 0),
    ("250", 100),
    (33.7, 33),
])
def test_set_coordinate_coerces_and_clamps(store, raw, expected):
    store.set_field("center", "x", raw)
    assert store.get("center").x == expected


def test_set_label_and_hemisphere(store):
    store.set_field("flow-state", "label", "Deep Work")
    store.set_field("flow-state", "hemisphere", "left")
    node = store.get("flow-state")
    assert (node.label, node.hemisphere) == ("Deep Work", "left")


def test_set_field_unknown_node_is_noop(store):
    store.set_field("ghost", "label", "Boo")
    assert "ghost" not in store


def test_set_field_rejects_non_scalar(store):
    with pytest.raises(ValueError, match="editable node field"):
        store.set_field("center", "connections", [])


# --- set_content_field ---

def test_set_content_field_initialises_content(store):
    assert store.get("flow-state").content is None
    store.set_content_field("flow-state", "body", "Focus.")
    content = store.get("flow-state").content
    assert (content.title, content.body, content.image) == ("", "Focus.", None)


def test_set_content_links(store):
    store.set_content_field("flow-state", "links", [{"label": "Talk", "url": "https://example.com/talk"}])
    content = store.export_snapshot()["nodes"][2]["content"]
    assert content["links"] == [{"label": "Talk", "url": "https://example.com/talk"}]

    store.set_content_field("flow-state", "links", None)
    assert "links" not in store.export_snapshot()["nodes"][2]["content"]


@pytest.mark.parametrize("links", [["https://example.com"], "https://example.com", [{"label": "ok"}, 3]])
def test_set_content_links_rejects_non_mappings(store, links):
    with pytest.raises(ValueError, match="links must be a list"):
        store.set_content_field("flow-state", "links", links)
    # export still works
    assert store.export_snapshot()["nodes"][2]["content"] == {"title": "", "body": "", "image": None}


def test_set_content_field_rejects_unknown(store):
    with pytest.raises(ValueError, match="content field"):
        store.set_content_field("center", "subtitle", "x")


# --- toggle_connection ---

def test_toggle_connect_is_idempotent(store):
    store.toggle_connection("ai-education", "flow-state", True)
    once = store.export_snapshot()
    store.toggle_connection("ai-education", "flow-state", True)
    assert store.export_snapshot() == once
    assert store.get("ai-education").connections == ["center", "flow-state"]
    assert store.get("flow-state").connections == ["center", "ai-education"]


def test_toggle_disconnect_is_idempotent(store):
    store.toggle_connection("center", "flow-state", False)
    store.toggle_connection("center", "flow-state", False)
    assert store.get("center").connections == ["ai-education"]
    assert store.get("flow-state").connections == []


def test_toggle_unknown_or_self_is_noop(store):
    before = store.dumps_snapshot()
    store.toggle_connection("center", "ghost", True)
    store.toggle_connection("center", "center", True)
    assert store.dumps_snapshot() == before


def test_symmetry_survives_random_edits():
    rng = random.Random(1234)
    store = GraphStore()
    for _ in range(8):
        store.add_node()

    for _ in range(300):
        ids = store.ids()
        op = rng.random()
        if op < 0.1 and ids:
            store.delete_node(rng.choice(ids))
        elif op < 0.2:
            store.add_node()
        elif len(ids) >= 2:
            a, b = rng.sample(ids, 2)
            store.toggle_connection(a, b, rng.random() < 0.6)
        assert_symmetric(store)


# --- reads ---

def test_edges_are_deduplicated(store):
    assert store.edges() == [("center", "ai-education"), ("center", "flow-state")]


def test_edges_skip_dangling():
    store = GraphStore()
    store.load({"nodes": [{"id": "a", "connections": ["zzz"]}]})
    assert store.edges() == []
    assert store.integrity_problems() == ["'a' connects to unknown node 'zzz'"]


def test_connected_nodes(store):
    assert [n.id for n in store.connected_nodes("center")] == ["ai-education", "flow-state"]
    assert store.connected_nodes("ghost") == []


# --- export ---

def test_export_fills_content_defaults(store):
    node = store.export_snapshot()["nodes"][2]
    assert list(node) == ["id", "label", "hemisphere", "x", "y", "connections", "content"]
    assert node["content"] == {"title": "", "body": "", "image": None}


def test_export_keeps_links(store):
    content = store.export_snapshot()["nodes"][1]["content"]
    assert content["links"] == [{"label": "Essay", "url": "https://example.com/essay"}]


def test_export_is_a_copy(store):
    snapshot = store.export_snapshot()
    snapshot["nodes"][0]["connections"].append("mutated")
    assert "mutated" not in store.get("center").connections


def test_dumps_is_reproducible(store, sample_document):
    other = GraphStore()
    other.load(sample_document)
    assert store.dumps_snapshot() == other.dumps_snapshot()
    assert store.dumps_snapshot().startswith('{\n  "nodes": [\n')


def test_dumps_keeps_unicode():
    store = GraphStore()
    node_id = store.add_node()
    store.set_field(node_id, "label", "Café ☕")
    assert "Café ☕" in store.dumps_snapshot()
