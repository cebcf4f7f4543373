# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
import copy

import pytest

from nodegraph.store import GraphStore

SAMPLE_DOCUMENT = {
    "nodes": [
        {
            "id": "center",
            "label": "GUS",
            "hemisphere": "center",
            "x": 50,
            "y": 50,
            "connections": ["ai-education", "flow-state"],
            "content": {"title": "Gus Halwani", "body": "Hello.", "image": None},
        },
        {
            "id": "ai-education",
            "label": "AI Education",
            "hemisphere": "left",
            "x": 25,
            "y": 30,
            "connections": ["center"],
            "content": {
                "title": "AI in Education",
                "body": "",
                "links": [{"label": "Essay", "url": "https://example.com/essay"}],
            },
        },
        {
            "id": "flow-state",
            "label": "Flow State",
            "hemisphere": "right",
            "x": 75,
            "y": 40,
            "connections": ["center"],
        },
    ]
}


@pytest.fixture
def sample_document():
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def store(sample_document):
    s = GraphStore()
    s.load(sample_document)
    return s
