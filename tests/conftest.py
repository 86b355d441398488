"""Shared test fixtures.

Provides:
- ``id_factory``: deterministic ids ("id-1", "id-2", ...) for the parser and
  editor, so tests can assert on exact ids
- ``make_process``: builder for small hand-made processes
"""

from __future__ import annotations

import itertools
import os

# Pin the placeholder language before any module reads Settings().
os.environ["MARKDOWN_LOCALE"] = "en"

import pytest

from process_designer.models.flowchart import (
    BusinessProcess,
    FlowEdge,
    FlowNode,
    NodeType,
    Swimlane,
    swimlane_color,
)


def sequential_ids(prefix: str = "id"):
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


@pytest.fixture
def id_factory():
    return sequential_ids()


@pytest.fixture
def make_process():
    """Build a process from compact tuples.

    nodes: (id, type, label, lane index, row)
    edges: (source, target, label)
    """

    def _make(
        lanes: list[str],
        nodes: list[tuple[str, NodeType, str, int, int]],
        edges: list[tuple[str, str, str | None]] = (),
        title: str = "Test",
    ) -> BusinessProcess:
        swimlanes = [
            Swimlane(id=f"lane-{i}", name=name, color=swimlane_color(i)) for i, name in enumerate(lanes)
        ]
        return BusinessProcess(
            id="process-1",
            title=title,
            swimlanes=swimlanes,
            nodes=[
                FlowNode(id=nid, type=ntype, label=label, swimlane_id=f"lane-{lane}", row=row)
                for nid, ntype, label, lane, row in nodes
            ],
            edges=[
                FlowEdge(id=f"e-{i}", source=src, target=tgt, label=label)
                for i, (src, tgt, label) in enumerate(edges, start=1)
            ],
        )

    return _make
