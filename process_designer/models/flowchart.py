"""Swimlane flowchart data model.

A ``BusinessProcess`` exclusively owns its swimlanes, nodes, edges and the
reports/systems cross-referenced from its nodes. Nothing here is shared
between process instances.
"""

from __future__ import annotations

import enum
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field

IdFactory = Callable[[], str]


def new_id() -> str:
    return str(uuid.uuid4())


class NodeType(str, enum.Enum):
    PROCESS = "process"
    DECISION = "decision"
    START = "start"
    END = "end"
    DOCUMENT = "document"
    SUBPROCESS = "subprocess"


class EdgeType(str, enum.Enum):
    DEFAULT = "default"
    APPROVAL = "approval"
    REJECTION = "rejection"


EDGE_LABEL_YES = "YES"
EDGE_LABEL_NO = "NO"

SWIMLANE_COLORS: tuple[str, ...] = (
    "#E8F5E9",  # green
    "#E3F2FD",  # blue
    "#FFF3E0",  # orange
    "#F3E5F5",  # purple
    "#E0F7FA",  # cyan
    "#FBE9E7",  # deep orange
    "#F1F8E9",  # lime
    "#E8EAF6",  # indigo
)


def swimlane_color(index: int) -> str:
    """Palette color for the swimlane created at ``index`` (cycles)."""
    return SWIMLANE_COLORS[index % len(SWIMLANE_COLORS)]


@dataclass
class Swimlane:
    id: str
    name: str
    color: str


@dataclass
class FlowNode:
    id: str
    type: NodeType
    label: str
    swimlane_id: str
    row: int  # zero-based; markdown "#L<n>" is row + 1
    description: str | None = None


@dataclass
class FlowEdge:
    id: str
    source: str
    target: str
    label: str | None = None  # "YES" / "NO" for decision branches
    type: EdgeType | None = None  # presentation only


@dataclass
class Report:
    id: str
    name: str
    related_node_ids: list[str] = field(default_factory=list)
    row: int | None = None


@dataclass
class RelatedSystem:
    id: str
    name: str
    related_node_ids: list[str] = field(default_factory=list)
    row: int | None = None


@dataclass
class RelatedDocument:
    """Kept for documents created by older editor versions; markdown never carries it."""

    id: str
    name: str
    related_node_ids: list[str] = field(default_factory=list)
    row: int | None = None


@dataclass
class BusinessProcess:
    id: str
    title: str
    description: str = ""
    swimlanes: list[Swimlane] = field(default_factory=list)
    nodes: list[FlowNode] = field(default_factory=list)
    edges: list[FlowEdge] = field(default_factory=list)
    reports: list[Report] = field(default_factory=list)
    related_systems: list[RelatedSystem] = field(default_factory=list)
    related_documents: list[RelatedDocument] = field(default_factory=list)
    document_url: str | None = None
    category: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    created_by: str | None = None
    modified_by: str | None = None

    def find_swimlane(self, swimlane_id: str) -> Swimlane | None:
        return next((s for s in self.swimlanes if s.id == swimlane_id), None)

    def find_node(self, node_id: str) -> FlowNode | None:
        return next((n for n in self.nodes if n.id == node_id), None)

    def outgoing_edges(self, node_id: str) -> list[FlowEdge]:
        return [e for e in self.edges if e.source == node_id]
