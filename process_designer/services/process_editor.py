"""In-place editing operations on a ``BusinessProcess``.

These back the interactive editor: every operation mutates the process it is
given and stamps ``updated_at``. Deletions cascade so the process stays
consistent for ``export_process_to_markdown``:

- removing a swimlane removes its nodes
- removing a node removes every edge touching it and drops it from
  report/system/document relations
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any, TypeVar

from process_designer.models.flowchart import (
    BusinessProcess,
    EdgeType,
    FlowEdge,
    FlowNode,
    IdFactory,
    NodeType,
    RelatedDocument,
    RelatedSystem,
    Report,
    Swimlane,
    new_id,
    swimlane_color,
)

logger = logging.getLogger("process_designer.editor")

T = TypeVar("T")

SWIMLANE_FIELDS = frozenset({"name", "color"})
NODE_FIELDS = frozenset({"type", "label", "swimlane_id", "row", "description"})
EDGE_FIELDS = frozenset({"source", "target", "label", "type"})
RELATION_FIELDS = frozenset({"name", "related_node_ids", "row"})


class ProcessEditError(LookupError):
    """Raised when an operation names an entity the process does not contain."""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _touch(process: BusinessProcess) -> None:
    process.updated_at = _now()


def _find(items: Iterable[T], item_id: str, kind: str) -> T:
    for item in items:
        if item.id == item_id:  # type: ignore[attr-defined]
            return item
    raise ProcessEditError(f"{kind} {item_id!r} not found")


def _get_swimlane(process: BusinessProcess, swimlane_id: str) -> Swimlane:
    swimlane = process.find_swimlane(swimlane_id)
    if swimlane is None:
        raise ProcessEditError(f"Swimlane {swimlane_id!r} not found")
    return swimlane


def _get_node(process: BusinessProcess, node_id: str) -> FlowNode:
    node = process.find_node(node_id)
    if node is None:
        raise ProcessEditError(f"Node {node_id!r} not found")
    return node


def _check_label(label: str) -> None:
    # An empty label cannot be written as a "#P<n> #L<m> <role> <label>" line.
    if not label or not label.strip():
        raise ValueError("Node label must not be empty")


def _apply_updates(target: Any, updates: dict[str, Any], allowed: frozenset[str]) -> None:
    unknown = set(updates) - allowed
    if unknown:
        raise ValueError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
    for key, value in updates.items():
        setattr(target, key, value)


def _drop_node_references(process: BusinessProcess, removed: set[str]) -> None:
    process.edges = [e for e in process.edges if e.source not in removed and e.target not in removed]
    for item in (*process.reports, *process.related_systems, *process.related_documents):
        item.related_node_ids = [nid for nid in item.related_node_ids if nid not in removed]


# ── Process ─────────────────────────────────────────────────────────────


def create_new_process(title: str, *, id_factory: IdFactory | None = None) -> BusinessProcess:
    now = _now()
    return BusinessProcess(
        id=(id_factory or new_id)(),
        title=title,
        created_at=now,
        updated_at=now,
    )


def update_process_title(process: BusinessProcess, title: str) -> None:
    process.title = title
    _touch(process)


def update_process_description(process: BusinessProcess, description: str) -> None:
    process.description = description
    _touch(process)


# ── Swimlanes ───────────────────────────────────────────────────────────


def add_swimlane(process: BusinessProcess, name: str, *, id_factory: IdFactory | None = None) -> Swimlane:
    swimlane = Swimlane(
        id=(id_factory or new_id)(),
        name=name,
        color=swimlane_color(len(process.swimlanes)),
    )
    process.swimlanes.append(swimlane)
    _touch(process)
    return swimlane


def update_swimlane(process: BusinessProcess, swimlane_id: str, **updates: Any) -> Swimlane:
    swimlane = _get_swimlane(process, swimlane_id)
    _apply_updates(swimlane, updates, SWIMLANE_FIELDS)
    _touch(process)
    return swimlane


def remove_swimlane(process: BusinessProcess, swimlane_id: str) -> None:
    _get_swimlane(process, swimlane_id)
    removed = {n.id for n in process.nodes if n.swimlane_id == swimlane_id}
    process.swimlanes = [s for s in process.swimlanes if s.id != swimlane_id]
    process.nodes = [n for n in process.nodes if n.id not in removed]
    _drop_node_references(process, removed)
    if removed:
        logger.info("Removed swimlane %s with %d node(s)", swimlane_id, len(removed))
    _touch(process)


def move_swimlane(process: BusinessProcess, swimlane_id: str, direction: str) -> None:
    """Swap a swimlane with its neighbour; moving past either end is a no-op."""
    if direction not in ("up", "down"):
        raise ValueError(f"direction must be 'up' or 'down', got {direction!r}")
    swimlane = _get_swimlane(process, swimlane_id)
    index = process.swimlanes.index(swimlane)
    new_index = index - 1 if direction == "up" else index + 1
    if new_index < 0 or new_index >= len(process.swimlanes):
        return
    lanes = process.swimlanes
    lanes[index], lanes[new_index] = lanes[new_index], lanes[index]
    _touch(process)


def reorder_swimlanes(process: BusinessProcess, swimlane_ids: list[str]) -> None:
    by_id = {s.id: s for s in process.swimlanes}
    if sorted(swimlane_ids) != sorted(by_id):
        raise ValueError("swimlane_ids must list every swimlane exactly once")
    process.swimlanes = [by_id[sid] for sid in swimlane_ids]
    _touch(process)


# ── Nodes ───────────────────────────────────────────────────────────────


def add_node(
    process: BusinessProcess,
    *,
    label: str,
    swimlane_id: str,
    row: int,
    type: NodeType | str = NodeType.PROCESS,
    description: str | None = None,
    id_factory: IdFactory | None = None,
) -> FlowNode:
    _check_label(label)
    node = FlowNode(
        id=(id_factory or new_id)(),
        type=NodeType(type),
        label=label,
        swimlane_id=swimlane_id,
        row=row,
        description=description,
    )
    process.nodes.append(node)
    _touch(process)
    return node


def update_node(process: BusinessProcess, node_id: str, **updates: Any) -> FlowNode:
    node = _get_node(process, node_id)
    if "label" in updates:
        _check_label(updates["label"])
    if "type" in updates:
        updates["type"] = NodeType(updates["type"])
    _apply_updates(node, updates, NODE_FIELDS)
    _touch(process)
    return node


def remove_node(process: BusinessProcess, node_id: str) -> None:
    _get_node(process, node_id)
    process.nodes = [n for n in process.nodes if n.id != node_id]
    _drop_node_references(process, {node_id})
    _touch(process)


# ── Edges ───────────────────────────────────────────────────────────────


def _check_endpoints(process: BusinessProcess, *node_ids: str) -> None:
    known = {n.id for n in process.nodes}
    missing = [nid for nid in node_ids if nid not in known]
    if missing:
        raise ValueError(f"Edge endpoint(s) not in process: {', '.join(missing)}")


def add_edge(
    process: BusinessProcess,
    source: str,
    target: str,
    *,
    label: str | None = None,
    type: EdgeType | str | None = None,
    id_factory: IdFactory | None = None,
) -> FlowEdge:
    _check_endpoints(process, source, target)
    edge = FlowEdge(
        id=(id_factory or new_id)(),
        source=source,
        target=target,
        label=label,
        type=EdgeType(type) if type is not None else None,
    )
    process.edges.append(edge)
    _touch(process)
    return edge


def update_edge(process: BusinessProcess, edge_id: str, **updates: Any) -> FlowEdge:
    edge = _find(process.edges, edge_id, "Edge")
    endpoints = [updates[k] for k in ("source", "target") if k in updates]
    if endpoints:
        _check_endpoints(process, *endpoints)
    if updates.get("type") is not None:
        updates["type"] = EdgeType(updates["type"])
    _apply_updates(edge, updates, EDGE_FIELDS)
    _touch(process)
    return edge


def remove_edge(process: BusinessProcess, edge_id: str) -> None:
    _find(process.edges, edge_id, "Edge")
    process.edges = [e for e in process.edges if e.id != edge_id]
    _touch(process)


# ── Reports / systems / documents ───────────────────────────────────────


def add_report(
    process: BusinessProcess,
    name: str,
    related_node_ids: list[str] | None = None,
    *,
    id_factory: IdFactory | None = None,
) -> Report:
    report = Report(id=(id_factory or new_id)(), name=name, related_node_ids=list(related_node_ids or []))
    process.reports.append(report)
    _touch(process)
    return report


def update_report(process: BusinessProcess, report_id: str, **updates: Any) -> Report:
    report = _find(process.reports, report_id, "Report")
    _apply_updates(report, updates, RELATION_FIELDS)
    _touch(process)
    return report


def remove_report(process: BusinessProcess, report_id: str) -> None:
    _find(process.reports, report_id, "Report")
    process.reports = [r for r in process.reports if r.id != report_id]
    _touch(process)


def add_system(
    process: BusinessProcess,
    name: str,
    related_node_ids: list[str] | None = None,
    *,
    id_factory: IdFactory | None = None,
) -> RelatedSystem:
    system = RelatedSystem(id=(id_factory or new_id)(), name=name, related_node_ids=list(related_node_ids or []))
    process.related_systems.append(system)
    _touch(process)
    return system


def update_system(process: BusinessProcess, system_id: str, **updates: Any) -> RelatedSystem:
    system = _find(process.related_systems, system_id, "System")
    _apply_updates(system, updates, RELATION_FIELDS)
    _touch(process)
    return system


def remove_system(process: BusinessProcess, system_id: str) -> None:
    _find(process.related_systems, system_id, "System")
    process.related_systems = [s for s in process.related_systems if s.id != system_id]
    _touch(process)


def add_document(
    process: BusinessProcess,
    name: str,
    related_node_ids: list[str] | None = None,
    *,
    id_factory: IdFactory | None = None,
) -> RelatedDocument:
    document = RelatedDocument(
        id=(id_factory or new_id)(), name=name, related_node_ids=list(related_node_ids or [])
    )
    process.related_documents.append(document)
    _touch(process)
    return document


def remove_document(process: BusinessProcess, document_id: str) -> None:
    _find(process.related_documents, document_id, "Document")
    process.related_documents = [d for d in process.related_documents if d.id != document_id]
    _touch(process)
