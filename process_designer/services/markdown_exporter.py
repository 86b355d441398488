"""Serialize a ``BusinessProcess`` back to process markdown.

Nodes are written in ascending row order. Each node therefore has two numbers
in the output: its *position* in that order, which becomes the P-number used
by ``#P`` and by ``Next``/``Yes``/``No`` references, and its stored *row*,
which is written unchanged as the ``#L`` tag.
"""

from __future__ import annotations

from process_designer.models.flowchart import (
    EDGE_LABEL_NO,
    EDGE_LABEL_YES,
    BusinessProcess,
    FlowNode,
    NodeType,
    RelatedSystem,
    Report,
)
from process_designer.services.markdown_dialect import (
    NEXT_PREFIX,
    NO_PREFIX,
    ROW_TAG,
    SECTION_PREFIX,
    TITLE_HEADER,
    YES_PREFIX,
    get_placeholders,
)


def _row_list(item: Report | RelatedSystem, nodes_by_id: dict[str, FlowNode]) -> list[str]:
    return [str(nodes_by_id[nid].row + 1) for nid in item.related_node_ids if nid in nodes_by_id]


def export_process_to_markdown(process: BusinessProcess, *, locale: str | None = None) -> str:
    """Render ``process`` in the process markdown dialect.

    ``locale`` selects the placeholder words written for a node without a
    swimlane and for a report/system without related nodes; it defaults to
    ``settings.MARKDOWN_LOCALE``.
    """
    placeholders = get_placeholders(locale)
    lines: list[str] = []

    lines.append(TITLE_HEADER)
    lines.append(process.title)
    lines.append("")

    lines.append(f"{SECTION_PREFIX}Description")
    lines.append(process.description or "")
    lines.append("")

    lines.append(f"{SECTION_PREFIX}Dept")
    for swimlane in process.swimlanes:
        lines.append(swimlane.name)
    lines.append("")

    lines.append(f"{SECTION_PREFIX}Process")

    # sorted() is stable: nodes sharing a row keep their list order.
    sorted_nodes = sorted(process.nodes, key=lambda n: n.row or 0)
    positions = {node.id: index for index, node in enumerate(sorted_nodes)}
    swimlane_names = {s.id: s.name for s in process.swimlanes}

    def p_ref(node_id: str) -> str | None:
        position = positions.get(node_id)
        return None if position is None else f"P{position + 1}"

    for position, node in enumerate(sorted_nodes):
        dept = swimlane_names.get(node.swimlane_id) or placeholders.unassigned
        lines.append(f"#P{position + 1} #L{node.row + 1} {dept} {node.label}")

        outgoing = process.outgoing_edges(node.id)
        if node.type == NodeType.DECISION:
            for label, prefix in ((EDGE_LABEL_YES, YES_PREFIX), (EDGE_LABEL_NO, NO_PREFIX)):
                edge = next((e for e in outgoing if e.label == label), None)
                ref = p_ref(edge.target) if edge else None
                if ref:
                    lines.append(f"{prefix} {ref}")
        else:
            edge = next((e for e in outgoing if not e.label), None)
            ref = p_ref(edge.target) if edge else None
            if ref:
                lines.append(f"{NEXT_PREFIX} {ref}")

        lines.append("")

    nodes_by_id = {node.id: node for node in sorted_nodes}
    for header, items in (("Reports", process.reports), ("Systems", process.related_systems)):
        if not items:
            continue
        lines.append(f"{SECTION_PREFIX}{header}")
        for item in items:
            rows = ", ".join(_row_list(item, nodes_by_id))
            lines.append(f"{item.name} {ROW_TAG} {rows or placeholders.none}")
        lines.append("")

    return "\n".join(lines)
