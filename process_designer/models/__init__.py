from process_designer.models.flowchart import (
    EDGE_LABEL_NO,
    EDGE_LABEL_YES,
    SWIMLANE_COLORS,
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

__all__ = [
    "EDGE_LABEL_NO",
    "EDGE_LABEL_YES",
    "SWIMLANE_COLORS",
    "BusinessProcess",
    "EdgeType",
    "FlowEdge",
    "FlowNode",
    "IdFactory",
    "NodeType",
    "RelatedDocument",
    "RelatedSystem",
    "Report",
    "Swimlane",
    "new_id",
    "swimlane_color",
]
