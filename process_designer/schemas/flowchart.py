"""JSON interchange schemas for the browser editor.

The editor stores processes as camelCase JSON (``swimlaneId``,
``relatedNodeIds``, ``relatedSystems``, ...). These models accept either
spelling on input and dump camelCase with ``by_alias=True``.
"""

from __future__ import annotations

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from process_designer.models.flowchart import (
    BusinessProcess,
    EdgeType,
    FlowEdge,
    FlowNode,
    NodeType,
    RelatedDocument,
    RelatedSystem,
    Report,
    Swimlane,
    new_id,
)

_CONFIG = {"alias_generator": to_camel, "populate_by_name": True, "from_attributes": True}


class SwimlaneSchema(BaseModel):
    id: str
    name: str
    color: str

    model_config = _CONFIG


class FlowNodeSchema(BaseModel):
    id: str
    type: NodeType
    label: str
    swimlane_id: str
    row: int
    description: str | None = None

    model_config = _CONFIG


class FlowEdgeSchema(BaseModel):
    id: str
    source: str
    target: str
    label: str | None = None
    type: EdgeType | None = None

    model_config = _CONFIG


class RelatedItemSchema(BaseModel):
    """Shared shape of reports, related systems and related documents."""

    id: str
    name: str
    related_node_ids: list[str] = []
    row: int | None = None

    model_config = _CONFIG


class BusinessProcessSchema(BaseModel):
    id: str | None = None
    title: str
    description: str | None = None
    document_url: str | None = None
    category: str | None = None
    swimlanes: list[SwimlaneSchema] = []
    nodes: list[FlowNodeSchema] = []
    edges: list[FlowEdgeSchema] = []
    related_documents: list[RelatedItemSchema] = []
    related_systems: list[RelatedItemSchema] = []
    reports: list[RelatedItemSchema] = []
    created_at: str | None = None
    updated_at: str | None = None
    created_by: str | None = None
    modified_by: str | None = None

    model_config = _CONFIG


def to_schema(process: BusinessProcess) -> BusinessProcessSchema:
    return BusinessProcessSchema.model_validate(process)


def from_schema(schema: BusinessProcessSchema) -> BusinessProcess:
    """Build the data model from a validated schema; a missing id gets a fresh one."""
    return BusinessProcess(
        id=schema.id or new_id(),
        title=schema.title,
        description=schema.description or "",
        swimlanes=[Swimlane(**s.model_dump()) for s in schema.swimlanes],
        nodes=[FlowNode(**n.model_dump()) for n in schema.nodes],
        edges=[FlowEdge(**e.model_dump()) for e in schema.edges],
        reports=[Report(**r.model_dump()) for r in schema.reports],
        related_systems=[RelatedSystem(**s.model_dump()) for s in schema.related_systems],
        related_documents=[RelatedDocument(**d.model_dump()) for d in schema.related_documents],
        document_url=schema.document_url,
        category=schema.category,
        created_at=schema.created_at,
        updated_at=schema.updated_at,
        created_by=schema.created_by,
        modified_by=schema.modified_by,
    )


def process_to_json(process: BusinessProcess) -> dict:
    """camelCase JSON document for the editor."""
    return to_schema(process).model_dump(mode="json", by_alias=True, exclude_none=True)


def process_from_json(data: dict) -> BusinessProcess:
    """Raises ``pydantic.ValidationError`` if ``data`` is not a process document."""
    return from_schema(BusinessProcessSchema.model_validate(data))
