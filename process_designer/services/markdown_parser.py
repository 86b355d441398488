"""Parse process markdown into a ``BusinessProcess`` graph.

The markdown usually comes from an AI assistant and is often imperfect, so the
parser is lenient: it never raises, and any line it cannot use is skipped.
Skipped lines and dropped references are logged at DEBUG level only.
Callers that need strictness run ``process_validator.validate_process`` on
the result.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from process_designer.models.flowchart import (
    EDGE_LABEL_NO,
    EDGE_LABEL_YES,
    BusinessProcess,
    FlowEdge,
    FlowNode,
    IdFactory,
    NodeType,
    RelatedSystem,
    Report,
    Swimlane,
    new_id,
    swimlane_color,
)
from process_designer.services.markdown_dialect import (
    NEXT_PREFIX,
    NO_PREFIX,
    PROCESS_LINE_RE,
    RELATION_LINE_RE,
    ROW_TAG,
    TITLE_HEADER,
    YES_PREFIX,
    Section,
    get_placeholders,
    match_section,
)

logger = logging.getLogger("process_designer.markdown")

_LEADING_INT_RE = re.compile(r"^[+-]?[0-9]+")


@dataclass
class _ProcessRecord:
    key: str  # "P<n>" as written in the markdown
    dept: str
    label: str
    row: int | None = None
    next: str | None = None
    yes: str | None = None
    no: str | None = None

    @property
    def has_outgoing(self) -> bool:
        return bool(self.next or self.yes or self.no)

    @property
    def is_branch(self) -> bool:
        return bool(self.yes or self.no)


@dataclass
class _RelationRecord:
    key: str  # "R<n>" / "S<n>", by position in its section
    name: str
    rows: list[str] = field(default_factory=list)


def _parse_row_number(token: str) -> int | None:
    """Leading integer of ``token`` ("5", "5 ", "5)"), or None."""
    match = _LEADING_INT_RE.match(token.strip())
    return int(match.group(0)) if match else None


class _MarkdownReader:
    """Single pass over the lines, tracking the current section."""

    def __init__(self) -> None:
        self.title: str | None = None
        self.description = ""
        self.depts: list[str] = []
        self.records: dict[str, _ProcessRecord] = {}
        self.reports: list[_RelationRecord] = []
        self.systems: list[_RelationRecord] = []

        self._section = Section.NONE
        self._current: _ProcessRecord | None = None
        self._handlers = {
            Section.DESCRIPTION: self._read_description,
            Section.DEPT: self._read_dept,
            Section.PROCESS: self._read_process,
            Section.REPORTS: self._read_reports,
            Section.SYSTEMS: self._read_systems,
        }

    def feed(self, markdown: str) -> None:
        for lineno, raw in enumerate(markdown.split("\n"), start=1):
            line = raw.strip()
            if line:
                self._read_line(lineno, line)

    def _read_line(self, lineno: int, line: str) -> None:
        if line.startswith(TITLE_HEADER):
            self._section = Section.TITLE
            return

        if self._section is Section.TITLE and not line.startswith("#"):
            self.title = line
            self._section = Section.NONE
            return

        section = match_section(line)
        if section is not None:
            if section is Section.NONE:
                logger.debug("Line %d: unknown section header %r, ignoring its content", lineno, line)
            self._section = section
            return

        handler = self._handlers.get(self._section)
        if handler is None or not handler(line):
            logger.debug("Line %d skipped in section %s: %r", lineno, self._section.value, line)

    # Each handler returns whether it used the line.

    def _read_description(self, line: str) -> bool:
        if line.startswith("#"):
            return False
        self.description = f"{self.description} {line}" if self.description else line
        return True

    def _read_dept(self, line: str) -> bool:
        if line.startswith("#"):
            return False
        self.depts.append(line)
        return True

    def _read_process(self, line: str) -> bool:
        match = PROCESS_LINE_RE.match(line)
        if match:
            key, row, dept, label = match.groups()
            record = _ProcessRecord(
                key=key,
                dept=dept.strip(),
                label=label.strip(),
                row=int(row) - 1 if row is not None else None,
            )
            # Re-declaring a P number replaces the record but keeps its position.
            self.records[key] = record
            self._current = record
            return True

        for prefix, attr in ((NEXT_PREFIX, "next"), (YES_PREFIX, "yes"), (NO_PREFIX, "no")):
            if line.startswith(prefix):
                if self._current is None:
                    return False
                setattr(self._current, attr, line[len(prefix):].strip() or None)
                return True
        return False

    def _read_reports(self, line: str) -> bool:
        return self._read_relation(line, self.reports, "R")

    def _read_systems(self, line: str) -> bool:
        return self._read_relation(line, self.systems, "S")

    def _read_relation(self, line: str, target: list[_RelationRecord], key_prefix: str) -> bool:
        if line.startswith("#") or ROW_TAG not in line:
            return False
        match = RELATION_LINE_RE.match(line)
        if not match:
            return False
        name, rows = match.groups()
        target.append(
            _RelationRecord(
                key=f"{key_prefix}{len(target) + 1}",
                name=name.strip(),
                rows=[r.strip() for r in rows.split(",")],
            )
        )
        return True


def _classify(record: _ProcessRecord, row: int) -> NodeType:
    if row == 0:
        return NodeType.START
    if not record.has_outgoing:
        return NodeType.END
    if record.is_branch:
        return NodeType.DECISION
    return NodeType.PROCESS


def _resolve_rows(rows: list[str], nodes: list[FlowNode]) -> list[str]:
    """Map 1-based row tokens to the id of the first node on each row."""
    node_ids: list[str] = []
    for token in rows:
        row_number = _parse_row_number(token)
        if row_number is None:
            logger.debug("Dropping non-numeric row reference %r", token)
            continue
        node = next((n for n in nodes if n.row == row_number - 1), None)
        if node is None:
            logger.debug("Dropping reference to row %d: no node on that row", row_number)
            continue
        node_ids.append(node.id)
    return node_ids


def parse_process_markdown(
    markdown: str,
    *,
    id_factory: IdFactory | None = None,
    locale: str | None = None,
) -> BusinessProcess:
    """Parse process markdown into a new ``BusinessProcess``.

    Args:
        markdown: Markdown text in the process dialect. Anything the parser
                  does not understand is ignored.
        id_factory: Zero-argument callable producing unique ids. Defaults to
                    random UUID4 strings, so two parses of the same text give
                    structurally equal graphs with different ids.
        locale: Placeholder language for the default title ("en" / "ja").
                Defaults to ``settings.MARKDOWN_LOCALE``.
    """
    make_id = id_factory or new_id
    reader = _MarkdownReader()
    reader.feed(markdown)

    swimlanes = [
        Swimlane(id=make_id(), name=name, color=swimlane_color(index))
        for index, name in enumerate(reader.depts)
    ]
    default_swimlane_id = swimlanes[0].id if swimlanes else ""

    nodes: list[FlowNode] = []
    node_ids: dict[str, str] = {}  # "P<n>" -> node id
    for index, record in enumerate(reader.records.values()):
        swimlane = next((s for s in swimlanes if s.name == record.dept), None)
        if swimlane is None and swimlanes:
            logger.debug("%s: role %r is not a Dept entry, using %r", record.key, record.dept, swimlanes[0].name)
        row = record.row if record.row is not None else index
        node = FlowNode(
            id=make_id(),
            type=_classify(record, row),
            label=record.label,
            swimlane_id=swimlane.id if swimlane else default_swimlane_id,
            row=row,
        )
        node_ids[record.key] = node.id
        nodes.append(node)

    edges: list[FlowEdge] = []
    for record in reader.records.values():
        source = node_ids[record.key]
        for ref, label in ((record.next, None), (record.yes, EDGE_LABEL_YES), (record.no, EDGE_LABEL_NO)):
            if not ref:
                continue
            target = node_ids.get(ref)
            if target is None:
                logger.debug("%s: dropping reference to undefined %s", record.key, ref)
                continue
            edges.append(FlowEdge(id=make_id(), source=source, target=target, label=label))

    reports = [
        Report(id=make_id(), name=r.name, related_node_ids=_resolve_rows(r.rows, nodes))
        for r in reader.reports
    ]
    systems = [
        RelatedSystem(id=make_id(), name=s.name, related_node_ids=_resolve_rows(s.rows, nodes))
        for s in reader.systems
    ]

    process = BusinessProcess(
        id=make_id(),
        title=reader.title if reader.title is not None else get_placeholders(locale).title,
        description=reader.description,
        swimlanes=swimlanes,
        nodes=nodes,
        edges=edges,
        reports=reports,
        related_systems=systems,
        related_documents=[],
    )
    logger.debug(
        "Parsed process %r: %d swimlanes, %d nodes, %d edges, %d reports, %d systems",
        process.title,
        len(swimlanes),
        len(nodes),
        len(edges),
        len(reports),
        len(systems),
    )
    return process
