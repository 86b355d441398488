"""Optional strict checks over a parsed ``BusinessProcess``.

The markdown parser accepts anything and drops what it cannot use. This
module is the separate pass for callers that want to know how far a process
is from the rules the generation prompt asks for:

- rows (``#L``) unique and contiguous from 1
- a start node with a ``Next``, end nodes without one
- every node reachable from the start node
- decision nodes with YES/NO branches only
- at most one report and one system per row
- every Dept role used by some node

Validation never raises and never changes the process.
"""

from __future__ import annotations

import enum
import logging
from collections import defaultdict, deque
from dataclasses import dataclass, field

from process_designer.models.flowchart import (
    EDGE_LABEL_NO,
    EDGE_LABEL_YES,
    BusinessProcess,
    NodeType,
    RelatedSystem,
    Report,
)

logger = logging.getLogger("process_designer.validation")


class ValidationSeverity(str, enum.Enum):
    ERROR = "error"  # the process cannot be drawn as intended
    WARNING = "warning"  # drawable, but breaks a generation rule
    INFO = "info"


@dataclass
class ValidationIssue:
    severity: ValidationSeverity
    code: str  # machine-readable, e.g. "DUPLICATE_ROW"
    message: str
    node_id: str | None = None
    suggestion: str | None = None

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "node_id": self.node_id,
            "suggestion": self.suggestion,
        }


@dataclass
class ProcessValidationResult:
    is_valid: bool
    issues: list[ValidationIssue] = field(default_factory=list)
    stats: dict[str, int] = field(default_factory=dict)

    def _count(self, severity: ValidationSeverity) -> int:
        return sum(1 for i in self.issues if i.severity == severity)

    @property
    def error_count(self) -> int:
        return self._count(ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return self._count(ValidationSeverity.WARNING)

    @property
    def info_count(self) -> int:
        return self._count(ValidationSeverity.INFO)

    def codes(self) -> set[str]:
        return {i.code for i in self.issues}

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "info_count": self.info_count,
            "issues": [i.to_dict() for i in self.issues],
            "stats": self.stats,
        }

    def get_summary(self) -> str:
        status = "Valid" if self.is_valid else "Invalid"
        return (
            f"{status} | Errors: {self.error_count}, "
            f"Warnings: {self.warning_count}, Info: {self.info_count}"
        )


class ProcessValidator:
    """Collects issues from every check; ``strict`` also fails on warnings."""

    def __init__(self, strict: bool = False):
        self.strict = strict

    def validate(self, process: BusinessProcess) -> ProcessValidationResult:
        issues: list[ValidationIssue] = []
        node_ids = {n.id for n in process.nodes}

        issues.extend(self._check_empty(process))
        issues.extend(self._check_dangling_edges(process, node_ids))
        issues.extend(self._check_rows(process))
        issues.extend(self._check_terminals(process))
        unreachable = self._find_unreachable(process, node_ids)
        issues.extend(unreachable)
        issues.extend(self._check_decisions(process))
        issues.extend(self._check_swimlanes(process))
        issues.extend(self._check_relations(process, process.reports, "report"))
        issues.extend(self._check_relations(process, process.related_systems, "system"))

        has_errors = any(i.severity == ValidationSeverity.ERROR for i in issues)
        has_warnings = any(i.severity == ValidationSeverity.WARNING for i in issues)
        is_valid = not has_errors and not (self.strict and has_warnings)

        stats = {
            "swimlanes": len(process.swimlanes),
            "nodes": len(process.nodes),
            "edges": len(process.edges),
            "rows": len({n.row for n in process.nodes}),
            "reports": len(process.reports),
            "systems": len(process.related_systems),
            "unreachable_nodes": len(unreachable),
        }
        result = ProcessValidationResult(is_valid=is_valid, issues=issues, stats=stats)
        logger.debug("Validated process %r: %s", process.title, result.get_summary())
        return result

    def _check_empty(self, process: BusinessProcess) -> list[ValidationIssue]:
        if process.nodes:
            return []
        return [
            ValidationIssue(
                severity=ValidationSeverity.ERROR,
                code="NO_NODES",
                message="Process has no nodes",
                suggestion="Add at least a start and an end step under '## Process'",
            )
        ]

    def _check_dangling_edges(self, process: BusinessProcess, node_ids: set[str]) -> list[ValidationIssue]:
        issues = []
        for edge in process.edges:
            for end, node_id in (("source", edge.source), ("target", edge.target)):
                if node_id not in node_ids:
                    issues.append(
                        ValidationIssue(
                            severity=ValidationSeverity.ERROR,
                            code="DANGLING_EDGE",
                            message=f"Edge {edge.id} has unknown {end} node '{node_id}'",
                            suggestion="Remove the edge or restore the node",
                        )
                    )
        return issues

    def _check_rows(self, process: BusinessProcess) -> list[ValidationIssue]:
        issues = []
        by_row: dict[int, list] = defaultdict(list)
        for node in process.nodes:
            by_row[node.row].append(node)

        for row, nodes in sorted(by_row.items()):
            if len(nodes) > 1:
                labels = ", ".join(repr(n.label) for n in nodes)
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.ERROR,
                        code="DUPLICATE_ROW",
                        message=f"Row L{row + 1} is used by {len(nodes)} nodes: {labels}",
                        node_id=nodes[1].id,
                        suggestion="Give each step its own #L number",
                    )
                )

        rows = sorted(by_row)
        if rows and rows != list(range(len(rows))):
            missing = sorted(set(range(max(rows[-1] + 1, 0))) - set(rows))
            detail = f"missing L{', L'.join(str(r + 1) for r in missing)}" if missing else "rows below L1"
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.WARNING,
                    code="ROW_GAP",
                    message=f"Rows are not numbered contiguously from L1 ({detail})",
                    suggestion="Renumber #L tags 1, 2, 3, ... in flow order",
                )
            )
        return issues

    def _check_terminals(self, process: BusinessProcess) -> list[ValidationIssue]:
        issues = []
        starts = [n for n in process.nodes if n.type == NodeType.START]
        if process.nodes and not starts:
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="MISSING_START",
                    message="Process has no start node",
                    suggestion="Tag the first step with #L1",
                )
            )
        for node in starts:
            if not process.outgoing_edges(node.id):
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.WARNING,
                        code="START_WITHOUT_NEXT",
                        message=f"Start node '{node.label}' has no outgoing connection",
                        node_id=node.id,
                        suggestion="Add exactly one 'Next:' line to the start node",
                    )
                )
        for node in process.nodes:
            if node.type == NodeType.END and process.outgoing_edges(node.id):
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.WARNING,
                        code="END_WITH_NEXT",
                        message=f"End node '{node.label}' has an outgoing connection",
                        node_id=node.id,
                        suggestion="Remove the 'Next:' line from the end node",
                    )
                )
        return issues

    def _find_unreachable(self, process: BusinessProcess, node_ids: set[str]) -> list[ValidationIssue]:
        starts = [n.id for n in process.nodes if n.type == NodeType.START]
        if not starts:
            return []  # reported as MISSING_START

        adjacency: dict[str, list[str]] = defaultdict(list)
        for edge in process.edges:
            if edge.source in node_ids and edge.target in node_ids:
                adjacency[edge.source].append(edge.target)

        seen = set(starts)
        queue = deque(starts)
        while queue:
            current = queue.popleft()
            for neighbor in adjacency[current]:
                if neighbor not in seen:
                    seen.add(neighbor)
                    queue.append(neighbor)

        return [
            ValidationIssue(
                severity=ValidationSeverity.WARNING,
                code="UNREACHABLE_NODE",
                message=f"Node '{node.label}' (L{node.row + 1}) cannot be reached from the start node",
                node_id=node.id,
                suggestion="Reference it from a Next/Yes/No line or remove it",
            )
            for node in process.nodes
            if node.id not in seen
        ]

    def _check_decisions(self, process: BusinessProcess) -> list[ValidationIssue]:
        issues = []
        for node in process.nodes:
            if node.type != NodeType.DECISION:
                continue
            outgoing = process.outgoing_edges(node.id)
            yes = sum(1 for e in outgoing if e.label == EDGE_LABEL_YES)
            no = sum(1 for e in outgoing if e.label == EDGE_LABEL_NO)
            if yes + no == 0 or yes > 1 or no > 1 or len(outgoing) > 2:
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.WARNING,
                        code="DECISION_BRANCHES",
                        message=(
                            f"Decision '{node.label}' has {yes} YES, {no} NO and "
                            f"{len(outgoing) - yes - no} unlabeled connections"
                        ),
                        node_id=node.id,
                        suggestion="A decision takes one 'Yes:' and at most one 'No:' line",
                    )
                )
        return issues

    def _check_swimlanes(self, process: BusinessProcess) -> list[ValidationIssue]:
        issues = []
        lane_ids = {s.id for s in process.swimlanes}
        used = {n.swimlane_id for n in process.nodes}
        for node in process.nodes:
            if node.swimlane_id not in lane_ids:
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.WARNING,
                        code="UNASSIGNED_NODE",
                        message=f"Node '{node.label}' is not assigned to any swimlane",
                        node_id=node.id,
                        suggestion="List its role under '## Dept'",
                    )
                )
        for swimlane in process.swimlanes:
            if swimlane.id not in used:
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.INFO,
                        code="UNUSED_SWIMLANE",
                        message=f"Swimlane '{swimlane.name}' has no nodes",
                        suggestion="Use the role in '## Process' exactly as written, or remove it",
                    )
                )
        return issues

    def _check_relations(
        self,
        process: BusinessProcess,
        items: list[Report] | list[RelatedSystem],
        kind: str,
    ) -> list[ValidationIssue]:
        issues = []
        nodes_by_id = {n.id: n for n in process.nodes}
        per_row: dict[int, list[str]] = defaultdict(list)
        for item in items:
            rows_for_item = set()
            for node_id in item.related_node_ids:
                node = nodes_by_id.get(node_id)
                if node is None:
                    issues.append(
                        ValidationIssue(
                            severity=ValidationSeverity.WARNING,
                            code="DANGLING_RELATION",
                            message=f"{kind.capitalize()} '{item.name}' references unknown node '{node_id}'",
                            suggestion="Reference only #L numbers that exist under '## Process'",
                        )
                    )
                    continue
                rows_for_item.add(node.row)
            for row in rows_for_item:
                per_row[row].append(item.name)

        for row, names in sorted(per_row.items()):
            if len(names) > 1:
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.WARNING,
                        code=f"MULTIPLE_{kind.upper()}S_PER_ROW",
                        message=f"Row L{row + 1} has {len(names)} {kind}s: {', '.join(names)}",
                        suggestion=f"Split the step so each row has at most one {kind}",
                    )
                )
        return issues


def validate_process(process: BusinessProcess, strict: bool = False) -> ProcessValidationResult:
    """Convenience function to validate a process."""
    return ProcessValidator(strict=strict).validate(process)
