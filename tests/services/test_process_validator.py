"""Unit tests for the optional strict process validator."""

from __future__ import annotations

from process_designer.models.flowchart import FlowEdge, NodeType, RelatedSystem, Report
from process_designer.services.generation_prompt import SAMPLE_MARKDOWN
from process_designer.services.markdown_parser import parse_process_markdown
from process_designer.services.process_validator import (
    ProcessValidator,
    ValidationSeverity,
    validate_process,
)

S, P, D, E = NodeType.START, NodeType.PROCESS, NodeType.DECISION, NodeType.END


def _linear(make_process, rows=(0, 1, 2)):
    return make_process(
        ["A"],
        [("a", S, "Start", 0, rows[0]), ("b", P, "Work", 0, rows[1]), ("c", E, "End", 0, rows[2])],
        [("a", "b", None), ("b", "c", None)],
    )


class TestCleanProcess:
    def test_linear_process_is_valid(self, make_process):
        result = validate_process(_linear(make_process))
        assert result.is_valid is True
        assert result.issues == []

    def test_stats(self, make_process):
        result = validate_process(_linear(make_process))
        assert result.stats["nodes"] == 3
        assert result.stats["edges"] == 2
        assert result.stats["rows"] == 3
        assert result.stats["unreachable_nodes"] == 0

    def test_parsed_minimal_document_is_valid(self):
        process = parse_process_markdown("## Dept\nA\n## Process\n#P1 #L1 A Start\nNext: P2\n#P2 #L2 A End\n")
        assert validate_process(process).is_valid is True

    def test_sample_shared_row_is_reported(self):
        # P5 and P6 share L5 in the sample
        result = validate_process(parse_process_markdown(SAMPLE_MARKDOWN))
        assert "DUPLICATE_ROW" in result.codes()
        assert result.is_valid is False


class TestStructuralErrors:
    def test_no_nodes(self, make_process):
        result = validate_process(make_process(["A"], []))
        assert result.codes() == {"NO_NODES", "UNUSED_SWIMLANE"}
        assert result.is_valid is False

    def test_dangling_edge(self, make_process):
        process = _linear(make_process)
        process.edges.append(FlowEdge(id="bad", source="c", target="ghost"))
        result = validate_process(process)
        assert "DANGLING_EDGE" in result.codes()
        assert result.error_count >= 1

    def test_duplicate_row(self, make_process):
        result = validate_process(_linear(make_process, rows=(0, 1, 1)))
        dup = [i for i in result.issues if i.code == "DUPLICATE_ROW"]
        assert len(dup) == 1
        assert dup[0].severity == ValidationSeverity.ERROR
        assert dup[0].node_id == "c"
        assert "L2" in dup[0].message

    def test_missing_start(self, make_process):
        process = make_process(["A"], [("a", P, "Work", 0, 0), ("b", E, "End", 0, 1)], [("a", "b", None)])
        result = validate_process(process)
        assert "MISSING_START" in result.codes()
        assert "UNREACHABLE_NODE" not in result.codes()


class TestWarnings:
    def test_row_gap(self, make_process):
        result = validate_process(_linear(make_process, rows=(0, 1, 3)))
        gap = next(i for i in result.issues if i.code == "ROW_GAP")
        assert gap.severity == ValidationSeverity.WARNING
        assert "L3" in gap.message
        assert result.is_valid is True

    def test_negative_row_is_gap(self, make_process):
        result = validate_process(_linear(make_process, rows=(-1, 0, 1)))
        assert "ROW_GAP" in result.codes()

    def test_start_without_next(self, make_process):
        process = make_process(["A"], [("a", S, "Start", 0, 0)])
        assert "START_WITHOUT_NEXT" in validate_process(process).codes()

    def test_end_with_next(self, make_process):
        process = _linear(make_process)
        process.edges.append(FlowEdge(id="loop", source="c", target="a"))
        assert "END_WITH_NEXT" in validate_process(process).codes()

    def test_unreachable_node(self, make_process):
        process = make_process(
            ["A"],
            [("a", S, "Start", 0, 0), ("b", E, "End", 0, 1), ("z", E, "Island", 0, 2)],
            [("a", "b", None)],
        )
        result = validate_process(process)
        unreachable = [i for i in result.issues if i.code == "UNREACHABLE_NODE"]
        assert [i.node_id for i in unreachable] == ["z"]
        assert result.stats["unreachable_nodes"] == 1

    def test_decision_without_branches(self, make_process):
        process = make_process(
            ["A"],
            [("a", S, "Start", 0, 0), ("d", D, "Ok?", 0, 1), ("b", E, "End", 0, 2)],
            [("a", "d", None), ("d", "b", None)],
        )
        assert "DECISION_BRANCHES" in validate_process(process).codes()

    def test_decision_with_two_yes(self, make_process):
        process = make_process(
            ["A"],
            [("a", S, "Start", 0, 0), ("d", D, "Ok?", 0, 1), ("b", E, "B", 0, 2), ("c", E, "C", 0, 3)],
            [("a", "d", None), ("d", "b", "YES"), ("d", "c", "YES")],
        )
        assert "DECISION_BRANCHES" in validate_process(process).codes()

    def test_decision_yes_only_is_fine(self, make_process):
        process = make_process(
            ["A"],
            [("a", S, "Start", 0, 0), ("d", D, "Ok?", 0, 1), ("b", E, "B", 0, 2)],
            [("a", "d", None), ("d", "b", "YES")],
        )
        assert "DECISION_BRANCHES" not in validate_process(process).codes()

    def test_unassigned_node(self, make_process):
        process = _linear(make_process)
        process.nodes[1].swimlane_id = ""
        assert "UNASSIGNED_NODE" in validate_process(process).codes()

    def test_unused_swimlane_is_info(self, make_process):
        process = make_process(
            ["A", "Idle"],
            [("a", S, "Start", 0, 0), ("b", E, "End", 0, 1)],
            [("a", "b", None)],
        )
        result = validate_process(process)
        assert result.codes() == {"UNUSED_SWIMLANE"}
        assert result.info_count == 1
        assert result.is_valid is True


class TestRelations:
    def test_multiple_reports_per_row(self, make_process):
        process = _linear(make_process)
        process.reports += [
            Report(id="r1", name="Form", related_node_ids=["b"]),
            Report(id="r2", name="Receipt", related_node_ids=["b", "c"]),
        ]
        issues = [i for i in validate_process(process).issues if i.code == "MULTIPLE_REPORTS_PER_ROW"]
        assert len(issues) == 1
        assert "L2" in issues[0].message

    def test_multiple_systems_per_row(self, make_process):
        process = _linear(make_process)
        process.related_systems += [
            RelatedSystem(id="s1", name="ERP", related_node_ids=["a"]),
            RelatedSystem(id="s2", name="CRM", related_node_ids=["a"]),
        ]
        assert "MULTIPLE_SYSTEMS_PER_ROW" in validate_process(process).codes()

    def test_same_report_twice_on_row_counts_once(self, make_process):
        process = make_process(
            ["A"],
            [("a", S, "Start", 0, 0), ("b", E, "B", 0, 1), ("c", E, "C", 0, 1)],
            [("a", "b", None), ("a", "c", None)],
        )
        process.reports.append(Report(id="r1", name="Form", related_node_ids=["b", "c"]))
        assert "MULTIPLE_REPORTS_PER_ROW" not in validate_process(process).codes()

    def test_dangling_relation(self, make_process):
        process = _linear(make_process)
        process.related_systems.append(RelatedSystem(id="s1", name="ERP", related_node_ids=["ghost"]))
        assert "DANGLING_RELATION" in validate_process(process).codes()


class TestStrictMode:
    def test_warnings_fail_in_strict_mode(self, make_process):
        process = _linear(make_process, rows=(0, 1, 3))
        assert validate_process(process).is_valid is True
        assert validate_process(process, strict=True).is_valid is False

    def test_info_does_not_fail_strict(self, make_process):
        process = make_process(
            ["A", "Idle"],
            [("a", S, "Start", 0, 0), ("b", E, "End", 0, 1)],
            [("a", "b", None)],
        )
        assert ProcessValidator(strict=True).validate(process).is_valid is True


class TestResultSerialization:
    def test_to_dict(self, make_process):
        result = validate_process(_linear(make_process, rows=(0, 1, 3)))
        data = result.to_dict()
        assert data["is_valid"] is True
        assert data["warning_count"] == 1
        assert data["issues"][0]["severity"] == "warning"
        assert data["issues"][0]["code"] == "ROW_GAP"

    def test_summary(self, make_process):
        result = validate_process(make_process(["A"], []))
        assert result.get_summary().startswith("Invalid")
        assert "Errors: 1" in result.get_summary()

    def test_validation_does_not_mutate(self, make_process):
        process = _linear(make_process)
        before = (list(process.nodes), list(process.edges))
        validate_process(process)
        assert (process.nodes, process.edges) == before
