"""Tests for finding ordering, filters, report formatting and highlight planning."""

from __future__ import annotations

from solidity_analyzer.services.decorations import DecorationPlanner, paths_match
from solidity_analyzer.services.models import (
    UNKNOWN_LOCATION,
    AnalysisResult,
    Confidence,
    FileLocation,
    FindingKind,
    LineRange,
    LintCategory,
    LintSeverity,
    NormalizedFinding,
    Severity,
)
from solidity_analyzer.services.ranges import coalesce_lines
from solidity_analyzer.services.report_service import (
    FindingFilter,
    ReportService,
    group_by_file,
    sort_findings,
)


def vuln(id: str, severity: Severity, file: str = "A.sol", lines=(1,)) -> NormalizedFinding:
    return NormalizedFinding(
        id=id,
        kind=FindingKind.VULNERABILITY,
        title=f"check-{id}",
        message=f"description of {id}",
        severity=severity,
        confidence=Confidence.HIGH,
        locations=[FileLocation(file=file, ranges=tuple(coalesce_lines(lines)))],
    )


def lint(id: str, rule: str, level: LintSeverity, category: LintCategory, file: str = "A.sol") -> NormalizedFinding:
    return NormalizedFinding(
        id=id,
        kind=FindingKind.LINT,
        title=rule,
        message=f"message {id}",
        severity=level.to_severity(),
        confidence=Confidence.UNKNOWN,
        locations=[FileLocation(file=file, ranges=(LineRange(3, 3),))],
        rule_id=rule,
        category=category,
        lint_severity=level,
        column=1,
    )


def test_sort_by_severity():
    """Low, Critical, Medium render as Critical, Medium, Low."""
    findings = [vuln("1", Severity.LOW), vuln("2", Severity.CRITICAL), vuln("3", Severity.MEDIUM)]

    assert [f.severity for f in sort_findings(findings)] == [
        Severity.CRITICAL,
        Severity.MEDIUM,
        Severity.LOW,
    ]


def test_sort_full_order_unknown_last_then_file():
    findings = [
        vuln("u", Severity.UNKNOWN),
        vuln("i", Severity.INFORMATIONAL),
        vuln("o", Severity.OPTIMIZATION),
        vuln("h2", Severity.HIGH, file="b/Z.sol"),
        vuln("h1", Severity.HIGH, file="a/Z.sol"),
    ]

    assert [f.id for f in sort_findings(findings)] == ["h1", "h2", "o", "i", "u"]


def test_group_by_file_lexicographic_unknown_last():
    multi = vuln("m", Severity.LOW)
    multi.locations = [
        FileLocation("b.sol", (LineRange(1, 1),)),
        FileLocation("a.sol", (LineRange(2, 2),)),
    ]
    nowhere = vuln("n", Severity.HIGH)
    nowhere.locations = [UNKNOWN_LOCATION]
    findings = [multi, vuln("c", Severity.CRITICAL, file="b.sol"), nowhere]

    grouped = group_by_file(findings)

    assert [file for file, _ in grouped] == ["a.sol", "b.sol", "Unknown"]
    assert [f.id for f in grouped[1][1]] == ["c", "m"]


def test_filter_severity_and_ignored_rules():
    result = AnalysisResult(
        vulnerabilities=[
            vuln("1", Severity.HIGH),
            vuln("2", Severity.INFORMATIONAL),
            vuln("3", Severity.UNKNOWN),
        ],
        linter_results=[
            lint("a", "quotes", LintSeverity.WARNING, LintCategory.STYLE_GUIDE),
            lint("b", "no-console", LintSeverity.WARNING, LintCategory.BEST_PRACTICE),
            lint("c", "avoid-tx-origin", LintSeverity.ERROR, LintCategory.SECURITY),
        ],
    )
    finding_filter = FindingFilter(
        severities=["High", "Critical"],
        ignore_rules=["no-console"],
        ignore_presets=["style-only", "does-not-exist"],
    )

    filtered = finding_filter.apply(result)

    assert [f.id for f in filtered.vulnerabilities] == ["1", "3"]
    assert [f.id for f in filtered.linter_results] == ["c"]


def test_filter_lint_severity_and_category():
    findings = [
        lint("a", "r1", LintSeverity.WARNING, LintCategory.SECURITY),
        lint("b", "r2", LintSeverity.ERROR, LintCategory.SECURITY),
        lint("c", "r3", LintSeverity.ERROR, LintCategory.GAS_CONSUMPTION),
    ]
    finding_filter = FindingFilter(lint_severities=["Error"], lint_categories=["Security"])

    assert [f.id for f in findings if finding_filter.keep(f)] == ["b"]


def test_report_lists_coalesced_ranges():
    result = AnalysisResult(
        vulnerabilities=[vuln("1", Severity.HIGH, file="A.sol", lines=[10, 11, 12, 20])],
        linter_results=[lint("a", "func-visibility", LintSeverity.WARNING, LintCategory.SECURITY)],
    )

    report = ReportService().format_report(result)

    assert "## Vulnerabilities (1)" in report
    assert "### A.sol" in report
    assert "**[High]** check-1 (confidence: High), lines 10-12, 20" in report
    assert "`func-visibility` (Security), lines 3:1: message a" in report


def test_report_empty_sections():
    report = ReportService().format_report(AnalysisResult())
    assert report.count("No issues found.") == 2


def test_decorations_match_report_ranges():
    """Highlight blocks equal the finding's coalesced ranges, one per block."""
    finding = vuln("1", Severity.HIGH, file="contracts/A.sol", lines=[1, 2, 3, 7, 8, 10])

    blocks = DecorationPlanner().plan([finding], "/work/contracts/A.sol", line_count=100)

    assert [b.range for b in blocks] == list(finding.locations[0].ranges)
    assert all(b.finding_id == "1" for b in blocks)


def test_decorations_clip_to_document_and_skip_other_files():
    inside = vuln("1", Severity.HIGH, file="A.sol", lines=[4, 5, 6, 9])
    other = vuln("2", Severity.HIGH, file="BA.sol", lines=[1])
    nowhere = vuln("3", Severity.LOW)
    nowhere.locations = [UNKNOWN_LOCATION]

    blocks = DecorationPlanner().plan([inside, other, nowhere], "/work/A.sol", line_count=5)

    assert [(b.finding_id, b.range) for b in blocks] == [("1", LineRange(4, 5))]


def test_lint_hover_message():
    finding = lint("a", "avoid-tx-origin", LintSeverity.ERROR, LintCategory.SECURITY)
    [block] = DecorationPlanner().plan([finding], "A.sol", line_count=10)

    assert "**Category:** Security | **Severity:** Error" in block.hover_message


def test_paths_match_segment_boundaries():
    assert paths_match("/work/contracts/A.sol", "contracts/A.sol")
    assert paths_match("A.sol", "/work/A.sol")
    assert not paths_match("/work/BA.sol", "A.sol")
