"""Сервис отчёта: фильтрация, сортировка и форматирование находок."""

import logging
from typing import Iterable

from solidity_analyzer.config import Config
from solidity_analyzer.constants import RULE_PRESETS
from solidity_analyzer.services.models import (
    UNKNOWN_FILE,
    AnalysisResult,
    FindingKind,
    NormalizedFinding,
    Severity,
)
from solidity_analyzer.services.ranges import format_ranges

logger = logging.getLogger(__name__)


def sort_findings(findings: Iterable[NormalizedFinding]) -> list[NormalizedFinding]:
    """
    Отсортировать находки: сначала по критичности
    (Critical < High < Medium < Low < Optimization < Informational < Unknown),
    затем по пути файла.
    """
    return sorted(findings, key=lambda f: (f.severity.rank, _file_key(f.primary_file)))


def group_by_file(
    findings: Iterable[NormalizedFinding],
) -> list[tuple[str, list[NormalizedFinding]]]:
    """
    Сгруппировать находки по файлам.

    Находка с несколькими файлами попадает в группу каждого из них.
    Файлы идут в лексикографическом порядке, Unknown в конце.
    """
    groups: dict[str, list[NormalizedFinding]] = {}
    for finding in findings:
        for file in dict.fromkeys(loc.file for loc in finding.locations):
            groups.setdefault(file, []).append(finding)

    return [
        (file, sort_findings(groups[file]))
        for file in sorted(groups, key=_file_key)
    ]


def _file_key(file: str) -> tuple[bool, str]:
    return (file == UNKNOWN_FILE, file)


class FindingFilter:
    """Фильтры отчёта из настроек пользователя."""

    def __init__(
        self,
        severities: Iterable[str] | None = None,
        lint_severities: Iterable[str] = (),
        lint_categories: Iterable[str] = (),
        ignore_rules: Iterable[str] = (),
        ignore_presets: Iterable[str] = (),
    ):
        self.severities = {Severity.parse(s) for s in severities} if severities is not None else None
        self.lint_severities = {s.lower() for s in lint_severities}
        self.lint_categories = {c.lower() for c in lint_categories}
        self.ignored_rules = set(ignore_rules)

        for preset in ignore_presets:
            if preset not in RULE_PRESETS:
                logger.warning(f"[Report] Unknown rule preset ignored: {preset}")
                continue
            self.ignored_rules.update(RULE_PRESETS[preset])

    @classmethod
    def from_config(cls, config: Config) -> "FindingFilter":
        return cls(
            severities=config.filter_severity,
            lint_severities=config.filter_lint_severity,
            lint_categories=config.filter_lint_categories,
            ignore_rules=config.ignore_rules,
            ignore_presets=config.ignore_presets,
        )

    def apply(self, result: AnalysisResult) -> AnalysisResult:
        """Вернуть новый результат только с видимыми находками."""
        filtered = AnalysisResult(
            vulnerabilities=[f for f in result.vulnerabilities if self.keep(f)],
            linter_results=[f for f in result.linter_results if self.keep(f)],
        )

        hidden = result.total - filtered.total
        if hidden:
            logger.info(f"[Report] {hidden} findings hidden by filters")

        return filtered

    def keep(self, finding: NormalizedFinding) -> bool:
        if finding.kind == FindingKind.VULNERABILITY:
            # Неизвестная критичность фильтром не скрывается
            if self.severities is None or finding.severity == Severity.UNKNOWN:
                return True
            return finding.severity in self.severities

        if finding.rule_id and finding.rule_id in self.ignored_rules:
            return False
        if self.lint_severities and finding.lint_severity is not None:
            if finding.lint_severity.value.lower() not in self.lint_severities:
                return False
        if self.lint_categories and finding.category is not None:
            if finding.category.value.lower() not in self.lint_categories:
                return False
        return True


class ReportService:
    """Форматирование находок в markdown-отчёт."""

    def format_report(self, result: AnalysisResult, title: str = "Solidity Analysis Report") -> str:
        lines = [f"# {title}", ""]

        lines.extend(self._format_section("Vulnerabilities", result.vulnerabilities))
        lines.extend(self._format_section("Linter Issues", result.linter_results))

        return "\n".join(lines)

    def _format_section(self, name: str, findings: list[NormalizedFinding]) -> list[str]:
        lines = [f"## {name} ({len(findings)})", ""]

        if not findings:
            lines.extend(["No issues found.", ""])
            return lines

        for file, file_findings in group_by_file(findings):
            lines.append(f"### {file}")
            for finding in file_findings:
                lines.extend(self._format_finding(finding, file))
            lines.append("")

        return lines

    def _format_finding(self, finding: NormalizedFinding, file: str) -> list[str]:
        """Одна находка с диапазонами строк внутри файла."""
        ranges = [r for loc in finding.locations if loc.file == file for r in loc.ranges]
        where = f"lines {format_ranges(ranges)}" if ranges else "unknown location"

        if finding.kind == FindingKind.LINT:
            level = finding.lint_severity.value if finding.lint_severity else "Unknown"
            category = finding.category.value if finding.category else "Miscellaneous"
            column = f":{finding.column}" if finding.column and ranges else ""
            return [
                f"- **[{level}]** `{finding.rule_id or finding.title}` ({category}), "
                f"{where}{column}: {finding.message}"
            ]

        header = (
            f"- **[{finding.severity.value}]** {finding.title} "
            f"(confidence: {finding.confidence.value}), {where}"
        )
        body = [f"  {line}" for line in finding.message.strip().splitlines() if line.strip()]
        return [header, *body]
