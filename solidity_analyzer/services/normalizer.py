"""Нормализация сырых ответов сервиса в единый список находок."""

import itertools
import json
import logging
import re
from typing import Any, Iterable, TypeVar

from pydantic import BaseModel, ValidationError

from solidity_analyzer.constants import (
    BEST_PRACTICE_RULES,
    SECURITY_RULES,
    STYLE_GUIDE_RULES,
)
from solidity_analyzer.services.api_models import (
    ApiResponse,
    RawLinterRecord,
    RawVulnerability,
)
from solidity_analyzer.services.models import (
    UNKNOWN_FILE,
    AnalysisResult,
    Confidence,
    FileLocation,
    FindingKind,
    LintCategory,
    LintSeverity,
    NormalizedFinding,
    Severity,
)
from solidity_analyzer.services.ranges import coalesce_lines, coalesce_spans

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

# Ссылка на место в описании уязвимости: `contracts/A.sol#10` или `A.sol#10-12`
LOCATION_PATTERN = re.compile(r"([^\s()]+\.sol)#(\d+)(?:-(\d+))?")

# Строка вывода solhint: `  12:5  warning  Message text  rule-id`
LINT_LINE_PATTERN = re.compile(
    r"^\s*(\d+):(\d+)\s+(error|warning|info)\s+(.+?)\s+([\w@/.-]+)\s*$",
    re.IGNORECASE,
)

# Заголовок файла в выводе solhint
LINT_HEADER_PATTERN = re.compile(r"^\s*(\S+\.sol)\s*$")


class ResultNormalizer:
    """Преобразование RawFinding (уязвимости и lint) в NormalizedFinding."""

    def __init__(self, enable_linting: bool = True):
        self.enable_linting = enable_linting
        # Счётчик для находок без id, общий для всех групп запуска
        self._ids = itertools.count(1)

    def normalize(self, response: ApiResponse) -> AnalysisResult:
        """Нормализовать полный ответ сервиса."""
        vulnerabilities = self.normalize_vulnerabilities(response.result or [])

        linter_results = []
        if self.enable_linting and response.linter:
            linter_results = self.normalize_linter(response.linter)

        return AnalysisResult(vulnerabilities=vulnerabilities, linter_results=linter_results)

    # Уязвимости

    def normalize_vulnerabilities(self, items: Iterable[Any]) -> list[NormalizedFinding]:
        raws = _validate_each(RawVulnerability, items, "vulnerability")
        return [self.normalize_vulnerability(raw) for raw in raws]

    def normalize_vulnerability(self, raw: RawVulnerability) -> NormalizedFinding:
        description = raw.description or ""

        locations = self.extract_locations(description)
        if not locations and raw.lines:
            locations = self._group_locations(
                (ref.contract, [(n, n) for n in ref.lines]) for ref in raw.lines
            )

        return NormalizedFinding(
            id=raw.id or f"vuln-{next(self._ids)}",
            kind=FindingKind.VULNERABILITY,
            title=raw.title or raw.check or raw.detector or "Unknown",
            message=description,
            severity=Severity.parse(raw.impact),
            confidence=Confidence.parse(raw.confidence),
            locations=locations,
        )

    def extract_locations(self, description: str) -> list[FileLocation]:
        """
        Извлечь ссылки `file#line[-line]` из описания.

        Ссылки одного файла объединяются и склеиваются в диапазоны.
        """
        refs = []
        for match in LOCATION_PATTERN.finditer(description):
            start = int(match.group(2))
            end = int(match.group(3)) if match.group(3) else start
            refs.append((match.group(1), [(start, end)]))

        return self._group_locations(refs)

    def _group_locations(
        self, refs: Iterable[tuple[str, list[tuple[int, int]]]]
    ) -> list[FileLocation]:
        """Сгруппировать пары (start, end) по файлам (в порядке первого упоминания)."""
        by_file: dict[str, list[tuple[int, int]]] = {}
        for file, spans in refs:
            by_file.setdefault(file, []).extend(spans)

        return [
            FileLocation(file=file, ranges=tuple(coalesce_spans(spans)))
            for file, spans in by_file.items()
        ]

    # Линтер

    def normalize_linter(
        self, linter: str | list[Any] | dict[str, Any]
    ) -> list[NormalizedFinding]:
        if isinstance(linter, dict):
            results = linter.get("results")
            records = self._validate_records(results if isinstance(results, list) else [])
        elif isinstance(linter, list):
            records = self._validate_records(linter)
        else:
            records = self._records_from_text(linter)

        return [self.normalize_lint_record(record) for record in records]

    def _records_from_text(self, text: str) -> list[RawLinterRecord]:
        """Текст бывает JSON-массивом записей или выводом solhint."""
        stripped = text.strip()
        if stripped.startswith(("[", "{")):
            try:
                data = json.loads(stripped)
            except ValueError:
                logger.debug("[Normalizer] Linter output is not JSON, parsing as text")
            else:
                if isinstance(data, dict):
                    data = data.get("results", [])
                if isinstance(data, list):
                    return self._validate_records(data)

        return self.parse_linter_text(text)

    def _validate_records(self, items: Iterable[Any]) -> list[RawLinterRecord]:
        return _validate_each(RawLinterRecord, items, "linter record")

    def parse_linter_text(self, text: str) -> list[RawLinterRecord]:
        """
        Разобрать текстовый вывод линтера построчно.

        Строка-заголовок с путём к файлу задаёт текущий файл для
        следующих записей. Строки, не подходящие под шаблон, пропускаются.
        """
        records = []
        current_file = None

        for line in text.splitlines():
            match = LINT_LINE_PATTERN.match(line)
            if match:
                records.append(
                    RawLinterRecord(
                        line=int(match.group(1)),
                        column=int(match.group(2)),
                        severity=match.group(3).lower(),
                        message=match.group(4),
                        rule_id=match.group(5),
                        file_path=current_file,
                    )
                )
                continue

            header = LINT_HEADER_PATTERN.match(line)
            if header:
                current_file = header.group(1)

        return records

    def normalize_lint_record(self, record: RawLinterRecord) -> NormalizedFinding:
        lint_severity = LintSeverity.parse(record.severity)
        file = record.file_path or UNKNOWN_FILE

        if record.line is not None and record.line >= 1:
            ranges = tuple(coalesce_lines([record.line]))
        else:
            ranges = ()

        return NormalizedFinding(
            id=f"lint-{next(self._ids)}",
            kind=FindingKind.LINT,
            title=record.rule_id or "lint",
            message=record.message or "",
            severity=lint_severity.to_severity(),
            confidence=Confidence.UNKNOWN,
            locations=[FileLocation(file=file, ranges=ranges)],
            rule_id=record.rule_id,
            category=LintCategory.parse(record.category) or infer_category(record.rule_id),
            lint_severity=lint_severity,
            column=record.column,
        )


def infer_category(rule_id: str | None) -> LintCategory:
    """Категория правила solhint по его идентификатору."""
    if not rule_id:
        return LintCategory.MISCELLANEOUS
    if rule_id.startswith("gas-"):
        return LintCategory.GAS_CONSUMPTION
    if rule_id in SECURITY_RULES:
        return LintCategory.SECURITY
    if rule_id in BEST_PRACTICE_RULES:
        return LintCategory.BEST_PRACTICE
    if rule_id in STYLE_GUIDE_RULES:
        return LintCategory.STYLE_GUIDE
    return LintCategory.MISCELLANEOUS


def _validate_each(model: type[RecordT], items: Iterable[Any], label: str) -> list[RecordT]:
    """Провалидировать записи по одной; битые записи пропускаются с предупреждением."""
    records = []
    for i, item in enumerate(items):
        if isinstance(item, model):
            records.append(item)
            continue
        try:
            records.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(
                f"[Normalizer] Skipping malformed {label} #{i}: {e.error_count()} validation error(s)"
            )
            logger.debug(f"[Normalizer] {e}")
    return records
