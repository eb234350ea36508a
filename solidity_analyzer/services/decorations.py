"""Подготовка подсветки находок в редакторе."""

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Iterable

from solidity_analyzer.services.models import FindingKind, LineRange, NormalizedFinding
from solidity_analyzer.services.ranges import coalesce_lines

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decoration:
    """Один блок подсветки: непрерывный диапазон строк одной находки."""

    finding_id: str
    kind: FindingKind
    range: LineRange
    hover_message: str


def paths_match(document_path: str, finding_file: str) -> bool:
    """
    Совпадает ли путь документа с путём из находки.

    Сервис присылает пути относительно корня проекта (или только имя
    файла), поэтому сравниваем по хвосту с границей по сегментам.
    """
    doc = PurePosixPath(document_path.replace("\\", "/")).parts
    ref = PurePosixPath(finding_file.replace("\\", "/")).parts
    if not doc or not ref:
        return False
    shorter, longer = (doc, ref) if len(doc) <= len(ref) else (ref, doc)
    return longer[-len(shorter):] == shorter


class DecorationPlanner:
    """Расчёт блоков подсветки для открытого документа."""

    def plan(
        self,
        findings: Iterable[NormalizedFinding],
        document_path: str,
        line_count: int,
    ) -> list[Decoration]:
        """
        Построить подсветку: один блок на непрерывный диапазон строк.

        Диапазоны пересчитываются тем же склейщиком, что и в отчёте;
        строки за концом документа отбрасываются.
        """
        decorations = []

        for finding in findings:
            hover = self._hover_message(finding)
            for loc in finding.locations:
                if loc.is_unknown or not paths_match(document_path, loc.file):
                    continue

                visible = [line for line in loc.lines if line <= line_count]
                for line_range in coalesce_lines(visible):
                    decorations.append(
                        Decoration(
                            finding_id=finding.id,
                            kind=finding.kind,
                            range=line_range,
                            hover_message=hover,
                        )
                    )

        logger.debug(f"[Decorations] {len(decorations)} blocks for {document_path}")
        return decorations

    def _hover_message(self, finding: NormalizedFinding) -> str:
        if finding.kind == FindingKind.LINT:
            category = finding.category.value if finding.category else "Miscellaneous"
            level = finding.lint_severity.value if finding.lint_severity else "Unknown"
            return (
                f"**{finding.rule_id or finding.title}**\n\n"
                f"**Category:** {category} | **Severity:** {level}\n\n{finding.message}"
            )

        return (
            f"**{finding.title}** ({finding.severity.value}, "
            f"confidence {finding.confidence.value})\n\n{finding.message}"
        )
