"""Пайплайн анализа Solidity-проекта через удалённый сервис."""

import asyncio
import json
import logging
import sys
from pathlib import Path
from datetime import datetime

import httpx

from solidity_analyzer.config import Config
from solidity_analyzer.errors import AnalyzerError
from solidity_analyzer.services.api_client import AnalyzerClient
from solidity_analyzer.services.batching.service import AnalysisService
from solidity_analyzer.services.models import AnalysisResult
from solidity_analyzer.services.report_service import (
    FindingFilter,
    ReportService,
    sort_findings,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class Pipeline:
    """Пайплайн: анализ, фильтрация, сохранение отчёта."""

    def __init__(self, config: Config, http_client: httpx.AsyncClient):
        self.config = config
        self.client = AnalyzerClient(
            client=http_client, api_url=config.api_url, api_key=config.api_key
        )
        self.analysis_service = AnalysisService(config, self.client)
        self.report_service = ReportService()
        self.finding_filter = FindingFilter.from_config(config)

        # Папка для артефактов текущего запуска
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        self.artifacts_dir = Path("__artifacts__") / f"{timestamp}.{config.mode}"

    async def run(self) -> AnalysisResult:
        """Запустить пайплайн."""
        logger.info("╔═══════════════════════════════════════════════════════════╗")
        logger.info("║          SOLIDITY ANALYSIS PIPELINE                       ║")
        logger.info("╚═══════════════════════════════════════════════════════════╝")

        # Шаг 1: Анализ
        if self.config.mode == "current":
            result = await self.analysis_service.analyze_current()
        else:
            result = await self.analysis_service.analyze_all()
        logger.info(
            f"[1/3] Analysis: {len(result.vulnerabilities)} vulnerabilities, "
            f"{len(result.linter_results)} linter issues"
        )

        # Шаг 2: Фильтры и сортировка
        result = self.finding_filter.apply(result)
        result = AnalysisResult(
            vulnerabilities=sort_findings(result.vulnerabilities),
            linter_results=sort_findings(result.linter_results),
        )
        logger.info(f"[2/3] Filtered: {result.total} findings visible")

        # Шаг 3: Сохраняем отчёт
        self.artifacts_dir.mkdir(parents=True, exist_ok=True)
        self._save_file(
            "findings.json", json.dumps(result.to_dict(), ensure_ascii=False, indent=2)
        )
        self._save_file("report.md", self.report_service.format_report(result))
        logger.info(f"[3/3] Report saved to {self.artifacts_dir}\n")

        self._log_submission_summary()

        logger.info("\n✓ Pipeline completed")
        return result

    def _log_submission_summary(self) -> None:
        """Вывести статистику отправок."""
        summary = self.analysis_service.tracker.get_summary()
        logger.info("───────────────────────────────────────────────────────────")
        logger.info(
            f"Groups: {summary['submitted_groups']} submitted | "
            f"{summary['failed_groups']} failed | {summary['skipped_groups']} skipped"
        )
        logger.info(
            f"  ↳ Files: {summary['files_sent']:,} | Bytes: {summary['bytes_sent']:,}"
        )
        logger.info("───────────────────────────────────────────────────────────")

    def _save_file(self, filename: str, content: str) -> None:
        """Сохранить содержимое в файл в папке текущего запуска."""
        file_path = self.artifacts_dir / filename
        file_path.write_text(content, encoding="utf-8")


async def main(config: Config) -> int:
    async with httpx.AsyncClient(timeout=config.request_timeout_seconds) as http_client:
        pipeline = Pipeline(config, http_client)
        try:
            await pipeline.run()
        except AnalyzerError as e:
            logger.error(f"Failed to analyze Solidity code: {e}")
            return 1
    return 0


if __name__ == "__main__":
    config = Config()  # type: ignore[call-arg]  # значения из окружения и .env
    logging.basicConfig(level=LOG_LEVELS[config.log_level], format="%(message)s")
    sys.exit(asyncio.run(main(config)))
