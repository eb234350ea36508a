"""Главный сервис пакетного анализа (фасад)."""

import os
import logging
from collections import Counter
from contextlib import contextmanager
from typing import Iterable

from solidity_analyzer.config import Config
from solidity_analyzer.errors import (
    AllGroupsFailedError,
    AnalysisBusyError,
    NoActiveFileError,
    NoSourceFilesError,
    NotSourceFileError,
    SubmissionError,
    WorkspaceNotFoundError,
)
from solidity_analyzer.services.api_client import AnalyzerClient
from solidity_analyzer.services.models import AnalysisResult
from solidity_analyzer.services.normalizer import ResultNormalizer
from solidity_analyzer.services.submission_tracker import SubmissionTracker
from .models import AnalysisBundle
from .sources import DiskTextProvider, TextProvider, load_source
from .file_scanner import FileScanner
from .import_parser import ImportResolver
from .dependency_graph import DependencyGraph
from .partitioner import partition
from .import_closure import collect_import_closure

module_logger = logging.getLogger(__name__)


class AnalysisService:
    """Сервис для отправки исходников проекта в анализатор группами."""

    def __init__(
        self,
        config: Config,
        client: AnalyzerClient,
        text_provider: TextProvider | None = None,
        logger: logging.Logger | None = None,
    ):
        self.config = config
        self.client = client
        self.root_path = os.path.abspath(config.workspace_path)
        self.batching_config = config.batching_config()
        self.text_provider = (
            text_provider if text_provider is not None else DiskTextProvider()
        )
        self.logger = logger if logger is not None else module_logger

        self.resolver = ImportResolver(self.root_path, self.batching_config)
        self.tracker = SubmissionTracker()

        self._in_flight = False

    async def analyze_all(self) -> AnalysisResult:
        """
        Проанализировать все файлы проекта по группам зависимостей.

        Группы отправляются последовательно, результаты добавляются в порядке
        групп. Упавшая группа логируется и пропускается.

        Raises:
            NoSourceFilesError: в проекте нет Solidity-файлов
            AllGroupsFailedError: ни одна группа не была обработана
        """
        with self._exclusive():
            self._check_workspace()
            self.tracker = SubmissionTracker()
            normalizer = ResultNormalizer(enable_linting=self.config.enable_linting)

            files = FileScanner(self.root_path, self.batching_config).scan()
            if not files:
                self.logger.warning("No Solidity files found in the workspace")
                raise NoSourceFilesError("No Solidity files found in the workspace.")

            graph = DependencyGraph(self.resolver)
            graph.build(files, self.text_provider.read_text)
            groups = partition(graph)

            result = AnalysisResult()

            for i, group in enumerate(groups, 1):
                self.logger.info(
                    f"[Batch] Analyzing file group {i}/{len(groups)} with {len(group)} files"
                )

                bundle = self._build_bundle(group.files)
                if not bundle:
                    self.logger.warning(f"[Batch] Skipping empty file group {i}")
                    self.tracker.add_skipped()
                    continue

                try:
                    group_result = await self._submit_and_normalize(bundle, normalizer)
                except SubmissionError as e:
                    # Остальные группы продолжают обрабатываться
                    self.logger.warning(f"[Batch] Error analyzing file group {i}: {e}")
                    self.tracker.add_failure()
                    continue

                result.extend(group_result)

            if not self.tracker.succeeded:
                raise AllGroupsFailedError(
                    f"All {len(groups)} file groups failed to analyze."
                )

            return result

    async def analyze_current(self, active_file: str | None = None) -> AnalysisResult:
        """
        Проанализировать один файл вместе с транзитивными импортами.

        Args:
            active_file: путь к активному файлу; по умолчанию из конфигурации

        Raises:
            NoActiveFileError, NotSourceFileError, WorkspaceNotFoundError
            SubmissionError: сервис не обработал бандл
        """
        with self._exclusive():
            path = active_file or self.config.active_file
            if not path:
                self.logger.error("No active editor found")
                raise NoActiveFileError("No active editor found.")

            self._check_workspace()

            if not path.endswith(self.batching_config.file_extensions):
                self.logger.error(f"Active file is not a Solidity file: {path}")
                raise NotSourceFileError("The document is not a Solidity file.")

            path = os.path.abspath(path)
            try:
                seed = load_source(self.root_path, path, self.text_provider)
            except (OSError, UnicodeDecodeError) as e:
                raise NoActiveFileError(f"Cannot read active file {path}: {e}") from e

            self.logger.info(f"Analyzing Solidity document: {seed.relative_path}")
            self.tracker = SubmissionTracker()

            closure = collect_import_closure(
                seed, self.root_path, self.resolver, self.text_provider
            )
            bundle = AnalysisBundle()
            for source in closure.files:
                bundle.add(source)

            self.logger.debug(f"Finished processing imports, total files: {len(bundle)}")

            normalizer = ResultNormalizer(enable_linting=self.config.enable_linting)
            try:
                return await self._submit_and_normalize(bundle, normalizer)
            except SubmissionError:
                self.tracker.add_failure()
                raise

    async def _submit_and_normalize(
        self, bundle: AnalysisBundle, normalizer: ResultNormalizer
    ) -> AnalysisResult:
        """Отправить бандл и нормализовать ответ."""
        response = await self.client.submit(bundle)
        self.tracker.add_submission(bundle.files)

        result = normalizer.normalize(response)
        self.logger.info(
            f"Analysis complete: found {len(result.vulnerabilities)} vulnerabilities"
        )

        if result.linter_results:
            self.logger.info(
                f"Linting complete: found {len(result.linter_results)} issues"
            )
            by_file = Counter(f.primary_file for f in result.linter_results)
            self.logger.debug(f"Linter issues by file: {dict(by_file)}")

        return result

    def _build_bundle(self, files: Iterable[str]) -> AnalysisBundle:
        """Собрать бандл группы; нечитаемые файлы пропускаются."""
        bundle = AnalysisBundle()

        for file_path in files:
            try:
                bundle.add(load_source(self.root_path, file_path, self.text_provider))
            except (OSError, UnicodeDecodeError) as e:
                self.logger.warning(f"[Batch] Failed to open file: {file_path}: {e}")

        return bundle

    def _check_workspace(self) -> None:
        if not os.path.isdir(self.root_path):
            self.logger.error(f"No workspace folder opened: {self.root_path}")
            raise WorkspaceNotFoundError(
                "Please open a workspace folder containing the Solidity files."
            )

    @contextmanager
    def _exclusive(self):
        """Второй запуск во время текущего отклоняется."""
        if self._in_flight:
            raise AnalysisBusyError("An analysis is already running.")

        self._in_flight = True
        try:
            yield
        finally:
            self._in_flight = False
