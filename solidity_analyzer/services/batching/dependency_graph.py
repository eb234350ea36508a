"""Построение графа импортов между файлами проекта."""

import logging
from typing import Callable, Iterable

from .import_parser import ImportResolver

logger = logging.getLogger(__name__)


class DependencyGraph:
    """Ориентированный граф: файл -> файлы, которые он импортирует."""

    def __init__(self, resolver: ImportResolver):
        self.resolver = resolver
        self._graph: dict[str, list[str]] = {}
        self._reverse: dict[str, list[str]] = {}

    def build(self, files: Iterable[str], read_text: Callable[[str], str]) -> None:
        """
        Построить граф по набору найденных файлов.

        Args:
            files: абсолютные пути найденных файлов
            read_text: функция чтения текста файла
        """
        logger.info("[Graph] Building dependency graph...")

        self._graph = {}
        self._reverse = {}
        self._create_nodes(files)
        self._create_edges(read_text)

        logger.info(f"[Graph] Built with {len(self._graph)} nodes, {self.edge_count} edges")

    def _create_nodes(self, files: Iterable[str]) -> None:
        """Создать узлы графа, у каждого файла есть запись."""
        for file_path in files:
            self._graph.setdefault(file_path, [])
            self._reverse.setdefault(file_path, [])

    def _create_edges(self, read_text: Callable[[str], str]) -> None:
        """Создать рёбра графа из импортов."""
        for file_path in list(self._graph):
            try:
                content = read_text(file_path)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"[Graph] Failed to analyze imports in {file_path}: {e}")
                continue

            for target in self.resolver.resolve(content, file_path):
                # Импорты за пределы найденного набора отбрасываем
                if target in self._graph:
                    self.add_edge(file_path, target)

    def add_edge(self, source: str, target: str) -> None:
        """Добавить ребро source -> target (идемпотентно)."""
        deps = self._graph.setdefault(source, [])
        self._reverse.setdefault(source, [])
        self._graph.setdefault(target, [])
        dependents = self._reverse.setdefault(target, [])

        if target not in deps:
            deps.append(target)
            dependents.append(source)

    def dependencies(self, path: str) -> list[str]:
        """Файлы, которые импортирует path."""
        return list(self._graph.get(path, []))

    def dependents(self, path: str) -> list[str]:
        """Файлы, которые импортируют path."""
        return list(self._reverse.get(path, []))

    def nodes(self) -> list[str]:
        return list(self._graph)

    @property
    def edge_count(self) -> int:
        return sum(len(deps) for deps in self._graph.values())

    def __contains__(self, path: str) -> bool:
        return path in self._graph

    def __len__(self) -> int:
        return len(self._graph)
