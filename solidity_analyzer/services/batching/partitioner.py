"""Разбиение графа импортов на независимые группы файлов."""

import logging

from .models import FileGroup
from .dependency_graph import DependencyGraph

logger = logging.getLogger(__name__)


def partition(graph: DependencyGraph) -> list[FileGroup]:
    """
    Найти компоненты слабой связности графа.

    Ребро A -> B связывает A и B в обе стороны: файл уходит в сервис вместе
    со всем, что он импортирует, и со всем, что импортирует его.
    Обход стартует с наименьшего ещё не посещённого пути, поэтому состав
    и порядок групп не зависят от порядка обнаружения файлов.

    Returns:
        Список FileGroup; каждый файл ровно в одной группе
    """
    visited: set[str] = set()
    groups: list[FileGroup] = []

    for start in sorted(graph.nodes()):
        if start in visited:
            continue

        component = []
        stack = [start]
        visited.add(start)

        while stack:
            node = stack.pop()
            component.append(node)

            for neighbour in graph.dependencies(node) + graph.dependents(node):
                if neighbour not in visited:
                    visited.add(neighbour)
                    stack.append(neighbour)

        groups.append(FileGroup(files=tuple(component)))

    logger.info(f"[Partition] Identified {len(groups)} independent file groups")
    return groups
