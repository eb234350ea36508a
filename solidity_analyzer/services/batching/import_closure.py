"""Транзитивное замыкание импортов для анализа одного файла."""

import logging
import os

from .models import ImportClosure, SourceFile
from .import_parser import ImportResolver
from .sources import TextProvider, is_within_root, load_source

logger = logging.getLogger(__name__)


def collect_import_closure(
    seed: SourceFile,
    root_path: str,
    resolver: ImportResolver,
    provider: TextProvider,
) -> ImportClosure:
    """
    Собрать файл и всё, что он транзитивно импортирует.

    Обход в глубину с явным стеком и множеством посещённых путей,
    поэтому циклы импортов завершаются, а каждый файл попадает в
    результат ровно один раз.

    Returns:
        ImportClosure, первым идёт seed
    """
    seed_path = os.path.abspath(seed.path)
    visited = {seed_path}
    files = [seed]
    stack = [seed]

    while stack:
        current = stack.pop()

        for target in resolver.resolve(current.text, current.path):
            if target in visited:
                continue
            visited.add(target)

            if not is_within_root(root_path, target):
                logger.debug(f"[Closure] Import outside workspace skipped: {target}")
                continue

            try:
                source = load_source(root_path, target, provider)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"[Closure] Failed to open import file {target}: {e}")
                continue

            files.append(source)
            stack.append(source)
            logger.debug(f"[Closure] Added imported file: {source.relative_path}")

    return ImportClosure(files=files, visited=visited)
