"""Поиск Solidity-файлов с поддержкой gitignore."""

import os
import logging
from pathlib import Path
import pathspec

from .config import BatchingConfig

logger = logging.getLogger(__name__)


class FileScanner:
    """Сканирование файлов проекта с учётом .gitignore и node_modules."""

    def __init__(self, root_path: str, config: BatchingConfig):
        self.root_path = os.path.abspath(root_path)
        self.config = config
        self._gitignore_spec = self._load_gitignore()

    def _load_gitignore(self) -> pathspec.PathSpec | None:
        """Загрузить .gitignore."""
        gitignore_path = Path(self.root_path) / ".gitignore"
        if not gitignore_path.exists():
            return None

        with open(gitignore_path) as f:
            return pathspec.PathSpec.from_lines("gitwildmatch", f)

    def scan(self) -> list[str]:
        """
        Сканировать проект и вернуть список файлов для анализа.

        Returns:
            Отсортированный список абсолютных путей к файлам
        """
        logger.info("[Scanner] Finding Solidity files in workspace...")
        files = []

        for root, dirs, filenames in os.walk(self.root_path):
            rel_root = Path(os.path.relpath(root, self.root_path)).as_posix()

            # Фильтруем директории
            dirs[:] = self._filter_directories(dirs, rel_root)

            # Собираем подходящие файлы
            for filename in filenames:
                if self._should_include_file(filename, rel_root):
                    files.append(os.path.join(root, filename))

        files.sort()
        logger.info(f"[Scanner] Found {len(files)} files")
        return files

    def _filter_directories(self, dirs: list[str], rel_root: str) -> list[str]:
        """Фильтровать директории по .gitignore и списку vendor-каталогов."""
        # Всегда исключаем .git (служебная папка)
        filtered = [d for d in dirs if d != ".git"]

        if not self.config.analyze_node_modules:
            filtered = [d for d in filtered if d not in self.config.vendor_dirs]

        # Остальное фильтруем по .gitignore
        if self._gitignore_spec:
            filtered = [
                d
                for d in filtered
                if not self._gitignore_spec.match_file(self._join(rel_root, d) + "/")
            ]

        return filtered

    def _should_include_file(self, filename: str, rel_root: str) -> bool:
        """Проверить, нужно ли включать файл в анализ."""
        # Проверка расширения
        if not filename.endswith(self.config.file_extensions):
            return False

        # Проверка .gitignore
        if self._gitignore_spec:
            if self._gitignore_spec.match_file(self._join(rel_root, filename)):
                return False

        return True

    @staticmethod
    def _join(rel_root: str, name: str) -> str:
        return name if rel_root == "." else f"{rel_root}/{name}"
