"""Парсинг импортов Solidity и резолв их в пути файлов."""

import os
import logging
from typing import cast
from tree_sitter_language_pack import get_parser, SupportedLanguage

from solidity_analyzer.constants import LANGUAGE_MAP
from .config import BatchingConfig

logger = logging.getLogger(__name__)


class ImportParser:
    """Извлечение путей импорта из AST Solidity."""

    def __init__(self):
        self._parser = get_parser(cast(SupportedLanguage, LANGUAGE_MAP["sol"]))

    def extract_imports(self, content: str) -> list[str]:
        """
        Извлечь пути всех директив import в порядке следования.

        Поддерживаются формы `import "./A.sol";`, `import "./A.sol" as A;`,
        `import {X} from "./A.sol";` и `import * as A from "./A.sol";`.
        """
        tree = self._parser.parse(bytes(content, "utf8"))
        sources = []

        # Обход в глубину с явным стеком, дети в исходном порядке
        stack = [tree.root_node]
        while stack:
            n = stack.pop()

            if n.type == "import_directive":
                source = n.child_by_field_name("source") or next(
                    (c for c in n.children if c.type == "string"), None
                )
                if source is not None and source.text:
                    sources.append(source.text.decode("utf8", "replace").strip("\"'"))
                continue

            stack.extend(reversed(n.children))

        return sources


class ImportResolver:
    """Резолв импортов файла в абсолютные пути внутри проекта."""

    def __init__(
        self,
        root_path: str,
        config: BatchingConfig,
        parser: ImportParser | None = None,
    ):
        self.root_path = os.path.abspath(root_path)
        self.config = config
        self.parser = parser if parser is not None else ImportParser()

    def resolve(self, content: str, file_path: str) -> list[str]:
        """
        Вернуть упорядоченный список абсолютных путей, импортируемых файлом.

        Пакетные импорты (`@openzeppelin/...`) и пути без расширения .sol
        пропускаются; некорректные пути не считаются ошибкой.
        """
        file_path = os.path.abspath(file_path)
        resolved: list[str] = []

        for import_path in self.parser.extract_imports(content):
            target = self.resolve_import_path(import_path, file_path)
            if target and target not in resolved:
                resolved.append(target)

        return resolved

    def resolve_import_path(self, import_path: str, current_file: str) -> str | None:
        """Резолвить путь импорта в путь к файлу."""
        if not import_path or "\x00" in import_path:
            logger.debug(f"[Imports] Skipping malformed import in {current_file}: {import_path!r}")
            return None

        if not import_path.endswith(self.config.file_extensions):
            return None

        # Ремаппинги: побеждает самый длинный совпавший префикс
        for alias in sorted(self.config.remappings, key=len, reverse=True):
            if import_path.startswith(alias):
                resolved = self.config.remappings[alias] + import_path[len(alias):]
                return os.path.normpath(os.path.join(self.root_path, resolved))

        # Внешний пакет
        if import_path.startswith(self.config.package_prefixes):
            return None

        # Путь относительно каталога импортирующего файла
        current_dir = os.path.dirname(os.path.abspath(current_file))
        return os.path.normpath(os.path.join(current_dir, import_path))
