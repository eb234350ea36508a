"""Конфигурация для пакетной отправки файлов."""

from dataclasses import dataclass, field

from solidity_analyzer.constants import LANGUAGE_MAP, PACKAGE_PREFIXES, VENDOR_DIR


@dataclass
class BatchingConfig:
    """Конфигурация обхода проекта и разбиения на группы."""

    # Расширения файлов для анализа
    file_extensions: tuple[str, ...] = tuple(f".{ext}" for ext in LANGUAGE_MAP.keys())

    # Каталоги сторонних зависимостей
    vendor_dirs: tuple[str, ...] = (VENDOR_DIR,)
    analyze_node_modules: bool = False

    # Импорты с такими префиксами считаются пакетами и не резолвятся
    package_prefixes: tuple[str, ...] = PACKAGE_PREFIXES

    # Ремаппинги импортов: префикс -> каталог относительно корня проекта
    remappings: dict[str, str] = field(default_factory=dict)
