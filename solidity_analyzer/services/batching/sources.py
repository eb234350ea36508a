"""Чтение исходников: диск или несохранённые буферы редактора."""

import os
from pathlib import Path
from typing import Protocol

from .models import SourceFile


class TextProvider(Protocol):
    def read_text(self, path: str) -> str: ...


class DiskTextProvider:
    """Чтение файлов с диска."""

    def read_text(self, path: str) -> str:
        with open(path, encoding="utf-8") as f:
            return f.read()


class BufferTextProvider:
    """
    Отдаёт текст открытых буферов редактора, остальное читает из fallback.

    Буферы могут содержать несохранённые изменения, поэтому имеют приоритет
    над содержимым на диске.
    """

    def __init__(self, buffers: dict[str, str], fallback: TextProvider | None = None):
        self._buffers = {os.path.abspath(p): text for p, text in buffers.items()}
        self._fallback = fallback if fallback is not None else DiskTextProvider()

    def update(self, path: str, text: str) -> None:
        self._buffers[os.path.abspath(path)] = text

    def read_text(self, path: str) -> str:
        key = os.path.abspath(path)
        if key in self._buffers:
            return self._buffers[key]
        return self._fallback.read_text(key)


def relative_to_root(root: str, path: str) -> str:
    """Путь относительно корня проекта в posix-формате."""
    return Path(os.path.relpath(path, root)).as_posix()


def is_within_root(root: str, path: str) -> bool:
    root_abs = os.path.abspath(root)
    try:
        return os.path.commonpath([root_abs, os.path.abspath(path)]) == root_abs
    except ValueError:
        # разные диски в Windows
        return False


def load_source(root: str, path: str, provider: TextProvider) -> SourceFile:
    """Снять снимок файла. Ошибки чтения (OSError) пробрасываются."""
    return SourceFile(
        path=path,
        relative_path=relative_to_root(root, path),
        text=provider.read_text(path),
    )
