"""Модели данных для пакетной отправки."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SourceFile:
    """Снимок исходного файла на момент анализа."""

    path: str  # абсолютный путь
    relative_path: str
    text: str


@dataclass(frozen=True)
class FileGroup:
    """Компонента связности графа импортов."""

    files: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.files)

    def __contains__(self, path: str) -> bool:
        return path in self.files


@dataclass
class AnalysisBundle:
    """Бандл {относительный путь: текст} для одного запроса к сервису."""

    files: dict[str, str] = field(default_factory=dict)

    def add(self, source: SourceFile) -> None:
        self.files[source.relative_path] = source.text

    def to_payload(self) -> dict:
        return {"code": {path: {"content": text} for path, text in self.files.items()}}

    def __len__(self) -> int:
        return len(self.files)


@dataclass
class ImportClosure:
    """Транзитивное замыкание импортов одного файла."""

    files: list[SourceFile]
    visited: set[str]
