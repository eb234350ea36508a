"""Нормализованные модели находок."""

from dataclasses import dataclass, field, asdict
from enum import Enum

UNKNOWN_FILE = "Unknown"


class FindingKind(str, Enum):
    VULNERABILITY = "vulnerability"
    LINT = "lint-issue"


class Severity(str, Enum):
    """Критичность находки. Порядок объявления = порядок сортировки."""

    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    OPTIMIZATION = "Optimization"
    INFORMATIONAL = "Informational"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: str | None) -> "Severity":
        return _parse_label(cls, value, cls.UNKNOWN)

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


class Confidence(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: str | None) -> "Confidence":
        return _parse_label(cls, value, cls.UNKNOWN)


class LintSeverity(str, Enum):
    ERROR = "Error"
    WARNING = "Warning"
    INFO = "Info"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: int | str | None) -> "LintSeverity":
        """Код solhint (2/1/0) или текстовый токен (error/warning/info)."""
        if isinstance(value, bool):
            return cls.UNKNOWN
        if isinstance(value, int):
            return _LINT_CODES.get(value, cls.UNKNOWN)
        if isinstance(value, str) and value.strip().isdigit():
            return _LINT_CODES.get(int(value.strip()), cls.UNKNOWN)
        return _parse_label(cls, value, cls.UNKNOWN)

    def to_severity(self) -> Severity:
        """Ранг lint-находки в общей шкале критичности."""
        return _LINT_TO_SEVERITY[self]


class LintCategory(str, Enum):
    SECURITY = "Security"
    GAS_CONSUMPTION = "Gas Consumption"
    BEST_PRACTICE = "Best Practice"
    STYLE_GUIDE = "Style Guide"
    MISCELLANEOUS = "Miscellaneous"

    @classmethod
    def parse(cls, value: str | None) -> "LintCategory | None":
        if not value:
            return None
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        return cls.MISCELLANEOUS


def _parse_label(enum_cls, value, default):
    if not isinstance(value, str):
        return default
    wanted = value.strip().lower()
    for member in enum_cls:
        if member.value.lower() == wanted:
            return member
    return default


_SEVERITY_RANK = {member: i for i, member in enumerate(Severity)}

_LINT_CODES = {2: LintSeverity.ERROR, 1: LintSeverity.WARNING, 0: LintSeverity.INFO}

_LINT_TO_SEVERITY = {
    LintSeverity.ERROR: Severity.MEDIUM,
    LintSeverity.WARNING: Severity.LOW,
    LintSeverity.INFO: Severity.INFORMATIONAL,
    LintSeverity.UNKNOWN: Severity.UNKNOWN,
}


@dataclass(frozen=True, order=True)
class LineRange:
    """Непрерывный диапазон строк, 1-based, включительно."""

    start: int
    end: int

    def __post_init__(self):
        if self.start < 1 or self.end < self.start:
            raise ValueError(f"Invalid line range: {self.start}-{self.end}")

    def __contains__(self, line: int) -> bool:
        return self.start <= line <= self.end

    def __len__(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True)
class FileLocation:
    """Диапазоны строк одной находки внутри одного файла."""

    file: str
    ranges: tuple[LineRange, ...] = ()

    @property
    def is_unknown(self) -> bool:
        return self.file == UNKNOWN_FILE or not self.ranges

    @property
    def lines(self) -> list[int]:
        return [line for r in self.ranges for line in range(r.start, r.end + 1)]


UNKNOWN_LOCATION = FileLocation(file=UNKNOWN_FILE)


@dataclass
class NormalizedFinding:
    """Уязвимость или замечание линтера после нормализации."""

    id: str
    kind: FindingKind
    title: str
    message: str
    severity: Severity
    confidence: Confidence
    locations: list[FileLocation] = field(default_factory=lambda: [UNKNOWN_LOCATION])

    # Только для lint-находок
    rule_id: str | None = None
    category: LintCategory | None = None
    lint_severity: LintSeverity | None = None
    column: int | None = None

    def __post_init__(self):
        if not self.locations:
            self.locations = [UNKNOWN_LOCATION]

    @property
    def primary_file(self) -> str:
        return self.locations[0].file

    @property
    def files(self) -> list[str]:
        return [loc.file for loc in self.locations if loc.file != UNKNOWN_FILE]

    def to_dict(self) -> dict:
        """Преобразовать в словарь для JSON сериализации."""
        data = asdict(self)
        data["locations"] = [
            {
                "file": loc.file,
                "ranges": [[r.start, r.end] for r in loc.ranges],
            }
            for loc in self.locations
        ]
        return data


@dataclass
class AnalysisResult:
    """Итог одного запуска: уязвимости и замечания линтера."""

    vulnerabilities: list[NormalizedFinding] = field(default_factory=list)
    linter_results: list[NormalizedFinding] = field(default_factory=list)

    def extend(self, other: "AnalysisResult") -> None:
        self.vulnerabilities.extend(other.vulnerabilities)
        self.linter_results.extend(other.linter_results)

    @property
    def total(self) -> int:
        return len(self.vulnerabilities) + len(self.linter_results)

    def to_dict(self) -> dict:
        return {
            "vulnerabilities": [f.to_dict() for f in self.vulnerabilities],
            "linterResults": [f.to_dict() for f in self.linter_results],
        }
