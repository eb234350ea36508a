"""Контракт ответа сервиса анализа (валидация на границе)."""

from typing import Any, Dict, Optional, List, Union
from pydantic import BaseModel, ConfigDict, Field


class RawLineRef(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    contract: str
    lines: List[int] = Field(default_factory=list)


class RawVulnerability(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: Optional[str] = None
    check: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    impact: Optional[str] = None
    confidence: Optional[str] = None
    category: Optional[str] = None
    function: Optional[str] = None
    detector: Optional[str] = None
    lines: Optional[List[RawLineRef]] = None


class RawLinterRecord(BaseModel):
    model_config = ConfigDict(
        extra="ignore", populate_by_name=True, coerce_numbers_to_str=True
    )

    line: Optional[int] = None
    column: Optional[int] = None
    severity: Optional[Union[int, str]] = None
    message: Optional[str] = None
    rule_id: Optional[str] = Field(default=None, alias="ruleId")
    file_path: Optional[str] = Field(default=None, alias="filePath")
    category: Optional[str] = None


class ApiResponse(BaseModel):
    """
    Ответ сервиса: `{result: [...], linter: ...}`.

    Здесь проверяется только форма верхнего уровня. Отдельные записи
    валидируются в нормализаторе, битая запись пропускается и не
    роняет остальной ответ.

    linter бывает строкой (вывод solhint или JSON-текст), массивом
    записей или объектом с полем results.
    """

    model_config = ConfigDict(extra="ignore")

    result: Optional[List[Any]] = None
    linter: Optional[Union[List[Any], Dict[str, Any], str]] = None
    success: Optional[Any] = None
    error: Optional[Any] = None
