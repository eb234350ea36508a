"""Настройки конфигурации."""

from typing import TYPE_CHECKING, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from solidity_analyzer.constants import DEFAULT_API_URL

if TYPE_CHECKING:
    from solidity_analyzer.services.batching.config import BatchingConfig


class Config(BaseSettings):
    """Конфигурация анализатора."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    # Сервис анализа
    api_url: str = Field(default=DEFAULT_API_URL)
    api_key: str = Field(default="")
    request_timeout_seconds: float = Field(default=120.0)

    # Проект (обязательно)
    workspace_path: str

    # Режим запуска: весь проект или один файл с его импортами
    mode: Literal["all", "current"] = Field(default="all")
    active_file: str = Field(default="")

    # Настройки анализа
    analyze_node_modules: bool = Field(default=False)
    enable_linting: bool = Field(default=True)
    remappings: dict[str, str] = Field(default_factory=dict)

    # Фильтры отчёта
    filter_severity: list[str] = Field(
        default_factory=lambda: [
            "Critical",
            "High",
            "Medium",
            "Low",
            "Informational",
            "Optimization",
        ]
    )
    filter_lint_categories: list[str] = Field(default_factory=list)  # пусто = все
    filter_lint_severity: list[str] = Field(default_factory=list)  # пусто = все
    ignore_rules: list[str] = Field(default_factory=list)
    ignore_presets: list[str] = Field(default_factory=list)

    log_level: Literal["debug", "info", "warn", "warning", "error"] = Field(
        default="info"
    )

    def batching_config(self) -> "BatchingConfig":
        """Конфигурация движка разбиения на группы."""
        from solidity_analyzer.services.batching.config import BatchingConfig

        return BatchingConfig(
            analyze_node_modules=self.analyze_node_modules,
            remappings=dict(self.remappings),
        )
