"""Пакетный анализ Solidity-проектов через удалённый сервис."""

__version__ = "0.1.0"
