"""Shared test fixtures for solidity_analyzer tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from solidity_analyzer.config import Config
from solidity_analyzer.services.api_client import AnalyzerClient

API_URL = "https://analyzer.test/v2/analyze"


def contract(name: str, *imports: str) -> str:
    """Minimal Solidity source importing the given paths."""
    lines = ["// SPDX-License-Identifier: MIT", "pragma solidity ^0.8.0;", ""]
    lines += [f'import "{path}";' for path in imports]
    lines += ["", f"contract {name} {{", "    uint256 public value;", "}", ""]
    return "\n".join(lines)


@pytest.fixture
def workspace(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write {relative path: text} into a temporary workspace and return its root."""

    def _make(files: dict[str, str]) -> Path:
        for rel, text in files.items():
            target = tmp_path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        return tmp_path

    return _make


@pytest.fixture
def make_config() -> Callable[..., Config]:
    def _make(root: Path, **overrides: Any) -> Config:
        values: dict[str, Any] = {
            "workspace_path": str(root),
            "api_url": API_URL,
            "api_key": "test-key",
        }
        values.update(overrides)
        return Config(**values)

    return _make


class RecordingService:
    """Stub analysis service: records requests, replies via a callback."""

    def __init__(self, reply: Callable[[dict], httpx.Response] | None = None):
        self.requests: list[httpx.Request] = []
        self.bodies: list[dict] = []
        self.reply = reply or (lambda body: httpx.Response(200, json={"result": [], "linter": ""}))

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(request)
        self.bodies.append(body)
        return self.reply(body)

    def client(self) -> AnalyzerClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return AnalyzerClient(client=http_client, api_url=API_URL, api_key="test-key")


@pytest.fixture
def recording_service() -> Callable[..., RecordingService]:
    return RecordingService
