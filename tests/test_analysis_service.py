"""End-to-end tests for batch submission through a stubbed analysis service."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from solidity_analyzer.errors import (
    AllGroupsFailedError,
    AnalysisBusyError,
    NoActiveFileError,
    NoSourceFilesError,
    NotSourceFileError,
    SubmissionError,
    WorkspaceNotFoundError,
)
from solidity_analyzer.services.batching import BufferTextProvider
from solidity_analyzer.services.batching.service import AnalysisService
from solidity_analyzer.services.models import LineRange

from conftest import contract


def run(coro):
    return asyncio.run(coro)


class SlowClient:
    """Client that yields to the event loop before every submission."""

    def __init__(self, inner):
        self.inner = inner

    async def submit(self, bundle):
        await asyncio.sleep(0)
        return await self.inner.submit(bundle)


def test_analyze_all_single_group_end_to_end(workspace, make_config, recording_service):
    """A.sol imports B.sol: one submission, one finding located at A.sol 10-12."""
    root = workspace({"A.sol": contract("A", "./B.sol"), "B.sol": contract("B")})
    service_stub = recording_service(
        lambda body: httpx.Response(
            200,
            json={
                "result": [
                    {
                        "check": "reentrancy",
                        "impact": "High",
                        "confidence": "Medium",
                        "description": "Reentrancy in A.withdraw (A.sol#10-12)",
                    }
                ],
                "linter": "",
            },
        )
    )
    service = AnalysisService(make_config(root), service_stub.client())

    result = run(service.analyze_all())

    assert len(service_stub.requests) == 1
    assert sorted(service_stub.bodies[0]["code"]) == ["A.sol", "B.sol"]
    assert service_stub.bodies[0]["code"]["B.sol"]["content"] == contract("B")
    assert service_stub.requests[0].headers["X-API-KEY"] == "test-key"

    [finding] = result.vulnerabilities
    assert [(loc.file, list(loc.ranges)) for loc in finding.locations] == [
        ("A.sol", [LineRange(10, 12)])
    ]
    assert result.linter_results == []


def test_analyze_all_one_request_per_group(workspace, make_config, recording_service):
    root = workspace(
        {
            "a/A.sol": contract("A", "./B.sol"),
            "a/B.sol": contract("B"),
            "c/C.sol": contract("C"),
            "node_modules/pkg/P.sol": contract("P"),
        }
    )
    service_stub = recording_service()
    service = AnalysisService(make_config(root), service_stub.client())

    run(service.analyze_all())

    bundles = [sorted(body["code"]) for body in service_stub.bodies]
    assert bundles == [["a/A.sol", "a/B.sol"], ["c/C.sol"]]
    assert service.tracker.get_summary()["submitted_groups"] == 2


def test_analyze_all_tolerates_failing_group(workspace, make_config, recording_service):
    """A failing group is skipped; the others still contribute findings."""
    root = workspace({"A.sol": contract("A"), "B.sol": contract("B")})

    def reply(body):
        if "A.sol" in body["code"]:
            return httpx.Response(500)
        return httpx.Response(200, json={"result": [{"check": "x", "description": "B.sol#2"}]})

    service_stub = recording_service(reply)
    service = AnalysisService(make_config(root), service_stub.client())

    result = run(service.analyze_all())

    assert len(service_stub.requests) == 2
    assert [f.primary_file for f in result.vulnerabilities] == ["B.sol"]
    summary = service.tracker.get_summary()
    assert summary["failed_groups"] == 1
    assert summary["submitted_groups"] == 1


def test_analyze_all_every_group_failing(workspace, make_config, recording_service):
    root = workspace({"A.sol": contract("A"), "B.sol": contract("B")})
    service_stub = recording_service(lambda body: httpx.Response(503))
    service = AnalysisService(make_config(root), service_stub.client())

    with pytest.raises(AllGroupsFailedError):
        run(service.analyze_all())


def test_analyze_all_without_files(workspace, make_config, recording_service):
    root = workspace({"README.md": "nothing here"})
    service_stub = recording_service()
    service = AnalysisService(make_config(root), service_stub.client())

    with pytest.raises(NoSourceFilesError):
        run(service.analyze_all())
    assert service_stub.requests == []


def test_analyze_all_merges_lint_results_in_group_order(workspace, make_config, recording_service):
    root = workspace({"A.sol": contract("A"), "B.sol": contract("B")})

    def reply(body):
        [name] = body["code"]
        return httpx.Response(
            200,
            json={"result": [], "linter": f"{name}\n  1:1  warning  Problem  no-empty-blocks\n"},
        )

    service = AnalysisService(make_config(root), recording_service(reply).client())

    result = run(service.analyze_all())

    assert [f.primary_file for f in result.linter_results] == ["A.sol", "B.sol"]


def test_analyze_current_cycle_bundles_each_file_once(workspace, make_config, recording_service):
    root = workspace(
        {
            "A.sol": contract("A", "./B.sol"),
            "B.sol": contract("B", "./A.sol"),
            "Unrelated.sol": contract("Unrelated"),
        }
    )
    service_stub = recording_service()
    service = AnalysisService(make_config(root), service_stub.client())

    run(service.analyze_current(str(root / "A.sol")))
    run(service.analyze_current(str(root / "A.sol")))

    assert len(service_stub.requests) == 2
    for body in service_stub.bodies:
        assert sorted(body["code"]) == ["A.sol", "B.sol"]


def test_analyze_current_uses_unsaved_buffer(workspace, make_config, recording_service):
    root = workspace({"A.sol": contract("A"), "B.sol": contract("B")})
    edited = contract("A", "./B.sol") + "// unsaved edit\n"
    provider = BufferTextProvider({str(root / "A.sol"): edited})
    service_stub = recording_service()
    service = AnalysisService(make_config(root), service_stub.client(), text_provider=provider)

    run(service.analyze_current(str(root / "A.sol")))

    code = service_stub.bodies[0]["code"]
    assert code["A.sol"]["content"] == edited
    assert "B.sol" in code


def test_analyze_current_submission_failure_is_fatal(workspace, make_config, recording_service):
    root = workspace({"A.sol": contract("A")})
    service = AnalysisService(
        make_config(root), recording_service(lambda body: httpx.Response(400)).client()
    )

    with pytest.raises(SubmissionError) as excinfo:
        run(service.analyze_current(str(root / "A.sol")))
    assert excinfo.value.status_code == 400


def test_analyze_current_environment_errors(workspace, make_config, recording_service, tmp_path):
    root = workspace({"A.sol": contract("A"), "notes.txt": "x"})
    service = AnalysisService(make_config(root), recording_service().client())

    with pytest.raises(NoActiveFileError):
        run(service.analyze_current())
    with pytest.raises(NotSourceFileError):
        run(service.analyze_current(str(root / "notes.txt")))

    missing_root = AnalysisService(
        make_config(tmp_path / "missing"), recording_service().client()
    )
    with pytest.raises(WorkspaceNotFoundError):
        run(missing_root.analyze_current(str(root / "A.sol")))
    with pytest.raises(WorkspaceNotFoundError):
        run(missing_root.analyze_all())


def test_active_file_from_config(workspace, make_config, recording_service):
    root = workspace({"A.sol": contract("A")})
    service_stub = recording_service()
    config = make_config(root, mode="current", active_file=str(root / "A.sol"))
    service = AnalysisService(config, service_stub.client())

    run(service.analyze_current())

    assert list(service_stub.bodies[0]["code"]) == ["A.sol"]


def test_concurrent_invocation_is_rejected(workspace, make_config, recording_service):
    """A second analysis while one is in flight fails with AnalysisBusyError."""
    root = workspace({"A.sol": contract("A")})
    service = AnalysisService(make_config(root), SlowClient(recording_service().client()))

    async def both():
        return await asyncio.gather(
            service.analyze_all(), service.analyze_all(), return_exceptions=True
        )

    first, second = run(both())

    assert not isinstance(first, Exception)
    assert isinstance(second, AnalysisBusyError)
    # the guard is released afterwards
    run(service.analyze_all())


def test_malformed_records_degrade_instead_of_failing_the_group(
    workspace, make_config, recording_service
):
    """Bad records are dropped individually; the group still counts as submitted."""
    root = workspace({"A.sol": contract("A")})
    service_stub = recording_service(
        lambda body: httpx.Response(
            200,
            json={
                "result": [
                    {"id": 7, "check": "x", "description": "A.sol#3"},
                    {"check": "y", "description": "A.sol#5"},
                ],
                "linter": [
                    {"filePath": "A.sol", "line": 1, "severity": 1, "ruleId": "no-console"},
                    {"filePath": "A.sol", "line": "n/a", "severity": 1, "ruleId": "quotes"},
                ],
            },
        )
    )
    service = AnalysisService(make_config(root), service_stub.client())

    result = run(service.analyze_all())

    assert [f.title for f in result.vulnerabilities] == ["x", "y"]
    assert [f.rule_id for f in result.linter_results] == ["no-console"]
    summary = service.tracker.get_summary()
    assert summary["submitted_groups"] == 1
    assert summary["failed_groups"] == 0

    current = run(service.analyze_current(str(root / "A.sol")))
    assert len(current.vulnerabilities) == 2
