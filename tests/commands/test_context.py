"""Tests for exit code mapping in AppContext."""

from __future__ import annotations

from pathlib import Path

import pytest
from helpers import SlowRule

from manifestlint.commands._context import ExitCode, exit_code_for
from manifestlint.config.models import LintConfig, RunConfig
from manifestlint.rules.registry import Registry
from manifestlint.services.lint import LintService
from manifestlint.services.result import ErrorCode, ServiceResult


def _run(*, cancelled: bool = False, **counts: int) -> ServiceResult:
    full = {"fatal": 0, "error": 0, "warning": 0, "info": 0, **counts}
    return ServiceResult(ok=True, op="run", data={"counts": full, "cancelled": cancelled})


class TestExitCodeFor:
    @pytest.mark.parametrize(
        ("counts", "fail_on_warning", "expected"),
        [
            ({}, False, ExitCode.OK),
            ({"info": 3}, True, ExitCode.OK),
            ({"warning": 1}, False, ExitCode.OK),
            ({"warning": 1}, True, ExitCode.WARNINGS),
            ({"error": 1, "warning": 2}, True, ExitCode.ERROR_FINDINGS),
            ({"fatal": 1, "error": 5}, False, ExitCode.FATAL_FINDINGS),
        ],
    )
    def test_run_results(
        self, counts: dict[str, int], fail_on_warning: bool, expected: ExitCode
    ) -> None:
        assert exit_code_for(_run(**counts), fail_on_warning=fail_on_warning) == expected

    @pytest.mark.parametrize(
        ("counts", "expected"),
        [
            ({}, ExitCode.CANCELLED),
            ({"warning": 2}, ExitCode.CANCELLED),
            ({"error": 1}, ExitCode.ERROR_FINDINGS),
            ({"fatal": 1}, ExitCode.FATAL_FINDINGS),
        ],
    )
    def test_cancelled_run_is_not_ok(self, counts: dict[str, int], expected: ExitCode) -> None:
        assert exit_code_for(_run(cancelled=True, **counts)) == expected

    def test_timed_out_run_exits_nonzero(self, tmp_path: Path) -> None:
        for i in range(40):
            (tmp_path / f"pod-{i:02d}.yaml").write_text(
                f"apiVersion: v1\nkind: Pod\nmetadata:\n  name: p{i:02d}\n", encoding="utf-8"
            )
        registry = Registry()
        registry.register(SlowRule(delay=0.05))
        config = LintConfig(run=RunConfig(concurrency=1, timeout=0.1))
        result = LintService(registry, config).run([str(tmp_path)])
        assert result.ok
        assert result.data["cancelled"] is True
        assert result.data["count"] == 0
        assert exit_code_for(result) == ExitCode.CANCELLED

    def test_setup_failure(self) -> None:
        result = ServiceResult.failure("run", ErrorCode.SETUP_ERROR, "bad")
        assert exit_code_for(result) == ExitCode.SETUP

    def test_evaluation_failure(self) -> None:
        result = ServiceResult.failure("run", ErrorCode.EVALUATION_ERROR, "bad")
        assert exit_code_for(result) == ExitCode.EVALUATION

    def test_other_ops_succeed(self) -> None:
        assert exit_code_for(ServiceResult(ok=True, op="linters")) == ExitCode.OK

    def test_codes_are_distinct(self) -> None:
        assert len({int(code) for code in ExitCode}) == len(ExitCode)
