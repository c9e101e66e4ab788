"""Integration tests running the pipeline against a fake engine process."""

import logging
from pathlib import Path

import pytest

from ft_test_action.config import ActionConfig, RunSettings
from ft_test_action.engine import invoke_engine
from ft_test_action.errors import EngineStartError
from ft_test_action.models.definition import TestDefinition, TestUnit
from ft_test_action.models.outcome import ExitCode
from ft_test_action.pipeline import TestPipeline, collect_results
from ft_test_action.testing.descriptors import CreateTestFolderFn
from ft_test_action.testing.engine import InstallEngineFn


class TestInvokeEngine:
    """Tests for invoke_engine with a real process."""

    async def test_forwards_output_and_classifies_exit(
        self,
        tmp_path: Path,
        install_engine: InstallEngineFn,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Logs both streams and maps a zero exit to passed."""
        binary = install_engine(tmp_path)
        descriptor = tmp_path / "props.txt"
        descriptor.write_text("runType=MBT\n")

        with caplog.at_level(logging.INFO):
            outcome = await invoke_engine(binary, descriptor)

        assert outcome.exit_code is ExitCode.PASSED
        assert outcome.return_code == 0
        assert f"[stdout] Loading run configuration {descriptor}" in caplog.text
        error_records = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert [r.getMessage() for r in error_records] == ["[stderr] engine warning"]

    async def test_unrecognized_exit_code_is_unknown(
        self,
        tmp_path: Path,
        install_engine: InstallEngineFn,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """An exit code outside the known set is not an error."""
        monkeypatch.setenv("FAKE_ENGINE_EXIT", "17")
        binary = install_engine(tmp_path)
        descriptor = tmp_path / "props.txt"
        descriptor.write_text("runType=MBT\n")

        outcome = await invoke_engine(binary, descriptor)

        assert outcome.exit_code is ExitCode.UNKNOWN
        assert outcome.return_code == 17

    async def test_forwards_line_longer_than_stream_limit(
        self,
        tmp_path: Path,
        install_engine: InstallEngineFn,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """An output line above 64 KiB is logged and the exit is classified."""
        monkeypatch.setenv("FAKE_ENGINE_LONG_LINE", "200000")
        binary = install_engine(tmp_path)
        descriptor = tmp_path / "props.txt"
        descriptor.write_text("runType=MBT\n")

        with caplog.at_level(logging.INFO):
            outcome = await invoke_engine(binary, descriptor)

        assert outcome.exit_code is ExitCode.PASSED
        assert f"[stdout] {'x' * 200000}" in [r.getMessage() for r in caplog.records]

    async def test_missing_binary_fails_to_start(self, tmp_path: Path) -> None:
        """A missing binary raises a start error."""
        with pytest.raises(EngineStartError):
            await invoke_engine(tmp_path / "missing.exe", tmp_path / "props.txt")


async def test_full_pipeline_run(
    tmp_path: Path,
    install_engine: InstallEngineFn,
    create_test_folder: CreateTestFolderFn,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Compiles, runs the engine and correlates its results."""
    install_engine(tmp_path)
    monkeypatch.chdir(tmp_path)
    work_dir = tmp_path / "work"
    work_dir.mkdir()
    login = create_test_folder("login", function_libraries=["common.qfl"])
    run_results = tmp_path / "run_results.xml"
    run_results.write_text(
        '<Results><ReportNode type="Step"><Data><Name>Navigate</Name>'
        "<Result>Passed</Result></Data></ReportNode></Results>"
    )
    definitions = [
        TestDefinition(
            test_name="Login",
            run_id=1001,
            units=[TestUnit(test_path=str(login), unit_id="1", script="A")],
        ),
        TestDefinition(
            test_name="Checkout",
            run_id=1002,
            units=[TestUnit(test_path=str(login), unit_id="2", script="B")],
        ),
    ]
    pipeline = TestPipeline(
        config=ActionConfig(),
        settings=RunSettings(work_dir=work_dir, suffix="1"),
    )

    result = await pipeline.run(definitions)

    assert result is not None
    assert result.outcome.exit_code is ExitCode.PASSED
    results = collect_results(
        result.descriptor.results_path, {1001: run_results}, build_started=0
    )
    login_result, checkout_result = results
    assert login_result.status == "Passed"
    assert login_result.description == "Logs in"
    assert [s.name for s in login_result.run_steps] == ["Navigate"]
    assert checkout_result.status == "Failed"
    assert checkout_result.error is not None
    assert checkout_result.error.error_type == "AssertionError"
    assert checkout_result.run_steps == ()
