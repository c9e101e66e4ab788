"""Correlation of engine case results into normalized test results."""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ft_test_action.models.result import (
    CaseResult,
    JUnitResult,
    NormalizedResult,
    RunResultsStep,
    TestError,
    TestStatus,
)
from ft_test_action.reporting.run_results import load_run_steps

log = logging.getLogger(__name__)

DESCRIPTION_MARKERS = ("__octane_description_start__", "__octane_description_end__")
EXTERNAL_URL_MARKERS = (
    "__octane_external_url_start__",
    "__octane_external_url_end__",
)
STACK_FRAME_MARKER = " at "


def extract_marked_value(stdout: str, start_marker: str, end_marker: str) -> str:
    """Return the trimmed text between two markers, or "" when not found.

    A start marker at the very beginning of the output is not recognized.
    """
    start = stdout.find(start_marker)
    if start > 0:
        end = stdout.find(end_marker, start)
        if end > 0:
            return stdout[start + len(start_marker) : end].strip()
    return ""


def derive_error_type(stack_trace: str, details: str) -> str:
    """Guess the error type from the stack trace or the error details."""
    if (idx := stack_trace.find(STACK_FRAME_MARKER)) >= 0:
        return stack_trace[:idx]
    if (idx := details.find(":")) >= 0:
        return details[:idx]
    return ""


def case_status(case: CaseResult) -> TestStatus:
    if case.skipped:
        return "Skipped"
    if case.error_stack_trace or case.error_details:
        return "Failed"
    return "Passed"


@dataclass(kw_only=True)
class ResultCorrelator:
    """Builds normalized results for one reporting session.

    Results are keyed by test name; a later case with the same name
    replaces the earlier one.
    """

    build_started: int
    run_results_files: Mapping[int, Path]
    load_steps: Callable[[Path], Sequence[RunResultsStep]] = load_run_steps
    _results: dict[str, NormalizedResult] = field(
        default_factory=dict, init=False, repr=False
    )

    @property
    def results(self) -> Sequence[NormalizedResult]:
        return list(self._results.values())

    def process_result(self, result: JUnitResult) -> None:
        """Correlate every case of a parsed results document."""
        for suite in result.suites:
            for case in suite.cases:
                self.correlate(case)

    def correlate(self, case: CaseResult) -> NormalizedResult:
        """Normalize a single case and record it under its test name."""
        status = case_status(case)
        error = None
        if status == "Failed":
            error = TestError(
                stack_trace=case.error_stack_trace,
                error_type=derive_error_type(
                    case.error_stack_trace, case.error_details
                ),
                error_message=case.error_details,
            )

        normalized = NormalizedResult(
            test_name=case.test_name,
            status=status,
            duration=case.duration,
            build_started=self.build_started,
            error=error,
            external_url=extract_marked_value(case.stdout, *EXTERNAL_URL_MARKERS),
            description=extract_marked_value(case.stdout, *DESCRIPTION_MARKERS),
            run_steps=self._run_steps(case.run_id),
            run_id=case.run_id,
        )
        self._results[normalized.test_name] = normalized
        return normalized

    def _run_steps(self, run_id: int | None) -> Sequence[RunResultsStep]:
        if run_id is None or run_id not in self.run_results_files:
            log.warning("Run results file not found for run_id=%s", run_id)
            return ()
        return self.load_steps(self.run_results_files[run_id])
