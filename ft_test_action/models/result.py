"""Models for engine results and their normalized form."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

type TestStatus = Literal["Passed", "Skipped", "Failed"]


@dataclass(frozen=True, kw_only=True)
class CaseResult:
    """Single test case as reported in the engine's JUnit results."""

    __test__ = False

    test_name: str
    duration: float = 0.0
    skipped: bool = False
    error_stack_trace: str = ""
    error_details: str = ""
    stdout: str = ""
    run_id: int | None = None


@dataclass(frozen=True, kw_only=True)
class SuiteResult:
    """Test suite grouping case results."""

    name: str = ""
    cases: Sequence[CaseResult] = field(default_factory=tuple)


@dataclass(frozen=True, kw_only=True)
class JUnitResult:
    """Parsed content of one JUnit results document."""

    suites: Sequence[SuiteResult] = field(default_factory=tuple)


@dataclass(frozen=True, kw_only=True)
class RunResultsStep:
    """Step-level data loaded from a run results file."""

    name: str
    status: str
    description: str = ""
    duration: float = 0.0


@dataclass(frozen=True, kw_only=True)
class TestError:
    """Error attached to a failed test."""

    __test__ = False

    stack_trace: str
    error_type: str
    error_message: str


@dataclass(frozen=True, kw_only=True)
class NormalizedResult:
    """Per-test outcome handed to downstream reporting.

    Module, package and class attribution is not tracked by the engine, so the
    corresponding fields are always empty.
    """

    test_name: str
    status: TestStatus
    duration: float
    build_started: int
    module_name: str = ""
    package_name: str = ""
    class_name: str = ""
    error: TestError | None = None
    external_url: str = ""
    description: str = ""
    run_steps: Sequence[RunResultsStep] = field(default_factory=tuple)
    run_id: int | None = None
    external_assets: str = ""
