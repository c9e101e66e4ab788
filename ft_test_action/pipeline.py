"""Compile, run and correlate a batch of test definitions."""

import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from ft_test_action.config import ActionConfig, RunSettings
from ft_test_action.descriptor import (
    RunDescriptor,
    build_file_system_descriptor,
    build_mbt_descriptor,
)
from ft_test_action.engine import invoke_engine, locate_engine
from ft_test_action.models.definition import TestDefinition
from ft_test_action.models.outcome import EngineOutcome
from ft_test_action.models.result import NormalizedResult
from ft_test_action.reporting.correlator import ResultCorrelator
from ft_test_action.reporting.junit import load_junit_results

log = logging.getLogger(__name__)

type RunMode = Literal["mbt", "file-system"]
type DescriptorBuilder = Callable[
    [Sequence[TestDefinition], RunSettings], Awaitable[RunDescriptor | None]
]

DESCRIPTOR_BUILDERS: Mapping[RunMode, DescriptorBuilder] = {
    "mbt": build_mbt_descriptor,
    "file-system": build_file_system_descriptor,
}


@dataclass(frozen=True, kw_only=True)
class PipelineResult:
    """Run configuration and engine outcome of one pipeline run."""

    descriptor: RunDescriptor
    outcome: EngineOutcome


@dataclass(frozen=True, kw_only=True)
class TestPipeline:
    """Runs a batch of test definitions through the engine once."""

    __test__ = False

    config: ActionConfig
    settings: RunSettings
    mode: RunMode = "mbt"
    locate: Callable[[ActionConfig], Path] = locate_engine
    invoke: Callable[[Path, Path], Awaitable[EngineOutcome]] = invoke_engine

    async def run(
        self, definitions: Sequence[TestDefinition]
    ) -> PipelineResult | None:
        """Compile the definitions and run the engine on them.

        The engine is located before any file is written, and is not started
        when there is nothing to run.

        Returns:
            The pipeline result, or None when no definitions were given

        """
        if not definitions:
            log.info("No test definitions provided")
            return None

        binary = self.locate(self.config)
        descriptor = await DESCRIPTOR_BUILDERS[self.mode](definitions, self.settings)
        if descriptor is None:
            return None

        outcome = await self.invoke(binary, descriptor.path)
        return PipelineResult(descriptor=descriptor, outcome=outcome)


def collect_results(
    results_path: Path,
    run_results_files: Mapping[int, Path],
    build_started: int,
) -> Sequence[NormalizedResult]:
    """Correlate the engine's results file into normalized results."""
    log.info("Collecting results from %s", results_path)
    correlator = ResultCorrelator(
        build_started=build_started, run_results_files=run_results_files
    )
    correlator.process_result(load_junit_results(results_path))
    results = correlator.results
    log.info("Collected %d test result(s)", len(results))
    return results
