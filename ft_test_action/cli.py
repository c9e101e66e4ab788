"""CLI entry point for running tests through the engine."""

import argparse
import asyncio
import dataclasses
import json
import logging
import os
import sys
import time
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from ft_test_action.config import ActionConfig, RunSettings
from ft_test_action.definition_loader import load_test_definitions
from ft_test_action.errors import (
    ConfigurationError,
    DescriptorWriteError,
    EngineStartError,
)
from ft_test_action.models.result import NormalizedResult
from ft_test_action.pipeline import RunMode, TestPipeline, collect_results

STATUS_SYMBOLS = {
    "Passed": "✅",
    "Failed": "❌",
    "Skipped": "⏭️",
}


def log_results_summary(
    log: logging.Logger, results: Sequence[NormalizedResult]
) -> None:
    """Log a formatted summary of normalized test results."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for result in results:
        symbol = STATUS_SYMBOLS.get(result.status, "?")
        log.info(
            "%s %s: %s (%.2fs)",
            symbol,
            result.test_name,
            result.status,
            result.duration,
        )
        if result.external_url:
            log.info("  External URL: %s", result.external_url)
        if result.error:
            log.info(
                "  Error: %s", result.error.error_type or result.error.error_message
            )


def parse_run_results_files(values: Sequence[str]) -> Mapping[int, Path]:
    """Parse RUN_ID=PATH pairs."""
    files: dict[int, Path] = {}
    for value in values:
        run_id, sep, path = value.partition("=")
        if not sep or not run_id.strip().lstrip("-").isdigit():
            raise ValueError(f"Expected RUN_ID=PATH, got {value!r}")
        files[int(run_id)] = Path(path)
    return files


def format_output(
    outcome: str, return_code: int | None, results: Sequence[NormalizedResult]
) -> dict[str, Any]:
    """Format the run outcome and normalized results for JSON output."""
    return {
        "outcome": outcome,
        "return_code": return_code,
        "total": len(results),
        "passed": sum(1 for r in results if r.status == "Passed"),
        "failed": sum(1 for r in results if r.status == "Failed"),
        "skipped": sum(1 for r in results if r.status == "Skipped"),
        "results": [dataclasses.asdict(r) for r in results],
    }


async def run(
    definitions_path: Path,
    work_dir: Path,
    mode: RunMode,
    run_results_files: Mapping[int, Path],
    environ: Mapping[str, str],
) -> int:
    """Run the test definitions and return exit code."""
    log = logging.getLogger("ft_test_action")

    log.info("Loading test definitions from %s", definitions_path)
    definitions = await load_test_definitions(definitions_path)

    config = ActionConfig.from_env(environ)
    pipeline = TestPipeline(
        config=config,
        settings=RunSettings.from_config(config, work_dir),
        mode=mode,
    )

    build_started = int(time.time() * 1000)
    result = await pipeline.run(definitions)
    if result is None:
        log.info("Nothing to run")
        print(json.dumps(format_output("NoTests", None, [])))
        return 0

    log.info("Engine outcome: %s", result.outcome.exit_code.name)

    results: Sequence[NormalizedResult] = []
    if result.descriptor.results_path.is_file():
        results = collect_results(
            result.descriptor.results_path, run_results_files, build_started
        )
    else:
        log.warning("Results file %s was not written", result.descriptor.results_path)

    log_results_summary(log, results)
    output = format_output(
        result.outcome.exit_code.name, result.outcome.return_code, results
    )
    print(json.dumps(output, indent=2))

    return 0 if result.outcome.passed else 1


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run functional tests through the external test engine"
    )
    parser.add_argument(
        "--definitions",
        type=Path,
        required=True,
        help="Path to the YAML test definitions file",
    )
    parser.add_argument(
        "--work-dir",
        type=Path,
        default=Path.cwd(),
        help="Writable directory for run configuration and results",
    )
    parser.add_argument(
        "--mode",
        choices=["mbt", "file-system"],
        default="mbt",
        help="Compile inline scripts (mbt) or run pre-built tests (file-system)",
    )
    parser.add_argument(
        "--run-results",
        action="append",
        default=[],
        metavar="RUN_ID=PATH",
        help="Run results file for a run identifier (repeatable)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        run_results_files = parse_run_results_files(args.run_results)
    except ValueError as e:
        parser.error(str(e))

    try:
        exit_code = asyncio.run(
            run(
                definitions_path=args.definitions,
                work_dir=args.work_dir,
                mode=args.mode,
                run_results_files=run_results_files,
                environ=os.environ,
            )
        )
    except (
        ConfigurationError,
        DescriptorWriteError,
        EngineStartError,
        FileNotFoundError,
        ValueError,
    ) as e:
        logging.getLogger("ft_test_action").error("%s", e)
        sys.exit(2)
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
