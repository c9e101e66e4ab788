"""Reader for the JUnit XML results written by the engine."""

import xml.etree.ElementTree as ET
from pathlib import Path

from ft_test_action.models.result import CaseResult, JUnitResult, SuiteResult


def _parse_run_id(testcase: ET.Element) -> int | None:
    value = testcase.get("runId") or testcase.get("runid")
    if value is None:
        for prop in testcase.iterfind("properties/property"):
            if prop.get("name") == "runId":
                value = prop.get("value")
                break
    if value is None or not value.strip().lstrip("-").isdigit():
        return None
    return int(value)


def _parse_case(testcase: ET.Element) -> CaseResult:
    error = testcase.find("failure")
    if error is None:
        error = testcase.find("error")
    stdout = testcase.find("system-out")

    return CaseResult(
        test_name=testcase.get("name", ""),
        duration=float(testcase.get("time") or 0),
        skipped=testcase.find("skipped") is not None,
        error_stack_trace=(error.text or "") if error is not None else "",
        error_details=error.get("message", "") if error is not None else "",
        stdout=(stdout.text or "") if stdout is not None else "",
        run_id=_parse_run_id(testcase),
    )


def parse_junit_xml(content: str | bytes) -> JUnitResult:
    """Parse JUnit XML content into suites of case results.

    Both a `testsuites` root and a single `testsuite` root are accepted.
    Bytes are decoded according to the document's encoding declaration.

    Raises:
        ValueError: If the content is not well-formed XML

    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise ValueError(f"Invalid JUnit XML: {e}") from e

    suite_nodes = [root] if root.tag == "testsuite" else root.findall("testsuite")
    return JUnitResult(
        suites=tuple(
            SuiteResult(
                name=suite.get("name", ""),
                cases=tuple(_parse_case(tc) for tc in suite.findall("testcase")),
            )
            for suite in suite_nodes
        )
    )


def load_junit_results(path: Path) -> JUnitResult:
    """Load a JUnit results file written by the engine."""
    return parse_junit_xml(path.read_bytes())
