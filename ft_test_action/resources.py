"""Discovery of the resources a test loads before running."""

import logging
import xml.etree.ElementTree as ET
from collections.abc import Sequence
from pathlib import Path

from ft_test_action.errors import DescriptorParseError
from ft_test_action.models.resources import (
    ParsedScenario,
    RecoveryScenario,
    ResourceSet,
    ScenarioEntry,
    SkippedEntry,
)

log = logging.getLogger(__name__)

DESCRIPTOR_FILENAME = "Test.tsp"
SCENARIO_SEPARATOR = "*"
FIELD_SEPARATOR = "|"


def join_test_path(test_path: str, relative: str) -> str:
    """Join a reference from the descriptor onto the test folder."""
    return f"{test_path}/{relative}"


def parse_recovery_scenarios(text: str, test_path: str) -> Sequence[ParsedScenario]:
    """Parse the `path|name|...*path|name|...` recovery scenarios list.

    Entries that do not provide both a path and a name are returned as
    SkippedEntry so callers can drop them.
    """
    parsed: list[ParsedScenario] = []
    for raw in text.split(SCENARIO_SEPARATOR):
        fields = raw.split(FIELD_SEPARATOR)
        if len(fields) < 2:
            parsed.append(SkippedEntry(raw=raw))
            continue
        parsed.append(
            ScenarioEntry(
                scenario=RecoveryScenario(
                    path=join_test_path(test_path, fields[0]), name=fields[1]
                )
            )
        )
    return parsed


def load_descriptor(test_path: str) -> ET.Element:
    """Load the descriptor document of the test in test_path."""
    descriptor = Path(test_path) / DESCRIPTOR_FILENAME
    try:
        return ET.parse(descriptor).getroot()
    except (OSError, ET.ParseError) as e:
        raise DescriptorParseError(f"No document parsed from {descriptor}: {e}") from e


def resolve_resources(test_path: str) -> ResourceSet:
    """Extract function libraries and recovery scenarios of a test.

    A descriptor that cannot be parsed yields an empty ResourceSet so one
    broken test does not prevent the others from being compiled.
    """
    log.debug("Resolving resources for %s", test_path)
    try:
        root = load_descriptor(test_path)
    except DescriptorParseError as e:
        log.error("%s; continuing with empty resources", e)
        return ResourceSet()

    function_libraries = [
        join_test_path(test_path, node.text)
        for node in root.iter("FuncLib")
        if node.text
    ]

    scenarios: list[RecoveryScenario] = []
    scenarios_node = next(root.iter("RecoveryScenarios"), None)
    if scenarios_node is not None and scenarios_node.text:
        for entry in parse_recovery_scenarios(scenarios_node.text, test_path):
            match entry:
                case ScenarioEntry(scenario=scenario):
                    scenarios.append(scenario)
                case SkippedEntry(raw=raw):
                    log.debug("Skipping recovery scenario entry %r", raw)

    return ResourceSet(
        function_libraries=tuple(function_libraries),
        recovery_scenarios=tuple(scenarios),
    )
