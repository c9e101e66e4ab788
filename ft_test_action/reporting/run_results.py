"""Loading of step-level data from the engine's run results files."""

import logging
import xml.etree.ElementTree as ET
from collections.abc import Sequence
from pathlib import Path

from ft_test_action.models.result import RunResultsStep

log = logging.getLogger(__name__)

STEP_NODE_TYPES = frozenset(["Step", "Action"])


def _step_from_node(node: ET.Element) -> RunResultsStep:
    data = node.find("Data")
    if data is None:
        data = node
    duration = data.findtext("Duration", default="0") or "0"
    try:
        seconds = float(duration)
    except ValueError:
        seconds = 0.0
    return RunResultsStep(
        name=(data.findtext("Name") or "").strip(),
        status=(data.findtext("Result") or "").strip(),
        description=(data.findtext("Description") or "").strip(),
        duration=seconds,
    )


def parse_run_steps(content: str | bytes) -> Sequence[RunResultsStep]:
    """Extract step and action nodes from run results XML, in document order.

    Bytes are decoded according to the document's encoding declaration.
    """
    root = ET.fromstring(content)
    return tuple(
        _step_from_node(node)
        for node in root.iter("ReportNode")
        if node.get("type") in STEP_NODE_TYPES
    )


def load_run_steps(path: Path) -> Sequence[RunResultsStep]:
    """Load run steps from a run results file.

    An unreadable file yields no steps rather than failing correlation.
    """
    try:
        return parse_run_steps(path.read_bytes())
    except (OSError, ET.ParseError, ValueError) as e:
        log.error("Failed to load run results from %s: %s", path, e)
        return ()
