"""Compilation of test units into the script run by the engine."""

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from ft_test_action.errors import InvalidTestPathError
from ft_test_action.models.definition import TestUnit
from ft_test_action.models.resources import ResourceSet
from ft_test_action.resources import DESCRIPTOR_FILENAME, resolve_resources

log = logging.getLogger(__name__)

SCRIPT_LINE_TERMINATOR = "\r\n"


def is_test_folder(test_path: str) -> bool:
    """Check that the folder holds a descriptor or a same-named script."""
    folder = Path(test_path)
    return (folder / DESCRIPTOR_FILENAME).exists() or (
        folder / f"{folder.name}.st"
    ).exists()


def render_resources(resources: ResourceSet) -> str:
    """Render the load directives for a test's resources.

    Paths are left raw. The whole script is escaped once as a property value
    when the run configuration is serialized.
    """
    script = ""
    if resources.function_libraries:
        script += "RestartFLEngine" + SCRIPT_LINE_TERMINATOR
        for library in resources.function_libraries:
            script += f' LoadFunctionLibrary "{library}"' + SCRIPT_LINE_TERMINATOR
    if resources.recovery_scenarios:
        scenarios = ",".join(
            f'"{rs.path}|{rs.name}|1|1*"' for rs in resources.recovery_scenarios
        )
        script += f"LoadRecoveryScenario {scenarios}" + SCRIPT_LINE_TERMINATOR
    return script


def compile_script(
    units: Sequence[TestUnit],
    resolve: Callable[[str], ResourceSet] = resolve_resources,
) -> str:
    """Build the full script of a test from its units.

    Resources are loaded once per contiguous run of units sharing a test
    path, on the first unit of the run.

    Raises:
        InvalidTestPathError: If a unit's test path is not a test folder

    """
    log.debug("Compiling script from %d unit(s)", len(units))
    fragments: list[str] = []
    previous_path: str | None = None

    for unit in units:
        script = ""
        if unit.test_path != previous_path:
            if not is_test_folder(unit.test_path):
                raise InvalidTestPathError(
                    f"Invalid test path [{unit.test_path}] of unit id {unit.unit_id}"
                )
            script += render_resources(resolve(unit.test_path))
        script += unit.script
        fragments.append(script)
        previous_path = unit.test_path

    return SCRIPT_LINE_TERMINATOR.join(fragments)
