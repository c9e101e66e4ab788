"""Assembly of the run configuration consumed by the engine."""

import asyncio
import logging
import os
import xml.etree.ElementTree as ET
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from ft_test_action.config import RunSettings
from ft_test_action.errors import ConfigurationError, DescriptorWriteError
from ft_test_action.models.definition import TestDefinition
from ft_test_action.properties import serialize_properties
from ft_test_action.script_compiler import compile_script

log = logging.getLogger(__name__)

MBT_FOLDER = "___mbt"
RUN_TYPE_MBT = "MBT"
RUN_TYPE_FILE_SYSTEM = "FileSystem"


@dataclass(frozen=True, kw_only=True)
class RunDescriptor:
    """Run configuration written for one engine invocation."""

    properties: Mapping[str, str]
    path: Path
    results_path: Path
    test_list_path: Path | None = None


def check_read_write_access(directory: Path) -> None:
    """Fail unless directory exists and is readable and writable."""
    if not directory.is_dir() or not os.access(directory, os.R_OK | os.W_OK):
        raise ConfigurationError(
            f"Directory {directory} does not exist or is not readable and writable"
        )


def write_text(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        log.error("Failed to write %s: %s", path, e)
        raise DescriptorWriteError(f"Failed when creating {path.name}") from e


def property_group(index: int, definition: TestDefinition) -> Mapping[str, str]:
    """Compile the indexed properties of one test definition."""
    return {
        f"test{index}": definition.test_name,
        f"package{index}": f"_{index}",
        f"script{index}": compile_script(definition.units),
        f"unitIds{index}": ";".join(definition.unit_ids),
        f"underlyingTests{index}": ";".join(definition.underlying_tests),
        f"datableParams{index}": definition.encoded_iterations,
    }


async def build_mbt_descriptor(
    definitions: Sequence[TestDefinition], settings: RunSettings
) -> RunDescriptor | None:
    """Compile definitions into an inline-script run configuration.

    Returns None without touching the file system when there is nothing
    to run.

    Raises:
        ConfigurationError: If the work directory is not writable or a unit
            points to an invalid test folder

    """
    if not definitions:
        log.info("No test definitions provided, skipping run configuration")
        return None

    log.info(
        "Creating MBT run configuration: tests=%d, run_id=%s",
        len(definitions),
        definitions[0].run_id,
    )
    check_read_write_access(settings.work_dir)

    parent_folder = settings.work_dir / MBT_FOLDER
    results_path = settings.work_dir / f"results_{settings.suffix}.xml"
    properties: dict[str, str] = {
        "runType": RUN_TYPE_MBT,
        "resultsFilename": str(results_path),
        "parentFolder": str(parent_folder),
        "repoFolder": str(settings.work_dir),
    }

    groups = await asyncio.gather(
        *(
            asyncio.to_thread(property_group, index, definition)
            for index, definition in enumerate(definitions, start=1)
        )
    )
    for group in groups:
        properties.update(group)

    path = settings.work_dir / f"mbt_props_{settings.suffix}.txt"
    try:
        parent_folder.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DescriptorWriteError(f"Failed when creating {parent_folder}") from e
    write_text(path, serialize_properties(properties))
    log.info("Run configuration written to %s", path)

    return RunDescriptor(properties=properties, path=path, results_path=results_path)


def render_test_list(definitions: Sequence[TestDefinition], work_dir: Path) -> str:
    """Render the test list document naming each pre-built test by path."""
    root = ET.Element("Mtbx")
    for definition in definitions:
        ET.SubElement(
            root,
            "Test",
            runid=str(definition.run_id),
            name=definition.test_name,
            path=str(
                work_dir / MBT_FOLDER / str(definition.run_id) / definition.test_name
            ),
        )
    ET.indent(root, space="\t")
    return ET.tostring(root, encoding="unicode")


async def build_file_system_descriptor(
    definitions: Sequence[TestDefinition], settings: RunSettings
) -> RunDescriptor | None:
    """Write a run configuration for pre-built tests located on disk.

    Returns None without touching the file system when there is nothing
    to run.

    Raises:
        ConfigurationError: If the work directory is not writable

    """
    if not definitions:
        log.info("No test definitions provided, skipping run configuration")
        return None

    log.info("Creating file system run configuration: tests=%d", len(definitions))
    check_read_write_access(settings.work_dir)

    path = settings.work_dir / f"props_{settings.suffix}.txt"
    results_path = settings.work_dir / f"results_{settings.suffix}.xml"
    test_list_path = settings.work_dir / f"testsuite_{settings.suffix}.mtbx"

    write_text(test_list_path, render_test_list(definitions, settings.work_dir))

    properties: dict[str, str] = {
        "runType": RUN_TYPE_FILE_SYSTEM,
        "Test1": str(test_list_path),
        "resultsFilename": str(results_path),
    }
    if settings.digital_lab_url and settings.digital_lab_exec_token:
        properties["MobileHostAddress"] = settings.digital_lab_url
        properties["MobileExecToken"] = (
            settings.digital_lab_exec_token.get_secret_value()
        )

    write_text(path, serialize_properties(properties))
    log.info("Run configuration written to %s", path)

    return RunDescriptor(
        properties=properties,
        path=path,
        results_path=results_path,
        test_list_path=test_list_path,
    )
