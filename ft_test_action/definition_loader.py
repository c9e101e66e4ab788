"""Load test definitions from a YAML file."""

import asyncio
from collections.abc import Sequence
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from ft_test_action.models.definition import TestDefinition


class DefinitionsFile(BaseModel):
    """Top level document of a test definitions file."""

    tests: Sequence[TestDefinition] = Field(default_factory=list)


def parse_test_definitions(content: str) -> Sequence[TestDefinition]:
    """Parse test definitions from YAML content.

    Raises:
        ValueError: If the YAML is malformed, empty or does not match the schema

    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML: {e}") from e

    if data is None:
        raise ValueError("Empty test definitions file")

    try:
        return DefinitionsFile.model_validate(data).tests
    except ValidationError as e:
        raise ValueError(f"Invalid test definition schema: {e}") from e


async def load_test_definitions(path: Path) -> Sequence[TestDefinition]:
    """Load test definitions from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file content is invalid

    """
    if not path.is_file():
        raise FileNotFoundError(f"Test definitions file not found: {path}")

    content = await asyncio.to_thread(path.read_text, encoding="utf-8")
    return parse_test_definitions(content)
