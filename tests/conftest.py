"""Shared fixtures for test folders."""

from collections.abc import Sequence
from pathlib import Path

import pytest

from ft_test_action.testing.descriptors import CreateTestFolderFn, render_descriptor


@pytest.fixture
def create_test_folder(tmp_path: Path) -> CreateTestFolderFn:
    """Return a function to create test folders holding a Test.tsp."""

    def _create(
        name: str,
        *,
        function_libraries: Sequence[str] = (),
        recovery_scenarios: str | None = None,
        descriptor: str | None = None,
    ) -> Path:
        folder = tmp_path / "tests" / name
        folder.mkdir(parents=True, exist_ok=True)
        content = descriptor
        if content is None:
            content = render_descriptor(function_libraries, recovery_scenarios)
        (folder / "Test.tsp").write_text(content)
        return folder

    return _create
