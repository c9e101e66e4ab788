"""Tests for script compilation."""

from pathlib import Path
from unittest.mock import Mock

import pytest

from ft_test_action.errors import InvalidTestPathError
from ft_test_action.models.definition import TestUnit
from ft_test_action.models.resources import RecoveryScenario, ResourceSet
from ft_test_action.script_compiler import (
    compile_script,
    is_test_folder,
    render_resources,
)
from ft_test_action.testing.descriptors import CreateTestFolderFn


def unit(test_path: Path, unit_id: str, script: str) -> TestUnit:
    return TestUnit(test_path=str(test_path), unit_id=unit_id, script=script)


class TestIsTestFolder:
    """Tests for is_test_folder."""

    def test_accepts_folder_with_descriptor(
        self, create_test_folder: CreateTestFolderFn
    ) -> None:
        """A folder holding Test.tsp is a test folder."""
        assert is_test_folder(str(create_test_folder("login")))

    def test_accepts_folder_with_same_named_script(self, tmp_path: Path) -> None:
        """A folder holding <name>.st is a test folder."""
        folder = tmp_path / "checkout"
        folder.mkdir()
        (folder / "checkout.st").write_text("")

        assert is_test_folder(str(folder))

    def test_rejects_other_folders(self, tmp_path: Path) -> None:
        """A folder with neither file is not a test folder."""
        assert not is_test_folder(str(tmp_path))


class TestRenderResources:
    """Tests for render_resources."""

    def test_renders_nothing_for_empty_resources(self) -> None:
        """No directive is emitted without resources."""
        assert render_resources(ResourceSet()) == ""

    def test_renders_function_libraries(self) -> None:
        """Restarts the library engine then loads each library."""
        script = render_resources(
            ResourceSet(function_libraries=("C:/t/a.qfl", "C:/t/b.qfl"))
        )

        assert script == (
            "RestartFLEngine\r\n"
            ' LoadFunctionLibrary "C:/t/a.qfl"\r\n'
            ' LoadFunctionLibrary "C:/t/b.qfl"\r\n'
        )

    def test_renders_recovery_scenarios_in_one_directive(self) -> None:
        """Loads all recovery scenarios with a single directive."""
        script = render_resources(
            ResourceSet(
                recovery_scenarios=(
                    RecoveryScenario(path="t/a.qrs", name="Popup"),
                    RecoveryScenario(path="t/b.qrs", name="Crash"),
                )
            )
        )

        assert script == (
            'LoadRecoveryScenario "t/a.qrs|Popup|1|1*","t/b.qrs|Crash|1|1*"\r\n'
        )


class TestCompileScript:
    """Tests for compile_script."""

    def test_returns_empty_script_for_no_units(self) -> None:
        """No units produce an empty script."""
        assert compile_script([]) == ""

    def test_injects_resources_once_per_contiguous_test_path(
        self, create_test_folder: CreateTestFolderFn
    ) -> None:
        """Resources are resolved only on the first unit of a run."""
        folder = create_test_folder("login")
        resolve = Mock(
            return_value=ResourceSet(function_libraries=("lib.qfl",))
        )

        script = compile_script(
            [unit(folder, "1", "Step1"), unit(folder, "2", "Step2")],
            resolve=resolve,
        )

        resolve.assert_called_once_with(str(folder))
        assert script == (
            'RestartFLEngine\r\n LoadFunctionLibrary "lib.qfl"\r\nStep1\r\nStep2'
        )

    def test_reinjects_resources_when_test_path_changes(
        self, create_test_folder: CreateTestFolderFn
    ) -> None:
        """Each change of test path resolves resources again."""
        login = create_test_folder("login")
        checkout = create_test_folder("checkout")
        resolve = Mock(return_value=ResourceSet())

        compile_script(
            [
                unit(login, "1", "A"),
                unit(checkout, "2", "B"),
                unit(checkout, "3", "C"),
                unit(login, "4", "D"),
            ],
            resolve=resolve,
        )

        assert [c.args[0] for c in resolve.call_args_list] == [
            str(login),
            str(checkout),
            str(login),
        ]

    def test_appends_unit_script_when_resources_are_empty(
        self, create_test_folder: CreateTestFolderFn
    ) -> None:
        """Units are emitted even when their test has no resources."""
        login = create_test_folder("login")
        checkout = create_test_folder("checkout")

        script = compile_script([unit(login, "1", "A"), unit(checkout, "2", "B")])

        assert script == "A\r\nB"

    def test_compiles_resources_from_descriptor(
        self, create_test_folder: CreateTestFolderFn
    ) -> None:
        """Resources are read from the test's descriptor."""
        folder = create_test_folder(
            "login",
            function_libraries=["common.qfl"],
            recovery_scenarios="rs.qrs|Popup|1|1*malformed",
        )

        script = compile_script([unit(folder, "1", "Browser.Navigate")])

        assert script == (
            "RestartFLEngine\r\n"
            f' LoadFunctionLibrary "{folder}/common.qfl"\r\n'
            f'LoadRecoveryScenario "{folder}/rs.qrs|Popup|1|1*"\r\n'
            "Browser.Navigate"
        )
        assert "malformed" not in script

    def test_raises_for_invalid_test_path(self, tmp_path: Path) -> None:
        """Compilation stops at a unit whose path is not a test folder."""
        with pytest.raises(InvalidTestPathError, match="unit id 7"):
            compile_script([unit(tmp_path / "missing", "7", "A")])
