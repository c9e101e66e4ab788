"""Models for the test definitions submitted to a run."""

from collections.abc import Sequence

from pydantic import Field

from ft_test_action.models.base import Model


class TestUnit(Model):
    """Atomic script fragment belonging to a parent test.

    Units of the same parent test are expected to be contiguous in the
    sequence handed to the script compiler.
    """

    __test__ = False

    test_path: str = Field(..., description="Folder of the owning test")
    unit_id: str = Field(..., description="Unit identifier")
    script: str = Field(default="", description="Literal script fragment")


class TestDefinition(Model):
    """One logical test submitted for a run."""

    __test__ = False

    test_name: str = Field(..., description="Test name as reported by the engine")
    run_id: int = Field(..., description="Run identifier used for correlation")
    units: Sequence[TestUnit] = Field(
        default_factory=list, description="Ordered script units"
    )
    underlying_tests: Sequence[str] = Field(
        default_factory=list, description="Identifiers of the underlying tests"
    )
    unit_ids: Sequence[str] = Field(
        default_factory=list, description="Unit id references"
    )
    encoded_iterations: str = Field(
        default="", description="Encoded iteration data, passed through as is"
    )
