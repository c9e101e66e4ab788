"""Configuration resolved from the CI environment."""

from collections.abc import Mapping
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field, SecretStr

from ft_test_action.models.base import Model

RUNNER_WORKSPACE = "RUNNER_WORKSPACE"
ACTION_REPOSITORY = "GITHUB_ACTION_REPOSITORY"
ACTION_REF = "GITHUB_ACTION_REF"
DIGITAL_LAB_URL = "FT_DIGITAL_LAB_URL"
DIGITAL_LAB_EXEC_TOKEN = "FT_DIGITAL_LAB_EXEC_TOKEN"
CI_HOSTED = "GITHUB_ACTIONS"


def timestamp_suffix() -> str:
    """Return a suffix making run file names unique per invocation."""
    return datetime.now().strftime("%Y%m%d%H%M%S%f")


class ActionConfig(BaseModel):
    """Environment-driven configuration of the action."""

    runner_workspace: str | None = None
    action_repository: str | None = None
    action_ref: str | None = None
    digital_lab_url: str | None = None
    digital_lab_exec_token: SecretStr | None = None
    ci_hosted: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "ActionConfig":
        """Build configuration from environment variables.

        Empty values are treated as unset.
        """

        def value(name: str) -> str | None:
            return environ.get(name) or None

        return cls(
            runner_workspace=value(RUNNER_WORKSPACE),
            action_repository=value(ACTION_REPOSITORY),
            action_ref=value(ACTION_REF),
            digital_lab_url=value(DIGITAL_LAB_URL),
            digital_lab_exec_token=value(DIGITAL_LAB_EXEC_TOKEN),
            ci_hosted=environ.get(CI_HOSTED, "").lower() == "true",
        )


class RunSettings(Model):
    """Run-level settings shared by every test of one invocation."""

    work_dir: Path = Field(..., description="Writable directory for run files")
    suffix: str = Field(
        default_factory=timestamp_suffix,
        description="Suffix appended to the names of generated files",
    )
    digital_lab_url: str | None = Field(
        default=None, description="Digital lab host address"
    )
    digital_lab_exec_token: SecretStr | None = Field(
        default=None, description="Digital lab execution token"
    )

    @classmethod
    def from_config(cls, config: ActionConfig, work_dir: Path) -> "RunSettings":
        """Create settings for a run inside work_dir."""
        return cls(
            work_dir=work_dir,
            digital_lab_url=config.digital_lab_url,
            digital_lab_exec_token=config.digital_lab_exec_token,
        )
