"""Location and invocation of the external test engine."""

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from ft_test_action.config import (
    ACTION_REF,
    ACTION_REPOSITORY,
    RUNNER_WORKSPACE,
    ActionConfig,
)
from ft_test_action.errors import ConfigurationError, EngineStartError
from ft_test_action.models.outcome import EngineOutcome, ExitCode

log = logging.getLogger(__name__)

ENGINE_RELATIVE_PATH = Path("bin") / "FTToolsLauncher.exe"


@dataclass(frozen=True, kw_only=True)
class ResolvedBinary:
    """Engine binary path composed from the CI environment."""

    path: Path


@dataclass(frozen=True, kw_only=True)
class MissingVariable:
    """Environment variable required to locate the engine is not set."""

    name: str


type BinaryResolution = ResolvedBinary | MissingVariable


def resolve_engine_binary(config: ActionConfig) -> BinaryResolution:
    """Compose the engine path inside the checked out action.

    Actions are checked out next to the runner workspace, under
    `_actions/<repository>/<ref>`.
    """
    workspace = config.runner_workspace
    repository = config.action_repository
    ref = config.action_ref
    if not workspace:
        return MissingVariable(name=RUNNER_WORKSPACE)
    if not repository:
        return MissingVariable(name=ACTION_REPOSITORY)
    if not ref:
        return MissingVariable(name=ACTION_REF)

    action_path = Path(workspace).parent / "_actions" / repository / ref
    return ResolvedBinary(path=action_path / ENGINE_RELATIVE_PATH)


def locate_engine(config: ActionConfig, cwd: Path | None = None) -> Path:
    """Return the verified path of the engine binary.

    Raises:
        ConfigurationError: If a required variable is missing or the binary
            does not exist or is not executable

    """
    if config.ci_hosted:
        match resolve_engine_binary(config):
            case MissingVariable(name=name):
                raise ConfigurationError(f"Missing environment variable: {name}")
            case ResolvedBinary(path=path):
                binary = path
    else:
        binary = (cwd or Path.cwd()) / ENGINE_RELATIVE_PATH

    if not binary.is_file():
        raise ConfigurationError(f"Engine binary not found: {binary}")
    if not os.access(binary, os.X_OK):
        raise ConfigurationError(f"Engine binary is not executable: {binary}")

    log.info("Using engine binary %s", binary)
    return binary


STREAM_CHUNK_SIZE = 64 * 1024


def _log_line(level: int, name: str, line: bytes) -> None:
    log.log(level, "[%s] %s", name, line.decode(errors="replace").rstrip())


async def forward_stream(
    stream: asyncio.StreamReader | None, level: int, name: str
) -> None:
    """Log each line of an engine output stream.

    The stream is read in chunks so lines of any length are forwarded.
    """
    if stream is None:
        return
    pending = b""
    while chunk := await stream.read(STREAM_CHUNK_SIZE):
        *lines, pending = (pending + chunk).split(b"\n")
        for line in lines:
            _log_line(level, name, line)
    if pending:
        _log_line(level, name, pending)


async def invoke_engine(binary: Path, descriptor_path: Path) -> EngineOutcome:
    """Run the engine on a run configuration and wait for it to exit.

    There is no timeout: the call waits as long as the engine runs.

    Raises:
        EngineStartError: If the process cannot be started

    """
    log.info("Starting engine: %s %s", binary, descriptor_path)
    try:
        process = await asyncio.create_subprocess_exec(
            str(binary),
            str(descriptor_path),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise EngineStartError(f"Failed to start engine {binary}: {e}") from e

    try:
        await asyncio.gather(
            forward_stream(process.stdout, logging.INFO, "stdout"),
            forward_stream(process.stderr, logging.ERROR, "stderr"),
        )
    finally:
        return_code = await process.wait()

    outcome = EngineOutcome(
        exit_code=ExitCode.from_return_code(return_code), return_code=return_code
    )
    log.info(
        "Engine exited: return_code=%s outcome=%s",
        return_code,
        outcome.exit_code.name,
    )
    return outcome
