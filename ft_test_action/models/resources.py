"""Resources referenced by a test's descriptor document."""

from collections.abc import Sequence
from dataclasses import dataclass, field


@dataclass(frozen=True, kw_only=True)
class RecoveryScenario:
    """Recovery scenario file and the scenario name inside it."""

    path: str
    name: str


@dataclass(frozen=True, kw_only=True)
class ScenarioEntry:
    """Well-formed entry of a recovery scenarios list."""

    scenario: RecoveryScenario


@dataclass(frozen=True, kw_only=True)
class SkippedEntry:
    """Entry that does not carry both a path and a name."""

    raw: str


type ParsedScenario = ScenarioEntry | SkippedEntry


@dataclass(frozen=True, kw_only=True)
class ResourceSet:
    """Function libraries and recovery scenarios discovered for a test path."""

    function_libraries: Sequence[str] = field(default_factory=tuple)
    recovery_scenarios: Sequence[RecoveryScenario] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.function_libraries and not self.recovery_scenarios
