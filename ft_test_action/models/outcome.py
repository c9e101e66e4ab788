"""Engine completion codes and their classification."""

from dataclasses import dataclass
from enum import IntEnum


class ExitCode(IntEnum):
    """Completion codes known to be produced by the engine."""

    PASSED = 0
    FAILED = -1
    PARTIAL_FAILED = -2
    ABORTED = -3
    UNSTABLE = -4
    ENVIRONMENT_NOT_CONNECTED = -5
    UNKNOWN = -99

    @classmethod
    def from_return_code(cls, return_code: int | None) -> "ExitCode":
        """Map a raw process return code onto the closed enumeration.

        A missing code is treated as an aborted run; any other code outside
        the enumeration is reported as unknown.
        """
        if return_code is None:
            return cls.ABORTED
        if return_code in cls._value2member_map_:
            return cls(return_code)
        return cls.UNKNOWN


@dataclass(frozen=True, kw_only=True)
class EngineOutcome:
    """Classified result of one engine invocation."""

    exit_code: ExitCode
    return_code: int | None

    @property
    def passed(self) -> bool:
        return self.exit_code is ExitCode.PASSED
