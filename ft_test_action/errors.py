"""Errors raised while compiling and running engine descriptors."""


class ConfigurationError(Exception):
    """Raised when a required precondition of the run is not met."""


class InvalidTestPathError(ConfigurationError):
    """Raised when a unit's test path does not point to a test folder."""


class DescriptorParseError(Exception):
    """Raised when a test's descriptor document cannot be parsed."""


class DescriptorWriteError(Exception):
    """Raised when the run configuration cannot be written."""


class EngineStartError(Exception):
    """Raised when the engine process cannot be started."""
