"""Error kinds raised while reading, resolving and applying fel4 configuration.

Every error carries its payload as attributes and compares by value, so a
caller (or a test) can match on the exact failure instead of parsing the
message text.
"""

from __future__ import annotations

from collections.abc import Iterable


class Fel4Error(Exception):
    """Base class for every fel4 configuration failure."""

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == other.args  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self.args))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(repr(a) for a in self.args)})"


# ---------------------------------------------------------------------------
# Manifest reading and resolution
# ---------------------------------------------------------------------------


class ConfigError(Fel4Error):
    """Anything that can go wrong when reading fel4 configuration data."""


class FileReadFailure(ConfigError):
    def __str__(self) -> str:
        return "Unable to read the fel4 manifest file"


class TomlParseFailure(ConfigError):
    def __str__(self) -> str:
        return "The fel4 manifest file is unparseable as toml"


class MissingTable(ConfigError):
    def __init__(self, table: str) -> None:
        super().__init__(table)
        self.table = table

    def __str__(self) -> str:
        return f"The fel4 manifest file is missing the {self.table} table"


class UnexpectedStructure(ConfigError):
    def __init__(self, path: str) -> None:
        super().__init__(path)
        self.path = path

    def __str__(self) -> str:
        return f"The fel4 manifest file contained an unexpected table or array {self.path}"


class MissingRequiredProperty(ConfigError):
    def __init__(self, table: str, prop: str) -> None:
        super().__init__(table, prop)
        self.table = table
        self.prop = prop

    def __str__(self) -> str:
        return f"The [{self.table}] table requires the {self.prop} property, but it is absent."


class NonStringProperty(ConfigError):
    def __init__(self, prop: str) -> None:
        super().__init__(prop)
        self.prop = prop

    def __str__(self) -> str:
        return f"The {self.prop} property should be specified as a string, but is not"


class InvalidValueOption(ConfigError):
    def __init__(self, prop: str, allowed: Iterable[str], actual: str) -> None:
        allowed = tuple(allowed)
        super().__init__(prop, allowed, actual)
        self.prop = prop
        self.allowed = allowed
        self.actual = actual

    def __str__(self) -> str:
        return f"The {self.prop} property should be one of {list(self.allowed)}, but is instead {self.actual}"


class DuplicateProperty(ConfigError):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"The fel4 manifest had a duplicate property {self.name} when resolved to a canonical set"


class NonWhitelistProperty(ConfigError):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"The fel4 manifest contained the property {self.name}, which is not a recognized configuration option"


# ---------------------------------------------------------------------------
# Environment-driven manifest discovery
# ---------------------------------------------------------------------------


class ManifestDiscoveryError(Fel4Error):
    """Failures locating the manifest and its parameterization from the environment."""


class MissingEnvVar(ManifestDiscoveryError):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Required environment variable {self.name} was absent"


class InvalidBuildProfile(ManifestDiscoveryError):
    def __init__(self, value: str) -> None:
        super().__init__(value)
        self.value = value

    def __str__(self) -> str:
        return (
            f"The PROFILE environment variable had a value {self.value} "
            "that could not be interpreted as a BuildProfile instance"
        )


# ---------------------------------------------------------------------------
# CMake build configuration
# ---------------------------------------------------------------------------


class CmakeConfigurationError(Fel4Error):
    """Failures translating a resolved config into a CMake configuration."""


class MissingRequiredEnvVar(CmakeConfigurationError):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Missing the required {self.name} environment variable"


class CargoTargetToFel4TargetMismatch(CmakeConfigurationError):
    def __init__(self, cargo_target: str, fel4_target: str) -> None:
        super().__init__(cargo_target, fel4_target)
        self.cargo_target = cargo_target
        self.fel4_target = fel4_target

    def __str__(self) -> str:
        return (
            f"Cargo is attempting to build for the {self.cargo_target} target, "
            f"however fel4.toml has declared the target to be {self.fel4_target}"
        )
