"""Value model for fel4 configuration: axis identities and flat TOML values."""

from __future__ import annotations

import datetime as dt
import math
from decimal import Decimal
from enum import StrEnum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr

from fel4_config.errors import InvalidValueOption, TomlParseFailure

# ---------------------------------------------------------------------------
# Axis identities
# ---------------------------------------------------------------------------

TARGET_X86_64_SEL4_FEL4 = "x86_64-sel4-fel4"
TARGET_ARM_SEL4_FEL4 = "arm-sel4-fel4"

PLATFORM_PC99 = "pc99"
PLATFORM_SABRE = "sabre"

BUILD_PROFILE_DEBUG = "debug"
BUILD_PROFILE_RELEASE = "release"


class _Axis(StrEnum):
    """Closed set of canonical names; declaration order is iteration order."""

    @property
    def full_name(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: Any):
        for variant in cls:
            if variant.value == raw:
                return variant
        raise InvalidValueOption(_OPTION_NAMES[cls], [v.value for v in cls], str(raw))


class SupportedTarget(_Axis):
    X86_64_SEL4_FEL4 = TARGET_X86_64_SEL4_FEL4
    ARM_SEL4_FEL4 = TARGET_ARM_SEL4_FEL4

    @classmethod
    def targets(cls) -> list[SupportedTarget]:
        return list(cls)

    @classmethod
    def target_names(cls) -> list[str]:
        return [t.full_name for t in cls]


class SupportedPlatform(_Axis):
    PC99 = PLATFORM_PC99
    SABRE = PLATFORM_SABRE

    @classmethod
    def platforms(cls) -> list[SupportedPlatform]:
        return list(cls)

    @classmethod
    def platform_names(cls) -> list[str]:
        return [p.full_name for p in cls]


class BuildProfile(_Axis):
    DEBUG = BUILD_PROFILE_DEBUG
    RELEASE = BUILD_PROFILE_RELEASE

    @classmethod
    def build_profiles(cls) -> list[BuildProfile]:
        return list(cls)

    @classmethod
    def build_profile_names(cls) -> list[str]:
        return [p.full_name for p in cls]


# Property name reported when parsing an axis value fails
_OPTION_NAMES: dict[type[_Axis], str] = {
    SupportedTarget: "target",
    SupportedPlatform: "platform",
    BuildProfile: "build-profile",
}


# ---------------------------------------------------------------------------
# Flat TOML values (discriminated union on `kind`)
# ---------------------------------------------------------------------------

I64_MIN = -(2**63)
I64_MAX = 2**63 - 1


class _FlatValue(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    def render(self) -> str:
        return str(self.value)  # type: ignore[attr-defined]

    def to_python(self) -> Any:
        return self.value  # type: ignore[attr-defined]


class TomlString(_FlatValue):
    kind: Literal["string"] = "string"
    value: StrictStr


class TomlInteger(_FlatValue):
    kind: Literal["integer"] = "integer"
    value: Annotated[StrictInt, Field(ge=I64_MIN, le=I64_MAX)]


class TomlFloat(_FlatValue):
    kind: Literal["float"] = "float"
    value: StrictFloat

    def render(self) -> str:
        """Shortest round-trip digits in positional notation: 1e20 -> "100000000000000000000", 1.0 -> "1"."""
        if math.isnan(self.value):
            return "NaN"
        if math.isinf(self.value):
            return "inf" if self.value > 0 else "-inf"
        text = format(Decimal(repr(self.value)), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text


class TomlBoolean(_FlatValue):
    kind: Literal["boolean"] = "boolean"
    value: StrictBool

    def render(self) -> str:
        return "true" if self.value else "false"


class TomlDatetime(_FlatValue):
    """A TOML date, time or datetime, kept as its RFC 3339 text."""

    kind: Literal["datetime"] = "datetime"
    value: StrictStr

    @classmethod
    def from_python(cls, value: dt.datetime | dt.date | dt.time) -> TomlDatetime:
        if not isinstance(value, (dt.datetime, dt.time)):
            return cls(value=value.isoformat())

        text = value.replace(microsecond=0, tzinfo=None).isoformat()
        if value.microsecond:
            text += "." + f"{value.microsecond:06d}".rstrip("0")

        offset = value.utcoffset()
        if offset is not None:
            text += _format_offset(offset)
        return cls(value=text)


def _format_offset(offset: dt.timedelta) -> str:
    if offset == dt.timedelta(0):
        return "Z"
    minutes = int(offset.total_seconds()) // 60
    sign = "+" if minutes > 0 else "-"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


FlatTomlValue = Annotated[
    Union[TomlString, TomlInteger, TomlFloat, TomlBoolean, TomlDatetime],
    Field(discriminator="kind"),
]


def to_flat_value(raw: Any) -> TomlString | TomlInteger | TomlFloat | TomlBoolean | TomlDatetime | None:
    """Map a parsed TOML leaf onto its flat value; None for arrays and tables."""
    # bool before int: bool is an int subclass
    if isinstance(raw, bool):
        return TomlBoolean(value=raw)
    if isinstance(raw, int):
        # tomllib accepts arbitrary precision; TOML integers are 64-bit
        if not I64_MIN <= raw <= I64_MAX:
            raise TomlParseFailure()
        return TomlInteger(value=raw)
    if isinstance(raw, float):
        return TomlFloat(value=raw)
    if isinstance(raw, str):
        return TomlString(value=raw)
    if isinstance(raw, (dt.datetime, dt.date, dt.time)):
        return TomlDatetime.from_python(raw)
    if isinstance(raw, (list, dict)):
        return None
    raise TypeError(f"Unsupported TOML value of type {type(raw).__name__}")


class FlatTomlProperty(BaseModel):
    """A single TOML key/value pair whose value has no nested structure."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: StrictStr
    value: FlatTomlValue


# ---------------------------------------------------------------------------
# Resolution result
# ---------------------------------------------------------------------------


class Fel4Config(BaseModel):
    """Configuration for one target/platform/profile triple, flattened from a manifest."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    artifact_path: Annotated[StrictStr, Field(min_length=1)]
    target_specs_path: Annotated[StrictStr, Field(min_length=1)]
    target: SupportedTarget
    platform: SupportedPlatform
    build_profile: BuildProfile
    properties: dict[str, FlatTomlValue] = Field(default_factory=dict)

    def to_summary(self) -> dict[str, Any]:
        """Plain-data view used for YAML/JSON output."""
        return {
            "artifact-path": self.artifact_path,
            "target-specs-path": self.target_specs_path,
            "target": self.target.full_name,
            "platform": self.platform.full_name,
            "build-profile": self.build_profile.full_name,
            "properties": {name: value.to_python() for name, value in sorted(self.properties.items())},
        }
