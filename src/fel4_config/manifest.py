"""Parsing and representation of the full fel4 manifest."""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Collection, Mapping
from os import PathLike
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from fel4_config.errors import (
    FileReadFailure,
    MissingRequiredProperty,
    MissingTable,
    NonStringProperty,
    TomlParseFailure,
    UnexpectedStructure,
)
from fel4_config.types import (
    BuildProfile,
    FlatTomlProperty,
    SupportedPlatform,
    SupportedTarget,
    to_flat_value,
)

logger = logging.getLogger(__name__)

FEL4_TABLE = "fel4"


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class Fel4Header(BaseModel):
    """The validated contents of the [fel4] table."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    artifact_path: Annotated[StrictStr, Field(min_length=1)]
    target_specs_path: Annotated[StrictStr, Field(min_length=1)]
    selected_target: SupportedTarget
    selected_platform: SupportedPlatform


class FullFel4Target(BaseModel):
    """The full content of a target within a fel4 manifest.

    A profile or platform key is present in its mapping only when the
    manifest declared that subtable, even if it declared no properties.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    identity: SupportedTarget
    direct_properties: tuple[FlatTomlProperty, ...] = ()
    build_profile_properties: dict[BuildProfile, tuple[FlatTomlProperty, ...]] = Field(default_factory=dict)
    platform_properties: dict[SupportedPlatform, tuple[FlatTomlProperty, ...]] = Field(default_factory=dict)


class FullFel4Manifest(BaseModel):
    """The full content of a fel4 manifest."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    artifact_path: Annotated[StrictStr, Field(min_length=1)]
    target_specs_path: Annotated[StrictStr, Field(min_length=1)]
    selected_target: SupportedTarget
    selected_platform: SupportedPlatform
    targets: dict[SupportedTarget, FullFel4Target] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def get_full_manifest(path: str | PathLike[str]) -> FullFel4Manifest:
    """Retrieve the complete contents of the fel4 toml from a file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileReadFailure() from exc
    logger.debug("Read fel4 manifest %s (%d bytes)", path, len(text))
    return parse_full_manifest(text)


def parse_full_manifest(toml_string: str) -> FullFel4Manifest:
    """Retrieve the complete contents of the fel4 toml from a string."""
    try:
        document = tomllib.loads(toml_string)
    except tomllib.TOMLDecodeError as exc:
        raise TomlParseFailure() from exc
    return toml_to_full_manifest(document)


def parse_fel4_header(document: Mapping[str, Any]) -> Fel4Header:
    """Validate the [fel4] table and pull out the global selections."""
    fel4_table = document.get(FEL4_TABLE)
    if not isinstance(fel4_table, dict):
        raise MissingTable(FEL4_TABLE)

    ensure_only_approved_substructures(fel4_table, None, scope=FEL4_TABLE)

    selected_target = SupportedTarget.parse(_required_string(fel4_table, "target"))
    selected_platform = SupportedPlatform.parse(_required_string(fel4_table, "platform"))
    artifact_path = _required_string(fel4_table, "artifact-path")
    target_specs_path = _required_string(fel4_table, "target-specs-path")

    return Fel4Header(
        artifact_path=artifact_path,
        target_specs_path=target_specs_path,
        selected_target=selected_target,
        selected_platform=selected_platform,
    )


def toml_to_full_manifest(document: Mapping[str, Any]) -> FullFel4Manifest:
    """Parse the complete contents of an already-decoded fel4 toml document.

    Validation runs header first, then each supported target in declaration
    order; within a target the structure check precedes profile, platform
    and direct property extraction. The first failure wins.
    """
    header = parse_fel4_header(document)

    approved_subtables = frozenset(SupportedPlatform.platform_names() + BuildProfile.build_profile_names())
    targets: dict[SupportedTarget, FullFel4Target] = {}
    for target in SupportedTarget.targets():
        table = document.get(target.full_name)
        if not isinstance(table, dict):
            logger.debug("No [%s] table declared; skipping", target.full_name)
            continue
        targets[target] = _parse_target(target, table, approved_subtables)

    logger.debug(
        "Parsed fel4 manifest: target=%s platform=%s declared=%s",
        header.selected_target.full_name,
        header.selected_platform.full_name,
        [t.full_name for t in targets],
    )
    return FullFel4Manifest(
        artifact_path=header.artifact_path,
        target_specs_path=header.target_specs_path,
        selected_target=header.selected_target,
        selected_platform=header.selected_platform,
        targets=targets,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _required_string(table: Mapping[str, Any], prop: str) -> str:
    if prop not in table:
        raise MissingRequiredProperty(FEL4_TABLE, prop)
    value = table[prop]
    if not isinstance(value, str):
        raise NonStringProperty(prop)
    if not value:
        raise MissingRequiredProperty(FEL4_TABLE, prop)
    return value


def _qualify(scope: str | None, key: str) -> str:
    return f"{scope}.{key}" if scope else key


def _is_structure(value: Any) -> bool:
    return isinstance(value, (dict, list))


def ensure_only_approved_substructures(
    table: Mapping[str, Any],
    approved: Collection[str] | None,
    *,
    scope: str | None = None,
) -> None:
    """Raise UnexpectedStructure for the first nested table or array not in *approved*.

    Only tables may be approved; an array is never a legal substructure.
    """
    for key, value in sorted(table.items()):
        if not _is_structure(value):
            continue
        if approved is not None and key in approved and isinstance(value, dict):
            continue
        raise UnexpectedStructure(_qualify(scope, key))


def extract_flat_properties(
    table: Mapping[str, Any],
    ignore_structures: bool = False,
    *,
    scope: str | None = None,
) -> list[FlatTomlProperty]:
    """Collect the scalar entries of *table*, sorted by key.

    Nested tables and arrays are skipped when *ignore_structures* is set and
    rejected with UnexpectedStructure("<scope>.<key>") otherwise.
    """
    properties: list[FlatTomlProperty] = []
    for name, raw in sorted(table.items()):
        value = to_flat_value(raw)
        if value is None:
            if ignore_structures:
                continue
            raise UnexpectedStructure(_qualify(scope, name))
        properties.append(FlatTomlProperty(name=name, value=value))
    return properties


def _parse_target(
    target: SupportedTarget,
    table: Mapping[str, Any],
    approved_subtables: frozenset[str],
) -> FullFel4Target:
    target_name = target.full_name
    ensure_only_approved_substructures(table, approved_subtables, scope=target_name)

    build_profile_properties: dict[BuildProfile, tuple[FlatTomlProperty, ...]] = {}
    for profile in BuildProfile.build_profiles():
        subtable = table.get(profile.full_name)
        if not isinstance(subtable, dict):
            continue
        build_profile_properties[profile] = tuple(
            extract_flat_properties(subtable, scope=f"{target_name}.{profile.full_name}")
        )

    platform_properties: dict[SupportedPlatform, tuple[FlatTomlProperty, ...]] = {}
    for platform in SupportedPlatform.platforms():
        subtable = table.get(platform.full_name)
        if not isinstance(subtable, dict):
            continue
        platform_properties[platform] = tuple(
            extract_flat_properties(subtable, scope=f"{target_name}.{platform.full_name}")
        )

    without_subtables = {
        k: v for k, v in table.items() if not (k in approved_subtables and isinstance(v, dict))
    }
    direct_properties = extract_flat_properties(without_subtables, scope=target_name)

    logger.debug(
        "Target %s: %d direct, profiles=%s, platforms=%s",
        target_name,
        len(direct_properties),
        [p.full_name for p in build_profile_properties],
        [p.full_name for p in platform_properties],
    )
    return FullFel4Target(
        identity=target,
        direct_properties=tuple(direct_properties),
        build_profile_properties=build_profile_properties,
        platform_properties=platform_properties,
    )
