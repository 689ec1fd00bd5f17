"""Locate the fel4 manifest and build profile from environment variables."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from fel4_config.errors import InvalidBuildProfile, InvalidValueOption, MissingEnvVar
from fel4_config.types import BuildProfile

logger = logging.getLogger(__name__)

MANIFEST_PATH_VAR = "FEL4_MANIFEST_PATH"
PROFILE_VAR = "PROFILE"


def _environ(environ: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def manifest_path_from_env(environ: Mapping[str, str] | None = None) -> Path:
    manifest_path = _environ(environ).get(MANIFEST_PATH_VAR)
    if manifest_path is None:
        raise MissingEnvVar(MANIFEST_PATH_VAR)
    return Path(manifest_path)


def build_profile_from_env(environ: Mapping[str, str] | None = None) -> BuildProfile:
    raw_profile = _environ(environ).get(PROFILE_VAR)
    if raw_profile is None:
        raise MissingEnvVar(PROFILE_VAR)
    try:
        return BuildProfile.parse(raw_profile)
    except InvalidValueOption as exc:
        raise InvalidBuildProfile(raw_profile) from exc


def infer_manifest_location_from_env(environ: Mapping[str, str] | None = None) -> tuple[Path, BuildProfile]:
    """Read FEL4_MANIFEST_PATH and PROFILE to find what to load and resolve."""
    manifest_path = manifest_path_from_env(environ)
    build_profile = build_profile_from_env(environ)
    logger.debug("Discovered manifest %s with profile %s", manifest_path, build_profile.full_name)
    return manifest_path, build_profile
