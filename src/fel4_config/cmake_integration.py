"""Configure an seL4 kernel CMake build from a resolved Fel4Config."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from os import PathLike
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from fel4_config.errors import CargoTargetToFel4TargetMismatch, MissingRequiredEnvVar
from fel4_config.types import Fel4Config, FlatTomlValue, SupportedTarget, TomlBoolean

logger = logging.getLogger(__name__)

ARM_CROSS_COMPILER_PREFIX = "arm-linux-gnueabihf-"


class CmakeConfiguration(BaseModel):
    """The definitions and generator handed to CMake for the seL4 kernel."""

    model_config = ConfigDict(extra="forbid")

    source_dir: str
    generator: str = "Ninja"
    defines: dict[str, str] = Field(default_factory=dict)

    def define(self, key: str, value: str | PathLike[str]) -> None:
        self.defines[key] = os.fspath(value)

    def to_args(self) -> list[str]:
        """Command-line arguments for `cmake`, definitions sorted by key."""
        args = ["-G", self.generator]
        args.extend(f"-D{key}={value}" for key, value in sorted(self.defines.items()))
        args.append(self.source_dir)
        return args


def cmake_definition(name: str, value: FlatTomlValue) -> tuple[str, str]:
    """Booleans become typed ON/OFF flags; everything else is its plain text."""
    if isinstance(value, TomlBoolean):
        return f"{name}:BOOL", "ON" if value.value else "OFF"
    return name, value.render()


def configure_cmake_build(
    fel4_config: Fel4Config,
    cargo_manifest_dir: str | PathLike[str],
    cargo_target: str,
) -> CmakeConfiguration:
    """Build the CMake configuration for the kernel at <cargo_manifest_dir>/deps/seL4_kernel.

    *cargo_target* is the rust build target being compiled and must match the
    target the manifest resolved to.
    """
    if cargo_target != fel4_config.target.full_name:
        raise CargoTargetToFel4TargetMismatch(cargo_target, fel4_config.target.full_name)

    kernel_path = Path(cargo_manifest_dir) / "deps" / "seL4_kernel"
    config = CmakeConfiguration(source_dir=str(kernel_path))

    # CMAKE_TOOLCHAIN_FILE is resolved immediately by CMake
    config.define("CMAKE_TOOLCHAIN_FILE", kernel_path / "gcc.cmake")
    config.define("KERNEL_PATH", kernel_path)

    for name, value in fel4_config.properties.items():
        key, text = cmake_definition(name, value)
        config.define(key, text)

    # seL4-CMake's inferred arm toolchain lacks hardware floating point
    if fel4_config.target == SupportedTarget.ARM_SEL4_FEL4:
        config.define("CROSS_COMPILER_PREFIX", ARM_CROSS_COMPILER_PREFIX)

    # seL4 manages these itself
    config.define("CMAKE_C_FLAGS", "")
    config.define("CMAKE_CXX_FLAGS", "")

    logger.debug("Configured CMake build for %s with %d definitions", cargo_target, len(config.defines))
    return config


def configure_cmake_build_from_env(
    fel4_config: Fel4Config,
    environ: Mapping[str, str] | None = None,
) -> CmakeConfiguration:
    """Same as configure_cmake_build, reading CARGO_MANIFEST_DIR and TARGET from the environment."""
    env = os.environ if environ is None else environ
    cargo_manifest_dir = env.get("CARGO_MANIFEST_DIR")
    if cargo_manifest_dir is None:
        raise MissingRequiredEnvVar("CARGO_MANIFEST_DIR")
    cargo_target = env.get("TARGET")
    if cargo_target is None:
        raise MissingRequiredEnvVar("TARGET")
    return configure_cmake_build(fel4_config, cargo_manifest_dir, cargo_target)
