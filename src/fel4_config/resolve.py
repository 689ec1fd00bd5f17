"""Resolution of a parsed manifest into one flat Fel4Config."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from os import PathLike

from fel4_config.errors import DuplicateProperty, MissingTable, NonWhitelistProperty
from fel4_config.manifest import FullFel4Manifest, get_full_manifest
from fel4_config.types import BuildProfile, Fel4Config, FlatTomlProperty, FlatTomlValue

logger = logging.getLogger(__name__)

# seL4 kernel and support-library CMake options a fel4 manifest may set.
RECOGNIZED_PROPERTIES: frozenset[str] = frozenset(
    {
        # Simulation and build scaffolding
        "BuildWithCommonSimulationSettings",
        "HardwareDebugAPI",
        "LibPlatSupportX86ConsoleDevice",
        "LibSel4FunctionAttributes",
        "LibSel4PluginDebug",
        "SIMULATION",
        "LinkPageSize",
        "UserLinkerGCSections",
        "LibSel4DebugAllocBufferEntries",
        "LibSel4DebugFunctionInstrumentation",
        "ElfloaderImage",
        "ElfloaderMode",
        "ElfloaderErrata764369",
        # Architecture and platform selection
        "KernelArch",
        "KernelSel4Arch",
        "KernelX86Sel4Arch",
        "KernelArmSel4Arch",
        "KernelPlatform",
        "KernelArmPlatform",
        "KernelX86MicroArch",
        "KernelArmCPU",
        "KernelArmHypervisorSupport",
        "KernelArmExportPCNTUser",
        "KernelArmExportPMUUser",
        "KernelIRQController",
        "KernelLAPICMode",
        "KernelSupportPCID",
        "KernelIOMMU",
        "KernelVTX",
        "KernelHugePage",
        "KernelSkimWindow",
        "KernelFSGSBase",
        "KernelFPU",
        "KernelX86FPU",
        "KernelXSaveSize",
        "KernelFPUMaxRestoresSinceSwitch",
        "KernelX86SyscallMethod",
        "KernelX86IBRSMode",
        "KernelX86IBPBOnContextSwitch",
        "KernelX86RSBOnContextSwitch",
        "KernelX86DangerousMSR",
        "KernelExportPMCUser",
        "KernelMultiboot1Header",
        "KernelMultiboot2Header",
        "KernelMultibootGFXMode",
        "KernelCacheLnSz",
        "KernelSyscall",
        "KernelAArch32FPUEnableContextSwitch",
        "KernelArmEnableA9Prefetcher",
        "KernelIPCBufferLocation",
        # Kernel sizing and scheduling
        "KernelMaxNumNodes",
        "KernelNumDomains",
        "KernelNumPriorities",
        "KernelRootCNodeSizeBits",
        "KernelMaxNumBootinfoUntypedCaps",
        "KernelMaxNumWorkUnitsPerPreemption",
        "KernelResetChunkBits",
        "KernelRetypeFanOutLimit",
        "KernelStackBits",
        "KernelTimerTickMS",
        "KernelTimeSlice",
        "KernelFastpath",
        "KernelEnableSMPSupport",
        # Build profile dependent
        "KernelDebugBuild",
        "KernelPrinting",
        "KernelColourPrinting",
        "KernelUserStackTraceLength",
        "KernelOptimisation",
        "KernelFWholeProgram",
        "KernelVerificationBuild",
        "KernelBenchmarks",
        "KernelEnableBenchmarks",
        "KernelBenchmarkTrackKernelEntries",
        "KernelBenchmarkTracepoints",
        "KernelDangerousCodeInjection",
        "KernelX86DebugExceptionStack",
        "KernelDebugDisablePrefetchers",
        "KernelDebugDisableL2Cache",
        "KernelDebugDisableL1ICache",
        "KernelDebugDisableL1DCache",
        "KernelDebugDisableBranchPrediction",
    }
)


def add_properties_to_map(
    properties: dict[str, FlatTomlValue],
    source: Iterable[FlatTomlProperty],
) -> None:
    """Insert each property into *properties*; a name already present is a DuplicateProperty."""
    for prop in source:
        if prop.name in properties:
            raise DuplicateProperty(prop.name)
        properties[prop.name] = prop.value


def check_whitelist(properties: Mapping[str, FlatTomlValue], recognized: frozenset[str] = RECOGNIZED_PROPERTIES) -> None:
    for name in sorted(properties):
        if name not in recognized:
            raise NonWhitelistProperty(name)


def resolve_fel4_config(
    full: FullFel4Manifest,
    build_profile: BuildProfile,
    *,
    enforce_whitelist: bool = False,
) -> Fel4Config:
    """Resolve and validate the Fel4Config for *build_profile* and the manifest's selected target and platform.

    Properties are merged direct, then profile, then platform. Any name seen
    twice is an error rather than an override. When *enforce_whitelist* is
    set, every merged name must also be in RECOGNIZED_PROPERTIES; that check
    only runs once the merge has succeeded.
    """
    selected_target = full.selected_target
    platform = full.selected_platform
    target = full.targets.get(selected_target)
    if target is None:
        raise MissingTable(selected_target.full_name)

    properties: dict[str, FlatTomlValue] = {}
    add_properties_to_map(properties, target.direct_properties)

    profile_properties = target.build_profile_properties.get(build_profile)
    if profile_properties is None:
        raise MissingTable(f"{selected_target.full_name}.{build_profile.full_name}")
    add_properties_to_map(properties, profile_properties)

    platform_properties = target.platform_properties.get(platform)
    if platform_properties is None:
        raise MissingTable(f"{selected_target.full_name}.{platform.full_name}")
    add_properties_to_map(properties, platform_properties)

    if enforce_whitelist:
        check_whitelist(properties)

    logger.debug(
        "Resolved %s/%s/%s to %d properties",
        selected_target.full_name,
        platform.full_name,
        build_profile.full_name,
        len(properties),
    )
    return Fel4Config(
        artifact_path=full.artifact_path,
        target_specs_path=full.target_specs_path,
        target=selected_target,
        platform=platform,
        build_profile=build_profile,
        properties=properties,
    )


def get_fel4_config(
    fel4_manifest_path: str | PathLike[str],
    build_profile: BuildProfile,
    *,
    enforce_whitelist: bool = False,
) -> Fel4Config:
    """Load, parse, and resolve a Fel4Config."""
    full = get_full_manifest(fel4_manifest_path)
    return resolve_fel4_config(full, build_profile, enforce_whitelist=enforce_whitelist)
