"""Read, validate and resolve fel4.toml kernel build manifests."""

from fel4_config.cmake_integration import (
    CmakeConfiguration,
    cmake_definition,
    configure_cmake_build,
    configure_cmake_build_from_env,
)
from fel4_config.discovery import build_profile_from_env, infer_manifest_location_from_env, manifest_path_from_env
from fel4_config.errors import (
    CargoTargetToFel4TargetMismatch,
    CmakeConfigurationError,
    ConfigError,
    DuplicateProperty,
    Fel4Error,
    FileReadFailure,
    InvalidBuildProfile,
    InvalidValueOption,
    ManifestDiscoveryError,
    MissingEnvVar,
    MissingRequiredEnvVar,
    MissingRequiredProperty,
    MissingTable,
    NonStringProperty,
    NonWhitelistProperty,
    TomlParseFailure,
    UnexpectedStructure,
)
from fel4_config.exemplar import get_exemplar_default_toml
from fel4_config.manifest import (
    Fel4Header,
    FullFel4Manifest,
    FullFel4Target,
    ensure_only_approved_substructures,
    extract_flat_properties,
    get_full_manifest,
    parse_fel4_header,
    parse_full_manifest,
    toml_to_full_manifest,
)
from fel4_config.resolve import RECOGNIZED_PROPERTIES, check_whitelist, get_fel4_config, resolve_fel4_config
from fel4_config.types import (
    BuildProfile,
    Fel4Config,
    FlatTomlProperty,
    FlatTomlValue,
    SupportedPlatform,
    SupportedTarget,
    TomlBoolean,
    TomlDatetime,
    TomlFloat,
    TomlInteger,
    TomlString,
)

__all__ = [
    "BuildProfile",
    "CargoTargetToFel4TargetMismatch",
    "CmakeConfiguration",
    "CmakeConfigurationError",
    "ConfigError",
    "DuplicateProperty",
    "Fel4Config",
    "Fel4Error",
    "Fel4Header",
    "FileReadFailure",
    "FlatTomlProperty",
    "FlatTomlValue",
    "FullFel4Manifest",
    "FullFel4Target",
    "InvalidBuildProfile",
    "InvalidValueOption",
    "ManifestDiscoveryError",
    "MissingEnvVar",
    "MissingRequiredEnvVar",
    "MissingRequiredProperty",
    "MissingTable",
    "NonStringProperty",
    "NonWhitelistProperty",
    "RECOGNIZED_PROPERTIES",
    "SupportedPlatform",
    "SupportedTarget",
    "TomlBoolean",
    "TomlDatetime",
    "TomlFloat",
    "TomlInteger",
    "TomlParseFailure",
    "TomlString",
    "UnexpectedStructure",
    "build_profile_from_env",
    "check_whitelist",
    "cmake_definition",
    "configure_cmake_build",
    "configure_cmake_build_from_env",
    "ensure_only_approved_substructures",
    "extract_flat_properties",
    "get_exemplar_default_toml",
    "get_fel4_config",
    "get_full_manifest",
    "infer_manifest_location_from_env",
    "manifest_path_from_env",
    "parse_fel4_header",
    "parse_full_manifest",
    "resolve_fel4_config",
    "toml_to_full_manifest",
]
