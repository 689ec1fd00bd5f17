import json
import logging
from pathlib import Path
from typing import NoReturn

import click
import yaml

from .cmake_integration import configure_cmake_build
from .discovery import build_profile_from_env, manifest_path_from_env
from .errors import Fel4Error
from .exemplar import get_exemplar_default_toml
from .manifest import get_full_manifest
from .resolve import get_fel4_config
from .types import BuildProfile, Fel4Config

logger = logging.getLogger("fel4_config")

_PROFILE_CHOICE = click.Choice(BuildProfile.build_profile_names())


def _fail(exc: Fel4Error) -> NoReturn:
    click.echo(f"ERROR: {exc}", err=True)
    raise SystemExit(1)


def _dump(config: Fel4Config, fmt: str) -> str:
    summary = config.to_summary()
    if fmt == "json":
        return json.dumps(summary, indent=2, sort_keys=True)
    return yaml.safe_dump(summary, default_flow_style=False, sort_keys=True)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug-level logging.")
def main(verbose: bool) -> None:
    """fel4-config: read and resolve fel4.toml kernel build manifests."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )


# ---------------------------------------------------------------------------
# check command
# ---------------------------------------------------------------------------

@main.command()
@click.argument("manifest", type=click.Path(path_type=Path))
def check(manifest: Path) -> None:
    """Parse MANIFEST and report its selections and declared targets."""
    logger.debug("Checking manifest %s", manifest)
    try:
        full = get_full_manifest(manifest)
    except Fel4Error as exc:
        _fail(exc)

    declared = ", ".join(t.full_name for t in full.targets) or "none"
    click.echo(f"Manifest OK: target={full.selected_target} platform={full.selected_platform}")
    click.echo(f"  artifact-path:     {full.artifact_path}")
    click.echo(f"  target-specs-path: {full.target_specs_path}")
    click.echo(f"  declared targets:  {declared}")
    if full.selected_target not in full.targets:
        click.echo(f"WARNING: selected target {full.selected_target} has no [{full.selected_target}] table")


# ---------------------------------------------------------------------------
# resolve command
# ---------------------------------------------------------------------------

@main.command()
@click.argument("manifest", required=False, type=click.Path(path_type=Path))
@click.option("--profile", "-p", type=_PROFILE_CHOICE, help="Build profile. Defaults to $PROFILE.")
@click.option("--strict/--no-strict", default=False, help="Reject properties that are not recognized kernel options.")
@click.option("--format", "fmt", type=click.Choice(["yaml", "json"]), default="yaml", show_default=True, help="Output format.")
def resolve(manifest: Path | None, profile: str | None, strict: bool, fmt: str) -> None:
    """Resolve MANIFEST for a build profile and print the flattened configuration.

    MANIFEST defaults to $FEL4_MANIFEST_PATH and --profile to $PROFILE.
    """
    try:
        if manifest is None:
            manifest = manifest_path_from_env()
        build_profile = build_profile_from_env() if profile is None else BuildProfile.parse(profile)
        config = get_fel4_config(manifest, build_profile, enforce_whitelist=strict)
    except Fel4Error as exc:
        _fail(exc)

    click.echo(_dump(config, fmt).rstrip("\n"))


# ---------------------------------------------------------------------------
# cmake-args command
# ---------------------------------------------------------------------------

@main.command("cmake-args")
@click.argument("manifest", type=click.Path(path_type=Path))
@click.option("--profile", "-p", required=True, type=_PROFILE_CHOICE, help="Build profile.")
@click.option("--cargo-target", required=True, help="Rust target being built; must match the manifest.")
@click.option("--cargo-manifest-dir", required=True, type=click.Path(path_type=Path), help="Crate root holding deps/seL4_kernel.")
@click.option("--strict/--no-strict", default=False, help="Reject properties that are not recognized kernel options.")
def cmake_args(manifest: Path, profile: str, cargo_target: str, cargo_manifest_dir: Path, strict: bool) -> None:
    """Print the CMake arguments for the seL4 kernel build, one per line."""
    try:
        config = get_fel4_config(manifest, BuildProfile.parse(profile), enforce_whitelist=strict)
        cmake = configure_cmake_build(config, cargo_manifest_dir, cargo_target)
    except Fel4Error as exc:
        _fail(exc)

    for arg in cmake.to_args():
        click.echo(arg)


# ---------------------------------------------------------------------------
# exemplar command
# ---------------------------------------------------------------------------

@main.command()
def exemplar() -> None:
    """Print the exemplar fel4.toml shipped with this package."""
    click.echo(get_exemplar_default_toml(), nl=False)


if __name__ == "__main__":
    main()
