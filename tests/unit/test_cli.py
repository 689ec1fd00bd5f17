"""Tests for the fel4-config CLI commands."""

import json
import unittest
from pathlib import Path
import tempfile

import yaml
from click.testing import CliRunner

from fel4_config.cli import main
from fel4_config.exemplar import EXEMPLAR_MANIFEST_PATH, get_exemplar_default_toml

UNRECOGNIZED = """
[fel4]
target = "x86_64-sel4-fel4"
platform = "pc99"
artifact-path = "artifacts"
target-specs-path = "targets"

[x86_64-sel4-fel4]
KernelArch = "x86"
SomeProp = "hello"

[x86_64-sel4-fel4.debug]
[x86_64-sel4-fel4.pc99]
"""


class CliTestCase(unittest.TestCase):

    def setUp(self):
        self.runner = CliRunner()
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def write_manifest(self, text: str) -> str:
        path = self.tmp / "fel4.toml"
        path.write_text(text)
        return str(path)


class ExemplarCommandTests(CliTestCase):

    def test_prints_exemplar(self):
        result = self.runner.invoke(main, ["exemplar"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output, get_exemplar_default_toml())


class CheckCommandTests(CliTestCase):

    def test_check_exemplar(self):
        result = self.runner.invoke(main, ["check", str(EXEMPLAR_MANIFEST_PATH)])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("target=x86_64-sel4-fel4 platform=pc99", result.output)
        self.assertIn("x86_64-sel4-fel4, arm-sel4-fel4", result.output)

    def test_check_missing_file(self):
        result = self.runner.invoke(main, ["check", str(self.tmp / "nope.toml")])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("ERROR: Unable to read the fel4 manifest file", result.output)

    def test_check_unexpected_structure(self):
        path = self.write_manifest(UNRECOGNIZED + "[x86_64-sel4-fel4.custom]\nA = 1\n")
        result = self.runner.invoke(main, ["check", path])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("x86_64-sel4-fel4.custom", result.output)

    def test_check_warns_on_unconfigured_selection(self):
        path = self.write_manifest(UNRECOGNIZED.split("[x86_64-sel4-fel4]")[0])
        result = self.runner.invoke(main, ["check", path])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("declared targets:  none", result.output)
        self.assertIn("WARNING", result.output)


class ResolveCommandTests(CliTestCase):

    def test_resolve_yaml(self):
        result = self.runner.invoke(main, ["resolve", str(EXEMPLAR_MANIFEST_PATH), "--profile", "debug"])
        self.assertEqual(result.exit_code, 0, result.output)
        data = yaml.safe_load(result.output)
        self.assertEqual(data["build-profile"], "debug")
        self.assertEqual(data["properties"]["KernelArch"], "x86")
        self.assertIs(data["properties"]["KernelDebugBuild"], True)

    def test_resolve_json(self):
        result = self.runner.invoke(
            main, ["resolve", str(EXEMPLAR_MANIFEST_PATH), "-p", "release", "--format", "json", "--strict"]
        )
        self.assertEqual(result.exit_code, 0, result.output)
        data = json.loads(result.output)
        self.assertIs(data["properties"]["KernelDebugBuild"], False)
        self.assertEqual(data["target-specs-path"], "targets")

    def test_resolve_strict_rejects_unrecognized(self):
        path = self.write_manifest(UNRECOGNIZED)
        result = self.runner.invoke(main, ["resolve", path, "--profile", "debug", "--strict"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("ERROR:", result.output)
        self.assertIn("SomeProp", result.output)

    def test_resolve_lenient_by_default(self):
        path = self.write_manifest(UNRECOGNIZED)
        result = self.runner.invoke(main, ["resolve", path, "--profile", "debug"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(yaml.safe_load(result.output)["properties"]["SomeProp"], "hello")

    def test_resolve_rejects_unknown_profile_option(self):
        result = self.runner.invoke(main, ["resolve", str(EXEMPLAR_MANIFEST_PATH), "--profile", "bench"])
        self.assertEqual(result.exit_code, 2)

    def test_manifest_argument_with_profile_from_environment(self):
        result = self.runner.invoke(
            main,
            ["resolve", str(EXEMPLAR_MANIFEST_PATH)],
            env={"FEL4_MANIFEST_PATH": None, "PROFILE": "release"},
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(yaml.safe_load(result.output)["build-profile"], "release")

    def test_profile_option_with_manifest_from_environment(self):
        result = self.runner.invoke(
            main,
            ["resolve", "--profile", "debug"],
            env={"FEL4_MANIFEST_PATH": str(EXEMPLAR_MANIFEST_PATH), "PROFILE": None},
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(yaml.safe_load(result.output)["build-profile"], "debug")

    def test_manifest_argument_without_profile_reports_profile_variable(self):
        result = self.runner.invoke(
            main,
            ["resolve", str(EXEMPLAR_MANIFEST_PATH)],
            env={"FEL4_MANIFEST_PATH": None, "PROFILE": None},
        )
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Required environment variable PROFILE was absent", result.output)

    def test_resolve_from_environment(self):
        result = self.runner.invoke(
            main,
            ["resolve"],
            env={"FEL4_MANIFEST_PATH": str(EXEMPLAR_MANIFEST_PATH), "PROFILE": "release"},
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(yaml.safe_load(result.output)["build-profile"], "release")

    def test_option_overrides_environment_profile(self):
        result = self.runner.invoke(
            main,
            ["resolve", "--profile", "debug"],
            env={"FEL4_MANIFEST_PATH": str(EXEMPLAR_MANIFEST_PATH), "PROFILE": "release"},
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(yaml.safe_load(result.output)["build-profile"], "debug")

    def test_resolve_missing_environment(self):
        result = self.runner.invoke(main, ["resolve"], env={"FEL4_MANIFEST_PATH": None, "PROFILE": None})
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Required environment variable FEL4_MANIFEST_PATH was absent", result.output)

    def test_resolve_invalid_environment_profile(self):
        result = self.runner.invoke(
            main, ["resolve"], env={"FEL4_MANIFEST_PATH": str(EXEMPLAR_MANIFEST_PATH), "PROFILE": "bench"}
        )
        self.assertEqual(result.exit_code, 1)
        self.assertIn("bench", result.output)


class CmakeArgsCommandTests(CliTestCase):

    def test_cmake_args(self):
        result = self.runner.invoke(
            main,
            [
                "cmake-args",
                str(EXEMPLAR_MANIFEST_PATH),
                "--profile", "debug",
                "--cargo-target", "x86_64-sel4-fel4",
                "--cargo-manifest-dir", str(self.tmp),
            ],
        )
        self.assertEqual(result.exit_code, 0, result.output)
        lines = result.output.splitlines()
        self.assertEqual(lines[:2], ["-G", "Ninja"])
        self.assertIn("-DKernelDebugBuild:BOOL=ON", lines)
        self.assertEqual(lines[-1], str(self.tmp / "deps" / "seL4_kernel"))

    def test_cmake_args_target_mismatch(self):
        result = self.runner.invoke(
            main,
            [
                "cmake-args",
                str(EXEMPLAR_MANIFEST_PATH),
                "--profile", "debug",
                "--cargo-target", "arm-sel4-fel4",
                "--cargo-manifest-dir", str(self.tmp),
            ],
        )
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Cargo is attempting to build for the arm-sel4-fel4 target", result.output)


class VerboseFlagTests(CliTestCase):

    def test_verbose_accepted(self):
        result = self.runner.invoke(main, ["-v", "check", str(EXEMPLAR_MANIFEST_PATH)])
        self.assertEqual(result.exit_code, 0, result.output)


if __name__ == "__main__":
    unittest.main()
