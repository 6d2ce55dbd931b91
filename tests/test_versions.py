import tempfile
import unittest
from pathlib import Path

from captain.errors import InvalidPackageError, InvalidVersionError, ManifestNotFoundError
from captain.versions import Version, get_program_version, resolve_version


def _write_program_manifest(root: Path, dirname: str, body: str) -> None:
    path = root / "programs" / dirname / "Cargo.toml"
    path.parent.mkdir(parents=True)
    path.write_text(body)


class VersionParseTests(unittest.TestCase):
    def test_parse_round_trips_text(self) -> None:
        for text in ("0.1.0", "1.2.3-alpha.1", "2.0.0-rc.1+build.5"):
            self.assertEqual(str(Version.parse(text)), text)

    def test_rejects_non_semver(self) -> None:
        for text in ("1.2", "01.2.3", "1.2.3.4", "v1.2.3", "", "1.2.3-", "1.1\u0662.3", "\u0661.0.0"):
            with self.assertRaises(InvalidVersionError):
                Version.parse(text)

    def test_precedence(self) -> None:
        ordered = ["1.0.0-alpha", "1.0.0-alpha.1", "1.0.0-beta", "1.0.0-rc.1", "1.0.0", "1.0.1", "1.10.0"]
        versions = [Version.parse(v) for v in ordered]
        self.assertEqual(sorted(reversed(versions)), versions)
        self.assertEqual(Version.parse("1.0.0+abc"), Version.parse("1.0.0"))

    def test_rejects_surrounding_whitespace(self) -> None:
        for text in (" 1.2.0", "1.2.0 ", "1.2.0\n"):
            with self.assertRaises(InvalidVersionError):
                Version.parse(text)

    def test_major(self) -> None:
        self.assertEqual(Version.parse("3.4.5").major, 3)


class ResolveVersionTests(unittest.TestCase):
    def test_explicit_version_ignores_manifest(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            _write_program_manifest(root, "token", '[package]\nname = "token"\nversion = "0.9.0"\n')
            explicit = Version.parse("4.0.0")
            self.assertIs(resolve_version(explicit, "token", root), explicit)

    def test_explicit_version_needs_no_manifest(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            explicit = Version.parse("1.0.0")
            self.assertEqual(resolve_version(explicit, "missing", Path(td)), explicit)

    def test_reads_manifest_version(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            _write_program_manifest(root, "token", '[package]\nname = "token"\nversion = "1.2.0"\n')
            self.assertEqual(str(resolve_version(None, "token", root)), "1.2.0")

    def test_falls_back_to_hyphenated_directory(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            _write_program_manifest(root, "my-token", '[package]\nname = "my-token"\nversion = "0.3.1"\n')
            self.assertEqual(str(get_program_version("my_token", root)), "0.3.1")

    def test_missing_manifest_names_both_paths(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(ManifestNotFoundError) as ctx:
                resolve_version(None, "my_token", Path(td))
            message = str(ctx.exception)
            self.assertIn(str(Path("programs") / "my_token" / "Cargo.toml"), message)
            self.assertIn(str(Path("programs") / "my-token" / "Cargo.toml"), message)

    def test_invalid_manifest_version(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            _write_program_manifest(root, "token", '[package]\nname = "token"\nversion = "one"\n')
            with self.assertRaises(InvalidVersionError):
                resolve_version(None, "token", root)

    def test_manifest_without_package(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            _write_program_manifest(root, "token", '[lib]\nname = "token"\n')
            with self.assertRaises(InvalidPackageError):
                resolve_version(None, "token", root)

    def test_workspace_inherited_version(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            _write_program_manifest(root, "token", '[package]\nname = "token"\nversion.workspace = true\n')
            workspace_manifest = {"workspace": {"package": {"version": "2.1.0"}}}
            self.assertEqual(str(resolve_version(None, "token", root, workspace_manifest)), "2.1.0")
            with self.assertRaises(InvalidVersionError):
                resolve_version(None, "token", root, {"workspace": {}})


if __name__ == "__main__":
    unittest.main()
