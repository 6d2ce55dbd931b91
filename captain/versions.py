"""Semantic versions and program version resolution."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import CARGO_MANIFEST
from .errors import InvalidPackageError, InvalidVersionError, ManifestNotFoundError
from .manifest import load_manifest, package_section, workspace_package_version

_NUM = r"0|[1-9][0-9]*"
_IDENT = r"(?:0|[1-9][0-9]*|[0-9]*[A-Za-z-][0-9A-Za-z-]*)"
_SEMVER_RE = re.compile(
    rf"^(?P<major>{_NUM})\.(?P<minor>{_NUM})\.(?P<patch>{_NUM})"
    rf"(?:-(?P<pre>{_IDENT}(?:\.{_IDENT})*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?\Z",
    re.ASCII,
)


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    major: int
    minor: int
    patch: int
    pre: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> "Version":
        if not isinstance(text, str):
            raise InvalidVersionError(f"invalid version: {text!r}")
        match = _SEMVER_RE.match(text)
        if match is None:
            raise InvalidVersionError(f"invalid version: {text!r}")
        pre = match.group("pre")
        build = match.group("build")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            pre=tuple(pre.split(".")) if pre else (),
            build=tuple(build.split(".")) if build else (),
        )

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            text += "-" + ".".join(self.pre)
        if self.build:
            text += "+" + ".".join(self.build)
        return text

    def _precedence(self) -> tuple:
        # A release sorts after all of its pre-releases; numeric identifiers
        # sort before alphanumeric ones. Build metadata is ignored.
        if not self.pre:
            pre_key: tuple = ((1,),)
        else:
            pre_key = tuple((0, int(p), "") if p.isdigit() else (1, 0, p) for p in self.pre)
            pre_key = ((0,),) + pre_key
        return (self.major, self.minor, self.patch, pre_key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence() == other._precedence()

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence() < other._precedence()

    def __hash__(self) -> int:
        return hash(self._precedence())


def program_manifest_candidates(program: str, root: Path) -> tuple[Path, Path]:
    programs_dir = Path(root) / "programs"
    return (
        programs_dir / program / CARGO_MANIFEST,
        programs_dir / program.replace("_", "-") / CARGO_MANIFEST,
    )


def get_program_version(
    program: str,
    root: Path,
    workspace_manifest: Optional[Dict[str, Any]] = None,
) -> Version:
    """Read the version a program declares in ``programs/<program>/Cargo.toml``.

    Falls back to the hyphenated directory name. ``version.workspace = true``
    is resolved through ``workspace_manifest`` (the root Cargo.toml).
    """
    primary, fallback = program_manifest_candidates(program, root)
    manifest_path = primary if primary.exists() else fallback
    if not manifest_path.exists():
        raise ManifestNotFoundError(
            f"Program Cargo.toml not found at paths {primary} or {fallback}"
        )
    package = package_section(load_manifest(manifest_path))
    if package is None:
        raise InvalidPackageError(f"invalid package: {manifest_path} has no [package] section")

    raw = package.get("version")
    if isinstance(raw, dict) and raw.get("workspace") is True:
        raw = workspace_package_version(workspace_manifest)
        if raw is None:
            raise InvalidVersionError(
                f"{manifest_path} inherits its version from the workspace, "
                "but the root Cargo.toml has no [workspace.package] version"
            )
    return Version.parse(raw)


def resolve_version(
    explicit: Optional[Version],
    program: str,
    root: Path,
    workspace_manifest: Optional[Dict[str, Any]] = None,
) -> Version:
    if explicit is not None:
        return explicit
    return get_program_version(program, root, workspace_manifest)
