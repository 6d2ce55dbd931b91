"""Cargo manifest loading utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from .errors import ManifestNotFoundError


def load_toml(text: str) -> Dict[str, Any]:
    try:
        import tomllib  # Python 3.11+
    except ImportError:  # pragma: no cover
        import tomli as tomllib  # type: ignore
    return tomllib.loads(text)


def _load_toml_bytes(data: bytes) -> Dict[str, Any]:
    return load_toml(data.decode("utf-8"))


def load_manifest(path: str | Path) -> Dict[str, Any]:
    manifest_path = Path(path)
    if not manifest_path.exists():
        raise ManifestNotFoundError(f"Cargo.toml not found: {manifest_path}")
    return _load_toml_bytes(manifest_path.read_bytes())


def package_section(manifest: Dict[str, Any]) -> Dict[str, Any] | None:
    package = manifest.get("package")
    return package if isinstance(package, dict) else None


def workspace_package_version(manifest: Dict[str, Any] | None) -> Any:
    """Return ``[workspace.package].version`` from a root manifest, if any."""
    if not manifest:
        return None
    workspace = manifest.get("workspace")
    if not isinstance(workspace, dict):
        return None
    package = workspace.get("package")
    if not isinstance(package, dict):
        return None
    return package.get("version")
