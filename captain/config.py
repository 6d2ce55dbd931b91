"""Captain.toml loading and the network table."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from functools import total_ordering
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from .constants import (
    ARTIFACT_BIN_NAME,
    ARTIFACT_IDL_NAME,
    CARGO_MANIFEST,
    CONFIG_FILENAME,
    NETWORK_URLS,
)
from .errors import ConfigNotFoundError, ConfigParseError, UnknownNetworkError
from .manifest import load_manifest, load_toml
from .versions import Version


@total_ordering
class Network(Enum):
    TESTNET = "testnet"
    MAINNET = "mainnet"
    DEVNET = "devnet"
    LOCALNET = "localnet"
    DEBUG = "debug"

    def __str__(self) -> str:
        return self.value

    def __lt__(self, other: "Network") -> bool:
        if not isinstance(other, Network):
            return NotImplemented
        members = list(Network)
        return members.index(self) < members.index(other)

    @classmethod
    def parse(cls, name: str) -> "Network":
        if isinstance(name, Network):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            names = ", ".join(n.value for n in cls)
            raise ValueError(f"unknown network {name!r} (expected one of: {names})") from None

    @classmethod
    def names(cls) -> list[str]:
        return [n.value for n in cls]

    @property
    def url(self) -> str:
        return NETWORK_URLS[self.value][0]

    @property
    def ws_url(self) -> str:
        return NETWORK_URLS[self.value][1]


@dataclass(frozen=True)
class NetworkConfig:
    deployer: Path
    # Keypair path or a hardware signer such as usb://ledger?key=0.
    upgrade_authority: str
    url: Optional[str] = None
    ws_url: Optional[str] = None


@dataclass(frozen=True)
class Paths:
    artifacts: Path
    program_keypairs: Path


@dataclass(frozen=True)
class ArtifactPaths:
    root: Path
    bin: Path
    idl: Path

    def exists(self) -> bool:
        """True if either archived file is already present."""
        return self.bin.exists() or self.idl.exists()


@dataclass(frozen=True)
class Config:
    paths: Paths
    networks: Dict[Network, NetworkConfig] = field(default_factory=dict)

    def network_config(self, network: Network) -> NetworkConfig:
        try:
            return self.networks[network]
        except KeyError:
            raise UnknownNetworkError(f"network {network} not found in {CONFIG_FILENAME}") from None

    def program_kp_path(self, version: Version, program: str) -> Path:
        return self.paths.program_keypairs / f"{program}-{version.major}.x.json"

    def artifact_paths(self, program: str, version: Union[Version, str]) -> ArtifactPaths:
        root = self.paths.artifacts / program / str(version)
        return ArtifactPaths(
            root=root,
            bin=root / ARTIFACT_BIN_NAME,
            idl=root / ARTIFACT_IDL_NAME,
        )

    def anchored(self, base: Path) -> "Config":
        """Resolve relative paths against ``base``."""

        def anchor(path: Path) -> Path:
            return path if path.is_absolute() else base / path

        return Config(
            paths=Paths(
                artifacts=anchor(self.paths.artifacts),
                program_keypairs=anchor(self.paths.program_keypairs),
            ),
            networks={
                network: replace(cfg, deployer=anchor(cfg.deployer))
                for network, cfg in self.networks.items()
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        networks: Dict[str, Any] = {}
        for network in sorted(self.networks):
            cfg = self.networks[network]
            entry: Dict[str, Any] = {
                "deployer": str(cfg.deployer),
                "upgrade_authority": cfg.upgrade_authority,
            }
            if cfg.url:
                entry["url"] = cfg.url
            if cfg.ws_url:
                entry["ws_url"] = cfg.ws_url
            networks[network.value] = entry
        return {
            "paths": {
                "artifacts": str(self.paths.artifacts),
                "program_keypairs": str(self.paths.program_keypairs),
            },
            "networks": networks,
        }


def artifact_paths(config: Config, program: str, version: Union[Version, str]) -> ArtifactPaths:
    return config.artifact_paths(program, version)


def _expand_path(value: Any, name: str) -> Path:
    if not isinstance(value, str) or not value.strip():
        raise ConfigParseError(f"{name} must be a non-empty path string")
    try:
        return Path(value).expanduser()
    except RuntimeError as exc:
        raise ConfigParseError(f"{name}: unable to expand {value!r}: {exc}") from exc


def _optional_str(entry: Dict[str, Any], key: str, name: str) -> Optional[str]:
    value = entry.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigParseError(f"{name}.{key} must be a string")
    return value


def _parse_network_config(entry: Any, name: str) -> NetworkConfig:
    if not isinstance(entry, dict):
        raise ConfigParseError(f"{name} must be a table")
    authority = entry.get("upgrade_authority")
    if not isinstance(authority, str) or not authority.strip():
        raise ConfigParseError(f"{name}.upgrade_authority must be a non-empty string")
    return NetworkConfig(
        deployer=_expand_path(entry.get("deployer"), f"{name}.deployer"),
        upgrade_authority=authority,
        url=_optional_str(entry, "url", name),
        ws_url=_optional_str(entry, "ws_url", name),
    )


def config_from_dict(data: Dict[str, Any]) -> Config:
    paths = data.get("paths")
    if not isinstance(paths, dict):
        raise ConfigParseError("missing [paths] section")
    raw_networks = data.get("networks", {})
    if not isinstance(raw_networks, dict):
        raise ConfigParseError("[networks] must be a table")

    networks: Dict[Network, NetworkConfig] = {}
    for key, entry in raw_networks.items():
        try:
            network = Network.parse(key)
        except ValueError as exc:
            raise ConfigParseError(str(exc)) from exc
        if network in networks:
            raise ConfigParseError(f"network {network} is configured more than once")
        networks[network] = _parse_network_config(entry, f"networks.{key}")

    return Config(
        paths=Paths(
            artifacts=_expand_path(paths.get("artifacts"), "paths.artifacts"),
            program_keypairs=_expand_path(paths.get("program_keypairs"), "paths.program_keypairs"),
        ),
        networks=networks,
    )


def parse_config(text: str) -> Config:
    try:
        data = load_toml(text)
    except ValueError as exc:
        raise ConfigParseError(f"Unable to deserialize config: {exc}") from exc
    return config_from_dict(data)


def find_config_dir(start: Optional[Path] = None) -> Path:
    """Return the nearest directory at or above ``start`` holding Captain.toml."""
    current = Path(start) if start is not None else Path.cwd()
    current = current.resolve()
    for directory in (current, *current.parents):
        if (directory / CONFIG_FILENAME).is_file():
            return directory
    raise ConfigNotFoundError(f"{CARGO_MANIFEST} and {CONFIG_FILENAME} not found")


def discover(start: Optional[Path] = None) -> Tuple[Config, Dict[str, Any], Path]:
    """Find Captain.toml above ``start`` and load it with its sibling Cargo.toml.

    Relative paths in the config are anchored to the directory it was found in.
    """
    root = find_config_dir(start)
    config_path = root / CONFIG_FILENAME
    try:
        config = parse_config(config_path.read_text())
    except ConfigParseError as exc:
        raise ConfigParseError(f"{config_path}: {exc}") from exc
    manifest = load_manifest(root / CARGO_MANIFEST)
    return config.anchored(root), manifest, root
