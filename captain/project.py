"""Workspace setup commands: init, build and program listing."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import tomli_w
from solders.keypair import Keypair

from . import process
from .config import Config, Network, NetworkConfig, Paths, find_config_dir
from .console import info, success, warn
from .constants import (
    ANCHOR_BIN,
    ANCHOR_MARKER,
    CARGO_MANIFEST,
    CONFIG_FILENAME,
    DEFAULT_ARTIFACTS_DIR,
    DEFAULT_PROGRAM_KEYPAIRS_DIR,
    DEPLOYERS_DIR,
    INIT_NETWORKS,
)
from .errors import ManifestNotFoundError, WorkspaceExistsError
from .keys import write_keypair


def default_upgrade_authority() -> str:
    return str(Path.home() / ".config" / "solana" / "id.json")


def init_workspace(directory: Optional[Path] = None) -> Path:
    """Write Captain.toml and per-network deployer keys into ``directory``."""
    root = Path(directory) if directory is not None else Path.cwd()
    config_path = root / CONFIG_FILENAME
    if config_path.exists():
        raise WorkspaceExistsError(
            f"{CONFIG_FILENAME} has already been initialized in this directory."
        )
    if not (root / CARGO_MANIFEST).exists():
        raise ManifestNotFoundError(
            f"{CARGO_MANIFEST} does not exist in the current working directory. "
            "Ensure that you are at the Cargo workspace root."
        )

    networks = {}
    for name in INIT_NETWORKS:
        network = Network.parse(name)
        relative = Path(DEPLOYERS_DIR) / name / "deployer.json"
        deployer = root / relative
        if deployer.exists():
            warn(f"Reusing existing deployer key {relative}")
        else:
            write_keypair(Keypair(), deployer)
        networks[network] = NetworkConfig(
            deployer=relative,
            upgrade_authority=default_upgrade_authority(),
            url=network.url,
            ws_url=network.ws_url,
        )

    config = Config(
        paths=Paths(
            artifacts=Path(DEFAULT_ARTIFACTS_DIR),
            program_keypairs=Path(DEFAULT_PROGRAM_KEYPAIRS_DIR),
        ),
        networks=networks,
    )
    config_path.write_bytes(tomli_w.dumps(config.to_dict()).encode())
    success(f"Initialized {CONFIG_FILENAME} in {root}")
    return config_path


def build_command(root: Path) -> list[str]:
    if (root / ANCHOR_MARKER).exists():
        return [ANCHOR_BIN, "build", "-v"]
    return ["cargo", "build-bpf"]


def build(start: Optional[Path] = None) -> None:
    root = find_config_dir(start)
    cmd = build_command(root)
    if cmd[0] == ANCHOR_BIN:
        success("Anchor found! Running `anchor build -v`.")
    else:
        warn(f"{ANCHOR_MARKER} not found in workspace root. Running `cargo build-bpf`.")
    process.check(cmd, cwd=root)


def list_programs(directory: Optional[Path] = None) -> list[str]:
    root = Path(directory) if directory is not None else Path.cwd()
    deploy_dir = root / "target" / "deploy"
    if not deploy_dir.is_dir():
        raise FileNotFoundError(f"Build output directory not found: {deploy_dir}")
    return sorted(p.stem for p in deploy_dir.iterdir() if p.suffix == ".so")


def print_programs(directory: Optional[Path] = None) -> None:
    for name in list_programs(directory):
        info(f"Program: {name}")
