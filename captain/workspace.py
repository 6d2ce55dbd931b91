"""Per-invocation deploy context: resolved version, paths, keys and network."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from solders.pubkey import Pubkey

from . import process
from .config import ArtifactPaths, Config, Network, NetworkConfig, discover
from .constants import ANCHOR_BIN, ANCHOR_MARKER, SOLANA_BIN
from .errors import MissingPathError
from .keys import read_pubkey
from .versions import Version, resolve_version


@dataclass(frozen=True)
class ProgramPaths:
    bin: Path
    idl: Path
    id: Path


def program_paths(config: Config, program: str, root: Path, version: Version) -> ProgramPaths:
    """Locate the build outputs and identity keypair, failing on the first missing one."""
    root = Path(root)
    paths = ProgramPaths(
        bin=root / "target" / "deploy" / f"{program}.so",
        idl=root / "target" / "idl" / f"{program}.json",
        id=config.program_kp_path(version, program),
    )
    if not paths.bin.exists():
        raise MissingPathError("bin", paths.bin, "Program bin")
    if not paths.idl.exists():
        raise MissingPathError("idl", paths.idl, "Program idl")
    if not paths.id.exists():
        raise MissingPathError("id", paths.id, "Program id")
    return paths


@dataclass
class Workspace:
    root: Path
    program: str
    network: Network
    deployer_path: Path
    deploy_version: Version
    program_paths: ProgramPaths
    config: Config
    network_config: NetworkConfig
    artifact_paths: ArtifactPaths
    program_key: Pubkey
    manifest: Optional[Dict[str, Any]] = None

    def network_url(self) -> str:
        return self.network_config.url or self.network.url

    def ws_url(self) -> str:
        return self.network_config.ws_url or self.network.ws_url

    def cluster(self) -> str:
        """Value for anchor's ``--provider.cluster``."""
        return self.network_config.url or str(self.network)

    def has_anchor(self) -> bool:
        """True if the workspace root is also an Anchor workspace."""
        return (self.root / ANCHOR_MARKER).exists()

    def solana_cmd(self, *args: object, keypair: Optional[Path | str] = None) -> list[str]:
        signer = keypair if keypair is not None else self.deployer_path
        cmd = [SOLANA_BIN, "--url", self.network_url(), "--keypair", str(signer)]
        cmd.extend(str(a) for a in args)
        return cmd

    def anchor_cmd(self, subcommand: str, *args: object) -> list[str]:
        cmd = [
            ANCHOR_BIN,
            subcommand,
            "--provider.cluster",
            self.cluster(),
            "--provider.wallet",
            str(self.deployer_path),
        ]
        cmd.extend(str(a) for a in args)
        return cmd

    def show_program(self) -> bool:
        """True if ``solana program show`` finds the program on chain."""
        return process.run(self.solana_cmd("program", "show", self.program_key)) == 0

    def copy_artifacts(self) -> None:
        self.artifact_paths.root.mkdir(parents=True, exist_ok=True)
        shutil.copy2(self.program_paths.bin, self.artifact_paths.bin)
        shutil.copy2(self.program_paths.idl, self.artifact_paths.idl)


def load(
    program: str,
    version: Optional[Version],
    network: Network,
    start: Optional[Path] = None,
) -> Workspace:
    config, manifest, root = discover(start)

    deploy_version = resolve_version(version, program, root, manifest)
    paths = program_paths(config, program, root, deploy_version)

    network_config = config.network_config(network)
    deployer_path = network_config.deployer
    if not deployer_path.exists():
        raise MissingPathError("deployer", deployer_path, "Deployer")

    artifacts = config.artifact_paths(program, deploy_version)
    artifacts.root.mkdir(parents=True, exist_ok=True)

    program_key = read_pubkey(paths.id)

    return Workspace(
        root=root,
        program=program,
        network=network,
        deployer_path=deployer_path,
        deploy_version=deploy_version,
        program_paths=paths,
        config=config,
        network_config=network_config,
        artifact_paths=artifacts,
        program_key=program_key,
        manifest=manifest,
    )
