"""Shared fixtures for captain tests."""

from __future__ import annotations

import os
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from solders.keypair import Keypair

from captain.keys import write_keypair

CAPTAIN_TOML = """
[paths]
artifacts = "./.archive"
program_keypairs = "./keys"

[networks.devnet]
deployer = "./deployers/devnet.json"
upgrade_authority = "AuthUpgrade1111111111111111111111111111111"

[networks.localnet]
deployer = "./deployers/localnet.json"
upgrade_authority = "usb://ledger?key=0"
url = "http://localhost:9999"
""".lstrip()


def make_project(
    root: Path,
    program: str = "token",
    version: str = "1.2.0",
    anchor: bool = False,
    config_text: str = CAPTAIN_TOML,
) -> Keypair:
    """Lay out a built workspace and return the program identity keypair."""
    (root / "Captain.toml").write_text(config_text)
    (root / "Cargo.toml").write_text('[workspace]\nmembers = ["programs/*"]\n')
    if anchor:
        (root / "Anchor.toml").write_text("[provider]\ncluster = \"devnet\"\n")

    program_dir = root / "programs" / program
    program_dir.mkdir(parents=True)
    (program_dir / "Cargo.toml").write_text(f'[package]\nname = "{program}"\nversion = "{version}"\n')

    deploy_dir = root / "target" / "deploy"
    deploy_dir.mkdir(parents=True)
    (deploy_dir / f"{program}.so").write_bytes(b"\x7fELF-program")
    idl_dir = root / "target" / "idl"
    idl_dir.mkdir(parents=True)
    (idl_dir / f"{program}.json").write_text('{"name": "%s"}' % program)

    major = version.split(".")[0]
    identity = Keypair()
    write_keypair(identity, root / "keys" / f"{program}-{major}.x.json")
    write_keypair(Keypair(), root / "deployers" / "devnet.json")
    write_keypair(Keypair(), root / "deployers" / "localnet.json")
    return identity


def completed(returncode: int) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode)


class FakeRunner:
    """Stands in for subprocess.run, answering by subcommand."""

    def __init__(self, codes: dict[tuple[str, ...], int] | None = None, default: int = 0) -> None:
        self.codes = codes or {}
        self.default = default
        self.calls: list[list[str]] = []

    def __call__(self, argv, cwd=None, **kwargs):
        self.calls.append(list(argv))
        for key, code in self.codes.items():
            if _matches(argv, key):
                return completed(code)
        return completed(self.default)

    def commands(self) -> list[tuple[str, ...]]:
        return [_subcommand(argv) for argv in self.calls]


def _subcommand(argv: list[str]) -> tuple[str, ...]:
    """Strip global flags: ("program", "show") or ("idl", "init")."""
    words = []
    skip = False
    for part in argv[1:]:
        if skip:
            skip = False
            continue
        if part.startswith("--"):
            skip = True
            continue
        words.append(part)
        if len(words) == 2:
            break
    return tuple(words)


def _matches(argv: list[str], key: tuple[str, ...]) -> bool:
    return _subcommand(list(argv)) == key


@contextmanager
def working_directory(path: Path) -> Iterator[Path]:
    previous = os.getcwd()
    os.chdir(path)
    try:
        yield Path(path)
    finally:
        os.chdir(previous)
