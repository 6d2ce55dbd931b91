"""Deploy and upgrade pipelines.

Both are linear: each step must exit zero before the next runs, and a
failure leaves already-completed on-chain actions in place.
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

from .console import info, output_header, success, warn
from .constants import UPGRADE_AUTHORITY_ENV
from .errors import AlreadyArchivedError, MissingAuthorityError, ProgramNotDeployedError
from .keys import temporary_keypair
from .process import Step, check, run_steps
from .workspace import Workspace


def upgrade_authority_from_env(env: Optional[Mapping[str, str]] = None) -> str:
    """Keypair path or signer URL (e.g. usb://ledger) for the finalize step."""
    env = os.environ if env is None else env
    value = env.get(UPGRADE_AUTHORITY_ENV)
    if not value:
        raise MissingAuthorityError(f"Must set {UPGRADE_AUTHORITY_ENV} environment variable.")
    return os.path.expanduser(value)


def deploy(workspace: Workspace) -> bool:
    """Deploy a new program. Returns False if it was already on chain."""
    info(f"Deploying program {workspace.program} with version {workspace.deploy_version}")
    info(f"Address: {workspace.program_key}")

    if workspace.show_program():
        info("Program already deployed. Use `captain upgrade` if you want to upgrade the program.")
        return False

    paths = workspace.program_paths
    authority = workspace.network_config.upgrade_authority
    run_steps(
        [
            Step(
                "Deploying program",
                workspace.solana_cmd("program", "deploy", paths.bin, "--program-id", paths.id),
            ),
            Step(
                "Setting upgrade authority",
                workspace.solana_cmd(
                    "program",
                    "set-upgrade-authority",
                    paths.id,
                    "--new-upgrade-authority",
                    authority,
                ),
            ),
        ]
    )

    workspace.show_program()

    if workspace.has_anchor():
        program_id = str(workspace.program_key)
        run_steps(
            [
                Step(
                    "Initializing IDL",
                    workspace.anchor_cmd("idl", "init", program_id, "--filepath", paths.idl),
                ),
                Step(
                    "Setting IDL authority",
                    workspace.anchor_cmd(
                        "idl",
                        "set-authority",
                        "--program-id",
                        program_id,
                        "--new-authority",
                        authority,
                    ),
                ),
            ]
        )

    output_header("Copying artifacts")
    workspace.copy_artifacts()

    success("Deployment success!")
    return True


def upgrade(workspace: Workspace, authority_keypair: str) -> None:
    """Upgrade an existing program through a freshly written buffer."""
    info(f"Upgrading program {workspace.program} with version {workspace.deploy_version}")

    if workspace.artifact_paths.exists():
        raise AlreadyArchivedError(
            "Program artifacts already exist for this version. Make sure to bump your Cargo.toml."
        )

    if not workspace.show_program():
        raise ProgramNotDeployedError(
            "Program does not exist. Use `captain deploy` if you want to deploy "
            "the program for the first time."
        )

    paths = workspace.program_paths
    authority = workspace.network_config.upgrade_authority
    program_id = str(workspace.program_key)

    output_header("Writing buffer")
    with temporary_keypair() as (buffer_kp, buffer_path):
        buffer_key = str(buffer_kp.pubkey())
        info(f"Buffer Pubkey: {buffer_key}")
        check(
            workspace.solana_cmd(
                "program",
                "write-buffer",
                paths.bin,
                "--output",
                "json",
                "--buffer",
                buffer_path,
            )
        )

    run_steps(
        [
            Step(
                "Setting buffer authority",
                workspace.solana_cmd(
                    "program",
                    "set-buffer-authority",
                    buffer_key,
                    "--new-buffer-authority",
                    authority,
                ),
            ),
            Step(
                "Switching to new buffer (please connect your wallet)",
                workspace.solana_cmd(
                    "program",
                    "deploy",
                    "--buffer",
                    buffer_key,
                    "--program-id",
                    program_id,
                    keypair=authority_keypair,
                ),
            ),
        ]
    )

    workspace.show_program()

    if workspace.has_anchor():
        run_steps(
            [
                Step(
                    "Uploading new IDL",
                    workspace.anchor_cmd(
                        "idl", "write-buffer", program_id, "--filepath", paths.idl
                    ),
                )
            ]
        )
        warn(
            f"WARNING: please manually run `anchor idl set-buffer {program_id} --buffer <BUFFER>` "
            "with the upgrade authority wallet"
        )

    output_header("Copying artifacts")
    workspace.copy_artifacts()

    success("Deployment success!")
