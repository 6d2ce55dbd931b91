"""CLI entrypoint for captain."""

from __future__ import annotations

import argparse
import os
import sys

from . import __version__
from .config import Network
from .console import error
from .constants import DEFAULT_NETWORK
from .deploy import deploy, upgrade, upgrade_authority_from_env
from .errors import CommandFailedError
from .project import build, init_workspace, print_programs
from .versions import Version
from .workspace import load


def _parse_version(value: str) -> Version:
    try:
        return Version.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _cmd_init(args: argparse.Namespace) -> int:
    init_workspace()
    return 0


def _cmd_build(args: argparse.Namespace) -> int:
    build()
    return 0


def _cmd_programs(args: argparse.Namespace) -> int:
    print_programs()
    return 0


def _cmd_deploy(args: argparse.Namespace) -> int:
    workspace = load(args.program, args.version, Network.parse(args.network))
    deploy(workspace)
    return 0


def _cmd_upgrade(args: argparse.Namespace) -> int:
    authority_keypair = upgrade_authority_from_env()
    workspace = load(args.program, args.version, Network.parse(args.network))
    upgrade(workspace, authority_keypair)
    return 0


def _add_program_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-v", "--version", type=_parse_version, help="Version to deploy (default: from Cargo.toml)")
    parser.add_argument("-p", "--program", required=True, help="Name of the program in target/deploy/<id>.so")
    parser.add_argument(
        "-n",
        "--network",
        choices=Network.names(),
        default=DEFAULT_NETWORK,
        help="Network to deploy to",
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog=os.path.basename(sys.argv[0]) or "captain",
        description="Versioned deploys and upgrades of Solana programs.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_init = sub.add_parser("init", help="Initializes a new Captain workspace.")
    p_init.set_defaults(func=_cmd_init)

    p_build = sub.add_parser("build", help="Builds all programs. (Uses Anchor)")
    p_build.set_defaults(func=_cmd_build)

    p_programs = sub.add_parser("programs", help="Lists all available programs.")
    p_programs.set_defaults(func=_cmd_programs)

    p_deploy = sub.add_parser("deploy", help="Deploys a program.")
    _add_program_args(p_deploy)
    p_deploy.set_defaults(func=_cmd_deploy)

    p_upgrade = sub.add_parser("upgrade", help="Upgrades a program.")
    _add_program_args(p_upgrade)
    p_upgrade.set_defaults(func=_cmd_upgrade)

    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except CommandFailedError as exc:
        error(str(exc))
        return exc.returncode
    except OSError as exc:
        error(str(exc))
        return 1
    except ValueError as exc:
        error(str(exc))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
