"""Exceptions raised by captain.

Discovery failures are ``FileNotFoundError`` subclasses; parse and
precondition failures are ``ValueError`` subclasses. ``cli.main`` maps the
former two to exit code 1 and ``CommandFailedError`` to the child's code.
"""

from __future__ import annotations

from pathlib import Path


class CaptainError(Exception):
    """Base class for captain errors."""


class ConfigNotFoundError(CaptainError, FileNotFoundError):
    """No Captain.toml in the starting directory or any ancestor."""


class ConfigParseError(CaptainError, ValueError):
    """Captain.toml exists but could not be deserialized."""


class ManifestNotFoundError(CaptainError, FileNotFoundError):
    """A Cargo.toml that was expected on disk is missing."""


class InvalidPackageError(CaptainError, ValueError):
    """A program manifest has no [package] section."""


class InvalidVersionError(CaptainError, ValueError):
    """A version string is not valid semantic-version syntax."""


class MissingPathError(CaptainError, ValueError):
    """A required input path does not exist."""

    def __init__(self, kind: str, path: Path, label: str | None = None) -> None:
        self.kind = kind
        self.path = Path(path)
        super().__init__(f"{label or kind} path {self.path} does not exist")


class InvalidKeypairError(CaptainError, ValueError):
    """A keypair file could not be read or decoded."""


class UnknownNetworkError(CaptainError, ValueError):
    """The requested network has no entry in Captain.toml."""


class MissingAuthorityError(CaptainError, ValueError):
    """UPGRADE_AUTHORITY_KEYPAIR was not provided."""


class AlreadyArchivedError(CaptainError, ValueError):
    """Artifacts for this program version are already archived."""


class ProgramNotDeployedError(CaptainError, ValueError):
    """An upgrade was requested for a program that is not on chain."""


class WorkspaceExistsError(CaptainError, ValueError):
    """``captain init`` was run in an initialized directory."""


class CommandFailedError(CaptainError):
    """An external command exited non-zero."""

    def __init__(self, argv: list[str], returncode: int) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        super().__init__(f"{argv[0] if argv else 'command'} exited with code {returncode}")
