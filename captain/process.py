"""External process helpers.

Every command inherits the operator's terminal streams and blocks until
the child exits.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence

from .console import info, output_header
from .errors import CommandFailedError


@dataclass(frozen=True)
class Step:
    header: str
    cmd: list[str]


def _argv(cmd: Sequence[object]) -> list[str]:
    return [str(part) for part in cmd]


def run(cmd: Sequence[object], cwd: Optional[Path] = None) -> int:
    """Run ``cmd`` and return its exit code (1 if it died from a signal)."""
    argv = _argv(cmd)
    info("Running: " + " ".join(argv))
    try:
        proc = subprocess.run(argv, cwd=str(cwd) if cwd else None)
    except OSError as exc:
        raise FileNotFoundError(f"Error running {argv[0]}: {exc}") from exc
    if proc.returncode < 0:
        return 1
    return proc.returncode


def check(cmd: Sequence[object], cwd: Optional[Path] = None) -> None:
    rc = run(cmd, cwd=cwd)
    if rc != 0:
        raise CommandFailedError(_argv(cmd), rc)


def run_steps(steps: Iterable[Step]) -> None:
    """Run steps in order, stopping at the first non-zero exit."""
    for step in steps:
        output_header(step.header)
        check(step.cmd)
