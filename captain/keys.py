"""Solana keypair file helpers."""

from __future__ import annotations

import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Tuple

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from .errors import InvalidKeypairError


def load_keypair(path: Path) -> Keypair:
    path = Path(path)
    try:
        raw = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as exc:
        raise InvalidKeypairError(f"could not read kp file {path}: {exc}") from exc
    if not isinstance(raw, list) or len(raw) != 64:
        raise InvalidKeypairError(f"could not read kp file {path}: expected a 64-byte JSON array")
    try:
        return Keypair.from_bytes(bytes(raw))
    except (TypeError, ValueError) as exc:
        raise InvalidKeypairError(f"could not read kp file {path}: {exc}") from exc


def read_pubkey(path: Path) -> Pubkey:
    return load_keypair(path).pubkey()


def write_keypair(keypair: Keypair, path: Path) -> Path:
    """Write ``keypair`` in the solana-keygen JSON format, owner-readable only."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w") as handle:
        handle.write(json.dumps(list(bytes(keypair))))
    return path


@contextmanager
def temporary_keypair() -> Iterator[Tuple[Keypair, Path]]:
    """Yield a fresh keypair stored in a temp directory removed on exit."""
    keypair = Keypair()
    with tempfile.TemporaryDirectory(prefix="captain-buffer-") as tmpdir:
        path = write_keypair(keypair, Path(tmpdir) / "buffer.json")
        yield keypair, path
