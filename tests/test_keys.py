import json
import stat
import tempfile
import unittest
from pathlib import Path

from solders.keypair import Keypair

from captain.errors import InvalidKeypairError
from captain.keys import load_keypair, read_pubkey, temporary_keypair, write_keypair


class KeypairFileTests(unittest.TestCase):
    def test_reads_solana_keygen_format(self) -> None:
        keypair = Keypair()
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "id.json"
            path.write_text(json.dumps(list(bytes(keypair))))
            self.assertEqual(read_pubkey(path), keypair.pubkey())

    def test_written_file_is_private(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = write_keypair(Keypair(), Path(td) / "nested" / "kp.json")
            self.assertEqual(stat.S_IMODE(path.stat().st_mode), 0o600)
            self.assertEqual(len(json.loads(path.read_text())), 64)

    def test_rejects_bad_files(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            (root / "short.json").write_text("[1, 2, 3]")
            (root / "garbage.json").write_text("not json")
            (root / "range.json").write_text(json.dumps([300] * 64))
            for name in ("short.json", "garbage.json", "range.json", "missing.json"):
                with self.assertRaisesRegex(InvalidKeypairError, "could not read kp file"):
                    load_keypair(root / name)

    def test_temporary_keypair_is_removed(self) -> None:
        with temporary_keypair() as (keypair, path):
            self.assertEqual(load_keypair(path).pubkey(), keypair.pubkey())
        self.assertFalse(path.exists())
        self.assertFalse(path.parent.exists())

    def test_temporary_keypair_removed_on_error(self) -> None:
        with self.assertRaises(RuntimeError):
            with temporary_keypair() as (_, path):
                raise RuntimeError("boom")
        self.assertFalse(path.exists())


if __name__ == "__main__":
    unittest.main()
