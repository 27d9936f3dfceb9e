from __future__ import annotations

import os
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path
from typing import Dict

from jagarchive.archive import JagArchive
from jagarchive.hashutil import hash_filename


def _random_bytes(size: int) -> bytes:
    return os.urandom(size)


def _build_fixture_files(root: Path) -> Dict[str, bytes]:
    files: Dict[str, bytes] = {
        "readme.txt": b"hello world\n" * 200,
        "death.pcm": _random_bytes(2048),
        "empty.dat": b"",
    }
    for name, content in files.items():
        (root / name).write_bytes(content)
    return files


class CLIIntegrationTests(unittest.TestCase):
    def run_cli(self, args, *, expect: int | None = 0, cwd: Path | None = None):
        cmd = [sys.executable, "-m", "jagarchive.cli"] + list(args)
        env = os.environ.copy()
        repo_root = Path(__file__).resolve().parent
        existing = env.get("PYTHONPATH", "")
        env["PYTHONPATH"] = str(repo_root) if not existing else f"{repo_root}{os.pathsep}{existing}"
        proc = subprocess.run(
            cmd,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            env=env,
        )
        if expect is not None and proc.returncode != expect:
            raise AssertionError(
                f"CLI exited {proc.returncode}, expected {expect}\nCommand: {' '.join(cmd)}\nSTDOUT:\n{proc.stdout}\nSTDERR:\n{proc.stderr}"
            )
        return proc

    def make_workspace(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        root = Path(tmp.name)
        return root, _build_fixture_files(root)

    def test_add_creates_archive_and_extract_roundtrips(self):
        root, files = self.make_workspace()
        archive = root / "test.jag"
        self.assertFalse(archive.exists())
        self.run_cli(["add", str(archive)] + [str(root / n) for n in files])
        self.assertTrue(archive.exists())

        jag = JagArchive.from_bytes(archive.read_bytes())
        self.assertFalse(jag.whole_block_compressed)
        for name, content in files.items():
            self.assertEqual(jag.get_entry(name), content)

        out = root / "out"
        out.mkdir()
        self.run_cli(
            ["x", str(archive), "README.TXT", "death.pcm", "-o", str(out / "a.txt"), str(out / "b.pcm")]
        )
        self.assertEqual((out / "a.txt").read_bytes(), files["readme.txt"])
        self.assertEqual((out / "b.pcm").read_bytes(), files["death.pcm"])

    def test_extract_by_hash(self):
        root, files = self.make_workspace()
        archive = root / "test.jag"
        self.run_cli(["a", str(archive), str(root / "readme.txt")])
        target = root / "by_hash.txt"
        self.run_cli(["extract", str(archive), str(hash_filename("readme.txt")), "--output", str(target)])
        self.assertEqual(target.read_bytes(), files["readme.txt"])

    def test_extract_output_count_mismatch(self):
        root, _ = self.make_workspace()
        archive = root / "test.jag"
        self.run_cli(["add", str(archive), str(root / "readme.txt")])
        proc = self.run_cli(["x", str(archive), "readme.txt", "-o", "a", "b"], expect=2)
        self.assertIn("invalid number of output names", proc.stderr)

    def test_group_compression(self):
        root, files = self.make_workspace()
        archive = root / "grouped.mem"
        self.run_cli(["add", "-g", str(archive)] + [str(root / n) for n in files])
        raw = archive.read_bytes()
        self.assertNotEqual(raw[0:3], raw[3:6])
        jag = JagArchive.from_bytes(raw)
        self.assertTrue(jag.whole_block_compressed)
        self.assertEqual(jag.get_entry("death.pcm"), files["death.pcm"])

        info = self.run_cli(["info", str(archive)])
        self.assertIn("whole block", info.stdout)
        self.assertIn("Entries: 3", info.stdout)

    def test_add_to_existing_archive(self):
        root, files = self.make_workspace()
        archive = root / "test.jag"
        self.run_cli(["add", str(archive), str(root / "readme.txt")])
        self.run_cli(["add", str(archive), str(root / "death.pcm")])
        jag = JagArchive.from_bytes(archive.read_bytes())
        self.assertEqual(len(jag), 2)
        self.assertEqual(jag.get_entry("readme.txt"), files["readme.txt"])

    def test_delete_keeps_compression_mode(self):
        root, files = self.make_workspace()
        archive = root / "grouped.jag"
        self.run_cli(["add", "--group", str(archive)] + [str(root / n) for n in files])
        proc = self.run_cli(["d", str(archive), "death.pcm", str(hash_filename("empty.dat"))])
        self.assertIn("deleting: death.pcm", proc.stdout)
        jag = JagArchive.from_bytes(archive.read_bytes())
        self.assertTrue(jag.whole_block_compressed)
        self.assertEqual(list(jag), [hash_filename("readme.txt")])

    def test_delete_missing_entry_fails(self):
        root, _ = self.make_workspace()
        archive = root / "test.jag"
        self.run_cli(["add", str(archive), str(root / "readme.txt")])
        before = archive.read_bytes()
        proc = self.run_cli(["delete", str(archive), "nosuch.txt"], expect=2)
        self.assertIn("not found", proc.stderr)
        self.assertEqual(archive.read_bytes(), before)

    def test_list(self):
        root, files = self.make_workspace()
        archive = root / "test.jag"
        self.run_cli(["add", str(archive)] + [str(root / n) for n in files])
        proc = self.run_cli(["l", str(archive)])
        lines = proc.stdout.splitlines()
        self.assertEqual(lines[0], "hash\t\tsize")
        self.assertIn(f"{hash_filename('death.pcm')}\t2048 (2.0 kB)", lines)
        self.assertIn(f"{hash_filename('empty.dat')}\t0 (0 B)", lines)

    def test_hash(self):
        proc = self.run_cli(["hash", "test.txt"])
        self.assertEqual(proc.stdout.strip(), str(hash_filename("TEST.TXT")))
        proc = self.run_cli(["h", "A"])
        self.assertEqual(proc.stdout.strip(), "33")

    def test_missing_archive(self):
        with tempfile.TemporaryDirectory() as tmp:
            proc = self.run_cli(["list", str(Path(tmp) / "absent.jag")], expect=2)
            self.assertIn("Error:", proc.stderr)

    def test_corrupt_archive(self):
        with tempfile.TemporaryDirectory() as tmp:
            archive = Path(tmp) / "bad.jag"
            archive.write_bytes(b"\x00\x00\x64\x00\x00\x0a" + b"\x13" * 10)
            proc = self.run_cli(["list", str(archive)], expect=2)
            self.assertIn("decompression failed", proc.stderr)


if __name__ == "__main__":
    unittest.main()
