"""Tests for content fingerprints."""

import hashlib

import pytest

from svcs.core.fingerprint import CHUNK_SIZE, file_fingerprint, snapshot_fingerprint


def _md5(data: bytes) -> str:
    return hashlib.md5(data).hexdigest()


class TestFileFingerprint:
    def test_matches_md5_of_content(self, temp_project):
        """Test file fingerprint is the MD5 of the bytes."""
        (temp_project / "a.txt").write_bytes(b"hello")

        assert file_fingerprint(temp_project / "a.txt") == _md5(b"hello")

    def test_large_file_is_streamed(self, temp_project):
        """Test files larger than one chunk hash the same as in one go."""
        data = b"x" * (CHUNK_SIZE * 3 + 7)
        (temp_project / "big.bin").write_bytes(data)

        assert file_fingerprint(temp_project / "big.bin") == _md5(data)

    def test_missing_file_raises(self, temp_project):
        """Test unreadable file raises OSError."""
        with pytest.raises(OSError):
            file_fingerprint(temp_project / "gone.txt")


class TestSnapshotFingerprint:
    def test_empty_returns_none(self, temp_project):
        """Test no tracked files yields no fingerprint."""
        assert snapshot_fingerprint([], temp_project) is None

    def test_combines_file_digests(self, temp_project):
        """Test snapshot fingerprint hashes concatenated file digests."""
        (temp_project / "a.txt").write_bytes(b"hello")
        (temp_project / "b.txt").write_bytes(b"world")

        expected = _md5((_md5(b"hello") + _md5(b"world")).encode())
        assert snapshot_fingerprint(["a.txt", "b.txt"], temp_project) == expected

    def test_deterministic(self, temp_project):
        """Test repeated computation gives the same value."""
        (temp_project / "a.txt").write_text("hello")

        first = snapshot_fingerprint(["a.txt"], temp_project)
        second = snapshot_fingerprint(["a.txt"], temp_project)

        assert first == second
        assert len(first) == 32

    def test_order_sensitive(self, temp_project):
        """Test reordering tracked files changes the fingerprint."""
        (temp_project / "a.txt").write_text("hello")
        (temp_project / "b.txt").write_text("world")

        forward = snapshot_fingerprint(["a.txt", "b.txt"], temp_project)
        backward = snapshot_fingerprint(["b.txt", "a.txt"], temp_project)

        assert forward != backward

    def test_content_change_changes_fingerprint(self, temp_project):
        """Test editing a tracked file changes the fingerprint."""
        target = temp_project / "a.txt"
        target.write_text("hello")
        before = snapshot_fingerprint(["a.txt"], temp_project)

        target.write_text("hellp")
        after = snapshot_fingerprint(["a.txt"], temp_project)

        assert before != after

    def test_nested_paths(self, temp_project):
        """Test paths in subdirectories are resolved against the root."""
        (temp_project / "src").mkdir()
        (temp_project / "src" / "main.py").write_bytes(b"pass")

        expected = _md5(_md5(b"pass").encode())
        assert snapshot_fingerprint(["src/main.py"], temp_project) == expected
