"""Tests for SvcsController."""

import hashlib
import os
import sys

import pytest

from svcs.config import ConfigScope
from svcs.core import snapshot_store as snapshot_store_module
from svcs.core.controller import SvcsController
from svcs.core.errors import StorageError


def _expected_fingerprint(*contents: bytes) -> str:
    digests = "".join(hashlib.md5(c).hexdigest() for c in contents)
    return hashlib.md5(digests.encode()).hexdigest()


@pytest.fixture
def controller(temp_project):
    """Create a SvcsController instance."""
    return SvcsController(project_root=temp_project)


@pytest.fixture
def alice(controller):
    """Configure author alice."""
    controller.set_username("alice")
    return controller


class TestCommit:
    def test_nothing_tracked(self, alice):
        """No files tracked -> nothing to commit."""
        result = alice.commit("msg")

        assert result["success"]
        assert result["status"] == "nothing_to_commit"
        assert result["fingerprint"] is None
        assert alice.list_commits() == []

    def test_first_commit(self, alice, temp_project):
        """Track a.txt="hello", commit "first" -> one snapshot, one log entry."""
        (temp_project / "a.txt").write_text("hello")
        alice.track("a.txt")

        result = alice.commit("first")

        fingerprint = _expected_fingerprint(b"hello")
        assert result["success"]
        assert result["status"] == "committed"
        assert result["fingerprint"] == fingerprint
        assert result["fileCount"] == 1
        assert (alice.get_commits_dir() / fingerprint / "a.txt").read_text() == "hello"

        commits = alice.list_commits()
        assert len(commits) == 1
        assert commits[0].fingerprint == fingerprint
        assert commits[0].message == "first"
        assert commits[0].author == "alice"

    def test_repeat_commit_is_deduplicated(self, alice, temp_project):
        """Committing again without changes -> nothing to commit, still one entry."""
        (temp_project / "a.txt").write_text("hello")
        alice.track("a.txt")
        alice.commit("first")

        result = alice.commit("first")

        assert result["status"] == "nothing_to_commit"
        assert len(alice.list_commits()) == 1
        assert alice.store.list() == [_expected_fingerprint(b"hello")]

    def test_second_commit_and_checkout(self, alice, temp_project):
        """Modify, commit "second", then checkout the first commit."""
        target = temp_project / "a.txt"
        target.write_text("hello")
        alice.track("a.txt")
        first = alice.commit("first")["fingerprint"]

        target.write_text("world")
        second = alice.commit("second")["fingerprint"]

        assert second != first
        assert sorted(alice.store.list()) == sorted([first, second])
        commits = alice.list_commits()
        assert [c.message for c in commits] == ["second", "first"]

        result = alice.checkout(first)

        assert result["success"]
        assert result["files"] == ["a.txt"]
        assert target.read_text() == "hello"

    def test_missing_message(self, alice, temp_project):
        """Test commit without a message is refused."""
        (temp_project / "a.txt").write_text("hello")
        alice.track("a.txt")

        for message in (None, "", "   "):
            result = alice.commit(message)
            assert not result["success"]
            assert result["error"] == "Message was not passed."

        assert alice.store.list() == []

    def test_identity_checked_before_snapshot(self, controller, temp_project):
        """Test missing username refuses the commit without writing a snapshot."""
        (temp_project / "a.txt").write_text("hello")
        controller.track("a.txt")

        result = controller.commit("first")

        assert not result["success"]
        assert result["error"] == "Please, tell me who you are."
        assert controller.store.list() == []
        assert controller.store.list_staging() == []
        assert controller.list_commits() == []

    def test_commit_after_identity_configured(self, controller, temp_project):
        """Test the same content commits once the username is set."""
        (temp_project / "a.txt").write_text("hello")
        controller.track("a.txt")
        controller.commit("first")

        controller.set_username("alice")
        result = controller.commit("first")

        assert result["status"] == "committed"

    def test_tracking_order_changes_fingerprint(self, tmp_path):
        """Test the same files tracked in different orders commit separately."""
        fingerprints = []
        for name, order in (("one", ["a.txt", "b.txt"]), ("two", ["b.txt", "a.txt"])):
            root = tmp_path / name
            root.mkdir()
            (root / "a.txt").write_text("A")
            (root / "b.txt").write_text("B")
            ctl = SvcsController(project_root=root)
            for path in order:
                ctl.track(path)
            fingerprints.append(ctl.current_fingerprint())

        assert fingerprints[0] != fingerprints[1]

    def test_tracking_new_file_is_a_change(self, alice, temp_project):
        """Test adding a file to the tracked set produces a new commit."""
        (temp_project / "a.txt").write_text("hello")
        (temp_project / "b.txt").write_text("bye")
        alice.track("a.txt")
        alice.commit("first")

        alice.track("b.txt")
        result = alice.commit("second")

        assert result["status"] == "committed"
        assert len(alice.list_commits()) == 2

    def test_tracked_file_removed(self, alice, temp_project):
        """Test a tracked file that disappeared aborts the commit."""
        (temp_project / "a.txt").write_text("hello")
        alice.track("a.txt")
        (temp_project / "a.txt").unlink()

        with pytest.raises(StorageError):
            alice.commit("first")

        assert alice.list_commits() == []

    def test_copy_failure_leaves_no_log_entry(self, alice, temp_project, monkeypatch):
        """Test a failed snapshot copy never produces a log entry.

        The staging directory it leaves behind is reported by validate_system.
        """
        (temp_project / "a.txt").write_text("hello")
        alice.track("a.txt")

        def broken_copy(src, dst):
            raise OSError("no space left")

        monkeypatch.setattr(snapshot_store_module, "copy_file", broken_copy)

        with pytest.raises(StorageError):
            alice.commit("first")

        assert alice.list_commits() == []
        assert alice.store.list() == []
        validation = alice.validate_system()
        assert not validation["valid"]
        assert any("Incomplete snapshot" in issue for issue in validation["issues"])

    def test_nested_files_round_trip(self, alice, temp_project):
        """Test files with the same name in different directories restore correctly."""
        (temp_project / "a").mkdir()
        (temp_project / "b").mkdir()
        (temp_project / "a" / "same.txt").write_text("from a")
        (temp_project / "b" / "same.txt").write_text("from b")
        alice.track("a/same.txt")
        alice.track("b/same.txt")
        fingerprint = alice.commit("nested")["fingerprint"]

        (temp_project / "a" / "same.txt").write_text("x")
        (temp_project / "b" / "same.txt").write_text("y")
        alice.checkout(fingerprint)

        assert (temp_project / "a" / "same.txt").read_text() == "from a"
        assert (temp_project / "b" / "same.txt").read_text() == "from b"


class TestCheckout:
    def test_unknown_commit(self, controller, temp_project):
        """checkout("doesnotexist") -> commit does not exist, no mutation."""
        (temp_project / "a.txt").write_text("current")

        result = controller.checkout("doesnotexist")

        assert not result["success"]
        assert result["error"] == "Commit does not exist."
        assert (temp_project / "a.txt").read_text() == "current"

    def test_missing_commit_id(self, controller):
        """Test checkout without an id is refused."""
        result = controller.checkout(None)

        assert not result["success"]
        assert result["error"] == "Commit id was not passed."

    def test_round_trip_binary(self, alice, temp_project):
        """Test checkout restores exact bytes."""
        data = bytes(range(256)) * 4
        (temp_project / "blob.bin").write_bytes(data)
        alice.track("blob.bin")
        fingerprint = alice.commit("binary")["fingerprint"]

        (temp_project / "blob.bin").write_bytes(b"overwritten")
        alice.checkout(fingerprint)

        assert (temp_project / "blob.bin").read_bytes() == data

    def test_untracked_files_untouched(self, alice, temp_project):
        """Test checkout does not delete files missing from the snapshot."""
        (temp_project / "a.txt").write_text("hello")
        alice.track("a.txt")
        fingerprint = alice.commit("first")["fingerprint"]
        (temp_project / "new.txt").write_text("new")

        alice.checkout(fingerprint)

        assert (temp_project / "new.txt").read_text() == "new"


class TestTracking:
    def test_track_reports_missing_file(self, controller):
        """Test tracking a missing file is a reported error."""
        result = controller.track("nope.txt")

        assert not result["success"]
        assert result["error"] == "Can't find 'nope.txt'."

    def test_track_twice(self, controller, temp_project):
        """Test repeated tracking is a silent no-op."""
        (temp_project / "a.txt").write_text("hello")

        first = controller.track("a.txt")
        second = controller.track("a.txt")

        assert first["tracked"] is True
        assert second["success"] and second["tracked"] is False
        assert controller.list_tracked() == ["a.txt"]


class TestStatus:
    def test_status_tracks_clean_state(self, alice, temp_project):
        """Test status reports whether the working tree is committed."""
        (temp_project / "a.txt").write_text("hello")
        alice.track("a.txt")

        before = alice.get_status()
        alice.commit("first")
        after = alice.get_status()

        assert before.tracked_count == 1
        assert before.commit_count == 0
        assert not before.clean
        assert after.commit_count == 1
        assert after.clean
        assert after.latest_commit == after.current_fingerprint
        assert after.author == "alice"

    def test_validate_fresh_repository(self, controller):
        """Test validation of a directory that was never used."""
        result = controller.validate_system()

        assert not result["valid"]

    def test_validate_after_commit(self, alice, temp_project):
        """Test validation passes after a normal commit."""
        (temp_project / "a.txt").write_text("hello")
        alice.track("a.txt")
        alice.commit("first")

        assert alice.validate_system() == {"valid": True, "issues": []}

    def test_validate_reports_orphan_snapshot(self, alice, temp_project):
        """Test snapshots without a log entry are reported."""
        (temp_project / "a.txt").write_text("hello")
        alice.track("a.txt")
        alice.init()
        alice.store.create(alice.current_fingerprint(), ["a.txt"])

        result = alice.validate_system()

        assert not result["valid"]
        assert any("has no log entry" in issue for issue in result["issues"])


class TestUsername:
    def test_set_and_get(self, controller):
        """Test storing the username in the repository."""
        result = controller.set_username("  bob  ")

        assert result["success"]
        assert controller.get_username() == "bob"
        assert (controller.get_vcs_dir() / "config.txt").read_text() == "bob"

    def test_global_username(self, controller, tmp_path):
        """Test a global username applies when the project has none."""
        controller.set_username("carol", scope=ConfigScope.GLOBAL)

        assert controller.get_username() == "carol"
        assert (tmp_path / "home" / ".svcs" / "config.txt").read_text() == "carol"

    def test_empty_username_rejected(self, controller):
        """Test an empty username is not stored."""
        result = controller.set_username("   ")

        assert not result["success"]
        assert controller.get_username() is None


class TestUnreadableState:
    def test_undecodable_log(self, alice):
        """Test a log that is not UTF-8 is reported as a storage error."""
        alice.init()
        alice.get_log_path().write_bytes(b"\xff\xfe\x00garbage")

        with pytest.raises(StorageError):
            alice.list_commits()

    def test_undecodable_config(self, controller):
        """Test a config file that is not UTF-8 is reported as a storage error."""
        controller.init()
        (controller.get_vcs_dir() / "config.txt").write_bytes(b"\xff\xfe")

        with pytest.raises(StorageError):
            controller.get_username()

    def test_undecodable_index_entries(self, alice):
        """Test raw bytes in the index list as names rather than crash."""
        alice.init()
        alice.get_index_path().write_bytes(b"\xff\xfe\n")

        assert alice.list_tracked() == [os.fsdecode(b"\xff\xfe")]
        with pytest.raises(StorageError):
            alice.commit("first")

    @pytest.mark.skipif(
        os.name != "posix" or sys.platform == "darwin",
        reason="needs a filesystem that accepts non-UTF-8 names",
    )
    def test_commit_and_checkout_undecodable_name(self, alice, temp_project):
        """Test a non-UTF-8 file name survives commit and checkout."""
        name = os.fsdecode(b"caf\xe9.txt")
        (temp_project / name).write_bytes(b"bonjour")
        alice.track(name)

        result = alice.commit("accents")
        assert result["status"] == "committed"

        (temp_project / name).write_bytes(b"changed")
        alice.checkout(result["fingerprint"])

        assert (temp_project / name).read_bytes() == b"bonjour"
