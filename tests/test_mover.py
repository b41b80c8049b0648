"""Unit tests for the move and size workflows."""

import os

import pytest

from archive_listener import fileops, mover as mover_module
from archive_listener.errors import (
    CopyError,
    DecodeError,
    DestinationExistsError,
    DestinationRemovalError,
    MoveError,
    PostCopyCleanupError,
    RollbackError,
    SizeError,
    SourceNotFoundError,
    TempCleanupError,
    VerificationError,
)
from archive_listener.mover import DirectoryMover


def _fail(exc: OSError):
    def _raise(*args, **kwargs):
        raise exc
    return _raise


class TestMove:
    """Test the happy path and input checks."""

    def test_moves_and_drops_temp_folders(self, mover, sample_source, tmp_path):
        dst = tmp_path / "B"

        answer = mover.move(str(sample_source), str(dst))

        assert answer.message == "Directory is moved"
        assert answer.body == "10"
        assert not sample_source.exists()
        assert (dst / "data.bin").read_bytes() == b"0123456789"
        assert not (dst / "_cache").exists()

    def test_size_matches_moved_bytes(self, mover, make_tree, tmp_path):
        src = make_tree("src", {
            "a": b"x" * 100,
            "b/c": b"x" * 250,
            "b/d/e": b"x" * 1,
        })

        answer = mover.move(str(src), str(tmp_path / "dst"))

        assert answer.body == "351"
        assert fileops.dir_size(str(tmp_path / "dst")) == 351

    def test_creates_missing_parents(self, mover, sample_source, tmp_path):
        dst = tmp_path / "archive" / "2024" / "B"
        mover.move(str(sample_source), str(dst))
        assert (dst / "data.bin").exists()

    def test_slash_paths_accepted(self, mover, sample_source, tmp_path):
        dst = tmp_path / "B"
        answer = mover.move(sample_source.as_posix(), dst.as_posix())
        assert answer.body == "10"

    def test_missing_source(self, mover, tmp_path):
        with pytest.raises(SourceNotFoundError) as info:
            mover.move(str(tmp_path / "missing"), str(tmp_path / "B"))
        assert info.value.message == "Src directory not exist."
        assert "missing" in info.value.detail
        assert not (tmp_path / "B").exists()

    def test_empty_source(self, mover, tmp_path):
        with pytest.raises(SourceNotFoundError):
            mover.move("", str(tmp_path / "B"))

    def test_empty_destination(self, mover, sample_source):
        with pytest.raises(DecodeError):
            mover.move(str(sample_source), "")
        assert sample_source.exists()

    def test_destination_inside_source(self, mover, sample_source):
        with pytest.raises(CopyError) as info:
            mover.move(str(sample_source), str(sample_source / "inner"))
        assert "overlap" in info.value.detail
        assert not (sample_source / "inner").exists()

    def test_source_file_fails_cleanup(self, mover, make_tree, tmp_path):
        root = make_tree("root", {"file.txt": "x"})
        with pytest.raises(TempCleanupError):
            mover.move(str(root / "file.txt"), str(tmp_path / "B"))
        assert (root / "file.txt").exists()

    def test_errors_convert_to_answer(self):
        answer = TempCleanupError("boom").to_answer()
        assert answer.to_wire() == {"Message": "Remove tmp directory error.", "Body": "boom"}

    def test_unknown_policy_rejected(self):
        with pytest.raises(ValueError):
            DirectoryMover(on_conflict="overwrite")


class TestConflictPolicies:
    """Test behaviour when the destination already exists."""

    def test_refuse_by_default(self, mover, sample_source, make_tree):
        dst = make_tree("B", {"old.txt": "old"})

        with pytest.raises(DestinationExistsError):
            mover.move(str(sample_source), str(dst))

        assert (sample_source / "data.bin").exists()
        assert (sample_source / "_cache").exists()
        assert (dst / "old.txt").exists()

    def test_replace(self, sample_source, make_tree):
        dst = make_tree("B", {"old.txt": "old"})

        answer = DirectoryMover(on_conflict="replace").move(str(sample_source), str(dst))

        assert answer.body == "10"
        assert not (dst / "old.txt").exists()
        assert not sample_source.exists()

    def test_replace_removal_failure(self, sample_source, make_tree, monkeypatch):
        dst = make_tree("B", {"old.txt": "old"})
        monkeypatch.setattr(mover_module, "remove_tree", _fail(PermissionError(13, "Permission denied")))

        with pytest.raises(DestinationRemovalError) as info:
            DirectoryMover(on_conflict="replace").move(str(sample_source), str(dst))

        assert "Permission denied" in info.value.detail
        assert (sample_source / "data.bin").exists()

    def test_merge(self, sample_source, make_tree):
        dst = make_tree("B", {"old.txt": "12345"})

        answer = DirectoryMover(on_conflict="merge").move(str(sample_source), str(dst))

        assert answer.body == "15"
        assert (dst / "old.txt").exists()
        assert (dst / "data.bin").exists()
        assert not sample_source.exists()

    def test_merge_onto_file_refused(self, sample_source, make_tree):
        root = make_tree("root", {"B": "not a dir"})
        with pytest.raises(DestinationExistsError):
            DirectoryMover(on_conflict="merge").move(str(sample_source), str(root / "B"))


class TestRollback:
    """Test compensation after copy and verification failures."""

    def test_copy_failure_rolls_back(self, mover, sample_source, tmp_path, monkeypatch):
        dst = tmp_path / "B"

        def partial_copy(src, target, dirs_exist_ok=False):
            os.makedirs(target)
            (dst / "partial.bin").write_bytes(b"01")
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(mover_module, "copy_dir", partial_copy)

        with pytest.raises(CopyError) as info:
            mover.move(str(sample_source), str(dst))

        assert type(info.value) is CopyError
        assert info.value.message == "Copy error. Can not copy src directory"
        assert "No space left" in info.value.detail
        assert not dst.exists()
        assert (sample_source / "data.bin").exists()

    def test_rollback_failure_reported(self, mover, sample_source, tmp_path, monkeypatch):
        dst = tmp_path / "B"
        monkeypatch.setattr(mover_module, "copy_dir", _fail(OSError(5, "Input/output error")))
        monkeypatch.setattr(mover_module, "remove_tree", _fail(PermissionError(13, "Permission denied")))

        with pytest.raises(RollbackError) as info:
            mover.move(str(sample_source), str(dst))

        assert info.value.message == "Copy error. Can not delete dst directory"
        assert "Input/output error" in info.value.detail
        assert "Permission denied" in info.value.detail
        assert isinstance(info.value, CopyError)

    def test_merge_copy_failure_keeps_destination(self, sample_source, make_tree, monkeypatch):
        dst = make_tree("B", {"old.txt": "old"})
        monkeypatch.setattr(mover_module, "copy_dir", _fail(OSError(5, "Input/output error")))

        with pytest.raises(CopyError) as info:
            DirectoryMover(on_conflict="merge").move(str(sample_source), str(dst))

        assert "kept" in info.value.detail
        assert (dst / "old.txt").exists()

    def test_verification_mismatch_rolls_back(self, mover, sample_source, tmp_path, monkeypatch):
        dst = tmp_path / "B"

        def short_copy(src, target, dirs_exist_ok=False):
            os.makedirs(target)
            (dst / "data.bin").write_bytes(b"01234")
            return 1

        monkeypatch.setattr(mover_module, "copy_dir", short_copy)

        with pytest.raises(VerificationError) as info:
            mover.move(str(sample_source), str(dst))

        assert "10 bytes" in info.value.detail
        assert not dst.exists()
        assert (sample_source / "data.bin").exists()

    def test_verification_can_be_disabled(self, sample_source, tmp_path, monkeypatch):
        dst = tmp_path / "B"

        def short_copy(src, target, dirs_exist_ok=False):
            os.makedirs(target)
            (dst / "data.bin").write_bytes(b"01234")
            return 1

        monkeypatch.setattr(mover_module, "copy_dir", short_copy)

        answer = DirectoryMover(verify_copy=False).move(str(sample_source), str(dst))
        assert answer.body == "5"

    def test_source_removal_failure(self, mover, sample_source, tmp_path, monkeypatch):
        dst = tmp_path / "B"
        monkeypatch.setattr(mover_module, "remove_tree", _fail(PermissionError(13, "Permission denied")))

        with pytest.raises(PostCopyCleanupError) as info:
            mover.move(str(sample_source), str(dst))

        assert "Permission denied" in info.value.detail
        assert (dst / "data.bin").read_bytes() == b"0123456789"

    def test_every_failure_is_a_move_error(self):
        for cls in (DecodeError, SourceNotFoundError, CopyError, RollbackError, SizeError):
            assert issubclass(cls, MoveError)


class TestSize:
    """Test the size workflow."""

    def test_reports_size(self, mover, sample_source):
        answer = mover.size(str(sample_source))
        assert answer.message == "Directory size."
        assert answer.body == "15"

    def test_missing_is_zero_by_default(self, mover, tmp_path):
        assert mover.size(str(tmp_path / "missing")).body == "0"

    def test_missing_raises_when_configured(self, tmp_path):
        with pytest.raises(SourceNotFoundError):
            DirectoryMover(missing_as_zero=False).size(str(tmp_path / "missing"))

    def test_stat_error_raises_when_configured(self, sample_source, monkeypatch):
        monkeypatch.setattr(mover_module, "dir_size", _fail(PermissionError(13, "Permission denied")))
        with pytest.raises(SizeError):
            DirectoryMover(missing_as_zero=False).size(str(sample_source))


class TestUnrepresentablePaths:
    """Test paths the OS cannot handle, such as an embedded NUL byte."""

    def test_null_byte_source(self, mover, tmp_path):
        with pytest.raises(SourceNotFoundError) as info:
            mover.move("a\x00b", str(tmp_path / "B"))
        assert "null byte" in info.value.detail
        assert not (tmp_path / "B").exists()

    def test_null_byte_destination(self, mover, sample_source):
        with pytest.raises(DecodeError):
            mover.move(str(sample_source), "x\x00y")
        assert (sample_source / "data.bin").exists()

    def test_size_of_null_byte_path_is_zero(self, mover):
        assert mover.size("a\x00b").body == "0"

    def test_size_of_null_byte_path_strict(self):
        with pytest.raises(SourceNotFoundError):
            DirectoryMover(missing_as_zero=False).size("a\x00b")
