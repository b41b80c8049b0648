"""Directory Mover - Copy-then-delete workflow and size report"""

import logging
import os

from .errors import (
    CopyError,
    DecodeError,
    DestinationExistsError,
    DestinationRemovalError,
    PostCopyCleanupError,
    RollbackError,
    SizeError,
    SourceNotFoundError,
    TempCleanupError,
    VerificationError,
)
from .fileops import (
    TMP_PREFIX,
    check_path,
    copy_dir,
    dir_size,
    paths_overlap,
    remove_tmp_dirs,
    remove_tree,
    to_native_path,
    tree_stats,
)
from .models import Answer

logger = logging.getLogger(__name__)

CONFLICT_REFUSE = "refuse"
CONFLICT_REPLACE = "replace"
CONFLICT_MERGE = "merge"
CONFLICT_POLICIES = (CONFLICT_REFUSE, CONFLICT_REPLACE, CONFLICT_MERGE)

MOVED_MESSAGE = "Directory is moved"
SIZE_MESSAGE = "Directory size."


class DirectoryMover:
    """Move directory trees and report their size"""

    def __init__(
        self,
        tmp_prefix: str = TMP_PREFIX,
        on_conflict: str = CONFLICT_REFUSE,
        verify_copy: bool = True,
        missing_as_zero: bool = True
    ):
        if on_conflict not in CONFLICT_POLICIES:
            raise ValueError(f"Unknown conflict policy: {on_conflict}")

        self.tmp_prefix = tmp_prefix
        self.on_conflict = on_conflict
        self.verify_copy = verify_copy
        self.missing_as_zero = missing_as_zero

    def move(self, source: str, destination: str) -> Answer:
        """
        Move source to destination.

        Steps: check source, apply the conflict policy, remove temp folders,
        copy, verify, delete source. Every failure is raised as a MoveError
        subclass; the destination is rolled back when the copy or the
        verification fails.

        Returns:
            Answer: success answer with the destination size as body
        """
        src = to_native_path(source)
        dst = to_native_path(destination)

        if not dst:
            raise DecodeError("dst is empty")
        if not src:
            raise SourceNotFoundError("src is empty")

        try:
            check_path(dst)
        except ValueError as e:
            raise DecodeError(f"dst: {e}") from e

        try:
            check_path(src)
            os.stat(src)
        except (OSError, ValueError) as e:
            raise SourceNotFoundError(str(e)) from e

        if paths_overlap(src, dst):
            raise CopyError(f"src {src} and dst {dst} overlap")

        merging = self._prepare_destination(dst)

        try:
            removed = remove_tmp_dirs(src, self.tmp_prefix)
        except OSError as e:
            raise TempCleanupError(str(e)) from e
        for path in removed:
            logger.debug("Removed temp folder %s", path)

        logger.info("Copying %s -> %s", src, dst)
        try:
            copied = copy_dir(src, dst, dirs_exist_ok=merging)
        except OSError as e:
            detail = str(e)
            logger.error("Copy %s -> %s failed: %s", src, dst, detail)
            detail += self._roll_back(dst, merging, detail)
            raise CopyError(detail) from e

        if self.verify_copy:
            mismatch = self._verify(src, dst, merging)
            if mismatch:
                logger.error("Verification of %s failed: %s", dst, mismatch)
                mismatch += self._roll_back(dst, merging, mismatch)
                raise VerificationError(mismatch)

        try:
            remove_tree(src)
        except OSError as e:
            logger.error("Copied %s but could not remove it: %s", src, e)
            raise PostCopyCleanupError(str(e)) from e

        size = dir_size(dst)
        logger.info("Moved %s -> %s (%d files, %d bytes)", src, dst, copied, size)
        return Answer(message=MOVED_MESSAGE, body=str(size))

    def size(self, source: str) -> Answer:
        """Report the total size of the files under source"""
        src = to_native_path(source)

        if self.missing_as_zero:
            total = dir_size(src)
        else:
            try:
                check_path(src)
            except ValueError as e:
                raise SourceNotFoundError(str(e)) from e
            if not src or not os.path.lexists(src):
                raise SourceNotFoundError(f"{source}: no such file or directory")
            try:
                total = dir_size(src, strict=True)
            except (OSError, ValueError) as e:
                raise SizeError(str(e)) from e

        logger.debug("Size of %s: %d bytes", src, total)
        return Answer(message=SIZE_MESSAGE, body=str(total))

    def _prepare_destination(self, dst: str) -> bool:
        """Apply the conflict policy, returns True when copying into an existing tree"""
        if not os.path.lexists(dst):
            return False

        if self.on_conflict == CONFLICT_REFUSE:
            raise DestinationExistsError(f"{dst} already exists")

        if self.on_conflict == CONFLICT_REPLACE:
            logger.info("Replacing existing %s", dst)
            try:
                remove_tree(dst)
            except OSError as e:
                raise DestinationRemovalError(str(e)) from e
            return False

        if not os.path.isdir(dst):
            raise DestinationExistsError(f"{dst} exists and is not a directory")
        logger.info("Merging into existing %s", dst)
        return True

    def _roll_back(self, dst: str, merging: bool, detail: str) -> str:
        """
        Delete a partially written destination.

        Returns a suffix for the error detail. Raises RollbackError when the
        deletion fails.
        """
        if merging:
            logger.warning("Leaving %s in place, it existed before the move", dst)
            return "; dst existed before the move and was kept"

        try:
            remove_tree(dst)
        except OSError as e:
            logger.error("Rollback of %s failed: %s", dst, e)
            raise RollbackError(f"{detail}; rollback: {e}") from e
        return ""

    def _verify(self, src: str, dst: str, merging: bool) -> str:
        """Compare file count and bytes of both trees, returns a mismatch description"""
        try:
            expected = tree_stats(src)
            actual = tree_stats(dst)
        except OSError as e:
            return str(e)

        if merging:
            ok = actual[0] >= expected[0] and actual[1] >= expected[1]
        else:
            ok = actual == expected
        if ok:
            return ""

        return (
            f"src has {expected[0]} files ({expected[1]} bytes), "
            f"dst has {actual[0]} files ({actual[1]} bytes)"
        )
