"""File Operations - Temp folder cleanup, recursive copy and size of directory trees"""

import os
import shutil
import stat
from typing import Iterator

TMP_PREFIX = "_"


def to_native_path(path: str) -> str:
    """Convert a slash separated path from the wire to the OS form"""
    if not path:
        return ""
    return os.path.normpath(path.replace("/", os.sep))


def check_path(path: str):
    """Raise ValueError if the OS cannot represent path (NUL byte, bad surrogates)"""
    if "\x00" in path:
        raise ValueError(f"embedded null byte in path {path!r}")
    os.fsencode(path)


def paths_overlap(first: str, second: str) -> bool:
    """Check if one path is the other or lies inside it"""
    first_norm = os.path.normcase(os.path.abspath(first))
    second_norm = os.path.normcase(os.path.abspath(second))
    try:
        common = os.path.commonpath([first_norm, second_norm])
    except ValueError:
        # Different drives
        return False
    return common in (first_norm, second_norm)


def remove_tmp_dirs(root: str, prefix: str = TMP_PREFIX) -> list[str]:
    """
    Remove every subdirectory whose name starts with prefix, at any depth.

    Deleted directories are not descended into. Files and symlinks are left
    alone. The first listing or deletion error is raised as is.

    Returns:
        list[str]: removed directory paths
    """
    if not prefix:
        raise ValueError("Temp folder prefix must not be empty")

    removed: list[str] = []
    with os.scandir(root) as it:
        entries = list(it)

    for entry in entries:
        if not entry.is_dir(follow_symlinks=False):
            continue
        if entry.name.startswith(prefix):
            shutil.rmtree(entry.path)
            removed.append(entry.path)
        else:
            removed.extend(remove_tmp_dirs(entry.path, prefix))

    return removed


def copy_dir(src: str, dst: str, *, dirs_exist_ok: bool = False) -> int:
    """
    Copy the tree under src to dst, creating dst.

    Aborts on the first error, so dst may be left partial.

    Returns:
        int: number of copied files
    """
    os.makedirs(dst, exist_ok=dirs_exist_ok)

    with os.scandir(src) as it:
        entries = list(it)

    copied = 0
    for entry in entries:
        target = os.path.join(dst, entry.name)
        if entry.is_dir(follow_symlinks=False):
            copied += copy_dir(entry.path, target, dirs_exist_ok=dirs_exist_ok)
        else:
            # Symlinks are recreated, not followed
            shutil.copy2(entry.path, target, follow_symlinks=False)
            copied += 1

    shutil.copystat(src, dst)
    return copied


def remove_tree(path: str):
    """Delete a directory tree, a file or a symlink"""
    if not os.path.lexists(path):
        return
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    else:
        os.remove(path)


def _iter_file_sizes(root: str, strict: bool) -> Iterator[int]:
    """Yield the size of each regular file under root"""
    try:
        with os.scandir(root) as it:
            entries = list(it)
    except OSError:
        if strict:
            raise
        return

    for entry in entries:
        try:
            if entry.is_dir(follow_symlinks=False):
                is_dir, size = True, 0
            elif entry.is_file(follow_symlinks=False):
                is_dir, size = False, entry.stat(follow_symlinks=False).st_size
            else:
                continue
        except OSError:
            if strict:
                raise
            continue

        if is_dir:
            yield from _iter_file_sizes(entry.path, strict)
        else:
            yield size


def dir_size(root: str, *, strict: bool = False) -> int:
    """
    Total size in bytes of the regular files under root.

    A regular file counts as itself. When not strict, a missing root gives 0
    and unreadable entries are skipped; when strict, the error is raised.
    """
    try:
        st = os.stat(root, follow_symlinks=False)
    except (OSError, ValueError):
        if strict:
            raise
        return 0

    if stat.S_ISREG(st.st_mode):
        return st.st_size
    if not stat.S_ISDIR(st.st_mode):
        return 0

    return sum(_iter_file_sizes(root, strict))


def tree_stats(root: str) -> tuple[int, int]:
    """Count files and bytes under a directory, raising on any error"""
    count = 0
    total = 0
    for size in _iter_file_sizes(root, strict=True):
        count += 1
        total += size
    return count, total
