"""Content hashing for files and directory trees.

Directory hashes are computed over the sorted list of regular files below
the directory. Each file contributes its relative path and its own digest,
so renaming a file changes the tree hash while the order in which the
filesystem returns directory entries does not.
"""

import hashlib
import logging
import os
import stat
from pathlib import Path
from typing import Union

from ..exceptions import EntryIOError, EntryNotFoundError
from ..models import EntryKind
from ..utils import HASH_CHUNK_SIZE, VCS_DIR_NAME

logger = logging.getLogger(__name__)

# Digest of an empty file
EMPTY_FILE_HASH: str = hashlib.sha256(b"").hexdigest()

# Digest of a tree without any eligible file
EMPTY_TREE_HASH: str = hashlib.sha256(b"").hexdigest()


def _raise_walk_error(error: OSError) -> None:
    raise error


def _require_exists(path: Path) -> None:
    if not os.path.lexists(path):
        raise EntryNotFoundError(f"Path does not exist: {path}", path=path)


def hash_file(path: Union[str, Path]) -> str:
    """Compute the SHA-256 digest of a file.

    Args:
        path: File to hash

    Returns:
        Hex digest of the file contents

    Raises:
        EntryNotFoundError: If the file does not exist
        EntryIOError: If the file cannot be read

    Examples:
        >>> hash_file("/dev/null") == EMPTY_FILE_HASH
        True
    """
    path = Path(path)
    _require_exists(path)

    digest = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            while True:
                chunk = f.read(HASH_CHUNK_SIZE)
                if not chunk:
                    break
                digest.update(chunk)
    except OSError as e:
        raise EntryIOError(f"Failed to read {path}: {e}", path=path) from e

    return digest.hexdigest()


def list_tree_files(path: Union[str, Path]) -> list[str]:
    """List the regular files below a directory.

    Directories named ``.git`` are pruned and symlinks are neither followed
    nor listed.

    Args:
        path: Directory to scan

    Returns:
        Sorted relative paths using forward slashes

    Raises:
        EntryNotFoundError: If the directory does not exist
        EntryIOError: If the tree cannot be read
    """
    path = Path(path)
    _require_exists(path)
    if not path.is_dir():
        raise EntryIOError(f"Not a directory: {path}", path=path)

    files: list[str] = []
    try:
        for dirpath, dirnames, filenames in os.walk(path, onerror=_raise_walk_error):
            dirnames[:] = [d for d in dirnames if d != VCS_DIR_NAME]
            current = Path(dirpath)
            for name in filenames:
                item = current / name
                if not stat.S_ISREG(os.lstat(item).st_mode):
                    logger.debug(f"Not hashing non-regular file {item}")
                    continue
                files.append(item.relative_to(path).as_posix())
    except OSError as e:
        raise EntryIOError(f"Failed to scan {path}: {e}", path=path) from e

    return sorted(files)


def hash_dir(path: Union[str, Path]) -> str:
    """Compute an order-independent digest of a directory tree.

    Args:
        path: Directory to hash

    Returns:
        Hex digest combining every relative path with its file digest

    Raises:
        EntryNotFoundError: If the directory does not exist
        EntryIOError: If any part of the tree cannot be read
    """
    path = Path(path)
    files = list_tree_files(path)
    if not files:
        return EMPTY_TREE_HASH

    digest = hashlib.sha256()
    for relative_path in files:
        try:
            file_hash = hash_file(path / relative_path)
        except EntryNotFoundError as e:
            # Listed a moment ago, so it vanished mid-walk
            raise EntryIOError(
                f"File disappeared while hashing: {path / relative_path}",
                path=path / relative_path,
            ) from e
        digest.update(relative_path.encode("utf-8", "surrogateescape"))
        digest.update(b"\0")
        digest.update(file_hash.encode("ascii"))
        digest.update(b"\n")

    logger.debug(f"Hashed {len(files)} file(s) below {path}")
    return digest.hexdigest()


def hash_path(path: Union[str, Path], kind: EntryKind) -> str:
    """Hash a path according to its entry kind.

    Args:
        path: Path to hash
        kind: Whether the path is a file or a directory

    Returns:
        Hex digest
    """
    if kind == EntryKind.DIRECTORY:
        return hash_dir(path)
    return hash_file(path)
