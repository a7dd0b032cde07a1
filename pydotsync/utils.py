"""Utility functions for pydotsync."""

import os
from pathlib import Path, PurePosixPath
from typing import Optional, Union

# =============================================================================
# Constants for hashing and copying
# =============================================================================

# Name of the version-control metadata directory that is never hashed or copied
VCS_DIR_NAME: str = ".git"

# Read size used when hashing files (1 MB)
HASH_CHUNK_SIZE: int = 1024 * 1024

# Default name of the entry file inside the config directory
DEFAULT_CONFIG_FILE_NAME: str = "config.json"


# =============================================================================
# Path utilities
# =============================================================================


def expand_path(path: Union[str, Path]) -> Path:
    """Expand a stored path into an absolute filesystem path.

    Args:
        path: Absolute path or a path starting with ``~``

    Returns:
        Path with the home directory substituted

    Examples:
        >>> expand_path("/etc/hosts")
        PosixPath('/etc/hosts')
    """
    return Path(os.path.expanduser(str(path)))


def reroot_home_path(path: str) -> Optional[str]:
    """Move a path recorded under another user's home onto the current home.

    Config files copied between machines often contain absolute paths such
    as ``/home/alice/.vimrc``. This returns ``~/.vimrc`` for such paths.

    Args:
        path: Stored path

    Returns:
        The ``~``-relative path, or None if the path is not under /home/<user>/

    Examples:
        >>> reroot_home_path("/home/alice/.config/nvim")
        '~/.config/nvim'
        >>> reroot_home_path("/etc/hosts") is None
        True
    """
    parts = PurePosixPath(path).parts
    if len(parts) < 4 or parts[:2] != ("/", "home"):
        return None

    rest = PurePosixPath(*parts[3:])
    return f"~/{rest.as_posix()}"


def contract_home(path: Union[str, Path], home: Optional[Path] = None) -> str:
    """Replace the current home directory prefix with ``~``.

    Args:
        path: Absolute path
        home: Home directory (defaults to the current one)

    Returns:
        ``~``-relative path if the path is below home, the path itself otherwise

    Examples:
        >>> contract_home("/tmp/x", home=Path("/home/bob"))
        '/tmp/x'
        >>> contract_home("/home/bob/.zshrc", home=Path("/home/bob"))
        '~/.zshrc'
    """
    home = home or Path.home()
    p = Path(path)
    try:
        relative = p.relative_to(home)
    except ValueError:
        return str(path)
    return f"~/{relative.as_posix()}"


# =============================================================================
# Formatting utilities
# =============================================================================


def short_hash(hash_value: Optional[str], length: int = 12) -> str:
    """Shorten a hex digest for display.

    Args:
        hash_value: Full digest or None
        length: Number of characters to keep

    Returns:
        Shortened digest, or "-" if no hash is stored

    Examples:
        >>> short_hash("0123456789abcdef", 6)
        '012345'
        >>> short_hash(None)
        '-'
    """
    if not hash_value:
        return "-"
    return hash_value[:length]
