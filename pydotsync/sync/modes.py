"""Sync modes defining copy direction and whether hashes are compared."""

from enum import Enum


class SyncMode(str, Enum):
    """Sync modes for entries.

    - PUSH: Copy repository -> local when the repository copy changed
    - PULL: Copy local -> repository when the local copy changed
    - FORCE_PUSH: Always copy repository -> local
    - FORCE_PULL: Always copy local -> repository
    """

    PUSH = "push"
    """Repository to local, only changed entries"""

    PULL = "pull"
    """Local to repository, only changed entries"""

    FORCE_PUSH = "force-push"
    """Repository to local, every entry"""

    FORCE_PULL = "force-pull"
    """Local to repository, every entry"""

    @classmethod
    def from_string(cls, value: str) -> "SyncMode":
        """Parse sync mode from string.

        Accepts the full names and the short flags of the original command
        line (U, u, f, F) as well as fpush/fpull.

        Args:
            value: Mode name or abbreviation

        Returns:
            SyncMode enum value

        Raises:
            ValueError: If the value is not a valid sync mode

        Examples:
            >>> SyncMode.from_string("push")
            <SyncMode.PUSH: 'push'>
            >>> SyncMode.from_string("F")
            <SyncMode.FORCE_PULL: 'force-pull'>
        """
        # Single letters are case sensitive
        flags = {
            "U": cls.PUSH,
            "u": cls.PULL,
            "f": cls.FORCE_PUSH,
            "F": cls.FORCE_PULL,
        }
        if value in flags:
            return flags[value]

        normalized = value.strip().lower().replace("_", "-")
        aliases = {
            "push": cls.PUSH,
            "pull": cls.PULL,
            "force-push": cls.FORCE_PUSH,
            "forcepush": cls.FORCE_PUSH,
            "fpush": cls.FORCE_PUSH,
            "force-pull": cls.FORCE_PULL,
            "forcepull": cls.FORCE_PULL,
            "fpull": cls.FORCE_PULL,
        }
        if normalized in aliases:
            return aliases[normalized]

        valid = ", ".join(m.value for m in cls)
        raise ValueError(f"Invalid sync mode: {value}. Valid modes: {valid}")

    @property
    def is_push(self) -> bool:
        """Whether this mode copies repository -> local."""
        return self in {SyncMode.PUSH, SyncMode.FORCE_PUSH}

    @property
    def is_pull(self) -> bool:
        """Whether this mode copies local -> repository."""
        return self in {SyncMode.PULL, SyncMode.FORCE_PULL}

    @property
    def is_forced(self) -> bool:
        """Whether this mode skips the hash comparison."""
        return self in {SyncMode.FORCE_PUSH, SyncMode.FORCE_PULL}

    @property
    def label(self) -> str:
        """Arrow description used in output."""
        if self.is_push:
            return "repository -> local"
        return "local -> repository"
