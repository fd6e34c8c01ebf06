"""Protocol definitions for dependency injection.

Every collaborator the deploy orchestrator talks to (remote filesystem,
remote shell, interactive prompt, snapshot persistence, localized messages,
console output) is described here as a typing.Protocol. Production
transports and in-memory test doubles both satisfy these structurally, so
DeployService can be exercised without a network or a terminal.

Failure contract:
- RemoteFileSystem and RemoteExecutor raise RemoteError (or a subclass)
- SnapshotStore.load returns None when no history exists; it raises
  RemoteError only when the document exists but cannot be read or decoded
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from castdeploy.deploy.conflict import ConflictAction
    from castdeploy.deploy.snapshot import Snapshot


class Logger(Protocol):
    """Abstraction for logging operations.

    Replaces direct print() statements in the deploy flow.
    """

    def info(self, message: str) -> None:
        """Log informational message."""
        ...

    def warning(self, message: str) -> None:
        """Log warning message."""
        ...

    def error(self, message: str) -> None:
        """Log error message."""
        ...

    def debug(self, message: str) -> None:
        """Log debug message."""
        ...


class RemoteFileSystem(Protocol):
    """Abstraction for filesystem operations on the deploy host.

    Paths are absolute POSIX paths on the remote side.
    """

    def exists(self, path: str) -> bool:
        """Check if a file or directory exists at path."""
        ...

    def mkdir(self, path: str) -> None:
        """Create directory and all missing parents (idempotent)."""
        ...

    def list_dir(self, path: str) -> List[str]:
        """Return names of direct children (non-recursive)."""
        ...

    def read_file(self, path: str) -> str:
        """Read entire file as string."""
        ...

    def write_file(self, path: str, content: str) -> None:
        """Write string content to file, replacing it."""
        ...

    def remove(self, path: str) -> None:
        """Remove a file or directory tree."""
        ...

    def rename(self, src: str, dst: str) -> None:
        """Atomically rename src to dst."""
        ...

    def file_hash(self, path: str) -> str:
        """Return SHA-256 hex digest of file content."""
        ...

    def mod_time(self, path: str) -> datetime:
        """Return modification time as an aware UTC datetime."""
        ...


class RemoteExecutor(Protocol):
    """Abstraction for running shell commands on the deploy host.

    Only used for bundle extraction and staging cleanup.
    """

    def run(self, command: str) -> None:
        """Run command to completion; raise RemoteError on failure."""
        ...


class UserPrompter(Protocol):
    """Abstraction for the interactive conflict decision."""

    def ask_conflict_action(
        self, names: Sequence[str], lang: str
    ) -> Tuple["ConflictAction", str]:
        """Ask how to handle unmanaged conflicting files.

        Returns:
            (action, suffix). suffix is only meaningful for ConflictAction.BACKUP.
        """
        ...


class SnapshotStore(Protocol):
    """Abstraction for persisting deployment history per target directory."""

    def load(self, target_dir: str) -> Optional["Snapshot"]:
        """Return the Snapshot for target_dir, or None if none exists."""
        ...

    def save(self, target_dir: str, snapshot: "Snapshot") -> None:
        """Persist the full Snapshot for target_dir (overwrite)."""
        ...


class Localizer(Protocol):
    """Abstraction for localized user-facing messages."""

    def message(self, key: str, lang: str, *args: Any) -> str:
        """Return message for key in lang, formatted with args."""
        ...


class ConfigLoader(Protocol):
    """Abstraction for configuration file loading.

    Wraps YAML loading to enable testing with mock configurations
    without requiring actual config files.
    """

    def load_yaml(self, path: str) -> Dict[str, Any]:
        """Load YAML file and return parsed dictionary."""
        ...
