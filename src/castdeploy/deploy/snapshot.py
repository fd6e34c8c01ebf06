"""
Deployment history model.

A Snapshot is the append-only record of every deploy into one target
directory. It is stored on the host at <target>/.castdeploy/snapshot.json
and is the only source of truth for which files castdeploy "manages".

Invariants:
    - Entries are only ever appended; never removed, reordered, or edited
    - A path is managed if ANY entry lists it (old entries count too)
    - Path uniqueness holds only within one entry; redeploys repeat paths
    - No snapshot at all (None) means nothing is managed
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _format_time(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat()


def _parse_time(value: str) -> datetime:
    if not isinstance(value, str):
        raise TypeError(f"timestamp must be a string, got {type(value).__name__}")
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        # Naive timestamps are written by older tools; they are UTC.
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass(frozen=True)
class FileRecord:
    """
    One file delivered by a deployment.

    Attributes:
        path: Name relative to the target directory (top-level entry)
        hash: SHA-256 hex digest, or "" if it could not be computed
        mod_time: Modification time on the host (UTC)
    """
    path: str
    hash: str
    mod_time: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "hash": self.hash,
            "mod_time": _format_time(self.mod_time),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileRecord":
        return cls(
            path=data["path"],
            hash=data.get("hash", ""),
            mod_time=_parse_time(data["mod_time"]),
        )


@dataclass(frozen=True)
class SnapshotEntry:
    """
    A single deployment event.

    Attributes:
        bundle_name: Name of the deployed bundle (e.g. "app.tar.gz")
        bundle_hash: SHA-256 of the bundle as uploaded
        deployed_at: When the deploy was recorded (UTC)
        files: Top-level entries the deploy placed, in placement order
    """
    bundle_name: str
    bundle_hash: str
    deployed_at: datetime
    files: Tuple[FileRecord, ...] = ()

    @classmethod
    def create(
        cls,
        bundle_name: str,
        bundle_hash: str,
        files: Iterable[FileRecord],
        deployed_at: Optional[datetime] = None,
    ) -> "SnapshotEntry":
        """Build an entry stamped with the current UTC time."""
        return cls(
            bundle_name=bundle_name,
            bundle_hash=bundle_hash,
            deployed_at=deployed_at or utc_now(),
            files=tuple(files),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bundle_name": self.bundle_name,
            "bundle_hash": self.bundle_hash,
            "deployed_at": _format_time(self.deployed_at),
            "files": [f.to_dict() for f in self.files],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SnapshotEntry":
        return cls(
            bundle_name=data["bundle_name"],
            bundle_hash=data.get("bundle_hash", ""),
            deployed_at=_parse_time(data["deployed_at"]),
            files=tuple(FileRecord.from_dict(f) for f in data.get("files") or []),
        )


@dataclass
class Snapshot:
    """Append-only deployment history for one target directory."""

    entries: List[SnapshotEntry] = field(default_factory=list)

    def is_managed(self, name: str) -> bool:
        """True if any entry, however old, lists name."""
        return any(
            record.path == name
            for entry in self.entries
            for record in entry.files
        )

    def managed_paths(self) -> Set[str]:
        return {record.path for entry in self.entries for record in entry.files}

    def add_entry(self, entry: SnapshotEntry) -> None:
        self.entries.append(entry)

    @property
    def latest(self) -> Optional[SnapshotEntry]:
        return self.entries[-1] if self.entries else None

    def to_dict(self) -> Dict[str, Any]:
        return {"entries": [e.to_dict() for e in self.entries]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Snapshot":
        """
        Decode the persisted document.

        Raises:
            KeyError, TypeError, ValueError: If the document is malformed
        """
        if not isinstance(data, dict):
            raise TypeError(f"snapshot document must be an object, got {type(data).__name__}")
        return cls(entries=[SnapshotEntry.from_dict(e) for e in data.get("entries") or []])


def is_managed(snapshot: Optional[Snapshot], name: str) -> bool:
    """Managed check that treats a missing snapshot as empty history."""
    if snapshot is None:
        return False
    return snapshot.is_managed(name)
