"""
RemoteSnapshotStore - Snapshot persistence on the deploy host.

Layout on the host:
    <target>/.castdeploy/                metadata directory
    <target>/.castdeploy/snapshot.json   deployment history (JSON)
    <target>/.castdeploy/tmp/            per-deploy staging area

The document is rewritten in full on every save. There is no version
check: two concurrent deploys to one target race and the last write wins.
"""

import json
from typing import Optional

from castdeploy.core.protocols import RemoteFileSystem

from .exceptions import SnapshotFormatError
from .snapshot import Snapshot

METADATA_DIR = ".castdeploy"
SNAPSHOT_FILE = "snapshot.json"
STAGING_DIR = "tmp"


def metadata_dir(target_dir: str) -> str:
    return f"{target_dir.rstrip('/')}/{METADATA_DIR}"


def snapshot_path(target_dir: str) -> str:
    return f"{metadata_dir(target_dir)}/{SNAPSHOT_FILE}"


def staging_dir(target_dir: str) -> str:
    return f"{metadata_dir(target_dir)}/{STAGING_DIR}"


class RemoteSnapshotStore:
    """SnapshotStore backed by a JSON document on a RemoteFileSystem."""

    def __init__(self, filesystem: RemoteFileSystem):
        self.fs = filesystem

    def load(self, target_dir: str) -> Optional[Snapshot]:
        """
        Read the snapshot for target_dir.

        Returns:
            Snapshot, or None when no snapshot file exists

        Raises:
            RemoteError: If the file exists but cannot be read
            SnapshotFormatError: If the file is not a valid snapshot document
        """
        path = snapshot_path(target_dir)
        if not self.fs.exists(path):
            return None

        content = self.fs.read_file(path)
        try:
            return Snapshot.from_dict(json.loads(content))
        except (ValueError, KeyError, TypeError) as e:
            raise SnapshotFormatError(f"decode {path}: {e}") from e

    def save(self, target_dir: str, snapshot: Snapshot) -> None:
        """Write the full snapshot, creating the metadata directory if needed."""
        self.fs.mkdir(metadata_dir(target_dir))
        content = json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False)
        self.fs.write_file(snapshot_path(target_dir), content + "\n")
