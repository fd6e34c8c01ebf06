"""
Bundle deployment subsystem.

Places an extracted bundle into a target directory on a host, resolving
name collisions against the target's deployment history:
    - managed files (listed in any past deploy) are replaced silently
    - unmanaged files are backed up or removed after one user decision

Public API:
    - DeployService: The orchestrator
    - Snapshot, SnapshotEntry, FileRecord: Deployment history model
    - classify_conflicts, next_backup_name: Pure decision helpers
    - RemoteSnapshotStore: Snapshot persistence on the host
    - SSHRemoteExecutor, SSHRemoteFileSystem: SSH transports
    - StdinPrompter: Interactive conflict prompt
    - TransportFactory: Parse device strings
    - DeploymentError (+ stage subclasses), RemoteError: Exceptions
"""

from .backup import next_backup_name, MAX_BACKUP_SEQUENCE
from .conflict import ConflictAction, ConflictResult, classify_conflicts
from .exceptions import (
    ConflictResolutionError,
    DeploymentError,
    ExtractionError,
    HashComputationError,
    ListingError,
    ModificationTimeError,
    MoveError,
    RemoteError,
    SnapshotFormatError,
    SnapshotReadError,
    SnapshotWriteError,
)
from .factory import Transport, TransportFactory
from .prompter import StdinPrompter
from .service import DeploymentResult, DeployService, DeployStage
from .snapshot import FileRecord, Snapshot, SnapshotEntry, is_managed
from .snapshot_store import RemoteSnapshotStore
from .ssh_transport import SSHRemoteExecutor, SSHRemoteFileSystem

__all__ = [
    # Orchestrator
    "DeployService",
    "DeploymentResult",
    "DeployStage",

    # Model
    "Snapshot",
    "SnapshotEntry",
    "FileRecord",
    "is_managed",

    # Decisions
    "ConflictAction",
    "ConflictResult",
    "classify_conflicts",
    "next_backup_name",
    "MAX_BACKUP_SEQUENCE",

    # Collaborators
    "RemoteSnapshotStore",
    "SSHRemoteExecutor",
    "SSHRemoteFileSystem",
    "StdinPrompter",
    "Transport",
    "TransportFactory",

    # Exceptions
    "DeploymentError",
    "ExtractionError",
    "ListingError",
    "SnapshotReadError",
    "ConflictResolutionError",
    "MoveError",
    "SnapshotWriteError",
    "RemoteError",
    "HashComputationError",
    "ModificationTimeError",
    "SnapshotFormatError",
]
