"""
Deployment exceptions.

Two families:
    - RemoteError: raised by transports (filesystem, executor, snapshot store)
      when a single remote operation fails.
    - DeploymentError: raised by DeployService when a stage fails. Always
      fatal for the deploy and always names the failing stage.

HashComputationError and ModificationTimeError are RemoteErrors the
orchestrator tolerates: it records a degraded value instead of aborting.
"""

from typing import Optional


class RemoteError(Exception):
    """
    Raised when a remote operation fails.

    Examples:
        - SSH command exited non-zero
        - File not found on read
        - Rename target directory missing
    """
    pass


class HashComputationError(RemoteError):
    """Raised when a content hash cannot be computed (e.g. path is a directory)."""
    pass


class ModificationTimeError(RemoteError):
    """Raised when a modification time cannot be read."""
    pass


class SnapshotFormatError(RemoteError):
    """Raised when a snapshot document exists but cannot be decoded."""
    pass


class DeploymentError(Exception):
    """
    Raised when a deploy fails at any stage.

    Attributes:
        stage: DeployStage value the deploy was in when it failed
        cause: Underlying exception, if any

    Files already moved or removed before the failure are not rolled back.
    """

    stage_label = "deploy"

    def __init__(self, message: str, stage=None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.stage = stage
        self.cause = cause

    def __str__(self) -> str:
        return f"{self.stage_label} failed: {self.args[0]}"


class ExtractionError(DeploymentError):
    """Bundle could not be extracted into the staging area."""
    stage_label = "extract bundle"


class ListingError(DeploymentError):
    """Staged entries could not be listed."""
    stage_label = "list staged files"


class SnapshotReadError(DeploymentError):
    """Existing snapshot could not be read or decoded."""
    stage_label = "read snapshot"


class ConflictResolutionError(DeploymentError):
    """Prompt, backup rename, or removal of a conflicting file failed."""
    stage_label = "resolve conflicts"


class MoveError(DeploymentError):
    """A staged entry could not be moved into the target directory."""
    stage_label = "move files"


class SnapshotWriteError(DeploymentError):
    """Updated snapshot could not be persisted."""
    stage_label = "write snapshot"
