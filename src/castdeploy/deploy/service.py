"""
DeployService - Place an extracted bundle into a target directory.

Strategy: extract → list → detect conflicts → classify → resolve → move → record

The service owns the target's Snapshot for the duration of one deploy() call:
it is read once before conflicts are resolved and written once, in full,
after every staged entry has been moved. There is no locking; callers must
not run two deploys against the same target at the same time.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from castdeploy.core.protocols import (
    Localizer,
    Logger,
    RemoteExecutor,
    RemoteFileSystem,
    SnapshotStore,
    UserPrompter,
)
from castdeploy import i18n

from .backup import next_backup_name
from .conflict import ConflictAction, ConflictResult, classify_conflicts
from .exceptions import (
    ConflictResolutionError,
    DeploymentError,
    ExtractionError,
    ListingError,
    MoveError,
    RemoteError,
    SnapshotReadError,
    SnapshotWriteError,
)
from .snapshot import FileRecord, Snapshot, SnapshotEntry, utc_now
from .snapshot_store import METADATA_DIR, metadata_dir, snapshot_path, staging_dir
from .ssh_transport import quote_path

# Errors a collaborator may surface for one failed I/O call.
_IO_ERRORS = (RemoteError, OSError, EOFError)


class DeployStage(Enum):
    EXTRACTING = "extracting"
    LISTING = "listing"
    CLASSIFYING_CONFLICTS = "classifying_conflicts"
    RESOLVING_CONFLICTS = "resolving_conflicts"
    MOVING = "moving"
    RECORDING_SNAPSHOT = "recording_snapshot"
    DONE = "done"
    FAILED = "failed"


@dataclass
class DeploymentResult:
    """
    Result of a successful deploy.

    Attributes:
        target_dir: Directory the bundle was placed into
        entry: Snapshot entry recorded for this deploy
        snapshot_created: True if this was the first deploy into target_dir
        replaced: Managed files removed without asking
        backed_up: Unmanaged file name -> backup name
        removed: Unmanaged files deleted on user request
    """
    target_dir: str
    snapshot_created: bool
    entry: Optional[SnapshotEntry] = None
    replaced: List[str] = field(default_factory=list)
    backed_up: Dict[str, str] = field(default_factory=dict)
    removed: List[str] = field(default_factory=list)


class DeployService:
    """Orchestrates one deploy with injected transports.

    Args:
        filesystem: Remote filesystem operations
        executor: Remote shell (extraction and staging cleanup only)
        snapshot_store: Deployment history persistence
        prompter: Interactive decision for unmanaged conflicts
        localizer: Localized progress messages
        logger: Output sink
        lang: Language code passed to localizer and prompter
    """

    def __init__(
        self,
        filesystem: RemoteFileSystem,
        executor: RemoteExecutor,
        snapshot_store: SnapshotStore,
        prompter: UserPrompter,
        localizer: Localizer,
        logger: Logger,
        lang: str = i18n.DEFAULT_LANG,
    ):
        self.fs = filesystem
        self.exec = executor
        self.store = snapshot_store
        self.prompter = prompter
        self.i18n = localizer
        self.log = logger
        self.lang = lang
        self.stage: Optional[DeployStage] = None

    def _msg(self, key: str, *args) -> str:
        return self.i18n.message(key, self.lang, *args)

    def deploy(
        self,
        bundle_location: str,
        target_dir: str,
        bundle_name: str,
        bundle_hash: str,
    ) -> DeploymentResult:
        """
        Extract a bundle already on the host and place it into target_dir.

        Args:
            bundle_location: Path of the .tar.gz bundle on the host
            target_dir: Directory to deploy into
            bundle_name: Bundle name recorded in the snapshot
            bundle_hash: Bundle SHA-256 recorded in the snapshot

        Returns:
            DeploymentResult describing what was replaced, backed up, removed

        Raises:
            DeploymentError: Subclass naming the failing stage. Entries moved
                or files removed before the failure are NOT rolled back.
        """
        target_dir = target_dir.rstrip("/") or "/"
        tmp_dir = staging_dir(target_dir)

        try:
            self.fs.mkdir(metadata_dir(target_dir))
        except _IO_ERRORS as e:
            # Not fatal by itself; extraction below reports the real failure.
            self.log.warning(f"Could not create {metadata_dir(target_dir)}: {e}")

        try:
            return self._deploy_staged(bundle_location, target_dir, tmp_dir, bundle_name, bundle_hash)
        except DeploymentError:
            self.stage = DeployStage.FAILED
            raise
        finally:
            self._cleanup_staging(tmp_dir)

    def _deploy_staged(
        self,
        bundle_location: str,
        target_dir: str,
        tmp_dir: str,
        bundle_name: str,
        bundle_hash: str,
    ) -> DeploymentResult:
        # Step 1: Extract into a fresh staging area
        self.stage = DeployStage.EXTRACTING
        q_tmp = quote_path(tmp_dir)
        extract_cmd = (
            f"rm -rf {q_tmp} && mkdir -p {q_tmp} && "
            f"tar -xzf {quote_path(bundle_location)} -C {q_tmp}"
        )
        try:
            self.exec.run(extract_cmd)
        except _IO_ERRORS as e:
            raise ExtractionError(f"{bundle_location}: {e}", self.stage, e) from e

        # Step 2: Staged top-level entries are the units we move
        self.stage = DeployStage.LISTING
        try:
            staged = [name for name in self.fs.list_dir(tmp_dir) if name != METADATA_DIR]
        except _IO_ERRORS as e:
            raise ListingError(f"{tmp_dir}: {e}", self.stage, e) from e
        self.log.debug(f"Staged {len(staged)} entr{'y' if len(staged) == 1 else 'ies'}: {staged}")

        # Step 3: Conflicts + history
        self.stage = DeployStage.CLASSIFYING_CONFLICTS
        try:
            conflicts = [name for name in staged if self.fs.exists(f"{target_dir}/{name}")]
        except _IO_ERRORS as e:
            raise ListingError(f"{target_dir}: {e}", self.stage, e) from e

        try:
            snapshot = self.store.load(target_dir)
        except _IO_ERRORS as e:
            raise SnapshotReadError(f"{snapshot_path(target_dir)}: {e}", self.stage, e) from e

        result = DeploymentResult(target_dir=target_dir, snapshot_created=snapshot is None)

        # Step 4: Resolve
        if conflicts:
            classified = classify_conflicts(conflicts, snapshot)
            self.stage = DeployStage.RESOLVING_CONFLICTS
            self._resolve_conflicts(target_dir, classified, result)

        # Step 5: Move into place (no rollback on partial failure)
        self.stage = DeployStage.MOVING
        for name in staged:
            try:
                self.fs.rename(f"{tmp_dir}/{name}", f"{target_dir}/{name}")
            except _IO_ERRORS as e:
                raise MoveError(f"{name}: {e}", self.stage, e) from e

        # Step 6: Record
        self.stage = DeployStage.RECORDING_SNAPSHOT
        records = [self._file_record(target_dir, name) for name in staged]
        entry = SnapshotEntry.create(bundle_name, bundle_hash, records)
        if snapshot is None:
            snapshot = Snapshot()
            self.log.info(self._msg(i18n.SNAPSHOT_CREATED, snapshot_path(target_dir)))
        else:
            self.log.info(self._msg(i18n.SNAPSHOT_UPDATED, snapshot_path(target_dir)))
        snapshot.add_entry(entry)

        try:
            self.store.save(target_dir, snapshot)
        except _IO_ERRORS as e:
            raise SnapshotWriteError(f"{snapshot_path(target_dir)}: {e}", self.stage, e) from e

        self.stage = DeployStage.DONE
        self.log.info(self._msg(i18n.DEPLOY_COMPLETE))
        result.entry = entry
        return result

    def _resolve_conflicts(
        self,
        target_dir: str,
        classified: ConflictResult,
        result: DeploymentResult,
    ) -> None:
        """Replace managed files silently, ask once for all unmanaged ones."""
        for name in classified.managed:
            self.log.debug(self._msg(i18n.REPLACING, name))
            try:
                self.fs.remove(f"{target_dir}/{name}")
            except _IO_ERRORS as e:
                raise ConflictResolutionError(f"remove managed {name}: {e}", self.stage, e) from e
            result.replaced.append(name)

        if not classified.unmanaged:
            return

        try:
            action, suffix = self.prompter.ask_conflict_action(list(classified.unmanaged), self.lang)
        except _IO_ERRORS as e:
            raise ConflictResolutionError(f"prompt: {e}", self.stage, e) from e

        for name in classified.unmanaged:
            path = f"{target_dir}/{name}"
            if action is ConflictAction.BACKUP:
                backup = next_backup_name(name, suffix, self._exists_in(target_dir))
                self.log.info(self._msg(i18n.BACKING_UP, name, backup))
                try:
                    self.fs.rename(path, f"{target_dir}/{backup}")
                except _IO_ERRORS as e:
                    raise ConflictResolutionError(f"backup {name}: {e}", self.stage, e) from e
                result.backed_up[name] = backup
            elif action is ConflictAction.REMOVE:
                self.log.info(self._msg(i18n.REMOVING, name))
                try:
                    self.fs.remove(path)
                except _IO_ERRORS as e:
                    raise ConflictResolutionError(f"remove {name}: {e}", self.stage, e) from e
                result.removed.append(name)
            else:
                raise ConflictResolutionError(f"unknown action {action!r}", self.stage)

    def _exists_in(self, target_dir: str):
        def exists(candidate: str) -> bool:
            try:
                return self.fs.exists(f"{target_dir}/{candidate}")
            except _IO_ERRORS as e:
                raise ConflictResolutionError(f"stat {candidate}: {e}", self.stage, e) from e
        return exists

    def _file_record(self, target_dir: str, name: str) -> FileRecord:
        """Collect metadata for a placed entry, degrading instead of failing."""
        path = f"{target_dir}/{name}"
        try:
            digest = self.fs.file_hash(path)
        except _IO_ERRORS as e:
            self.log.warning(f"Could not hash {path}, recording empty hash: {e}")
            digest = ""

        try:
            mod_time = self.fs.mod_time(path)
        except _IO_ERRORS as e:
            self.log.warning(f"Could not read mtime of {path}, using now: {e}")
            mod_time = utc_now()

        return FileRecord(path=name, hash=digest, mod_time=mod_time)

    def _cleanup_staging(self, tmp_dir: str) -> None:
        """Remove the staging area. Never raises."""
        try:
            self.exec.run(f"rm -rf {quote_path(tmp_dir)}")
        except _IO_ERRORS as e:
            self.log.warning(f"Could not clean up staging area {tmp_dir}: {e}")
