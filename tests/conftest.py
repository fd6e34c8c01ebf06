"""In-memory test doubles for the deploy collaborators.

These satisfy the castdeploy.core.protocols Protocols structurally, so
DeployService can be driven end to end with no network, shell, or terminal.
"""

import shlex
from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest

from castdeploy.deploy.conflict import ConflictAction
from castdeploy.deploy.exceptions import HashComputationError, RemoteError
from castdeploy.deploy.snapshot import Snapshot

FIXED_MTIME = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeRemoteFileSystem:
    """Dict-backed filesystem: files map path -> content, dirs is a set."""

    def __init__(self):
        self.files: Dict[str, str] = {}
        self.dirs = set()
        self.calls: List[tuple] = []

    def _children_prefix(self, path: str) -> str:
        return path.rstrip('/') + '/'

    def exists(self, path: str) -> bool:
        return path in self.files or path in self.dirs

    def mkdir(self, path: str) -> None:
        self.calls.append(("mkdir", path))
        self.dirs.add(path)

    def list_dir(self, path: str) -> List[str]:
        if path not in self.dirs:
            raise RemoteError(f"no such directory: {path}")
        prefix = self._children_prefix(path)
        names = set()
        for p in list(self.files) + list(self.dirs):
            if p.startswith(prefix):
                names.add(p[len(prefix):].split('/', 1)[0])
        return sorted(names)

    def read_file(self, path: str) -> str:
        if path not in self.files:
            raise RemoteError(f"not found: {path}")
        return self.files[path]

    def write_file(self, path: str, content: str) -> None:
        self.calls.append(("write_file", path))
        self.files[path] = content

    def remove(self, path: str) -> None:
        self.calls.append(("remove", path))
        prefix = self._children_prefix(path)
        self.files = {p: c for p, c in self.files.items() if p != path and not p.startswith(prefix)}
        self.dirs = {d for d in self.dirs if d != path and not d.startswith(prefix)}

    def rename(self, src: str, dst: str) -> None:
        self.calls.append(("rename", src, dst))
        if not self.exists(src):
            raise RemoteError(f"not found: {src}")
        src_prefix = self._children_prefix(src)
        dst_prefix = self._children_prefix(dst)
        files = {}
        for p, c in self.files.items():
            if p == src:
                files[dst] = c
            elif p.startswith(src_prefix):
                files[dst_prefix + p[len(src_prefix):]] = c
            else:
                files[p] = c
        dirs = set()
        for d in self.dirs:
            if d == src:
                dirs.add(dst)
            elif d.startswith(src_prefix):
                dirs.add(dst_prefix + d[len(src_prefix):])
            else:
                dirs.add(d)
        self.files, self.dirs = files, dirs

    def file_hash(self, path: str) -> str:
        if path not in self.files:
            raise HashComputationError(f"not a regular file: {path}")
        return f"hash-of-{self.files[path]}"

    def mod_time(self, path: str) -> datetime:
        return FIXED_MTIME


class FakeRemoteExecutor:
    """Records commands; simulates tar extraction from a staged payload.

    Set `bundles[bundle_path] = {"name": content, "dir/": None, ...}` and the
    extract command will create those entries under the staging directory.
    """

    def __init__(self, fs: FakeRemoteFileSystem):
        self.fs = fs
        self.commands: List[str] = []
        self.bundles: Dict[str, Dict[str, Optional[str]]] = {}
        self.fail_on: Optional[str] = None

    def run(self, command: str) -> None:
        self.commands.append(command)
        if self.fail_on and self.fail_on in command:
            raise RemoteError(f"simulated failure: {command}")

        if "tar -xzf" in command:
            self._extract(command)
        elif command.startswith("rm -rf "):
            self.fs.remove(shlex.split(command)[2])

    def _extract(self, command: str) -> None:
        tokens = shlex.split(command)
        bundle = tokens[tokens.index("-xzf") + 1]
        staging = tokens[tokens.index("-C") + 1]
        if bundle not in self.bundles:
            raise RemoteError(f"tar: {bundle}: Cannot open: No such file or directory")
        self.fs.remove(staging)
        self.fs.dirs.add(staging)
        for name, content in self.bundles[bundle].items():
            if name.endswith('/'):
                self.fs.dirs.add(f"{staging}/{name.rstrip('/')}")
            else:
                self.fs.files[f"{staging}/{name}"] = content


class FakeSnapshotStore:
    def __init__(self):
        self.snapshots: Dict[str, Snapshot] = {}
        self.saves = 0

    def load(self, target_dir: str) -> Optional[Snapshot]:
        return self.snapshots.get(target_dir)

    def save(self, target_dir: str, snapshot: Snapshot) -> None:
        self.saves += 1
        self.snapshots[target_dir] = snapshot


class FakePrompter:
    def __init__(self, action: ConflictAction = ConflictAction.BACKUP, suffix: str = ".bak"):
        self.action = action
        self.suffix = suffix
        self.calls: List[tuple] = []

    def ask_conflict_action(self, names, lang):
        self.calls.append((list(names), lang))
        return self.action, self.suffix


class RecordingLogger:
    def __init__(self):
        self.messages: List[tuple] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def debug(self, message: str) -> None:
        self.messages.append(("debug", message))

    def of_level(self, level: str) -> List[str]:
        return [m for lvl, m in self.messages if lvl == level]


@pytest.fixture
def fake_fs():
    return FakeRemoteFileSystem()


@pytest.fixture
def fake_exec(fake_fs):
    return FakeRemoteExecutor(fake_fs)


@pytest.fixture
def fake_store():
    return FakeSnapshotStore()


@pytest.fixture
def fake_prompter():
    return FakePrompter()


@pytest.fixture
def recording_logger():
    return RecordingLogger()
