"""Production implementations of dependency injection protocols.

This module provides real implementations that wrap actual local resources
(console, filesystem, subprocess, YAML). LocalFileSystem and LocalExecutor
let the deploy flow target a directory on this machine (``local://``);
SSH transports live in castdeploy.deploy.ssh_transport.

For testing, use mocks or test doubles instead of these implementations.
"""

import hashlib
import logging
import os
import shutil
import subprocess
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

import yaml

from castdeploy.deploy.exceptions import (
    HashComputationError,
    ModificationTimeError,
    RemoteError,
)

logger = logging.getLogger(__name__)

_HASH_CHUNK_SIZE = 1024 * 1024


class ConsoleLogger:
    """Production logger that prints to console (stdout/stderr)."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def info(self, message: str) -> None:
        """Print info message to stdout."""
        print(message)

    def warning(self, message: str) -> None:
        """Print warning message to stdout."""
        print(f"Warning: {message}")

    def error(self, message: str) -> None:
        """Print error message to stderr."""
        print(f"Error: {message}", file=sys.stderr)

    def debug(self, message: str) -> None:
        """Print debug message to stdout (only when verbose)."""
        if self.verbose:
            print(f"Debug: {message}")


class LocalFileSystem:
    """Filesystem service for targets on this machine (pathlib/shutil)."""

    def exists(self, path: str) -> bool:
        # lexists: a dangling symlink still occupies the name
        return os.path.lexists(path)

    def mkdir(self, path: str) -> None:
        try:
            Path(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RemoteError(f"mkdir {path}: {e}") from e

    def list_dir(self, path: str) -> List[str]:
        try:
            return sorted(os.listdir(path))
        except OSError as e:
            raise RemoteError(f"list {path}: {e}") from e

    def read_file(self, path: str) -> str:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except OSError as e:
            raise RemoteError(f"read {path}: {e}") from e

    def write_file(self, path: str, content: str) -> None:
        try:
            with open(path, 'w', encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            raise RemoteError(f"write {path}: {e}") from e

    def remove(self, path: str) -> None:
        """Remove file or directory tree. Missing path is not an error."""
        try:
            if os.path.isdir(path) and not os.path.islink(path):
                shutil.rmtree(path)
            elif os.path.lexists(path):
                os.remove(path)
        except OSError as e:
            raise RemoteError(f"remove {path}: {e}") from e

    def rename(self, src: str, dst: str) -> None:
        try:
            os.rename(src, dst)
        except OSError as e:
            raise RemoteError(f"rename {src} -> {dst}: {e}") from e

    def file_hash(self, path: str) -> str:
        digest = hashlib.sha256()
        try:
            with open(path, 'rb') as f:
                for chunk in iter(lambda: f.read(_HASH_CHUNK_SIZE), b''):
                    digest.update(chunk)
        except OSError as e:
            raise HashComputationError(f"hash {path}: {e}") from e
        return digest.hexdigest()

    def mod_time(self, path: str) -> datetime:
        try:
            mtime = os.stat(path).st_mtime
        except OSError as e:
            raise ModificationTimeError(f"stat {path}: {e}") from e
        return datetime.fromtimestamp(mtime, tz=timezone.utc)


class LocalExecutor:
    """Runs shell commands on this machine with subprocess."""

    def run(self, command: str) -> None:
        logger.debug("local exec: %s", command)
        result = subprocess.run(command, shell=True, capture_output=True, text=True)
        if result.returncode != 0:
            raise RemoteError(
                f"command exited {result.returncode}: {command}\n{result.stderr.strip()}"
            )


class YamlConfigLoader:
    """Production config loader using real YAML parser."""

    def __init__(self, filesystem: LocalFileSystem):
        """Initialize with filesystem service for reading files."""
        self.fs = filesystem

    def load_yaml(self, path: str) -> Dict[str, Any]:
        """Load YAML file and return parsed dictionary."""
        content = self.fs.read_file(path)
        return yaml.safe_load(content)
