"""
SSH transports - RemoteExecutor and RemoteFileSystem over OpenSSH.

Every operation is one `ssh user@host '<command>'` round trip through
subprocess, so the only requirement on the host is a POSIX shell with
coreutils (sha256sum or shasum, stat, find). Passwordless SSH must be set up;
see SSHRemoteExecutor.check_connection().
"""

import logging
import posixpath
import shlex
import subprocess
from datetime import datetime, timezone
from typing import List, Optional

from .exceptions import HashComputationError, ModificationTimeError, RemoteError

logger = logging.getLogger(__name__)


def quote_path(path: str) -> str:
    """Shell-quote a remote path, leaving a leading ~/ unquoted so it expands."""
    if path == "~":
        return path
    if path.startswith("~/"):
        return "~/" + shlex.quote(path[2:])
    return shlex.quote(path)


class SSHRemoteExecutor:
    """
    Runs shell commands on a remote host with the `ssh` client.

    Args:
        user: SSH username (e.g., "deploy")
        host: IP or hostname (IPv6 without brackets)
        ssh_port: SSH port (default: 22)
        connect_timeout: Seconds before a connection attempt is abandoned
    """

    def __init__(self, user: str, host: str, ssh_port: int = 22, connect_timeout: int = 10):
        self.user = user
        self.host = host
        self.ssh_port = ssh_port
        self.connect_timeout = connect_timeout

    @property
    def destination(self) -> str:
        return f"{self.user}@{self.host}"

    def _ssh_cmd(self, command: str) -> List[str]:
        """Build SSH command with custom port."""
        return [
            "ssh",
            "-p", str(self.ssh_port),
            "-o", f"ConnectTimeout={self.connect_timeout}",
            self.destination,
            command
        ]

    def _run_ssh(self, command: str, input_text: Optional[str] = None) -> subprocess.CompletedProcess:
        """Run SSH command and return the completed process (never checks)."""
        logger.debug("ssh %s: %s", self.destination, command)
        try:
            return subprocess.run(
                self._ssh_cmd(command),
                input=input_text,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise RemoteError(f"could not start ssh: {e}") from e

    def capture(self, command: str, input_text: Optional[str] = None) -> str:
        """Run command, return stdout; raise RemoteError on non-zero exit."""
        result = self._run_ssh(command, input_text=input_text)
        if result.returncode != 0:
            raise RemoteError(
                f"{self.destination}: command exited {result.returncode}: {command}\n"
                f"{(result.stderr or '').strip()}"
            )
        return result.stdout

    def run(self, command: str) -> None:
        self.capture(command)

    def check_connection(self) -> None:
        """
        Verify passwordless SSH is configured.

        Raises:
            RemoteError: If the host cannot be reached without a password
        """
        port_flag = f"-p {self.ssh_port} " if self.ssh_port != 22 else ""
        test_cmd = [
            "ssh",
            "-p", str(self.ssh_port),
            "-o", "PasswordAuthentication=no",
            "-o", "BatchMode=yes",  # Fail immediately if password needed
            "-o", f"ConnectTimeout={self.connect_timeout}",
            self.destination,
            "echo OK"
        ]
        try:
            result = subprocess.run(test_cmd, capture_output=True, text=True)
        except OSError as e:
            raise RemoteError(f"could not start ssh: {e}") from e

        if result.returncode != 0:
            raise RemoteError(
                f"Passwordless SSH not configured for {self.destination}\n\n"
                f"Setup:\n"
                f"  ssh-copy-id {port_flag}{self.destination}\n\n"
                f"Test:\n"
                f"  ssh {port_flag}{self.destination} \"echo OK\"\n"
                f"  (should NOT ask for password)\n\n"
                f"ssh said: {(result.stderr or '').strip()}"
            )

    def upload(self, local_path: str, remote_path: str) -> None:
        """Copy a local file to the host with scp."""
        host = f"[{self.host}]" if ":" in self.host else self.host
        cmd = [
            "scp",
            "-q",
            "-P", str(self.ssh_port),
            "-o", f"ConnectTimeout={self.connect_timeout}",
            local_path,
            f"{self.user}@{host}:{remote_path}",
        ]
        logger.debug("scp %s -> %s", local_path, remote_path)
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise RemoteError(f"could not start scp: {e}") from e
        if result.returncode != 0:
            raise RemoteError(
                f"scp to {self.destination}:{remote_path} failed: {(result.stderr or '').strip()}"
            )


class SSHRemoteFileSystem:
    """RemoteFileSystem implemented with shell commands over SSHRemoteExecutor."""

    def __init__(self, executor: SSHRemoteExecutor):
        self.exec = executor

    def exists(self, path: str) -> bool:
        q = quote_path(path)
        result = self.exec._run_ssh(f"test -e {q} || test -L {q}")
        if result.returncode == 0:
            return True
        if result.returncode == 1:
            return False
        # 255 and friends: ssh itself failed, not a missing file
        raise RemoteError(
            f"{self.exec.destination}: stat {path} failed: {(result.stderr or '').strip()}"
        )

    def mkdir(self, path: str) -> None:
        self.exec.run(f"mkdir -p {quote_path(path)}")

    def list_dir(self, path: str) -> List[str]:
        # NUL-separated so names containing newlines survive
        output = self.exec.capture(f"find {quote_path(path)} -mindepth 1 -maxdepth 1 -print0")
        return sorted(posixpath.basename(p) for p in output.split("\0") if p)

    def read_file(self, path: str) -> str:
        return self.exec.capture(f"cat {quote_path(path)}")

    def write_file(self, path: str, content: str) -> None:
        self.exec.capture(f"cat > {quote_path(path)}", input_text=content)

    def remove(self, path: str) -> None:
        self.exec.run(f"rm -rf {quote_path(path)}")

    def rename(self, src: str, dst: str) -> None:
        self.exec.run(f"mv {quote_path(src)} {quote_path(dst)}")

    def file_hash(self, path: str) -> str:
        # sha256sum on Linux, shasum on macOS
        q = quote_path(path)
        try:
            output = self.exec.capture(f"sha256sum {q} 2>/dev/null || shasum -a 256 {q}")
        except RemoteError as e:
            raise HashComputationError(str(e)) from e

        parts = output.strip().split()
        if not parts:
            raise HashComputationError(f"unexpected hash output for {path}: {output!r}")
        return parts[0]

    def mod_time(self, path: str) -> datetime:
        # GNU stat first, BSD stat as fallback
        q = quote_path(path)
        try:
            output = self.exec.capture(f"stat -c %Y {q} 2>/dev/null || stat -f %m {q}")
            return datetime.fromtimestamp(int(output.strip()), tz=timezone.utc)
        except (RemoteError, ValueError) as e:
            raise ModificationTimeError(f"stat {path}: {e}") from e
