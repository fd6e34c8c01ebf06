"""
TransportFactory - Parse device strings into remote transports.

Format-based routing:
    user@host              → SSH transports (port 22)
    user@host:2222         → SSH transports with custom SSH port
    user@[fe80::1]:2222    → SSH transports with IPv6
    local:// (or empty)    → this machine (LocalFileSystem + LocalExecutor)
"""

import shutil
from dataclasses import dataclass
from typing import Callable

from castdeploy.core.protocols import RemoteExecutor, RemoteFileSystem

from .exceptions import RemoteError


@dataclass
class Transport:
    """
    Filesystem + executor pair for one host.

    Attributes:
        name: Human-readable destination ("deploy@web1:22" or "local")
        filesystem: RemoteFileSystem for the host
        executor: RemoteExecutor for the host
        upload: Callable(local_path, remote_path) copying a file to the host
        check: Callable() raising RemoteError if the host is unusable
    """
    name: str
    filesystem: RemoteFileSystem
    executor: RemoteExecutor
    upload: Callable[[str, str], None]
    check: Callable[[], None]


def _local_upload(local_path: str, remote_path: str) -> None:
    try:
        shutil.copyfile(local_path, remote_path)
    except OSError as e:
        raise RemoteError(f"copy {local_path} -> {remote_path}: {e}") from e


def _no_check() -> None:
    return None


class TransportFactory:
    """Factory for parsing device strings into transports."""

    @staticmethod
    def parse_ssh_device(device: str):
        """
        Split user@host[:port] into (user, host, port).

        Raises:
            ValueError: If the string is malformed
        """
        user, host_part = device.split('@', 1)
        if not user:
            raise ValueError(f"Missing user in device string: {device}")

        # Check for IPv6 brackets
        if host_part.startswith('['):
            bracket_end = host_part.find(']')
            if bracket_end == -1:
                raise ValueError(f"Malformed IPv6 address: {device}")
            host = host_part[1:bracket_end]  # Strip brackets
            remainder = host_part[bracket_end + 1:]
            if remainder and not remainder.startswith(':'):
                raise ValueError(f"Malformed device string: {device}")
            port_str = remainder[1:] if remainder else None
        elif ':' in host_part:
            host, port_str = host_part.rsplit(':', 1)
        else:
            host, port_str = host_part, None

        if not host:
            raise ValueError(f"Missing host in device string: {device}")

        port = 22
        if port_str is not None:
            try:
                port = int(port_str)
            except ValueError:
                raise ValueError(f"Invalid SSH port '{port_str}' in {device}") from None
            if not 0 < port < 65536:
                raise ValueError(f"SSH port out of range in {device}: {port}")

        return user, host, port

    @staticmethod
    def from_device_string(device: str) -> Transport:
        """
        Parse device string and return the matching transport.

        Raises:
            ValueError: If format not recognized

        Example:
            transport = TransportFactory.from_device_string("deploy@192.168.1.20")
            transport.check()
            transport.upload("dist/app.tar.gz", "/srv/app/.castdeploy/app.tar.gz")
        """
        # Lazy import to avoid circular dependencies
        from castdeploy.core.implementations import LocalExecutor, LocalFileSystem
        from .ssh_transport import SSHRemoteExecutor, SSHRemoteFileSystem

        if not device or device == 'local://':
            return Transport(
                name="local",
                filesystem=LocalFileSystem(),
                executor=LocalExecutor(),
                upload=_local_upload,
                check=_no_check,
            )

        if '@' in device:
            user, host, port = TransportFactory.parse_ssh_device(device)
            executor = SSHRemoteExecutor(user, host, ssh_port=port)
            return Transport(
                name=f"{user}@{host}:{port}",
                filesystem=SSHRemoteFileSystem(executor),
                executor=executor,
                upload=executor.upload,
                check=executor.check_connection,
            )

        raise ValueError(
            f"Unknown device format: {device}\n"
            f"Expected: user@host | user@host:port | user@[ipv6]:port | local://"
        )
