"""Core dependency injection infrastructure for castdeploy.

Protocol-based abstractions for every external dependency of a deploy
(remote filesystem, remote shell, prompt, snapshot store, localizer,
console output, config loading), plus production implementations for
the local machine.
"""

from castdeploy.core.protocols import (
    Logger,
    RemoteFileSystem,
    RemoteExecutor,
    UserPrompter,
    SnapshotStore,
    Localizer,
    ConfigLoader,
)

from castdeploy.core.implementations import (
    ConsoleLogger,
    LocalFileSystem,
    LocalExecutor,
    YamlConfigLoader,
)

__all__ = [
    # Protocols
    "Logger",
    "RemoteFileSystem",
    "RemoteExecutor",
    "UserPrompter",
    "SnapshotStore",
    "Localizer",
    "ConfigLoader",
    # Implementations
    "ConsoleLogger",
    "LocalFileSystem",
    "LocalExecutor",
    "YamlConfigLoader",
]
