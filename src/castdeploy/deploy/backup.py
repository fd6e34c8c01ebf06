"""Backup name generation for unmanaged conflicting files."""

import logging
from typing import Callable

logger = logging.getLogger(__name__)

# Highest sequence number tried before giving up (exclusive).
MAX_BACKUP_SEQUENCE = 100000


def next_backup_name(
    base_name: str,
    suffix: str,
    exists: Callable[[str], bool],
    max_sequence: int = MAX_BACKUP_SEQUENCE,
) -> str:
    """
    Return the first free backup name for base_name.

    Candidates, in order:
        base_name + suffix            (sequence 1, never shown)
        base_name + suffix + ".2"
        base_name + suffix + ".3"
        ...

    The first candidate for which exists() is False wins, so gaps are
    reused ("config.bak.2" before "config.bak.4" when only ".bak" and
    ".bak.3" are taken).

    Args:
        base_name: Name of the file being backed up
        suffix: Backup suffix chosen by the user (e.g. ".bak")
        exists: Predicate telling whether a candidate name is taken
        max_sequence: Search bound (exclusive)

    Returns:
        Candidate name. If every sequence below max_sequence is taken, the
        last candidate tried is returned and is NOT guaranteed to be free.
    """
    candidate = f"{base_name}{suffix}"
    if not exists(candidate):
        return candidate

    for seq in range(2, max_sequence):
        candidate = f"{base_name}{suffix}.{seq}"
        if not exists(candidate):
            return candidate

    logger.warning(
        "No free backup name for %s%s below sequence %d; reusing %s",
        base_name, suffix, max_sequence, candidate,
    )
    return candidate
