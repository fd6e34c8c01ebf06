"""
Conflict classification.

A conflict is a staged entry whose name already exists directly under the
target directory. Managed conflicts (listed in the snapshot history) are
reproducible deploy output and get replaced silently; unmanaged ones belong
to someone else and need a user decision.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from .snapshot import Snapshot, is_managed


class ConflictAction(Enum):
    """User decision for the whole set of unmanaged conflicts."""
    BACKUP = "backup"
    REMOVE = "remove"


@dataclass
class ConflictResult:
    """Disjoint, order-preserving split of conflicting names."""
    managed: List[str] = field(default_factory=list)
    unmanaged: List[str] = field(default_factory=list)


def classify_conflicts(
    conflicts: Iterable[str],
    snapshot: Optional[Snapshot],
) -> ConflictResult:
    """
    Split conflicting names into managed and unmanaged.

    Every input name lands in exactly one list, keeping input order.
    A missing snapshot makes every name unmanaged.
    """
    result = ConflictResult()
    for name in conflicts:
        if is_managed(snapshot, name):
            result.managed.append(name)
        else:
            result.unmanaged.append(name)
    return result
