"""Group capacity checks."""

from core.exceptions import GroupFullError
from domain.entities.group import Group


def has_capacity(group: Group, approved_count: int) -> bool:
    """Check whether one more member can be approved."""
    return approved_count < group.max_members


def ensure_capacity(group: Group, approved_count: int) -> None:
    """Raise GroupFullError when approved members already fill the group."""
    if not has_capacity(group, approved_count):
        raise GroupFullError(group.max_members)
