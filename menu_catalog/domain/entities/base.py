"""
Shared audit and soft-delete state for catalog entities.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


def now() -> datetime:
    return datetime.now()


@dataclass(eq=False, kw_only=True)
class AuditedEntity:
    """
    Audit fields plus the soft-delete flag triple.

    Entities compare by identity; use the module's key functions when two
    instances must be matched by business key.
    """

    created_at: datetime = field(default_factory=now)
    created_by: Optional[str] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[str] = None

    def _touch(self, actor: Optional[str]) -> None:
        self.updated_at = now()
        self.updated_by = actor

    def _mark_deleted(self, actor: Optional[str]) -> None:
        self.is_deleted = True
        self.deleted_at = now()
        self.deleted_by = actor

    def _clear_deleted(self, actor: Optional[str]) -> None:
        self.is_deleted = False
        self.deleted_at = None
        self.deleted_by = None
        self._touch(actor)


def entity_key(entity) -> str:
    """Identity key of an entity with a surrogate id."""
    return entity.id
