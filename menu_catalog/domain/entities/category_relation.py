"""
Category Relation Entities

Join records between an owner (a menu or a restaurant) and a category.
A relation has its own soft-delete lifecycle; deleting it never touches
either endpoint.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Set, Tuple

from .base import AuditedEntity

RelationFactory = Callable[[str, bool, str], "CategoryRelation"]


@dataclass(eq=False, kw_only=True)
class CategoryRelation(AuditedEntity):
    """Owner/category join record with a primary flag."""

    owner_id: str
    category_id: str
    is_primary: bool = False

    def is_active(self) -> bool:
        return not self.is_deleted

    def update_primary(self, is_primary: bool, actor: Optional[str]) -> None:
        self.is_primary = is_primary
        self._touch(actor)

    def delete(self, actor: Optional[str]) -> None:
        self._mark_deleted(actor)

    def restore(self, actor: Optional[str]) -> None:
        self._clear_deleted(actor)


@dataclass(eq=False, kw_only=True)
class MenuCategoryRelation(CategoryRelation):
    """Menu ↔ menu category relation."""

    restaurant_id: Optional[str] = None

    @property
    def menu_id(self) -> str:
        return self.owner_id


@dataclass(eq=False, kw_only=True)
class RestaurantCategoryRelation(CategoryRelation):
    """Restaurant ↔ restaurant category relation."""

    @property
    def restaurant_id(self) -> str:
        return self.owner_id


def relation_key(relation: CategoryRelation) -> Tuple[str, str]:
    """Business identity of a relation."""
    return relation.owner_id, relation.category_id


def active_relations(relations: Iterable[CategoryRelation]) -> List[CategoryRelation]:
    return [r for r in relations if r.is_active()]


def active_category_ids(relations: Iterable[CategoryRelation]) -> Set[str]:
    return {r.category_id for r in relations if r.is_active()}


def primary_category_id(relations: Iterable[CategoryRelation]) -> Optional[str]:
    for relation in relations:
        if relation.is_active() and relation.is_primary:
            return relation.category_id
    return None


def _find(relations: Iterable[CategoryRelation], category_id: str, active: bool) -> Optional[CategoryRelation]:
    for relation in relations:
        if relation.category_id == category_id and relation.is_active() == active:
            return relation
    return None


def _demote_others(relations: Iterable[CategoryRelation], category_id: str, actor: Optional[str]) -> None:
    for relation in relations:
        if relation.is_active() and relation.is_primary and relation.category_id != category_id:
            relation.update_primary(False, actor)


def add_category_relation(
    relations: List[CategoryRelation],
    category_id: str,
    is_primary: bool,
    actor: Optional[str],
    factory: RelationFactory,
) -> CategoryRelation:
    """
    Link a category to the owner of ``relations``.

    Setting primary demotes every other active primary first. An existing
    active relation is updated in place; a soft-deleted relation with the
    same key is restored rather than duplicated.

    Args:
        relations: The owner's relation list (mutated)
        category_id: Category to link
        is_primary: Whether the link becomes the primary classification
        actor: Acting user id
        factory: Builds a new relation from (category_id, is_primary, actor)

    Returns:
        The active relation for category_id
    """
    if is_primary:
        _demote_others(relations, category_id, actor)

    existing = _find(relations, category_id, active=True)
    if existing is not None:
        if existing.is_primary != is_primary:
            existing.update_primary(is_primary, actor)
        return existing

    deleted = _find(relations, category_id, active=False)
    if deleted is not None:
        deleted.restore(actor)
        deleted.is_primary = is_primary
        return deleted

    relation = factory(category_id, is_primary, actor)
    relations.append(relation)
    return relation


def remove_category_relation(
    relations: Iterable[CategoryRelation], category_id: str, actor: Optional[str]
) -> bool:
    """Soft-delete the active relation to category_id. Returns False if none was active."""
    removed = False
    for relation in relations:
        if relation.is_active() and relation.category_id == category_id:
            relation.delete(actor)
            removed = True
    return removed


def reconcile_category_relations(
    relations: List[CategoryRelation],
    target_ids: Iterable[str],
    actor: Optional[str],
    factory: RelationFactory,
    primary_id: Optional[str] = None,
) -> Tuple[List[str], List[str]]:
    """
    Bring the active relation set in line with target_ids.

    Relations outside the target set are soft-deleted. Newly wanted ids
    reuse a soft-deleted relation when one exists. Running this twice with
    the same target set leaves the relations unchanged.

    Args:
        relations: The owner's relation list (mutated)
        target_ids: Desired active category ids
        actor: Acting user id
        factory: Builds a new relation from (category_id, is_primary, actor)
        primary_id: Category to mark primary, if any

    Returns:
        Tuple of (added ids, removed ids), each sorted
    """
    target = set(target_ids)
    if primary_id is not None:
        target.add(primary_id)
    current = active_category_ids(relations)

    removed = sorted(current - target)
    added = sorted(target - current)

    for category_id in removed:
        remove_category_relation(relations, category_id, actor)
    for category_id in added:
        add_category_relation(relations, category_id, False, actor, factory)
    if primary_id is not None:
        add_category_relation(relations, primary_id, True, actor, factory)

    return added, removed
