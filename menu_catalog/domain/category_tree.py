"""
Category hierarchy helpers.

Category trees are stored flat: every node carries ``id``,
``parent_category_id``, ``depth`` and ``display_order`` and parents are
resolved through a lookup-by-id function. The helpers here work for both
restaurant-scoped menu categories and the restaurant category taxonomy.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

from menu_catalog.constants import CatalogLimits, ErrorCode
from menu_catalog.exceptions import CatalogError, InvalidCategoryDepthError, NotFoundError

Lookup = Callable[[str], Optional[Any]]


@dataclass
class CategoryNode:
    """A category together with its ordered children."""

    category: Any
    children: List["CategoryNode"] = field(default_factory=list)

    def to_dict(self, render: Callable[[Any], Dict[str, Any]]) -> Dict[str, Any]:
        data = render(self.category)
        data["children"] = [child.to_dict(render) for child in self.children]
        return data


def lookup_from(categories: Iterable[Any]) -> Lookup:
    """Build an id lookup over an in-memory collection."""
    index = {category.id: category for category in categories}
    return index.get


def child_depth(
    parent_id: Optional[str],
    lookup: Lookup,
    not_found_code: ErrorCode = ErrorCode.CATEGORY_NOT_FOUND,
) -> int:
    """
    Depth a new child of parent_id would have.

    Args:
        parent_id: Parent category id, or None for a root category
        lookup: Resolves an id to a category
        not_found_code: Error code raised for an unknown parent

    Returns:
        1 for a root, otherwise parent depth + 1

    Raises:
        NotFoundError: If the parent cannot be resolved
        InvalidCategoryDepthError: If the depth would exceed the maximum
    """
    if parent_id is None:
        return 1
    parent = lookup(parent_id)
    if parent is None:
        raise NotFoundError(not_found_code, parent_id)
    depth = parent.depth + 1
    if depth > CatalogLimits.MAX_CATEGORY_DEPTH:
        raise InvalidCategoryDepthError(depth)
    return depth


def category_path(category_id: str, lookup: Lookup) -> List[Any]:
    """
    Walk from a category up to its root.

    Returns:
        Categories ordered root first, ending with category_id
    """
    path = []
    seen = set()
    current = lookup(category_id)
    while current is not None:
        if current.id in seen:
            raise CatalogError(ErrorCode.CIRCULAR_CATEGORY_REFERENCE, details={"category_id": current.id})
        seen.add(current.id)
        path.append(current)
        current = lookup(current.parent_category_id) if current.parent_category_id else None
    path.reverse()
    return path


def build_tree(categories: Iterable[Any]) -> List[CategoryNode]:
    """
    Assemble nested nodes from a flat collection.

    Nodes whose parent is missing from the collection are treated as roots.
    Siblings are ordered by display_order.
    """
    nodes = {category.id: CategoryNode(category) for category in categories}
    roots = []
    for node in nodes.values():
        parent_id = node.category.parent_category_id
        if parent_id and parent_id in nodes:
            nodes[parent_id].children.append(node)
        else:
            roots.append(node)

    def _sort(siblings: List[CategoryNode]) -> None:
        siblings.sort(key=lambda n: n.category.display_order)
        for sibling in siblings:
            _sort(sibling.children)

    _sort(roots)
    return roots
