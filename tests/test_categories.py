"""Tests for category hierarchies and category relations."""

from types import SimpleNamespace

import pytest

from menu_catalog.constants import ErrorCode
from menu_catalog.domain.category_tree import build_tree, category_path, child_depth, lookup_from
from menu_catalog.domain.entities.category_relation import (
    MenuCategoryRelation,
    active_category_ids,
    add_category_relation,
    primary_category_id,
    reconcile_category_relations,
    relation_key,
)
from menu_catalog.domain.entities.restaurant_category import RestaurantCategory
from menu_catalog.exceptions import CatalogError, InvalidCategoryDepthError, NotFoundError

from conftest import ACTOR


def node(id, parent=None, depth=1, order=0):
    return SimpleNamespace(id=id, parent_category_id=parent, depth=depth, display_order=order)


def relation_factory(category_id, is_primary, actor):
    return MenuCategoryRelation(owner_id="MENU-1", category_id=category_id, is_primary=is_primary, created_by=actor)


def primaries(relations):
    return [r.category_id for r in relations if r.is_active() and r.is_primary]


class TestChildDepth:
    def test_root(self):
        assert child_depth(None, lookup_from([])) == 1

    def test_child_of_depth_two_is_three(self):
        lookup = lookup_from([node("a"), node("b", "a", 2)])
        assert child_depth("b", lookup) == 3

    def test_child_of_depth_three_rejected(self):
        lookup = lookup_from([node("a"), node("b", "a", 2), node("c", "b", 3)])
        with pytest.raises(InvalidCategoryDepthError):
            child_depth("c", lookup)

    def test_unknown_parent(self):
        with pytest.raises(NotFoundError) as exc:
            child_depth("missing", lookup_from([]), ErrorCode.RESTAURANT_CATEGORY_NOT_FOUND)
        assert exc.value.error_code is ErrorCode.RESTAURANT_CATEGORY_NOT_FOUND


class TestTree:
    def test_build_tree_orders_siblings(self):
        roots = build_tree([
            node("b", order=2),
            node("a", order=1),
            node("a2", "a", 2, order=2),
            node("a1", "a", 2, order=1),
        ])
        assert [n.category.id for n in roots] == ["a", "b"]
        assert [n.category.id for n in roots[0].children] == ["a1", "a2"]

    def test_orphans_become_roots(self):
        roots = build_tree([node("x", "gone", 2)])
        assert [n.category.id for n in roots] == ["x"]

    def test_category_path(self):
        lookup = lookup_from([node("a"), node("b", "a", 2), node("c", "b", 3)])
        assert [c.id for c in category_path("c", lookup)] == ["a", "b", "c"]

    def test_category_path_detects_cycle(self):
        lookup = lookup_from([node("a", "b", 2), node("b", "a", 2)])
        with pytest.raises(CatalogError) as exc:
            category_path("a", lookup)
        assert exc.value.error_code is ErrorCode.CIRCULAR_CATEGORY_REFERENCE

    def test_to_dict(self):
        roots = build_tree([node("a"), node("b", "a", 2)])
        data = roots[0].to_dict(lambda c: {"id": c.id})
        assert data == {"id": "a", "children": [{"id": "b", "children": []}]}


class TestRestaurantCategory:
    def test_create_derives_depth(self):
        root = RestaurantCategory.create("KOREAN", "한식", ACTOR, lambda _id: None)
        child = RestaurantCategory.create("SOUP", "국밥", ACTOR, lookup_from([root]), parent_category_id=root.id)
        assert root.depth == 1
        assert child.depth == 2
        assert child.parent_category_id == root.id

    def test_delete_deactivates(self):
        category = RestaurantCategory.create("KOREAN", "한식", ACTOR, lambda _id: None)
        category.delete(ACTOR)
        assert category.is_deleted
        assert not category.is_available()
        category.restore(ACTOR)
        assert category.is_available()

    def test_restaurant_count_never_negative(self):
        category = RestaurantCategory.create("KOREAN", "한식", ACTOR, lambda _id: None)
        category.decrement_active_restaurant_count()
        assert category.active_restaurant_count == 0


class TestCategoryRelations:
    def test_primary_is_exclusive(self):
        relations = []
        sequence = [("a", True), ("b", False), ("c", True), ("a", True), ("b", True), ("c", False)]
        for category_id, is_primary in sequence:
            add_category_relation(relations, category_id, is_primary, ACTOR, relation_factory)
            assert len(primaries(relations)) <= 1
        assert primary_category_id(relations) == "b"

    def test_add_existing_does_not_duplicate(self):
        relations = []
        add_category_relation(relations, "a", False, ACTOR, relation_factory)
        add_category_relation(relations, "a", True, ACTOR, relation_factory)
        assert len(relations) == 1
        assert relations[0].is_primary

    def test_deleted_relation_is_restored(self):
        relations = []
        first = add_category_relation(relations, "a", False, ACTOR, relation_factory)
        first.delete(ACTOR)
        again = add_category_relation(relations, "a", False, ACTOR, relation_factory)
        assert again is first
        assert again.is_active()
        assert len(relations) == 1

    def test_reconcile_is_idempotent(self):
        relations = []
        add_category_relation(relations, "a", True, ACTOR, relation_factory)
        add_category_relation(relations, "b", False, ACTOR, relation_factory)

        added, removed = reconcile_category_relations(relations, ["b", "c"], ACTOR, relation_factory, "c")
        assert added == ["c"]
        assert removed == ["a"]
        snapshot = [(r.category_id, r.is_primary, r.is_deleted) for r in relations]

        added, removed = reconcile_category_relations(relations, ["b", "c"], ACTOR, relation_factory, "c")
        assert (added, removed) == ([], [])
        assert [(r.category_id, r.is_primary, r.is_deleted) for r in relations] == snapshot
        assert active_category_ids(relations) == {"b", "c"}
        assert primaries(relations) == ["c"]

    def test_reconcile_keeps_unique_keys(self):
        relations = []
        for target in (["a", "b"], ["b"], ["a", "b"], [], ["a"]):
            reconcile_category_relations(relations, target, ACTOR, relation_factory)
        keys = [relation_key(r) for r in relations]
        assert len(keys) == len(set(keys))
        assert active_category_ids(relations) == {"a"}
