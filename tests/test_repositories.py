"""Tests for the SQLAlchemy repositories, specifications and the snapshot codec."""

from datetime import time
from decimal import Decimal

import pytest

from menu_catalog.domain.entities.restaurant_category import RestaurantCategory
from menu_catalog.domain.value_objects.day_type import DayType
from menu_catalog.domain.value_objects.restaurant_status import RestaurantStatus
from menu_catalog.repositories import aggregate_mapper
from menu_catalog.repositories.interfaces import IRestaurantCategoryRepository
from menu_catalog.repositories.restaurant_category_repository import RestaurantCategoryRepository
from menu_catalog.repositories.restaurant_repository import RestaurantRepository
from menu_catalog.repositories.restaurant_specifications import (
    ActiveRestaurantSpec,
    RestaurantInCategoriesSpec,
    RestaurantInRegionSpec,
    RestaurantKeywordSpec,
    RestaurantsByOwnerSpec,
)

from conftest import ACTOR, OWNER_ID, make_address, make_restaurant


def _root(code, name, order=0):
    return RestaurantCategory.create(code, name, ACTOR, lambda _id: None, display_order=order)


class TestAggregateMapper:
    def test_snapshot_keeps_graph_and_audit(self, restaurant_with_menu):
        restaurant, menu = restaurant_with_menu
        category = restaurant.add_menu_category("메인", ACTOR)
        restaurant.add_menu_to_category(menu.id, category.id, True, ACTOR)
        restaurant.set_operating_day(
            DayType.MON, ACTOR, start_time=time(10, 0), end_time=time(22, 0),
            break_start_time=time(15, 0), break_end_time=time(17, 0),
        )
        restaurant.add_tag("찌개")
        restaurant.remove_menu(menu.id, ACTOR)

        loaded = aggregate_mapper.loads(aggregate_mapper.dumps(restaurant))

        loaded_menu = loaded.find_menu_by_id(menu.id)
        assert loaded_menu.is_deleted
        assert loaded_menu.deleted_by == ACTOR
        assert loaded_menu.deleted_at == menu.deleted_at
        assert loaded_menu.price == Decimal("9000")
        assert loaded_menu.option_groups[0].min_selection == 1
        assert [o.additional_price for o in loaded_menu.option_groups[0].options] == [Decimal("0"), Decimal("500")]
        assert loaded.get_operating_day(DayType.MON).break_end_time == time(17, 0)
        assert loaded.tags == ["찌개"]
        assert loaded.address == restaurant.address
        assert loaded.coordinate == restaurant.coordinate
        relation = loaded_menu.category_relations[0]
        assert (relation.owner_id, relation.category_id, relation.is_primary) == (menu.id, category.id, True)


class TestRestaurantRepository:
    def test_save_and_find(self, db_session, restaurant):
        repo = RestaurantRepository(db_session)
        repo.save(restaurant)
        db_session.commit()

        found = repo.find_by_id(restaurant.id)
        assert found is not None
        assert found is not restaurant
        assert found.restaurant_name == restaurant.restaurant_name

    def test_save_is_upsert(self, db_session, restaurant):
        repo = RestaurantRepository(db_session)
        repo.save(restaurant)
        restaurant.update_basic_info("새 이름", "02-000-0000", ACTOR)
        repo.save(restaurant)
        db_session.commit()
        assert repo.count() == 1
        assert repo.find_by_id(restaurant.id).restaurant_name == "새 이름"

    def test_deleted_hidden_from_find_by_id(self, db_session, restaurant):
        repo = RestaurantRepository(db_session)
        restaurant.delete(ACTOR)
        repo.save(restaurant)
        db_session.commit()
        assert repo.find_by_id(restaurant.id) is None
        assert repo.find_by_id_including_deleted(restaurant.id).is_deleted
        assert not repo.exists_by_id(restaurant.id)
        assert repo.find_all() == []
        assert len(repo.find_all(include_deleted=True)) == 1

    def test_exists_by_owner_and_name(self, db_session, restaurant):
        repo = RestaurantRepository(db_session)
        repo.save(restaurant)
        db_session.commit()
        assert repo.exists_by_owner_id_and_name(OWNER_ID, restaurant.restaurant_name)
        assert not repo.exists_by_owner_id_and_name("owner-2", restaurant.restaurant_name)


class TestRestaurantSpecifications:
    def _seed(self, db_session):
        repo = RestaurantRepository(db_session)
        gangnam = make_restaurant(restaurant_name="강남 국밥")
        gangnam.add_tag("국밥")
        gangnam.add_restaurant_category("RCAT-KOREAN", True, ACTOR)
        mapo = make_restaurant(
            restaurant_name="마포 파스타",
            owner_id="owner-2",
            address=make_address(city="마포구", district="합정동"),
        )
        mapo.add_menu("까르보나라", Decimal("15000"), ACTOR)
        hidden = make_restaurant(restaurant_name="숨은 식당")
        hidden.set_active(False, ACTOR)
        for r in (gangnam, mapo, hidden):
            repo.save(r)
        db_session.commit()
        return repo, gangnam, mapo, hidden

    def test_active(self, db_session):
        repo, gangnam, mapo, hidden = self._seed(db_session)
        names = {r.restaurant_name for r in repo.search(ActiveRestaurantSpec())}
        assert names == {"강남 국밥", "마포 파스타"}
        assert not ActiveRestaurantSpec().is_satisfied_by(hidden)

    def test_region(self, db_session):
        repo, gangnam, mapo, hidden = self._seed(db_session)
        spec = ActiveRestaurantSpec() & RestaurantInRegionSpec(city="마포구")
        assert [r.id for r in repo.search(spec)] == [mapo.id]
        assert spec.is_satisfied_by(mapo)
        assert not spec.is_satisfied_by(gangnam)

    def test_categories(self, db_session):
        repo, gangnam, mapo, hidden = self._seed(db_session)
        assert [r.id for r in repo.search(RestaurantInCategoriesSpec(["RCAT-KOREAN"]))] == [gangnam.id]
        assert repo.search(RestaurantInCategoriesSpec([])) == []

    def test_keyword_matches_tags_and_menus(self, db_session):
        repo, gangnam, mapo, hidden = self._seed(db_session)
        assert [r.id for r in repo.search(RestaurantKeywordSpec("국밥"))] == [gangnam.id]
        assert [r.id for r in repo.search(RestaurantKeywordSpec("까르보"))] == [mapo.id]
        assert RestaurantKeywordSpec("까르보").is_satisfied_by(mapo)

    def test_not_and_or(self, db_session):
        repo, gangnam, mapo, hidden = self._seed(db_session)
        spec = ~RestaurantsByOwnerSpec(OWNER_ID) | RestaurantKeywordSpec("국밥")
        assert {r.id for r in repo.search(spec)} == {mapo.id, gangnam.id}

    def test_keyword_wildcards_are_literal(self, db_session):
        repo, gangnam, mapo, hidden = self._seed(db_session)
        hanwoo = make_restaurant(restaurant_name="100% 한우", owner_id="owner-3")
        repo.save(hanwoo)
        db_session.commit()
        assert [r.id for r in repo.search(RestaurantKeywordSpec("%"))] == [hanwoo.id]
        assert repo.search(RestaurantKeywordSpec("_")) == []
        assert not RestaurantKeywordSpec("_").is_satisfied_by(gangnam)


class TestRestaurantCategoryRepository:
    def test_find_all_by_ids(self, db_session):
        repo = RestaurantCategoryRepository(db_session)
        korean = repo.save(_root("KOREAN", "한식", 1))
        chinese = repo.save(_root("CHINESE", "중식", 2))
        db_session.commit()
        assert repo.find_all_by_ids([]) == []
        found = repo.find_all_by_ids([chinese.id, korean.id, "RCAT-NOPE"])
        assert [c.category_code for c in found] == ["KOREAN", "CHINESE"]

    def test_roots_children_and_popular(self, db_session):
        repo = RestaurantCategoryRepository(db_session)
        korean = repo.save(_root("KOREAN", "한식"))
        soup = RestaurantCategory.create("SOUP", "국밥", ACTOR, repo.find_by_id, parent_category_id=korean.id)
        soup.set_popular(True, ACTOR)
        soup.increment_order_count(5)
        repo.save(soup)
        db_session.commit()

        assert [c.id for c in repo.find_root_categories()] == [korean.id]
        assert [c.id for c in repo.find_by_parent_category_id(korean.id)] == [soup.id]
        assert [c.id for c in repo.find_popular_categories()] == [soup.id]
        assert repo.find_by_category_code("SOUP").depth == 2

    def test_deleted_hidden(self, db_session):
        repo = RestaurantCategoryRepository(db_session)
        korean = _root("KOREAN", "한식")
        korean.delete(ACTOR)
        repo.save(korean)
        db_session.commit()
        assert repo.find_by_id(korean.id) is None
        assert not repo.exists_by_id(korean.id)
        assert repo.find_by_id_including_deleted(korean.id).is_deleted
        assert repo.find_all_active() == []


class TestRepositoryInterfaces:
    def test_category_repository_requires_deleted_lookup(self):
        assert "find_by_id_including_deleted" in IRestaurantCategoryRepository.__abstractmethods__

    def test_concrete_repository_is_complete(self):
        assert not RestaurantCategoryRepository.__abstractmethods__
