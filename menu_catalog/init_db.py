from typing import Optional
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
import logging

from menu_catalog.constants import Actors
from menu_catalog.database import Base, SessionLocal, engine as default_engine, transaction
from menu_catalog.domain.entities.restaurant_category import RestaurantCategory
from menu_catalog.repositories.restaurant_category_repository import RestaurantCategoryRepository
import menu_catalog.models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)

# (code, name, display order)
DEFAULT_CATEGORIES = [
    ("KOREAN", "한식", 1),
    ("CHINESE", "중식", 2),
    ("JAPANESE", "일식", 3),
    ("WESTERN", "양식", 4),
    ("CHICKEN", "치킨", 5),
    ("PIZZA", "피자", 6),
    ("SNACK", "분식", 7),
    ("CAFE_DESSERT", "카페/디저트", 8),
]


def seed_default_categories(db: Session) -> int:
    """
    Insert the default root restaurant categories that are missing.

    Returns:
        Number of categories created
    """
    repo = RestaurantCategoryRepository(db)
    created = 0
    with transaction(db):
        for code, name, order in DEFAULT_CATEGORIES:
            if repo.find_by_category_code(code) is not None:
                continue
            category = RestaurantCategory.create(code, name, Actors.SYSTEM, repo.find_by_id, display_order=order)
            repo.save(category)
            created += 1
    if created:
        logger.info(f"Seeded {created} default restaurant categories")
    else:
        logger.debug("Default restaurant categories already present")
    return created


def init_database(bind: Optional[Engine] = None, seed: bool = True) -> None:
    """Create all tables and insert the default taxonomy"""
    bind = bind or default_engine
    Base.metadata.create_all(bind=bind)
    logger.info("Catalog tables created")

    if not seed:
        return
    db = SessionLocal(bind=bind)
    try:
        seed_default_categories(db)
    finally:
        db.close()


if __name__ == "__main__":
    from menu_catalog.config.catalog_config import configure_logging

    configure_logging()
    init_database()
