from sqlalchemy import Column, String, Integer, Float, Boolean, Text, DateTime, Numeric, CheckConstraint, UniqueConstraint, Index
from datetime import datetime

from menu_catalog.database import Base


class RestaurantRecord(Base):
    """
    Persisted restaurant aggregate.

    Searchable attributes are stored as columns; the full object graph
    (menus, option groups, categories, operating hours, relations with their
    audit and soft-delete fields) lives in aggregate_json.

    List-valued columns (tags, category_ids) are stored comma-delimited with
    leading and trailing commas so ",value," matches exactly with LIKE.
    """
    __tablename__ = 'restaurants'

    id = Column(String, primary_key=True)
    owner_id = Column(String, nullable=False)
    owner_name = Column(String)
    restaurant_name = Column(String, nullable=False)
    status = Column(String, nullable=False, default='OPEN')
    province = Column(String)
    city = Column(String)
    district = Column(String)
    latitude = Column(Float)
    longitude = Column(Float)
    tags = Column(Text, default=',')
    category_ids = Column(Text, default=',')
    menu_names = Column(Text, default='')
    is_active = Column(Boolean, nullable=False, default=True)
    is_deleted = Column(Boolean, nullable=False, default=False)
    view_count = Column(Integer, default=0)
    wishlist_count = Column(Integer, default=0)
    purchase_count = Column(Integer, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime)
    deleted_at = Column(DateTime)
    aggregate_json = Column(Text, nullable=False)

    __table_args__ = (
        CheckConstraint("restaurant_name != ''"),
        CheckConstraint("status IN ('OPEN', 'CLOSED', 'TEMPORARILY_CLOSED', 'PREPARING')", name='check_restaurant_status'),
        Index('idx_restaurants_owner', 'owner_id'),
        Index('idx_restaurants_region', 'province', 'city', 'district'),
        Index('idx_restaurants_visibility', 'is_active', 'is_deleted'),
    )


class RestaurantCategoryRecord(Base):
    """Restaurant taxonomy node (한식, 중식, ...)."""
    __tablename__ = 'restaurant_categories'

    id = Column(String, primary_key=True)
    category_code = Column(String, nullable=False)
    category_name = Column(String, nullable=False)
    description = Column(Text)
    icon_url = Column(String)
    color_code = Column(String)
    parent_category_id = Column(String)
    depth = Column(Integer, nullable=False, default=1)
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    is_popular = Column(Boolean, nullable=False, default=False)
    is_new = Column(Boolean, nullable=False, default=False)

    default_minimum_order_amount = Column(Integer)
    average_delivery_time = Column(Integer)
    platform_commission_rate = Column(Numeric(5, 2))

    active_restaurant_count = Column(Integer, nullable=False, default=0)
    total_order_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, default=datetime.now)
    created_by = Column(String)
    updated_at = Column(DateTime)
    updated_by = Column(String)
    is_deleted = Column(Boolean, nullable=False, default=False)
    deleted_at = Column(DateTime)
    deleted_by = Column(String)

    __table_args__ = (
        CheckConstraint("depth BETWEEN 1 AND 3", name='check_category_depth'),
        UniqueConstraint('category_code', name='uq_restaurant_category_code'),
        Index('idx_restaurant_categories_parent', 'parent_category_id'),
    )
