from pydantic import BaseModel, Field, validator
from typing import List, Optional, Literal, Dict, Any
from datetime import datetime, time
from decimal import Decimal

from menu_catalog.domain.aggregates.restaurant import Restaurant
from menu_catalog.domain.entities.menu import Menu, MenuOption, MenuOptionGroup
from menu_catalog.domain.entities.menu_category import MenuCategory
from menu_catalog.domain.entities.operating_day import OperatingDay
from menu_catalog.domain.entities.restaurant_category import RestaurantCategory
from menu_catalog.domain.value_objects.day_type import DayType, OperatingTimeType
from menu_catalog.domain.value_objects.restaurant_status import RestaurantStatus


# Restaurant commands
class RestaurantCreate(BaseModel):
    """Owner request to register a restaurant"""
    restaurant_name: str
    description: Optional[str] = None
    province: str
    city: str
    district: str
    detail_address: Optional[str] = None
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    contact_number: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    category_ids: List[str] = Field(default_factory=list)
    primary_category_id: Optional[str] = None


class RestaurantUpdate(RestaurantCreate):
    """Full replacement of owner-editable restaurant fields (PUT semantics)"""


class RestaurantPatch(BaseModel):
    """Partial update; unset fields keep their current values"""
    restaurant_name: Optional[str] = None
    description: Optional[str] = None
    province: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    detail_address: Optional[str] = None
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    contact_number: Optional[str] = None
    tags: Optional[List[str]] = None
    category_ids: Optional[List[str]] = None
    primary_category_id: Optional[str] = None


class RestaurantAdminUpdate(RestaurantPatch):
    """Admin partial update; may also toggle activation and status"""
    is_active: Optional[bool] = None
    status: Optional[RestaurantStatus] = None


class OperatingDayInput(BaseModel):
    """One operating window"""
    day_type: DayType
    time_type: OperatingTimeType = OperatingTimeType.REGULAR
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    is_holiday: bool = False
    break_start_time: Optional[time] = None
    break_end_time: Optional[time] = None
    note: Optional[str] = None

    @validator("break_end_time")
    def validate_break_pair(cls, v, values):
        """Break start and end must be given together."""
        if (v is None) != (values.get("break_start_time") is None):
            raise ValueError("break_start_time and break_end_time must be set together")
        return v


class RestaurantSearchRequest(BaseModel):
    """Customer restaurant search"""
    province: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    category_ids: List[str] = Field(default_factory=list)
    keyword: Optional[str] = None
    limit: int = Field(50, description="Maximum number of results")
    offset: int = Field(0, description="Offset for pagination")

    @validator("limit")
    def validate_limit(cls, v):
        if v < 1 or v > 1000:
            raise ValueError("Limit must be between 1 and 1000")
        return v

    @validator("offset")
    def validate_offset(cls, v):
        if v < 0:
            raise ValueError("Offset must be non-negative")
        return v


# Menu commands
class MenuCreate(BaseModel):
    """Owner request to add a menu item"""
    menu_name: str
    price: Optional[Decimal] = None
    description: Optional[str] = None
    ingredients: Optional[str] = None
    calorie: Optional[int] = None
    is_main: bool = False
    is_popular: bool = False
    is_new: bool = False
    category_ids: List[str] = Field(default_factory=list)
    primary_category_id: Optional[str] = None


class MenuUpdate(BaseModel):
    """Full replacement of menu fields (PUT semantics)"""
    menu_name: str
    price: Decimal
    description: Optional[str] = None
    ingredients: Optional[str] = None
    calorie: Optional[int] = None
    is_main: bool = False
    is_popular: bool = False
    is_new: bool = False
    category_ids: List[str] = Field(default_factory=list)
    primary_category_id: Optional[str] = None


class MenuPatch(BaseModel):
    """Partial menu update; unset fields keep their current values"""
    menu_name: Optional[str] = None
    price: Optional[Decimal] = None
    description: Optional[str] = None
    ingredients: Optional[str] = None
    calorie: Optional[int] = None
    is_main: Optional[bool] = None
    is_popular: Optional[bool] = None
    is_new: Optional[bool] = None
    category_ids: Optional[List[str]] = None
    primary_category_id: Optional[str] = None


class MenuAdminUpdate(MenuPatch):
    """Admin partial update; may also toggle availability"""
    is_available: Optional[bool] = None


class OptionGroupCreate(BaseModel):
    group_name: str
    description: Optional[str] = None
    min_selection: int = 0
    max_selection: int = 1
    is_required: bool = False


class OptionCreate(BaseModel):
    option_name: str
    additional_price: Decimal = Decimal("0")
    description: Optional[str] = None
    is_default: bool = False


# Restaurant category commands
class RestaurantCategoryCreate(BaseModel):
    category_code: str
    category_name: str
    description: Optional[str] = None
    icon_url: Optional[str] = None
    color_code: Optional[str] = None
    parent_category_id: Optional[str] = None
    display_order: int = 0
    is_popular: bool = False
    is_new: bool = False
    default_minimum_order_amount: Optional[int] = None
    average_delivery_time: Optional[int] = None
    platform_commission_rate: Optional[Decimal] = None

    @validator("category_code")
    def validate_code(cls, v):
        """Codes are stored upper-case without surrounding whitespace."""
        v = v.strip().upper()
        if not v:
            raise ValueError("category_code must not be blank")
        return v


class RestaurantCategoryUpdate(BaseModel):
    category_name: str
    description: Optional[str] = None
    icon_url: Optional[str] = None
    color_code: Optional[str] = None
    display_order: int = 0
    is_active: bool = True
    is_popular: bool = False
    is_new: bool = False
    default_minimum_order_amount: Optional[int] = None
    average_delivery_time: Optional[int] = None
    platform_commission_rate: Optional[Decimal] = None


# Statistics events
class OrderItem(BaseModel):
    menu_id: str
    quantity: int = 1


class OrderCompletedEvent(BaseModel):
    order_id: str
    restaurant_id: str
    items: List[OrderItem] = Field(default_factory=list)


class WishlistChangedEvent(BaseModel):
    restaurant_id: str
    target_type: Literal["RESTAURANT", "MENU"]
    target_id: str
    action: Literal["ADDED", "REMOVED"]


class ReviewCreatedEvent(BaseModel):
    review_id: str
    restaurant_id: str
    menu_id: Optional[str] = None
    rating: Decimal

    @validator("rating")
    def validate_rating(cls, v):
        if v < 0 or v > 5:
            raise ValueError("Rating must be between 0 and 5")
        return v


# Read views
class CategoryLink(BaseModel):
    """A category linked to a restaurant or menu"""
    category_id: str
    category_name: Optional[str] = None
    is_primary: bool = False


class OperatingDayView(BaseModel):
    day_type: DayType
    day_name: str
    time_type: OperatingTimeType
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    is_holiday: bool
    break_start_time: Optional[time] = None
    break_end_time: Optional[time] = None
    display: str
    note: Optional[str] = None

    @classmethod
    def from_domain(cls, day: OperatingDay) -> "OperatingDayView":
        return cls(
            day_type=day.day_type,
            day_name=day.day_type.korean_name,
            time_type=day.time_type,
            start_time=day.start_time,
            end_time=day.end_time,
            is_holiday=day.is_holiday,
            break_start_time=day.break_start_time,
            break_end_time=day.break_end_time,
            display=day.full_display(),
            note=day.note,
        )


class OptionView(BaseModel):
    id: str
    option_name: str
    description: Optional[str] = None
    additional_price: Decimal
    is_available: bool
    is_default: bool
    display_order: int
    is_deleted: bool = False

    class Config:
        from_attributes = True


class OptionGroupView(BaseModel):
    id: str
    group_name: str
    description: Optional[str] = None
    min_selection: int
    max_selection: int
    is_required: bool
    display_order: int
    options: List[OptionView] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, group: MenuOptionGroup, include_deleted: bool = False) -> "OptionGroupView":
        options = sorted(
            (o for o in group.options if include_deleted or not o.is_deleted),
            key=lambda o: o.display_order,
        )
        return cls(
            id=group.id,
            group_name=group.group_name,
            description=group.description,
            min_selection=group.min_selection,
            max_selection=group.max_selection,
            is_required=group.is_required,
            display_order=group.display_order,
            options=[OptionView.model_validate(o) for o in options],
        )


class MenuView(BaseModel):
    """Menu with its option groups and category links"""
    id: str
    restaurant_id: str
    menu_name: str
    description: Optional[str] = None
    ingredients: Optional[str] = None
    price: Optional[Decimal] = None
    calorie: Optional[int] = None
    is_available: bool
    is_main: bool
    is_popular: bool
    is_new: bool
    purchase_count: int = 0
    wishlist_count: int = 0
    review_count: int = 0
    review_rating: Optional[Decimal] = None
    has_required_options: bool = False
    categories: List[CategoryLink] = Field(default_factory=list)
    option_groups: List[OptionGroupView] = Field(default_factory=list)

    # Admin fields
    is_deleted: bool = False
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[str] = None

    @classmethod
    def from_domain(
        cls,
        menu: Menu,
        category_names: Optional[Dict[str, str]] = None,
        include_deleted: bool = False,
    ) -> "MenuView":
        names = category_names or {}
        links = [
            CategoryLink(category_id=r.category_id, category_name=names.get(r.category_id), is_primary=r.is_primary)
            for r in menu.category_relations if r.is_active()
        ]
        groups = sorted(
            (g for g in menu.option_groups if include_deleted or not g.is_deleted),
            key=lambda g: g.display_order,
        )
        return cls(
            id=menu.id,
            restaurant_id=menu.restaurant_id,
            menu_name=menu.menu_name,
            description=menu.description,
            ingredients=menu.ingredients,
            price=menu.price,
            calorie=menu.calorie,
            is_available=menu.is_available,
            is_main=menu.is_main,
            is_popular=menu.is_popular,
            is_new=menu.is_new,
            purchase_count=menu.purchase_count,
            wishlist_count=menu.wishlist_count,
            review_count=menu.review_count,
            review_rating=menu.review_rating,
            has_required_options=menu.has_required_options(),
            categories=links,
            option_groups=[OptionGroupView.from_domain(g, include_deleted) for g in groups],
            is_deleted=menu.is_deleted,
            created_at=menu.created_at,
            created_by=menu.created_by,
            updated_at=menu.updated_at,
            updated_by=menu.updated_by,
            deleted_at=menu.deleted_at,
            deleted_by=menu.deleted_by,
        )


class MenuCategoryView(BaseModel):
    id: str
    category_name: str
    description: Optional[str] = None
    parent_category_id: Optional[str] = None
    depth: int
    display_order: int
    is_active: bool
    menu_count: int = 0
    path: List[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, category: MenuCategory, path: Optional[List[MenuCategory]] = None) -> "MenuCategoryView":
        """path: ancestors root first, ending with the category itself"""
        return cls(
            id=category.id,
            category_name=category.category_name,
            description=category.description,
            parent_category_id=category.parent_category_id,
            depth=category.depth,
            display_order=category.display_order,
            is_active=category.is_active,
            menu_count=len(category.menu_ids),
            path=[c.category_name for c in (path or [category])],
        )


class RestaurantView(BaseModel):
    """Restaurant detail with resolved category names"""
    id: str
    owner_id: str
    owner_name: Optional[str] = None
    restaurant_name: str
    description: Optional[str] = None
    status: RestaurantStatus
    status_name: str
    full_address: Optional[str] = None
    province: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    detail_address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    map_url: Optional[str] = None
    contact_number: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    categories: List[CategoryLink] = Field(default_factory=list)
    operating_days: List[OperatingDayView] = Field(default_factory=list)
    menu_categories: List[MenuCategoryView] = Field(default_factory=list)
    active_menu_count: int = 0
    is_active: bool
    view_count: int = 0
    wishlist_count: int = 0
    review_count: int = 0
    review_rating: Optional[Decimal] = None
    purchase_count: int = 0

    # Admin fields
    is_deleted: bool = False
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[str] = None

    @classmethod
    def from_domain(cls, restaurant: Restaurant, category_names: Optional[Dict[str, str]] = None) -> "RestaurantView":
        names = category_names or {}
        address = restaurant.address
        coordinate = restaurant.coordinate
        links = [
            CategoryLink(category_id=r.category_id, category_name=names.get(r.category_id), is_primary=r.is_primary)
            for r in restaurant.category_relations if r.is_active()
        ]
        return cls(
            id=restaurant.id,
            owner_id=restaurant.owner_id,
            owner_name=restaurant.owner_name,
            restaurant_name=restaurant.restaurant_name,
            description=restaurant.description,
            status=restaurant.status,
            status_name=restaurant.status.display_name,
            full_address=address.full_address() if address else None,
            province=address.province if address else None,
            city=address.city if address else None,
            district=address.district if address else None,
            detail_address=address.detail_address if address else None,
            latitude=coordinate.latitude if coordinate else None,
            longitude=coordinate.longitude if coordinate else None,
            map_url=coordinate.to_naver_map_url() if coordinate else None,
            contact_number=restaurant.contact_number,
            tags=list(restaurant.tags),
            categories=links,
            operating_days=[OperatingDayView.from_domain(d) for d in restaurant.operating_days],
            menu_categories=[
                MenuCategoryView.from_domain(c, restaurant.menu_category_path(c.id))
                for c in restaurant.active_menu_categories()
            ],
            active_menu_count=restaurant.active_menu_count(),
            is_active=restaurant.is_active,
            view_count=restaurant.view_count,
            wishlist_count=restaurant.wishlist_count,
            review_count=restaurant.review_count,
            review_rating=restaurant.review_rating,
            purchase_count=restaurant.purchase_count,
            is_deleted=restaurant.is_deleted,
            created_at=restaurant.created_at,
            created_by=restaurant.created_by,
            updated_at=restaurant.updated_at,
            updated_by=restaurant.updated_by,
            deleted_at=restaurant.deleted_at,
            deleted_by=restaurant.deleted_by,
        )


class NearbyRestaurantView(BaseModel):
    """A restaurant found by a radius search"""
    restaurant: RestaurantView
    distance_km: float


class RestaurantCategoryView(BaseModel):
    id: str
    category_code: str
    category_name: str
    description: Optional[str] = None
    icon_url: Optional[str] = None
    color_code: Optional[str] = None
    parent_category_id: Optional[str] = None
    depth: int
    display_order: int
    is_active: bool
    is_popular: bool
    is_new: bool
    default_minimum_order_amount: Optional[int] = None
    average_delivery_time: Optional[int] = None
    platform_commission_rate: Optional[Decimal] = None
    active_restaurant_count: int = 0
    total_order_count: int = 0

    class Config:
        from_attributes = True


class RestaurantCategoryTree(RestaurantCategoryView):
    children: List["RestaurantCategoryTree"] = Field(default_factory=list)

    @classmethod
    def from_node(cls, node) -> "RestaurantCategoryTree":
        category: RestaurantCategory = node.category
        view = cls.model_validate(category)
        view.children = [cls.from_node(child) for child in node.children]
        return view


class ErrorResponse(BaseModel):
    """Client-safe error payload"""
    code: str
    message: str
    status: int
    details: Dict[str, Any] = Field(default_factory=dict)
