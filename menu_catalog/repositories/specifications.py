"""
Composable catalog search criteria.

A specification answers one question about a restaurant twice: in memory
against a loaded aggregate (``is_satisfied_by``) and in SQL against the
searchable columns of its record (``to_sql_filter``). Both answers must
agree for records written through the repository.

    spec = ActiveRestaurantSpec() & RestaurantInRegionSpec(province="서울특별시")
    repo.search(spec)
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from sqlalchemy import and_, not_, or_
from sqlalchemy.orm import Query


T = TypeVar('T')


class Specification(ABC, Generic[T]):
    """One search criterion over candidates of type ``T``."""

    @abstractmethod
    def is_satisfied_by(self, candidate: T) -> bool:
        """Evaluate the criterion against a loaded domain object."""

    @abstractmethod
    def to_sql_filter(self):
        """Render the criterion as a SQLAlchemy boolean expression."""

    def apply(self, query: Query) -> Query:
        return query.filter(self.to_sql_filter())

    def __and__(self, other: "Specification[T]") -> "AndSpecification[T]":
        return AndSpecification(self, other)

    def __or__(self, other: "Specification[T]") -> "OrSpecification[T]":
        return OrSpecification(self, other)

    def __invert__(self) -> "NotSpecification[T]":
        return NotSpecification(self)


class AndSpecification(Specification[T]):

    def __init__(self, left: Specification[T], right: Specification[T]):
        self.left = left
        self.right = right

    def is_satisfied_by(self, candidate: T) -> bool:
        return self.left.is_satisfied_by(candidate) and self.right.is_satisfied_by(candidate)

    def to_sql_filter(self):
        return and_(self.left.to_sql_filter(), self.right.to_sql_filter())


class OrSpecification(Specification[T]):

    def __init__(self, left: Specification[T], right: Specification[T]):
        self.left = left
        self.right = right

    def is_satisfied_by(self, candidate: T) -> bool:
        return self.left.is_satisfied_by(candidate) or self.right.is_satisfied_by(candidate)

    def to_sql_filter(self):
        return or_(self.left.to_sql_filter(), self.right.to_sql_filter())


class NotSpecification(Specification[T]):

    def __init__(self, inner: Specification[T]):
        self.inner = inner

    def is_satisfied_by(self, candidate: T) -> bool:
        return not self.inner.is_satisfied_by(candidate)

    def to_sql_filter(self):
        return not_(self.inner.to_sql_filter())
