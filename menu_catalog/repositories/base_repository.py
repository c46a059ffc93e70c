"""
Shared record access for the catalog repositories.

Concrete repositories keep their own domain translation; this class only
knows about the SQLAlchemy record type it was built for.
"""

from typing import Generic, List, Optional, Type, TypeVar

from sqlalchemy.orm import Query, Session

R = TypeVar('R')


class BaseRepository(Generic[R]):
    """
    Record-level helpers over one mapped table.

    Args:
        db: Session owned by the caller; repositories flush but never commit
        model: Mapped record class
    """

    def __init__(self, db: Session, model: Type[R]):
        self.db = db
        self.model = model

    def _query(self) -> Query:
        return self.db.query(self.model)

    def add(self, record: R) -> R:
        """Insert a new record and flush so defaults are populated."""
        self.db.add(record)
        self.db.flush()
        return record

    def get_record(self, record_id: str) -> Optional[R]:
        return self.db.get(self.model, record_id)

    def paginate(self, query: Query, limit: Optional[int] = None, offset: int = 0) -> List[R]:
        """
        Fetch one page of an ordered query.

        Args:
            query: Query with ordering already applied
            limit: Page size; None or 0 fetches everything after ``offset``
            offset: Rows to skip

        Returns:
            Records of the page
        """
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)
        return query.all()

    def count(self, *criteria) -> int:
        """Count records matching all given filter expressions."""
        return self._query().filter(*criteria).count()

    def exists(self, *criteria) -> bool:
        return self.count(*criteria) > 0
