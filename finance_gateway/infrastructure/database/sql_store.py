"""Row store over the local SQL database"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import Date, DateTime, Numeric
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finance_gateway.domain.exceptions import BackendError
from finance_gateway.infrastructure.database.models import ROW_MODELS
from finance_gateway.infrastructure.observability.metrics import store_failure_counter, store_latency_histogram
from finance_gateway.infrastructure.store import Filters, Ordering, Row, RowStore
from finance_gateway.utils.date_utils import parse_date


def _coerce(column, value: Any) -> Any:
    """Accept the loosely typed values a REST payload would carry (ISO strings, numbers)"""
    if value is None:
        return None
    if isinstance(column.type, DateTime):
        if isinstance(value, str):
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        return value
    if isinstance(column.type, Date):
        return parse_date(value)
    if isinstance(column.type, Numeric) and not isinstance(value, Decimal):
        return Decimal(str(value))
    return value


class SqlRowStore(RowStore):
    """
    Row store on a SQLAlchemy session.

    Each write commits immediately, matching the one-call-one-row semantics of
    the hosted backend.
    """

    def __init__(self, db: Session):
        self.db = db

    def _model(self, table: str):
        try:
            return ROW_MODELS[table]
        except KeyError:
            raise BackendError(f"Unknown table: {table}", status_code=404) from None

    def _column(self, model, name: str):
        column = model.__table__.columns.get(name)
        if column is None:
            raise BackendError(f"Unknown column {model.__tablename__}.{name}", status_code=400)
        return column

    def _values(self, model, row: Row) -> Dict[str, Any]:
        return {name: _coerce(self._column(model, name), value) for name, value in row.items()}

    def _as_row(self, obj) -> Row:
        return {column.name: getattr(obj, column.name) for column in obj.__table__.columns}

    def _query(self, model, eq: Optional[Filters] = None, gte: Optional[Filters] = None, lte: Optional[Filters] = None):
        query = self.db.query(model)
        for name, value in (eq or {}).items():
            column = self._column(model, name)
            if value is None:
                query = query.filter(column.is_(None))
            else:
                query = query.filter(column == _coerce(column, value))
        for name, value in (gte or {}).items():
            column = self._column(model, name)
            query = query.filter(column >= _coerce(column, value))
        for name, value in (lte or {}).items():
            column = self._column(model, name)
            query = query.filter(column <= _coerce(column, value))
        return query

    def _fail(self, operation: str, error: SQLAlchemyError) -> BackendError:
        self.db.rollback()
        store_failure_counter.labels(operation=operation).inc()
        return BackendError(f"Database error during {operation}: {error}")

    async def select(
        self,
        table: str,
        eq: Optional[Filters] = None,
        gte: Optional[Filters] = None,
        lte: Optional[Filters] = None,
        order: Optional[Ordering] = None,
        limit: Optional[int] = None,
    ) -> List[Row]:
        model = self._model(table)
        query = self._query(model, eq, gte, lte)
        for name, descending in order or ():
            column = self._column(model, name)
            query = query.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            query = query.limit(limit)
        try:
            with store_latency_histogram.labels(operation="select").time():
                return [self._as_row(obj) for obj in query.all()]
        except SQLAlchemyError as e:
            raise self._fail("select", e) from e

    async def insert_many(self, table: str, rows: Sequence[Row]) -> List[Row]:
        model = self._model(table)
        objects = [model(**self._values(model, row)) for row in rows]
        try:
            with store_latency_histogram.labels(operation="insert").time():
                self.db.add_all(objects)
                self.db.commit()
                for obj in objects:
                    self.db.refresh(obj)
        except SQLAlchemyError as e:
            raise self._fail("insert", e) from e
        return [self._as_row(obj) for obj in objects]

    async def update(self, table: str, eq: Filters, values: Row) -> List[Row]:
        model = self._model(table)
        changes = self._values(model, values)
        try:
            with store_latency_histogram.labels(operation="update").time():
                objects = self._query(model, eq).all()
                for obj in objects:
                    for name, value in changes.items():
                        setattr(obj, name, value)
                self.db.commit()
                for obj in objects:
                    self.db.refresh(obj)
        except SQLAlchemyError as e:
            raise self._fail("update", e) from e
        return [self._as_row(obj) for obj in objects]

    async def delete(self, table: str, eq: Filters) -> int:
        model = self._model(table)
        try:
            with store_latency_histogram.labels(operation="delete").time():
                removed = self._query(model, eq).delete(synchronize_session=False)
                self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete", e) from e
        return removed
