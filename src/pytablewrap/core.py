"""
Core TableWrapper class for schema-validated CRUD on a single table.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from contextlib import contextmanager
from functools import partial
from typing import Any

import pandas as pd
import sqlalchemy as sa
from sqlalchemy import Connection, Engine
from sqlalchemy.exc import StatementError
from sqlalchemy.sql import Select

from .catalog import SchemaCatalog
from .config import AccessorSettings
from .exceptions import (
    EmptyValueError,
    MissingRequiredValueError,
    NotFoundError,
    StorageError,
    UnknownColumnError,
)
from .models import TableInfo
from .verify import verify_changes

logger = logging.getLogger(__name__)


class TableWrapper:
    """
    Generic accessor for one table with a single primary key column.

    The table's columns, types, nullability and defaults are discovered when the
    accessor is created. Every write is validated against that description before
    a statement is sent, so a rejected call never touches the table.

    The engine is borrowed: the accessor never disposes it, and the caller must
    keep it usable for as long as the accessor is in use.
    """

    def __init__(
        self,
        engine: Engine,
        table_name: str,
        settings: AccessorSettings | None = None,
        schema: str | None = None,
    ):
        """
        Initialize the accessor and load the table schema.

        Args:
            engine: SQLAlchemy engine for the database holding the table
            table_name: Name of the table
            settings: Behaviour switches (defaults to AccessorSettings())
            schema: Database schema the table lives in, if not the default one

        Raises:
            TableNotFoundError: If the table doesn't exist
            SchemaError: If the table doesn't have exactly one primary key column
        """
        self.engine = engine
        self.table_name = table_name
        self.settings = settings or AccessorSettings()
        self._catalog = SchemaCatalog(engine, table_name, schema=schema)

        info = self._catalog.refresh()
        logger.info("Opened table %s (primary key %s, %d columns)", table_name, info.primary_key, len(info.columns))

    def __repr__(self) -> str:
        return f"TableWrapper(table={self.table_name!r}, primary_key={self.primary_key!r})"

    @property
    def schema(self) -> TableInfo:
        """Cached description of the table."""
        return self._catalog.info

    @property
    def primary_key(self) -> str:
        return self._catalog.info.primary_key

    @property
    def catalog(self) -> SchemaCatalog:
        return self._catalog

    def column_names(self) -> list[str]:
        """Get the names of all columns, in schema order."""
        return self._catalog.list_columns("name")

    def column_types(self) -> list[str]:
        """
        Get the semantic type category of every column, in schema order.

        Raises:
            UnsupportedTypeError: If a column's type has no known category
        """
        return self._catalog.list_columns("type")

    def refresh_schema(self) -> TableInfo:
        """Reload the cached schema, e.g. after the table was altered."""
        info = self._catalog.refresh()
        logger.info("Refreshed schema for table %s", self.table_name)
        return info

    def create(self, values: Mapping[str, Any]) -> Any:
        """
        Insert a new row.

        Args:
            values: Column name -> value for every column being set

        Returns:
            The primary key of the new row

        Raises:
            UnknownColumnError: If a key isn't a column of the table
            MissingRequiredValueError: If a NOT NULL column without a default has no value
            StorageError: If the database rejects the insert
        """
        info = self._schema_for_write()
        self._check_columns(info, values.keys())

        missing = [col.name for col in info.required_columns if values.get(col.name) is None]
        if missing:
            raise MissingRequiredValueError(missing, self.table_name)

        stmt = sa.insert(self._catalog.table).values(dict(values))
        with self._storage_errors("create entry"):
            with self.engine.begin() as conn:
                result = conn.execute(stmt)

        if info.primary_key in values:
            key = values[info.primary_key]
        else:
            inserted = result.inserted_primary_key
            key = inserted[0] if inserted else None
        logger.debug("Created row %r in %s", key, self.table_name)
        return key

    def read_fields(self, key: Any, columns: Sequence[str]) -> dict[str, Any]:
        """
        Read several columns of one row.

        Args:
            key: Primary key value of the row
            columns: Names of the columns to read

        Returns:
            Dictionary mapping each requested column to its value

        Raises:
            ValueError: If no columns are given
            UnknownColumnError: If a name isn't a column of the table
            NotFoundError: If no row has this primary key
            StorageError: If the query fails
        """
        columns = list(columns)
        if not columns:
            raise ValueError("At least one column must be requested")
        self._check_columns(self.schema, columns)

        with self._storage_errors("read entry"):
            with self.engine.connect() as conn:
                return self._read_fields(conn, key, columns)

    def read_field(self, key: Any, column: str) -> Any:
        """Read a single column of one row."""
        return self.read_fields(key, [column])[column]

    def update(self, key: Any, new_values: Mapping[str, Any]) -> bool:
        """
        Update columns of one row and check that the new values were stored.

        Args:
            key: Primary key value of the row
            new_values: Column name -> new value

        Returns:
            True if re-reading the row gives back ``new_values`` (always True when
            verification is turned off in the settings)

        Raises:
            ValueError: If new_values is empty
            UnknownColumnError: If a key isn't a column of the table
            EmptyValueError: If a NOT NULL column without a default would be set empty
            NotFoundError: If no row has this primary key
            StorageError: If the database rejects the update
        """
        if not new_values:
            raise ValueError("At least one column must be updated")

        info = self._schema_for_write()
        self._check_columns(info, new_values.keys())
        for name, value in new_values.items():
            if info.get_column(name).required and _is_empty(value):
                raise EmptyValueError(name, self.table_name)

        table = self._catalog.table
        stmt = sa.update(table).where(table.c[info.primary_key] == key).values(dict(new_values))
        # The row may have been re-keyed by this very update
        verify_key = new_values.get(info.primary_key, key)

        with self._storage_errors("update entry"):
            with self.engine.begin() as conn:
                result = conn.execute(stmt)
                if result.rowcount == 0:
                    raise NotFoundError(self.table_name, key)
                logger.debug("Updated %s in row %r of %s", list(new_values), key, self.table_name)

                if not self.settings.verify_updates:
                    return True
                if self.settings.verify_in_transaction:
                    verified = verify_changes(partial(self._read_fields, conn, verify_key), new_values)

            if not self.settings.verify_in_transaction:
                with self.engine.connect() as conn:
                    verified = verify_changes(partial(self._read_fields, conn, verify_key), new_values)

        if not verified:
            logger.warning("Values written to row %r of %s did not verify", key, self.table_name)
        return verified

    def update_field(self, key: Any, column: str, new_value: Any) -> bool:
        """Update a single column of one row; see ``update``."""
        return self.update(key, {column: new_value})

    def delete(self, key: Any) -> bool:
        """
        Physically delete one row.

        Prefer marking rows inactive through a status column where the data should
        be kept; this method removes the row for good.

        Returns:
            True if a row was deleted, False if no row had this primary key

        Raises:
            StorageError: If the database rejects the delete
        """
        table = self._catalog.table
        stmt = sa.delete(table).where(table.c[self.primary_key] == key)
        with self._storage_errors("delete entry"):
            with self.engine.begin() as conn:
                result = conn.execute(stmt)

        deleted = result.rowcount > 0
        logger.debug("Delete of row %r in %s removed %d row(s)", key, self.table_name, result.rowcount)
        return deleted

    def to_dataframe(
        self,
        columns: list[str] | None = None,
        where: Mapping[str, Any] | None = None,
        limit: int | None = None,
    ) -> pd.DataFrame:
        """
        Read rows of the table into a pandas DataFrame, ordered by primary key.

        Args:
            columns: List of column names to select (None for all columns)
            where: Column -> value equality filters, combined with AND
            limit: Maximum number of rows to return

        Returns:
            pandas DataFrame with query results

        Raises:
            UnknownColumnError: If a column or filter name isn't a column of the table
            StorageError: If the query fails
        """
        table = self._catalog.table
        if columns:
            self._check_columns(self.schema, columns)
            stmt = sa.select(*[table.c[name] for name in columns])
        else:
            stmt = sa.select(table)

        stmt = self._apply_where(stmt, where).order_by(table.c[self.primary_key])
        if limit is not None:
            stmt = stmt.limit(limit)

        with self._storage_errors("query table"):
            with self.engine.connect() as conn:
                return pd.read_sql(stmt, conn)

    def count(self, where: Mapping[str, Any] | None = None) -> int:
        """Get the number of rows, optionally only those matching ``where``."""
        stmt = self._apply_where(sa.select(sa.func.count()).select_from(self._catalog.table), where)
        with self._storage_errors("count rows"):
            with self.engine.connect() as conn:
                return conn.execute(stmt).scalar_one()

    def _read_fields(self, conn: Connection, key: Any, columns: list[str]) -> dict[str, Any]:
        table = self._catalog.table
        stmt = sa.select(*[table.c[name] for name in columns]).where(table.c[self.primary_key] == key)
        row = conn.execute(stmt).first()
        if row is None:
            raise NotFoundError(self.table_name, key)
        return dict(zip(columns, row))

    def _apply_where(self, stmt: Select, where: Mapping[str, Any] | None) -> Select:
        if not where:
            return stmt
        self._check_columns(self.schema, where.keys())
        table = self._catalog.table
        for name, value in where.items():
            stmt = stmt.where(table.c[name] == value)
        return stmt

    def _schema_for_write(self) -> TableInfo:
        if self.settings.refresh_on_write:
            return self._catalog.refresh()
        return self._catalog.info

    def _check_columns(self, info: TableInfo, names: Iterable[str]) -> None:
        known = set(info.column_names)
        for name in names:
            if name not in known:
                raise UnknownColumnError(name, self.table_name)

    @contextmanager
    def _storage_errors(self, action: str):
        try:
            yield
        except StatementError as e:
            code = _driver_error_code(e)
            logger.error("Failed to %s in %s: %s", action, self.table_name, e.orig)
            raise StorageError(f"Failed to {action} in table '{self.table_name}': {e.orig}", code=code) from e


def create_accessor(
    bind: Engine | str,
    table_name: str,
    settings: AccessorSettings | None = None,
    schema: str | None = None,
) -> TableWrapper:
    """
    Create a TableWrapper for a table.

    Args:
        bind: SQLAlchemy engine, or a database URL to create one from
        table_name: Name of the table
        settings: Behaviour switches
        schema: Database schema the table lives in

    Returns:
        A TableWrapper for the table

    Raises:
        TableNotFoundError: If the table doesn't exist
        SchemaError: If the table doesn't have exactly one primary key column
    """
    engine = sa.create_engine(bind) if isinstance(bind, str) else bind
    return TableWrapper(engine, table_name, settings=settings, schema=schema)


def _is_empty(value: Any) -> bool:
    # 0 and False are real values, unlike None and empty strings/containers
    if value is None:
        return True
    if isinstance(value, (str, bytes, bytearray, list, tuple, dict, set)):
        return len(value) == 0
    return False


def _driver_error_code(error: StatementError):
    orig = error.orig
    for attr in ("sqlite_errorcode", "pgcode", "errno"):
        code = getattr(orig, attr, None)
        if code is not None:
            return code
    args = getattr(orig, "args", ())
    if args and isinstance(args[0], int):
        return args[0]
    return None
