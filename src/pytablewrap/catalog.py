"""
Schema catalog: discovers the structure of a single table.
"""

import logging

import sqlalchemy as sa
from sqlalchemy import Engine
from sqlalchemy.engine import Inspector

from .exceptions import SchemaError, TableNotFoundError
from .models import ColumnInfo, TableInfo
from .typecodes import decode_type, flags_for, type_code_for

logger = logging.getLogger(__name__)

COLUMN_PROPERTIES = (
    "name",
    "type",
    "type_code",
    "flags",
    "nullable",
    "not_null",
    "default",
    "primary_key",
)


class SchemaCatalog:
    """
    Reads column and primary-key metadata for one table through the SQLAlchemy inspector.

    The description is loaded once and cached; call ``refresh()`` to pick up
    schema changes made after the first load.
    """

    def __init__(self, engine: Engine, table_name: str, schema: str | None = None):
        self.engine = engine
        self.table_name = table_name
        self.schema = schema
        self._info: TableInfo | None = None
        self._table: sa.Table | None = None

    @property
    def info(self) -> TableInfo:
        if self._info is None:
            self.refresh()
        return self._info

    @property
    def table(self) -> sa.Table:
        """SQLAlchemy Core table typed from the cached column descriptors."""
        if self._table is None:
            self._table = self._build_table(self.info)
        return self._table

    def refresh(self) -> TableInfo:
        """
        Reload the table description from the database.

        Returns:
            The freshly loaded TableInfo

        Raises:
            TableNotFoundError: If the table doesn't exist
            SchemaError: If the table doesn't have exactly one primary key column
        """
        inspector = sa.inspect(self.engine)
        primary_key = self._primary_key_from(inspector)
        columns = self._columns_from(inspector, primary_key)

        self._info = TableInfo(name=self.table_name, primary_key=primary_key, columns=columns)
        self._table = None
        logger.debug("Loaded schema for %s: %d columns, primary key %s", self.table_name, len(columns), primary_key)
        return self._info

    def discover_primary_key(self) -> str:
        """
        Get the name of the table's primary key column.

        Raises:
            TableNotFoundError: If the table doesn't exist
            SchemaError: If no column, or more than one column, is the primary key
        """
        return self._primary_key_from(sa.inspect(self.engine))

    def describe_columns(self) -> list[ColumnInfo]:
        """Get a fresh descriptor for every column, in schema order."""
        inspector = sa.inspect(self.engine)
        return self._columns_from(inspector, self._primary_key_from(inspector))

    def list_columns(self, prop: str) -> list:
        """
        Get one property of every column, in schema order.

        Args:
            prop: One of COLUMN_PROPERTIES. "type" is decoded into its semantic
                category, "type_code" gives the raw code.

        Returns:
            List with one value per column

        Raises:
            ValueError: If prop isn't a known column property
            UnsupportedTypeError: If prop is "type" and a column has an unknown type code
        """
        if prop not in COLUMN_PROPERTIES:
            raise ValueError(f"Unknown column property '{prop}'. Expected one of: {', '.join(COLUMN_PROPERTIES)}")

        if prop == "type":
            return [decode_type(col.type_code, col.name) for col in self.info.columns]
        return [getattr(col, prop) for col in self.info.columns]

    def _primary_key_from(self, inspector: Inspector) -> str:
        if not inspector.has_table(self.table_name, schema=self.schema):
            raise TableNotFoundError(f"Table '{self.table_name}' not found")

        constraint = inspector.get_pk_constraint(self.table_name, schema=self.schema)
        key_columns = constraint.get("constrained_columns") or []
        if not key_columns:
            raise SchemaError(f"Table '{self.table_name}' has no primary key column")
        if len(key_columns) > 1:
            raise SchemaError(
                f"Table '{self.table_name}' has a composite primary key ({', '.join(key_columns)}); "
                "exactly one primary key column is required"
            )
        return key_columns[0]

    def _columns_from(self, inspector: Inspector, primary_key: str) -> list[ColumnInfo]:
        try:
            reflected = inspector.get_columns(self.table_name, schema=self.schema)
        except sa.exc.NoSuchTableError:
            raise TableNotFoundError(f"Table '{self.table_name}' not found") from None

        if not reflected:
            raise SchemaError(f"Table '{self.table_name}' has no columns")

        rowid_key = self.engine.dialect.name == "sqlite" and self._is_sqlite_rowid_alias(primary_key)

        columns = []
        for col in reflected:
            sa_type = col["type"]
            is_pk = col["name"] == primary_key
            nullable = bool(col.get("nullable", True))
            default = _normalize_default(col.get("default"))
            autoincrement = self._is_autoincrement(col, is_pk and rowid_key)

            columns.append(
                ColumnInfo(
                    name=col["name"],
                    type_code=type_code_for(sa_type),
                    flags=flags_for(
                        sa_type,
                        nullable=nullable,
                        primary_key=is_pk,
                        autoincrement=autoincrement,
                        has_default=default is not None or autoincrement,
                    ),
                    nullable=nullable,
                    default=default,
                    primary_key=is_pk,
                    autoincrement=autoincrement,
                    sa_type=sa_type,
                )
            )
        return columns

    def _is_autoincrement(self, col: dict, rowid_key: bool) -> bool:
        if col.get("autoincrement") is True or col.get("identity"):
            return True
        return rowid_key

    def _is_sqlite_rowid_alias(self, primary_key: str) -> bool:
        # Only a key declared exactly INTEGER aliases the rowid; INT, BIGINT etc. don't
        preparer = self.engine.dialect.identifier_preparer
        prefix = f"{preparer.quote(self.schema)}." if self.schema else ""
        with self.engine.connect() as conn:
            rows = conn.exec_driver_sql(f"PRAGMA {prefix}table_info({preparer.quote(self.table_name)})").fetchall()
            table_sql = conn.execute(
                sa.text(f"SELECT sql FROM {prefix}sqlite_master WHERE type = 'table' AND name = :name"),
                {"name": self.table_name},
            ).scalar()

        declared = next((row[2] for row in rows if row[1] == primary_key), "") or ""
        without_rowid = "WITHOUT ROWID" in " ".join((table_sql or "").upper().split())
        return declared.strip().upper() == "INTEGER" and not without_rowid

    def _build_table(self, info: TableInfo) -> sa.Table:
        columns = [
            sa.Column(col.name, col.sa_type or sa.types.NullType(), primary_key=col.primary_key)
            for col in info.columns
        ]
        return sa.Table(info.name, sa.MetaData(), *columns, schema=self.schema)


def _normalize_default(default) -> str | None:
    # An explicit DEFAULT NULL is the same as having no default
    if default is None:
        return None
    text = str(default).strip()
    if text.upper() == "NULL":
        return None
    return text
