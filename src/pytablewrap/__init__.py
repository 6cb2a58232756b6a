"""
pytablewrap - schema-validated CRUD for single relational tables

This library discovers a table's columns, types, nullability and defaults through
SQLAlchemy and exposes create/read/update/delete operations that validate caller
data against that schema before any statement is sent.
"""

from .catalog import SchemaCatalog
from .config import AccessorSettings
from .core import TableWrapper, create_accessor
from .exceptions import (
    EmptyValueError,
    MissingRequiredValueError,
    NotFoundError,
    SchemaError,
    StorageError,
    TableNotFoundError,
    TableWrapperError,
    UnknownColumnError,
    UnsupportedTypeError,
    ValidationError,
)
from .models import ColumnInfo, TableInfo
from .typecodes import ColumnFlag, FieldType, decode_flags, decode_type, is_not_null
from .verify import verify_changes

__version__ = "0.1.0"
__all__ = [
    "TableWrapper",
    "create_accessor",
    "SchemaCatalog",
    "AccessorSettings",
    "TableWrapperError",
    "SchemaError",
    "TableNotFoundError",
    "UnsupportedTypeError",
    "ValidationError",
    "UnknownColumnError",
    "MissingRequiredValueError",
    "EmptyValueError",
    "NotFoundError",
    "StorageError",
    "ColumnInfo",
    "TableInfo",
    "FieldType",
    "ColumnFlag",
    "decode_type",
    "decode_flags",
    "is_not_null",
    "verify_changes",
]
