"""
Column type codes and flag bits, and their decoding into semantic categories.

Raw codes follow the MySQL client protocol (the values a MySQL driver reports
in result-set metadata). Reflected SQLAlchemy types are mapped onto the same
codes so every backend is described with one vocabulary.
"""

from enum import IntEnum, IntFlag

import sqlalchemy as sa
from sqlalchemy.types import TypeEngine

from .exceptions import UnsupportedTypeError


class FieldType(IntEnum):
    """MySQL protocol column type codes."""

    DECIMAL = 0
    TINY = 1
    SHORT = 2
    LONG = 3
    FLOAT = 4
    DOUBLE = 5
    NULL = 6
    TIMESTAMP = 7
    LONGLONG = 8
    INT24 = 9
    DATE = 10
    TIME = 11
    DATETIME = 12
    YEAR = 13
    VARCHAR = 15
    BIT = 16
    JSON = 245
    NEWDECIMAL = 246
    ENUM = 247
    SET = 248
    BLOB = 252
    VAR_STRING = 253
    STRING = 254
    GEOMETRY = 255


class ColumnFlag(IntFlag):
    """MySQL protocol column flag bits."""

    NOT_NULL = 1
    PRI_KEY = 2
    UNIQUE_KEY = 4
    MULTIPLE_KEY = 8
    BLOB = 16
    UNSIGNED = 32
    ZEROFILL = 64
    BINARY = 128
    ENUM = 256
    AUTO_INCREMENT = 512
    TIMESTAMP = 1024
    SET = 2048
    NO_DEFAULT_VALUE = 4096
    ON_UPDATE_NOW = 8192
    PART_KEY = 16384
    NUM = 32768


# The closed set of recognized codes. Text and blob share BLOB, so both are "text".
TYPE_CATEGORIES: dict[int, str] = {
    FieldType.TINY: "boolean",
    FieldType.LONG: "int",
    FieldType.FLOAT: "float",
    FieldType.TIMESTAMP: "timestamp",
    FieldType.DATETIME: "datetime",
    FieldType.BLOB: "text",
    FieldType.VAR_STRING: "varchar",
}


def decode_type(code: int | None, column: str | None = None) -> str:
    """
    Map a raw column type code to its semantic category.

    Args:
        code: Raw type code (see FieldType)
        column: Column name, only used in the error message

    Returns:
        One of boolean, int, float, timestamp, datetime, text, varchar

    Raises:
        UnsupportedTypeError: If the code is not one of the recognized codes
    """
    try:
        return TYPE_CATEGORIES[code]
    except (KeyError, TypeError):
        raise UnsupportedTypeError(code, column) from None


def decode_flags(bitmask: int) -> set[str]:
    """Return the names of the flag bits set in ``bitmask``."""
    return {flag.name for flag in ColumnFlag if bitmask & flag.value}


def is_not_null(bitmask: int) -> bool:
    """Check whether a flag bitmask marks its column as NOT NULL."""
    return any(name.lower() == "not_null" for name in decode_flags(bitmask))


def type_code_for(sa_type: TypeEngine) -> int | None:
    """
    Get the raw type code for a reflected SQLAlchemy column type.

    Returns:
        The matching FieldType value, or None if the type has no equivalent
    """
    # Dialect-specific integer widths reflect as plain Integer subclasses
    visit_name = getattr(sa_type, "__visit_name__", "")
    if visit_name == "TINYINT":
        return FieldType.TINY
    if visit_name == "MEDIUMINT":
        return FieldType.INT24
    if visit_name == "YEAR":
        return FieldType.YEAR
    if visit_name == "BIT":
        return FieldType.BIT

    if isinstance(sa_type, sa.Boolean):
        return FieldType.TINY
    if isinstance(sa_type, sa.TIMESTAMP):
        return FieldType.TIMESTAMP
    if isinstance(sa_type, sa.DateTime):
        return FieldType.DATETIME
    if isinstance(sa_type, sa.Date):
        return FieldType.DATE
    if isinstance(sa_type, sa.Time):
        return FieldType.TIME
    if isinstance(sa_type, sa.SmallInteger):
        return FieldType.SHORT
    if isinstance(sa_type, sa.BigInteger):
        return FieldType.LONGLONG
    if isinstance(sa_type, sa.Integer):
        return FieldType.LONG
    if isinstance(sa_type, sa.Double):
        return FieldType.DOUBLE
    if isinstance(sa_type, sa.Float):
        return FieldType.FLOAT
    if isinstance(sa_type, sa.Numeric):
        return FieldType.NEWDECIMAL
    if isinstance(sa_type, sa.JSON):
        return FieldType.JSON
    if isinstance(sa_type, (sa.Text, sa.LargeBinary)):
        return FieldType.BLOB
    if isinstance(sa_type, (sa.Enum, sa.CHAR)):
        return FieldType.STRING
    if isinstance(sa_type, sa.String):
        return FieldType.VAR_STRING
    return None


def flags_for(
    sa_type: TypeEngine,
    *,
    nullable: bool,
    primary_key: bool,
    autoincrement: bool,
    has_default: bool,
) -> int:
    """Build the flag bitmask describing a reflected column."""
    flags = ColumnFlag(0)
    if not nullable:
        flags |= ColumnFlag.NOT_NULL
    if primary_key:
        flags |= ColumnFlag.PRI_KEY
    if autoincrement:
        flags |= ColumnFlag.AUTO_INCREMENT
    if not nullable and not has_default:
        flags |= ColumnFlag.NO_DEFAULT_VALUE
    if isinstance(sa_type, (sa.Text, sa.LargeBinary)):
        flags |= ColumnFlag.BLOB
    if isinstance(sa_type, sa.LargeBinary):
        flags |= ColumnFlag.BINARY
    if isinstance(sa_type, sa.Enum):
        flags |= ColumnFlag.ENUM
    if isinstance(sa_type, sa.TIMESTAMP):
        flags |= ColumnFlag.TIMESTAMP
    if isinstance(sa_type, (sa.Integer, sa.Numeric)):
        flags |= ColumnFlag.NUM
    if getattr(sa_type, "unsigned", False):
        flags |= ColumnFlag.UNSIGNED
    return int(flags)
