"""
Data models for table schema descriptions.
"""

from dataclasses import dataclass, field

from sqlalchemy.types import TypeEngine

from .typecodes import decode_type


@dataclass
class ColumnInfo:
    """Information about a table column."""

    name: str
    type_code: int | None
    flags: int = 0
    nullable: bool = True
    default: str | None = None
    primary_key: bool = False
    autoincrement: bool = False
    sa_type: TypeEngine | None = field(default=None, repr=False, compare=False)

    @property
    def not_null(self) -> bool:
        return not self.nullable

    @property
    def has_default(self) -> bool:
        """True if the database supplies a value when none is given on insert."""
        return self.default is not None or self.autoincrement

    @property
    def required(self) -> bool:
        """True if every insert must give this column an explicit value."""
        return self.not_null and not self.has_default

    @property
    def type(self) -> str:
        """Semantic type category, see ``decode_type``."""
        return decode_type(self.type_code, self.name)


@dataclass
class TableInfo:
    """Information about a table and its primary key."""

    name: str
    primary_key: str
    columns: list[ColumnInfo]

    @property
    def column_names(self) -> list[str]:
        return [col.name for col in self.columns]

    def get_column(self, name: str) -> ColumnInfo | None:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    @property
    def not_null_columns(self) -> list[ColumnInfo]:
        return [col for col in self.columns if col.not_null]

    @property
    def required_columns(self) -> list[ColumnInfo]:
        return [col for col in self.columns if col.required]
