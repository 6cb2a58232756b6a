"""
Exception classes for pytablewrap table operations.
"""


class TableWrapperError(Exception):
    """Base exception for table accessor operations."""

    pass


class SchemaError(TableWrapperError):
    """Exception raised when the table schema cannot be used (e.g. no primary key)."""

    pass


class TableNotFoundError(SchemaError):
    """Exception raised when a requested table is not found."""

    pass


class UnsupportedTypeError(SchemaError):
    """Exception raised when a column type code has no known category."""

    def __init__(self, type_code, column: str | None = None):
        self.type_code = type_code
        self.column = column
        where = f" for column '{column}'" if column else ""
        super().__init__(f"Unsupported column type code {type_code!r}{where}")


class ValidationError(TableWrapperError):
    """Base exception for caller data rejected before any statement is issued."""

    pass


class UnknownColumnError(ValidationError):
    """Exception raised when a column name is not part of the table."""

    def __init__(self, column: str, table: str):
        self.column = column
        self.table = table
        super().__init__(f"Column '{column}' not found in table '{table}'")


class MissingRequiredValueError(ValidationError):
    """Exception raised when not-null columns without a default are left out of a create."""

    def __init__(self, columns: list[str], table: str):
        self.columns = list(columns)
        self.table = table
        super().__init__(f"Table '{table}' requires values for: {', '.join(self.columns)}")


class EmptyValueError(ValidationError):
    """Exception raised when an update would leave a required column empty."""

    def __init__(self, column: str, table: str):
        self.column = column
        self.table = table
        super().__init__(f"Column '{column}' in table '{table}' can't be null or empty")


class NotFoundError(TableWrapperError):
    """Exception raised when no row has the requested primary key."""

    def __init__(self, table: str, key):
        self.table = table
        self.key = key
        super().__init__(f"No row in table '{table}' with primary key {key!r}")


class StorageError(TableWrapperError):
    """Exception raised when the database reports a fault; carries the driver's error code."""

    def __init__(self, message: str, code=None):
        self.code = code
        suffix = f" (code {code})" if code is not None else ""
        super().__init__(f"{message}{suffix}")
