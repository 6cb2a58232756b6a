"""
Tests for error handling scenarios.
"""

import sys

import pytest
import sqlalchemy as sa

from pytablewrap import (
    EmptyValueError,
    MissingRequiredValueError,
    NotFoundError,
    SchemaError,
    StorageError,
    TableNotFoundError,
    TableWrapper,
    TableWrapperError,
    UnknownColumnError,
    UnsupportedTypeError,
    ValidationError,
)


class TestSchemaErrors:
    """Test errors raised while opening a table."""

    def test_table_without_primary_key(self, engine):
        """Test a table with no primary key is rejected."""
        with pytest.raises(SchemaError):
            TableWrapper(engine, "logs")

    def test_composite_primary_key(self, engine):
        """Test a table with a composite primary key is rejected."""
        with pytest.raises(SchemaError, match="composite"):
            TableWrapper(engine, "pairs")

    def test_table_not_found(self, engine):
        """Test error for non-existent table."""
        with pytest.raises(TableNotFoundError):
            TableWrapper(engine, "nonexistent_table")

    def test_unsupported_column_type(self, engine):
        """Test a DATE column has no type category."""
        events = TableWrapper(engine, "events")
        assert events.column_names() == ["id", "happened_on"]
        with pytest.raises(UnsupportedTypeError) as excinfo:
            events.column_types()
        assert excinfo.value.column == "happened_on"


class TestValidationErrors:
    """Test caller data rejected before any statement is sent."""

    def test_create_unknown_column(self, users):
        """Test an unknown column aborts the insert."""
        with pytest.raises(UnknownColumnError) as excinfo:
            users.create({"name": "Grace", "email": "grace@example.com", "shoe_size": 9})
        assert excinfo.value.column == "shoe_size"
        assert users.count() == 1

    def test_create_missing_required_value(self, users):
        """Test NOT NULL columns without defaults must be given."""
        with pytest.raises(MissingRequiredValueError) as excinfo:
            users.create({"name": "Grace"})
        assert excinfo.value.columns == ["email"]
        assert users.count() == 1

    def test_create_none_for_required_value(self, users):
        """Test None doesn't count as a value for a required column."""
        with pytest.raises(MissingRequiredValueError):
            users.create({"name": "Grace", "email": None})

    @pytest.mark.parametrize("table", ["ledger", "tags"])
    def test_create_missing_non_rowid_key(self, engine, table):
        """Test a NOT NULL key that SQLite doesn't generate must be given."""
        accessor = TableWrapper(engine, table)
        with pytest.raises(MissingRequiredValueError) as excinfo:
            accessor.create({accessor.column_names()[1]: "x"})
        assert excinfo.value.columns == ["id"]
        assert accessor.count() == 0

    def test_create_with_non_rowid_key(self, engine):
        """Test a BIGINT key is stored when supplied."""
        ledger = TableWrapper(engine, "ledger")
        assert ledger.create({"id": 10, "name": "x"}) == 10
        assert ledger.read_field(10, "name") == "x"

    def test_update_empty_required_value(self, users):
        """Test required columns can't be emptied and keep their value."""
        with pytest.raises(EmptyValueError):
            users.update(1, {"bio": "kept out", "name": ""})
        with pytest.raises(EmptyValueError):
            users.update_field(1, "name", None)

        assert users.read_fields(1, ["name", "bio"]) == {"name": "Ada", "bio": None}

    def test_update_unknown_column(self, users):
        """Test updating an unknown column."""
        with pytest.raises(UnknownColumnError):
            users.update(1, {"shoe_size": 9})

    def test_update_nothing(self, users):
        """Test an update needs at least one column."""
        with pytest.raises(ValueError):
            users.update(1, {})

    def test_read_unknown_column(self, users):
        """Test reading an unknown column."""
        with pytest.raises(UnknownColumnError):
            users.read_field(1, "shoe_size")

    def test_read_no_columns(self, users):
        """Test a read needs at least one column."""
        with pytest.raises(ValueError):
            users.read_fields(1, [])

    def test_dataframe_unknown_filter(self, users):
        """Test filtering on an unknown column."""
        with pytest.raises(UnknownColumnError):
            users.to_dataframe(where={"shoe_size": 9})

    def test_validation_errors_share_base(self):
        """Test the error hierarchy."""
        assert issubclass(UnknownColumnError, ValidationError)
        assert issubclass(MissingRequiredValueError, ValidationError)
        assert issubclass(EmptyValueError, ValidationError)
        assert issubclass(ValidationError, TableWrapperError)
        assert issubclass(TableNotFoundError, SchemaError)
        assert not issubclass(StorageError, ValidationError)


class TestMissingRows:
    """Test operations on primary keys with no row."""

    def test_read_missing_row(self, users):
        """Test reading a missing row."""
        with pytest.raises(NotFoundError) as excinfo:
            users.read_fields(999, ["name"])
        assert excinfo.value.key == 999

    def test_read_field_missing_row(self, users):
        """Test reading one column of a missing row."""
        with pytest.raises(NotFoundError):
            users.read_field(999, "name")

    def test_update_missing_row(self, users):
        """Test updating a missing row."""
        with pytest.raises(NotFoundError):
            users.update(999, {"name": "Nobody"})


class TestStorageErrors:
    """Test database faults surfaced as StorageError."""

    def test_unique_violation_on_create(self, users):
        """Test a constraint violation keeps the driver error attached."""
        with pytest.raises(StorageError) as excinfo:
            users.create({"name": "Ada again", "email": "ada@example.com"})
        assert isinstance(excinfo.value.__cause__, sa.exc.IntegrityError)
        assert users.count() == 1

    @pytest.mark.skipif(sys.version_info < (3, 11), reason="sqlite3 exposes error codes from Python 3.11")
    def test_native_error_code(self, users, engine):
        """Test StorageError carries the SQLite extended result code."""
        with pytest.raises(StorageError) as excinfo:
            users.create({"name": "Ada again", "email": "ada@example.com"})
        assert excinfo.value.code == 2067  # SQLITE_CONSTRAINT_UNIQUE

        with engine.begin() as conn:
            conn.exec_driver_sql("DROP TABLE users")
        with pytest.raises(StorageError) as excinfo:
            users.read_field(1, "name")
        assert excinfo.value.code == 1  # SQLITE_ERROR

    def test_unique_violation_on_update(self, users):
        """Test a failed update is a StorageError, not a failed verification."""
        key = users.create({"name": "Grace", "email": "grace@example.com"})
        with pytest.raises(StorageError):
            users.update(key, {"email": "ada@example.com"})
        assert users.read_field(key, "email") == "grace@example.com"

    def test_dropped_table(self, users, engine):
        """Test queries against a table dropped after opening."""
        with engine.begin() as conn:
            conn.exec_driver_sql("DROP TABLE users")
        with pytest.raises(StorageError):
            users.read_field(1, "name")
