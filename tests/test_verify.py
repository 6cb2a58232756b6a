"""
Tests for post-write verification.
"""

from pytablewrap import verify_changes


class TestVerifyChanges:
    """Test verify_changes against a stubbed reader."""

    def _reader(self, row, calls):
        def read_fields(columns):
            calls.append(columns)
            return {name: row[name] for name in columns}

        return read_fields

    def test_matching_values(self):
        """Test matching values verify."""
        calls = []
        row = {"name": "Ada", "bio": None, "age": 36}
        assert verify_changes(self._reader(row, calls), {"name": "Ada", "bio": None}) is True
        assert calls == [["name", "bio"]]

    def test_mismatching_values(self):
        """Test a differing value fails verification."""
        row = {"name": "Ada", "age": 5}
        assert verify_changes(self._reader(row, []), {"age": "5"}) is False

    def test_state_not_causation(self):
        """Test a row that already held the values verifies even if nothing was written."""
        row = {"name": "Ada"}
        assert verify_changes(self._reader(row, []), {"name": "Ada"}) is True
