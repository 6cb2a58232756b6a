"""
Configuration for table accessors.
"""

import os
from dataclasses import dataclass

ENV_PREFIX = "TABLEWRAP_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean, got '{raw}'")


@dataclass
class AccessorSettings:
    """
    Behaviour switches for a TableWrapper.

    Attributes:
        refresh_on_write: Reload the schema before validating every create/update.
            Off by default: the schema is cached at construction and reloaded only
            through ``refresh_schema()``, so a schema change made by someone else is
            not seen until then.
        verify_updates: Re-read updated columns and report whether they match.
            When off, updates return True as soon as the statement succeeds.
        verify_in_transaction: Run an update and its verification in one transaction,
            so no other writer can change the row in between.
    """

    refresh_on_write: bool = False
    verify_updates: bool = True
    verify_in_transaction: bool = True

    @classmethod
    def from_env(cls) -> "AccessorSettings":
        """
        Build settings from TABLEWRAP_* environment variables.

        Raises:
            ValueError: If a variable is set but isn't a recognizable boolean
        """
        defaults = cls()
        return cls(
            refresh_on_write=_env_bool("REFRESH_ON_WRITE", defaults.refresh_on_write),
            verify_updates=_env_bool("VERIFY_UPDATES", defaults.verify_updates),
            verify_in_transaction=_env_bool("VERIFY_IN_TRANSACTION", defaults.verify_in_transaction),
        )
