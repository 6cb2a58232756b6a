"""
Example usage of the pytablewrap library.
"""

import logging

import sqlalchemy as sa

from pytablewrap import AccessorSettings, TableWrapperError, create_accessor


def main():
    """Demonstrate pytablewrap library usage."""
    logging.basicConfig(level=logging.INFO)

    # In-memory SQLite database with a single pooled connection
    engine = sa.create_engine("sqlite://", poolclass=sa.pool.StaticPool)
    with engine.begin() as conn:
        conn.exec_driver_sql(
            "CREATE TABLE users ("
            "id INTEGER PRIMARY KEY, "
            "name VARCHAR(64) NOT NULL, "
            "email VARCHAR(128) NOT NULL, "
            "bio TEXT)"
        )

    try:
        users = create_accessor(engine, "users", settings=AccessorSettings.from_env())
        print(f"Columns: {users.column_names()}")
        print(f"Types: {users.column_types()}")

        user_id = users.create({"name": "Ada", "email": "ada@example.com"})
        print(f"\nCreated user {user_id}: {users.read_fields(user_id, ['name', 'email'])}")

        verified = users.update(user_id, {"bio": "First programmer"})
        print(f"Update verified: {verified}")
        print(users.to_dataframe())

    except TableWrapperError as e:
        print(f"Error: {e}")
    finally:
        engine.dispose()


if __name__ == "__main__":
    main()
