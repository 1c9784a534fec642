"""
Database initialization and management for gantz application.

This module provides functions to initialize DuckDB databases and manage
database connections.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import duckdb

from .schema import REQUIRED_COLUMNS, get_schema_statements

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Manages DuckDB database connections and initialization.
    """

    def __init__(self, db_path: str):
        """
        Initialize DatabaseManager.

        Args:
            db_path: Path to the DuckDB database file
        """
        self.db_path = db_path
        self._connection: duckdb.DuckDBPyConnection | None = None

    def connect(self) -> duckdb.DuckDBPyConnection:
        """
        Get or create a database connection.

        Returns:
            DuckDB connection object
        """
        if self._connection is None:
            self._connection = duckdb.connect(self.db_path)
            logger.debug(f"Connected to DuckDB database at {self.db_path}")

        return self._connection

    def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.debug("Closed DuckDB database connection")

    def initialize_schema(self) -> None:
        """
        Create all tables and indexes if they don't exist.

        Raises:
            duckdb.Error: If database operations fail
        """
        conn = self.connect()

        try:
            for statement in get_schema_statements():
                logger.debug(f"Executing SQL: {statement}")
                conn.execute(statement)

            logger.info("Database schema initialized successfully")

        except duckdb.Error as e:
            logger.error(f"Failed to initialize database schema: {e}")
            raise

    def verify_schema(self) -> bool:
        """
        Verify that every collection exists with its required columns.

        Returns:
            True if schema is valid, False otherwise
        """
        conn = self.connect()

        try:
            for table, required in REQUIRED_COLUMNS.items():
                columns = conn.execute(
                    "SELECT column_name FROM information_schema.columns WHERE table_name = ?", [table]
                ).fetchall()
                column_names = {col[0] for col in columns}

                if not column_names:
                    logger.warning(f"Table {table} does not exist")
                    return False

                missing_columns = required - column_names
                if missing_columns:
                    logger.warning(f"Missing columns in {table}: {missing_columns}")
                    return False

            return True

        except duckdb.Error as e:
            logger.error(f"Schema verification failed: {e}")
            return False

    def execute_query(self, query: str, parameters: list | tuple | None = None) -> list[tuple]:
        """
        Execute a SQL query and return results.

        Args:
            query: SQL query string
            parameters: Optional query parameters

        Returns:
            List of result tuples

        Raises:
            duckdb.Error: If query execution fails
        """
        conn = self.connect()

        try:
            if parameters:
                result = conn.execute(query, parameters)
            else:
                result = conn.execute(query)

            return result.fetchall()

        except duckdb.Error as e:
            logger.error(f"Query execution failed: {query}, error: {e}")
            raise

    @contextmanager
    def transaction(self) -> Iterator["DatabaseManager"]:
        """Run several statements atomically; rolls back on any error."""
        conn = self.connect()
        conn.execute("BEGIN TRANSACTION")
        try:
            yield self
        except BaseException:
            conn.execute("ROLLBACK")
            raise
        else:
            conn.execute("COMMIT")

    def __enter__(self) -> "DatabaseManager":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()


def create_database(db_path: str) -> DatabaseManager:
    """
    Create and initialize a new DuckDB database.

    Args:
        db_path: Path where the database file should be created

    Returns:
        Initialized DatabaseManager instance

    Raises:
        RuntimeError: If database creation fails
    """
    try:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        with DatabaseManager(db_path) as db_manager:
            db_manager.initialize_schema()

            if not db_manager.verify_schema():
                raise RuntimeError("Schema verification failed after creation")

        logger.info(f"Successfully created database at {db_path}")
        return db_manager

    except Exception as e:
        logger.error(f"Failed to create database at {db_path}: {e}")
        raise RuntimeError(f"Database creation failed: {e}") from e


def get_database_manager(db_path: str, create_if_missing: bool = True) -> DatabaseManager:
    """
    Get a DatabaseManager instance, optionally creating the database if it doesn't exist.

    Args:
        db_path: Path to the database file
        create_if_missing: Whether to create the database if it doesn't exist

    Returns:
        DatabaseManager instance

    Raises:
        FileNotFoundError: If database doesn't exist and create_if_missing is False
    """
    if not Path(db_path).exists():
        if create_if_missing:
            return create_database(db_path)
        raise FileNotFoundError(f"Database file not found: {db_path}")

    with DatabaseManager(db_path) as db_manager:
        if not db_manager.verify_schema():
            logger.warning("Schema verification failed, reinitializing...")
            db_manager.initialize_schema()

    return db_manager
