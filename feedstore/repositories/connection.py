# Copyright 2025 thestill.me
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Connection management and prepared statement cache.

Design principles:
- Exactly one SQLite connection per Database instance (no pool, no retries)
- Schema applied on first connect with CREATE ... IF NOT EXISTS
- Autocommit: every statement is its own transaction
- Prepared statements memoized per (table, operation) for the instance lifetime
"""

import sqlite3
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

from structlog import get_logger

from ..utils.config import Config
from ..utils.exceptions import ConfigurationError, FeedStoreError, SchemaError
from .schema import create_script, get_query

logger = get_logger(__name__)

MEMORY_DATABASE = ":memory:"


def resolve_datasource(datasource: str) -> str:
    """
    Turn a datasource string into a path sqlite3 can open.

    Accepted forms:
        sqlite:///abs/path.db, sqlite:/abs/path.db, sqlite:relative.db,
        sqlite::memory:, :memory:, or a bare file path.

    Raises:
        ConfigurationError: If the datasource is empty or not SQLite
    """
    if not datasource or not datasource.strip():
        raise ConfigurationError("No datasource configured")

    datasource = datasource.strip()
    if datasource == MEMORY_DATABASE:
        return MEMORY_DATABASE

    parsed = urlparse(datasource)

    if parsed.scheme == "":
        # No scheme = file path
        return datasource

    if parsed.scheme == "sqlite":
        path = f"{parsed.netloc}{parsed.path}"
        if not path:
            raise ConfigurationError("Datasource has no database path", datasource=datasource)
        return path

    raise ConfigurationError(
        f"Unsupported datasource scheme '{parsed.scheme}'",
        datasource=datasource,
    )


class PreparedStatement:
    """
    A named query bound to the live connection.

    Each execute() runs on a fresh cursor; the compiled statement itself is
    reused by the driver's statement cache because the SQL text is identical.
    """

    def __init__(self, conn: sqlite3.Connection, key: str, sql: str):
        self._conn = conn
        self.key = key
        self.sql = sql

    def execute(self, params: Optional[Mapping[str, Any]] = None) -> sqlite3.Cursor:
        """
        Run the statement with the given named parameters.

        Raises:
            sqlite3.Error: On any database-level failure
        """
        return self._conn.execute(self.sql, dict(params or {}))

    def __repr__(self) -> str:
        return f"PreparedStatement(key={self.key!r})"


class Database:
    """
    Owner of the single SQLite connection used by all repositories.

    Usage:
        db = Database(config)
        db.connect()  # raises ConfigurationError / SchemaError
        stmt = db.prepare("feed", "get_by_url")
        row = stmt.execute({"url": url}).fetchone()
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize the connection manager. No I/O happens until connect().

        Args:
            config: Storage configuration (defaults to Config())
        """
        self.config = config or Config()
        self._conn: Optional[sqlite3.Connection] = None
        self._closed = False
        self._statements: Dict[str, PreparedStatement] = {}

    @property
    def is_ready(self) -> bool:
        return self._conn is not None

    @property
    def connection(self) -> sqlite3.Connection:
        """The live connection, opening it first if needed."""
        self.ensure_ready()
        return self._conn  # type: ignore[return-value]

    def connect(self) -> "Database":
        """Open the connection and apply the schema. Returns self for chaining."""
        self.ensure_ready()
        return self

    def ensure_ready(self) -> None:
        """
        Open the connection and create missing tables, once.

        Raises:
            ConfigurationError: If no usable datasource is configured
            SchemaError: If the connection cannot be opened or the DDL fails
            sqlite3.ProgrammingError: If the database was closed
        """
        if self._conn is not None:
            return
        if self._closed:
            raise sqlite3.ProgrammingError("Cannot operate on a closed database.")

        path = resolve_datasource(self.config.datasource)
        if path != MEMORY_DATABASE:
            Path(path).parent.mkdir(parents=True, exist_ok=True)

        try:
            conn = sqlite3.connect(
                path,
                timeout=self.config.timeout,
                isolation_level=None,
                cached_statements=self.config.statement_cache_size,
            )
        except sqlite3.Error as e:
            raise SchemaError("Failed to open database", datasource=path, error=str(e)) from e

        conn.row_factory = sqlite3.Row  # Dict-like access

        try:
            # Enable foreign keys (disabled by default in SQLite)
            conn.execute("PRAGMA foreign_keys = ON")
            conn.execute(f"PRAGMA journal_mode = {self.config.journal_mode}")

            # Create schema (idempotent)
            conn.executescript(create_script())
        except sqlite3.Error as e:
            conn.close()
            raise SchemaError("Failed to apply schema", datasource=path, error=str(e)) from e

        self._conn = conn
        logger.info("Database ready", datasource=path)

    def prepare(self, table: str, operation: str) -> PreparedStatement:
        """
        Get the prepared statement for a named query, creating it on first use.

        Raises:
            FeedStoreError: If the table/operation is not in the schema registry
        """
        key = f"{table}:{operation}"
        statement = self._statements.get(key)
        if statement is not None:
            return statement

        try:
            sql = get_query(table, operation)
        except KeyError as e:
            raise FeedStoreError("Unknown query", table=table, operation=operation) from e

        statement = PreparedStatement(self.connection, key, sql)
        self._statements[key] = statement
        logger.debug("Prepared statement", key=key)
        return statement

    @property
    def cached_statements(self) -> int:
        """Number of prepared statements currently cached."""
        return len(self._statements)

    def close(self) -> None:
        """
        Close the connection and drop cached statements.

        The instance is not reopened afterwards: later statements fail with
        sqlite3.ProgrammingError.
        """
        self._closed = True
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        self._statements.clear()
        logger.debug("Database closed", datasource=self.config.datasource)

    def __enter__(self) -> "Database":
        return self.connect()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
