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
Statement execution shared by the SQLite repositories.

All sqlite3 errors are caught here, at the statement boundary:
- writes return a StorageResult (IntegrityError -> CONSTRAINT_VIOLATION,
  anything else -> DATABASE_ERROR), logged at debug level
- reads return None and log the failure at error level

Startup errors (ConfigurationError, SchemaError) and unknown query names
are not caught; they come from ensure_ready()/prepare() and propagate.
A Database that has been closed raises sqlite3.ProgrammingError from
prepare(), so it is reported like any other statement failure.
"""

import sqlite3
from typing import Any, List, Mapping, Optional

from structlog import get_logger

from ..models.result import StorageErrorKind, StorageResult
from .connection import Database

logger = get_logger(__name__)


def execute_write(
    db: Database,
    table: str,
    operation: str,
    params: Mapping[str, Any],
    insert: bool = False,
    require_rows: bool = False,
) -> StorageResult:
    """
    Run a mutating statement.

    Args:
        db: Connection manager
        table: Schema registry table name
        operation: Named query
        params: Named parameters
        insert: Report the new row id in the result
        require_rows: Treat zero affected rows as NOT_FOUND

    Returns:
        StorageResult describing the outcome
    """
    try:
        cursor = db.prepare(table, operation).execute(params)
    except sqlite3.IntegrityError as e:
        logger.debug("Constraint violation", table=table, operation=operation, error=str(e))
        return StorageResult.failure(StorageErrorKind.CONSTRAINT_VIOLATION, str(e))
    except sqlite3.Error as e:
        logger.debug("Statement failed", table=table, operation=operation, error=str(e))
        return StorageResult.failure(StorageErrorKind.DATABASE_ERROR, str(e))

    rowcount = max(cursor.rowcount, 0)
    if require_rows and rowcount == 0:
        return StorageResult.failure(StorageErrorKind.NOT_FOUND, f"No {table} row matched")

    row_id = cursor.lastrowid if insert and rowcount else None
    return StorageResult.success(row_id=row_id, rowcount=rowcount)


def fetch_one(
    db: Database, table: str, operation: str, params: Optional[Mapping[str, Any]] = None
) -> Optional[sqlite3.Row]:
    """Run a query and return its first row, or None if absent or on error."""
    try:
        return db.prepare(table, operation).execute(params).fetchone()
    except sqlite3.Error as e:
        logger.error("Query failed", table=table, operation=operation, error=str(e))
        return None


def fetch_all(
    db: Database, table: str, operation: str, params: Optional[Mapping[str, Any]] = None
) -> Optional[List[sqlite3.Row]]:
    """Run a query and return all rows; None signals a database error."""
    try:
        return db.prepare(table, operation).execute(params).fetchall()
    except sqlite3.Error as e:
        logger.error("Query failed", table=table, operation=operation, error=str(e))
        return None


class SqliteRepository:
    """Base for repositories bound to one schema registry table."""

    table: str = ""

    def __init__(self, db: Database):
        self.db = db

    def _write(self, operation: str, params: Mapping[str, Any], **kwargs) -> StorageResult:
        return execute_write(self.db, self.table, operation, params, **kwargs)

    def _fetch_one(self, operation: str, params: Optional[Mapping[str, Any]] = None) -> Optional[sqlite3.Row]:
        return fetch_one(self.db, self.table, operation, params)

    def _fetch_all(
        self, operation: str, params: Optional[Mapping[str, Any]] = None
    ) -> Optional[List[sqlite3.Row]]:
        return fetch_all(self.db, self.table, operation, params)
