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
SQLite implementation of the author and entry repositories.

Design principles:
- Follows the same patterns as SqliteFeedRepository
- Entries are written with epoch dates and a resolved author_id, and read
  back through the Hydrator so callers never see either
"""

import sqlite3
from typing import List, Optional, Union

from structlog import get_logger

from ..models.feed import Author, Entry
from ..models.result import StorageErrorKind, StorageResult
from .connection import Database
from .entry_repository import AuthorRepository, EntryRepository
from .hydrator import Hydrator
from .resolver import RelationResolver, author_params, entry_params
from .sqlite_base import SqliteRepository

logger = get_logger(__name__)


class SqliteAuthorRepository(SqliteRepository, AuthorRepository):
    """SQLite-based author repository."""

    table = "author"

    def add(self, author: Author) -> StorageResult:
        return self._write("add", author_params(author), insert=True)

    def get_all(self) -> Optional[List[Author]]:
        rows = self._fetch_all("get_all")
        if rows is None:
            return None
        return [self._row_to_author(row) for row in rows]

    def get_by_name(self, name: str) -> Optional[Author]:
        row = self._fetch_one("get_by_name", {"name": name})
        return self._row_to_author(row) if row else None

    def get_by_id(self, author_id: int) -> Optional[Author]:
        row = self._fetch_one("get_by_id", {"id": author_id})
        return self._row_to_author(row) if row else None

    def exists(self, name: str) -> bool:
        author = self.get_by_name(name)
        return author is not None and bool(author.name)

    def delete(self, author: Union[Author, str]) -> StorageResult:
        if isinstance(author, str):
            return self._write("delete_by_name", {"name": author}, require_rows=True)
        if author.id:
            return self._write("delete_by_id", {"id": author.id}, require_rows=True)
        return self._write("delete_by_name", {"name": author.name}, require_rows=True)

    def _row_to_author(self, row: sqlite3.Row) -> Author:
        """Convert database row to Author model."""
        return Author(id=row["id"], name=row["name"], url=row["url"], email=row["email"])


class SqliteEntryRepository(SqliteRepository, EntryRepository):
    """SQLite-based entry repository."""

    table = "entry"

    def __init__(
        self,
        db: Database,
        resolver: Optional[RelationResolver] = None,
        hydrator: Optional[Hydrator] = None,
    ):
        """
        Args:
            db: Connection manager
            resolver: Resolves entry authors to ids (default: built on db)
            hydrator: Entry hydrator (default: looks authors up through db)
        """
        super().__init__(db)
        self.resolver = resolver or RelationResolver(db)
        self.hydrator = hydrator or Hydrator(SqliteAuthorRepository(db).get_by_id)

    def add(self, entry: Entry) -> StorageResult:
        # Validate dates before the author is created as a side effect
        try:
            params = entry_params(entry)
        except ValueError as e:
            return StorageResult.failure(StorageErrorKind.INVALID_DATA, str(e))

        params["author_id"] = self.resolver.resolve_author_id(entry.author) or None

        result = self._write("add", params, insert=True)
        if result:
            logger.debug("Added entry", entry_id=entry.id, row_id=result.row_id)
        return result

    def get_all(self) -> Optional[List[Entry]]:
        rows = self._fetch_all("get_all")
        if rows is None:
            return None
        return [self.hydrator.hydrate(row) for row in rows]

    def get_by_id(self, row_id: int) -> Optional[Entry]:
        row = self._fetch_one("get_by_id", {"row_id": row_id})
        return self.hydrator.hydrate(row) if row else None

    def get_by_atom_id(self, entry_id: str) -> Optional[Entry]:
        row = self._fetch_one("get_by_atom_id", {"id": entry_id})
        return self.hydrator.hydrate(row) if row else None

    def exists(self, entry_id: str) -> bool:
        entry = self.get_by_atom_id(entry_id)
        return entry is not None and bool(entry.id)

    def delete(self, entry: Union[Entry, str]) -> StorageResult:
        if isinstance(entry, str):
            return self._write("delete_by_atom_id", {"id": entry}, require_rows=True)
        if entry.row_id:
            return self._write("delete_by_id", {"row_id": entry.row_id}, require_rows=True)
        return self._write("delete_by_atom_id", {"id": entry.id}, require_rows=True)
