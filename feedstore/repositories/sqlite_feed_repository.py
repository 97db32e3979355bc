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
SQLite implementation of the feed and feed membership repositories.

Design principles:
- Named queries from the schema registry, prepared once per Database
- Pydantic models in, pydantic models out
- Side effects (created timestamps) set here, not by triggers
"""

import sqlite3
from typing import List, Optional, Union

from structlog import get_logger

from ..models.feed import DEFAULT_FEED_STATUS, DEFAULT_FEED_TYPE, Entry, Feed
from ..models.result import StorageErrorKind, StorageResult
from ..utils.dates import now_epoch
from .connection import Database
from .feed_repository import FeedEntryRepository, FeedRepository
from .hydrator import Hydrator
from .resolver import RelationResolver
from .sqlite_base import SqliteRepository
from .sqlite_entry_repository import SqliteAuthorRepository

logger = get_logger(__name__)


class SqliteFeedRepository(SqliteRepository, FeedRepository):
    """SQLite-based feed repository."""

    table = "feed"

    def add(self, feed: Feed) -> StorageResult:
        result = self._write(
            "add",
            {
                "url": feed.url,
                "title": feed.title,
                "type": feed.type or DEFAULT_FEED_TYPE,
                "status": feed.status or DEFAULT_FEED_STATUS,
                "created": now_epoch(),
                "last_updated": 0,
                "last_polled": 0,
                "next_poll": 0,
            },
            insert=True,
        )
        if result:
            logger.info("Added feed", url=feed.url, feed_id=result.row_id)
        return result

    def update_poll(self, feed: Feed) -> StorageResult:
        return self._write(
            "update_poll",
            {
                "id": feed.id,
                "last_updated": feed.last_updated,
                "last_polled": feed.last_polled,
            },
        )

    def get_all(self) -> Optional[List[Feed]]:
        rows = self._fetch_all("get_all")
        if rows is None:
            return None
        return [self._row_to_feed(row) for row in rows]

    def get_by_url(self, url: str) -> Optional[Feed]:
        row = self._fetch_one("get_by_url", {"url": url})
        return self._row_to_feed(row) if row else None

    def get_by_id(self, feed_id: int) -> Optional[Feed]:
        row = self._fetch_one("get_by_id", {"id": feed_id})
        return self._row_to_feed(row) if row else None

    def exists(self, url: str) -> bool:
        feed = self.get_by_url(url)
        return feed is not None and bool(feed.url)

    def delete(self, feed: Union[Feed, str]) -> StorageResult:
        if isinstance(feed, str):
            result = self._write("delete_by_url", {"url": feed}, require_rows=True)
        elif feed.id:
            result = self._write("delete_by_id", {"id": feed.id}, require_rows=True)
        else:
            result = self._write("delete_by_url", {"url": feed.url}, require_rows=True)

        if result:
            logger.info("Deleted feed", feed=feed if isinstance(feed, str) else feed.url)
        return result

    def _row_to_feed(self, row: sqlite3.Row) -> Feed:
        """Convert database row to Feed model."""
        return Feed(
            id=row["id"],
            url=row["url"],
            title=row["title"],
            type=row["type"],
            status=row["status"],
            created=row["created"],
            last_updated=row["last_updated"],
            last_polled=row["last_polled"],
            next_poll=row["next_poll"],
        )


class SqliteFeedEntryRepository(SqliteRepository, FeedEntryRepository):
    """
    SQLite-based feed membership repository.

    Resolving the entry and inserting the link are separate statements with
    no surrounding transaction.
    """

    table = "feed_entry"

    def __init__(
        self,
        db: Database,
        resolver: Optional[RelationResolver] = None,
        hydrator: Optional[Hydrator] = None,
        feeds: Optional[FeedRepository] = None,
    ):
        """
        Args:
            db: Connection manager
            resolver: Resolves entries to row ids (default: built on db)
            hydrator: Entry hydrator (default: looks authors up through db)
            feeds: Used to find a feed by url when it has no id
        """
        super().__init__(db)
        self.resolver = resolver or RelationResolver(db)
        self.hydrator = hydrator or Hydrator(SqliteAuthorRepository(db).get_by_id)
        self.feeds = feeds or SqliteFeedRepository(db)

    def add(self, feed: Feed, entry: Entry) -> StorageResult:
        feed_id = feed.id
        if not feed_id:
            stored = self.feeds.get_by_url(feed.url)
            if stored is None:
                return StorageResult.failure(StorageErrorKind.NOT_FOUND, f"Feed not stored: {feed.url}")
            feed_id = stored.id

        entry_id = self.resolver.resolve_entry_row_id(entry)
        if not entry_id:
            return StorageResult.failure(StorageErrorKind.NOT_FOUND, f"Entry could not be stored: {entry.id}")

        result = self._write(
            "add",
            {"feed_id": feed_id, "entry_id": entry_id, "created": now_epoch()},
        )
        if result:
            logger.debug("Linked entry to feed", feed_id=feed_id, entry_id=entry_id)
        return result

    def get_entries(self, feed_url: str, max_items: Optional[int] = None) -> Optional[List[Entry]]:
        limit = max_items if max_items and max_items > 0 else -1
        rows = self._fetch_all("get_by_feed_url", {"feed_url": feed_url, "limit": limit})
        if rows is None:
            return None
        return [self.hydrator.hydrate(row) for row in rows]
