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
Abstract repository interfaces for feeds and feed membership.

Mutations never raise for per-call failures; they return a StorageResult.
Reads return None when the row is absent or the query failed.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Union

from ..models.feed import Entry, Feed
from ..models.result import StorageResult


class FeedRepository(ABC):
    """Abstract repository for feed persistence operations."""

    @abstractmethod
    def add(self, feed: Feed) -> StorageResult:
        """
        Store a new feed.

        type/status default to "F"/"A" when empty, created is set to now and
        the poll timestamps start at 0.

        Args:
            feed: Feed to add (url and title required)

        Returns:
            Success with the new row id, or CONSTRAINT_VIOLATION if the url exists
        """
        pass

    @abstractmethod
    def update_poll(self, feed: Feed) -> StorageResult:
        """
        Record poll bookkeeping (last_updated, last_polled) for feed.id.

        Succeeds even when no row has that id.
        """
        pass

    @abstractmethod
    def get_all(self) -> Optional[List[Feed]]:
        """
        Get all feeds.

        Returns:
            Feeds in insertion order, or None on a database error
        """
        pass

    @abstractmethod
    def get_by_url(self, url: str) -> Optional[Feed]:
        """
        Get feed by URL (unique external identifier).

        Args:
            url: Feed URL

        Returns:
            Feed if found, None otherwise
        """
        pass

    @abstractmethod
    def get_by_id(self, feed_id: int) -> Optional[Feed]:
        """Get feed by surrogate key."""
        pass

    @abstractmethod
    def exists(self, url: str) -> bool:
        """
        Check if a feed with given URL exists.

        Args:
            url: Feed URL

        Returns:
            True if feed exists, False otherwise
        """
        pass

    @abstractmethod
    def delete(self, feed: Union[Feed, str]) -> StorageResult:
        """
        Delete a feed by URL (str) or by the id of a Feed.

        Returns:
            Success iff a row was removed, NOT_FOUND otherwise
        """
        pass


class FeedEntryRepository(ABC):
    """Abstract repository for feed <-> entry membership."""

    @abstractmethod
    def add(self, feed: Feed, entry: Entry) -> StorageResult:
        """
        Associate an entry with a feed.

        The entry is stored first if it is not already persisted.

        Args:
            feed: Stored feed (id, or url to look it up)
            entry: Entry to link (row_id, or natural id to resolve/create)

        Returns:
            Success, NOT_FOUND if the feed or entry cannot be resolved,
            CONSTRAINT_VIOLATION if the pair is already linked
        """
        pass

    @abstractmethod
    def get_entries(self, feed_url: str, max_items: Optional[int] = None) -> Optional[List[Entry]]:
        """
        Get hydrated entries of a feed, most recently published first.

        Args:
            feed_url: URL of the feed
            max_items: Return at most this many entries (None or 0 = all)

        Returns:
            Entries ordered by published descending, or None on a database error
        """
        pass
