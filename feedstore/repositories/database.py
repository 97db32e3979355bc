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
Factory for creating repository instances.

Initialization is explicit: create_repositories() opens the connection and
applies the schema before returning, so configuration and schema problems
surface here rather than on the first query.

Usage:
    from feedstore.repositories.database import create_repositories

    repos = create_repositories(config)
    repos.feed.add(Feed(url="https://example.com/feed", title="Example"))
    repos.feed_entry.add(feed, entry)
    repos.close()
"""

from dataclasses import dataclass
from typing import Optional

from structlog import get_logger

from ..utils.config import Config
from .connection import Database
from .entry_repository import AuthorRepository, EntryRepository
from .feed_repository import FeedEntryRepository, FeedRepository
from .hydrator import Hydrator
from .resolver import RelationResolver
from .sqlite_entry_repository import SqliteAuthorRepository, SqliteEntryRepository
from .sqlite_feed_repository import SqliteFeedEntryRepository, SqliteFeedRepository

logger = get_logger(__name__)


@dataclass
class Repositories:
    """Container for all repository instances sharing one connection."""

    db: Database
    feed: FeedRepository
    author: AuthorRepository
    entry: EntryRepository
    feed_entry: FeedEntryRepository
    resolver: RelationResolver

    def close(self) -> None:
        self.db.close()

    def __enter__(self) -> "Repositories":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def create_repositories(config: Optional[Config] = None) -> Repositories:
    """
    Connect to the configured datasource and build the repositories.

    Args:
        config: Storage configuration (defaults to Config())

    Returns:
        Repositories container with all repository instances

    Raises:
        ConfigurationError: If no usable datasource is configured
        SchemaError: If the schema cannot be applied
    """
    db = Database(config).connect()

    resolver = RelationResolver(db)
    author_repo = SqliteAuthorRepository(db)
    hydrator = Hydrator(author_repo.get_by_id)
    feed_repo = SqliteFeedRepository(db)

    logger.info("Initialized feed storage", datasource=db.config.datasource)

    return Repositories(
        db=db,
        feed=feed_repo,
        author=author_repo,
        entry=SqliteEntryRepository(db, resolver=resolver, hydrator=hydrator),
        feed_entry=SqliteFeedEntryRepository(db, resolver=resolver, hydrator=hydrator, feeds=feed_repo),
        resolver=resolver,
    )
