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
Repository layer for feed storage.

This module provides abstract interfaces and the SQLite implementations
for feeds, authors, entries and feed membership, following the Repository
Pattern to keep persistence mechanics away from callers.
"""

from .connection import Database
from .database import Repositories, create_repositories
from .entry_repository import AuthorRepository, EntryRepository
from .feed_repository import FeedEntryRepository, FeedRepository
from .hydrator import Hydrator
from .resolver import RelationResolver
from .sqlite_entry_repository import SqliteAuthorRepository, SqliteEntryRepository
from .sqlite_feed_repository import SqliteFeedEntryRepository, SqliteFeedRepository

__all__ = [
    "Database",
    "Repositories",
    "create_repositories",
    "FeedRepository",
    "FeedEntryRepository",
    "AuthorRepository",
    "EntryRepository",
    "Hydrator",
    "RelationResolver",
    "SqliteFeedRepository",
    "SqliteFeedEntryRepository",
    "SqliteAuthorRepository",
    "SqliteEntryRepository",
]
