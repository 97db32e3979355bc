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
Schema registry: table DDL and the named queries run against each table.

Pure data. Every query uses named parameters (``:url``) so statements can be
prepared once and bound per call. Tables are listed in dependency order;
``create_script()`` concatenates their DDL for a single executescript().

Timestamps are stored as integer epoch seconds.
"""

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(frozen=True)
class TableSchema:
    """DDL plus named queries for one table."""

    name: str
    create: str
    queries: Dict[str, str] = field(default_factory=dict)


# ============================================================================
# FEED TABLE
# ============================================================================

FEED = TableSchema(
    name="feed",
    create="""
        CREATE TABLE IF NOT EXISTS feed (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            url TEXT NOT NULL UNIQUE,
            title TEXT NOT NULL,
            type TEXT NOT NULL DEFAULT 'F',
            status TEXT NOT NULL DEFAULT 'A',
            created INTEGER NOT NULL DEFAULT 0,
            last_updated INTEGER NOT NULL DEFAULT 0,
            last_polled INTEGER NOT NULL DEFAULT 0,
            next_poll INTEGER NOT NULL DEFAULT 0,
            CHECK (length(url) > 0)
        );
    """,
    queries={
        "add": """
            INSERT INTO feed (url, title, type, status, created, last_updated, last_polled, next_poll)
            VALUES (:url, :title, :type, :status, :created, :last_updated, :last_polled, :next_poll)
        """,
        "update_poll": """
            UPDATE feed
            SET last_updated = :last_updated,
                last_polled = :last_polled
            WHERE id = :id
        """,
        "get_all": """
            SELECT id, url, title, type, status, created, last_updated, last_polled, next_poll
            FROM feed
            ORDER BY id ASC
        """,
        "get_by_id": """
            SELECT id, url, title, type, status, created, last_updated, last_polled, next_poll
            FROM feed
            WHERE id = :id
        """,
        "get_by_url": """
            SELECT id, url, title, type, status, created, last_updated, last_polled, next_poll
            FROM feed
            WHERE url = :url
        """,
        "delete_by_id": "DELETE FROM feed WHERE id = :id",
        "delete_by_url": "DELETE FROM feed WHERE url = :url",
    },
)

# ============================================================================
# AUTHOR TABLE
# ============================================================================

AUTHOR = TableSchema(
    name="author",
    create="""
        CREATE TABLE IF NOT EXISTS author (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            url TEXT NOT NULL DEFAULT '',
            email TEXT NOT NULL DEFAULT '',
            UNIQUE(name, url)
        );

        CREATE INDEX IF NOT EXISTS idx_author_name ON author(name);
    """,
    queries={
        "add": """
            INSERT INTO author (name, url, email)
            VALUES (:name, :url, :email)
        """,
        # Resolver path: insert unless (name, url) is already stored
        "add_or_ignore": """
            INSERT INTO author (name, url, email)
            VALUES (:name, :url, :email)
            ON CONFLICT(name, url) DO NOTHING
        """,
        "get_all": """
            SELECT id, name, url, email
            FROM author
            ORDER BY id ASC
        """,
        "get_by_id": """
            SELECT id, name, url, email
            FROM author
            WHERE id = :id
        """,
        "get_by_name": """
            SELECT id, name, url, email
            FROM author
            WHERE name = :name
            ORDER BY id ASC
            LIMIT 1
        """,
        "get_by_natural_key": """
            SELECT id, name, url, email
            FROM author
            WHERE name = :name AND url = :url
        """,
        "delete_by_id": "DELETE FROM author WHERE id = :id",
        "delete_by_name": "DELETE FROM author WHERE name = :name",
    },
)

# ============================================================================
# ENTRY TABLE
# ============================================================================

# author_id is NULL when the entry has no author; deleting an author
# detaches its entries rather than deleting them.
ENTRY = TableSchema(
    name="entry",
    create="""
        CREATE TABLE IF NOT EXISTS entry (
            row_id INTEGER PRIMARY KEY AUTOINCREMENT,
            url TEXT NOT NULL DEFAULT '',
            title TEXT NOT NULL DEFAULT '',
            id TEXT NOT NULL UNIQUE,
            author_id INTEGER NULL,
            summary TEXT NOT NULL DEFAULT '',
            content TEXT NOT NULL DEFAULT '',
            published INTEGER NOT NULL DEFAULT 0,
            updated INTEGER NOT NULL DEFAULT 0,
            FOREIGN KEY (author_id) REFERENCES author(id) ON DELETE SET NULL,
            CHECK (length(id) > 0)
        );

        CREATE INDEX IF NOT EXISTS idx_entry_published ON entry(published DESC);
        CREATE INDEX IF NOT EXISTS idx_entry_author_id ON entry(author_id);
    """,
    queries={
        "add": """
            INSERT INTO entry (url, title, id, author_id, summary, content, published, updated)
            VALUES (:url, :title, :id, :author_id, :summary, :content, :published, :updated)
        """,
        "add_or_ignore": """
            INSERT INTO entry (url, title, id, author_id, summary, content, published, updated)
            VALUES (:url, :title, :id, :author_id, :summary, :content, :published, :updated)
            ON CONFLICT(id) DO NOTHING
        """,
        "get_all": """
            SELECT row_id, url, title, id, author_id, summary, content, published, updated
            FROM entry
            ORDER BY row_id ASC
        """,
        "get_by_id": """
            SELECT row_id, url, title, id, author_id, summary, content, published, updated
            FROM entry
            WHERE row_id = :row_id
        """,
        "get_by_atom_id": """
            SELECT row_id, url, title, id, author_id, summary, content, published, updated
            FROM entry
            WHERE id = :id
        """,
        "get_row_id_by_atom_id": "SELECT row_id FROM entry WHERE id = :id",
        "delete_by_id": "DELETE FROM entry WHERE row_id = :row_id",
        "delete_by_atom_id": "DELETE FROM entry WHERE id = :id",
    },
)

# ============================================================================
# FEED_ENTRY TABLE (feed <-> entry membership)
# ============================================================================

FEED_ENTRY = TableSchema(
    name="feed_entry",
    create="""
        CREATE TABLE IF NOT EXISTS feed_entry (
            feed_id INTEGER NOT NULL,
            entry_id INTEGER NOT NULL,
            created INTEGER NOT NULL DEFAULT 0,
            PRIMARY KEY (feed_id, entry_id),
            FOREIGN KEY (feed_id) REFERENCES feed(id) ON DELETE CASCADE,
            FOREIGN KEY (entry_id) REFERENCES entry(row_id) ON DELETE CASCADE
        );

        CREATE INDEX IF NOT EXISTS idx_feed_entry_entry_id ON feed_entry(entry_id);
    """,
    queries={
        "add": """
            INSERT INTO feed_entry (feed_id, entry_id, created)
            VALUES (:feed_id, :entry_id, :created)
        """,
        # LIMIT -1 means no limit in SQLite
        "get_by_feed_url": """
            SELECT e.row_id, e.url, e.title, e.id, e.author_id, e.summary, e.content,
                   e.published, e.updated
            FROM entry e
            INNER JOIN feed_entry fe ON e.row_id = fe.entry_id
            INNER JOIN feed f ON fe.feed_id = f.id
            WHERE f.url = :feed_url
            ORDER BY e.published DESC, e.row_id DESC
            LIMIT :limit
        """,
    },
)

# Dependency order: referenced tables first
TABLES: List[TableSchema] = [FEED, AUTHOR, ENTRY, FEED_ENTRY]

SCHEMA: Dict[str, TableSchema] = {table.name: table for table in TABLES}


def create_script() -> str:
    """DDL for every table, suitable for a single executescript() call."""
    return "\n".join(table.create for table in TABLES)


def get_query(table: str, operation: str) -> str:
    """
    Look up a named query.

    Raises:
        KeyError: If the table or operation is not registered
    """
    return SCHEMA[table].queries[operation]
