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
Resolve-or-create for related rows referenced by natural key.

Entries reference authors by (name, url) and feed memberships reference
entries by their feed-supplied id. The resolver turns such references into
surrogate keys, inserting the row first when needed. Inserts use
``ON CONFLICT DO NOTHING`` and are always followed by a read-back, so two
callers resolving the same author both end up with the same id.
"""

from typing import Any, Dict, Optional

from structlog import get_logger

from ..models.feed import Author, Entry
from ..utils.dates import parse_optional_timestamp, parse_timestamp
from .connection import Database
from .sqlite_base import execute_write, fetch_one

logger = get_logger(__name__)


def author_params(author: Author) -> Dict[str, Any]:
    """Bind parameters for inserting an author."""
    return {
        "name": author.name,
        "url": author.url or "",
        "email": author.email or "",
    }


def entry_params(entry: Entry) -> Dict[str, Any]:
    """
    Bind parameters for inserting an entry, with dates parsed to epoch.

    ``author_id`` is left as None; the caller fills it in once the author
    has been resolved.

    Raises:
        ValueError: If published is missing/unparseable or updated is unparseable
    """
    return {
        "url": entry.url,
        "title": entry.title,
        "id": entry.id,
        "author_id": None,
        "summary": entry.summary or "",
        "content": entry.content or "",
        "published": parse_timestamp(entry.published),
        "updated": parse_optional_timestamp(entry.updated),
    }


class RelationResolver:
    """Maps Author / Entry references to surrogate ids, creating rows as needed."""

    def __init__(self, db: Database):
        self.db = db

    def resolve_author_id(self, author: Optional[Author]) -> int:
        """
        Get the author id, inserting the author if it is not stored yet.

        An author that already carries an id is trusted as-is.

        Returns:
            Author id, or 0 if no author was given or none could be produced
        """
        if author is None:
            return 0
        if author.id:
            return author.id

        params = author_params(author)
        execute_write(self.db, "author", "add_or_ignore", params)

        row = fetch_one(self.db, "author", "get_by_natural_key", {"name": params["name"], "url": params["url"]})
        if row is None:
            logger.warning("Could not resolve author", name=author.name, url=author.url)
            return 0
        return row["id"]

    def resolve_entry_row_id(self, entry: Entry) -> int:
        """
        Get the entry row id, storing the entry first if it is new.

        Returns:
            Entry row id, or 0 if the entry could not be found or stored
        """
        if entry.row_id:
            return entry.row_id

        row = fetch_one(self.db, "entry", "get_row_id_by_atom_id", {"id": entry.id})
        if row is not None:
            return row["row_id"]

        try:
            params = entry_params(entry)
        except ValueError as e:
            logger.warning("Cannot store entry", entry_id=entry.id, error=str(e))
            return 0

        author_id = self.resolve_author_id(entry.author)
        params["author_id"] = author_id or None
        execute_write(self.db, "entry", "add_or_ignore", params)

        row = fetch_one(self.db, "entry", "get_row_id_by_atom_id", {"id": entry.id})
        if row is None:
            logger.warning("Could not resolve entry", entry_id=entry.id)
            return 0
        return row["row_id"]
