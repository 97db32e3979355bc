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

"""Turns raw entry rows into Entry models."""

from typing import Any, Callable, Dict, Mapping, Optional

from ..models.feed import Author, Entry
from ..utils.dates import format_timestamp, is_numeric

AuthorLookup = Callable[[int], Optional[Author]]


class Hydrator:
    """
    Post-read enrichment of entry rows.

    - published/updated: epoch seconds -> ISO-8601 text. Only numeric values
      are converted, so re-hydrating formatted text leaves it alone. An
      updated value of 0 means "never updated" and becomes None.
    - author_id: replaced by the embedded Author (looked up by id).
    """

    def __init__(self, author_lookup: AuthorLookup):
        """
        Args:
            author_lookup: Returns the Author for an id, or None
        """
        self._author_lookup = author_lookup

    def hydrate(self, row: Mapping[str, Any]) -> Entry:
        return Entry.model_validate(self.hydrate_row(row))

    def hydrate_row(self, row: Mapping[str, Any]) -> Dict[str, Any]:
        data = dict(row)

        published = data.get("published")
        if is_numeric(published):
            data["published"] = format_timestamp(published) if float(published) else None
        elif not published:
            data["published"] = None

        updated = data.get("updated")
        if is_numeric(updated):
            data["updated"] = format_timestamp(updated) if float(updated) > 0 else None
        elif not updated:
            data["updated"] = None

        author_id = data.pop("author_id", None)
        if author_id:
            data["author"] = self._author_lookup(author_id)

        return data
