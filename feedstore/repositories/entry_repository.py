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
Abstract repository interfaces for entries and their authors.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Union

from ..models.feed import Author, Entry
from ..models.result import StorageResult


class AuthorRepository(ABC):
    """
    Abstract repository for author persistence operations.

    Authors are inserted, read or deleted; never updated in place.
    """

    @abstractmethod
    def add(self, author: Author) -> StorageResult:
        """
        Store a new author.

        Returns:
            Success with the new row id, or CONSTRAINT_VIOLATION if (name, url) exists
        """
        pass

    @abstractmethod
    def get_all(self) -> Optional[List[Author]]:
        """Get all authors, or None on a database error."""
        pass

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[Author]:
        """
        Get author by name.

        Args:
            name: Author name

        Returns:
            The first stored author with that name, None otherwise
        """
        pass

    @abstractmethod
    def get_by_id(self, author_id: int) -> Optional[Author]:
        """Get author by surrogate key."""
        pass

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Check if an author with given name exists."""
        pass

    @abstractmethod
    def delete(self, author: Union[Author, str]) -> StorageResult:
        """
        Delete by name (str, removes every author with that name) or by the id
        of an Author.

        Returns:
            Success iff a row was removed, NOT_FOUND otherwise
        """
        pass


class EntryRepository(ABC):
    """Abstract repository for entry persistence operations."""

    @abstractmethod
    def add(self, entry: Entry) -> StorageResult:
        """
        Store a new entry, creating its author if needed.

        Args:
            entry: Entry with a textual published date

        Returns:
            Success with the new row id; CONSTRAINT_VIOLATION if the natural id
            exists; INVALID_DATA if a date cannot be parsed
        """
        pass

    @abstractmethod
    def get_all(self) -> Optional[List[Entry]]:
        """Get all entries (hydrated), or None on a database error."""
        pass

    @abstractmethod
    def get_by_id(self, row_id: int) -> Optional[Entry]:
        """Get entry by surrogate key."""
        pass

    @abstractmethod
    def get_by_atom_id(self, entry_id: str) -> Optional[Entry]:
        """
        Get entry by its natural id (Atom id / RSS guid).

        Args:
            entry_id: Feed-supplied unique id

        Returns:
            Hydrated Entry if found, None otherwise
        """
        pass

    @abstractmethod
    def exists(self, entry_id: str) -> bool:
        """Check if an entry with given natural id exists."""
        pass

    @abstractmethod
    def delete(self, entry: Union[Entry, str]) -> StorageResult:
        """
        Delete by natural id (str) or by the row_id of an Entry.

        Returns:
            Success iff a row was removed, NOT_FOUND otherwise
        """
        pass
