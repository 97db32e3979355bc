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

"""Outcome of a storage mutation."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class StorageErrorKind(str, Enum):
    """
    Why a storage call failed.

    - NOT_FOUND: No row matched the supplied key
    - CONSTRAINT_VIOLATION: A uniqueness or foreign key constraint rejected the write
    - INVALID_DATA: The value could not be converted for storage (e.g. a bad date)
    - DATABASE_ERROR: The statement could not run (closed connection, locked file, bad SQL)
    """

    NOT_FOUND = "not_found"
    CONSTRAINT_VIOLATION = "constraint_violation"
    INVALID_DATA = "invalid_data"
    DATABASE_ERROR = "database_error"


@dataclass(frozen=True)
class StorageResult:
    """
    Result of an add/update/delete.

    Truthy on success, so ``if repo.add(feed):`` reads naturally, while
    callers that care can branch on ``error``.
    """

    ok: bool
    error: Optional[StorageErrorKind] = None
    message: str = ""
    row_id: Optional[int] = None
    rowcount: int = 0

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, row_id: Optional[int] = None, rowcount: int = 0) -> "StorageResult":
        return cls(ok=True, row_id=row_id, rowcount=rowcount)

    @classmethod
    def failure(cls, error: StorageErrorKind, message: str = "") -> "StorageResult":
        return cls(ok=False, error=error, message=message)
