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

"""Value objects exchanged with the storage layer: feeds, authors and entries."""

from typing import Optional

from pydantic import BaseModel

# Feed.type / Feed.status values written when the caller leaves them empty
DEFAULT_FEED_TYPE = "F"
DEFAULT_FEED_STATUS = "A"


class Feed(BaseModel):
    """
    A subscribed feed.

    Attributes:
        id: Surrogate key assigned by storage (None until stored)
        url: Feed URL (unique)
        title: Feed title
        type: Feed type code ("F" by default)
        status: Feed status code ("A" by default)
        created: Epoch seconds when the feed was added
        last_updated: Epoch seconds of the last content change
        last_polled: Epoch seconds of the last poll
        next_poll: Epoch seconds of the next scheduled poll
    """

    id: Optional[int] = None
    url: str
    title: str
    type: str = DEFAULT_FEED_TYPE
    status: str = DEFAULT_FEED_STATUS

    # Poll bookkeeping, raw epoch seconds (0 = never)
    created: int = 0
    last_updated: int = 0
    last_polled: int = 0
    next_poll: int = 0


class Author(BaseModel):
    """An entry author. (name, url) identifies an author."""

    id: Optional[int] = None
    name: str
    url: str = ""
    email: str = ""


class Entry(BaseModel):
    """
    A feed item.

    ``id`` is the natural key from the feed (Atom id / RSS guid); ``row_id``
    is the storage surrogate key. Dates are textual: callers may supply
    ISO-8601 or RFC 2822 text, reads return ISO-8601. ``updated`` is None
    when the item was never updated.
    """

    row_id: Optional[int] = None
    id: str
    url: str
    title: str
    author: Optional[Author] = None
    summary: str = ""
    content: str = ""
    published: Optional[str] = None
    updated: Optional[str] = None
