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
Pytest fixtures shared by the feedstore tests.

Every test gets its own SQLite file under tmp_path.
"""

import pytest

from feedstore.models.feed import Author, Entry, Feed
from feedstore.repositories.database import create_repositories
from feedstore.utils.config import Config


@pytest.fixture
def config(tmp_path):
    """Configuration pointing at a temporary database file."""
    return Config(datasource=str(tmp_path / "test.db"))


@pytest.fixture
def repos(config):
    """All repositories on a fresh database."""
    repositories = create_repositories(config)
    yield repositories
    repositories.close()


@pytest.fixture
def sample_feed():
    return Feed(url="http://a/feed", title="A")


@pytest.fixture
def sample_entry():
    return Entry(
        id="guid-1",
        url="http://a/1",
        title="Item 1",
        author=Author(name="Bob"),
        summary="First item",
        content="<p>Hello</p>",
        published="2020-01-01T00:00:00Z",
    )


@pytest.fixture
def make_entry():
    """Factory fixture to create entries with custom parameters."""

    def _make_entry(entry_id: str, published: str = "2020-01-01T00:00:00+00:00", **kwargs) -> Entry:
        return Entry(
            id=entry_id,
            url=kwargs.pop("url", f"http://a/{entry_id}"),
            title=kwargs.pop("title", f"Entry {entry_id}"),
            published=published,
            **kwargs,
        )

    return _make_entry
