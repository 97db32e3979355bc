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
Unit tests for the SQLite author and entry repositories.
"""

import pytest

from feedstore.models.feed import Author, Entry
from feedstore.models.result import StorageErrorKind

# 2020-01-01T00:00:00Z
JAN_1_2020 = 1577836800


# ============================================================================
# AuthorRepository Tests
# ============================================================================


class TestAuthorRepository:
    """Tests for author CRUD."""

    def test_add_and_get_by_name(self, repos):
        """Test storing an author and reading it back."""
        result = repos.author.add(Author(name="Ann", url="http://ann", email="ann@example.com"))

        assert result
        found = repos.author.get_by_name("Ann")
        assert found.id == result.row_id
        assert found.url == "http://ann"
        assert found.email == "ann@example.com"

    def test_add_defaults_empty_url_and_email(self, repos):
        """Test that optional author fields are stored as empty strings."""
        repos.author.add(Author(name="Bob"))

        found = repos.author.get_by_name("Bob")

        assert found.url == ""
        assert found.email == ""

    def test_duplicate_name_and_url_fails(self, repos):
        """Test that (name, url) is unique."""
        assert repos.author.add(Author(name="Bob", url="http://bob"))

        result = repos.author.add(Author(name="Bob", url="http://bob", email="other@example.com"))

        assert not result
        assert result.error == StorageErrorKind.CONSTRAINT_VIOLATION

    def test_same_name_different_url_allowed(self, repos):
        """Test that two authors may share a display name."""
        assert repos.author.add(Author(name="Bob", url="http://one"))
        assert repos.author.add(Author(name="Bob", url="http://two"))

        assert len(repos.author.get_all()) == 2
        # First stored wins for name lookups
        assert repos.author.get_by_name("Bob").url == "http://one"

    def test_get_by_id(self, repos):
        """Test lookup by surrogate key."""
        result = repos.author.add(Author(name="Cat"))

        assert repos.author.get_by_id(result.row_id).name == "Cat"
        assert repos.author.get_by_id(999) is None

    def test_get_all_empty(self, repos):
        """Test get_all() on a new database."""
        assert repos.author.get_all() == []

    def test_exists(self, repos):
        """Test existence check by name."""
        repos.author.add(Author(name="Dan"))

        assert repos.author.exists("Dan") is True
        assert repos.author.exists("Nobody") is False

    def test_delete_by_name(self, repos):
        """Test deleting with a name string."""
        repos.author.add(Author(name="Eve"))

        result = repos.author.delete("Eve")

        assert result
        assert repos.author.exists("Eve") is False

    def test_delete_by_author_id(self, repos):
        """Test deleting with a stored Author object."""
        result = repos.author.add(Author(name="Fay"))

        assert repos.author.delete(Author(id=result.row_id, name="ignored"))
        assert repos.author.get_all() == []

    def test_delete_author_without_id_uses_name(self, repos):
        """Test that an Author without id is deleted by name."""
        repos.author.add(Author(name="Gus"))

        assert repos.author.delete(Author(name="Gus"))
        assert repos.author.exists("Gus") is False

    def test_delete_missing_returns_not_found(self, repos):
        """Test that deleting nothing is a NOT_FOUND failure."""
        result = repos.author.delete("Nobody")

        assert not result
        assert result.error == StorageErrorKind.NOT_FOUND


# ============================================================================
# EntryRepository Tests
# ============================================================================


class TestEntryAdd:
    """Tests for storing entries."""

    def test_add_round_trip(self, repos, sample_entry):
        """Test that every field survives a store and read."""
        result = repos.entry.add(sample_entry)

        assert result
        assert result.row_id > 0

        found = repos.entry.get_by_atom_id("guid-1")
        assert found.row_id == result.row_id
        assert found.id == "guid-1"
        assert found.url == "http://a/1"
        assert found.title == "Item 1"
        assert found.summary == "First item"
        assert found.content == "<p>Hello</p>"
        assert found.published == "2020-01-01T00:00:00+00:00"
        assert found.updated is None
        assert found.author.name == "Bob"
        assert found.author.id is not None

    def test_dates_stored_as_epoch(self, repos, sample_entry):
        """Test the stored representation of published/updated."""
        repos.entry.add(sample_entry)

        row = repos.db.connection.execute(
            "SELECT published, updated FROM entry WHERE id = ?", ("guid-1",)
        ).fetchone()

        assert row["published"] == JAN_1_2020
        assert row["updated"] == 0

    def test_rfc2822_dates_accepted(self, repos, make_entry):
        """Test that RSS-style dates are parsed and returned as ISO-8601."""
        entry = make_entry(
            "rss-1",
            published="Wed, 01 Jan 2020 00:00:00 +0000",
            updated="Thu, 02 Jan 2020 10:30:00 GMT",
        )

        assert repos.entry.add(entry)

        found = repos.entry.get_by_atom_id("rss-1")
        assert found.published == "2020-01-01T00:00:00+00:00"
        assert found.updated == "2020-01-02T10:30:00+00:00"

    def test_offset_dates_normalized_to_utc(self, repos, make_entry):
        """Test that non-UTC offsets are converted on the way out."""
        repos.entry.add(make_entry("tz", published="2020-01-01T02:00:00+02:00"))

        assert repos.entry.get_by_atom_id("tz").published == "2020-01-01T00:00:00+00:00"

    def test_entry_without_author(self, repos, make_entry):
        """Test that an absent author is stored as NULL and read back as None."""
        repos.entry.add(make_entry("anon"))

        found = repos.entry.get_by_atom_id("anon")
        row = repos.db.connection.execute("SELECT author_id FROM entry WHERE id = 'anon'").fetchone()

        assert found.author is None
        assert row["author_id"] is None
        assert repos.author.get_all() == []

    def test_author_is_created_once(self, repos, make_entry):
        """Test that entries by the same author share one author row."""
        repos.entry.add(make_entry("one", author=Author(name="Bob")))
        repos.entry.add(make_entry("two", author=Author(name="Bob")))

        authors = repos.author.get_all()

        assert len(authors) == 1
        assert repos.entry.get_by_atom_id("one").author.id == authors[0].id
        assert repos.entry.get_by_atom_id("two").author.id == authors[0].id

    def test_stored_author_id_is_used(self, repos, make_entry):
        """Test that an author carrying an id is not looked up again."""
        stored = repos.author.add(Author(name="Zed"))

        repos.entry.add(make_entry("z", author=Author(id=stored.row_id, name="Zed")))

        assert len(repos.author.get_all()) == 1
        assert repos.entry.get_by_atom_id("z").author.id == stored.row_id

    @pytest.mark.parametrize("published", [None, "", "yesterday-ish"])
    def test_bad_published_is_invalid_data(self, repos, make_entry, published):
        """Test that a missing or unparseable published date is rejected."""
        result = repos.entry.add(make_entry("bad", published=published, author=Author(name="Ghost")))

        assert not result
        assert result.error == StorageErrorKind.INVALID_DATA
        assert repos.entry.exists("bad") is False

    @pytest.mark.parametrize("published", ["inf", "1e30", "99999999999999"])
    def test_unrepresentable_published_is_invalid_data(self, repos, make_entry, published):
        """Test that numbers no datetime can hold are rejected, not stored."""
        result = repos.entry.add(make_entry("huge", published=published))

        assert not result
        assert result.error == StorageErrorKind.INVALID_DATA
        assert repos.entry.exists("huge") is False

    @pytest.mark.parametrize("updated", ["-inf", "1e30", "99999999999999"])
    def test_unrepresentable_updated_is_invalid_data(self, repos, make_entry, updated):
        result = repos.entry.add(make_entry("huge", updated=updated))

        assert not result
        assert result.error == StorageErrorKind.INVALID_DATA

    def test_rejected_entry_creates_no_author(self, repos, make_entry):
        """Test that validation happens before the author is stored."""
        repos.entry.add(make_entry("bad", published="nonsense", author=Author(name="Ghost")))

        assert repos.author.exists("Ghost") is False

    def test_bad_updated_is_invalid_data(self, repos, make_entry):
        """Test that an unparseable updated date is rejected."""
        result = repos.entry.add(make_entry("bad", updated="not a date"))

        assert not result
        assert result.error == StorageErrorKind.INVALID_DATA

    def test_duplicate_atom_id_fails(self, repos, sample_entry):
        """Test that the feed-supplied id is unique."""
        assert repos.entry.add(sample_entry)

        result = repos.entry.add(sample_entry)

        assert not result
        assert result.error == StorageErrorKind.CONSTRAINT_VIOLATION
        assert len(repos.entry.get_all()) == 1

    def test_empty_atom_id_fails(self, repos, make_entry):
        """Test that an empty id is rejected by the schema."""
        result = repos.entry.add(make_entry(""))

        assert not result
        assert result.error == StorageErrorKind.CONSTRAINT_VIOLATION


class TestEntryGet:
    """Tests for entry reads."""

    def test_get_all_in_insertion_order(self, repos, make_entry):
        """Test that get_all() returns oldest rows first."""
        for entry_id in ("b", "a", "c"):
            repos.entry.add(make_entry(entry_id))

        assert [entry.id for entry in repos.entry.get_all()] == ["b", "a", "c"]

    def test_get_by_id(self, repos, sample_entry):
        """Test lookup by row id."""
        result = repos.entry.add(sample_entry)

        found = repos.entry.get_by_id(result.row_id)

        assert found.id == sample_entry.id
        assert found.author.name == "Bob"

    def test_get_missing_returns_none(self, repos):
        """Test lookups that match nothing."""
        assert repos.entry.get_by_id(999) is None
        assert repos.entry.get_by_atom_id("missing") is None

    def test_exists(self, repos, sample_entry):
        """Test existence check by feed-supplied id."""
        repos.entry.add(sample_entry)

        assert repos.entry.exists("guid-1") is True
        assert repos.entry.exists("missing") is False

    def test_out_of_range_stored_date_reads_as_none(self, repos, sample_entry):
        """Test that a row holding an unrenderable epoch still hydrates."""
        repos.entry.add(sample_entry)
        repos.db.connection.execute("UPDATE entry SET published = 99999999999999 WHERE id = 'guid-1'")

        found = repos.entry.get_by_atom_id("guid-1")

        assert found.id == "guid-1"
        assert found.published is None

    def test_read_on_closed_connection_returns_none(self, repos, sample_entry):
        """Test that read errors surface as None."""
        repos.entry.add(sample_entry)
        repos.db.connection.close()

        assert repos.entry.get_all() is None
        assert repos.entry.get_by_atom_id("guid-1") is None


class TestEntryDelete:
    """Tests for entry deletion."""

    def test_delete_by_atom_id(self, repos, sample_entry):
        """Test deleting with the feed-supplied id."""
        repos.entry.add(sample_entry)

        assert repos.entry.delete("guid-1")
        assert repos.entry.exists("guid-1") is False

    def test_delete_by_row_id(self, repos, sample_entry):
        """Test deleting a stored Entry object."""
        repos.entry.add(sample_entry)
        stored = repos.entry.get_by_atom_id("guid-1")

        result = repos.entry.delete(stored)

        assert result
        assert result.rowcount == 1
        assert repos.entry.get_all() == []

    def test_delete_entry_without_row_id_uses_atom_id(self, repos, sample_entry):
        """Test that an Entry without row id is deleted by its id."""
        repos.entry.add(sample_entry)

        assert repos.entry.delete(sample_entry)
        assert repos.entry.exists("guid-1") is False

    def test_delete_missing_returns_not_found(self, repos):
        """Test that deleting nothing is a NOT_FOUND failure."""
        result = repos.entry.delete("missing")

        assert not result
        assert result.error == StorageErrorKind.NOT_FOUND

    def test_delete_keeps_author(self, repos, sample_entry):
        """Test that authors outlive their entries."""
        repos.entry.add(sample_entry)

        repos.entry.delete("guid-1")

        assert repos.author.exists("Bob") is True

    def test_deleting_author_detaches_entries(self, repos, sample_entry):
        """Test that an author delete leaves the entry without an author."""
        repos.entry.add(sample_entry)

        assert repos.author.delete("Bob")

        found = repos.entry.get_by_atom_id("guid-1")
        assert found is not None
        assert found.author is None

    def test_entry_model_round_trips_through_delete_by_object(self, repos, make_entry):
        """Test that a hydrated entry can be passed straight back to delete()."""
        repos.entry.add(make_entry("r"))
        entry = repos.entry.get_all()[0]

        assert isinstance(entry, Entry)
        assert repos.entry.delete(entry)
