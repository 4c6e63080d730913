"""Tests for the publication identifier generator."""
import re

from opfbinder.epub.identifier import new_identifier

IDENTIFIER_PATTERN = re.compile(r"^[0-9A-F]{8}-[0-9A-F]{4}-4[0-9A-F]{3}-[89AB][0-9A-F]{3}-[0-9A-F]{12}$")


class TestNewIdentifier:
    """Tests for new_identifier."""

    def test_format(self):
        """Every generated identifier has the version 4 layout."""
        for _ in range(500):
            assert IDENTIFIER_PATTERN.match(new_identifier())

    def test_uniqueness(self):
        """Identifiers do not repeat."""
        identifiers = {new_identifier() for _ in range(200)}
        assert len(identifiers) == 200

    def test_variant_characters_all_occur(self):
        """The variant character is drawn from 8, 9, A and B."""
        variants = {new_identifier()[19] for _ in range(400)}
        assert variants == {"8", "9", "A", "B"}


class TestPublicationIdentifier:
    """Tests for the identifier held by a Publication."""

    def test_assigned_once(self, publication):
        first = publication.identifier
        assert IDENTIFIER_PATTERN.match(first)
        assert publication.identifier == first

    def test_distinct_per_publication(self, work_dir):
        from opfbinder.epub.publication import Publication

        with Publication(work_dir) as a, Publication(work_dir) as b:
            assert a.identifier != b.identifier
