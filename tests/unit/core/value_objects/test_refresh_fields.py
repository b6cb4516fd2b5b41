"""
Tests pour RefreshField et TagSource.

Verifie le parsing des valeurs de configuration et l'independance des groupes.
"""

import pytest

from src.core.exceptions import InvalidRefreshFieldError
from src.core.value_objects.refresh_fields import RefreshField, TagSource


class TestRefreshFieldParse:
    """Tests du parsing des groupes de champs."""

    def test_parse_pipe_separated_string(self):
        """Une chaine "A|B" combine les deux groupes."""
        fields = RefreshField.parse("TITLES_AND_OVERVIEW|DATES")

        assert RefreshField.TITLES_AND_OVERVIEW in fields
        assert RefreshField.DATES in fields
        assert RefreshField.TAGS_AND_GENRES not in fields

    def test_parse_is_case_insensitive_and_ignores_blanks(self):
        """Les noms sont insensibles a la casse, les segments vides ignores."""
        fields = RefreshField.parse(" tags_and_genres | | recursive ")

        assert fields == RefreshField.TAGS_AND_GENRES | RefreshField.RECURSIVE

    def test_parse_accepts_comma_separator(self):
        assert RefreshField.parse("DATES,IMAGES") == RefreshField.DATES | RefreshField.IMAGES

    def test_parse_list_of_names(self):
        fields = RefreshField.parse(["CAST_AND_CREW", "CONTENT_RATINGS"])

        assert fields == RefreshField.CAST_AND_CREW | RefreshField.CONTENT_RATINGS

    def test_parse_integer(self):
        assert RefreshField.parse(1 << 31) == RefreshField.LEGACY_REFRESH

    def test_parse_existing_flag_is_returned_unchanged(self):
        assert RefreshField.parse(RefreshField.IMAGES) is RefreshField.IMAGES

    def test_parse_empty_string_is_none(self):
        assert RefreshField.parse("") == RefreshField.NONE

    def test_parse_unknown_name_raises(self):
        """Un nom inconnu leve InvalidRefreshFieldError."""
        with pytest.raises(InvalidRefreshFieldError, match="EVERYTHING"):
            RefreshField.parse("DATES|EVERYTHING")

    def test_invalid_field_error_is_a_value_error(self):
        """Permet a pydantic de le remonter comme erreur de validation."""
        with pytest.raises(ValueError):
            RefreshField.parse("NOPE")


class TestRefreshFieldGroups:
    """Tests de has_field_groups."""

    def test_legacy_only_has_no_field_groups(self):
        assert not RefreshField.LEGACY_REFRESH.has_field_groups

    def test_none_has_no_field_groups(self):
        assert not RefreshField.NONE.has_field_groups

    def test_legacy_with_group_has_field_groups(self):
        fields = RefreshField.LEGACY_REFRESH | RefreshField.DATES
        assert fields.has_field_groups

    def test_groups_are_independent_bits(self):
        """Chaque groupe est un bit distinct."""
        members = [member for member in RefreshField if member is not RefreshField.NONE]
        combined = RefreshField.NONE
        for member in members:
            assert not (combined & member)
            combined |= member


class TestTagSource:
    """Tests du parsing des sources de tags."""

    def test_parse_both_sources(self):
        sources = TagSource.parse("TMDB_KEYWORDS|TMDB_GENRES")

        assert TagSource.TMDB_KEYWORDS in sources
        assert TagSource.TMDB_GENRES in sources

    def test_parse_unknown_source_raises(self):
        with pytest.raises(InvalidRefreshFieldError):
            TagSource.parse("ANIDB_TAGS")
