"""
Tests pour les utilitaires de texte.

Verifie le nettoyage des descriptions AniDB, la jonction de textes et
la detection du type de bonus.
"""

import pytest

from src.core.entities.entity_info import ExtraType
from src.core.entities.source_records import EpisodeType
from src.core.value_objects.texts import LocalizedText
from src.utils.text import get_extra_type, get_title_for_language, join_text, sanitize_description
from tests.fixtures.source_records import make_anidb_episode


class TestSanitizeDescription:
    """Tests du nettoyage des descriptions."""

    def test_links_are_replaced_by_their_label(self):
        text = "Based on the manga by http://anidb.net/cr123 [Yoshitoshi ABe]."

        assert sanitize_description(text) == "Based on the manga by Yoshitoshi ABe."

    def test_links_become_markdown_when_enabled(self):
        text = "By http://anidb.net/cr123 [Author]."

        assert sanitize_description(text, enable_markdown=True) == "By [Author](http://anidb.net/cr123)."

    def test_links_kept_when_cleaning_disabled(self):
        text = "By http://anidb.net/cr123 [Author]."

        assert sanitize_description(text, clean_links=False) == text

    def test_misc_line_prefixes_are_removed(self):
        text = "* First line\n-- Second line\n~ Third line"

        assert sanitize_description(text) == "First line\nSecond line\nThird line"

    def test_summary_and_source_are_removed(self):
        text = "Summary: Spike hunts bounties. Source: ANN"

        assert sanitize_description(text) == "Spike hunts bounties."

    def test_summary_becomes_bold_with_markdown(self):
        text = "Note: Aired late."

        assert sanitize_description(text, enable_markdown=True) == "**Note**: Aired late."

    def test_multiple_empty_lines_are_merged(self):
        text = "First\r\n\r\n\r\nSecond"

        assert sanitize_description(text) == "First\nSecond"

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_empty_input_gives_empty_string(self, text):
        assert sanitize_description(text) == ""


class TestGetTitleForLanguage:
    """Tests de la selection d'un titre par langue."""

    def test_returns_first_non_empty_match(self):
        titles = [
            LocalizedText(value=" ", language_code="en"),
            LocalizedText(value="Cowboy Bebop", language_code="en"),
            LocalizedText(value="カウボーイビバップ", language_code="ja"),
        ]

        assert get_title_for_language(titles, "en") == "Cowboy Bebop"

    def test_missing_language_returns_none(self):
        assert get_title_for_language([LocalizedText(value="Bebop", language_code="en")], "fr") is None


class TestJoinText:
    """Tests de la jonction de textes."""

    def test_joins_with_period(self):
        assert join_text(["Part 1", "Part 2"]) == "Part 1. Part 2"

    def test_no_extra_period_after_punctuation(self):
        assert join_text(["Hello!", "World"]) == "Hello! World"

    def test_duplicates_and_empty_values_are_skipped(self):
        assert join_text(["Same", None, "", "Same", "Other"]) == "Same. Other"

    def test_nothing_to_join_returns_none(self):
        assert join_text([None, " "]) is None


class TestGetExtraType:
    """Tests de la detection du type de bonus."""

    def test_normal_episode_is_never_an_extra(self):
        assert get_extra_type(make_anidb_episode(title="Interview with the staff")) is None

    def test_trailer(self):
        assert get_extra_type(make_anidb_episode(episode_type=EpisodeType.TRAILER)) == ExtraType.TRAILER

    @pytest.mark.parametrize(
        "episode_type",
        [EpisodeType.THEME_SONG, EpisodeType.OPENING_SONG, EpisodeType.ENDING_SONG],
    )
    def test_songs_are_theme_videos(self, episode_type):
        assert get_extra_type(make_anidb_episode(episode_type=episode_type)) == ExtraType.THEME_VIDEO

    def test_parody_is_unknown_extra(self):
        assert get_extra_type(make_anidb_episode(episode_type=EpisodeType.PARODY)) == ExtraType.UNKNOWN

    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("Staff Interview", ExtraType.INTERVIEW),
            ("Cinema Intro", ExtraType.CLIP),
            ("Manners Movie", ExtraType.CLIP),
            ("Making of Cowboy Bebop", ExtraType.BEHIND_THE_SCENES),
            ("Talk Show Special", ExtraType.FEATURETTE),
            ("Session XX: Mish-Mash Blues", None),
        ],
    )
    def test_special_episode_title_rules(self, title, expected):
        episode = make_anidb_episode(episode_type=EpisodeType.SPECIAL, title=title)

        assert get_extra_type(episode) == expected

    def test_special_without_title_is_not_an_extra(self):
        assert get_extra_type(make_anidb_episode(episode_type=EpisodeType.OTHER, title="")) is None
