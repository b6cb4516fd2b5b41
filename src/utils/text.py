"""
Fonctions utilitaires de traitement de texte.

Ce module fournit :
- le nettoyage des descriptions AniDB (liens, lignes parasites, "Source:")
- la selection d'un titre pour une langue
- la jonction de plusieurs textes en un seul
- le calcul du type de bonus d'un episode AniDB
"""

import re
from typing import Iterable, Optional, Sequence

from src.core.entities.entity_info import ExtraType
from src.core.entities.source_records import AnidbEpisode, EpisodeType
from src.core.value_objects.texts import LocalizedText
from src.utils.constants import PUNCTUATION_MARKS

_CLEAN_LINKS = re.compile(r"(https?:\/\/\w+.\w+(?:\/?\w+)?) \[([^\]]+)\]")
_CLEAN_MISC_LINES = re.compile(r"^(\*|--|~)\s*", re.MULTILINE)
_REMOVE_SUMMARY = re.compile(r"\b(Note|Summary):\s*", re.DOTALL)
_REMOVE_SOURCE = re.compile(r"\bSource: [^ ]+", re.DOTALL)
_CONVERT_NEW_LINES = re.compile(r"\r\n|\r")
_CLEAN_MULTI_EMPTY_LINES = re.compile(r"\n{2,}")


def sanitize_description(
    text: Optional[str],
    *,
    clean_links: bool = True,
    clean_misc_lines: bool = True,
    remove_summary: bool = True,
    clean_multi_empty_lines: bool = True,
    enable_markdown: bool = False,
) -> str:
    """
    Nettoie une description AniDB.

    Exemple : "Based on http://anidb.net/cr123 [Author]." -> "Based on Author."

    Args:
        text: Description brute
        clean_links: Remplace les liens AniDB par leur libelle
        clean_misc_lines: Supprime les prefixes de ligne "*", "--" et "~"
        remove_summary: Supprime les mentions "Note:", "Summary:" et "Source: ..."
        clean_multi_empty_lines: Normalise les fins de ligne et fusionne les lignes vides
        enable_markdown: Produit des liens et du gras Markdown au lieu de texte brut

    Returns:
        La description nettoyee (chaine vide si l'entree est vide)
    """
    if not text or not text.strip():
        return ""

    if clean_links:
        if enable_markdown:
            text = _CLEAN_LINKS.sub(lambda m: f"[{m.group(2)}]({m.group(1)})", text)
        else:
            text = _CLEAN_LINKS.sub(lambda m: m.group(2), text)

    if clean_misc_lines:
        text = _CLEAN_MISC_LINES.sub("", text)

    if remove_summary:
        if enable_markdown:
            text = _REMOVE_SUMMARY.sub(lambda m: f"**{m.group(1)}**: ", text)
        else:
            text = _REMOVE_SUMMARY.sub("", text)
        text = _REMOVE_SOURCE.sub("", text)

    if clean_multi_empty_lines:
        text = _CONVERT_NEW_LINES.sub("\n", text)
        text = _CLEAN_MULTI_EMPTY_LINES.sub("\n", text)

    return text.strip()


def get_title_for_language(
    titles: Sequence[LocalizedText], language_code: str
) -> Optional[str]:
    """Retourne le premier titre non vide dans la langue demandee."""
    for title in titles:
        if title.language_code == language_code and title.value.strip():
            return title.value
    return None


def join_text(texts: Iterable[Optional[str]]) -> Optional[str]:
    """
    Joint plusieurs textes en un seul, sans doublon.

    Un ". " est insere entre deux textes sauf si le premier se termine
    deja par une ponctuation.
    """
    filtered: list[str] = []
    for text in texts:
        if text and text.strip() and text.strip() not in filtered:
            filtered.append(text.strip())

    if not filtered:
        return None

    output = filtered[0]
    for text in filtered[1:]:
        output += " " if output[-1] in PUNCTUATION_MARKS else ". "
        output += text
    return output.rstrip()


def get_extra_type(episode: AnidbEpisode) -> Optional[ExtraType]:
    """
    Determine le type de bonus d'un episode AniDB.

    Les episodes normaux ne sont jamais des bonus. Pour les episodes
    "autres" et speciaux, le titre anglais decide.
    """
    if episode.type == EpisodeType.NORMAL:
        return None
    if episode.type in (EpisodeType.THEME_SONG, EpisodeType.OPENING_SONG, EpisodeType.ENDING_SONG):
        return ExtraType.THEME_VIDEO
    if episode.type == EpisodeType.TRAILER:
        return ExtraType.TRAILER
    if episode.type not in (EpisodeType.OTHER, EpisodeType.SPECIAL):
        return ExtraType.UNKNOWN

    title = (get_title_for_language(episode.titles, "en") or "").lower()
    if not title:
        return None
    if "interview" in title:
        return ExtraType.INTERVIEW
    # Intro/outro des sorties cinema
    if (
        title.startswith(("cinema ", "theatrical "))
        and ("intro" in title or "outro" in title)
    ) or "manners movie" in title:
        return ExtraType.CLIP
    if any(
        keyword in title
        for keyword in ("behind the scenes", "making of", "music in", "advance screening", "premiere")
    ):
        return ExtraType.BEHIND_THE_SCENES
    if "talk show" in title:
        return ExtraType.FEATURETTE
    return None
