"""
Resolution des references croisees fichier/episode.

Le CrossReferenceResolver deduplique les references par empreinte
(hash ED2K, taille), classe les episodes "entree principale", et choisit
les episodes a retenir pour un fichier parmi ceux qui le referencent.

L'absence de reference n'est jamais une erreur : un fichier sans
reference survivante est simplement indisponible.
"""

from typing import Iterable, Optional, Sequence

from loguru import logger

from src.core.entities.entity_info import ResolvedEpisode, StructureType
from src.core.entities.source_records import (
    AnidbEpisode,
    EpisodeCrossReference,
    FileCrossReference,
    ShokoFile,
)
from src.core.exceptions import CrossReferenceError
from src.utils.constants import EPISODE_PICK_ORDER, IGNORED_SUB_TITLES
from src.utils.text import get_title_for_language


def _pick_order_index(resolved: ResolvedEpisode) -> int:
    try:
        return EPISODE_PICK_ORDER.index(resolved.episode.type)
    except ValueError:
        return -1


def _group_key(resolved: ResolvedEpisode) -> tuple:
    """Cle de regroupement : (type, groupe de pourcentage, autonome)."""
    return (
        resolved.episode.type,
        resolved.cross_reference.percentage.group,
        resolved.episode.is_standalone,
    )


def _group_sort_key(group: list[ResolvedEpisode]) -> tuple:
    """
    Ordre des groupes : type (autre > normal > special), puis groupe de
    pourcentage croissant (None en premier), puis episodes autonomes d'abord.
    """
    first = group[0]
    percentage_group = first.cross_reference.percentage.group
    return (
        -_pick_order_index(first),
        percentage_group is not None,
        percentage_group or 0,
        not first.episode.is_standalone,
    )


def _episode_sort_key(resolved: ResolvedEpisode) -> tuple:
    season_number = resolved.episode.season_number
    return (season_number is not None, season_number or 0, resolved.episode.episode_number)


class CrossReferenceResolver:
    """
    Resolveur de references croisees.

    Sans etat : toutes les methodes sont deterministes et ne dependent que
    de leurs arguments.
    """

    @staticmethod
    def distinct(
        references: Iterable[EpisodeCrossReference],
    ) -> tuple[EpisodeCrossReference, ...]:
        """
        Deduplique des references par empreinte (hash, taille).

        La premiere reference rencontree pour une empreinte est conservee.
        """
        seen: set[tuple[str, int]] = set()
        result: list[EpisodeCrossReference] = []
        for reference in references:
            if reference.fingerprint in seen:
                continue
            seen.add(reference.fingerprint)
            result.append(reference)
        return tuple(result)

    def flatten(
        self, file_references: Iterable[FileCrossReference]
    ) -> tuple[EpisodeCrossReference, ...]:
        """Aplatit des references de fichiers (par serie) en references d'episodes uniques."""
        return self.distinct(
            episode_reference
            for file_reference in file_references
            for episode_reference in file_reference.episodes
        )

    @staticmethod
    def is_main_entry(episode: AnidbEpisode) -> bool:
        """
        True si le titre anglais de l'episode est un sous-titre generique
        ("Complete Movie", "OVA", ...), comparaison insensible a la casse.
        """
        title = get_title_for_language(episode.titles, "en")
        return title is not None and title.lower() in IGNORED_SUB_TITLES

    @classmethod
    def is_standalone(cls, episode: AnidbEpisode, has_tmdb_movie: bool) -> bool:
        """Un film TMDB lie prime sur l'heuristique d'entree principale."""
        return has_tmdb_movie or cls.is_main_entry(episode)

    @staticmethod
    def find_series_reference(file: ShokoFile, series_id: str) -> Optional[FileCrossReference]:
        """
        Trouve la reference du fichier pour une serie Shoko.

        Retourne :
            None si le fichier n'a aucune reference (indisponible)

        Raises :
            CrossReferenceError : Si le fichier a des references, mais aucune
                pour la serie demandee
        """
        if not file.cross_references:
            return None
        for file_reference in file.cross_references:
            if file_reference.series.shoko is None:
                continue
            if any(episode.shoko is None for episode in file_reference.episodes):
                continue
            if str(file_reference.series.shoko) == series_id:
                return file_reference
        raise CrossReferenceError(str(file.id), series_id)

    @staticmethod
    def default_series_id(file: ShokoFile) -> Optional[str]:
        """Serie Shoko par defaut d'un fichier : la premiere referencee."""
        for file_reference in file.cross_references:
            if file_reference.series.shoko is not None:
                return str(file_reference.series.shoko)
        return None

    def select_file_episodes(
        self,
        resolved: Sequence[ResolvedEpisode],
        structure_type: StructureType = StructureType.SHOKO_GROUPS,
    ) -> tuple[ResolvedEpisode, ...]:
        """
        Choisit les episodes a associer a un fichier.

        Les episodes caches sont ignores. En structure TMDB, les identifiants
        resolus sont dedupliques. Les episodes sont ensuite regroupes par
        (type, groupe de pourcentage, autonome) et le premier groupe selon
        l'ordre de selection est retenu, trie par saison puis episode.

        Retourne :
            Les episodes du groupe retenu (tuple vide si aucun)
        """
        candidates = [item for item in resolved if not item.episode.is_hidden]

        if structure_type == StructureType.TMDB_SERIES_AND_MOVIES:
            seen_ids: set[str] = set()
            unique: list[ResolvedEpisode] = []
            for item in candidates:
                if item.id in seen_ids:
                    continue
                seen_ids.add(item.id)
                unique.append(item)
            candidates = unique

        if not candidates:
            return ()

        groups: dict[tuple, list[ResolvedEpisode]] = {}
        for item in candidates:
            groups.setdefault(_group_key(item), []).append(item)

        selected = sorted(groups.values(), key=_group_sort_key)[0]
        logger.trace(
            f"Groupe retenu : {len(selected)}/{len(candidates)} episode(s) "
            f"(type={selected[0].episode.type.value})"
        )
        return tuple(sorted(selected, key=_episode_sort_key))

    def files_for_episode(
        self, episode_id: str, files: Iterable[ShokoFile]
    ) -> list[tuple[ShokoFile, EpisodeCrossReference]]:
        """
        Resolution inverse : fichiers contribuant a un episode Shoko.

        Un meme fichier physique (meme empreinte) n'est compte qu'une fois.
        """
        result: list[tuple[ShokoFile, EpisodeCrossReference]] = []
        seen: set[tuple[str, int]] = set()
        for file in files:
            for file_reference in file.cross_references:
                for reference in file_reference.episodes:
                    if reference.shoko is None or str(reference.shoko) != episode_id:
                        continue
                    if reference.fingerprint in seen:
                        continue
                    seen.add(reference.fingerprint)
                    result.append((file, reference))
        return result
