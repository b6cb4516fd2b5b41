"""
Business entities representing core domain concepts.

Source records are the passive per-source view of an entity, entity infos
are the canonical records synthesized from them, and library items are
the mutable host items the infos are applied onto.

Exports:
- EpisodeInfo, SeasonInfo, CollectionInfo, FileInfo: Canonical records
- PersonInfo: Synthesized staff entry
- LibraryItem: Host library item
"""

from src.core.entities.entity_info import (
    CollectionInfo,
    EpisodeInfo,
    ExtraType,
    FileInfo,
    PersonInfo,
    PersonKind,
    ResolvedEpisode,
    SeasonInfo,
    StructureType,
)
from src.core.entities.library import ItemKind, LibraryItem, MetadataField

__all__ = [
    "CollectionInfo",
    "EpisodeInfo",
    "ExtraType",
    "FileInfo",
    "PersonInfo",
    "PersonKind",
    "ResolvedEpisode",
    "SeasonInfo",
    "StructureType",
    "ItemKind",
    "LibraryItem",
    "MetadataField",
]
