"""
Configuration de l'application via pydantic-settings.

La configuration est chargee depuis les variables d'environnement avec le prefixe ANIMETA_,
et peut optionnellement etre fournie via un fichier .env.

Les groupes imbriques utilisent le delimiteur "__".
Exemple : ANIMETA_METADATA_REFRESH__EPISODE="TITLES_AND_OVERVIEW|DATES"
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.value_objects.refresh_fields import RefreshField, TagSource

# Trouver le fichier .env a la racine du projet (parent de src/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class MetadataRefreshSettings(BaseModel):
    """Politique de rafraichissement des metadonnees.

    Les champs par type d'element acceptent un drapeau, un entier ou une
    chaine "A|B" (ex: "TITLES_AND_OVERVIEW|RECURSIVE").
    """

    # Inclure les episodes non diffuses (virtuels) dans le balayage
    update_unaired: bool = Field(default=False)
    # Fenetre de dates de diffusion consideree par le balayage
    auto_refresh_range_in_days: int = Field(default=7, ge=0, le=365)
    # Zone morte anti-rafraichissement apres un rafraichissement
    anti_refresh_dead_zone_in_hours: int = Field(default=24, ge=0, le=8760)
    # Au-dela, un element est rafraichi quelle que soit sa date de diffusion
    out_of_sync_in_days: int = Field(default=180, ge=0, le=730)

    collection: RefreshField = Field(default=RefreshField.LEGACY_REFRESH)
    movie: RefreshField = Field(default=RefreshField.LEGACY_REFRESH)
    series: RefreshField = Field(default=RefreshField.LEGACY_REFRESH)
    season: RefreshField = Field(default=RefreshField.LEGACY_REFRESH)
    episode: RefreshField = Field(default=RefreshField.LEGACY_REFRESH)
    video: RefreshField = Field(default=RefreshField.LEGACY_REFRESH)

    @field_validator("collection", "movie", "series", "season", "episode", "video", mode="before")
    @classmethod
    def parse_fields(cls, v) -> RefreshField:
        """Parse les groupes de champs depuis une chaine de configuration."""
        return RefreshField.parse(v)


class Settings(BaseSettings):
    """Parametres de l'application avec support des variables d'environnement.

    Tous les parametres peuvent etre surcharges via des variables d'environnement
    avec le prefixe ANIMETA_.
    Exemple : ANIMETA_LOG_LEVEL=DEBUG

    Les chemins sont automatiquement etendus (~ -> repertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="ANIMETA_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    # Base de donnees de la bibliotheque
    database_url: str = Field(default="sqlite:///animeta.db")

    # Rafraichissement
    metadata_refresh: MetadataRefreshSettings = Field(default_factory=MetadataRefreshSettings)

    # Sources TMDB des tags et des genres
    tag_sources: TagSource = Field(default=TagSource.TMDB_KEYWORDS | TagSource.TMDB_GENRES)
    genre_sources: TagSource = Field(default=TagSource.TMDB_GENRES)

    # Nettoyage des descriptions AniDB
    synopsis_clean_links: bool = Field(default=True)
    synopsis_clean_misc_lines: bool = Field(default=True)
    synopsis_remove_summary: bool = Field(default=True)
    synopsis_clean_multi_empty_lines: bool = Field(default=True)
    synopsis_enable_markdown: bool = Field(default=False)

    # Titre compose pour les fichiers couvrant plusieurs episodes
    title_add_for_multiple_episodes: bool = Field(default=True)

    # Inactivite avant signal de blocage (reinitialise les passes)
    usage_tracker_stalled_time_in_seconds: int = Field(default=60, ge=1)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de retention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/animeta.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("tag_sources", "genre_sources", mode="before")
    @classmethod
    def parse_tag_sources(cls, v) -> TagSource:
        """Parse les sources de tags depuis une chaine de configuration."""
        return TagSource.parse(v)

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Etend ~ vers le repertoire home dans les chemins."""
        return Path(v).expanduser()
