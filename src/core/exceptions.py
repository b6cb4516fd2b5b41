"""
Exceptions du domaine AniMeta.

L'absence de donnees (pas d'entite en amont, pas de reference croisee,
pas de resultat de metadonnees) n'est jamais une exception : elle est
representee par None ou un resultat negatif.
"""


class AniMetaError(Exception):
    """Exception de base de l'application."""


class CrossReferenceError(AniMetaError):
    """
    Levee quand un fichier ne reference pas la serie demandee.

    Attributes:
        file_id: Identifiant Shoko du fichier
        series_id: Identifiant Shoko de la serie demandee
    """

    def __init__(self, file_id: str, series_id: str) -> None:
        self.file_id = file_id
        self.series_id = series_id
        super().__init__(
            f"Aucune reference croisee pour la serie demandee (File={file_id},Series={series_id})"
        )


class InvalidRefreshFieldError(AniMetaError, ValueError):
    """Levee quand une configuration de champs a rafraichir est invalide."""
