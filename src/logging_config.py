"""
Configuration du logging via loguru.

Deux sorties :
- console (stderr) : coloree, pour suivre un balayage en direct
- fichier : JSON avec rotation, pour analyser les rafraichissements passes
"""

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from src.config import Settings


_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/animeta.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
) -> None:
    """Configure les handlers loguru.

    Args :
        log_level : Niveau minimum de la console (TRACE, DEBUG, INFO, WARNING, ERROR)
        log_file : Fichier de log JSON
        rotation_size : Taille avant rotation (ex: "10 MB")
        retention_count : Nombre de fichiers conserves

    Le fichier capture tout a partir de DEBUG : les champs modifies par
    chaque rafraichissement y sont journalises.
    """
    logger.remove()

    logger.add(sys.stderr, level=log_level, format=_CONSOLE_FORMAT, colorize=True)

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,  # Thread-safe
    )

    logger.debug("Logging configure", log_file=str(log_file), rotation=rotation_size)


def configure_logging_from_settings(settings: "Settings") -> None:
    """Configure le logging a partir des parametres de l'application."""
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )
