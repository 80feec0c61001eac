"""
Configuration du logging de l'application via loguru.

Deux sorties :
- console : colorée, avec l'album concerné, pour suivre les uploads et suppressions
- fichier : JSON avec rotation, pour retrouver après coup les chemins legacy
  corrigés, les fichiers orphelins et les échecs de nettoyage

Les services attachent le contexte avec logger.bind(album_id=..., token=...).
"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>album={extra[album_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/albumforge.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
) -> None:
    """Configure le logging de l'application.

    Args :
        log_level : Niveau minimum pour la console (DEBUG, INFO, WARNING, ERROR)
        log_file : Chemin vers le fichier de log JSON
        rotation_size : Taille maximale du fichier avant rotation (ex: "10 MB")
        retention_count : Nombre de fichiers rotatifs à conserver
    """
    logger.remove()

    # Valeur par défaut pour les messages émis hors contexte d'album
    logger.configure(extra={"album_id": "-"})

    logger.add(
        sys.stderr,
        level=log_level,
        format=CONSOLE_FORMAT,
        colorize=True,
    )

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",  # Les rendus individuels sont tracés en DEBUG
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,  # Rendus parallèles : écriture depuis plusieurs threads
    )

    logger.debug("Logging configuré", log_file=str(log_file), rotation=rotation_size)
