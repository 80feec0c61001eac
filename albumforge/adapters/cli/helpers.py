"""
Utilitaires partages pour les commandes CLI d'albumforge.

Ce module fournit :
- console : instance Rich Console partagee
- suppress_loguru : context manager pour desactiver/reactiver les logs loguru
- get_container : container initialise (base de donnees prete)
- slugify : identifiant lisible derive d'un titre
"""

import re
import unicodedata
from contextlib import contextmanager

from loguru import logger as loguru_logger
from rich.console import Console

from albumforge.container import Container

console = Console()


@contextmanager
def suppress_loguru():
    """
    Context manager pour desactiver les logs loguru pendant l'affichage Rich.

    Usage:
        with suppress_loguru():
            console.print(...)
    """
    loguru_logger.disable("albumforge")
    try:
        yield
    finally:
        loguru_logger.enable("albumforge")


def get_container(requires_db: bool = True) -> Container:
    """
    Cree un container, en initialisant la base de donnees si demande.

    Args:
        requires_db: Si True (defaut), cree les tables si necessaire.
    """
    container = Container()
    if requires_db:
        container.database.init()
    return container


def slugify(title: str) -> str:
    """
    Derive un slug d'un titre.

    Exemple : "Été à Lisbonne" -> "ete-a-lisbonne"
    """
    ascii_title = (
        unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode("ascii")
    )
    return re.sub(r"[^a-z0-9]+", "-", ascii_title.lower()).strip("-")
