"""
Erreurs du domaine.

Hierarchie commune pour les echecs des operations unitaires (upload, generation,
resolution d'un album ou d'un media). Les operations multi-elements (suppression
en cascade, suppression groupee) ne levent pas : elles agregent leurs echecs
dans un resultat.
"""

from typing import Optional


class MediaError(Exception):
    """Erreur de base du pipeline media."""


class InputError(MediaError):
    """
    Octets source non supportes, corrompus ou trop volumineux.

    Levee avant toute ecriture sur le disque.
    """

    def __init__(self, message: str, filename: Optional[str] = None) -> None:
        self.filename = filename
        super().__init__(f"{filename}: {message}" if filename else message)


class GenerationError(MediaError):
    """
    Echec pendant le redimensionnement, l'encodage ou l'ecriture d'un derive.

    Les fichiers partiels du token concerne ont ete purges avant la levee.
    """

    def __init__(self, message: str, token: Optional[str] = None) -> None:
        self.token = token
        super().__init__(message)


class AlbumNotFoundError(MediaError):
    """L'album cible n'existe pas (ou plus)."""

    def __init__(self, album_id: str) -> None:
        self.album_id = album_id
        super().__init__(f"Album introuvable: {album_id}")


class MediaNotFoundError(MediaError):
    """Le media cible n'existe pas (ou plus)."""

    def __init__(self, media_id: str) -> None:
        self.media_id = media_id
        super().__init__(f"Media introuvable: {media_id}")
