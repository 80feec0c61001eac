"""
Interfaces ports pour les repositories.

Interfaces abstraites (ports) définissant les opérations « boîte noire » attendues
du collaborateur de persistance : compter les media d'un album, supprimer un
media, supprimer en masse les media d'un album, lire/écrire la couverture et le
compteur d'un album. Le collaborateur possède la forme des documents, les index
et l'exécution des requêtes.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Optional

from albumforge.core.entities.artifact import MediaType
from albumforge.core.entities.media import Album, Media


class IMediaRepository(ABC):
    """
    Interface de stockage des media.

    Définit les opérations pour persister et récupérer les entités Media.
    """

    @abstractmethod
    def get_by_id(self, media_id: str) -> Optional[Media]:
        """Récupère un media par son ID."""
        ...

    @abstractmethod
    def list_by_album(self, album_id: str) -> list[Media]:
        """Liste les media d'un album, triés par (order, uploaded_at)."""
        ...

    @abstractmethod
    def first_by_album(
        self, album_id: str, media_type: Optional[MediaType] = None
    ) -> Optional[Media]:
        """Retourne le premier media d'un album selon (order, uploaded_at), filtrable par type."""
        ...

    @abstractmethod
    def count_by_album(self, album_id: str) -> int:
        """Compte les media enregistrés pour un album."""
        ...

    @abstractmethod
    def list_all(self) -> list[Media]:
        """Liste tous les media (migration des chemins)."""
        ...

    @abstractmethod
    def save(self, media: Media) -> Media:
        """Sauvegarde un media (insertion ou mise à jour)."""
        ...

    @abstractmethod
    def update_content(self, media_id: str, changes: Mapping[str, Any]) -> Optional[Media]:
        """
        Met à jour les champs de contenu d'un media.

        Seuls caption, alt, tags, order et featured sont modifiables.

        Retourne :
            Le media mis à jour, ou None s'il n'existe pas
        """
        ...

    @abstractmethod
    def delete(self, media_id: str) -> bool:
        """Supprime un media par ID. Retourne True si supprimé."""
        ...

    @abstractmethod
    def delete_by_album(self, album_id: str) -> int:
        """Supprime tous les media d'un album. Retourne le nombre supprimé."""
        ...


class IAlbumRepository(ABC):
    """
    Interface de stockage des albums.

    Définit les opérations pour persister les albums et leurs agrégats.
    """

    @abstractmethod
    def get_by_id(self, album_id: str) -> Optional[Album]:
        """Récupère un album par son ID."""
        ...

    @abstractmethod
    def list_all(self) -> list[Album]:
        """Liste tous les albums."""
        ...

    @abstractmethod
    def save(self, album: Album) -> Album:
        """Sauvegarde un album (insertion ou mise à jour)."""
        ...

    @abstractmethod
    def set_cover(self, album_id: str, cover_image: str) -> bool:
        """Écrit le chemin de couverture. Retourne False si l'album n'existe pas."""
        ...

    @abstractmethod
    def set_media_count(self, album_id: str, count: int) -> bool:
        """Écrit le compteur de media. Retourne False si l'album n'existe pas."""
        ...

    @abstractmethod
    def delete(self, album_id: str) -> bool:
        """Supprime un album par ID. Retourne True si supprimé."""
        ...
