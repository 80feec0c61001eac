"""
Selection et generation de la couverture d'un album.

Deux operations :
- select_cover : choisit un chemin existant parmi les derives de la
  premiere image de l'album (aucun fichier produit)
- generate_square_cover : produit un carre 800x800 recadre au centre dans
  uploads/album-covers/{albumId}.jpg

La generation ne leve jamais : un media absent, un fichier source manquant
ou illisible donnent None (journalise).
"""

from typing import Optional

from loguru import logger

from albumforge.core.entities.artifact import MediaType
from albumforge.core.errors import AlbumNotFoundError, MediaError
from albumforge.core.ports.file_system import IFileSystem
from albumforge.core.ports.imaging import IImageRenderer
from albumforge.core.ports.repositories import IAlbumRepository, IMediaRepository
from albumforge.core.value_objects.media_paths import first_available, size_paths
from albumforge.services.storage_layout import StorageLayout, normalize_web_path

# Couverture affichee : taille d'affichage d'abord, puis repli legacy
SELECTION_CHAIN: tuple[str, ...] = ("medium", "thumbnail", "optimized", "original")

# Source du carre genere : la meilleure qualite disponible d'abord
SQUARE_SOURCE_CHAIN: tuple[str, ...] = ("full", "medium", "original", "optimized")

DEFAULT_COVER_SIZE = 800
DEFAULT_COVER_QUALITY = 85


class CoverSelector:
    """
    Choix et synthese de la couverture d'un album.

    Le premier media est celui de plus petit (order, uploaded_at) ; seules
    les images sont candidates.
    """

    def __init__(
        self,
        media_repo: IMediaRepository,
        album_repo: IAlbumRepository,
        layout: StorageLayout,
        file_system: IFileSystem,
        renderer: IImageRenderer,
        cover_size: int = DEFAULT_COVER_SIZE,
        quality: int = DEFAULT_COVER_QUALITY,
    ) -> None:
        self._media_repo = media_repo
        self._album_repo = album_repo
        self._layout = layout
        self._fs = file_system
        self._renderer = renderer
        self._cover_size = cover_size
        self._quality = quality

    def select_cover(self, album_id: str) -> Optional[str]:
        """
        Definit la couverture si l'album n'en a pas.

        Sans effet si une couverture est deja definie (elle est retournee).
        Sans media image, la couverture reste vide et None est retourne.

        Raises :
            AlbumNotFoundError : Si l'album n'existe pas
        """
        album = self._album_repo.get_by_id(album_id)
        if album is None:
            raise AlbumNotFoundError(album_id)
        if album.has_cover:
            return album.cover_image

        media = self._media_repo.first_by_album(album_id, MediaType.IMAGE)
        if media is None:
            logger.bind(album_id=album_id).debug("Aucune image, couverture non definie")
            return None

        path = first_available(size_paths(media.path_view), SELECTION_CHAIN)
        if path is None:
            logger.bind(album_id=album_id).warning(f"Media {media.id} sans chemin exploitable")
            return None

        cover = normalize_web_path(path)
        if cover != path:
            logger.bind(album_id=album_id).warning(f"Chemin legacy corrige pour la couverture: {path}")
        self._album_repo.set_cover(album_id, cover)
        logger.bind(album_id=album_id).info(f"Couverture selectionnee: {cover}")
        return cover

    def generate_square_cover(self, album_id: str) -> Optional[str]:
        """
        Genere la couverture carree de l'album (ecrase la precedente).

        Retourne :
            Le chemin web de la couverture, ou None en cas d'echec
        """
        log = logger.bind(album_id=album_id)
        try:
            media = self._media_repo.first_by_album(album_id, MediaType.IMAGE)
            if media is None:
                log.warning("Aucune image pour generer la couverture")
                return None

            source = first_available(size_paths(media.path_view), SQUARE_SOURCE_CHAIN)
            if source is None:
                log.warning(f"Media {media.id} sans chemin source")
                return None

            source_path = self._layout.to_fs_path(source)
            if not self._fs.exists(source_path):
                log.warning(f"Fichier source introuvable: {source_path}")
                return None

            rendered = self._renderer.render_square(
                self._fs.read_bytes(source_path), self._cover_size, self._quality
            )
            self._fs.write_bytes(self._layout.cover_fs_path(album_id), rendered.data)
        except (MediaError, OSError, ValueError) as e:
            log.error(f"Generation de la couverture impossible: {e}")
            return None

        cover = self._layout.cover_web_path(album_id)
        log.info(f"Couverture carree generee: {cover}")
        return cover

    def delete_square_cover(self, album_id: str) -> bool:
        """
        Supprime la couverture carree generee.

        Retourne False si elle n'existait pas.
        """
        removed = self._fs.delete(self._layout.cover_fs_path(album_id))
        if removed:
            logger.bind(album_id=album_id).info("Couverture carree supprimee")
        return removed
