"""
Service de migration des chemins legacy.

Persiste la reecriture des chemins prefixes par public/ calculee par
migrate_legacy_paths, pour les media et pour les couvertures d'album.
"""

from loguru import logger

from albumforge.core.ports.repositories import IAlbumRepository, IMediaRepository
from albumforge.services.storage_layout import (
    PathMigrationReport,
    is_legacy_path,
    migrate_legacy_paths,
    normalize_web_path,
)


class PathMigrationService:
    """
    Correction en base des chemins legacy.

    Utilisation :
        service = PathMigrationService(media_repo, album_repo)
        report = service.run(dry_run=True)
        print(f"{report.fixed_count}/{report.total} media a corriger")
    """

    def __init__(self, media_repo: IMediaRepository, album_repo: IAlbumRepository) -> None:
        self._media_repo = media_repo
        self._album_repo = album_repo

    def run(self, dry_run: bool = False) -> PathMigrationReport:
        """
        Analyse tous les media et albums, et corrige les chemins legacy.

        Args :
            dry_run : Si True, calcule le rapport sans rien ecrire

        Retourne :
            Le rapport de migration (les compteurs sont identiques en dry-run)
        """
        report = migrate_legacy_paths(self._media_repo.list_all())

        for album in self._album_repo.list_all():
            if is_legacy_path(album.cover_image):
                logger.bind(album_id=album.id).warning(
                    f"Couverture legacy corrigee: {album.cover_image}"
                )
                report.albums_fixed += 1
                if not dry_run:
                    self._album_repo.set_cover(album.id, normalize_web_path(album.cover_image))

        if not dry_run:
            for media in report.fixed:
                self._media_repo.save(media)

        mode = "simulation" if dry_run else "migration"
        logger.info(
            f"Chemins legacy ({mode}): {report.fixed_count}/{report.total} media, "
            f"{report.albums_fixed} couverture(s)"
        )
        return report
