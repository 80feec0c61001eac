"""
Cycle de vie des media d'un album.

Ce module orchestre :
- la creation (generation des derives puis persistance, jamais l'inverse)
- la suppression d'un media (fichiers d'abord, enregistrement ensuite)
- la suppression en cascade d'un album
- le maintien des agregats (compteur recalcule par comptage, couverture)

Aucun verrou ni transaction : la coherence repose sur l'ecriture
tout-ou-rien des derives avant tout enregistrement et sur la suppression
du repertoire d'album uniquement lorsqu'il est verifie vide.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from loguru import logger

from albumforge.core.entities.artifact import ArtifactSet
from albumforge.core.entities.media import CONTENT_FIELDS, AlbumAggregate, Media
from albumforge.core.errors import AlbumNotFoundError, MediaError, MediaNotFoundError
from albumforge.core.ports.file_system import IFileSystem
from albumforge.core.ports.repositories import IAlbumRepository, IMediaRepository
from albumforge.core.value_objects.media_paths import file_paths
from albumforge.services.cover_selector import CoverSelector
from albumforge.services.derivative_generator import DerivativeGenerator, is_video_filename
from albumforge.services.storage_layout import StorageLayout, normalize_web_path


class UploadState(str, Enum):
    """
    Etat d'un upload.

    PENDING: recu, rien n'est encore ecrit
    GENERATING: derives en cours d'ecriture
    COMPLETE: fichiers ecrits et enregistrement persiste (terminal)
    FAILED: echec, aucun fichier ni enregistrement ne subsiste (terminal)
    """

    PENDING = "pending"
    GENERATING = "generating"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass
class UploadResult:
    """
    Resultat d'un upload.

    Attributs :
        filename : Nom de fichier fourni
        state : Etat final (COMPLETE ou FAILED)
        media : Media persiste (si succes)
        error : Message d'erreur (si echec)
    """

    filename: str
    state: UploadState = UploadState.PENDING
    media: Optional[Media] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.state is UploadState.COMPLETE


@dataclass
class BatchUploadResult:
    """Resultats d'un upload multiple, dans l'ordre des fichiers fournis."""

    album_id: str
    results: list[UploadResult] = field(default_factory=list)

    @property
    def uploaded(self) -> list[Media]:
        return [result.media for result in self.results if result.success and result.media]

    @property
    def errors(self) -> list[str]:
        return [f"{result.filename}: {result.error}" for result in self.results if not result.success]


@dataclass
class MediaDeletionResult:
    """
    Resultat de la suppression d'un media.

    Attributs :
        media_id : Media supprime
        album_id : Album de rattachement
        files_deleted : Fichiers effectivement supprimes
        file_errors : Fichiers dont la suppression a echoue
        cover_changed : La couverture de l'album a ete remplacee ou videe
    """

    media_id: str
    album_id: str
    files_deleted: int = 0
    file_errors: list[str] = field(default_factory=list)
    cover_changed: bool = False


@dataclass
class BulkDeleteResult:
    """Resultat agrege d'une suppression groupee."""

    deleted_count: int = 0
    files_deleted: int = 0
    not_found: list[str] = field(default_factory=list)
    file_errors: list[str] = field(default_factory=list)


@dataclass
class CascadeDeleteResult:
    """
    Resultat de la suppression d'un album et de tous ses media.

    Attributs :
        album_id : Album cible
        found : L'album existait
        media_deleted_count : Enregistrements media supprimes
        files_deleted_count : Fichiers supprimes
        file_deletion_error_count : Fichiers dont la suppression a echoue
        directory_removed : Le repertoire de l'album a ete supprime (il etait vide)
        square_cover_deleted : La couverture carree generee a ete supprimee
        errors : Details des echecs de suppression
    """

    album_id: str
    found: bool = False
    media_deleted_count: int = 0
    files_deleted_count: int = 0
    file_deletion_error_count: int = 0
    directory_removed: bool = False
    square_cover_deleted: bool = False
    errors: list[str] = field(default_factory=list)


class LifecycleManager:
    """
    Creation et suppression des media avec agregats autoritatifs.

    Utilisation :
        manager = LifecycleManager(media_repo, album_repo, generator, covers, layout, fs)
        result = manager.create_artifacts(raw, "photo.jpg", album_id="42", caption="Plage")
        manager.delete_album_cascade("42")
    """

    def __init__(
        self,
        media_repo: IMediaRepository,
        album_repo: IAlbumRepository,
        generator: DerivativeGenerator,
        cover_selector: CoverSelector,
        layout: StorageLayout,
        file_system: IFileSystem,
    ) -> None:
        self._media_repo = media_repo
        self._album_repo = album_repo
        self._generator = generator
        self._covers = cover_selector
        self._layout = layout
        self._fs = file_system

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_artifacts(
        self,
        raw: bytes,
        original_filename: str,
        album_id: str,
        **content: Any,
    ) -> UploadResult:
        """
        Genere les fichiers d'un upload puis persiste le media.

        Args :
            raw : Octets source
            original_filename : Nom de fichier fourni
            album_id : Album cible
            **content : caption, alt, tags, order, featured

        Retourne :
            UploadResult a l'etat COMPLETE

        Raises :
            AlbumNotFoundError : Album absent, ou supprime pendant la generation
                (les fichiers produits sont alors supprimes)
            InputError : Source refusee (aucun fichier ecrit)
            GenerationError : Echec de la generation (fichiers du token supprimes)
        """
        result = UploadResult(filename=original_filename)
        self._upload(result, raw, original_filename, album_id, content)
        return result

    def upload_many(
        self,
        files: Iterable[tuple[str, bytes]],
        album_id: str,
        tags: Iterable[str] = (),
    ) -> BatchUploadResult:
        """
        Upload de plusieurs fichiers ; chaque fichier recoit order = son index.

        Un echec n'interrompt pas les fichiers suivants : il est reporte dans
        le resultat du fichier concerne.
        """
        batch = BatchUploadResult(album_id=album_id)
        tags = tuple(tags)

        for index, (filename, raw) in enumerate(files):
            result = UploadResult(filename=filename)
            try:
                self._upload(result, raw, filename, album_id, {"order": index, "tags": tags})
            except MediaError as e:
                result.state = UploadState.FAILED
                result.error = str(e)
                logger.bind(album_id=album_id).warning(f"Upload refuse {filename}: {e}")
            batch.results.append(result)

        logger.bind(album_id=album_id).info(
            f"Upload multiple: {len(batch.uploaded)}/{len(batch.results)} fichier(s) ajoute(s)"
        )
        return batch

    def _upload(
        self,
        result: UploadResult,
        raw: bytes,
        filename: str,
        album_id: str,
        content: Mapping[str, Any],
    ) -> None:
        self._check_content(content)
        if self._album_repo.get_by_id(album_id) is None:
            raise AlbumNotFoundError(album_id)

        result.state = UploadState.GENERATING
        if is_video_filename(filename):
            artifacts = self._generator.store_video(raw, filename, album_id)
        else:
            artifacts = self._generator.generate(raw, filename, album_id)

        # L'album a pu etre supprime pendant la generation
        album = self._album_repo.get_by_id(album_id)
        if album is None:
            self._discard(artifacts, "Album supprime pendant l'upload")
            raise AlbumNotFoundError(album_id)

        try:
            media = self._media_repo.save(self._build_media(artifacts, content))
        except Exception as e:
            self._discard(artifacts, f"Enregistrement du media impossible ({e})")
            raise
        count = self.refresh_media_count(album_id)

        if artifacts.is_image and not album.has_cover:
            self._album_repo.set_cover(album_id, media.optimized)
            logger.bind(album_id=album_id).info(f"Couverture definie: {media.optimized}")

        result.media = media
        result.state = UploadState.COMPLETE
        logger.bind(album_id=album_id).info(
            f"Media {media.id} ajoute ({filename}), {count} media dans l'album"
        )

    def _build_media(self, artifacts: ArtifactSet, content: Mapping[str, Any]) -> Media:
        """Construit l'enregistrement : forme imbriquee et champs plats."""
        if artifacts.is_image:
            optimized = artifacts.path_for("medium") or artifacts.original.path
            thumbnail = artifacts.path_for("thumbnail") or ""
        else:
            optimized = artifacts.original.path
            thumbnail = ""

        return Media(
            album_id=artifacts.album_id,
            media_type=artifacts.media_type,
            url=artifacts.original.path,
            optimized=optimized,
            thumbnail=thumbnail,
            file_sizes=artifacts.to_file_sizes(),
            metadata=artifacts.metadata,
            original_filename=artifacts.original_filename,
            caption=content.get("caption", ""),
            alt=content.get("alt", ""),
            tags=tuple(content.get("tags", ())),
            order=int(content.get("order", 0)),
            featured=bool(content.get("featured", False)),
        )

    def _discard(self, artifacts: ArtifactSet, reason: str) -> None:
        """Supprime les fichiers d'un upload rejete apres generation."""
        deleted, errors = self._delete_files(artifacts.all_paths(), artifacts.album_id)
        self._layout.remove_album_dir_if_empty(artifacts.album_id)
        logger.bind(album_id=artifacts.album_id, token=artifacts.token).warning(
            f"{reason}, {deleted} fichier(s) supprime(s)"
            + (f", {len(errors)} echec(s)" if errors else "")
        )

    # ------------------------------------------------------------------
    # Modification
    # ------------------------------------------------------------------

    def update_content(self, media_id: str, **changes: Any) -> Media:
        """
        Modifie les champs de contenu d'un media.

        Les chemins et derives ne sont jamais modifies en place.

        Raises :
            ValueError : Champ hors caption, alt, tags, order, featured
            MediaNotFoundError : Media absent
        """
        self._check_content(changes)
        media = self._media_repo.update_content(media_id, changes)
        if media is None:
            raise MediaNotFoundError(media_id)
        return media

    def replace_media(self, media_id: str, raw: bytes, original_filename: str) -> UploadResult:
        """
        Remplace le fichier d'un media : suppression puis recreation.

        Le nouveau media reprend l'album et les champs de contenu de l'ancien.

        Raises :
            MediaNotFoundError : Media absent
            InputError, GenerationError : Echec de la recreation
        """
        media = self._media_repo.get_by_id(media_id)
        if media is None:
            raise MediaNotFoundError(media_id)

        content = {
            "caption": media.caption,
            "alt": media.alt,
            "tags": media.tags,
            "order": media.order,
            "featured": media.featured,
        }
        self.delete_one(media_id)
        return self.create_artifacts(raw, original_filename, media.album_id, **content)

    def _check_content(self, content: Mapping[str, Any]) -> None:
        unknown = set(content) - CONTENT_FIELDS
        if unknown:
            raise ValueError(f"Champs non modifiables: {', '.join(sorted(unknown))}")

    # ------------------------------------------------------------------
    # Suppression
    # ------------------------------------------------------------------

    def delete_one(self, media_id: str) -> MediaDeletionResult:
        """
        Supprime un media : fichiers, enregistrement, puis agregats.

        Les fichiers deja absents ne sont pas des erreurs. Si le media etait
        la couverture de l'album, une nouvelle couverture est selectionnee.

        Raises :
            MediaNotFoundError : Media absent
        """
        media = self._media_repo.get_by_id(media_id)
        if media is None:
            raise MediaNotFoundError(media_id)

        album_id = media.album_id
        paths = file_paths(media.path_view)
        deleted, errors = self._delete_files(paths, album_id)

        self._media_repo.delete(media_id)
        self.refresh_media_count(album_id)

        result = MediaDeletionResult(
            media_id=media_id,
            album_id=album_id,
            files_deleted=deleted,
            file_errors=errors,
        )
        result.cover_changed = self._release_cover(album_id, media)

        logger.bind(album_id=album_id).info(
            f"Media {media_id} supprime ({deleted} fichier(s))"
        )
        return result

    def bulk_delete(self, media_ids: Iterable[str]) -> BulkDeleteResult:
        """Supprime plusieurs media ; les ID inconnus sont reportes, pas leves."""
        result = BulkDeleteResult()
        for media_id in media_ids:
            try:
                deletion = self.delete_one(media_id)
            except MediaNotFoundError:
                result.not_found.append(media_id)
                continue
            result.deleted_count += 1
            result.files_deleted += deletion.files_deleted
            result.file_errors.extend(deletion.file_errors)
        return result

    def delete_album_cascade(self, album_id: str) -> CascadeDeleteResult:
        """
        Supprime un album, ses media et leurs fichiers.

        Ne leve jamais pour un echec de fichier : les echecs sont comptes.
        Un album deja supprime donne found=False ; ses media residuels
        (cascade precedente interrompue) sont tout de meme supprimes.

        L'enregistrement de l'album est supprime en premier : un upload en
        cours qui verifie l'album avant de persister est alors refuse et
        nettoie ses propres fichiers. Le repertoire n'est supprime que s'il
        est vide ; sinon il est conserve et signale.
        """
        result = CascadeDeleteResult(album_id=album_id)
        log = logger.bind(album_id=album_id)

        if self._album_repo.get_by_id(album_id) is not None:
            result.found = True
            self._album_repo.delete(album_id)
        elif self._media_repo.count_by_album(album_id) == 0:
            log.info("Album deja supprime ou inexistant")
            return result
        else:
            log.warning("Album deja supprime, nettoyage des media residuels")

        for media in self._media_repo.list_by_album(album_id):
            deleted, errors = self._delete_files(file_paths(media.path_view), album_id)
            result.files_deleted_count += deleted
            result.file_deletion_error_count += len(errors)
            result.errors.extend(errors)

        result.media_deleted_count = self._media_repo.delete_by_album(album_id)

        try:
            result.square_cover_deleted = self._covers.delete_square_cover(album_id)
        except OSError as e:
            result.errors.append(f"{self._layout.cover_web_path(album_id)}: {e}")
            log.warning(f"Suppression de la couverture carree impossible: {e}")

        try:
            result.directory_removed = self._layout.remove_album_dir_if_empty(album_id)
        except OSError as e:
            result.errors.append(f"{self._layout.album_web_dir(album_id)}: {e}")
            log.warning(f"Suppression du repertoire impossible: {e}")

        log.info(
            f"Album supprime: {result.media_deleted_count} media, "
            f"{result.files_deleted_count} fichier(s), "
            f"{result.file_deletion_error_count} echec(s)"
        )
        return result

    def _delete_files(self, paths: Iterable[str], album_id: str) -> tuple[int, list[str]]:
        """
        Supprime une liste de fichiers designes par leur chemin web.

        Retourne (nombre supprime, erreurs). Un fichier absent n'est ni un
        succes ni une erreur.
        """
        deleted = 0
        errors: list[str] = []
        for web_path in paths:
            try:
                if self._fs.delete(self._layout.to_fs_path(web_path)):
                    deleted += 1
            except (OSError, ValueError) as e:
                errors.append(f"{web_path}: {e}")
                logger.bind(album_id=album_id).warning(f"Suppression impossible de {web_path}: {e}")
        return deleted, errors

    # ------------------------------------------------------------------
    # Agregats
    # ------------------------------------------------------------------

    def refresh_media_count(self, album_id: str) -> int:
        """Recalcule le nombre de media par comptage et l'ecrit sur l'album."""
        count = self._media_repo.count_by_album(album_id)
        self._album_repo.set_media_count(album_id, count)
        return count

    def _release_cover(self, album_id: str, media: Media) -> bool:
        """Vide puis reselectionne la couverture si elle pointait vers ce media."""
        album = self._album_repo.get_by_id(album_id)
        if album is None or not album.has_cover:
            return False

        owned = {normalize_web_path(path) for path in file_paths(media.path_view)}
        if normalize_web_path(album.cover_image) not in owned:
            return False

        self._album_repo.set_cover(album_id, "")
        self._covers.select_cover(album_id)
        return True

    def aggregate(self, album_id: str) -> AlbumAggregate:
        """
        Agregats autoritatifs d'un album.

        Raises :
            AlbumNotFoundError : Album absent
        """
        album = self._album_repo.get_by_id(album_id)
        if album is None:
            raise AlbumNotFoundError(album_id)

        return AlbumAggregate(
            album_id=album_id,
            cover_image_path=album.cover_image,
            total_media_count=self._media_repo.count_by_album(album_id),
            storage_directory=self._layout.album_web_dir(album_id),
            storage_size_bytes=self._layout.album_storage_size(album_id),
        )
