"""
Generation des fichiers derives d'un upload.

Ce module transforme les octets d'un upload en un ArtifactSet complet :
- original oriente selon l'EXIF, sans EXIF : original-{token}.jpg
- thumbnail, medium et full, chacun en JPEG et WebP : {taille}-{token}.jpg|.webp

Soit 7 fichiers pour une image. La generation est tout-ou-rien : au moindre
echec, tous les fichiers prevus pour le token sont supprimes avant que
l'erreur ne remonte, et rien n'est ecrit en base.

Les videos sont stockees telles quelles (video-{token}{ext}), sans transcodage.
"""

import secrets
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Optional

from loguru import logger

from albumforge.core.entities.artifact import (
    ArtifactSet,
    MediaMetadata,
    MediaType,
    OriginalArtifact,
    SizeArtifact,
)
from albumforge.core.errors import GenerationError, InputError
from albumforge.core.ports.file_system import IFileSystem
from albumforge.core.ports.imaging import IImageRenderer
from albumforge.core.value_objects.size_preset import (
    DERIVATIVE_ENCODINGS,
    SIZE_PRESETS,
    Encoding,
    SizePreset,
)
from albumforge.services.storage_layout import StorageLayout

# Extensions acceptees (le decodage effectif est verifie par le sondage)
IMAGE_EXTENSIONS: frozenset[str] = frozenset({
    ".jpeg", ".jpg", ".png", ".gif", ".webp", ".heic", ".heif"
})
VIDEO_EXTENSIONS: frozenset[str] = frozenset({
    ".mp4", ".mov", ".avi", ".webm", ".mkv"
})

ORIGINAL_KIND = "original"
VIDEO_KIND = "video"

DEFAULT_MAX_IMAGE_BYTES = 10 * 1024 * 1024
DEFAULT_MAX_VIDEO_BYTES = 100 * 1024 * 1024


def new_upload_token() -> str:
    """
    Token unique d'un upload : {timestamp_ms}-{32 caracteres hex}.

    Partage par tous les fichiers d'un meme upload.
    """
    return f"{int(time.time() * 1000)}-{secrets.token_hex(16)}"


def file_extension(filename: str) -> str:
    """Extension en minuscules avec le point ('' si absente)."""
    return PurePath(filename or "").suffix.lower()


def is_video_filename(filename: str) -> bool:
    return file_extension(filename) in VIDEO_EXTENSIONS


@dataclass(frozen=True)
class RenderJob:
    """
    Un fichier a produire.

    Attributs :
        kind : 'original' ou nom du preset
        encoding : Encodage de sortie
        preset : Preset de taille (None pour l'original)
        fs_path : Chemin disque de destination
        web_path : Chemin web persiste
    """

    kind: str
    encoding: Encoding
    preset: Optional[SizePreset]
    fs_path: Path
    web_path: str


@dataclass(frozen=True)
class WrittenFile:
    """Fichier ecrit : dimensions de l'image encodee et taille sur disque."""

    job: RenderJob
    width: int
    height: int
    byte_size: int


class DerivativeGenerator:
    """
    Generateur tout-ou-rien des derives d'un upload.

    Les 7 rendus (decodage, redimensionnement, encodage, ecriture) sont
    independants : ils s'executent en sequence, ou en parallele sur un
    ThreadPoolExecutor si max_workers > 1. Dans les deux cas, le nettoyage
    d'un echec ne commence qu'une fois tous les rendus lances termines.

    Utilisation :
        generator = DerivativeGenerator(renderer, file_system, layout)
        artifacts = generator.generate(raw, "photo.jpg", album_id="42")
        print(artifacts.path_for("medium"))
    """

    def __init__(
        self,
        renderer: IImageRenderer,
        file_system: IFileSystem,
        layout: StorageLayout,
        jpeg_quality: int = 85,
        webp_quality: int = 85,
        original_quality: int = 95,
        max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
        max_video_bytes: int = DEFAULT_MAX_VIDEO_BYTES,
        max_workers: int = 1,
    ) -> None:
        self._renderer = renderer
        self._fs = file_system
        self._layout = layout
        self._qualities = {
            Encoding.JPEG: jpeg_quality,
            Encoding.WEBP: webp_quality,
        }
        self._original_quality = original_quality
        self._max_image_bytes = max_image_bytes
        self._max_video_bytes = max_video_bytes
        self._max_workers = max(1, max_workers)

    def generate(self, raw: bytes, original_filename: str, album_id: str) -> ArtifactSet:
        """
        Produit l'original et les 6 derives d'une image.

        Args :
            raw : Octets source
            original_filename : Nom de fichier fourni a l'upload
            album_id : Album de rattachement

        Retourne :
            L'ArtifactSet complet (tous les fichiers existent sur disque)

        Raises :
            InputError : Source vide, trop volumineuse, de type non supporte
                ou non decodable (aucun fichier ecrit)
            GenerationError : Echec d'un rendu ou d'une ecriture (fichiers du
                token supprimes avant la levee)
        """
        self._check_input(raw, original_filename, IMAGE_EXTENSIONS, self._max_image_bytes)

        try:
            metadata = self._renderer.probe(raw)
        except InputError as e:
            raise InputError(str(e), original_filename) from e

        token = new_upload_token()
        log = logger.bind(album_id=album_id, token=token)
        self._prepare_album_dir(album_id, token)

        jobs = self._plan_jobs(album_id, token)
        written = self._run_jobs(raw, jobs, token, log)

        by_kind: dict[tuple[str, Encoding], WrittenFile] = {
            (item.job.kind, item.job.encoding): item for item in written
        }
        original = by_kind[(ORIGINAL_KIND, Encoding.JPEG)]
        sizes: dict[str, SizeArtifact] = {}
        for preset in SIZE_PRESETS:
            jpeg = by_kind[(preset.name, Encoding.JPEG)]
            webp = by_kind[(preset.name, Encoding.WEBP)]
            sizes[preset.name] = SizeArtifact(
                path=jpeg.job.web_path,
                webp_path=webp.job.web_path,
                width=jpeg.width,
                height=jpeg.height,
                byte_size=jpeg.byte_size,
                webp_byte_size=webp.byte_size,
            )

        log.info(f"{len(written)} fichiers generes pour {original_filename}")
        return ArtifactSet(
            token=token,
            album_id=album_id,
            media_type=MediaType.IMAGE,
            original=OriginalArtifact(
                path=original.job.web_path,
                width=original.width,
                height=original.height,
                byte_size=original.byte_size,
            ),
            sizes=sizes,
            metadata=metadata,
            original_filename=original_filename,
        )

    def store_video(self, raw: bytes, original_filename: str, album_id: str) -> ArtifactSet:
        """
        Stocke une video telle quelle (aucun transcodage).

        Raises :
            InputError : Fichier vide, trop volumineux ou d'extension non supportee
            GenerationError : Echec de l'ecriture (fichier supprime avant la levee)
        """
        self._check_input(raw, original_filename, VIDEO_EXTENSIONS, self._max_video_bytes)

        extension = file_extension(original_filename)
        token = new_upload_token()
        log = logger.bind(album_id=album_id, token=token)
        self._prepare_album_dir(album_id, token)

        filename = self._layout.artifact_filename(VIDEO_KIND, token, extension)
        fs_path = self._layout.artifact_fs_path(album_id, filename)
        try:
            self._fs.write_bytes(fs_path, raw)
        except Exception as e:
            self._cleanup([fs_path], token, log)
            raise GenerationError(f"Echec de l'ecriture de la video: {e}", token) from e

        log.info(f"Video stockee: {filename}")
        return ArtifactSet(
            token=token,
            album_id=album_id,
            media_type=MediaType.VIDEO,
            original=OriginalArtifact(
                path=self._layout.artifact_web_path(album_id, filename),
                width=None,
                height=None,
                byte_size=self._fs.get_size(fs_path),
            ),
            metadata=MediaMetadata(format=extension.lstrip(".")),
            original_filename=original_filename,
        )

    def _check_input(
        self,
        raw: bytes,
        filename: str,
        extensions: frozenset[str],
        max_bytes: int,
    ) -> None:
        """Validations prealables a toute ecriture."""
        if not raw:
            raise InputError("Fichier vide", filename)

        extension = file_extension(filename)
        if extension and extension not in extensions:
            raise InputError(f"Type de fichier non supporte: {extension}", filename)

        if len(raw) > max_bytes:
            raise InputError(
                f"Fichier trop volumineux ({len(raw)} octets, maximum {max_bytes})",
                filename,
            )

    def _prepare_album_dir(self, album_id: str, token: str) -> None:
        try:
            self._layout.ensure_album_dir(album_id)
        except OSError as e:
            raise GenerationError(f"Impossible de creer le repertoire de l'album: {e}", token) from e

    def _plan_jobs(self, album_id: str, token: str) -> list[RenderJob]:
        """Liste ordonnee des 7 fichiers a produire : original puis chaque taille."""
        jobs = [self._job(album_id, token, ORIGINAL_KIND, Encoding.JPEG, None)]
        for preset in SIZE_PRESETS:
            for encoding in DERIVATIVE_ENCODINGS:
                jobs.append(self._job(album_id, token, preset.name, encoding, preset))
        return jobs

    def _job(
        self,
        album_id: str,
        token: str,
        kind: str,
        encoding: Encoding,
        preset: Optional[SizePreset],
    ) -> RenderJob:
        filename = self._layout.artifact_filename(kind, token, encoding.extension)
        return RenderJob(
            kind=kind,
            encoding=encoding,
            preset=preset,
            fs_path=self._layout.artifact_fs_path(album_id, filename),
            web_path=self._layout.artifact_web_path(album_id, filename),
        )

    def _render(self, raw: bytes, job: RenderJob) -> WrittenFile:
        """Un rendu complet : decodage, redimensionnement, encodage, ecriture."""
        if job.preset is None:
            rendered = self._renderer.render_original(raw, self._original_quality)
        else:
            rendered = self._renderer.render_variant(
                raw, job.preset, job.encoding, self._qualities[job.encoding]
            )
        self._fs.write_bytes(job.fs_path, rendered.data)
        return WrittenFile(
            job=job,
            width=rendered.width,
            height=rendered.height,
            byte_size=self._fs.get_size(job.fs_path),
        )

    def _run_jobs(self, raw: bytes, jobs: list[RenderJob], token: str, log) -> list[WrittenFile]:
        """
        Execute les rendus et garantit le tout-ou-rien.

        En cas d'echec, tous les chemins prevus sont supprimes puis une unique
        GenerationError est levee avec la premiere erreur comme cause.
        """
        failure: Optional[tuple[RenderJob, Exception]] = None
        written: list[WrittenFile] = []

        if self._max_workers == 1:
            for job in jobs:
                try:
                    written.append(self._render(raw, job))
                except Exception as e:
                    failure = (job, e)
                    break
        else:
            # La sortie du bloc attend la fin de tous les rendus soumis
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                futures = [(job, pool.submit(self._render, raw, job)) for job in jobs]
            for job, future in futures:
                error = future.exception()
                if error is None:
                    written.append(future.result())
                elif failure is None:
                    failure = (job, error)

        if failure is not None:
            job, error = failure
            log.error(f"Echec du rendu {job.fs_path.name}: {error}")
            self._cleanup([planned.fs_path for planned in jobs], token, log)
            raise GenerationError(
                f"Echec de la generation de {job.kind} ({job.encoding.value}): {error}",
                token,
            ) from error

        for item in written:
            log.debug(
                f"Ecrit {item.job.fs_path.name} ({item.width}x{item.height}, {item.byte_size} octets)"
            )
        return written

    def _cleanup(self, paths: list[Path], token: str, log) -> None:
        """
        Supprime les fichiers prevus pour un token (best-effort).

        Les echecs de suppression sont journalises et ne masquent jamais
        l'erreur d'origine.
        """
        removed = 0
        for path in paths:
            try:
                if self._fs.delete(path):
                    removed += 1
            except OSError as e:
                log.error(f"Nettoyage impossible de {path}: {e}")
        log.warning(f"Generation annulee, {removed} fichier(s) supprime(s) pour le token {token}")
