"""
Regles de nommage et d'emplacement des fichiers media.

Ce module fournit :
- normalize_web_path : correction des chemins legacy prefixes par public/
- StorageLayout : conversion chemin disque <-> chemin web, repertoires d'album,
  espace de noms des couvertures carrees
- migrate_legacy_paths : reecriture des chemins legacy d'un lot de media
- format_bytes : affichage lisible d'une taille

Deux representations sont manipulees ici et doivent rester coherentes :
le chemin disque (pour les E/S, jamais persiste) et le chemin web
(persiste en base, toujours prefixe par /, jamais par public/).
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from pathlib import Path, PurePosixPath

from loguru import logger

from albumforge.core.entities.media import Media
from albumforge.core.ports.file_system import IFileSystem
from albumforge.core.value_objects.media_paths import NESTED_PATH_KEYS

# Prefixe legacy : d'anciens enregistrements stockaient le chemin relatif au projet
LEGACY_PREFIX = "public/"

UPLOADS_DIR = "uploads"
ALBUMS_DIR = "albums"
COVERS_DIR = "album-covers"

BYTE_UNITS: tuple[str, ...] = ("Bytes", "KB", "MB", "GB", "TB")


def normalize_web_path(path: str) -> str:
    """
    Normalise un chemin web.

    - "public/uploads/x.jpg" -> "/uploads/x.jpg"
    - "/uploads/x.jpg" -> inchange
    - "uploads/x.jpg" -> "/uploads/x.jpg"
    - "" -> "" (valeur absente)

    Idempotent : normalize_web_path(normalize_web_path(p)) == normalize_web_path(p).
    """
    if not path:
        return path
    if path.startswith(LEGACY_PREFIX):
        path = path[len(LEGACY_PREFIX):]
    if not path.startswith("/"):
        path = "/" + path
    return path


def is_legacy_path(path: str) -> bool:
    """Indique si un chemin persiste doit etre corrige."""
    return bool(path) and normalize_web_path(path) != path


def format_bytes(size: int) -> str:
    """
    Formate une taille en octets pour l'affichage.

    Exemples : 0 -> "0 Bytes", 1536 -> "1.5 KB", 1048576 -> "1 MB"
    """
    if size <= 0:
        return "0 Bytes"
    value = float(size)
    index = 0
    while value >= 1024 and index < len(BYTE_UNITS) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {BYTE_UNITS[index]}"


def _check_component(album_id: str) -> str:
    """Refuse un ID d'album qui sortirait de son repertoire."""
    album_id = str(album_id)
    if not album_id or album_id in (".", "..") or "/" in album_id or "\\" in album_id:
        raise ValueError(f"ID d'album invalide: {album_id!r}")
    return album_id


class StorageLayout:
    """
    Disposition des fichiers sous la racine publique.

    {racine}/uploads/albums/{albumId}/original-{token}.jpg
    {racine}/uploads/albums/{albumId}/{taille}-{token}.jpg|.webp
    {racine}/uploads/albums/{albumId}/video-{token}{ext}
    {racine}/uploads/album-covers/{albumId}.jpg

    Utilisation :
        layout = StorageLayout(Path("public"), FileSystemAdapter())
        fs_path = layout.to_fs_path("/uploads/albums/42/medium-abc.jpg")
    """

    def __init__(self, public_root: Path, file_system: IFileSystem) -> None:
        """
        Args :
            public_root : Racine publique servie par le site
            file_system : Adaptateur systeme de fichiers
        """
        self._root = Path(public_root)
        self._fs = file_system

    @property
    def public_root(self) -> Path:
        return self._root

    def album_dir(self, album_id: str) -> Path:
        """Repertoire disque d'un album."""
        return self._root / UPLOADS_DIR / ALBUMS_DIR / _check_component(album_id)

    def album_web_dir(self, album_id: str) -> str:
        """Repertoire web d'un album (ex: /uploads/albums/42)."""
        return f"/{UPLOADS_DIR}/{ALBUMS_DIR}/{_check_component(album_id)}"

    def ensure_album_dir(self, album_id: str) -> Path:
        """Cree le repertoire de l'album (idempotent, sur pour des uploads concurrents)."""
        return self._fs.ensure_dir(self.album_dir(album_id))

    def artifact_filename(self, kind: str, token: str, extension: str) -> str:
        """Nom d'un fichier produit : {kind}-{token}{extension}."""
        return f"{kind}-{token}{extension}"

    def artifact_fs_path(self, album_id: str, filename: str) -> Path:
        return self.album_dir(album_id) / filename

    def artifact_web_path(self, album_id: str, filename: str) -> str:
        return f"{self.album_web_dir(album_id)}/{filename}"

    def cover_fs_path(self, album_id: str) -> Path:
        """Chemin disque de la couverture carree generee."""
        return self._root / UPLOADS_DIR / COVERS_DIR / f"{_check_component(album_id)}.jpg"

    def cover_web_path(self, album_id: str) -> str:
        return f"/{UPLOADS_DIR}/{COVERS_DIR}/{_check_component(album_id)}.jpg"

    def to_web_path(self, fs_path: Path) -> str:
        """
        Convertit un chemin disque sous la racine en chemin web.

        Raises :
            ValueError : Si le chemin est hors de la racine publique
        """
        relative = Path(fs_path).relative_to(self._root)
        return "/" + relative.as_posix()

    def to_fs_path(self, web_path: str) -> Path:
        """
        Convertit un chemin web (eventuellement legacy) en chemin disque.

        Raises :
            ValueError : Si le chemin est vide ou sort de la racine publique
        """
        normalized = normalize_web_path(web_path)
        if not normalized:
            raise ValueError("Chemin web vide")
        parts = PurePosixPath(normalized).parts[1:]
        if not parts or any(part == ".." for part in parts):
            raise ValueError(f"Chemin hors de la racine publique: {web_path}")
        return self._root.joinpath(*parts)

    def is_album_dir_empty(self, album_id: str) -> bool:
        """Un repertoire absent est considere vide."""
        try:
            return not self._fs.list_dir(self.album_dir(album_id))
        except FileNotFoundError:
            return True

    def remove_album_dir_if_empty(self, album_id: str) -> bool:
        """
        Supprime le repertoire de l'album s'il est vide.

        Un repertoire non vide (upload en cours, fichier orphelin) est conserve
        et signale. Retourne True si le repertoire a ete supprime.
        """
        directory = self.album_dir(album_id)
        try:
            entries = self._fs.list_dir(directory)
        except FileNotFoundError:
            return False

        if entries:
            logger.bind(album_id=album_id).warning(
                f"Repertoire non vide conserve: {directory} ({len(entries)} fichier(s))"
            )
            return False

        removed = self._fs.remove_empty_dir(directory)
        if removed:
            logger.bind(album_id=album_id).info(f"Repertoire supprime: {directory}")
        else:
            logger.bind(album_id=album_id).warning(
                f"Repertoire rempli pendant la suppression, conserve: {directory}"
            )
        return removed

    def album_storage_size(self, album_id: str) -> int:
        """Taille cumulee des fichiers du repertoire de l'album (0 si absent)."""
        try:
            entries = self._fs.list_dir(self.album_dir(album_id))
        except FileNotFoundError:
            return 0
        return sum(self._fs.get_size(entry) for entry in entries)


@dataclass
class PathMigrationReport:
    """
    Resultat d'une migration des chemins legacy.

    Attributs :
        total : Nombre de media examines
        fixed_count : Media dont au moins un chemin a ete reecrit
        already_correct_count : Media deja conformes
        fixed : Copies corrigees des media a persister
        albums_fixed : Couvertures d'album reecrites
    """

    total: int = 0
    fixed_count: int = 0
    already_correct_count: int = 0
    fixed: list[Media] = field(default_factory=list)
    albums_fixed: int = 0


def _normalize_file_sizes(file_sizes: dict) -> dict:
    normalized = {}
    for name, entry in file_sizes.items():
        if isinstance(entry, dict):
            entry = dict(entry)
            for key in NESTED_PATH_KEYS:
                if isinstance(entry.get(key), str):
                    entry[key] = normalize_web_path(entry[key])
        normalized[name] = entry
    return normalized


def _legacy_values(media: Media) -> list[str]:
    values = [media.url, media.optimized, media.thumbnail]
    for entry in media.file_sizes.values():
        if isinstance(entry, dict):
            values.extend(str(entry[key]) for key in NESTED_PATH_KEYS if entry.get(key))
    return [value for value in values if is_legacy_path(value)]


def migrate_legacy_paths(records: Iterable[Media]) -> PathMigrationReport:
    """
    Reecrit les chemins legacy d'un lot de media.

    Examine les champs plats (url, optimized, thumbnail) et les chemins
    imbriques (file_sizes.{taille}.path / .webpPath). Les entites d'origine
    ne sont pas modifiees : les copies corrigees sont dans report.fixed.
    Un enregistrement deja conforme n'est jamais une erreur.
    """
    report = PathMigrationReport()

    for media in records:
        report.total += 1
        legacy = _legacy_values(media)
        if not legacy:
            report.already_correct_count += 1
            continue

        for value in legacy:
            logger.bind(album_id=media.album_id).warning(
                f"Chemin legacy corrige (media {media.id}): {value}"
            )

        report.fixed.append(
            replace(
                media,
                url=normalize_web_path(media.url),
                optimized=normalize_web_path(media.optimized),
                thumbnail=normalize_web_path(media.thumbnail),
                file_sizes=_normalize_file_sizes(media.file_sizes),
            )
        )
        report.fixed_count += 1

    return report
