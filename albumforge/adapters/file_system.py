"""
Adaptateur pour les operations sur le systeme de fichiers.

Implementation concrete de IFileSystem pour les operations fichiers reelles.
Les ecritures passent par un fichier temporaire renomme avec os.replace,
de sorte qu'un derive n'est jamais visible a moitie ecrit.
"""

import errno
import os
import uuid
from pathlib import Path

from albumforge.core.ports.file_system import IFileSystem


class FileSystemAdapter(IFileSystem):
    """
    Implementation de IFileSystem pour le systeme de fichiers reel.

    Fournit les operations basiques sur les fichiers (exists, write, delete)
    ainsi que la gestion des repertoires d'album.
    """

    def exists(self, path: Path) -> bool:
        """Verifie si un chemin existe."""
        return path.exists()

    def write_bytes(self, path: Path, data: bytes) -> None:
        """
        Ecrit un fichier de maniere atomique.

        Ecrit d'abord dans un fichier temporaire du meme repertoire, puis
        le renomme avec os.replace (atomique sur le meme filesystem).
        Le fichier temporaire est supprime en cas d'erreur.
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Nom temporaire unique pour eviter les collisions entre jobs paralleles
        temp = path.with_name(f".tmp_{uuid.uuid4().hex}_{path.name}")
        try:
            with open(temp, "wb") as f:
                f.write(data)
            os.replace(temp, path)
        except Exception:
            try:
                temp.unlink()
            except OSError:
                pass
            raise

    def read_bytes(self, path: Path) -> bytes:
        """Lit le contenu complet d'un fichier."""
        return path.read_bytes()

    def delete(self, path: Path) -> bool:
        """
        Supprime un fichier.

        Retourne False si le fichier etait deja absent (ENOENT).
        Toute autre erreur est propagee.
        """
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False

    def get_size(self, path: Path) -> int:
        """
        Recupere la taille du fichier en octets.

        Retourne 0 si le fichier n'existe pas.
        """
        try:
            return path.stat().st_size
        except OSError:
            return 0

    def ensure_dir(self, directory: Path) -> Path:
        """Cree le repertoire et ses parents (idempotent)."""
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def list_dir(self, directory: Path) -> list[Path]:
        """Liste le contenu direct d'un repertoire (leve FileNotFoundError si absent)."""
        return sorted(directory.iterdir())

    def remove_empty_dir(self, directory: Path) -> bool:
        """
        Supprime un repertoire s'il est vide.

        os.rmdir echoue sur un repertoire non vide : la verification et la
        suppression sont donc indissociables, un fichier arrive entre-temps
        fait echouer la suppression au lieu d'etre perdu.
        """
        try:
            os.rmdir(directory)
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            if e.errno in (errno.ENOTEMPTY, errno.EEXIST):
                return False
            raise
