"""
Interfaces ports pour le système de fichiers.

Interfaces abstraites (ports) définissant les contrats pour les opérations fichiers
du pipeline : écriture atomique des dérivés, suppression tolérante aux fichiers
absents et gestion des répertoires d'album (jamais de suppression forcée).
"""

from abc import ABC, abstractmethod
from pathlib import Path


class IFileSystem(ABC):
    """
    Interface pour les opérations de base sur les fichiers.

    Définit les opérations pour interagir avec le système de fichiers :
    vérification d'existence, écriture, suppression, taille, répertoires.
    """

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """Vérifie si un chemin existe."""
        ...

    @abstractmethod
    def write_bytes(self, path: Path, data: bytes) -> None:
        """
        Écrit des octets dans un fichier de manière atomique.

        Le fichier final n'apparaît qu'une fois complètement écrit : un échec
        ne laisse ni fichier partiel ni fichier temporaire.

        Args :
            path : Chemin du fichier à écrire (écrasé s'il existe)
            data : Contenu à écrire

        Raises :
            OSError : Si l'écriture échoue
        """
        ...

    @abstractmethod
    def read_bytes(self, path: Path) -> bytes:
        """Lit le contenu complet d'un fichier."""
        ...

    @abstractmethod
    def delete(self, path: Path) -> bool:
        """
        Supprime un fichier.

        Un fichier déjà absent n'est pas une erreur.

        Args :
            path : Chemin à supprimer

        Retourne :
            True si le fichier a été supprimé, False s'il n'existait pas

        Raises :
            OSError : Pour toute autre erreur (permissions, répertoire...)
        """
        ...

    @abstractmethod
    def get_size(self, path: Path) -> int:
        """
        Récupère la taille du fichier en octets.

        Retourne :
            Taille du fichier en octets, ou 0 si le fichier n'existe pas
        """
        ...

    @abstractmethod
    def ensure_dir(self, directory: Path) -> Path:
        """
        Crée un répertoire et ses parents si nécessaire.

        Idempotent : un répertoire déjà existant est un succès, y compris
        lorsqu'il est créé en concurrence par un autre upload.
        """
        ...

    @abstractmethod
    def list_dir(self, directory: Path) -> list[Path]:
        """
        Liste le contenu direct d'un répertoire.

        Raises :
            FileNotFoundError : Si le répertoire n'existe pas
        """
        ...

    @abstractmethod
    def remove_empty_dir(self, directory: Path) -> bool:
        """
        Supprime un répertoire vide.

        Ne force jamais la suppression : un répertoire non vide est conservé.

        Retourne :
            True si supprimé, False s'il était absent ou non vide
        """
        ...
