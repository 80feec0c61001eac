"""
Vue uniforme des chemins d'un media.

Deux formes d'enregistrement coexistent en base :
- Legacy : champs plats url / optimized / thumbnail
- Current : dictionnaire imbrique file_sizes {taille: {path, webpPath, ...}}

Plutot que de brancher sur la forme a chaque point d'appel (suppression,
selection de couverture, migration), on modelise un variant etiquete
MediaPathView et on le reduit en une seule fonction vers {nom: chemin}.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

# Ordre canonique des entrees de file_sizes
FILE_SIZE_KEYS: tuple[str, ...] = ("original", "thumbnail", "medium", "full")

# Cles des chemins dans une entree de file_sizes
NESTED_PATH_KEYS: tuple[str, ...] = ("path", "webpPath")

# Champs plats de la forme legacy
LEGACY_PATH_FIELDS: tuple[str, ...] = ("url", "optimized", "thumbnail")


@dataclass(frozen=True)
class LegacyPaths:
    """Forme plate historique : url (original), optimized, thumbnail."""

    url: str = ""
    optimized: str = ""
    thumbnail: str = ""


@dataclass(frozen=True)
class CurrentPaths:
    """Forme imbriquee : une entree par taille avec path et webpPath optionnel."""

    file_sizes: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)


MediaPathView = Union[LegacyPaths, CurrentPaths]


def path_view_for(
    url: str = "",
    optimized: str = "",
    thumbnail: str = "",
    file_sizes: Mapping[str, Mapping[str, Any]] | None = None,
) -> MediaPathView:
    """
    Construit la vue adaptee aux champs d'un enregistrement.

    La forme imbriquee est prioritaire des qu'elle contient au moins un chemin.
    """
    if file_sizes and any(
        isinstance(entry, Mapping) and entry.get("path")
        for entry in file_sizes.values()
    ):
        return CurrentPaths(file_sizes=file_sizes)
    return LegacyPaths(url=url or "", optimized=optimized or "", thumbnail=thumbnail or "")


def size_paths(view: MediaPathView) -> dict[str, str]:
    """
    Reduit une vue en {nom de taille: chemin principal}.

    Les entrees vides sont omises. La forme legacy expose ses champs sous
    les noms original (url), optimized et thumbnail.
    """
    if isinstance(view, CurrentPaths):
        paths: dict[str, str] = {}
        for name, entry in view.file_sizes.items():
            if isinstance(entry, Mapping) and entry.get("path"):
                paths[name] = str(entry["path"])
        return paths

    candidates = {
        "original": view.url,
        "optimized": view.optimized,
        "thumbnail": view.thumbnail,
    }
    return {name: path for name, path in candidates.items() if path}


def file_paths(view: MediaPathView) -> list[str]:
    """
    Liste tous les fichiers references par une vue, compagnons WebP inclus.

    Les doublons sont retires (la forme legacy d'une video reference souvent
    le meme fichier dans url et optimized) en conservant l'ordre.
    """
    found: list[str] = []
    if isinstance(view, CurrentPaths):
        for entry in view.file_sizes.values():
            if not isinstance(entry, Mapping):
                continue
            for key in NESTED_PATH_KEYS:
                if entry.get(key):
                    found.append(str(entry[key]))
    else:
        found.extend(size_paths(view).values())

    return list(dict.fromkeys(found))


def first_available(paths: Mapping[str, str], chain: tuple[str, ...]) -> str | None:
    """Retourne le premier chemin present en suivant une chaine de priorite."""
    for name in chain:
        if paths.get(name):
            return paths[name]
    return None
