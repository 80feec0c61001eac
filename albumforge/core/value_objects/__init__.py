"""
Objets valeur immutables representant des concepts du domaine sans identite.

Exports :
- FitMode, Encoding, SizePreset : Presets de taille des derives
- SIZE_PRESETS, SIZE_NAMES, DERIVATIVE_ENCODINGS : Presets fixes du pipeline
- RenderedImage : Image encodee en memoire
- LegacyPaths, CurrentPaths, MediaPathView : Vue etiquetee des chemins d'un media
- path_view_for, size_paths, file_paths, first_available : Reduction de la vue
"""

from albumforge.core.value_objects.size_preset import (
    DERIVATIVE_ENCODINGS,
    FULL,
    MEDIUM,
    SIZE_NAMES,
    SIZE_PRESETS,
    THUMBNAIL,
    Encoding,
    FitMode,
    RenderedImage,
    SizePreset,
)
from albumforge.core.value_objects.media_paths import (
    FILE_SIZE_KEYS,
    LEGACY_PATH_FIELDS,
    NESTED_PATH_KEYS,
    CurrentPaths,
    LegacyPaths,
    MediaPathView,
    file_paths,
    first_available,
    path_view_for,
    size_paths,
)

__all__ = [
    "DERIVATIVE_ENCODINGS",
    "FULL",
    "MEDIUM",
    "SIZE_NAMES",
    "SIZE_PRESETS",
    "THUMBNAIL",
    "Encoding",
    "FitMode",
    "RenderedImage",
    "SizePreset",
    "FILE_SIZE_KEYS",
    "LEGACY_PATH_FIELDS",
    "NESTED_PATH_KEYS",
    "CurrentPaths",
    "LegacyPaths",
    "MediaPathView",
    "file_paths",
    "first_available",
    "path_view_for",
    "size_paths",
]
