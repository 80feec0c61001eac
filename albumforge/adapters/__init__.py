"""
Couche adaptateurs (infrastructure).

Les adaptateurs implémentent les ports définis dans core/ports/ et fournissent
des implémentations concrètes pour les systèmes externes.

Sous-packages :
- cli/ : Interface ligne de commande (Typer)
- imaging/ : Sondage et encodage d'images (Pillow)
- file_system.py : Opérations sur le système de fichiers

Chaque adaptateur dépend de core/ mais core/ ne dépend jamais des adaptateurs.
Cela permet de changer les implémentations sans affecter la logique métier.
"""

from albumforge.adapters.file_system import FileSystemAdapter
from albumforge.adapters.imaging import PillowImageRenderer

__all__ = [
    "FileSystemAdapter",
    "PillowImageRenderer",
]
