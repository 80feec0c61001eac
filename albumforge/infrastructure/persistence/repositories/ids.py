"""Conversion des identifiants domaine (str) vers les cles primaires (int)."""

from typing import Optional


def parse_id(value: Optional[str]) -> Optional[int]:
    """
    Convertit un ID domaine en cle primaire.

    Un ID absent ou non numerique ne designe aucun enregistrement : None.
    """
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
