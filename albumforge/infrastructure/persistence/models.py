"""
Modeles SQLModel pour la base de donnees albumforge.

Ces modeles representent les tables de la base de donnees SQLite.
Ils sont distincts des entites de domaine (dataclass dans core/entities/)
selon l'architecture hexagonale.

Tables:
- albums: Albums avec leurs agregats (couverture, nombre de media)
- media: Images et videos rattachees a un album

Les champs JSON (*_json) stockent les formes imbriquees (fileSizes,
metadata, tags) de maniere serialisee dans SQLite.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from sqlmodel import Field, Index, SQLModel


class AlbumModel(SQLModel, table=True):
    """
    Modele representant un album dans la base de donnees.

    cover_image et total_media sont des agregats maintenus par le
    LifecycleManager, jamais par les appelants.
    """

    __tablename__ = "albums"

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(index=True)
    slug: str = Field(default="", index=True)
    description: str = ""
    cover_image: str = ""
    total_media: int = 0
    created_at: datetime | None = Field(default_factory=datetime.utcnow)
    updated_at: datetime | None = Field(default_factory=datetime.utcnow)


class MediaModel(SQLModel, table=True):
    """
    Modele representant un media (image ou video).

    Les chemins legacy (url, optimized, thumbnail) coexistent avec la forme
    imbriquee file_sizes_json : {taille: {path, webpPath, width, height, size}}.
    """

    __tablename__ = "media"
    __table_args__ = (
        Index("ix_media_album_order", "album_id", "order", "uploaded_at"),
    )

    id: int | None = Field(default=None, primary_key=True)
    album_id: int = Field(index=True)
    media_type: str = Field(default="image")  # image | video
    url: str = ""
    optimized: str = ""
    thumbnail: str = ""
    file_sizes_json: str | None = None  # JSON: {"original": {"path": ...}, ...}
    metadata_json: str | None = None  # JSON: {"format": "jpeg", "width": ...}
    original_filename: str = ""
    caption: str = ""
    alt: str = ""
    tags_json: str | None = None  # JSON: ["mariage", "2024"]
    order: int = 0
    featured: bool = False
    uploaded_at: datetime | None = Field(default_factory=datetime.utcnow)
    updated_at: datetime | None = Field(default_factory=datetime.utcnow)

    @property
    def file_sizes(self) -> dict[str, Any]:
        """Retourne file_sizes deserialise."""
        if self.file_sizes_json:
            return json.loads(self.file_sizes_json)
        return {}

    @property
    def tags(self) -> list[str]:
        """Retourne les tags deserialises."""
        if self.tags_json:
            return json.loads(self.tags_json)
        return []
