"""
Implementation SQLModel du repository Media.

Implemente l'interface IMediaRepository pour la persistance des media
dans la base de donnees SQLite via SQLModel.
"""

import json
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Optional

from sqlmodel import Session, func, select

from albumforge.core.entities.artifact import MediaMetadata, MediaType
from albumforge.core.entities.media import CONTENT_FIELDS, Media
from albumforge.core.ports.repositories import IMediaRepository
from albumforge.infrastructure.persistence.models import MediaModel
from albumforge.infrastructure.persistence.repositories.ids import parse_id


class SQLModelMediaRepository(IMediaRepository):
    """
    Repository SQLModel pour les media.

    Implemente IMediaRepository avec conversion bidirectionnelle
    entre l'entite Media (domaine) et MediaModel (persistance).
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def _to_entity(self, model: MediaModel) -> Media:
        """
        Convertit un modele DB en entite domaine.

        Args :
            model : Le modele MediaModel depuis la DB

        Retourne :
            L'entite Media correspondante
        """
        metadata = None
        if model.metadata_json:
            metadata = MediaMetadata.from_dict(json.loads(model.metadata_json))

        return Media(
            id=str(model.id) if model.id else None,
            album_id=str(model.album_id),
            media_type=MediaType(model.media_type),
            url=model.url or "",
            optimized=model.optimized or "",
            thumbnail=model.thumbnail or "",
            file_sizes=model.file_sizes,
            metadata=metadata,
            original_filename=model.original_filename,
            caption=model.caption,
            alt=model.alt,
            tags=tuple(model.tags),
            order=model.order,
            featured=model.featured,
            uploaded_at=model.uploaded_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Media) -> MediaModel:
        """
        Convertit une entite domaine en modele DB.

        Args :
            entity : L'entite Media du domaine

        Retourne :
            Le modele MediaModel pour la persistance
        """
        model = MediaModel(album_id=int(entity.album_id))
        self._apply(model, entity)
        if entity.uploaded_at:
            model.uploaded_at = entity.uploaded_at
        media_id = parse_id(entity.id)
        if media_id is not None:
            model.id = media_id
        return model

    def _apply(self, model: MediaModel, entity: Media) -> None:
        """Recopie les champs de l'entite dans le modele."""
        model.media_type = entity.media_type.value
        model.url = entity.url
        model.optimized = entity.optimized
        model.thumbnail = entity.thumbnail
        model.file_sizes_json = json.dumps(entity.file_sizes) if entity.file_sizes else None
        model.metadata_json = (
            json.dumps(entity.metadata.to_dict()) if entity.metadata else None
        )
        model.original_filename = entity.original_filename
        model.caption = entity.caption
        model.alt = entity.alt
        model.tags_json = json.dumps(list(entity.tags)) if entity.tags else None
        model.order = entity.order
        model.featured = entity.featured

    def _get_model(self, media_id: Optional[str]) -> Optional[MediaModel]:
        pk = parse_id(media_id)
        if pk is None:
            return None
        statement = select(MediaModel).where(MediaModel.id == pk)
        return self._session.exec(statement.execution_options(populate_existing=True)).first()

    def _album_statement(self, album_pk: int):
        return (
            select(MediaModel)
            .where(MediaModel.album_id == album_pk)
            .order_by(MediaModel.order, MediaModel.uploaded_at, MediaModel.id)
        )

    def get_by_id(self, media_id: str) -> Optional[Media]:
        """Recupere un media par son ID."""
        model = self._get_model(media_id)
        if model:
            return self._to_entity(model)
        return None

    def list_by_album(self, album_id: str) -> list[Media]:
        """Liste les media d'un album, tries par (order, uploaded_at)."""
        album_pk = parse_id(album_id)
        if album_pk is None:
            return []
        models = self._session.exec(self._album_statement(album_pk)).all()
        return [self._to_entity(model) for model in models]

    def first_by_album(
        self, album_id: str, media_type: Optional[MediaType] = None
    ) -> Optional[Media]:
        """Retourne le premier media de l'album selon (order, uploaded_at)."""
        album_pk = parse_id(album_id)
        if album_pk is None:
            return None
        statement = self._album_statement(album_pk)
        if media_type is not None:
            statement = statement.where(MediaModel.media_type == media_type.value)
        model = self._session.exec(statement.limit(1)).first()
        if model:
            return self._to_entity(model)
        return None

    def count_by_album(self, album_id: str) -> int:
        """Compte les media d'un album (requete COUNT, jamais un compteur memorise)."""
        album_pk = parse_id(album_id)
        if album_pk is None:
            return 0
        statement = (
            select(func.count())
            .select_from(MediaModel)
            .where(MediaModel.album_id == album_pk)
        )
        return int(self._session.exec(statement).one())

    def list_all(self) -> list[Media]:
        """Liste tous les media."""
        statement = select(MediaModel).order_by(MediaModel.id)
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]

    def save(self, media: Media) -> Media:
        """Sauvegarde un media (insertion ou mise a jour)."""
        existing = self._get_model(media.id) if media.id else None

        if existing:
            # Mise a jour
            self._apply(existing, media)
            existing.updated_at = datetime.utcnow()
            self._session.add(existing)
            self._session.commit()
            self._session.refresh(existing)
            return self._to_entity(existing)

        # Insertion
        model = self._to_model(media)
        self._session.add(model)
        self._session.commit()
        self._session.refresh(model)
        return self._to_entity(model)

    def update_content(self, media_id: str, changes: Mapping[str, Any]) -> Optional[Media]:
        """
        Met a jour les champs de contenu d'un media.

        Les cles hors caption, alt, tags, order et featured sont refusees :
        les chemins et derives d'un media ne changent jamais en place.
        """
        unknown = set(changes) - CONTENT_FIELDS
        if unknown:
            raise ValueError(f"Champs non modifiables: {', '.join(sorted(unknown))}")

        model = self._get_model(media_id)
        if model is None:
            return None

        for name, value in changes.items():
            if name == "tags":
                model.tags_json = json.dumps(list(value)) if value else None
            else:
                setattr(model, name, value)
        model.updated_at = datetime.utcnow()

        self._session.add(model)
        self._session.commit()
        self._session.refresh(model)
        return self._to_entity(model)

    def delete(self, media_id: str) -> bool:
        """Supprime un media par ID."""
        model = self._get_model(media_id)
        if model is None:
            return False
        self._session.delete(model)
        self._session.commit()
        return True

    def delete_by_album(self, album_id: str) -> int:
        """Supprime tous les media d'un album. Retourne le nombre supprime."""
        album_pk = parse_id(album_id)
        if album_pk is None:
            return 0
        statement = select(MediaModel).where(MediaModel.album_id == album_pk)
        models = self._session.exec(statement).all()
        for model in models:
            self._session.delete(model)
        self._session.commit()
        return len(models)
