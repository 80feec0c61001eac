"""
Implementation SQLModel du repository Album.

Implemente l'interface IAlbumRepository pour la persistance des albums
dans la base de donnees SQLite via SQLModel.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Session, select

from albumforge.core.entities.media import Album
from albumforge.core.ports.repositories import IAlbumRepository
from albumforge.infrastructure.persistence.models import AlbumModel
from albumforge.infrastructure.persistence.repositories.ids import parse_id


class SQLModelAlbumRepository(IAlbumRepository):
    """
    Repository SQLModel pour les albums.

    Implemente IAlbumRepository avec conversion bidirectionnelle
    entre l'entite Album (domaine) et AlbumModel (persistance).
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def _to_entity(self, model: AlbumModel) -> Album:
        """Convertit un modele DB en entite domaine."""
        return Album(
            id=str(model.id) if model.id else None,
            title=model.title,
            slug=model.slug,
            description=model.description,
            cover_image=model.cover_image or "",
            total_media=model.total_media,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Album) -> AlbumModel:
        """Convertit une entite domaine en modele DB."""
        model = AlbumModel(
            title=entity.title,
            slug=entity.slug,
            description=entity.description,
            cover_image=entity.cover_image,
            total_media=entity.total_media,
        )
        album_id = parse_id(entity.id)
        if album_id is not None:
            model.id = album_id
        return model

    def _get_model(self, album_id: Optional[str]) -> Optional[AlbumModel]:
        pk = parse_id(album_id)
        if pk is None:
            return None
        # Relecture en base : un album supprime par une autre session doit disparaitre
        statement = select(AlbumModel).where(AlbumModel.id == pk)
        return self._session.exec(statement.execution_options(populate_existing=True)).first()

    def get_by_id(self, album_id: str) -> Optional[Album]:
        """Recupere un album par son ID."""
        model = self._get_model(album_id)
        if model:
            return self._to_entity(model)
        return None

    def list_all(self) -> list[Album]:
        """Liste tous les albums par date de creation."""
        statement = select(AlbumModel).order_by(AlbumModel.created_at, AlbumModel.id)
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]

    def save(self, album: Album) -> Album:
        """Sauvegarde un album (insertion ou mise a jour)."""
        existing = self._get_model(album.id) if album.id else None

        if existing:
            # Mise a jour
            existing.title = album.title
            existing.slug = album.slug
            existing.description = album.description
            existing.cover_image = album.cover_image
            existing.total_media = album.total_media
            existing.updated_at = datetime.utcnow()
            self._session.add(existing)
            self._session.commit()
            self._session.refresh(existing)
            return self._to_entity(existing)

        # Insertion
        model = self._to_model(album)
        self._session.add(model)
        self._session.commit()
        self._session.refresh(model)
        return self._to_entity(model)

    def set_cover(self, album_id: str, cover_image: str) -> bool:
        """Ecrit le chemin de couverture de l'album."""
        model = self._get_model(album_id)
        if model is None:
            return False
        model.cover_image = cover_image
        model.updated_at = datetime.utcnow()
        self._session.add(model)
        self._session.commit()
        return True

    def set_media_count(self, album_id: str, count: int) -> bool:
        """Ecrit le compteur de media de l'album."""
        model = self._get_model(album_id)
        if model is None:
            return False
        model.total_media = count
        model.updated_at = datetime.utcnow()
        self._session.add(model)
        self._session.commit()
        return True

    def delete(self, album_id: str) -> bool:
        """Supprime un album par ID."""
        model = self._get_model(album_id)
        if model is None:
            return False
        self._session.delete(model)
        self._session.commit()
        return True
