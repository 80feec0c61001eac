"""
Engine, sessions et schema SQLite d'albumforge.

Uploads et suppressions en cascade s'executent dans des sessions distinctes
(une par repository) : l'engine active le journal WAL et un delai d'attente
pour qu'un lecteur ne bloque pas l'ecriture d'un enregistrement.

Les bases creees avant la forme imbriquee ne connaissent que les chemins
plats (url, optimized, thumbnail) : init_db() ajoute les colonnes manquantes
a la table media sans toucher aux lignes existantes.

L'URL est lue depuis ALBUMFORGE_DATABASE_URL (defaut: sqlite:///albumforge.db).
"""

from collections.abc import Generator
from pathlib import Path
from typing import Optional

from loguru import logger
from sqlalchemy import Engine, event, inspect, text
from sqlmodel import Session, SQLModel, create_engine

# Delai d'attente d'un verrou SQLite (secondes)
SQLITE_TIMEOUT = 30

# Colonnes ajoutees a la table media apres la forme legacy plate
MEDIA_COLUMN_UPGRADES: dict[str, str] = {
    "file_sizes_json": "TEXT",
    "metadata_json": "TEXT",
    "original_filename": "VARCHAR NOT NULL DEFAULT ''",
    "tags_json": "TEXT",
    "featured": "BOOLEAN NOT NULL DEFAULT 0",
}

_engine: Optional[Engine] = None


def _is_file_sqlite(url: str) -> bool:
    return url.startswith("sqlite:///") and ":memory:" not in url


def _set_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute(f"PRAGMA busy_timeout={SQLITE_TIMEOUT * 1000}")
    cursor.close()


def get_engine() -> Engine:
    """Retourne l'engine global, cree au premier appel depuis Settings."""
    global _engine
    if _engine is None:
        from albumforge.config import Settings

        db_url = Settings().database_url
        if _is_file_sqlite(db_url):
            Path(db_url.replace("sqlite:///", "")).parent.mkdir(parents=True, exist_ok=True)

        _engine = create_engine(
            db_url,
            echo=False,
            connect_args={"check_same_thread": False, "timeout": SQLITE_TIMEOUT},
        )
        if _is_file_sqlite(db_url):
            event.listen(_engine, "connect", _set_sqlite_pragmas)
    return _engine


def reset_engine() -> None:
    """
    Oublie l'engine global (la prochaine session relit la configuration).

    Utilise par les tests qui changent ALBUMFORGE_DATABASE_URL.
    """
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None


def get_session() -> Generator[Session, None, None]:
    """
    Generateur de session SQLModel.

    Le container l'utilise avec next() pour donner a chaque repository
    sa propre session :
        session = next(get_session())
    """
    with Session(get_engine()) as session:
        yield session


def init_db() -> None:
    """
    Cree les tables albums et media puis complete un schema media legacy.

    Idempotent : appelee a chaque demarrage de la CLI.
    """
    # Import local pour enregistrer les modeles sans import circulaire
    from albumforge.infrastructure.persistence import models  # noqa: F401

    engine = get_engine()
    SQLModel.metadata.create_all(engine)
    _upgrade_media_table(engine)


def _upgrade_media_table(engine: Engine) -> None:
    """Ajoute a la table media les colonnes de la forme imbriquee si absentes."""
    existing = {column["name"] for column in inspect(engine).get_columns("media")}
    missing = [name for name in MEDIA_COLUMN_UPGRADES if name not in existing]
    if not missing:
        return

    with engine.begin() as conn:
        for name in missing:
            conn.execute(text(f"ALTER TABLE media ADD COLUMN {name} {MEDIA_COLUMN_UPGRADES[name]}"))
    logger.info(f"Table media completee: {', '.join(missing)}")
