"""DB utilities for SQLAlchemy sessions/engine.

Le catalogue n'est que lu par ce service: les sessions ouvertes ici ne valident jamais de
transaction.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker


def get_engine(url: str) -> Engine:
    """Crée un moteur SQLAlchemy à partir de l'URL de base de données."""
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
    return create_engine(url, future=True, echo=False, connect_args=connect_args)


@contextmanager
def read_session(engine: Engine) -> Iterator[Session]:
    """Session en lecture seule, annulée puis fermée en sortie de contexte."""
    session = sessionmaker(bind=engine, class_=Session, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
