"""SQLAlchemy models for the catalog tables (videos, taxonomies, video_taxonomies)."""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Classe de base pour tous les modèles SQLAlchemy."""

    metadata = MetaData()


class VideoORM(Base):
    """Vidéo du portfolio (`cloudflare_uid` préfixé par `pending:` tant que le média manque)."""

    __tablename__ = "videos"

    id = Column(String(64), primary_key=True)
    title = Column(String(255), nullable=False)
    cloudflare_uid = Column(String(255), nullable=False)
    thumbnail_time_seconds = Column(Float, nullable=True)
    duration_seconds = Column(Integer, nullable=True)
    budget_min = Column(Integer, nullable=True)
    budget_max = Column(Integer, nullable=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=True)


class TaxonomyORM(Base):
    """Tag de taxonomie; libellé unique au sein d'une facette."""

    __tablename__ = "taxonomies"

    id = Column(String(64), primary_key=True)
    kind = Column(String(32), nullable=False)
    label = Column(String(255), nullable=False)

    __table_args__ = (UniqueConstraint("kind", "label", name="uq_taxonomy_kind_label"),)


class VideoTaxonomyORM(Base):
    """Lien vidéo ↔ taxonomie."""

    __tablename__ = "video_taxonomies"

    video_id = Column(String(64), ForeignKey("videos.id"), primary_key=True)
    taxonomy_id = Column(String(64), ForeignKey("taxonomies.id"), primary_key=True)
