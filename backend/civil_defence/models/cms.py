"""
CMS Models
==========

Bilingual (English / Odia) landing page content managed by CMS managers:
translations, hero banners, about sections, service cards and site
settings.
"""

import uuid
from typing import Optional

from sqlalchemy import (
    Boolean,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from civil_defence.db.base import Base, TimestampMixin


class Translation(TimestampMixin, Base):
    __tablename__ = "cms_translations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    key: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    language: Mapped[str] = mapped_column(String(10), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(100))

    __table_args__ = (
        UniqueConstraint("key", "language", name="uq_cms_translations_key_language"),
    )


class HeroBanner(TimestampMixin, Base):
    __tablename__ = "cms_hero_banners"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title_en: Mapped[str] = mapped_column(String(255), nullable=False)
    title_or: Mapped[str] = mapped_column(String(255), nullable=False)
    subtitle_en: Mapped[str] = mapped_column(Text, nullable=False)
    subtitle_or: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str] = mapped_column(String(500), nullable=False)
    button_text_en: Mapped[Optional[str]] = mapped_column(String(100))
    button_text_or: Mapped[Optional[str]] = mapped_column(String(100))
    button_link: Mapped[Optional[str]] = mapped_column(String(500))
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class AboutContent(TimestampMixin, Base):
    __tablename__ = "cms_about_content"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    section: Mapped[str] = mapped_column(String(100), nullable=False)
    title_en: Mapped[str] = mapped_column(String(255), nullable=False)
    title_or: Mapped[str] = mapped_column(String(255), nullable=False)
    content_en: Mapped[str] = mapped_column(Text, nullable=False)
    content_or: Mapped[str] = mapped_column(Text, nullable=False)
    icon_name: Mapped[Optional[str]] = mapped_column(String(100))
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class Service(TimestampMixin, Base):
    __tablename__ = "cms_services"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title_en: Mapped[str] = mapped_column(String(255), nullable=False)
    title_or: Mapped[str] = mapped_column(String(255), nullable=False)
    description_en: Mapped[str] = mapped_column(Text, nullable=False)
    description_or: Mapped[str] = mapped_column(Text, nullable=False)
    icon_name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str] = mapped_column(String(50), default="text-primary", nullable=False)
    bg_color: Mapped[str] = mapped_column(String(50), default="bg-primary/10", nullable=False)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class SiteSetting(TimestampMixin, Base):
    __tablename__ = "cms_site_settings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    key: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    value: Mapped[Optional[str]] = mapped_column(Text)
    description: Mapped[Optional[str]] = mapped_column(Text)
