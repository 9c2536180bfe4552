"""
CMS Routes Module
=================

Landing-page content management and i18n locale bundles.

Features:
- Public list endpoints (the landing page renders them)
- Create / update / delete for CMS managers, department and state admins
- ``/locales/{language}/{namespace}`` bundles for the i18n client

Every content resource gets the same four endpoints, registered by
``register_content_routes``.
"""

from typing import Any, Dict, List, Type
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from civil_defence.core.dependencies.rbac import require_cms_manager
from civil_defence.db.session import get_db
from civil_defence.models.cms import (
    AboutContent,
    HeroBanner,
    Service,
    SiteSetting,
    Translation,
)
from civil_defence.models.user import User
from civil_defence.schemas import ErrorResponse, MessageResponse
from civil_defence.schemas.cms import (
    AboutContentCreate,
    AboutContentResponse,
    AboutContentUpdate,
    HeroBannerCreate,
    HeroBannerResponse,
    HeroBannerUpdate,
    ServiceCreate,
    ServiceResponse,
    ServiceUpdate,
    SiteSettingCreate,
    SiteSettingResponse,
    SiteSettingUpdate,
    TranslationCreate,
    TranslationResponse,
    TranslationUpdate,
)
from civil_defence.services.cms_service import ContentService, build_locale_bundle


# =====================================
# Router Setup
# =====================================

router = APIRouter(
    prefix="/cms",
    tags=["CMS"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
    },
)

locales_router = APIRouter(tags=["CMS"])


def register_content_routes(
    path: str,
    label: str,
    model: Type[Any],
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    response_schema: Type[BaseModel],
) -> None:
    """
    Register list / create / update / delete endpoints for one CMS table.

    Args:
        path: URL segment under /cms, e.g. "hero-banners"
        label: Name used in endpoint summaries
        model: SQLAlchemy model
        create_schema: Request body for create
        update_schema: Request body for partial update
        response_schema: Response model
    """

    @router.get(
        f"/{path}",
        response_model=List[response_schema],
        summary=f"List {label}",
        name=f"list_{model.__tablename__}",
    )
    def list_content(
        active_only: bool = Query(default=False),
        db: Session = Depends(get_db),
    ):
        return ContentService.for_model(db, model).list_items(active_only=active_only)

    @router.post(
        f"/{path}",
        response_model=response_schema,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create {label}",
        name=f"create_{model.__tablename__}",
        responses={400: {"model": ErrorResponse, "description": "Duplicate key"}},
    )
    def create_content(
        data: create_schema,
        current_user: User = Depends(require_cms_manager),
        db: Session = Depends(get_db),
    ):
        return ContentService.for_model(db, model).create_item(current_user, data)

    @router.patch(
        f"/{path}/{{item_id}}",
        response_model=response_schema,
        summary=f"Update {label}",
        name=f"update_{model.__tablename__}",
        responses={404: {"model": ErrorResponse, "description": "Not found"}},
    )
    def update_content(
        item_id: UUID,
        data: update_schema,
        current_user: User = Depends(require_cms_manager),
        db: Session = Depends(get_db),
    ):
        return ContentService.for_model(db, model).update_item(current_user, item_id, data)

    @router.delete(
        f"/{path}/{{item_id}}",
        response_model=MessageResponse,
        summary=f"Delete {label}",
        name=f"delete_{model.__tablename__}",
        responses={404: {"model": ErrorResponse, "description": "Not found"}},
    )
    def delete_content(
        item_id: UUID,
        current_user: User = Depends(require_cms_manager),
        db: Session = Depends(get_db),
    ):
        ContentService.for_model(db, model).delete_item(current_user, item_id)
        return MessageResponse(message=f"{label} entry deleted")


# =====================================
# Content Resources
# =====================================

register_content_routes(
    "translations", "Translations", Translation,
    TranslationCreate, TranslationUpdate, TranslationResponse,
)
register_content_routes(
    "hero-banners", "Hero Banners", HeroBanner,
    HeroBannerCreate, HeroBannerUpdate, HeroBannerResponse,
)
register_content_routes(
    "about", "About Content", AboutContent,
    AboutContentCreate, AboutContentUpdate, AboutContentResponse,
)
register_content_routes(
    "services", "Services", Service,
    ServiceCreate, ServiceUpdate, ServiceResponse,
)
register_content_routes(
    "settings", "Site Settings", SiteSetting,
    SiteSettingCreate, SiteSettingUpdate, SiteSettingResponse,
)


# =====================================
# Locale Bundles
# =====================================

@locales_router.get(
    "/locales/{language}/{namespace}",
    response_model=Dict[str, Any],
    summary="Get Locale Bundle",
    description="Translations for a language as nested JSON; dotted keys become nested objects.",
    responses={404: {"model": ErrorResponse, "description": "No translations for this language"}},
)
def get_locale_bundle(
    language: str,
    namespace: str,
    db: Session = Depends(get_db),
):
    return build_locale_bundle(db, language, namespace)
