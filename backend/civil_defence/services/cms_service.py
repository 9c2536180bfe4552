"""
CMS Service Module
==================

Landing-page content (translations, hero banners, about sections,
service cards, site settings) and the i18n locale bundles built from
translations.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple, Type
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.orm import Session

from civil_defence.core.exceptions import DuplicateContentKeyError, NotFoundError
from civil_defence.core.logging import audit_logger, get_logger
from civil_defence.models.cms import (
    AboutContent,
    HeroBanner,
    Service,
    SiteSetting,
    Translation,
)
from civil_defence.models.user import User

logger = get_logger(__name__)

# i18next requests this namespace when the client does not name one
DEFAULT_NAMESPACE = "translation"


class ContentService:
    """
    CRUD for one CMS table.

    Args:
        db: Database session
        model: CMS model class
        resource: Human-readable name used in errors and audit logs
        unique_fields: Fields that together must be unique
        newest_first: Order lists by created_at desc instead of ``order``

    Usage:
        banners = ContentService.for_model(db, HeroBanner)
        banners.list_items(active_only=True)
    """

    def __init__(
        self,
        db: Session,
        model: Type[Any],
        resource: str,
        unique_fields: Tuple[str, ...] = (),
        newest_first: bool = False,
    ):
        self.db = db
        self.model = model
        self.resource = resource
        self.unique_fields = unique_fields
        self.newest_first = newest_first

    @classmethod
    def for_model(cls, db: Session, model: Type[Any]) -> "ContentService":
        resource, unique_fields, newest_first = CONTENT_REGISTRY[model]
        return cls(db, model, resource, unique_fields, newest_first)

    # --------------------------
    # Reads
    # --------------------------

    def list_items(self, active_only: bool = False) -> List[Any]:
        query = self.db.query(self.model)

        if active_only and hasattr(self.model, "is_active"):
            query = query.filter(self.model.is_active.is_(True))

        if self.newest_first:
            query = query.order_by(self.model.created_at.desc())
        else:
            query = query.order_by(self.model.order.asc(), self.model.created_at.asc())

        return query.all()

    def get_item(self, item_id: UUID) -> Any:
        item = self.db.get(self.model, item_id)
        if item is None:
            raise NotFoundError(resource=self.resource, identifier=str(item_id))
        return item

    # --------------------------
    # Writes
    # --------------------------

    def _ensure_unique(self, values: Dict[str, Any], exclude_id: Optional[UUID] = None) -> None:
        if not self.unique_fields:
            return

        query = self.db.query(self.model)
        for field in self.unique_fields:
            query = query.filter(getattr(self.model, field) == values[field])
        if exclude_id is not None:
            query = query.filter(self.model.id != exclude_id)

        if query.first() is not None:
            raise DuplicateContentKeyError(
                resource=self.resource,
                key="/".join(str(values[f]) for f in self.unique_fields),
            )

    def create_item(self, current_user: User, data: BaseModel) -> Any:
        values = data.model_dump()
        self._ensure_unique(values)

        item = self.model(**values)
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)

        audit_logger.log_record_created(
            actor_id=str(current_user.id),
            resource=self.resource,
            resource_id=str(item.id),
        )
        return item

    def update_item(self, current_user: User, item_id: UUID, data: BaseModel) -> Any:
        item = self.get_item(item_id)
        changes = data.model_dump(exclude_unset=True)

        if any(field in changes for field in self.unique_fields):
            merged = {f: changes.get(f, getattr(item, f)) for f in self.unique_fields}
            self._ensure_unique(merged, exclude_id=item.id)

        columns = self.model.__table__.c
        for field, value in changes.items():
            if value is None and not columns[field].nullable:
                continue
            setattr(item, field, value)

        self.db.commit()
        self.db.refresh(item)

        logger.info(
            "CMS content updated",
            extra={"resource": self.resource, "item_id": str(item.id), "fields": sorted(changes)}
        )
        return item

    def delete_item(self, current_user: User, item_id: UUID) -> None:
        item = self.get_item(item_id)
        self.db.delete(item)
        self.db.commit()

        audit_logger.log_record_deleted(
            actor_id=str(current_user.id),
            resource=self.resource,
            resource_id=str(item_id),
        )


# model -> (resource name, unique fields, newest first)
CONTENT_REGISTRY: Dict[Type[Any], Tuple[str, Tuple[str, ...], bool]] = {
    Translation: ("Translation", ("key", "language"), True),
    HeroBanner: ("Hero banner", (), False),
    AboutContent: ("About content", (), False),
    Service: ("Service", (), False),
    SiteSetting: ("Site setting", ("key",), True),
}


# =====================================
# Locale bundles
# =====================================

def nest_translations(pairs: Iterable[Tuple[str, str]]) -> Dict[str, Any]:
    """
    Expand dotted keys into nested dicts.

    >>> nest_translations([("nav.home", "Home"), ("title", "Portal")])
    {'title': 'Portal', 'nav': {'home': 'Home'}}

    When a key is both a leaf and a prefix ("nav" and "nav.home"), the
    nested form wins.
    """
    bundle: Dict[str, Any] = {}

    for key, value in sorted(pairs, key=lambda pair: pair[0].count(".")):
        *parents, leaf = key.split(".")
        node = bundle
        for part in parents:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child

        if not isinstance(node.get(leaf), dict):
            node[leaf] = value

    return bundle


def build_locale_bundle(db: Session, language: str, namespace: str) -> Dict[str, Any]:
    """
    Build the i18next resource bundle for a language.

    The default namespace returns every translation for the language;
    any other namespace returns only translations in that category.

    Raises:
        NotFoundError: If nothing matches
    """
    query = db.query(Translation.key, Translation.value).filter(
        Translation.language == language
    )
    if namespace != DEFAULT_NAMESPACE:
        query = query.filter(Translation.category == namespace)

    rows = query.all()
    if not rows:
        raise NotFoundError(resource="Locale", identifier=f"{language}/{namespace}")

    return nest_translations((row.key, row.value) for row in rows)
