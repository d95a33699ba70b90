"""
Lookup capability handed to provider stages.

Stages never touch the ORM directly: they receive a StageContext whose
collections object answers the two queries a rate provider needs.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from sqlalchemy.orm import Session

from . import models
from .schemas import ShippingConfigDoc, ShippingMethod, ShippingProvider


class SqlCollections:
    """Package and shipping-config lookups backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def find_package(self, name: str, shop_id: str, enabled: Optional[bool] = None) -> Optional[dict]:
        """Returns the first matching package document, or None."""
        query = self.db.query(models.Package).filter(
            models.Package.name == name,
            models.Package.shop_id == shop_id,
        )
        if enabled is not None:
            query = query.filter(models.Package.enabled == enabled)
        pkg = query.order_by(models.Package.id).first()
        if not pkg:
            return None
        return package_to_doc(pkg)

    def find_shipping_configs(self, shop_ids: Iterable[str], provider_enabled: bool = True) -> list[ShippingConfigDoc]:
        """Shipping configs for any of shop_ids whose provider matches provider_enabled."""
        shop_ids = list(shop_ids)
        if not shop_ids:
            return []
        rows = self.db.query(models.ShippingConfig).filter(
            models.ShippingConfig.shop_id.in_(shop_ids),
            models.ShippingConfig.provider_enabled == provider_enabled,
        ).order_by(models.ShippingConfig.id).all()
        return [shipping_config_to_doc(row) for row in rows]


def package_to_doc(pkg: models.Package) -> dict:
    return {
        "_id": pkg.id,
        "name": pkg.name,
        "shopId": pkg.shop_id,
        "enabled": bool(pkg.enabled),
        "settings": pkg.settings or {},
    }


def shipping_config_to_doc(row: models.ShippingConfig) -> ShippingConfigDoc:
    return ShippingConfigDoc(
        id=row.id,
        shop_id=row.shop_id,
        name=row.name,
        provider=ShippingProvider(
            name=row.provider_name,
            label=row.provider_label,
            enabled=bool(row.provider_enabled),
        ),
        methods=[ShippingMethod.model_validate(m) for m in (row.methods or [])],
    )


@dataclass
class StageContext:
    """What a provider stage gets to see about the current request."""
    shop_id: str
    collections: Any


def build_context(db: Session, shop_id: str) -> StageContext:
    return StageContext(shop_id=shop_id, collections=SqlCollections(db))
