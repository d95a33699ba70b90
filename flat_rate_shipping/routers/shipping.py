from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Optional

from .. import models
from ..config import settings
from ..database import get_db
from ..lookups import package_to_doc, shipping_config_to_doc
from ..schemas import (
    FlatRateSettingsUpdate, ShippingConfigCreate, ShippingConfigUpdate,
)

router = APIRouter(prefix="/shipping", tags=["shipping-config"])

# Starter flat-rate methods for a new shop
DEFAULT_METHODS = [
    {"name": "standard", "label": "Standard", "group": "Ground", "rate": 5.0, "handling": 0.0, "enabled": True},
    {"name": "priority", "label": "Priority", "group": "Priority", "rate": 10.0, "handling": 2.0, "enabled": True},
    {"name": "next_day", "label": "Next Day", "group": "One Day", "rate": 25.0, "handling": 5.0, "enabled": False},
]


def _method_dicts(methods) -> list:
    return [m.model_dump(by_alias=True, exclude_none=True) for m in methods]


@router.get("/seed")
def seed_shipping(db: Session = Depends(get_db)):
    """Seed flat-rate settings and methods for the default shop. Safe to run multiple times."""
    shop_id = settings.DEFAULT_SHOP_ID
    seeded = 0
    pkg = db.query(models.Package).filter(
        models.Package.name == settings.SHIPPING_RATES_PACKAGE_NAME,
        models.Package.shop_id == shop_id,
    ).first()
    if not pkg:
        db.add(models.Package(
            name=settings.SHIPPING_RATES_PACKAGE_NAME,
            shop_id=shop_id,
            enabled=True,
            settings={"flatRates": {"enabled": True}},
        ))
        seeded += 1
    existing = db.query(models.ShippingConfig).filter(
        models.ShippingConfig.shop_id == shop_id
    ).first()
    if not existing:
        db.add(models.ShippingConfig(
            shop_id=shop_id,
            name="Default Shipping Provider",
            provider_name="flatRates",
            provider_label="Flat Rate",
            provider_enabled=True,
            methods=DEFAULT_METHODS,
        ))
        seeded += 1
    db.commit()
    return {"ok": True, "seeded": seeded}


@router.get("/configs")
def list_shipping_configs(shop_id: Optional[str] = None, db: Session = Depends(get_db)):
    query = db.query(models.ShippingConfig)
    if shop_id:
        query = query.filter(models.ShippingConfig.shop_id == shop_id)
    return [
        shipping_config_to_doc(row).model_dump(by_alias=True)
        for row in query.order_by(models.ShippingConfig.id).all()
    ]


@router.post("/configs")
def create_shipping_config(config: ShippingConfigCreate, db: Session = Depends(get_db)):
    row = models.ShippingConfig(
        shop_id=config.shop_id,
        name=config.name,
        provider_name=config.provider.name,
        provider_label=config.provider.label,
        provider_enabled=config.provider.enabled,
        methods=_method_dicts(config.methods),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return shipping_config_to_doc(row).model_dump(by_alias=True)


@router.patch("/configs/{config_id}")
def update_shipping_config(config_id: int, update: ShippingConfigUpdate, db: Session = Depends(get_db)):
    row = db.query(models.ShippingConfig).filter(models.ShippingConfig.id == config_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Shipping config not found")
    if update.provider_enabled is not None:
        row.provider_enabled = update.provider_enabled
    if update.provider_label is not None:
        row.provider_label = update.provider_label
    if update.methods is not None:
        row.methods = _method_dicts(update.methods)
    db.commit()
    db.refresh(row)
    return shipping_config_to_doc(row).model_dump(by_alias=True)


@router.get("/settings/{shop_id}")
def get_flat_rate_settings(shop_id: str, db: Session = Depends(get_db)):
    pkg = db.query(models.Package).filter(
        models.Package.name == settings.SHIPPING_RATES_PACKAGE_NAME,
        models.Package.shop_id == shop_id,
    ).first()
    if not pkg:
        raise HTTPException(status_code=404, detail="Shipping rates settings not found, run /shipping/seed first")
    return package_to_doc(pkg)


@router.put("/settings/{shop_id}")
def update_flat_rate_settings(shop_id: str, update: FlatRateSettingsUpdate, db: Session = Depends(get_db)):
    """Switch flat-rate shipping on or off for a shop, creating the package if needed."""
    pkg = db.query(models.Package).filter(
        models.Package.name == settings.SHIPPING_RATES_PACKAGE_NAME,
        models.Package.shop_id == shop_id,
    ).first()
    if not pkg:
        pkg = models.Package(name=settings.SHIPPING_RATES_PACKAGE_NAME, shop_id=shop_id, enabled=True, settings={})
        db.add(pkg)
    # Reassign so the JSON column is flagged dirty
    pkg.settings = {**(pkg.settings or {}), "flatRates": {"enabled": update.enabled}}
    db.commit()
    db.refresh(pkg)
    return package_to_doc(pkg)
