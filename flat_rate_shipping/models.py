from sqlalchemy import Column, Integer, String, DateTime, Boolean, JSON
from datetime import datetime
from .database import Base


class Package(Base):
    """Per-shop package settings document (marketplace, shipping-rates, ...)."""
    __tablename__ = "packages"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    shop_id = Column(String, nullable=False, index=True)
    enabled = Column(Boolean, default=True)
    settings = Column(JSON, default=dict)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class ShippingConfig(Base):
    """
    A shop's shipping provider and its flat-rate methods.

    methods is a JSON list of method dicts:
    [{"name": "standard", "label": "Standard", "group": "Ground",
      "rate": 5.0, "handling": 2.0, "enabled": true, "carrier": null}, ...]
    """
    __tablename__ = "shipping_configs"

    id = Column(Integer, primary_key=True, index=True)
    shop_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=True)
    provider_name = Column(String, default="flatRates")
    provider_label = Column(String, nullable=True)  # carrier name shown to buyers
    provider_enabled = Column(Boolean, default=True)
    methods = Column(JSON, default=list)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
